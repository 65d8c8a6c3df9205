"""Calculator limits and user-facing messages."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RateConvention(str, Enum):
    """How a nominal annual rate is turned into a monthly growth rate."""

    PERIODIC = "periodic"
    EFFECTIVE_ANNUAL = "effective_annual"


# periods per year offered by the calculator's compounding selector
COMPOUNDING_FREQUENCIES: Tuple[int, ...] = (1, 2, 4, 12, 24, 26, 52, 365)

CRITICAL_ERROR_MESSAGE = "Please refresh the page and try again."
CALCULATION_FAILED_ERROR_MESSAGE = "Please check the input values are reasonable"


class CalculatorLimits(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min_balance: float = Field(default=125_000.0, gt=0)
    min_drawdown_percent: float = Field(default=2.5, ge=0, le=100)
    max_drawdown_percent: float = Field(default=17.5, ge=0, le=100)
    max_annuity_term: int = Field(default=50, ge=1)
    calculation_limit_years: int = Field(default=1000, ge=1)
    min_retirement_age: int = Field(default=55, ge=0)
    rate_convention: RateConvention = RateConvention.PERIODIC

    @model_validator(mode="after")
    def ensure_drawdown_band(self) -> "CalculatorLimits":
        if self.min_drawdown_percent > self.max_drawdown_percent:
            raise ValueError(
                f"min_drawdown_percent ({self.min_drawdown_percent:g}) must not exceed "
                f"max_drawdown_percent ({self.max_drawdown_percent:g})"
            )
        return self

    @property
    def invalid_drawdown_message(self) -> str:
        return (
            f"The annual drawdown must be between {self.min_drawdown_percent:g}% "
            f"and {self.max_drawdown_percent:g}%"
        )

    @property
    def invalid_principal_message(self) -> str:
        return f"The starting principal must be greater than {self.min_balance:,.2f}"


DEFAULT_LIMITS = CalculatorLimits()
