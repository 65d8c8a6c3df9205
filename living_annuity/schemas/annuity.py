"""Data contracts for the annuity calculators."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from living_annuity.core.aggregation import AnnualRecord
from living_annuity.core.simulation import MonthlyRecord


class AnnuityTermRequest(BaseModel):
    """Inputs for "how long will the fund last" at a fixed drawdown."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    principal: float = Field(..., description="Starting fund value.")
    interest_rate: float = Field(..., description="Nominal annual rate in percent (e.g. 8 for 8%).")
    compound: int = Field(12, description="Compounding periods per year.")
    annual_drawdown: float = Field(..., description="Share of the balance withdrawn each year, in percent.")
    retirement_age: Optional[int] = Field(None, description="Age at the first simulated year, if known.")


class MonthlyIncomeRequest(BaseModel):
    """Inputs for "what income exhausts the fund after annuity_term years"."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    principal: float = Field(..., description="Starting fund value.")
    annuity_term: int = Field(..., description="Years until the fund reaches the survivable balance.")
    interest_rate: float = Field(..., description="Nominal annual rate in percent.")
    compound: int = Field(12, description="Compounding periods per year.")
    annual_increase: float = Field(0.0, description="Yearly income escalation in percent.")
    retirement_age: Optional[int] = Field(None, description="Age at the first simulated year, if known.")


class AnnuityTermResponse(BaseModel):
    term_years: float
    reached_cap: bool = Field(..., description="True when the fund outlived the horizon (reported as N+ years).")
    initial_monthly_income: float
    total_withdrawn: float
    total_interest: float
    annual: List[AnnualRecord]
    monthly: List[MonthlyRecord]


class MonthlyIncomeResponse(BaseModel):
    monthly_income: float
    annual_increase: float
    initial_annual_income: float
    drawdown_percent: float
    total_withdrawn: float
    total_interest: float
    annual: List[AnnualRecord]
    monthly: List[MonthlyRecord]
