from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from living_annuity.config import DEFAULT_LIMITS, CalculatorLimits
from living_annuity.core.rates import monthly_rate
from living_annuity.errors import PreconditionError

logger = logging.getLogger(__name__)


class CalculationParameters(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    principal: float = Field(gt=0)
    annual_interest_rate: float = Field(ge=0, le=100)
    compounding_frequency: int = Field(gt=0)  # periods per year
    annual_drawdown_percent: float = Field(default=0.0, ge=0, le=100)
    horizon_years_cap: int = Field(gt=0)


class MonthlyRecord(BaseModel):
    """One simulated month. end_balance = start_balance + interest_payment - withdrawal."""

    model_config = ConfigDict(frozen=True)

    start_balance: float
    interest_payment: float
    withdrawal: float
    end_balance: float


# -----------------------------
# Income rules
# -----------------------------


class IncomeRule(Protocol):
    def initial_income(self, principal: float) -> float: ...

    def next_income(self, current_income: float, balance: float) -> float: ...


@dataclass(frozen=True)
class PercentageDrawdown:
    """Withdraw a fixed share of the balance each year, reset on every anniversary."""

    annual_drawdown_percent: float

    def _income(self, balance: float) -> float:
        return balance * self.annual_drawdown_percent / 100 / 12

    def initial_income(self, principal: float) -> float:
        return self._income(principal)

    def next_income(self, current_income: float, balance: float) -> float:
        return self._income(balance)


@dataclass(frozen=True)
class EscalatingIncome:
    """
    Target a monthly income that rises by annual_increase_percent every year,
    kept inside [floor_percent, ceiling_percent] of the current balance per annum.
    """

    initial_monthly_income: float
    annual_increase_percent: float
    floor_percent: float
    ceiling_percent: float

    def capped(self, income: float, balance: float) -> float:
        one_percent_monthly = balance / 12 / 100
        return max(
            min(income, self.ceiling_percent * one_percent_monthly),
            self.floor_percent * one_percent_monthly,
        )

    def initial_income(self, principal: float) -> float:
        return self.capped(self.initial_monthly_income, principal)

    def next_income(self, current_income: float, balance: float) -> float:
        return self.capped(current_income * (1 + self.annual_increase_percent / 100), balance)


# -----------------------------
# Simulation
# -----------------------------


def require_inputs(**values: object) -> None:
    """Raise PreconditionError when any required input is missing."""
    missing = sorted(name for name, value in values.items() if value is None)
    if missing:
        raise PreconditionError(f"missing required inputs: {', '.join(missing)}")


def horizon_months(params: CalculationParameters, limits: CalculatorLimits = DEFAULT_LIMITS) -> int:
    return min(params.horizon_years_cap, limits.calculation_limit_years) * 12


def _check_params(params: CalculationParameters) -> None:
    require_inputs(
        principal=params.principal,
        annual_interest_rate=params.annual_interest_rate,
        compounding_frequency=params.compounding_frequency,
        horizon_years_cap=params.horizon_years_cap,
    )


def simulate(
    params: CalculationParameters,
    rule: IncomeRule,
    limits: CalculatorLimits = DEFAULT_LIMITS,
    survivable_balance: Optional[float] = None,
) -> List[MonthlyRecord]:
    """
    Run the month-by-month recurrence and return one record per simulated month.

    Order of operations (per month i):
      1) On every anniversary (i % 12 == 0, including i == 0) stop if the
         balance is below the survivable balance.
      2) On every anniversary after the first, ask the rule for the new income.
      3) Grow the balance by the monthly rate.
      4) Withdraw min(grown balance, income).

    Stopping early and running to the horizon cap are both normal outcomes.
    """
    _check_params(params)
    floor = limits.min_balance if survivable_balance is None else survivable_balance
    rate = monthly_rate(params.annual_interest_rate, params.compounding_frequency, limits.rate_convention)

    balance = float(params.principal)
    income = rule.initial_income(balance)

    records: List[MonthlyRecord] = []
    for month in range(horizon_months(params, limits)):
        if month % 12 == 0:
            if balance < floor:
                logger.debug("fund below survivable balance %.2f after %d months", floor, month)
                break
            if month > 0:
                income = rule.next_income(income, balance)

        start = balance
        interest = balance * rate
        balance += interest

        withdrawal = min(balance, income)
        balance -= withdrawal

        records.append(
            MonthlyRecord(
                start_balance=start,
                interest_payment=interest,
                withdrawal=withdrawal,
                end_balance=balance,
            )
        )

    return records


def simulate_final_balance(
    params: CalculationParameters,
    rule: IncomeRule,
    limits: CalculatorLimits = DEFAULT_LIMITS,
) -> float:
    """Same recurrence as simulate(), without records or the survivability stop."""
    _check_params(params)
    rate = monthly_rate(params.annual_interest_rate, params.compounding_frequency, limits.rate_convention)

    balance = float(params.principal)
    income = rule.initial_income(balance)

    for month in range(horizon_months(params, limits)):
        if month > 0 and month % 12 == 0:
            income = rule.next_income(income, balance)
        balance += balance * rate
        balance -= min(balance, income)

    return balance
