from __future__ import annotations

import logging
from typing import Optional, Sequence

from living_annuity.config import DEFAULT_LIMITS, CalculatorLimits
from living_annuity.core.aggregation import aggregate_annual
from living_annuity.core.rates import monthly_rate
from living_annuity.core.simulation import (
    CalculationParameters,
    EscalatingIncome,
    MonthlyRecord,
    PercentageDrawdown,
    horizon_months,
    simulate,
    simulate_final_balance,
)
from living_annuity.core.solver import INITIAL_TOLERANCE, solve_money_parameter
from living_annuity.errors import ConvergenceFailure
from living_annuity.schemas.annuity import (
    AnnuityTermRequest,
    AnnuityTermResponse,
    MonthlyIncomeRequest,
    MonthlyIncomeResponse,
)

logger = logging.getLogger(__name__)

# first step of the income search, in currency units per month
INCOME_SEARCH_INCREMENT = 100.0


def _totals(months: Sequence[MonthlyRecord]) -> tuple[float, float]:
    return (
        sum(m.withdrawal for m in months),
        sum(m.interest_payment for m in months),
    )


def _starting_period(retirement_age: Optional[int]) -> int:
    return retirement_age if retirement_age is not None else 1


def calculate_annuity_term(
    request: AnnuityTermRequest,
    limits: CalculatorLimits = DEFAULT_LIMITS,
) -> AnnuityTermResponse:
    """How long a fund lasts when a fixed percentage of it is drawn every year."""
    params = CalculationParameters(
        principal=request.principal,
        annual_interest_rate=request.interest_rate,
        compounding_frequency=request.compound,
        annual_drawdown_percent=request.annual_drawdown,
        horizon_years_cap=limits.max_annuity_term,
    )
    rule = PercentageDrawdown(params.annual_drawdown_percent)
    months = simulate(params, rule, limits)

    total_withdrawn, total_interest = _totals(months)
    reached_cap = len(months) == horizon_months(params, limits)
    logger.debug("annuity term: %d months (reached cap: %s)", len(months), reached_cap)

    return AnnuityTermResponse(
        term_years=len(months) / 12,
        reached_cap=reached_cap,
        initial_monthly_income=rule.initial_income(params.principal),
        total_withdrawn=total_withdrawn,
        total_interest=total_interest,
        annual=aggregate_annual(months, _starting_period(request.retirement_age)),
        monthly=months,
    )


def calculate_monthly_income(
    request: MonthlyIncomeRequest,
    limits: CalculatorLimits = DEFAULT_LIMITS,
) -> MonthlyIncomeResponse:
    """
    Find the starting monthly income, escalating every year, that draws the
    fund down to the survivable balance after exactly annuity_term years.

    Raises ConvergenceFailure when no such income exists inside the
    drawdown band: the term is too short for the maximum drawdown, or too
    long to survive even the minimum drawdown.
    """
    params = CalculationParameters(
        principal=request.principal,
        annual_interest_rate=request.interest_rate,
        compounding_frequency=request.compound,
        horizon_years_cap=request.annuity_term,
    )

    def rule_for(income: float) -> EscalatingIncome:
        return EscalatingIncome(
            initial_monthly_income=income,
            annual_increase_percent=request.annual_increase,
            floor_percent=limits.min_drawdown_percent,
            ceiling_percent=limits.max_drawdown_percent,
        )

    def balance_ratio(income: float) -> float:
        return simulate_final_balance(params, rule_for(income), limits) / limits.min_balance

    # an income of 0 is lifted to the floor drawdown
    if balance_ratio(0.0) < 1 - INITIAL_TOLERANCE:
        raise ConvergenceFailure(
            f"the minimum drawdown already exhausts the fund within {request.annuity_term} years"
        )

    rate = monthly_rate(params.annual_interest_rate, params.compounding_frequency, limits.rate_convention)
    first_interest_payment = params.principal * rate

    solved = solve_money_parameter(balance_ratio, INCOME_SEARCH_INCREMENT, first_interest_payment)
    rule = rule_for(solved)
    income = rule.initial_income(params.principal)
    logger.debug("solved monthly income %.2f for a %d year term", income, request.annuity_term)

    months = simulate(params, rule, limits)
    if len(months) < request.annuity_term * 12:
        raise ConvergenceFailure(
            f"solved income exhausts the fund after {len(months)} of {request.annuity_term * 12} months"
        )

    total_withdrawn, total_interest = _totals(months)
    initial_annual_income = income * min(12, len(months))
    drawdown_percent = initial_annual_income / max(params.principal, initial_annual_income) * 100

    return MonthlyIncomeResponse(
        monthly_income=income,
        annual_increase=request.annual_increase,
        initial_annual_income=initial_annual_income,
        drawdown_percent=drawdown_percent,
        total_withdrawn=total_withdrawn,
        total_interest=total_interest,
        annual=aggregate_annual(months, _starting_period(request.retirement_age)),
        monthly=months,
    )
