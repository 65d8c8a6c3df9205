"""Living annuity calculator: drawdown simulation, annual summaries and income solving."""

from living_annuity.core.aggregation import AnnualRecord, aggregate_annual
from living_annuity.core.calculators import calculate_annuity_term, calculate_monthly_income
from living_annuity.core.simulation import (
    CalculationParameters,
    EscalatingIncome,
    MonthlyRecord,
    PercentageDrawdown,
    simulate,
    simulate_final_balance,
)
from living_annuity.core.solver import solve_money_parameter, solve_parameter
from living_annuity.errors import AnnuityError, ConvergenceFailure, InputValidationError, PreconditionError

__version__ = "0.1.0"

__all__ = [
    "AnnualRecord",
    "AnnuityError",
    "CalculationParameters",
    "ConvergenceFailure",
    "EscalatingIncome",
    "InputValidationError",
    "MonthlyRecord",
    "PercentageDrawdown",
    "PreconditionError",
    "aggregate_annual",
    "calculate_annuity_term",
    "calculate_monthly_income",
    "simulate",
    "simulate_final_balance",
    "solve_money_parameter",
    "solve_parameter",
]
