"""
Derivative-free search for the parameter value that brings a ratio objective
to 1.0 from below.

The objective is expected to *decrease* as the value grows (e.g. final fund
balance as a function of monthly income): a ratio under the window means the
value is too large, a ratio over 1 means it is too small.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from living_annuity.errors import ConvergenceFailure

logger = logging.getLogger(__name__)

INITIAL_TOLERANCE = 1e-10
TOLERANCE_ROUNDS = 18
RETRY_COUNT = 10
MAX_ITERATIONS = 1000
DEFAULT_INITIAL_VALUE = 0.1


@dataclass(frozen=True)
class SolverResult:
    value: float
    tolerance: float
    retry: int
    iterations: int


def find_parameter(
    objective: Callable[[float], float],
    initial_increment: float,
    initial_value: float = DEFAULT_INITIAL_VALUE,
) -> SolverResult:
    """
    Step search with halving on overshoot, restarted with a doubled initial
    step for each retry, and with a tolerance ten times looser for each round.

    Accepts a value once objective(value) lies in [1 - tolerance, 1].
    Raises ConvergenceFailure if the accepted value is negative or if every
    round is exhausted.
    """
    tolerance = INITIAL_TOLERANCE
    for _ in range(TOLERANCE_ROUNDS):
        lower = 1 - tolerance
        for retry in range(RETRY_COUNT + 1):
            value = initial_value
            increment = initial_increment * 2**retry
            for iteration in range(MAX_ITERATIONS):
                ratio = objective(value)
                if ratio < lower:
                    value -= increment
                    increment /= 2
                elif ratio <= 1:
                    if value < 0:
                        raise ConvergenceFailure(f"search converged on negative value {value!r}")
                    logger.debug(
                        "solver converged: value=%r tolerance=%g retry=%d iterations=%d",
                        value,
                        tolerance,
                        retry,
                        iteration + 1,
                    )
                    return SolverResult(value=value, tolerance=tolerance, retry=retry, iterations=iteration + 1)
                else:
                    value += increment
        tolerance *= 10

    raise ConvergenceFailure("search exhausted every tolerance and retry level")


def solve_parameter(
    objective: Callable[[float], float],
    initial_increment: float,
    initial_value: float = DEFAULT_INITIAL_VALUE,
) -> float:
    return find_parameter(objective, initial_increment, initial_value).value


def round_up(value: float, decimals: int = 0) -> float:
    exp = 10**decimals
    return math.ceil(value * exp) / exp


def solve_money_parameter(
    objective: Callable[[float], float],
    initial_increment: float,
    initial_value: float = DEFAULT_INITIAL_VALUE,
) -> float:
    """Like solve_parameter, rounded up to the cent so the target is never under-delivered."""
    return round_up(solve_parameter(objective, initial_increment, initial_value), 2)
