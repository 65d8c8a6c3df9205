from __future__ import annotations

import pytest

from living_annuity.core.solver import (
    INITIAL_TOLERANCE,
    find_parameter,
    round_up,
    solve_money_parameter,
    solve_parameter,
)
from living_annuity.errors import ConvergenceFailure


def test_decreasing_objective_converges_in_first_round():
    result = find_parameter(lambda v: 100 / v, initial_increment=10)

    assert result.value == pytest.approx(100, abs=1e-6)
    assert result.tolerance == INITIAL_TOLERANCE
    assert result.retry == 0
    assert 100 / result.value <= 1


def test_solve_parameter_returns_plain_value():
    assert solve_parameter(lambda v: 250 / v, initial_increment=10, initial_value=1) == pytest.approx(250, abs=1e-6)


def test_increasing_objective_never_converges():
    """Steps move the value down on undershoot, so an increasing objective runs away from the target."""
    with pytest.raises(ConvergenceFailure):
        solve_parameter(lambda v: v / 100, initial_increment=10)


def test_negative_solution_is_rejected():
    with pytest.raises(ConvergenceFailure):
        solve_parameter(lambda v: 1.0 if v < 0 else 0.5, initial_increment=10)


def test_money_values_round_up_to_the_cent():
    assert solve_money_parameter(lambda v: 123.456 / v, initial_increment=10) == 123.46
    assert round_up(260.4166, 2) == 260.42
    assert round_up(260.5, 0) == 261


def test_doubled_step_reaches_target_the_first_step_cannot():
    """1000 steps of 10 stop short of 15,000; the first retry steps by 20 and gets there."""
    result = find_parameter(lambda v: 15_000 / v, initial_increment=10)

    assert result.retry == 1
    assert result.tolerance == INITIAL_TOLERANCE
    assert result.value == pytest.approx(15_000, abs=1e-5)


def test_looser_tolerance_round_accepts_a_near_miss():
    # the objective jumps from 2 straight to 0.99995, so only a 1e-4 window can hold it
    result = find_parameter(lambda v: 2.0 if v < 100 else 0.99995, initial_increment=10)

    assert result.tolerance == pytest.approx(1e-4)
    assert result.retry == 0
    assert result.value == pytest.approx(100.1)


def test_widest_window_accepts_anything_in_unit_interval():
    result = find_parameter(lambda v: 0.0, initial_increment=10)

    assert 1 - result.tolerance <= 0
    assert result.value == 0.1
    assert result.iterations == 1
