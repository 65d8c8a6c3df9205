from __future__ import annotations

from math import isclose

import pytest

from living_annuity.config import CalculatorLimits
from living_annuity.core.calculators import calculate_annuity_term, calculate_monthly_income
from living_annuity.errors import ConvergenceFailure
from living_annuity.schemas.annuity import AnnuityTermRequest, MonthlyIncomeRequest


def test_high_drawdown_exhausts_before_the_cap():
    result = calculate_annuity_term(
        AnnuityTermRequest(principal=1_000_000, interest_rate=8, compound=12, annual_drawdown=17.5)
    )

    assert not result.reached_cap
    assert 0 < result.term_years < 50
    assert result.term_years * 12 == len(result.monthly)
    assert isclose(result.initial_monthly_income, 1_000_000 * 0.175 / 12)
    assert result.total_withdrawn == pytest.approx(sum(m.withdrawal for m in result.monthly))
    assert result.total_interest == pytest.approx(sum(m.interest_payment for m in result.monthly))
    assert result.annual[-1].total_withdrawn_to_date == pytest.approx(result.total_withdrawn)


def test_low_drawdown_reaches_the_cap():
    result = calculate_annuity_term(
        AnnuityTermRequest(principal=1_000_000, interest_rate=8, compound=12, annual_drawdown=2.5)
    )

    assert result.reached_cap
    assert result.term_years == 50
    assert len(result.annual) == 50


def test_retirement_age_numbers_the_years():
    result = calculate_annuity_term(
        AnnuityTermRequest(principal=1_000_000, interest_rate=8, annual_drawdown=17.5, retirement_age=65)
    )

    assert result.annual[0].period_index == 65
    assert result.annual[-1].period_index == 65 + len(result.annual) - 1


def test_custom_limits_move_the_horizon():
    limits = CalculatorLimits(max_annuity_term=10)
    result = calculate_annuity_term(
        AnnuityTermRequest(principal=1_000_000, interest_rate=8, annual_drawdown=2.5),
        limits,
    )

    assert result.reached_cap
    assert result.term_years == 10


def test_monthly_income_runs_fund_down_to_survivable_balance():
    """
    Zero growth and no escalation: 575,000 - 360 * income = 125,000, so the
    income is 1,250 and the drawdown stays inside the band every year.
    """
    result = calculate_monthly_income(
        MonthlyIncomeRequest(principal=575_000, annuity_term=30, interest_rate=0, compound=12, annual_increase=0)
    )

    assert result.monthly_income == pytest.approx(1_250, abs=0.011)
    assert len(result.monthly) == 360
    assert len(result.annual) == 30
    assert result.monthly[-1].end_balance == pytest.approx(125_000, abs=5)
    assert result.initial_annual_income == pytest.approx(result.monthly_income * 12)
    assert result.drawdown_percent == pytest.approx(15_000 / 575_000 * 100, abs=0.01)
    assert result.total_withdrawn == pytest.approx(360 * result.monthly_income)
    assert result.total_interest == 0.0


def test_monthly_income_fails_when_term_is_too_short():
    # even the maximum drawdown leaves far more than the survivable balance after one year
    with pytest.raises(ConvergenceFailure):
        calculate_monthly_income(
            MonthlyIncomeRequest(principal=1_000_000, annuity_term=1, interest_rate=0, compound=12)
        )


def test_monthly_income_reports_the_income_actually_withdrawn():
    result = calculate_monthly_income(
        MonthlyIncomeRequest(principal=575_000, annuity_term=30, interest_rate=0, compound=12, annual_increase=0)
    )

    assert result.monthly_income == result.monthly[0].withdrawal


def test_monthly_income_fails_when_floor_drawdown_cannot_last_the_term():
    # 2.5% a year of 300,000 with no growth falls under 125,000 long before 50 years
    with pytest.raises(ConvergenceFailure):
        calculate_monthly_income(
            MonthlyIncomeRequest(principal=300_000, annuity_term=50, interest_rate=0, compound=12)
        )


def test_monthly_income_fails_when_solved_income_ends_the_run_early(monkeypatch: pytest.MonkeyPatch):
    # a solver accepting in a loose window can land on an income that exhausts the fund early
    monkeypatch.setattr(
        "living_annuity.core.calculators.solve_money_parameter",
        lambda objective, increment, initial: 5_000.0,
    )

    with pytest.raises(ConvergenceFailure):
        calculate_monthly_income(
            MonthlyIncomeRequest(principal=575_000, annuity_term=30, interest_rate=0, compound=12)
        )
