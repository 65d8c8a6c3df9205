"""Nominal annual rate -> effective monthly growth rate."""

from __future__ import annotations

from living_annuity.config import RateConvention


def monthly_rate(
    annual_rate: float,
    compound: int,
    convention: RateConvention = RateConvention.PERIODIC,
) -> float:
    """
    Return the monthly rate ``m`` such that growing by ``m`` twelve times matches
    the nominal annual rate compounded ``compound`` times a year.

      PERIODIC:          periodic = r / 100 / c
      EFFECTIVE_ANNUAL:  periodic = (1 + r / 100) ** (1 / c) - 1

    In both cases ``m = (1 + periodic) ** (c / 12) - 1``. The two give different
    numbers for the same inputs, so each calculator picks one explicitly.
    """
    if convention == RateConvention.EFFECTIVE_ANNUAL:
        periodic = (1 + annual_rate / 100) ** (1 / compound) - 1
    else:
        periodic = annual_rate / 100 / compound
    return (1 + periodic) ** (compound / 12) - 1
