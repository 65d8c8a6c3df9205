from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, computed_field

from living_annuity.core.simulation import MonthlyRecord


class AnnualRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    period_index: int
    start_balance: float
    end_balance: float
    interest_payment: float
    withdrawal: float
    # running sums from the first simulated month, never reset per year
    total_interest_to_date: float
    total_withdrawn_to_date: float

    @computed_field  # type: ignore[misc]
    @property
    def drawdown_percent(self) -> float:
        if self.start_balance <= 0:
            return 0.0
        return self.withdrawal / self.start_balance * 100


def aggregate_annual(months: Sequence[MonthlyRecord], starting_period: int = 1) -> List[AnnualRecord]:
    """
    Fold consecutive 12-month windows into yearly rows; a shorter final window
    is emitted when the simulation stopped mid-year.
    """
    annual: List[AnnualRecord] = []

    total_interest = 0.0
    total_withdrawn = 0.0
    window_interest = 0.0
    window_withdrawn = 0.0
    window_start: Optional[float] = None

    for index, month in enumerate(months):
        total_interest += month.interest_payment
        total_withdrawn += month.withdrawal
        window_interest += month.interest_payment
        window_withdrawn += month.withdrawal
        if window_start is None:
            window_start = month.start_balance

        if (index + 1) % 12 == 0 or index + 1 == len(months):
            annual.append(
                AnnualRecord(
                    period_index=starting_period + len(annual),
                    start_balance=window_start,
                    end_balance=month.end_balance,
                    interest_payment=window_interest,
                    withdrawal=window_withdrawn,
                    total_interest_to_date=total_interest,
                    total_withdrawn_to_date=total_withdrawn,
                )
            )
            window_interest = 0.0
            window_withdrawn = 0.0
            window_start = None

    return annual
