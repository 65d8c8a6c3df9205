"""Exception taxonomy shared by the engine, the validator and the HTTP layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from living_annuity.config import CALCULATION_FAILED_ERROR_MESSAGE, CRITICAL_ERROR_MESSAGE

if TYPE_CHECKING:
    from living_annuity.domain.validation import Violation


class AnnuityError(Exception):
    """Base class for every error raised by the calculator."""


class PreconditionError(AnnuityError):
    """A required value was missing after validation; the request cannot proceed."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
        self.user_message = CRITICAL_ERROR_MESSAGE


class InputValidationError(AnnuityError, ValueError):
    def __init__(self, violations: Sequence["Violation"]):
        super().__init__("; ".join(v.message for v in violations))
        self.violations: List["Violation"] = list(violations)

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    @property
    def fields(self) -> List[str]:
        # keep first-seen order, one entry per field
        return list(dict.fromkeys(v.field for v in self.violations))


class ConvergenceFailure(AnnuityError):
    """The parameter search exhausted every tolerance and retry level."""

    def __init__(self, detail: str = "calculation failed"):
        super().__init__(detail)
        self.detail = detail
        self.user_message = CALCULATION_FAILED_ERROR_MESSAGE
