"""
Input validation for the calculators.

Two stages, both collecting every problem instead of stopping at the first:
  1) pydantic parses the payload (types, finite numbers, unknown keys).
  2) domain checks compare the parsed values with the CalculatorLimits.
A field that fails to parse is left out of stage 2; every other field is
still checked, so one bad value never hides the rest.
Nothing here keeps state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from living_annuity.config import COMPOUNDING_FREQUENCIES, DEFAULT_LIMITS, CalculatorLimits
from living_annuity.errors import InputValidationError
from living_annuity.schemas.annuity import AnnuityTermRequest, MonthlyIncomeRequest

RequestT = TypeVar("RequestT", bound=BaseModel)

_FIELD_CONFIG = ConfigDict(allow_inf_nan=False)


@dataclass(frozen=True)
class Violation:
    field: str
    message: str


DomainChecks = Callable[[Mapping[str, Any], CalculatorLimits], List[Violation]]


@dataclass
class ValidationOutcome(Generic[RequestT]):
    value: Optional[RequestT]
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.violations

    def unwrap(self) -> RequestT:
        if self.value is None or self.violations:
            raise InputValidationError(self.violations)
        return self.value


def _parse_violations(exc: ValidationError) -> List[Violation]:
    violations = []
    for error in exc.errors():
        name = ".".join(str(part) for part in error["loc"]) or "body"
        violations.append(Violation(name, f'The "{name}" field is invalid: {error["msg"]}.'))
    return violations


def _parsed_fields(model: Type[BaseModel], payload: Mapping[str, Any], failed: Set[str]) -> Dict[str, Any]:
    """Values of the fields that parsed, one field at a time."""
    values: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        if name in failed:
            continue
        if name in payload:
            values[name] = TypeAdapter(info.annotation, config=_FIELD_CONFIG).validate_python(payload[name])
        elif not info.is_required():
            values[name] = info.get_default()
    return values


def _check_common(values: Mapping[str, Any], limits: CalculatorLimits) -> List[Violation]:
    violations: List[Violation] = []
    principal = values.get("principal")
    if principal is not None and principal <= limits.min_balance:
        violations.append(Violation("principal", limits.invalid_principal_message))
    interest_rate = values.get("interest_rate")
    if interest_rate is not None and not 0 <= interest_rate <= 100:
        violations.append(Violation("interest_rate", 'The "interest_rate" must be a number between 0 and 100.'))
    compound = values.get("compound")
    if compound is not None and compound not in COMPOUNDING_FREQUENCIES:
        allowed = ", ".join(str(c) for c in COMPOUNDING_FREQUENCIES)
        violations.append(Violation("compound", f'The "compound" must be one of {allowed} periods per year.'))
    retirement_age = values.get("retirement_age")
    if retirement_age is not None and retirement_age < limits.min_retirement_age:
        violations.append(
            Violation(
                "retirement_age",
                f"The retirement age must be at least {limits.min_retirement_age}.",
            )
        )
    return violations


def _validate(
    model: Type[RequestT],
    payload: Any,
    limits: CalculatorLimits,
    domain_checks: DomainChecks,
) -> ValidationOutcome[RequestT]:
    if not isinstance(payload, Mapping):
        return ValidationOutcome(None, [Violation("body", "The request body must be a JSON object.")])
    try:
        request = model.model_validate(dict(payload))
    except ValidationError as exc:
        violations = _parse_violations(exc)
        failed = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        values = _parsed_fields(model, payload, failed)
        return ValidationOutcome(None, violations + domain_checks(values, limits))

    violations = domain_checks(request.model_dump(), limits)
    if violations:
        return ValidationOutcome(None, violations)
    return ValidationOutcome(request)


def _annuity_term_checks(values: Mapping[str, Any], limits: CalculatorLimits) -> List[Violation]:
    violations = _check_common(values, limits)
    drawdown = values.get("annual_drawdown")
    if drawdown is not None and not limits.min_drawdown_percent <= drawdown <= limits.max_drawdown_percent:
        violations.append(Violation("annual_drawdown", limits.invalid_drawdown_message))
    return violations


def _monthly_income_checks(values: Mapping[str, Any], limits: CalculatorLimits) -> List[Violation]:
    violations = _check_common(values, limits)
    annuity_term = values.get("annuity_term")
    if annuity_term is not None and not 1 <= annuity_term <= limits.max_annuity_term:
        violations.append(
            Violation(
                "annuity_term",
                f"The annuity term must be a whole number of years between 1 and {limits.max_annuity_term}.",
            )
        )
    annual_increase = values.get("annual_increase")
    if annual_increase is not None and not 0 <= annual_increase <= 100:
        violations.append(Violation("annual_increase", 'The "annual_increase" must be a number between 0 and 100.'))
    return violations


def validate_annuity_term(
    payload: Mapping[str, Any],
    limits: CalculatorLimits = DEFAULT_LIMITS,
) -> ValidationOutcome[AnnuityTermRequest]:
    return _validate(AnnuityTermRequest, payload, limits, _annuity_term_checks)


def validate_monthly_income(
    payload: Mapping[str, Any],
    limits: CalculatorLimits = DEFAULT_LIMITS,
) -> ValidationOutcome[MonthlyIncomeRequest]:
    return _validate(MonthlyIncomeRequest, payload, limits, _monthly_income_checks)
