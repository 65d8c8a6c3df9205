"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request

from living_annuity.config import CalculatorLimits
from living_annuity.core.calculators import calculate_annuity_term, calculate_monthly_income
from living_annuity.domain.validation import validate_annuity_term, validate_monthly_income
from living_annuity.errors import ConvergenceFailure, InputValidationError, PreconditionError

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _limits() -> CalculatorLimits:
    return current_app.config["CALCULATOR_LIMITS"]


@api_bp.errorhandler(InputValidationError)
def _handle_validation_error(exc: InputValidationError):
    """Report every rejected field at once."""
    logger.info("rejected input: %s", exc)
    return jsonify({"error": exc.messages, "fields": exc.fields}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ConvergenceFailure)
def _handle_convergence_failure(exc: ConvergenceFailure):
    logger.warning("income search failed: %s", exc.detail)
    return jsonify({"error": [exc.user_message]}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(PreconditionError)
def _handle_precondition_error(exc: PreconditionError):
    logger.error("precondition failed: %s", exc.detail)
    return jsonify({"error": [exc.user_message]}), HTTPStatus.INTERNAL_SERVER_ERROR


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify({"message": "pong"})


@api_bp.post("/calc/annuity-term")
def annuity_term() -> Any:
    """Years until the fund drops below the survivable balance at a fixed drawdown."""
    payload = request.get_json(silent=True)
    calc_request = validate_annuity_term(payload, _limits()).unwrap()
    result = calculate_annuity_term(calc_request, _limits())
    return jsonify(result.model_dump())


@api_bp.post("/calc/monthly-income")
def monthly_income() -> Any:
    """Starting monthly income that runs the fund down over the requested term."""
    payload = request.get_json(silent=True)
    calc_request = validate_monthly_income(payload, _limits()).unwrap()
    result = calculate_monthly_income(calc_request, _limits())
    return jsonify(result.model_dump())
