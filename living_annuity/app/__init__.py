"""Application factory and app-wide configuration."""

from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from living_annuity.app.api.routes import api_bp
from living_annuity.config import DEFAULT_LIMITS, CalculatorLimits
from living_annuity.log import configure_logging

DEFAULT_CONFIG = {
    "LOG_LEVEL": "INFO",
    "CORS_ORIGINS": ["http://localhost:5173", "http://127.0.0.1:5173"],
    "CALCULATOR_LIMITS": DEFAULT_LIMITS,
}


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    if config:
        app.config.from_mapping(config)

    limits = app.config["CALCULATOR_LIMITS"]
    if not isinstance(limits, CalculatorLimits):
        app.config["CALCULATOR_LIMITS"] = CalculatorLimits.model_validate(limits)

    configure_logging(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
