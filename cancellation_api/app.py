"""
Cancellation Tracker API - Flask Application Entry Point

This module initializes the Flask application with OpenAPI 3.0 support,
configures middleware, and exposes the request status engine, workflow
rules and reports over HTTP.
"""

import json
import os
from datetime import datetime, timezone

from flask import jsonify, request
from flask_openapi3 import OpenAPI, Info, Tag

from .constants import (
    DEFAULT_NOTIFY_BEFORE_DAYS, DEFAULT_SETTLEMENT_DAYS, SERVICE_NAME, SERVICE_VERSION
)
from .middleware.error_handler import ErrorHandlerMiddleware, register_custom_error_handlers
from .models.enums import StaffRole
from .observability.config import setup_observability
from .observability.middleware import add_observability_middleware
from .routes.dashboard import dashboard_bp
from .routes.registry import registry_bp
from .routes.reports import reports_bp
from .routes.requests import requests_bp
from .services.hal import create_hal_formatter

info = Info(
    title="Credential Cancellation Tracker API",
    version=SERVICE_VERSION,
    description="Status, due date and report engine for vehicle credential cancellation requests"
)

health_tag = Tag(name="Health", description="System health and status")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


def load_config() -> dict:
    """Read application configuration from environment variables."""
    environment = os.getenv('ENVIRONMENT', 'development')
    return {
        'ENVIRONMENT': environment,
        'DEBUG': environment == 'development',
        'DOCS_ENABLED': _env_flag('DOCS_ENABLED', 'true'),
        'OTEL_ENABLED': _env_flag('OTEL_ENABLED', 'true'),
        'BASE_URL': os.getenv('BASE_URL', 'http://localhost:5000'),
        'DEFAULT_SETTLEMENT_DAYS': int(os.getenv('DEFAULT_SETTLEMENT_DAYS', DEFAULT_SETTLEMENT_DAYS)),
        'NOTIFY_BEFORE_DAYS': int(os.getenv('NOTIFY_BEFORE_DAYS', DEFAULT_NOTIFY_BEFORE_DAYS)),
        'NOTIFY_ON_OVERDUE': _env_flag('NOTIFY_ON_OVERDUE', 'true'),
        'DEFAULT_USER_ROLE': os.getenv('DEFAULT_USER_ROLE', StaffRole.VIEWER.value),
    }


def create_app(overrides: dict = None) -> OpenAPI:
    """
    Build the application.

    Args:
        overrides: Configuration values that replace the environment ones

    Returns:
        Configured OpenAPI (Flask) application
    """
    config = load_config()
    config.update(overrides or {})

    setup_observability(config['ENVIRONMENT'], config['OTEL_ENABLED'])

    hal_formatter = create_hal_formatter(config['BASE_URL'])

    def validation_error_callback(e):
        """Render request body validation errors as a problem document."""
        error_response = hal_formatter.builder.build_error_response(
            "validation-error",
            "Validation Error",
            422,
            "Request payload failed validation",
            request.path,
            json.loads(e.json(include_url=False))
        )
        response = jsonify(error_response)
        response.status_code = 422
        return response

    app = OpenAPI(
        __name__,
        info=info,
        doc_ui=config['DOCS_ENABLED'],
        validation_error_status=422,
        validation_error_callback=validation_error_callback
    )
    app.config.update(config)

    add_observability_middleware(app)

    ErrorHandlerMiddleware(app, hal_formatter)
    register_custom_error_handlers(app, hal_formatter)

    # Make services available to routes
    app.hal_formatter = hal_formatter

    app.register_api(requests_bp)
    app.register_api(dashboard_bp)
    app.register_api(reports_bp)
    app.register_api(registry_bp)

    @app.get('/api/healthz', tags=[health_tag])
    def health_check():
        """Liveness probe."""
        health_data = {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": app.config['ENVIRONMENT'],
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "_links": {
                "self": hal_formatter.builder.link_builder.build_self_link(
                    "/api/healthz"
                ).model_dump(exclude_none=True)
            }
        }
        return jsonify(health_data)

    return app


app = create_app()


if __name__ == '__main__':
    # Development server
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=app.config['DEBUG']
    )
