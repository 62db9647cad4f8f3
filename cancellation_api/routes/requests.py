# SPDX-License-Identifier: Apache-2.0

"""
Cancellation request endpoints.

This module exposes the status engine and the request workflow rules:
batch classification, drafting, validation and applying edits to a
request snapshot posted by the caller.
"""

from flask import current_app, jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain import cases as case_domain
from ..domain import status as status_domain
from ..domain.results import ValidationResult
from ..middleware.error_handler import ValidationException
from ..models.entities import SystemSettings
from ..models.requests import (
    ApplyUpdateRequest, DraftRequest, StatusQuery, ValidateRequest
)
from ..models.responses import ErrorResponse, ValidationResultResponse
from ..utils.request import (
    current_permissions, evaluation_date, notification_config, require_permission
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

requests_tag = Tag(name="Requests", description="Cancellation request status and workflow")
requests_bp = APIBlueprint(
    'requests',
    __name__,
    url_prefix='/api/requests',
    abp_tags=[requests_tag]
)


def _request_resource(vehicle_request, now, config):
    data = vehicle_request.model_dump(mode="json")
    data["status"] = status_domain.describe_request(vehicle_request, now, config).to_dict()
    return data


@requests_bp.post('/status')
def classify_requests(body: StatusQuery):
    """
    Classify a batch of requests.

    Returns each matching request with its due date, warning and overdue
    flags, latest active step and row classification.
    """
    now = evaluation_date(body.now)
    config = notification_config(body.notifications)

    with tracer.start_as_current_span(
        "requests.classify",
        attributes={
            "requests.count": len(body.requests),
            "requests.status_filter": str(body.status)
        }
    ):
        filters = case_domain.RequestFilters(search_term=body.search, status=body.status)
        matching = case_domain.filter_requests(body.requests, filters)
        items = [_request_resource(r, now, config) for r in matching]

        logger.info(
            "Requests classified",
            extra={
                "requested": len(body.requests),
                "matched": len(matching),
                "evaluation_date": now.isoformat()
            }
        )

        response = current_app.hal_formatter.format_request_collection(
            items,
            current_permissions(),
            extra={"now": now.isoformat()}
        )
        return jsonify(response)


@requests_bp.post('/draft', responses={403: ErrorResponse})
def draft_request(body: DraftRequest):
    """Draft a new request with all steps pending and the configured settlement window."""
    require_permission("request:create")

    settings = body.settings or SystemSettings(
        default_settlement_days=current_app.config['DEFAULT_SETTLEMENT_DAYS']
    )

    with tracer.start_as_current_span("requests.draft") as span:
        drafted = case_domain.draft_vehicle_request(body.request, settings)
        validation = case_domain.validate_vehicle_request(drafted)
        span.set_attribute("request.id", drafted.id)

        logger.info(
            "Request drafted",
            extra={"request_id": drafted.id, "settlement_days": drafted.settlement_days}
        )

        return jsonify({
            "request": drafted.model_dump(mode="json"),
            "validation": validation.to_dict()
        }), 201


@requests_bp.post('/validate', responses={200: ValidationResultResponse})
def validate_request(body: ValidateRequest):
    """
    Validate a request against the workflow rules.

    When an update is included, step transitions are checked as well.
    """
    with tracer.start_as_current_span("requests.validate"):
        validation = case_domain.validate_vehicle_request(body.request)
        errors = list(validation.errors)
        warnings = list(validation.warnings)

        if body.update is not None:
            result = case_domain.apply_request_update(body.request, body.update)
            if result.success:
                warnings = list(result.warnings)
                errors = []
            else:
                errors.extend(e for e in result.validation_errors if e not in errors)

        outcome = ValidationResult.from_messages(errors, warnings)
        return jsonify(outcome.to_dict())


@requests_bp.post('/apply', responses={400: ErrorResponse, 403: ErrorResponse})
def apply_update(body: ApplyUpdateRequest):
    """Apply an edit to a request and return the updated record."""
    require_permission("request:update")

    with tracer.start_as_current_span(
        "requests.apply_update",
        attributes={"request.id": body.request.id}
    ):
        result = case_domain.apply_request_update(body.request, body.update)

        if not result.success:
            logger.warning(
                "Request update rejected",
                extra={"request_id": body.request.id, "errors": result.validation_errors}
            )
            raise ValidationException(result.error_message, result.validation_errors)

        logger.info("Request updated", extra={"request_id": body.request.id})

        return jsonify({
            "request": result.value.model_dump(mode="json"),
            "warnings": result.warnings
        })
