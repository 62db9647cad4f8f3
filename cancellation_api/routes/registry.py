# SPDX-License-Identifier: Apache-2.0

"""
Company and staff registry endpoints.

The registries live with the caller; each endpoint takes the current list,
applies one change and returns the new list.
"""

from flask import jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain import companies as company_domain
from ..domain import results
from ..domain import users as user_domain
from ..middleware.error_handler import (
    ConflictException, NotFoundException, ValidationException
)
from ..models.requests import (
    AddCompanyRequest, AddStaffUserRequest, RemoveCompanyRequest,
    RemoveStaffUserRequest, UpdateStaffUserRequest
)
from ..models.responses import ErrorResponse
from ..utils.request import require_permission

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

registry_tag = Tag(name="Registry", description="Approved companies and staff users")
registry_bp = APIBlueprint(
    'registry',
    __name__,
    url_prefix='/api',
    abp_tags=[registry_tag]
)

REGISTRY_ERRORS = {400: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse}


def _raise_for_failure(result):
    """Turn a failed registry change into the matching HTTP problem."""
    if result.error_kind == results.CONFLICT:
        raise ConflictException(result.error_message)
    if result.error_kind == results.NOT_FOUND:
        raise NotFoundException(result.error_message)
    raise ValidationException(result.error_message, result.validation_errors)


def _companies_payload(companies):
    return {
        "companies": [c.model_dump(mode="json") for c in companies],
        "names": company_domain.company_names(companies)
    }


def _users_payload(users):
    return {
        "users": [
            {**u.model_dump(mode="json"), "role_label": user_domain.role_label(u.role)}
            for u in users
        ]
    }


@registry_bp.post('/companies', responses=REGISTRY_ERRORS)
def add_company(body: AddCompanyRequest):
    """Register an approved company."""
    require_permission("company:create")

    with tracer.start_as_current_span("registry.company.add"):
        result = company_domain.add_company(body.name, body.companies)
        if not result.success:
            _raise_for_failure(result)

        logger.info("Company registered", extra={"company_name": body.name.strip()})
        return jsonify(_companies_payload(result.value)), 201


@registry_bp.post('/companies/remove', responses=REGISTRY_ERRORS)
def remove_company(body: RemoveCompanyRequest):
    """Remove an approved company."""
    require_permission("company:delete")

    with tracer.start_as_current_span(
        "registry.company.remove",
        attributes={"company.id": body.company_id}
    ):
        result = company_domain.remove_company(body.company_id, body.companies)
        if not result.success:
            _raise_for_failure(result)

        logger.info("Company removed", extra={"company_id": body.company_id})
        return jsonify(_companies_payload(result.value))


@registry_bp.post('/users', responses=REGISTRY_ERRORS)
def add_user(body: AddStaffUserRequest):
    """Register a staff user."""
    require_permission("user:create")

    with tracer.start_as_current_span("registry.user.add"):
        result = user_domain.add_staff_user(body.name, body.username, body.role, body.users)
        if not result.success:
            _raise_for_failure(result)

        logger.info(
            "Staff user registered",
            extra={"username": body.username.strip().lower(), "role": body.role}
        )
        return jsonify(_users_payload(result.value)), 201


@registry_bp.post('/users/update', responses=REGISTRY_ERRORS)
def update_user(body: UpdateStaffUserRequest):
    """Edit a staff user's name, username or role."""
    require_permission("user:update")

    with tracer.start_as_current_span(
        "registry.user.update",
        attributes={"user.id": body.user_id}
    ):
        result = user_domain.update_staff_user(
            body.user_id,
            body.users,
            name=body.name,
            username=body.username,
            role=body.role
        )
        if not result.success:
            _raise_for_failure(result)

        logger.info("Staff user updated", extra={"user_id": body.user_id})
        return jsonify(_users_payload(result.value))


@registry_bp.post('/users/remove', responses=REGISTRY_ERRORS)
def remove_user(body: RemoveStaffUserRequest):
    """Remove a staff user; the last administrator is kept."""
    require_permission("user:delete")

    with tracer.start_as_current_span(
        "registry.user.remove",
        attributes={"user.id": body.user_id}
    ):
        result = user_domain.remove_staff_user(body.user_id, body.users)
        if not result.success:
            _raise_for_failure(result)

        logger.info("Staff user removed", extra={"user_id": body.user_id})
        return jsonify(_users_payload(result.value))
