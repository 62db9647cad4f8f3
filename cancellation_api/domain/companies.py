# SPDX-License-Identifier: Apache-2.0

"""
Approved company registry rules.
"""

from typing import Iterable, List

from .results import CONFLICT, NOT_FOUND, ValidationResult, WorkflowResult
from ..models.entities import Company


def company_registered(name: str, existing: Iterable[Company]) -> bool:
    """Check whether a name is already registered, ignoring case and padding."""
    wanted = (name or "").strip().lower()
    return any(c.name.lower() == wanted for c in existing)


def validate_company_name(name: str, existing: Iterable[Company]) -> ValidationResult:
    """
    Validate a new company name against the registry.

    Names are trimmed and compared case-insensitively.
    """
    errors = []
    trimmed = (name or "").strip()

    if not trimmed:
        errors.append("Company name is required")
    elif len(trimmed) > 200:
        errors.append("Company name cannot exceed 200 characters")
    elif company_registered(trimmed, existing):
        errors.append(f"Company already registered: {trimmed}")

    return ValidationResult.from_messages(errors)


def add_company(name: str, companies: List[Company]) -> WorkflowResult[List[Company]]:
    """
    Register a company.

    Args:
        name: Company name as typed
        companies: Current registry

    Returns:
        WorkflowResult with the new registry (input list is not modified)
    """
    validation = validate_company_name(name, companies)
    if not validation.is_valid:
        if company_registered(name, companies):
            return WorkflowResult.failed(validation.errors[0], validation.errors, kind=CONFLICT)
        return WorkflowResult.failed("Company validation failed", validation.errors)

    return WorkflowResult(success=True, value=[*companies, Company(name=name.strip())])


def remove_company(company_id: str, companies: List[Company]) -> WorkflowResult[List[Company]]:
    """Remove a company from the registry by ID."""
    remaining = [c for c in companies if c.id != company_id]
    if len(remaining) == len(companies):
        return WorkflowResult.failed(f"Company not found: {company_id}", kind=NOT_FOUND)

    return WorkflowResult(success=True, value=remaining)


def company_names(companies: Iterable[Company]) -> List[str]:
    """Registered names sorted alphabetically, as offered by the request form."""
    return sorted((c.name for c in companies), key=str.lower)
