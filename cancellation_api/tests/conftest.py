# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from datetime import date
from typing import Any, Dict

# Set test environment before the application module is imported
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'

from cancellation_api.models.entities import (  # noqa: E402
    AdministrativeStep, Company, NotificationConfig, StaffUser, VehicleRequest
)
from cancellation_api.models.enums import StaffRole, StepStatus  # noqa: E402


def make_request(
    correspondence: Dict[str, Any] = None,
    financial: Dict[str, Any] = None,
    cancellation: Dict[str, Any] = None,
    **fields
) -> VehicleRequest:
    """Build a request with the given step states."""
    data = {
        "applicant_name": "Khalid Al Harthy",
        "vehicle_number": "12345 AB",
        "company": "Gulf Transport",
        "request_date": "2024-04-01",
        "settlement_days": 15,
    }
    data.update(fields)
    return VehicleRequest(
        correspondence=AdministrativeStep(**(correspondence or {})),
        financial_settlement=AdministrativeStep(**(financial or {})),
        cancellation=AdministrativeStep(**(cancellation or {})),
        **data
    )


@pytest.fixture
def request_factory():
    """Factory for requests with custom step states."""
    return make_request


@pytest.fixture
def new_request():
    """Request with all steps pending."""
    return make_request()


@pytest.fixture
def corresponded_request():
    """Request whose correspondence was done on 2024-04-10; due 2024-04-25."""
    return make_request(
        correspondence={"status": StepStatus.DONE, "book_number": "C-101", "book_date": "2024-04-10"}
    )


@pytest.fixture
def default_config():
    """Default notification configuration."""
    return NotificationConfig()


@pytest.fixture
def evaluation_day():
    """Fixed evaluation date past the sample due date."""
    return date(2024, 5, 10)


@pytest.fixture
def sample_companies():
    """Registered companies."""
    return [Company(name="Gulf Transport"), Company(name="Desert Logistics")]


@pytest.fixture
def sample_users():
    """Staff list with one administrator."""
    return [
        StaffUser(name="Admin User", username="admin", role=StaffRole.ADMIN),
        StaffUser(name="Data Entry", username="entry", role=StaffRole.EDITOR),
    ]


@pytest.fixture
def app():
    """Application configured for tests."""
    from cancellation_api.app import create_app

    return create_app({
        'ENVIRONMENT': 'test',
        'OTEL_ENABLED': False,
        'BASE_URL': 'https://api.example.com',
        'DEFAULT_SETTLEMENT_DAYS': 15,
        'NOTIFY_BEFORE_DAYS': 3,
        'NOTIFY_ON_OVERDUE': True,
        'DEFAULT_USER_ROLE': 'viewer',
    })


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
