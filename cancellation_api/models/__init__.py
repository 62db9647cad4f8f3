# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the credential cancellation tracker.
"""

# Base models
from .base import BaseEntity, BaseApiModel, generate_object_id

# Enumerations
from .enums import (
    StepStatus,
    StepName,
    RowStatusKind,
    CaseFilter,
    StaffRole,
    PermissionAction,
    PermissionResource,
    REQUEST_STEP
)

# Core entities
from .entities import (
    AdministrativeStep,
    VehicleRequest,
    NotificationConfig,
    Company,
    StaffUser,
    SystemSettings
)

# Request models
from .requests import (
    CreateVehicleRequestRequest,
    UpdateVehicleRequestRequest,
    StatusQuery,
    DashboardQuery,
    ReportQuery,
    DraftRequest,
    ValidateRequest,
    ApplyUpdateRequest,
    AddCompanyRequest,
    RemoveCompanyRequest,
    AddStaffUserRequest,
    UpdateStaffUserRequest,
    RemoveStaffUserRequest
)

# Response models
from .responses import (
    HalLink,
    ValidationResultResponse,
    ErrorResponse
)

__all__ = [
    # Base
    "BaseEntity",
    "BaseApiModel",
    "generate_object_id",

    # Enums
    "StepStatus",
    "StepName",
    "RowStatusKind",
    "CaseFilter",
    "StaffRole",
    "PermissionAction",
    "PermissionResource",
    "REQUEST_STEP",

    # Entities
    "AdministrativeStep",
    "VehicleRequest",
    "NotificationConfig",
    "Company",
    "StaffUser",
    "SystemSettings",

    # Requests
    "CreateVehicleRequestRequest",
    "UpdateVehicleRequestRequest",
    "StatusQuery",
    "DashboardQuery",
    "ReportQuery",
    "DraftRequest",
    "ValidateRequest",
    "ApplyUpdateRequest",
    "AddCompanyRequest",
    "RemoveCompanyRequest",
    "AddStaffUserRequest",
    "UpdateStaffUserRequest",
    "RemoveStaffUserRequest",

    # Responses
    "HalLink",
    "ValidationResultResponse",
    "ErrorResponse",
]
