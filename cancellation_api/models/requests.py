# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.
"""

from datetime import date
from typing import List, Literal, Optional, Union
from pydantic import Field, field_validator
from .base import BaseApiModel
from .entities import (
    AdministrativeStep,
    Company,
    NotificationConfig,
    StaffUser,
    SystemSettings,
    VehicleRequest,
)
from .enums import CaseFilter, StaffRole


class CreateVehicleRequestRequest(BaseApiModel):
    """Request model for drafting a new cancellation request."""

    applicant_name: str = Field(..., min_length=1, max_length=200, alias="applicantName")
    vehicle_number: str = Field(..., min_length=1, max_length=50, alias="vehicleNumber")
    ownership: str = Field(default="", max_length=200)
    company: str = Field(default="", max_length=200)
    request_date: Optional[Union[str, date]] = Field(None, alias="requestDate")
    notes: str = Field(default="", max_length=2000)

    @field_validator('applicant_name', 'vehicle_number')
    @classmethod
    def validate_not_blank(cls, v):
        """Validate required text fields."""
        if not v.strip():
            raise ValueError('Applicant name and vehicle number cannot be empty')
        return v.strip()


class UpdateVehicleRequestRequest(BaseApiModel):
    """
    Request model for editing a cancellation request.

    Settlement days are deliberately absent: they are fixed when the
    request is drafted.
    """

    applicant_name: Optional[str] = Field(None, min_length=1, max_length=200, alias="applicantName")
    vehicle_number: Optional[str] = Field(None, min_length=1, max_length=50, alias="vehicleNumber")
    ownership: Optional[str] = Field(None, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    request_date: Optional[Union[str, date]] = Field(None, alias="requestDate")
    notes: Optional[str] = Field(None, max_length=2000)
    correspondence: Optional[AdministrativeStep] = None
    financial_settlement: Optional[AdministrativeStep] = Field(None, alias="financialSettlement")
    cancellation: Optional[AdministrativeStep] = None


class StatusQuery(BaseApiModel):
    """Snapshot of requests to evaluate at a given date."""

    requests: List[VehicleRequest] = Field(default_factory=list, description="Requests to evaluate")
    now: Optional[date] = Field(None, description="Evaluation date; defaults to today")
    notifications: Optional[NotificationConfig] = Field(None, description="Notification configuration")
    search: Optional[str] = Field(None, max_length=200, description="Search term for name or plate")
    status: CaseFilter = Field(default=CaseFilter.ALL, description="Cancellation status filter")


class DashboardQuery(StatusQuery):
    """Dashboard snapshot with already-notified request IDs."""

    notified_ids: List[str] = Field(default_factory=list, alias="notifiedIds")
    companies: Optional[List[str]] = Field(None, description="Registered company names")


class ReportQuery(BaseApiModel):
    """Snapshot of requests to build a report for."""

    requests: List[VehicleRequest] = Field(default_factory=list)
    now: Optional[date] = None
    notifications: Optional[NotificationConfig] = None
    companies: Optional[List[str]] = Field(None, description="Registered company names")
    settings: Optional[SystemSettings] = None
    kind: Literal["report", "table"] = Field(default="report", description="Export layout")


class DraftRequest(BaseApiModel):
    """Payload for drafting a request with the current settings."""

    request: CreateVehicleRequestRequest
    settings: Optional[SystemSettings] = None


class ValidateRequest(BaseApiModel):
    """Payload for validating a stored or edited request."""

    request: VehicleRequest
    update: Optional[UpdateVehicleRequestRequest] = None


class ApplyUpdateRequest(BaseApiModel):
    """Payload for applying an edit to a stored request."""

    request: VehicleRequest
    update: UpdateVehicleRequestRequest


class AddCompanyRequest(BaseApiModel):
    """Payload for registering a company."""

    name: str = Field(..., max_length=500)
    companies: List[Company] = Field(default_factory=list, description="Current registry")


class RemoveCompanyRequest(BaseApiModel):
    """Payload for removing a company."""

    company_id: str = Field(..., alias="companyId")
    companies: List[Company] = Field(default_factory=list)


class AddStaffUserRequest(BaseApiModel):
    """Payload for registering a staff user."""

    name: str = Field(..., max_length=200)
    username: str = Field(..., max_length=100)
    role: StaffRole = Field(default=StaffRole.VIEWER)
    users: List[StaffUser] = Field(default_factory=list, description="Current staff list")


class UpdateStaffUserRequest(BaseApiModel):
    """Payload for editing a staff user."""

    user_id: str = Field(..., alias="userId")
    name: Optional[str] = Field(None, max_length=200)
    username: Optional[str] = Field(None, max_length=100)
    role: Optional[StaffRole] = None
    users: List[StaffUser] = Field(default_factory=list)


class RemoveStaffUserRequest(BaseApiModel):
    """Payload for removing a staff user."""

    user_id: str = Field(..., alias="userId")
    users: List[StaffUser] = Field(default_factory=list)
