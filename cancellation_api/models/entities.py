# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the credential cancellation tracker.
"""

from datetime import date
from typing import List, Optional, Tuple, Union
from pydantic import BaseModel, Field, field_validator, ConfigDict
from .base import BaseEntity
from .enums import StepStatus, StepName, StaffRole, LEGACY_STEP_STATUS_LABELS
from ..constants import (
    DEFAULT_SETTLEMENT_DAYS,
    DEFAULT_NOTIFY_BEFORE_DAYS,
    DEFAULT_DEPARTMENT_NAME,
    DEFAULT_SECTION_NAME,
    DEFAULT_BRANCH_NAME,
)


class AdministrativeStep(BaseModel):
    """One stage of the cancellation workflow."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True
    )

    status: StepStatus = Field(default=StepStatus.PENDING, description="Step status")
    book_number: Optional[str] = Field(None, alias="bookNumber", description="Official document number")
    # Kept as received; the status engine parses it leniently
    book_date: Optional[Union[str, date]] = Field(None, alias="bookDate", description="Official document date")
    stop_reason: Optional[str] = Field(None, alias="stopReason", description="Justification for a stopped case")

    @field_validator('status', mode='before')
    @classmethod
    def normalize_legacy_status(cls, v):
        """Accept status labels stored by the legacy front end."""
        if isinstance(v, str) and v in LEGACY_STEP_STATUS_LABELS:
            return LEGACY_STEP_STATUS_LABELS[v]
        return v

    def is_pending(self) -> bool:
        """Check if the step has not moved yet."""
        return self.status == StepStatus.PENDING

    def is_done(self) -> bool:
        """Check if the step is completed."""
        return self.status == StepStatus.DONE


class VehicleRequest(BaseEntity):
    """A tracked credential cancellation case for one vehicle."""

    applicant_name: str = Field(default="", alias="applicantName", description="Applicant full name")
    vehicle_number: str = Field(default="", alias="vehicleNumber", description="Vehicle plate number")
    ownership: str = Field(default="", description="Ownership type")
    company: str = Field(default="", description="Associated approved company")
    notes: str = Field(default="", description="Free-text notes")
    request_date: Optional[Union[str, date]] = Field(None, alias="requestDate", description="Submission date")
    settlement_days: int = Field(
        default=DEFAULT_SETTLEMENT_DAYS,
        ge=0,
        alias="settlementDays",
        description="Days allowed for financial settlement, fixed at creation"
    )
    correspondence: AdministrativeStep = Field(default_factory=AdministrativeStep)
    financial_settlement: AdministrativeStep = Field(
        default_factory=AdministrativeStep, alias="financialSettlement"
    )
    cancellation: AdministrativeStep = Field(default_factory=AdministrativeStep)

    @field_validator('applicant_name', 'vehicle_number', 'ownership', 'company', 'notes', mode='before')
    @classmethod
    def coerce_text(cls, v):
        """Treat missing text fields as empty strings."""
        return "" if v is None else v

    def steps(self) -> Tuple[Tuple[StepName, AdministrativeStep], ...]:
        """Return the workflow steps in procedural order."""
        return (
            (StepName.CORRESPONDENCE, self.correspondence),
            (StepName.FINANCIAL_SETTLEMENT, self.financial_settlement),
            (StepName.CANCELLATION, self.cancellation),
        )

    def get_step(self, step_name: StepName) -> AdministrativeStep:
        """Look up a step by name."""
        return getattr(self, StepName(step_name).value)

    def is_closed(self) -> bool:
        """Check if the final decision has been reached either way."""
        return self.cancellation.status in (StepStatus.DONE, StepStatus.STOPPED)


class NotificationConfig(BaseModel):
    """Notification settings consumed by the status engine."""

    model_config = ConfigDict(populate_by_name=True)

    notify_before_days: int = Field(
        default=DEFAULT_NOTIFY_BEFORE_DAYS, ge=0, alias="notifyBeforeDays", description="Warning window in days"
    )
    notify_on_overdue: bool = Field(default=True, alias="notifyOnOverdue", description="Flag overdue requests")
    enable_browser: bool = Field(default=True, alias="enableBrowser", description="Client-side notifications")


class Company(BaseEntity):
    """Approved company a request can be associated with."""

    name: str = Field(..., min_length=1, max_length=200, description="Company name")
    added_date: date = Field(default_factory=date.today, alias="addedDate", description="Registration date")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate company name."""
        if not v.strip():
            raise ValueError('Company name cannot be empty')
        return v.strip()


class StaffUser(BaseEntity):
    """Staff member with access to the tracker."""

    name: str = Field(..., min_length=1, max_length=200, description="Staff member full name")
    username: str = Field(..., min_length=1, max_length=100, description="Login name")
    role: StaffRole = Field(default=StaffRole.VIEWER, description="Access role")
    added_date: date = Field(default_factory=date.today, alias="addedDate", description="Registration date")

    @field_validator('name', 'username')
    @classmethod
    def validate_not_blank(cls, v):
        """Validate required text fields."""
        if not v.strip():
            raise ValueError('Name and username cannot be empty')
        return v.strip()


class SystemSettings(BaseModel):
    """Department-wide settings."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    department_name: str = Field(default=DEFAULT_DEPARTMENT_NAME, alias="departmentName")
    section_name: str = Field(default=DEFAULT_SECTION_NAME, alias="sectionName")
    branch_name: str = Field(default=DEFAULT_BRANCH_NAME, alias="branchName")
    default_settlement_days: int = Field(
        default=DEFAULT_SETTLEMENT_DAYS, ge=0, alias="defaultSettlementDays"
    )
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    users: List[StaffUser] = Field(default_factory=list)
