# SPDX-License-Identifier: Apache-2.0

"""
Cancellation request workflow logic.

This module contains pure functions for drafting, validating, updating,
filtering and alerting on vehicle cancellation requests.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from .results import ValidationResult, WorkflowResult
from .status import (
    DateLike, compute_due_date, is_in_warning_window, is_overdue,
    parse_calendar_date, whole_days_between
)
from ..constants import RECENT_REQUESTS_LIMIT
from ..models.entities import NotificationConfig, SystemSettings, VehicleRequest
from ..models.enums import CaseFilter, RowStatusKind, StepName, StepStatus
from ..models.requests import CreateVehicleRequestRequest, UpdateVehicleRequestRequest

# Rank of each status along the pending -> printed -> done track
STEP_PROGRESS = {
    StepStatus.PENDING: 0,
    StepStatus.PRINTED: 1,
    StepStatus.DONE: 2,
}

STEP_LABELS = {
    StepName.CORRESPONDENCE: "Correspondence",
    StepName.FINANCIAL_SETTLEMENT: "Financial settlement",
    StepName.CANCELLATION: "Cancellation",
}


@dataclass
class RequestFilters:
    """Filters for request listings."""
    search_term: Optional[str] = None
    status: CaseFilter = CaseFilter.ALL
    company: Optional[str] = None


@dataclass
class DueAlert:
    """A request that needs follow-up because of its due date."""
    request_id: str
    applicant_name: str
    vehicle_number: str
    kind: RowStatusKind
    due_date: date
    days_remaining: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "applicant_name": self.applicant_name,
            "vehicle_number": self.vehicle_number,
            "kind": RowStatusKind(self.kind).value,
            "due_date": self.due_date.isoformat(),
            "days_remaining": self.days_remaining,
        }


def draft_vehicle_request(
    payload: CreateVehicleRequestRequest,
    settings: Optional[SystemSettings] = None
) -> VehicleRequest:
    """
    Build a new request with every step pending.

    The settlement window is copied from the current settings so later
    changes to the default do not affect this request.

    Args:
        payload: Validated creation payload
        settings: Current system settings (defaults apply when omitted)

    Returns:
        New VehicleRequest
    """
    settings = settings or SystemSettings()

    return VehicleRequest(
        applicant_name=payload.applicant_name,
        vehicle_number=payload.vehicle_number,
        ownership=payload.ownership,
        company=payload.company.strip(),
        request_date=payload.request_date,
        notes=payload.notes,
        settlement_days=settings.default_settlement_days
    )


def validate_vehicle_request(request: VehicleRequest) -> ValidationResult:
    """
    Validate a request against the editing rules.

    Args:
        request: Request to validate

    Returns:
        ValidationResult with blocking errors and advisory warnings
    """
    errors = []
    warnings = []

    if not request.applicant_name.strip():
        errors.append("Applicant name is required")

    if not request.vehicle_number.strip():
        errors.append("Vehicle number is required")

    for step_name, step in request.steps():
        label = STEP_LABELS[step_name]

        if step.status == StepStatus.STOPPED and step_name != StepName.CANCELLATION:
            errors.append(f"{label} step cannot be stopped; only the cancellation step can")

        if step.status == StepStatus.DONE:
            if not (step.book_number or "").strip():
                warnings.append(f"{label} step is done but has no book number")
            if step.book_date is None or step.book_date == "":
                warnings.append(f"{label} step is done but has no book date")
            elif parse_calendar_date(step.book_date) is None:
                warnings.append(f"{label} book date is not a valid date: {step.book_date}")

    if request.cancellation.status == StepStatus.STOPPED:
        if not (request.cancellation.stop_reason or "").strip():
            errors.append("A stop reason is required when the request is stopped")
    else:
        # Stopping short-circuits the workflow, so sequence only matters otherwise
        steps = request.steps()
        for (earlier_name, earlier), (later_name, later) in zip(steps, steps[1:]):
            if earlier.status == StepStatus.PENDING and later.status != StepStatus.PENDING:
                warnings.append(
                    f"{STEP_LABELS[later_name]} step moved while "
                    f"{STEP_LABELS[earlier_name].lower()} step is still pending"
                )

    if request.request_date not in (None, "") and parse_calendar_date(request.request_date) is None:
        warnings.append(f"Request date is not a valid date: {request.request_date}")

    return ValidationResult.from_messages(errors, warnings)


def validate_step_transition(
    step_name: StepName,
    current_status: StepStatus,
    new_status: StepStatus
) -> ValidationResult:
    """
    Validate a status change of a single workflow step.

    Steps only move forward along pending -> printed -> done. The
    cancellation step may additionally be stopped from any state, and a
    stopped case cannot be resumed.

    Args:
        step_name: Step being changed
        current_status: Current status
        new_status: Desired status

    Returns:
        ValidationResult with validation status and errors
    """
    step_name = StepName(step_name)
    current_status = StepStatus(current_status)
    new_status = StepStatus(new_status)
    label = STEP_LABELS[step_name]
    errors = []

    if current_status == new_status:
        return ValidationResult(is_valid=True)

    if new_status == StepStatus.STOPPED:
        if step_name != StepName.CANCELLATION:
            errors.append(f"{label} step cannot be stopped; only the cancellation step can")
    elif current_status == StepStatus.STOPPED:
        errors.append(f"{label} step is stopped and cannot change to {new_status.value}")
    elif STEP_PROGRESS[new_status] < STEP_PROGRESS[current_status]:
        errors.append(
            f"Invalid status transition for {label.lower()} step "
            f"from {current_status.value} to {new_status.value}"
        )

    return ValidationResult.from_messages(errors)


def apply_request_update(
    request: VehicleRequest,
    update: UpdateVehicleRequestRequest
) -> WorkflowResult[VehicleRequest]:
    """
    Apply an edit to a request.

    Args:
        request: Current request
        update: Fields to change; unset fields are kept

    Returns:
        WorkflowResult with the updated request or errors
    """
    changes = update.model_dump(exclude_unset=True)
    transition_errors = []

    for step_name in StepName:
        new_step = changes.get(step_name.value)
        if new_step is None:
            continue

        # Partial step edits keep the stored book number, date and reason
        current = request.get_step(step_name)
        merged = {**current.model_dump(), **new_step}
        changes[step_name.value] = merged

        transition = validate_step_transition(
            step_name,
            current.status,
            merged["status"]
        )
        transition_errors.extend(transition.errors)

    if transition_errors:
        return WorkflowResult.failed("Step transition validation failed", transition_errors)

    # Identity and the settlement window never change after creation
    data = request.model_dump()
    data.update({key: value for key, value in changes.items() if value is not None})
    data["id"] = request.id
    data["settlement_days"] = request.settlement_days
    data["created_at"] = request.created_at

    updated = VehicleRequest.model_validate(data)
    updated.update_timestamp()

    validation = validate_vehicle_request(updated)
    if not validation.is_valid:
        return WorkflowResult.failed("Request validation failed", validation.errors)

    return WorkflowResult(success=True, value=updated, warnings=validation.warnings)


def matches_case_filter(request: VehicleRequest, case_filter: CaseFilter) -> bool:
    """Check the cancellation step against a listing status filter."""
    case_filter = CaseFilter(case_filter)
    status = request.cancellation.status

    if case_filter == CaseFilter.ALL:
        return True
    if case_filter == CaseFilter.DONE:
        return status == StepStatus.DONE
    if case_filter == CaseFilter.STOPPED:
        return status == StepStatus.STOPPED
    return status not in (StepStatus.DONE, StepStatus.STOPPED)


def filter_requests(
    requests: Iterable[VehicleRequest],
    filters: RequestFilters
) -> List[VehicleRequest]:
    """
    Filter requests based on criteria.

    Args:
        requests: Requests to filter
        filters: Filter criteria

    Returns:
        Filtered list of requests in their original order
    """
    filtered = list(requests)

    # Search applicant name and plate number
    if filters.search_term and filters.search_term.strip():
        term = filters.search_term.strip().lower()
        filtered = [
            r for r in filtered
            if term in r.applicant_name.lower() or term in r.vehicle_number.lower()
        ]

    filtered = [r for r in filtered if matches_case_filter(r, filters.status)]

    if filters.company:
        company = filters.company.strip().lower()
        filtered = [r for r in filtered if r.company.strip().lower() == company]

    return filtered


def recent_requests(
    requests: Iterable[VehicleRequest],
    limit: int = RECENT_REQUESTS_LIMIT
) -> List[VehicleRequest]:
    """
    Return the most recently submitted requests.

    Requests without a parseable submission date sort last.
    """
    def sort_key(request: VehicleRequest):
        submitted = parse_calendar_date(request.request_date)
        return (submitted is not None, submitted or date.min)

    return sorted(requests, key=sort_key, reverse=True)[:limit]


def collect_due_alerts(
    requests: Iterable[VehicleRequest],
    now: DateLike,
    config: Optional[NotificationConfig] = None,
    already_notified: Iterable[str] = ()
) -> List[DueAlert]:
    """
    Collect overdue and warning requests that have not been notified yet.

    Args:
        requests: Requests to scan
        now: Current date supplied by the caller
        config: Notification configuration (defaults apply when omitted)
        already_notified: IDs of requests the client has already alerted on

    Returns:
        List of DueAlert, overdue first, then by due date
    """
    config = config or NotificationConfig()
    notified = set(already_notified)
    alerts = []

    for request in requests:
        if request.id in notified:
            continue

        if is_overdue(request, now, config.notify_on_overdue):
            kind = RowStatusKind.OVERDUE
        elif is_in_warning_window(request, now, config.notify_before_days):
            kind = RowStatusKind.WARNING
        else:
            continue

        due_date = compute_due_date(request.correspondence, request.settlement_days)
        alerts.append(DueAlert(
            request_id=request.id,
            applicant_name=request.applicant_name,
            vehicle_number=request.vehicle_number,
            kind=kind,
            due_date=due_date,
            days_remaining=whole_days_between(now, due_date)
        ))

    alerts.sort(key=lambda a: (a.kind != RowStatusKind.OVERDUE, a.due_date))
    return alerts
