# SPDX-License-Identifier: Apache-2.0

"""
Status derivation and due-date logic for cancellation requests.

This module contains pure functions that map a request's recorded data to
its lifecycle status and due-date facts. None of them reads the system
clock: the caller supplies the current date so results are reproducible.
Malformed or missing dates never raise, they yield None/False.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Collection, Dict, Iterable, Optional, Union

from ..constants import UNSPECIFIED_COMPANY
from ..models.entities import AdministrativeStep, NotificationConfig, VehicleRequest
from ..models.enums import RowStatusKind, StepStatus, REQUEST_STEP

DateLike = Union[date, datetime]

TERMINAL_CANCELLATION_STATUSES = (StepStatus.DONE, StepStatus.STOPPED)


@dataclass(frozen=True)
class ActiveStep:
    """Latest workflow step that has moved off pending."""
    step_name: str
    status: StepStatus

    def to_dict(self) -> Dict[str, str]:
        return {"step_name": self.step_name, "status": StepStatus(self.status).value}


@dataclass
class RequestStats:
    """Aggregate counts over a collection of requests."""
    total: int = 0
    completed: int = 0
    stopped: int = 0
    pending: int = 0
    overdue_count: int = 0
    by_company: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "stopped": self.stopped,
            "pending": self.pending,
            "overdue_count": self.overdue_count,
            "by_company": dict(self.by_company),
        }


@dataclass
class RequestStatusSummary:
    """Everything a table row or detail view needs about a request's status."""
    request_id: str
    due_date: Optional[date]
    days_remaining: Optional[int]
    is_overdue: bool
    is_warning: bool
    latest_step: ActiveStep
    row_status: RowStatusKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "days_remaining": self.days_remaining,
            "is_overdue": self.is_overdue,
            "is_warning": self.is_warning,
            "latest_step": self.latest_step.to_dict(),
            "row_status": RowStatusKind(self.row_status).value,
        }


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Parse a calendar date leniently.

    Accepts date and datetime objects and ISO 8601 strings (date or
    date-time). Anything else, including blank strings, yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _as_date(now: DateLike) -> date:
    """Reduce a caller-supplied instant to its calendar date."""
    if isinstance(now, datetime):
        return now.date()
    return now


def whole_days_between(start: DateLike, end: DateLike) -> int:
    """
    Number of calendar days from start to end.

    Negative when end is before start. Times of day are discarded, so the
    result equals the elapsed time rounded up to whole days.
    """
    return (_as_date(end) - _as_date(start)).days


def compute_due_date(correspondence: AdministrativeStep, settlement_days: int) -> Optional[date]:
    """
    Compute the financial settlement due date.

    Args:
        correspondence: Correspondence step of the request
        settlement_days: Days allowed for settlement

    Returns:
        The correspondence book date plus settlement_days, or None when the
        correspondence is not done or its date cannot be parsed
    """
    if correspondence.status != StepStatus.DONE:
        return None

    book_date = parse_calendar_date(correspondence.book_date)
    if book_date is None:
        return None

    try:
        return book_date + timedelta(days=settlement_days)
    except (OverflowError, TypeError):
        return None


def _is_terminal(request: VehicleRequest) -> bool:
    return request.cancellation.status in TERMINAL_CANCELLATION_STATUSES


def is_overdue(request: VehicleRequest, now: DateLike, notify_on_overdue: bool = True) -> bool:
    """
    Check if a request is past its due date with settlement still unpaid.

    Args:
        request: Request to check
        now: Current date (or datetime) supplied by the caller
        notify_on_overdue: Global switch; False suppresses overdue detection

    Returns:
        True if the due date has strictly passed and financial settlement
        is still pending on an open case
    """
    if _is_terminal(request):
        return False

    if not notify_on_overdue:
        return False

    due_date = compute_due_date(request.correspondence, request.settlement_days)
    if due_date is None:
        return False

    return due_date < _as_date(now) and request.financial_settlement.status == StepStatus.PENDING


def is_in_warning_window(request: VehicleRequest, now: DateLike, notify_before_days: int) -> bool:
    """
    Check if a request's due date falls within the upcoming warning window.

    The due day itself counts as a warning day; the day after is overdue.

    Args:
        request: Request to check
        now: Current date (or datetime) supplied by the caller
        notify_before_days: Size of the warning window in days

    Returns:
        True if 0 <= days until due <= notify_before_days and financial
        settlement is still pending on an open case
    """
    if _is_terminal(request):
        return False

    due_date = compute_due_date(request.correspondence, request.settlement_days)
    if due_date is None:
        return False

    diff_days = whole_days_between(now, due_date)
    return (
        0 <= diff_days <= notify_before_days
        and request.financial_settlement.status == StepStatus.PENDING
    )


def latest_active_step(request: VehicleRequest) -> ActiveStep:
    """
    Find the furthest workflow step that has moved off pending.

    Steps are scanned from cancellation back to correspondence; when all
    three are pending the sentinel ("request", pending) is returned.
    """
    for step_name, step in reversed(request.steps()):
        if step.status != StepStatus.PENDING:
            return ActiveStep(step_name=step_name.value, status=StepStatus(step.status))

    return ActiveStep(step_name=REQUEST_STEP, status=StepStatus.PENDING)


def classify_row(
    request: VehicleRequest,
    now: DateLike,
    config: Optional[NotificationConfig] = None
) -> RowStatusKind:
    """
    Classify a request for list and table rendering.

    Precedence, first match wins: stopped, completed, printed, overdue,
    warning, in progress.
    """
    config = config or NotificationConfig()

    if request.cancellation.status == StepStatus.STOPPED:
        return RowStatusKind.STOPPED

    if request.cancellation.status == StepStatus.DONE:
        return RowStatusKind.COMPLETED

    if latest_active_step(request).status == StepStatus.PRINTED:
        return RowStatusKind.PRINTED

    if is_overdue(request, now, config.notify_on_overdue):
        return RowStatusKind.OVERDUE

    if is_in_warning_window(request, now, config.notify_before_days):
        return RowStatusKind.WARNING

    return RowStatusKind.IN_PROGRESS


def describe_request(
    request: VehicleRequest,
    now: DateLike,
    config: Optional[NotificationConfig] = None
) -> RequestStatusSummary:
    """
    Build the full status summary of a single request.

    Args:
        request: Request to describe
        now: Current date (or datetime) supplied by the caller
        config: Notification configuration (defaults apply when omitted)

    Returns:
        RequestStatusSummary with due date, remaining days and classification
    """
    config = config or NotificationConfig()
    due_date = compute_due_date(request.correspondence, request.settlement_days)

    return RequestStatusSummary(
        request_id=request.id,
        due_date=due_date,
        days_remaining=whole_days_between(now, due_date) if due_date else None,
        is_overdue=is_overdue(request, now, config.notify_on_overdue),
        is_warning=is_in_warning_window(request, now, config.notify_before_days),
        latest_step=latest_active_step(request),
        row_status=classify_row(request, now, config)
    )


def company_bucket(company: Optional[str], known_companies: Optional[Collection[str]] = None) -> str:
    """
    Map a company name to its statistics bucket.

    Blank names, and names outside known_companies when that list is
    given, fall into the "unspecified" bucket.
    """
    name = (company or "").strip()
    if not name:
        return UNSPECIFIED_COMPANY

    if known_companies is not None and name not in known_companies:
        return UNSPECIFIED_COMPANY

    return name


def aggregate_stats(
    requests: Iterable[VehicleRequest],
    now: DateLike,
    config: Optional[NotificationConfig] = None,
    known_companies: Optional[Iterable[str]] = None
) -> RequestStats:
    """
    Fold a collection of requests into dashboard counts.

    Args:
        requests: Requests to count
        now: Evaluation date for overdue detection
        config: Notification configuration (defaults apply when omitted)
        known_companies: Registered company names; others count as unspecified

    Returns:
        RequestStats where pending == total - completed - stopped
    """
    config = config or NotificationConfig()
    known = set(known_companies) if known_companies is not None else None
    stats = RequestStats()

    for request in requests:
        stats.total += 1

        if request.cancellation.status == StepStatus.DONE:
            stats.completed += 1
        elif request.cancellation.status == StepStatus.STOPPED:
            stats.stopped += 1

        if is_overdue(request, now, config.notify_on_overdue):
            stats.overdue_count += 1

        bucket = company_bucket(request.company, known)
        stats.by_company[bucket] = stats.by_company.get(bucket, 0) + 1

    stats.pending = stats.total - stats.completed - stats.stopped
    return stats
