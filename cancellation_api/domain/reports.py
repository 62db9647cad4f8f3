# SPDX-License-Identifier: Apache-2.0

"""
Report building and export logic.

This module contains pure functions that turn a snapshot of requests into
report statistics and CSV exports. Output is built in memory; writing or
sending it is left to the caller.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from .status import DateLike, classify_row, company_bucket, compute_due_date
from ..models.entities import NotificationConfig, VehicleRequest
from ..models.enums import RowStatusKind, StepStatus

# Excel needs the byte order mark to open UTF-8 CSV files correctly
CSV_BOM = "\ufeff"

REPORT_HEADERS = [
    "Serial", "Owner name", "Vehicle number", "Company",
    "Request date", "Final status", "Stop reason", "Notes",
]

TABLE_HEADERS = [
    "Applicant", "Vehicle number", "Company", "Status",
    "Due date", "Request date", "Final decision",
]

ROW_STATUS_LABELS = {
    RowStatusKind.STOPPED: "Stopped",
    RowStatusKind.COMPLETED: "Completed",
    RowStatusKind.PRINTED: "Awaiting signature",
    RowStatusKind.OVERDUE: "Overdue",
    RowStatusKind.WARNING: "Due soon",
    RowStatusKind.IN_PROGRESS: "In progress",
}

STEP_STATUS_LABELS = {
    StepStatus.PENDING: "Pending",
    StepStatus.PRINTED: "Printed, awaiting signature",
    StepStatus.DONE: "Done",
    StepStatus.STOPPED: "Stopped",
}


@dataclass
class ReportStats:
    """Statistics shown on the reports page."""
    total: int = 0
    completed: int = 0
    stopped: int = 0
    pending: int = 0
    financial_collected: int = 0
    completion_rate: int = 0
    companies: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "stopped": self.stopped,
            "pending": self.pending,
            "financial_collected": self.financial_collected,
            "completion_rate": self.completion_rate,
            "companies": [dict(c) for c in self.companies],
        }


def build_report_stats(requests: Iterable[VehicleRequest]) -> ReportStats:
    """
    Compute report statistics.

    Args:
        requests: Requests to report on

    Returns:
        ReportStats with per-company counts in order of first appearance
    """
    stats = ReportStats()
    company_counts: Dict[str, int] = {}

    for request in requests:
        stats.total += 1

        if request.cancellation.status == StepStatus.DONE:
            stats.completed += 1
        elif request.cancellation.status == StepStatus.STOPPED:
            stats.stopped += 1

        if request.financial_settlement.status == StepStatus.DONE:
            stats.financial_collected += 1

        bucket = company_bucket(request.company)
        company_counts[bucket] = company_counts.get(bucket, 0) + 1

    stats.pending = stats.total - stats.completed - stats.stopped
    stats.completion_rate = round(stats.completed / (stats.total or 1) * 100)
    stats.companies = [{"name": name, "count": count} for name, count in company_counts.items()]
    return stats


def final_status_label(request: VehicleRequest) -> str:
    """Label for the final decision of a request."""
    if request.cancellation.status == StepStatus.DONE:
        return "Fully completed"
    if request.cancellation.status == StepStatus.STOPPED:
        return "Stopped"
    return "In progress"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def build_export_rows(requests: Iterable[VehicleRequest]) -> List[List[str]]:
    """Build report export rows, numbered from 1, without the header."""
    rows = []
    for index, request in enumerate(requests, start=1):
        stop_reason = ""
        if request.cancellation.status == StepStatus.STOPPED:
            stop_reason = request.cancellation.stop_reason or ""

        rows.append([
            str(index),
            request.applicant_name,
            request.vehicle_number,
            request.company,
            _text(request.request_date),
            final_status_label(request),
            stop_reason,
            request.notes,
        ])
    return rows


def build_table_export_rows(
    requests: Iterable[VehicleRequest],
    now: DateLike,
    config: Optional[NotificationConfig] = None
) -> List[List[str]]:
    """Build request table export rows with the derived row status."""
    rows = []
    for request in requests:
        row_status = classify_row(request, now, config)
        due_date = compute_due_date(request.correspondence, request.settlement_days)

        if request.cancellation.status == StepStatus.STOPPED:
            decision = f"Stopped: {request.cancellation.stop_reason or ''}".rstrip()
        else:
            decision = STEP_STATUS_LABELS[StepStatus(request.cancellation.status)]

        rows.append([
            request.applicant_name,
            request.vehicle_number,
            request.company,
            ROW_STATUS_LABELS[row_status],
            _text(due_date),
            _text(request.request_date),
            decision,
        ])
    return rows


def render_csv(headers: List[str], rows: Iterable[List[str]]) -> str:
    """Render rows as UTF-8 CSV text prefixed with a byte order mark."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    content = output.getvalue()
    output.close()
    return CSV_BOM + content


def export_requests_csv(requests: Iterable[VehicleRequest]) -> str:
    """Render the report export as CSV."""
    return render_csv(REPORT_HEADERS, build_export_rows(requests))


def export_table_csv(
    requests: Iterable[VehicleRequest],
    now: DateLike,
    config: Optional[NotificationConfig] = None
) -> str:
    """Render the request table export as CSV."""
    return render_csv(TABLE_HEADERS, build_table_export_rows(requests, now, config))


def export_filename(prefix: str, today: date, extension: str = "csv") -> str:
    """Download filename stamped with the export date."""
    return f"{prefix}_{today.isoformat()}.{extension}"
