# SPDX-License-Identifier: Apache-2.0

"""
Report endpoints.

Statistics for the reports page and CSV downloads of a request snapshot.
"""

from flask import Response, jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain import reports as report_domain
from ..domain import status as status_domain
from ..models.entities import SystemSettings
from ..models.requests import ReportQuery
from ..models.responses import ErrorResponse
from ..utils.request import evaluation_date, notification_config, require_permission

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

reports_tag = Tag(name="Reports", description="Statistics and CSV exports")
reports_bp = APIBlueprint(
    'reports',
    __name__,
    url_prefix='/api/reports',
    abp_tags=[reports_tag]
)

EXPORT_KINDS = {
    "report": "cancellation_report",
    "table": "cancellation_requests",
}


@reports_bp.post('/stats', responses={403: ErrorResponse})
def report_stats(body: ReportQuery):
    """Report page statistics alongside the dashboard counts."""
    require_permission("report:read")

    now = evaluation_date(body.now)
    config = notification_config(body.notifications)
    settings = body.settings or SystemSettings()

    with tracer.start_as_current_span(
        "reports.stats",
        attributes={"requests.count": len(body.requests)}
    ):
        report = report_domain.build_report_stats(body.requests)
        stats = status_domain.aggregate_stats(body.requests, now, config, body.companies)

        return jsonify({
            "now": now.isoformat(),
            "header": {
                "department_name": settings.department_name,
                "section_name": settings.section_name,
                "branch_name": settings.branch_name
            },
            "report": report.to_dict(),
            "stats": stats.to_dict()
        })


@reports_bp.post('/export', responses={403: ErrorResponse})
def export_report(body: ReportQuery):
    """
    Download a snapshot of requests as CSV.

    The "kind" field picks the layout: "report" for the final decision
    export, "table" for the request table with row status and due date.
    """
    require_permission("report:export")

    now = evaluation_date(body.now)
    config = notification_config(body.notifications)

    with tracer.start_as_current_span(
        "reports.export",
        attributes={"requests.count": len(body.requests), "export.kind": body.kind}
    ):
        if body.kind == "table":
            content = report_domain.export_table_csv(body.requests, now, config)
        else:
            content = report_domain.export_requests_csv(body.requests)

        filename = report_domain.export_filename(EXPORT_KINDS[body.kind], now)

        logger.info(
            "Requests exported",
            extra={
                "export_kind": body.kind,
                "record_count": len(body.requests),
                "export_filename": filename
            }
        )

        return Response(
            content.encode("utf-8"),
            mimetype='text/csv',
            headers={
                'Content-Disposition': f'attachment; filename="{filename}"'
            }
        )
