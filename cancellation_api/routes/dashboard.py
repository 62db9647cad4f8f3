# SPDX-License-Identifier: Apache-2.0

"""
Dashboard endpoint: headline counts, latest requests and due alerts.
"""

from flask import jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain import cases as case_domain
from ..domain import status as status_domain
from ..models.requests import DashboardQuery
from ..utils.request import evaluation_date, notification_config

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

dashboard_tag = Tag(name="Dashboard", description="Request overview")
dashboard_bp = APIBlueprint(
    'dashboard',
    __name__,
    url_prefix='/api',
    abp_tags=[dashboard_tag]
)


@dashboard_bp.post('/dashboard')
def dashboard(body: DashboardQuery):
    """
    Build the dashboard for a snapshot of requests.

    Counts are taken over the whole snapshot; search and status filters
    only narrow the recent requests list.
    """
    now = evaluation_date(body.now)
    config = notification_config(body.notifications)

    with tracer.start_as_current_span(
        "dashboard.build",
        attributes={"requests.count": len(body.requests)}
    ) as span:
        stats = status_domain.aggregate_stats(body.requests, now, config, body.companies)

        filters = case_domain.RequestFilters(search_term=body.search, status=body.status)
        recent = case_domain.recent_requests(case_domain.filter_requests(body.requests, filters))

        alerts = case_domain.collect_due_alerts(body.requests, now, config, body.notified_ids)
        span.set_attribute("dashboard.alerts", len(alerts))

        if alerts:
            logger.info(
                "Due alerts raised",
                extra={
                    "alert_count": len(alerts),
                    "overdue_count": stats.overdue_count,
                    "evaluation_date": now.isoformat()
                }
            )

        return jsonify({
            "now": now.isoformat(),
            "stats": stats.to_dict(),
            "recent": [
                {
                    **r.model_dump(mode="json"),
                    "status": status_domain.describe_request(r, now, config).to_dict()
                }
                for r in recent
            ],
            "alerts": [a.to_dict() for a in alerts],
            "notifications": config.model_dump(mode="json")
        })
