# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request utilities shared by the route handlers.
"""

from datetime import date
from typing import List, Optional

from flask import current_app, request
import logging

from ..domain.users import check_permission, permissions_for_role
from ..middleware.error_handler import AuthorizationException
from ..models.entities import NotificationConfig

logger = logging.getLogger(__name__)

USER_ROLE_HEADER = "X-User-Role"


def evaluation_date(now: Optional[date]) -> date:
    """Date to evaluate against; the server's current date when omitted."""
    return now if now is not None else date.today()


def notification_config(override: Optional[NotificationConfig]) -> NotificationConfig:
    """Notification configuration from the payload, or the app defaults."""
    if override is not None:
        return override

    return NotificationConfig(
        notify_before_days=current_app.config['NOTIFY_BEFORE_DAYS'],
        notify_on_overdue=current_app.config['NOTIFY_ON_OVERDUE']
    )


def current_role() -> str:
    """Staff role of the caller, taken from the X-User-Role header."""
    role = request.headers.get(USER_ROLE_HEADER)
    if not role:
        return current_app.config['DEFAULT_USER_ROLE']
    return role.strip().lower()


def current_permissions() -> List[str]:
    """Permissions granted to the caller's role."""
    return permissions_for_role(current_role())


def require_permission(required_permission: str) -> None:
    """
    Stop the request unless the caller's role grants a permission.

    Raises:
        AuthorizationException: If the permission is missing
    """
    result = check_permission(current_permissions(), required_permission)
    if not result.allowed:
        logger.warning(
            "Permission denied",
            extra={
                "role": current_role(),
                "required_permission": required_permission,
                "path": request.path
            }
        )
        raise AuthorizationException(result.reason)
