# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the credential cancellation tracker.
"""

from enum import Enum


class StepStatus(str, Enum):
    """Administrative step status enumeration."""
    PENDING = "pending"
    PRINTED = "printed"
    DONE = "done"
    STOPPED = "stopped"


# Labels written by the legacy front end, kept so stored records load as-is.
LEGACY_STEP_STATUS_LABELS = {
    "قيد الإجراء": StepStatus.PENDING,
    "تم طباعة الكتاب (قيد التوقيع)": StepStatus.PRINTED,
    "تم": StepStatus.DONE,
    "تم إيقاف المعاملة": StepStatus.STOPPED,
}


class StepName(str, Enum):
    """Workflow stages in procedural order."""
    CORRESPONDENCE = "correspondence"
    FINANCIAL_SETTLEMENT = "financial_settlement"
    CANCELLATION = "cancellation"


# Sentinel step name reported when no step has moved yet
REQUEST_STEP = "request"


class RowStatusKind(str, Enum):
    """Derived classification of a request for tables and dashboards."""
    STOPPED = "stopped"
    COMPLETED = "completed"
    PRINTED = "printed"
    OVERDUE = "overdue"
    WARNING = "warning"
    IN_PROGRESS = "in_progress"


class CaseFilter(str, Enum):
    """Status filter applied to the cancellation step."""
    ALL = "all"
    PENDING = "pending"
    DONE = "done"
    STOPPED = "stopped"


class StaffRole(str, Enum):
    """Staff user roles."""
    ADMIN = "admin"
    SPECIALIST = "specialist"
    EDITOR = "editor"
    VIEWER = "viewer"


class PermissionAction(str, Enum):
    """Available permission actions."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"


class PermissionResource(str, Enum):
    """Available permission resources."""
    REQUEST = "request"
    COMPANY = "company"
    USER = "user"
    SETTINGS = "settings"
    REPORT = "report"
