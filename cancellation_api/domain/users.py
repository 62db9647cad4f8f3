# SPDX-License-Identifier: Apache-2.0

"""
Staff user management and role-based permission logic.

This module contains pure functions for staff registry changes and
permission checks. Every function returns a new user list rather than
mutating its input.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .results import CONFLICT, INVALID, NOT_FOUND, ValidationResult, WorkflowResult
from ..models.entities import StaffUser
from ..models.enums import PermissionAction, PermissionResource, StaffRole

# Roles allowed to manage the whole system; at least one must remain
MANAGING_ROLES = (StaffRole.ADMIN, StaffRole.SPECIALIST)

ROLE_LABELS = {
    StaffRole.ADMIN: "System administrator",
    StaffRole.SPECIALIST: "Specialist (full permissions)",
    StaffRole.EDITOR: "Data entry",
    StaffRole.VIEWER: "Read only",
}

_ALL_PERMISSIONS = [
    f"{resource.value}:{action.value}"
    for resource in PermissionResource
    for action in PermissionAction
]

ROLE_PERMISSIONS: Dict[StaffRole, List[str]] = {
    StaffRole.ADMIN: _ALL_PERMISSIONS,
    StaffRole.SPECIALIST: _ALL_PERMISSIONS,
    StaffRole.EDITOR: [
        "request:create",
        "request:read",
        "request:update",
        "request:export",
        "company:read",
        "report:read",
        "report:export",
    ],
    StaffRole.VIEWER: [
        "request:read",
        "company:read",
        "report:read",
    ],
}


@dataclass
class AuthorizationResult:
    """Result of an authorization check."""
    allowed: bool
    reason: Optional[str] = None
    missing_permissions: List[str] = field(default_factory=list)


def role_label(role: str) -> str:
    """Human-readable role name; unknown roles are returned unchanged."""
    try:
        return ROLE_LABELS[StaffRole(role)]
    except ValueError:
        return role


def permissions_for_role(role: Optional[str]) -> List[str]:
    """
    Permission list granted to a role.

    Unknown or missing roles get no permissions.
    """
    try:
        return list(ROLE_PERMISSIONS[StaffRole(role)])
    except ValueError:
        return []


def check_permission(permissions: Iterable[str], required_permission: str) -> AuthorizationResult:
    """
    Check if a permission list grants a specific permission.

    Args:
        permissions: Granted permission strings
        required_permission: Permission string to check

    Returns:
        AuthorizationResult indicating if permission is granted
    """
    if required_permission in set(permissions):
        return AuthorizationResult(allowed=True)

    return AuthorizationResult(
        allowed=False,
        reason=f"Missing required permission: {required_permission}",
        missing_permissions=[required_permission]
    )


def _managing_count(users: Iterable[StaffUser]) -> int:
    return sum(1 for u in users if u.role in MANAGING_ROLES)


def username_taken(username: str, users: Iterable[StaffUser], exclude_id: Optional[str] = None) -> bool:
    """Check whether a login name is in use by another user, ignoring case."""
    wanted = (username or "").strip().lower()
    return any(u.id != exclude_id and u.username.lower() == wanted for u in users)


def validate_staff_user(
    name: str,
    username: str,
    users: Iterable[StaffUser],
    exclude_id: Optional[str] = None
) -> ValidationResult:
    """
    Validate staff user fields.

    Args:
        name: Full name
        username: Login name, unique case-insensitively
        users: Current registry
        exclude_id: ID of the user being edited, ignored in the uniqueness check

    Returns:
        ValidationResult with validation status and errors
    """
    errors = []

    if not (name or "").strip() or not (username or "").strip():
        errors.append("Name and username are required")
    elif username_taken(username, users, exclude_id):
        errors.append(f"Username already in use: {username.strip()}")

    return ValidationResult.from_messages(errors)


def add_staff_user(
    name: str,
    username: str,
    role: StaffRole,
    users: List[StaffUser]
) -> WorkflowResult[List[StaffUser]]:
    """Register a new staff user."""
    validation = validate_staff_user(name, username, users)
    if not validation.is_valid:
        if (name or "").strip() and username_taken(username, users):
            return WorkflowResult.failed(validation.errors[0], validation.errors, kind=CONFLICT)
        return WorkflowResult.failed("User validation failed", validation.errors)

    new_user = StaffUser(name=name, username=username, role=role)
    return WorkflowResult(success=True, value=[*users, new_user])


def update_staff_user(
    user_id: str,
    users: List[StaffUser],
    name: Optional[str] = None,
    username: Optional[str] = None,
    role: Optional[StaffRole] = None
) -> WorkflowResult[List[StaffUser]]:
    """
    Edit a staff user's name, username or role.

    Demoting the last admin or specialist is refused.
    """
    target = next((u for u in users if u.id == user_id), None)
    if target is None:
        return WorkflowResult.failed(f"User not found: {user_id}", kind=NOT_FOUND)

    new_name = name if name is not None else target.name
    new_username = username if username is not None else target.username
    new_role = StaffRole(role) if role is not None else StaffRole(target.role)

    validation = validate_staff_user(new_name, new_username, users, exclude_id=user_id)
    errors = list(validation.errors)

    if target.role in MANAGING_ROLES and new_role not in MANAGING_ROLES and _managing_count(users) <= 1:
        errors.append("Cannot demote the last administrator")

    if errors:
        taken = new_name.strip() and username_taken(new_username, users, exclude_id=user_id)
        kind = CONFLICT if taken else INVALID
        return WorkflowResult.failed("User update failed", errors, kind=kind)

    updated = target.model_copy(update={
        "name": new_name.strip(),
        "username": new_username.strip(),
        "role": new_role.value,
    })
    updated.update_timestamp()

    return WorkflowResult(success=True, value=[updated if u.id == user_id else u for u in users])


def remove_staff_user(user_id: str, users: List[StaffUser]) -> WorkflowResult[List[StaffUser]]:
    """
    Remove a staff user.

    The last admin or specialist cannot be removed.
    """
    target = next((u for u in users if u.id == user_id), None)
    if target is None:
        return WorkflowResult.failed(f"User not found: {user_id}", kind=NOT_FOUND)

    if target.role in MANAGING_ROLES and _managing_count(users) <= 1:
        return WorkflowResult.failed(
            "Cannot remove the last administrator",
            ["At least one admin or specialist must remain"]
        )

    return WorkflowResult(success=True, value=[u for u in users if u.id != user_id])
