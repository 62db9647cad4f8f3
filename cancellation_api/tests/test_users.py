# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for staff users and role permissions.
"""

import pytest

from cancellation_api.domain.users import (
    add_staff_user, check_permission, permissions_for_role, remove_staff_user,
    role_label, update_staff_user, validate_staff_user
)
from cancellation_api.domain.results import CONFLICT, INVALID, NOT_FOUND
from cancellation_api.models.enums import StaffRole


class TestPermissions:
    """Test role permission mapping."""

    @pytest.mark.parametrize("role", ["admin", "specialist"])
    def test_managing_roles_have_everything(self, role):
        """Admins and specialists hold every permission."""
        permissions = permissions_for_role(role)

        assert "user:delete" in permissions
        assert "settings:update" in permissions
        assert "request:delete" in permissions

    def test_editor_permissions(self):
        """Editors enter data but cannot delete or manage users."""
        permissions = permissions_for_role(StaffRole.EDITOR)

        assert "request:update" in permissions
        assert "request:delete" not in permissions
        assert "user:create" not in permissions

    def test_viewer_is_read_only(self):
        """Viewers only read."""
        assert all(p.endswith(":read") for p in permissions_for_role("viewer"))

    @pytest.mark.parametrize("role", [None, "", "superuser"])
    def test_unknown_role_has_nothing(self, role):
        """Unknown roles get no permissions."""
        assert permissions_for_role(role) == []

    def test_check_permission(self):
        """Missing permissions are named in the result."""
        denied = check_permission(["request:read"], "request:update")

        assert check_permission(["request:read"], "request:read").allowed
        assert not denied.allowed
        assert denied.missing_permissions == ["request:update"]
        assert denied.reason == "Missing required permission: request:update"

    def test_role_label(self):
        """Roles have readable labels; unknown ones pass through."""
        assert role_label("viewer") == "Read only"
        assert role_label("guest") == "guest"


class TestStaffRegistry:
    """Test staff registry changes."""

    def test_validate_duplicate_username(self, sample_users):
        """Usernames are unique ignoring case."""
        result = validate_staff_user("Other", "ADMIN", sample_users)

        assert not result.is_valid
        assert result.errors == ["Username already in use: ADMIN"]

    def test_validate_excludes_self(self, sample_users):
        """A user keeping their own username is fine."""
        assert validate_staff_user("Admin User", "admin", sample_users, exclude_id=sample_users[0].id).is_valid

    def test_add_user(self, sample_users):
        """Adding returns the extended list."""
        result = add_staff_user("Mona", "mona", StaffRole.VIEWER, sample_users)

        assert result.success
        assert result.value[-1].username == "mona"
        assert len(sample_users) == 2

    def test_add_blank_user(self, sample_users):
        """Blank names are refused."""
        result = add_staff_user(" ", "x", StaffRole.VIEWER, sample_users)

        assert not result.success
        assert result.validation_errors == ["Name and username are required"]
        assert result.error_kind == INVALID

    def test_add_duplicate_username(self, sample_users):
        """Taken usernames are a conflict."""
        result = add_staff_user("Other", " Admin ", StaffRole.VIEWER, sample_users)

        assert not result.success
        assert result.error_kind == CONFLICT
        assert result.error_message == "Username already in use: Admin"

    def test_update_to_taken_username(self, sample_users):
        """Renaming onto another user's login is a conflict."""
        result = update_staff_user(sample_users[1].id, sample_users, username="admin")

        assert not result.success
        assert result.error_kind == CONFLICT

    def test_update_user(self, sample_users):
        """Fields not given are kept."""
        editor = sample_users[1]

        result = update_staff_user(editor.id, sample_users, role=StaffRole.VIEWER)

        assert result.success
        updated = next(u for u in result.value if u.id == editor.id)
        assert updated.role == StaffRole.VIEWER
        assert updated.username == "entry"

    def test_cannot_demote_last_admin(self, sample_users):
        """The only administrator keeps a managing role."""
        result = update_staff_user(sample_users[0].id, sample_users, role=StaffRole.EDITOR)

        assert not result.success
        assert "Cannot demote the last administrator" in result.validation_errors

    def test_update_unknown_user(self, sample_users):
        """Unknown IDs are reported."""
        result = update_staff_user("missing", sample_users, name="x")

        assert not result.success
        assert result.error_kind == NOT_FOUND

    def test_cannot_remove_last_admin(self, sample_users):
        """The only administrator cannot be removed."""
        result = remove_staff_user(sample_users[0].id, sample_users)

        assert not result.success
        assert result.error_message == "Cannot remove the last administrator"
        assert result.error_kind == INVALID

    def test_remove_admin_when_specialist_remains(self, sample_users):
        """A specialist counts as a remaining administrator."""
        users = add_staff_user("Spec", "spec", StaffRole.SPECIALIST, sample_users).value

        result = remove_staff_user(sample_users[0].id, users)

        assert result.success
        assert [u.username for u in result.value] == ["entry", "spec"]

    def test_remove_editor(self, sample_users):
        """Ordinary users can be removed."""
        result = remove_staff_user(sample_users[1].id, sample_users)

        assert result.success
        assert len(result.value) == 1
