# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for HAL response formatting utilities.
"""

from cancellation_api.domain.users import permissions_for_role
from cancellation_api.models.responses import HalLink
from cancellation_api.services.hal import (
    AffordanceLinkBuilder, HalLinkBuilder, HalResponseBuilder, create_hal_formatter
)


class TestHalLinkBuilder:
    """Test HAL link builder functionality."""

    def test_build_basic_link(self):
        """Test building a basic HAL link."""
        builder = HalLinkBuilder("https://api.example.com")

        link = builder.build_link("/api/requests/123")

        assert isinstance(link, HalLink)
        assert link.href == "https://api.example.com/api/requests/123"
        assert link.method == "GET"
        assert link.type is None

    def test_build_link_with_options(self):
        """Test building a link with all options."""
        builder = HalLinkBuilder("https://api.example.com")

        link = builder.build_link(
            "/api/requests/validate",
            method="POST",
            content_type="application/json",
            title="Validate",
            templated=True
        )

        assert link.method == "POST"
        assert link.type == "application/json"
        assert link.title == "Validate"
        assert link.templated is True

    def test_base_url_normalization(self):
        """Test that base URL is properly normalized."""
        builder = HalLinkBuilder("https://api.example.com/")

        link = builder.build_link("/api/test")

        assert link.href == "https://api.example.com/api/test"

    def test_base_url_with_path_prefix(self):
        """Paths are appended to a base URL that has its own prefix."""
        builder = HalLinkBuilder("https://example.com/tracker")

        assert builder.build_link("/api/healthz").href == "https://example.com/tracker/api/healthz"


class TestAffordanceLinkBuilder:
    """Test permission-dependent affordances."""

    def test_viewer_gets_read_links_only(self):
        """Viewers see self and collection links only."""
        builder = AffordanceLinkBuilder("https://api.example.com")

        links = builder.build_request_affordances("abc", "in_progress", permissions_for_role("viewer"))

        assert set(links) == {"self", "collection"}
        assert links["self"].href == "https://api.example.com/api/requests/abc"

    def test_admin_gets_all_links(self):
        """Admins can edit, validate, delete and export."""
        builder = AffordanceLinkBuilder("https://api.example.com")

        links = builder.build_request_affordances("abc", "overdue", permissions_for_role("admin"))

        assert set(links) == {"self", "collection", "edit", "validate", "delete", "export"}
        assert links["edit"].method == "PUT"
        assert links["delete"].method == "DELETE"

    def test_editor_cannot_delete(self):
        """Editors edit but do not delete."""
        builder = AffordanceLinkBuilder("https://api.example.com")

        links = builder.build_request_affordances("abc", "warning", permissions_for_role("editor"))

        assert "edit" in links
        assert "delete" not in links

    def test_stopped_request_has_no_validate_link(self):
        """Stopped requests only offer a plain edit."""
        builder = AffordanceLinkBuilder("https://api.example.com")

        links = builder.build_request_affordances("abc", "stopped", permissions_for_role("admin"))

        assert "edit" in links
        assert "validate" not in links


class TestHalResponseBuilder:
    """Test resource, collection and error documents."""

    def test_resource_response(self):
        """Resource data is kept and links are serialized."""
        builder = HalResponseBuilder("https://api.example.com")

        response = builder.build_resource_response({"id": "abc", "notes": ""}, "abc", "completed", [])

        assert response["id"] == "abc"
        assert response["_links"]["self"]["href"] == "https://api.example.com/api/requests/abc"
        assert "type" not in response["_links"]["self"]

    def test_collection_response(self):
        """Collections embed their items and count them."""
        builder = HalResponseBuilder("https://api.example.com")

        response = builder.build_collection_response(
            [{"id": "a"}, {"id": "b"}], "/api/requests/status", embedded_key="requests", extra={"now": "2024-05-10"}
        )

        assert response["total"] == 2
        assert response["now"] == "2024-05-10"
        assert [r["id"] for r in response["_embedded"]["requests"]] == ["a", "b"]

    def test_error_response(self):
        """Errors follow RFC 7807 with help links."""
        builder = HalResponseBuilder("https://api.example.com")

        response = builder.build_error_response(
            "validation-error", "Validation Error", 400, "Bad data", "/api/requests/apply", ["x"]
        )

        assert response["type"].endswith("/problems/validation-error")
        assert response["status"] == 400
        assert response["errors"] == ["x"]
        assert "help" in response["_links"]
        assert "schema" in response["_links"]


class TestHalFormatter:
    """Test the high-level formatter."""

    def test_format_request_collection(self):
        """Each request gets links based on its row status."""
        formatter = create_hal_formatter("https://api.example.com")
        items = [
            {"id": "a", "status": {"row_status": "stopped"}},
            {"id": "b", "status": {"row_status": "overdue"}},
        ]

        response = formatter.format_request_collection(items, permissions_for_role("specialist"))

        embedded = response["_embedded"]["requests"]
        assert "validate" not in embedded[0]["_links"]
        assert "validate" in embedded[1]["_links"]
        assert response["_links"]["self"]["href"] == "https://api.example.com/api/requests/status"

    def test_error_shortcuts(self):
        """Shortcut methods set the matching status codes."""
        formatter = create_hal_formatter("https://api.example.com")

        assert formatter.format_not_found_error("gone", "/x")["status"] == 404
        assert formatter.format_conflict_error("dup", "/x")["status"] == 409
        assert formatter.format_authorization_error("no", "/x")["status"] == 403
        assert formatter.format_server_error("boom", "/x")["status"] == 500
