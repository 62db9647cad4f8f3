# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
HAL (Hypertext Application Language) response formatting utilities.
Implements HATEOAS responses with conditional affordance links.
"""

from typing import Dict, List, Any, Optional
from urllib.parse import urljoin

from ..models.enums import RowStatusKind
from ..models.responses import HalLink

ERROR_TYPE_BASE = "https://api.cancellation-tracker.local/problems"


class HalLinkBuilder:
    """Builder for HAL links with proper URL construction."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/') + '/'

    def build_link(
        self,
        path: str,
        method: str = "GET",
        content_type: Optional[str] = None,
        title: Optional[str] = None,
        templated: bool = False
    ) -> HalLink:
        """Build a HAL link with proper URL construction."""
        href = urljoin(self.base_url, path.lstrip('/'))

        return HalLink(
            href=href,
            method=method,
            type=content_type,
            title=title,
            templated=templated
        )

    def build_self_link(self, resource_path: str) -> HalLink:
        """Build self link for a resource."""
        return self.build_link(resource_path, title="Self")

    def build_collection_link(self, collection_path: str) -> HalLink:
        """Build link to parent collection."""
        return self.build_link(collection_path, title="Collection")


class AffordanceLinkBuilder:
    """Builder for conditional affordance links based on permissions and state."""

    def __init__(self, base_url: str):
        self.link_builder = HalLinkBuilder(base_url)

    def build_request_affordances(
        self,
        request_id: str,
        row_status: str,
        user_permissions: List[str]
    ) -> Dict[str, HalLink]:
        """Build conditional affordance links for cancellation requests."""
        links = {}
        base_path = f"/api/requests/{request_id}"

        # Self and collection links (always present)
        links['self'] = self.link_builder.build_self_link(base_path)
        links['collection'] = self.link_builder.build_collection_link("/api/requests")

        if "request:update" in user_permissions:
            links['edit'] = self.link_builder.build_link(
                base_path,
                method="PUT",
                content_type="application/json",
                title="Edit request"
            )

            # Stopped cases only change through an explicit edit
            if row_status != RowStatusKind.STOPPED:
                links['validate'] = self.link_builder.build_link(
                    "/api/requests/validate",
                    method="POST",
                    content_type="application/json",
                    title="Validate changes"
                )

        if "request:delete" in user_permissions:
            links['delete'] = self.link_builder.build_link(
                base_path,
                method="DELETE",
                title="Delete request"
            )

        if "request:export" in user_permissions:
            links['export'] = self.link_builder.build_link(
                "/api/reports/export",
                method="POST",
                content_type="application/json",
                title="Export requests"
            )

        return links


class HalResponseBuilder:
    """Main HAL response builder."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/')
        self.link_builder = HalLinkBuilder(base_url)
        self.affordance_builder = AffordanceLinkBuilder(base_url)

    def build_resource_response(
        self,
        data: Dict[str, Any],
        resource_id: str,
        row_status: str,
        user_permissions: List[str]
    ) -> Dict[str, Any]:
        """Build a HAL request resource with affordance links."""
        response = dict(data)
        links = self.affordance_builder.build_request_affordances(
            resource_id,
            row_status,
            user_permissions
        )
        response['_links'] = {rel: link.model_dump(exclude_none=True) for rel, link in links.items()}
        return response

    def build_collection_response(
        self,
        items: List[Dict[str, Any]],
        collection_path: str,
        embedded_key: str = "items",
        extra: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Build a HAL collection response."""
        response = {
            'total': len(items),
            '_links': {
                'self': self.link_builder.build_self_link(collection_path).model_dump(exclude_none=True)
            },
            '_embedded': {
                embedded_key: items
            }
        }
        if extra:
            response.update(extra)
        return response

    def build_error_response(
        self,
        error_type: str,
        title: str,
        status: int,
        detail: str,
        instance: str,
        validation_errors: Optional[List[Any]] = None
    ) -> Dict[str, Any]:
        """Build RFC 7807 compliant error response with HAL links."""
        error_response = {
            'type': f"{ERROR_TYPE_BASE}/{error_type}",
            'title': title,
            'status': status,
            'detail': detail,
            'instance': instance
        }

        if validation_errors:
            error_response['errors'] = validation_errors

        links = {
            'help': self.link_builder.build_link(
                f"/docs/errors#{error_type}",
                title="Error documentation"
            )
        }

        if error_type == "validation-error":
            links['schema'] = self.link_builder.build_link(
                "/openapi/openapi.json",
                title="API schema"
            )

        error_response['_links'] = {rel: link.model_dump(exclude_none=True) for rel, link in links.items()}
        return error_response


class HalFormatter:
    """High-level HAL formatter with convenience methods."""

    def __init__(self, base_url: str):
        self.builder = HalResponseBuilder(base_url)

    def format_request_status(
        self,
        request_data: Dict[str, Any],
        user_permissions: List[str]
    ) -> Dict[str, Any]:
        """Format a request and its status summary with HAL links."""
        return self.builder.build_resource_response(
            request_data,
            request_data['id'],
            request_data.get('status', {}).get('row_status', ''),
            user_permissions
        )

    def format_request_collection(
        self,
        requests: List[Dict[str, Any]],
        user_permissions: List[str],
        extra: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Format a collection of requests with HAL links."""
        formatted = [self.format_request_status(r, user_permissions) for r in requests]
        return self.builder.build_collection_response(
            formatted,
            "/api/requests/status",
            embedded_key="requests",
            extra=extra
        )

    def format_validation_error(
        self,
        detail: str,
        instance: str,
        validation_errors: List[Any]
    ) -> Dict[str, Any]:
        """Format a validation error response."""
        return self.builder.build_error_response(
            "validation-error",
            "Validation Error",
            400,
            detail,
            instance,
            validation_errors
        )

    def format_authorization_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format an authorization error response."""
        return self.builder.build_error_response(
            "insufficient-permissions",
            "Insufficient Permissions",
            403,
            detail,
            instance
        )

    def format_not_found_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format a not found error response."""
        return self.builder.build_error_response(
            "resource-not-found",
            "Resource Not Found",
            404,
            detail,
            instance
        )

    def format_conflict_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format a conflict error response."""
        return self.builder.build_error_response(
            "resource-conflict",
            "Resource Conflict",
            409,
            detail,
            instance
        )

    def format_server_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format a server error response."""
        return self.builder.build_error_response(
            "internal-server-error",
            "Internal Server Error",
            500,
            detail,
            instance
        )


# Convenience function for creating HAL formatter
def create_hal_formatter(base_url: str) -> HalFormatter:
    """Create a HAL formatter instance."""
    return HalFormatter(base_url)
