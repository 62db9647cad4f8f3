# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Endpoint tests through the Flask test client.
"""

import pytest

from cancellation_api.models.entities import Company, StaffUser
from cancellation_api.models.enums import StaffRole

ADMIN = {"X-User-Role": "admin"}
EDITOR = {"X-User-Role": "editor"}


def request_payload(**overrides):
    payload = {
        "id": "65f000000000000000000001",
        "applicantName": "Khalid Al Harthy",
        "vehicleNumber": "12345 AB",
        "company": "Gulf Transport",
        "requestDate": "2024-04-01",
        "settlementDays": 15,
        "correspondence": {"status": "done", "bookNumber": "C-101", "bookDate": "2024-04-10"},
        "financialSettlement": {"status": "pending"},
        "cancellation": {"status": "pending"},
    }
    payload.update(overrides)
    return payload


class TestHealthEndpoint:
    """Test the health check."""

    def test_healthz(self, client):
        """Health check reports the service as healthy."""
        response = client.get('/api/healthz')

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert data["service"] == "cancellation-tracker-api"
        assert data["_links"]["self"]["href"] == "https://api.example.com/api/healthz"

    def test_unknown_route_is_problem_document(self, client):
        """Unknown paths return an RFC 7807 body."""
        response = client.get('/api/nothing-here')

        assert response.status_code == 404
        assert response.get_json()["type"].endswith("/problems/resource-not-found")


class TestStatusEndpoint:
    """Test batch classification."""

    def test_classify_batch(self, client):
        """Each request comes back with its status summary."""
        response = client.post('/api/requests/status', json={
            "now": "2024-05-10",
            "requests": [request_payload()]
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["total"] == 1
        assert data["now"] == "2024-05-10"
        item = data["_embedded"]["requests"][0]
        assert item["status"]["due_date"] == "2024-04-25"
        assert item["status"]["is_overdue"] is True
        assert item["status"]["row_status"] == "overdue"
        assert item["status"]["days_remaining"] == -15

    def test_notification_config_from_payload(self, client):
        """Payload settings override the application defaults."""
        response = client.post('/api/requests/status', json={
            "now": "2024-05-10",
            "notifications": {"notifyOnOverdue": False},
            "requests": [request_payload()]
        })

        item = response.get_json()["_embedded"]["requests"][0]
        assert item["status"]["is_overdue"] is False
        assert item["status"]["row_status"] == "in_progress"

    def test_filters(self, client):
        """Search and status filters narrow the batch."""
        response = client.post('/api/requests/status', json={
            "now": "2024-05-10",
            "search": "khalid",
            "status": "done",
            "requests": [request_payload()]
        })

        assert response.get_json()["total"] == 0

    def test_links_follow_role(self, client):
        """Affordances depend on the caller's role."""
        body = {"now": "2024-05-10", "requests": [request_payload()]}

        viewer = client.post('/api/requests/status', json=body).get_json()
        admin = client.post('/api/requests/status', json=body, headers=ADMIN).get_json()

        assert "edit" not in viewer["_embedded"]["requests"][0]["_links"]
        assert "delete" in admin["_embedded"]["requests"][0]["_links"]

    def test_invalid_payload(self, client):
        """Malformed requests are rejected with a validation problem."""
        response = client.post('/api/requests/status', json={
            "requests": [request_payload(settlementDays=-3)]
        })

        assert response.status_code == 422
        data = response.get_json()
        assert data["type"].endswith("/problems/validation-error")
        assert data["errors"]


class TestDraftAndValidateEndpoints:
    """Test drafting, validation and updates."""

    def test_draft_requires_permission(self, client):
        """Viewers cannot draft requests."""
        response = client.post('/api/requests/draft', json={
            "request": {"applicantName": "Salim", "vehicleNumber": "4411 KA"}
        })

        assert response.status_code == 403
        assert response.get_json()["type"].endswith("/problems/insufficient-permissions")

    def test_draft(self, client):
        """Drafts capture the configured settlement window."""
        response = client.post('/api/requests/draft', headers=EDITOR, json={
            "request": {"applicantName": "Salim", "vehicleNumber": "4411 KA"},
            "settings": {"defaultSettlementDays": 20}
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data["request"]["settlement_days"] == 20
        assert data["request"]["cancellation"]["status"] == "pending"
        assert data["validation"]["is_valid"] is True

    def test_draft_uses_app_default(self, client):
        """Without settings the application default window applies."""
        response = client.post('/api/requests/draft', headers=EDITOR, json={
            "request": {"applicantName": "Salim", "vehicleNumber": "4411 KA"}
        })

        assert response.get_json()["request"]["settlement_days"] == 15

    def test_validate(self, client):
        """Validation reports errors without failing the call."""
        response = client.post('/api/requests/validate', json={
            "request": request_payload(cancellation={"status": "stopped"})
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["is_valid"] is False
        assert "A stop reason is required when the request is stopped" in data["errors"]

    def test_validate_with_update(self, client):
        """Transition errors are included when an update is given."""
        response = client.post('/api/requests/validate', json={
            "request": request_payload(),
            "update": {"correspondence": {"status": "pending"}}
        })

        data = response.get_json()
        assert data["is_valid"] is False
        assert any("Invalid status transition" in e for e in data["errors"])

    def test_apply_update(self, client):
        """Valid updates return the new record."""
        response = client.post('/api/requests/apply', headers=EDITOR, json={
            "request": request_payload(),
            "update": {"financialSettlement": {"status": "done", "bookNumber": "F-1", "bookDate": "2024-04-20"}}
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["request"]["financial_settlement"]["status"] == "done"
        assert data["request"]["id"] == "65f000000000000000000001"

    def test_apply_partial_step_edit(self, client):
        """Editing only a book number keeps the rest of the step."""
        response = client.post('/api/requests/apply', headers=ADMIN, json={
            "request": request_payload(),
            "update": {"correspondence": {"bookNumber": "M/2"}}
        })

        assert response.status_code == 200
        step = response.get_json()["request"]["correspondence"]
        assert step["status"] == "done"
        assert step["book_number"] == "M/2"
        assert step["book_date"] == "2024-04-10"

    def test_apply_invalid_update(self, client):
        """Rejected updates are validation problems."""
        response = client.post('/api/requests/apply', headers=EDITOR, json={
            "request": request_payload(cancellation={"status": "stopped", "stopReason": "x"}),
            "update": {"cancellation": {"status": "done"}}
        })

        assert response.status_code == 400
        data = response.get_json()
        assert data["detail"] == "Step transition validation failed"
        assert data["errors"]


class TestDashboardEndpoint:
    """Test the dashboard."""

    def test_dashboard(self, client):
        """Dashboard returns counts, recent requests and alerts."""
        warning = request_payload(
            id="65f000000000000000000002",
            company="",
            correspondence={"status": "done", "bookNumber": "C-2", "bookDate": "2024-04-27"}
        )

        response = client.post('/api/dashboard', json={
            "now": "2024-05-10",
            "requests": [request_payload(), warning],
            "notifiedIds": []
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["stats"]["total"] == 2
        assert data["stats"]["overdue_count"] == 1
        assert data["stats"]["by_company"] == {"Gulf Transport": 1, "unspecified": 1}
        assert len(data["recent"]) == 2
        assert [a["kind"] for a in data["alerts"]] == ["overdue", "warning"]

    def test_notified_requests_skipped(self, client):
        """Already-notified requests raise no alert."""
        response = client.post('/api/dashboard', json={
            "now": "2024-05-10",
            "requests": [request_payload()],
            "notifiedIds": ["65f000000000000000000001"]
        })

        assert response.get_json()["alerts"] == []


class TestReportEndpoints:
    """Test report statistics and exports."""

    def test_stats(self, client):
        """Viewers can read report statistics."""
        response = client.post('/api/reports/stats', json={
            "now": "2024-05-10",
            "requests": [request_payload(cancellation={"status": "done"})]
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["report"]["completion_rate"] == 100
        assert data["stats"]["completed"] == 1
        assert data["header"]["branch_name"]

    def test_export_requires_permission(self, client):
        """Viewers cannot export."""
        response = client.post('/api/reports/export', json={"requests": []})

        assert response.status_code == 403

    @pytest.mark.parametrize("kind,prefix", [
        ("report", "cancellation_report"),
        ("table", "cancellation_requests"),
    ])
    def test_export(self, client, kind, prefix):
        """Exports download as BOM-prefixed CSV."""
        response = client.post('/api/reports/export', headers=EDITOR, json={
            "now": "2024-05-10",
            "kind": kind,
            "requests": [request_payload()]
        })

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert response.headers["Content-Disposition"] == f'attachment; filename="{prefix}_2024-05-10.csv"'
        text = response.get_data().decode("utf-8")
        assert text.startswith("\ufeff")
        assert len(text.strip().splitlines()) == 2


class TestRegistryEndpoints:
    """Test company and staff registry endpoints."""

    def test_add_company(self, client):
        """Admins register companies."""
        response = client.post('/api/companies', headers=ADMIN, json={
            "name": " Sea Freight ",
            "companies": [Company(name="Gulf Transport").model_dump(mode="json")]
        })

        assert response.status_code == 201
        assert response.get_json()["names"] == ["Gulf Transport", "Sea Freight"]

    def test_add_duplicate_company(self, client):
        """Duplicate names conflict."""
        response = client.post('/api/companies', headers=ADMIN, json={
            "name": "gulf transport",
            "companies": [{"name": "Gulf Transport"}]
        })

        assert response.status_code == 409
        assert response.get_json()["type"].endswith("/problems/resource-conflict")

    def test_add_blank_company(self, client):
        """Blank names are validation problems."""
        response = client.post('/api/companies', headers=ADMIN, json={"name": "  ", "companies": []})

        assert response.status_code == 400

    def test_editor_cannot_add_company(self, client):
        """Company management is limited to administrators."""
        response = client.post('/api/companies', headers=EDITOR, json={"name": "X", "companies": []})

        assert response.status_code == 403

    def test_remove_unknown_company(self, client):
        """Unknown company IDs are not found."""
        response = client.post('/api/companies/remove', headers=ADMIN, json={
            "companyId": "missing",
            "companies": [{"name": "Gulf Transport"}]
        })

        assert response.status_code == 404

    def test_user_lifecycle(self, client):
        """Users can be added, edited and removed."""
        admin = StaffUser(name="Admin User", username="admin", role=StaffRole.ADMIN)
        users = [admin.model_dump(mode="json")]

        added = client.post('/api/users', headers=ADMIN, json={
            "name": "Mona", "username": "mona", "role": "editor", "users": users
        })
        assert added.status_code == 201
        users = added.get_json()["users"]
        mona = next(u for u in users if u["username"] == "mona")
        assert mona["role_label"] == "Data entry"

        updated = client.post('/api/users/update', headers=ADMIN, json={
            "userId": mona["id"], "role": "viewer", "users": users
        })
        assert updated.status_code == 200
        users = updated.get_json()["users"]

        removed = client.post('/api/users/remove', headers=ADMIN, json={
            "userId": mona["id"], "users": users
        })
        assert removed.status_code == 200
        assert [u["username"] for u in removed.get_json()["users"]] == ["admin"]

    def test_duplicate_username_conflicts(self, client):
        """Usernames are unique."""
        admin = StaffUser(name="Admin User", username="admin", role=StaffRole.ADMIN)

        response = client.post('/api/users', headers=ADMIN, json={
            "name": "Other", "username": "Admin", "users": [admin.model_dump(mode="json")]
        })

        assert response.status_code == 409

    def test_rename_onto_taken_username_conflicts(self, client):
        """Edits cannot take another user's login."""
        admin = StaffUser(name="Admin User", username="admin", role=StaffRole.ADMIN)
        editor = StaffUser(name="Data Entry", username="entry", role=StaffRole.EDITOR)
        users = [admin.model_dump(mode="json"), editor.model_dump(mode="json")]

        response = client.post('/api/users/update', headers=ADMIN, json={
            "userId": editor.id, "username": "ADMIN", "users": users
        })

        assert response.status_code == 409
        assert response.get_json()["type"].endswith("/problems/resource-conflict")

    def test_update_unknown_user(self, client):
        """Unknown user IDs are not found."""
        admin = StaffUser(name="Admin User", username="admin", role=StaffRole.ADMIN)

        response = client.post('/api/users/update', headers=ADMIN, json={
            "userId": "missing", "name": "X", "users": [admin.model_dump(mode="json")]
        })

        assert response.status_code == 404

    def test_last_admin_kept(self, client):
        """Removing the only administrator is refused."""
        admin = StaffUser(name="Admin User", username="admin", role=StaffRole.ADMIN)

        response = client.post('/api/users/remove', headers=ADMIN, json={
            "userId": admin.id, "users": [admin.model_dump(mode="json")]
        })

        assert response.status_code == 400
        assert response.get_json()["detail"] == "Cannot remove the last administrator"
