"""Tests for user complaints and their admin review."""

import pytest

from app.common.exceptions import NotFoundException
from app.complaints.models import ComplaintStatus
from app.complaints.schemas import ComplaintCreateRequest, ComplaintUpdateRequest
from app.complaints.service import ComplaintService


def file_complaint(client, headers, text="Bins were not collected on Tuesday", **extra):
    response = client.post(
        "/api/v1/complaints", json={"complaint": text, **extra}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


class TestComplaintService:
    def test_create_starts_pending(self, db_session, user_id):
        complaint = ComplaintService(db_session).create_complaint(
            user_id, ComplaintCreateRequest(complaint="  Truck skipped our lane  ")
        )
        assert complaint.status == ComplaintStatus.PENDING
        assert complaint.complaint == "Truck skipped our lane"
        assert complaint.image_url is None

    def test_edit_reopens_resolved_complaint(self, db_session, user_id):
        service = ComplaintService(db_session)
        complaint = service.create_complaint(
            user_id, ComplaintCreateRequest(complaint="Broken bin lid")
        )
        service.admin_update_status(complaint.id, ComplaintStatus.RESOLVED)

        updated = service.update_complaint(
            user_id, complaint.id, ComplaintUpdateRequest(complaint="Broken bin lid, still")
        )

        assert updated.complaint == "Broken bin lid, still"
        assert updated.status == ComplaintStatus.PENDING

    def test_null_text_is_ignored(self, db_session, user_id):
        service = ComplaintService(db_session)
        complaint = service.create_complaint(
            user_id,
            ComplaintCreateRequest(
                complaint="Spilled glass", image_url="https://images.example.com/c/1.jpg"
            ),
        )

        updated = service.update_complaint(
            user_id, complaint.id, ComplaintUpdateRequest(complaint=None, image_url=None)
        )

        assert updated.complaint == "Spilled glass"
        assert updated.image_url is None

    def test_other_users_complaint_not_found(self, db_session, user_id):
        service = ComplaintService(db_session)
        complaint = service.create_complaint(user_id, ComplaintCreateRequest(complaint="Noise"))

        with pytest.raises(NotFoundException):
            service.get_complaint(user_id + 1000, complaint.id)
        with pytest.raises(NotFoundException):
            service.delete_complaint(user_id + 1000, complaint.id)

    def test_admin_list_filters_by_status(self, db_session, user_id):
        service = ComplaintService(db_session)
        first = service.create_complaint(user_id, ComplaintCreateRequest(complaint="One"))
        service.create_complaint(user_id, ComplaintCreateRequest(complaint="Two"))
        service.admin_update_status(first.id, ComplaintStatus.RESOLVED)

        resolved = service.list_all_complaints(ComplaintStatus.RESOLVED)
        assert [c.id for c in resolved] == [first.id]
        assert len(service.list_all_complaints()) == 2

    def test_admin_update_unknown_complaint(self, db_session):
        with pytest.raises(NotFoundException):
            ComplaintService(db_session).admin_update_status(424242, ComplaintStatus.RESOLVED)


class TestComplaintsAPI:
    def test_requires_auth(self, client):
        response = client.post("/api/v1/complaints", json={"complaint": "Late pickup"})
        assert response.status_code == 401

    def test_blank_complaint_rejected(self, client, auth_headers):
        response = client.post(
            "/api/v1/complaints", json={"complaint": "   "}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_list_newest_first(self, client, auth_headers):
        file_complaint(client, auth_headers, "First")
        file_complaint(client, auth_headers, "Second")

        response = client.get("/api/v1/complaints/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [c["complaint"] for c in data["complaints"]] == ["Second", "First"]

    def test_edit_and_delete(self, client, auth_headers):
        created = file_complaint(
            client, auth_headers, image_url="https://images.example.com/c/2.jpg"
        )
        url = f"/api/v1/complaints/{created['id']}"

        response = client.patch(
            url, json={"complaint": "Bins were not collected for two weeks"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["complaint"] == "Bins were not collected for two weeks"
        assert response.json()["image_url"] == "https://images.example.com/c/2.jpg"

        assert client.delete(url, headers=auth_headers).status_code == 204
        assert client.get(url, headers=auth_headers).status_code == 404

    def test_other_users_complaint_not_found(self, client, auth_headers, admin_headers):
        created = file_complaint(client, admin_headers)

        response = client.get(f"/api/v1/complaints/{created['id']}", headers=auth_headers)
        assert response.status_code == 404

    def test_admin_resolves_and_reopens(self, client, auth_headers, admin_headers):
        created = file_complaint(client, auth_headers)
        url = f"/api/v1/complaints/admin/{created['id']}/status"

        response = client.patch(url, json={"status": "resolved"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "resolved"

        listing = client.get(
            "/api/v1/complaints/admin", params={"status": "pending"}, headers=admin_headers
        )
        assert listing.json()["count"] == 0

        response = client.patch(url, json={"status": "pending"}, headers=admin_headers)
        assert response.json()["status"] == "pending"

    def test_admin_routes_forbidden_for_users(self, client, auth_headers):
        response = client.get("/api/v1/complaints/admin", headers=auth_headers)
        assert response.status_code == 403
