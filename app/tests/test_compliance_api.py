"""
Tests for compliance item endpoints
"""
from datetime import timedelta

import pytest
from fastapi import status

from app.utils.datetime_utils import today_utc


@pytest.fixture
def create_item(client, hr_user, auth_headers):
    def _create(employee_id, expires_in=None, **extra):
        body = {
            "employee_id": employee_id,
            "item_type": "License",
            "item_name": "Registered Nurse",
            "authority": "State Board of Nursing",
            "license_number": "RN-12345",
        }
        if expires_in is not None:
            body["expiration_date"] = (today_utc() + timedelta(days=expires_in)).isoformat()
        body.update(extra)
        return client.post("/api/v1/compliance", json=body, headers=auth_headers(hr_user))
    return _create


@pytest.mark.parametrize("expires_in,expected", [
    (None, "PendingReview"),
    (-1, "Expired"),
    (5, "ExpiringSoon"),
    (200, "PendingReview"),
])
def test_create_derives_initial_status(create_item, nurse_user, expires_in, expected):
    response = create_item(nurse_user.employee.id, expires_in)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == expected


def test_create_rejects_expiration_before_issue(create_item, nurse_user):
    response = create_item(nurse_user.employee.id, expires_in=-30, issue_date=today_utc().isoformat())

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_unknown_employee(create_item):
    assert create_item(999).status_code == status.HTTP_404_NOT_FOUND


def test_verify_activates_pending_item(client, create_item, hr_user, nurse_user, auth_headers):
    item_id = create_item(nurse_user.employee.id, expires_in=200).json()["id"]

    response = client.post(f"/api/v1/compliance/{item_id}/verify", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "Active"
    assert data["verified_by_id"] == hr_user.id
    assert data["verified_at"] is not None


def test_update_rederives_status(client, create_item, hr_user, nurse_user, auth_headers):
    item_id = create_item(nurse_user.employee.id, expires_in=200, status="Active").json()["id"]

    response = client.patch(
        f"/api/v1/compliance/{item_id}",
        json={"expiration_date": (today_utc() - timedelta(days=1)).isoformat()},
        headers=auth_headers(hr_user),
    )
    assert response.json()["status"] == "Expired"

    response = client.patch(f"/api/v1/compliance/{item_id}", json={"status": "Archived"}, headers=auth_headers(hr_user))
    assert response.json()["status"] == "Archived"


def test_visibility_follows_employee_scope(client, create_item, nurse_user, operations_user, nursing_manager, auth_headers):
    nurse_item = create_item(nurse_user.employee.id, expires_in=10).json()["id"]
    create_item(operations_user.employee.id, expires_in=10)

    assert len(client.get("/api/v1/compliance", headers=auth_headers(nurse_user)).json()) == 1
    assert len(client.get("/api/v1/compliance", headers=auth_headers(nursing_manager)).json()) == 1
    response = client.get(f"/api/v1/compliance/{nurse_item}", headers=auth_headers(operations_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_filters_and_order(client, create_item, hr_user, nurse_user, auth_headers):
    employee_id = nurse_user.employee.id
    create_item(employee_id, expires_in=20, item_name="BLS")
    create_item(employee_id, expires_in=3, item_name="ACLS")
    create_item(employee_id, item_name="Orientation")

    items = client.get("/api/v1/compliance", headers=auth_headers(hr_user)).json()
    soon = client.get("/api/v1/compliance?status=ExpiringSoon", headers=auth_headers(hr_user)).json()

    assert [i["item_name"] for i in items] == ["ACLS", "BLS", "Orientation"]
    assert len(soon) == 2


def test_delete_item(client, create_item, hr_user, nurse_user, auth_headers):
    item_id = create_item(nurse_user.employee.id).json()["id"]

    assert client.delete(f"/api/v1/compliance/{item_id}", headers=auth_headers(nurse_user)).status_code == 403
    assert client.delete(f"/api/v1/compliance/{item_id}", headers=auth_headers(hr_user)).status_code == 204
    assert client.get(f"/api/v1/compliance/{item_id}", headers=auth_headers(hr_user)).status_code == 404
