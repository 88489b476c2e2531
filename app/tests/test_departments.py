"""
Tests for department endpoints
"""
from fastapi import status

from app.models.activity_log import ActivityLog


def test_create_department(client, db, hr_user, auth_headers):
    response = client.post("/api/v1/departments", json={"name": "Pharmacy"}, headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Pharmacy"
    assert data["active"] is True
    assert db.query(ActivityLog).filter(
        ActivityLog.entity_type == "Department", ActivityLog.entity_id == data["id"]
    ).count() == 1


def test_create_department_duplicate_name_case_insensitive(client, hr_user, nursing, auth_headers):
    response = client.post("/api/v1/departments", json={"name": "NURSING"}, headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_409_CONFLICT


def test_employee_cannot_create_department(client, nurse_user, auth_headers):
    response = client.post("/api/v1/departments", json={"name": "Pharmacy"}, headers=auth_headers(nurse_user))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_departments(client, nurse_user, operations, make_department, auth_headers):
    make_department("Archive", active=False)

    all_names = [d["name"] for d in client.get("/api/v1/departments", headers=auth_headers(nurse_user)).json()]
    active = client.get("/api/v1/departments?active_only=true", headers=auth_headers(nurse_user)).json()

    assert all_names == ["Archive", "Nursing", "Operations"]
    assert [d["name"] for d in active] == ["Nursing", "Operations"]


def test_get_missing_department(client, hr_user, auth_headers):
    response = client.get("/api/v1/departments/999", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error_code"] == "NOT_FOUND"


def test_update_department(client, hr_user, nursing, operations, auth_headers):
    response = client.patch(
        f"/api/v1/departments/{nursing.id}", json={"active": False}, headers=auth_headers(hr_user)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["active"] is False

    response = client.patch(
        f"/api/v1/departments/{nursing.id}", json={"name": "Operations"}, headers=auth_headers(hr_user)
    )
    assert response.status_code == status.HTTP_409_CONFLICT
