"""
Tests for attendance endpoints
"""
from datetime import time

import pytest
from fastapi import status

from app.core.exceptions import ValidationError
from app.services.attendance_service import compute_hours_worked


def test_compute_hours_worked():
    assert compute_hours_worked(time(7, 0), time(15, 30)) == 8.5
    assert compute_hours_worked(time(7, 0), None) is None
    with pytest.raises(ValidationError):
        compute_hours_worked(time(15, 0), time(7, 0))


def test_employee_records_own_attendance(client, nurse_user, auth_headers):
    response = client.post(
        "/api/v1/attendance",
        json={"date": "2026-05-04", "time_in": "07:00:00", "time_out": "19:15:00"},
        headers=auth_headers(nurse_user),
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["employee_id"] == nurse_user.employee.id
    assert data["hours_worked"] == 12.25
    assert data["status"] == "Present"


def test_duplicate_day_conflicts(client, nurse_user, auth_headers):
    body = {"date": "2026-05-04", "time_in": "07:00:00"}
    client.post("/api/v1/attendance", json=body, headers=auth_headers(nurse_user))

    response = client.post("/api/v1/attendance", json=body, headers=auth_headers(nurse_user))

    assert response.status_code == status.HTTP_409_CONFLICT


def test_time_out_before_time_in_rejected(client, nurse_user, auth_headers):
    response = client.post(
        "/api/v1/attendance",
        json={"date": "2026-05-04", "time_in": "19:00:00", "time_out": "07:00:00"},
        headers=auth_headers(nurse_user),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_employee_cannot_record_for_colleague(client, nurse_user, operations_user, auth_headers):
    response = client.post(
        "/api/v1/attendance",
        json={"employee_id": operations_user.employee.id, "date": "2026-05-04"},
        headers=auth_headers(nurse_user),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_manager_records_for_department(client, nursing_manager, nurse_user, auth_headers):
    response = client.post(
        "/api/v1/attendance",
        json={"employee_id": nurse_user.employee.id, "date": "2026-05-04", "status": "Absent"},
        headers=auth_headers(nursing_manager),
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "Absent"


def test_list_scoped_and_filtered(client, hr_user, nurse_user, operations_user, auth_headers):
    for user, day in [(nurse_user, "2026-05-04"), (nurse_user, "2026-05-05"), (operations_user, "2026-05-04")]:
        client.post("/api/v1/attendance", json={"date": day}, headers=auth_headers(user))

    mine = client.get("/api/v1/attendance", headers=auth_headers(nurse_user)).json()
    everyone = client.get("/api/v1/attendance?from=2026-05-04&to=2026-05-04", headers=auth_headers(hr_user)).json()
    bad_range = client.get("/api/v1/attendance?from=2026-05-05&to=2026-05-04", headers=auth_headers(hr_user))

    assert mine["total"] == 2
    assert [r["date"] for r in mine["items"]] == ["2026-05-05", "2026-05-04"]
    assert everyone["total"] == 2
    assert bad_range.status_code == status.HTTP_400_BAD_REQUEST


def test_hr_updates_and_deletes(client, hr_user, nurse_user, auth_headers):
    record_id = client.post(
        "/api/v1/attendance", json={"date": "2026-05-04", "time_in": "07:00:00"}, headers=auth_headers(nurse_user)
    ).json()["id"]

    response = client.patch(
        f"/api/v1/attendance/{record_id}", json={"time_out": "15:00:00"}, headers=auth_headers(hr_user)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["hours_worked"] == 8.0

    assert client.delete(f"/api/v1/attendance/{record_id}", headers=auth_headers(nurse_user)).status_code == 403
    assert client.delete(f"/api/v1/attendance/{record_id}", headers=auth_headers(hr_user)).status_code == 204
