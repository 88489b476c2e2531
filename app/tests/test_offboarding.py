"""
Tests for offboarding processes and their task checklists
"""
import pytest
from fastapi import status

from app.models.enums import EmploymentStatus
from app.models.offboarding import TaskTemplate
from app.services.offboarding_service import DEFAULT_TASK_TEMPLATES, seed_task_templates


@pytest.fixture
def templates(db):
    db.add(TaskTemplate(description="Collect badge", default_assigned_role="Manager"))
    db.add(TaskTemplate(description="Disable email", default_assigned_role="IT"))
    db.commit()


@pytest.fixture
def start(client, hr_user, auth_headers):
    def _start(employee_id, exit_date="2026-08-31"):
        return client.post(
            "/api/v1/offboarding",
            json={"employee_id": employee_id, "exit_date": exit_date, "reason": "Resignation"},
            headers=auth_headers(hr_user),
        )
    return _start


def test_seed_task_templates_only_once(db):
    assert seed_task_templates(db) == len(DEFAULT_TASK_TEMPLATES)
    db.commit()
    assert seed_task_templates(db) == 0
    assert db.query(TaskTemplate).count() == len(DEFAULT_TASK_TEMPLATES)


def test_start_creates_tasks_and_marks_terminating(start, db, nurse_user, templates):
    employee = nurse_user.employee

    response = start(employee.id)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "Pending"
    assert data["employee_name"] == "Nina Nurse"
    assert data["progress"] == 0
    assert [(t["description"], t["assigned_role"]) for t in data["tasks"]] == [
        ("Collect badge", "Manager"),
        ("Disable email", "IT"),
    ]
    db.refresh(employee)
    assert employee.status == EmploymentStatus.TERMINATING


def test_start_twice_conflicts(start, nurse_user, templates):
    assert start(nurse_user.employee.id).status_code == status.HTTP_201_CREATED
    assert start(nurse_user.employee.id).status_code == status.HTTP_409_CONFLICT


def test_start_unknown_employee(start, templates):
    assert start(999).status_code == status.HTTP_404_NOT_FOUND


def test_completing_tasks_progresses_and_terminates(client, start, db, hr_user, nurse_user, templates, auth_headers):
    data = start(nurse_user.employee.id).json()
    offboarding_id = data["id"]
    first_task, second_task = [t["id"] for t in data["tasks"]]
    url = f"/api/v1/offboarding/{offboarding_id}/tasks"

    data = client.post(f"{url}/{first_task}/complete", headers=auth_headers(hr_user)).json()
    assert data["status"] == "InProgress"
    assert data["progress"] == 50
    assert data["tasks"][0]["completed_by_id"] == hr_user.id

    again = client.post(f"{url}/{first_task}/complete", headers=auth_headers(hr_user))
    assert again.status_code == status.HTTP_409_CONFLICT

    data = client.post(f"{url}/{second_task}/complete", headers=auth_headers(hr_user)).json()
    assert data["status"] == "Completed"
    assert data["progress"] == 100
    employee = nurse_user.employee
    db.refresh(employee)
    assert employee.status == EmploymentStatus.TERMINATED

    response = client.post(f"/api/v1/offboarding/{offboarding_id}/cancel", headers=auth_headers(hr_user))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_cancel_restores_employee(client, start, db, hr_user, nurse_user, templates, auth_headers):
    offboarding_id = start(nurse_user.employee.id).json()["id"]

    response = client.post(f"/api/v1/offboarding/{offboarding_id}/cancel", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "Cancelled"
    employee = nurse_user.employee
    db.refresh(employee)
    assert employee.status == EmploymentStatus.ACTIVE


def test_restart_after_cancel_replaces_record(client, start, db, hr_user, nurse_user, templates, auth_headers):
    first_id = start(nurse_user.employee.id).json()["id"]
    client.post(f"/api/v1/offboarding/{first_id}/cancel", headers=auth_headers(hr_user))

    response = start(nurse_user.employee.id, exit_date="2026-09-30")

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "Pending"
    assert data["exit_date"] == "2026-09-30"
    assert [t["status"] for t in data["tasks"]] == ["Pending", "Pending"]
    assert client.get("/api/v1/offboarding?status=cancelled", headers=auth_headers(hr_user)).json() == []
    employee = nurse_user.employee
    db.refresh(employee)
    assert employee.status == EmploymentStatus.TERMINATING


def test_list_filters(client, start, hr_user, nurse_user, operations_user, templates, auth_headers):
    start(nurse_user.employee.id)
    cancelled_id = start(operations_user.employee.id).json()["id"]
    client.post(f"/api/v1/offboarding/{cancelled_id}/cancel", headers=auth_headers(hr_user))

    default = client.get("/api/v1/offboarding", headers=auth_headers(hr_user)).json()
    cancelled = client.get("/api/v1/offboarding?status=cancelled", headers=auth_headers(hr_user)).json()
    bad = client.get("/api/v1/offboarding?status=someday", headers=auth_headers(hr_user))

    assert [o["employee_id"] for o in default] == [nurse_user.employee.id]
    assert [o["id"] for o in cancelled] == [cancelled_id]
    assert bad.status_code == status.HTTP_400_BAD_REQUEST


def test_templates_admin_only_to_create(client, admin_user, hr_user, auth_headers):
    body = {"description": "Return uniform", "default_assigned_role": "Manager"}

    assert client.post("/api/v1/offboarding/templates", json=body, headers=auth_headers(hr_user)).status_code == 403
    response = client.post("/api/v1/offboarding/templates", json=body, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_201_CREATED

    listing = client.get("/api/v1/offboarding/templates", headers=auth_headers(hr_user)).json()
    assert [t["description"] for t in listing] == ["Return uniform"]


def test_employee_cannot_offboard(client, nurse_user, auth_headers):
    response = client.post(
        "/api/v1/offboarding",
        json={"employee_id": nurse_user.employee.id, "exit_date": "2026-08-31"},
        headers=auth_headers(nurse_user),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
