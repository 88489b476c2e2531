"""
Tests for leave application, approval, rejection and cancellation
"""
from datetime import date

import pytest
from fastapi import status

from app.models.enums import LeaveStatus, LeaveType, UserRole
from app.models.leave import Leave, LeaveBalance
from app.services.leave_service import leave_hours


@pytest.fixture
def nurse(nurse_user):
    return nurse_user.employee


@pytest.fixture
def vacation_balance(db, nurse):
    def _set(hours):
        record = LeaveBalance(
            employee_id=nurse.id, leave_type="Vacation", balance=hours, accrued_ytd=hours, used_ytd=0.0
        )
        db.add(record)
        db.commit()
        return record
    return _set


@pytest.fixture
def pending_leave(db, nurse):
    """A Pending request inserted directly, bypassing the balance pre-check"""
    leave = Leave(
        employee_id=nurse.id,
        leave_type=LeaveType.VACATION,
        start_date=date(2026, 7, 6),
        end_date=date(2026, 7, 7),
        status=LeaveStatus.PENDING,
    )
    db.add(leave)
    db.commit()
    return leave


def apply(client, user, auth_headers, start="2026-07-06", end="2026-07-07", leave_type="Vacation", **extra):
    body = {"leave_type": leave_type, "start_date": start, "end_date": end}
    body.update(extra)
    return client.post("/api/v1/leaves", json=body, headers=auth_headers(user))


def test_leave_hours_counts_inclusive_days():
    assert leave_hours(date(2026, 7, 6), date(2026, 7, 6)) == 8.0
    assert leave_hours(date(2026, 7, 6), date(2026, 7, 10)) == 40.0


def test_apply_creates_pending_request(client, nurse_user, nurse, vacation_balance, auth_headers):
    vacation_balance(40.0)

    response = apply(client, nurse_user, auth_headers, reason="Family visit")

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "Pending"
    assert data["employee_id"] == nurse.id
    assert data["hours_deducted"] is None


def test_apply_rejects_insufficient_balance(client, nurse_user, vacation_balance, auth_headers):
    vacation_balance(8.0)

    response = apply(client, nurse_user, auth_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "INSUFFICIENT_BALANCE"
    assert data["details"] == {"available": 8.0, "requested": 16.0}


def test_apply_without_balance_record_is_insufficient(client, nurse_user, auth_headers):
    response = apply(client, nurse_user, auth_headers, leave_type="Sick")

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_apply_end_before_start_rejected(client, nurse_user, auth_headers):
    response = apply(client, nurse_user, auth_headers, start="2026-07-07", end="2026-07-06")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_apply_overlap_conflict(client, nurse_user, vacation_balance, pending_leave, auth_headers):
    vacation_balance(80.0)

    response = apply(client, nurse_user, auth_headers, start="2026-07-07", end="2026-07-09")

    assert response.status_code == status.HTTP_409_CONFLICT


def test_employee_cannot_apply_for_someone_else(client, nurse_user, operations_user, vacation_balance, auth_headers):
    vacation_balance(40.0)

    response = apply(client, operations_user, auth_headers, employee_id=nurse_user.employee.id)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_hr_approves_and_balance_is_deducted(client, db, hr_user, nurse, vacation_balance, pending_leave, auth_headers):
    record = vacation_balance(40.0)

    response = client.post(
        f"/api/v1/leaves/{pending_leave.id}/approve",
        json={"comments": "Enjoy"},
        headers=auth_headers(hr_user),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "Approved"
    assert data["approver_id"] == hr_user.id
    assert data["approved_at"] is not None
    assert data["hours_deducted"] == 16.0
    db.refresh(record)
    assert record.balance == 24.0
    assert record.used_ytd == 16.0


def test_approval_with_insufficient_balance_changes_nothing(
    client, db, hr_user, vacation_balance, pending_leave, auth_headers
):
    record = vacation_balance(8.0)

    response = client.post(f"/api/v1/leaves/{pending_leave.id}/approve", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_code"] == "INSUFFICIENT_BALANCE"
    db.refresh(pending_leave)
    db.refresh(record)
    assert pending_leave.status == LeaveStatus.PENDING
    assert pending_leave.approver_id is None
    assert record.balance == 8.0
    assert record.used_ytd == 0.0


def test_department_manager_approves_own_department(
    client, nursing_manager, vacation_balance, pending_leave, auth_headers
):
    vacation_balance(16.0)

    response = client.post(f"/api/v1/leaves/{pending_leave.id}/approve", headers=auth_headers(nursing_manager))

    assert response.status_code == status.HTTP_200_OK


def test_other_department_manager_cannot_approve(
    client, make_user, operations, vacation_balance, pending_leave, auth_headers
):
    ops_manager = make_user("ops.manager@mountaincare.test", role=UserRole.DEPARTMENT_MANAGER, department=operations)
    vacation_balance(16.0)

    response = client.post(f"/api/v1/leaves/{pending_leave.id}/approve", headers=auth_headers(ops_manager))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_employee_cannot_approve(client, nurse_user, pending_leave, auth_headers):
    response = client.post(f"/api/v1/leaves/{pending_leave.id}/approve", headers=auth_headers(nurse_user))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_reject_leaves_balance_untouched(client, db, hr_user, vacation_balance, pending_leave, auth_headers):
    record = vacation_balance(40.0)

    response = client.post(
        f"/api/v1/leaves/{pending_leave.id}/reject",
        json={"comments": "Short staffed"},
        headers=auth_headers(hr_user),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "Rejected"
    assert response.json()["comments"] == "Short staffed"
    db.refresh(record)
    assert record.balance == 40.0


def test_cancel_own_pending_request(client, hr_user, nurse_user, pending_leave, auth_headers):
    response = client.post(f"/api/v1/leaves/{pending_leave.id}/cancel", headers=auth_headers(nurse_user))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "Cancelled"

    response = client.post(f"/api/v1/leaves/{pending_leave.id}/approve", headers=auth_headers(hr_user))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_only_owner_can_cancel(client, hr_user, pending_leave, auth_headers):
    response = client.post(f"/api/v1/leaves/{pending_leave.id}/cancel", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_is_scoped(client, hr_user, operations_user, pending_leave, auth_headers):
    assert client.get("/api/v1/leaves", headers=auth_headers(hr_user)).json()["total"] == 1
    assert client.get("/api/v1/leaves", headers=auth_headers(operations_user)).json()["total"] == 0

    response = client.get(f"/api/v1/leaves/{pending_leave.id}", headers=auth_headers(operations_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN
