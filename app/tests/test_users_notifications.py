"""
Tests for user administration, notifications, the dashboard and bootstrap
"""
from fastapi import status

from app.core.config import settings
from app.db.init_db import DEFAULT_DEPARTMENTS, init_db
from app.models.department import Department
from app.models.enums import UserRole
from app.models.notification import Notification
from app.models.offboarding import TaskTemplate
from app.models.user import User


def test_admin_creates_user(client, admin_user, nursing, auth_headers):
    response = client.post(
        "/api/v1/users",
        json={
            "username": " New.Hire@MountainCare.test ",
            "password": "welcome123",
            "role": "department_manager",
            "department_id": nursing.id,
        },
        headers=auth_headers(admin_user),
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["username"] == "new.hire@mountaincare.test"

    login = client.post(
        "/api/v1/auth/login", json={"username": "new.hire@mountaincare.test", "password": "welcome123"}
    )
    assert login.status_code == status.HTTP_200_OK


def test_duplicate_username_conflicts(client, admin_user, auth_headers):
    body = {"username": "dup@mountaincare.test", "password": "welcome123"}
    client.post("/api/v1/users", json=body, headers=auth_headers(admin_user))

    response = client.post("/api/v1/users", json=body, headers=auth_headers(admin_user))

    assert response.status_code == status.HTTP_409_CONFLICT


def test_short_password_rejected(client, admin_user, auth_headers):
    response = client.post(
        "/api/v1/users", json={"username": "short@mountaincare.test", "password": "abc"}, headers=auth_headers(admin_user)
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_user_admin_requires_admin(client, hr_user, auth_headers):
    assert client.get("/api/v1/users", headers=auth_headers(hr_user)).status_code == status.HTTP_403_FORBIDDEN


def test_deactivated_user_token_rejected(client, admin_user, nurse_user, auth_headers):
    headers = auth_headers(nurse_user)
    response = client.patch(f"/api/v1/users/{nurse_user.id}", json={"active": False}, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK

    assert client.get("/api/v1/auth/me", headers=headers).status_code == status.HTTP_403_FORBIDDEN


def test_notifications_for_current_user(client, db, nurse_user, hr_user, auth_headers):
    db.add_all([
        Notification(user_id=nurse_user.id, title="License expiring", message="Renew soon", type="reminder"),
        Notification(user_id=nurse_user.id, title="Welcome", message="Hello", type="info"),
        Notification(user_id=hr_user.id, title="Not yours", message="HR only", type="info"),
    ])
    db.commit()

    data = client.get("/api/v1/notifications/me", headers=auth_headers(nurse_user)).json()
    assert data["unread"] == 2
    assert len(data["items"]) == 2

    first_id = data["items"][0]["id"]
    response = client.post(f"/api/v1/notifications/{first_id}/read", headers=auth_headers(nurse_user))
    assert response.json()["is_read"] is True

    other = db.query(Notification).filter(Notification.user_id == hr_user.id).one()
    response = client.post(f"/api/v1/notifications/{other.id}/read", headers=auth_headers(nurse_user))
    assert response.status_code == status.HTTP_404_NOT_FOUND

    assert client.post("/api/v1/notifications/me/read-all", headers=auth_headers(nurse_user)).json() == {"updated": 1}


def test_dashboard_metrics(client, hr_user, nurse_user, operations_user, auth_headers):
    response = client.get("/api/v1/dashboard/metrics", headers=auth_headers(hr_user))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["headcount"] == 2
    assert data["active_employees"] == 2
    assert data["pending_leaves"] == 0

    assert client.get("/api/v1/dashboard/metrics", headers=auth_headers(nurse_user)).status_code == 403


def test_dashboard_activity(client, hr_user, auth_headers):
    client.post("/api/v1/departments", json={"name": "Pharmacy"}, headers=auth_headers(hr_user))

    entries = client.get("/api/v1/dashboard/activity?entity_type=Department", headers=auth_headers(hr_user)).json()

    assert len(entries) == 1
    assert entries[0]["action_type"] == "CREATE"
    assert entries[0]["details"] == {"name": "Pharmacy", "active": True}


def test_init_db_bootstraps_once(db):
    init_db(db)
    init_db(db)

    admins = db.query(User).filter(User.role == UserRole.ADMIN).all()
    assert [a.username for a in admins] == [settings.INITIAL_ADMIN_USERNAME]
    assert sorted(d.name for d in db.query(Department).all()) == sorted(DEFAULT_DEPARTMENTS)
    assert db.query(TaskTemplate).count() > 0
