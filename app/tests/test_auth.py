"""
Tests for authentication endpoints
"""
import bcrypt
from fastapi import status

from app.core.security import hash_password, verify_password
from app.models.activity_log import ActivityLog
from app.models.enums import UserRole

TEST_PASSWORD = "testpass123"


def test_auth_login_success(client, db, nurse_user):
    """Successful login returns a bearer token and is written to the activity log"""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "nurse@mountaincare.test", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"
    assert len(data["access_token"]) > 0

    entry = db.query(ActivityLog).filter(ActivityLog.action_type == "LOGIN").first()
    assert entry is not None
    assert entry.user_id == nurse_user.id


def test_auth_login_wrong_password(client, nurse_user):
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "nurse@mountaincare.test", "password": "wrongpassword"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "detail" in response.json()


def test_auth_login_unknown_user(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "nobody@mountaincare.test", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_auth_login_inactive_user(client, make_user):
    make_user("former@mountaincare.test", active=False)
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "former@mountaincare.test", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_me_returns_user_and_employee_link(client, nurse_user, auth_headers):
    response = client.get("/api/v1/auth/me", headers=auth_headers(nurse_user))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == nurse_user.id
    assert data["role"] == UserRole.EMPLOYEE.value
    assert data["employee_id"] is not None


def test_me_rejects_garbage_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_requires_token(client):
    response = client.get("/api/v1/auth/me")

    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


def test_password_hashes_are_argon2():
    hashed = hash_password("s3cret-pass")
    assert hashed.startswith("$argon2")
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("other-pass", hashed)


def test_legacy_bcrypt_hashes_still_verify():
    legacy = bcrypt.hashpw(b"legacy-pass", bcrypt.gensalt()).decode("utf-8")
    assert verify_password("legacy-pass", legacy)
    assert not verify_password("wrong-pass", legacy)
