"""
Pytest configuration and fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production-use-0123456789")

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.core.deps import get_db
from app.core.security import create_access_token, hash_password
from app.db.database import Database
from app.main import app
from app.models.department import Department
from app.models.employee import Employee
from app.models.enums import UserRole
from app.models.user import User
from app.services.document_storage import DocumentStorage

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def database():
    """A fresh in-memory database for each test"""
    database = Database("sqlite:///:memory:").open()
    database.create_all()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture(scope="function")
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def storage(tmp_path):
    return DocumentStorage(str(tmp_path / "documents"))


@pytest.fixture(scope="function")
def client(database, db, storage):
    """Test client fixture with database override"""
    def override_get_db():
        yield db

    app.state.database = database
    app.state.document_storage = storage
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.database = None
    app.state.document_storage = None


@pytest.fixture
def make_department(db):
    def _make(name="Nursing", active=True):
        department = Department(name=name, active=active)
        db.add(department)
        db.commit()
        db.refresh(department)
        return department
    return _make


@pytest.fixture
def make_user(db):
    def _make(username, role=UserRole.EMPLOYEE, department=None, active=True, password=TEST_PASSWORD):
        user = User(
            username=username,
            full_name=username.split("@")[0].title(),
            password_hash=hash_password(password),
            role=role,
            department_id=department.id if department else None,
            active=active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_employee(db):
    def _make(first_name="Test", last_name="Employee", department=None, user=None, **extra):
        employee = Employee(
            first_name=first_name,
            last_name=last_name,
            department_id=department.id if department else None,
            user_id=user.id if user else None,
            hire_date=extra.pop("hire_date", date(2024, 1, 15)),
            **extra,
        )
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": str(user.id), "username": user.username, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def nursing(make_department):
    return make_department("Nursing")


@pytest.fixture
def operations(make_department):
    return make_department("Operations")


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@mountaincare.test", role=UserRole.ADMIN)


@pytest.fixture
def hr_user(make_user):
    return make_user("hr@mountaincare.test", role=UserRole.HR_MANAGER)


@pytest.fixture
def nursing_manager(make_user, make_employee, nursing):
    user = make_user("charge.nurse@mountaincare.test", role=UserRole.DEPARTMENT_MANAGER, department=nursing)
    make_employee("Charge", "Nurse", department=nursing, user=user)
    return user


@pytest.fixture
def nurse_user(make_user, make_employee, nursing):
    user = make_user("nurse@mountaincare.test", role=UserRole.EMPLOYEE, department=nursing)
    make_employee("Nina", "Nurse", department=nursing, user=user, email="nurse@mountaincare.test")
    return user


@pytest.fixture
def operations_user(make_user, make_employee, operations):
    user = make_user("ops@mountaincare.test", role=UserRole.EMPLOYEE, department=operations)
    make_employee("Oscar", "Operations", department=operations, user=user)
    return user
