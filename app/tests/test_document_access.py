"""
Tests for the document access decision
"""
from types import SimpleNamespace

import pytest

from app.models.enums import DocumentAccessLevel, UserRole
from app.services.document_access import Requester, can_access, document_department_id

NURSING = 1
OPERATIONS = 2


def document(level, department_id=NURSING, employee_id=None, employee=None):
    return SimpleNamespace(
        access_level=level,
        department_id=department_id,
        employee_id=employee_id,
        employee=employee,
    )


ADMIN = Requester(user_id=1, role=UserRole.ADMIN)
HR = Requester(user_id=2, role=UserRole.HR_MANAGER)
NURSING_MANAGER = Requester(user_id=3, role=UserRole.DEPARTMENT_MANAGER, department_id=NURSING, employee_id=30)
OPERATIONS_MANAGER = Requester(user_id=4, role=UserRole.DEPARTMENT_MANAGER, department_id=OPERATIONS, employee_id=40)
NURSE = Requester(user_id=5, role=UserRole.EMPLOYEE, department_id=NURSING, employee_id=50)
OPERATOR = Requester(user_id=6, role=UserRole.EMPLOYEE, department_id=OPERATIONS, employee_id=60)
NO_DEPARTMENT = Requester(user_id=7, role=UserRole.EMPLOYEE)


@pytest.mark.parametrize("level", list(DocumentAccessLevel))
@pytest.mark.parametrize("requester", [ADMIN, HR])
def test_privileged_roles_read_everything(level, requester):
    assert can_access(document(level, department_id=None), requester)


@pytest.mark.parametrize("requester", [NURSE, OPERATOR, NO_DEPARTMENT, OPERATIONS_MANAGER])
def test_public_documents_readable_by_all(requester):
    assert can_access(document(DocumentAccessLevel.PUBLIC), requester)


@pytest.mark.parametrize("requester,expected", [
    (NURSE, True),
    (NURSING_MANAGER, True),
    (OPERATOR, False),
    (OPERATIONS_MANAGER, False),
    (NO_DEPARTMENT, False),
])
def test_department_documents(requester, expected):
    assert can_access(document(DocumentAccessLevel.DEPARTMENT), requester) is expected


def test_department_document_without_department_is_not_readable():
    assert not can_access(document(DocumentAccessLevel.DEPARTMENT, department_id=None), NO_DEPARTMENT)


@pytest.mark.parametrize("requester,expected", [
    (NURSING_MANAGER, True),
    (OPERATIONS_MANAGER, False),
    (NURSE, False),
])
def test_manager_documents(requester, expected):
    assert can_access(document(DocumentAccessLevel.MANAGER), requester) is expected


@pytest.mark.parametrize("level", [DocumentAccessLevel.HR, DocumentAccessLevel.ADMIN])
@pytest.mark.parametrize("requester", [NURSING_MANAGER, NURSE])
def test_hr_and_admin_documents_hidden_from_others(level, requester):
    assert not can_access(document(level), requester)


def test_individual_documents_only_for_their_employee():
    doc = document(DocumentAccessLevel.INDIVIDUAL, employee_id=NURSE.employee_id)

    assert can_access(doc, NURSE)
    assert not can_access(doc, NURSING_MANAGER)
    assert not can_access(doc, OPERATOR)
    assert not can_access(document(DocumentAccessLevel.INDIVIDUAL, employee_id=None), NO_DEPARTMENT)


def test_department_falls_back_to_employee_department():
    owner = SimpleNamespace(department_id=OPERATIONS)
    doc = document(DocumentAccessLevel.DEPARTMENT, department_id=None, employee_id=60, employee=owner)

    assert document_department_id(doc) == OPERATIONS
    assert can_access(doc, OPERATOR)
    assert not can_access(doc, NURSE)


def test_unknown_access_level_denied():
    assert not can_access(document("secret"), NURSE)
    assert can_access(document("secret"), HR)


def test_requester_from_user_uses_employee_department():
    employee = SimpleNamespace(id=50, department_id=NURSING)
    user = SimpleNamespace(id=5, role="employee", department_id=None, employee=employee)

    requester = Requester.from_user(user)

    assert requester == Requester(user_id=5, role=UserRole.EMPLOYEE, department_id=NURSING, employee_id=50)
    assert not requester.is_privileged
