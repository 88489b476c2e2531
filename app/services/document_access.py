"""
Document access rules.

can_access() is a pure decision over a document's access level and the
requester's identity. It performs no I/O; callers log successful reads
themselves.
"""
from dataclasses import dataclass
from typing import Optional

from app.models.enums import DocumentAccessLevel, UserRole, PRIVILEGED_ROLES


@dataclass(frozen=True)
class Requester:
    """Identity of whoever is asking for a document"""
    user_id: Optional[int]
    role: UserRole
    department_id: Optional[int] = None
    employee_id: Optional[int] = None

    @classmethod
    def from_user(cls, user) -> "Requester":
        employee = user.employee
        department_id = user.department_id
        if department_id is None and employee is not None:
            department_id = employee.department_id
        return cls(
            user_id=user.id,
            role=UserRole(user.role),
            department_id=department_id,
            employee_id=employee.id if employee is not None else None,
        )

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES


def document_department_id(document) -> Optional[int]:
    """The document's own department, else the department of its employee."""
    if document.department_id is not None:
        return document.department_id
    employee = document.employee
    if employee is not None:
        return employee.department_id
    return None


def _same_department(document, requester: Requester) -> bool:
    if requester.department_id is None:
        return False
    return document_department_id(document) == requester.department_id


def can_access(document, requester: Requester) -> bool:
    if requester.is_privileged:
        return True

    try:
        level = DocumentAccessLevel(document.access_level)
    except ValueError:
        return False

    if level == DocumentAccessLevel.PUBLIC:
        return True
    if level == DocumentAccessLevel.DEPARTMENT:
        return _same_department(document, requester)
    if level == DocumentAccessLevel.MANAGER:
        return requester.role == UserRole.DEPARTMENT_MANAGER and _same_department(document, requester)
    if level == DocumentAccessLevel.INDIVIDUAL:
        return requester.employee_id is not None and requester.employee_id == document.employee_id
    # hr and admin levels are only reachable by privileged roles
    return False
