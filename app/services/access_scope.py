"""
Role scoping shared by the employee-facing services.

admin and hr_manager see everyone, a department_manager sees the employees
of their department, anyone else sees only their own employee record.
"""
from typing import Optional

from sqlalchemy import false, select
from sqlalchemy.orm import Query

from app.core.exceptions import AccessDeniedError
from app.models.employee import Employee
from app.models.enums import UserRole, PRIVILEGED_ROLES
from app.models.user import User


def is_privileged(user: User) -> bool:
    return user.role in PRIVILEGED_ROLES


def own_employee_id(user: User) -> Optional[int]:
    return user.employee.id if user.employee is not None else None


def own_department_id(user: User) -> Optional[int]:
    if user.department_id is not None:
        return user.department_id
    if user.employee is not None:
        return user.employee.department_id
    return None


def manages_department(user: User, department_id: Optional[int]) -> bool:
    return (
        user.role == UserRole.DEPARTMENT_MANAGER
        and department_id is not None
        and own_department_id(user) == department_id
    )


def scope_by_employee(query: Query, user: User, employee_column) -> Query:
    """
    Restrict a query whose rows belong to an employee (employee_column) to
    the rows the user may see. The query must be joinable to Employee.
    """
    if is_privileged(user):
        return query
    if user.role == UserRole.DEPARTMENT_MANAGER:
        department_id = own_department_id(user)
        sub = select(Employee.id).where(Employee.department_id == department_id)
        own_id = own_employee_id(user)
        if own_id is not None:
            return query.filter((employee_column.in_(sub)) | (employee_column == own_id))
        return query.filter(employee_column.in_(sub))
    own_id = own_employee_id(user)
    if own_id is None:
        return query.filter(false())
    return query.filter(employee_column == own_id)


def can_view_employee(user: User, employee: Employee) -> bool:
    if is_privileged(user):
        return True
    if own_employee_id(user) == employee.id:
        return True
    return manages_department(user, employee.department_id)


def can_manage_employee(user: User, employee: Employee) -> bool:
    """Approver authority: privileged roles, or the manager of the employee's department"""
    return is_privileged(user) or manages_department(user, employee.department_id)


def ensure_can_view_employee(user: User, employee: Employee) -> None:
    if not can_view_employee(user, employee):
        raise AccessDeniedError("Not authorized to access this employee's records")
