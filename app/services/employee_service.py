"""
Employee service - business logic for employee management
"""
import logging
from typing import Dict, Iterator, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from app.models.department import Department
from app.models.employee import Employee
from app.models.enums import EmploymentStatus
from app.models.user import User
from app.schemas.employee import EmployeeCreate, EmployeeUpdate
from app.services.access_scope import (
    ensure_can_view_employee,
    is_privileged,
    manages_department,
    scope_by_employee,
)
from app.services.activity_service import log_activity

logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    "id",
    "first_name",
    "last_name",
    "email",
    "phone",
    "position",
    "department",
    "status",
    "hire_date",
]


def _validate_links(
    db: Session,
    department_id: Optional[int],
    user_id: Optional[int],
    email: Optional[str],
    exclude_id: Optional[int] = None
) -> None:
    if department_id is not None:
        department = db.query(Department).filter(Department.id == department_id).first()
        if not department:
            raise NotFoundError(f"Department with id {department_id} not found")
        if not department.active:
            raise ValidationError(f"Department with id {department_id} is inactive")

    if user_id is not None:
        if not db.query(User.id).filter(User.id == user_id).first():
            raise NotFoundError(f"User with id {user_id} not found")
        query = db.query(Employee.id).filter(Employee.user_id == user_id)
        if exclude_id is not None:
            query = query.filter(Employee.id != exclude_id)
        if query.first():
            raise ConflictError(f"User {user_id} is already linked to another employee")

    if email:
        query = db.query(Employee.id).filter(func.lower(Employee.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(Employee.id != exclude_id)
        if query.first():
            raise ConflictError(f"Employee with email '{email}' already exists")


def create_employee(db: Session, employee_data: EmployeeCreate, actor: User) -> Employee:
    """
    Create a new employee

    Raises:
        NotFoundError / ValidationError: bad department or user reference
        ConflictError: email or user already in use
    """
    _validate_links(db, employee_data.department_id, employee_data.user_id, employee_data.email)

    employee = Employee(**employee_data.model_dump())
    db.add(employee)
    db.flush()
    log_activity(
        db, actor.id, "CREATE", "Employee", employee.id,
        description=f"Created employee {employee.full_name}",
    )
    db.commit()
    db.refresh(employee)
    return employee


def get_employee(db: Session, employee_id: int, current_user: User) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee with id {employee_id} not found")
    ensure_can_view_employee(current_user, employee)
    return employee


def list_employees(
    db: Session,
    current_user: User,
    department_id: Optional[int] = None,
    status: Optional[EmploymentStatus] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100
) -> Tuple[List[Employee], int]:
    """Employees visible to the user, ordered by last then first name"""
    query = scope_by_employee(db.query(Employee), current_user, Employee.id)
    if department_id:
        query = query.filter(Employee.department_id == department_id)
    if status:
        query = query.filter(Employee.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Employee.first_name.ilike(pattern),
            Employee.last_name.ilike(pattern),
            Employee.email.ilike(pattern),
            Employee.position.ilike(pattern),
        ))
    total = query.count()
    items = query.order_by(Employee.last_name, Employee.first_name, Employee.id).offset(skip).limit(limit).all()
    return items, total


def update_employee(db: Session, employee_id: int, employee_data: EmployeeUpdate, actor: User) -> Employee:
    """
    Update an employee. Admin/HR may change anything; a department manager
    may edit employees of their department but not move them elsewhere.
    """
    employee = get_employee(db, employee_id, actor)
    changes = employee_data.model_dump(exclude_unset=True)

    if not is_privileged(actor):
        if not manages_department(actor, employee.department_id):
            raise AccessDeniedError("Not authorized to update this employee")
        if "department_id" in changes and changes["department_id"] != employee.department_id:
            raise AccessDeniedError("Only HR can move employees between departments")
        if "user_id" in changes:
            raise AccessDeniedError("Only HR can link login accounts")

    _validate_links(
        db,
        changes.get("department_id"),
        changes.get("user_id"),
        changes.get("email"),
        exclude_id=employee.id,
    )

    for field, value in changes.items():
        if field in ("first_name", "last_name", "status") and value is None:
            continue
        setattr(employee, field, value)

    log_activity(db, actor.id, "UPDATE", "Employee", employee.id, details={"fields": sorted(changes)})
    db.commit()
    db.refresh(employee)
    return employee


def delete_employee(db: Session, employee_id: int, actor: User) -> None:
    """Delete an employee; balances, leaves, compliance items and attendance cascade."""
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee with id {employee_id} not found")
    name = employee.full_name
    log_activity(db, actor.id, "DELETE", "Employee", employee.id, description=f"Deleted employee {name}")
    db.delete(employee)
    db.commit()
    logger.info("Employee %s (%s) deleted by user %s", employee_id, name, actor.id)


def iter_export_rows(
    db: Session,
    department_id: Optional[int] = None,
    status: Optional[EmploymentStatus] = None
) -> Iterator[Dict]:
    query = db.query(Employee).options(joinedload(Employee.department))
    if department_id:
        query = query.filter(Employee.department_id == department_id)
    if status:
        query = query.filter(Employee.status == status)
    for employee in query.order_by(Employee.last_name, Employee.first_name, Employee.id).all():
        yield {
            "id": employee.id,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "email": employee.email,
            "phone": employee.phone,
            "position": employee.position,
            "department": employee.department.name if employee.department else None,
            "status": employee.status,
            "hire_date": employee.hire_date,
        }
