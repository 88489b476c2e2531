"""
Department service - business logic for department management
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models.department import Department
from app.schemas.department import DepartmentCreate, DepartmentUpdate
from app.services.activity_service import log_activity


def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Department).filter(func.lower(Department.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(Department.id != exclude_id)
    return query.first() is not None


def create_department(
    db: Session,
    department_data: DepartmentCreate,
    actor_id: int
) -> Department:
    """
    Create a new department

    Raises:
        ConflictError: If department name already exists (case-insensitive)
    """
    if _name_taken(db, department_data.name):
        raise ConflictError(f"Department with name '{department_data.name}' already exists")

    department = Department(
        name=department_data.name,
        active=department_data.active
    )
    db.add(department)
    db.flush()
    log_activity(
        db, actor_id, "CREATE", "Department", department.id,
        details={"name": department.name, "active": department.active}
    )
    db.commit()
    db.refresh(department)
    return department


def list_departments(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    active_only: Optional[bool] = None
) -> List[Department]:
    """List departments ordered by name"""
    query = db.query(Department)

    if active_only is not None:
        query = query.filter(Department.active == active_only)

    return query.order_by(Department.name).offset(skip).limit(limit).all()


def get_department(db: Session, department_id: int) -> Department:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise NotFoundError(f"Department with id {department_id} not found")
    return department


def update_department(
    db: Session,
    department_id: int,
    department_data: DepartmentUpdate,
    actor_id: int
) -> Department:
    """
    Update a department

    Raises:
        NotFoundError: If department not found
        ConflictError: If the new name is taken
    """
    department = get_department(db, department_id)

    changes = department_data.model_dump(exclude_unset=True)
    if changes.get("name") and _name_taken(db, changes["name"], exclude_id=department.id):
        raise ConflictError(f"Department with name '{changes['name']}' already exists")

    before = {"name": department.name, "active": department.active}
    for field, value in changes.items():
        if value is not None:
            setattr(department, field, value)

    log_activity(
        db, actor_id, "UPDATE", "Department", department.id,
        details={"before": before, "after": {"name": department.name, "active": department.active}}
    )
    db.commit()
    db.refresh(department)
    return department
