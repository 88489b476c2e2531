"""
Department management endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles, get_current_user
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.department import DepartmentCreate, DepartmentUpdate, DepartmentOut
from app.services.department_service import (
    create_department,
    list_departments,
    get_department,
    update_department
)

router = APIRouter()


@router.post("", response_model=DepartmentOut, status_code=201)
async def create_department_endpoint(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Create a new department (Admin/HR)"""
    return create_department(db, department_data, current_user.id)


@router.get("", response_model=List[DepartmentOut])
async def list_departments_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    active_only: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List departments (any authenticated user)"""
    return list_departments(db, skip=skip, limit=limit, active_only=active_only)


@router.get("/{department_id}", response_model=DepartmentOut)
async def get_department_endpoint(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a department by ID"""
    return get_department(db, department_id)


@router.patch("/{department_id}", response_model=DepartmentOut)
async def update_department_endpoint(
    department_id: int,
    department_data: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Update a department (Admin/HR)"""
    return update_department(db, department_id, department_data, current_user.id)
