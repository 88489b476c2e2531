"""
User account management endpoints (admin-only)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UserOut
from app.services.user_service import create_user, list_users, get_user, update_user

router = APIRouter()


@router.post("", response_model=UserOut, status_code=201)
async def create_user_endpoint(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    """Create a login account"""
    return create_user(db, user_data, current_user.id)


@router.get("", response_model=List[UserOut])
async def list_users_endpoint(
    role: Optional[UserRole] = Query(None),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    return list_users(db, role=role, active=active)


@router.get("/{user_id}", response_model=UserOut)
async def get_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    return get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
async def update_user_endpoint(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    """Change role, department, activation or password"""
    return update_user(db, user_id, user_data, current_user.id)
