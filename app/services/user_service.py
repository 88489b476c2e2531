"""
User service - login accounts and authentication
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.security import hash_password, verify_password
from app.models.department import Department
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.activity_service import log_activity

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """The user for the credentials, or None. Inactive users are returned; callers reject them."""
    user = db.query(User).filter(func.lower(User.username) == username.strip().lower()).first()
    if not user or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def _check_department(db: Session, department_id: Optional[int]) -> None:
    if department_id is not None and not db.query(Department.id).filter(Department.id == department_id).first():
        raise NotFoundError(f"Department with id {department_id} not found")


def create_user(db: Session, data: UserCreate, actor_id: Optional[int]) -> User:
    """
    Raises:
        ConflictError: username already exists
    """
    if db.query(User).filter(func.lower(User.username) == data.username).first():
        raise ConflictError(f"User '{data.username}' already exists")
    _check_department(db, data.department_id)

    user = User(
        username=data.username,
        full_name=data.full_name,
        password_hash=hash_password(data.password),
        role=data.role,
        department_id=data.department_id,
        active=True,
    )
    db.add(user)
    db.flush()
    log_activity(db, actor_id, "CREATE", "User", user.id, details={"username": user.username, "role": user.role})
    db.commit()
    db.refresh(user)
    return user


def list_users(db: Session, role: Optional[UserRole] = None, active: Optional[bool] = None) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if active is not None:
        query = query.filter(User.active == active)
    return query.order_by(User.username).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def update_user(db: Session, user_id: int, data: UserUpdate, actor_id: int) -> User:
    user = get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)
    if "department_id" in changes:
        _check_department(db, changes["department_id"])

    password = changes.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for field, value in changes.items():
        if field in ("role", "active") and value is None:
            continue
        setattr(user, field, value)

    log_activity(db, actor_id, "UPDATE", "User", user.id, details={"fields": sorted(data.model_fields_set)})
    db.commit()
    db.refresh(user)
    return user
