"""
User account schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, field_validator, ConfigDict

from app.core.security import validate_password
from app.models.enums import UserRole


class UserCreate(BaseModel):
    """Schema for creating a login account"""
    username: str = Field(..., min_length=3, max_length=255, description="Login name, usually an email address")
    password: str = Field(..., description="Initial password (min 6 characters)")
    full_name: Optional[str] = Field(None, max_length=255)
    role: UserRole = Field(default=UserRole.EMPLOYEE)
    department_id: Optional[int] = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class UserUpdate(BaseModel):
    """Admin update of role, department or activation"""
    full_name: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None
    department_id: Optional[int] = None
    active: Optional[bool] = None
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_password(v)


class UserOut(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None
    role: UserRole
    department_id: Optional[int] = None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None
