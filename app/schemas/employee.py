"""
Employee schemas
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, field_validator, ConfigDict

from app.models.enums import EmploymentStatus


class EmployeeCreate(BaseModel):
    """Schema for creating an employee"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=40)
    position: Optional[str] = Field(None, max_length=120)
    hire_date: Optional[date] = None
    status: EmploymentStatus = Field(default=EmploymentStatus.ACTIVE)
    department_id: Optional[int] = None
    user_id: Optional[int] = Field(None, description="Login account linked to this employee")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if v and "@" not in v:
            raise ValueError("email must be a valid email address")
        return v or None


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee (partial)"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=40)
    position: Optional[str] = Field(None, max_length=120)
    hire_date: Optional[date] = None
    status: Optional[EmploymentStatus] = None
    department_id: Optional[int] = None
    user_id: Optional[int] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return EmployeeCreate.normalize_email(v)


class EmployeeOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    status: EmploymentStatus
    department_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class EmployeeListResponse(BaseModel):
    items: List[EmployeeOut]
    total: int
