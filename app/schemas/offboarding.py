"""
Offboarding schemas
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, ConfigDict

from app.models.enums import OffboardingStatus, TaskStatus


class OffboardingStart(BaseModel):
    employee_id: int
    exit_date: date
    reason: Optional[str] = Field(None, description="Resignation, termination, retirement, ...")


class OffboardingTaskOut(BaseModel):
    id: int
    offboarding_id: int
    description: str
    status: TaskStatus
    assigned_to_user_id: Optional[int] = None
    assigned_role: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("completed_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class OffboardingOut(BaseModel):
    id: int
    employee_id: int
    employee_name: Optional[str] = None
    exit_date: date
    reason: Optional[str] = None
    status: OffboardingStatus
    progress: int = Field(0, description="Percentage of completed tasks")
    tasks: List[OffboardingTaskOut] = []
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class TaskTemplateCreate(BaseModel):
    description: str = Field(..., min_length=1)
    default_assigned_role: Optional[str] = Field(None, max_length=50, description="IT, HR, Manager, Finance")


class TaskTemplateOut(BaseModel):
    id: int
    description: str
    default_assigned_role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
