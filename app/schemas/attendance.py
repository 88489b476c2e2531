"""
Attendance schemas
"""
from datetime import date, datetime, time
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, model_validator, ConfigDict

from app.models.enums import AttendanceStatus


class AttendanceCreate(BaseModel):
    """One day of attendance for an employee"""
    employee_id: Optional[int] = Field(None, description="Defaults to the caller's own employee record")
    date: date
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    status: AttendanceStatus = Field(default=AttendanceStatus.PRESENT)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_times(self):
        if self.time_in and self.time_out and self.time_out < self.time_in:
            raise ValueError("time_out must not be before time_in")
        return self


class AttendanceUpdate(BaseModel):
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class AttendanceOut(BaseModel):
    id: int
    employee_id: int
    date: date
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    status: AttendanceStatus
    hours_worked: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class AttendanceListResponse(BaseModel):
    items: List[AttendanceOut]
    total: int
