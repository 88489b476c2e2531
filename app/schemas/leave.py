"""
Leave schemas
"""
from datetime import date, datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, model_validator, field_serializer
from pydantic import ConfigDict
from app.utils.datetime_utils import iso_utc
from app.models.enums import LeaveType, LeaveStatus


class LeaveApplyRequest(BaseModel):
    """Schema for applying leave"""
    leave_type: LeaveType = Field(..., description="Type of leave")
    start_date: date = Field(..., description="First day of leave")
    end_date: date = Field(..., description="Last day of leave (inclusive)")
    reason: Optional[str] = Field(None, description="Reason for leave")
    employee_id: Optional[int] = Field(
        None, description="Employee to apply for (admin/HR only); defaults to the caller"
    )

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class LeaveActionRequest(BaseModel):
    """Schema for approving or rejecting a leave request"""
    comments: Optional[str] = Field(None, description="Approver comments")


class LeaveOut(BaseModel):
    """Schema for leave output"""
    id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None
    approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None
    hours_deducted: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("approved_at", "created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt) if dt is not None else None


class LeaveListResponse(BaseModel):
    items: List[LeaveOut]
    total: int


class LeaveBalanceOut(BaseModel):
    """A ledger record; amounts are hours"""
    id: int
    employee_id: int
    leave_type: str
    balance: float
    accrued_ytd: float
    used_ytd: float
    last_updated: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("last_updated", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt) if dt is not None else None


class BalanceAdjustRequest(BaseModel):
    """Manual HR adjustment of a balance"""
    operation: Literal["accrue", "deduct"] = Field(..., description="accrue adds, deduct subtracts")
    amount: float = Field(..., gt=0, description="Hours to add or subtract")
    reason: str = Field(..., min_length=1, max_length=500, description="Why the balance is adjusted")


class AccrualResultOut(BaseModel):
    processed: int
    leave_type: str
    amount: float
