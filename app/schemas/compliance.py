"""
Compliance item schemas
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict, model_validator

from app.models.enums import ComplianceStatus


class ComplianceCreate(BaseModel):
    """Schema for creating a compliance item"""
    employee_id: int = Field(..., description="Employee the item belongs to")
    item_type: str = Field(..., min_length=1, max_length=50, description="License, Certification, Training, Review")
    item_name: str = Field(..., min_length=1, max_length=255)
    authority: Optional[str] = Field(None, max_length=255, description="Issuing authority")
    license_number: Optional[str] = Field(None, max_length=120)
    issue_date: Optional[date] = None
    expiration_date: Optional[date] = None
    status: Optional[ComplianceStatus] = Field(
        None, description="Initial status; derived from expiration_date when one is given"
    )
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_dates(self):
        if self.issue_date and self.expiration_date and self.expiration_date < self.issue_date:
            raise ValueError("expiration_date must not precede issue_date")
        return self


class ComplianceUpdate(BaseModel):
    """Schema for updating a compliance item (partial)"""
    item_type: Optional[str] = Field(None, min_length=1, max_length=50)
    item_name: Optional[str] = Field(None, min_length=1, max_length=255)
    authority: Optional[str] = Field(None, max_length=255)
    license_number: Optional[str] = Field(None, max_length=120)
    issue_date: Optional[date] = None
    expiration_date: Optional[date] = None
    status: Optional[ComplianceStatus] = None
    notes: Optional[str] = None


class ComplianceOut(BaseModel):
    id: int
    employee_id: int
    item_type: str
    item_name: str
    authority: Optional[str] = None
    license_number: Optional[str] = None
    issue_date: Optional[date] = None
    expiration_date: Optional[date] = None
    status: ComplianceStatus
    notes: Optional[str] = None
    verified_by_id: Optional[int] = None
    verified_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", "verified_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class SweepResultOut(BaseModel):
    updated_to_expired: int
    updated_to_expiring_soon: int
    reverted_to_active: int
