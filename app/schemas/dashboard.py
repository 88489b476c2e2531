"""
Dashboard schemas
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, field_serializer, ConfigDict


class ActivityOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    action_type: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    description: str
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class DashboardMetrics(BaseModel):
    headcount: int
    active_employees: int
    pending_leaves: int
    on_leave_today: int
    compliance_expiring_soon: int
    compliance_expired: int
    active_offboardings: int
