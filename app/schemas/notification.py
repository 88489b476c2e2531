"""
Notification schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, field_serializer, ConfigDict


class NotificationOut(BaseModel):
    id: int
    title: str
    message: str
    type: str
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_utc
        return iso_utc(dt) if dt is not None else None


class NotificationListResponse(BaseModel):
    items: List[NotificationOut]
    unread: int
