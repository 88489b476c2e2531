"""
Activity log model
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Text

from app.db.base import Base
from app.utils.datetime_utils import now_utc


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action_type = Column(String(30), nullable=False)  # CREATE, UPDATE, DELETE, APPROVE, REJECT, ...
    entity_type = Column(String(50), nullable=True)   # Employee, Leave, Document, ...
    entity_id = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False, index=True)
