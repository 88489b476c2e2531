"""
Offboarding models
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import OffboardingStatus, TaskStatus, enum_column
from app.utils.datetime_utils import now_utc


class Offboarding(Base):
    __tablename__ = "offboardings"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    exit_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(enum_column(OffboardingStatus), nullable=False, default=OffboardingStatus.PENDING, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    employee = relationship("Employee", back_populates="offboarding")
    tasks = relationship(
        "OffboardingTask",
        back_populates="offboarding",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OffboardingTask.id",
    )


class OffboardingTask(Base):
    __tablename__ = "offboarding_tasks"

    id = Column(Integer, primary_key=True, index=True)
    offboarding_id = Column(Integer, ForeignKey("offboardings.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    status = Column(enum_column(TaskStatus), nullable=False, default=TaskStatus.PENDING)
    assigned_to_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    assigned_role = Column(String(50), nullable=True)  # IT, HR, Manager
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    offboarding = relationship("Offboarding", back_populates="tasks")


class TaskTemplate(Base):
    __tablename__ = "task_templates"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(Text, nullable=False)
    default_assigned_role = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
