"""
Leave models: requests and the per-type balance ledger
"""
from sqlalchemy import (
    Column,
    Integer,
    Float,
    Date,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import LeaveType, LeaveStatus, enum_column
from app.utils.datetime_utils import now_utc


class Leave(Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    leave_type = Column(enum_column(LeaveType), nullable=False)
    status = Column(enum_column(LeaveStatus), nullable=False, default=LeaveStatus.PENDING, index=True)
    reason = Column(Text, nullable=True)
    approver_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)  # set on approval and on rejection
    comments = Column(Text, nullable=True)
    hours_deducted = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="leaves")
    approver = relationship("User", foreign_keys=[approver_id])

    __table_args__ = (
        Index("ix_leaves_employee_dates", "employee_id", "start_date", "end_date"),
        CheckConstraint("start_date <= end_date", name="check_leave_start_le_end"),
    )


class LeaveBalance(Base):
    """
    One running balance per (employee, leave type).

    balance is the amount currently available; accrued_ytd and used_ytd only
    ever grow (no reset logic lives here). Rows are created lazily by the
    ledger and removed only through the employee cascade.
    """
    __tablename__ = "leave_balances"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type = Column(String(50), nullable=False)
    balance = Column(Float, nullable=False, default=0.0)
    accrued_ytd = Column(Float, nullable=False, default=0.0)
    used_ytd = Column(Float, nullable=False, default=0.0)
    last_updated = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    employee = relationship("Employee", back_populates="leave_balances")

    __table_args__ = (
        UniqueConstraint("employee_id", "leave_type", name="uq_leave_balances_employee_type"),
    )
