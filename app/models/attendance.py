"""
Attendance model
"""
from sqlalchemy import Column, Integer, Float, Date, Time, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import AttendanceStatus, enum_column
from app.utils.datetime_utils import now_utc


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time_in = Column(Time, nullable=True)
    time_out = Column(Time, nullable=True)
    status = Column(enum_column(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    hours_worked = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    employee = relationship("Employee", back_populates="attendance_records")

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
    )
