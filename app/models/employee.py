"""
Employee model
"""
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import EmploymentStatus, enum_column
from app.utils.datetime_utils import now_utc


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone = Column(String(40), nullable=True)
    position = Column(String(120), nullable=True)
    hire_date = Column(Date, nullable=True)
    status = Column(enum_column(EmploymentStatus), nullable=False, default=EmploymentStatus.ACTIVE, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    # Relationships
    department = relationship("Department", back_populates="employees")
    user = relationship("User", back_populates="employee")
    leave_balances = relationship(
        "LeaveBalance", back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    leaves = relationship("Leave", back_populates="employee", cascade="all, delete-orphan", passive_deletes=True)
    compliance_items = relationship(
        "Compliance", back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    attendance_records = relationship(
        "Attendance", back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    offboarding = relationship(
        "Offboarding", back_populates="employee", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
