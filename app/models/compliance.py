"""
Compliance item model (licenses, certifications, trainings, reviews)
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import ComplianceStatus, enum_column
from app.utils.datetime_utils import now_utc


class Compliance(Base):
    __tablename__ = "compliance_items"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(String(50), nullable=False)   # License, Certification, Training, Review
    item_name = Column(String(255), nullable=False)
    authority = Column(String(255), nullable=True)
    license_number = Column(String(120), nullable=True)
    issue_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)  # some items never expire
    # derived from expiration_date by the sweep once the date is set
    status = Column(enum_column(ComplianceStatus), nullable=False, default=ComplianceStatus.PENDING_REVIEW)
    notes = Column(Text, nullable=True)
    verified_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    employee = relationship("Employee", back_populates="compliance_items")
    verified_by = relationship("User", foreign_keys=[verified_by_id])

    __table_args__ = (
        Index("ix_compliance_items_expiration_date", "expiration_date"),
        Index("ix_compliance_items_status", "status"),
    )
