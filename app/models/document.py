"""
Document models: stored files, their access log and acknowledgments
"""
from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Text,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import DocumentType, DocumentAccessLevel, DocumentAccessType, enum_column
from app.utils.datetime_utils import now_utc


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    document_type = Column(enum_column(DocumentType), nullable=False, default=DocumentType.OTHER, index=True)
    access_level = Column(
        enum_column(DocumentAccessLevel), nullable=False, default=DocumentAccessLevel.HR, index=True
    )
    file_name = Column(String(255), nullable=False)  # name as uploaded
    file_path = Column(String(512), nullable=False, unique=True)  # relative to DOCUMENT_STORAGE_PATH
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    checksum = Column(String(64), nullable=True)  # sha256 hex
    is_hipaa_sensitive = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)
    expiration_date = Column(Date, nullable=True)
    retention_period_days = Column(Integer, nullable=False, default=365)
    scheduled_deletion_date = Column(Date, nullable=True)
    tags = Column(JSON, nullable=True)
    requires_acknowledgment = Column(Boolean, nullable=False, default=False)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True, index=True)
    uploaded_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    employee = relationship("Employee")
    department = relationship("Department")
    uploaded_by = relationship("User", foreign_keys=[uploaded_by_id])
    access_logs = relationship(
        "DocumentAccessLog",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DocumentAccessLog.accessed_at",
    )
    acknowledgments = relationship(
        "DocumentAcknowledgment", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )


class DocumentAccessLog(Base):
    __tablename__ = "document_access_logs"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    access_type = Column(enum_column(DocumentAccessType), nullable=False)
    accessed_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    document = relationship("Document", back_populates="access_logs")


class DocumentAcknowledgment(Base):
    __tablename__ = "document_acknowledgments"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    acknowledged_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    document = relationship("Document", back_populates="acknowledgments")

    __table_args__ = (
        UniqueConstraint("document_id", "user_id", name="uq_document_acknowledgments_document_user"),
    )
