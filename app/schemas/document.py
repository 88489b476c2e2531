"""
Document schemas
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, ConfigDict

from app.models.enums import DocumentType, DocumentAccessLevel, DocumentAccessType
from app.utils.datetime_utils import iso_utc

# Fields any reader with access may see on a HIPAA-sensitive document
SANITIZED_FIELDS = {
    "id",
    "title",
    "document_type",
    "access_level",
    "file_name",
    "version",
    "employee_id",
    "department_id",
    "requires_acknowledgment",
    "created_at",
    "updated_at",
}


class DocumentUpdate(BaseModel):
    """Metadata update; every field optional"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    document_type: Optional[DocumentType] = None
    access_level: Optional[DocumentAccessLevel] = None
    is_hipaa_sensitive: Optional[bool] = None
    expiration_date: Optional[date] = None
    retention_period_days: Optional[int] = Field(None, ge=1)
    tags: Optional[List[str]] = None
    requires_acknowledgment: Optional[bool] = None
    employee_id: Optional[int] = None
    department_id: Optional[int] = None


class DocumentOut(BaseModel):
    id: int
    title: str
    document_type: DocumentType
    access_level: DocumentAccessLevel
    file_name: str
    version: int
    employee_id: Optional[int] = None
    department_id: Optional[int] = None
    requires_acknowledgment: bool
    created_at: datetime
    updated_at: datetime
    # hidden from non-HR readers of HIPAA-sensitive documents
    description: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    checksum: Optional[str] = None
    is_hipaa_sensitive: Optional[bool] = None
    expiration_date: Optional[date] = None
    retention_period_days: Optional[int] = None
    scheduled_deletion_date: Optional[date] = None
    tags: Optional[List[str]] = None
    uploaded_by_id: Optional[int] = None
    redacted: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt) if dt is not None else None

    @classmethod
    def sanitized(cls, document) -> "DocumentOut":
        full = cls.model_validate(document)
        return cls(**full.model_dump(include=SANITIZED_FIELDS), redacted=True)


class DocumentListResponse(BaseModel):
    items: List[DocumentOut]
    total: int


class DocumentAccessLogOut(BaseModel):
    id: int
    document_id: int
    user_id: Optional[int] = None
    access_type: DocumentAccessType
    accessed_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("accessed_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt) if dt is not None else None


class DocumentAcknowledgmentOut(BaseModel):
    id: int
    document_id: int
    user_id: int
    acknowledged_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("acknowledged_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt) if dt is not None else None
