"""
Document service - upload, read, update, delete and acknowledgment.

Access decisions come from document_access.can_access(). Reads append an
access-log entry after the fact; a failure to log never fails the read.
"""
import logging
import mimetypes
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from app.models.department import Department
from app.models.document import Document, DocumentAccessLog, DocumentAcknowledgment
from app.models.employee import Employee
from app.models.enums import DocumentAccessLevel, DocumentAccessType, DocumentType, UserRole
from app.schemas.document import DocumentUpdate
from app.services.activity_service import log_activity
from app.services.document_access import Requester, can_access
from app.services.document_storage import DocumentStorage
from app.utils.datetime_utils import add_days, today_utc

logger = logging.getLogger(__name__)

UPLOADER_ROLES = (UserRole.ADMIN, UserRole.HR_MANAGER, UserRole.DEPARTMENT_MANAGER)
DEFAULT_RETENTION_DAYS = 365


def _restricted_for_manager(document_type: Optional[DocumentType], is_hipaa_sensitive: bool) -> bool:
    return bool(is_hipaa_sensitive) or document_type == DocumentType.MEDICAL


def _load(db: Session, document_id: int) -> Document:
    document = db.query(Document).options(
        joinedload(Document.employee),
    ).filter(Document.id == document_id).first()
    if not document:
        raise NotFoundError("Document not found")
    return document


def _check_references(db: Session, employee_id: Optional[int], department_id: Optional[int]) -> None:
    if employee_id is not None and not db.query(Employee.id).filter(Employee.id == employee_id).first():
        raise NotFoundError(f"Employee {employee_id} not found")
    if department_id is not None and not db.query(Department.id).filter(Department.id == department_id).first():
        raise NotFoundError(f"Department {department_id} not found")


def record_access(db: Session, document: Document, user_id: Optional[int], access_type: DocumentAccessType) -> bool:
    """
    Append an access-log entry and commit it on its own.

    Returns False (after logging) when the entry could not be written.
    """
    try:
        db.add(DocumentAccessLog(document_id=document.id, user_id=user_id, access_type=access_type))
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "Failed to record %s access to document %s by user %s",
            access_type.value, document.id, user_id, exc_info=e
        )
        return False


def upload_document(
    db: Session,
    storage: DocumentStorage,
    requester: Requester,
    content: bytes,
    file_name: str,
    metadata: Dict[str, Any],
    content_type: Optional[str] = None,
) -> Document:
    """
    Store an uploaded file and its metadata.

    Department managers may only upload for their own department and never
    HIPAA-sensitive or medical documents.
    """
    if requester.role not in UPLOADER_ROLES:
        raise AccessDeniedError("Insufficient permissions to upload documents")
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(f"File exceeds the maximum upload size of {settings.MAX_UPLOAD_BYTES} bytes")

    document_type = DocumentType(metadata.get("document_type") or DocumentType.OTHER)
    access_level = DocumentAccessLevel(metadata.get("access_level") or DocumentAccessLevel.HR)
    is_hipaa = bool(metadata.get("is_hipaa_sensitive"))
    employee_id = metadata.get("employee_id")
    department_id = metadata.get("department_id")

    if requester.role == UserRole.DEPARTMENT_MANAGER:
        if department_id is not None and department_id != requester.department_id:
            raise AccessDeniedError("Cannot upload documents for other departments")
        department_id = department_id or requester.department_id
        if _restricted_for_manager(document_type, is_hipaa):
            raise AccessDeniedError("Cannot upload HIPAA-sensitive or medical documents")

    _check_references(db, employee_id, department_id)

    retention = metadata.get("retention_period_days") or DEFAULT_RETENTION_DAYS
    stored = storage.save(content, file_name)
    document = Document(
        title=metadata.get("title") or file_name,
        description=metadata.get("description"),
        document_type=document_type,
        access_level=access_level,
        file_name=file_name,
        file_path=stored.relative_path,
        file_size=stored.size,
        mime_type=content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream",
        checksum=stored.checksum,
        is_hipaa_sensitive=is_hipaa,
        expiration_date=metadata.get("expiration_date"),
        retention_period_days=retention,
        scheduled_deletion_date=add_days(today_utc(), retention),
        tags=metadata.get("tags"),
        requires_acknowledgment=bool(metadata.get("requires_acknowledgment")),
        employee_id=employee_id,
        department_id=department_id,
        uploaded_by_id=requester.user_id,
    )
    try:
        db.add(document)
        db.flush()
        db.add(DocumentAccessLog(
            document_id=document.id, user_id=requester.user_id, access_type=DocumentAccessType.CREATE
        ))
        log_activity(
            db, requester.user_id, "CREATE", "Document", document.id,
            description=f"Uploaded document '{document.title}'",
        )
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(stored.relative_path)
        raise
    db.refresh(document)
    return document


def get_document(db: Session, document_id: int, requester: Requester) -> Tuple[Document, bool]:
    """
    Fetch a document for reading and log the VIEW.

    Returns:
        (document, redact) where redact means HIPAA-sensitive fields must be
        hidden from this requester

    Raises:
        NotFoundError: no such document
        AccessDeniedError: can_access() denies the requester
    """
    document = _load(db, document_id)
    if not can_access(document, requester):
        raise AccessDeniedError("Insufficient permissions to access this document")

    record_access(db, document, requester.user_id, DocumentAccessType.VIEW)
    redact = bool(document.is_hipaa_sensitive) and not requester.is_privileged
    return document, redact


def open_for_download(db: Session, storage: DocumentStorage, document_id: int, requester: Requester):
    """Access-check a download and return (document, absolute file path)."""
    document = _load(db, document_id)
    if not can_access(document, requester):
        raise AccessDeniedError("Insufficient permissions to access this document")
    if not storage.exists(document.file_path):
        logger.error("Stored file missing for document %s: %s", document.id, document.file_path)
        raise NotFoundError("Document file not found")

    record_access(db, document, requester.user_id, DocumentAccessType.DOWNLOAD)
    return document, storage.path_for(document.file_path)


def list_documents(
    db: Session,
    requester: Requester,
    document_type: Optional[DocumentType] = None,
    access_level: Optional[DocumentAccessLevel] = None,
    employee_id: Optional[int] = None,
    department_id: Optional[int] = None,
    requires_acknowledgment: Optional[bool] = None,
    expiring_before: Optional[date] = None,
    search: Optional[str] = None,
) -> List[Document]:
    """Documents matching the filters that the requester may read, newest first"""
    query = db.query(Document).options(joinedload(Document.employee))
    if document_type:
        query = query.filter(Document.document_type == document_type)
    if access_level and requester.is_privileged:
        query = query.filter(Document.access_level == access_level)
    if employee_id:
        query = query.filter(Document.employee_id == employee_id)
    if department_id:
        query = query.filter(Document.department_id == department_id)
    if requires_acknowledgment is not None:
        query = query.filter(Document.requires_acknowledgment == requires_acknowledgment)
    if expiring_before:
        query = query.filter(Document.expiration_date.isnot(None), Document.expiration_date < expiring_before)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Document.title.ilike(pattern) | Document.description.ilike(pattern))

    documents = query.order_by(Document.created_at.desc(), Document.id.desc()).all()
    return [d for d in documents if can_access(d, requester)]


def _check_can_modify(document: Document, requester: Requester) -> None:
    if requester.is_privileged:
        return
    if requester.role != UserRole.DEPARTMENT_MANAGER:
        raise AccessDeniedError("Insufficient permissions to update documents")
    if document.department_id is None or document.department_id != requester.department_id:
        raise AccessDeniedError("Cannot update documents from other departments")
    if _restricted_for_manager(document.document_type, document.is_hipaa_sensitive):
        raise AccessDeniedError("Cannot update HIPAA-sensitive or medical documents")


def update_document(db: Session, document_id: int, data: DocumentUpdate, requester: Requester) -> Document:
    """
    Update metadata. A new retention period reschedules deletion from today.
    """
    document = _load(db, document_id)
    _check_can_modify(document, requester)

    changes = data.model_dump(exclude_unset=True)
    if not requester.is_privileged:
        # a manager's edit may not move the document out of reach of these rules
        if changes.get("department_id") not in (None, requester.department_id):
            raise AccessDeniedError("Cannot move documents to other departments")
        if _restricted_for_manager(changes.get("document_type"), changes.get("is_hipaa_sensitive", False)):
            raise AccessDeniedError("Cannot mark documents HIPAA-sensitive or medical")

    _check_references(db, changes.get("employee_id"), changes.get("department_id"))

    retention = changes.get("retention_period_days")
    if retention and retention != document.retention_period_days:
        document.scheduled_deletion_date = add_days(today_utc(), retention)

    for field, value in changes.items():
        setattr(document, field, value)

    db.add(DocumentAccessLog(document_id=document.id, user_id=requester.user_id, access_type=DocumentAccessType.UPDATE))
    log_activity(db, requester.user_id, "UPDATE", "Document", document.id, details={"fields": sorted(changes)})
    db.commit()
    db.refresh(document)
    return document


def replace_file(
    db: Session,
    storage: DocumentStorage,
    document_id: int,
    requester: Requester,
    content: bytes,
    file_name: str,
    content_type: Optional[str] = None,
) -> Document:
    """Swap in new file content and bump the version."""
    document = _load(db, document_id)
    _check_can_modify(document, requester)
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(f"File exceeds the maximum upload size of {settings.MAX_UPLOAD_BYTES} bytes")

    old_path = document.file_path
    stored = storage.save(content, file_name)
    document.file_path = stored.relative_path
    document.file_name = file_name
    document.file_size = stored.size
    document.checksum = stored.checksum
    document.mime_type = content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    document.version = (document.version or 1) + 1
    db.add(DocumentAccessLog(document_id=document.id, user_id=requester.user_id, access_type=DocumentAccessType.UPDATE))
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(stored.relative_path)
        raise

    try:
        storage.delete(old_path)
    except OSError as e:
        logger.error("Failed to remove replaced file %s", old_path, exc_info=e)
    db.refresh(document)
    return document


def delete_document(db: Session, storage: DocumentStorage, document_id: int, requester: Requester) -> None:
    """Admin / HR only. The row goes first; a failure to remove the file is only logged."""
    if not requester.is_privileged:
        raise AccessDeniedError("Only admins and HR can delete documents")
    document = _load(db, document_id)
    file_path = document.file_path
    log_activity(
        db, requester.user_id, "DELETE", "Document", document.id,
        description=f"Deleted document '{document.title}'",
    )
    db.delete(document)
    db.commit()

    try:
        storage.delete(file_path)
    except (OSError, ValueError) as e:
        logger.error("Failed to remove file for deleted document %s", document_id, exc_info=e)


def acknowledge_document(db: Session, document_id: int, requester: Requester) -> DocumentAcknowledgment:
    """
    Record that the requester has read the document.

    Raises:
        ValidationError: the document does not ask for acknowledgment
        ConflictError: already acknowledged by this user
    """
    document = _load(db, document_id)
    if not can_access(document, requester):
        raise AccessDeniedError("Insufficient permissions to access this document")
    if not document.requires_acknowledgment:
        raise ValidationError("This document does not require acknowledgment")

    existing = db.query(DocumentAcknowledgment).filter(
        DocumentAcknowledgment.document_id == document.id,
        DocumentAcknowledgment.user_id == requester.user_id,
    ).first()
    if existing:
        raise ConflictError("Document already acknowledged")

    ack = DocumentAcknowledgment(document_id=document.id, user_id=requester.user_id)
    db.add(ack)
    db.add(DocumentAccessLog(
        document_id=document.id, user_id=requester.user_id, access_type=DocumentAccessType.ACKNOWLEDGE
    ))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Document already acknowledged")
    db.refresh(ack)
    return ack


def list_access_log(db: Session, document_id: int, requester: Requester) -> List[DocumentAccessLog]:
    if not requester.is_privileged:
        raise AccessDeniedError("Only admins and HR can view document access logs")
    document = _load(db, document_id)
    return db.query(DocumentAccessLog).filter(
        DocumentAccessLog.document_id == document.id
    ).order_by(DocumentAccessLog.accessed_at, DocumentAccessLog.id).all()
