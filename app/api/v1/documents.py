"""
Document endpoints
"""
import json
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_requester, require_roles
from app.core.exceptions import ValidationError
from app.models.enums import DocumentAccessLevel, DocumentType, UserRole
from app.models.user import User
from app.schemas.document import (
    DocumentAccessLogOut,
    DocumentAcknowledgmentOut,
    DocumentListResponse,
    DocumentOut,
    DocumentUpdate,
)
from app.services import document_service
from app.services.document_access import Requester
from app.services.document_storage import DocumentStorage

router = APIRouter()


def get_document_storage(request: Request) -> DocumentStorage:
    return request.app.state.document_storage


def _present(document, redact: bool) -> DocumentOut:
    return DocumentOut.sanitized(document) if redact else DocumentOut.model_validate(document)


def _parse_tags(tags: Optional[str]) -> Optional[List[str]]:
    """Tags arrive as a JSON list or a comma-separated string"""
    if not tags:
        return None
    if tags.strip().startswith("["):
        try:
            parsed = json.loads(tags)
        except json.JSONDecodeError:
            raise ValidationError("tags must be a JSON list or comma-separated string")
        return [str(t).strip() for t in parsed if str(t).strip()]
    return [t.strip() for t in tags.split(",") if t.strip()]


@router.post("", response_model=DocumentOut, status_code=201)
async def upload_document_endpoint(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    document_type: DocumentType = Form(DocumentType.OTHER),
    access_level: DocumentAccessLevel = Form(DocumentAccessLevel.HR),
    is_hipaa_sensitive: bool = Form(False),
    requires_acknowledgment: bool = Form(False),
    employee_id: Optional[int] = Form(None),
    department_id: Optional[int] = Form(None),
    expiration_date: Optional[date] = Form(None),
    retention_period_days: Optional[int] = Form(None, ge=1),
    tags: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
    requester: Requester = Depends(get_requester),
    current_user: User = Depends(
        require_roles(UserRole.ADMIN, UserRole.HR_MANAGER, UserRole.DEPARTMENT_MANAGER)
    )
):
    """Upload a document (multipart form; Admin/HR/department managers)"""
    content = await file.read()
    metadata = {
        "title": title,
        "description": description,
        "document_type": document_type,
        "access_level": access_level,
        "is_hipaa_sensitive": is_hipaa_sensitive,
        "requires_acknowledgment": requires_acknowledgment,
        "employee_id": employee_id,
        "department_id": department_id,
        "expiration_date": expiration_date,
        "retention_period_days": retention_period_days,
        "tags": _parse_tags(tags),
    }
    document = document_service.upload_document(
        db, storage, requester, content,
        file_name=file.filename or "upload",
        metadata=metadata,
        content_type=file.content_type,
    )
    return DocumentOut.model_validate(document)


@router.get("", response_model=DocumentListResponse)
async def list_documents_endpoint(
    document_type: Optional[DocumentType] = Query(None),
    access_level: Optional[DocumentAccessLevel] = Query(None, description="Admin/HR only"),
    employee_id: Optional[int] = Query(None),
    department_id: Optional[int] = Query(None),
    requires_acknowledgment: Optional[bool] = Query(None),
    expiring_before: Optional[date] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    requester: Requester = Depends(get_requester)
):
    """Documents the caller may read"""
    documents = document_service.list_documents(
        db, requester,
        document_type=document_type,
        access_level=access_level,
        employee_id=employee_id,
        department_id=department_id,
        requires_acknowledgment=requires_acknowledgment,
        expiring_before=expiring_before,
        search=search,
    )
    items = [
        _present(d, bool(d.is_hipaa_sensitive) and not requester.is_privileged)
        for d in documents
    ]
    return DocumentListResponse(items=items, total=len(items))


@router.get("/{document_id}", response_model=DocumentOut)
async def get_document_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    requester: Requester = Depends(get_requester)
):
    """Document metadata; HIPAA-sensitive details are hidden from non-HR readers"""
    document, redact = document_service.get_document(db, document_id, requester)
    return _present(document, redact)


@router.get("/{document_id}/download")
async def download_document_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
    requester: Requester = Depends(get_requester)
):
    document, path = document_service.open_for_download(db, storage, document_id, requester)
    return FileResponse(path, media_type=document.mime_type, filename=document.file_name)


@router.patch("/{document_id}", response_model=DocumentOut)
async def update_document_endpoint(
    document_id: int,
    document_data: DocumentUpdate,
    db: Session = Depends(get_db),
    requester: Requester = Depends(get_requester)
):
    """
    Update metadata

    Admin/HR may update any document; department managers only their own
    department's documents that are neither HIPAA-sensitive nor medical.
    """
    return DocumentOut.model_validate(document_service.update_document(db, document_id, document_data, requester))


@router.put("/{document_id}/file", response_model=DocumentOut)
async def replace_document_file_endpoint(
    document_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
    requester: Requester = Depends(get_requester)
):
    """Upload a new version of the file"""
    content = await file.read()
    document = document_service.replace_file(
        db, storage, document_id, requester, content,
        file_name=file.filename or "upload",
        content_type=file.content_type,
    )
    return DocumentOut.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
    requester: Requester = Depends(get_requester)
):
    """Delete a document and its file (Admin/HR)"""
    document_service.delete_document(db, storage, document_id, requester)


@router.post("/{document_id}/acknowledge", response_model=DocumentAcknowledgmentOut, status_code=201)
async def acknowledge_document_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    requester: Requester = Depends(get_requester)
):
    """Confirm you have read a document that requires acknowledgment"""
    return document_service.acknowledge_document(db, document_id, requester)


@router.get("/{document_id}/access-log", response_model=List[DocumentAccessLogOut])
async def document_access_log_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    requester: Requester = Depends(get_requester)
):
    """Who viewed, downloaded or changed the document (Admin/HR)"""
    return document_service.list_access_log(db, document_id, requester)
