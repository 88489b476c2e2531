"""
Compliance item endpoints
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user, require_roles
from app.models.enums import ComplianceStatus, UserRole
from app.models.user import User
from app.schemas.compliance import ComplianceCreate, ComplianceUpdate, ComplianceOut
from app.services.compliance_service import (
    create_item,
    delete_item,
    get_item,
    list_items,
    update_item,
    verify_item,
)

router = APIRouter()


@router.post("", response_model=ComplianceOut, status_code=201)
async def create_compliance_endpoint(
    item_data: ComplianceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Track a license, certification, training or review (Admin/HR)"""
    return create_item(db, item_data, current_user)


@router.get("", response_model=List[ComplianceOut])
async def list_compliance_endpoint(
    status_filter: Optional[ComplianceStatus] = Query(None, alias="status"),
    employee_id: Optional[int] = Query(None),
    expires_before: Optional[date] = Query(None, description="Only items expiring before this date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Compliance items visible to the caller, soonest expiration first"""
    return list_items(
        db, current_user,
        status=status_filter,
        employee_id=employee_id,
        expires_before=expires_before,
    )


@router.get("/{item_id}", response_model=ComplianceOut)
async def get_compliance_endpoint(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_item(db, item_id, current_user)


@router.patch("/{item_id}", response_model=ComplianceOut)
async def update_compliance_endpoint(
    item_id: int,
    item_data: ComplianceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    return update_item(db, item_id, item_data, current_user)


@router.post("/{item_id}/verify", response_model=ComplianceOut)
async def verify_compliance_endpoint(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Mark the item as checked against the issuing authority"""
    return verify_item(db, item_id, current_user)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_compliance_endpoint(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    delete_item(db, item_id, current_user)
