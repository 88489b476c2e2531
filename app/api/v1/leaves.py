"""
Leave request endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user, require_roles
from app.models.enums import LeaveStatus, LeaveType, UserRole
from app.models.user import User
from app.schemas.leave import LeaveApplyRequest, LeaveActionRequest, LeaveOut, LeaveListResponse
from app.services.leave_service import (
    apply_leave,
    approve_leave,
    cancel_leave,
    get_leave,
    list_leaves,
    reject_leave,
)

router = APIRouter()

APPROVER_ROLES = (UserRole.ADMIN, UserRole.HR_MANAGER, UserRole.DEPARTMENT_MANAGER)


@router.post("", response_model=LeaveOut, status_code=201)
async def apply_leave_endpoint(
    leave_data: LeaveApplyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Apply for leave (creates a Pending request)

    Validations:
    - end_date >= start_date
    - no overlap with the employee's Pending/Approved requests
    - enough balance for days x LEAVE_HOURS_PER_DAY hours
    """
    return apply_leave(
        db,
        current_user,
        leave_type=leave_data.leave_type,
        start_date=leave_data.start_date,
        end_date=leave_data.end_date,
        reason=leave_data.reason,
        employee_id=leave_data.employee_id,
    )


@router.get("", response_model=LeaveListResponse)
async def list_leaves_endpoint(
    status: Optional[LeaveStatus] = Query(None),
    leave_type: Optional[LeaveType] = Query(None),
    employee_id: Optional[int] = Query(None),
    from_date: Optional[date] = Query(None, alias="from", description="Leaves ending on or after (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="Leaves starting on or before (YYYY-MM-DD)"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Leave requests visible to the caller, newest first"""
    items, total = list_leaves(
        db, current_user,
        status=status,
        leave_type=leave_type,
        employee_id=employee_id,
        start_from=from_date,
        end_to=to_date,
        page=page,
        page_size=page_size,
    )
    return LeaveListResponse(items=items, total=total)


@router.get("/{leave_id}", response_model=LeaveOut)
async def get_leave_endpoint(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_leave(db, leave_id, current_user)


@router.post("/{leave_id}/approve", response_model=LeaveOut)
async def approve_leave_endpoint(
    leave_id: int,
    action: LeaveActionRequest = LeaveActionRequest(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*APPROVER_ROLES))
):
    """Approve a Pending request and deduct its hours from the employee's balance"""
    return approve_leave(db, leave_id, current_user, comments=action.comments)


@router.post("/{leave_id}/reject", response_model=LeaveOut)
async def reject_leave_endpoint(
    leave_id: int,
    action: LeaveActionRequest = LeaveActionRequest(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*APPROVER_ROLES))
):
    """Reject a Pending request"""
    return reject_leave(db, leave_id, current_user, comments=action.comments)


@router.post("/{leave_id}/cancel", response_model=LeaveOut)
async def cancel_leave_endpoint(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Cancel your own Pending request"""
    return cancel_leave(db, leave_id, current_user)
