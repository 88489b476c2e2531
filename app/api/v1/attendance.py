"""
Attendance endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user, require_roles
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.attendance import AttendanceCreate, AttendanceUpdate, AttendanceOut, AttendanceListResponse
from app.services.attendance_service import (
    record_attendance,
    list_attendance,
    update_attendance,
    delete_attendance,
)

router = APIRouter()


@router.post("", response_model=AttendanceOut, status_code=201)
async def record_attendance_endpoint(
    attendance_data: AttendanceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a day of attendance; hours worked are derived from time_in/time_out"""
    return record_attendance(db, attendance_data, current_user)


@router.get("", response_model=AttendanceListResponse)
async def list_attendance_endpoint(
    employee_id: Optional[int] = Query(None),
    from_date: Optional[date] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="End date (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    items, total = list_attendance(
        db, current_user,
        employee_id=employee_id,
        from_date=from_date,
        to_date=to_date,
        skip=skip,
        limit=limit,
    )
    return AttendanceListResponse(items=items, total=total)


@router.patch("/{attendance_id}", response_model=AttendanceOut)
async def update_attendance_endpoint(
    attendance_id: int,
    attendance_data: AttendanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    return update_attendance(db, attendance_id, attendance_data, current_user)


@router.delete("/{attendance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendance_endpoint(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    delete_attendance(db, attendance_id, current_user)
