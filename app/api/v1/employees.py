"""
Employee endpoints, including each employee's leave balance ledger
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user, require_roles
from app.models.enums import EmploymentStatus, LeaveType, UserRole
from app.models.user import User
from app.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeOut, EmployeeListResponse
from app.schemas.leave import LeaveBalanceOut, BalanceAdjustRequest
from app.services.activity_service import log_activity
from app.services.employee_service import (
    EXPORT_HEADERS,
    create_employee,
    delete_employee,
    get_employee,
    iter_export_rows,
    list_employees,
    update_employee,
)
from app.services.leave_balance_service import LeaveLedger, list_balances
from app.utils.csv_export import stream_csv

router = APIRouter()


@router.post("", response_model=EmployeeOut, status_code=201)
async def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Create an employee (Admin/HR)"""
    return create_employee(db, employee_data, current_user)


@router.get("", response_model=EmployeeListResponse)
async def list_employees_endpoint(
    department_id: Optional[int] = Query(None),
    status_filter: Optional[EmploymentStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Matches name, email or position"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List employees visible to the caller

    Admin/HR see everyone, department managers their department,
    employees only themselves.
    """
    items, total = list_employees(
        db, current_user,
        department_id=department_id,
        status=status_filter,
        search=search,
        skip=skip,
        limit=limit,
    )
    return EmployeeListResponse(items=items, total=total)


@router.get("/export.csv")
async def export_employees_csv(
    department_id: Optional[int] = Query(None),
    status_filter: Optional[EmploymentStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Employee directory as CSV (Admin/HR)"""
    rows = list(iter_export_rows(db, department_id=department_id, status=status_filter))
    filename = f"employees_{date.today().strftime('%Y%m%d')}.csv"
    return stream_csv(headers=EXPORT_HEADERS, rows=rows, filename=filename)


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_employee(db, employee_id, current_user)


@router.patch("/{employee_id}", response_model=EmployeeOut)
async def update_employee_endpoint(
    employee_id: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(
        require_roles(UserRole.ADMIN, UserRole.HR_MANAGER, UserRole.DEPARTMENT_MANAGER)
    )
):
    return update_employee(db, employee_id, employee_data, current_user)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    """Delete an employee and everything that cascades from it (Admin)"""
    delete_employee(db, employee_id, current_user)


@router.get("/{employee_id}/leave-balance", response_model=List[LeaveBalanceOut])
async def list_leave_balances_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Every leave balance the employee has (hours)"""
    get_employee(db, employee_id, current_user)
    return list_balances(db, employee_id)


@router.get("/{employee_id}/leave-balance/{leave_type}", response_model=LeaveBalanceOut)
async def get_leave_balance_endpoint(
    employee_id: int,
    leave_type: LeaveType,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Balance for one leave type; a zero balance is created on first access"""
    get_employee(db, employee_id, current_user)
    record = LeaveLedger(db).get_balance(employee_id, leave_type.value)
    db.commit()
    return record


@router.post("/{employee_id}/leave-balance/{leave_type}/adjust", response_model=LeaveBalanceOut)
async def adjust_leave_balance_endpoint(
    employee_id: int,
    leave_type: LeaveType,
    adjustment: BalanceAdjustRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    """Manually accrue or deduct hours (Admin/HR); the reason is kept in the activity log"""
    get_employee(db, employee_id, current_user)
    ledger = LeaveLedger(db)
    try:
        if adjustment.operation == "accrue":
            record = ledger.accrue(employee_id, leave_type.value, adjustment.amount)
        else:
            record = ledger.deduct(employee_id, leave_type.value, adjustment.amount)
        log_activity(
            db, current_user.id, "ADJUST", "LeaveBalance", record.id,
            description=f"{adjustment.operation} {adjustment.amount:g}h {leave_type.value}: {adjustment.reason}",
            details={
                "employee_id": employee_id,
                "operation": adjustment.operation,
                "amount": adjustment.amount,
                "reason": adjustment.reason,
            },
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record
