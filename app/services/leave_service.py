"""
Leave service - business logic for leave requests
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    HRError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from app.models.employee import Employee
from app.models.enums import LeaveStatus, LeaveType
from app.models.leave import Leave
from app.models.user import User
from app.services.access_scope import (
    can_manage_employee,
    is_privileged,
    own_employee_id,
    scope_by_employee,
)
from app.services.activity_service import log_activity
from app.services.leave_balance_service import LeaveLedger
from app.utils.datetime_utils import inclusive_days, now_utc

logger = logging.getLogger(__name__)

ACTIVE_LEAVE_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


def leave_hours(start_date: date, end_date: date) -> float:
    """Hours a leave costs: inclusive calendar days (at least one) times LEAVE_HOURS_PER_DAY"""
    days = max(inclusive_days(start_date, end_date), 1)
    return days * settings.LEAVE_HOURS_PER_DAY


def validate_overlap(
    db: Session,
    employee_id: int,
    start_date: date,
    end_date: date,
    exclude_leave_id: Optional[int] = None
) -> None:
    """
    Validate that the request doesn't overlap the employee's own Pending or
    Approved requests.

    Raises:
        ConflictError: If overlap detected (409)
    """
    # existing.end >= new.start AND existing.start <= new.end
    query = db.query(Leave).filter(
        Leave.employee_id == employee_id,
        Leave.status.in_(ACTIVE_LEAVE_STATUSES),
        Leave.end_date >= start_date,
        Leave.start_date <= end_date
    )
    if exclude_leave_id:
        query = query.filter(Leave.id != exclude_leave_id)

    overlapping = query.first()
    if overlapping:
        raise ConflictError(
            f"Leave request overlaps with existing leave from {overlapping.start_date} to {overlapping.end_date}"
        )


def _resolve_applicant(db: Session, current_user: User, employee_id: Optional[int]) -> Employee:
    own_id = own_employee_id(current_user)
    if employee_id is None or employee_id == own_id:
        if own_id is None:
            raise ValidationError("Current user has no employee record to apply leave for")
        employee_id = own_id
    elif not is_privileged(current_user):
        raise AccessDeniedError("Only HR can apply for leave on behalf of another employee")

    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee {employee_id} not found")
    return employee


def apply_leave(
    db: Session,
    current_user: User,
    leave_type: LeaveType,
    start_date: date,
    end_date: date,
    reason: Optional[str] = None,
    employee_id: Optional[int] = None,
    check_balance: bool = True
) -> Leave:
    """
    Create a Pending leave request

    Raises:
        ValidationError: end before start, or caller has no employee record
        ConflictError: overlaps an existing Pending/Approved request
        InsufficientBalanceError: the balance pre-check failed
    """
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")

    employee = _resolve_applicant(db, current_user, employee_id)
    validate_overlap(db, employee.id, start_date, end_date)

    if check_balance:
        hours = leave_hours(start_date, end_date)
        ledger = LeaveLedger(db)
        if not ledger.check_sufficient(employee.id, leave_type.value, hours):
            record = ledger.get_balance(employee.id, leave_type.value)
            available = record.balance if record is not None else 0.0
            db.rollback()
            raise InsufficientBalanceError(available=available, requested=hours)

    leave = Leave(
        employee_id=employee.id,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
        status=LeaveStatus.PENDING,
    )
    db.add(leave)
    db.flush()
    log_activity(
        db, current_user.id, "CREATE", "Leave", leave.id,
        description=f"Applied for {leave_type.value} leave {start_date} to {end_date}",
    )
    db.commit()
    db.refresh(leave)
    logger.info("leave applied: leave_id=%s employee_id=%s type=%s", leave.id, employee.id, leave_type.value)
    return leave


def _get_leave(db: Session, leave_id: int) -> Leave:
    leave = db.query(Leave).filter(Leave.id == leave_id).first()
    if not leave:
        raise NotFoundError(f"Leave request with id {leave_id} not found")
    return leave


def _validate_approval_authority(leave: Leave, approver: User) -> None:
    if not can_manage_employee(approver, leave.employee):
        raise AccessDeniedError("Not authorized to act on this leave request")
    if own_employee_id(approver) == leave.employee_id and not is_privileged(approver):
        raise AccessDeniedError("Managers cannot approve their own leave requests")


def approve_leave(
    db: Session,
    leave_id: int,
    approver: User,
    comments: Optional[str] = None,
    ledger: Optional[LeaveLedger] = None
) -> Leave:
    """
    Approve a Pending request and deduct its hours from the ledger.

    Status change and deduction commit together; if the deduction fails
    (for example an insufficient balance) nothing is persisted.
    """
    leave = _get_leave(db, leave_id)
    if leave.status != LeaveStatus.PENDING:
        raise ValidationError(f"Cannot approve leave request with status {leave.status.value}")
    _validate_approval_authority(leave, approver)

    hours = leave_hours(leave.start_date, leave.end_date)
    ledger = ledger or LeaveLedger(db)
    try:
        ledger.deduct(leave.employee_id, leave.leave_type.value, hours)

        leave.status = LeaveStatus.APPROVED
        leave.approver_id = approver.id
        leave.approved_at = now_utc()
        leave.comments = comments
        leave.hours_deducted = hours
        log_activity(
            db, approver.id, "APPROVE", "Leave", leave.id,
            details={"employee_id": leave.employee_id, "hours": hours, "leave_type": leave.leave_type},
        )
        db.commit()
    except HRError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error("Leave approval failed for leave_id=%s", leave_id, exc_info=e)
        raise

    logger.info(
        "leave status transition: leave_id=%s before=Pending after=Approved hours=%s", leave.id, hours
    )
    db.refresh(leave)
    return leave


def reject_leave(
    db: Session,
    leave_id: int,
    approver: User,
    comments: Optional[str] = None
) -> Leave:
    """Reject a Pending request. The ledger is untouched."""
    leave = _get_leave(db, leave_id)
    if leave.status != LeaveStatus.PENDING:
        raise ValidationError(f"Cannot reject leave request with status {leave.status.value}")
    _validate_approval_authority(leave, approver)

    leave.status = LeaveStatus.REJECTED
    leave.approver_id = approver.id
    leave.approved_at = now_utc()
    leave.comments = comments
    log_activity(db, approver.id, "REJECT", "Leave", leave.id, details={"comments": comments})
    db.commit()
    db.refresh(leave)
    logger.info("leave status transition: leave_id=%s before=Pending after=Rejected", leave.id)
    return leave


def cancel_leave(db: Session, leave_id: int, current_user: User) -> Leave:
    """Only the owning employee may cancel, and only while Pending."""
    leave = _get_leave(db, leave_id)
    if own_employee_id(current_user) != leave.employee_id:
        raise AccessDeniedError("Only the employee who applied can cancel this leave request")
    if leave.status != LeaveStatus.PENDING:
        raise ValidationError(f"Cannot cancel leave request with status {leave.status.value}")

    leave.status = LeaveStatus.CANCELLED
    log_activity(db, current_user.id, "CANCEL", "Leave", leave.id)
    db.commit()
    db.refresh(leave)
    logger.info("leave status transition: leave_id=%s before=Pending after=Cancelled", leave.id)
    return leave


def get_leave(db: Session, leave_id: int, current_user: User) -> Leave:
    leave = _get_leave(db, leave_id)
    if own_employee_id(current_user) != leave.employee_id and not can_manage_employee(current_user, leave.employee):
        raise AccessDeniedError("Not authorized to view this leave request")
    return leave


def list_leaves(
    db: Session,
    current_user: User,
    status: Optional[LeaveStatus] = None,
    leave_type: Optional[LeaveType] = None,
    employee_id: Optional[int] = None,
    start_from: Optional[date] = None,
    end_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 50
) -> Tuple[List[Leave], int]:
    """
    Leave requests visible to the user, newest first

    Returns:
        (items for the page, total matching)
    """
    query = scope_by_employee(db.query(Leave), current_user, Leave.employee_id)
    if status:
        query = query.filter(Leave.status == status)
    if leave_type:
        query = query.filter(Leave.leave_type == leave_type)
    if employee_id:
        query = query.filter(Leave.employee_id == employee_id)
    if start_from:
        query = query.filter(Leave.end_date >= start_from)
    if end_to:
        query = query.filter(Leave.start_date <= end_to)

    total = query.count()
    items = query.order_by(Leave.start_date.desc(), Leave.id.desc()).offset(
        (page - 1) * page_size
    ).limit(page_size).all()
    return items, total
