"""
Attendance service - daily attendance records
"""
import logging
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from app.models.attendance import Attendance
from app.models.employee import Employee
from app.models.user import User
from app.schemas.attendance import AttendanceCreate, AttendanceUpdate
from app.services.access_scope import can_manage_employee, own_employee_id, scope_by_employee
from app.services.activity_service import log_activity

logger = logging.getLogger(__name__)


def compute_hours_worked(time_in: Optional[time], time_out: Optional[time]) -> Optional[float]:
    """Hours between the two times, rounded to 2 places; None unless both are set"""
    if time_in is None or time_out is None:
        return None
    start = datetime.combine(date.min, time_in)
    end = datetime.combine(date.min, time_out)
    if end < start:
        raise ValidationError("time_out must not be before time_in")
    return round((end - start).total_seconds() / 3600, 2)


def record_attendance(db: Session, data: AttendanceCreate, current_user: User) -> Attendance:
    """
    Record one day. Employees record their own; admin/HR and the manager of
    the employee's department may record for others.

    Raises:
        ConflictError: a record already exists for that employee and date
    """
    employee_id = data.employee_id or own_employee_id(current_user)
    if employee_id is None:
        raise ValidationError("employee_id is required")

    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee with id {employee_id} not found")
    if employee_id != own_employee_id(current_user) and not can_manage_employee(current_user, employee):
        raise AccessDeniedError("Not authorized to record attendance for this employee")

    existing = db.query(Attendance.id).filter(
        Attendance.employee_id == employee_id,
        Attendance.date == data.date
    ).first()
    if existing:
        raise ConflictError(f"Attendance for employee {employee_id} on {data.date} already recorded")

    record = Attendance(
        employee_id=employee_id,
        date=data.date,
        time_in=data.time_in,
        time_out=data.time_out,
        status=data.status,
        hours_worked=compute_hours_worked(data.time_in, data.time_out),
        notes=data.notes,
    )
    db.add(record)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Attendance for employee {employee_id} on {data.date} already recorded")
    log_activity(db, current_user.id, "CREATE", "Attendance", record.id, details={"employee_id": employee_id})
    db.commit()
    db.refresh(record)
    return record


def list_attendance(
    db: Session,
    current_user: User,
    employee_id: Optional[int] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
) -> Tuple[List[Attendance], int]:
    if from_date and to_date and to_date < from_date:
        raise ValidationError("to_date must be on or after from_date")

    query = scope_by_employee(db.query(Attendance), current_user, Attendance.employee_id)
    if employee_id:
        query = query.filter(Attendance.employee_id == employee_id)
    if from_date:
        query = query.filter(Attendance.date >= from_date)
    if to_date:
        query = query.filter(Attendance.date <= to_date)

    total = query.count()
    items = query.order_by(Attendance.date.desc(), Attendance.employee_id).offset(skip).limit(limit).all()
    return items, total


def _get(db: Session, attendance_id: int) -> Attendance:
    record = db.query(Attendance).filter(Attendance.id == attendance_id).first()
    if not record:
        raise NotFoundError(f"Attendance record {attendance_id} not found")
    return record


def update_attendance(db: Session, attendance_id: int, data: AttendanceUpdate, current_user: User) -> Attendance:
    record = _get(db, attendance_id)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field == "status" and value is None:
            continue
        setattr(record, field, value)
    record.hours_worked = compute_hours_worked(record.time_in, record.time_out)
    log_activity(db, current_user.id, "UPDATE", "Attendance", record.id, details={"fields": sorted(changes)})
    db.commit()
    db.refresh(record)
    return record


def delete_attendance(db: Session, attendance_id: int, current_user: User) -> None:
    record = _get(db, attendance_id)
    log_activity(db, current_user.id, "DELETE", "Attendance", record.id, details={"employee_id": record.employee_id})
    db.delete(record)
    db.commit()
