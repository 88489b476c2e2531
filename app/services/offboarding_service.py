"""
Offboarding service - exit processes and their checklists
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.employee import Employee
from app.models.enums import EmploymentStatus, OffboardingStatus, TaskStatus
from app.models.offboarding import Offboarding, OffboardingTask, TaskTemplate
from app.models.user import User
from app.schemas.offboarding import OffboardingOut, OffboardingTaskOut, TaskTemplateCreate
from app.services.activity_service import log_activity
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

# (description, default role) seeded when the task_templates table is empty
DEFAULT_TASK_TEMPLATES = [
    ("Receive and acknowledge resignation", "Manager"),
    ("Plan knowledge transfer and handover", "Manager"),
    ("Calculate final pay and accrued leave", "HR"),
    ("Prepare COBRA and benefits information", "HR"),
    ("Conduct exit interview", "HR"),
    ("Collect company property (laptop, badge, keys)", "Manager"),
    ("Disable system access (email, HRIS)", "IT"),
    ("Remove from building access systems", "IT"),
    ("Process final paycheck", "Finance"),
    ("Archive user data per retention policy", "IT"),
]

STATUS_FILTERS = {
    "active": (OffboardingStatus.PENDING, OffboardingStatus.IN_PROGRESS),
    "pending": (OffboardingStatus.PENDING,),
    "inprogress": (OffboardingStatus.IN_PROGRESS,),
    "completed": (OffboardingStatus.COMPLETED,),
    "cancelled": (OffboardingStatus.CANCELLED,),
}


def progress_percent(offboarding: Offboarding) -> int:
    total = len(offboarding.tasks)
    if total == 0:
        return 100 if offboarding.status == OffboardingStatus.COMPLETED else 0
    done = sum(1 for t in offboarding.tasks if t.status == TaskStatus.COMPLETED)
    return round(done * 100 / total)


def to_out(offboarding: Offboarding) -> OffboardingOut:
    return OffboardingOut(
        id=offboarding.id,
        employee_id=offboarding.employee_id,
        employee_name=offboarding.employee.full_name if offboarding.employee else None,
        exit_date=offboarding.exit_date,
        reason=offboarding.reason,
        status=offboarding.status,
        progress=progress_percent(offboarding),
        tasks=[OffboardingTaskOut.model_validate(t) for t in offboarding.tasks],
        created_at=offboarding.created_at,
        updated_at=offboarding.updated_at,
    )


def seed_task_templates(db: Session) -> int:
    """Insert the default checklist if no templates exist. Returns how many were added."""
    if db.query(TaskTemplate.id).first():
        return 0
    for description, role in DEFAULT_TASK_TEMPLATES:
        db.add(TaskTemplate(description=description, default_assigned_role=role))
    db.flush()
    return len(DEFAULT_TASK_TEMPLATES)


def list_task_templates(db: Session) -> List[TaskTemplate]:
    return db.query(TaskTemplate).order_by(TaskTemplate.id).all()


def create_task_template(db: Session, data: TaskTemplateCreate, actor: User) -> TaskTemplate:
    template = TaskTemplate(description=data.description, default_assigned_role=data.default_assigned_role)
    db.add(template)
    db.flush()
    log_activity(db, actor.id, "CREATE", "TaskTemplate", template.id)
    db.commit()
    db.refresh(template)
    return template


def _load(db: Session, offboarding_id: int) -> Offboarding:
    offboarding = db.query(Offboarding).options(
        selectinload(Offboarding.tasks),
    ).filter(Offboarding.id == offboarding_id).first()
    if not offboarding:
        raise NotFoundError(f"Offboarding {offboarding_id} not found")
    return offboarding


def start_offboarding(
    db: Session,
    employee_id: int,
    exit_date: date,
    reason: Optional[str],
    actor: User
) -> Offboarding:
    """
    Open an exit process: the employee becomes Terminating and gets one task
    per template, all in one commit.

    A Cancelled offboarding is replaced: it and its tasks are deleted in the
    same commit that opens the new one.

    Raises:
        NotFoundError: unknown employee
        ConflictError: the employee already has an offboarding that is not Cancelled
    """
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee with id {employee_id} not found")
    if employee.status == EmploymentStatus.TERMINATED:
        raise ValidationError("Employee is already terminated")
    previous = db.query(Offboarding).filter(Offboarding.employee_id == employee_id).first()
    if previous is not None and previous.status != OffboardingStatus.CANCELLED:
        raise ConflictError(f"Offboarding already exists for employee {employee_id}")

    try:
        if previous is not None:
            db.delete(previous)
            db.flush()
            db.expire(employee, ["offboarding"])
            logger.info("Replacing cancelled offboarding %s for employee %s", previous.id, employee_id)

        offboarding = Offboarding(
            employee_id=employee_id,
            exit_date=exit_date,
            reason=reason,
            status=OffboardingStatus.PENDING,
        )
        db.add(offboarding)
        db.flush()

        for template in list_task_templates(db):
            offboarding.tasks.append(OffboardingTask(
                description=template.description,
                assigned_role=template.default_assigned_role,
                status=TaskStatus.PENDING,
            ))

        employee.status = EmploymentStatus.TERMINATING
        log_activity(
            db, actor.id, "CREATE", "Offboarding", offboarding.id,
            description=f"Started offboarding for {employee.full_name}",
            details={"exit_date": exit_date},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Offboarding %s started for employee %s", offboarding.id, employee_id)
    return _load(db, offboarding.id)


def list_offboardings(db: Session, status: Optional[str] = None) -> List[Offboarding]:
    """
    Filter by "active", "pending", "inprogress", "completed" or "cancelled".
    Without a filter every process except cancelled ones is returned.
    """
    query = db.query(Offboarding).options(
        selectinload(Offboarding.tasks),
        selectinload(Offboarding.employee),
    )
    if status:
        statuses = STATUS_FILTERS.get(status.lower())
        if statuses is None:
            raise ValidationError(f"Unknown status filter '{status}'")
        query = query.filter(Offboarding.status.in_(statuses))
    else:
        query = query.filter(Offboarding.status != OffboardingStatus.CANCELLED)
    return query.order_by(Offboarding.exit_date, Offboarding.id).all()


def get_offboarding(db: Session, offboarding_id: int) -> Offboarding:
    return _load(db, offboarding_id)


def complete_task(db: Session, offboarding_id: int, task_id: int, actor: User) -> Offboarding:
    """
    Mark a task done. The first completion moves the process to InProgress;
    the last one completes it and marks the employee Terminated.
    """
    offboarding = _load(db, offboarding_id)
    if offboarding.status in (OffboardingStatus.COMPLETED, OffboardingStatus.CANCELLED):
        raise ValidationError(f"Offboarding is {offboarding.status.value}")

    task = next((t for t in offboarding.tasks if t.id == task_id), None)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found in offboarding {offboarding_id}")
    if task.status == TaskStatus.COMPLETED:
        raise ConflictError("Task already completed")

    task.status = TaskStatus.COMPLETED
    task.completed_at = now_utc()
    task.completed_by_id = actor.id

    if all(t.status == TaskStatus.COMPLETED for t in offboarding.tasks):
        offboarding.status = OffboardingStatus.COMPLETED
        offboarding.employee.status = EmploymentStatus.TERMINATED
        logger.info("Offboarding %s completed; employee %s terminated", offboarding.id, offboarding.employee_id)
    elif offboarding.status == OffboardingStatus.PENDING:
        offboarding.status = OffboardingStatus.IN_PROGRESS

    log_activity(db, actor.id, "COMPLETE", "OffboardingTask", task.id, details={"offboarding_id": offboarding.id})
    db.commit()
    return _load(db, offboarding.id)


def cancel_offboarding(db: Session, offboarding_id: int, actor: User) -> Offboarding:
    offboarding = _load(db, offboarding_id)
    if offboarding.status == OffboardingStatus.COMPLETED:
        raise ValidationError("A completed offboarding cannot be cancelled")
    if offboarding.status == OffboardingStatus.CANCELLED:
        raise ConflictError("Offboarding already cancelled")

    offboarding.status = OffboardingStatus.CANCELLED
    offboarding.employee.status = EmploymentStatus.ACTIVE
    log_activity(db, actor.id, "CANCEL", "Offboarding", offboarding.id)
    db.commit()
    return _load(db, offboarding.id)
