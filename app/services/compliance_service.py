"""
Compliance service - item CRUD and the expiration sweep.

An item's status is a cache of a date comparison: once expiration_date is
set, derive_status() (and the sweep, in bulk) recompute it from today's
date and the lookahead window.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.db.database import Database
from app.models.compliance import Compliance
from app.models.employee import Employee
from app.models.enums import ComplianceStatus
from app.models.user import User
from app.schemas.compliance import ComplianceCreate, ComplianceUpdate
from app.services.access_scope import ensure_can_view_employee, scope_by_employee
from app.services.activity_service import log_activity
from app.services.reminder_service import Notifier, send_compliance_expiration_reminders
from app.utils.datetime_utils import add_days, now_utc, today_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    updated_to_expired: int
    updated_to_expiring_soon: int
    reverted_to_active: int


def derive_status(
    current: ComplianceStatus,
    expiration_date: Optional[date],
    today: date,
    window_days: int,
) -> ComplianceStatus:
    """
    Status an item should have on `today`.

    - Archived never changes.
    - Without an expiration date the current status stands.
    - Past the date: Expired. Within [today, today + window): ExpiringSoon.
    - Beyond the window: Active, except PendingReview which stays as is.

    Total over every status and idempotent: applying it to its own result
    returns the same value.
    """
    current = ComplianceStatus(current)
    if current == ComplianceStatus.ARCHIVED:
        return current
    if expiration_date is None:
        return current
    if expiration_date < today:
        return ComplianceStatus.EXPIRED
    if expiration_date < add_days(today, window_days):
        return ComplianceStatus.EXPIRING_SOON
    if current == ComplianceStatus.PENDING_REVIEW:
        return current
    return ComplianceStatus.ACTIVE


def sweep_expirations(
    database: Database,
    notifier: Optional[Notifier] = None,
    today: Optional[date] = None,
    window_days: Optional[int] = None,
) -> SweepResult:
    """
    Recompute statuses in bulk, then send reminders.

    The three updates run in order inside one transaction (Archived rows are
    never touched):
        1. expiration_date < today                      -> Expired
        2. today <= expiration_date < today + window    -> ExpiringSoon
        3. expiration_date >= today + window, still ExpiringSoon -> Active

    A failure in the updates rolls back and re-raises. Reminders run after
    the commit; their failures are logged and never fail the sweep.
    """
    today = today or today_utc()
    if window_days is None:
        window_days = settings.COMPLIANCE_EXPIRING_SOON_DAYS
    soon_date = add_days(today, window_days)
    stamp = now_utc()

    try:
        with database.transaction() as db:
            expired = db.query(Compliance).filter(
                Compliance.expiration_date.isnot(None),
                Compliance.expiration_date < today,
                Compliance.status.notin_([ComplianceStatus.EXPIRED, ComplianceStatus.ARCHIVED]),
            ).update(
                {Compliance.status: ComplianceStatus.EXPIRED, Compliance.updated_at: stamp},
                synchronize_session=False,
            )
            expiring = db.query(Compliance).filter(
                Compliance.expiration_date >= today,
                Compliance.expiration_date < soon_date,
                Compliance.status.notin_([
                    ComplianceStatus.EXPIRING_SOON,
                    ComplianceStatus.EXPIRED,
                    ComplianceStatus.ARCHIVED,
                ]),
            ).update(
                {Compliance.status: ComplianceStatus.EXPIRING_SOON, Compliance.updated_at: stamp},
                synchronize_session=False,
            )
            reverted = db.query(Compliance).filter(
                Compliance.expiration_date >= soon_date,
                Compliance.status == ComplianceStatus.EXPIRING_SOON,
            ).update(
                {Compliance.status: ComplianceStatus.ACTIVE, Compliance.updated_at: stamp},
                synchronize_session=False,
            )
    except Exception as e:
        logger.error("Compliance expiration sweep failed, rolled back", exc_info=e)
        raise

    result = SweepResult(
        updated_to_expired=expired,
        updated_to_expiring_soon=expiring,
        reverted_to_active=reverted,
    )
    logger.info(
        "Compliance sweep for %s: %s expired, %s expiring soon, %s reverted to active",
        today.isoformat(), expired, expiring, reverted
    )

    if notifier is not None:
        for days in settings.get_reminder_days():
            try:
                send_compliance_expiration_reminders(database, notifier, days, today=today)
            except Exception as e:
                logger.error("Compliance reminders for %s-day threshold failed", days, exc_info=e)

    return result


def _get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee {employee_id} not found")
    return employee


def create_item(db: Session, data: ComplianceCreate, current_user: User) -> Compliance:
    """Create a compliance item; status comes from the expiration date when there is one."""
    _get_employee(db, data.employee_id)

    initial = data.status or ComplianceStatus.PENDING_REVIEW
    status = derive_status(initial, data.expiration_date, today_utc(), settings.COMPLIANCE_EXPIRING_SOON_DAYS)

    item = Compliance(
        employee_id=data.employee_id,
        item_type=data.item_type,
        item_name=data.item_name,
        authority=data.authority,
        license_number=data.license_number,
        issue_date=data.issue_date,
        expiration_date=data.expiration_date,
        status=status,
        notes=data.notes,
    )
    db.add(item)
    db.flush()
    log_activity(
        db, current_user.id, "CREATE", "Compliance", item.id,
        description=f"Added {item.item_type} '{item.item_name}' for employee {item.employee_id}",
    )
    db.commit()
    db.refresh(item)
    return item


def get_item(db: Session, item_id: int, current_user: User) -> Compliance:
    item = db.query(Compliance).options(
        joinedload(Compliance.employee)
    ).filter(Compliance.id == item_id).first()
    if not item:
        raise NotFoundError(f"Compliance item {item_id} not found")
    ensure_can_view_employee(current_user, item.employee)
    return item


def list_items(
    db: Session,
    current_user: User,
    status: Optional[ComplianceStatus] = None,
    employee_id: Optional[int] = None,
    expires_before: Optional[date] = None,
) -> List[Compliance]:
    query = scope_by_employee(db.query(Compliance), current_user, Compliance.employee_id)
    if status:
        query = query.filter(Compliance.status == status)
    if employee_id:
        query = query.filter(Compliance.employee_id == employee_id)
    if expires_before:
        query = query.filter(
            Compliance.expiration_date.isnot(None),
            Compliance.expiration_date < expires_before,
        )
    return query.order_by(Compliance.expiration_date.is_(None), Compliance.expiration_date, Compliance.id).all()


def update_item(db: Session, item_id: int, data: ComplianceUpdate, current_user: User) -> Compliance:
    """
    Partial update. A changed expiration date or status is re-derived
    against today's date, so only Archived survives any date.
    """
    item = db.query(Compliance).filter(Compliance.id == item_id).first()
    if not item:
        raise NotFoundError(f"Compliance item {item_id} not found")

    changes = data.model_dump(exclude_unset=True)
    issue = changes.get("issue_date", item.issue_date)
    expiration = changes.get("expiration_date", item.expiration_date)
    if issue and expiration and expiration < issue:
        raise ValidationError("expiration_date must not precede issue_date")

    for field, value in changes.items():
        if field == "status" and value is None:
            continue
        setattr(item, field, value)

    if "expiration_date" in changes or "status" in changes:
        item.status = derive_status(
            item.status, item.expiration_date, today_utc(), settings.COMPLIANCE_EXPIRING_SOON_DAYS
        )

    log_activity(
        db, current_user.id, "UPDATE", "Compliance", item.id,
        details={"fields": sorted(changes.keys())},
    )
    db.commit()
    db.refresh(item)
    return item


def verify_item(db: Session, item_id: int, current_user: User) -> Compliance:
    """Record that HR checked the item against the issuing authority."""
    item = db.query(Compliance).filter(Compliance.id == item_id).first()
    if not item:
        raise NotFoundError(f"Compliance item {item_id} not found")
    item.verified_by_id = current_user.id
    item.verified_at = now_utc()
    if item.status == ComplianceStatus.PENDING_REVIEW:
        item.status = derive_status(
            ComplianceStatus.ACTIVE, item.expiration_date, today_utc(), settings.COMPLIANCE_EXPIRING_SOON_DAYS
        )
    log_activity(db, current_user.id, "VERIFY", "Compliance", item.id)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item_id: int, current_user: User) -> None:
    item = db.query(Compliance).filter(Compliance.id == item_id).first()
    if not item:
        raise NotFoundError(f"Compliance item {item_id} not found")
    log_activity(
        db, current_user.id, "DELETE", "Compliance", item.id,
        description=f"Deleted {item.item_type} '{item.item_name}'",
    )
    db.delete(item)
    db.commit()
