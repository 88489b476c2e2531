"""
Compliance expiration reminders.

Reminders go out through a Notifier. DatabaseNotifier stores them as in-app
notifications; anything else (email, chat) only has to implement send().
"""
import logging
from datetime import date
from typing import Optional, Protocol

from sqlalchemy.orm import joinedload

from app.db.database import Database
from app.models.compliance import Compliance
from app.models.employee import Employee
from app.models.enums import ComplianceStatus
from app.models.notification import Notification
from app.utils.datetime_utils import add_days, today_utc

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, recipient_user_id: int, subject: str, body: str) -> None:
        ...


class DatabaseNotifier:
    """Writes each message as a notifications row in its own transaction."""

    def __init__(self, database: Database, notification_type: str = "reminder"):
        self.database = database
        self.notification_type = notification_type

    def send(self, recipient_user_id: int, subject: str, body: str) -> None:
        with self.database.transaction() as db:
            db.add(Notification(
                user_id=recipient_user_id,
                title=subject,
                message=body,
                type=self.notification_type,
            ))


def format_reminder(item: Compliance, days: int) -> tuple:
    employee = item.employee
    name = employee.full_name if employee is not None else f"employee {item.employee_id}"
    when = "today" if days == 0 else f"in {days} day{'s' if days != 1 else ''}"
    subject = f"{item.item_type} expiring {when}: {item.item_name}"
    body = (
        f"The {item.item_type.lower()} \"{item.item_name}\" for {name} "
        f"expires on {item.expiration_date.isoformat()}."
    )
    if item.license_number:
        body += f" License number: {item.license_number}."
    body += " Please arrange renewal before it lapses."
    return subject, body


def send_compliance_expiration_reminders(
    database: Database,
    notifier: Notifier,
    days: int,
    today: Optional[date] = None,
) -> int:
    """
    Remind the owners of items expiring exactly `days` from today.

    Items whose employee has no login account are skipped with a warning.
    A failed send is logged and the remaining items are still processed.

    Returns:
        Number of reminders sent
    """
    today = today or today_utc()
    target = add_days(today, days)

    db = database.session()
    try:
        items = db.query(Compliance).options(
            joinedload(Compliance.employee)
        ).filter(
            Compliance.expiration_date == target,
            Compliance.status != ComplianceStatus.ARCHIVED,
        ).order_by(Compliance.id).all()
    finally:
        db.close()

    sent = 0
    for item in items:
        employee: Optional[Employee] = item.employee
        if employee is None or employee.user_id is None:
            logger.warning(
                "Compliance item %s: employee %s has no user account, reminder skipped",
                item.id, item.employee_id
            )
            continue
        subject, body = format_reminder(item, days)
        try:
            notifier.send(employee.user_id, subject, body)
            sent += 1
        except Exception as e:
            logger.error("Failed to send reminder for compliance item %s", item.id, exc_info=e)

    logger.info("Sent %s compliance reminders for %s-day threshold (%s)", sent, days, target.isoformat())
    return sent
