"""
Batch job triggers (Admin-only)

A scheduler (cron, systemd timer, Kubernetes CronJob) calls these; the jobs
open their own transactions on the application's Database.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_database, require_roles
from app.db.database import Database
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.compliance import SweepResultOut
from app.schemas.leave import AccrualResultOut
from app.services.accrual_service import run_monthly_accrual
from app.services.compliance_service import sweep_expirations
from app.services.reminder_service import DatabaseNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/leave-accrual", response_model=AccrualResultOut)
async def run_leave_accrual(
    database: Database = Depends(get_database),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    """
    Credit every employee the monthly accrual

    All-or-nothing: if any employee fails, nothing is credited and a 500
    naming the employee is returned.
    """
    logger.info("Monthly leave accrual triggered by user %s", current_user.id)
    result = run_monthly_accrual(database)
    return AccrualResultOut(processed=result.processed, leave_type=result.leave_type, amount=result.amount)


@router.post("/compliance-sweep", response_model=SweepResultOut)
async def run_compliance_sweep(
    today: Optional[date] = Query(None, description="Override today's date (YYYY-MM-DD)"),
    database: Database = Depends(get_database),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    """Recompute compliance statuses, then send expiration reminders"""
    logger.info("Compliance sweep triggered by user %s", current_user.id)
    result = sweep_expirations(database, DatabaseNotifier(database), today=today)
    return SweepResultOut(
        updated_to_expired=result.updated_to_expired,
        updated_to_expiring_soon=result.updated_to_expiring_soon,
        reverted_to_active=result.reverted_to_active,
    )
