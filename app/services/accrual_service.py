"""
Accrual service - monthly leave crediting.

Every employee (no status filter) is credited ACCRUAL_AMOUNT of
ACCRUAL_LEAVE_TYPE inside a single transaction. The run is all-or-nothing:
the first employee that fails aborts the run and nothing from it persists.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccrualError, ValidationError
from app.db.database import Database
from app.models.employee import Employee
from app.services.leave_balance_service import LeaveLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccrualResult:
    processed: int
    leave_type: str
    amount: float


def run_monthly_accrual(
    database: Database,
    leave_type: Optional[str] = None,
    amount: Optional[float] = None,
    ledger_factory: Callable[[Session], LeaveLedger] = LeaveLedger,
) -> AccrualResult:
    """
    Credit every employee once.

    Raises:
        ValidationError: amount is not a positive finite number (nothing is opened)
        AccrualError: an employee's accrual failed; the whole run was rolled back
    """
    leave_type = leave_type or settings.ACCRUAL_LEAVE_TYPE
    amount = settings.ACCRUAL_AMOUNT if amount is None else amount
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be positive")

    processed = 0
    with database.transaction() as db:
        ledger = ledger_factory(db)
        employee_ids = [row.id for row in db.query(Employee.id).order_by(Employee.id).all()]
        for employee_id in employee_ids:
            try:
                ledger.accrue(employee_id, leave_type, amount)
            except Exception as e:
                logger.error(
                    "Leave accrual failed for employee %s; rolling back %s accruals",
                    employee_id, processed, exc_info=e
                )
                raise AccrualError(
                    f"Leave accrual failed for employee {employee_id}; no accruals were applied",
                    employee_id=employee_id,
                ) from e
            processed += 1

    logger.info("Monthly accrual credited %s %s to %s employees", amount, leave_type, processed)
    return AccrualResult(processed=processed, leave_type=leave_type, amount=amount)
