"""
Leave balance ledger.

One LeaveBalance row per (employee, leave type) holds the available amount
plus two year-to-date counters that only ever grow. Reads go through a
BalanceReader so the ledger can be exercised without a database; writes are
flushed into the caller's session and committed by the caller.

Note: deduct() is a read-modify-write without row locking. Two concurrent
deductions for the same pair rely on the database's default isolation.
"""
import logging
import math
from typing import Dict, List, Optional, Protocol, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    HRError,
    ValidationError,
    InsufficientBalanceError,
    BalanceNotFoundError,
    BalanceRetrievalError,
)
from app.models.leave import LeaveBalance
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


class BalanceReader(Protocol):
    """Read capability the ledger needs: one balance record per pair, or None."""

    def fetch(self, employee_id: int, leave_type: str) -> Optional[LeaveBalance]:
        ...


def get_or_create_balance(db: Session, employee_id: int, leave_type: str) -> LeaveBalance:
    """
    Return the balance row for the pair, creating it with zero balance if absent.

    A concurrent insert of the same pair loses on the unique constraint; the
    savepoint is rolled back and the winner's row is returned.

    Raises:
        BalanceRetrievalError: on any storage failure
    """
    try:
        record = db.query(LeaveBalance).filter(
            LeaveBalance.employee_id == employee_id,
            LeaveBalance.leave_type == leave_type
        ).first()
        if record is not None:
            return record

        record = LeaveBalance(
            employee_id=employee_id,
            leave_type=leave_type,
            balance=0.0,
            accrued_ytd=0.0,
            used_ytd=0.0,
            last_updated=now_utc(),
        )
        try:
            with db.begin_nested():
                db.add(record)
        except IntegrityError:
            record = db.query(LeaveBalance).filter(
                LeaveBalance.employee_id == employee_id,
                LeaveBalance.leave_type == leave_type
            ).one()
        else:
            logger.info("Created leave balance for employee %s, type %s", employee_id, leave_type)
        return record
    except SQLAlchemyError as e:
        logger.error(
            "Error fetching leave balance for employee %s, type %s",
            employee_id, leave_type, exc_info=e
        )
        raise BalanceRetrievalError() from e


class SqlBalanceReader:
    """BalanceReader backed by the leave_balances table (get-or-create)."""

    def __init__(self, db: Session):
        self.db = db

    def fetch(self, employee_id: int, leave_type: str) -> Optional[LeaveBalance]:
        return get_or_create_balance(self.db, employee_id, leave_type)


class InMemoryBalanceReader:
    """BalanceReader over a dict of detached records. Missing pairs read as None."""

    def __init__(self, records: Optional[Dict[Tuple[int, str], LeaveBalance]] = None):
        self.records: Dict[Tuple[int, str], LeaveBalance] = dict(records or {})

    def add(self, record: LeaveBalance) -> LeaveBalance:
        self.records[(record.employee_id, record.leave_type)] = record
        return record

    def fetch(self, employee_id: int, leave_type: str) -> Optional[LeaveBalance]:
        return self.records.get((employee_id, leave_type))


def _validate_amount(amount: float) -> None:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be positive")


def _validate_ids(employee_id: int, leave_type: str) -> None:
    if not employee_id or not leave_type:
        raise ValidationError("Employee ID and leave type are required")


class LeaveLedger:
    """
    Ledger operations bound to one session.

    Args:
        db: session the mutations are flushed into, or None for a purely
            in-memory ledger
        reader: source of balance records; defaults to SqlBalanceReader(db)
    """

    def __init__(self, db: Optional[Session] = None, reader: Optional[BalanceReader] = None):
        if reader is None:
            if db is None:
                raise ValueError("LeaveLedger needs a session or a reader")
            reader = SqlBalanceReader(db)
        self.db = db
        self.reader = reader

    def get_balance(self, employee_id: int, leave_type: str) -> Optional[LeaveBalance]:
        """Get-or-create the record. Empty identifiers give None instead of raising."""
        if not employee_id or not leave_type:
            return None
        return self.reader.fetch(employee_id, leave_type)

    def check_sufficient(self, employee_id: int, leave_type: str, requested: float) -> bool:
        """True iff balance >= requested. Any failure to read the balance counts as insufficient."""
        try:
            record = self.get_balance(employee_id, leave_type)
        except (HRError, SQLAlchemyError) as e:
            logger.error(
                "Error checking leave balance for employee %s, type %s",
                employee_id, leave_type, exc_info=e
            )
            return False
        if record is None:
            return False
        return record.balance >= requested

    def _fetch_for_update(self, employee_id: int, leave_type: str) -> LeaveBalance:
        record = self.reader.fetch(employee_id, leave_type)
        if record is None:
            raise BalanceNotFoundError(employee_id, leave_type)
        return record

    def _persist(self, record: LeaveBalance) -> None:
        if self.db is None:
            return
        self.db.add(record)
        self.db.flush()

    def deduct(self, employee_id: int, leave_type: str, amount: float) -> LeaveBalance:
        """
        Take amount out of the balance and add it to used_ytd.

        Raises:
            ValidationError: amount <= 0 or missing identifiers (before any read)
            BalanceNotFoundError: the reader has no record for the pair
            InsufficientBalanceError: balance < amount
        """
        _validate_amount(amount)
        _validate_ids(employee_id, leave_type)

        record = self._fetch_for_update(employee_id, leave_type)
        if record.balance < amount:
            raise InsufficientBalanceError(available=record.balance, requested=amount)

        record.balance = record.balance - amount
        record.used_ytd = (record.used_ytd or 0.0) + amount
        record.last_updated = now_utc()
        self._persist(record)

        logger.info(
            "Deducted %s %s for employee %s (balance now %s)",
            amount, leave_type, employee_id, record.balance
        )
        return record

    def accrue(self, employee_id: int, leave_type: str, amount: float) -> LeaveBalance:
        """
        Add amount to the balance and to accrued_ytd.

        Raises:
            ValidationError: amount <= 0 or missing identifiers (before any read)
            BalanceNotFoundError: the reader has no record for the pair
        """
        _validate_amount(amount)
        _validate_ids(employee_id, leave_type)

        record = self._fetch_for_update(employee_id, leave_type)
        record.balance = (record.balance or 0.0) + amount
        record.accrued_ytd = (record.accrued_ytd or 0.0) + amount
        record.last_updated = now_utc()
        self._persist(record)

        logger.info(
            "Accrued %s %s for employee %s (balance now %s)",
            amount, leave_type, employee_id, record.balance
        )
        return record


def list_balances(db: Session, employee_id: int) -> List[LeaveBalance]:
    """Every balance row the employee has, ordered by leave type"""
    return db.query(LeaveBalance).filter(
        LeaveBalance.employee_id == employee_id
    ).order_by(LeaveBalance.leave_type).all()
