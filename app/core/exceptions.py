"""
Domain exceptions raised by the service layer.

Every error carries an HTTP status so the handlers in app.core.errors can
translate it without the services importing FastAPI.
"""
from typing import Any, Dict, Optional


class HRError(Exception):
    status_code = 500
    error_code = "HR_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(HRError):
    """Bad input detected before any I/O (non-positive amounts, missing ids)."""
    status_code = 400
    error_code = "VALIDATION_ERROR"


class InsufficientBalanceError(HRError):
    status_code = 400
    error_code = "INSUFFICIENT_BALANCE"

    def __init__(self, available: float, requested: float):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient leave balance. Available: {available:g}, Requested: {requested:g}",
            details={"available": available, "requested": requested},
        )


class NotFoundError(HRError):
    status_code = 404
    error_code = "NOT_FOUND"


class BalanceNotFoundError(NotFoundError):
    error_code = "BALANCE_NOT_FOUND"

    def __init__(self, employee_id: int, leave_type: str):
        self.employee_id = employee_id
        self.leave_type = leave_type
        super().__init__(
            f"Leave balance record not found for employee {employee_id}, type {leave_type}"
        )


class BalanceRetrievalError(HRError):
    """Storage failure while fetching or creating a balance record."""
    status_code = 500
    error_code = "BALANCE_RETRIEVAL_FAILED"

    def __init__(self, message: str = "Failed to retrieve leave balance"):
        super().__init__(message)


class AccrualError(HRError):
    status_code = 500
    error_code = "ACCRUAL_FAILED"

    def __init__(self, message: str, employee_id: Optional[int] = None):
        self.employee_id = employee_id
        super().__init__(message, details={"employee_id": employee_id} if employee_id else None)


class ConflictError(HRError):
    status_code = 409
    error_code = "CONFLICT"


class AccessDeniedError(HRError):
    """Caller is not allowed to perform the operation."""
    status_code = 403
    error_code = "PERMISSION_DENIED"

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)
