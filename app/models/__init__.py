"""
Database models
"""
from app.models.enums import (
    UserRole,
    PRIVILEGED_ROLES,
    EmploymentStatus,
    LeaveType,
    LeaveStatus,
    ComplianceStatus,
    DocumentType,
    DocumentAccessLevel,
    DocumentAccessType,
    AttendanceStatus,
    OffboardingStatus,
    TaskStatus,
)
from app.models.department import Department
from app.models.user import User
from app.models.employee import Employee
from app.models.leave import Leave, LeaveBalance
from app.models.compliance import Compliance
from app.models.document import Document, DocumentAccessLog, DocumentAcknowledgment
from app.models.attendance import Attendance
from app.models.offboarding import Offboarding, OffboardingTask, TaskTemplate
from app.models.activity_log import ActivityLog
from app.models.notification import Notification

__all__ = [
    "UserRole",
    "PRIVILEGED_ROLES",
    "EmploymentStatus",
    "LeaveType",
    "LeaveStatus",
    "ComplianceStatus",
    "DocumentType",
    "DocumentAccessLevel",
    "DocumentAccessType",
    "AttendanceStatus",
    "OffboardingStatus",
    "TaskStatus",
    "Department",
    "User",
    "Employee",
    "Leave",
    "LeaveBalance",
    "Compliance",
    "Document",
    "DocumentAccessLog",
    "DocumentAcknowledgment",
    "Attendance",
    "Offboarding",
    "OffboardingTask",
    "TaskTemplate",
    "ActivityLog",
    "Notification",
]
