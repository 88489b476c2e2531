"""
Enumerations shared by models, schemas and services
"""
import enum

from sqlalchemy import Enum as SQLEnum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    HR_MANAGER = "hr_manager"
    DEPARTMENT_MANAGER = "department_manager"
    EMPLOYEE = "employee"


# Roles that see and manage everything
PRIVILEGED_ROLES = (UserRole.ADMIN, UserRole.HR_MANAGER)


class EmploymentStatus(str, enum.Enum):
    ACTIVE = "Active"
    ON_LEAVE = "OnLeave"
    TERMINATING = "Terminating"
    TERMINATED = "Terminated"


class LeaveType(str, enum.Enum):
    VACATION = "Vacation"
    SICK = "Sick"
    PERSONAL = "Personal"
    BEREAVEMENT = "Bereavement"
    OTHER = "Other"


class LeaveStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class ComplianceStatus(str, enum.Enum):
    ACTIVE = "Active"
    EXPIRING_SOON = "ExpiringSoon"
    EXPIRED = "Expired"
    PENDING_REVIEW = "PendingReview"
    ARCHIVED = "Archived"


class DocumentType(str, enum.Enum):
    EMPLOYEE_RECORD = "employee_record"
    POLICY = "policy"
    CONTRACT = "contract"
    HANDBOOK = "handbook"
    LICENSE = "license"
    CERTIFICATION = "certification"
    MEDICAL = "medical"
    PERFORMANCE_REVIEW = "performance_review"
    TAX_FORM = "tax_form"
    TRAINING = "training"
    OTHER = "other"


class DocumentAccessLevel(str, enum.Enum):
    PUBLIC = "public"              # all employees
    DEPARTMENT = "department"      # members of the document's department
    MANAGER = "manager"            # department managers of the document's department
    HR = "hr"                      # HR staff and admins
    ADMIN = "admin"                # admins
    INDIVIDUAL = "individual"      # only the employee the document belongs to


class DocumentAccessType(str, enum.Enum):
    CREATE = "CREATE"
    VIEW = "VIEW"
    DOWNLOAD = "DOWNLOAD"
    UPDATE = "UPDATE"
    ACKNOWLEDGE = "ACKNOWLEDGE"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    HALF_DAY = "HalfDay"
    ON_LEAVE = "OnLeave"


class OffboardingStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


def enum_column(enum_cls) -> SQLEnum:
    """Store enum values (not member names) as VARCHAR so SQLite and PostgreSQL agree."""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
        validate_strings=True,
    )
