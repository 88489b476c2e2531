"""
Dashboard service - headline numbers for HR
"""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.models.compliance import Compliance
from app.models.employee import Employee
from app.models.enums import ComplianceStatus, EmploymentStatus, LeaveStatus, OffboardingStatus
from app.models.leave import Leave
from app.models.offboarding import Offboarding
from app.schemas.dashboard import DashboardMetrics
from app.utils.datetime_utils import today_utc


def get_metrics(db: Session, today: Optional[date] = None) -> DashboardMetrics:
    today = today or today_utc()
    return DashboardMetrics(
        headcount=db.query(Employee).filter(Employee.status != EmploymentStatus.TERMINATED).count(),
        active_employees=db.query(Employee).filter(Employee.status == EmploymentStatus.ACTIVE).count(),
        pending_leaves=db.query(Leave).filter(Leave.status == LeaveStatus.PENDING).count(),
        on_leave_today=db.query(Leave.employee_id).filter(
            Leave.status == LeaveStatus.APPROVED,
            Leave.start_date <= today,
            Leave.end_date >= today,
        ).distinct().count(),
        compliance_expiring_soon=db.query(Compliance).filter(
            Compliance.status == ComplianceStatus.EXPIRING_SOON
        ).count(),
        compliance_expired=db.query(Compliance).filter(Compliance.status == ComplianceStatus.EXPIRED).count(),
        active_offboardings=db.query(Offboarding).filter(
            Offboarding.status.in_([OffboardingStatus.PENDING, OffboardingStatus.IN_PROGRESS])
        ).count(),
    )
