"""
Offboarding endpoints (Admin/HR)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.offboarding import OffboardingStart, OffboardingOut, TaskTemplateCreate, TaskTemplateOut
from app.services import offboarding_service as offboarding

router = APIRouter()

HR_ROLES = (UserRole.ADMIN, UserRole.HR_MANAGER)


@router.post("", response_model=OffboardingOut, status_code=201)
async def start_offboarding_endpoint(
    data: OffboardingStart,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES))
):
    """Start an exit process; the employee becomes Terminating"""
    record = offboarding.start_offboarding(db, data.employee_id, data.exit_date, data.reason, current_user)
    return offboarding.to_out(record)


@router.get("", response_model=List[OffboardingOut])
async def list_offboardings_endpoint(
    status: Optional[str] = Query(None, description="active, pending, inprogress, completed or cancelled"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES))
):
    return [offboarding.to_out(o) for o in offboarding.list_offboardings(db, status)]


@router.get("/templates", response_model=List[TaskTemplateOut])
async def list_task_templates_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES))
):
    return offboarding.list_task_templates(db)


@router.post("/templates", response_model=TaskTemplateOut, status_code=201)
async def create_task_template_endpoint(
    data: TaskTemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN))
):
    return offboarding.create_task_template(db, data, current_user)


@router.get("/{offboarding_id}", response_model=OffboardingOut)
async def get_offboarding_endpoint(
    offboarding_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES))
):
    return offboarding.to_out(offboarding.get_offboarding(db, offboarding_id))


@router.post("/{offboarding_id}/tasks/{task_id}/complete", response_model=OffboardingOut)
async def complete_task_endpoint(
    offboarding_id: int,
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES))
):
    return offboarding.to_out(offboarding.complete_task(db, offboarding_id, task_id, current_user))


@router.post("/{offboarding_id}/cancel", response_model=OffboardingOut)
async def cancel_offboarding_endpoint(
    offboarding_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES))
):
    """Cancel the process; the employee goes back to Active"""
    return offboarding.to_out(offboarding.cancel_offboarding(db, offboarding_id, current_user))
