"""
Dashboard endpoints (Admin/HR)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.dashboard import ActivityOut, DashboardMetrics
from app.services.activity_service import list_recent_activity
from app.services.dashboard_service import get_metrics

router = APIRouter()


@router.get("/activity", response_model=List[ActivityOut])
async def recent_activity(
    limit: int = Query(50, ge=1, le=500),
    entity_type: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    return list_recent_activity(db, limit=limit, entity_type=entity_type, user_id=user_id)


@router.get("/metrics", response_model=DashboardMetrics)
async def metrics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.HR_MANAGER))
):
    return get_metrics(db)
