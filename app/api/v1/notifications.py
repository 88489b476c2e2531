"""
Notification endpoints for the current user
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.notification import NotificationOut, NotificationListResponse
from app.services import notification_service

router = APIRouter()


@router.get("/me", response_model=NotificationListResponse)
async def my_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    items, unread = notification_service.list_for_user(db, current_user, unread_only=unread_only, limit=limit)
    return NotificationListResponse(items=items, unread=unread)


@router.post("/me/read-all")
async def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"updated": notification_service.mark_all_read(db, current_user)}


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return notification_service.mark_read(db, current_user, notification_id)
