"""
Notification service - a user's in-app notifications
"""
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.notification import Notification
from app.models.user import User


def list_for_user(db: Session, user: User, unread_only: bool = False, limit: int = 50) -> Tuple[List[Notification], int]:
    """(newest notifications, total unread count)"""
    query = db.query(Notification).filter(Notification.user_id == user.id)
    unread = query.filter(Notification.is_read.is_(False)).count()
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    items = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()
    return items, unread


def mark_read(db: Session, user: User, notification_id: int) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user.id
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user: User) -> int:
    count = db.query(Notification).filter(
        Notification.user_id == user.id,
        Notification.is_read.is_(False)
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return count
