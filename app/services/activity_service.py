"""
Activity logging service
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    user_id: Optional[int],
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    description: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Optional[ActivityLog]:
    """
    Add an activity log entry to the caller's transaction

    The entry is written inside a savepoint so a failure here never
    poisons the surrounding work; it is logged and None is returned.
    The caller commits.

    Args:
        db: Database session
        user_id: ID of the user performing the action
        action: Action type (e.g., "CREATE", "UPDATE", "DELETE", "APPROVE")
        entity_type: Type of entity (e.g., "Employee", "Leave", "Document")
        entity_id: ID of the affected entity (optional)
        description: Human readable summary; defaults to "<action> <entity_type>"
        details: Additional metadata as dictionary (optional)
    """
    entry = ActivityLog(
        user_id=user_id,
        action_type=action,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description or f"{action} {entity_type}",
        details=sanitize_for_json(details) if details is not None else None,
    )
    try:
        with db.begin_nested():
            db.add(entry)
    except SQLAlchemyError as e:
        logger.error("Failed to write activity log (%s %s %s)", action, entity_type, entity_id, exc_info=e)
        return None
    return entry


def list_recent_activity(
    db: Session,
    limit: int = 50,
    entity_type: Optional[str] = None,
    user_id: Optional[int] = None
) -> List[ActivityLog]:
    query = db.query(ActivityLog)
    if entity_type:
        query = query.filter(ActivityLog.entity_type == entity_type)
    if user_id:
        query = query.filter(ActivityLog.user_id == user_id)
    return query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit).all()
