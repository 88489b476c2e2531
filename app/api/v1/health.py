"""
Health check endpoint
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.constants import SERVICE_NAME
from app.core.deps import get_database
from app.db.database import Database

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """
    Health check endpoint

    Returns service status and whether the database answers.
    """
    db_status = "ok"
    try:
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed", exc_info=e)
        db_status = "unavailable"

    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "database": db_status,
    }
