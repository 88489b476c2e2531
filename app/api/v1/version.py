"""
Version and metadata endpoint
"""
from fastapi import APIRouter
from app.core.config import settings
from app.core.constants import SERVICE_NAME, DEFAULT_VERSION

router = APIRouter()


@router.get("/version")
async def get_version():
    """Service name, version and environment"""
    return {
        "service": SERVICE_NAME,
        "version": settings.VERSION or DEFAULT_VERSION,
        "env": settings.APP_ENV,
    }
