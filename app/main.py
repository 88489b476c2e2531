"""
Mountain Care HR Backend - Main Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from app.api.router import api_router
from app.core.config import settings
from app.core.constants import DEFAULT_VERSION
from app.core.errors import (
    http_exception_handler,
    hr_error_handler,
    validation_exception_handler,
    generic_exception_handler
)
from app.core.exceptions import HRError
from app.core.logging import setup_logging
from app.db.database import Database
from app.db.init_db import init_db
from app.services.document_storage import DocumentStorage

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
        if parsed.scheme.startswith("sqlite"):
            return url
        if parsed.password:
            netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        return "***"
    return url


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the Database for the life of the process.

    A Database already placed on app.state (tests, embedding) is used as is
    and left open.
    """
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))
        database = Database(settings.DATABASE_URL).open()
        if database.is_sqlite:
            # PostgreSQL schemas come from `alembic upgrade head`
            database.create_all()
        app.state.database = database
    if getattr(app.state, "document_storage", None) is None:
        app.state.document_storage = DocumentStorage(settings.DOCUMENT_STORAGE_PATH)

    db = app.state.database.session()
    try:
        init_db(db)
    except OperationalError as e:
        if "no such table" in str(e).lower() or "does not exist" in str(e).lower():
            logger.warning("Database tables not ready yet, skipping initial bootstrap (run alembic upgrade head)")
        else:
            logger.error("Database error during bootstrap: %s", e)
    finally:
        db.close()

    yield

    if owns_database:
        app.state.database.close()
        app.state.database = None


# Create FastAPI app
app = FastAPI(
    title="Mountain Care HR Backend",
    description="Employee records, leave, compliance tracking, documents and offboarding",
    version=settings.VERSION or DEFAULT_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=settings.ALLOWED_ORIGINS != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(HRError, hr_error_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")
