"""
Central error handling for Mountain Care HR Backend
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

from app.core.config import settings
from app.core.exceptions import HRError

logger = logging.getLogger(__name__)


def _error_body(request: Request, status_code: int, detail, **extra) -> dict:
    body = {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "path": str(request.url.path),
    }
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException with the consistent JSON error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def hr_error_handler(request: Request, exc: HRError) -> JSONResponse:
    """
    Translate domain errors raised by services into HTTP responses.

    Server-side failures (5xx) are logged with traceback; client errors are
    logged at INFO so they do not flood the error log.
    """
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message, exc_info=exc)
        detail = "Internal server error" if settings.APP_ENV == "prod" else exc.message
    else:
        logger.info("%s on %s: %s", exc.error_code, request.url.path, exc.message)
        detail = exc.message

    extra = {"error_code": exc.error_code}
    if exc.details and exc.status_code < 500:
        extra["details"] = exc.details
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, detail, **extra),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(request, 422, "Validation error: Invalid request data"),
        )

    # ctx may hold exception instances (e.g. ValueError from a validator); stringify for JSON
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(request, 422, "Validation error", errors=errors),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    logger.error("Unhandled exception: %s", exc, exc_info=exc)

    detail = "Internal server error" if settings.APP_ENV == "prod" else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, 500, detail),
    )
