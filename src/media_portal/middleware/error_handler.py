"""Exception handlers rendering the portal's ``{success, message}`` error body."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from media_portal.config import get_settings
from media_portal.exceptions import PermissionDeniedError, PortalAPIError

logger = logging.getLogger(__name__)

# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    413: "Request too large",
    422: "Invalid input data",
    429: "Too many requests",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}


def error_body(message: str, **extra: Any) -> dict[str, Any]:
    """Standard error payload."""
    return {"success": False, "message": message, **extra}


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Reduce pydantic errors to field names and messages."""
    safe_errors = []
    for error in errors:
        loc = error.get("loc", [])
        field = loc[-1] if loc else "field"
        if isinstance(field, str) and field.startswith("_"):
            continue
        safe_errors.append({"field": str(field), "message": error.get("msg", "Invalid value")})
    return safe_errors


async def portal_exception_handler(request: Request, exc: PortalAPIError) -> JSONResponse:
    """Render service-layer errors with their own status code."""
    if exc.status_code >= 500:
        logger.error("Internal error for %s: %s", request.url.path, exc.message)

    extra: dict[str, Any] = {}
    if isinstance(exc, PermissionDeniedError):
        logger.warning(
            "Permission denied on %s %s (required: %s)",
            request.method,
            request.url.path,
            exc.required,
        )
        # granted is None for users without any role assignment
        if exc.granted is not None and get_settings().expose_permissions_on_denial:
            extra["requiredPermissions"] = exc.required or []
            extra["userPermissions"] = exc.granted

    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, **extra))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle routing errors (unknown path, wrong method) in the same shape."""
    if isinstance(exc.detail, str) and get_settings().debug:
        message = exc.detail
    else:
        message = SAFE_ERROR_MESSAGES.get(exc.status_code, "Request failed")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle validation exceptions with sanitized messages."""
    logger.warning("Validation error for %s: %s", request.url.path, exc.errors())
    errors = sanitize_validation_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(SAFE_ERROR_MESSAGES[422], errors=errors),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details."""
    logger.error("Database error for %s: %s", request.url.path, exc, exc_info=True)

    if isinstance(exc, IntegrityError):
        text = str(exc).lower()
        if "unique" in text or "duplicate" in text:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content=error_body("Resource already exists"),
            )
        if "foreign key" in text:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=error_body("Referenced resource not found"),
            )

    message = f"Database error: {type(exc).__name__}" if get_settings().debug else (
        "Database error occurred"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information."""
    logger.error("Unhandled exception for %s: %s", request.url.path, exc, exc_info=True)
    message = str(exc) if get_settings().debug else SAFE_ERROR_MESSAGES[500]
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Rate limit response with a Retry-After header."""
    logger.warning("Rate limit exceeded for %s on %s", request.client, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body("Too many requests, please try again later"),
        headers={"Retry-After": "60"},
    )
