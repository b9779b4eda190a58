"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from media_portal import __version__
from media_portal.config import get_settings
from media_portal.database import Database
from media_portal.exceptions import PortalAPIError
from media_portal.middleware.error_handler import (
    generic_exception_handler,
    http_exception_handler,
    portal_exception_handler,
    rate_limit_exceeded_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from media_portal.middleware.request_id_middleware import RequestIDMiddleware
from media_portal.routers import (
    activity,
    analytics,
    auth,
    events,
    health,
    meeting_minutes,
    notifications,
    reports,
    roles,
    submissions,
    user_auth,
    users,
)
from media_portal.security.rate_limit import limiter
from media_portal.tasks.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Routes such as attachment downloads may set their own caching
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"
        response.headers.setdefault("Vary", "Accept, Authorization, Origin")
        # Strict Transport Security (HSTS) - only in production
        if get_settings().environment == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()

    # Tests install their own handle before startup
    db = getattr(app.state, "db", None)
    if db is None:
        db = Database.from_settings(settings)
        app.state.db = db

    if settings.scheduler_enabled:
        await start_scheduler(db)
    yield
    if settings.scheduler_enabled:
        await stop_scheduler()
    await db.disconnect()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        description="Media team membership and administration API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_exception_handler(PortalAPIError, portal_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    allowed_origins = config.cors_origins_list
    if "*" in allowed_origins:
        raise ValueError(
            "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
            "Specify explicit origins."
        )

    # Middleware order matters! FastAPI processes middleware in REVERSE order of addition.
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # CORS middleware - MUST be added last so it runs FIRST on incoming requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Requested-With", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Include routers
    app.include_router(health.router, prefix="/api/health", tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(user_auth.router, prefix="/api/user", tags=["User Authentication"])
    app.include_router(submissions.router, prefix="/api/submissions", tags=["Submissions"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(roles.router, prefix="/api/roles", tags=["Roles"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
    app.include_router(events.router, prefix="/api/events", tags=["Events"])
    app.include_router(
        meeting_minutes.router, prefix="/api/meeting-minutes", tags=["Meeting Minutes"]
    )
    app.include_router(activity.router, prefix="/api/activity", tags=["Activity"])
    app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
    app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])

    return app


app = create_app()
