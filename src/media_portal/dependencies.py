"""Centralized dependency injection factories for FastAPI.

This module provides reusable service factory functions for dependency injection,
eliminating duplicate definitions across routers.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.database import get_db
from media_portal.services.activity_service import ActivityService
from media_portal.services.analytics_service import AnalyticsService
from media_portal.services.auth_service import AuthService
from media_portal.services.email_service import EmailService
from media_portal.services.event_service import EventService
from media_portal.services.minutes_service import MinutesService
from media_portal.services.notification_service import NotificationService
from media_portal.services.registration_service import RegistrationService
from media_portal.services.report_service import ReportService
from media_portal.services.role_service import RoleService
from media_portal.services.user_service import UserService


# =============================================================================
# Core Service Factories
# =============================================================================


def get_activity_service(db: AsyncSession = Depends(get_db)) -> ActivityService:
    """Get ActivityService instance."""
    return ActivityService(db)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get AuthService instance."""
    return AuthService(db)


def get_email_service() -> EmailService:
    """Get EmailService instance."""
    return EmailService()


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    """Get NotificationService instance."""
    return NotificationService(db)


# =============================================================================
# Membership Service Factories
# =============================================================================


def get_registration_service(db: AsyncSession = Depends(get_db)) -> RegistrationService:
    """Get RegistrationService instance."""
    return RegistrationService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get UserService instance."""
    return UserService(db)


def get_role_service(db: AsyncSession = Depends(get_db)) -> RoleService:
    """Get RoleService instance."""
    return RoleService(db)


# =============================================================================
# Team Content Service Factories
# =============================================================================


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    """Get EventService instance."""
    return EventService(db)


def get_minutes_service(db: AsyncSession = Depends(get_db)) -> MinutesService:
    """Get MinutesService instance."""
    return MinutesService(db)


# =============================================================================
# Reporting Service Factories
# =============================================================================


def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    """Get AnalyticsService instance."""
    return AnalyticsService(db)


def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    """Get ReportService instance."""
    return ReportService(db)
