"""Repositories package."""

from media_portal.repositories.activity_repository import ActivityRepository
from media_portal.repositories.admin_repository import AdminRepository
from media_portal.repositories.event_repository import EventRepository
from media_portal.repositories.minutes_repository import MinutesRepository
from media_portal.repositories.notification_repository import NotificationRepository
from media_portal.repositories.registration_repository import RegistrationRepository
from media_portal.repositories.role_repository import RoleRepository
from media_portal.repositories.user_repository import UserRepository

__all__ = [
    "ActivityRepository",
    "AdminRepository",
    "EventRepository",
    "MinutesRepository",
    "NotificationRepository",
    "RegistrationRepository",
    "RoleRepository",
    "UserRepository",
]
