"""SQLAlchemy ORM models package."""

from media_portal.models.orm.base import Base
from media_portal.models.orm.admin import AdminORM
from media_portal.models.orm.admin_activity import AdminActivityORM
from media_portal.models.orm.event import EventORM
from media_portal.models.orm.meeting_minutes import MeetingMinutesORM
from media_portal.models.orm.notification import NotificationORM
from media_portal.models.orm.registration import RegistrationORM
from media_portal.models.orm.role import RoleORM
from media_portal.models.orm.user import UserORM
from media_portal.models.orm.user_role import UserRoleORM

__all__ = [
    "Base",
    "AdminORM",
    "AdminActivityORM",
    "EventORM",
    "MeetingMinutesORM",
    "NotificationORM",
    "RegistrationORM",
    "RoleORM",
    "UserORM",
    "UserRoleORM",
]
