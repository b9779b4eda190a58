"""Domain models package."""

from media_portal.models.domain.activity import ActivityAction, ActivityTarget, TargetType
from media_portal.models.domain.notification import NotificationType
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal, PrincipalKind
from media_portal.models.domain.registration import (
    ACCEPTED_STATUSES,
    EventType,
    Gender,
    MediaSkill,
    RegistrationStatus,
)

__all__ = [
    "ACCEPTED_STATUSES",
    "ActivityAction",
    "ActivityTarget",
    "EventType",
    "Gender",
    "MediaSkill",
    "NotificationType",
    "Permission",
    "Principal",
    "PrincipalKind",
    "RegistrationStatus",
    "TargetType",
]
