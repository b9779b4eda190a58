"""Admin activity domain model."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class ActivityAction(StrEnum):
    """Administrator actions recorded in the activity log."""

    APPLICATION_APPROVED = "application_approved"
    APPLICATION_REJECTED = "application_rejected"
    APPLICATION_DELETED = "application_deleted"
    EVENT_CREATED = "event_created"
    EVENT_UPDATED = "event_updated"
    EVENT_DELETED = "event_deleted"
    ROLE_ASSIGNED = "role_assigned"
    ROLE_REMOVED = "role_removed"
    USER_STATUS_CHANGED = "user_status_changed"
    ADMIN_LOGIN = "admin_login"
    USER_CREATED = "user_created"


class TargetType(StrEnum):
    """Kinds of record an activity can point at."""

    REGISTRATION = "registration"
    EVENT = "event"
    USER = "user"
    ROLE = "role"
    SYSTEM = "system"


@dataclass(frozen=True)
class ActivityTarget:
    """Polymorphic reference: ``id`` is only meaningful together with ``kind``.

    ``SYSTEM`` targets carry no id.
    """

    kind: TargetType
    id: UUID | None = None

    @classmethod
    def system(cls) -> "ActivityTarget":
        return cls(TargetType.SYSTEM)

    @classmethod
    def registration(cls, registration_id: UUID) -> "ActivityTarget":
        return cls(TargetType.REGISTRATION, registration_id)

    @classmethod
    def event(cls, event_id: UUID) -> "ActivityTarget":
        return cls(TargetType.EVENT, event_id)

    @classmethod
    def user(cls, user_id: UUID) -> "ActivityTarget":
        return cls(TargetType.USER, user_id)

    @classmethod
    def role(cls, role_id: UUID) -> "ActivityTarget":
        return cls(TargetType.ROLE, role_id)
