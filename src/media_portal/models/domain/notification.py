"""Notification domain model."""

from enum import StrEnum


class NotificationType(StrEnum):
    """Domain events a user can be notified about."""

    APPLICATION_APPROVED = "application_approved"
    APPLICATION_REJECTED = "application_rejected"
    ROLE_ASSIGNED = "role_assigned"
    ROLE_REMOVED = "role_removed"
    EVENT_CREATED = "event_created"
    EVENT_UPDATED = "event_updated"
    MEETING_UPLOADED = "meeting_uploaded"
    GENERAL = "general"
