"""Permission domain model."""

from enum import StrEnum


class Permission(StrEnum):
    """Capabilities a role can grant. Closed set."""

    VIEW_CALENDAR = "view_calendar"
    VIEW_MINUTES = "view_minutes"
    UPLOAD_MINUTES = "upload_minutes"
    EDIT_MINUTES = "edit_minutes"
    DELETE_MINUTES = "delete_minutes"
    CREATE_EVENTS = "create_events"
    EDIT_EVENTS = "edit_events"
    DELETE_EVENTS = "delete_events"
    MANAGE_USERS = "manage_users"
    ASSIGN_ROLES = "assign_roles"
    CREATE_CONTENT = "create_content"
    APPROVE_REGISTRATIONS = "approve_registrations"

    @classmethod
    def all_codes(cls) -> list[str]:
        """Every permission code in declaration order."""
        return [p.value for p in cls]
