"""Report DTOs."""

from pydantic import BaseModel

from media_portal.models.dto.event import EventResponse
from media_portal.models.dto.registration import RegistrationResponse
from media_portal.models.dto.user import UserResponse


class ApplicationsSummary(BaseModel):
    """Breakdown of the applications in a report."""

    total: int
    by_status: dict[str, int]
    by_skill: dict[str, int]
    by_parish: dict[str, int]
    by_gender: dict[str, int]
    by_age_range: dict[str, int]


class ApplicationsReportResponse(BaseModel):
    """Applications report."""

    applications: list[RegistrationResponse]
    summary: ApplicationsSummary


class MembersSummary(BaseModel):
    """Breakdown of the members in a report."""

    total: int
    active: int
    inactive: int
    by_role: dict[str, int]
    by_skill: dict[str, int]
    by_parish: dict[str, int]


class MembersReportResponse(BaseModel):
    """Members report."""

    members: list[UserResponse]
    summary: MembersSummary


class EventsSummary(BaseModel):
    """Breakdown of the events in a report."""

    total: int
    by_type: dict[str, int]
    total_attendees: int
    avg_attendees: int
    upcoming: int
    past: int


class EventsReportResponse(BaseModel):
    """Events report."""

    events: list[EventResponse]
    summary: EventsSummary
