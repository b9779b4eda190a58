"""Analytics DTOs."""

from pydantic import BaseModel

from media_portal.models.dto.common import CountItem, TrendPoint


class MonthlyApprovalRate(BaseModel):
    """Decided applications for one month."""

    month: str
    approved: int
    rejected: int
    total: int


class AnalyticsOverviewResponse(BaseModel):
    """Application and membership overview."""

    application_trends: list[TrendPoint]
    skills_distribution: list[CountItem]
    approval_rate_by_month: list[MonthlyApprovalRate]
    geographic_distribution: list[CountItem]
    gender_distribution: list[CountItem]
    age_range_distribution: list[CountItem]


class EventTypeAttendance(BaseModel):
    """Average attendee count for one event type."""

    event_type: str
    avg_attendees: float
    total_events: int


class EventAnalyticsResponse(BaseModel):
    """Event analytics."""

    event_count_by_type: list[CountItem]
    avg_attendance_by_type: list[EventTypeAttendance]
    upcoming_count: int
    past_count: int
    events_timeline: list[TrendPoint]


class MemberAnalyticsResponse(BaseModel):
    """Member analytics."""

    total_active: int
    total_inactive: int
    member_growth: list[TrendPoint]
