"""Calendar event DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from media_portal.models.domain.registration import EventType


class EventCreate(BaseModel):
    """Create event request."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    event_date: datetime
    event_time: str = Field(min_length=1, max_length=20)
    location: str | None = Field(default=None, max_length=255)
    event_type: EventType = EventType.MEETING
    attendees: list[UUID] = []
    is_public: bool = True


class EventUpdate(BaseModel):
    """Update event request; omitted fields keep their value."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    event_date: datetime | None = None
    event_time: str | None = Field(default=None, max_length=20)
    location: str | None = Field(default=None, max_length=255)
    event_type: EventType | None = None
    attendees: list[UUID] | None = None
    is_public: bool | None = None


class EventResponse(BaseModel):
    """Event response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    event_date: datetime
    event_time: str
    location: str | None = None
    event_type: str
    created_by: UUID
    attendees: list[UUID]
    is_public: bool
    created_at: datetime


class EventListResponse(BaseModel):
    """Event list response."""

    items: list[EventResponse]
    total: int


class EventMutationResponse(BaseModel):
    """Created or updated event with the number of users notified."""

    success: bool = True
    message: str
    event: EventResponse
    notified: int
