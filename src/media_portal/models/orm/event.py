"""Calendar event ORM model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from media_portal.models.domain.registration import EventType
from media_portal.models.orm.base import Base, TimestampMixin, UUIDMixin
from media_portal.models.orm.role import JSONType


class EventORM(Base, UUIDMixin, TimestampMixin):
    """Team calendar entry."""

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    event_time: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_type: Mapped[str] = mapped_column(
        String(20), default=EventType.MEETING.value, nullable=False
    )
    created_by: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    # User ids as strings
    attendees: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    reminder_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (Index("idx_events_date", "event_date"),)

    @property
    def attendee_ids(self) -> list[UUID]:
        return [UUID(str(a)) for a in self.attendees or []]
