"""Meeting minutes ORM model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from media_portal.models.orm.base import Base, TimestampMixin, UUIDMixin
from media_portal.models.orm.role import JSONType


class MeetingMinutesORM(Base, UUIDMixin, TimestampMixin):
    """Published record of a team meeting, with file attachments."""

    __tablename__ = "meeting_minutes"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    meeting_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    attendees: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # [{filename, original_name, path, size, mimetype, uploaded_at}]
    attachments: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)
    uploaded_by: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (Index("idx_meeting_minutes_date", "meeting_date"),)
