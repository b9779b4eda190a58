"""Notification DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    """Notification response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    title: str
    message: str
    is_read: bool
    link: str | None = None
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("extra", "metadata")
    )
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Paginated notification list response."""

    items: list[NotificationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    unread_count: int


class UnreadCountResponse(BaseModel):
    """Unread notification count."""

    count: int


class MarkAllReadResponse(BaseModel):
    """Result of a bulk mark-as-read."""

    success: bool = True
    message: str = "All notifications marked as read"
    updated: int


class MarkReadResponse(BaseModel):
    """Mark-as-read result; ``notification`` is None when absent or not owned."""

    success: bool = True
    notification: NotificationResponse | None = None
