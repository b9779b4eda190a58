"""Meeting minutes DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AttachmentInfo(BaseModel):
    """Stored attachment metadata; the storage path is not exposed."""

    filename: str
    original_name: str
    size: int
    mimetype: str
    uploaded_at: datetime | None = None


class MinutesResponse(BaseModel):
    """Meeting minutes response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    meeting_date: datetime
    attendees: list[UUID]
    summary: str | None = None
    content: str
    attachments: list[AttachmentInfo]
    uploaded_by: UUID
    is_published: bool
    created_at: datetime
    updated_at: datetime


class MinutesListResponse(BaseModel):
    """Paginated minutes list response."""

    items: list[MinutesResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class MinutesMutationResponse(BaseModel):
    """Uploaded or updated minutes with the number of users notified."""

    success: bool = True
    message: str
    minutes: MinutesResponse
    notified: int = 0
