"""Admin activity DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class ActivityResponse(BaseModel):
    """Activity log entry response."""

    id: UUID
    admin_id: UUID
    admin_username: str | None = None
    action: str
    target_type: str
    target_id: UUID | None = None
    target_label: str | None = None
    description: str
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime


class ActivityListResponse(BaseModel):
    """Paginated activity list response."""

    items: list[ActivityResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ActionCount(BaseModel):
    """Activity count for one action."""

    action: str
    count: int


class AdminActivityCount(BaseModel):
    """Activity count for one administrator."""

    admin_id: UUID
    admin_name: str | None = None
    count: int


class ActivityStatsResponse(BaseModel):
    """Aggregate activity statistics."""

    total: int
    recent_count: int
    by_action: list[ActionCount]
    by_admin: list[AdminActivityCount]
