"""Portal user DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from media_portal.models.dto.common import CountItem


class RoleSummary(BaseModel):
    """Role as embedded in user listings."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None = None


class UserResponse(BaseModel):
    """Portal user. The password hash is never part of this model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    full_name: str
    phone: str | None = None
    profile_image: str | None = None
    is_active: bool
    registration_id: UUID | None = None
    last_login_at: datetime | None = None
    created_at: datetime
    roles: list[RoleSummary] = []


class UserProfileResponse(UserResponse):
    """The caller's own account with resolved permissions."""

    permissions: list[str] = []


class UserListResponse(BaseModel):
    """Paginated user list response."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class UserStatusResponse(BaseModel):
    """Result of toggling a user's active flag."""

    success: bool = True
    message: str
    id: UUID
    is_active: bool


class UserStatsResponse(BaseModel):
    """Aggregate member statistics."""

    total: int
    active: int
    inactive: int
    skills: list[CountItem]
    parishes: list[CountItem]
    roles: list[CountItem]


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields."""

    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    profile_image: str | None = Field(default=None, max_length=2000)
