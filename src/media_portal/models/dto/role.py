"""Role DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from media_portal.models.domain.permission import Permission
from media_portal.models.dto.user import UserResponse


class RoleCreate(BaseModel):
    """Create role request."""

    name: str = Field(min_length=1, max_length=100)
    slug: str | None = Field(default=None, max_length=100)
    description: str = Field(min_length=1)
    responsibilities: list[str] = []
    permissions: list[Permission] = []


class RoleUpdate(BaseModel):
    """Update role request. The slug never changes after creation."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    responsibilities: list[str] | None = None
    permissions: list[Permission] | None = None
    is_active: bool | None = None


class RoleResponse(BaseModel):
    """Role response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str
    responsibilities: list[str]
    permissions: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RoleAssignRequest(BaseModel):
    """Assign a role to the user named in the path."""

    role_id: UUID
    notes: str | None = Field(default=None, max_length=1000)


class RoleAssignmentResponse(BaseModel):
    """One role held by a user."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    role: RoleResponse
    assigned_by: UUID | None = None
    assigned_at: datetime
    notes: str | None = None


class UserDetailResponse(UserResponse):
    """User with full role assignments."""

    assignments: list[RoleAssignmentResponse] = []
