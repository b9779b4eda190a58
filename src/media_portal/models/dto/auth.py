"""Authentication DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from media_portal.models.dto.user import UserProfileResponse


class TokenResponse(BaseModel):
    """Token response DTO."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class AdminLoginRequest(BaseModel):
    """Admin login; ``username`` may also be the admin's email."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class AdminInfo(BaseModel):
    """Admin account as returned after login."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    last_login_at: datetime | None = None


class AdminLoginResponse(TokenResponse):
    """Admin token plus account."""

    admin: AdminInfo


class UserLoginRequest(BaseModel):
    """Portal user login."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class UserLoginResponse(TokenResponse):
    """Portal token plus profile."""

    user: UserProfileResponse


class ChangePasswordRequest(BaseModel):
    """Password change for the logged-in user."""

    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=6, max_length=128)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset link."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Complete a password reset with the emailed token."""

    token: str = Field(min_length=1, max_length=200)
    new_password: str = Field(min_length=6, max_length=128)
