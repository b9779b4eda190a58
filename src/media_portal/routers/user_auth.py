"""Portal user authentication and profile router."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from media_portal.dependencies import get_auth_service, get_email_service
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserLoginRequest,
    UserLoginResponse,
)
from media_portal.models.dto.common import MessageResponse
from media_portal.models.dto.user import ProfileUpdateRequest, UserProfileResponse
from media_portal.security.auth import require_user
from media_portal.security.rate_limit import (
    AUTH_LOGIN_LIMIT,
    PASSWORD_RESET_LIMIT,
    limiter,
)
from media_portal.services.auth_service import AuthService
from media_portal.services.email_service import EmailService

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent"


@router.post("/login", response_model=UserLoginResponse)
@limiter.limit(AUTH_LOGIN_LIMIT)
async def user_login(
    request: Request,
    body: UserLoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserLoginResponse:
    """Log in with email and password."""
    return await service.user_login(body.email.lower(), body.password)


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(
    principal: Annotated[Principal, Depends(require_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserProfileResponse:
    """Get the current user's profile, roles and permissions."""
    return await service.get_profile(principal.id)


@router.put("/profile", response_model=UserProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    principal: Annotated[Principal, Depends(require_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserProfileResponse:
    return await service.update_profile(principal.id, body)


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    principal: Annotated[Principal, Depends(require_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    await service.change_password(principal.id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(PASSWORD_RESET_LIMIT)
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    service: Annotated[AuthService, Depends(get_auth_service)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> MessageResponse:
    """Start a password reset.

    The response is identical whether or not the email is registered.
    """
    issued = await service.forgot_password(body.email.lower())
    if issued is not None:
        user, token = issued
        background_tasks.add_task(
            email_service.send_password_reset_email, user.email, user.full_name, token
        )
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(PASSWORD_RESET_LIMIT)
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    await service.reset_password(body.token, body.new_password)
    return MessageResponse(message="Password has been reset successfully")


@router.post("/refresh-token", response_model=TokenResponse)
async def refresh_token(
    principal: Annotated[Principal, Depends(require_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Issue a new token for the current user."""
    return await service.refresh(principal.id)
