"""Admin and portal user authentication."""

import hashlib
import logging
import secrets
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.config import get_settings
from media_portal.exceptions import (
    AccountDisabledError,
    AuthenticationError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.models.domain.principal import PrincipalKind
from media_portal.models.dto.auth import (
    AdminInfo,
    AdminLoginResponse,
    TokenResponse,
    UserLoginResponse,
)
from media_portal.models.dto.user import ProfileUpdateRequest, UserProfileResponse
from media_portal.models.orm.base import utc_now
from media_portal.models.orm.user import UserORM
from media_portal.repositories.admin_repository import AdminRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.security.auth import create_access_token, token_lifetime_seconds
from media_portal.security.password import get_password_service
from media_portal.services.activity_service import ActivityService
from media_portal.services.permission_service import PermissionService
from media_portal.services.user_service import build_user_response

logger = logging.getLogger(__name__)


def hash_reset_token(token: str) -> str:
    """Only this digest of a reset token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AuthService:
    """Login, profile and password flows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.admin_repo = AdminRepository(session)
        self.user_repo = UserRepository(session)
        self.password_service = get_password_service()
        self.activity_service = ActivityService(session)
        self.permission_service = PermissionService(session)

    async def admin_login(
        self, identifier: str, password: str, ip_address: str | None = None
    ) -> AdminLoginResponse:
        """Authenticate an administrator by username or email.

        Raises:
            InvalidCredentialsError: Unknown account, wrong password or disabled admin
        """
        admin = await self.admin_repo.get_by_login(identifier)
        if (
            admin is None
            or not admin.is_active
            or not self.password_service.verify_password(password, admin.password_hash)
        ):
            logger.warning("Failed admin login attempt")
            raise InvalidCredentialsError()

        await self.admin_repo.record_login(admin)
        await self.activity_service.log_activity(
            admin.id,
            ActivityAction.ADMIN_LOGIN,
            ActivityTarget.system(),
            f"Admin {admin.username} logged in",
            ip_address=ip_address,
        )

        token = create_access_token(admin.id, PrincipalKind.ADMIN, admin.email, admin.username)
        return AdminLoginResponse(
            access_token=token,
            expires_in=token_lifetime_seconds(),
            admin=AdminInfo.model_validate(admin),
        )

    async def get_admin(self, admin_id: UUID) -> AdminInfo:
        """Raises AuthenticationError when the admin no longer exists or is disabled."""
        admin = await self.admin_repo.get(admin_id)
        if admin is None or not admin.is_active:
            raise AuthenticationError("Admin account not found")
        return AdminInfo.model_validate(admin)

    async def _profile(self, user: UserORM) -> UserProfileResponse:
        granted = await self.permission_service.resolve(user.id) or set()
        return UserProfileResponse(
            **build_user_response(user).model_dump(),
            permissions=sorted(granted),
        )

    async def _get_user(self, user_id: UUID) -> UserORM:
        user = await self.user_repo.get_with_roles(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def user_login(self, email: str, password: str) -> UserLoginResponse:
        """Authenticate a portal user.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountDisabledError: The account was deactivated
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not self.password_service.verify_password(password, user.password_hash):
            logger.warning("Failed portal login attempt")
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError()

        user.last_login_at = utc_now()
        await self.session.flush()

        token = create_access_token(user.id, PrincipalKind.USER, user.email, user.username)
        return UserLoginResponse(
            access_token=token,
            expires_in=token_lifetime_seconds(),
            user=await self._profile(user),
        )

    async def refresh(self, user_id: UUID) -> TokenResponse:
        """Issue a fresh token for an active user."""
        user = await self._get_user(user_id)
        if not user.is_active:
            raise AccountDisabledError()
        token = create_access_token(user.id, PrincipalKind.USER, user.email, user.username)
        return TokenResponse(access_token=token, expires_in=token_lifetime_seconds())

    async def get_profile(self, user_id: UUID) -> UserProfileResponse:
        return await self._profile(await self._get_user(user_id))

    async def update_profile(
        self, user_id: UUID, data: ProfileUpdateRequest
    ) -> UserProfileResponse:
        user = await self._get_user(user_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if key == "full_name" and value is None:
                continue
            setattr(user, key, value)
        await self.session.flush()
        return await self._profile(user)

    async def change_password(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> None:
        """Replace the password after verifying the current one.

        Raises:
            ValidationError: Wrong current password or new password too short
        """
        user = await self._get_user(user_id)
        if not self.password_service.verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        self._check_length(new_password)
        user.password_hash = self.password_service.hash_password(new_password)
        await self.session.flush()
        logger.info("Password changed for user %s", user.id)

    async def forgot_password(self, email: str) -> tuple[UserORM, str] | None:
        """Create a reset token for the account, if it exists and is active.

        Returns:
            (user, plaintext token) for emailing, or None. Callers answer
            identically in both cases.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not user.is_active:
            return None

        token = secrets.token_urlsafe(32)
        settings = get_settings()
        user.reset_password_token_hash = hash_reset_token(token)
        user.reset_password_expires_at = utc_now() + timedelta(
            minutes=settings.password_reset_token_minutes
        )
        await self.session.flush()
        return user, token

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using an emailed reset token.

        Raises:
            ValidationError: Unknown or expired token, or password too short
        """
        user = await self.user_repo.get_by_reset_token(hash_reset_token(token), utc_now())
        if user is None:
            raise ValidationError("Invalid or expired reset token")
        self._check_length(new_password)
        user.password_hash = self.password_service.hash_password(new_password)
        user.reset_password_token_hash = None
        user.reset_password_expires_at = None
        await self.session.flush()
        logger.info("Password reset completed for user %s", user.id)

    @staticmethod
    def _check_length(password: str) -> None:
        min_length = get_settings().password_min_length
        if len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")
