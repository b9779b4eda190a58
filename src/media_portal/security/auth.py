"""Authentication and authorization dependencies."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.config import get_settings
from media_portal.database import get_db
from media_portal.exceptions import AuthenticationError, ForbiddenError, InternalError
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal, PrincipalKind
from media_portal.services.permission_service import PermissionService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(
    principal_id: UUID,
    kind: PrincipalKind,
    email: str,
    username: str,
) -> str:
    """Create a signed JWT access token.

    Args:
        principal_id: Admin or user UUID
        kind: Which account table the id belongs to
        email: Account email
        username: Account username

    Returns:
        JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(principal_id),
        "email": email,
        "username": username,
        "kind": kind.value,
        "exp": now + timedelta(hours=settings.jwt_expiration_hours),
        "iat": now,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def token_lifetime_seconds() -> int:
    return get_settings().jwt_expiration_hours * 3600


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT token.

    Raises:
        AuthenticationError: If the signature is invalid or the token expired
    """
    settings = get_settings()

    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e


async def get_current_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
) -> Principal:
    """Verify the bearer token and attach the principal to the request.

    Raises:
        AuthenticationError: Missing, invalid or expired token
        InternalError: The token verified but could not be turned into a principal
    """
    if credentials is None:
        raise AuthenticationError("No token provided")

    payload = decode_token(credentials.credentials)

    try:
        principal = Principal(
            id=UUID(payload["sub"]),
            kind=PrincipalKind(payload["kind"]),
            email=payload.get("email"),
            username=payload.get("username"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.error("Verified token carried unusable claims: %s", type(e).__name__)
        raise InternalError("Error verifying token") from e

    request.state.principal = principal
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: CurrentPrincipal) -> Principal:
    """Require an administrator token."""
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
    return principal


async def require_user(principal: CurrentPrincipal) -> Principal:
    """Require a portal user token (profile and notification endpoints)."""
    if principal.kind != PrincipalKind.USER:
        raise ForbiddenError("This endpoint is only available to team members")
    return principal


def require_permission(*permissions: Permission):
    """Dependency factory: allow callers holding at least one of ``permissions``.

    Administrators pass without a lookup. For portal users the resolved
    permission set is stored on ``request.state.user_permissions``.

    Usage:
        @router.delete("/{id}")
        async def delete_minutes(
            principal: Annotated[Principal, Depends(require_permission(Permission.DELETE_MINUTES))],
        ):
            ...
    """
    required = [p.value for p in permissions]

    async def permission_checker(
        request: Request,
        principal: CurrentPrincipal,
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> Principal:
        if principal.is_admin:
            request.state.user_permissions = set(Permission.all_codes())
            return principal

        try:
            granted = await PermissionService(db).check(principal.id, required)
        except SQLAlchemyError as e:
            logger.exception("Permission lookup failed for %s", principal.id)
            raise InternalError("Error checking permissions") from e

        request.state.user_permissions = granted
        return principal

    return permission_checker


AdminPrincipal = Annotated[Principal, Depends(require_admin)]
UserPrincipal = Annotated[Principal, Depends(require_user)]
