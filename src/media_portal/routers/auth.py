"""Administrator authentication router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from media_portal.dependencies import get_auth_service
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.auth import AdminInfo, AdminLoginRequest, AdminLoginResponse
from media_portal.security.auth import require_admin
from media_portal.security.rate_limit import AUTH_LOGIN_LIMIT, get_real_client_ip, limiter
from media_portal.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=AdminLoginResponse)
@limiter.limit(AUTH_LOGIN_LIMIT)
async def admin_login(
    request: Request,
    body: AdminLoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AdminLoginResponse:
    """Log in with admin username (or email) and password."""
    return await service.admin_login(body.username, body.password, get_real_client_ip(request))


@router.get("/me", response_model=AdminInfo)
async def get_admin_info(
    principal: Annotated[Principal, Depends(require_admin)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AdminInfo:
    """Get the logged-in administrator."""
    return await service.get_admin(principal.id)
