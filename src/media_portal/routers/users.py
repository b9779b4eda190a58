"""Portal user management router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from media_portal.dependencies import get_user_service
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.role import UserDetailResponse
from media_portal.models.dto.user import UserListResponse, UserStatsResponse, UserStatusResponse
from media_portal.security.auth import require_permission
from media_portal.security.rate_limit import get_real_client_ip
from media_portal.services.user_service import UserService
from media_portal.utils.validation import sanitize_search

router = APIRouter()

UserManager = Annotated[Principal, Depends(require_permission(Permission.MANAGE_USERS))]


@router.get("", response_model=UserListResponse)
async def list_users(
    principal: UserManager,
    service: Annotated[UserService, Depends(get_user_service)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200),
    search: str | None = Query(default=None, max_length=200),
    is_active: bool | None = None,
) -> UserListResponse:
    """List portal users with their role names."""
    return await service.list_users(
        page=page, page_size=page_size, search=sanitize_search(search), is_active=is_active
    )


@router.get("/stats", response_model=UserStatsResponse)
async def get_user_stats(
    principal: UserManager,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserStatsResponse:
    return await service.get_stats()


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: UUID,
    principal: UserManager,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserDetailResponse:
    return await service.get_detail(user_id)


@router.patch("/{user_id}/status", response_model=UserStatusResponse)
async def toggle_user_status(
    request: Request,
    user_id: UUID,
    principal: UserManager,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserStatusResponse:
    """Activate or deactivate a user."""
    return await service.toggle_status(user_id, principal, get_real_client_ip(request))
