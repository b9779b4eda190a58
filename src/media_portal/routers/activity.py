"""Admin activity log router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from media_portal.dependencies import get_activity_service
from media_portal.models.dto.activity import (
    ActivityListResponse,
    ActivityResponse,
    ActivityStatsResponse,
)
from media_portal.security.auth import AdminPrincipal
from media_portal.services.activity_service import ActivityService

router = APIRouter()

Service = Annotated[ActivityService, Depends(get_activity_service)]


@router.get("", response_model=ActivityListResponse)
async def list_activity(
    principal: AdminPrincipal,
    service: Service,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    action: str | None = Query(default=None, max_length=50),
    admin_id: UUID | None = None,
) -> ActivityListResponse:
    """Recent admin actions, newest first."""
    return await service.get_recent(page, page_size, action, admin_id)


@router.get("/stats", response_model=ActivityStatsResponse)
async def get_activity_stats(principal: AdminPrincipal, service: Service) -> ActivityStatsResponse:
    return await service.get_stats()


@router.get("/admin/{admin_id}", response_model=list[ActivityResponse])
async def get_admin_activity(
    admin_id: UUID,
    principal: AdminPrincipal,
    service: Service,
    limit: int = Query(default=20, ge=1, le=100),
) -> list[ActivityResponse]:
    return await service.get_by_admin(admin_id, limit)
