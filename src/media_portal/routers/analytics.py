"""Admin analytics router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from media_portal.dependencies import get_analytics_service
from media_portal.models.dto.analytics import (
    AnalyticsOverviewResponse,
    EventAnalyticsResponse,
    MemberAnalyticsResponse,
)
from media_portal.security.auth import AdminPrincipal
from media_portal.services.analytics_service import AnalyticsService

router = APIRouter()

Service = Annotated[AnalyticsService, Depends(get_analytics_service)]


@router.get("/overview", response_model=AnalyticsOverviewResponse)
async def get_overview(principal: AdminPrincipal, service: Service) -> AnalyticsOverviewResponse:
    """Application trends and member demographics."""
    return await service.overview()


@router.get("/events", response_model=EventAnalyticsResponse)
async def get_event_analytics(principal: AdminPrincipal, service: Service) -> EventAnalyticsResponse:
    return await service.events()


@router.get("/members", response_model=MemberAnalyticsResponse)
async def get_member_analytics(
    principal: AdminPrincipal, service: Service
) -> MemberAnalyticsResponse:
    return await service.members()
