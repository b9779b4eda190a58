"""Admin reports router."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from media_portal.dependencies import get_report_service
from media_portal.models.domain.registration import RegistrationStatus
from media_portal.models.dto.report import (
    ApplicationsReportResponse,
    EventsReportResponse,
    MembersReportResponse,
)
from media_portal.security.auth import AdminPrincipal
from media_portal.services.report_service import ReportService

router = APIRouter()

Service = Annotated[ReportService, Depends(get_report_service)]


@router.get("/applications", response_model=ApplicationsReportResponse)
async def get_applications_report(
    principal: AdminPrincipal,
    service: Service,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    status: RegistrationStatus | None = Query(default=None),
) -> ApplicationsReportResponse:
    """Applications in a date range with summary breakdowns."""
    return await service.applications(start_date, end_date, status.value if status else None)


@router.get("/members", response_model=MembersReportResponse)
async def get_members_report(principal: AdminPrincipal, service: Service) -> MembersReportResponse:
    return await service.members()


@router.get("/events", response_model=EventsReportResponse)
async def get_events_report(
    principal: AdminPrincipal,
    service: Service,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> EventsReportResponse:
    return await service.events(start_date, end_date)
