"""Membership application router."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status

from media_portal.dependencies import get_email_service, get_registration_service
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal
from media_portal.models.domain.registration import RegistrationStatus
from media_portal.models.dto.common import MessageResponse
from media_portal.models.dto.registration import (
    ApprovalResponse,
    RegistrationCreate,
    RegistrationListResponse,
    RegistrationResponse,
    RegistrationStatsResponse,
    RegistrationStatusUpdate,
    RejectRequest,
    SubmissionResponse,
)
from media_portal.repositories.registration_repository import SORTABLE_COLUMNS
from media_portal.security.auth import require_permission
from media_portal.security.rate_limit import SUBMISSION_LIMIT, get_real_client_ip, limiter
from media_portal.services.email_service import EmailService
from media_portal.services.registration_service import RegistrationService
from media_portal.utils.validation import sanitize_search, sanitize_status, validate_sort_by

logger = logging.getLogger(__name__)

router = APIRouter()

REGISTRATION_STATUSES = {s.value for s in RegistrationStatus}

Reviewer = Annotated[Principal, Depends(require_permission(Permission.APPROVE_REGISTRATIONS))]
Service = Annotated[RegistrationService, Depends(get_registration_service)]


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SUBMISSION_LIMIT)
async def submit_registration(
    request: Request,
    body: RegistrationCreate,
    background_tasks: BackgroundTasks,
    service: Service,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> SubmissionResponse:
    """Submit a membership application. Public."""
    registration = await service.submit(body)
    background_tasks.add_task(
        email_service.send_confirmation_email, registration.email, registration.full_name
    )
    background_tasks.add_task(
        email_service.send_admin_notification,
        registration.full_name,
        registration.email,
        list(registration.media_skills),
    )
    return SubmissionResponse(id=registration.id)


@router.get("", response_model=RegistrationListResponse)
async def list_registrations(
    principal: Reviewer,
    service: Service,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200),
    search: str | None = Query(default=None, max_length=200),
    status_filter: str | None = Query(default=None, alias="status", max_length=20),
    sort_by: str = Query(default="submitted_at", max_length=50),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
) -> RegistrationListResponse:
    """List applications with search, status filter and sorting."""
    return await service.list_registrations(
        page=page,
        page_size=page_size,
        search=sanitize_search(search),
        status=sanitize_status(status_filter, REGISTRATION_STATUSES),
        sort_by=validate_sort_by(sort_by, SORTABLE_COLUMNS, "submitted_at"),
        sort_order=sort_order,
    )


@router.get("/stats/overview", response_model=RegistrationStatsResponse)
async def get_registration_stats(principal: Reviewer, service: Service) -> RegistrationStatsResponse:
    return await service.get_stats()


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def get_registration(
    registration_id: UUID, principal: Reviewer, service: Service
) -> RegistrationResponse:
    return RegistrationResponse.model_validate(await service.get(registration_id))


@router.patch("/{registration_id}/approve", response_model=ApprovalResponse)
async def approve_registration(
    request: Request,
    registration_id: UUID,
    principal: Reviewer,
    background_tasks: BackgroundTasks,
    service: Service,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> ApprovalResponse:
    """Approve a pending application and create the member account.

    The temporary password is only sent by email.
    """
    result = await service.approve(registration_id, principal, get_real_client_ip(request))
    background_tasks.add_task(
        email_service.send_approval_email,
        result.user.email,
        result.user.full_name,
        result.user.username,
        result.temporary_password,
    )
    return ApprovalResponse(
        registration=RegistrationResponse.model_validate(result.registration),
        user_id=result.user.id,
        username=result.user.username,
    )


@router.patch("/{registration_id}/reject", response_model=RegistrationResponse)
async def reject_registration(
    request: Request,
    registration_id: UUID,
    body: RejectRequest,
    principal: Reviewer,
    background_tasks: BackgroundTasks,
    service: Service,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> RegistrationResponse:
    registration = await service.reject(
        registration_id, principal, body.reason, get_real_client_ip(request)
    )
    background_tasks.add_task(
        email_service.send_rejection_email,
        registration.email,
        registration.full_name,
        body.reason,
    )
    return RegistrationResponse.model_validate(registration)


@router.patch("/{registration_id}/status", response_model=RegistrationResponse)
async def update_registration_status(
    registration_id: UUID,
    body: RegistrationStatusUpdate,
    principal: Reviewer,
    service: Service,
) -> RegistrationResponse:
    """Set a status directly, bypassing the approval workflow."""
    registration = await service.update_status(registration_id, body.status)
    logger.info("Registration %s status set to %s by %s", registration_id, body.status, principal.id)
    return RegistrationResponse.model_validate(registration)


@router.delete("/{registration_id}", response_model=MessageResponse)
async def delete_registration(
    request: Request,
    registration_id: UUID,
    principal: Reviewer,
    service: Service,
) -> MessageResponse:
    await service.delete(registration_id, principal, get_real_client_ip(request))
    return MessageResponse(message="Registration deleted successfully")
