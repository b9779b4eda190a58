"""Notification inbox router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from media_portal.dependencies import get_notification_service
from media_portal.models.dto.common import MessageResponse
from media_portal.models.dto.notification import (
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from media_portal.security.auth import UserPrincipal
from media_portal.services.notification_service import NotificationService

router = APIRouter()

Service = Annotated[NotificationService, Depends(get_notification_service)]


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    principal: UserPrincipal,
    service: Service,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> NotificationListResponse:
    """The caller's notifications, newest first."""
    return await service.list_for_user(principal.id, page, page_size)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(principal: UserPrincipal, service: Service) -> UnreadCountResponse:
    return UnreadCountResponse(count=await service.unread_count(principal.id))


@router.put("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_read(principal: UserPrincipal, service: Service) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await service.mark_all_as_read(principal.id))


@router.put("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_read(
    notification_id: UUID, principal: UserPrincipal, service: Service
) -> MarkReadResponse:
    """Mark one notification read.

    Unknown ids and other users' notifications are a silent no-op.
    """
    notification = await service.mark_as_read(notification_id, principal.id)
    if notification is None:
        return MarkReadResponse()
    return MarkReadResponse(notification=NotificationResponse.model_validate(notification))


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: UUID, principal: UserPrincipal, service: Service
) -> MessageResponse:
    await service.delete(notification_id, principal.id)
    return MessageResponse(message="Notification deleted")
