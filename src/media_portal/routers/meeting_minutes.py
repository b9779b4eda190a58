"""Meeting minutes router with file attachments."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from media_portal.dependencies import get_minutes_service
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.common import MessageResponse
from media_portal.models.dto.minutes import (
    MinutesListResponse,
    MinutesMutationResponse,
    MinutesResponse,
)
from media_portal.security.auth import CurrentPrincipal, require_permission
from media_portal.services.minutes_service import MinutesFields, MinutesService
from media_portal.utils.validation import sanitize_search

router = APIRouter()

Service = Annotated[MinutesService, Depends(get_minutes_service)]


@router.get("", response_model=MinutesListResponse)
async def list_minutes(
    principal: CurrentPrincipal,
    service: Service,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None, max_length=200),
) -> MinutesListResponse:
    """Published minutes, latest meeting first."""
    return await service.list_published(page, page_size, sanitize_search(search))


@router.get("/{minutes_id}", response_model=MinutesResponse)
async def get_minutes(
    minutes_id: UUID, principal: CurrentPrincipal, service: Service
) -> MinutesResponse:
    return MinutesResponse.model_validate(await service.get(minutes_id, principal))


@router.post("", response_model=MinutesMutationResponse, status_code=status.HTTP_201_CREATED)
async def upload_minutes(
    principal: Annotated[Principal, Depends(require_permission(Permission.UPLOAD_MINUTES))],
    service: Service,
    title: str = Form(..., min_length=1, max_length=255),
    meeting_date: datetime = Form(...),
    content: str = Form(..., min_length=1),
    summary: str | None = Form(default=None),
    attendees: list[UUID] | None = Form(default=None),
    is_published: bool = Form(default=True),
    attachments: list[UploadFile] = File(default=[]),
) -> MinutesMutationResponse:
    """Upload minutes with up to five attachments."""
    minutes, notified = await service.upload(
        MinutesFields(
            title=title,
            meeting_date=meeting_date,
            attendees=attendees,
            summary=summary,
            content=content,
            is_published=is_published,
        ),
        attachments,
        principal,
    )
    return MinutesMutationResponse(
        message="Meeting minutes uploaded successfully",
        minutes=MinutesResponse.model_validate(minutes),
        notified=notified,
    )


@router.put("/{minutes_id}", response_model=MinutesMutationResponse)
async def update_minutes(
    minutes_id: UUID,
    principal: Annotated[Principal, Depends(require_permission(Permission.EDIT_MINUTES))],
    service: Service,
    title: str | None = Form(default=None, max_length=255),
    meeting_date: datetime | None = Form(default=None),
    content: str | None = Form(default=None),
    summary: str | None = Form(default=None),
    attendees: list[UUID] | None = Form(default=None),
    is_published: bool | None = Form(default=None),
    attachments: list[UploadFile] = File(default=[]),
) -> MinutesMutationResponse:
    """Update fields; new files are appended to the existing attachments."""
    minutes = await service.update(
        minutes_id,
        MinutesFields(
            title=title,
            meeting_date=meeting_date,
            attendees=attendees,
            summary=summary,
            content=content,
            is_published=is_published,
        ),
        attachments,
    )
    return MinutesMutationResponse(
        message="Meeting minutes updated successfully",
        minutes=MinutesResponse.model_validate(minutes),
    )


@router.delete("/{minutes_id}", response_model=MessageResponse)
async def delete_minutes(
    minutes_id: UUID,
    principal: Annotated[Principal, Depends(require_permission(Permission.DELETE_MINUTES))],
    service: Service,
) -> MessageResponse:
    await service.delete(minutes_id)
    return MessageResponse(message="Meeting minutes deleted successfully")


@router.get("/{minutes_id}/download/{file_index}")
async def download_attachment(
    minutes_id: UUID,
    file_index: int,
    principal: CurrentPrincipal,
    service: Service,
) -> FileResponse:
    """Download one attachment by its position."""
    file_path, attachment = await service.get_attachment(minutes_id, file_index, principal)
    return FileResponse(
        path=file_path,
        filename=attachment["original_name"],
        media_type=attachment.get("mimetype", "application/octet-stream"),
    )
