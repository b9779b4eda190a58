"""Team calendar router."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from media_portal.dependencies import get_event_service
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal
from media_portal.models.domain.registration import EventType
from media_portal.models.dto.common import MessageResponse
from media_portal.models.dto.event import (
    EventCreate,
    EventListResponse,
    EventMutationResponse,
    EventResponse,
    EventUpdate,
)
from media_portal.security.auth import CurrentPrincipal, require_permission
from media_portal.security.rate_limit import get_real_client_ip
from media_portal.services.event_service import EventService

router = APIRouter()

Service = Annotated[EventService, Depends(get_event_service)]


@router.get("", response_model=EventListResponse)
async def list_events(
    principal: CurrentPrincipal,
    service: Service,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    event_type: EventType | None = None,
) -> EventListResponse:
    """Events visible to the caller: public ones and those they attend."""
    events = await service.list_visible(
        principal, start_date, end_date, event_type.value if event_type else None
    )
    return EventListResponse(items=[EventResponse.model_validate(e) for e in events], total=len(events))


@router.get("/upcoming", response_model=EventListResponse)
async def list_upcoming_events(
    principal: CurrentPrincipal,
    service: Service,
    limit: int = Query(default=5, ge=1, le=50),
) -> EventListResponse:
    events = await service.upcoming(principal, limit)
    return EventListResponse(items=[EventResponse.model_validate(e) for e in events], total=len(events))


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: UUID, principal: CurrentPrincipal, service: Service) -> EventResponse:
    return EventResponse.model_validate(await service.get(event_id, principal))


@router.post("", response_model=EventMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    body: EventCreate,
    principal: Annotated[Principal, Depends(require_permission(Permission.CREATE_EVENTS))],
    service: Service,
) -> EventMutationResponse:
    """Create an event and notify its audience."""
    event, notified = await service.create(body, principal, get_real_client_ip(request))
    return EventMutationResponse(
        message="Event created successfully",
        event=EventResponse.model_validate(event),
        notified=notified,
    )


@router.put("/{event_id}", response_model=EventMutationResponse)
async def update_event(
    request: Request,
    event_id: UUID,
    body: EventUpdate,
    principal: Annotated[Principal, Depends(require_permission(Permission.EDIT_EVENTS))],
    service: Service,
) -> EventMutationResponse:
    event, notified = await service.update(event_id, body, principal, get_real_client_ip(request))
    return EventMutationResponse(
        message="Event updated successfully",
        event=EventResponse.model_validate(event),
        notified=notified,
    )


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    request: Request,
    event_id: UUID,
    principal: Annotated[Principal, Depends(require_permission(Permission.DELETE_EVENTS))],
    service: Service,
) -> MessageResponse:
    await service.delete(event_id, principal, get_real_client_ip(request))
    return MessageResponse(message="Event deleted successfully")
