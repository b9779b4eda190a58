"""Calendar events."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.exceptions import EventNotFoundError, ForbiddenError
from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.event import EventCreate, EventUpdate
from media_portal.models.orm.base import utc_now
from media_portal.models.orm.event import EventORM
from media_portal.repositories.event_repository import EventRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.services.activity_service import ActivityService
from media_portal.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def can_view(event: EventORM, principal: Principal) -> bool:
    """Public events are visible to everyone, private ones to attendees and admins."""
    if event.is_public or principal.is_admin or event.created_by == principal.id:
        return True
    return principal.id in event.attendee_ids


class EventService:
    """Event CRUD with notification fan-out and activity logging."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.event_repo = EventRepository(session)
        self.user_repo = UserRepository(session)
        self.notification_service = NotificationService(session)
        self.activity_service = ActivityService(session)

    async def list_visible(
        self,
        principal: Principal,
        start: datetime | None = None,
        end: datetime | None = None,
        event_type: str | None = None,
    ) -> list[EventORM]:
        """Events the caller may see, soonest first."""
        events = await self.event_repo.get_in_range(start, end, event_type)
        return [e for e in events if can_view(e, principal)]

    async def upcoming(self, principal: Principal, limit: int = 5) -> list[EventORM]:
        events = await self.event_repo.get_in_range(start=utc_now())
        return [e for e in events if can_view(e, principal)][:limit]

    async def get(self, event_id: UUID, principal: Principal) -> EventORM:
        """Get an event the caller may see.

        Raises:
            EventNotFoundError: Unknown event
            ForbiddenError: Private event the caller does not attend
        """
        event = await self.event_repo.get(event_id)
        if event is None:
            raise EventNotFoundError()
        if not can_view(event, principal):
            raise ForbiddenError("You do not have access to this event")
        return event

    async def _recipients(self, event: EventORM) -> list[UUID]:
        """All active users for public events, existing attendees otherwise."""
        if event.is_public:
            return await self.user_repo.get_active_ids()
        return await self.user_repo.get_existing_ids(event.attendee_ids)

    async def create(
        self,
        data: EventCreate,
        actor: Principal,
        ip_address: str | None = None,
    ) -> tuple[EventORM, int]:
        """Create an event and notify its audience.

        Returns:
            (event, number of notifications created)
        """
        event = await self.event_repo.create(
            title=data.title,
            description=data.description,
            event_date=data.event_date,
            event_time=data.event_time,
            location=data.location,
            event_type=data.event_type.value,
            created_by=actor.id,
            attendees=[str(a) for a in dict.fromkeys(data.attendees)],
            is_public=data.is_public,
        )

        notified = await self.notification_service.notify_event_created(
            event, await self._recipients(event)
        )
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.EVENT_CREATED,
            ActivityTarget.event(event.id),
            f"Created event: {event.title}",
            metadata={
                "event_type": event.event_type,
                "event_date": event.event_date.isoformat(),
                "is_public": event.is_public,
            },
            ip_address=ip_address,
        )
        return event, notified

    async def update(
        self,
        event_id: UUID,
        data: EventUpdate,
        actor: Principal,
        ip_address: str | None = None,
    ) -> tuple[EventORM, int]:
        """Apply the given fields and re-notify the audience.

        Raises:
            EventNotFoundError: Unknown event
        """
        event = await self.event_repo.get(event_id)
        if event is None:
            raise EventNotFoundError()

        changes = data.model_dump(exclude_unset=True)
        for key in ("title", "event_date", "event_time", "event_type", "is_public"):
            if changes.get(key) is None:
                changes.pop(key, None)
        if "event_type" in changes:
            changes["event_type"] = data.event_type.value
        if "attendees" in changes:
            changes["attendees"] = [str(a) for a in dict.fromkeys(data.attendees or [])]

        event = await self.event_repo.update(event_id, **changes)

        notified = await self.notification_service.notify_event_updated(
            event, await self._recipients(event)
        )
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.EVENT_UPDATED,
            ActivityTarget.event(event.id),
            f"Updated event: {event.title}",
            metadata={"event_type": event.event_type, "event_date": event.event_date.isoformat()},
            ip_address=ip_address,
        )
        return event, notified

    async def delete(
        self,
        event_id: UUID,
        actor: Principal,
        ip_address: str | None = None,
    ) -> None:
        """Raises EventNotFoundError for unknown ids."""
        event = await self.event_repo.get(event_id)
        if event is None:
            raise EventNotFoundError()
        title, event_type = event.title, event.event_type

        await self.event_repo.delete(event_id)
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.EVENT_DELETED,
            ActivityTarget.event(event_id),
            f"Deleted event: {title}",
            metadata={"event_type": event_type},
            ip_address=ip_address,
        )
