"""Notification dispatch and read-state management."""

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.exceptions import NotificationNotFoundError
from media_portal.models.domain.notification import NotificationType
from media_portal.models.dto.notification import NotificationListResponse, NotificationResponse
from media_portal.models.orm.base import utc_now
from media_portal.models.orm.event import EventORM
from media_portal.models.orm.meeting_minutes import MeetingMinutesORM
from media_portal.models.orm.notification import NotificationORM
from media_portal.models.orm.role import RoleORM
from media_portal.models.orm.user import UserORM
from media_portal.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


class NotificationService:
    """Creates per-user notifications for domain events.

    Creation errors propagate; the caller decides whether a failed
    notification should abort its own operation.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = NotificationRepository(session)

    async def create(
        self,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        link: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> NotificationORM:
        """Persist one unread notification."""
        return await self.repo.create(
            user_id=user_id,
            type=type.value,
            title=title,
            message=message,
            link=link,
            extra=metadata,
            is_read=False,
        )

    async def _create_many(
        self,
        user_ids: list[UUID],
        type: NotificationType,
        title: str,
        message: str,
        link: str | None,
        metadata: dict[str, Any] | None,
    ) -> int:
        """One batched insert for all recipients; duplicates are collapsed."""
        recipients = list(dict.fromkeys(user_ids))
        now = utc_now()
        rows = [
            {
                "user_id": user_id,
                "type": type.value,
                "title": title,
                "message": message,
                "link": link,
                "extra": metadata,
                "is_read": False,
                "created_at": now,
            }
            for user_id in recipients
        ]
        count = await self.repo.create_many(rows)
        logger.info("Created %d %s notifications", count, type.value)
        return count

    async def notify_application_approved(
        self, user: UserORM, registration_id: UUID
    ) -> NotificationORM:
        """Welcome a newly created member. The temporary password is only emailed."""
        return await self.create(
            user.id,
            NotificationType.APPLICATION_APPROVED,
            "Welcome to the Media Team!",
            "Your application has been approved! You can now login with your email "
            f"({user.email}) and the temporary password sent to your email.",
            link="/profile",
            metadata={"registration_id": str(registration_id)},
        )

    async def notify_application_rejected(
        self, user_id: UUID, reason: str | None = None
    ) -> NotificationORM:
        message = "Unfortunately, your application was not approved."
        if reason:
            message = f"{message} Reason: {reason}"
        return await self.create(
            user_id, NotificationType.APPLICATION_REJECTED, "Application Update", message
        )

    async def notify_role_assigned(self, user_id: UUID, role: RoleORM) -> NotificationORM:
        return await self.create(
            user_id,
            NotificationType.ROLE_ASSIGNED,
            "New Role Assigned",
            f"You have been assigned the role of {role.name}. "
            "Check your profile to see your new responsibilities.",
            link="/profile",
            metadata={"role_id": str(role.id), "role_name": role.name},
        )

    async def notify_role_removed(self, user_id: UUID, role: RoleORM) -> NotificationORM:
        return await self.create(
            user_id,
            NotificationType.ROLE_REMOVED,
            "Role Removed",
            f"The role of {role.name} has been removed from your account.",
            link="/profile",
            metadata={"role_id": str(role.id), "role_name": role.name},
        )

    async def notify_event_created(self, event: EventORM, user_ids: list[UUID]) -> int:
        """Fan out a new-event notice.

        Returns:
            Number of notifications inserted
        """
        return await self._create_many(
            user_ids,
            NotificationType.EVENT_CREATED,
            "New Event Added",
            f"{event.title} has been scheduled for {event.event_date:%d %b %Y}",
            link="/calendar",
            metadata={"event_id": str(event.id)},
        )

    async def notify_event_updated(self, event: EventORM, user_ids: list[UUID]) -> int:
        return await self._create_many(
            user_ids,
            NotificationType.EVENT_UPDATED,
            "Event Updated",
            f"{event.title} has been updated. Check the calendar for details.",
            link="/calendar",
            metadata={"event_id": str(event.id)},
        )

    async def notify_minutes_uploaded(
        self, minutes: MeetingMinutesORM, user_ids: list[UUID]
    ) -> int:
        return await self._create_many(
            user_ids,
            NotificationType.MEETING_UPLOADED,
            "New Meeting Minutes Available",
            f'Minutes for "{minutes.title}" have been uploaded.',
            link=f"/meeting-minutes/{minutes.id}",
            metadata={"minutes_id": str(minutes.id)},
        )

    async def list_for_user(
        self, user_id: UUID, page: int = 1, page_size: int = 20
    ) -> NotificationListResponse:
        """Newest-first page of a user's notifications."""
        items, total = await self.repo.get_for_user(
            user_id, offset=(page - 1) * page_size, limit=page_size
        )
        unread = await self.repo.count_unread(user_id)
        return NotificationListResponse(
            items=[NotificationResponse.model_validate(n) for n in items],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size,
            unread_count=unread,
        )

    async def mark_as_read(self, notification_id: UUID, user_id: UUID) -> NotificationORM | None:
        """Idempotent; a missing or foreign notification is left alone."""
        return await self.repo.mark_as_read(notification_id, user_id)

    async def mark_all_as_read(self, user_id: UUID) -> int:
        return await self.repo.mark_all_as_read(user_id)

    async def unread_count(self, user_id: UUID) -> int:
        return await self.repo.count_unread(user_id)

    async def delete(self, notification_id: UUID, user_id: UUID) -> None:
        """Delete one of the caller's notifications.

        Raises:
            NotificationNotFoundError: Absent or owned by another user
        """
        if not await self.repo.delete_for_user(notification_id, user_id):
            raise NotificationNotFoundError()

    async def cleanup_read(self, days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Delete read notifications created more than ``days`` days ago.

        Unread notifications are kept regardless of age.

        Returns:
            Number of notifications deleted
        """
        cutoff = utc_now() - timedelta(days=days)
        deleted = await self.repo.delete_read_before(cutoff)
        logger.info("Deleted %d read notifications older than %d days", deleted, days)
        return deleted
