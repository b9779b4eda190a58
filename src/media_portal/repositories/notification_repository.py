"""Notification repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update

from media_portal.models.orm.notification import NotificationORM
from media_portal.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[NotificationORM]):
    """Repository for per-user notifications."""

    model = NotificationORM

    async def create_many(self, rows: list[dict[str, Any]]) -> int:
        """Insert many notifications in a single batched statement.

        Args:
            rows: Column values per notification; all rows share the same keys

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0
        await self.session.execute(insert(NotificationORM), rows)
        return len(rows)

    async def get_for_user(
        self,
        user_id: UUID,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[NotificationORM], int]:
        """Notifications of a user, newest first."""
        query = (
            select(NotificationORM)
            .where(NotificationORM.user_id == user_id)
            .order_by(NotificationORM.created_at.desc())
        )
        return await self._paginate(query, offset, limit)

    async def mark_as_read(self, notification_id: UUID, user_id: UUID) -> NotificationORM | None:
        """Set ``is_read`` on a notification owned by ``user_id``.

        Returns:
            The notification, or None when absent or owned by someone else
        """
        await self.session.execute(
            update(NotificationORM)
            .where(
                NotificationORM.id == notification_id,
                NotificationORM.user_id == user_id,
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(
            select(NotificationORM).where(
                NotificationORM.id == notification_id,
                NotificationORM.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def mark_all_as_read(self, user_id: UUID) -> int:
        """Flip every unread notification of a user.

        Returns:
            Number of notifications updated
        """
        result = await self.session.execute(
            update(NotificationORM)
            .where(
                NotificationORM.user_id == user_id,
                NotificationORM.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def count_unread(self, user_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(NotificationORM)
            .where(
                NotificationORM.user_id == user_id,
                NotificationORM.is_read.is_(False),
            )
        )
        return result.scalar_one()

    async def delete_for_user(self, notification_id: UUID, user_id: UUID) -> bool:
        """Delete a notification owned by ``user_id``.

        Returns:
            True if deleted
        """
        result = await self.session.execute(
            delete(NotificationORM).where(
                NotificationORM.id == notification_id,
                NotificationORM.user_id == user_id,
            )
        )
        return result.rowcount > 0

    async def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created strictly before ``cutoff``.

        Returns:
            Number of notifications deleted
        """
        result = await self.session.execute(
            delete(NotificationORM).where(
                NotificationORM.is_read.is_(True),
                NotificationORM.created_at < cutoff,
            )
        )
        return result.rowcount
