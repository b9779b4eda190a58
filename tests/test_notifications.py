"""Notification dispatch, read state and retention tests."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from conftest import make_user
from media_portal.exceptions import NotificationNotFoundError
from media_portal.models.domain.notification import NotificationType
from media_portal.models.orm import EventORM, NotificationORM
from media_portal.services.notification_service import NotificationService
from media_portal.tasks.scheduler import cleanup_notifications_job


async def _notification(session, user, is_read=False, age_days=0) -> NotificationORM:
    notification = NotificationORM(
        user_id=user.id,
        type=NotificationType.GENERAL.value,
        title="Hello",
        message="Welcome",
        is_read=is_read,
        created_at=datetime.now(UTC) - timedelta(days=age_days),
    )
    session.add(notification)
    await session.flush()
    return notification


class TestReadState:
    async def test_mark_as_read_is_idempotent(self, session) -> None:
        user = await make_user(session)
        notification = await _notification(session, user)
        service = NotificationService(session)

        first = await service.mark_as_read(notification.id, user.id)
        second = await service.mark_as_read(notification.id, user.id)

        assert first.is_read is True
        assert second.is_read is True
        assert await service.unread_count(user.id) == 0

    async def test_mark_as_read_ignores_other_users_notification(self, session) -> None:
        owner = await make_user(session, "owner")
        stranger = await make_user(session, "stranger")
        notification = await _notification(session, owner)
        service = NotificationService(session)

        assert await service.mark_as_read(notification.id, stranger.id) is None
        assert await service.unread_count(owner.id) == 1

    async def test_mark_as_read_unknown_id_is_noop(self, session) -> None:
        user = await make_user(session)

        assert await NotificationService(session).mark_as_read(uuid4(), user.id) is None

    async def test_mark_all_as_read_counts_only_unread(self, session) -> None:
        user = await make_user(session)
        await _notification(session, user)
        await _notification(session, user)
        await _notification(session, user, is_read=True)
        service = NotificationService(session)

        assert await service.mark_all_as_read(user.id) == 2
        assert await service.unread_count(user.id) == 0

    async def test_delete_foreign_notification_not_found(self, session) -> None:
        owner = await make_user(session, "owner")
        stranger = await make_user(session, "stranger")
        notification = await _notification(session, owner)

        with pytest.raises(NotificationNotFoundError):
            await NotificationService(session).delete(notification.id, stranger.id)


class TestFanOut:
    async def test_event_created_reaches_every_recipient(self, session) -> None:
        users = [await make_user(session, f"member{i}") for i in range(3)]
        event = EventORM(
            title="Choir rehearsal",
            event_date=datetime.now(UTC) + timedelta(days=3),
            event_time="18:00",
            created_by=uuid4(),
        )
        session.add(event)
        await session.flush()

        count = await NotificationService(session).notify_event_created(event, [u.id for u in users])

        assert count == 3
        rows = (await session.execute(select(NotificationORM))).scalars().all()
        assert {n.user_id for n in rows} == {u.id for u in users}
        assert {n.type for n in rows} == {"event_created"}
        assert all(n.is_read is False for n in rows)
        assert all(n.extra == {"event_id": str(event.id)} for n in rows)

    async def test_duplicate_recipients_collapsed(self, session) -> None:
        user = await make_user(session)
        event = EventORM(
            title="Training",
            event_date=datetime.now(UTC),
            event_time="10:00",
            created_by=uuid4(),
        )
        session.add(event)
        await session.flush()

        count = await NotificationService(session).notify_event_updated(event, [user.id, user.id])

        assert count == 1

    async def test_no_recipients_inserts_nothing(self, session) -> None:
        event = EventORM(
            title="Empty",
            event_date=datetime.now(UTC),
            event_time="10:00",
            created_by=uuid4(),
        )
        session.add(event)
        await session.flush()

        assert await NotificationService(session).notify_event_created(event, []) == 0


class TestCleanup:
    """Only read notifications past the retention window are removed."""

    async def test_threshold_keeps_unread_and_recent(self, session) -> None:
        user = await make_user(session)
        old_read = await _notification(session, user, is_read=True, age_days=31)
        old_unread = await _notification(session, user, is_read=False, age_days=31)
        recent_read = await _notification(session, user, is_read=True, age_days=29)

        deleted = await NotificationService(session).cleanup_read(days=30)

        assert deleted == 1
        remaining = set((await session.execute(select(NotificationORM.id))).scalars().all())
        assert old_read.id not in remaining
        assert {old_unread.id, recent_read.id} <= remaining

    async def test_scheduled_job_commits_deletion(self, database, session) -> None:
        user = await make_user(session)
        await _notification(session, user, is_read=True, age_days=60)
        await session.commit()

        deleted = await cleanup_notifications_job(database, 30)

        assert deleted == 1
        count = (await session.execute(select(func.count(NotificationORM.id)))).scalar_one()
        assert count == 0
