"""Calendar event tests."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select

from conftest import admin_principal, make_admin, make_user, user_principal
from media_portal.exceptions import EventNotFoundError, ForbiddenError
from media_portal.models.domain.registration import EventType
from media_portal.models.dto.event import EventCreate, EventUpdate
from media_portal.models.orm import AdminActivityORM, NotificationORM
from media_portal.services.event_service import EventService


def _event(**overrides) -> EventCreate:
    values = {
        "title": "Easter Vigil coverage",
        "event_date": datetime.now(UTC) + timedelta(days=7),
        "event_time": "19:00",
        "event_type": EventType.SERVICE,
    }
    values.update(overrides)
    return EventCreate(**values)


class TestEventCreation:
    async def test_public_event_notifies_every_active_user(self, session) -> None:
        admin = await make_admin(session)
        for i in range(3):
            await make_user(session, f"member{i}")
        await make_user(session, "inactive", is_active=False)

        event, notified = await EventService(session).create(_event(), admin_principal(admin))

        assert notified == 3
        types = (await session.execute(select(NotificationORM.type))).scalars().all()
        assert types == ["event_created"] * 3
        activity = (await session.execute(select(AdminActivityORM))).scalar_one()
        assert activity.action == "event_created"
        assert activity.extra["event_type"] == "service"
        assert activity.extra["is_public"] is True

    async def test_private_event_notifies_existing_attendees_only(self, session) -> None:
        admin = await make_admin(session)
        attendee = await make_user(session, "attendee")
        await make_user(session, "bystander")

        event, notified = await EventService(session).create(
            _event(is_public=False, attendees=[attendee.id, attendee.id, uuid4()]),
            admin_principal(admin),
        )

        assert notified == 1
        assert len(event.attendees) == 2
        recipient = (await session.execute(select(NotificationORM.user_id))).scalar_one()
        assert recipient == attendee.id

    async def test_update_renotifies_and_keeps_omitted_fields(self, session) -> None:
        admin = await make_admin(session)
        await make_user(session)
        service = EventService(session)
        event, _ = await service.create(_event(location="Main church"), admin_principal(admin))

        updated, notified = await service.update(
            event.id, EventUpdate(title="Easter Vigil livestream", event_time=None), admin_principal(admin)
        )

        assert updated.title == "Easter Vigil livestream"
        assert updated.location == "Main church"
        assert updated.event_time == "19:00"
        assert notified == 1

    async def test_delete_unknown_event(self, session) -> None:
        admin = await make_admin(session)

        with pytest.raises(EventNotFoundError):
            await EventService(session).delete(uuid4(), admin_principal(admin))


class TestEventVisibility:
    async def test_private_event_hidden_from_non_attendee(self, session) -> None:
        admin = await make_admin(session)
        attendee = await make_user(session, "attendee")
        outsider = await make_user(session, "outsider")
        service = EventService(session)
        event, _ = await service.create(
            _event(is_public=False, attendees=[attendee.id]), admin_principal(admin)
        )

        assert (await service.get(event.id, user_principal(attendee))).id == event.id
        with pytest.raises(ForbiddenError):
            await service.get(event.id, user_principal(outsider))
        assert await service.list_visible(user_principal(outsider)) == []
        assert len(await service.list_visible(admin_principal(admin))) == 1

    async def test_upcoming_excludes_past_events(self, session) -> None:
        admin = await make_admin(session)
        member = await make_user(session)
        service = EventService(session)
        await service.create(
            _event(title="Last week", event_date=datetime.now(UTC) - timedelta(days=7)),
            admin_principal(admin),
        )
        await service.create(_event(title="Next week"), admin_principal(admin))

        upcoming = await service.upcoming(user_principal(member))

        assert [e.title for e in upcoming] == ["Next week"]

    async def test_filter_by_type(self, session) -> None:
        admin = await make_admin(session)
        service = EventService(session)
        await service.create(_event(event_type=EventType.TRAINING), admin_principal(admin))
        await service.create(_event(event_type=EventType.MEETING), admin_principal(admin))

        events = await service.list_visible(admin_principal(admin), event_type="training")

        assert [e.event_type for e in events] == ["training"]
