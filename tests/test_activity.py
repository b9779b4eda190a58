"""Admin activity log tests."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from conftest import make_admin, make_registration, make_user
from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.services.activity_service import ActivityService


class TestLogActivity:
    async def test_successful_write(self, session) -> None:
        admin = await make_admin(session)
        service = ActivityService(session)

        result = await service.log_activity(
            admin.id,
            ActivityAction.ADMIN_LOGIN,
            ActivityTarget.system(),
            "Admin logged in",
            ip_address="10.0.0.1",
        )

        assert result.logged is True
        assert result.activity.target_type == "system"
        assert result.activity.target_id is None
        assert await service.repo.count() == 1

    async def test_failure_is_reported_not_raised(self, session, monkeypatch: pytest.MonkeyPatch) -> None:
        """A failed audit write leaves the caller's transaction usable."""
        admin = await make_admin(session)
        service = ActivityService(session)

        async def failing_log(**kwargs):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(service.repo, "log", failing_log)

        result = await service.log_activity(
            admin.id, ActivityAction.USER_CREATED, ActivityTarget.system(), "Created"
        )

        assert result.logged is False
        assert "disk full" in result.error
        user = await make_user(session)
        assert user.id is not None

    async def test_failure_with_broken_session(self) -> None:
        session = MagicMock()
        session.begin_nested.return_value.__aenter__ = AsyncMock(
            side_effect=OperationalError("SAVEPOINT", {}, Exception("database is locked"))
        )
        session.begin_nested.return_value.__aexit__ = AsyncMock(return_value=False)

        result = await ActivityService(session).log_activity(
            uuid4(), ActivityAction.EVENT_DELETED, ActivityTarget.event(uuid4()), "Deleted"
        )

        assert result.logged is False
        assert result.activity is None

    async def test_unwrapped_driver_error_is_reported(self, session, monkeypatch: pytest.MonkeyPatch) -> None:
        admin = await make_admin(session)
        service = ActivityService(session)

        async def failing_log(**kwargs):
            raise ConnectionResetError("connection reset by peer")

        monkeypatch.setattr(service.repo, "log", failing_log)

        result = await service.log_activity(
            admin.id, ActivityAction.USER_STATUS_CHANGED, ActivityTarget.system(), "Deactivated user"
        )

        assert result.logged is False
        assert "connection reset" in result.error


class TestActivityQueries:
    async def test_recent_resolves_target_labels(self, session) -> None:
        admin = await make_admin(session)
        registration = await make_registration(session)
        service = ActivityService(session)
        await service.log_activity(
            admin.id,
            ActivityAction.APPLICATION_REJECTED,
            ActivityTarget.registration(registration.id),
            "Rejected",
        )
        await service.log_activity(
            admin.id,
            ActivityAction.EVENT_DELETED,
            ActivityTarget.event(uuid4()),
            "Deleted a long gone event",
        )

        page = await service.get_recent()

        assert page.total == 2
        by_action = {item.action: item for item in page.items}
        assert by_action["application_rejected"].target_label == "Ada Applicant"
        assert by_action["application_rejected"].admin_username == "admin"
        assert by_action["event_deleted"].target_label is None

    async def test_stats_group_by_action_and_admin(self, session) -> None:
        admin = await make_admin(session)
        service = ActivityService(session)
        for _ in range(2):
            await service.log_activity(
                admin.id, ActivityAction.ADMIN_LOGIN, ActivityTarget.system(), "Login"
            )
        await service.log_activity(
            admin.id, ActivityAction.USER_CREATED, ActivityTarget.system(), "Created"
        )

        stats = await service.get_stats()

        assert stats.total == 3
        assert stats.recent_count == 3
        assert stats.by_action[0].action == "admin_login"
        assert stats.by_action[0].count == 2
        assert stats.by_admin[0].admin_name == "admin"
        assert stats.by_admin[0].count == 3
