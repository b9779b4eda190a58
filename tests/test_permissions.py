"""Permission resolution tests."""

import pytest

from conftest import assign, make_role, make_user
from media_portal.exceptions import PermissionDeniedError
from media_portal.services.permission_service import PermissionService

SECRETARY_PERMISSIONS = ["view_calendar", "view_minutes", "upload_minutes", "edit_minutes"]


class TestPermissionResolution:
    """Effective permissions are the union over active roles."""

    async def test_union_of_active_roles(self, session) -> None:
        user = await make_user(session)
        await assign(session, user, await make_role(session, "Secretary", SECRETARY_PERMISSIONS))
        await assign(session, user, await make_role(session, "Photographer", ["create_content"]))

        granted = await PermissionService(session).resolve(user.id)

        assert granted == set(SECRETARY_PERMISSIONS) | {"create_content"}

    async def test_no_assignment_resolves_to_none(self, session) -> None:
        user = await make_user(session)

        assert await PermissionService(session).resolve(user.id) is None

    async def test_inactive_role_grants_nothing(self, session) -> None:
        user = await make_user(session)
        await assign(session, user, await make_role(session, "Retired", ["delete_events"], is_active=False))

        granted = await PermissionService(session).resolve(user.id)

        assert granted == set()


class TestPermissionCheck:
    """Authorization succeeds when at least one required permission is held."""

    async def test_secretary_may_upload_minutes(self, session) -> None:
        user = await make_user(session)
        await assign(session, user, await make_role(session, "Secretary", SECRETARY_PERMISSIONS))

        granted = await PermissionService(session).check(user.id, ["upload_minutes"])

        assert "upload_minutes" in granted

    async def test_secretary_may_not_delete_minutes(self, session) -> None:
        user = await make_user(session)
        await assign(session, user, await make_role(session, "Secretary", SECRETARY_PERMISSIONS))

        with pytest.raises(PermissionDeniedError) as exc_info:
            await PermissionService(session).check(user.id, ["delete_minutes"])

        assert exc_info.value.status_code == 403
        assert exc_info.value.required == ["delete_minutes"]
        assert exc_info.value.granted == sorted(SECRETARY_PERMISSIONS)

    async def test_any_one_of_several_suffices(self, session) -> None:
        user = await make_user(session)
        await assign(session, user, await make_role(session, "Editor", ["edit_events"]))

        granted = await PermissionService(session).check(user.id, ["create_events", "edit_events"])

        assert granted == {"edit_events"}

    async def test_no_assignments_denied_without_grant(self, session) -> None:
        user = await make_user(session)

        with pytest.raises(PermissionDeniedError) as exc_info:
            await PermissionService(session).check(user.id, ["view_calendar"])

        assert exc_info.value.granted is None
        assert exc_info.value.required == ["view_calendar"]

    async def test_inactive_role_denied(self, session) -> None:
        user = await make_user(session)
        await assign(session, user, await make_role(session, "Retired", ["view_calendar"], is_active=False))

        with pytest.raises(PermissionDeniedError):
            await PermissionService(session).check(user.id, ["view_calendar"])
