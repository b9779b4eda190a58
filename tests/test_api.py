"""HTTP-level tests: authentication, authorization payloads and a few end-to-end flows."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt
from sqlalchemy.exc import OperationalError

from conftest import (
    TEST_PASSWORD,
    admin_principal,
    assign,
    auth_header,
    make_admin,
    make_role,
    make_user,
    user_principal,
)
from media_portal.config import get_settings
from media_portal.models.domain.notification import NotificationType
from media_portal.models.orm import NotificationORM
from media_portal.security.password import PasswordService
from media_portal.services.permission_service import PermissionService

SECRETARY_PERMISSIONS = ["view_calendar", "view_minutes", "upload_minutes", "edit_minutes"]


def _event_body(**overrides) -> dict:
    body = {
        "title": "Youth rally",
        "event_date": (datetime.now(UTC) + timedelta(days=2)).isoformat(),
        "event_time": "16:00",
        "event_type": "event",
    }
    body.update(overrides)
    return body


class TestAuthentication:
    async def test_missing_token(self, client) -> None:
        response = await client.get("/api/events")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "No token provided"}

    async def test_invalid_token(self, client) -> None:
        response = await client.get("/api/events", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid or expired token"}

    async def test_signed_token_with_unusable_claims(self, client) -> None:
        settings = get_settings()
        token = jwt.encode({"sub": "not-a-uuid"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)

        response = await client.get("/api/notifications", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error verifying token"}

    async def test_admin_login_and_me(self, client, session) -> None:
        await make_admin(session, "pastor")
        await session.commit()

        response = await client.post(
            "/api/auth/login", json={"username": "pastor", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        token = response.json()["access_token"]
        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["username"] == "pastor"

    async def test_admin_login_wrong_password(self, client, session) -> None:
        await make_admin(session, "pastor")
        await session.commit()

        response = await client.post(
            "/api/auth/login", json={"username": "pastor", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_user_login_returns_permissions(self, client, session) -> None:
        user = await make_user(
            session, "secretary", password_hash=PasswordService().hash_password(TEST_PASSWORD)
        )
        await assign(session, user, await make_role(session, "Secretary", SECRETARY_PERMISSIONS))
        await session.commit()

        response = await client.post(
            "/api/user/login", json={"email": "Secretary@example.org", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["permissions"] == sorted(SECRETARY_PERMISSIONS)

    async def test_deactivated_user_cannot_log_in(self, client, session) -> None:
        await make_user(
            session,
            "former",
            is_active=False,
            password_hash=PasswordService().hash_password(TEST_PASSWORD),
        )
        await session.commit()

        response = await client.post(
            "/api/user/login", json={"email": "former@example.org", "password": TEST_PASSWORD}
        )

        assert response.status_code == 403

    async def test_forgot_password_does_not_reveal_accounts(self, client) -> None:
        response = await client.post(
            "/api/user/forgot-password", json={"email": "nobody@example.org"}
        )

        assert response.status_code == 200
        assert "If an account with that email exists" in response.json()["message"]


class TestAuthorization:
    async def test_denial_lists_required_and_held_permissions(self, client, session) -> None:
        user = await make_user(session, "secretary")
        await assign(session, user, await make_role(session, "Secretary", SECRETARY_PERMISSIONS))
        await session.commit()

        response = await client.delete(
            f"/api/meeting-minutes/{uuid4()}", headers=auth_header(user_principal(user))
        )

        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "You do not have permission to perform this action"
        assert body["requiredPermissions"] == ["delete_minutes"]
        assert body["userPermissions"] == sorted(SECRETARY_PERMISSIONS)

    async def test_user_without_roles_denied(self, client, session) -> None:
        user = await make_user(session)
        await session.commit()

        response = await client.post(
            "/api/events", json=_event_body(), headers=auth_header(user_principal(user))
        )

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "message": "You do not have permission to perform this action",
        }

    async def test_permission_store_failure(
        self, client, session, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        user = await make_user(session)
        await session.commit()

        async def failing_check(self, user_id, required):
            raise OperationalError("SELECT roles", {}, Exception("connection refused"))

        monkeypatch.setattr(PermissionService, "check", failing_check)

        response = await client.post(
            "/api/events", json=_event_body(), headers=auth_header(user_principal(user))
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error checking permissions"}

    async def test_admin_bypasses_permission_checks(self, client, session) -> None:
        admin = await make_admin(session)
        await make_user(session, "member1")
        await make_user(session, "member2")
        await session.commit()

        response = await client.post(
            "/api/events", json=_event_body(), headers=auth_header(admin_principal(admin))
        )

        assert response.status_code == 201
        assert response.json()["notified"] == 2

    async def test_role_holder_may_create_events(self, client, session) -> None:
        user = await make_user(session, "coordinator")
        await assign(session, user, await make_role(session, "Coordinator", ["create_events"]))
        await session.commit()

        response = await client.post(
            "/api/events", json=_event_body(), headers=auth_header(user_principal(user))
        )

        assert response.status_code == 201
        assert response.json()["event"]["created_by"] == str(user.id)

    async def test_admin_only_route_rejects_users(self, client, session) -> None:
        user = await make_user(session)
        await session.commit()

        response = await client.get("/api/activity", headers=auth_header(user_principal(user)))

        assert response.status_code == 403
        assert response.json()["success"] is False

    async def test_users_may_only_read_their_own_roles(self, client, session) -> None:
        user = await make_user(session, "self")
        other = await make_user(session, "other")
        await session.commit()
        headers = auth_header(user_principal(user))

        own = await client.get(f"/api/roles/users/{user.id}/roles", headers=headers)
        foreign = await client.get(f"/api/roles/users/{other.id}/roles", headers=headers)

        assert own.status_code == 200
        assert foreign.status_code == 403
        assert foreign.json()["message"] == "You can only view your own roles"


class TestRoleAssignmentEndpoint:
    async def test_duplicate_assignment_returns_conflict(self, client, session) -> None:
        admin = await make_admin(session)
        user = await make_user(session)
        role = await make_role(session, "Secretary", SECRETARY_PERMISSIONS)
        await session.commit()
        headers = auth_header(admin_principal(admin))
        url = f"/api/roles/users/{user.id}/roles"

        first = await client.post(url, json={"role_id": str(role.id)}, headers=headers)
        second = await client.post(url, json={"role_id": str(role.id)}, headers=headers)

        assert first.status_code == 201
        assert first.json()["role"]["slug"] == "secretary"
        assert second.status_code == 409
        assert second.json() == {"success": False, "message": "Role already assigned to this user"}


class TestNotificationEndpoints:
    async def test_mark_read_twice_and_foreign(self, client, session) -> None:
        owner = await make_user(session, "owner")
        stranger = await make_user(session, "stranger")
        notification = NotificationORM(
            user_id=owner.id,
            type=NotificationType.GENERAL.value,
            title="Hi",
            message="Hello there",
        )
        session.add(notification)
        await session.commit()
        url = f"/api/notifications/{notification.id}/read"

        first = await client.put(url, headers=auth_header(user_principal(owner)))
        second = await client.put(url, headers=auth_header(user_principal(owner)))
        foreign = await client.put(url, headers=auth_header(user_principal(stranger)))

        assert first.status_code == second.status_code == 200
        assert second.json()["notification"]["is_read"] is True
        assert foreign.status_code == 200
        assert foreign.json()["notification"] is None

        count = await client.get(
            "/api/notifications/unread-count", headers=auth_header(user_principal(owner))
        )
        assert count.json()["count"] == 0

    async def test_admin_tokens_have_no_inbox(self, client, session) -> None:
        admin = await make_admin(session)
        await session.commit()

        response = await client.get("/api/notifications", headers=auth_header(admin_principal(admin)))

        assert response.status_code == 403


class TestPublicEndpoints:
    async def test_health(self, client) -> None:
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    async def test_request_id_is_echoed(self, client) -> None:
        response = await client.get("/api/health", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    async def test_submission_then_review(self, client, session) -> None:
        admin = await make_admin(session)
        await session.commit()
        form = {
            "full_name": "Emeka Obi",
            "gender": "male",
            "age_range": "18-25",
            "phone_number": "+2348033333333",
            "email": "emeka@example.org",
            "parish_location": "Enugu",
            "parish_name": "St. Mary",
            "is_member": "yes",
            "media_skills": ["photography"],
            "availability": "weekends",
            "commitment": "weekly",
            "emergency_contact_name": "Uche",
            "emergency_contact_relationship": "brother",
            "emergency_contact_phone": "+2348044444444",
        }

        submitted = await client.post("/api/submissions", json=form)
        assert submitted.status_code == 201
        registration_id = submitted.json()["id"]

        headers = auth_header(admin_principal(admin))
        approved = await client.patch(f"/api/submissions/{registration_id}/approve", headers=headers)
        assert approved.status_code == 200

        again = await client.patch(f"/api/submissions/{registration_id}/approve", headers=headers)
        assert again.status_code == 400
        assert again.json()["message"] == "Registration is already account_created"

    async def test_invalid_submission_rejected(self, client) -> None:
        response = await client.post("/api/submissions", json={"full_name": "Only a name"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert any(error["field"] == "email" for error in body["errors"])
