"""Membership application workflow tests."""

import pytest
from sqlalchemy import select

from conftest import admin_principal, make_admin, make_registration, make_user
from media_portal.exceptions import (
    InvalidStateError,
    RegistrationNotFoundError,
    UserAlreadyExistsError,
)
from media_portal.models.domain.registration import Gender, MediaSkill, RegistrationStatus
from media_portal.models.dto.registration import RegistrationCreate
from media_portal.models.orm import AdminActivityORM, NotificationORM, RegistrationORM
from media_portal.security.password import get_password_service
from media_portal.services.registration_service import RegistrationService


def _form(**overrides) -> RegistrationCreate:
    values = {
        "full_name": "  Chidi Okeke ",
        "gender": Gender.MALE,
        "age_range": "26-35",
        "phone_number": "+2348011111111",
        "email": "Chidi@Example.org",
        "parish_location": "Abuja",
        "parish_name": "Holy Family",
        "is_member": "yes",
        "media_skills": [MediaSkill.VIDEOGRAPHY],
        "availability": "sundays",
        "commitment": "weekly",
        "emergency_contact_name": "Ngozi",
        "emergency_contact_relationship": "spouse",
        "emergency_contact_phone": "+2348022222222",
    }
    values.update(overrides)
    return RegistrationCreate(**values)


class TestSubmission:
    async def test_submit_stores_pending(self, session) -> None:
        registration = await RegistrationService(session).submit(_form())

        assert registration.status == "pending"
        assert registration.email == "chidi@example.org"
        assert registration.full_name == "Chidi Okeke"
        assert registration.media_skills == ["videography"]

    def test_at_least_one_skill_required(self) -> None:
        with pytest.raises(ValueError):
            _form(media_skills=[])


class TestApproval:
    async def test_approve_creates_member_account(self, session) -> None:
        admin = await make_admin(session)
        registration = await make_registration(session, email="ada@example.org")

        result = await RegistrationService(session).approve(
            registration.id, admin_principal(admin), ip_address="127.0.0.1"
        )

        assert result.registration.status == RegistrationStatus.ACCOUNT_CREATED.value
        assert result.registration.user_id == result.user.id
        assert result.registration.approved_by == admin.id
        assert result.user.username == "ada"
        assert result.user.registration_id == registration.id
        assert len(result.temporary_password) == 8
        assert get_password_service().verify_password(
            result.temporary_password, result.user.password_hash
        )

        notification = (await session.execute(select(NotificationORM))).scalar_one()
        assert notification.type == "application_approved"
        assert notification.user_id == result.user.id
        assert result.temporary_password not in notification.message

        activity = (await session.execute(select(AdminActivityORM))).scalar_one()
        assert activity.action == "application_approved"
        assert activity.ip_address == "127.0.0.1"

    async def test_username_collision_gets_suffix(self, session) -> None:
        admin = await make_admin(session)
        await make_user(session, "ada")
        registration = await make_registration(session, email="ada@elsewhere.org")

        result = await RegistrationService(session).approve(registration.id, admin_principal(admin))

        assert result.user.username == "ada2"

    @pytest.mark.parametrize("status", ["approved", "rejected", "account_created"])
    async def test_approving_non_pending_fails(self, session, status: str) -> None:
        admin = await make_admin(session)
        registration = await make_registration(session, status=status)

        with pytest.raises(InvalidStateError) as exc_info:
            await RegistrationService(session).approve(registration.id, admin_principal(admin))

        assert exc_info.value.status_code == 400

    async def test_existing_account_conflicts(self, session) -> None:
        admin = await make_admin(session)
        await make_user(session, "taken")
        registration = await make_registration(session, email="taken@example.org")

        with pytest.raises(UserAlreadyExistsError):
            await RegistrationService(session).approve(registration.id, admin_principal(admin))

        assert registration.status == "pending"

    async def test_unknown_registration(self, session) -> None:
        from uuid import uuid4

        admin = await make_admin(session)

        with pytest.raises(RegistrationNotFoundError):
            await RegistrationService(session).approve(uuid4(), admin_principal(admin))


class TestRejection:
    async def test_reject_records_reason(self, session) -> None:
        admin = await make_admin(session)
        registration = await make_registration(session)

        rejected = await RegistrationService(session).reject(
            registration.id, admin_principal(admin), reason="Team is full"
        )

        assert rejected.status == "rejected"
        assert rejected.rejection_reason == "Team is full"
        activity = (await session.execute(select(AdminActivityORM))).scalar_one()
        assert activity.extra == {"reason": "Team is full"}

    async def test_reject_twice_fails(self, session) -> None:
        admin = await make_admin(session)
        registration = await make_registration(session)
        service = RegistrationService(session)
        await service.reject(registration.id, admin_principal(admin))

        with pytest.raises(InvalidStateError):
            await service.reject(registration.id, admin_principal(admin))


class TestListing:
    async def test_stats_count_by_status(self, session) -> None:
        await make_registration(session, email="a@example.org")
        await make_registration(session, email="b@example.org", status="rejected")
        await make_registration(session, email="c@example.org", status="account_created")

        stats = await RegistrationService(session).get_stats()

        assert stats.total == 3
        assert stats.pending == 1
        assert stats.rejected == 1
        assert stats.account_created == 1
        assert stats.last_7_days == 3

    async def test_search_filters_by_status(self, session) -> None:
        await make_registration(session, email="a@example.org")
        await make_registration(session, email="b@example.org", status="rejected")

        page = await RegistrationService(session).list_registrations(status="rejected")

        assert page.total == 1
        assert page.items[0].email == "b@example.org"

    async def test_delete_logs_email(self, session) -> None:
        admin = await make_admin(session)
        registration = await make_registration(session)

        await RegistrationService(session).delete(registration.id, admin_principal(admin))

        assert (await session.execute(select(RegistrationORM))).scalars().all() == []
        activity = (await session.execute(select(AdminActivityORM))).scalar_one()
        assert activity.extra == {"email": "applicant@example.org"}
