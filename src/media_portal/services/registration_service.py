"""Membership application workflow."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.exceptions import (
    InvalidStateError,
    RegistrationNotFoundError,
    UserAlreadyExistsError,
)
from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.models.domain.principal import Principal
from media_portal.models.domain.registration import RegistrationStatus
from media_portal.models.dto.registration import (
    RegistrationCreate,
    RegistrationListResponse,
    RegistrationResponse,
    RegistrationStatsResponse,
)
from media_portal.models.orm.base import utc_now
from media_portal.models.orm.registration import RegistrationORM
from media_portal.models.orm.user import UserORM
from media_portal.repositories.registration_repository import RegistrationRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.security.password import get_password_service
from media_portal.services.activity_service import ActivityService
from media_portal.services.notification_service import NotificationService
from media_portal.utils.validation import email_local_part

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalResult:
    """Everything the caller needs to email the new member."""

    registration: RegistrationORM
    user: UserORM
    temporary_password: str


class RegistrationService:
    """Submission, review and approval of applications."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.registration_repo = RegistrationRepository(session)
        self.user_repo = UserRepository(session)
        self.password_service = get_password_service()
        self.notification_service = NotificationService(session)
        self.activity_service = ActivityService(session)

    async def submit(self, data: RegistrationCreate) -> RegistrationORM:
        """Store a new application as pending."""
        values = data.model_dump()
        values["gender"] = data.gender.value
        values["media_skills"] = [s.value for s in data.media_skills]
        registration = await self.registration_repo.create(
            **values, status=RegistrationStatus.PENDING.value
        )
        logger.info("Registration %s submitted", registration.id)
        return registration

    async def list_registrations(
        self,
        page: int = 1,
        page_size: int = 50,
        search: str | None = None,
        status: str | None = None,
        sort_by: str = "submitted_at",
        sort_order: str = "desc",
    ) -> RegistrationListResponse:
        items, total = await self.registration_repo.search(
            search=search,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return RegistrationListResponse(
            items=[RegistrationResponse.model_validate(r) for r in items],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size,
        )

    async def get(self, registration_id: UUID) -> RegistrationORM:
        """Raises RegistrationNotFoundError for unknown ids."""
        registration = await self.registration_repo.get(registration_id)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        return registration

    async def get_stats(self) -> RegistrationStatsResponse:
        by_status = await self.registration_repo.count_by_status()
        recent = await self.registration_repo.count_since(utc_now() - timedelta(days=7))
        return RegistrationStatsResponse(
            total=sum(by_status.values()),
            pending=by_status.get(RegistrationStatus.PENDING.value, 0),
            approved=by_status.get(RegistrationStatus.APPROVED.value, 0),
            rejected=by_status.get(RegistrationStatus.REJECTED.value, 0),
            account_created=by_status.get(RegistrationStatus.ACCOUNT_CREATED.value, 0),
            last_7_days=recent,
        )

    async def _get_pending(self, registration_id: UUID) -> RegistrationORM:
        registration = await self.get(registration_id)
        if registration.status != RegistrationStatus.PENDING.value:
            raise InvalidStateError(registration.status)
        return registration

    async def _unique_username(self, email: str) -> str:
        base = email_local_part(email)
        username, suffix = base, 1
        while await self.user_repo.username_exists(username):
            suffix += 1
            username = f"{base}{suffix}"
        return username

    async def approve(
        self,
        registration_id: UUID,
        actor: Principal,
        ip_address: str | None = None,
    ) -> ApprovalResult:
        """Approve a pending application and create the member account.

        The approval notification is best-effort: a failure is logged and the
        approval still goes through.

        Raises:
            RegistrationNotFoundError: Unknown registration
            InvalidStateError: The registration is not pending
            UserAlreadyExistsError: An account already uses the applicant's email
        """
        registration = await self._get_pending(registration_id)

        if await self.user_repo.get_by_email(registration.email) is not None:
            raise UserAlreadyExistsError(registration.email)

        temporary_password = self.password_service.generate_temporary_password()
        user = await self.user_repo.create(
            username=await self._unique_username(registration.email),
            email=registration.email.lower(),
            password_hash=self.password_service.hash_password(temporary_password),
            full_name=registration.full_name,
            phone=registration.phone_number,
            registration_id=registration.id,
            is_active=True,
        )

        registration.status = RegistrationStatus.ACCOUNT_CREATED.value
        registration.user_id = user.id
        registration.approved_by = actor.id
        registration.approved_at = utc_now()
        await self.session.flush()

        try:
            async with self.session.begin_nested():
                await self.notification_service.notify_application_approved(user, registration.id)
        except SQLAlchemyError as e:
            logger.error("Failed to create approval notification for %s: %s", user.id, e)

        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.APPLICATION_APPROVED,
            ActivityTarget.registration(registration.id),
            f"Approved application from {registration.full_name}",
            metadata={"user_id": str(user.id), "username": user.username},
            ip_address=ip_address,
        )
        logger.info("Registration %s approved as user %s", registration.id, user.id)
        return ApprovalResult(registration, user, temporary_password)

    async def reject(
        self,
        registration_id: UUID,
        actor: Principal,
        reason: str | None = None,
        ip_address: str | None = None,
    ) -> RegistrationORM:
        """Reject a pending application.

        Raises:
            RegistrationNotFoundError: Unknown registration
            InvalidStateError: The registration is not pending
        """
        registration = await self._get_pending(registration_id)
        registration.status = RegistrationStatus.REJECTED.value
        registration.rejection_reason = reason
        await self.session.flush()

        if registration.user_id is not None:
            await self.notification_service.notify_application_rejected(registration.user_id, reason)

        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.APPLICATION_REJECTED,
            ActivityTarget.registration(registration.id),
            f"Rejected application from {registration.full_name}",
            metadata={"reason": reason} if reason else None,
            ip_address=ip_address,
        )
        return registration

    async def update_status(
        self, registration_id: UUID, status: RegistrationStatus
    ) -> RegistrationORM:
        """Set a status directly, bypassing the approval workflow."""
        registration = await self.get(registration_id)
        registration.status = status.value
        await self.session.flush()
        return registration

    async def delete(
        self,
        registration_id: UUID,
        actor: Principal,
        ip_address: str | None = None,
    ) -> None:
        registration = await self.get(registration_id)
        full_name, email = registration.full_name, registration.email
        await self.registration_repo.delete(registration.id)
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.APPLICATION_DELETED,
            ActivityTarget.registration(registration_id),
            f"Deleted application from {full_name}",
            metadata={"email": email},
            ip_address=ip_address,
        )
