"""Portal user management."""

import logging
from collections import Counter
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.exceptions import UserNotFoundError
from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.common import CountItem
from media_portal.models.dto.role import RoleAssignmentResponse, UserDetailResponse
from media_portal.models.dto.user import (
    RoleSummary,
    UserListResponse,
    UserResponse,
    UserStatsResponse,
    UserStatusResponse,
)
from media_portal.models.orm.user import UserORM
from media_portal.repositories.registration_repository import RegistrationRepository
from media_portal.repositories.role_repository import RoleRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.services.activity_service import ActivityService

logger = logging.getLogger(__name__)


def build_user_response(user: UserORM) -> UserResponse:
    """Serialize a user loaded with its role assignments."""
    response = UserResponse.model_validate(user)
    response.roles = [RoleSummary.model_validate(a.role) for a in user.role_assignments]
    return response


class UserService:
    """Listing, statistics and activation of portal users."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)
        self.role_repo = RoleRepository(session)
        self.registration_repo = RegistrationRepository(session)
        self.activity_service = ActivityService(session)

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 50,
        search: str | None = None,
        is_active: bool | None = None,
    ) -> UserListResponse:
        users, total = await self.user_repo.list_users(
            search=search,
            is_active=is_active,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return UserListResponse(
            items=[build_user_response(u) for u in users],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size,
        )

    async def get_stats(self) -> UserStatsResponse:
        """Member totals plus skill, parish and role breakdowns."""
        active, inactive = await self.user_repo.count_by_active()

        skill_counts: Counter[str] = Counter()
        for skills in await self.registration_repo.get_accepted_skills(linked_only=True):
            skill_counts.update(skills)

        parishes = await self.registration_repo.count_accepted_by(
            "parish_location", limit=10, linked_only=True
        )
        roles = await self.role_repo.count_by_role()

        return UserStatsResponse(
            total=active + inactive,
            active=active,
            inactive=inactive,
            skills=[CountItem(name=s, count=n) for s, n in skill_counts.most_common()],
            parishes=[CountItem(name=p, count=n) for p, n in parishes],
            roles=[CountItem(name=r, count=n) for r, n in roles],
        )

    async def get_detail(self, user_id: UUID) -> UserDetailResponse:
        """User with every role assignment.

        Raises:
            UserNotFoundError: Unknown user id
        """
        user = await self.user_repo.get_with_roles(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        base = build_user_response(user)
        return UserDetailResponse(
            **base.model_dump(),
            assignments=[RoleAssignmentResponse.model_validate(a) for a in user.role_assignments],
        )

    async def toggle_status(
        self,
        user_id: UUID,
        actor: Principal,
        ip_address: str | None = None,
    ) -> UserStatusResponse:
        """Flip a user's active flag.

        Raises:
            UserNotFoundError: Unknown user id
        """
        user = await self.user_repo.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        user.is_active = not user.is_active
        await self.session.flush()

        state = "activated" if user.is_active else "deactivated"
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.USER_STATUS_CHANGED,
            ActivityTarget.user(user.id),
            f"User {user.username} {state}",
            metadata={"is_active": user.is_active},
            ip_address=ip_address,
        )
        logger.info("User %s %s by %s", user.id, state, actor.id)
        return UserStatusResponse(
            message=f"User {state} successfully", id=user.id, is_active=user.is_active
        )
