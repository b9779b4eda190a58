"""Role management and role assignment."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.exceptions import (
    RoleAlreadyAssignedError,
    RoleAlreadyExistsError,
    RoleAssignmentNotFoundError,
    RoleNotFoundError,
    UserNotFoundError,
)
from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.role import RoleCreate, RoleUpdate
from media_portal.models.orm.role import RoleORM
from media_portal.models.orm.user import UserORM
from media_portal.models.orm.user_role import UserRoleORM
from media_portal.repositories.role_repository import RoleRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.services.activity_service import ActivityService
from media_portal.services.notification_service import NotificationService
from media_portal.utils.validation import slugify

logger = logging.getLogger(__name__)


class RoleService:
    """Roles, and the assignments linking users to them."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.role_repo = RoleRepository(session)
        self.user_repo = UserRepository(session)
        self.notification_service = NotificationService(session)
        self.activity_service = ActivityService(session)

    async def list_active(self) -> list[RoleORM]:
        return await self.role_repo.get_active()

    async def get(self, role_id: UUID) -> RoleORM:
        """Get a role by id.

        Raises:
            RoleNotFoundError: Unknown role id
        """
        role = await self.role_repo.get(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    async def create(self, data: RoleCreate) -> RoleORM:
        """Create a role. The slug is derived from the name when not given.

        Raises:
            RoleAlreadyExistsError: Name or slug already taken
        """
        slug = slugify(data.slug or data.name)
        if await self.role_repo.get_by_name(data.name) or await self.role_repo.get_by_slug(slug):
            raise RoleAlreadyExistsError(data.name)

        role = await self.role_repo.create(
            name=data.name,
            slug=slug,
            description=data.description,
            responsibilities=list(data.responsibilities),
            permissions=[p.value for p in dict.fromkeys(data.permissions)],
            is_active=True,
        )
        logger.info("Role %s created", role.slug)
        return role

    async def update(self, role_id: UUID, data: RoleUpdate) -> RoleORM:
        """Update a role. Renaming keeps the original slug.

        Raises:
            RoleNotFoundError: Unknown role id
            RoleAlreadyExistsError: New name already taken by another role
        """
        role = await self.get(role_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes and changes["name"] != role.name:
            existing = await self.role_repo.get_by_name(changes["name"])
            if existing is not None and existing.id != role.id:
                raise RoleAlreadyExistsError(changes["name"])
        if "permissions" in changes:
            changes["permissions"] = [p.value for p in dict.fromkeys(data.permissions or [])]

        updated = await self.role_repo.update(role_id, **changes)
        return updated

    async def deactivate(self, role_id: UUID) -> RoleORM:
        """Soft-delete a role; its assignments stop granting permissions."""
        await self.get(role_id)
        return await self.role_repo.update(role_id, is_active=False)

    async def get_user_assignments(self, user_id: UUID) -> list[UserRoleORM]:
        return await self.role_repo.get_assignments_for_user(user_id)

    async def _get_user_and_role(self, user_id: UUID, role_id: UUID) -> tuple[UserORM, RoleORM]:
        user = await self.user_repo.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        role = await self.role_repo.get(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return user, role

    async def assign(
        self,
        user_id: UUID,
        role_id: UUID,
        actor: Principal,
        notes: str | None = None,
        ip_address: str | None = None,
    ) -> tuple[UserRoleORM, UserORM, RoleORM]:
        """Give a user a role, notify them and log the change.

        Concurrent duplicate requests race on the (user, role) unique
        constraint; the loser gets RoleAlreadyAssignedError.

        Raises:
            UserNotFoundError: Unknown user
            RoleNotFoundError: Unknown role
            RoleAlreadyAssignedError: The pair is already assigned
        """
        user, role = await self._get_user_and_role(user_id, role_id)

        if await self.role_repo.get_assignment(user_id, role_id) is not None:
            raise RoleAlreadyAssignedError()

        try:
            assignment = await self.role_repo.add_assignment(
                user_id=user_id, role_id=role_id, assigned_by=actor.id, notes=notes
            )
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Concurrent assignment of role %s to user %s", role_id, user_id)
            raise RoleAlreadyAssignedError() from e

        await self.notification_service.notify_role_assigned(user.id, role)
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.ROLE_ASSIGNED,
            ActivityTarget.user(user.id),
            f"Assigned role {role.name} to {user.full_name}",
            metadata={"role_id": str(role.id), "role_name": role.name},
            ip_address=ip_address,
        )
        return assignment, user, role

    async def remove(
        self,
        user_id: UUID,
        role_id: UUID,
        actor: Principal,
        ip_address: str | None = None,
    ) -> None:
        """Take a role away from a user.

        Raises:
            UserNotFoundError: Unknown user
            RoleNotFoundError: Unknown role
            RoleAssignmentNotFoundError: The user does not hold the role
        """
        user, role = await self._get_user_and_role(user_id, role_id)

        if not await self.role_repo.remove_assignment(user_id, role_id):
            raise RoleAssignmentNotFoundError()

        await self.notification_service.notify_role_removed(user.id, role)
        await self.activity_service.log_activity(
            actor.id,
            ActivityAction.ROLE_REMOVED,
            ActivityTarget.user(user.id),
            f"Removed role {role.name} from {user.full_name}",
            metadata={"role_id": str(role.id), "role_name": role.name},
            ip_address=ip_address,
        )
