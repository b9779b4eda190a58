"""Role and role assignment repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from media_portal.models.orm.role import RoleORM
from media_portal.models.orm.user_role import UserRoleORM
from media_portal.repositories.base import BaseRepository


class RoleRepository(BaseRepository[RoleORM]):
    """Repository for roles and the user-role join table."""

    model = RoleORM

    async def get_by_name(self, name: str) -> RoleORM | None:
        result = await self.session.execute(select(RoleORM).where(RoleORM.name == name))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> RoleORM | None:
        result = await self.session.execute(select(RoleORM).where(RoleORM.slug == slug))
        return result.scalar_one_or_none()

    async def get_active(self) -> list[RoleORM]:
        """Active roles ordered by name."""
        result = await self.session.execute(
            select(RoleORM).where(RoleORM.is_active.is_(True)).order_by(RoleORM.name)
        )
        return list(result.scalars().all())

    async def get_assignment(self, user_id: UUID, role_id: UUID) -> UserRoleORM | None:
        """Get the assignment linking a user and a role, if any."""
        result = await self.session.execute(
            select(UserRoleORM).where(
                UserRoleORM.user_id == user_id,
                UserRoleORM.role_id == role_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_assignments_for_user(self, user_id: UUID) -> list[UserRoleORM]:
        """All assignments of a user, oldest first, with roles loaded."""
        result = await self.session.execute(
            select(UserRoleORM)
            .options(selectinload(UserRoleORM.role))
            .where(UserRoleORM.user_id == user_id)
            .order_by(UserRoleORM.assigned_at)
        )
        return list(result.scalars().all())

    async def add_assignment(
        self,
        user_id: UUID,
        role_id: UUID,
        assigned_by: UUID | None = None,
        notes: str | None = None,
    ) -> UserRoleORM:
        """Insert an assignment.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pair is already assigned
        """
        assignment = UserRoleORM(
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            notes=notes,
        )
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment, ["role"])
        return assignment

    async def remove_assignment(self, user_id: UUID, role_id: UUID) -> bool:
        """Delete an assignment.

        Returns:
            True if a row was removed
        """
        result = await self.session.execute(
            delete(UserRoleORM).where(
                UserRoleORM.user_id == user_id,
                UserRoleORM.role_id == role_id,
            )
        )
        return result.rowcount > 0

    async def get_permission_sets(self, user_id: UUID) -> list[list[str]] | None:
        """Permission lists of the user's active roles.

        Returns:
            None when the user holds no assignment at all, otherwise one list
            per assignment whose role is active (possibly empty)
        """
        result = await self.session.execute(
            select(RoleORM.permissions, RoleORM.is_active)
            .join(UserRoleORM, UserRoleORM.role_id == RoleORM.id)
            .where(UserRoleORM.user_id == user_id)
        )
        rows = result.all()
        if not rows:
            return None
        return [list(permissions or []) for permissions, is_active in rows if is_active]

    async def count_by_role(self) -> list[tuple[str, int]]:
        """(role name, assignment count) ordered by count descending."""
        count = func.count(UserRoleORM.id)
        result = await self.session.execute(
            select(RoleORM.name, count)
            .join(UserRoleORM, UserRoleORM.role_id == RoleORM.id)
            .group_by(RoleORM.name)
            .order_by(count.desc())
        )
        return [(name, n) for name, n in result.all()]
