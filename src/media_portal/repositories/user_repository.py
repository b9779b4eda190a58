"""Portal user repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from media_portal.models.orm.user import UserORM
from media_portal.models.orm.user_role import UserRoleORM
from media_portal.repositories.base import BaseRepository
from media_portal.utils.validation import escape_like_wildcards


class UserRepository(BaseRepository[UserORM]):
    """Repository for portal user operations."""

    model = UserORM

    def _with_roles(self):
        return select(UserORM).options(
            selectinload(UserORM.role_assignments).selectinload(UserRoleORM.role)
        )

    async def get_with_roles(self, user_id: UUID) -> UserORM | None:
        """Get user with role assignments and their roles loaded."""
        result = await self.session.execute(self._with_roles().where(UserORM.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserORM | None:
        """Get user by email (stored lowercase), roles loaded."""
        result = await self.session.execute(
            self._with_roles().where(UserORM.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def username_exists(self, username: str) -> bool:
        result = await self.session.execute(
            select(func.count()).select_from(UserORM).where(UserORM.username == username)
        )
        return result.scalar_one() > 0

    async def list_users(
        self,
        search: str | None = None,
        is_active: bool | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[UserORM], int]:
        """List users newest first, with roles loaded.

        Args:
            search: Matches full name, email, username or phone
            is_active: Optional active-flag filter
            offset: Pagination offset
            limit: Page size

        Returns:
            Tuple of (users, total_count)
        """
        query = self._with_roles()
        if is_active is not None:
            query = query.where(UserORM.is_active == is_active)
        if search:
            term = f"%{escape_like_wildcards(search)}%"
            query = query.where(
                or_(
                    UserORM.full_name.ilike(term, escape="\\"),
                    UserORM.email.ilike(term, escape="\\"),
                    UserORM.username.ilike(term, escape="\\"),
                    UserORM.phone.ilike(term, escape="\\"),
                )
            )
        return await self._paginate(query.order_by(UserORM.created_at.desc()), offset, limit)

    async def get_all_with_roles(self) -> list[UserORM]:
        """Every user, newest first, with roles loaded."""
        result = await self.session.execute(self._with_roles().order_by(UserORM.created_at.desc()))
        return list(result.scalars().all())

    async def get_active_ids(self) -> list[UUID]:
        """Ids of all active users."""
        result = await self.session.execute(select(UserORM.id).where(UserORM.is_active.is_(True)))
        return list(result.scalars().all())

    async def get_existing_ids(self, user_ids: list[UUID]) -> list[UUID]:
        """Filter ``user_ids`` down to users that exist."""
        if not user_ids:
            return []
        result = await self.session.execute(select(UserORM.id).where(UserORM.id.in_(user_ids)))
        return list(result.scalars().all())

    async def count_by_active(self) -> tuple[int, int]:
        """Return (active, inactive) counts."""
        result = await self.session.execute(
            select(UserORM.is_active, func.count()).group_by(UserORM.is_active)
        )
        counts = {bool(active): count for active, count in result.all()}
        return counts.get(True, 0), counts.get(False, 0)

    async def get_created_since(self, since: datetime) -> list[datetime]:
        """Creation timestamps of users created at or after ``since``."""
        result = await self.session.execute(
            select(UserORM.created_at).where(UserORM.created_at >= since)
        )
        return list(result.scalars().all())

    async def get_by_reset_token(self, token_hash: str, now: datetime) -> UserORM | None:
        """Find the user holding an unexpired reset token."""
        result = await self.session.execute(
            select(UserORM).where(
                UserORM.reset_password_token_hash == token_hash,
                UserORM.reset_password_expires_at > now,
            )
        )
        return result.scalar_one_or_none()
