"""Administrator repository."""

from sqlalchemy import func, or_, select

from media_portal.models.orm.admin import AdminORM
from media_portal.models.orm.base import utc_now
from media_portal.repositories.base import BaseRepository


class AdminRepository(BaseRepository[AdminORM]):
    """Repository for administrator accounts."""

    model = AdminORM

    async def get_by_login(self, identifier: str) -> AdminORM | None:
        """Find an admin by username or email (case-insensitive)."""
        identifier = identifier.strip().lower()
        result = await self.session.execute(
            select(AdminORM).where(
                or_(
                    func.lower(AdminORM.username) == identifier,
                    func.lower(AdminORM.email) == identifier,
                )
            )
        )
        return result.scalar_one_or_none()

    async def record_login(self, admin: AdminORM) -> None:
        """Stamp the last successful login."""
        admin.last_login_at = utc_now()
        await self.session.flush()
