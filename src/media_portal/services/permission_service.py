"""Role-based permission resolution."""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.exceptions import PermissionDeniedError
from media_portal.repositories.role_repository import RoleRepository

logger = logging.getLogger(__name__)


class PermissionService:
    """Resolves a user's effective permissions from their role assignments."""

    def __init__(self, session: AsyncSession) -> None:
        self.role_repo = RoleRepository(session)

    async def resolve(self, user_id: UUID) -> set[str] | None:
        """Union of the permissions of every active role held by the user.

        Returns:
            None when the user has no role assignment at all
        """
        permission_sets = await self.role_repo.get_permission_sets(user_id)
        if permission_sets is None:
            return None
        granted: set[str] = set()
        for permissions in permission_sets:
            granted.update(permissions)
        return granted

    async def check(self, user_id: UUID, required: Iterable[str]) -> set[str]:
        """Authorize when the user holds at least one of ``required``.

        Returns:
            The resolved permission set

        Raises:
            PermissionDeniedError: No assignments, or no overlap with ``required``
        """
        required = list(required)
        granted = await self.resolve(user_id)
        if granted is None:
            logger.info("Permission denied for user %s: no role assignments", user_id)
            raise PermissionDeniedError(required=required)
        if granted.isdisjoint(required):
            logger.info("Permission denied for user %s: needs one of %s", user_id, required)
            raise PermissionDeniedError(required=required, granted=sorted(granted))
        return granted
