"""Registration repository."""

from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, or_, select

from media_portal.models.domain.registration import ACCEPTED_STATUSES
from media_portal.models.orm.registration import RegistrationORM
from media_portal.repositories.base import BaseRepository
from media_portal.utils.validation import escape_like_wildcards

SORTABLE_COLUMNS = {"submitted_at", "full_name", "email", "status", "parish_location"}

_ACCEPTED = [s.value for s in ACCEPTED_STATUSES]


class RegistrationRepository(BaseRepository[RegistrationORM]):
    """Repository for membership applications."""

    model = RegistrationORM

    async def search(
        self,
        search: str | None = None,
        status: str | None = None,
        sort_by: str = "submitted_at",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[RegistrationORM], int]:
        """List applications with filters.

        Args:
            search: Matches full name, email or phone number
            status: Exact status filter
            sort_by: Column name, must be in SORTABLE_COLUMNS
            sort_order: ``asc`` or ``desc``
            offset: Pagination offset
            limit: Page size

        Returns:
            Tuple of (registrations, total_count)
        """
        query = select(RegistrationORM)
        if status:
            query = query.where(RegistrationORM.status == status)
        if search:
            term = f"%{escape_like_wildcards(search)}%"
            query = query.where(
                or_(
                    RegistrationORM.full_name.ilike(term, escape="\\"),
                    RegistrationORM.email.ilike(term, escape="\\"),
                    RegistrationORM.phone_number.ilike(term, escape="\\"),
                )
            )
        column = getattr(RegistrationORM, sort_by if sort_by in SORTABLE_COLUMNS else "submitted_at")
        query = query.order_by(column.asc() if sort_order == "asc" else column.desc())
        return await self._paginate(query, offset, limit)

    async def count_by_status(self) -> dict[str, int]:
        result = await self.session.execute(
            select(RegistrationORM.status, func.count()).group_by(RegistrationORM.status)
        )
        return {status: n for status, n in result.all()}

    async def count_since(self, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(RegistrationORM)
            .where(RegistrationORM.submitted_at >= since)
        )
        return result.scalar_one()

    async def get_submissions_since(self, since: datetime) -> list[tuple[datetime, str]]:
        """(submitted_at, status) of applications submitted at or after ``since``."""
        result = await self.session.execute(
            select(RegistrationORM.submitted_at, RegistrationORM.status).where(
                RegistrationORM.submitted_at >= since
            )
        )
        return [(submitted_at, status) for submitted_at, status in result.all()]

    async def get_accepted_skills(self, linked_only: bool = False) -> list[list[str]]:
        """Skill lists of accepted applications."""
        query = select(RegistrationORM.media_skills).where(RegistrationORM.status.in_(_ACCEPTED))
        if linked_only:
            query = query.where(RegistrationORM.user_id.is_not(None))
        result = await self.session.execute(query)
        return [list(skills or []) for skills in result.scalars().all()]

    async def count_accepted_by(
        self,
        column_name: str,
        limit: int | None = None,
        linked_only: bool = False,
    ) -> list[tuple[Any, int]]:
        """Group accepted applications by one column, largest group first."""
        column = getattr(RegistrationORM, column_name)
        count = func.count(RegistrationORM.id)
        query: Select = (
            select(column, count)
            .where(RegistrationORM.status.in_(_ACCEPTED))
            .group_by(column)
            .order_by(count.desc(), column)
        )
        if linked_only:
            query = query.where(RegistrationORM.user_id.is_not(None))
        if limit:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [(value, n) for value, n in result.all()]

    async def get_in_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        status: str | None = None,
    ) -> list[RegistrationORM]:
        """Applications submitted within [start, end], newest first."""
        query = select(RegistrationORM)
        if start:
            query = query.where(RegistrationORM.submitted_at >= start)
        if end:
            query = query.where(RegistrationORM.submitted_at <= end)
        if status:
            query = query.where(RegistrationORM.status == status)
        result = await self.session.execute(query.order_by(RegistrationORM.submitted_at.desc()))
        return list(result.scalars().all())

    async def get_many(self, ids: list[Any]) -> list[RegistrationORM]:
        if not ids:
            return []
        result = await self.session.execute(
            select(RegistrationORM).where(RegistrationORM.id.in_(ids))
        )
        return list(result.scalars().all())
