"""Calendar event repository."""

from datetime import datetime

from sqlalchemy import func, select

from media_portal.models.orm.event import EventORM
from media_portal.repositories.base import BaseRepository


class EventRepository(BaseRepository[EventORM]):
    """Repository for calendar events."""

    model = EventORM

    async def get_in_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        event_type: str | None = None,
        newest_first: bool = False,
    ) -> list[EventORM]:
        """Events dated within [start, end], optionally of one type."""
        query = select(EventORM)
        if start:
            query = query.where(EventORM.event_date >= start)
        if end:
            query = query.where(EventORM.event_date <= end)
        if event_type:
            query = query.where(EventORM.event_type == event_type)
        order = EventORM.event_date.desc() if newest_first else EventORM.event_date.asc()
        result = await self.session.execute(query.order_by(order))
        return list(result.scalars().all())

    async def count_by_type(self) -> list[tuple[str, int]]:
        count = func.count(EventORM.id)
        result = await self.session.execute(
            select(EventORM.event_type, count).group_by(EventORM.event_type).order_by(count.desc())
        )
        return [(event_type, n) for event_type, n in result.all()]

    async def count_upcoming_and_past(self, now: datetime) -> tuple[int, int]:
        upcoming = await self.session.execute(
            select(func.count()).select_from(EventORM).where(EventORM.event_date >= now)
        )
        past = await self.session.execute(
            select(func.count()).select_from(EventORM).where(EventORM.event_date < now)
        )
        return upcoming.scalar_one(), past.scalar_one()
