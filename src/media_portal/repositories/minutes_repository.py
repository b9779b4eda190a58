"""Meeting minutes repository."""

from sqlalchemy import or_, select

from media_portal.models.orm.meeting_minutes import MeetingMinutesORM
from media_portal.repositories.base import BaseRepository
from media_portal.utils.validation import escape_like_wildcards


class MinutesRepository(BaseRepository[MeetingMinutesORM]):
    """Repository for meeting minutes."""

    model = MeetingMinutesORM

    async def get_published(
        self,
        search: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[MeetingMinutesORM], int]:
        """Published minutes, latest meeting first.

        Args:
            search: Matches title or content
        """
        query = select(MeetingMinutesORM).where(MeetingMinutesORM.is_published.is_(True))
        if search:
            term = f"%{escape_like_wildcards(search)}%"
            query = query.where(
                or_(
                    MeetingMinutesORM.title.ilike(term, escape="\\"),
                    MeetingMinutesORM.content.ilike(term, escape="\\"),
                )
            )
        return await self._paginate(
            query.order_by(MeetingMinutesORM.meeting_date.desc()), offset, limit
        )
