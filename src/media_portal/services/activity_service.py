"""Admin activity logging and queries."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.models.domain.activity import ActivityAction, ActivityTarget
from media_portal.models.dto.activity import (
    ActionCount,
    ActivityListResponse,
    ActivityResponse,
    ActivityStatsResponse,
    AdminActivityCount,
)
from media_portal.models.orm.admin_activity import AdminActivityORM
from media_portal.models.orm.base import utc_now
from media_portal.repositories.activity_repository import ActivityRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityLogResult:
    """Outcome of an audit write.

    ``logged`` is False when the write failed; the audited action still
    went ahead and ``error`` says why the entry is missing.
    """

    logged: bool
    activity: AdminActivityORM | None = None
    error: str | None = None


class ActivityService:
    """Audit trail of administrator actions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = ActivityRepository(session)

    async def log_activity(
        self,
        admin_id: UUID,
        action: ActivityAction,
        target: ActivityTarget,
        description: str,
        metadata: dict[str, Any] | None = None,
        ip_address: str | None = None,
    ) -> ActivityLogResult:
        """Append an activity entry. Never raises.

        The insert runs in a SAVEPOINT, so a failure rolls back only the
        audit row and leaves the caller's transaction usable.
        """
        try:
            async with self.session.begin_nested():
                activity = await self.repo.log(
                    admin_id=admin_id,
                    action=action.value,
                    target=target,
                    description=description,
                    metadata=metadata,
                    ip_address=ip_address,
                )
        except Exception as e:
            logger.error("Failed to log activity %s by %s: %s", action.value, admin_id, e)
            return ActivityLogResult(logged=False, error=str(e))
        return ActivityLogResult(logged=True, activity=activity)

    async def _to_responses(
        self, rows: list[tuple[AdminActivityORM, str | None]]
    ) -> list[ActivityResponse]:
        labels = await self.repo.resolve_targets([activity.target for activity, _ in rows])
        return [
            ActivityResponse(
                id=activity.id,
                admin_id=activity.admin_id,
                admin_username=username,
                action=activity.action,
                target_type=activity.target_type,
                target_id=activity.target_id,
                target_label=labels.get(activity.target),
                description=activity.description,
                metadata=activity.extra,
                ip_address=activity.ip_address,
                created_at=activity.created_at,
            )
            for activity, username in rows
        ]

    async def get_recent(
        self,
        page: int = 1,
        page_size: int = 20,
        action: str | None = None,
        admin_id: UUID | None = None,
    ) -> ActivityListResponse:
        """Newest-first page of activity, optionally filtered."""
        rows, total = await self.repo.get_recent(
            offset=(page - 1) * page_size,
            limit=page_size,
            action=action,
            admin_id=admin_id,
        )
        return ActivityListResponse(
            items=await self._to_responses(rows),
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size,
        )

    async def get_by_admin(self, admin_id: UUID, limit: int = 20) -> list[ActivityResponse]:
        rows, _ = await self.repo.get_recent(limit=limit, admin_id=admin_id)
        return await self._to_responses(rows)

    async def get_stats(self) -> ActivityStatsResponse:
        """Totals, last-24h count, and breakdowns by action and by admin."""
        total = await self.repo.count()
        recent = await self.repo.count_since(utc_now() - timedelta(hours=24))
        by_action = await self.repo.count_by_action()
        by_admin = await self.repo.count_by_admin()
        return ActivityStatsResponse(
            total=total,
            recent_count=recent,
            by_action=[ActionCount(action=a, count=n) for a, n in by_action],
            by_admin=[
                AdminActivityCount(admin_id=admin_id, admin_name=name, count=n)
                for admin_id, name, n in by_admin
            ],
        )
