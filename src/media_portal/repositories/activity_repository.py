"""Admin activity repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import InstrumentedAttribute

from media_portal.models.domain.activity import ActivityTarget, TargetType
from media_portal.models.orm.admin import AdminORM
from media_portal.models.orm.admin_activity import AdminActivityORM
from media_portal.models.orm.event import EventORM
from media_portal.models.orm.registration import RegistrationORM
from media_portal.models.orm.role import RoleORM
from media_portal.models.orm.user import UserORM
from media_portal.repositories.base import BaseRepository

# Table and display column each target kind resolves against. SYSTEM has none.
TARGET_RESOLVERS: dict[TargetType, InstrumentedAttribute] = {
    TargetType.REGISTRATION: RegistrationORM.full_name,
    TargetType.EVENT: EventORM.title,
    TargetType.USER: UserORM.full_name,
    TargetType.ROLE: RoleORM.name,
}


class ActivityRepository(BaseRepository[AdminActivityORM]):
    """Repository for the append-only admin activity log."""

    model = AdminActivityORM

    async def log(
        self,
        admin_id: UUID,
        action: str,
        target: ActivityTarget,
        description: str,
        metadata: dict[str, Any] | None = None,
        ip_address: str | None = None,
    ) -> AdminActivityORM:
        """Append an activity entry."""
        entry = AdminActivityORM(
            admin_id=admin_id,
            action=action,
            target_type=target.kind.value,
            target_id=target.id,
            description=description,
            extra=metadata or {},
            ip_address=ip_address,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    def _with_admin_name(self):
        return select(AdminActivityORM, AdminORM.username).outerjoin(
            AdminORM, AdminORM.id == AdminActivityORM.admin_id
        )

    async def get_recent(
        self,
        offset: int = 0,
        limit: int = 20,
        action: str | None = None,
        admin_id: UUID | None = None,
    ) -> tuple[list[tuple[AdminActivityORM, str | None]], int]:
        """Recent activity, newest first.

        Returns:
            Tuple of ([(activity, admin username)], total_count)
        """
        conditions = []
        if action:
            conditions.append(AdminActivityORM.action == action)
        if admin_id:
            conditions.append(AdminActivityORM.admin_id == admin_id)

        count_query = select(func.count()).select_from(AdminActivityORM).where(*conditions)
        total = (await self.session.execute(count_query)).scalar_one()

        result = await self.session.execute(
            self._with_admin_name()
            .where(*conditions)
            .order_by(AdminActivityORM.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [(activity, username) for activity, username in result.all()], total

    async def count_since(self, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(AdminActivityORM)
            .where(AdminActivityORM.created_at >= since)
        )
        return result.scalar_one()

    async def count_by_action(self) -> list[tuple[str, int]]:
        """(action, count) ordered by count descending."""
        count = func.count(AdminActivityORM.id)
        result = await self.session.execute(
            select(AdminActivityORM.action, count)
            .group_by(AdminActivityORM.action)
            .order_by(count.desc())
        )
        return [(action, n) for action, n in result.all()]

    async def count_by_admin(self) -> list[tuple[UUID, str | None, int]]:
        """(admin id, admin username, count) ordered by count descending.

        Actors that are not administrators keep a None username.
        """
        count = func.count(AdminActivityORM.id)
        result = await self.session.execute(
            select(AdminActivityORM.admin_id, AdminORM.username, count)
            .outerjoin(AdminORM, AdminORM.id == AdminActivityORM.admin_id)
            .group_by(AdminActivityORM.admin_id, AdminORM.username)
            .order_by(count.desc())
        )
        return [(admin_id, name, n) for admin_id, name, n in result.all()]

    async def resolve_targets(
        self, targets: list[ActivityTarget]
    ) -> dict[ActivityTarget, str]:
        """Look up a display label for each target, one query per kind.

        Targets whose record no longer exists, and SYSTEM targets, are absent
        from the result.
        """
        ids_by_kind: dict[TargetType, set[UUID]] = {}
        for target in targets:
            if target.id is not None and target.kind in TARGET_RESOLVERS:
                ids_by_kind.setdefault(target.kind, set()).add(target.id)

        labels: dict[ActivityTarget, str] = {}
        for kind, ids in ids_by_kind.items():
            label_column = TARGET_RESOLVERS[kind]
            id_column = label_column.class_.id
            result = await self.session.execute(
                select(id_column, label_column).where(id_column.in_(ids))
            )
            for target_id, label in result.all():
                labels[ActivityTarget(kind, target_id)] = label
        return labels
