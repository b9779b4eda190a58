"""Admin activity ORM model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from media_portal.models.domain.activity import ActivityTarget, TargetType
from media_portal.models.orm.base import Base, UUIDMixin, utc_now
from media_portal.models.orm.role import JSONType


class AdminActivityORM(Base, UUIDMixin):
    """Append-only audit entry.

    ``target_id`` has no foreign key: the table it points into is chosen by
    ``target_type``.
    """

    __tablename__ = "admin_activities"

    admin_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    extra: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_admin_activities_admin_created", "admin_id", "created_at"),
        Index("idx_admin_activities_action_created", "action", "created_at"),
        Index("idx_admin_activities_target", "target_type", "target_id"),
    )

    @property
    def target(self) -> ActivityTarget:
        return ActivityTarget(TargetType(self.target_type), self.target_id)
