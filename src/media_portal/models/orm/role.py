"""Role ORM model."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from media_portal.models.orm.base import Base, TimestampMixin, UUIDMixin

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class RoleORM(Base, UUIDMixin, TimestampMixin):
    """Named team role carrying a set of permission codes."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    responsibilities: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)
    permissions: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    assignments: Mapped[list["UserRoleORM"]] = relationship(
        "UserRoleORM",
        back_populates="role",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
