"""Registration ORM model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from media_portal.models.domain.registration import RegistrationStatus
from media_portal.models.orm.base import Base, TimestampMixin, UUIDMixin, utc_now
from media_portal.models.orm.role import JSONType


class RegistrationORM(Base, UUIDMixin, TimestampMixin):
    """Membership application submitted through the public form."""

    __tablename__ = "registrations"

    # Personal information
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    age_range: Mapped[str] = mapped_column(String(20), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Parish
    parish_location: Mapped[str] = mapped_column(String(255), nullable=False)
    parish_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_member: Mapped[str] = mapped_column(String(10), nullable=False)
    membership_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Skills and interests
    media_skills: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)
    other_skills: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_of_interest: Mapped[list[Any]] = mapped_column(JSONType, default=list, nullable=False)

    # Experience and equipment
    has_experience: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    experience_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    has_equipment: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    equipment_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Availability
    availability: Mapped[str] = mapped_column(String(100), nullable=False)
    commitment: Mapped[str] = mapped_column(String(100), nullable=False)

    # Emergency contact
    emergency_contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    emergency_contact_relationship: Mapped[str] = mapped_column(String(100), nullable=False)
    emergency_contact_phone: Mapped[str] = mapped_column(String(50), nullable=False)

    additional_info: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Review
    status: Mapped[str] = mapped_column(
        String(20), default=RegistrationStatus.PENDING.value, nullable=False
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )
    user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_registrations_status", "status"),
        Index("idx_registrations_submitted", "submitted_at"),
    )
