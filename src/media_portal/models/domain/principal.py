"""Authenticated principal domain model."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel


class PrincipalKind(StrEnum):
    """Which credential store issued the token."""

    ADMIN = "admin"
    USER = "user"


class Principal(BaseModel):
    """Identity reconstructed from a verified bearer token on every request."""

    id: UUID
    kind: PrincipalKind
    email: str | None = None
    username: str | None = None

    @property
    def is_admin(self) -> bool:
        """Administrators implicitly hold every permission."""
        return self.kind == PrincipalKind.ADMIN
