"""Shared response DTOs."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str


class CountItem(BaseModel):
    """One bucket of a grouped count."""

    name: str
    count: int


class TrendPoint(BaseModel):
    """Count for a period label (``YYYY-MM-DD`` or ``YYYY-MM``)."""

    period: str
    count: int
