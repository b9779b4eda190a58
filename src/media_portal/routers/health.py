"""Health check router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from media_portal import __version__
from media_portal.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def health_check(db: Annotated[AsyncSession, Depends(get_db)]) -> JSONResponse:
    """Liveness plus a database round trip."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed: %s", e)
        await db.rollback()
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unavailable", "version": __version__},
        )
    return JSONResponse(content={"status": "healthy", "database": "ok", "version": __version__})
