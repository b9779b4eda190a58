"""Database connection and session management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from media_portal.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Store handle owning the engine and the session factory.

    Constructed once at startup and passed to whatever needs sessions
    (request dependencies, scheduler jobs, scripts).
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the handle for the configured PostgreSQL database."""
        engine = create_async_engine(
            settings.async_database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            # Validate connections before checkout to detect stale connections
            pool_pre_ping=True,
            pool_recycle=3600,
            # Security: Never echo SQL statements as they may contain sensitive data
            echo=False,
        )
        return cls(engine)

    async def disconnect(self) -> None:
        """Release all pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that commits on success and rolls back on failure."""
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise


def get_database(request: Request) -> Database:
    """Return the store handle attached to the running application."""
    return request.app.state.db


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_database(request).session() as session:
        yield session
