"""Background task scheduler using APScheduler."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError

from media_portal.config import get_settings
from media_portal.database import Database
from media_portal.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None


async def cleanup_notifications_job(db: Database, days: int) -> int:
    """Delete read notifications older than ``days``.

    Returns:
        Number of notifications deleted, 0 when the sweep failed
    """
    logger.info("Starting notification cleanup (older than %d days)", days)
    try:
        async with db.session() as session:
            deleted = await NotificationService(session).cleanup_read(days)
    except SQLAlchemyError as e:
        logger.error("Notification cleanup failed: %s", e)
        return 0
    logger.info("Notification cleanup removed %d read notifications", deleted)
    return deleted


async def start_scheduler(db: Database) -> None:
    """Start the background task scheduler."""
    global _scheduler

    settings = get_settings()
    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        cleanup_notifications_job,
        trigger=IntervalTrigger(hours=settings.notification_cleanup_interval_hours),
        args=[db, settings.notification_retention_days],
        id="cleanup_notifications",
        name="Delete old read notifications",
        replace_existing=True,
    )

    _scheduler.start()
    logger.info("Background scheduler started")


async def stop_scheduler() -> None:
    """Stop the background task scheduler."""
    global _scheduler

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Background scheduler stopped")
