"""
Background job scheduler
APScheduler runs the periodic leaderboard snapshot refresh
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from gympro.core.config import settings
from gympro.services.leaderboard_service import scheduled_refresh

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[AsyncIOScheduler] = None


def init_scheduler():
    """Create and start the scheduler"""
    global scheduler

    if not settings.LEADERBOARD_REFRESH_ENABLED:
        logger.info("🏆 Leaderboard refresh job disabled")
        return

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        scheduled_refresh,
        trigger=IntervalTrigger(minutes=settings.LEADERBOARD_REFRESH_MINUTES),
        id="leaderboard_refresh",
        name="Leaderboard snapshot refresh",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(f"⏰ Scheduler started - leaderboard refresh every {settings.LEADERBOARD_REFRESH_MINUTES} min")


def shutdown_scheduler():
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ Scheduler stopped")
