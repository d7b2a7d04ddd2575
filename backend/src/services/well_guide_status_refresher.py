"""
Daily well guide status refresh.

Statuses drift as time passes (an up-to-date patient becomes due in one
month without submitting anything), so this scheduler recomputes every
record once a day and schedules the one-shot reminders of the cycle.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore
from apscheduler.triggers.cron import CronTrigger  # type: ignore

from core.config import WELL_GUIDE_REFRESH_HOUR
from core.constants import WELL_GUIDE_REFRESH_MAX_INSTANCES
from core.database import get_db_context
from services.well_guide_service import WellGuideService
from utils.datetime_utils import UTC

logger = logging.getLogger(__name__)


class WellGuideStatusRefresher:
    """Scheduler that recomputes well guide statuses via a daily cron job."""

    def __init__(self, service: Optional[WellGuideService] = None):
        """
        Initialize the refresher.

        Note: Database sessions are created fresh for each run to avoid
        stale session issues. Do not pass a session here.
        """
        self.service = service or WellGuideService()
        self.scheduler = AsyncIOScheduler(timezone=UTC)
        self._is_started = False

    async def start_scheduler(self) -> None:
        """
        Start the background scheduler.

        This should be called during application startup.
        """
        if self._is_started:
            logger.warning("Well guide status refresher is already started")
            return

        self.scheduler.add_job(  # type: ignore
            self.refresh_statuses,
            CronTrigger(hour=WELL_GUIDE_REFRESH_HOUR, minute=0),
            id="refresh_well_guide_statuses",
            name="Refresh well guide statuses",
            max_instances=WELL_GUIDE_REFRESH_MAX_INSTANCES,
            replace_existing=True
        )

        self.scheduler.start()
        self._is_started = True
        logger.info(f"Well guide status refresher started (daily at {WELL_GUIDE_REFRESH_HOUR:02d}:00 UTC)")

    async def stop_scheduler(self) -> None:
        """
        Stop the background scheduler.

        This should be called during application shutdown.
        """
        if self._is_started:
            self.scheduler.shutdown(wait=True)
            self._is_started = False
            logger.info("Well guide status refresher stopped")

    async def refresh_statuses(self) -> None:
        """Recompute all statuses in a fresh database session."""
        try:
            with get_db_context() as db:
                logger.info("Refreshing well guide statuses...")
                self.service.refresh_statuses(db)
        except Exception as e:
            logger.exception(f"Error refreshing well guide statuses: {e}")


# Global refresher instance
_refresher: Optional[WellGuideStatusRefresher] = None


def get_well_guide_status_refresher() -> WellGuideStatusRefresher:
    """Get the global refresher instance."""
    global _refresher
    if _refresher is None:
        _refresher = WellGuideStatusRefresher()
    return _refresher


async def start_well_guide_status_refresher() -> None:
    """Start the global refresher. Called during application startup."""
    await get_well_guide_status_refresher().start_scheduler()


async def stop_well_guide_status_refresher() -> None:
    """Stop the global refresher. Called during application shutdown."""
    if _refresher:
        await _refresher.stop_scheduler()
