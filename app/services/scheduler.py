"""Background scheduler that completes bookings once their hour is over."""
import logging
from datetime import datetime
from typing import Optional

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.services.data_cache import data_hooks
from app.services.data_service import data_service

logger = logging.getLogger(__name__)


class BookingCompletionScheduler:
    """Periodically moves finished ACTIVE bookings to COMPLETED."""

    def __init__(self):
        """Initialize the scheduler."""
        self.scheduler = AsyncIOScheduler()
        self.running = False
        self.timezone = pytz.timezone(settings.BOOKING_TIMEZONE)

    async def start(self):
        """Start the scheduler."""
        if self.running:
            logger.warning("Scheduler is already running")
            return

        logger.info("Starting booking completion scheduler")

        self.scheduler.add_job(
            self.complete_finished_bookings,
            IntervalTrigger(minutes=settings.COMPLETION_CHECK_MINUTES),
            id="booking_completion_job",
            name="Complete finished bookings",
            replace_existing=True,
        )

        self.scheduler.start()
        self.running = True
        logger.info("Booking completion scheduler started")

    async def stop(self):
        """Stop the scheduler."""
        if not self.running:
            return

        logger.info("Stopping booking completion scheduler")
        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Booking completion scheduler stopped")

    def local_now(self, now_utc: Optional[datetime] = None) -> datetime:
        """Current wall-clock time at the venues, as a naive datetime."""
        now_utc = now_utc or datetime.now(pytz.UTC)
        if now_utc.tzinfo is None:
            now_utc = pytz.UTC.localize(now_utc)
        return now_utc.astimezone(self.timezone).replace(tzinfo=None)

    async def complete_finished_bookings(self, now_utc: Optional[datetime] = None) -> int:
        """
        Run one completion pass.

        Args:
            now_utc: Reference time, defaults to now

        Returns:
            Number of bookings completed
        """
        now_local = self.local_now(now_utc)
        logger.debug(f"Running booking completion check at {now_local} ({self.timezone.zone})")

        async with AsyncSessionLocal() as db:
            try:
                completed = await data_service.complete_past_bookings(db, now_local)
            except Exception as e:
                logger.error(f"Error in booking completion check: {e}", exc_info=True)
                return 0

        if completed:
            logger.info(f"Completed {completed} finished bookings")
            data_hooks.invalidate_bookings()

        return completed


# Singleton instance
completion_scheduler = BookingCompletionScheduler()
