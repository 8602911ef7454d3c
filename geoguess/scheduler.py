"""
Deferred round transitions using APScheduler.

Multi-round modes pause briefly after a round ends before starting the
next. There is a single slot: scheduling a transition replaces any pending
one, and starting a round or run by hand cancels it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)

NEXT_ROUND_JOB_ID = "geoguess_next_round"


async def _fire(callback: Callable[[], None]) -> None:
    # Coroutine jobs run on the event loop itself, not in a worker thread
    callback()


class RoundScheduler:
    """Single-slot, cancellable delayed call on the running asyncio loop."""

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self._scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)

    def schedule(self, callback: Callable[[], None], delay_sec: float) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
        run_date = datetime.now(timezone.utc) + timedelta(seconds=max(0.0, delay_sec))
        self._scheduler.add_job(
            _fire,
            trigger=DateTrigger(run_date=run_date),
            args=[callback],
            id=NEXT_ROUND_JOB_ID,
            name="Next round",
            replace_existing=True,
        )
        logger.debug("Next round scheduled in %.2fs", delay_sec)

    def cancel(self) -> bool:
        """Drop the pending transition; True if there was one."""
        try:
            self._scheduler.remove_job(NEXT_ROUND_JOB_ID)
        except JobLookupError:
            return False
        logger.debug("Pending round transition cancelled")
        return True

    @property
    def pending(self) -> bool:
        return self._scheduler.get_job(NEXT_ROUND_JOB_ID) is not None

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
