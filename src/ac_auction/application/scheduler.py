"""AuctionScheduler: periodic resolution sweep driven by APScheduler.

Owned by the application (created in the FastAPI lifespan, kept on
app.state). The sweep job fires immediately on start and then every
interval. With ``max_instances=1`` a tick that arrives while a sweep is still
running is dropped, so sweeps never overlap. A failing sweep is logged and
recorded in ``status()``; later ticks keep firing.
"""

import logging
from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.ac_auction.application.resolution_service import AuctionResolutionService
from src.ac_auction.application.schemas import SchedulerStatus
from src.ac_auction.domain.models import SweepResult
from src.ac_common.datetime_utils import utc_now

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "auction-resolution-sweep"


class AuctionScheduler:
    def __init__(self, resolution_service: AuctionResolutionService | None = None) -> None:
        self._resolution = resolution_service or AuctionResolutionService()
        self._scheduler: AsyncIOScheduler | None = None
        self._interval_minutes: float | None = None
        self._last_run_at: datetime | None = None
        self._last_error: str | None = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self, interval_minutes: float) -> None:
        """Must be called from inside the running event loop."""
        if self.is_running:
            logger.info("Auction scheduler already running")
            return
        if interval_minutes <= 0:
            raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

        scheduler = AsyncIOScheduler(timezone=UTC)
        scheduler.add_job(
            self.run_once,
            IntervalTrigger(seconds=interval_minutes * 60, timezone=UTC),
            id=SWEEP_JOB_ID,
            next_run_time=utc_now(),
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        self._interval_minutes = interval_minutes
        logger.info("Auction scheduler started: every %s minute(s)", interval_minutes)

    async def stop(self) -> None:
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is None:
            return
        if scheduler.running:
            scheduler.shutdown(wait=False)
        logger.info("Auction scheduler stopped")

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            is_running=self.is_running,
            interval_minutes=self._interval_minutes,
            last_run_at=self._last_run_at,
            last_error=self._last_error,
        )

    async def run_once(self) -> SweepResult | None:
        """One sweep; an exception is logged and recorded, never raised."""
        self._last_run_at = utc_now()
        try:
            result = await self._resolution.process_ended_auctions()
        except Exception as exc:
            self._last_error = f"{type(exc).__name__}: {exc}"
            logger.exception("Auction sweep failed")
            return None
        self._last_error = None
        return result
