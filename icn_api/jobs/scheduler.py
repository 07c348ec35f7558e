"""
Recurring scrape scheduler.

Three loops run on the event loop once the startup backfill has finished:
parking every 30s, an extra parking pass every 15s during peak hours, and
congestion every 60s. An hourly check drops cached forecasts once the airport
calendar day rolls over. Each tick scrapes all terminals concurrently; a failing
terminal is logged and does not affect the others.
"""
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Set
from icn_api.config import Settings, get_settings
from icn_api.normalize import is_peak_hours, site_now
from icn_api.schemas.common import Terminal
from icn_api.services.congestion import CongestionService
from icn_api.services.forecast import ForecastService
from icn_api.services.parking import ParkingService

logger = logging.getLogger(__name__)

PARKING_JOB = "parking"
CONGESTION_JOB = "congestion"
FORECAST_JOB = "forecast"


class ScrapeScheduler:
    """Owns invocation timing only; cache writes go through the services."""

    def __init__(
        self,
        parking_service: ParkingService,
        congestion_service: CongestionService,
        settings: Optional[Settings] = None,
        now: Optional[Callable[[], datetime]] = None,
        forecast_service: Optional[ForecastService] = None,
    ):
        self.parking_service = parking_service
        self.congestion_service = congestion_service
        self.forecast_service = forecast_service
        self.settings = settings or get_settings()
        self._now = now or (lambda: site_now(self.settings.site_timezone))
        self._running = False
        self._tasks: List[asyncio.Task] = []
        self._active_jobs: Set[str] = set()
        self._forecast_day: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Schedule backfill and the recurring loops. Ignored when already running."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._running = True
        self._forecast_day = self._now().strftime("%Y%m%d")
        logger.info("Starting scrape scheduler")
        self._tasks = [asyncio.create_task(self._run(), name="scrape-scheduler")]

    async def stop(self) -> None:
        """Cancel pending ticks and wait for the loops to exit."""
        if not self._running:
            return
        self._running = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Scheduler stopped")

    async def _run(self) -> None:
        logger.info("Loading initial data...")
        await self.load_initial_data()

        loops = [
            self._every(self.settings.parking_interval, PARKING_JOB, self.scrape_parking_all),
            self._every(self.settings.peak_parking_interval, PARKING_JOB, self.scrape_parking_if_peak),
            self._every(self.settings.congestion_interval, CONGESTION_JOB, self.scrape_congestion_all),
        ]
        if self.forecast_service is not None:
            loops.append(
                self._every(self.settings.forecast_prune_interval, FORECAST_JOB, self.prune_forecasts)
            )
        await asyncio.gather(*loops)

    async def _every(self, interval: float, job: str, action: Callable[[], Awaitable[None]]) -> None:
        while True:
            await asyncio.sleep(interval)
            await self.run_guarded(job, action)

    async def run_guarded(self, job: str, action: Callable[[], Awaitable[None]]) -> bool:
        """
        Run `action` unless another tick of the same job is still in flight.
        Returns False when the tick was skipped.
        """
        if job in self._active_jobs:
            logger.debug("Skipping %s tick: previous run still in progress", job)
            return False

        self._active_jobs.add(job)
        try:
            await action()
        finally:
            self._active_jobs.discard(job)
        return True

    async def load_initial_data(self) -> None:
        await asyncio.gather(self.scrape_parking_all(), self.scrape_congestion_all())
        logger.info("Initial data loaded")

    async def scrape_parking_all(self) -> None:
        await asyncio.gather(*(
            self._refresh_one("Parking", self.parking_service.refresh, terminal)
            for terminal in Terminal
        ))

    async def scrape_parking_if_peak(self) -> None:
        if is_peak_hours(self._now()):
            await self.scrape_parking_all()

    async def scrape_congestion_all(self) -> None:
        await asyncio.gather(*(
            self._refresh_one("Congestion", self.congestion_service.refresh, terminal)
            for terminal in Terminal
        ))

    async def _refresh_one(
        self,
        label: str,
        refresh: Callable[[Terminal], Awaitable[object]],
        terminal: Terminal,
    ) -> None:
        try:
            await refresh(terminal)
            logger.debug("%s cache updated: %s", label, terminal.value)
        except Exception:
            logger.exception("%s scrape failed: %s", label, terminal.value)

    async def prune_forecasts(self) -> None:
        """Drop every cached forecast once the airport calendar day has changed."""
        if self.forecast_service is None:
            return
        today = self._now().strftime("%Y%m%d")
        if self._forecast_day is not None and today != self._forecast_day:
            dropped = self.forecast_service.clear()
            logger.info("New forecast day %s: dropped %d cached forecasts", today, dropped)
        self._forecast_day = today
