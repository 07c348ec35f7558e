"""
Parking scraper.
Fetches the short-term and long-term pages for a terminal concurrently.
"""
import asyncio
import logging
from typing import List, Optional, Union
from icn_api.config import Settings
from icn_api.exceptions import ScraperError
from icn_api.normalize import is_peak_hours, site_now
from icn_api.parsers.parking import (
    parse_last_updated,
    parse_long_term_towers,
    parse_short_term_floors,
)
from icn_api.schemas.common import ParkingStatus, Terminal, utcnow
from icn_api.schemas.parking import (
    LongTermParking,
    ParkingFloor,
    ParkingInfo,
    ParkingTower,
    ShortTermParking,
)
from icn_api.scrapers.client import FetchClient

logger = logging.getLogger(__name__)


def _totals(items: List[Union[ParkingFloor, ParkingTower]]):
    total_available = sum(item.available_spaces or 0 for item in items)
    has_full = any(item.status == ParkingStatus.FULL for item in items)
    return total_available, has_full


class ParkingScraper:
    """Scraper[ParkingInfo]."""

    def __init__(self, client: FetchClient, settings: Settings):
        self.client = client
        self.settings = settings

    def short_term_url(self, terminal: Terminal) -> str:
        if terminal == Terminal.T1:
            return self.settings.parking_t1_short_term_url
        return self.settings.parking_t2_short_term_url

    def long_term_url(self, terminal: Terminal) -> Optional[str]:
        if terminal == Terminal.T1:
            return self.settings.parking_t1_long_term_url
        return self.settings.parking_t2_long_term_url

    async def scrape(self, terminal: Terminal) -> ParkingInfo:
        """
        Each section degrades to an empty default on its own. The scrape only
        fails when no section could be fetched at all.
        """
        logger.info("Scraping parking data for %s", terminal.value)
        # Record time is the scrape start, so a slow scrape never outranks a later one.
        started = utcnow()

        short_result, long_result = await asyncio.gather(
            self.scrape_short_term(terminal),
            self.scrape_long_term(terminal),
            return_exceptions=True,
        )

        for result in (short_result, long_result):
            if isinstance(result, BaseException) and not isinstance(result, ScraperError):
                raise result

        long_unavailable = isinstance(long_result, LongTermParking) and long_result.unavailable
        if isinstance(short_result, ScraperError) and (isinstance(long_result, ScraperError) or long_unavailable):
            raise short_result

        if isinstance(short_result, ScraperError):
            logger.error("Failed to scrape short-term parking %s: %s", terminal.value, short_result)
            short_result = self.default_short_term(terminal)
        if isinstance(long_result, ScraperError):
            logger.error("Failed to scrape long-term parking %s: %s", terminal.value, long_result)
            long_result = self.default_long_term(terminal)

        return ParkingInfo(
            terminal=terminal,
            short_term=short_result,
            long_term=long_result,
            timestamp=started,
            peak_hours_warning=is_peak_hours(site_now(self.settings.site_timezone)),
        )

    async def scrape_short_term(self, terminal: Terminal) -> ShortTermParking:
        soup = await self.client.fetch_page(self.short_term_url(terminal), source=type(self).__name__)
        floors = parse_short_term_floors(soup, terminal)
        total_available, has_full = _totals(floors)

        logger.info(
            "Short-term parking %s: %d floors, %d available",
            terminal.value, len(floors), total_available,
        )
        return ShortTermParking(
            terminal=terminal,
            floors=floors,
            total_available=total_available,
            has_full=has_full,
            last_updated=parse_last_updated(soup, self.settings.site_timezone) or utcnow(),
        )

    async def scrape_long_term(self, terminal: Terminal) -> LongTermParking:
        url = self.long_term_url(terminal)
        if not url:
            logger.info("Long-term parking %s: no real-time data published", terminal.value)
            return LongTermParking(terminal=terminal, last_updated=utcnow(), unavailable=True)

        soup = await self.client.fetch_page(url, source=type(self).__name__)
        towers = parse_long_term_towers(soup, terminal)
        total_available, has_full = _totals(towers)

        logger.info(
            "Long-term parking %s: %d towers, %d available",
            terminal.value, len(towers), total_available,
        )
        return LongTermParking(
            terminal=terminal,
            towers=towers,
            total_available=total_available,
            has_full=has_full,
            last_updated=parse_last_updated(soup, self.settings.site_timezone) or utcnow(),
        )

    def default_short_term(self, terminal: Terminal) -> ShortTermParking:
        return ShortTermParking(
            terminal=terminal,
            floors=[],
            total_available=0,
            has_full=False,
            last_updated=utcnow(),
        )

    def default_long_term(self, terminal: Terminal) -> LongTermParking:
        return LongTermParking(terminal=terminal, towers=[], last_updated=utcnow())
