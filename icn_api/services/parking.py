"""
Parking read service.
"""
from typing import Optional
from icn_api.cache import TTLCache
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.parking import ParkingInfo
from icn_api.scrapers.base import Scraper
from icn_api.services.base import CachedScrapeService


def parking_cache_key(terminal: Terminal) -> str:
    return f"parking:{terminal.value}"


class ParkingService(CachedScrapeService[ParkingInfo]):
    domain = "parking"

    def __init__(self, scraper: Scraper[ParkingInfo], cache: TTLCache[ParkingInfo], ttl: float):
        super().__init__(cache, ttl)
        self.scraper = scraper

    async def get_parking_info(self, terminal: Terminal, refresh: bool = False) -> ApiResponse[ParkingInfo]:
        return await self.read(
            parking_cache_key(terminal),
            lambda: self.scraper.scrape(terminal),
            refresh,
        )

    async def refresh(self, terminal: Terminal) -> ParkingInfo:
        """Scrape and write through; errors propagate to the caller (the scheduler)."""
        return await self.scrape_and_store(
            parking_cache_key(terminal),
            lambda: self.scraper.scrape(terminal),
        )

    def get_cache_timestamp(self, terminal: Terminal) -> Optional[str]:
        return self.cache_timestamp(parking_cache_key(terminal))
