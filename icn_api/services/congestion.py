"""
Congestion read service.
"""
from typing import Optional
from icn_api.cache import TTLCache
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.congestion import TerminalCongestion
from icn_api.scrapers.base import Scraper
from icn_api.services.base import CachedScrapeService


def congestion_cache_key(terminal: Terminal) -> str:
    return f"congestion:{terminal.value}"


class CongestionService(CachedScrapeService[TerminalCongestion]):
    domain = "congestion"

    def __init__(self, scraper: Scraper[TerminalCongestion], cache: TTLCache[TerminalCongestion], ttl: float):
        super().__init__(cache, ttl)
        self.scraper = scraper

    async def get_congestion(self, terminal: Terminal, refresh: bool = False) -> ApiResponse[TerminalCongestion]:
        return await self.read(
            congestion_cache_key(terminal),
            lambda: self.scraper.scrape(terminal),
            refresh,
        )

    async def refresh(self, terminal: Terminal) -> TerminalCongestion:
        return await self.scrape_and_store(
            congestion_cache_key(terminal),
            lambda: self.scraper.scrape(terminal),
        )

    def get_cache_timestamp(self, terminal: Terminal) -> Optional[str]:
        return self.cache_timestamp(congestion_cache_key(terminal))
