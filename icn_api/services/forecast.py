"""
Passenger forecast read service. Entries are keyed per terminal and date.
"""
from typing import Optional
from icn_api.cache import TTLCache
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.forecast import CongestionForecast
from icn_api.scrapers.forecast import ForecastScraper
from icn_api.services.base import CachedScrapeService

FORECAST_KEY_PREFIX = "forecast:"


def forecast_cache_key(terminal: Terminal, date: str) -> str:
    return f"{FORECAST_KEY_PREFIX}{terminal.value}:{date}"


class ForecastService(CachedScrapeService[CongestionForecast]):
    domain = "forecast"

    def __init__(self, scraper: ForecastScraper, cache: TTLCache[CongestionForecast], ttl: float):
        super().__init__(cache, ttl)
        self.scraper = scraper

    async def get_forecast(
        self,
        terminal: Terminal,
        date: str,
        refresh: bool = False,
    ) -> ApiResponse[CongestionForecast]:
        return await self.read(
            forecast_cache_key(terminal, date),
            lambda: self.scraper.scrape(terminal, date),
            refresh,
        )

    def clear(self, terminal: Optional[Terminal] = None) -> int:
        """Drop cached forecasts for one terminal (every date) or for all terminals."""
        prefix = FORECAST_KEY_PREFIX if terminal is None else f"{FORECAST_KEY_PREFIX}{terminal.value}:"
        return self.cache.invalidate_by_prefix(prefix)
