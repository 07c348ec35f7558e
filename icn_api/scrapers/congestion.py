"""
Congestion scraper.
Gate wait times come from the AJAX endpoint, falling back to the HTML page's table.
The hourly table always comes from the HTML page.
"""
import asyncio
import logging
from typing import Any, Dict
from icn_api.config import Settings
from icn_api.exceptions import ScraperError
from icn_api.parsers.congestion import (
    default_hourly_forecast,
    overall_level,
    parse_gate_data,
    parse_gate_table,
    parse_hourly_forecast,
)
from icn_api.schemas.common import Terminal, utcnow
from icn_api.schemas.congestion import TerminalCongestion
from icn_api.scrapers.client import FetchClient

logger = logging.getLogger(__name__)


class CongestionScraper:
    """Scraper[TerminalCongestion]."""

    def __init__(self, client: FetchClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def scrape(self, terminal: Terminal) -> TerminalCongestion:
        logger.info("Scraping congestion data for %s", terminal.value)
        source = type(self).__name__
        started = utcnow()

        api_result, page_result = await asyncio.gather(
            self.client.fetch_api(self.settings.congestion_api_url, source=source),
            self.client.fetch_page(self.settings.congestion_page_url, source=source),
            return_exceptions=True,
        )

        for result in (api_result, page_result):
            if isinstance(result, BaseException) and not isinstance(result, ScraperError):
                raise result

        if isinstance(api_result, ScraperError) and isinstance(page_result, ScraperError):
            raise ScraperError(
                f"Congestion sources unreachable for {terminal.value}: {api_result.message}; {page_result.message}",
                source,
            )

        if isinstance(api_result, ScraperError):
            logger.warning("Gate API failed, using page table: %s", api_result)
            payload: Dict[str, Any] = parse_gate_table(page_result)
        elif isinstance(api_result, dict):
            payload = api_result
        else:
            logger.warning("Unexpected gate API payload type: %s", type(api_result).__name__)
            payload = {}

        if isinstance(page_result, ScraperError):
            logger.warning("Congestion page failed, using placeholder forecast: %s", page_result)
            hourly_forecast = default_hourly_forecast()
        else:
            hourly_forecast = parse_hourly_forecast(page_result)

        gates = parse_gate_data(payload, terminal)
        level = overall_level(gates)
        logger.info("Congestion %s: %d gates, overall: %s", terminal.value, len(gates), level.value)

        return TerminalCongestion(
            terminal=terminal,
            timestamp=started,
            gates=gates,
            hourly_forecast=hourly_forecast,
            overall_level=level,
            last_updated=utcnow(),
        )
