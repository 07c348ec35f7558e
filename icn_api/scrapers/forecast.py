"""
Passenger forecast scraper.
Issues the in/out and route POSTs independently; one failing still yields a partial forecast.
"""
import asyncio
import logging
from typing import Optional
from icn_api.config import Settings
from icn_api.exceptions import ScraperError
from icn_api.normalize import today_yyyymmdd
from icn_api.parsers.forecast import build_forecast, parse_in_out_table, parse_route_table
from icn_api.schemas.common import Terminal, utcnow
from icn_api.schemas.forecast import CongestionForecast
from icn_api.scrapers.client import FetchClient

logger = logging.getLogger(__name__)


class ForecastScraper:
    """Scraper[CongestionForecast]."""

    def __init__(self, client: FetchClient, settings: Settings):
        self.client = client
        self.settings = settings

    def form_data(self, terminal: Terminal, date: str) -> dict:
        return {
            "selTm": terminal.value,
            "pday": date,
            "layout": self.settings.forecast_layout_id,
        }

    async def scrape(self, terminal: Terminal, date: Optional[str] = None) -> CongestionForecast:
        target_date = date or today_yyyymmdd(self.settings.site_timezone)
        logger.info("Scraping forecast for %s, date: %s", terminal.value, target_date)
        source = type(self).__name__
        data = self.form_data(terminal, target_date)
        started = utcnow()

        in_out_result, route_result = await asyncio.gather(
            self.client.post_form(self.settings.forecast_inout_url, data, source=source),
            self.client.post_form(self.settings.forecast_route_url, data, source=source),
            return_exceptions=True,
        )

        for result in (in_out_result, route_result):
            if isinstance(result, BaseException) and not isinstance(result, ScraperError):
                raise result

        if isinstance(in_out_result, ScraperError) and isinstance(route_result, ScraperError):
            raise ScraperError(
                f"Forecast sources unreachable for {terminal.value}/{target_date}",
                source,
            )

        if isinstance(in_out_result, ScraperError):
            logger.error("Failed to fetch in/out forecast: %s", in_out_result)
            in_out_rows = {}
        else:
            in_out_rows = parse_in_out_table(in_out_result)

        if isinstance(route_result, ScraperError):
            logger.error("Failed to fetch route forecast: %s", route_result)
            route_data = []
        else:
            route_data = parse_route_table(route_result)

        return build_forecast(terminal, target_date, in_out_rows, route_data, started)
