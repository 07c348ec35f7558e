"""
Scraper interface. Implementations compose a FetchClient rather than inherit fetch logic.
"""
from typing import Protocol, TypeVar
from icn_api.schemas.common import Terminal

T_co = TypeVar("T_co", covariant=True)


class Scraper(Protocol[T_co]):
    async def scrape(self, terminal: Terminal) -> T_co:
        """Fetch and parse one terminal's record. Raises ScraperError when upstream is unreachable."""
        ...
