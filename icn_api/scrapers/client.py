"""
Retrying HTTP client for the airport website.
Wraps GET/POST calls with bounded attempts and linear backoff, and parses HTML with BeautifulSoup.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional
import httpx
from bs4 import BeautifulSoup
from icn_api.config import Settings, get_settings
from icn_api.exceptions import ScraperError

logger = logging.getLogger(__name__)


class FetchClient:
    """
    Shared fetch helper injected into every scraper.
    Raw transport errors never leave this class; exhaustion raises ScraperError.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
        }

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.airport_base_url,
                headers=self.headers,
                timeout=self.settings.request_timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _with_retry(self, label: str, source: str, call: Callable[[], Awaitable[Any]]) -> Any:
        attempts = self.settings.retry_count
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                logger.debug("[%s] %s (attempt %d)", source, label, attempt)
                return await call()
            except (httpx.HTTPError, httpx.StreamError, httpx.InvalidURL, ValueError) as e:
                last_error = e
                logger.warning("[%s] %s failed (attempt %d): %s", source, label, attempt, e)
                if attempt < attempts:
                    await self._sleep(self.settings.retry_delay * attempt)

        raise ScraperError(
            f"{label} failed after {attempts} attempts: {last_error}",
            source,
        ) from last_error

    async def fetch_page(self, path: str, source: str) -> BeautifulSoup:
        """GET an HTML page and parse it."""
        async def call() -> BeautifulSoup:
            response = await self._get_client().get(path)
            response.raise_for_status()
            return BeautifulSoup(response.text, "html.parser")

        return await self._with_retry(f"Fetch {path}", source, call)

    async def fetch_api(self, path: str, source: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET an AJAX endpoint and decode its JSON body."""
        async def call() -> Any:
            response = await self._get_client().get(
                path,
                params=params,
                headers={"X-Requested-With": "XMLHttpRequest", "Accept": "application/json"},
            )
            response.raise_for_status()
            return response.json()

        return await self._with_retry(f"API call {path}", source, call)

    async def post_form(self, path: str, data: Dict[str, str], source: str) -> BeautifulSoup:
        """POST form-encoded data and parse the HTML response (forecast endpoints)."""
        async def call() -> BeautifulSoup:
            response = await self._get_client().post(
                path,
                data=data,
                timeout=self.settings.forecast_timeout,
            )
            response.raise_for_status()
            return BeautifulSoup(response.text, "html.parser")

        return await self._with_retry(f"POST {path}", source, call)
