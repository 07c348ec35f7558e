"""
Cache-or-scrape read policy shared by the domain services.

1. fresh cache entry (unless a refresh is forced)
2. scrape, write with the domain TTL
3. on scrape failure, the stale entry tagged STALE_DATA
4. otherwise a success=False envelope

Public reads never raise.
"""
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar
from icn_api.cache import TTLCache
from icn_api.exceptions import ErrorCode
from icn_api.schemas.common import ApiError, ApiResponse, utcnow

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CachedScrapeService(Generic[T]):
    domain = "data"

    def __init__(self, cache: TTLCache[T], ttl: float):
        self.cache = cache
        self.ttl = ttl

    def store(self, key: str, data: T) -> bool:
        """
        Write unless the cache already holds a newer scrape for the key.
        Returns True when the value was written.
        """
        existing = self.cache.get_with_meta(key)
        if existing is not None and existing.data.timestamp > data.timestamp:
            logger.debug("Skipping write for %s: cached scrape is newer", key)
            return False
        self.cache.set(key, data, self.ttl)
        return True

    async def scrape_and_store(self, key: str, scrape: Callable[[], Awaitable[T]]) -> T:
        data = await scrape()
        self.store(key, data)
        return data

    async def read(
        self,
        key: str,
        scrape: Callable[[], Awaitable[T]],
        refresh: bool = False,
    ) -> ApiResponse[T]:
        # has() leaves an expired entry in place for the stale fallback; get() would evict it.
        if not refresh and self.cache.has(key):
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit: %s", key)
                return ApiResponse(
                    success=True,
                    data=cached,
                    cached_at=self.cache.get_timestamp(key),
                    timestamp=utcnow(),
                )

        logger.info("Cache miss or refresh requested: %s", key)
        try:
            data = await self.scrape_and_store(key, scrape)
        except Exception as e:
            logger.error("Failed to fetch %s data for %s: %s", self.domain, key, e)
            return self.fallback(key)

        return ApiResponse(success=True, data=data, timestamp=utcnow())

    def fallback(self, key: str) -> ApiResponse[T]:
        stale = self.cache.get_with_meta(key)
        if stale is not None:
            logger.warning("Returning stale cache data: %s", key)
            return ApiResponse(
                success=True,
                data=stale.data,
                cached_at=stale.created_at,
                error=ApiError(
                    code=ErrorCode.STALE_DATA,
                    message="Using cached data due to fetch error",
                ),
                timestamp=utcnow(),
            )

        return ApiResponse(
            success=False,
            data=None,
            error=ApiError(
                code=ErrorCode.SCRAPER_ERROR,
                message=f"Failed to fetch {self.domain} data",
            ),
            timestamp=utcnow(),
        )

    def cache_timestamp(self, key: str) -> Optional[str]:
        created = self.cache.get_timestamp(key)
        return created.isoformat() if created else None
