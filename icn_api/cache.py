"""
In-memory key/value cache with per-entry TTL.
Expiry is lazy: entries are evicted when read after expiry or when explicitly cleared.
"""
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float
    expires_at: float

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


class TTLCache(Generic[T]):
    """Plain keyed store; the last writer for a key wins."""

    def __init__(self, default_ttl: float = 60.0, clock: Callable[[], float] = time.time):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    def set(self, key: str, data: T, ttl: Optional[float] = None) -> None:
        now = self._clock()
        actual_ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(data=data, timestamp=now, expires_at=now + actual_ttl)

    def get(self, key: str) -> Optional[T]:
        """Fresh value or None. An expired entry is evicted on read."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.data

    def get_with_meta(self, key: str) -> Optional[CacheEntry[T]]:
        """
        Entry regardless of freshness.
        Only the stale-on-error fallback should read through here.
        """
        return self._entries.get(key)

    def get_timestamp(self, key: str) -> Optional[datetime]:
        entry = self._entries.get(key)
        return entry.created_at if entry else None

    def has(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() <= entry.expires_at

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_by_prefix(self, prefix: str) -> int:
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
