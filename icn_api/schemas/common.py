"""
Shared enums and the response envelope used by every endpoint.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class Terminal(str, Enum):
    T1 = "T1"
    T2 = "T2"


TERMINAL_NAMES = {
    Terminal.T1: {"en": "Terminal 1", "ko": "제1여객터미널"},
    Terminal.T2: {"en": "Terminal 2", "ko": "제2여객터미널"},
}


class CongestionLevel(str, Enum):
    SMOOTH = "SMOOTH"
    NORMAL = "NORMAL"
    CONGESTED = "CONGESTED"
    VERY_CONGESTED = "VERY_CONGESTED"


class ParkingStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    FULL = "FULL"
    UNKNOWN = "UNKNOWN"


class ParkingType(str, Enum):
    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============ Envelope ============

class ApiModel(BaseModel):
    """Base for everything on the wire: camelCase JSON keys, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiError(ApiModel):
    """Error detail attached to an envelope."""
    code: str
    message: str


class ApiResponse(ApiModel, Generic[T]):
    """Uniform response envelope: {success, data, error?, cachedAt?, timestamp}."""
    success: bool
    data: Optional[T] = None
    error: Optional[ApiError] = None
    cached_at: Optional[datetime] = None
    timestamp: datetime

    def map_data(self, fn: Callable[[Any], Any]) -> "ApiResponse[Any]":
        """Project the payload (e.g. parking -> short_term) keeping the envelope metadata."""
        if not self.success or self.data is None:
            return self
        return ApiResponse[Any](
            success=self.success,
            data=fn(self.data),
            error=self.error,
            cached_at=self.cached_at,
            timestamp=self.timestamp,
        )
