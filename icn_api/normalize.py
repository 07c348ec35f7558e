"""
Text-to-domain normalization helpers.
Classify scraped strings into parking status, congestion levels and time slots.
"""
import re
from datetime import datetime
from typing import Iterable, NamedTuple, Optional
from zoneinfo import ZoneInfo
from icn_api.schemas.common import CongestionLevel, ParkingStatus

# Canonical ordering; ties on the worst level resolve through this table.
LEVEL_ORDER = {
    CongestionLevel.SMOOTH: 1,
    CongestionLevel.NORMAL: 2,
    CongestionLevel.CONGESTED: 3,
    CongestionLevel.VERY_CONGESTED: 4,
}

COLOR_CLASS_LEVELS = (
    ("color1", CongestionLevel.SMOOTH),
    ("color2", CongestionLevel.NORMAL),
    ("color3", CongestionLevel.CONGESTED),
    ("color4", CongestionLevel.VERY_CONGESTED),
)

# Minutes of day, both bounds inclusive.
PEAK_WINDOWS = ((5 * 60, 8 * 60), (16 * 60, 19 * 60))

_SPACES_RE = re.compile(r"(\d+)대\s*가능")
_LEADING_INT_RE = re.compile(r"^\s*(-?\d+)")


class Availability(NamedTuple):
    status: ParkingStatus
    spaces: Optional[int]


def parse_availability_text(text: str) -> Availability:
    """
    "만차" -> FULL, "179대 가능" -> AVAILABLE(179), anything else -> UNKNOWN.
    """
    trimmed = text.strip()
    if "만차" in trimmed:
        return Availability(ParkingStatus.FULL, None)

    match = _SPACES_RE.search(trimmed)
    if match:
        return Availability(ParkingStatus.AVAILABLE, int(match.group(1)))

    return Availability(ParkingStatus.UNKNOWN, None)


def wait_time_to_level(minutes: Optional[int]) -> CongestionLevel:
    """Gate wait in minutes to a level; an unknown wait counts as NORMAL."""
    if minutes is None:
        return CongestionLevel.NORMAL
    if minutes <= 10:
        return CongestionLevel.SMOOTH
    if minutes <= 20:
        return CongestionLevel.NORMAL
    if minutes <= 30:
        return CongestionLevel.CONGESTED
    return CongestionLevel.VERY_CONGESTED


def color_class_to_level(color_class: str) -> CongestionLevel:
    """Level from the `colorN` CSS class on an hourly table row."""
    for marker, level in COLOR_CLASS_LEVELS:
        if marker in color_class:
            return level
    return CongestionLevel.NORMAL


def worst_level(levels: Iterable[CongestionLevel]) -> CongestionLevel:
    """Highest-ordinal level, looked up in LEVEL_ORDER. Empty input is NORMAL."""
    orders = [LEVEL_ORDER[level] for level in levels]
    if not orders:
        return CongestionLevel.NORMAL
    max_order = max(orders)
    for level, order in LEVEL_ORDER.items():
        if order == max_order:
            return level
    return CongestionLevel.NORMAL


def is_peak_hours(moment: datetime) -> bool:
    """True inside 05:00-08:00 or 16:00-19:00 on the clock of `moment`."""
    minute_of_day = moment.hour * 60 + moment.minute
    return any(start <= minute_of_day <= end for start, end in PEAK_WINDOWS)


def parse_int(text: str) -> Optional[int]:
    """Leading integer of `text` ignoring thousands separators, like "1,234명" -> 1234."""
    match = _LEADING_INT_RE.match(text.replace(",", ""))
    return int(match.group(1)) if match else None


def make_time_slot(hour: int, separator: str = "-") -> str:
    """Slot label such as 07:00-08:00 for an hour. Hour 23 wraps to 00:00."""
    return f"{hour:02d}:00{separator}{(hour + 1) % 24:02d}:00"


def site_now(tz_name: str = "Asia/Seoul") -> datetime:
    """Current wall-clock time at the airport."""
    return datetime.now(ZoneInfo(tz_name))


def today_yyyymmdd(tz_name: str = "Asia/Seoul") -> str:
    """Today's date on the airport calendar, as the forecast endpoints expect it."""
    return site_now(tz_name).strftime("%Y%m%d")


def is_valid_yyyymmdd(value: str) -> bool:
    """Eight digits that form a real calendar date."""
    if not re.fullmatch(r"\d{8}", value):
        return False
    try:
        datetime.strptime(value, "%Y%m%d")
    except ValueError:
        return False
    return True
