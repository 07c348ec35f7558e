"""
Pydantic schemas for parking occupancy records.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import ConfigDict
from icn_api.schemas.common import ApiModel, ParkingStatus, ParkingType, Terminal


class ParkingFloor(ApiModel):
    """One floor of a short-term parking building."""
    model_config = ConfigDict(frozen=True)

    floor_id: str
    floor_name: str
    status: ParkingStatus
    available_spaces: Optional[int] = None
    raw_text: str


class ParkingTower(ApiModel):
    """One long-term parking tower or lot."""
    model_config = ConfigDict(frozen=True)

    tower_id: str
    tower_name: str
    status: ParkingStatus
    available_spaces: Optional[int] = None
    raw_text: str


class ShortTermParking(ApiModel):
    model_config = ConfigDict(frozen=True)

    terminal: Terminal
    type: ParkingType = ParkingType.SHORT_TERM
    floors: List[ParkingFloor]
    total_available: int
    has_full: bool
    last_updated: datetime


class LongTermParking(ApiModel):
    """Long-term parking. `unavailable` marks a terminal without real-time data."""
    model_config = ConfigDict(frozen=True)

    terminal: Terminal
    type: ParkingType = ParkingType.LONG_TERM
    towers: Optional[List[ParkingTower]] = None
    floors: Optional[List[ParkingFloor]] = None
    total_available: int = 0
    has_full: bool = False
    last_updated: datetime
    unavailable: bool = False


class ParkingInfo(ApiModel):
    model_config = ConfigDict(frozen=True)

    terminal: Terminal
    short_term: ShortTermParking
    long_term: LongTermParking
    timestamp: datetime
    peak_hours_warning: bool
