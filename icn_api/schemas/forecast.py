"""
Pydantic schemas for the hourly passenger forecast.
"""
from datetime import datetime
from typing import List
from pydantic import ConfigDict
from icn_api.schemas.common import ApiModel, Terminal


class DepartureCounts(ApiModel):
    """Departing passengers per departure hall gate group."""
    model_config = ConfigDict(frozen=True)

    gate1: int = 0
    gate2: int = 0
    gate3: int = 0
    gate4: int = 0
    gate56: int = 0
    total: int = 0


class ArrivalCounts(ApiModel):
    """Arriving passengers per arrival hall group."""
    model_config = ConfigDict(frozen=True)

    ab: int = 0
    c: int = 0
    d: int = 0
    ef: int = 0
    total: int = 0


class HourlyInOutData(ApiModel):
    model_config = ConfigDict(frozen=True)

    hour: int
    time_slot: str
    departure: DepartureCounts
    arrival: ArrivalCounts


class HourlyRouteData(ApiModel):
    model_config = ConfigDict(frozen=True)

    hour: int
    time_slot: str
    japan: int = 0
    china: int = 0
    southeast_asia: int = 0
    north_america: int = 0
    europe: int = 0
    oceania: int = 0
    other: int = 0


class ForecastSummary(ApiModel):
    model_config = ConfigDict(frozen=True)

    total_departure: int
    total_arrival: int
    peak_departure_hour: int
    peak_departure_count: int
    peak_arrival_hour: int
    peak_arrival_count: int


class CongestionForecast(ApiModel):
    model_config = ConfigDict(frozen=True)

    terminal: Terminal
    date: str  # YYYYMMDD, site-local calendar
    in_out_data: List[HourlyInOutData]
    route_data: List[HourlyRouteData]
    summary: ForecastSummary
    timestamp: datetime
