"""
Passenger forecast parsers for the in/out and route POST endpoints.

Both responses carry two tables: the first is an unrelated wait-time table, the
second holds the hourly series. Selection is positional and will break silently
if the site reorders its tables; tests pin it against a captured fixture.
"""
import logging
import re
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from bs4 import BeautifulSoup
from bs4.element import Tag
from icn_api.normalize import make_time_slot, parse_int
from icn_api.schemas.common import Terminal
from icn_api.schemas.forecast import (
    ArrivalCounts,
    CongestionForecast,
    DepartureCounts,
    ForecastSummary,
    HourlyInOutData,
    HourlyRouteData,
)

logger = logging.getLogger(__name__)

DATA_TABLE_INDEX = 1
MIN_INOUT_CELLS = 12
MIN_ROUTE_CELLS = 8
SLOT_SEPARATOR = "~"

_HOUR_RE = re.compile(r"(\d+)")

InOutRow = Tuple[DepartureCounts, ArrivalCounts]


def select_data_table(soup: BeautifulSoup) -> Optional[Tag]:
    tables = soup.find_all("table")
    if len(tables) <= DATA_TABLE_INDEX:
        logger.warning("Forecast data table missing (found %d tables)", len(tables))
        return None
    return tables[DATA_TABLE_INDEX]


def _cell_ints(cells: List[Tag]) -> List[int]:
    return [parse_int(cell.get_text(strip=True)) or 0 for cell in cells]


def _row_hour(cell: Tag) -> Optional[int]:
    match = _HOUR_RE.search(cell.get_text(strip=True))
    if not match:
        return None
    hour = int(match.group(1))
    return hour if 0 <= hour <= 23 else None


def parse_in_out_table(soup: BeautifulSoup) -> Dict[int, InOutRow]:
    """
    {hour: (departure, arrival)}. Row layout:
    hour | gate1 gate2 gate3 gate4 gate5/6 total | A/B C D E/F total
    """
    table = select_data_table(soup)
    rows: Dict[int, InOutRow] = {}
    if table is None:
        return rows

    for tr in table.find_all("tr"):
        cells = tr.find_all("td")
        if len(cells) < MIN_INOUT_CELLS:
            continue
        hour = _row_hour(cells[0])
        if hour is None or hour in rows:
            continue

        values = _cell_ints(cells[1:12])
        departure = DepartureCounts(
            gate1=values[0], gate2=values[1], gate3=values[2],
            gate4=values[3], gate56=values[4], total=values[5],
        )
        arrival = ArrivalCounts(
            ab=values[6], c=values[7], d=values[8], ef=values[9], total=values[10],
        )
        rows[hour] = (departure, arrival)

    return rows


def parse_route_table(soup: BeautifulSoup) -> List[HourlyRouteData]:
    table = select_data_table(soup)
    routes: Dict[int, HourlyRouteData] = {}
    if table is None:
        return []

    for tr in table.find_all("tr"):
        cells = tr.find_all("td")
        if len(cells) < MIN_ROUTE_CELLS:
            continue
        hour = _row_hour(cells[0])
        if hour is None or hour in routes:
            continue

        values = _cell_ints(cells[1:8])
        routes[hour] = HourlyRouteData(
            hour=hour,
            time_slot=make_time_slot(hour, SLOT_SEPARATOR),
            japan=values[0],
            china=values[1],
            southeast_asia=values[2],
            north_america=values[3],
            europe=values[4],
            oceania=values[5],
            other=values[6],
        )

    return [routes[hour] for hour in sorted(routes)]


def fill_in_out_hours(rows: Dict[int, InOutRow]) -> List[HourlyInOutData]:
    """Exactly 24 entries, hours 0..23; missing hours are zero rows."""
    filled = []
    for hour in range(24):
        departure, arrival = rows.get(hour, (DepartureCounts(), ArrivalCounts()))
        filled.append(HourlyInOutData(
            hour=hour,
            time_slot=make_time_slot(hour, SLOT_SEPARATOR),
            departure=departure,
            arrival=arrival,
        ))
    return filled


def summarize(in_out_data: List[HourlyInOutData]) -> ForecastSummary:
    """Totals and peaks over the full series. Ties go to the earliest hour."""
    peak_departure = in_out_data[0]
    peak_arrival = in_out_data[0]
    for item in in_out_data[1:]:
        if item.departure.total > peak_departure.departure.total:
            peak_departure = item
        if item.arrival.total > peak_arrival.arrival.total:
            peak_arrival = item

    return ForecastSummary(
        total_departure=sum(item.departure.total for item in in_out_data),
        total_arrival=sum(item.arrival.total for item in in_out_data),
        peak_departure_hour=peak_departure.hour,
        peak_departure_count=peak_departure.departure.total,
        peak_arrival_hour=peak_arrival.hour,
        peak_arrival_count=peak_arrival.arrival.total,
    )


def build_forecast(
    terminal: Terminal,
    date: str,
    in_out_rows: Dict[int, InOutRow],
    route_data: List[HourlyRouteData],
    timestamp: datetime,
) -> CongestionForecast:
    in_out_data = fill_in_out_hours(in_out_rows)
    return CongestionForecast(
        terminal=terminal,
        date=date,
        in_out_data=in_out_data,
        route_data=route_data,
        summary=summarize(in_out_data),
        timestamp=timestamp,
    )
