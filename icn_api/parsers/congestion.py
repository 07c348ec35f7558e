"""
Congestion parsers: departure-gate wait times and the hourly congestion table.
"""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional
from bs4 import BeautifulSoup
from icn_api.normalize import (
    color_class_to_level,
    make_time_slot,
    parse_int,
    wait_time_to_level,
    worst_level,
)
from icn_api.schemas.common import CongestionLevel, Terminal
from icn_api.schemas.congestion import GateInfo, HourlyCongestion

logger = logging.getLogger(__name__)

GATE_IDS = {
    Terminal.T1: ("DG2", "DG3", "DG4", "DG5"),
    Terminal.T2: ("DG1", "DG2"),
}

# Tables holding gate wait times rather than hourly figures
GATE_TABLE_SELECTOR = "#userEx tbody tr, .gate-info tr"

_HOUR_RE = re.compile(r"(\d{1,2})")


def gate_key_variants(gate_id: str) -> List[str]:
    """Key spellings seen in the AJAX payload over time."""
    return [f"{gate_id}_E", gate_id, gate_id.lower()]


def _coerce_minutes(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return parse_int(str(value))


def parse_gate_data(payload: Mapping[str, Any], terminal: Terminal) -> List[GateInfo]:
    """
    Gate list for a terminal from the AJAX payload (or the page-table fallback).
    A gate absent under every key variant keeps wait_time_minutes=None.
    """
    gates: List[GateInfo] = []
    for gate_id in GATE_IDS[terminal]:
        wait_time = None
        for key in gate_key_variants(gate_id):
            if key in payload:
                wait_time = _coerce_minutes(payload[key])
                break

        gates.append(GateInfo(
            gate_id=gate_id,
            gate_name=f"출국장 {gate_id.replace('DG', '')}",
            wait_time_minutes=wait_time,
            congestion_level=wait_time_to_level(wait_time),
        ))
    return gates


def parse_gate_table(soup: BeautifulSoup) -> Dict[str, int]:
    """Fallback: {gate label: minutes} from the wait-time table on the HTML page."""
    data: Dict[str, int] = {}
    for row in soup.select(GATE_TABLE_SELECTOR):
        cells = row.find_all("td")
        if not cells:
            continue
        gate_id = cells[0].get_text(strip=True)
        wait_text = cells[-1].get_text(strip=True)
        digits = re.sub(r"[^0-9]", "", wait_text)
        if gate_id and digits:
            data[gate_id] = int(digits)
    return data


def overall_level(gates: List[GateInfo]) -> CongestionLevel:
    return worst_level(gate.congestion_level for gate in gates)


def default_hourly_forecast() -> List[HourlyCongestion]:
    return [
        HourlyCongestion(
            hour=hour,
            time_slot=make_time_slot(hour),
            predicted_count=0,
            congestion_level=CongestionLevel.NORMAL,
        )
        for hour in range(24)
    ]


def parse_hourly_forecast(soup: BeautifulSoup) -> List[HourlyCongestion]:
    """
    Hourly rows from every table on the page: hour from the first cell, count from
    the second, level from the row's color class. First occurrence per hour wins.
    An empty result becomes the flat 24-hour placeholder.
    """
    gate_rows = {id(row) for row in soup.select(GATE_TABLE_SELECTOR)}
    by_hour: Dict[int, HourlyCongestion] = {}

    for row in soup.select("table tr"):
        if id(row) in gate_rows:
            continue
        cells = row.find_all(["td", "th"])
        if len(cells) < 2:
            continue

        hour_match = _HOUR_RE.search(cells[0].get_text(strip=True))
        if not hour_match:
            continue
        hour = int(hour_match.group(1))
        if hour > 23 or hour in by_hour:
            continue

        count = parse_int(cells[1].get_text(strip=True)) or 0
        color_class = " ".join(row.get("class") or [])
        by_hour[hour] = HourlyCongestion(
            hour=hour,
            time_slot=make_time_slot(hour),
            predicted_count=count,
            congestion_level=color_class_to_level(color_class),
        )

    if not by_hour:
        logger.warning("Hourly congestion table not found, using placeholder")
        return default_hourly_forecast()

    return [by_hour[hour] for hour in sorted(by_hour)]
