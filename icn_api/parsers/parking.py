"""
Parking page parser.

The site renders occupancy as free text ("지하 1층 179대 가능", "장기주차장 P1 만차").
Extraction runs an ordered cascade of regex rules over the page text. Rule order is
load-bearing: a looser rule evaluated later must not re-add an id that a more
specific rule already captured, which the per-result `seen` set enforces.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo
from bs4 import BeautifulSoup
from icn_api.normalize import parse_availability_text
from icn_api.schemas.common import Terminal
from icn_api.schemas.parking import ParkingFloor, ParkingTower

logger = logging.getLogger(__name__)

_STATUS = r"(만차|\d+대\s*가능)"


@dataclass(frozen=True)
class FloorRule:
    rule_id: str
    pattern: re.Pattern
    prefix: str
    fixed_floor: Optional[str] = None


@dataclass(frozen=True)
class TowerRule:
    tower_id: str
    tower_name: str
    pattern: re.Pattern
    excluded_terminals: Tuple[Terminal, ...] = ()


def _rx(source: str) -> re.Pattern:
    return re.compile(source, re.IGNORECASE)


# Most specific first: basement/ground wording before bare B/F labels.
FLOOR_RULES: Tuple[FloorRule, ...] = (
    FloorRule("B", _rx(r"지하\s*(\d+)층[^\d]*?" + _STATUS), "B"),
    FloorRule("GROUND", _rx(r"지상\s*(\d+)층[^\d]*?" + _STATUS), ""),
    FloorRule("M", _rx(r"M\s*층[^\d]*?" + _STATUS), "M", fixed_floor="1"),
    FloorRule("M_NUM", _rx(r"M(\d+)층?[^\d]*?" + _STATUS), "M"),
    FloorRule("B_SHORT", _rx(r"B(\d+)층?[^\d]*?" + _STATUS), "B"),
    FloorRule("F", _rx(r"(\d+)F층?[^\d]*?" + _STATUS), ""),
)

# Named towers before the generic "장기주차장" rule. The bare P1/P2 tower rules
# would also match inside "장기주차장 P1" on T1 pages, so they are T1-ineligible.
TOWER_RULES: Tuple[TowerRule, ...] = (
    TowerRule("LONG_P1", "장기주차장 P1", _rx(r"장기주차장\s*P1[^\d]*?" + _STATUS)),
    TowerRule("LONG_P2", "장기주차 P2", _rx(r"장기주차\s*P2[^\d]*?" + _STATUS)),
    TowerRule("LONG_P3", "장기주차장 P3", _rx(r"장기주차장\s*P3[^\d]*?" + _STATUS)),
    TowerRule("LONG_P4", "장기주차 P4", _rx(r"장기주차\s*P4[^\d]*?" + _STATUS)),
    TowerRule("TOWER_EAST", "주차타워 동편", _rx(r"주차타워\s*동편[^\d]*?" + _STATUS)),
    TowerRule("TOWER_WEST", "주차타워 서편", _rx(r"주차타워\s*서편[^\d]*?" + _STATUS)),
    TowerRule("P1", "P1 주차타워", _rx(r"P1\s*(?:주차)?(?:타워)?[^\d]*?" + _STATUS), (Terminal.T1,)),
    TowerRule("P2", "P2 주차타워", _rx(r"P2\s*(?:주차)?(?:타워)?[^\d]*?" + _STATUS), (Terminal.T1,)),
    TowerRule("LONG", "장기주차장", _rx(r"장기주차장(?:\s+(?!P[134]))[^\d]*?" + _STATUS)),
)

_FLOOR_LABEL_RE = re.compile(r"^(지하|지상)\s*(\d+)층$")
_LAST_UPDATED_RE = re.compile(r"(\d{4}\.\d{2}\.\d{2}\s+\d{2}:\d{2}:\d{2})")


def page_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    return root.get_text(" ")


def _floor_name(prefix: str, floor_num: str) -> str:
    if prefix == "B":
        return f"지하 {floor_num}층"
    if prefix == "M":
        return "M 층"
    return f"지상 {floor_num}층"


def _floor_id(prefix: str, floor_num: str) -> str:
    return f"{prefix}{floor_num}" if prefix else f"{floor_num}F"


def floor_order(floor_id: str) -> int:
    """B2 -> -2, B1 -> -1, M1 -> 1, 1F -> 1, 2F -> 2."""
    if floor_id.startswith("B"):
        return -int(floor_id[1:])
    if floor_id.startswith("M"):
        digits = floor_id[1:]
        return int(digits) if digits.isdigit() else 0
    digits = floor_id.replace("F", "")
    return int(digits) if digits.isdigit() else 0


def sort_floors(floors: List[ParkingFloor]) -> List[ParkingFloor]:
    return sorted(floors, key=lambda f: floor_order(f.floor_id))


def parse_short_term_floors(soup: BeautifulSoup, terminal: Terminal) -> List[ParkingFloor]:
    """Floors of the short-term parking building, in canonical order."""
    text = page_text(soup)
    floors: List[ParkingFloor] = []
    seen = set()

    for rule in FLOOR_RULES:
        for match in rule.pattern.finditer(text):
            if rule.fixed_floor:
                floor_num, status_text = rule.fixed_floor, match.group(1)
            else:
                floor_num, status_text = match.group(1), match.group(2)

            floor_id = _floor_id(rule.prefix, floor_num)
            if floor_id in seen:
                continue
            seen.add(floor_id)

            availability = parse_availability_text(status_text)
            floors.append(ParkingFloor(
                floor_id=floor_id,
                floor_name=_floor_name(rule.prefix, floor_num),
                status=availability.status,
                available_spaces=availability.spaces,
                raw_text=status_text,
            ))

    if not floors:
        logger.warning("No floors found with regex for %s, trying structural parsing", terminal.value)
        return parse_floors_from_structure(soup)

    return sort_floors(floors)


def parse_floors_from_structure(soup: BeautifulSoup) -> List[ParkingFloor]:
    """
    Fallback for markup where label and status live in sibling elements,
    e.g. <span>지하 1층</span><span>179대 가능</span>.
    """
    floors: List[ParkingFloor] = []
    seen = set()

    for elem in soup.find_all(["div", "p", "span", "td"]):
        label = elem.get_text(strip=True)
        match = _FLOOR_LABEL_RE.match(label)
        if not match:
            continue

        sibling = elem.find_next_sibling()
        if sibling is None:
            continue
        status_text = sibling.get_text(strip=True)
        if "만차" not in status_text and "대 가능" not in status_text:
            continue

        prefix = "B" if match.group(1) == "지하" else ""
        floor_id = _floor_id(prefix, match.group(2))
        if floor_id in seen:
            continue
        seen.add(floor_id)

        availability = parse_availability_text(status_text)
        floors.append(ParkingFloor(
            floor_id=floor_id,
            floor_name=label,
            status=availability.status,
            available_spaces=availability.spaces,
            raw_text=status_text,
        ))

    return sort_floors(floors)


def parse_long_term_towers(soup: BeautifulSoup, terminal: Terminal) -> List[ParkingTower]:
    """Long-term towers/lots in rule order; one record per tower id."""
    text = page_text(soup)
    towers: List[ParkingTower] = []
    seen = set()

    for rule in TOWER_RULES:
        if terminal in rule.excluded_terminals or rule.tower_id in seen:
            continue

        match = rule.pattern.search(text)
        if not match:
            continue
        seen.add(rule.tower_id)

        availability = parse_availability_text(match.group(1))
        towers.append(ParkingTower(
            tower_id=rule.tower_id,
            tower_name=rule.tower_name,
            status=availability.status,
            available_spaces=availability.spaces,
            raw_text=match.group(1),
        ))

    return towers


def parse_last_updated(soup: BeautifulSoup, tz_name: str = "Asia/Seoul") -> Optional[datetime]:
    """Site stamp like "2026.01.25 21:24:22", interpreted on the airport clock."""
    match = _LAST_UPDATED_RE.search(page_text(soup))
    if not match:
        return None
    try:
        parsed = datetime.strptime(match.group(1), "%Y.%m.%d %H:%M:%S")
    except ValueError:
        logger.warning("Failed to parse update stamp: %s", match.group(1))
        return None
    return parsed.replace(tzinfo=ZoneInfo(tz_name))
