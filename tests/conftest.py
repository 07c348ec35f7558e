from datetime import datetime, timezone
from typing import Dict, List, Sequence
import pytest
from icn_api.config import Settings
from icn_api.schemas.common import CongestionLevel, Terminal
from icn_api.schemas.congestion import GateInfo, TerminalCongestion
from icn_api.schemas.parking import LongTermParking, ParkingInfo, ShortTermParking


SHORT_TERM_HTML = """
<html><body>
  <h2>단기주차장 주차현황</h2>
  <ul class="parking-list">
    <li>지하 2층 50대 가능</li>
    <li>지하 1층 만차</li>
    <li>지상 1층 120대 가능</li>
  </ul>
  <p class="update">2026.01.25 21:24:22</p>
</body></html>
"""

LONG_TERM_T1_HTML = """
<html><body>
  <div class="tower">장기주차장 P1 350대 가능</div>
  <div class="tower">장기주차장 P3 만차</div>
  <div class="tower">주차타워 동편 20대 가능</div>
  <p>2026.01.25 21:24:22</p>
</body></html>
"""

CONGESTION_PAGE_HTML = """
<html><body>
  <table id="userEx"><tbody>
    <tr><td>DG2</td><td>12분</td></tr>
    <tr><td>DG3</td><td>25분</td></tr>
  </tbody></table>
  <table class="hourly"><tbody>
    <tr><th>시간</th><th>예상인원</th></tr>
    <tr class="color1"><td>00~01시</td><td>1,200</td></tr>
    <tr class="color3"><td>01~02시</td><td>2,500</td></tr>
    <tr class="color4"><td>01~02시</td><td>9,999</td></tr>
    <tr class="color2"><td>23~24시</td><td>800</td></tr>
  </tbody></table>
</body></html>
"""


def _row(cells: Sequence) -> str:
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"


def inout_page(rows: Dict[int, List[int]]) -> str:
    """
    In/out forecast response: a decoy wait-time table first, the hourly table second.
    Each row value list holds 11 numbers (6 departure, 5 arrival).
    """
    decoy = _row(["5~6시"] + [99999] * 11)
    data = "".join(_row([f"{hour}~{hour + 1}시"] + values) for hour, values in rows.items())
    header = "<tr><th>시간</th><th>출국</th></tr>"
    return f"<html><body><table>{decoy}</table><table>{header}{data}</table></body></html>"


def route_page(rows: Dict[int, List[int]]) -> str:
    decoy = _row(["7~8시"] + [88888] * 7)
    data = "".join(_row([f"{hour}~{hour + 1}시"] + values) for hour, values in rows.items())
    return f"<html><body><table>{decoy}</table><table>{data}</table></body></html>"


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        airport_base_url="https://airport.test",
        retry_count=3,
        retry_delay=1.0,
        scheduler_enabled=False,
    )


def make_parking_info(terminal: Terminal = Terminal.T1, timestamp: datetime = None) -> ParkingInfo:
    stamp = timestamp or datetime(2026, 1, 25, 12, 0, tzinfo=timezone.utc)
    return ParkingInfo(
        terminal=terminal,
        short_term=ShortTermParking(
            terminal=terminal, floors=[], total_available=0, has_full=False, last_updated=stamp,
        ),
        long_term=LongTermParking(terminal=terminal, towers=[], last_updated=stamp),
        timestamp=stamp,
        peak_hours_warning=False,
    )


def make_congestion(terminal: Terminal = Terminal.T1, timestamp: datetime = None) -> TerminalCongestion:
    stamp = timestamp or datetime(2026, 1, 25, 12, 0, tzinfo=timezone.utc)
    return TerminalCongestion(
        terminal=terminal,
        timestamp=stamp,
        gates=[GateInfo(gate_id="DG1", gate_name="출국장 1", wait_time_minutes=5,
                        congestion_level=CongestionLevel.SMOOTH)],
        hourly_forecast=[],
        overall_level=CongestionLevel.SMOOTH,
        last_updated=stamp,
    )
