"""
Pydantic schemas for security-gate wait times and the hourly congestion table.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import ConfigDict
from icn_api.schemas.common import ApiModel, CongestionLevel, Terminal


class GateInfo(ApiModel):
    model_config = ConfigDict(frozen=True)

    gate_id: str
    gate_name: str
    wait_time_minutes: Optional[int] = None
    congestion_level: CongestionLevel


class HourlyCongestion(ApiModel):
    model_config = ConfigDict(frozen=True)

    hour: int
    time_slot: str
    predicted_count: int
    congestion_level: CongestionLevel


class TerminalCongestion(ApiModel):
    model_config = ConfigDict(frozen=True)

    terminal: Terminal
    timestamp: datetime
    gates: List[GateInfo]
    hourly_forecast: List[HourlyCongestion]
    overall_level: CongestionLevel
    last_updated: datetime
