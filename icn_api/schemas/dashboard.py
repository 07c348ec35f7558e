"""
Pydantic schema for the combined dashboard payload.
"""
from typing import Optional
from icn_api.schemas.common import ApiModel
from icn_api.schemas.congestion import TerminalCongestion
from icn_api.schemas.parking import ParkingInfo


class DashboardData(ApiModel):
    """Either half may be missing when the other sub-fetch failed."""
    congestion: Optional[TerminalCongestion] = None
    parking: Optional[ParkingInfo] = None
