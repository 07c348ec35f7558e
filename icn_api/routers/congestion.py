"""
Security-gate congestion API router.
"""
from typing import Any, List
from fastapi import APIRouter, Depends, Query
from icn_api.dependencies import get_congestion_service, valid_terminal
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.congestion import GateInfo, HourlyCongestion, TerminalCongestion
from icn_api.services.congestion import CongestionService

router = APIRouter(prefix="/api/v1/congestion", tags=["Congestion"])


@router.get("/{terminal}", response_model=ApiResponse[TerminalCongestion])
async def get_congestion(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False, description="Bypass the cache"),
    service: CongestionService = Depends(get_congestion_service),
):
    """Gate wait times, hourly table and overall level for a terminal."""
    return await service.get_congestion(terminal, refresh)


@router.get("/{terminal}/gates", response_model=ApiResponse[List[GateInfo]])
async def get_gates(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False),
    service: CongestionService = Depends(get_congestion_service),
) -> ApiResponse[Any]:
    """Gate wait times only; an error envelope passes through unchanged."""
    response = await service.get_congestion(terminal, refresh)
    return response.map_data(lambda congestion: congestion.gates)


@router.get("/{terminal}/forecast", response_model=ApiResponse[List[HourlyCongestion]])
async def get_hourly_forecast(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False),
    service: CongestionService = Depends(get_congestion_service),
) -> ApiResponse[Any]:
    """Hourly congestion table; 24 placeholder rows when the page could not be read."""
    response = await service.get_congestion(terminal, refresh)
    return response.map_data(lambda congestion: congestion.hourly_forecast)
