"""
Parking status API router.
"""
from typing import Any
from fastapi import APIRouter, Depends, Query
from icn_api.dependencies import get_parking_service, valid_terminal
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.parking import LongTermParking, ParkingInfo, ShortTermParking
from icn_api.services.parking import ParkingService

router = APIRouter(prefix="/api/v1/parking", tags=["Parking"])


@router.get("/{terminal}", response_model=ApiResponse[ParkingInfo])
async def get_parking(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False, description="Bypass the cache"),
    service: ParkingService = Depends(get_parking_service),
):
    """Short- and long-term parking status for a terminal."""
    return await service.get_parking_info(terminal, refresh)


@router.get("/{terminal}/short-term", response_model=ApiResponse[ShortTermParking])
async def get_short_term_parking(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False),
    service: ParkingService = Depends(get_parking_service),
) -> ApiResponse[Any]:
    """Short-term parking floors for a terminal."""
    response = await service.get_parking_info(terminal, refresh)
    return response.map_data(lambda info: info.short_term)


@router.get("/{terminal}/long-term", response_model=ApiResponse[LongTermParking])
async def get_long_term_parking(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False),
    service: ParkingService = Depends(get_parking_service),
) -> ApiResponse[Any]:
    """Long-term towers for a terminal. T2 reports `unavailable: true`."""
    response = await service.get_parking_info(terminal, refresh)
    return response.map_data(lambda info: info.long_term)
