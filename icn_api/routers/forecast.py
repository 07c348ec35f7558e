"""
Passenger forecast API router.
"""
from fastapi import APIRouter, Depends, Query
from icn_api.dependencies import forecast_date, get_forecast_service, valid_terminal
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.forecast import CongestionForecast
from icn_api.services.forecast import ForecastService

router = APIRouter(prefix="/api/v1/forecast", tags=["Forecast"])


@router.get("/{terminal}", response_model=ApiResponse[CongestionForecast])
async def get_forecast(
    terminal: Terminal = Depends(valid_terminal),
    date: str = Depends(forecast_date),
    refresh: bool = Query(False, description="Bypass the cache"),
    service: ForecastService = Depends(get_forecast_service),
):
    """
    Hourly in/out and route forecast for a terminal.
    Defaults to today's date on the airport clock.
    """
    return await service.get_forecast(terminal, date, refresh)
