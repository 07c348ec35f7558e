"""
FastAPI dependencies: request validation and access to the services built at startup.
"""
from typing import Optional
from fastapi import Path, Query, Request
from icn_api.config import get_settings
from icn_api.exceptions import ValidationError
from icn_api.normalize import is_valid_yyyymmdd, today_yyyymmdd
from icn_api.schemas.common import Terminal
from icn_api.services.congestion import CongestionService
from icn_api.services.dashboard import DashboardService
from icn_api.services.forecast import ForecastService
from icn_api.services.parking import ParkingService


def valid_terminal(terminal: str = Path(..., description="Terminal code (T1/T2, case-insensitive)")) -> Terminal:
    """Validate the terminal path parameter before any scrape is attempted."""
    code = terminal.strip().upper()
    if not code:
        raise ValidationError("Terminal parameter is required")
    try:
        return Terminal(code)
    except ValueError:
        raise ValidationError(f"Invalid terminal: {code}. Must be T1 or T2")


def forecast_date(date: Optional[str] = Query(None, description="Forecast date (YYYYMMDD)")) -> str:
    """Requested date, defaulting to today on the airport clock."""
    if date is None or date == "":
        return today_yyyymmdd(get_settings().site_timezone)
    if not is_valid_yyyymmdd(date):
        raise ValidationError(f"Invalid date: {date}. Expected YYYYMMDD")
    return date


def get_parking_service(request: Request) -> ParkingService:
    return request.app.state.parking_service


def get_congestion_service(request: Request) -> CongestionService:
    return request.app.state.congestion_service


def get_forecast_service(request: Request) -> ForecastService:
    return request.app.state.forecast_service


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service
