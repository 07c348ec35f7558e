"""
Combined dashboard API router.
"""
from fastapi import APIRouter, Depends, Query
from icn_api.dependencies import get_dashboard_service, valid_terminal
from icn_api.schemas.common import ApiResponse, Terminal
from icn_api.schemas.dashboard import DashboardData
from icn_api.services.dashboard import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("/{terminal}", response_model=ApiResponse[DashboardData])
async def get_dashboard(
    terminal: Terminal = Depends(valid_terminal),
    refresh: bool = Query(False, description="Bypass the cache"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Congestion and parking together; partial data is returned on partial failure."""
    return await service.get_dashboard(terminal, refresh)
