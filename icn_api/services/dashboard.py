"""
Combined dashboard read: parking and congestion fetched concurrently.
A failed half leaves the other half attached to a success=False envelope.
"""
import asyncio
import logging
from icn_api.exceptions import ErrorCode
from icn_api.schemas.common import ApiError, ApiResponse, Terminal, utcnow
from icn_api.schemas.dashboard import DashboardData
from icn_api.services.congestion import CongestionService
from icn_api.services.parking import ParkingService

logger = logging.getLogger(__name__)


class DashboardService:

    def __init__(self, parking_service: ParkingService, congestion_service: CongestionService):
        self.parking_service = parking_service
        self.congestion_service = congestion_service

    async def get_dashboard(self, terminal: Terminal, refresh: bool = False) -> ApiResponse[DashboardData]:
        parking_response, congestion_response = await asyncio.gather(
            self.parking_service.get_parking_info(terminal, refresh),
            self.congestion_service.get_congestion(terminal, refresh),
        )

        if parking_response.success and congestion_response.success:
            return ApiResponse(
                success=True,
                data=DashboardData(
                    congestion=congestion_response.data,
                    parking=parking_response.data,
                ),
                timestamp=utcnow(),
            )

        errors = []
        if not parking_response.success:
            errors.append(f"Parking: {parking_response.error.message if parking_response.error else 'unknown error'}")
        if not congestion_response.success:
            errors.append(f"Congestion: {congestion_response.error.message if congestion_response.error else 'unknown error'}")

        logger.warning("Dashboard %s partial failure: %s", terminal.value, "; ".join(errors))

        partial = DashboardData(
            congestion=congestion_response.data,
            parking=parking_response.data,
        )
        has_data = partial.congestion is not None or partial.parking is not None
        return ApiResponse(
            success=False,
            data=partial if has_data else None,
            error=ApiError(code=ErrorCode.PARTIAL_ERROR, message="; ".join(errors)),
            timestamp=utcnow(),
        )
