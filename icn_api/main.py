"""
FastAPI application main module.
"""
import logging
import time
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from icn_api.cache import TTLCache
from icn_api.config import get_settings
from icn_api.dependencies import get_congestion_service, get_parking_service
from icn_api.exceptions import AppError, ErrorCode, ScraperError
from icn_api.jobs.scheduler import ScrapeScheduler
from icn_api.logging_config import setup_logging
from icn_api.routers import congestion, dashboard, forecast, parking
from icn_api.schemas.common import TERMINAL_NAMES, ApiError, ApiResponse, Terminal, utcnow
from icn_api.scrapers.client import FetchClient
from icn_api.scrapers.congestion import CongestionScraper
from icn_api.scrapers.forecast import ForecastScraper
from icn_api.scrapers.parking import ParkingScraper
from icn_api.services.congestion import CongestionService
from icn_api.services.dashboard import DashboardService
from icn_api.services.forecast import ForecastService
from icn_api.services.parking import ParkingService

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build caches, services and the scheduler for the process lifetime."""
    # Startup
    setup_logging(settings.log_level)
    client = FetchClient(settings)

    parking_service = ParkingService(
        ParkingScraper(client, settings),
        TTLCache(settings.parking_cache_ttl),
        settings.parking_cache_ttl,
    )
    congestion_service = CongestionService(
        CongestionScraper(client, settings),
        TTLCache(settings.congestion_cache_ttl),
        settings.congestion_cache_ttl,
    )
    forecast_service = ForecastService(
        ForecastScraper(client, settings),
        TTLCache(settings.forecast_cache_ttl),
        settings.forecast_cache_ttl,
    )

    app.state.parking_service = parking_service
    app.state.congestion_service = congestion_service
    app.state.forecast_service = forecast_service
    app.state.dashboard_service = DashboardService(parking_service, congestion_service)

    scheduler = ScrapeScheduler(
        parking_service, congestion_service, settings, forecast_service=forecast_service,
    )
    app.state.scheduler = scheduler
    if settings.scheduler_enabled:
        scheduler.start()

    yield

    # Shutdown
    await scheduler.stop()
    await client.aclose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="인천공항 주차·출국장 혼잡도·승객 예고 실시간 API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for dashboard access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(parking.router)
app.include_router(congestion.router)
app.include_router(forecast.router)
app.include_router(dashboard.router)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ApiResponse(
        success=False,
        data=None,
        error=ApiError(code=code, message=message),
        timestamp=utcnow(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning("%s %s -> invalid request: %s", request.method, request.url.path, message)
    return error_response(400, ErrorCode.VALIDATION_ERROR, message or "Invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        code = ErrorCode.NOT_FOUND
    elif exc.status_code < 500:
        code = ErrorCode.VALIDATION_ERROR
    else:
        code = ErrorCode.INTERNAL_ERROR
    return error_response(exc.status_code, code, str(exc.detail))


@app.exception_handler(ScraperError)
async def scraper_error_handler(request: Request, exc: ScraperError):
    logger.error("%s %s -> scraper error from %s: %s", request.method, request.url.path, exc.source, exc.message)
    return error_response(503, ErrorCode.SCRAPER_ERROR, f"Data source temporarily unavailable: {exc.source}")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s -> unhandled error", request.method, request.url.path)
    message = str(exc) if settings.debug else "Internal server error"
    return error_response(500, ErrorCode.INTERNAL_ERROR, message)


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "name": settings.app_name,
        "status": "healthy",
        "version": "1.0.0",
        "terminals": {terminal.value: names for terminal, names in TERMINAL_NAMES.items()},
    }


@app.get("/health")
@app.get("/api/health")
async def health_check(
    parking_service: ParkingService = Depends(get_parking_service),
    congestion_service: CongestionService = Depends(get_congestion_service),
):
    """Health check endpoint for monitoring, with the write time of each cached feed."""
    return {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 1),
        "cache": {
            "parking": {terminal.value: parking_service.get_cache_timestamp(terminal) for terminal in Terminal},
            "congestion": {terminal.value: congestion_service.get_cache_timestamp(terminal) for terminal in Terminal},
        },
    }
