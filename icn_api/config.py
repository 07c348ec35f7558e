"""
Application configuration using pydantic-settings.
Loads upstream endpoints, cache lifetimes and scheduler cadence from the environment.
"""
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream site
    airport_base_url: str = "https://www.airport.kr"
    user_agent: str = "IncheonAirportDashboard/1.0 (compatible; dashboard crawler)"
    site_timezone: str = "Asia/Seoul"

    # Parking pages (T2 publishes no real-time long-term page)
    parking_t1_short_term_url: str = "/ap_ko/883/subview.do"
    parking_t1_long_term_url: Optional[str] = "/ap_ko/884/subview.do"
    parking_t2_short_term_url: str = "/ap_ko/885/subview.do"
    parking_t2_long_term_url: Optional[str] = None

    # Congestion
    congestion_api_url: str = "/pni/ap_ko/passengerNoticeAjax.do"
    congestion_page_url: str = "/pni/ap_ko/passengerNotice.do"

    # Passenger forecast (POST, HTML)
    forecast_inout_url: str = "/pni/ap_ko/statisticPredictCrowdedOfInout.do"
    forecast_route_url: str = "/pni/ap_ko/statisticPredictCrowdedOfRoute.do"
    forecast_layout_id: str = "61705f6b6f40403838344040"

    # Fetching
    request_timeout: float = 10.0
    forecast_timeout: float = 15.0
    retry_count: int = 3
    retry_delay: float = 1.0

    # Cache TTLs (seconds)
    parking_cache_ttl: float = 30.0
    congestion_cache_ttl: float = 60.0
    forecast_cache_ttl: float = 600.0

    # Scheduler cadence (seconds)
    scheduler_enabled: bool = True
    parking_interval: float = 30.0
    peak_parking_interval: float = 15.0
    congestion_interval: float = 60.0
    forecast_prune_interval: float = 3600.0

    # App settings
    app_name: str = "Incheon Airport Status API"
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
