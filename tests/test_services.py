from datetime import datetime, timedelta, timezone
from typing import List
import pytest
from icn_api.cache import TTLCache
from icn_api.exceptions import ErrorCode, ScraperError
from icn_api.schemas.common import Terminal
from icn_api.services.congestion import CongestionService
from icn_api.services.dashboard import DashboardService
from icn_api.services.forecast import ForecastService, forecast_cache_key
from icn_api.services.parking import ParkingService, parking_cache_key
from conftest import make_congestion, make_parking_info


class ScriptedScraper:
    """Returns queued results in order; exceptions in the queue are raised."""

    def __init__(self, *results):
        self.results: List = list(results)
        self.calls = []

    async def scrape(self, terminal, *args):
        self.calls.append((terminal, *args))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def failure(source: str = "ParkingScraper") -> ScraperError:
    return ScraperError("upstream down", source)


@pytest.mark.asyncio
async def test_fresh_cache_hit_skips_scrape(clock):
    scraper = ScriptedScraper(make_parking_info())
    service = ParkingService(scraper, TTLCache(30, clock=clock), 30)

    first = await service.get_parking_info(Terminal.T1)
    second = await service.get_parking_info(Terminal.T1)

    assert first.success and second.success
    assert len(scraper.calls) == 1
    assert first.cached_at is None
    assert second.cached_at == datetime.fromtimestamp(1000, tz=timezone.utc)


@pytest.mark.asyncio
async def test_refresh_flag_bypasses_cache(clock):
    scraper = ScriptedScraper(make_parking_info(), make_parking_info())
    service = ParkingService(scraper, TTLCache(30, clock=clock), 30)

    await service.get_parking_info(Terminal.T1)
    await service.get_parking_info(Terminal.T1, refresh=True)

    assert len(scraper.calls) == 2


@pytest.mark.asyncio
async def test_stale_entry_returned_after_expiry_when_scrape_fails(clock):
    original = make_parking_info()
    scraper = ScriptedScraper(original, failure())
    service = ParkingService(scraper, TTLCache(30, clock=clock), 30)

    await service.get_parking_info(Terminal.T1)
    clock.advance(31)
    response = await service.get_parking_info(Terminal.T1)

    assert response.success is True
    assert response.data == original
    assert response.error.code == ErrorCode.STALE_DATA
    assert response.cached_at == datetime.fromtimestamp(1000, tz=timezone.utc)


@pytest.mark.asyncio
async def test_total_failure_envelope_never_raises(clock):
    service = CongestionService(ScriptedScraper(failure("CongestionScraper")), TTLCache(60, clock=clock), 60)

    response = await service.get_congestion(Terminal.T2)

    assert response.success is False
    assert response.data is None
    assert response.error.code == ErrorCode.SCRAPER_ERROR
    assert response.error.message == "Failed to fetch congestion data"


@pytest.mark.asyncio
async def test_refresh_propagates_scrape_errors(clock):
    service = ParkingService(ScriptedScraper(failure()), TTLCache(30, clock=clock), 30)

    with pytest.raises(ScraperError):
        await service.refresh(Terminal.T1)


def test_store_keeps_newer_scrape(clock):
    service = ParkingService(ScriptedScraper(), TTLCache(30, clock=clock), 30)
    newer = make_parking_info(timestamp=datetime(2026, 1, 25, 12, 0, 30, tzinfo=timezone.utc))
    older = newer.model_copy(update={"timestamp": newer.timestamp - timedelta(seconds=20)})
    key = parking_cache_key(Terminal.T1)

    assert service.store(key, newer) is True
    assert service.store(key, older) is False
    assert service.cache.get(key) == newer


def test_cache_timestamp_is_iso_string(clock):
    service = ParkingService(ScriptedScraper(), TTLCache(30, clock=clock), 30)
    assert service.get_cache_timestamp(Terminal.T1) is None

    service.store(parking_cache_key(Terminal.T1), make_parking_info())
    assert service.get_cache_timestamp(Terminal.T1) == "1970-01-01T00:16:40+00:00"


@pytest.mark.asyncio
async def test_forecast_cached_per_date_and_cleared_per_terminal(clock):
    from icn_api.parsers.forecast import build_forecast
    stamp = datetime(2026, 1, 25, tzinfo=timezone.utc)
    day1 = build_forecast(Terminal.T1, "20260125", {}, [], stamp)
    day2 = build_forecast(Terminal.T1, "20260126", {}, [], stamp)
    other = build_forecast(Terminal.T2, "20260125", {}, [], stamp)
    scraper = ScriptedScraper(day1, day2, other)
    service = ForecastService(scraper, TTLCache(600, clock=clock), 600)

    await service.get_forecast(Terminal.T1, "20260125")
    await service.get_forecast(Terminal.T1, "20260126")
    await service.get_forecast(Terminal.T2, "20260125")
    assert scraper.calls[1] == (Terminal.T1, "20260126")

    assert service.clear(Terminal.T1) == 2
    assert service.cache.has(forecast_cache_key(Terminal.T2, "20260125"))
    assert service.clear() == 1


@pytest.mark.asyncio
async def test_dashboard_combines_both_halves(clock):
    dashboard = DashboardService(
        ParkingService(ScriptedScraper(make_parking_info()), TTLCache(30, clock=clock), 30),
        CongestionService(ScriptedScraper(make_congestion()), TTLCache(60, clock=clock), 60),
    )

    response = await dashboard.get_dashboard(Terminal.T1)

    assert response.success is True
    assert response.data.parking.terminal == Terminal.T1
    assert response.data.congestion.overall_level.value == "SMOOTH"


@pytest.mark.asyncio
async def test_dashboard_partial_failure_keeps_available_half(clock):
    parking = make_parking_info()
    dashboard = DashboardService(
        ParkingService(ScriptedScraper(parking), TTLCache(30, clock=clock), 30),
        CongestionService(ScriptedScraper(failure("CongestionScraper")), TTLCache(60, clock=clock), 60),
    )

    response = await dashboard.get_dashboard(Terminal.T1)

    assert response.success is False
    assert response.error.code == ErrorCode.PARTIAL_ERROR
    assert response.error.message == "Congestion: Failed to fetch congestion data"
    assert response.data.parking == parking
    assert response.data.congestion is None


@pytest.mark.asyncio
async def test_dashboard_total_failure_has_no_data(clock):
    dashboard = DashboardService(
        ParkingService(ScriptedScraper(failure()), TTLCache(30, clock=clock), 30),
        CongestionService(ScriptedScraper(failure("CongestionScraper")), TTLCache(60, clock=clock), 60),
    )

    response = await dashboard.get_dashboard(Terminal.T2)

    assert response.success is False
    assert response.data is None
    assert response.error.message == (
        "Parking: Failed to fetch parking data; Congestion: Failed to fetch congestion data"
    )


@pytest.mark.asyncio
async def test_dashboard_keeps_congestion_when_parking_fails(clock):
    congestion = make_congestion()
    dashboard = DashboardService(
        ParkingService(ScriptedScraper(failure()), TTLCache(30, clock=clock), 30),
        CongestionService(ScriptedScraper(congestion), TTLCache(60, clock=clock), 60),
    )

    response = await dashboard.get_dashboard(Terminal.T1)

    assert response.success is False
    assert response.error.code == ErrorCode.PARTIAL_ERROR
    assert "Parking: Failed to fetch parking data" in response.error.message
    assert response.data.congestion == congestion
    assert response.data.parking is None
