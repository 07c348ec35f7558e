from typing import Callable, Dict
from urllib.parse import parse_qs
import httpx
import pytest
from icn_api.exceptions import ScraperError
from icn_api.schemas.common import CongestionLevel, ParkingStatus, Terminal
from icn_api.scrapers.client import FetchClient
from icn_api.scrapers.congestion import CongestionScraper
from icn_api.scrapers.forecast import ForecastScraper
from icn_api.scrapers.parking import ParkingScraper
from conftest import (
    CONGESTION_PAGE_HTML,
    LONG_TERM_T1_HTML,
    SHORT_TERM_HTML,
    inout_page,
    route_page,
)


async def no_sleep(seconds: float) -> None:
    return None


def routed_client(settings, routes: Dict[str, Callable[[httpx.Request], httpx.Response]]) -> FetchClient:
    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404)
        return route(request)

    return FetchClient(settings, transport=httpx.MockTransport(handler), sleep=no_sleep)


def html(body: str):
    return lambda request: httpx.Response(200, text=body)


def failing(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500)


# ============ Parking ============

@pytest.mark.asyncio
async def test_parking_scrape_t1(settings):
    client = routed_client(settings, {
        settings.parking_t1_short_term_url: html(SHORT_TERM_HTML),
        settings.parking_t1_long_term_url: html(LONG_TERM_T1_HTML),
    })
    info = await ParkingScraper(client, settings).scrape(Terminal.T1)
    await client.aclose()

    assert [f.floor_id for f in info.short_term.floors] == ["B2", "B1", "1F"]
    assert info.short_term.total_available == 170
    assert info.short_term.has_full is True
    assert info.long_term.total_available == 370
    assert info.long_term.has_full is True
    assert info.long_term.unavailable is False


@pytest.mark.asyncio
async def test_parking_scrape_t2_long_term_unavailable(settings):
    client = routed_client(settings, {settings.parking_t2_short_term_url: html(SHORT_TERM_HTML)})
    info = await ParkingScraper(client, settings).scrape(Terminal.T2)
    await client.aclose()

    assert info.long_term.unavailable is True
    assert info.long_term.towers is None
    assert info.short_term.total_available == 170


@pytest.mark.asyncio
async def test_parking_section_failure_degrades(settings):
    client = routed_client(settings, {
        settings.parking_t1_short_term_url: failing,
        settings.parking_t1_long_term_url: html(LONG_TERM_T1_HTML),
    })
    info = await ParkingScraper(client, settings).scrape(Terminal.T1)
    await client.aclose()

    assert info.short_term.floors == []
    assert [t.tower_id for t in info.long_term.towers] == ["LONG_P1", "LONG_P3", "TOWER_EAST"]


@pytest.mark.asyncio
async def test_parking_scrape_fails_when_nothing_fetched(settings):
    client = routed_client(settings, {settings.parking_t2_short_term_url: failing})
    with pytest.raises(ScraperError) as exc_info:
        await ParkingScraper(client, settings).scrape(Terminal.T2)
    await client.aclose()

    assert exc_info.value.source == "ParkingScraper"


# ============ Congestion ============

@pytest.mark.asyncio
async def test_congestion_uses_api_payload(settings):
    client = routed_client(settings, {
        settings.congestion_api_url: lambda request: httpx.Response(200, json={"DG1_E": 8, "DG2": "31"}),
        settings.congestion_page_url: html(CONGESTION_PAGE_HTML),
    })
    result = await CongestionScraper(client, settings).scrape(Terminal.T2)
    await client.aclose()

    assert [g.wait_time_minutes for g in result.gates] == [8, 31]
    assert result.overall_level == CongestionLevel.VERY_CONGESTED
    assert [h.hour for h in result.hourly_forecast] == [0, 1, 23]


@pytest.mark.asyncio
async def test_congestion_falls_back_to_page_table(settings):
    client = routed_client(settings, {
        settings.congestion_api_url: failing,
        settings.congestion_page_url: html(CONGESTION_PAGE_HTML),
    })
    result = await CongestionScraper(client, settings).scrape(Terminal.T1)
    await client.aclose()

    assert [g.wait_time_minutes for g in result.gates] == [12, 25, None, None]
    assert result.overall_level == CongestionLevel.CONGESTED


@pytest.mark.asyncio
async def test_congestion_placeholder_forecast_when_page_fails(settings):
    client = routed_client(settings, {
        settings.congestion_api_url: lambda request: httpx.Response(200, json={}),
        settings.congestion_page_url: failing,
    })
    result = await CongestionScraper(client, settings).scrape(Terminal.T1)
    await client.aclose()

    assert len(result.hourly_forecast) == 24
    assert result.overall_level == CongestionLevel.NORMAL


@pytest.mark.asyncio
async def test_congestion_fails_when_both_sources_fail(settings):
    client = routed_client(settings, {})
    with pytest.raises(ScraperError):
        await CongestionScraper(client, settings).scrape(Terminal.T1)
    await client.aclose()


# ============ Forecast ============

@pytest.mark.asyncio
async def test_forecast_posts_form_and_builds_full_day(settings):
    forms = []

    def inout(request: httpx.Request) -> httpx.Response:
        forms.append(parse_qs(request.content.decode()))
        return httpx.Response(200, text=inout_page({10: [1, 1, 1, 1, 1, 5, 2, 2, 2, 2, 8]}))

    client = routed_client(settings, {
        settings.forecast_inout_url: inout,
        settings.forecast_route_url: html(route_page({10: [1, 2, 3, 4, 5, 6, 7]})),
    })
    forecast = await ForecastScraper(client, settings).scrape(Terminal.T1, "20260125")
    await client.aclose()

    assert forms[0] == {
        "selTm": ["T1"],
        "pday": ["20260125"],
        "layout": [settings.forecast_layout_id],
    }
    assert forecast.date == "20260125"
    assert len(forecast.in_out_data) == 24
    assert forecast.summary.peak_departure_hour == 10
    assert [r.hour for r in forecast.route_data] == [10]


@pytest.mark.asyncio
async def test_forecast_partial_when_route_fails(settings):
    client = routed_client(settings, {
        settings.forecast_inout_url: html(inout_page({3: [0, 0, 0, 0, 0, 40, 0, 0, 0, 0, 0]})),
        settings.forecast_route_url: failing,
    })
    forecast = await ForecastScraper(client, settings).scrape(Terminal.T2, "20260125")
    await client.aclose()

    assert forecast.route_data == []
    assert forecast.summary.total_departure == 40


@pytest.mark.asyncio
async def test_forecast_fails_when_both_requests_fail(settings):
    client = routed_client(settings, {})
    with pytest.raises(ScraperError):
        await ForecastScraper(client, settings).scrape(Terminal.T2, "20260125")
    await client.aclose()


def test_parking_status_enum_serializes_by_value():
    assert ParkingStatus.FULL.value == "FULL"
