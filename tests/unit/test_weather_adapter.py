"""Tests for weather adapter."""

import httpx
import pytest

from backend.app.adapters.weather import (
    fetch_weather,
    hour_label,
    is_good_weather_hour,
    start_index,
)
from backend.app.models.common import Geo

WAIKIKI = Geo(lat=21.2766, lon=-157.8269)


@pytest.mark.asyncio
async def test_fetch_weather_parses_open_meteo_response(
    provider_client: httpx.AsyncClient,
) -> None:
    """Current block is converted to imperial units and provenance is attached."""
    result = await fetch_weather(WAIKIKI, location_name="Waikiki", client=provider_client)

    assert result.location == "Waikiki"
    assert result.temperature_f == pytest.approx(78.8)
    assert result.wind_mph == pytest.approx(6.2)
    assert result.precipitation == 0.0
    assert result.conditions == "clear sky"
    assert result.hourly_forecast == []

    assert result.provenance is not None
    assert result.provenance.source == "tool.weather.open_meteo"
    assert result.provenance.ref_id == "weather.open_meteo"
    assert result.provenance.cache_hit is False
    assert "open-meteo.com" in (result.provenance.source_url or "")


@pytest.mark.asyncio
async def test_hourly_slice_starts_at_current_hour(provider_client: httpx.AsyncClient) -> None:
    result = await fetch_weather(WAIKIKI, hours=4, client=provider_client)

    rows = result.hourly_forecast
    assert [r.time for r in rows] == ["10am", "11am", "12pm", "1pm"]
    assert rows[0].hour_24 == 10
    assert rows[0].temperature_f == pytest.approx(80.4)
    assert rows[0].wind_mph == pytest.approx(7.5)
    assert rows[0].conditions == "partly cloudy"
    assert rows[0].is_good_weather


@pytest.mark.asyncio
async def test_hourly_slice_with_offset(provider_client: httpx.AsyncClient) -> None:
    result = await fetch_weather(WAIKIKI, hours=2, start_offset_hours=24, client=provider_client)
    assert [r.hour_24 for r in result.hourly_forecast] == [10, 11]


@pytest.mark.asyncio
async def test_hourly_requested_only_with_hours() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"current": {"temperature_2m": None}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await fetch_weather(WAIKIKI, client=client)

    assert "hourly" not in seen[0].url.params
    assert seen[0].url.params["timezone"] == "Pacific/Honolulu"
    assert result.temperature_f is None


@pytest.mark.asyncio
async def test_fetch_weather_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "down"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_weather(WAIKIKI, client=client)


def test_helpers() -> None:
    assert hour_label(0) == "12am"
    assert hour_label(12) == "12pm"
    assert hour_label(14) == "2pm"
    assert start_index(["2026-10-19T09:00", "2026-10-19T10:00"], "2026-10-19T10:15") == 1
    assert start_index(["2026-10-19T09:00"], None) == 0
    assert is_good_weather_hour(80, 10, 0)
    assert not is_good_weather_hour(80, 10, 0.5)
    assert not is_good_weather_hour(70, 5, 0)
