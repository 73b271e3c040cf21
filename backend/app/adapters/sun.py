"""Sunrise/sunset adapter using Open-Meteo daily fields."""

from datetime import datetime, timedelta

import httpx

from backend.app.adapters.provenance import provenance_for_http, request_url
from backend.app.models.common import Geo
from backend.app.models.snapshots import DayLength, GoldenHour, SunSnapshot, TimeMark

GOLDEN_HOUR = timedelta(hours=1)


def build_sun_snapshot(sunrise: datetime, sunset: datetime) -> SunSnapshot:
    """Derive day length and the evening golden hour (last hour before sunset)."""
    return SunSnapshot(
        sunrise=TimeMark.at(sunrise),
        sunset=TimeMark.at(sunset),
        day_length=DayLength.of(max(int((sunset - sunrise).total_seconds()), 0)),
        golden_hour=GoldenHour(
            start=TimeMark.at(sunset - GOLDEN_HOUR),
            end=TimeMark.at(sunset),
        ),
    )


async def fetch_sun_times(
    location: Geo,
    *,
    base_url: str = "https://api.open-meteo.com/v1/forecast",
    timezone: str = "Pacific/Honolulu",
    client: httpx.AsyncClient | None = None,
) -> SunSnapshot:
    """Fetch today's local sunrise and sunset.

    Raises:
        httpx.HTTPError: On network or HTTP errors
        ValueError: If the daily block is missing or malformed
    """
    params: dict[str, str | float | int] = {
        "latitude": location.lat,
        "longitude": location.lon,
        "daily": "sunrise,sunset",
        "forecast_days": 1,
        "timezone": timezone,
    }
    url = request_url(base_url, params)

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=8.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        daily = response.json().get("daily") or {}
        sunrises = daily.get("sunrise") or []
        sunsets = daily.get("sunset") or []
        if not sunrises or not sunsets:
            raise ValueError("sun times unavailable")

        # Local ISO timestamps without offset, e.g. "2026-10-19T06:42"
        snapshot = build_sun_snapshot(
            datetime.fromisoformat(sunrises[0]), datetime.fromisoformat(sunsets[0])
        )
        snapshot.provenance = provenance_for_http(source="sun.open_meteo", url=url)
        return snapshot
    finally:
        if close_client:
            await client.aclose()
