"""Surf adapter using the Open-Meteo Marine API (keyless)."""

from typing import Any

import httpx

from backend.app.adapters.provenance import provenance_for_http, request_url
from backend.app.adapters.weather import hour_label, start_index
from backend.app.models.common import Geo
from backend.app.models.snapshots import SurfHour, SurfHourly, SurfSnapshot
from backend.app.utils.units import compass_8, meters_to_feet

HOURLY_FIELDS = "wave_height,wave_direction,wave_period,wind_wave_height"


def rate_surf(wave_height_ft: float, wave_period_s: float) -> tuple[int, str]:
    """Rate surf quality on a 1-5 scale from height and period.

    Returns:
        (quality, description)
    """
    if wave_height_ft >= 4 and wave_period_s >= 10:
        return 5, "Excellent"
    if wave_height_ft >= 3 and wave_period_s >= 8:
        return 4, "Good"
    if wave_height_ft >= 2 and wave_period_s >= 6:
        return 3, "Fair"
    if wave_height_ft >= 1:
        return 2, "Small"
    return 1, "Flat"


def build_surf_hours(hourly: SurfHourly, hours: int) -> list[SurfHour]:
    """Per-hour surf slice for the first ``hours`` slots of ``hourly``."""
    rows = []
    for i, stamp in enumerate(hourly.time[:hours]):
        height_m = hourly.wave_height[i] if i < len(hourly.wave_height) else None
        if height_m is None:
            continue
        period = (hourly.wave_period[i] if i < len(hourly.wave_period) else None) or 0.0
        direction = (hourly.wave_direction[i] if i < len(hourly.wave_direction) else None) or 0.0
        height_ft = meters_to_feet(height_m)
        quality, description = rate_surf(height_ft, period)
        hour_24 = int(stamp[11:13])
        rows.append(
            SurfHour(
                time=hour_label(hour_24),
                hour_24=hour_24,
                wave_height_ft=height_ft,
                wave_period_s=period,
                wave_direction=compass_8(direction),
                quality=quality,
                quality_description=description,
                good_for_surfing=quality >= 3,
            )
        )
    return rows


async def fetch_surf(
    location: Geo,
    *,
    hours: int | None = 12,
    base_url: str = "https://marine-api.open-meteo.com/v1/marine",
    timezone: str = "Pacific/Honolulu",
    client: httpx.AsyncClient | None = None,
) -> SurfSnapshot:
    """Fetch hourly wave data starting at the current local hour.

    Args:
        location: Geographic coordinates
        hours: Length of the rated hourly slice (None/0 = no slice)
        base_url: Open-Meteo Marine API base URL
        timezone: IANA timezone for local timestamps
        client: Optional httpx client (for testing with mocks)

    Returns:
        SurfSnapshot whose hourly arrays begin at the current hour

    Raises:
        httpx.HTTPError: On network or HTTP errors
    """
    params: dict[str, str | float | int] = {
        "latitude": location.lat,
        "longitude": location.lon,
        "current": "wave_height",
        "hourly": HOURLY_FIELDS,
        "timezone": timezone,
        "forecast_days": 2,
    }
    url = request_url(base_url, params)

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=8.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        data = response.json()

        raw: dict[str, Any] = data.get("hourly") or {}
        current_time = (data.get("current") or {}).get("time")
        first = start_index(raw.get("time", []), current_time)

        hourly = SurfHourly(
            time=raw.get("time", [])[first:],
            wave_height=raw.get("wave_height", [])[first:],
            wave_period=raw.get("wave_period", [])[first:],
            wave_direction=raw.get("wave_direction", [])[first:],
            wind_wave_height=raw.get("wind_wave_height", [])[first:],
        )
        return SurfSnapshot(
            hourly=hourly,
            hourly_forecast=build_surf_hours(hourly, hours) if hours else [],
            provenance=provenance_for_http(source="surf.open_meteo_marine", url=url),
        )
    finally:
        if close_client:
            await client.aclose()
