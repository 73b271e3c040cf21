"""Weather adapter using Open-Meteo API (keyless, free tier)."""

from typing import Any

import httpx

from backend.app.adapters.provenance import provenance_for_http, request_url
from backend.app.models.common import Geo
from backend.app.models.snapshots import (
    CurrentWeather,
    HourlyWeather,
    WeatherSnapshot,
    describe_weather_code,
)
from backend.app.utils.units import celsius_to_fahrenheit, kmh_to_mph

CURRENT_FIELDS = "temperature_2m,apparent_temperature,precipitation,wind_speed_10m,weather_code"
HOURLY_FIELDS = "temperature_2m,precipitation,wind_speed_10m,weather_code"


def hour_label(hour_24: int) -> str:
    """12-hour display label for an hour of the day (14 -> "2pm")."""
    return f"{hour_24 % 12 or 12}{'am' if hour_24 < 12 else 'pm'}"


def is_good_weather_hour(temperature_f: float, wind_mph: float, precipitation_mm: float) -> bool:
    """Dry, 75-85 degF and under 15 mph."""
    return precipitation_mm < 0.5 and 75 <= temperature_f <= 85 and wind_mph < 15


def start_index(times: list[str], current_time: str | None) -> int:
    """Index of the hourly slot containing ``current_time`` (0 when unknown)."""
    if not current_time:
        return 0
    hour_prefix = current_time[:13]  # "YYYY-MM-DDTHH"
    for i, t in enumerate(times):
        if t.startswith(hour_prefix):
            return i
    return 0


def _at(values: list[Any], i: int) -> Any:
    return values[i] if i < len(values) else None


def parse_hourly_slice(
    hourly: dict[str, Any], first: int, hours: int
) -> list[HourlyWeather]:
    """Build HourlyWeather rows for ``hours`` slots starting at index ``first``."""
    times: list[str] = hourly.get("time", [])
    temps = hourly.get("temperature_2m", [])
    winds = hourly.get("wind_speed_10m", [])
    precips = hourly.get("precipitation", [])
    codes = hourly.get("weather_code", [])

    rows = []
    for i in range(first, min(first + hours, len(times))):
        temp_c = _at(temps, i)
        if temp_c is None:
            continue
        hour_24 = int(times[i][11:13])
        temperature_f = celsius_to_fahrenheit(temp_c)
        wind_mph = kmh_to_mph(_at(winds, i) or 0.0)
        precipitation = _at(precips, i) or 0.0
        rows.append(
            HourlyWeather(
                time=hour_label(hour_24),
                hour_24=hour_24,
                temperature_f=temperature_f,
                wind_mph=wind_mph,
                precipitation_mm=precipitation,
                conditions=describe_weather_code(_at(codes, i)),
                is_good_weather=is_good_weather_hour(temperature_f, wind_mph, precipitation),
            )
        )
    return rows


async def fetch_weather(
    location: Geo,
    *,
    location_name: str | None = None,
    hours: int | None = None,
    start_offset_hours: int = 0,
    base_url: str = "https://api.open-meteo.com/v1/forecast",
    timezone: str = "Pacific/Honolulu",
    client: httpx.AsyncClient | None = None,
) -> WeatherSnapshot:
    """Fetch current weather (and optionally an hourly slice) from Open-Meteo.

    Args:
        location: Geographic coordinates
        location_name: Display name carried on the snapshot
        hours: Length of the hourly forecast slice (None = current conditions only)
        start_offset_hours: Hours after the current hour where the slice starts
        base_url: Open-Meteo API base URL
        timezone: IANA timezone for local timestamps
        client: Optional httpx client (for testing with mocks)

    Returns:
        WeatherSnapshot with converted imperial values

    Raises:
        httpx.HTTPError: On network or HTTP errors
    """
    # Docs: https://open-meteo.com/en/docs
    params: dict[str, str | float | int] = {
        "latitude": location.lat,
        "longitude": location.lon,
        "current": CURRENT_FIELDS,
        "timezone": timezone,
    }
    if hours:
        params["hourly"] = HOURLY_FIELDS
        params["forecast_days"] = 3

    url = request_url(base_url, params)

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=8.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        data = response.json()

        # Response structure: {current: {time, temperature_2m, ...}, hourly: {time: [...], ...}}
        current = data.get("current") or {}
        hourly_forecast: list[HourlyWeather] = []
        if hours and data.get("hourly"):
            hourly = data["hourly"]
            first = start_index(hourly.get("time", []), current.get("time"))
            hourly_forecast = parse_hourly_slice(hourly, first + start_offset_hours, hours)

        return WeatherSnapshot(
            location=location_name,
            current=CurrentWeather.model_validate(current),
            hourly_forecast=hourly_forecast,
            provenance=provenance_for_http(source="weather.open_meteo", url=url),
        )
    finally:
        if close_client:
            await client.aclose()
