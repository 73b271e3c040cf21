"""Tide adapter using NOAA CO-OPS predictions (keyless)."""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from backend.app.adapters.provenance import provenance_for_http, request_url
from backend.app.models.common import Geo
from backend.app.models.snapshots import TideEvent, TideSnapshot


class TideDataUnavailableError(LookupError):
    """NOAA returned no predictions for the station."""

    pass


@dataclass(frozen=True)
class TideStation:
    id: str
    name: str
    lat: float
    lon: float


HAWAII_STATIONS: tuple[TideStation, ...] = (
    TideStation("1612340", "Honolulu", 21.3069, -157.8583),
    TideStation("1615680", "Kahului", 20.8956, -156.4767),
    TideStation("1617760", "Hilo", 19.7297, -155.0900),
    TideStation("1619910", "Nawiliwili", 21.9544, -159.3561),
)

NOAA_TIME_FORMAT = "%Y-%m-%d %H:%M"


def nearest_station(location: Geo) -> TideStation:
    """Closest station by straight-line distance in degrees."""
    return min(
        HAWAII_STATIONS,
        key=lambda s: math.hypot(location.lat - s.lat, location.lon - s.lon),
    )


def parse_predictions(raw: list[dict[str, Any]]) -> list[TideEvent]:
    """Convert NOAA ``{"t": ..., "v": ...}`` rows into TideEvents, skipping blanks."""
    events = []
    for row in raw:
        value = row.get("v")
        if value in (None, ""):
            continue
        events.append(TideEvent(time=row["t"], level_ft=float(value)))
    return events


def summarize_tides(
    station: TideStation, events: list[TideEvent], now: datetime
) -> TideSnapshot:
    """Pick the current-hour level and the next high/low after ``now``.

    ``now`` must be naive local station time (NOAA ``lst_ldt``).
    """
    current = next(
        (e for e in events if datetime.strptime(e.time, NOAA_TIME_FORMAT).hour == now.hour),
        None,
    )
    upcoming = [e for e in events if datetime.strptime(e.time, NOAA_TIME_FORMAT) > now]
    return TideSnapshot(
        station=station.name,
        station_id=station.id,
        current_tide=current.level_ft if current else None,
        current_time=current.time if current else None,
        next_high=next((e for e in upcoming if e.level_ft > 0), None),
        next_low=next((e for e in upcoming if e.level_ft < 0), None),
        predictions=events[:24],
    )


async def fetch_tides(
    location: Geo,
    *,
    now: datetime | None = None,
    base_url: str = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter",
    timezone: str = "Pacific/Honolulu",
    client: httpx.AsyncClient | None = None,
) -> TideSnapshot:
    """Fetch today's hourly tide predictions from the nearest Hawaii station.

    Args:
        location: Geographic coordinates
        now: Current time (defaults to now in ``timezone``)
        base_url: NOAA datagetter endpoint
        timezone: Station-local IANA timezone
        client: Optional httpx client (for testing with mocks)

    Returns:
        TideSnapshot with current level and next high/low

    Raises:
        httpx.HTTPError: On network or HTTP errors
        TideDataUnavailableError: If NOAA returns no predictions
    """
    if now is None:
        now = datetime.now(ZoneInfo(timezone))
    local_now = now.replace(tzinfo=None)

    station = nearest_station(location)
    day = local_now.strftime("%Y%m%d")
    # Docs: https://api.tidesandcurrents.noaa.gov/api/prod/
    params: dict[str, str | float | int] = {
        "product": "predictions",
        "application": "hawaii_beach_agent",
        "begin_date": day,
        "end_date": day,
        "datum": "MLLW",
        "station": station.id,
        "time_zone": "lst_ldt",
        "units": "english",
        "interval": "h",
        "format": "json",
    }
    url = request_url(base_url, params)

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=10.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        data = response.json()

        events = parse_predictions(data.get("predictions") or [])
        if not events:
            raise TideDataUnavailableError(f"no tide predictions for station {station.id}")

        snapshot = summarize_tides(station, events, local_now)
        snapshot.provenance = provenance_for_http(source="tides.noaa", url=url)
        return snapshot
    finally:
        if close_client:
            await client.aclose()
