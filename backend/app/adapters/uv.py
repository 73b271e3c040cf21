"""UV index adapter using Open-Meteo current ``uv_index``."""

import httpx

from backend.app.adapters.provenance import provenance_for_http, request_url
from backend.app.models.common import Geo
from backend.app.models.snapshots import UVSnapshot


class UVDataUnavailableError(LookupError):
    """Provider response carried no current UV index."""

    pass


async def fetch_uv(
    location: Geo,
    *,
    base_url: str = "https://api.open-meteo.com/v1/forecast",
    timezone: str = "Pacific/Honolulu",
    client: httpx.AsyncClient | None = None,
) -> UVSnapshot:
    """Fetch the current UV index with risk level and protection advice.

    Raises:
        httpx.HTTPError: On network or HTTP errors
        UVDataUnavailableError: If the response has no ``current.uv_index``
    """
    params: dict[str, str | float | int] = {
        "latitude": location.lat,
        "longitude": location.lon,
        "current": "uv_index",
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
        current = response.json().get("current") or {}
        if current.get("uv_index") is None:
            raise UVDataUnavailableError("UV data unavailable")
        return UVSnapshot.from_index(
            float(current["uv_index"]),
            provenance=provenance_for_http(source="uv.open_meteo", url=url),
        )
    finally:
        if close_client:
            await client.aclose()
