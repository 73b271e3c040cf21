"""Provenance helpers for provider adapters."""

from datetime import UTC, datetime

import httpx

from backend.app.models.common import Provenance


def provenance_for_http(source: str, url: str, cache_hit: bool = False) -> Provenance:
    """Create provenance for HTTP-based provider results.

    Args:
        source: Source identifier (e.g., "weather.open_meteo")
        url: Full URL of the HTTP request
        cache_hit: Whether result came from cache

    Returns:
        Provenance with source=tool-specific string, fetched_at=now(UTC)
    """
    return Provenance(
        source=f"tool.{source}",
        ref_id=source,
        source_url=url,
        fetched_at=datetime.now(UTC),
        cache_hit=cache_hit,
    )


def request_url(base_url: str, params: dict[str, str | float | int]) -> str:
    """Full request URL (with encoded query) for provenance records."""
    return str(httpx.URL(base_url, params=params))
