"""Common types and enums shared across all models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Geo(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class BeachType(str, Enum):
    """Beach character used to pick scoring weights."""

    family = "family"
    surf = "surf"
    snorkel = "snorkel"
    scenic = "scenic"
    mixed = "mixed"


class Intent(str, Enum):
    """Coarse question classification controlling which paths may answer it."""

    simple = "simple"
    complex = "complex"
    forecast = "forecast"


class ActivityType(str, Enum):
    """Activity the user appears to be planning."""

    surfing = "surfing"
    family = "family"
    snorkeling = "snorkeling"
    general = "general"


class TimeOfDay(str, Enum):
    """Coarse local time of day."""

    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"


class Provenance(BaseModel):
    """Provenance metadata for provider snapshots."""

    source: str  # Provider identifier (e.g., "tool.weather.open_meteo")
    ref_id: str | None = None
    source_url: str | None = None
    fetched_at: datetime
    cache_hit: bool | None = None
