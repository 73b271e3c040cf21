"""Typed argument models for each registered tool.

Arguments arrive as loose JSON (from the fast router, the fallback planner or
the generative model) and are validated here once before a handler runs.
camelCase aliases are accepted for model-produced plans.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from backend.app.models.common import ActivityType, BeachType, Geo


class ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ResolveSpotArgs(ToolArgs):
    spot: str = Field(..., min_length=1)


class CoordinateArgs(ToolArgs):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

    @property
    def geo(self) -> Geo:
        return Geo(lat=self.lat, lon=self.lon)


class WeatherArgs(CoordinateArgs):
    """Current weather, optionally with an hourly slice."""

    hours: int | None = Field(None, ge=1, le=48)
    start_offset_hours: int = Field(0, ge=0, le=48, alias="startOffsetHours")
    time_descriptor: str | None = Field(None, alias="timeDescriptor")

    @property
    def is_extended(self) -> bool:
        return bool(self.hours or self.start_offset_hours or self.time_descriptor)


class SurfArgs(CoordinateArgs):
    hours: int = Field(12, ge=1, le=48)


_ACTIVITY_FLAGS = {
    "family": "family",
    "surf": "surf",
    "surfing": "surf",
    "snorkel": "snorkel",
    "snorkeling": "snorkel",
    "scenic": "scenic",
}


class RecommendBeachesArgs(ToolArgs):
    """Catalog filters. ``criteria.activity`` is accepted as a flag shorthand."""

    family: bool = False
    surf: bool = False
    snorkel: bool = False
    scenic: bool = False
    island: str | None = None
    exclude_restricted: bool = Field(True, alias="excludeRestricted")
    criteria: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _apply_criteria(self) -> "RecommendBeachesArgs":
        activity = str((self.criteria or {}).get("activity", "")).lower()
        flag = _ACTIVITY_FLAGS.get(activity)
        if flag:
            setattr(self, flag, True)
        return self


_ACTIVITY_BEACH_TYPE = {
    ActivityType.surfing: BeachType.surf,
    ActivityType.family: BeachType.family,
    ActivityType.snorkeling: BeachType.snorkel,
}


class BeachScoreArgs(CoordinateArgs):
    beach: str | None = None
    beach_type: BeachType | None = Field(None, alias="beachType")
    activity: ActivityType | None = None
    crowd_level: float | None = Field(None, ge=0, le=100, alias="crowdLevel")

    @property
    def resolved_type(self) -> BeachType:
        """Explicit beach type, else one implied by the activity, else mixed."""
        if self.beach_type is not None:
            return self.beach_type
        if self.activity is not None:
            return _ACTIVITY_BEACH_TYPE.get(self.activity, BeachType.mixed)
        return BeachType.mixed


class AnalyzeSpotsArgs(ToolArgs):
    spot_names: list[str] = Field(..., min_length=1, max_length=10, alias="spotNames")
    beach_types: list[BeachType] | None = Field(None, alias="beachTypes")
