"""Beach score and multi-spot analysis models."""

from datetime import datetime

from pydantic import BaseModel, Field

from backend.app.models.common import BeachType
from backend.app.models.snapshots import (
    OutdoorIndex,
    SurfSnapshot,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
)

Score10 = float


class ScoreBreakdown(BaseModel):
    """Seven component sub-scores on the 0-10 consumer scale."""

    temperature_score: Score10 = Field(..., ge=0, le=10)
    wind_score: Score10 = Field(..., ge=0, le=10)
    precipitation_score: Score10 = Field(..., ge=0, le=10)
    wave_height_score: Score10 = Field(..., ge=0, le=10)
    wave_period_score: Score10 = Field(..., ge=0, le=10)
    uv_index_score: Score10 = Field(..., ge=0, le=10)
    tide_level_score: Score10 = Field(..., ge=0, le=10)


class BeachScore(BaseModel):
    """Composite 0-10 beach suitability score.

    ``overall`` is always the weighted combination of the five category scores.
    ``crowd_level`` reads 10 for least crowded.
    """

    overall: Score10 = Field(..., ge=0, le=10)
    weather: Score10 = Field(..., ge=0, le=10)
    waves: Score10 = Field(..., ge=0, le=10)
    uv_safety: Score10 = Field(..., ge=0, le=10)
    tides: Score10 = Field(..., ge=0, le=10)
    crowd_level: Score10 = Field(..., ge=0, le=10)
    breakdown: ScoreBreakdown
    recommendations: list[str] = Field(default_factory=list)
    best_time_today: str | None = None


class SpotAnalysis(BaseModel):
    """Everything fetched and derived for one spot in a multi-spot comparison."""

    name: str
    lat: float
    lon: float
    type: BeachType
    island: str
    weather: WeatherSnapshot | None = None
    surf: SurfSnapshot | None = None
    uv: UVSnapshot | None = None
    tides: TideSnapshot | None = None
    outdoor_index: OutdoorIndex
    beach_score: BeachScore
    summary: str


class SpotRanking(BaseModel):
    spot: str
    overall_score: Score10
    weather_score: Score10
    surf_score: Score10
    uv_safety_score: Score10


class SpotComparison(BaseModel):
    best_overall: str
    best_weather: str
    best_surf: str
    best_family: str
    best_snorkel: str
    rankings: list[SpotRanking] = Field(default_factory=list)


class MultiSpotAnalysis(BaseModel):
    """Side-by-side analysis of several spots."""

    spots: list[SpotAnalysis]
    comparison: SpotComparison
    insights: list[str]
    recommendations: list[str]
    analysis_time: datetime
