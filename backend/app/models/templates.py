"""Template context - the single input shape all synthesis paths read from."""

from pydantic import BaseModel, Field

from backend.app.models.common import ActivityType, TimeOfDay
from backend.app.models.snapshots import HourlyWeather


class TemplateContext(BaseModel):
    """Normalized snapshot of the conditions relevant to one answer."""

    location: str = "the area"
    temperature: float = 75.0  # degF
    wind_speed: float = 10.0  # mph
    precipitation: float = 0.0  # mm
    conditions: str = "clear sky"
    wave_height: float | None = None  # ft
    wave_period: float | None = None  # s
    uv_index: float | None = None
    tide_level: float | None = None  # ft
    beach_score: float | None = None  # 0-10
    hourly_forecast: list[HourlyWeather] = Field(default_factory=list)
    time_of_day: TimeOfDay | None = None
    activity_type: ActivityType | None = None

    # Conversation signals
    wants_family: bool = False
    wants_surf: bool = False
    wants_snorkel: bool = False
    together_preference: bool = False

    primary_recommendation: str | None = None
    recommended_beaches: list[str] = Field(default_factory=list)
