"""Provider snapshot models - validated once at the adapter boundary.

Raw provider values keep their native units (degC, km/h, metres). Each snapshot
derives its imperial view on construction so downstream components never
re-derive fallbacks from loosely-typed payloads.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from backend.app.models.common import BeachType, Provenance
from backend.app.utils.units import celsius_to_fahrenheit, kmh_to_mph, meters_to_feet


def describe_weather_code(code: int | None) -> str:
    """Map a WMO weather code to a short sky description."""
    if not code:
        return "clear sky"
    if code <= 3:
        return "partly cloudy"
    if code <= 48:
        return "foggy"
    if code <= 67:
        return "rainy"
    if code <= 77:
        return "snowy"
    if code <= 82:
        return "rain showers"
    if code <= 86:
        return "snow showers"
    return "thunderstorm"


# Spots


class Spot(BaseModel):
    """Catalog entry for a known beach or surf spot."""

    name: str
    lat: float
    lon: float
    island: str
    type: BeachType
    description: str | None = None


class SpotResolution(BaseModel):
    """Coordinates resolved from a spot name."""

    name: str
    lat: float
    lon: float


# Weather


class CurrentWeather(BaseModel):
    """Current conditions in provider units."""

    temperature_2m: float | None = None  # degC
    apparent_temperature: float | None = None  # degC
    precipitation: float = 0.0  # mm
    wind_speed_10m: float | None = None  # km/h
    weather_code: int | None = None

    @field_validator("precipitation", mode="before")
    @classmethod
    def _missing_precipitation_is_dry(cls, v: Any) -> Any:
        return 0.0 if v is None else v


class ConvertedWeather(BaseModel):
    """Current conditions in imperial units."""

    temperature_fahrenheit: float | None = None
    apparent_temperature_fahrenheit: float | None = None
    wind_speed_mph: float | None = None
    precipitation_mm: float = 0.0


class HourlyWeather(BaseModel):
    """One hour of an hourly weather forecast slice."""

    time: str  # display label, e.g. "2pm"
    hour_24: int = Field(..., ge=0, le=23)
    temperature_f: float
    wind_mph: float
    precipitation_mm: float = 0.0
    conditions: str
    is_good_weather: bool


class WeatherSnapshot(BaseModel):
    """Current weather plus an optional hourly forecast slice."""

    location: str | None = None
    current: CurrentWeather = Field(default_factory=CurrentWeather)
    current_converted: ConvertedWeather | None = None
    hourly_forecast: list[HourlyWeather] = Field(default_factory=list)
    provenance: Provenance | None = None

    @model_validator(mode="after")
    def _derive_converted(self) -> "WeatherSnapshot":
        if self.current_converted is None:
            cur = self.current
            self.current_converted = ConvertedWeather(
                temperature_fahrenheit=(
                    celsius_to_fahrenheit(cur.temperature_2m)
                    if cur.temperature_2m is not None
                    else None
                ),
                apparent_temperature_fahrenheit=(
                    celsius_to_fahrenheit(cur.apparent_temperature)
                    if cur.apparent_temperature is not None
                    else None
                ),
                wind_speed_mph=(
                    kmh_to_mph(cur.wind_speed_10m) if cur.wind_speed_10m is not None else None
                ),
                precipitation_mm=cur.precipitation,
            )
        return self

    @property
    def temperature_f(self) -> float | None:
        """Temperature in degF, falling back to the raw provider value."""
        converted = self.current_converted
        if converted and converted.temperature_fahrenheit:
            return converted.temperature_fahrenheit
        return self.current.temperature_2m

    @property
    def wind_mph(self) -> float | None:
        """Wind speed in mph, falling back to the raw provider value."""
        converted = self.current_converted
        if converted and converted.wind_speed_mph:
            return converted.wind_speed_mph
        return self.current.wind_speed_10m

    @property
    def precipitation(self) -> float:
        return self.current.precipitation or 0.0

    @property
    def conditions(self) -> str:
        return describe_weather_code(self.current.weather_code)


# Surf


class SurfHourly(BaseModel):
    """Hourly marine arrays in provider units (metres, seconds, degrees)."""

    time: list[str] = Field(default_factory=list)
    wave_height: list[float | None] = Field(default_factory=list)
    wave_period: list[float | None] = Field(default_factory=list)
    wave_direction: list[float | None] = Field(default_factory=list)
    wind_wave_height: list[float | None] = Field(default_factory=list)


class SurfConverted(BaseModel):
    """Hourly marine arrays with heights in feet."""

    wave_height_feet: list[float | None] = Field(default_factory=list)
    wind_wave_height_feet: list[float | None] = Field(default_factory=list)
    wave_direction: list[float | None] = Field(default_factory=list)
    wave_period: list[float | None] = Field(default_factory=list)


class SurfHour(BaseModel):
    """One hour of a surf forecast slice with a derived quality rating."""

    time: str
    hour_24: int = Field(..., ge=0, le=23)
    wave_height_ft: float
    wave_period_s: float
    wave_direction: str  # 8-point compass label
    quality: int = Field(..., ge=1, le=5)
    quality_description: str
    good_for_surfing: bool


class SurfSnapshot(BaseModel):
    """Marine forecast snapshot."""

    hourly: SurfHourly = Field(default_factory=SurfHourly)
    hourly_converted: SurfConverted | None = None
    hourly_forecast: list[SurfHour] = Field(default_factory=list)
    provenance: Provenance | None = None

    @model_validator(mode="after")
    def _derive_converted(self) -> "SurfSnapshot":
        if self.hourly_converted is None:
            hourly = self.hourly
            self.hourly_converted = SurfConverted(
                wave_height_feet=[
                    meters_to_feet(h) if h is not None else None for h in hourly.wave_height
                ],
                wind_wave_height_feet=[
                    meters_to_feet(h) if h is not None else None for h in hourly.wind_wave_height
                ],
                wave_direction=list(hourly.wave_direction),
                wave_period=list(hourly.wave_period),
            )
        return self

    @property
    def wave_height_ft(self) -> float:
        """First-hour wave height in feet (0 when unknown)."""
        converted = self.hourly_converted
        if converted and converted.wave_height_feet and converted.wave_height_feet[0]:
            return converted.wave_height_feet[0]
        if self.hourly.wave_height and self.hourly.wave_height[0]:
            return meters_to_feet(self.hourly.wave_height[0])
        return 0.0

    @property
    def wave_period(self) -> float:
        if self.hourly.wave_period and self.hourly.wave_period[0]:
            return self.hourly.wave_period[0]
        return 0.0

    @property
    def wave_direction(self) -> float:
        if self.hourly.wave_direction and self.hourly.wave_direction[0]:
            return self.hourly.wave_direction[0]
        return 0.0


# Tides


class TideEvent(BaseModel):
    """A single tide prediction."""

    time: str  # NOAA local timestamp "YYYY-MM-DD HH:MM"
    level_ft: float


class TideSnapshot(BaseModel):
    """Tide predictions from the nearest NOAA station."""

    station: str
    station_id: str
    current_tide: float | None = None
    current_time: str | None = None
    next_high: TideEvent | None = None
    next_low: TideEvent | None = None
    predictions: list[TideEvent] = Field(default_factory=list)
    provenance: Provenance | None = None


# UV


def uv_risk_level(uv_index: float) -> str:
    if uv_index <= 2:
        return "Low"
    if uv_index <= 5:
        return "Moderate"
    if uv_index <= 7:
        return "High"
    if uv_index <= 10:
        return "Very High"
    return "Extreme"


def uv_protection(uv_index: float) -> str:
    if uv_index <= 2:
        return "Minimal protection needed"
    if uv_index <= 5:
        return "Sunscreen recommended"
    if uv_index <= 7:
        return "Sunscreen + hat recommended"
    if uv_index <= 10:
        return "Sunscreen + hat + shade"
    return "Avoid sun exposure"


def uv_recommendation(uv_index: float) -> str:
    if uv_index <= 2:
        return "Safe for extended outdoor activities"
    if uv_index <= 5:
        return "Good for outdoor activities with protection"
    if uv_index <= 7:
        return "Limit time in sun, seek shade"
    if uv_index <= 10:
        return "Minimize sun exposure"
    return "Avoid outdoor activities during peak sun hours"


class UVSnapshot(BaseModel):
    """UV index with risk level and protection advice."""

    uv_index: float = Field(..., ge=0)
    risk_level: str
    protection_needed: str
    recommendation: str
    provenance: Provenance | None = None

    @classmethod
    def from_index(cls, uv_index: float, provenance: Provenance | None = None) -> "UVSnapshot":
        """Build a snapshot with advice derived from the index."""
        return cls(
            uv_index=uv_index,
            risk_level=uv_risk_level(uv_index),
            protection_needed=uv_protection(uv_index),
            recommendation=uv_recommendation(uv_index),
            provenance=provenance,
        )


# Sun times


class TimeMark(BaseModel):
    """A local time with its display string (e.g. "6:42 AM")."""

    time: datetime
    formatted: str

    @classmethod
    def at(cls, moment: datetime) -> "TimeMark":
        hour = moment.hour % 12 or 12
        suffix = "AM" if moment.hour < 12 else "PM"
        return cls(time=moment, formatted=f"{hour}:{moment.minute:02d} {suffix}")


class DayLength(BaseModel):
    seconds: int = Field(..., ge=0)
    formatted: str

    @classmethod
    def of(cls, seconds: int) -> "DayLength":
        hours, remainder = divmod(seconds, 3600)
        return cls(seconds=seconds, formatted=f"{hours}h {remainder // 60}m")


class GoldenHour(BaseModel):
    start: TimeMark
    end: TimeMark


class SunSnapshot(BaseModel):
    """Sunrise, sunset, day length and evening golden hour for today."""

    sunrise: TimeMark
    sunset: TimeMark
    day_length: DayLength
    golden_hour: GoldenHour
    provenance: Provenance | None = None


# Derived


class OutdoorIndex(BaseModel):
    """0-10 outdoor comfort score derived from current weather."""

    index: int = Field(..., ge=0, le=10)
    note: str


def compute_outdoor_index(weather: WeatherSnapshot | None) -> OutdoorIndex:
    """Score outdoor comfort from current metric weather values.

    Starts at 10 and deducts for uncomfortable temperature (outside 20-31 degC),
    rain (> 0.1 mm) and wind (> 9 km/h).
    """
    if weather is None or weather.current.temperature_2m is None:
        return OutdoorIndex(index=0, note="No current temp data")

    cur = weather.current
    temp = cur.temperature_2m
    precip = cur.precipitation or 0.0
    wind = cur.wind_speed_10m or 0.0

    score = 10
    if temp < 20 or temp > 31:
        score -= 2
    if precip > 0.1:
        score -= 3
    if wind > 9:
        score -= 2
    score = max(score, 0)

    if score >= 8:
        note = "Excellent for outdoors"
    elif score >= 5:
        note = "Decent with some caution"
    else:
        note = "Maybe indoor plans today"
    return OutdoorIndex(index=score, note=note)


def summarize_payload(value: Any) -> Any:
    """JSON-friendly view of a tool result for prompts and logs."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude={"provenance"}, exclude_none=True)
    if isinstance(value, list):
        return [summarize_payload(item) for item in value]
    return value
