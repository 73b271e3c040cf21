"""Composite beach scoring.

Each input is reduced to a 0-100 component score via a threshold ladder, the
components are combined into five category scores with per-beach-type
weights, and the categories are combined into an overall score. Everything
consumers see is reported on a 0-10 scale.
"""

import math
from datetime import datetime

from backend.app.models.common import BeachType
from backend.app.models.score import BeachScore, ScoreBreakdown
from backend.app.models.snapshots import SurfSnapshot, TideSnapshot, UVSnapshot, WeatherSnapshot
from backend.app.scoring.weights import DEFAULT_CROWD_LEVEL, weights_for
from backend.app.utils.clock import local_now
from backend.app.utils.units import round1

FALLBACK_RECOMMENDATION = "Excellent conditions - perfect beach day!"


# Component scores (0-100)


def temperature_score(temp_f: float | None) -> float:
    if temp_f is None:
        return 70
    if temp_f < 70:
        return 60  # too cool
    if temp_f < 75:
        return 80
    if temp_f <= 85:
        return 100
    if temp_f <= 90:
        return 85
    return 70  # too hot


def wind_score(wind_mph: float | None) -> float:
    if wind_mph is None:
        return 40
    if wind_mph < 5:
        return 100
    if wind_mph < 10:
        return 90
    if wind_mph < 15:
        return 75
    if wind_mph < 20:
        return 60
    return 40


def precipitation_score(precipitation_mm: float) -> float:
    if precipitation_mm == 0:
        return 100
    if precipitation_mm < 0.5:
        return 80  # drizzle
    if precipitation_mm < 2:
        return 50
    return 20


def wave_height_score(wave_height_ft: float, beach_type: BeachType) -> float:
    if beach_type == BeachType.family:
        if wave_height_ft < 1:
            return 100
        if wave_height_ft < 2:
            return 90
        if wave_height_ft < 3:
            return 70
        return 40
    if beach_type == BeachType.surf:
        if wave_height_ft < 2:
            return 60
        if wave_height_ft < 4:
            return 90
        if wave_height_ft < 6:
            return 100
        if wave_height_ft < 8:
            return 85
        return 60  # experts only
    if beach_type == BeachType.snorkel:
        if wave_height_ft < 1:
            return 100
        if wave_height_ft < 2:
            return 80
        return 40
    if wave_height_ft < 2:
        return 90
    if wave_height_ft < 4:
        return 80
    return 60


def wave_period_score(wave_period_s: float) -> float:
    if wave_period_s < 8:
        return 60  # choppy
    if wave_period_s < 12:
        return 80
    if wave_period_s < 16:
        return 100
    return 90


def uv_index_score(uv_index: float) -> float:
    if uv_index <= 2:
        return 100
    if uv_index <= 5:
        return 85
    if uv_index <= 7:
        return 70
    if uv_index <= 10:
        return 50
    return 30


def tide_level_score(tide_ft: float, beach_type: BeachType) -> float:
    if beach_type == BeachType.surf:
        return 90 if tide_ft > 0.5 else 70
    return 90 if -0.5 < tide_ft < 1.5 else 70


def best_time_today(now: datetime) -> str:
    """Clock-only hint: 9am-3pm is the beach window."""
    if 9 <= now.hour <= 15:
        return "Now is a great time!"
    if now.hour < 9:
        return "Best time: 9am-3pm"
    return "Best time: Tomorrow 9am-3pm"


def build_recommendations(
    weather: float, waves: float, uv_safety: float, crowd: float, beach_type: BeachType
) -> list[str]:
    """Advice strings from the 0-100 category scores."""
    recommendations = []
    if weather < 70:
        recommendations.append("Weather conditions are not ideal - consider indoor activities")
    if uv_safety < 70:
        recommendations.append("High UV index - use sunscreen and seek shade frequently")
    if crowd < 60:
        recommendations.append("Beach may be crowded - arrive early for better parking")
    if waves > 80 and beach_type == BeachType.surf:
        recommendations.append("Great surf conditions - perfect day for surfing!")
    if waves < 60 and beach_type == BeachType.family:
        recommendations.append("Waves may be too rough for young children")
    return recommendations or [FALLBACK_RECOMMENDATION]


def _to_ten(score_100: float) -> float:
    """Convert a 0-100 score to the clamped 0-10 consumer scale."""
    return min(10.0, max(0.0, score_100 / 10))


def score(
    weather: WeatherSnapshot | None,
    surf: SurfSnapshot | None,
    uv: UVSnapshot | None,
    tides: TideSnapshot | None,
    beach_type: BeachType = BeachType.mixed,
    crowd_level: float | None = None,
    now: datetime | None = None,
) -> BeachScore:
    """Compute a composite beach score.

    Args:
        weather: Current weather (temperature/wind default to ladder fall-through)
        surf: Marine forecast (first hour is used)
        uv: UV snapshot (0 when missing)
        tides: Tide snapshot (0 ft when missing)
        beach_type: Selects weights and type-specific ladders
        crowd_level: 0-100, higher = less crowded (type default when None)
        now: Local time for the best-time hint (defaults to now in Hawaii)

    Returns:
        BeachScore with every field in [0, 10]
    """
    temp_f = weather.temperature_f if weather else None
    wind_mph = weather.wind_mph if weather else None
    precipitation = weather.precipitation if weather else 0.0
    wave_height_ft = surf.wave_height_ft if surf else 0.0
    wave_period = surf.wave_period if surf else 0.0
    uv_index = uv.uv_index if uv else 0.0
    tide_ft = tides.current_tide if tides and tides.current_tide is not None else 0.0

    temp_s = temperature_score(temp_f)
    wind_s = wind_score(wind_mph)
    precip_s = precipitation_score(precipitation)
    height_s = wave_height_score(wave_height_ft, beach_type)
    period_s = wave_period_score(wave_period)
    uv_s = uv_index_score(uv_index)
    tide_s = tide_level_score(tide_ft, beach_type)

    w = weights_for(beach_type)
    weather_cat = round1(temp_s * w.temperature + wind_s * w.wind + precip_s * w.precipitation)
    waves_cat = round1(height_s * w.wave_height + period_s * w.wave_period)
    uv_cat = round1(uv_s)
    tides_cat = round1(tide_s)
    crowd_cat = round1(crowd_level if crowd_level is not None else DEFAULT_CROWD_LEVEL[beach_type])

    overall_100 = round1(
        weather_cat * w.weather
        + waves_cat * w.waves
        + uv_cat * w.uv
        + tides_cat * w.tides
        + crowd_cat * w.crowd
    )
    overall = math.floor(overall_100 + 0.5) / 10

    return BeachScore(
        overall=min(10.0, max(0.0, overall)),
        weather=_to_ten(weather_cat),
        waves=_to_ten(waves_cat),
        uv_safety=_to_ten(uv_cat),
        tides=_to_ten(tides_cat),
        crowd_level=_to_ten(crowd_cat),
        breakdown=ScoreBreakdown(
            temperature_score=_to_ten(temp_s),
            wind_score=_to_ten(wind_s),
            precipitation_score=_to_ten(precip_s),
            wave_height_score=_to_ten(height_s),
            wave_period_score=_to_ten(period_s),
            uv_index_score=_to_ten(uv_s),
            tide_level_score=_to_ten(tide_s),
        ),
        recommendations=build_recommendations(
            weather_cat, waves_cat, uv_cat, crowd_cat, beach_type
        ),
        best_time_today=best_time_today(now or local_now()),
    )
