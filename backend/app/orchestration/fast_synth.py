"""Deterministic answers for simple questions, built straight from tool results."""

import re
from typing import Any

from backend.app.models.common import Intent
from backend.app.models.score import BeachScore
from backend.app.models.snapshots import (
    SunSnapshot,
    SurfHour,
    SurfSnapshot,
    TideSnapshot,
    WeatherSnapshot,
)
from backend.app.models.tools import ToolResult, find_result
from backend.app.orchestration.classifier import classify
from backend.app.utils.units import compass_16, format_number

ADVISORY_WORDS = ("should", "recommend", "advice", "beginner", "safety", "first time")
SURF_ADVISORY_WORDS = (*ADVISORY_WORDS, "what should", "what to know")
SCORE_ADVISORY_WORDS = ("should", "recommend", "advice")
FUTURE_WORDS = ("next", "hour", "later", "afternoon", "morning", "tonight", "today", "forecast")
SUN_WORDS = ("sunrise", "sunset", "golden hour", "day length")

_CLOCK_TIME = re.compile(r"(\d{1,2})(am|pm)")


def _has(q: str, words: tuple[str, ...]) -> bool:
    return any(w in q for w in words)


def _pick(results: list[ToolResult], tool: str, asking_future: bool) -> Any | None:
    """First successful payload for ``tool``; one carrying an hourly slice when asking ahead."""
    if asking_future:
        for entry in results:
            if (
                entry.tool == tool
                and entry.success
                and getattr(entry.result, "hourly_forecast", None)
            ):
                return entry.result
    return find_result(results, tool)


def _value(value: float | None) -> str:
    return format_number(value) if value is not None else "N/A"


def weather_answer(weather: WeatherSnapshot, asking_future: bool) -> str:
    location = weather.location or "the area"
    if asking_future and weather.hourly_forecast:
        lines = [f"Weather forecast for {location} (next {len(weather.hourly_forecast)} hours):"]
        for hour in weather.hourly_forecast:
            emoji = "☀️" if hour.is_good_weather else "⛅"
            lines.append(
                f"{emoji} {hour.time}: {format_number(hour.temperature_f)}°F, "
                f"{format_number(hour.wind_mph)}mph wind, {hour.conditions}"
            )
        return "\n".join(lines)

    rain = "rain expected" if weather.precipitation > 0 else "no rain"
    return (
        f"Weather in {location}: {_value(weather.temperature_f)}°F, "
        f"{_value(weather.wind_mph)}mph winds, {rain}."
    )


def _surf_hour_line(label: str, hour: SurfHour) -> str:
    emoji = "🏄" if hour.good_for_surfing else "🌊"
    return (
        f"{emoji} {label}: {hour.wave_height_ft:.1f}ft, {format_number(hour.wave_period_s)}s, "
        f"{hour.wave_direction} - {hour.quality_description} ({hour.quality}/5)"
    )


def surf_answer(
    surf: SurfSnapshot,
    weather: WeatherSnapshot | None,
    tides: TideSnapshot | None,
    asking_future: bool,
) -> str:
    if asking_future and surf.hourly_forecast:
        lines = [f"Surf forecast for the spot (next {len(surf.hourly_forecast)} hours):"]
        lines.extend(_surf_hour_line(h.time, h) for h in surf.hourly_forecast)
        return "\n".join(lines)

    height = surf.wave_height_ft
    answer = f"Surf conditions: {height:.1f}ft waves, {surf.wave_period:.1f}s period"
    if surf.wave_direction:
        answer += f" from the {compass_16(surf.wave_direction)}"
    if tides is not None:
        level = tides.current_tide if tides.current_tide is not None else 0.0
        answer += f". Tide level: {level:.1f}ft"
    if weather is not None:
        answer += (
            f". Weather: {_value(weather.temperature_f)}°F, {_value(weather.wind_mph)}mph winds"
        )

    if height > 6:
        answer += ". Conditions are challenging - experienced surfers only."
    elif height > 3:
        answer += ". Good surf conditions for intermediate surfers."
    elif height > 1:
        answer += ". Gentle conditions perfect for beginners."
    else:
        answer += ". Very calm conditions - great for learning."
    return answer


def _to_hour_24(hour: int, period: str) -> int:
    if period == "pm" and hour != 12:
        return hour + 12
    if period == "am" and hour == 12:
        return 0
    return hour


def time_comparison_answer(q: str, surf: SurfSnapshot) -> str | None:
    """Compare surf at two or more clock times named in the question."""
    matches = _CLOCK_TIME.finditer(q)
    times = [(m.group(0), _to_hour_24(int(m.group(1)), m.group(2))) for m in matches]
    if len(times) < 2:
        return None

    by_hour = {h.hour_24: h for h in surf.hourly_forecast}
    lines = [f"Surf comparison for {' vs '.join(label for label, _ in times)}:", ""]
    for label, hour_24 in times:
        hour = by_hour.get(hour_24)
        if hour is not None:
            lines.append(_surf_hour_line(label, hour))

    def quality(hour_24: int) -> int:
        hour = by_hour.get(hour_24)
        return hour.quality if hour else 0

    best_label, best_hour = times[0]
    for label, hour_24 in times[1:]:
        if quality(hour_24) > quality(best_hour):
            best_label, best_hour = label, hour_24

    if best_hour in by_hour:
        best_quality = by_hour[best_hour].quality
        lines.extend(["", f"🏆 Best choice: {best_label} ({best_quality}/5 quality)"])
    return "\n".join(lines)


def sun_answer(sun: SunSnapshot) -> str:
    return "\n".join(
        [
            "Sun times for today:",
            f"🌅 Sunrise: {sun.sunrise.formatted}",
            f"🌇 Sunset: {sun.sunset.formatted}",
            f"⏰ Day length: {sun.day_length.formatted}",
            f"✨ Golden hour: {sun.golden_hour.start.formatted} - {sun.golden_hour.end.formatted}",
        ]
    )


def fast_synthesize(results: list[ToolResult], question: str) -> str | None:
    """Build a deterministic answer for a simple question.

    Branches are tried in order: weather, time comparison, surf, beach score,
    sun times. Advisory wording disables the weather, surf and score branches.

    Returns:
        Answer text, or None when the question is not simple or no branch applies
    """
    if classify(question) != Intent.simple:
        return None

    q = question.lower()
    asking_future = _has(q, FUTURE_WORDS)
    weather: WeatherSnapshot | None = _pick(results, "getWeather", asking_future)
    surf: SurfSnapshot | None = _pick(results, "getSurf", asking_future)

    if _has(q, ("weather", "temperature", "temp")) and not _has(q, ADVISORY_WORDS):
        if weather is not None:
            return weather_answer(weather, asking_future)

    if (
        _has(q, (" or ", '" or "', "' or '"))
        and _has(q, ("pm", "am", "hour"))
        and surf is not None
        and surf.hourly_forecast
    ):
        comparison = time_comparison_answer(q, surf)
        if comparison:
            return comparison

    if _has(q, ("surf", "wave")) and not _has(q, SURF_ADVISORY_WORDS):
        if surf is not None:
            return surf_answer(surf, weather, find_result(results, "getTides"), asking_future)

    if "score" in q and not _has(q, SCORE_ADVISORY_WORDS):
        beach_score: BeachScore | None = find_result(results, "getBeachScore")
        if beach_score is not None:
            first = beach_score.recommendations[0] if beach_score.recommendations else None
            return f"Beach score: {beach_score.overall}/10. {first or 'Good conditions today!'}"

    if _has(q, SUN_WORDS):
        sun: SunSnapshot | None = find_result(results, "getSunTimes")
        if sun is not None:
            return sun_answer(sun)

    return None
