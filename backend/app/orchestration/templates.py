"""Priority-ranked response templates.

Each template declares the question substrings it answers and a priority;
``select_best_template`` picks the highest-priority match (declaration order
breaks ties). Generators are pure functions of the context plus an injected
``random.Random`` used only to choose between alternative phrasings.
"""

import logging
import random
import zlib
from collections.abc import Callable
from dataclasses import dataclass

from backend.app.models.common import ActivityType, TimeOfDay
from backend.app.models.snapshots import HourlyWeather
from backend.app.models.templates import TemplateContext
from backend.app.utils.units import format_number

logger = logging.getLogger(__name__)

MIN_TEMPLATE_LENGTH = 20

Generator = Callable[[TemplateContext, random.Random], str]


class SynthesisFailure(Exception):
    """No template produced a usable answer."""


@dataclass(frozen=True)
class ResponseTemplate:
    id: str
    category: str  # weather | surf | beach_score | general
    patterns: tuple[str, ...]
    priority: int
    generate: Generator


def _n(value: float | None) -> str:
    return format_number(value) if value is not None else "0"


def _sky(ctx: TemplateContext) -> str:
    return ctx.conditions.lower()


# --- fragment ladders -------------------------------------------------------


def time_greeting(time_of_day: TimeOfDay | None) -> str:
    if time_of_day == TimeOfDay.morning:
        return "Good morning!"
    if time_of_day == TimeOfDay.afternoon:
        return "Good afternoon!"
    if time_of_day in (TimeOfDay.evening, TimeOfDay.night):
        return "Good evening!"
    return "Right now,"


def activity_hint(ctx: TemplateContext) -> str:
    if ctx.temperature >= 80 and ctx.wind_speed < 10:
        return "Perfect for swimming and sunbathing!"
    if ctx.wind_speed > 15:
        return "Great for wind sports or a refreshing walk!"
    if ctx.temperature < 75:
        return "Nice for hiking or exploring!"
    return "Ideal for any outdoor adventure!"


def weather_advice(ctx: TemplateContext) -> str:
    if ctx.temperature < 70:
        return "You might want a light jacket."
    if ctx.temperature > 85:
        return "Stay hydrated and seek shade."
    if ctx.wind_speed > 20:
        return "It's quite windy - secure loose items."
    return "Comfortable conditions for outdoor activities."


def alternative_activity(ctx: TemplateContext) -> str:
    if ctx.wind_speed > 20:
        return "The wind makes it perfect for kiteboarding or windsurfing!"
    if ctx.temperature < 70:
        return "Great weather for hiking or exploring the island!"
    return "Consider indoor activities or wait for better conditions."


def temperature_range(hours: list[HourlyWeather]) -> str:
    if not hours:
        return ""
    low = min(h.temperature_f for h in hours)
    high = max(h.temperature_f for h in hours)
    if low == high:
        return _n(low)
    return f"{_n(low)}-{_n(high)}"


def weather_trend(hours: list[HourlyWeather]) -> str:
    """Compare the average temperature of the first and second half of the slice."""
    if len(hours) < 2:
        return ""
    temps = [h.temperature_f for h in hours]
    mid = len(temps) // 2
    first = sum(temps[:mid]) / mid
    second = sum(temps[mid:]) / (len(temps) - mid)
    if second > first + 2:
        return "Temperatures are rising throughout the day."
    if second < first - 2:
        return "Temperatures are cooling off later."
    return "Conditions are staying pretty consistent."


def best_time_window(hours: list[HourlyWeather]) -> str:
    if not hours:
        return ""
    good = [
        h
        for h in hours
        if h.precipitation_mm < 0.5 and 75 <= h.temperature_f <= 85 and h.wind_mph < 15
    ]
    if not good:
        return "Conditions are mixed throughout the period."
    if len(good) == len(hours):
        return "Great conditions all day long!"
    return f"Best times: {', '.join(h.time for h in good[:3])}."


INDOOR_SUGGESTIONS = (
    "Check out the Bishop Museum or Iolani Palace",
    "Visit Pearl Harbor or the Polynesian Cultural Center",
    "Explore local shops and restaurants",
    "Try indoor activities like bowling or movies",
)

SURF_ALTERNATIVES = (
    "Try stand-up paddleboarding or kayaking instead",
    "Perfect day for snorkeling or swimming",
    "Great weather for beach volleyball or frisbee",
    "Consider hiking or exploring the island",
)

ALTERNATIVE_BEACHES = (
    "Try Waikiki for calmer conditions",
    "Check out North Shore for different conditions",
    "Consider Kailua Beach for family-friendly options",
    "Lanikai might have better conditions",
)


def heat_advice(ctx: TemplateContext) -> str:
    if ctx.uv_index and ctx.uv_index > 8:
        return "High UV and heat - definitely use sunscreen and seek shade!"
    return "Stay hydrated and take breaks in the shade!"


def surf_quality(height: float, period: float) -> str:
    if height >= 4 and period >= 10:
        return "Excellent"
    if height >= 3 and period >= 8:
        return "Good"
    if height >= 2 and period >= 6:
        return "Fair"
    return "Poor"


def skill_level_advice(height: float) -> str:
    if height >= 6:
        return "Advanced surfers only - these are serious waves!"
    if height >= 4:
        return "Intermediate to advanced surfers will love this!"
    if height >= 2:
        return "Perfect for beginners to intermediate surfers!"
    return "Great for learning or longboarding!"


def best_surf_time(ctx: TemplateContext) -> str:
    if ctx.wind_speed < 10:
        return "Light winds make this perfect timing!"
    if ctx.wind_speed > 15:
        return "Windy conditions - early morning might be better."
    return "Good conditions for surfing!"


def surf_safety_advice(ctx: TemplateContext) -> str:
    if ctx.wave_height and ctx.wave_height > 10:
        return "These are massive waves - only expert surfers should attempt."
    return "Strong currents and big waves - surf with a buddy and know your limits."


def _listing(label: str, items: list[str], empty: str) -> str:
    if not items:
        return empty
    return f"{label}: {', '.join(items)}."


def beach_highlights(ctx: TemplateContext) -> str:
    items = []
    if ctx.temperature >= 80:
        items.append("perfect temperature")
    if ctx.wind_speed < 10:
        items.append("calm winds")
    if ctx.precipitation < 0.5:
        items.append("no rain")
    if ctx.uv_index and ctx.uv_index < 6:
        items.append("moderate UV")
    return _listing("Highlights", items, "Good overall conditions.")


def perfect_activities(ctx: TemplateContext) -> str:
    if ctx.wave_height and ctx.wave_height >= 3:
        return "surfing and beach activities"
    if ctx.temperature >= 80 and ctx.wind_speed < 10:
        return "swimming, sunbathing, and water sports"
    if ctx.wind_speed > 15:
        return "wind sports and beach walks"
    return "all beach activities"


def beach_strengths(ctx: TemplateContext) -> str:
    items = []
    if ctx.temperature >= 75:
        items.append("comfortable temperature")
    if ctx.wind_speed < 15:
        items.append("manageable winds")
    if ctx.precipitation < 1:
        items.append("minimal rain risk")
    return _listing("Strengths", items, "Decent overall conditions.")


def activity_recommendations(ctx: TemplateContext) -> str:
    if ctx.wave_height and ctx.wave_height >= 2:
        return "surfing and beach activities"
    if ctx.temperature >= 80:
        return "swimming and sunbathing"
    if ctx.wind_speed > 15:
        return "wind sports"
    return "general beach activities"


def beach_concerns(ctx: TemplateContext) -> str:
    items = []
    if ctx.temperature < 70:
        items.append("cooler temperatures")
    if ctx.wind_speed > 20:
        items.append("strong winds")
    if ctx.precipitation > 1:
        items.append("rain risk")
    if ctx.uv_index and ctx.uv_index > 8:
        items.append("high UV")
    return _listing("Concerns", items, "Some mixed conditions.")


_ACTIVITY_LABELS = {
    ActivityType.surfing: "surfing",
    ActivityType.family: "family beach time",
    ActivityType.snorkeling: "snorkeling",
}


def recommended_activity(ctx: TemplateContext) -> str:
    if ctx.activity_type is not None:
        return _ACTIVITY_LABELS.get(ctx.activity_type, "beach activities")
    if ctx.wave_height and ctx.wave_height >= 3:
        return "surfing"
    if ctx.temperature >= 80 and ctx.wind_speed < 15:
        return "swimming and sunbathing"
    if ctx.wind_speed > 20:
        return "wind sports"
    return "general beach activities"


def activity_reasoning(ctx: TemplateContext) -> str:
    reasons = []
    if ctx.temperature >= 75:
        reasons.append("warm temperatures")
    if ctx.wind_speed < 15:
        reasons.append("calm winds")
    if ctx.precipitation < 0.5:
        reasons.append("no rain expected")
    if ctx.uv_index and ctx.uv_index < 6:
        reasons.append("moderate UV levels")
    if not reasons:
        return "Conditions look decent."
    return f"Great because of {', '.join(reasons)}."


def safety_level(ctx: TemplateContext) -> str:
    if ctx.wave_height and ctx.wave_height > 6:
        return "challenging"
    if ctx.wind_speed > 25:
        return "windy"
    if ctx.uv_index and ctx.uv_index > 8:
        return "high UV"
    return "safe"


def safety_advice(ctx: TemplateContext) -> str:
    if ctx.wave_height and ctx.wave_height > 6:
        return "Large waves - experienced surfers only."
    if ctx.wind_speed > 25:
        return "Strong winds - avoid water activities."
    if ctx.uv_index and ctx.uv_index > 8:
        return "High UV - use sunscreen and seek shade."
    return "Standard beach safety applies."


# --- generators -------------------------------------------------------------


def _weather_excellent(ctx: TemplateContext, rng: random.Random) -> str:
    return (
        f"{time_greeting(ctx.time_of_day)} {ctx.location} is absolutely perfect! "
        f"{_n(ctx.temperature)}°F with gentle {_n(ctx.wind_speed)}mph winds and {_sky(ctx)}. "
        f"{activity_hint(ctx)} This is exactly what you want for a great day out."
    )


def _weather_good(ctx: TemplateContext, rng: random.Random) -> str:
    return (
        f"{time_greeting(ctx.time_of_day)} {ctx.location} is looking great! "
        f"{_n(ctx.temperature)}°F with {_n(ctx.wind_speed)}mph winds and {_sky(ctx)}. "
        f"{activity_hint(ctx)} Perfect weather for outdoor activities."
    )


def _weather_moderate(ctx: TemplateContext, rng: random.Random) -> str:
    return (
        f"{time_greeting(ctx.time_of_day)} {ctx.location} is {_n(ctx.temperature)}°F "
        f"with {_n(ctx.wind_speed)}mph winds and {_sky(ctx)}. "
        f"{weather_advice(ctx)} {alternative_activity(ctx)}"
    )


def _weather_forecast_hours(ctx: TemplateContext, rng: random.Random) -> str:
    hours = ctx.hourly_forecast
    if hours:
        return (
            f"For the next {len(hours)} hours in {ctx.location}: temperatures "
            f"{temperature_range(hours)}°F, {_n(ctx.wind_speed)}mph winds, and {_sky(ctx)}. "
            f"{weather_trend(hours)} {best_time_window(hours)}"
        )
    return (
        f"Weather forecast for {ctx.location}: {_n(ctx.temperature)}°F with "
        f"{_n(ctx.wind_speed)}mph winds and {_sky(ctx)}."
    )


def _weather_rain(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.precipitation > 0.5:
        return (
            f"{ctx.location} has rain expected ({_n(ctx.precipitation)}mm). "
            f"{rng.choice(INDOOR_SUGGESTIONS)} Or check back in a few hours - "
            "conditions can change quickly here!"
        )
    return f"{ctx.location} is dry with no rain expected. Great conditions for outdoor activities!"


def _weather_hot(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.temperature > 85:
        return (
            f"{ctx.location} is quite warm at {_n(ctx.temperature)}°F! {heat_advice(ctx)} "
            "Consider early morning or late afternoon activities when it's cooler."
        )
    return (
        f"{ctx.location} has comfortable temperatures at {_n(ctx.temperature)}°F. "
        "Perfect for outdoor activities!"
    )


def _challenging_surf(ctx: TemplateContext) -> str:
    return (
        f"{ctx.location} surf conditions are challenging with {_n(ctx.wind_speed)}mph winds. "
        "Consider other activities today."
    )


def _surf_excellent(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.wave_height and ctx.wave_period:
        return (
            f"{ctx.location} surf is absolutely firing! {_n(ctx.wave_height)}ft waves with "
            f"{_n(ctx.wave_period)}s period - "
            f"{surf_quality(ctx.wave_height, ctx.wave_period)} conditions! "
            f"{skill_level_advice(ctx.wave_height)} {best_surf_time(ctx)}"
        )
    return (
        f"{ctx.location} surf conditions look excellent with {_n(ctx.wind_speed)}mph winds. "
        "Check local reports for wave details."
    )


def _surf_good(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.wave_height and ctx.wave_period:
        return (
            f"{ctx.location} surf: {_n(ctx.wave_height)}ft waves with {_n(ctx.wave_period)}s "
            f"period. {surf_quality(ctx.wave_height, ctx.wave_period)} conditions for surfing! "
            f"{skill_level_advice(ctx.wave_height)}"
        )
    return (
        f"{ctx.location} surf conditions look good with {_n(ctx.wind_speed)}mph winds. "
        "Check local reports for wave details."
    )


def _surf_poor(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.wave_height and ctx.wave_height < 2:
        return (
            f"{ctx.location} has small waves ({_n(ctx.wave_height)}ft). "
            f"{rng.choice(SURF_ALTERNATIVES)} Or check North Shore - it might be bigger there!"
        )
    return _challenging_surf(ctx)


def _surf_dangerous(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.wave_height and ctx.wave_height > 8:
        return (
            f"⚠️ {ctx.location} has big waves ({_n(ctx.wave_height)}ft) - "
            f"{_n(ctx.wave_period)}s period. {surf_safety_advice(ctx)} "
            "Only experienced surfers should consider it."
        )
    return _challenging_surf(ctx)


def _score_excellent(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.beach_score and ctx.beach_score >= 8:
        return (
            f"{ctx.location} scores {_n(ctx.beach_score)}/10 - absolutely excellent! "
            f"{beach_highlights(ctx)} Perfect for {perfect_activities(ctx)}. "
            "This is exactly what you want for an amazing beach day!"
        )
    return f"{ctx.location} has outstanding conditions today. Ideal for beach activities!"


def _score_good(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.beach_score and ctx.beach_score >= 6:
        return (
            f"{ctx.location} scores {_n(ctx.beach_score)}/10 - solid conditions! "
            f"{beach_strengths(ctx)} Great for {activity_recommendations(ctx)}."
        )
    return f"{ctx.location} has decent conditions today. Worth checking out!"


def _score_moderate(ctx: TemplateContext, rng: random.Random) -> str:
    if ctx.beach_score and ctx.beach_score >= 4:
        return (
            f"{ctx.location} scores {_n(ctx.beach_score)}/10 - moderate conditions. "
            f"{beach_concerns(ctx)} {rng.choice(ALTERNATIVE_BEACHES)}"
        )
    return f"{ctx.location} has mixed conditions today. Consider other options."


def _activity_recommendation(ctx: TemplateContext, rng: random.Random) -> str:
    return (
        f"Based on current conditions in {ctx.location}, I'd recommend "
        f"{recommended_activity(ctx)}. {activity_reasoning(ctx)}"
    )


def _safety_concern(ctx: TemplateContext, rng: random.Random) -> str:
    return f"{ctx.location} conditions are {safety_level(ctx)}. {safety_advice(ctx)}"


WEATHER_PATTERNS = ("weather", "temperature", "conditions")
SURF_PATTERNS = ("surf", "waves", "surfing")

TEMPLATES: tuple[ResponseTemplate, ...] = (
    ResponseTemplate("current_weather_excellent", "weather", WEATHER_PATTERNS, 12, _weather_excellent),
    ResponseTemplate("current_weather_good", "weather", WEATHER_PATTERNS, 10, _weather_good),
    ResponseTemplate("current_weather_moderate", "weather", WEATHER_PATTERNS, 9, _weather_moderate),
    ResponseTemplate("weather_forecast_hours", "weather", ("next", "hours", "forecast"), 8,
                     _weather_forecast_hours),
    ResponseTemplate("weather_rain_concern", "weather", ("rain", "precipitation", "wet"), 7,
                     _weather_rain),
    ResponseTemplate("weather_hot_concern", "weather", ("hot", "warm", "temperature"), 6,
                     _weather_hot),
    ResponseTemplate("surf_conditions_excellent", "surf", SURF_PATTERNS, 12, _surf_excellent),
    ResponseTemplate("surf_conditions_good", "surf", SURF_PATTERNS, 10, _surf_good),
    ResponseTemplate("surf_conditions_poor", "surf", SURF_PATTERNS, 9, _surf_poor),
    ResponseTemplate("surf_conditions_dangerous", "surf", SURF_PATTERNS, 11, _surf_dangerous),
    ResponseTemplate("beach_score_excellent", "beach_score", ("score", "rating", "best", "good"),
                     12, _score_excellent),
    ResponseTemplate("beach_score_good", "beach_score", ("score", "rating", "good"), 10,
                     _score_good),
    ResponseTemplate("beach_score_moderate", "beach_score", ("score", "rating"), 8,
                     _score_moderate),
    ResponseTemplate("activity_recommendation", "general", ("recommend", "suggest", "what to do"),
                     8, _activity_recommendation),
    ResponseTemplate("safety_concern", "general", ("safe", "dangerous", "risk"), 9,
                     _safety_concern),
)  # fmt: skip


def select_best_template(
    question: str,
    ctx: TemplateContext | None = None,
    templates: tuple[ResponseTemplate, ...] = TEMPLATES,
) -> ResponseTemplate | None:
    """Highest-priority template with a pattern present in the question.

    Ties go to the template declared first.
    """
    q = question.lower()
    best: ResponseTemplate | None = None
    for template in templates:
        if not any(p in q for p in template.patterns):
            continue
        if best is None or template.priority > best.priority:
            best = template
    return best


def context_seed(ctx: TemplateContext) -> int:
    """Stable seed derived from the context contents."""
    return zlib.crc32(ctx.model_dump_json().encode("utf-8"))


def fallback_line(ctx: TemplateContext) -> str:
    return (
        f"Current conditions in {ctx.location}: {_n(ctx.temperature)}°F, "
        f"{_n(ctx.wind_speed)}mph winds, {_sky(ctx)}."
    )


def apply_template(
    template: ResponseTemplate, ctx: TemplateContext, rng: random.Random | None = None
) -> str:
    """Run a template generator; a failing generator yields the plain conditions line."""
    rng = rng or random.Random(context_seed(ctx))
    try:
        return template.generate(ctx, rng)
    except Exception:
        logger.exception(f"Template {template.id} failed")
        return fallback_line(ctx)


def render_template(
    question: str, ctx: TemplateContext, rng: random.Random | None = None
) -> str:
    """Select and apply the best template for ``question``.

    Args:
        question: Raw user question
        ctx: Context extracted from tool results
        rng: Optional source for alternative phrasings (seeded from ``ctx`` when absent)

    Returns:
        Template output longer than 20 characters

    Raises:
        SynthesisFailure: No template matches or the output is too short
    """
    template = select_best_template(question, ctx)
    if template is None:
        raise SynthesisFailure("no template matches question")

    text = apply_template(template, ctx, rng).strip()
    if len(text) <= MIN_TEMPLATE_LENGTH:
        raise SynthesisFailure(f"template {template.id} output too short")
    logger.debug(f"Template {template.id} selected")
    return text
