"""Extract a TemplateContext from tool results and conversation signals."""

from datetime import datetime

from backend.app.models.conversation import Message
from backend.app.models.score import BeachScore
from backend.app.models.snapshots import (
    Spot,
    SpotResolution,
    SurfSnapshot,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
)
from backend.app.models.templates import TemplateContext
from backend.app.models.tools import ToolResult, find_result
from backend.app.orchestration.conversation import (
    analyze_conversation_intent,
    detect_activity_type,
)
from backend.app.utils.clock import local_now, time_of_day

DEFAULT_LOCATION = "the area"


def build_template_context(
    results: list[ToolResult],
    question: str,
    conversation: list[Message] | None = None,
    now: datetime | None = None,
) -> TemplateContext:
    """Build the synthesis context.

    Missing values keep the TemplateContext defaults. The location comes from
    the weather result, then the resolved spot, then the top recommendation.

    Args:
        results: Executed tool results (failed entries are ignored)
        question: Raw user question
        conversation: Windowed prior turns
        now: Local time used for the time-of-day greeting (defaults to Hawaii now)
    """
    now = now or local_now()
    signals = analyze_conversation_intent(question, conversation)
    ctx = TemplateContext(
        time_of_day=time_of_day(now.hour),
        activity_type=detect_activity_type(question, conversation),
        wants_family=signals.wants_family,
        wants_surf=signals.wants_surf,
        wants_snorkel=signals.wants_snorkel,
        together_preference=signals.together_preference,
    )

    weather: WeatherSnapshot | None = find_result(results, "getWeather")
    if weather is not None:
        ctx.location = weather.location or ctx.location
        ctx.temperature = weather.temperature_f or ctx.temperature
        ctx.wind_speed = weather.wind_mph or ctx.wind_speed
        ctx.precipitation = weather.precipitation
        ctx.conditions = weather.conditions or ctx.conditions
        ctx.hourly_forecast = list(weather.hourly_forecast)

    surf: SurfSnapshot | None = find_result(results, "getSurf")
    if surf is not None:
        ctx.wave_height = surf.wave_height_ft or None
        ctx.wave_period = surf.hourly.wave_period[0] if surf.hourly.wave_period else None

    if ctx.location == DEFAULT_LOCATION:
        resolved: SpotResolution | None = find_result(results, "resolveSpot")
        if resolved is not None and resolved.name:
            ctx.location = resolved.name

    uv: UVSnapshot | None = find_result(results, "getUVIndex")
    if uv is not None:
        ctx.uv_index = uv.uv_index

    tides: TideSnapshot | None = find_result(results, "getTides")
    if tides is not None:
        ctx.tide_level = tides.current_tide

    beach_score: BeachScore | None = find_result(results, "getBeachScore")
    if beach_score is not None:
        ctx.beach_score = beach_score.overall

    recommended: list[Spot] = [
        s for s in (find_result(results, "recommendBeaches") or []) if getattr(s, "name", None)
    ]
    if recommended:
        ctx.primary_recommendation = recommended[0].name
        ctx.recommended_beaches = [s.name for s in recommended]
        if ctx.location == DEFAULT_LOCATION:
            ctx.location = recommended[0].name

    return ctx
