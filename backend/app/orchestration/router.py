"""Deterministic fast router: question -> tool plan for simple questions.

Rules are evaluated in declaration order against the lowercased question;
the first satisfied rule produces the plan. Matching is plain substring
containment.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from backend.app.models.common import Intent
from backend.app.models.tools import ToolCall
from backend.app.orchestration.classifier import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Place:
    spot: str  # resolveSpot argument
    lat: float
    lon: float


WAIKIKI = Place("Waikiki", 21.2766, -157.8269)
NORTH_SHORE = Place("North Shore", 21.6649, -158.0532)
KAILUA = Place("Kailua Beach", 21.4010, -157.7394)

SUN_WORDS = ("sunrise", "sunset", "golden hour", "day length")
FUTURE_WORDS = ("next", "tomorrow")


def _has(q: str, *words: str) -> bool:
    return any(w in q for w in words)


def _coords(place: Place) -> dict:
    return {"lat": place.lat, "lon": place.lon}


def _resolve(place: Place) -> ToolCall:
    return ToolCall(tool="resolveSpot", args={"spot": place.spot})


def weather_plan(place: Place) -> list[ToolCall]:
    return [_resolve(place), ToolCall(tool="getWeather", args=_coords(place))]


def surf_plan(place: Place) -> list[ToolCall]:
    return [
        _resolve(place),
        ToolCall(tool="getWeather", args=_coords(place)),
        ToolCall(tool="getSurf", args=_coords(place)),
        ToolCall(tool="getTides", args=_coords(place)),
    ]


def wave_plan(place: Place) -> list[ToolCall]:
    return [
        _resolve(place),
        ToolCall(tool="getSurf", args=_coords(place)),
        ToolCall(tool="getTides", args=_coords(place)),
    ]


def score_plan(beach: str, place: Place) -> list[ToolCall]:
    return [
        ToolCall(
            tool="getBeachScore",
            args={"beach": beach, **_coords(place), "activity": "surfing"},
        )
    ]


def sun_plan(place: Place) -> list[ToolCall]:
    return [_resolve(place), ToolCall(tool="getSunTimes", args=_coords(place))]


@dataclass(frozen=True)
class RouteRule:
    """One fast-route rule."""

    name: str
    matches: Callable[[str], bool]
    plan: Callable[[], list[ToolCall]]
    current_only: bool = True  # also requires absence of "next" / "tomorrow"


ROUTE_RULES: tuple[RouteRule, ...] = (
    RouteRule("weather_waikiki", lambda q: _has(q, "weather") and _has(q, "waikiki"),
              lambda: weather_plan(WAIKIKI)),
    RouteRule("weather_north_shore", lambda q: _has(q, "weather") and _has(q, "north shore"),
              lambda: weather_plan(NORTH_SHORE)),
    RouteRule("weather_kailua", lambda q: _has(q, "weather") and _has(q, "kailua"),
              lambda: weather_plan(KAILUA)),
    RouteRule("temperature_waikiki",
              lambda q: _has(q, "temperature", "temp") and _has(q, "waikiki"),
              lambda: weather_plan(WAIKIKI)),
    RouteRule("temperature_north_shore",
              lambda q: _has(q, "temperature", "temp") and _has(q, "north shore"),
              lambda: weather_plan(NORTH_SHORE)),
    RouteRule("surf_waikiki", lambda q: _has(q, "surf") and _has(q, "waikiki"),
              lambda: surf_plan(WAIKIKI)),
    RouteRule("surf_north_shore", lambda q: _has(q, "surf") and _has(q, "north shore"),
              lambda: surf_plan(NORTH_SHORE)),
    RouteRule("wave_waikiki", lambda q: _has(q, "wave") and _has(q, "waikiki"),
              lambda: wave_plan(WAIKIKI)),
    RouteRule("wave_north_shore", lambda q: _has(q, "wave") and _has(q, "north shore"),
              lambda: wave_plan(NORTH_SHORE)),
    RouteRule("score_waikiki", lambda q: _has(q, "score") and _has(q, "waikiki"),
              lambda: score_plan("Waikiki Beach", WAIKIKI), current_only=False),
    RouteRule("score_north_shore", lambda q: _has(q, "score") and _has(q, "north shore"),
              lambda: score_plan("North Shore", NORTH_SHORE), current_only=False),
    RouteRule("sun_waikiki", lambda q: _has(q, *SUN_WORDS) and _has(q, "waikiki"),
              lambda: sun_plan(WAIKIKI), current_only=False),
    RouteRule("sun_north_shore",
              lambda q: _has(q, *SUN_WORDS) and _has(q, "north shore", "northshore"),
              lambda: sun_plan(NORTH_SHORE), current_only=False),
    RouteRule("sun_default",
              lambda q: _has(q, *SUN_WORDS) and not _has(q, "waikiki", "north shore", "northshore"),
              lambda: sun_plan(WAIKIKI), current_only=False),
    RouteRule("best_beach", lambda q: _has(q, "best beach", "recommend beach"),
              lambda: [ToolCall(tool="recommendBeaches", args={"criteria": {"activity": "family"}})]),
)  # fmt: skip


def fast_route(question: str) -> list[ToolCall] | None:
    """Map a simple question to a fixed tool plan.

    Returns:
        The plan of the first matching rule, or None when the question is not
        simple or no rule matches
    """
    intent = classify(question)
    if intent != Intent.simple:
        logger.debug(f"Skipping fast routing for {intent.value} question")
        return None

    q = question.lower()
    for rule in ROUTE_RULES:
        if rule.current_only and _has(q, *FUTURE_WORDS):
            continue
        if rule.matches(q):
            logger.info(f"Fast route matched: {rule.name}")
            return rule.plan()
    return None
