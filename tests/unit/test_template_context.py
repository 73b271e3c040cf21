"""Tests for building the synthesis context from tool results."""

from datetime import datetime

import pytest

from backend.app.adapters.spots import recommend_beaches
from backend.app.models.common import ActivityType, TimeOfDay
from backend.app.models.conversation import Message
from backend.app.models.snapshots import (
    CurrentWeather,
    SpotResolution,
    SurfHourly,
    SurfSnapshot,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
)
from backend.app.models.tools import ToolResult
from backend.app.orchestration.context import build_template_context

AFTERNOON = datetime(2026, 10, 19, 14, 0)


def _ok(tool: str, result: object) -> ToolResult:
    return ToolResult(tool=tool, result=result, success=True)


class TestBuildTemplateContext:
    """Missing data keeps defaults; available data is normalized."""

    def test_defaults_without_results(self) -> None:
        ctx = build_template_context([], "What's up?", now=AFTERNOON)

        assert ctx.location == "the area"
        assert ctx.temperature == 75
        assert ctx.wind_speed == 10
        assert ctx.wave_height is None
        assert ctx.time_of_day == TimeOfDay.afternoon
        assert ctx.activity_type == ActivityType.general

    def test_full_results(self) -> None:
        weather = WeatherSnapshot(
            location="Waikiki",
            current=CurrentWeather(
                temperature_2m=26, wind_speed_10m=10, precipitation=0.4, weather_code=61
            ),
        )
        surf = SurfSnapshot(
            hourly=SurfHourly(time=["2026-10-19T14:00"], wave_height=[0.9], wave_period=[9.0])
        )
        results = [
            _ok("resolveSpot", SpotResolution(name="Waikiki Beach", lat=21.2766, lon=-157.8269)),
            _ok("getWeather", weather),
            _ok("getSurf", surf),
            _ok("getUVIndex", UVSnapshot.from_index(7)),
            _ok(
                "getTides",
                TideSnapshot(station="Honolulu", station_id="1612340", current_tide=1.2),
            ),
        ]

        ctx = build_template_context(results, "How are the waves?", now=AFTERNOON)

        assert ctx.location == "Waikiki"
        assert ctx.temperature == pytest.approx(78.8)
        assert ctx.wind_speed == pytest.approx(6.2)
        assert ctx.precipitation == pytest.approx(0.4)
        assert ctx.conditions == "rainy"
        assert ctx.wave_height == pytest.approx(3.0)
        assert ctx.wave_period == 9.0
        assert ctx.uv_index == 7
        assert ctx.tide_level == 1.2
        assert ctx.activity_type == ActivityType.surfing

    def test_failed_results_ignored(self) -> None:
        results = [ToolResult(tool="getWeather", error="timed out", success=False)]
        ctx = build_template_context(results, "weather?", now=AFTERNOON)
        assert ctx.temperature == 75

    def test_location_from_resolved_spot(self) -> None:
        results = [_ok("resolveSpot", SpotResolution(name="Pipeline", lat=21.66, lon=-158.05))]
        assert build_template_context(results, "surf?", now=AFTERNOON).location == "Pipeline"

    def test_recommendations(self) -> None:
        spots = recommend_beaches(family=True)
        ctx = build_template_context(
            [_ok("recommendBeaches", spots)], "Best beach for kids?", now=AFTERNOON
        )

        assert ctx.primary_recommendation == "Waikiki Beach"
        assert ctx.recommended_beaches == [s.name for s in spots]
        assert ctx.location == "Waikiki Beach"
        assert ctx.wants_family

    def test_flat_surf_leaves_height_unset(self) -> None:
        surf = SurfSnapshot(hourly=SurfHourly(time=["2026-10-19T14:00"], wave_height=[0.0]))
        ctx = build_template_context([_ok("getSurf", surf)], "waves?", now=AFTERNOON)
        assert ctx.wave_height is None

    def test_signals_from_conversation(self) -> None:
        conversation = [Message(text="Need to keep everyone together", is_user=True)]
        ctx = build_template_context([], "Where to?", conversation, now=AFTERNOON)

        assert not ctx.together_preference
        assert ctx.activity_type == ActivityType.general

        ctx = build_template_context([], "Whole family, one beach please", now=AFTERNOON)
        assert ctx.together_preference
        assert ctx.activity_type == ActivityType.family
