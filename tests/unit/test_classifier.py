"""Tests for question classification and fast routing."""

import pytest

from backend.app.models.common import Intent
from backend.app.orchestration.classifier import classify, is_future_question
from backend.app.orchestration.router import fast_route


class TestClassify:
    """simple / complex / forecast labels."""

    @pytest.mark.parametrize(
        "question",
        [
            "What's the weather in Waikiki?",
            "How is the surf at the North Shore?",
            "Current temp in Kailua",
            "Is Waikiki crowded right now?",
        ],
    )
    def test_simple(self, question: str) -> None:
        assert classify(question) == Intent.simple

    @pytest.mark.parametrize(
        "question",
        [
            "Should I surf Waikiki?",
            "Which beach is best for kids?",
            "Compare Waikiki and Kailua",
            "Is it a good day for the beach today?",
        ],
    )
    def test_complex(self, question: str) -> None:
        assert classify(question) == Intent.complex

    @pytest.mark.parametrize(
        "question",
        [
            "Weather tomorrow in Waikiki",
            "Surf for the next 6 hours at the North Shore",
            "Should I go this afternoon?",
            "What's it like today?",
        ],
    )
    def test_forecast(self, question: str) -> None:
        assert classify(question) == Intent.forecast


class TestIsFutureQuestion:
    """Future wording disables caching and templates."""

    def test_future(self) -> None:
        assert is_future_question("Surf later at Waikiki")
        assert is_future_question("Whats the forecast")
        assert is_future_question("Plan my beach day")

    def test_current(self) -> None:
        assert not is_future_question("What's the weather in Waikiki?")


class TestFastRoute:
    """First matching rule wins; non-simple questions are never routed."""

    def test_weather_waikiki(self) -> None:
        plan = fast_route("What's the weather in Waikiki?")
        assert plan is not None
        assert [c.tool for c in plan] == ["resolveSpot", "getWeather"]
        assert plan[0].args == {"spot": "Waikiki"}
        assert plan[1].args == {"lat": 21.2766, "lon": -157.8269}

    def test_surf_north_shore(self) -> None:
        plan = fast_route("How's the surf at the North Shore?")
        assert plan is not None
        assert [c.tool for c in plan] == ["resolveSpot", "getWeather", "getSurf", "getTides"]
        assert plan[0].args == {"spot": "North Shore"}

    def test_waves_waikiki(self) -> None:
        plan = fast_route("How big are the waves at Waikiki")
        assert plan is not None
        assert [c.tool for c in plan] == ["resolveSpot", "getSurf", "getTides"]

    def test_score(self) -> None:
        plan = fast_route("Beach score for Waikiki")
        assert plan is not None
        assert len(plan) == 1
        assert plan[0].tool == "getBeachScore"
        assert plan[0].args["beach"] == "Waikiki Beach"
        assert plan[0].args["activity"] == "surfing"

    def test_sun_defaults_to_waikiki(self) -> None:
        plan = fast_route("When is sunset")
        # "when" is advisory, so the question is not simple
        assert plan is None
        plan = fast_route("sunrise time")
        assert plan is not None
        assert [c.tool for c in plan] == ["resolveSpot", "getSunTimes"]
        assert plan[0].args == {"spot": "Waikiki"}

    def test_complex_not_routed(self) -> None:
        assert fast_route("Should I surf Waikiki?") is None

    def test_forecast_not_routed(self) -> None:
        assert fast_route("Weather tomorrow in Waikiki") is None

    def test_no_rule(self) -> None:
        assert fast_route("Is Waikiki crowded right now?") is None
        assert fast_route("Weather in Lanikai") is None
