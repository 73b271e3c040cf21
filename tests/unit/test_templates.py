"""Tests for template selection and rendering."""

import random
from unittest.mock import patch

import pytest

from backend.app.models.common import TimeOfDay
from backend.app.models.snapshots import HourlyWeather
from backend.app.models.templates import TemplateContext
from backend.app.orchestration.templates import (
    ALTERNATIVE_BEACHES,
    INDOOR_SUGGESTIONS,
    TEMPLATES,
    ResponseTemplate,
    SynthesisFailure,
    apply_template,
    best_time_window,
    context_seed,
    fallback_line,
    render_template,
    select_best_template,
    skill_level_advice,
    surf_quality,
    weather_trend,
)


def _hour(label: str, hour_24: int, temp: float, wind: float = 8, rain: float = 0) -> HourlyWeather:
    return HourlyWeather(
        time=label,
        hour_24=hour_24,
        temperature_f=temp,
        wind_mph=wind,
        precipitation_mm=rain,
        conditions="clear sky",
        is_good_weather=rain < 0.5 and 75 <= temp <= 85 and wind < 15,
    )


class TestSelection:
    """Highest priority wins; declaration order breaks ties."""

    def test_weather_question(self) -> None:
        template = select_best_template("What's the weather like?")
        assert template is not None
        assert template.id == "current_weather_excellent"

    def test_surf_question(self) -> None:
        template = select_best_template("how is surfing there")
        assert template is not None
        assert template.id == "surf_conditions_excellent"

    def test_rain_question(self) -> None:
        template = select_best_template("will I get wet?")
        assert template is not None
        assert template.id == "weather_rain_concern"

    def test_safety_question(self) -> None:
        template = select_best_template("is it dangerous?")
        assert template is not None
        assert template.id == "safety_concern"

    def test_no_match(self) -> None:
        assert select_best_template("Is Waikiki crowded?") is None

    def test_tie_goes_to_first_declared(self) -> None:
        def generate(ctx: TemplateContext, rng: random.Random) -> str:
            return ctx.location

        first = ResponseTemplate("first", "general", ("beach",), 5, generate)
        second = ResponseTemplate("second", "general", ("beach",), 5, generate)
        chosen = select_best_template("beach day", templates=(first, second))
        assert chosen is first

    def test_template_ids_unique(self) -> None:
        ids = [t.id for t in TEMPLATES]
        assert len(ids) == len(set(ids)) == 15


class TestRendering:
    """Generators fill in context values."""

    def test_weather_excellent(self) -> None:
        ctx = TemplateContext(
            location="Waikiki",
            temperature=80,
            wind_speed=5,
            conditions="clear sky",
            time_of_day=TimeOfDay.morning,
        )
        text = render_template("What's the weather?", ctx)
        assert text == (
            "Good morning! Waikiki is absolutely perfect! 80°F with gentle 5mph winds and "
            "clear sky. Perfect for swimming and sunbathing! This is exactly what you want "
            "for a great day out."
        )

    def test_surf_excellent_with_wave_data(self) -> None:
        ctx = TemplateContext(location="Pipeline", wave_height=6.5, wave_period=14)
        text = render_template("surf report", ctx)
        assert text.startswith("Pipeline surf is absolutely firing! 6.5ft waves with 14s period")
        assert skill_level_advice(6.5) in text

    def test_surf_without_wave_data(self) -> None:
        ctx = TemplateContext(location="Waikiki", wind_speed=12)
        text = render_template("surf report", ctx)
        assert text == (
            "Waikiki surf conditions look excellent with 12mph winds. "
            "Check local reports for wave details."
        )

    def test_rain_uses_rng_choice(self) -> None:
        ctx = TemplateContext(location="Kailua", precipitation=3.5)
        text = render_template("rain today?", ctx, random.Random(1))
        assert text.startswith("Kailua has rain expected (3.5mm).")
        assert any(suggestion in text for suggestion in INDOOR_SUGGESTIONS)

    def test_moderate_score_mentions_alternative(self) -> None:
        template = next(t for t in TEMPLATES if t.id == "beach_score_moderate")
        ctx = TemplateContext(location="Sandy Beach", beach_score=5.5)
        text = apply_template(template, ctx, random.Random(3))
        assert text.startswith("Sandy Beach scores 5.5/10 - moderate conditions.")
        assert any(alt in text for alt in ALTERNATIVE_BEACHES)

    def test_forecast_template_uses_hourly_slice(self) -> None:
        hours = [_hour("9am", 9, 76), _hour("10am", 10, 78), _hour("11am", 11, 84)]
        ctx = TemplateContext(location="Waikiki", hourly_forecast=hours)
        template = next(t for t in TEMPLATES if t.id == "weather_forecast_hours")
        text = apply_template(template, ctx)
        assert text.startswith("For the next 3 hours in Waikiki: temperatures 76-84°F")
        assert "Temperatures are rising throughout the day." in text
        assert text.endswith("Great conditions all day long!")

    def test_same_context_same_output(self) -> None:
        ctx = TemplateContext(location="Kailua", precipitation=3.5)
        assert render_template("rain?", ctx) == render_template("rain?", ctx)
        assert context_seed(ctx) == context_seed(ctx.model_copy())

    def test_failing_generator_falls_back(self) -> None:
        def broken(ctx: TemplateContext, rng: random.Random) -> str:
            raise KeyError("missing")

        template = ResponseTemplate("broken", "general", ("x",), 1, broken)
        ctx = TemplateContext(location="Waikiki", temperature=81.5, wind_speed=7)
        assert apply_template(template, ctx) == fallback_line(ctx)
        assert fallback_line(ctx) == (
            "Current conditions in Waikiki: 81.5°F, 7mph winds, clear sky."
        )

    def test_no_template_raises(self) -> None:
        with pytest.raises(SynthesisFailure):
            render_template("Is Waikiki crowded?", TemplateContext())

    def test_short_output_raises(self) -> None:
        def terse(ctx: TemplateContext, rng: random.Random) -> str:
            return "Nice."

        template = ResponseTemplate("terse", "general", ("weather",), 99, terse)
        with patch(
            "backend.app.orchestration.templates.select_best_template", return_value=template
        ):
            with pytest.raises(SynthesisFailure):
                render_template("weather?", TemplateContext())


class TestFragments:
    """Fragment ladders."""

    @pytest.mark.parametrize(
        ("height", "period", "expected"),
        [(4, 10, "Excellent"), (3, 8, "Good"), (2, 6, "Fair"), (3, 5, "Poor"), (1, 12, "Poor")],
    )
    def test_surf_quality(self, height: float, period: float, expected: str) -> None:
        assert surf_quality(height, period) == expected

    def test_weather_trend_cooling(self) -> None:
        hours = [
            _hour("1pm", 13, 84),
            _hour("2pm", 14, 84),
            _hour("5pm", 17, 78),
            _hour("6pm", 18, 77),
        ]
        assert weather_trend(hours) == "Temperatures are cooling off later."

    def test_best_time_window_lists_good_hours(self) -> None:
        hours = [_hour("9am", 9, 70), _hour("10am", 10, 78), _hour("11am", 11, 80, rain=1.0)]
        assert best_time_window(hours) == "Best times: 10am."

    def test_best_time_window_mixed(self) -> None:
        assert best_time_window([_hour("9am", 9, 70)]) == (
            "Conditions are mixed throughout the period."
        )
