"""Tests for composite beach scoring."""

from datetime import datetime

import pytest

from backend.app.models.common import BeachType
from backend.app.models.snapshots import (
    CurrentWeather,
    SurfHourly,
    SurfSnapshot,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
)
from backend.app.scoring.beach_score import (
    FALLBACK_RECOMMENDATION,
    best_time_today,
    score,
    temperature_score,
    tide_level_score,
    wave_height_score,
    wind_score,
)
from backend.app.scoring.weights import DEFAULT_CROWD_LEVEL, weights_for

MORNING = datetime(2026, 10, 19, 10, 0)


def _weather(temp_c: float = 26.0, wind_kmh: float = 10.0, precip: float = 0.0) -> WeatherSnapshot:
    return WeatherSnapshot(
        current=CurrentWeather(temperature_2m=temp_c, wind_speed_10m=wind_kmh, precipitation=precip)
    )


def _surf(height_m: float, period: float) -> SurfSnapshot:
    return SurfSnapshot(
        hourly=SurfHourly(time=["2026-10-19T10:00"], wave_height=[height_m], wave_period=[period])
    )


def _tides(level: float) -> TideSnapshot:
    return TideSnapshot(station="Honolulu", station_id="1612340", current_tide=level)


class TestComponentLadders:
    """Threshold ladders on the 0-100 scale."""

    @pytest.mark.parametrize(
        ("temp", "expected"),
        [(None, 70), (65, 60), (72, 80), (80, 100), (85, 100), (88, 85), (95, 70)],
    )
    def test_temperature(self, temp: float | None, expected: float) -> None:
        assert temperature_score(temp) == expected

    @pytest.mark.parametrize(("wind", "expected"), [(None, 40), (3, 100), (12, 75), (25, 40)])
    def test_wind(self, wind: float | None, expected: float) -> None:
        assert wind_score(wind) == expected

    def test_wave_height_depends_on_beach_type(self) -> None:
        assert wave_height_score(5, BeachType.surf) == 100
        assert wave_height_score(5, BeachType.family) == 40
        assert wave_height_score(5, BeachType.snorkel) == 40
        assert wave_height_score(5, BeachType.mixed) == 60

    def test_tide_level(self) -> None:
        assert tide_level_score(1.0, BeachType.surf) == 90
        assert tide_level_score(0.2, BeachType.surf) == 70
        assert tide_level_score(1.0, BeachType.family) == 90
        assert tide_level_score(2.0, BeachType.family) == 70


class TestWeights:
    """Category and component weights each sum to one."""

    @pytest.mark.parametrize("beach_type", list(BeachType))
    def test_weights_sum_to_one(self, beach_type: BeachType) -> None:
        w = weights_for(beach_type)
        assert w.weather + w.waves + w.uv + w.tides + w.crowd == pytest.approx(1.0)
        assert w.temperature + w.wind + w.precipitation == pytest.approx(1.0)
        assert w.wave_height + w.wave_period == pytest.approx(1.0)

    def test_every_type_has_crowd_default(self) -> None:
        assert set(DEFAULT_CROWD_LEVEL) == set(BeachType)


class TestScore:
    """End-to-end scoring."""

    def test_calm_family_day(self) -> None:
        result = score(
            _weather(),
            _surf(0.2, 9),
            UVSnapshot.from_index(3),
            _tides(0.5),
            BeachType.family,
            now=MORNING,
        )
        assert result.overall >= 8
        assert result.weather == pytest.approx(9.7)
        assert result.crowd_level == pytest.approx(6.0)
        assert result.breakdown.temperature_score == pytest.approx(10.0)
        assert result.recommendations == [FALLBACK_RECOMMENDATION]
        assert result.best_time_today == "Now is a great time!"

    def test_overall_is_weighted_categories(self) -> None:
        result = score(
            _weather(), _surf(0.9, 9), UVSnapshot.from_index(5), _tides(0.5), now=MORNING
        )
        w = weights_for(BeachType.mixed)
        expected = (
            result.weather * w.weather
            + result.waves * w.waves
            + result.uv_safety * w.uv
            + result.tides * w.tides
            + result.crowd_level * w.crowd
        )
        assert result.overall == pytest.approx(expected, abs=0.051)

    def test_big_surf_on_surf_beach(self) -> None:
        result = score(_weather(), _surf(2.0, 13), None, None, BeachType.surf, now=MORNING)
        assert "Great surf conditions - perfect day for surfing!" in result.recommendations

    def test_rough_water_for_family(self) -> None:
        result = score(_weather(), _surf(1.0, 5), None, None, BeachType.family, now=MORNING)
        assert "Waves may be too rough for young children" in result.recommendations

    def test_poor_weather_high_uv_and_crowds(self) -> None:
        result = score(
            _weather(temp_c=15, precip=3),
            None,
            UVSnapshot.from_index(9),
            None,
            crowd_level=40,
            now=MORNING,
        )
        assert result.recommendations == [
            "Weather conditions are not ideal - consider indoor activities",
            "High UV index - use sunscreen and seek shade frequently",
            "Beach may be crowded - arrive early for better parking",
        ]

    def test_no_data_stays_in_range(self) -> None:
        result = score(None, None, None, None, now=MORNING)
        for value in (
            result.overall,
            result.weather,
            result.waves,
            result.uv_safety,
            result.tides,
            result.crowd_level,
        ):
            assert 0 <= value <= 10

    @pytest.mark.parametrize("beach_type", list(BeachType))
    @pytest.mark.parametrize("height_m", [0.0, 0.5, 1.5, 3.0])
    @pytest.mark.parametrize(
        ("temp_c", "wind_kmh", "precip"),
        [(-20, 0, 0), (35, 40, 5), (60, 250, 80), (26, -5, 0.3)],
    )
    @pytest.mark.parametrize("crowd_level", [0, 100])
    @pytest.mark.parametrize("tide_ft", [-3.0, -0.5, 0.4, 1.5, 6.0])
    def test_all_fields_bounded(
        self,
        beach_type: BeachType,
        height_m: float,
        temp_c: float,
        wind_kmh: float,
        precip: float,
        crowd_level: float,
        tide_ft: float,
    ) -> None:
        result = score(
            _weather(temp_c=temp_c, wind_kmh=wind_kmh, precip=precip),
            _surf(height_m, 18),
            UVSnapshot.from_index(12),
            _tides(tide_ft),
            beach_type,
            crowd_level=crowd_level,
            now=MORNING,
        )
        for value in (
            result.overall,
            result.weather,
            result.waves,
            result.uv_safety,
            result.tides,
            result.crowd_level,
        ):
            assert 0 <= value <= 10
        assert all(0 <= v <= 10 for v in result.breakdown.model_dump().values())

    @pytest.mark.parametrize("beach_type", list(BeachType))
    def test_same_inputs_same_score(self, beach_type: BeachType) -> None:
        inputs = (
            _weather(temp_c=28, wind_kmh=18, precip=0.2),
            _surf(1.2, 11),
            UVSnapshot.from_index(8),
            _tides(0.9),
        )

        first = score(*inputs, beach_type, crowd_level=55, now=MORNING)
        second = score(*inputs, beach_type, crowd_level=55, now=MORNING)

        assert first.model_dump_json() == second.model_dump_json()


class TestBestTime:
    """Clock-only hint."""

    @pytest.mark.parametrize(
        ("hour", "expected"),
        [
            (7, "Best time: 9am-3pm"),
            (9, "Now is a great time!"),
            (15, "Now is a great time!"),
            (16, "Best time: Tomorrow 9am-3pm"),
        ],
    )
    def test_hint(self, hour: int, expected: str) -> None:
        assert best_time_today(datetime(2026, 10, 19, hour, 30)) == expected
