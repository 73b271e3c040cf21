"""Tests for tool argument validation."""

import pytest
from pydantic import ValidationError

from backend.app.models.common import ActivityType, BeachType
from backend.app.models.tool_args import (
    AnalyzeSpotsArgs,
    BeachScoreArgs,
    CoordinateArgs,
    RecommendBeachesArgs,
    WeatherArgs,
)


class TestCoordinateArgs:
    """Latitude/longitude bounds."""

    def test_valid(self) -> None:
        args = CoordinateArgs.model_validate({"lat": 21.2766, "lon": -157.8269})
        assert args.geo.lat == 21.2766

    def test_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            CoordinateArgs.model_validate({"lat": 120, "lon": 0})

    def test_unknown_fields_ignored(self) -> None:
        args = CoordinateArgs.model_validate({"lat": 1, "lon": 2, "units": "imperial"})
        assert args.lon == 2


class TestWeatherArgs:
    """Snake-case and camelCase forecast arguments."""

    def test_current_only(self) -> None:
        assert not WeatherArgs.model_validate({"lat": 1, "lon": 2}).is_extended

    def test_camel_case_aliases(self) -> None:
        args = WeatherArgs.model_validate(
            {"lat": 1, "lon": 2, "startOffsetHours": 24, "timeDescriptor": "tomorrow"}
        )
        assert args.start_offset_hours == 24
        assert args.time_descriptor == "tomorrow"
        assert args.is_extended

    def test_snake_case(self) -> None:
        args = WeatherArgs.model_validate({"lat": 1, "lon": 2, "hours": 6, "start_offset_hours": 6})
        assert args.hours == 6
        assert args.start_offset_hours == 6


class TestRecommendBeachesArgs:
    """criteria.activity is shorthand for a flag."""

    def test_criteria_activity_sets_flag(self) -> None:
        args = RecommendBeachesArgs.model_validate({"criteria": {"activity": "family"}})
        assert args.family is True
        assert args.surf is False

    def test_criteria_surfing(self) -> None:
        assert RecommendBeachesArgs.model_validate({"criteria": {"activity": "Surfing"}}).surf

    def test_unknown_activity_ignored(self) -> None:
        args = RecommendBeachesArgs.model_validate({"criteria": {"activity": "golf"}})
        assert not (args.family or args.surf or args.snorkel or args.scenic)

    def test_exclude_restricted_alias(self) -> None:
        args = RecommendBeachesArgs.model_validate({"excludeRestricted": False})
        assert args.exclude_restricted is False


class TestBeachScoreArgs:
    """Beach type resolution."""

    def test_explicit_type_wins(self) -> None:
        args = BeachScoreArgs.model_validate(
            {"lat": 1, "lon": 2, "beachType": "snorkel", "activity": "surfing"}
        )
        assert args.resolved_type == BeachType.snorkel

    def test_activity_implies_type(self) -> None:
        args = BeachScoreArgs.model_validate({"lat": 1, "lon": 2, "activity": "family"})
        assert args.activity == ActivityType.family
        assert args.resolved_type == BeachType.family

    def test_default_mixed(self) -> None:
        args = BeachScoreArgs.model_validate({"lat": 1, "lon": 2, "activity": "general"})
        assert args.resolved_type == BeachType.mixed

    def test_crowd_level_range(self) -> None:
        with pytest.raises(ValidationError):
            BeachScoreArgs.model_validate({"lat": 1, "lon": 2, "crowdLevel": 150})


class TestAnalyzeSpotsArgs:
    """Spot list bounds."""

    def test_alias(self) -> None:
        args = AnalyzeSpotsArgs.model_validate({"spotNames": ["Waikiki", "Pipeline"]})
        assert args.spot_names == ["Waikiki", "Pipeline"]

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AnalyzeSpotsArgs.model_validate({"spot_names": []})
