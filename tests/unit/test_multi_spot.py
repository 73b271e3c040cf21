"""Tests for multi-spot analysis and comparison."""

import pytest

from backend.app.adapters.spots import SpotNotFoundError
from backend.app.models.common import BeachType
from backend.app.models.snapshots import (
    CurrentWeather,
    Spot,
    SurfHourly,
    SurfSnapshot,
    UVSnapshot,
    WeatherSnapshot,
)
from backend.app.scoring.multi_spot import (
    NO_DATA,
    Conditions,
    analyze_spots,
    compare_spots,
    failed_analysis,
    spot_insights,
)


def _conditions(temp_c: float, height_m: float, uv: float = 4.0) -> Conditions:
    weather = WeatherSnapshot(
        current=CurrentWeather(temperature_2m=temp_c, wind_speed_10m=8.0, precipitation=0.0)
    )
    surf = SurfSnapshot(
        hourly=SurfHourly(time=["2026-10-19T10:00"], wave_height=[height_m], wave_period=[12.0])
    )
    return weather, surf, UVSnapshot.from_index(uv), None


class TestAnalyzeSpots:
    """Fetch, score and compare several spots."""

    @pytest.mark.asyncio
    async def test_compares_spots(self) -> None:
        by_name = {
            "Waikiki Beach": _conditions(27, 0.3),
            "Pipeline": _conditions(25, 1.5, uv=8),
            "Hanauma Bay": _conditions(26, 0.2),
        }

        async def fetch(spot: Spot) -> Conditions:
            return by_name[spot.name]

        analysis = await analyze_spots(
            ["Waikiki", "Pipeline", "Hanauma"],
            fetch,
            beach_types=[BeachType.family, BeachType.surf, BeachType.snorkel],
        )

        assert [s.name for s in analysis.spots] == ["Waikiki Beach", "Pipeline", "Hanauma Bay"]
        assert analysis.comparison.best_surf == "Pipeline"
        assert analysis.comparison.best_family == "Waikiki Beach"
        assert analysis.comparison.best_snorkel == "Hanauma Bay"
        rankings = analysis.comparison.rankings
        assert [r.overall_score for r in rankings] == sorted(
            (r.overall_score for r in rankings), reverse=True
        )
        assert analysis.recommendations[0].startswith("🏆 Best overall choice:")
        assert any("high UV" in line for line in analysis.recommendations)
        assert analysis.spots[0].summary.startswith("Waikiki Beach: ")

    @pytest.mark.asyncio
    async def test_failed_fetch_becomes_zero_entry(self) -> None:
        async def fetch(spot: Spot) -> Conditions:
            if spot.name == "Pipeline":
                raise RuntimeError("provider down")
            return _conditions(27, 0.3)

        analysis = await analyze_spots(["Waikiki", "Pipeline"], fetch)

        failed = analysis.spots[1]
        assert failed.beach_score.overall == 0
        assert failed.summary == "Analysis failed for Pipeline"
        assert analysis.comparison.best_overall == "Waikiki Beach"
        assert [r.spot for r in analysis.comparison.rankings] == ["Waikiki Beach"]

    @pytest.mark.asyncio
    async def test_unknown_spot_raises(self) -> None:
        async def fetch(spot: Spot) -> Conditions:
            return _conditions(27, 0.3)

        with pytest.raises(SpotNotFoundError):
            await analyze_spots(["Waikiki", "Atlantis"], fetch)

    @pytest.mark.asyncio
    async def test_missing_beach_types_default_to_mixed(self) -> None:
        async def fetch(spot: Spot) -> Conditions:
            return _conditions(27, 0.3)

        analysis = await analyze_spots(["Waikiki", "Kailua"], fetch, [BeachType.family])
        assert [s.type for s in analysis.spots] == [BeachType.family, BeachType.mixed]


class TestComparison:
    """Comparison and insights over precomputed analyses."""

    def test_no_valid_data(self) -> None:
        spot = Spot(name="Pipeline", lat=21.66, lon=-158.05, island="Oahu", type=BeachType.surf)
        comparison = compare_spots([failed_analysis(spot, BeachType.surf)])
        assert comparison.best_overall == NO_DATA
        assert comparison.best_family == NO_DATA
        assert comparison.rankings == []
        assert spot_insights([failed_analysis(spot, BeachType.surf)]) == [
            "No valid data available for analysis"
        ]
