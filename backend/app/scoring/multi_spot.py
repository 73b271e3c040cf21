"""Multi-spot analysis: score several spots and compare them side by side."""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from backend.app.adapters.spots import SpotNotFoundError, find_spot
from backend.app.models.common import BeachType
from backend.app.models.score import (
    BeachScore,
    MultiSpotAnalysis,
    ScoreBreakdown,
    SpotAnalysis,
    SpotComparison,
    SpotRanking,
)
from backend.app.models.snapshots import (
    OutdoorIndex,
    Spot,
    SurfSnapshot,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
    compute_outdoor_index,
)
from backend.app.scoring.beach_score import score

logger = logging.getLogger(__name__)

Conditions = tuple[
    WeatherSnapshot | None, SurfSnapshot | None, UVSnapshot | None, TideSnapshot | None
]
ConditionsFetcher = Callable[[Spot], Awaitable[Conditions]]

NO_DATA = "No valid data"


def _fmt(value: float | None) -> str:
    return "N/A" if not value else f"{value}"


def spot_summary(
    spot: Spot,
    weather: WeatherSnapshot | None,
    surf: SurfSnapshot | None,
    uv: UVSnapshot | None,
    beach_score: BeachScore,
) -> str:
    converted = weather.current_converted if weather else None
    temp = converted.temperature_fahrenheit if converted else None
    wind = converted.wind_speed_mph if converted else None
    waves = surf.wave_height_ft if surf else None
    uv_index = uv.uv_index if uv else None
    return (
        f"{spot.name}: {beach_score.overall}/10 overall score. "
        f"Temp: {_fmt(temp)}°F, Wind: {_fmt(wind)} mph, "
        f"Waves: {_fmt(waves)} ft, UV: {_fmt(uv_index)}"
    )


def failed_analysis(spot: Spot, beach_type: BeachType) -> SpotAnalysis:
    """Zero-score placeholder for a spot whose data could not be fetched."""
    zero = ScoreBreakdown(
        temperature_score=0,
        wind_score=0,
        precipitation_score=0,
        wave_height_score=0,
        wave_period_score=0,
        uv_index_score=0,
        tide_level_score=0,
    )
    return SpotAnalysis(
        name=spot.name,
        lat=spot.lat,
        lon=spot.lon,
        type=beach_type,
        island=spot.island,
        outdoor_index=OutdoorIndex(index=0, note="Analysis failed"),
        beach_score=BeachScore(
            overall=0,
            weather=0,
            waves=0,
            uv_safety=0,
            tides=0,
            crowd_level=0,
            breakdown=zero,
            recommendations=["Unable to analyze this spot"],
            best_time_today="Unknown",
        ),
        summary=f"Analysis failed for {spot.name}",
    )


def _best(spots: list[SpotAnalysis], key: Callable[[SpotAnalysis], float]) -> SpotAnalysis:
    """Highest ``key``; the earliest spot wins ties."""
    best = spots[0]
    for candidate in spots[1:]:
        if key(candidate) > key(best):
            best = candidate
    return best


def _overall(s: SpotAnalysis) -> float:
    return s.beach_score.overall


def _waves(s: SpotAnalysis) -> float:
    return s.beach_score.waves


def compare_spots(spots: list[SpotAnalysis]) -> SpotComparison:
    """Pick category winners and rank spots by overall score.

    Spots scoring 0 (failed analyses) are ignored. Family and snorkel winners
    fall back to the first valid spot when no spot of that type exists.
    """
    valid = [s for s in spots if s.beach_score.overall > 0]
    if not valid:
        return SpotComparison(
            best_overall=NO_DATA,
            best_weather=NO_DATA,
            best_surf=NO_DATA,
            best_family=NO_DATA,
            best_snorkel=NO_DATA,
        )

    family = [s for s in valid if s.type == BeachType.family]
    snorkel = [s for s in valid if s.type == BeachType.snorkel]
    rankings = sorted(
        (
            SpotRanking(
                spot=s.name,
                overall_score=s.beach_score.overall,
                weather_score=s.beach_score.weather,
                surf_score=s.beach_score.waves,
                uv_safety_score=s.beach_score.uv_safety,
            )
            for s in valid
        ),
        key=lambda r: r.overall_score,
        reverse=True,
    )
    return SpotComparison(
        best_overall=_best(valid, _overall).name,
        best_weather=_best(valid, lambda s: s.beach_score.weather).name,
        best_surf=_best(valid, _waves).name,
        best_family=_best([valid[0], *family], _overall).name,
        best_snorkel=_best([valid[0], *snorkel], _overall).name,
        rankings=rankings,
    )


def spot_insights(spots: list[SpotAnalysis]) -> list[str]:
    valid = [s for s in spots if s.beach_score.overall > 0]
    if not valid:
        return ["No valid data available for analysis"]

    insights = []
    temps = [s.weather.temperature_f for s in valid if s.weather and s.weather.temperature_f]
    if temps:
        avg_temp = sum(temps) / len(temps)
        insights.append(
            f"Average temperature across spots: {avg_temp:.1f}°F "
            f"(range: {max(temps) - min(temps):.1f}°F)"
        )

    waves = [s.surf.wave_height_ft for s in valid if s.surf and s.surf.wave_height_ft]
    if waves:
        insights.append(
            f"Wave conditions vary from {min(waves):.1f}ft to {max(waves):.1f}ft "
            f"(avg: {sum(waves) / len(waves):.1f}ft)"
        )

    scores = [s.beach_score.overall for s in valid]
    high = sum(1 for s in scores if s >= 8)
    insights.append(
        f"Average beach score: {sum(scores) / len(scores):.1f}/10. "
        f"{high} spots rated 8+ (excellent)"
    )

    uv_levels = [s.uv.uv_index for s in valid if s.uv and s.uv.uv_index]
    if uv_levels:
        high_uv = sum(1 for s in valid if s.uv and s.uv.uv_index >= 7)
        insights.append(
            f"Average UV index: {sum(uv_levels) / len(uv_levels):.1f}. "
            f"{high_uv} spots have high UV (7+) - sunscreen essential"
        )
    return insights


def spot_recommendations(spots: list[SpotAnalysis]) -> list[str]:
    valid = [s for s in spots if s.beach_score.overall > 0]
    if not valid:
        return ["Unable to provide recommendations - no valid data"]

    best = _best(valid, _overall)
    recommendations = [f"🏆 Best overall choice: {best.name} ({best.beach_score.overall}/10)"]

    family = [s for s in valid if s.type == BeachType.family and s.beach_score.overall >= 7]
    if family:
        top = _best(family, _overall)
        recommendations.append(
            f"👨‍👩‍👧‍👦 Best for families: {top.name} ({top.beach_score.overall}/10)"
        )

    surf = [s for s in valid if s.type == BeachType.surf and s.beach_score.waves >= 7]
    if surf:
        top = _best(surf, _waves)
        recommendations.append(
            f"🏄 Best for surfing: {top.name} (waves: {top.beach_score.waves}/10)"
        )

    snorkel = [s for s in valid if s.type == BeachType.snorkel and s.beach_score.overall >= 7]
    if snorkel:
        top = _best(snorkel, _overall)
        recommendations.append(
            f"🤿 Best for snorkeling: {top.name} ({top.beach_score.overall}/10)"
        )

    rainy = sum(1 for s in valid if s.weather and s.weather.precipitation > 0.5)
    if rainy:
        recommendations.append(f"⚠️ {rainy} spots have rain - consider indoor alternatives")

    high_uv = sum(1 for s in valid if s.uv and s.uv.uv_index >= 7)
    if high_uv:
        recommendations.append(
            f"☀️ {high_uv} spots have high UV - sunscreen and shade essential"
        )
    return recommendations


async def analyze_spots(
    spot_names: list[str],
    fetch_conditions: ConditionsFetcher,
    beach_types: list[BeachType] | None = None,
) -> MultiSpotAnalysis:
    """Fetch, score and compare several catalog spots.

    Spots are analyzed one after another; each spot's providers are fetched
    by ``fetch_conditions``. A spot whose fetch fails is kept as a zero-score
    entry so the comparison still covers the others.

    Args:
        spot_names: Names to resolve against the catalog
        fetch_conditions: Async fetcher returning (weather, surf, uv, tides)
        beach_types: Per-spot beach types (mixed when missing)

    Raises:
        SpotNotFoundError: If any name does not resolve
    """
    spots = []
    for name in spot_names:
        spot = find_spot(name)
        if spot is None:
            raise SpotNotFoundError(f'Spot "{name}" not found')
        spots.append(spot)

    analyses = []
    for i, spot in enumerate(spots):
        beach_type = beach_types[i] if beach_types and i < len(beach_types) else BeachType.mixed
        try:
            weather, surf, uv, tides = await fetch_conditions(spot)
        except Exception:
            logger.exception(f"Failed to analyze spot {spot.name}")
            analyses.append(failed_analysis(spot, beach_type))
            continue

        beach_score = score(weather, surf, uv, tides, beach_type)
        analyses.append(
            SpotAnalysis(
                name=spot.name,
                lat=spot.lat,
                lon=spot.lon,
                type=beach_type,
                island=spot.island,
                weather=weather,
                surf=surf,
                uv=uv,
                tides=tides,
                outdoor_index=compute_outdoor_index(weather),
                beach_score=beach_score,
                summary=spot_summary(spot, weather, surf, uv, beach_score),
            )
        )

    return MultiSpotAnalysis(
        spots=analyses,
        comparison=compare_spots(analyses),
        insights=spot_insights(analyses),
        recommendations=spot_recommendations(analyses),
        analysis_time=datetime.now(UTC),
    )
