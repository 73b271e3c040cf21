"""Tool registry: tool name -> typed argument model + async handler."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel

from backend.app.adapters.marine import fetch_surf
from backend.app.adapters.spots import recommend_beaches, resolve_spot, spot_name_near
from backend.app.adapters.sun import fetch_sun_times
from backend.app.adapters.tides import fetch_tides
from backend.app.adapters.uv import fetch_uv
from backend.app.adapters.weather import fetch_weather
from backend.app.config import Settings
from backend.app.models.common import Geo
from backend.app.models.score import BeachScore, MultiSpotAnalysis
from backend.app.models.snapshots import (
    OutdoorIndex,
    Spot,
    SpotResolution,
    SunSnapshot,
    SurfSnapshot,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
    compute_outdoor_index,
)
from backend.app.models.tool_args import (
    AnalyzeSpotsArgs,
    BeachScoreArgs,
    CoordinateArgs,
    RecommendBeachesArgs,
    ResolveSpotArgs,
    SurfArgs,
    WeatherArgs,
)
from backend.app.scoring.beach_score import score
from backend.app.scoring.multi_spot import Conditions, analyze_spots

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool."""

    name: str
    description: str
    args_model: type[BaseModel]
    handler: ToolHandler


class ToolRegistry:
    """Name-indexed collection of ToolSpecs."""

    def __init__(self) -> None:
        self._by_name: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._by_name:
            raise ValueError(f"tool already registered: {spec.name}")
        self._by_name[spec.name] = spec

    def get(self, name: str) -> ToolSpec | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def describe(self) -> list[dict[str, Any]]:
        """Name, description and JSON-schema properties per tool (for prompts)."""
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "parameters": spec.args_model.model_json_schema(by_alias=False).get(
                    "properties", {}
                ),
            }
            for spec in self._by_name.values()
        ]


class DataTools:
    """Tool handlers bound to provider settings and a shared HTTP client."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = client

    async def resolve_spot(self, args: ResolveSpotArgs) -> SpotResolution:
        return resolve_spot(args.spot)

    async def get_weather(self, args: WeatherArgs) -> WeatherSnapshot:
        return await self._weather(args.geo, hours=args.hours, offset=args.start_offset_hours)

    async def get_surf(self, args: SurfArgs) -> SurfSnapshot:
        return await self._surf(args.geo, hours=args.hours)

    async def get_outdoor_index(self, args: CoordinateArgs) -> OutdoorIndex:
        return compute_outdoor_index(await self._weather(args.geo))

    async def get_tides(self, args: CoordinateArgs) -> TideSnapshot:
        return await self._tides(args.geo)

    async def get_uv_index(self, args: CoordinateArgs) -> UVSnapshot:
        return await self._uv(args.geo)

    async def recommend(self, args: RecommendBeachesArgs) -> list[Spot]:
        return recommend_beaches(
            family=args.family,
            surf=args.surf,
            snorkel=args.snorkel,
            scenic=args.scenic,
            island=args.island,
            exclude_restricted=args.exclude_restricted,
        )

    async def get_beach_score(self, args: BeachScoreArgs) -> BeachScore:
        weather, surf, uv, tides = await self.conditions(args.geo)
        return score(weather, surf, uv, tides, args.resolved_type, crowd_level=args.crowd_level)

    async def get_sun_times(self, args: CoordinateArgs) -> SunSnapshot:
        return await fetch_sun_times(
            args.geo,
            base_url=self._settings.open_meteo_url,
            timezone=self._settings.provider_timezone,
            client=self._client,
        )

    async def analyze_multiple_spots(self, args: AnalyzeSpotsArgs) -> MultiSpotAnalysis:
        return await analyze_spots(
            args.spot_names,
            lambda spot: self.conditions(Geo(lat=spot.lat, lon=spot.lon)),
            beach_types=args.beach_types,
        )

    async def conditions(self, geo: Geo) -> Conditions:
        """Fetch weather, surf, UV and tides concurrently.

        Weather is required; any other provider failure is logged and scored
        as missing data.

        Raises:
            Exception: Whatever the weather provider raised
        """
        weather, surf, uv, tides = await asyncio.gather(
            self._weather(geo),
            self._surf(geo),
            self._uv(geo),
            self._tides(geo),
            return_exceptions=True,
        )
        if isinstance(weather, BaseException):
            raise weather

        optional: list[Any] = []
        for label, value in (("surf", surf), ("uv", uv), ("tides", tides)):
            if isinstance(value, BaseException):
                logger.warning(
                    f"{label} unavailable for scoring: {value!r}",
                    extra={"structured": {"provider": label, "lat": geo.lat, "lon": geo.lon}},
                )
                value = None
            optional.append(value)
        return weather, optional[0], optional[1], optional[2]

    async def _weather(
        self, geo: Geo, *, hours: int | None = None, offset: int = 0
    ) -> WeatherSnapshot:
        return await fetch_weather(
            geo,
            location_name=spot_name_near(geo.lat, geo.lon),
            hours=hours,
            start_offset_hours=offset,
            base_url=self._settings.open_meteo_url,
            timezone=self._settings.provider_timezone,
            client=self._client,
        )

    async def _surf(self, geo: Geo, *, hours: int = 12) -> SurfSnapshot:
        return await fetch_surf(
            geo,
            hours=hours,
            base_url=self._settings.marine_url,
            timezone=self._settings.provider_timezone,
            client=self._client,
        )

    async def _uv(self, geo: Geo) -> UVSnapshot:
        return await fetch_uv(
            geo,
            base_url=self._settings.open_meteo_url,
            timezone=self._settings.provider_timezone,
            client=self._client,
        )

    async def _tides(self, geo: Geo) -> TideSnapshot:
        return await fetch_tides(
            geo,
            base_url=self._settings.noaa_tides_url,
            timezone=self._settings.provider_timezone,
            client=self._client,
        )


def build_default_registry(
    settings: Settings, client: httpx.AsyncClient | None = None
) -> ToolRegistry:
    """Register every data tool against live providers.

    Args:
        settings: Provider URLs and timezone
        client: Shared httpx client (each call opens its own when None)

    Returns:
        ToolRegistry with all ten tools
    """
    tools = DataTools(settings, client)
    registry = ToolRegistry()
    for name, description, args_model, handler in (
        ("resolveSpot", "Convert a Hawaii beach/surf spot name into coordinates.",
         ResolveSpotArgs, tools.resolve_spot),
        ("getWeather", "Current temperature, precipitation and wind; optional hourly forecast "
         "via hours/start_offset_hours.", WeatherArgs, tools.get_weather),
        ("getSurf", "Hourly wave height, period and direction with a 1-5 quality rating.",
         SurfArgs, tools.get_surf),
        ("getOutdoorIndex", "0-10 outdoor comfort score from current weather.",
         CoordinateArgs, tools.get_outdoor_index),
        ("getTides", "Current tide level and next high/low from the nearest NOAA station.",
         CoordinateArgs, tools.get_tides),
        ("getUVIndex", "UV index with risk level and sun protection advice.",
         CoordinateArgs, tools.get_uv_index),
        ("recommendBeaches", "Beaches matching family/surf/snorkel/scenic/island criteria.",
         RecommendBeachesArgs, tools.recommend),
        ("getBeachScore", "Composite 0-10 beach score covering weather, waves, UV, tides "
         "and crowds.", BeachScoreArgs, tools.get_beach_score),
        ("getSunTimes", "Today's sunrise, sunset, day length and golden hour.",
         CoordinateArgs, tools.get_sun_times),
        ("analyzeMultipleSpots", "Score and compare several spots side by side.",
         AnalyzeSpotsArgs, tools.analyze_multiple_spots),
    ):  # fmt: skip
        registry.register(ToolSpec(name, description, args_model, handler))
    return registry
