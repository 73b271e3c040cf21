"""Shared pytest fixtures for all test suites."""

import math
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio

from backend.app.config import Settings
from backend.app.llm.client import DeterministicStubClient
from backend.app.orchestration.agent import BeachAgent
from backend.app.orchestration.cache import ResponseCache
from backend.app.tools.executor import ToolConfig, ToolInvoker
from backend.app.tools.registry import ToolRegistry, build_default_registry

DAY = "2026-10-19"


def _hours(days: int = 1, start: str = DAY) -> list[str]:
    year, month, day = (int(part) for part in start.split("-"))
    return [f"{year:04d}-{month:02d}-{day + h // 24:02d}T{h % 24:02d}:00" for h in range(24 * days)]


def weather_payload(
    temperature_c: float = 26.0,
    wind_kmh: float = 10.0,
    precipitation: float = 0.0,
    weather_code: int = 0,
    current_time: str = f"{DAY}T10:00",
) -> dict[str, Any]:
    """Open-Meteo forecast response with current block and three days of hourly data."""
    times = _hours(days=3)
    return {
        "current": {
            "time": current_time,
            "temperature_2m": temperature_c,
            "apparent_temperature": temperature_c + 1,
            "precipitation": precipitation,
            "wind_speed_10m": wind_kmh,
            "weather_code": weather_code,
        },
        "hourly": {
            "time": times,
            "temperature_2m": [24 + 3 * math.sin(i / 24 * math.pi) for i in range(len(times))],
            "precipitation": [0.0] * len(times),
            "wind_speed_10m": [12.0] * len(times),
            "weather_code": [1] * len(times),
        },
    }


def marine_payload(
    wave_height_m: float = 0.9,
    wave_period_s: float = 9.0,
    wave_direction: float = 200.0,
    current_time: str = f"{DAY}T10:00",
) -> dict[str, Any]:
    """Open-Meteo marine response with two days of constant hourly swell."""
    times = _hours(days=2)
    return {
        "current": {"time": current_time, "wave_height": wave_height_m},
        "hourly": {
            "time": times,
            "wave_height": [wave_height_m] * len(times),
            "wave_direction": [wave_direction] * len(times),
            "wave_period": [wave_period_s] * len(times),
            "wind_wave_height": [0.3] * len(times),
        },
    }


def tide_payload(day: str = DAY) -> dict[str, Any]:
    """NOAA hourly predictions swinging between about -0.4 and +1.6 ft."""
    return {
        "predictions": [
            {"t": f"{day} {h:02d}:00", "v": f"{0.6 + math.cos(h / 12.4 * 2 * math.pi):.3f}"}
            for h in range(24)
        ]
    }


def uv_payload(uv_index: float | None = 6.0) -> dict[str, Any]:
    return {"current": {"time": f"{DAY}T10:00", "uv_index": uv_index}}


def sun_payload() -> dict[str, Any]:
    return {"daily": {"time": [DAY], "sunrise": [f"{DAY}T06:42"], "sunset": [f"{DAY}T18:19"]}}


class ProviderStub:
    """Routes provider requests to canned payloads and records which provider was hit."""

    def __init__(self) -> None:
        self.payloads: dict[str, dict[str, Any]] = {
            "weather": weather_payload(),
            "marine": marine_payload(),
            "tides": tide_payload(),
            "uv": uv_payload(),
            "sun": sun_payload(),
        }
        self.failing: set[str] = set()
        self.calls: list[str] = []

    @staticmethod
    def kind(request: httpx.Request) -> str:
        host = request.url.host
        params = request.url.params
        if host.startswith("marine-api"):
            return "marine"
        if "tidesandcurrents" in host:
            return "tides"
        if "daily" in params:
            return "sun"
        if params.get("current") == "uv_index":
            return "uv"
        return "weather"

    def handler(self, request: httpx.Request) -> httpx.Response:
        kind = self.kind(request)
        self.calls.append(kind)
        if kind in self.failing:
            return httpx.Response(503, json={"error": f"{kind} unavailable"})
        return httpx.Response(200, json=self.payloads[kind])


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def settings() -> Settings:
    """Settings without a model key or .env overrides."""
    return Settings(_env_file=None, openai_api_key=None)


@pytest.fixture
def providers() -> ProviderStub:
    return ProviderStub()


@pytest_asyncio.fixture
async def provider_client(providers: ProviderStub) -> AsyncGenerator[httpx.AsyncClient, None]:
    """httpx client whose transport answers from ProviderStub."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(providers.handler))
    yield client
    await client.aclose()


@pytest.fixture
def registry(settings: Settings, provider_client: httpx.AsyncClient) -> ToolRegistry:
    return build_default_registry(settings, provider_client)


@pytest.fixture
def invoker(registry: ToolRegistry) -> ToolInvoker:
    """Invoker with real registry, fast retries and no backoff sleep."""
    return ToolInvoker(
        registry,
        config=ToolConfig(hard_timeout_ms=2_000, retry_count=1),
        sleep_fn=_no_sleep,
    )


@pytest.fixture
def agent(registry: ToolRegistry, invoker: ToolInvoker) -> BeachAgent:
    """Agent over mocked providers with the deterministic stub model."""
    return BeachAgent(
        registry,
        invoker=invoker,
        model=DeterministicStubClient(),
        cache=ResponseCache(),
        template_seed=7,
    )
