"""Per-beach-type scoring weights.

Category weights (weather, waves, uv, tides, crowd) sum to 1. Weather
component weights (temperature, wind, precipitation) sum to 1, as do wave
component weights (wave_height, wave_period).
"""

from dataclasses import dataclass

from backend.app.models.common import BeachType


@dataclass(frozen=True)
class ScoreWeights:
    weather: float
    waves: float
    uv: float
    tides: float
    crowd: float
    temperature: float
    wind: float
    precipitation: float
    wave_height: float
    wave_period: float


FAMILY_WEIGHTS = ScoreWeights(
    weather=0.3, waves=0.2, uv=0.2, tides=0.1, crowd=0.2,
    temperature=0.4, wind=0.3, precipitation=0.3,
    wave_height=0.6, wave_period=0.4,
)  # fmt: skip

SURF_WEIGHTS = ScoreWeights(
    weather=0.2, waves=0.4, uv=0.1, tides=0.2, crowd=0.1,
    temperature=0.3, wind=0.4, precipitation=0.3,
    wave_height=0.5, wave_period=0.5,
)  # fmt: skip

SNORKEL_WEIGHTS = ScoreWeights(
    weather=0.3, waves=0.3, uv=0.2, tides=0.1, crowd=0.1,
    temperature=0.4, wind=0.3, precipitation=0.3,
    wave_height=0.7, wave_period=0.3,
)  # fmt: skip

# Scenic and mixed beaches
DEFAULT_WEIGHTS = ScoreWeights(
    weather=0.25, waves=0.25, uv=0.2, tides=0.1, crowd=0.2,
    temperature=0.4, wind=0.3, precipitation=0.3,
    wave_height=0.5, wave_period=0.5,
)  # fmt: skip

_WEIGHTS_BY_TYPE: dict[BeachType, ScoreWeights] = {
    BeachType.family: FAMILY_WEIGHTS,
    BeachType.surf: SURF_WEIGHTS,
    BeachType.snorkel: SNORKEL_WEIGHTS,
}

# Simulated crowd level (0-100, higher = less crowded)
DEFAULT_CROWD_LEVEL: dict[BeachType, float] = {
    BeachType.family: 60,
    BeachType.surf: 80,
    BeachType.snorkel: 70,
    BeachType.scenic: 90,
    BeachType.mixed: 75,
}


def weights_for(beach_type: BeachType) -> ScoreWeights:
    return _WEIGHTS_BY_TYPE.get(beach_type, DEFAULT_WEIGHTS)
