"""Models package - re-exports for convenience."""

from backend.app.models.common import (
    ActivityType,
    BeachType,
    Geo,
    Intent,
    Provenance,
    TimeOfDay,
)
from backend.app.models.conversation import ConversationState, IntentSignals, Message
from backend.app.models.score import (
    BeachScore,
    MultiSpotAnalysis,
    ScoreBreakdown,
    SpotAnalysis,
    SpotComparison,
    SpotRanking,
)
from backend.app.models.snapshots import (
    CurrentWeather,
    HourlyWeather,
    OutdoorIndex,
    Spot,
    SpotResolution,
    SunSnapshot,
    SurfHour,
    SurfSnapshot,
    TideEvent,
    TideSnapshot,
    UVSnapshot,
    WeatherSnapshot,
)
from backend.app.models.templates import TemplateContext
from backend.app.models.tools import ToolCall, ToolResult

__all__ = [
    # Common
    "Geo",
    "BeachType",
    "Intent",
    "ActivityType",
    "TimeOfDay",
    "Provenance",
    # Conversation
    "Message",
    "ConversationState",
    "IntentSignals",
    # Snapshots
    "Spot",
    "SpotResolution",
    "CurrentWeather",
    "WeatherSnapshot",
    "HourlyWeather",
    "SurfSnapshot",
    "SurfHour",
    "TideSnapshot",
    "TideEvent",
    "UVSnapshot",
    "SunSnapshot",
    "OutdoorIndex",
    # Score
    "BeachScore",
    "ScoreBreakdown",
    "SpotAnalysis",
    "SpotRanking",
    "SpotComparison",
    "MultiSpotAnalysis",
    # Templates
    "TemplateContext",
    # Tools
    "ToolCall",
    "ToolResult",
]
