"""Prompt builders for model-driven planning and answer synthesis."""

import json
from typing import Any

from backend.app.adapters.spots import KNOWN_SPOTS
from backend.app.models.conversation import ConversationState, IntentSignals, Message
from backend.app.models.snapshots import WeatherSnapshot, summarize_payload
from backend.app.models.tools import ToolResult

SYSTEM_PROMPT = """You are a friendly local guide for Hawaii beaches and surf. You help visitors
plan a great day on the water using live conditions.

PERSONALITY:
- Conversational and upbeat, like a local friend giving advice
- Concise: 2-3 sentences
- Emojis sparingly

EXPERTISE:
- Weather patterns and microclimates around the islands
- Surf size, wave quality and ocean safety
- Which beaches suit families, surfers and snorkelers
- Timing: tides, crowds, trade winds

RULES:
- Only answer questions about Hawaii outdoor and beach activities
- Base recommendations on the tool data you are given; never invent readings
- Warn clearly when conditions are dangerous
- Use imperial units: degrees F, mph, feet"""

ACCESS_RESTRICTIONS = (
    "Bellows Beach: military-only access (requires military ID)",
    "Hanauma Bay: requires reservations and an entrance fee",
)

PLANNING_GUIDE = """Decision guide:
- Current weather -> resolveSpot + getWeather + getUVIndex
- Wave check -> resolveSpot + getSurf + getTides
- "Should I surf/go?" -> resolveSpot + getWeather + getSurf + getTides + getOutdoorIndex
- Overall conditions -> resolveSpot + getWeather + getSurf + getTides + getUVIndex + getOutdoorIndex
- Best time to surf -> resolveSpot + getSurf + getTides + getWeather
- Best beach for an activity -> recommendBeaches (with family/surf/snorkel flags) + getBeachScore
- Score or rate a beach -> resolveSpot + getBeachScore
- Comparing named beaches -> analyzeMultipleSpots
- Sunrise, sunset or golden hour -> resolveSpot + getSunTimes

Time-based questions:
- "next N hours" -> getWeather with hours=N
- "tomorrow" -> getWeather with hours=12 and start_offset_hours=24, plus getSurf
- Follow-ups ("what about tomorrow?") reuse the location from the conversation."""


def known_coordinates() -> str:
    return "\n".join(f"- {k.spot}: lat={k.lat}, lon={k.lon}" for k in KNOWN_SPOTS)


def build_conversation_context(
    conversation: list[Message],
    signals: IntentSignals,
    state: ConversationState,
) -> str:
    """Conversation history plus session notes; empty when there is no history."""
    if not conversation:
        return ""

    notes = []
    if signals.wants_family:
        notes.append("User wants family-friendly conditions.")
    if signals.wants_surf:
        notes.append("User also wants to surf.")
    if signals.wants_snorkel:
        notes.append("User is interested in snorkeling.")
    if signals.together_preference:
        notes.append("Keep the whole family together at one spot.")
    if state.focus_spot:
        notes.append(f"Recent focus: {state.focus_spot}.")

    lines = ["", "CONVERSATION HISTORY:"]
    lines.extend(f"{'User' if m.is_user else 'Guide'}: {m.text}" for m in conversation)
    if notes:
        lines.extend(["", "SESSION NOTES:"])
        lines.extend(f"- {note}" for note in notes)
    return "\n".join(lines)


def build_planning_prompt(
    question: str, conversation_context: str, tools: list[dict[str, Any]]
) -> str:
    """Ask the model for a JSON array of tool calls."""
    tool_lines = "\n".join(
        f"- {t['name']}: {t['description']}\n  Parameters: {json.dumps(t['parameters'])}"
        for t in tools
    )
    restrictions = "\n".join(f"- {r}" for r in ACCESS_RESTRICTIONS)
    return f"""{conversation_context}

USER QUESTION: "{question}"

Pick ONLY the tools needed to answer the question.

Available tools:
{tool_lines}

{PLANNING_GUIDE}

Known coordinates:
{known_coordinates()}

Access restrictions:
{restrictions}

Output ONLY a JSON array of tool calls, for example:
[{{"tool": "resolveSpot", "args": {{"spot": "Waikiki"}}}}, {{"tool": "getWeather", "args": {{"lat": 21.2766, "lon": -157.8269}}}}]"""


def format_tool_result(entry: ToolResult) -> str:
    """Render one tool result for the answer prompt."""
    if not entry.success:
        return f"{entry.tool}: error: {entry.error}"

    payload = entry.result
    if entry.tool == "getWeather" and isinstance(payload, WeatherSnapshot):
        if payload.hourly_forecast:
            lines = [
                f"Weather data for {payload.location or 'location'}:",
                f"Current: {payload.temperature_f}°F, {payload.wind_mph}mph winds",
                "",
                f"Hourly forecast (next {len(payload.hourly_forecast)} hours):",
            ]
            lines.extend(
                f"{h.time}: {h.temperature_f}°F, {h.wind_mph}mph wind, {h.conditions}"
                for h in payload.hourly_forecast
            )
            return "\n".join(lines)
    return f"{entry.tool}: {json.dumps(summarize_payload(payload), indent=2, default=str)}"


def build_answer_prompt(
    question: str, conversation_context: str, results: list[ToolResult]
) -> str:
    """Ask the model for a short conversational answer grounded in tool data."""
    rendered = "\n\n".join(format_tool_result(r) for r in results) or "(no tool data)"
    return f"""{conversation_context}

USER QUESTION: "{question}"

TOOL RESULTS:
{rendered}

Respond in 2-3 sentences MAX.

Style:
- Lead with the main point; no "Yes," / "No," openers and no greetings
- Quote specific numbers from the data: temperature in °F, wave height in feet, wind in mph
- Mention timing when relevant and finish with a tip, caution or alternative
- Never write "Based on the data" or "According to the forecast"

Examples:
"Waikiki's looking great right now - 3ft waves, 79°F, light 4mph wind. Perfect for beginners."
"North Shore's pretty rough today with 6ft waves and 9mph wind. Maybe try Waikiki instead or wait for calmer conditions."

Your answer:"""
