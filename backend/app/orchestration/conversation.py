"""Conversation-aware helpers: context window, intent signals, fallback plan and
the deterministic conversational composer used when the model is unavailable."""

import logging
import re

from backend.app.adapters.spots import KnownSpot, display_location, match_known_spot
from backend.app.models.common import ActivityType
from backend.app.models.conversation import ConversationState, IntentSignals, Message
from backend.app.models.snapshots import Spot
from backend.app.models.templates import TemplateContext
from backend.app.models.tools import ToolCall, ToolResult, find_result
from backend.app.orchestration.classifier import is_future_question
from backend.app.utils.units import round_half_up

logger = logging.getLogger(__name__)

MAX_CONTEXT_MESSAGES = 30
MAX_PER_SIDE = 15
HISTORY_USER_TURNS = 8
MAX_SENTENCES = 3

CONTEXT_KEYWORDS = (
    "weather", "surf", "wave", "beach", "tide", "uv",
    "temperature", "wind", "tomorrow", "today", "forecast",
)  # fmt: skip

_TOGETHER = re.compile(
    r"whole family|all together|can't split|cant split|stay together|keep everyone"
)
_FAMILY_NOW = re.compile(r"family|kids|keiki|children|toddler|stroller")
_SURF_NOW = re.compile(r"surf|wave|barrel|swell|longboard|shortboard")
_SNORKEL = re.compile(r"snorkel|reef|dive|fish")
_FAMILY_BEFORE = re.compile(r"family|kids|keiki|children")
_SURF_BEFORE = re.compile(r"surf|wave|barrel|swell")
_WANTS_RECOMMENDATION = re.compile(r"(best|recommend|where should).*(beach|spot)")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def apply_context_window(conversation: list[Message] | None) -> list[Message]:
    """Bound the conversation passed downstream to at most 30 messages.

    Domain-relevant messages are preferred. Without any, the last 15 user and
    last 15 assistant turns are kept in their original order.
    """
    if not conversation:
        return []

    recent = list(conversation[-MAX_CONTEXT_MESSAGES:])
    relevant = [m for m in recent if any(k in m.text.lower() for k in CONTEXT_KEYWORDS)]
    if relevant:
        return relevant[-MAX_CONTEXT_MESSAGES:]

    indexed = list(enumerate(recent))
    users = [(i, m) for i, m in indexed if m.is_user][-MAX_PER_SIDE:]
    assistants = [(i, m) for i, m in indexed if not m.is_user][-MAX_PER_SIDE:]
    return [m for _, m in sorted(users + assistants, key=lambda pair: pair[0])]


def _recent_user_texts(conversation: list[Message], limit: int) -> list[str]:
    return [m.text.lower() for m in conversation if m.text and m.is_user][-limit:]


def analyze_conversation_intent(
    question: str, conversation: list[Message] | None = None
) -> IntentSignals:
    """Infer activity preferences from the question and the last 8 user turns.

    Surf interest carried over from history is ignored when the current question
    is about family, and a "keep everyone together" request only honours surf
    mentioned in the current question.
    """
    current = question.lower()
    history = _recent_user_texts(conversation or [], HISTORY_USER_TURNS)

    together = _TOGETHER.search(current) is not None
    family_now = _FAMILY_NOW.search(current) is not None or together
    surf_now = _SURF_NOW.search(current) is not None
    snorkel_now = _SNORKEL.search(current) is not None

    family_before = any(_FAMILY_BEFORE.search(t) for t in history)
    surf_before = any(_SURF_BEFORE.search(t) for t in history)
    snorkel_before = any(_SNORKEL.search(t) for t in history)

    wants_surf = surf_now or (not family_now and not together and surf_before)
    if together:
        wants_surf = surf_now

    return IntentSignals(
        wants_family=family_now or family_before,
        wants_surf=wants_surf,
        wants_snorkel=snorkel_now or snorkel_before,
        together_preference=together,
    )


def detect_activity_type(
    question: str, conversation: list[Message] | None = None
) -> ActivityType:
    q = question.lower()
    if "surf" in q or "wave" in q:
        return ActivityType.surfing
    if "snorkel" in q or "dive" in q:
        return ActivityType.snorkeling
    if "family" in q or "kids" in q or "children" in q:
        return ActivityType.family

    signals = analyze_conversation_intent(question, conversation)
    if signals.wants_surf and not signals.wants_family and not signals.wants_snorkel:
        return ActivityType.surfing
    if signals.wants_snorkel and not signals.wants_surf:
        return ActivityType.snorkeling
    if signals.wants_family:
        return ActivityType.family
    return ActivityType.general


def detect_spot_from_conversation(conversation: list[Message] | None) -> KnownSpot | None:
    """Most recent spot named by the user, else the most recent one named by the assistant."""
    assistant_fallback: KnownSpot | None = None
    for message in reversed(conversation or []):
        if not message.text:
            continue
        known = match_known_spot(message.text)
        if known is None:
            continue
        if message.is_user:
            return known
        if assistant_fallback is None:
            assistant_fallback = known
    return assistant_fallback


def derive_conversation_state(
    question: str, conversation: list[Message] | None = None
) -> ConversationState:
    """Focus spot, last assistant reply and spots the assistant already suggested."""
    state = ConversationState()
    question_spot = match_known_spot(question)
    if question_spot is not None:
        state.focus_spot = question_spot.spot

    for message in reversed(conversation or []):
        if not message.text:
            continue
        if state.last_assistant is None and not message.is_user:
            state.last_assistant = message.text.strip()
        known = match_known_spot(message.text)
        if known is None:
            continue
        if state.focus_spot is None and message.is_user:
            state.focus_spot = known.spot
        if not message.is_user and known.spot not in state.prior_recommendations:
            state.prior_recommendations.append(known.spot)
    return state


def _recommend_args(family: bool, surf: bool, snorkel: bool) -> dict:
    args = {}
    if family:
        args["family"] = True
    if surf:
        args["surf"] = True
    if snorkel:
        args["snorkel"] = True
    return args


def fallback_tool_plan(
    question: str, conversation: list[Message] | None = None
) -> list[ToolCall]:
    """Rule-based tool plan used when the model cannot plan.

    Without a spot in the question or conversation only a recommendation request
    produces a plan. Each tool appears at most once.
    """
    q = question.lower()
    spot = match_known_spot(q) or detect_spot_from_conversation(conversation)
    signals = analyze_conversation_intent(question, conversation)

    wants_recommendation = _WANTS_RECOMMENDATION.search(q) is not None
    wants_score = "score" in q or "rating" in q
    wants_surf = "surf" in q or "wave" in q or "swell" in q or signals.wants_surf
    wants_family = "family" in q or "kids" in q or "children" in q or signals.wants_family
    wants_snorkel = "snorkel" in q or signals.wants_snorkel
    wants_weather = any(w in q for w in ("weather", "temperature", "temp", "rain"))
    wants_tide = "tide" in q
    wants_uv = "uv" in q
    wants_outdoor_index = "should" in q or "conditions" in q or "overall" in q

    recommend = ToolCall(
        tool="recommendBeaches", args=_recommend_args(wants_family, wants_surf, wants_snorkel)
    )
    if spot is None:
        return [recommend] if wants_recommendation else []

    plan = [ToolCall(tool="resolveSpot", args={"spot": spot.spot})]
    coords = {"lat": spot.lat, "lon": spot.lon}

    def add(tool: str, args: dict) -> None:
        if not any(call.tool == tool for call in plan):
            plan.append(ToolCall(tool=tool, args=args))

    if wants_weather:
        add("getWeather", coords)
    if wants_surf:
        add("getSurf", coords)
        add("getTides", coords)
    elif wants_tide:
        add("getTides", coords)
    if wants_uv:
        add("getUVIndex", coords)
    if wants_outdoor_index:
        add("getOutdoorIndex", coords)
    if wants_score:
        add("getBeachScore", {**coords, "beach": spot.spot})
    if wants_recommendation:
        add(recommend.tool, recommend.args)

    logger.debug(f"Fallback plan: {[call.tool for call in plan]}")
    return plan


# --- conversational composer ------------------------------------------------

COMFORT_VARIANTS = (
    "Feels comfortable outside - I'd head out soon before the afternoon breeze picks up.",
    "Looking mellow out there - grab your spot before the tradewinds wake up.",
    "Super comfortable right now, so I'd roll out before the afternoon breeze shows up.",
)

BEACH_CHILL_VARIANTS = (
    "Great time for a beach hang - pack reef-safe sunscreen and claim a shady spot early.",
    "Perfect mellow window for the beach - grab a shady corner and settle in.",
    "Easy beach weather for the crew - snag a spot and enjoy the calm before it warms up.",
)

FAMILY_SURF_VARIANTS = (
    "The inside stays mellow so the keiki can splash while you slide out a little farther "
    "for those rolling sets.",
    "Plenty of room for the kids in the lagoon while you snag a couple of cruisy peelers "
    "just beyond them.",
    "Shallow water hugs the sand so the family hangs close as you paddle a few yards out "
    "for waist-high lines.",
)


def normalize_for_comparison(text: str | None) -> str:
    """Lowercase and collapse every non-alphanumeric run to one space."""
    if not text:
        return ""
    return _NON_ALNUM_RUN.sub(" ", text.lower()).strip()


def normalize_sentence(text: str) -> str | None:
    cleaned = _WHITESPACE.sub(" ", text).strip()
    if not cleaned:
        return None
    if cleaned[-1] in ".!?":
        return cleaned
    return f"{cleaned}."


def format_list(items: list[str]) -> str:
    """"a", "a or b", "a, b, or c"."""
    items = [item for item in items if item]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} or {items[1]}"
    return f"{', '.join(items[:-1])}, or {items[-1]}"


def deterministic_pick(seed: str, variants: tuple[str, ...]) -> str:
    """Pick a variant by a 31-multiplier hash of ``seed``."""
    if not variants:
        return ""
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return variants[h % len(variants)]


def describe_surf_mood(wave_height: float | None, conditions: str | None) -> str:
    if wave_height is not None:
        if wave_height >= 6:
            return "pumping"
        if wave_height >= 3:
            return "pretty fun"
        if wave_height >= 1:
            return "nice and mellow"
        return "almost lake-flat"

    lower = (conditions or "").lower()
    for word, mood in (
        ("rain", "a bit rainy"),
        ("cloud", "a touch cloudy"),
        ("wind", "a little breezy"),
        ("sun", "sunny"),
    ):
        if word in lower:
            return mood
    return "looking good"


def recommendation_sentence(question: str, ctx: TemplateContext) -> str | None:
    waves = ctx.wave_height
    seed = f"{ctx.location}:{question}"

    if ctx.wants_family and ctx.wants_surf and not ctx.together_preference:
        return deterministic_pick(seed, FAMILY_SURF_VARIANTS)

    if ctx.activity_type == ActivityType.surfing and waves is not None:
        if waves >= 6:
            return "Only confident surfers should paddle out until the sets ease."
        if waves >= 3:
            return "Grab a shortboard and aim for the earlier tide before tradewinds rough it up."
        if waves >= 1:
            return "Perfect window for a mellow longboard cruise or soft-top session."
        return "Surf's tiny, so maybe switch it up with a snorkel or beach walk instead."

    if ctx.activity_type == ActivityType.snorkeling and waves is not None:
        if waves >= 3:
            return (
                "Water's a bit rough for snorkeling, so look for a sheltered cove "
                "or wait for the tide to drop."
            )
        return "Visibility should be solid for snorkeling, just hug the reef and watch the current."

    if ctx.activity_type in (ActivityType.family, ActivityType.general) and waves is not None:
        if waves >= 4:
            return "Waves are punchy, so stick close to shore or pick a calmer spot for the kiddos."
        if waves <= 2 and ctx.wind_speed < 18:
            return deterministic_pick(seed, BEACH_CHILL_VARIANTS)

    if ctx.precipitation > 0.1:
        return (
            "Expect a few windward showers rolling through, so stash a light jacket "
            "with your beach gear."
        )
    if ctx.wind_speed < 15:
        return deterministic_pick(seed, COMFORT_VARIANTS)
    return None


def safety_tip(ctx: TemplateContext) -> str | None:
    if ctx.uv_index and ctx.uv_index >= 8:
        return "UV index is blazing, so reapply reef-safe sunscreen and bring a rash guard."
    if ctx.wave_height and ctx.wave_height >= 6:
        return "Watch for strong rip currents and never paddle out alone."
    if ctx.wind_speed >= 20:
        return "Trades are howling, so expect chop and secure anything you leave on the sand."
    return None


def _filter_if_any(spots: list[Spot], keep) -> list[Spot]:
    kept = [s for s in spots if keep(s)]
    return kept or spots


def _summary(ctx: TemplateContext) -> str:
    parts = []
    if ctx.wave_height is not None:
        parts.append(f"{ctx.wave_height:.1f}ft waves")
    parts.append(f"{round_half_up(ctx.temperature)}°F")
    parts.append(f"{round_half_up(ctx.wind_speed)}mph wind")
    return ", ".join(parts)


def compose_conversational_response(
    question: str,
    ctx: TemplateContext,
    results: list[ToolResult],
    state: ConversationState | None = None,
) -> str | None:
    """Assemble up to three sentences from the context and recommendations.

    The first sentence summarizes the spot's mood and numbers, the second gives
    an activity suggestion, then alternatives and a safety tip fill any
    remaining slot.

    Returns:
        Composed answer, or None for future-looking questions
    """
    if is_future_question(question):
        return None

    recommendations: list[Spot] = [
        s for s in (find_result(results, "recommendBeaches") or []) if getattr(s, "name", None)
    ]
    if ctx.wants_family or ctx.together_preference:
        recommendations = _filter_if_any(recommendations, lambda s: "family" in s.type.value)
    if ctx.wants_snorkel:
        recommendations = _filter_if_any(recommendations, lambda s: "snorkel" in s.type.value)
    if state is not None and state.prior_recommendations:
        recommendations = _filter_if_any(
            recommendations, lambda s: s.name not in state.prior_recommendations
        )

    primary = recommendations[0] if recommendations else None
    location = display_location(ctx.location)
    if location is None and primary is not None:
        location = primary.name

    summary = _summary(ctx)
    mood = describe_surf_mood(ctx.wave_height, ctx.conditions)

    if primary is not None:
        if ctx.together_preference:
            focus = "for the whole crew"
        elif ctx.wants_family:
            focus = "for a chill family beach day"
        elif ctx.wants_surf:
            focus = "for a quick surf check"
        else:
            focus = "right now"
        first = f"{location or primary.name}'s {mood} {focus} - {summary}."
    elif location:
        first = f"{location}'s {mood} right now - {summary}."
    else:
        first = f"Conditions are {mood} right now - {summary}."

    sentences = [s for s in (normalize_sentence(first),) if s]

    suggestion = recommendation_sentence(question, ctx)
    if suggestion:
        sentences.append(normalize_sentence(suggestion) or suggestion)

    if len(recommendations) > 1 and len(sentences) < MAX_SENTENCES:
        alternatives = format_list([s.name for s in recommendations[1:3]])
        if ctx.wants_family and ctx.wants_surf and not ctx.together_preference:
            line = (
                f"If you want a backup with easy surf, {alternatives} keep everyone smiling "
                "without much paddling."
            )
        else:
            line = f"If you want to mix it up, {alternatives} stay nice and mellow too."
        sentences.append(line)

    tip = safety_tip(ctx)
    if tip and len(sentences) < MAX_SENTENCES:
        sentences.append(tip)

    return " ".join(sentences[:MAX_SENTENCES]) or None
