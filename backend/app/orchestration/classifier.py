"""Keyword-based question intent classification."""

import re

from backend.app.models.common import Intent

# "today" alone is a current-day qualifier; it signals a forecast only when the
# question carries no advisory keyword.
_TIME_KEYWORDS = re.compile(
    r"(next|tomorrow|hour|hours|morning|afternoon|evening|all day|tonight|week|weekend)"
)
_TODAY = re.compile(r"today")
_ADVISORY_KEYWORDS = re.compile(
    r"(should|recommend|best|compare|advice|when|where|which|good|bad)"
)
_SIMPLE_PATTERN = re.compile(
    r"^(what's|how's|what is|how is|current).*(weather|surf|waves|temperature|temp)"
)
_FUTURE_PATTERN = re.compile(
    r"(tomorrow|later|next|tonight|morning|afternoon|evening|hour|hrs|time|forecast|plan|schedule)"
)


def classify(question: str) -> Intent:
    """Label a question simple / complex / forecast.

    Time keywords win over advisory keywords, except for a bare "today".
    """
    q = question.lower().strip()
    advisory = _ADVISORY_KEYWORDS.search(q) is not None

    if _TIME_KEYWORDS.search(q) or (_TODAY.search(q) and not advisory):
        return Intent.forecast
    if advisory:
        return Intent.complex
    if _SIMPLE_PATTERN.search(q):
        return Intent.simple
    return Intent.simple


def is_future_question(question: str) -> bool:
    """Whether the question looks ahead in time (gates caching and templates)."""
    return _FUTURE_PATTERN.search(question.lower()) is not None
