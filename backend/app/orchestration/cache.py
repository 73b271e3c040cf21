"""Time-bucketed TTL cache for final answers."""

import logging
import math
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from backend.app.models.common import Intent
from backend.app.models.tools import ToolResult, find_result
from backend.app.orchestration.classifier import classify, is_future_question

logger = logging.getLogger(__name__)

# TTL per question type (seconds)
CACHE_TTL_SECONDS: dict[str, int] = {
    "weather": 5 * 60,
    "surf": 10 * 60,
    "beachscore": 15 * 60,
    "tide": 30 * 60,
    "recommend": 10 * 60,
    "family": 10 * 60,
    "general": 5 * 60,
}

_LOCATION_TOKENS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("waikiki",), "waikiki"),
    (("north shore", "northshore"), "northshore"),
    (("kailua",), "kailua"),
    (("honolulu",), "honolulu"),
    (("lanikai",), "lanikai"),
    (("hanauma",), "hanauma"),
    (("ala moana",), "alamoana"),
)

_QUESTION_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("weather", "temperature", "temp"), "weather"),
    (("surf", "wave"), "surf"),
    (("score", "rating"), "beachscore"),
    (("tide",), "tide"),
    (("family", "kids", "children"), "family"),
    (("recommend", "best beach"), "recommend"),
)

# Question types (and the general location) that get a question signature suffix
_SIGNED_TYPES = {"general", "recommend", "family"}

_NOT_CACHEABLE = re.compile(r"(kids|family|recommend|best|where|calmer|score|plan)")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_location_name(name: str | None) -> str:
    return _NON_ALNUM.sub("", (name or "general").lower())


def question_signature(question: str) -> str:
    """31-multiplier rolling hash of the question's alphanumerics, base 36."""
    h = 0
    for ch in _NON_ALNUM.sub("", question.lower()):
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return _base36(h)


def _base36(n: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(digits[r])
    return "".join(reversed(out))


def question_type(question: str) -> str:
    q = question.lower()
    for words, qtype in _QUESTION_TYPES:
        if any(w in q for w in words):
            return qtype
    return "general"


def question_location(question: str, results: list[ToolResult] | tuple = ()) -> str:
    """Location token from the question text, else inferred from tool results."""
    q = question.lower()
    for words, token in _LOCATION_TOKENS:
        if any(w in q for w in words):
            return token

    results = list(results)
    weather = find_result(results, "getWeather")
    if weather is not None and getattr(weather, "location", None):
        return normalize_location_name(weather.location)
    resolved = find_result(results, "resolveSpot")
    if resolved is not None and getattr(resolved, "name", None):
        return normalize_location_name(resolved.name)
    recommended = find_result(results, "recommendBeaches")
    if recommended:
        return normalize_location_name(recommended[0].name)
    return "general"


def is_cacheable(question: str) -> bool:
    """Only current-conditions, simple questions without personalization are cached."""
    if is_future_question(question):
        return False
    if _NOT_CACHEABLE.search(question.lower()):
        return False
    return classify(question) == Intent.simple


@dataclass
class CacheEntry:
    """Cached answer with metadata."""

    response: str
    created_at: float
    ttl_seconds: int

    def is_fresh(self, now: float) -> bool:
        """Valid while ``now - created_at <= ttl``."""
        return now - self.created_at <= self.ttl_seconds


class ResponseCache:
    """In-memory answer cache keyed by "<type>:<location>:<bucket>[:<signature>]".

    Single event loop only; concurrent misses on one key both compute and the
    last write wins.
    """

    def __init__(
        self, clock: Callable[[], float] = time.time, sweep_threshold: int = 100
    ) -> None:
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._entries: dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def make_key(
        self,
        question: str,
        results: list[ToolResult] | tuple = (),
        now: float | None = None,
    ) -> str:
        """Build the cache key for a question (optionally informed by tool results)."""
        now = self._clock() if now is None else now
        q = question.lower().strip()
        qtype = question_type(q)
        location = question_location(q, results)
        bucket_size = 300 if qtype == "weather" else 600
        key = f"{qtype}:{location}:{math.floor(now / bucket_size)}"
        if qtype in _SIGNED_TYPES or location == "general":
            key = f"{key}:{question_signature(q)}"
        return key

    def get(self, key: str) -> str | None:
        """Cached answer if present and fresh; expired entries are evicted."""
        entry = self._entries.get(key)
        if entry is not None and not entry.is_fresh(self._clock()):
            del self._entries[key]
            entry = None

        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        return entry.response

    def set(self, key: str, response: str, question_type: str | None = None) -> None:
        """Store ``response`` with the TTL of its question type."""
        qtype = question_type or key.split(":", 1)[0]
        ttl = CACHE_TTL_SECONDS.get(qtype, CACHE_TTL_SECONDS["general"])
        self._entries[key] = CacheEntry(
            response=response, created_at=self._clock(), ttl_seconds=ttl
        )
        if len(self._entries) > self._sweep_threshold:
            self.sweep()

    def sweep(self) -> int:
        """Remove every expired entry; returns how many were removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if not e.is_fresh(now)]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.info(f"Cleaned {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> dict[str, Any]:
        total = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total": total,
            "size": len(self._entries),
            "hit_rate": round(self.hits / total, 4) if total else 0.0,
        }

    def __len__(self) -> int:
        return len(self._entries)
