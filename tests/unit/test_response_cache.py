"""Tests for the answer cache: keys, cacheability, TTLs and stats."""

import pytest

from backend.app.models.snapshots import SpotResolution, WeatherSnapshot
from backend.app.models.tools import ToolResult
from backend.app.orchestration.cache import (
    CACHE_TTL_SECONDS,
    ResponseCache,
    is_cacheable,
    question_location,
    question_signature,
    question_type,
)


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestQuestionType:
    """First keyword family present wins."""

    @pytest.mark.parametrize(
        ("question", "expected"),
        [
            ("weather in waikiki", "weather"),
            ("temp at kailua", "weather"),
            ("surf at the north shore", "surf"),
            ("beach rating", "beachscore"),
            ("tide times", "tide"),
            ("good for kids?", "family"),
            ("recommend a beach", "recommend"),
            ("hello", "general"),
        ],
    )
    def test_types(self, question: str, expected: str) -> None:
        assert question_type(question) == expected


class TestQuestionLocation:
    """Location comes from the question, then from tool results."""

    def test_from_question(self) -> None:
        assert question_location("surf at the northshore") == "northshore"
        assert question_location("weather at ala moana") == "alamoana"

    def test_from_weather_result(self) -> None:
        results = [
            ToolResult(
                tool="getWeather", result=WeatherSnapshot(location="Sandy Beach"), success=True
            )
        ]
        assert question_location("weather here", results) == "sandybeach"

    def test_from_resolved_spot(self) -> None:
        results = [
            ToolResult(
                tool="resolveSpot",
                result=SpotResolution(name="Makapu'u Beach", lat=21.31, lon=-157.66),
                success=True,
            )
        ]
        assert question_location("weather here", results) == "makapuubeach"

    def test_general(self) -> None:
        assert question_location("weather here") == "general"


class TestCacheable:
    """Only current, simple, impersonal questions are cached."""

    def test_simple_current_question(self) -> None:
        assert is_cacheable("What's the weather in Waikiki?")

    @pytest.mark.parametrize(
        "question",
        [
            "Weather tomorrow in Waikiki",
            "Best beach for kids",
            "Where should I go?",
            "Beach score for Waikiki",
            "Should I surf Waikiki?",
        ],
    )
    def test_not_cacheable(self, question: str) -> None:
        assert not is_cacheable(question)


class TestMakeKey:
    """Keys are <type>:<location>:<bucket>[:<signature>]."""

    def test_weather_key_uses_five_minute_bucket(self) -> None:
        cache = ResponseCache(clock=FakeClock())
        key = cache.make_key("What's the weather in Waikiki?", now=1_000_000.0)
        assert key == f"weather:waikiki:{1_000_000 // 300}"

    def test_surf_key_uses_ten_minute_bucket(self) -> None:
        cache = ResponseCache(clock=FakeClock())
        key = cache.make_key("How's the surf at Waikiki?", now=1_000_000.0)
        assert key == f"surf:waikiki:{1_000_000 // 600}"

    def test_general_location_gets_signature(self) -> None:
        cache = ResponseCache(clock=FakeClock())
        question = "How's the surf?"
        key = cache.make_key(question, now=1_000_000.0)
        assert key == f"surf:general:{1_000_000 // 600}:{question_signature(question)}"

    def test_signature_ignores_punctuation_and_case(self) -> None:
        assert question_signature("How's the SURF?") == question_signature("hows the surf")
        assert question_signature("a") != question_signature("b")

    def test_bucket_rolls_over(self) -> None:
        cache = ResponseCache(clock=FakeClock())
        q = "What's the weather in Waikiki?"
        assert cache.make_key(q, now=299.0) != cache.make_key(q, now=300.0)


class TestResponseCache:
    """TTL, eviction, sweep and stats."""

    def test_hit_within_ttl(self) -> None:
        clock = FakeClock()
        cache = ResponseCache(clock=clock)
        cache.set("weather:waikiki:1", "Sunny")
        clock.now += CACHE_TTL_SECONDS["weather"]
        assert cache.get("weather:waikiki:1") == "Sunny"

    def test_expired_entry_is_evicted_and_counts_as_miss(self) -> None:
        clock = FakeClock()
        cache = ResponseCache(clock=clock)
        cache.set("weather:waikiki:1", "Sunny")
        clock.now += CACHE_TTL_SECONDS["weather"] + 1
        assert cache.get("weather:waikiki:1") is None
        assert len(cache) == 0
        assert cache.misses == 1

    def test_ttl_follows_question_type(self) -> None:
        clock = FakeClock()
        cache = ResponseCache(clock=clock)
        cache.set("general:waikiki:1", "Tides are low", question_type="tide")
        clock.now += 20 * 60
        assert cache.get("general:waikiki:1") == "Tides are low"

    def test_ttl_defaults_to_key_prefix(self) -> None:
        clock = FakeClock()
        cache = ResponseCache(clock=clock)
        cache.set("surf:waikiki:1", "Small")
        clock.now += 9 * 60
        assert cache.get("surf:waikiki:1") == "Small"
        clock.now += 2 * 60
        assert cache.get("surf:waikiki:1") is None

    def test_sweep_on_threshold(self) -> None:
        clock = FakeClock()
        cache = ResponseCache(clock=clock, sweep_threshold=2)
        cache.set("weather:a:1", "a")
        cache.set("weather:b:1", "b")
        clock.now += CACHE_TTL_SECONDS["weather"] + 1
        cache.set("weather:c:1", "c")
        assert len(cache) == 1

    def test_stats_and_clear(self) -> None:
        cache = ResponseCache(clock=FakeClock())
        cache.set("weather:a:1", "a")
        cache.get("weather:a:1")
        cache.get("weather:missing:1")
        assert cache.stats() == {"hits": 1, "misses": 1, "total": 2, "size": 1, "hit_rate": 0.5}

        cache.clear()
        assert cache.stats() == {"hits": 0, "misses": 0, "total": 0, "size": 0, "hit_rate": 0.0}
