"""Generative-model boundary with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Every call returns ``None`` when the model is unavailable (no key, timeout,
API error, empty output) so callers fall through to deterministic paths.
"""

import asyncio
import json
import logging
import re
from typing import Protocol

from openai import AsyncOpenAI
from pydantic import ValidationError

from backend.app.config import get_settings
from backend.app.llm.prompts import SYSTEM_PROMPT
from backend.app.models.tools import ToolCall

logger = logging.getLogger(__name__)

_PLAN_ARRAY = re.compile(r"\[[\s\S]*\]")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


class PlanParseError(ValueError):
    """Model plan text could not be turned into tool calls."""

    def __init__(self, message: str, payload: str) -> None:
        super().__init__(message)
        self.payload = payload


class ModelBoundary(Protocol):
    """Protocol for generative model implementations."""

    async def plan(self, prompt: str) -> str | None:
        """Return raw plan text (expected to contain a JSON array), or None."""
        ...

    async def synthesize(self, prompt: str) -> str | None:
        """Return free-text answer, or None."""
        ...


class DeterministicStubClient:
    """Stub model (no API key required): always unavailable."""

    async def plan(self, prompt: str) -> str | None:
        return None

    async def synthesize(self, prompt: str) -> str | None:
        return None


class OpenAIClient:
    """OpenAI-backed model boundary."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout_ms: int = 12_000):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use (default: gpt-4o-mini for cost efficiency)
            timeout_ms: Hard bound on each model call
        """
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout_ms / 1000, max_retries=0)
        self.model = model
        self.timeout_s = timeout_ms / 1000

    async def plan(self, prompt: str) -> str | None:
        return await self._complete(prompt, temperature=0.0, max_tokens=600, purpose="planning")

    async def synthesize(self, prompt: str) -> str | None:
        return await self._complete(prompt, temperature=0.7, max_tokens=300, purpose="answer")

    async def _complete(
        self, prompt: str, *, temperature: float, max_tokens: int, purpose: str
    ) -> str | None:
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=temperature,
                    max_tokens=max_tokens,
                ),
                timeout=self.timeout_s,
            )
        except TimeoutError:
            logger.error(f"OpenAI {purpose} call timed out after {self.timeout_s}s")
            return None
        except Exception as e:
            logger.error(f"OpenAI {purpose} call failed: {e}")
            return None

        text = response.choices[0].message.content or ""
        if not text.strip():
            logger.warning(f"OpenAI returned empty {purpose} response")
            return None
        return text


def get_llm_client() -> ModelBoundary:
    """Factory function to get appropriate model client based on config.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    settings = get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for planning and synthesis")
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            timeout_ms=settings.model_timeout_ms,
        )
    logger.warning("No OpenAI API key configured, using deterministic stub client")
    return DeterministicStubClient()


def parse_plan(text: str) -> list[ToolCall]:
    """Extract the first JSON array of ``{tool, args}`` objects from ``text``.

    Raises:
        PlanParseError: No array, invalid JSON, or entries that are not tool calls
    """
    match = _PLAN_ARRAY.search(text)
    if match is None:
        raise PlanParseError("no JSON array in plan", payload=text)
    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise PlanParseError(f"invalid plan JSON: {e}", payload=text) from e
    if not isinstance(raw, list):
        raise PlanParseError("plan is not a list", payload=text)
    try:
        return [ToolCall.model_validate(item) for item in raw]
    except ValidationError as e:
        raise PlanParseError(f"invalid tool call in plan: {e}", payload=text) from e


def limit_sentences(text: str, max_sentences: int = 3) -> str:
    """Keep at most ``max_sentences`` sentences."""
    sentences = [s for s in _SENTENCE_BREAK.split(text.strip()) if s.strip()]
    if len(sentences) > max_sentences:
        logger.warning(f"Model answer had {len(sentences)} sentences, trimming to {max_sentences}")
    return " ".join(sentences[:max_sentences]).strip()
