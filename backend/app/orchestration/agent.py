"""Question-answering orchestrator.

Flow for one question:

    window -> cache lookup -> plan (fast route | model | rule fallback)
    -> execute + enhance -> synthesize -> repeat check -> cache store

Synthesis tiers, first non-empty wins: fast synthesizer, template engine,
model free text, conversational composer, fixed default line.
"""

import logging
import random
import time
import uuid

from backend.app.llm.client import (
    DeterministicStubClient,
    ModelBoundary,
    PlanParseError,
    limit_sentences,
    parse_plan,
)
from backend.app.llm.prompts import (
    build_answer_prompt,
    build_conversation_context,
    build_planning_prompt,
)
from backend.app.models.conversation import ConversationState, IntentSignals, Message
from backend.app.models.tools import ToolCall, ToolResult
from backend.app.orchestration.cache import ResponseCache, is_cacheable, question_type
from backend.app.orchestration.classifier import is_future_question
from backend.app.orchestration.context import build_template_context
from backend.app.orchestration.conversation import (
    analyze_conversation_intent,
    apply_context_window,
    compose_conversational_response,
    derive_conversation_state,
    fallback_tool_plan,
    normalize_for_comparison,
)
from backend.app.orchestration.executor import PlanExecutor
from backend.app.orchestration.fast_synth import fast_synthesize
from backend.app.orchestration.router import fast_route
from backend.app.orchestration.templates import SynthesisFailure, render_template
from backend.app.tools.executor import ToolInvoker
from backend.app.tools.registry import ToolRegistry
from backend.app.utils.logging import log_answer_path

logger = logging.getLogger(__name__)

DEFAULT_ANSWER = (
    "Still double-checking the latest conditions - mind giving me another shot in a moment?"
)
ERROR_ANSWER = (
    "I'm having trouble processing that request right now. "
    "Please try asking about Hawaii surf or beach conditions!"
)
REPEAT_SUFFIX = (
    " If you'd like a different beach or timing, just say the word "
    "and I'll spin up a new game plan."
)


class AgentMetrics:
    """Interface for agent-level metrics."""

    def record_cache_lookup(self, result: str) -> None:
        pass

    def record_answer_path(self, path: str) -> None:
        pass


class BeachAgent:
    """Answers beach and surf questions from live tool data."""

    def __init__(
        self,
        registry: ToolRegistry,
        invoker: ToolInvoker | None = None,
        model: ModelBoundary | None = None,
        cache: ResponseCache | None = None,
        metrics: AgentMetrics | None = None,
        template_seed: int | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            registry: Tools available to plans
            invoker: Tool invoker (defaults to one over ``registry`` with default config)
            model: Generative model boundary (defaults to the deterministic stub)
            cache: Answer cache (defaults to a fresh in-memory cache)
            metrics: Metrics recorder (optional, defaults to no-op)
            template_seed: Fixed seed for template phrasing; None seeds from the context
        """
        self.registry = registry
        self.invoker = invoker or ToolInvoker(registry)
        self.model = model or DeterministicStubClient()
        self.cache = cache if cache is not None else ResponseCache()
        self._metrics = metrics or AgentMetrics()
        self._template_seed = template_seed

    async def answer(self, question: str, conversation: list[Message] | None = None) -> str:
        """Answer ``question``; never raises.

        Args:
            question: Raw user question
            conversation: Prior turns, oldest first

        Returns:
            Answer text, or a fixed apology when anything unexpected fails
        """
        trace_id = uuid.uuid4().hex[:12]
        try:
            return await self._answer(question, conversation, trace_id)
        except Exception:
            logger.exception(f"Agent failed to answer question (trace_id={trace_id})")
            self._metrics.record_answer_path("error")
            return ERROR_ANSWER

    async def _answer(
        self, question: str, conversation: list[Message] | None, trace_id: str
    ) -> str:
        start = time.monotonic()
        window = apply_context_window(conversation)
        state = derive_conversation_state(question, window)

        use_cache = is_cacheable(question)
        lookup_key = self.cache.make_key(question) if use_cache else None
        if lookup_key is not None:
            cached = self.cache.get(lookup_key)
            self._metrics.record_cache_lookup("hit" if cached is not None else "miss")
            if cached is not None:
                logger.info("Cache hit")
                self._record(trace_id, "cache", question, start)
                return cached
        else:
            self._metrics.record_cache_lookup("skipped")

        signals = analyze_conversation_intent(question, window)
        conversation_context = build_conversation_context(window, signals, state)

        plan = await self._plan(question, window, conversation_context)
        executor = PlanExecutor(self.invoker, trace_id=trace_id)
        outcome = await executor.execute(plan)
        await executor.enhance(question, outcome)

        answer, path = await self._synthesize(
            question, window, signals, state, conversation_context, outcome.results
        )

        if state.last_assistant and normalize_for_comparison(answer) == normalize_for_comparison(
            state.last_assistant
        ):
            answer += REPEAT_SUFFIX

        if lookup_key is not None:
            # Results may name a location the question did not; store under both keys.
            qtype = question_type(question)
            for key in {lookup_key, self.cache.make_key(question, outcome.results)}:
                self.cache.set(key, answer, question_type=qtype)

        self._record(trace_id, path, question, start, len(outcome.results))
        return answer

    def _record(
        self, trace_id: str, path: str, question: str, start: float, tool_count: int = 0
    ) -> None:
        self._metrics.record_answer_path(path)
        log_answer_path(
            trace_id, path, question, (time.monotonic() - start) * 1000, tool_count=tool_count
        )

    async def _plan(
        self, question: str, window: list[Message], conversation_context: str
    ) -> list[ToolCall]:
        routed = fast_route(question)
        if routed is not None:
            logger.info("Using fast routing")
            return routed

        prompt = build_planning_prompt(question, conversation_context, self.registry.describe())
        text = await self.model.plan(prompt)
        if text is None:
            logger.warning("Model planning unavailable, using rule-based plan")
            return fallback_tool_plan(question, window)

        try:
            return parse_plan(text)
        except PlanParseError as e:
            logger.warning(
                f"Could not parse model plan: {e}", extra={"structured": {"payload": e.payload}}
            )
            return []

    async def _synthesize(
        self,
        question: str,
        window: list[Message],
        signals: IntentSignals,
        state: ConversationState,
        conversation_context: str,
        results: list[ToolResult],
    ) -> tuple[str, str]:
        """Run the synthesis tiers; returns (answer, tier name)."""
        fast = fast_synthesize(results, question)
        if fast:
            return fast, "fast_synth"

        ctx = build_template_context(results, question, window)

        locked = signals.together_preference and bool(ctx.recommended_beaches)
        if not is_future_question(question) and not locked:
            rng = random.Random(self._template_seed) if self._template_seed is not None else None
            try:
                return render_template(question, ctx, rng), "template"
            except SynthesisFailure as e:
                logger.debug(f"Template tier skipped: {e}")

        answer_prompt = build_answer_prompt(question, conversation_context, results)
        text = await self.model.synthesize(answer_prompt)
        if text:
            limited = limit_sentences(text, 3)
            if limited:
                return limited, "model"

        composed = compose_conversational_response(question, ctx, results, state)
        if composed:
            return composed, "composer"

        logger.warning("Falling back to default answer")
        return DEFAULT_ANSWER, "default"
