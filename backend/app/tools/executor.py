"""Async tool invoker with hard timeouts and bounded, jittered retries.

Looks tools up in a ToolRegistry, validates arguments against the tool's
pydantic model, then runs the handler under ``asyncio.wait_for``. Failures are
raised as ToolInvocationError subclasses; the plan executor records them on
the ToolResult instead of letting them escape.
"""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from backend.app.config import Settings
from backend.app.models.tools import ToolCall
from backend.app.tools.registry import ToolRegistry


# Exception types
class ToolInvocationError(Exception):
    """Tool failed (after retries where retries apply)."""

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(message)
        self.tool = tool


class ToolTimeoutError(ToolInvocationError):
    """Tool execution exceeded the hard timeout on every attempt."""

    pass


class UnknownToolError(ToolInvocationError):
    """No tool registered under the requested name."""

    pass


# Lookup misses are deterministic: retrying them only adds latency.
NON_RETRYABLE: tuple[type[Exception], ...] = (LookupError,)


@dataclass(frozen=True)
class ToolContext:
    """Context for tool execution with tracing."""

    trace_id: str
    tool_name: str


@dataclass(frozen=True)
class ToolConfig:
    """Configuration for tool execution."""

    hard_timeout_ms: int = 8_000
    retry_count: int = 1
    retry_jitter_min_ms: int = 200
    retry_jitter_max_ms: int = 500

    @classmethod
    def from_settings(cls, settings: Settings) -> "ToolConfig":
        return cls(
            hard_timeout_ms=settings.tool_hard_timeout_ms,
            retry_count=settings.tool_retry_count,
            retry_jitter_min_ms=settings.retry_jitter_min_ms,
            retry_jitter_max_ms=settings.retry_jitter_max_ms,
        )


# Metrics interface (to be implemented by actual metrics system)
class ToolMetrics:
    """Interface for tool execution metrics."""

    def record_latency(self, tool: str, outcome: str, latency_ms: float) -> None:
        """Record tool execution latency."""
        pass

    def inc_error(self, tool: str, reason: str) -> None:
        """Increment error counter."""
        pass


# Logging interface
class ToolLogger:
    """Interface for structured logging."""

    def log_attempt(
        self,
        ctx: ToolContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log tool execution attempt."""
        pass


class ToolInvoker:
    """Runs one ToolCall against the registry with timeout and retries."""

    def __init__(
        self,
        registry: ToolRegistry,
        config: ToolConfig | None = None,
        metrics: ToolMetrics | None = None,
        logger: ToolLogger | None = None,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize invoker.

        Args:
            registry: Tool name -> spec lookup
            config: Timeout/retry configuration (defaults to ToolConfig())
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
            sleep_fn: Injectable sleep function (default: asyncio.sleep)
        """
        self._registry = registry
        self._config = config or ToolConfig()
        self._metrics = metrics or ToolMetrics()
        self._logger = logger or ToolLogger()
        self._sleep = sleep_fn or asyncio.sleep

    async def invoke(self, call: ToolCall, trace_id: str = "-") -> Any:
        """Execute ``call`` and return the handler's payload.

        Args:
            call: Tool name and raw arguments
            trace_id: Correlation id for logs

        Returns:
            Whatever the tool handler returns (typically a pydantic model)

        Raises:
            UnknownToolError: Tool name not registered
            ToolInvocationError: Invalid arguments or handler failure after retries
            ToolTimeoutError: Every attempt exceeded the hard timeout
        """
        ctx = ToolContext(trace_id=trace_id, tool_name=call.tool)
        config = self._config

        spec = self._registry.get(call.tool)
        if spec is None:
            self._metrics.inc_error(call.tool, "unknown_tool")
            self._logger.log_attempt(ctx, 0, "unknown_tool", 0.0, error_reason="unknown_tool")
            raise UnknownToolError(call.tool, f"unknown tool: {call.tool}")

        try:
            args = spec.args_model.model_validate(call.args)
        except ValidationError as e:
            self._metrics.inc_error(call.tool, "invalid_args")
            self._logger.log_attempt(ctx, 0, "invalid_args", 0.0, error_reason="invalid_args")
            raise ToolInvocationError(call.tool, f"invalid arguments for {call.tool}: {e}") from e

        last_error: Exception | None = None
        for attempt in range(config.retry_count + 1):
            attempt_start = time.monotonic()

            try:
                # Execute with hard timeout
                hard_timeout_sec = config.hard_timeout_ms / 1000
                result = await asyncio.wait_for(spec.handler(args), timeout=hard_timeout_sec)

                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                self._metrics.record_latency(call.tool, "success", elapsed_ms)
                self._logger.log_attempt(ctx, attempt + 1, "success", elapsed_ms)
                return result

            except TimeoutError as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                last_error = e

                self._metrics.record_latency(call.tool, "timeout", elapsed_ms)
                self._metrics.inc_error(call.tool, "timeout")
                self._logger.log_attempt(
                    ctx, attempt + 1, "timeout", elapsed_ms, error_reason="timeout"
                )

            except NON_RETRYABLE as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                self._metrics.record_latency(call.tool, "error", elapsed_ms)
                self._metrics.inc_error(call.tool, "not_found")
                self._logger.log_attempt(
                    ctx, attempt + 1, "error", elapsed_ms, error_reason=type(e).__name__
                )
                raise ToolInvocationError(call.tool, str(e)) from e

            except Exception as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                last_error = e

                self._metrics.record_latency(call.tool, "error", elapsed_ms)
                self._metrics.inc_error(call.tool, "execution_error")
                self._logger.log_attempt(
                    ctx, attempt + 1, "error", elapsed_ms, error_reason=type(e).__name__
                )

            # Retry if not last attempt
            if attempt < config.retry_count:
                jitter_ms = random.uniform(config.retry_jitter_min_ms, config.retry_jitter_max_ms)
                await self._sleep(jitter_ms / 1000)

        # All attempts exhausted
        if isinstance(last_error, TimeoutError):
            raise ToolTimeoutError(
                call.tool, f"Tool {call.tool} timed out after all retries"
            ) from last_error
        raise ToolInvocationError(
            call.tool, f"Tool {call.tool} failed after all retries: {last_error}"
        ) from last_error
