"""Structured logging for tool attempts and answer paths."""

import logging
from typing import Any

from backend.app.tools.executor import ToolContext

logger = logging.getLogger(__name__)


class StructuredToolLogger:
    """Structured logger for tool execution."""

    def log_attempt(
        self,
        ctx: ToolContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log tool execution attempt with structured data."""
        log_data: dict[str, Any] = {
            "trace_id": ctx.trace_id,
            "tool": ctx.tool_name,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Tool execution: {ctx.tool_name} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})


def log_answer_path(
    trace_id: str, path: str, question: str, latency_ms: float, tool_count: int = 0
) -> None:
    """Log which synthesis tier produced the answer."""
    log_data: dict[str, Any] = {
        "trace_id": trace_id,
        "path": path,
        "question_length": len(question),
        "tool_count": tool_count,
        "latency_ms": round(latency_ms, 2),
    }
    logger.info(f"Answer path: {path}", extra={"structured": log_data})


def configure_logging(level: str = "INFO") -> None:
    """Set the root log level and a plain formatter."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
