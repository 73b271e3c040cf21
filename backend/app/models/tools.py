"""Tool call and tool result models."""

from typing import Any

from pydantic import BaseModel, Field

# JSON-serializable value type for tool arguments
JsonValue = str | int | float | bool | None | dict[str, Any] | list[Any]


class ToolCall(BaseModel):
    """A named external-data request plus its arguments."""

    tool: str = Field(..., min_length=1)
    args: dict[str, JsonValue] = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Outcome of one executed ToolCall.

    Exactly one of ``result`` / ``error`` is meaningful, selected by ``success``.
    Errors are recorded here instead of being raised past the executor.
    """

    tool: str
    args: dict[str, JsonValue] = Field(default_factory=dict)
    result: Any = None
    error: str | None = None
    success: bool
    duration_ms: int = 0


def find_result(results: list[ToolResult], tool: str) -> Any | None:
    """Return the first successful result payload for ``tool``, if any."""
    for entry in results:
        if entry.tool == tool and entry.success and entry.result is not None:
            return entry.result
    return None


def has_call(results: list[ToolResult], tool: str) -> bool:
    """Whether ``tool`` was invoked at all (successfully or not)."""
    return any(entry.tool == tool for entry in results)
