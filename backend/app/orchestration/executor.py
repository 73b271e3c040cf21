"""Plan execution and opportunistic enhancement.

Every ToolCall becomes exactly one ToolResult. Failures are recorded on the
result and never raised, so one failing tool cannot cancel its siblings.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from backend.app.models.common import Geo
from backend.app.models.snapshots import Spot, SpotResolution
from backend.app.models.tools import ToolCall, ToolResult, find_result, has_call
from backend.app.orchestration.classifier import is_future_question
from backend.app.tools.executor import ToolInvocationError, ToolInvoker

logger = logging.getLogger(__name__)

SAME_SPOT_DEGREES = 0.01


@dataclass
class ExecutionOutcome:
    """Results of a plan plus the coordinates learned while running it."""

    results: list[ToolResult] = field(default_factory=list)
    coords: Geo | None = None


def forecast_window(question: str) -> tuple[int, int]:
    """(hours, start_offset_hours) for an extended weather request."""
    q = question.lower()
    if "next 4" in q:
        hours = 4
    elif "next 6" in q:
        hours = 6
    elif "next 8" in q:
        hours = 8
    else:
        hours = 12

    if "tomorrow" in q:
        offset = 24
    elif "later" in q:
        offset = 6
    else:
        offset = 0
    return hours, offset


def needs_comprehensive(question: str) -> bool:
    q = question.lower()
    return ("should" in q and ("surf" in q or "go" in q)) or "conditions" in q or "overall" in q


def _is_extended_weather(entry: ToolResult) -> bool:
    args = entry.args
    return entry.tool == "getWeather" and bool(
        args.get("hours") or args.get("start_offset_hours") or args.get("startOffsetHours")
        or args.get("time_descriptor") or args.get("timeDescriptor")
    )  # fmt: skip


def _weather_near(results: list[ToolResult], geo: Geo) -> bool:
    for entry in results:
        if entry.tool != "getWeather":
            continue
        lat, lon = entry.args.get("lat"), entry.args.get("lon")
        if not isinstance(lat, int | float) or not isinstance(lon, int | float):
            continue
        if abs(lat - geo.lat) < SAME_SPOT_DEGREES and abs(lon - geo.lon) < SAME_SPOT_DEGREES:
            return True
    return False


class PlanExecutor:
    """Runs tool plans through a ToolInvoker."""

    def __init__(self, invoker: ToolInvoker, trace_id: str = "-") -> None:
        self._invoker = invoker
        self._trace_id = trace_id

    async def run_one(self, call: ToolCall) -> ToolResult:
        """Execute one call; any failure becomes an error result."""
        start = time.monotonic()
        try:
            payload = await self._invoker.invoke(call, trace_id=self._trace_id)
        except ToolInvocationError as e:
            logger.warning(f"Tool {call.tool} failed: {e}")
            return self._result(call, start, error=str(e))
        except Exception as e:
            logger.exception(f"Tool {call.tool} raised unexpectedly")
            return self._result(call, start, error=f"{type(e).__name__}: {e}")
        return self._result(call, start, payload=payload)

    @staticmethod
    def _result(
        call: ToolCall, start: float, payload: object = None, error: str | None = None
    ) -> ToolResult:
        return ToolResult(
            tool=call.tool,
            args=call.args,
            result=payload,
            error=error,
            success=error is None,
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    async def execute(self, calls: list[ToolCall]) -> ExecutionOutcome:
        """Execute a plan concurrently.

        Returns:
            ExecutionOutcome with one result per call (in plan order) and the
            coordinates of a successful resolveSpot, if any
        """
        outcome = ExecutionOutcome()
        if not calls:
            logger.info("No tool calls to execute")
            return outcome

        if len(calls) == 1:
            outcome.results.append(await self.run_one(calls[0]))
        else:
            logger.info(f"Executing {len(calls)} tools in parallel")
            outcome.results.extend(await asyncio.gather(*(self.run_one(c) for c in calls)))
            succeeded = sum(1 for r in outcome.results if r.success)
            logger.info(f"Parallel execution complete: {succeeded}/{len(calls)} tools succeeded")

        resolved: SpotResolution | None = find_result(outcome.results, "resolveSpot")
        if resolved is not None:
            outcome.coords = Geo(lat=resolved.lat, lon=resolved.lon)
        return outcome

    async def _add(self, outcome: ExecutionOutcome, tool: str, args: dict) -> None:
        logger.info(f"Adding {tool} based on question")
        outcome.results.append(await self.run_one(ToolCall(tool=tool, args=args)))

    async def enhance(self, question: str, outcome: ExecutionOutcome) -> ExecutionOutcome:
        """Append tool calls the question implies but the plan lacked.

        Keyword enhancement runs only when coordinates are known. Independently,
        a recommendBeaches result pulls weather for its top spot and supplies the
        coordinates when none were resolved.
        """
        q = question.lower()
        results = outcome.results

        if outcome.coords is not None:
            coords = {"lat": outcome.coords.lat, "lon": outcome.coords.lon}

            if is_future_question(question) and not any(_is_extended_weather(r) for r in results):
                hours, offset = forecast_window(question)
                await self._add(
                    outcome,
                    "getWeather",
                    {**coords, "hours": hours, "start_offset_hours": offset,
                     "time_descriptor": question},
                )  # fmt: skip

            if ("wave" in q or "surf" in q) and not has_call(results, "getSurf"):
                await self._add(outcome, "getSurf", coords)

            if any(w in q for w in ("weather", "temperature", "temp")) and not has_call(
                results, "getWeather"
            ):
                await self._add(outcome, "getWeather", coords)

            if needs_comprehensive(question):
                for tool in ("getWeather", "getSurf", "getOutdoorIndex"):
                    if not has_call(results, tool):
                        await self._add(outcome, tool, coords)

        recommended: list[Spot] | None = find_result(results, "recommendBeaches")
        if recommended:
            top = recommended[0]
            geo = Geo(lat=top.lat, lon=top.lon)
            if not _weather_near(results, geo):
                logger.info(f"Fetching weather for recommended beach {top.name}")
                await self._add(outcome, "getWeather", {"lat": geo.lat, "lon": geo.lon})
            if outcome.coords is None:
                outcome.coords = geo

        return outcome
