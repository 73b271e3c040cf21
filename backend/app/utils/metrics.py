"""Prometheus metrics for tool execution, the response cache and answer paths."""

from prometheus_client import Counter, Gauge, Histogram

# Tool execution metrics
tool_latency_ms = Histogram(
    "tool_latency_ms",
    "Tool execution latency in milliseconds",
    ["tool", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

tool_errors_total = Counter(
    "tool_errors_total",
    "Total tool execution errors",
    ["tool", "reason"],
)

# Agent metrics
response_cache_lookups_total = Counter(
    "response_cache_lookups_total",
    "Response cache lookups by result",
    ["result"],  # hit | miss | skipped
)

answer_path_total = Counter(
    "answer_path_total",
    "Answers by the synthesis tier that produced them",
    ["path"],
)

response_cache_entries = Gauge(
    "response_cache_entries",
    "Entries held by the response cache (refreshed on scrape)",
)


class PrometheusToolMetrics:
    """Prometheus-based tool metrics implementation."""

    def record_latency(self, tool: str, outcome: str, latency_ms: float) -> None:
        """Record tool execution latency."""
        tool_latency_ms.labels(tool=tool, outcome=outcome).observe(latency_ms)

    def inc_error(self, tool: str, reason: str) -> None:
        """Increment error counter."""
        tool_errors_total.labels(tool=tool, reason=reason).inc()


class PrometheusAgentMetrics:
    """Prometheus-based agent metrics implementation."""

    def record_cache_lookup(self, result: str) -> None:
        response_cache_lookups_total.labels(result=result).inc()

    def record_answer_path(self, path: str) -> None:
        answer_path_total.labels(path=path).inc()
