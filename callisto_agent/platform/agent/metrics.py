"""Agent-level Prometheus metrics.

Counters and histograms describing agent runs, model token usage, routing
decisions and calls to the rendering service.
"""

from time import monotonic
from typing import NamedTuple

import prometheus_client

from callisto_agent.platform.observability.metrics import BUCKETS


class AgentMetricsLabels(NamedTuple):
    agent: str


class RenderMetricsLabels(NamedTuple):
    agent: str
    component: str


agent_run_histogram = prometheus_client.Histogram(
    name="agent_run_duration_seconds",
    documentation="Duration of a full agent decision cycle (seconds)",
    labelnames=(*AgentMetricsLabels._fields, "status"),
    buckets=BUCKETS,
)

agent_in_flight_gauge = prometheus_client.Gauge(
    name="agent_runs_in_flight",
    documentation="Agent decision cycles currently running",
    labelnames=AgentMetricsLabels._fields,
)

agent_tokens_counter = prometheus_client.Counter(
    name="agent_tokens",
    documentation="Tokens consumed by agent model calls",
    labelnames=("agent", "model", "direction"),
)

agent_route_counter = prometheus_client.Counter(
    name="agent_route_decisions",
    documentation="Routing decisions taken after a model turn",
    labelnames=("agent", "route"),
)

render_histogram = prometheus_client.Histogram(
    name="render_call_duration_seconds",
    documentation="Duration of calls to the rendering service (seconds)",
    labelnames=(*RenderMetricsLabels._fields, "status"),
    buckets=BUCKETS,
)


def _status(error: bool) -> str:
    return "error" if error else "success"


def record_agent_tokens(agent: str, model: str, input_tokens: int, output_tokens: int) -> None:
    """Record token usage of one model call; zero counts are skipped."""
    if input_tokens > 0:
        agent_tokens_counter.labels(agent, model, "input").inc(input_tokens)
    if output_tokens > 0:
        agent_tokens_counter.labels(agent, model, "output").inc(output_tokens)


def record_route(agent: str, route: str) -> None:
    """Record a routing decision."""
    agent_route_counter.labels(agent, route).inc()


def record_render_call(labels: RenderMetricsLabels, duration: float, error: bool = False) -> None:
    """Record one call to the rendering service."""
    render_histogram.labels(*labels, _status(error)).observe(duration)


class collect_agent_metrics:
    """Async context manager timing an agent run.

    Usage:
        async with collect_agent_metrics(AgentMetricsLabels("generative-ui")):
            await graph.ainvoke(...)
    """

    def __init__(self, labels: AgentMetricsLabels) -> None:
        self.labels = labels
        self._start = 0.0

    async def __aenter__(self) -> "collect_agent_metrics":
        self._start = monotonic()
        agent_in_flight_gauge.labels(*self.labels).inc()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        agent_in_flight_gauge.labels(*self.labels).dec()
        agent_run_histogram.labels(*self.labels, _status(exc_type is not None)).observe(
            monotonic() - self._start
        )
        return False
