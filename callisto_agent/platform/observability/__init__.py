"""Observability infrastructure module.

This module provides monitoring and error tracking:
- Structured logging with correlation IDs
- Prometheus metrics
- Bugsnag error reporting
- OpenTelemetry trace export
"""

from callisto_agent.platform.observability.errors import initialize_bugsnag
from callisto_agent.platform.observability.logging import (
    configure_logging,
    correlation_id_ctx,
    get_logger,
)
from callisto_agent.platform.observability.metrics import (
    BUCKETS,
    prometheus_middleware,
)
from callisto_agent.platform.observability.tracing import configure_tracing

__all__ = [
    "BUCKETS",
    "configure_logging",
    "configure_tracing",
    "correlation_id_ctx",
    "get_logger",
    "initialize_bugsnag",
    "prometheus_middleware",
]
