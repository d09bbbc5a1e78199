"""Observability: structured logging, distributed tracing, metrics.

Provides standardized observability primitives using structlog for logging,
OpenTelemetry for tracing and metrics, and Prometheus for exposition.
"""

from waypoint.observability.logging import (
    add_span_context,
    bind_span,
    get_logger,
    setup_logging,
    span_log_fields,
)
from waypoint.observability.metrics import CounterTicker, MetricsPipeline
from waypoint.observability.tracing import (
    Instrumentation,
    build_resource,
    create_propagator,
    create_span_exporter,
    get_current_trace_id,
    record_exception,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "add_span_context",
    "bind_span",
    "span_log_fields",
    # Metrics
    "MetricsPipeline",
    "CounterTicker",
    # Tracing
    "Instrumentation",
    "build_resource",
    "create_propagator",
    "create_span_exporter",
    "get_current_trace_id",
    "record_exception",
]
