"""Waypoint: distributed tracing and metrics demonstration services.

Small HTTP services instrumented with OpenTelemetry, showing trace context
propagation across a two-hop call, log/trace correlation and a counter
metric scraped by Prometheus.
"""

__version__ = "1.0.0"
