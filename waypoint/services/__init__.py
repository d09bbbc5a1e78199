"""Demo HTTP services.

- a_service / b_service: trace context propagated across two hops
- correlated: log lines correlated with the active span
- counter: periodically incremented counter exposed for Prometheus
"""
