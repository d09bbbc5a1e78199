"""Single-process span hierarchy demos.

Records a "main" span with a "foo" child that simulates work, then shuts the
provider down so the batched spans are flushed before exit.

Usage:
    waypoint-console-spans      # pretty-printed spans on stdout
    waypoint-collector-spans    # spans sent to the trace collector
"""

import time

from waypoint.bootstrap import configure_logging, init_or_exit
from waypoint.config import get_settings
from waypoint.config.models.observability import SpanExporterKind
from waypoint.observability.logging import get_logger
from waypoint.observability.tracing import Instrumentation, get_current_trace_id

logger = get_logger(__name__)

INSTRUMENTATION_NAME = "waypoint.demos.hierarchy"


def foo(instrumentation: Instrumentation, work_seconds: float) -> None:
    with instrumentation.span("foo"):
        logger.info("foo_started", trace_id=get_current_trace_id())
        time.sleep(work_seconds)


def run_hierarchy(instrumentation: Instrumentation, work_seconds: float = 1.0) -> str | None:
    """Record the main -> foo span hierarchy.

    Args:
        instrumentation: Tracing handles to record with
        work_seconds: Simulated work inside foo

    Returns:
        Trace ID of the recorded hierarchy
    """
    with instrumentation.span("main"):
        trace_id = get_current_trace_id()
        foo(instrumentation, work_seconds)
    return trace_id


def run(service_name: str, exporter: SpanExporterKind) -> None:
    """Run a hierarchy demo with the given exporter and flush on exit."""
    settings = get_settings()
    configure_logging(settings)

    tracing = settings.observability.tracing.model_copy(update={"exporter": exporter})
    instrumentation = init_or_exit(
        "tracing",
        lambda: Instrumentation.create(
            service_name,
            INSTRUMENTATION_NAME,
            tracing,
            settings.resource,
        ),
    )

    try:
        trace_id = run_hierarchy(instrumentation, settings.services.hierarchy_work_seconds)
        logger.info("hierarchy_recorded", service_name=service_name, trace_id=trace_id)
    finally:
        instrumentation.shutdown()


def console_main() -> None:
    """CLI entrypoint exporting spans to stdout."""
    run("demo1-service", "console")


def collector_main() -> None:
    """CLI entrypoint exporting spans to the trace collector."""
    run("demo2-service", "otlp")
