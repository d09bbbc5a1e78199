"""Correlated logging service.

GET / emits a debug log line bound to the active span, so the log and trace
backends can be joined on trace_id / span_id.

Usage:
    waypoint-correlated-service
"""

import asyncio

from fastapi import APIRouter, FastAPI
from fastapi.responses import PlainTextResponse

from waypoint.api.app import create_service_app
from waypoint.api.dependencies import InstrumentationDep
from waypoint.api.server import serve
from waypoint.bootstrap import configure_logging, init_or_exit
from waypoint.config import get_settings
from waypoint.config.models.services import WorkerServiceConfig
from waypoint.observability.logging import bind_span, get_logger
from waypoint.observability.tracing import Instrumentation

logger = get_logger(__name__)

SERVICE_NAME = "demo4-service"
INSTRUMENTATION_NAME = "waypoint.services.correlated"


async def foo(instrumentation: Instrumentation, work_seconds: float) -> None:
    """Log inside a span, then simulate work."""
    with instrumentation.span("foo") as span:
        bind_span(logger, span).debug("foo_started")
        await asyncio.sleep(work_seconds)


def create_app(instrumentation: Instrumentation, config: WorkerServiceConfig) -> FastAPI:
    """Create the correlated logging application."""
    router = APIRouter()

    @router.get("/", response_class=PlainTextResponse)
    async def handle(tracing: InstrumentationDep) -> PlainTextResponse:
        with tracing.span("handler"):
            await foo(tracing, config.work_seconds)

        return PlainTextResponse(SERVICE_NAME)

    return create_service_app(SERVICE_NAME, router, instrumentation=instrumentation)


def main() -> None:
    """CLI entrypoint for the correlated logging service."""
    settings = get_settings()
    configure_logging(settings)

    instrumentation = init_or_exit(
        "tracing",
        lambda: Instrumentation.create(
            SERVICE_NAME,
            INSTRUMENTATION_NAME,
            settings.observability.tracing,
            settings.resource,
        ),
    )

    config = settings.services.correlated
    serve(create_app(instrumentation, config), config)
