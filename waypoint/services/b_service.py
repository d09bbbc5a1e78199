"""b-service: downstream service of the two-hop trace.

Its spans join the trace propagated by a-service.

Usage:
    waypoint-b-service
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
from waypoint.observability.logging import get_logger
from waypoint.observability.tracing import Instrumentation, get_current_trace_id

logger = get_logger(__name__)

SERVICE_NAME = "demo3-b-service"
INSTRUMENTATION_NAME = "waypoint.services.b_service"


async def foo(instrumentation: Instrumentation, work_seconds: float) -> None:
    """Simulate work inside a child span."""
    with instrumentation.span("foo"):
        logger.info("foo_started", trace_id=get_current_trace_id())
        await asyncio.sleep(work_seconds)


def create_app(instrumentation: Instrumentation, config: WorkerServiceConfig) -> FastAPI:
    """Create the b-service application."""
    router = APIRouter()

    @router.get("/", response_class=PlainTextResponse)
    async def handle(tracing: InstrumentationDep) -> PlainTextResponse:
        with tracing.span("handler"):
            await foo(tracing, config.work_seconds)

        return PlainTextResponse(SERVICE_NAME)

    return create_service_app(SERVICE_NAME, router, instrumentation=instrumentation)


def main() -> None:
    """CLI entrypoint for b-service."""
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

    config = settings.services.b_service
    serve(create_app(instrumentation, config), config)
