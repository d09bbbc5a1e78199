"""a-service: entry service of the two-hop trace.

GET / opens a handler span and calls b-service inside a serviceB span,
propagating the trace through B3 headers. Answers 200 "a-service" when
b-service succeeds and an empty 500 otherwise.

Usage:
    waypoint-a-service
"""

from contextlib import AsyncExitStack

import httpx
from fastapi import APIRouter, FastAPI, Response
from fastapi.responses import PlainTextResponse

from waypoint.api.app import create_service_app
from waypoint.api.dependencies import DownstreamDep, InstrumentationDep
from waypoint.api.server import serve
from waypoint.bootstrap import configure_logging, init_or_exit
from waypoint.client.downstream import DownstreamClient
from waypoint.config import get_settings
from waypoint.config.models.services import FrontServiceConfig
from waypoint.errors import DownstreamError
from waypoint.observability.logging import get_logger
from waypoint.observability.tracing import (
    Instrumentation,
    get_current_trace_id,
    record_exception,
)

logger = get_logger(__name__)

SERVICE_NAME = "a-service"
INSTRUMENTATION_NAME = "waypoint.services.a_service"

router = APIRouter()


async def call_service_b(instrumentation: Instrumentation, client: DownstreamClient) -> None:
    """Call b-service once inside a serviceB span."""
    with instrumentation.span("serviceB"):
        await client.get("/")


@router.get("/", response_class=PlainTextResponse)
async def handle(
    instrumentation: InstrumentationDep,
    downstream: DownstreamDep,
) -> Response:
    """Handle a request by calling b-service."""
    with instrumentation.span("handler") as span:
        logger.info("handling_request", trace_id=get_current_trace_id())

        try:
            await call_service_b(instrumentation, downstream)
        except DownstreamError as e:
            logger.warning(
                "downstream_call_failed",
                url=e.url,
                upstream_status=e.upstream_status,
                error=e.message,
            )
            record_exception(span, e)
            return Response(status_code=500)

    return PlainTextResponse(SERVICE_NAME)


def create_app(
    instrumentation: Instrumentation,
    config: FrontServiceConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the a-service application.

    Args:
        instrumentation: Tracing handles of the process
        config: Listener and downstream settings
        transport: httpx transport for the downstream client (tests)
    """

    async def acquire(app: FastAPI, stack: AsyncExitStack) -> None:
        app.state.downstream = await stack.enter_async_context(
            DownstreamClient(
                config.downstream_url,
                instrumentation,
                timeout=config.downstream_timeout_seconds,
                transport=transport,
            )
        )

    return create_service_app(
        SERVICE_NAME,
        router,
        instrumentation=instrumentation,
        acquire=acquire,
    )


def main() -> None:
    """CLI entrypoint for a-service."""
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

    config = settings.services.a_service
    serve(create_app(instrumentation, config), config)
