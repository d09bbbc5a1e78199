"""FastAPI application factory shared by all demo services.

Creates the app with tracing middleware, the error handler and a lifespan
that acquires service resources into an AsyncExitStack, so that on shutdown
they are released in reverse order of acquisition.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, Response

from waypoint.errors import WaypointError
from waypoint.observability.logging import get_logger
from waypoint.observability.metrics import MetricsPipeline
from waypoint.observability.middleware import TracingMiddleware
from waypoint.observability.tracing import Instrumentation

logger = get_logger(__name__)

ResourceHook = Callable[[FastAPI, AsyncExitStack], Awaitable[None]]


def create_service_app(
    title: str,
    router: APIRouter,
    *,
    instrumentation: Instrumentation | None = None,
    metrics: MetricsPipeline | None = None,
    acquire: ResourceHook | None = None,
) -> FastAPI:
    """Create and configure a service application.

    Args:
        title: Service name, used in logs and the OpenAPI title
        router: Routes of the service
        instrumentation: Tracing handles; enables the tracing middleware
        metrics: Metrics pipeline of the service
        acquire: Hook acquiring service resources into the lifespan exit
            stack (clients, background tasks)

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            # Telemetry is acquired first so it is flushed last
            if metrics is not None:
                stack.callback(metrics.shutdown)
            if instrumentation is not None:
                stack.callback(instrumentation.shutdown)
            if acquire is not None:
                await acquire(app, stack)

            logger.info("service_started", service=title)
            yield
            logger.info("service_stopping", service=title)

        logger.info("service_stopped", service=title)

    app = FastAPI(title=title, lifespan=lifespan, docs_url=None, redoc_url=None)
    app.state.instrumentation = instrumentation
    app.state.metrics = metrics

    if instrumentation is not None:
        app.add_middleware(TracingMiddleware, instrumentation=instrumentation)

    _register_exception_handlers(app)
    app.include_router(router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(WaypointError)
    async def waypoint_error_handler(request: Request, exc: WaypointError) -> Response:
        """Answer with the error's status code and an empty body."""
        logger.warning(
            "request_failed",
            error=exc.message,
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return Response(status_code=exc.status_code)
