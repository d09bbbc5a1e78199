"""Counter metric service.

A background ticker adds a random increment in [0, 10) to demo5.counter
every interval; GET /metrics exposes the aggregated state for Prometheus.

Usage:
    waypoint-counter-service
"""

import asyncio
from contextlib import AsyncExitStack

from fastapi import APIRouter, FastAPI, Response

from waypoint.api.app import create_service_app
from waypoint.api.dependencies import MetricsDep
from waypoint.api.server import serve
from waypoint.bootstrap import configure_logging, init_or_exit
from waypoint.config import get_settings
from waypoint.config.models.observability import MetricsConfig
from waypoint.observability.logging import get_logger
from waypoint.observability.metrics import CounterTicker, MetricsPipeline

logger = get_logger(__name__)

SERVICE_NAME = "demo5-service"
INSTRUMENTATION_NAME = "waypoint.services.counter"


def create_app(
    metrics: MetricsPipeline,
    config: MetricsConfig,
    ticker: CounterTicker | None = None,
) -> FastAPI:
    """Create the counter application.

    Args:
        metrics: Metrics pipeline owning the counter
        config: Scrape path and ticker settings
        ticker: Ticker to run instead of one built from config
    """
    ticker = ticker or CounterTicker.from_config(metrics.meter, config)
    router = APIRouter()

    @router.get(config.path)
    async def scrape(pipeline: MetricsDep) -> Response:
        body, content_type = pipeline.scrape()
        return Response(content=body, media_type=content_type)

    async def acquire(app: FastAPI, stack: AsyncExitStack) -> None:  # noqa: ARG001
        stop_event = asyncio.Event()
        task = asyncio.create_task(ticker.run(stop_event))

        async def stop_ticker() -> None:
            stop_event.set()
            await task

        stack.push_async_callback(stop_ticker)

    return create_service_app(SERVICE_NAME, router, metrics=metrics, acquire=acquire)


def main() -> None:
    """CLI entrypoint for the counter service."""
    settings = get_settings()
    configure_logging(settings)

    metrics = init_or_exit(
        "metrics",
        lambda: MetricsPipeline.create(
            SERVICE_NAME,
            INSTRUMENTATION_NAME,
            settings.resource,
        ),
    )

    serve(
        create_app(metrics, settings.observability.metrics),
        settings.services.counter,
    )
