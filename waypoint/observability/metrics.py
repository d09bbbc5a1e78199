"""OpenTelemetry metrics with Prometheus exposition.

The meter provider aggregates measurements; a Prometheus metric reader
collects them on every scrape and exposes them through a prometheus_client
registry.
"""

import asyncio
import random

from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.metrics import Counter, Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest

from waypoint.config.models.observability import MetricsConfig
from waypoint.config.models.services import ResourceConfig
from waypoint.errors import InstrumentationError
from waypoint.observability.logging import get_logger
from waypoint.observability.tracing import build_resource

logger = get_logger(__name__)

COUNTER_NAME = "demo5.counter"


class MetricsPipeline:
    """Meter provider and the reader exposing its aggregated state.

    PrometheusMetricReader always registers with the process-wide
    prometheus_client REGISTRY, so a process serves one Prometheus-backed
    pipeline; a second one would show up in the first one's scrape.

    Attributes:
        provider: SDK meter provider
        meter: Meter used to create instruments
        registry: prometheus_client registry served on scrapes
    """

    def __init__(
        self,
        provider: MeterProvider,
        instrumentation_name: str,
        registry: CollectorRegistry = REGISTRY,
    ) -> None:
        self.provider = provider
        self.meter: Meter = provider.get_meter(instrumentation_name)
        self.registry = registry

    @classmethod
    def create(
        cls,
        service_name: str,
        instrumentation_name: str,
        resource: ResourceConfig,
        reader: MetricReader | None = None,
    ) -> "MetricsPipeline":
        """Build a metrics pipeline for a service.

        Without an explicit reader a PrometheusMetricReader is installed
        and scrapes render the default prometheus_client registry. With any
        other reader nothing is exposed to Prometheus and scrapes render a
        private, empty registry.

        Raises:
            InstrumentationError: If the pipeline cannot be constructed
        """
        try:
            metric_reader = reader or PrometheusMetricReader()
            registry = REGISTRY if reader is None else CollectorRegistry()
            provider = MeterProvider(
                metric_readers=[metric_reader],
                resource=build_resource(service_name, resource),
            )
        except Exception as e:
            raise InstrumentationError(f"Failed to create metrics pipeline: {e}") from e

        logger.info(
            "metrics_configured",
            service_name=service_name,
            reader=type(metric_reader).__name__,
        )
        return cls(provider, instrumentation_name, registry)

    def scrape(self) -> tuple[bytes, str]:
        """Render the current aggregated state in Prometheus text format.

        Returns:
            Tuple of (body, content type)
        """
        return generate_latest(self.registry), CONTENT_TYPE_LATEST

    def shutdown(self) -> None:
        """Collect a final time and shut the provider down.

        Failures are logged and never raised so they cannot block exit.
        """
        try:
            self.provider.shutdown()
        except Exception as e:
            logger.error(
                "meter_provider_shutdown_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
        else:
            logger.info("meter_provider_shutdown")


class CounterTicker:
    """Adds a random increment to a counter on a fixed interval.

    A single generator is used for the ticker's lifetime; pass a seeded
    random.Random for reproducible sequences.
    """

    def __init__(
        self,
        counter: Counter,
        interval_seconds: float,
        max_increment: int = 10,
        rng: random.Random | None = None,
    ) -> None:
        self._counter = counter
        self._interval = interval_seconds
        self._max_increment = max_increment
        self._rng = rng or random.Random()
        self.ticks = 0
        self.total = 0

    @classmethod
    def from_config(cls, meter: Meter, config: MetricsConfig) -> "CounterTicker":
        """Create the counter instrument and a ticker driving it."""
        counter = meter.create_counter(
            COUNTER_NAME,
            description="Randomly incremented demonstration counter",
        )
        return cls(
            counter,
            interval_seconds=config.interval_seconds,
            max_increment=config.max_increment,
            rng=random.Random(config.seed),
        )

    def tick(self) -> int:
        """Draw an increment in [0, max_increment) and add it to the counter."""
        increment = self._rng.randrange(self._max_increment)
        self._counter.add(increment)
        self.ticks += 1
        self.total += increment
        return increment

    async def run(self, stop_event: asyncio.Event) -> None:
        """Tick every interval until stop_event is set.

        The first tick happens one interval after start.
        """
        logger.info("counter_ticker_started", interval_seconds=self._interval)
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except TimeoutError:
                increment = self.tick()
                logger.debug("counter_incremented", increment=increment, total=self.total)
        logger.info("counter_ticker_stopped", ticks=self.ticks, total=self.total)
