"""OpenTelemetry distributed tracing setup.

Builds an explicit Instrumentation object per process instead of installing
global providers: the tracer provider, the tracer handed to handlers and the
propagator used for B3 header encoding all travel together and are passed
to whoever needs them.
"""

import sys
from collections.abc import Generator, Mapping, MutableMapping
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.b3 import B3MultiFormat, B3SingleFormat
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_NAME,
    SERVICE_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from waypoint.config.models.observability import PropagationFormat, TracingConfig
from waypoint.config.models.services import ResourceConfig
from waypoint.errors import ConfigurationError, InstrumentationError
from waypoint.observability.logging import get_logger

logger = get_logger(__name__)

INSTANCE_ID_KEY = "ID"


def build_resource(service_name: str, config: ResourceConfig) -> Resource:
    """Create the resource describing this process.

    Args:
        service_name: service.name attribute
        config: Remaining static attributes

    Returns:
        Resource attached to every span and metric of the process
    """
    return Resource.create(
        {
            SERVICE_NAME: service_name,
            SERVICE_VERSION: config.version,
            DEPLOYMENT_ENVIRONMENT: config.environment,
            INSTANCE_ID_KEY: config.instance_id,
        }
    )


def create_propagator(propagation: PropagationFormat = "b3multi") -> TextMapPropagator:
    """Create the propagator used on inbound and outbound HTTP headers."""
    if propagation == "b3multi":
        return B3MultiFormat()
    if propagation == "b3single":
        return B3SingleFormat()
    raise ConfigurationError(f"Unsupported propagation format: {propagation}")


def create_span_exporter(config: TracingConfig) -> SpanExporter | None:
    """Create the span exporter selected in configuration.

    Returns:
        The exporter, or None when spans should not leave the process

    Raises:
        InstrumentationError: If the exporter cannot be constructed
    """
    if not config.enabled or config.exporter == "none":
        return None

    try:
        if config.exporter == "console":
            return ConsoleSpanExporter(out=sys.stdout)

        return OTLPSpanExporter(
            endpoint=config.otlp_endpoint,
            insecure=config.otlp_insecure,
        )
    except Exception as e:
        raise InstrumentationError(
            f"Failed to create {config.exporter} span exporter: {e}"
        ) from e


class Instrumentation:
    """Tracing handles for one process.

    Created once at startup and read-only afterwards, so it is safe to share
    between concurrently running request handlers.

    Attributes:
        provider: SDK tracer provider owning span processors and the resource
        tracer: Tracer used for all spans of the process
        propagator: Header propagator for inbound extraction and outbound injection
    """

    def __init__(
        self,
        provider: TracerProvider,
        instrumentation_name: str,
        propagator: TextMapPropagator | None = None,
    ) -> None:
        self.provider = provider
        self.tracer: Tracer = provider.get_tracer(instrumentation_name)
        self.propagator = propagator or B3MultiFormat()

    @classmethod
    def create(
        cls,
        service_name: str,
        instrumentation_name: str,
        tracing: TracingConfig,
        resource: ResourceConfig,
        exporter: SpanExporter | None = None,
    ) -> "Instrumentation":
        """Build the tracing pipeline for a service.

        Spans are batched before export.

        Args:
            service_name: service.name resource attribute
            instrumentation_name: Name of the tracer (the instrumenting module)
            tracing: Tracing configuration
            resource: Static resource attributes
            exporter: Exporter to use instead of the configured one

        Raises:
            InstrumentationError: If the pipeline cannot be constructed
        """
        span_exporter = exporter or create_span_exporter(tracing)

        provider = TracerProvider(resource=build_resource(service_name, resource))
        if span_exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(span_exporter))

        logger.info(
            "tracing_configured",
            service_name=service_name,
            exporter=type(span_exporter).__name__ if span_exporter else None,
            propagation=tracing.propagation,
        )

        return cls(
            provider,
            instrumentation_name,
            create_propagator(tracing.propagation),
        )

    def extract(self, headers: Mapping[str, str]) -> Context:
        """Extract propagated trace context from inbound headers.

        Returns an empty context (so spans become roots) when no
        propagation headers are present.
        """
        return self.propagator.extract(carrier=headers)

    def inject(
        self,
        headers: MutableMapping[str, str],
        context: Context | None = None,
    ) -> None:
        """Inject trace context into outbound headers.

        Args:
            headers: Headers to inject into
            context: Context to inject (current if not specified)
        """
        self.propagator.inject(carrier=headers, context=context)

    @contextmanager
    def span(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> Generator[Span, None, None]:
        """Start a span and make it current for the block.

        Args:
            name: Span name
            kind: Span kind (INTERNAL, SERVER, CLIENT, etc.)
            attributes: Initial span attributes
            context: Parent context (current if not specified)

        Yields:
            The created span, ended when the block exits
        """
        with self.tracer.start_as_current_span(
            name,
            kind=kind,
            attributes=attributes or {},
            context=context,
        ) as span:
            yield span

    def shutdown(self) -> None:
        """Flush pending spans and shut the provider down.

        Failures are logged and never raised so they cannot block exit.
        """
        try:
            self.provider.shutdown()
        except Exception as e:
            logger.error(
                "tracer_provider_shutdown_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
        else:
            logger.info("tracer_provider_shutdown")


def get_current_trace_id() -> str | None:
    """Get the current trace ID as a hex string.

    Returns:
        Trace ID or None if not in a trace
    """
    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        return format(span.get_span_context().trace_id, "032x")
    return None


def record_exception(span: Span, exception: Exception, escaped: bool = False) -> None:
    """Record an exception on a span and mark it failed.

    Args:
        span: Span to record on
        exception: The exception that occurred
        escaped: Whether the exception escaped the span scope
    """
    span.record_exception(exception, escaped=escaped)
    span.set_status(Status(StatusCode.ERROR, str(exception)))
