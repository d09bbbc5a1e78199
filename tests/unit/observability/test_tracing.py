"""Tests for OpenTelemetry tracing."""

import pytest
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.b3 import B3MultiFormat, B3SingleFormat
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanKind, StatusCode, get_current_span

from waypoint.config.models.observability import TracingConfig
from waypoint.config.models.services import ResourceConfig
from waypoint.errors import ConfigurationError
from waypoint.observability.tracing import (
    Instrumentation,
    build_resource,
    create_propagator,
    create_span_exporter,
    get_current_trace_id,
    record_exception,
)


class TestBuildResource:
    """Tests for resource attributes."""

    def test_contains_static_attributes(self) -> None:
        """Should carry service name, version, environment and ID."""
        resource = build_resource(
            "a-service",
            ResourceConfig(version="2.0.0", environment="staging", instance_id=7),
        )
        attributes = resource.attributes

        assert attributes["service.name"] == "a-service"
        assert attributes["service.version"] == "2.0.0"
        assert attributes["deployment.environment"] == "staging"
        assert attributes["ID"] == 7


class TestCreateSpanExporter:
    """Tests for exporter selection."""

    def test_console_exporter(self) -> None:
        """Should write spans to stdout for the console kind."""
        exporter = create_span_exporter(TracingConfig(exporter="console"))
        assert isinstance(exporter, ConsoleSpanExporter)

    def test_otlp_exporter(self) -> None:
        """Should send spans to the collector for the otlp kind."""
        exporter = create_span_exporter(
            TracingConfig(exporter="otlp", otlp_endpoint="localhost:4317")
        )
        assert isinstance(exporter, OTLPSpanExporter)
        exporter.shutdown()

    def test_none_exporter(self) -> None:
        """Should return None when spans are not exported."""
        assert create_span_exporter(TracingConfig(exporter="none")) is None

    def test_disabled_tracing(self) -> None:
        """Should return None when tracing is disabled."""
        assert create_span_exporter(TracingConfig(enabled=False, exporter="console")) is None


class TestCreatePropagator:
    """Tests for propagator selection."""

    def test_multi_header(self) -> None:
        """Should default to B3 multi-header encoding."""
        assert isinstance(create_propagator(), B3MultiFormat)

    def test_single_header(self) -> None:
        """Should support B3 single-header encoding."""
        assert isinstance(create_propagator("b3single"), B3SingleFormat)

    def test_unknown_format_raises(self) -> None:
        """Should reject unknown formats."""
        with pytest.raises(ConfigurationError):
            create_propagator("w3c")  # type: ignore[arg-type]


class TestInstrumentationCreate:
    """Tests for Instrumentation.create."""

    def test_exports_through_batch_processor(self) -> None:
        """Should export ended spans once the provider shuts down."""
        exporter = InMemorySpanExporter()
        instrumentation = Instrumentation.create(
            "demo1-service",
            "tests.tracing",
            TracingConfig(),
            ResourceConfig(),
            exporter=exporter,
        )

        with instrumentation.span("main"):
            pass
        instrumentation.shutdown()

        spans = exporter.get_finished_spans()
        assert [span.name for span in spans] == ["main"]
        assert spans[0].resource.attributes["service.name"] == "demo1-service"

    def test_without_exporter(self) -> None:
        """Should still record spans when nothing is exported."""
        instrumentation = Instrumentation.create(
            "svc", "tests.tracing", TracingConfig(exporter="none"), ResourceConfig()
        )

        with instrumentation.span("work") as span:
            assert span.is_recording()
        instrumentation.shutdown()


class TestSpans:
    """Tests for span creation."""

    def test_span_is_current(self, instrumentation: Instrumentation) -> None:
        """Should make the span current inside the block."""
        with instrumentation.span("work") as span:
            assert get_current_span() is span

    def test_span_kind_and_attributes(
        self, instrumentation: Instrumentation, span_exporter: InMemorySpanExporter
    ) -> None:
        """Should set kind and initial attributes."""
        with instrumentation.span("call", kind=SpanKind.CLIENT, attributes={"k": "v"}):
            pass

        span = span_exporter.get_finished_spans()[0]
        assert span.kind == SpanKind.CLIENT
        assert span.attributes["k"] == "v"

    def test_nested_spans_parent_child_relationship(
        self, instrumentation: Instrumentation, span_exporter: InMemorySpanExporter
    ) -> None:
        """Should create parent-child relationship."""
        with instrumentation.span("main"):
            with instrumentation.span("foo"):
                pass

        foo, main = span_exporter.get_finished_spans()
        assert foo.context.trace_id == main.context.trace_id
        assert foo.parent.span_id == main.context.span_id
        assert main.parent is None

    def test_exception_closes_span(
        self, instrumentation: Instrumentation, span_exporter: InMemorySpanExporter
    ) -> None:
        """Should end the span and mark it failed when the block raises."""
        with pytest.raises(RuntimeError):
            with instrumentation.span("failing"):
                raise RuntimeError("boom")

        span = span_exporter.get_finished_spans()[0]
        assert span.status.status_code == StatusCode.ERROR


class TestPropagation:
    """Tests for B3 header propagation."""

    def test_inject_writes_b3_headers(self, instrumentation: Instrumentation) -> None:
        """Should inject multi-header B3 context."""
        headers: dict[str, str] = {}

        with instrumentation.span("outbound") as span:
            instrumentation.inject(headers)
            trace_id = get_current_trace_id()
            span_id = format(span.get_span_context().span_id, "016x")

        lowered = {key.lower(): value for key, value in headers.items()}
        assert lowered["x-b3-traceid"] == trace_id
        assert lowered["x-b3-spanid"] == span_id
        assert lowered["x-b3-sampled"] == "1"

    def test_inject_outside_span_writes_nothing(
        self, instrumentation: Instrumentation
    ) -> None:
        """Should not inject headers without an active span."""
        headers: dict[str, str] = {}
        instrumentation.inject(headers)
        assert headers == {}

    def test_extracted_context_parents_new_span(
        self,
        instrumentation: Instrumentation,
        span_exporter: InMemorySpanExporter,
    ) -> None:
        """Should continue the trace described by inbound headers."""
        headers = {
            "x-b3-traceid": "0af7651916cd43dd8448eb211c80319c",
            "x-b3-spanid": "b7ad6b7169203331",
            "x-b3-sampled": "1",
        }

        with instrumentation.span("inbound", context=instrumentation.extract(headers)):
            pass

        span = span_exporter.get_finished_spans()[0]
        assert format(span.context.trace_id, "032x") == headers["x-b3-traceid"]
        assert format(span.parent.span_id, "016x") == headers["x-b3-spanid"]

    def test_no_headers_starts_new_root(
        self,
        instrumentation: Instrumentation,
        span_exporter: InMemorySpanExporter,
    ) -> None:
        """Should start a root span when nothing is propagated."""
        with instrumentation.span("inbound", context=instrumentation.extract({})):
            pass

        assert span_exporter.get_finished_spans()[0].parent is None


class TestCurrentTraceId:
    """Tests for current trace ID helper."""

    def test_inside_span(self, instrumentation: Instrumentation) -> None:
        """Should return the hex trace ID inside a span."""
        with instrumentation.span("work"):
            assert len(get_current_trace_id() or "") == 32

    def test_outside_span(self) -> None:
        """Should return None outside a span."""
        assert get_current_trace_id() is None


class TestRecordException:
    """Tests for record_exception."""

    def test_marks_span_failed(
        self, instrumentation: Instrumentation, span_exporter: InMemorySpanExporter
    ) -> None:
        """Should add an exception event and set error status."""
        with instrumentation.span("work") as span:
            record_exception(span, ValueError("bad"))

        finished = span_exporter.get_finished_spans()[0]
        assert finished.status.status_code == StatusCode.ERROR
        assert finished.events[0].name == "exception"


class TestShutdown:
    """Tests for provider shutdown."""

    def test_shutdown_errors_are_not_raised(
        self, instrumentation: Instrumentation, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should log and swallow provider shutdown failures."""

        def failing_shutdown() -> None:
            raise RuntimeError("export failed")

        monkeypatch.setattr(instrumentation.provider, "shutdown", failing_shutdown)

        instrumentation.shutdown()
