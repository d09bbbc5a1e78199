"""Tests for b-service."""

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from waypoint.config.models.services import WorkerServiceConfig
from waypoint.observability.tracing import Instrumentation
from waypoint.services.b_service import create_app


@pytest.fixture
def client(instrumentation: Instrumentation) -> TestClient:
    return TestClient(create_app(instrumentation, WorkerServiceConfig(work_seconds=0)))


class TestBService:
    """Tests for GET / on b-service."""

    def test_responds_with_service_name(self, client: TestClient) -> None:
        """Answers 200 with a fixed body."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "demo3-b-service"

    def test_span_tree(self, client: TestClient, span_exporter: InMemorySpanExporter) -> None:
        """http.server -> handler -> foo."""
        client.get("/")

        spans = {span.name: span for span in span_exporter.get_finished_spans()}
        assert spans["handler"].parent.span_id == spans["http.server"].context.span_id
        assert spans["foo"].parent.span_id == spans["handler"].context.span_id

    def test_joins_propagated_trace(
        self, client: TestClient, span_exporter: InMemorySpanExporter
    ) -> None:
        """Spans continue the trace received in B3 headers."""
        trace_id = "4bf92f3577b34da6a3ce929d0e0e4736"

        client.get(
            "/",
            headers={
                "X-B3-TraceId": trace_id,
                "X-B3-SpanId": "00f067aa0ba902b7",
                "X-B3-Sampled": "1",
            },
        )

        assert {
            format(span.context.trace_id, "032x") for span in span_exporter.get_finished_spans()
        } == {trace_id}
