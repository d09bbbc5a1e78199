"""Tracing middleware for inbound HTTP requests.

Extracts propagated trace context from request headers, opens a SERVER span
that stays current for the rest of the request and binds request details to
structlog contextvars.
"""

from collections.abc import Callable

from fastapi import Request, Response
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from structlog.contextvars import bound_contextvars

from waypoint.observability.logging import get_logger
from waypoint.observability.tracing import Instrumentation

logger = get_logger(__name__)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware that continues the caller's trace for each request.

    Requests without propagation headers start a new trace.
    """

    def __init__(
        self,
        app: ASGIApp,
        instrumentation: Instrumentation,
        span_name: str = "http.server",
    ) -> None:
        super().__init__(app)
        self._instrumentation = instrumentation
        self._span_name = span_name

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request inside a server span."""
        parent = self._instrumentation.extract(request.headers)

        with self._instrumentation.span(
            self._span_name,
            kind=SpanKind.SERVER,
            attributes={
                "http.method": request.method,
                "http.target": request.url.path,
            },
            context=parent,
        ) as span, bound_contextvars(method=request.method, path=request.url.path):
            logger.info("request_started")

            response = await call_next(request)  # type: ignore[misc]

            span.set_attribute("http.status_code", response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))

            logger.info("request_completed", status_code=response.status_code)

            return response  # type: ignore[no-any-return]
