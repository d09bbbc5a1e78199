"""HTTP client that propagates trace context to downstream services.

Usage:
    async with DownstreamClient("http://localhost:3001", instrumentation) as client:
        response = await client.get("/")
"""

import httpx
from opentelemetry.trace import SpanKind

from waypoint.errors import DownstreamError
from waypoint.observability.logging import get_logger
from waypoint.observability.tracing import Instrumentation

logger = get_logger(__name__)


class DownstreamClient:
    """Async client whose requests carry the caller's trace context.

    Every request runs inside a CLIENT span whose context is injected into
    the outbound headers. Each call is attempted exactly once.

    Attributes:
        base_url: Base URL of the downstream service
    """

    def __init__(
        self,
        base_url: str,
        instrumentation: Instrumentation,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the downstream service
            instrumentation: Tracing handles used for client spans and injection
            timeout: Request timeout in seconds
            transport: Custom httpx transport (in-process apps, mocks)
        """
        self.base_url = base_url.rstrip("/")
        self._instrumentation = instrumentation
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "DownstreamClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get(self, path: str = "/") -> httpx.Response:
        """Issue a GET request to the downstream service.

        Args:
            path: Request path relative to base_url

        Returns:
            The 2xx response

        Raises:
            DownstreamError: On network failure or a non-2xx status
        """
        url = f"{self.base_url}{path}"

        with self._instrumentation.span(
            "HTTP GET",
            kind=SpanKind.CLIENT,
            attributes={"http.method": "GET", "http.url": url},
        ) as span:
            headers: dict[str, str] = {}
            self._instrumentation.inject(headers)

            try:
                response = await self._client.get(path, headers=headers)
            except httpx.HTTPError as e:
                raise DownstreamError(
                    f"Request to {url} failed: {e}",
                    url=url,
                ) from e

            span.set_attribute("http.status_code", response.status_code)

            if not response.is_success:
                raise DownstreamError(
                    f"Request to {url} returned {response.status_code}",
                    url=url,
                    upstream_status=response.status_code,
                )

            logger.debug("downstream_call_succeeded", url=url, status_code=response.status_code)
            return response
