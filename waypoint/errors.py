"""Exception hierarchy for Waypoint.

All errors inherit from WaypointError, which carries the HTTP status code
the API exception handler responds with when the error escapes a handler.
"""


class WaypointError(Exception):
    """Base exception for all Waypoint errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(WaypointError):
    """Raised when settings describe an unsupported setup."""


class InstrumentationError(WaypointError):
    """Raised when an exporter or provider cannot be constructed."""


class DownstreamError(WaypointError):
    """Raised when a downstream call fails or answers with a non-2xx status.

    Attributes:
        url: Requested URL
        upstream_status: Status code the downstream answered with, if any
    """

    def __init__(
        self,
        message: str,
        url: str,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.upstream_status = upstream_status
