"""Process startup helpers shared by every demo entrypoint.

Example usage:

    from waypoint.bootstrap import configure_logging, init_or_exit

    settings = get_settings()
    configure_logging(settings)
    instrumentation = init_or_exit("tracing", lambda: Instrumentation.create(...))
"""

import sys
from collections.abc import Callable
from typing import TypeVar

from waypoint.config.settings import Settings
from waypoint.errors import WaypointError
from waypoint.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)

T = TypeVar("T")


def configure_logging(settings: Settings) -> None:
    """Apply the logging section of the settings."""
    logging_config = settings.observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        include_trace_id=logging_config.include_trace_id,
    )


def init_or_exit(name: str, factory: Callable[[], T]) -> T:
    """Run an initialization step, terminating the process if it fails.

    Args:
        name: Step name used in logs
        factory: Callable producing the initialized object

    Returns:
        Whatever factory returned
    """
    try:
        return factory()
    except WaypointError as e:
        logger.critical(
            "initialization_failed",
            step=name,
            error=e.message,
            error_type=type(e).__name__,
        )
        sys.exit(1)
