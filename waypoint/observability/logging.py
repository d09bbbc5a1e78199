"""Structured logging configuration using structlog.

Provides JSON logging for production and console logging for development,
with automatic context binding and log/trace correlation: log calls made
while a recording span is active carry its trace_id and span_id.
"""

import sys
from typing import Any, TextIO, cast

import structlog
from opentelemetry import trace
from opentelemetry.trace import (
    INVALID_SPAN_ID,
    INVALID_TRACE_ID,
    Span,
    format_span_id,
    format_trace_id,
)
from structlog.types import EventDict, WrappedLogger

TRACE_ID_KEY = "trace_id"
SPAN_ID_KEY = "span_id"


def span_log_fields(span: Span) -> dict[str, str]:
    """Return the log fields identifying a span.

    Fields are only produced for a recording span, and each identifier is
    only included when it is valid. Nothing is returned otherwise, so log
    lines never carry placeholder IDs.

    Args:
        span: Span to describe

    Returns:
        Mapping with trace_id and/or span_id as lowercase hex, possibly empty
    """
    if not span.is_recording():
        return {}

    context = span.get_span_context()
    fields: dict[str, str] = {}
    if context.trace_id != INVALID_TRACE_ID:
        fields[TRACE_ID_KEY] = format_trace_id(context.trace_id)
    if context.span_id != INVALID_SPAN_ID:
        fields[SPAN_ID_KEY] = format_span_id(context.span_id)
    return fields


def add_span_context(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Processor adding the current span's identifiers to the event.

    Values already bound on the logger (see bind_span) take precedence.
    """
    for key, value in span_log_fields(trace.get_current_span()).items():
        event_dict.setdefault(key, value)
    return event_dict


def bind_span(logger: Any, span: Span) -> Any:
    """Bind a specific span's identifiers to a logger.

    Args:
        logger: structlog logger
        span: Span whose IDs should appear on every line of the returned logger

    Returns:
        A new bound logger; the original logger is unchanged
    """
    return logger.bind(**span_log_fields(span))


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    include_trace_id: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - "json" for production, "console" for development
        include_trace_id: Whether to add the active span's IDs to log lines
        stream: Output stream (stderr when omitted)
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if include_trace_id:
        processors.append(add_span_context)

    if format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream is None))

    level_map = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    level_num = level_map.get(level.upper(), 20)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
