"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]
SpanExporterKind = Literal["console", "otlp", "none"]
PropagationFormat = Literal["b3multi", "b3single"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default="json", description="Output format")
    include_trace_id: bool = Field(
        default=True,
        description="Include trace and span IDs of the active span in logs",
    )


class TracingConfig(BaseModel):
    """Distributed tracing configuration."""

    enabled: bool = Field(default=True, description="Enable tracing")
    exporter: SpanExporterKind = Field(
        default="otlp",
        description="Span exporter: stdout, trace collector, or none",
    )
    otlp_endpoint: str = Field(
        default="localhost:4317",
        description="OTLP gRPC endpoint of the trace collector agent",
    )
    otlp_insecure: bool = Field(
        default=True,
        description="Use a plaintext connection to the collector",
    )
    propagation: PropagationFormat = Field(
        default="b3multi",
        description="Header encoding used to propagate trace context",
    )


class MetricsConfig(BaseModel):
    """Metrics configuration."""

    path: str = Field(default="/metrics", description="Metrics scrape endpoint path")
    interval_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Interval between counter increments",
    )
    max_increment: int = Field(
        default=10,
        ge=1,
        description="Exclusive upper bound of each random increment",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the increment generator (random if unset)",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )
    tracing: TracingConfig = Field(
        default_factory=TracingConfig,
        description="Tracing settings",
    )
    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig,
        description="Metrics settings",
    )
