"""HTTP service and resource configuration models."""

from pydantic import BaseModel, Field


class ResourceConfig(BaseModel):
    """Static resource attributes attached to every span and metric."""

    version: str = Field(default="1.0.0", description="service.version attribute")
    environment: str = Field(
        default="production",
        description="deployment.environment attribute",
    )
    instance_id: int = Field(default=1234, description="Numeric ID attribute")


class ListenerConfig(BaseModel):
    """Address an HTTP service listens on."""

    host: str = Field(default="localhost", description="Bind host")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")


class WorkerServiceConfig(ListenerConfig):
    """A service whose handler simulates some work."""

    work_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Simulated work duration per request",
    )


class FrontServiceConfig(ListenerConfig):
    """The entry service that calls a downstream service."""

    port: int = Field(default=3000, ge=1, le=65535, description="Bind port")
    downstream_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the downstream service",
    )
    downstream_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Timeout of the single downstream attempt",
    )


class ServicesConfig(BaseModel):
    """Listener configuration for every demo service."""

    a_service: FrontServiceConfig = Field(default_factory=FrontServiceConfig)
    b_service: WorkerServiceConfig = Field(
        default_factory=lambda: WorkerServiceConfig(port=3001)
    )
    correlated: WorkerServiceConfig = Field(
        default_factory=lambda: WorkerServiceConfig(port=4000)
    )
    counter: ListenerConfig = Field(default_factory=lambda: ListenerConfig(port=6000))
    hierarchy_work_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Simulated work of the span hierarchy demos",
    )
