"""Configuration model exports.

    from waypoint.config.models import ObservabilityConfig, ServicesConfig
"""

from waypoint.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from waypoint.config.models.services import (
    FrontServiceConfig,
    ListenerConfig,
    ResourceConfig,
    ServicesConfig,
    WorkerServiceConfig,
)

__all__ = [
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "TracingConfig",
    # Services
    "FrontServiceConfig",
    "ListenerConfig",
    "ResourceConfig",
    "ServicesConfig",
    "WorkerServiceConfig",
]
