"""Dependency injection for service routes.

Handles live on app.state, set once when the app is created (or, for
resources with a lifetime, when its lifespan starts), and are read per
request through these dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from waypoint.client.downstream import DownstreamClient
from waypoint.observability.metrics import MetricsPipeline
from waypoint.observability.tracing import Instrumentation


def get_instrumentation(request: Request) -> Instrumentation:
    """Get the tracing handles of the running service."""
    return request.app.state.instrumentation  # type: ignore[no-any-return]


def get_downstream(request: Request) -> DownstreamClient:
    """Get the downstream client opened by the app lifespan."""
    return request.app.state.downstream  # type: ignore[no-any-return]


def get_metrics(request: Request) -> MetricsPipeline:
    """Get the metrics pipeline of the running service."""
    return request.app.state.metrics  # type: ignore[no-any-return]


InstrumentationDep = Annotated[Instrumentation, Depends(get_instrumentation)]
DownstreamDep = Annotated[DownstreamClient, Depends(get_downstream)]
MetricsDep = Annotated[MetricsPipeline, Depends(get_metrics)]
