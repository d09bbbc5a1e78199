"""Trace-propagating HTTP client."""

from waypoint.client.downstream import DownstreamClient

__all__ = ["DownstreamClient"]
