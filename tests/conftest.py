"""Shared test fixtures for the Waypoint test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from waypoint.config.models.services import ResourceConfig
from waypoint.observability.tracing import Instrumentation, build_resource


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "[resource]\\nversion = 'test'",
                "development.toml": "[resource]\\nenvironment = 'dev'",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"WAYPOINT_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache and TOML source before and after each test."""
    from waypoint.config import get_settings
    from waypoint.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory span exporter for assertions on finished spans."""
    return InMemorySpanExporter()


def make_instrumentation(
    exporter: InMemorySpanExporter,
    service_name: str = "test-service",
) -> Instrumentation:
    """Build an Instrumentation that exports synchronously to memory."""
    provider = TracerProvider(resource=build_resource(service_name, ResourceConfig()))
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return Instrumentation(provider, f"tests.{service_name}")


@pytest.fixture
def instrumentation(span_exporter: InMemorySpanExporter) -> Instrumentation:
    """Instrumentation recording into span_exporter."""
    return make_instrumentation(span_exporter)


@pytest.fixture
def instrumentation_factory() -> Callable[[InMemorySpanExporter, str], Instrumentation]:
    """Factory for extra Instrumentation objects (one per simulated service)."""
    return make_instrumentation
