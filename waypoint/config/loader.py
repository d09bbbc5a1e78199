"""Layered TOML configuration for the demo services.

A config directory holds ``default.toml`` plus optional per-environment
overlays selected by WAYPOINT_ENV. Processes started outside a checkout (no
config directory anywhere up the tree) run on model defaults.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "WAYPOINT_CONFIG_DIR"
ENVIRONMENT_ENV = "WAYPOINT_ENV"
DEFAULT_ENVIRONMENT = "development"

# Enough to reach the repo root from any package or tests directory
_SEARCH_DEPTH = 5


def get_config_dir() -> Path | None:
    """Locate the config directory.

    An explicit WAYPOINT_CONFIG_DIR must exist. Otherwise the nearest
    ``config/`` directory at or above the working directory is used.

    Raises:
        FileNotFoundError: If WAYPOINT_CONFIG_DIR points nowhere
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    directory = Path.cwd()
    for _ in range(_SEARCH_DEPTH):
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate
        directory = directory.parent

    return None


def get_environment() -> str:
    """Name of the environment overlay to apply."""
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Tables merge key by key; any other value in ``override`` wins outright.
    """
    merged = base.copy()

    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value

    return merged


def load_config() -> dict[str, Any]:
    """Read ``default.toml`` and overlay ``{WAYPOINT_ENV}.toml`` when present.

    Returns:
        Raw configuration tables, empty without a config directory

    Raises:
        FileNotFoundError: If the config directory has no default.toml
    """
    config_dir = get_config_dir()
    if config_dir is None:
        return {}

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_ENV}."
        )

    config = load_toml(default_path)

    overlay_path = config_dir / f"{get_environment()}.toml"
    if overlay_path.exists():
        config = deep_merge(config, load_toml(overlay_path))

    return config
