"""Utility functions for reading and writing the settings file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from lazyshared.config.configuration import register_setting

# Constants
SETTINGS_FILE = "settings.yaml"
MISSING_MESSAGE = "Missing required setting: {}"
NOT_GIVEN = object()

register_setting(
    package_name="lazyshared",
    env_var="LOG_LEVEL",
    group="Logging",
    description="Log level for lazyshared loggers (DEBUG, INFO, WARNING, ERROR)",
    default="INFO",
    enum=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
)
register_setting(
    package_name="lazyshared",
    env_var="FAILURE_POLICY",
    group="Shared instances",
    description=(
        "What a shared instance does after its constructor raised. "
        "'retry' lets the next caller construct again, "
        "'poison' makes every later call fail with the original error."
    ),
    default="retry",
    enum=["retry", "poison"],
)
register_setting(
    package_name="lazyshared",
    env_var="DEMO_WORKERS",
    group="Demo",
    description="Number of threads started by `lazyshared demo`",
    default="5",
)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def get_system_file_path(filename: str) -> Path:
    """Return the path to the configuration file for the current OS."""
    import platform

    os_name = platform.system()
    if os_name in {"Linux", "Darwin"}:
        return Path.home() / ".config" / "lazyshared" / filename
    elif os_name == "Windows":
        appdata = os.getenv("APPDATA")
        if appdata is not None:
            return Path(appdata) / "lazyshared" / filename
        return Path("data") / filename
    return Path("data") / filename


# ---------------------------------------------------------------------------
# Settings helpers
# ---------------------------------------------------------------------------


def load_settings(path: Path | None = None) -> Dict[str, Any]:
    """Load settings from the YAML settings file."""
    settings_file = path or get_system_file_path(SETTINGS_FILE)

    settings: Dict[str, Any] = {}
    if settings_file.exists():
        with open(settings_file, "r") as f:
            settings = yaml.safe_load(f) or {}

    return settings


def save_settings(settings: Dict[str, Any], path: Path | None = None) -> None:
    """Save settings to the YAML settings file."""
    settings_file = path or get_system_file_path(SETTINGS_FILE)

    settings_file.parent.mkdir(parents=True, exist_ok=True)

    with open(settings_file, "w") as f:
        yaml.dump(settings, f)


def get_value(
    key: str,
    settings: Dict[str, Any],
    default_env: Dict[str, Any],
    default: Any = NOT_GIVEN,
) -> Any:
    """Retrieve a configuration value from settings, environment or defaults."""
    value = settings.get(key)
    if value is None or str(value) == "":
        value = os.environ.get(key)

    if value is None:
        value = default_env.get(key, default)

    if value is not NOT_GIVEN:
        return value
    raise KeyError(MISSING_MESSAGE.format(key))
