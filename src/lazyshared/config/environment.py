"""
Environment Configuration Management Module

Centralised access to lazyshared configuration. Values are resolved from, in
order of precedence:

- the settings file (settings.yaml)
- environment variables (including those loaded from .env files)
- built-in defaults (DEFAULT_ENV)
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from lazyshared.config.settings import (
    SETTINGS_FILE,
    get_system_file_path,
    get_value,
    load_settings,
)

DEFAULT_ENV = {
    "ENV": "development",
    "LOG_LEVEL": "INFO",
    "DEBUG": None,
    "FAILURE_POLICY": "retry",
    "DEMO_WORKERS": "5",
}


def load_dotenv_files():
    """Load environment variables from .env files based on current environment."""
    from dotenv import load_dotenv

    current_file = Path(__file__)
    project_root = current_file.parent.parent.parent.parent

    env_name = os.environ.get("ENV", "development")

    # Later files only fill in what earlier ones left unset
    env_files = [
        project_root / ".env",
        project_root / f".env.{env_name}",
        project_root / f".env.{env_name}.local",
    ]

    for env_file in env_files:
        if env_file.exists():
            load_dotenv(env_file, override=False)


class Environment(object):
    """
    Manages configuration values and provides defaults and type conversions.

    Settings are loaded lazily on first access and cached on the class.
    Tests can inject a settings dict with `set_settings` and drop it again
    with `clear_settings`.
    """

    settings: Optional[Dict[str, Any]] = None

    @classmethod
    def load_settings(cls):
        load_dotenv_files()
        cls.settings = load_settings()

    @classmethod
    def get_settings(cls) -> Dict[str, Any]:
        if cls.settings is None:
            cls.load_settings()
        assert cls.settings is not None
        return cls.settings

    @classmethod
    def set_settings(cls, settings: Dict[str, Any]):
        cls.settings = dict(settings)

    @classmethod
    def clear_settings(cls):
        cls.settings = None

    @classmethod
    def get(cls, key: str, default: Any = None):
        return get_value(key, cls.get_settings(), DEFAULT_ENV, default)

    @classmethod
    def has_settings(cls):
        return get_system_file_path(SETTINGS_FILE).exists()

    @classmethod
    def get_env(cls):
        return cls.get("ENV")

    @classmethod
    def is_debug(cls) -> bool:
        """
        Is debug flag on?
        """
        debug = cls.get("DEBUG")
        return bool(debug) and str(debug).lower() not in ("0", "false", "no", "off")

    @classmethod
    def get_log_level(cls) -> str:
        """Return desired log level string.

        Priority:
        1) LOG_LEVEL env
        2) If DEBUG env is truthy, return "DEBUG"
        3) LAZYSHARED_LOG_LEVEL env (default "INFO")

        Only the process environment is consulted so that loggers can be
        created before the settings file is read.
        """
        level = os.getenv("LOG_LEVEL")
        if level:
            return str(level).upper()
        debug_env = os.getenv("DEBUG")
        if debug_env and debug_env.lower() not in ("0", "false", "no", "off", ""):
            return "DEBUG"
        return os.getenv("LAZYSHARED_LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_failure_policy(cls) -> str:
        """Return the configured failure policy name, lower-cased."""
        return str(cls.get("FAILURE_POLICY")).strip().lower()

    @classmethod
    def get_demo_workers(cls) -> int:
        value = cls.get("DEMO_WORKERS")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"DEMO_WORKERS must be an integer, got {value!r}") from e
