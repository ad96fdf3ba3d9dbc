"""Process-wide logging setup. Records carry the thread name."""

import logging
import os
import sys
from typing import ClassVar, Optional

_PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
# Level coloured, timestamp gray, logger name cyan
_COLOR_FORMAT = (
    "\x1b[90m%(asctime)s\x1b[0m | %(levelname_color)s | %(threadName)s | \x1b[36m%(name)s\x1b[0m | %(message)s"
)
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_configured_level: str | int | None = None
_loggers: set[str] = set()


def _supports_color() -> bool:
    try:
        return sys.stdout.isatty() and os.getenv("NO_COLOR") is None
    except Exception:
        return False


class _LevelColorFormatter(logging.Formatter):
    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\x1b[37m",
        "INFO": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[41m",
    }

    RESET: ClassVar[str] = "\x1b[0m"

    def __init__(self, fmt: str, datefmt: str, use_color: bool) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = self.COLORS.get(levelname, "") if self.use_color else ""
        record.levelname_color = f"{color}{levelname}{self.RESET}" if color else levelname
        return super().format(record)


def _resolve_format(fmt: Optional[str], use_color: bool) -> str:
    if fmt is not None:
        return fmt
    env_fmt = os.getenv("LAZYSHARED_LOG_FORMAT")
    if env_fmt is not None:
        return env_fmt
    return _COLOR_FORMAT if use_color else _PLAIN_FORMAT


def configure_logging(
    level: Optional[str | int] = None,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    propagate_root: bool = False,
) -> str | int:
    """Configure root logging once per level with a consistent format.

    Environment overrides:
    - `LAZYSHARED_LOG_LEVEL` (see `Environment.get_log_level`)
    - `LAZYSHARED_LOG_FORMAT`
    - `LAZYSHARED_LOG_DATEFMT`

    Returns:
        The level that is now in effect.
    """
    from lazyshared.config.environment import Environment

    global _configured_level

    if isinstance(level, str):
        level = level.upper()
    if level is None:
        level = Environment.get_log_level()

    if _configured_level == level:
        return level
    _configured_level = level

    use_color = _supports_color()
    formatter = _LevelColorFormatter(
        fmt=_resolve_format(fmt, use_color),
        datefmt=datefmt or os.getenv("LAZYSHARED_LOG_DATEFMT", _DEFAULT_DATEFMT),
        use_color=use_color,
    )

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.StreamHandler())
    root.setLevel(level)
    # Plain stream handlers only; subclasses such as pytest's capture handlers are left alone
    for handler in root.handlers:
        if type(handler) is logging.StreamHandler:
            handler.setLevel(level)
            handler.setFormatter(formatter)
    root.propagate = propagate_root
    return level


def set_log_level(level: str | int) -> str | int:
    """Switch the root handlers and every logger from `get_logger` to `level`.

    The level is also exported as `LOG_LEVEL` so loggers created later agree.
    """
    level = configure_logging(level=level)
    os.environ["LOG_LEVEL"] = logging.getLevelName(level) if isinstance(level, int) else level
    for name in _loggers:
        logging.getLogger(name).setLevel(level)
    return level


def get_logger(name: str) -> logging.Logger:
    """Return a module-scoped logger."""
    level = configure_logging()
    logger = logging.getLogger(name)
    logger.setLevel(level)
    _loggers.add(name)
    return logger
