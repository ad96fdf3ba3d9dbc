import logging
import os

from lazyshared.config import logging_config
from lazyshared.config.logging_config import (
    _LevelColorFormatter,
    _resolve_format,
    configure_logging,
    get_logger,
    set_log_level,
)


def test_get_logger_uses_configured_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setattr(logging_config, "_configured_level", None)

    logger = get_logger("lazyshared.test")

    assert logger.name == "lazyshared.test"
    assert logger.level == logging.WARNING


def test_configure_logging_is_idempotent(monkeypatch):
    monkeypatch.setattr(logging_config, "_configured_level", None)

    assert configure_logging(level="debug") == "DEBUG"
    assert configure_logging(level="DEBUG") == "DEBUG"
    assert logging.getLogger().level == logging.DEBUG


def test_set_log_level_updates_existing_loggers(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setattr(logging_config, "_configured_level", None)
    logger = get_logger("lazyshared.test.switch")
    assert logger.level == logging.INFO

    assert set_log_level("debug") == "DEBUG"

    assert logger.level == logging.DEBUG
    assert os.environ["LOG_LEVEL"] == "DEBUG"
    assert get_logger("lazyshared.test.later").level == logging.DEBUG


def test_resolve_format(monkeypatch):
    monkeypatch.delenv("LAZYSHARED_LOG_FORMAT", raising=False)
    assert _resolve_format("%(message)s", use_color=True) == "%(message)s"
    assert "%(threadName)s" in _resolve_format(None, use_color=False)
    assert "%(levelname_color)s" in _resolve_format(None, use_color=True)

    monkeypatch.setenv("LAZYSHARED_LOG_FORMAT", "%(name)s")
    assert _resolve_format(None, use_color=True) == "%(name)s"


def test_color_formatter_without_color():
    formatter = _LevelColorFormatter(fmt="%(levelname_color)s %(message)s", datefmt="%H", use_color=False)
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

    assert formatter.format(record) == "INFO hello"


def test_color_formatter_with_color():
    formatter = _LevelColorFormatter(fmt="%(levelname_color)s", datefmt="%H", use_color=True)
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)

    assert formatter.format(record) == "\x1b[31mERROR\x1b[0m"
