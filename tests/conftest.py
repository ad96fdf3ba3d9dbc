import pytest

from lazyshared.config.environment import Environment


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep user settings files and shell variables out of the tests."""
    for key in ("LOG_LEVEL", "DEBUG", "FAILURE_POLICY", "DEMO_WORKERS", "ENV"):
        monkeypatch.delenv(key, raising=False)
    Environment.set_settings({})
    yield
    Environment.clear_settings()
