"""Pytest configuration and fixtures."""

import pytest
import structlog

from installment_planner.config.settings import Settings, get_settings

_SETTINGS_ENV = (
    "LOG_LEVEL",
    "LOG_FORMAT",
    "INSTALLMENT_MAX_COUNT",
    "INSTALLMENT_REMAINDER_POLICY",
    "INSTALLMENT_CURRENCY_QUANTUM",
    "INSTALLMENT_DESCRIPTION_TEMPLATE",
    "SUBSCRIPTION_DESCRIPTION_TEMPLATE",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Start every test from default settings, ignoring the host environment."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", None)
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    yield
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings():
    """Default settings instance."""
    return get_settings()
