"""Tests for configuration settings."""

from decimal import Decimal

import pytest
from pydantic import ValidationError


def test_settings_has_defaults():
    """Test that settings has sensible defaults."""
    from installment_planner.config.settings import get_settings

    settings = get_settings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "console"
    assert settings.max_installments == 60
    assert settings.remainder_policy == "none"
    assert settings.currency_quantum == Decimal("0.01")
    assert settings.installment_description_template == "{description} ({index}/{count})"


def test_settings_loads_from_env(monkeypatch):
    """Test that settings loads from environment variables."""
    from installment_planner.config.settings import get_settings

    monkeypatch.setenv("INSTALLMENT_MAX_COUNT", "24")
    monkeypatch.setenv("INSTALLMENT_REMAINDER_POLICY", "LAST")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.max_installments == 24
    assert settings.remainder_policy == "last"
    assert settings.log_level == "DEBUG"


def test_settings_rejects_invalid_values(monkeypatch):
    """Test that out-of-range settings fail validation."""
    from installment_planner.config.settings import Settings

    monkeypatch.setenv("INSTALLMENT_MAX_COUNT", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_settings_are_cached():
    """Test that get_settings returns cached instance."""
    from installment_planner.config.settings import get_settings

    get_settings.cache_clear()

    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2
