"""Unit tests for application configuration.

Tests the Settings class in agents_arena.core.config, ensuring simulation and
runner fields have the expected defaults.
"""
import pytest
from pydantic import ValidationError

from agents_arena.core.config import Settings, get_settings


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_market_defaults(self) -> None:
        """Test price process config fields have correct defaults."""
        settings = Settings()
        assert settings.base_price == 50000.0
        assert settings.drift == 0.0001
        assert settings.volatility == 0.02
        assert settings.jump_probability == 0.05
        assert settings.jump_std == 0.01
        assert settings.price_history_limit == 1000

    def test_arena_defaults(self) -> None:
        """Test arena config fields have correct defaults."""
        settings = Settings()
        assert settings.initial_balance == 3000.0
        assert settings.market_history_limit == 100
        assert settings.recent_trades_limit == 20

    def test_runner_defaults(self) -> None:
        """Test runner config fields have correct defaults."""
        settings = Settings()
        assert settings.tick_interval_seconds == 1.0
        assert settings.autosave_debounce_seconds == 5.0
        assert settings.module_key == "agents-arena"
        assert settings.random_seed is None

    def test_environment_from_test_env(self) -> None:
        """Test that conftest environment variables are honoured."""
        settings = Settings()
        assert settings.environment == "test"
        assert settings.app_name == "Agents Arena"


class TestSettingsOverrides:
    """Tests for environment overrides and validation."""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RANDOM_SEED", "1234")
        monkeypatch.setenv("TICK_INTERVAL_SECONDS", "0.5")

        settings = Settings()

        assert settings.random_seed == 1234
        assert settings.tick_interval_seconds == 0.5

    def test_invalid_jump_probability_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(jump_probability=1.5)

    def test_non_positive_base_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(base_price=0)


class TestGetSettings:
    """Tests for get_settings() function."""

    def test_get_settings_returns_settings_instance(self) -> None:
        """Test that get_settings() returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self) -> None:
        """Test that get_settings() returns the same cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
