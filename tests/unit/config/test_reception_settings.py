# ============================================================================
# Tests for reception settings
# ============================================================================
"""Unit tests for Settings and ReceptionConfig."""

import pytest
from pydantic import ValidationError

from app.config.settings import Settings, get_settings, reset_settings
from app.domains.reception.application.config import ReceptionConfig


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self) -> None:
        """Should provide the documented limits."""
        settings = Settings()

        assert settings.RECEPTION_MAX_DAILY_RECEPTIONS_PER_DOCTOR == 50
        assert settings.RECEPTION_MAX_FUTURE_MONTHS == 3
        assert settings.RECEPTION_MAX_PAST_DAYS == 30
        assert settings.RECEPTION_WORKING_HOURS_START == 8
        assert settings.RECEPTION_WORKING_HOURS_END == 20
        assert settings.RECEPTION_WEEKEND_DAYS == [4, 5]
        assert settings.RECEPTION_VALIDATION_TIMEOUT is None

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should read overrides from the environment."""
        monkeypatch.setenv("RECEPTION_MAX_SERVICES", "4")
        monkeypatch.setenv("RECEPTION_VALIDATION_TIMEOUT", "2.5")

        settings = Settings()

        assert settings.RECEPTION_MAX_SERVICES == 4
        assert settings.RECEPTION_VALIDATION_TIMEOUT == 2.5

    def test_weekend_days_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should parse the closed weekdays from a JSON list."""
        monkeypatch.setenv("RECEPTION_WEEKEND_DAYS", "[5, 6]")

        settings = Settings()

        assert settings.RECEPTION_WEEKEND_DAYS == [5, 6]
        assert ReceptionConfig.from_settings(settings).weekend_days == (5, 6)

    def test_cached_instance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should cache settings until reset."""
        first = get_settings()
        monkeypatch.setenv("RECEPTION_MAX_SERVICES", "7")

        assert get_settings() is first
        reset_settings()
        assert get_settings().RECEPTION_MAX_SERVICES == 7

    @pytest.mark.parametrize(
        "overrides",
        [
            {"RECEPTION_WORKING_HOURS_START": 20, "RECEPTION_WORKING_HOURS_END": 8},
            {"RECEPTION_WORKING_HOURS_END": 25},
            {"RECEPTION_MAX_SERVICES": 0},
            {"RECEPTION_VALIDATION_TIMEOUT": 0},
            {"RECEPTION_WEEKEND_DAYS": [7]},
            {"LOG_FORMAT": "xml"},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        """Should reject impossible configurations."""
        with pytest.raises(ValidationError):
            Settings(**overrides)

    def test_is_development(self) -> None:
        """Should derive development mode from the environment name."""
        assert Settings(ENVIRONMENT="local").is_development is True
        assert Settings(ENVIRONMENT="test").is_development is False


class TestReceptionConfig:
    """Tests for ReceptionConfig."""

    def test_from_settings(self) -> None:
        """Should copy every reception limit from settings."""
        settings = Settings(
            RECEPTION_MAX_SERVICES=6,
            RECEPTION_WORKING_HOURS_START=7,
            RECEPTION_PERFORMANCE_FUTURE_DAYS=14,
            RECEPTION_VALIDATION_TIMEOUT=3,
        )

        config = ReceptionConfig.from_settings(settings)

        assert config.max_services == 6
        assert config.working_hours_start == 7
        assert config.performance_future_days == 14
        assert config.validation_timeout == 3

    def test_defaults_match_settings(self) -> None:
        """Should use the same defaults as Settings."""
        assert ReceptionConfig() == ReceptionConfig.from_settings(Settings())

    def test_to_dict(self) -> None:
        """Should serialize every field."""
        data = ReceptionConfig().to_dict()

        assert data["max_daily_receptions_per_doctor"] == 50
        assert data["search_max_page_size"] == 100
