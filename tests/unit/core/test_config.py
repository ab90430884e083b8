"""Tests for configuration management."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from arcadia_tactics.core.config import (
    CombatSettings,
    PacingSettings,
    Settings,
    WorldSettings,
    clear_settings_cache,
    get_settings,
)
from arcadia_tactics.core.exceptions import ConfigurationError


class TestWorldSettings:
    """Tests for WorldSettings configuration."""

    def test_default_values(self) -> None:
        """Test default map size and spawn."""
        settings = WorldSettings()

        assert settings.map_width == 20
        assert settings.map_height == 15
        assert (settings.spawn_q, settings.spawn_r) == (5, 5)
        assert settings.reveal_radius == 2.0
        assert settings.shadow_reveal_radius == 1.5

    def test_spawn_outside_map_rejected(self) -> None:
        """Test that a spawn outside the map raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            WorldSettings(map_width=4, map_height=4)

        assert exc_info.value.details["config_key"] == "spawn_q"

    def test_zero_width_rejected(self) -> None:
        """Test that an empty map fails field validation."""
        with pytest.raises(ValidationError):
            WorldSettings(map_width=0)

    def test_seed_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test seed loading from the environment."""
        monkeypatch.setenv("ARCADIA_WORLD_SEED", "42")

        settings = WorldSettings()

        assert settings.seed == 42


class TestCombatSettings:
    """Tests for CombatSettings configuration."""

    def test_default_values(self) -> None:
        """Test default combat odds."""
        settings = CombatSettings()

        assert settings.flee_chance == 0.8
        assert settings.loot_chance == 0.2

    def test_probability_bounds(self) -> None:
        """Test that probabilities above 1 are rejected."""
        with pytest.raises(ValidationError):
            CombatSettings(flee_chance=1.5)


class TestPacingSettings:
    """Tests for PacingSettings configuration."""

    def test_delays_are_positive(self) -> None:
        """Test that zero-tick delays are rejected."""
        with pytest.raises(ValidationError):
            PacingSettings(ai_think_ticks=0)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self) -> None:
        """Test default application settings."""
        settings = Settings()

        assert settings.app_name == "Arcadia Tactics"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.game.default_difficulty == "normal"
        assert settings.game.max_level == 20

    def test_nested_settings(self) -> None:
        """Test that nested settings are properly initialized."""
        settings = Settings()

        assert settings.world is not None
        assert settings.combat is not None
        assert settings.pacing is not None
        assert settings.game is not None

    def test_environment_override(self, mock_env_vars: dict[str, str]) -> None:
        """Test loading every domain from environment variables."""
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.world.seed == 99
        assert settings.combat.flee_chance == 0.5

    def test_invalid_log_level(self) -> None:
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="VERBOSE")


class TestGetSettings:
    """Tests for the settings singleton."""

    def test_get_settings_cached(self) -> None:
        """Test that settings are cached."""
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that clearing the cache picks up new environment values."""
        first = get_settings()
        monkeypatch.setenv("ARCADIA_COMBAT_LOOT_CHANCE", "0.9")
        clear_settings_cache()

        second = get_settings()

        assert first is not second
        assert second.combat.loot_chance == 0.9

    def test_invalid_environment_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that invalid configuration surfaces as ConfigurationError."""
        monkeypatch.setenv("ARCADIA_WORLD_MAP_WIDTH", "3")

        with pytest.raises(ConfigurationError):
            get_settings()
