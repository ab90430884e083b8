"""Configuration management for Arcadia Tactics.

Settings are loaded with pydantic-settings from environment variables and
an optional ``.env`` file. Every tunable of the simulation core lives here:
map dimensions and noise parameters, combat odds and the tick delays that
stand in for presentation pauses.

Example:
    >>> from arcadia_tactics.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.world.map_width
    20

Environment Variables:
    ARCADIA_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ARCADIA_WORLD_SEED: Fixed seed for terrain and all random draws
    ARCADIA_WORLD_MAP_WIDTH / ARCADIA_WORLD_MAP_HEIGHT: Overworld size
    ARCADIA_COMBAT_FLEE_CHANCE: Probability that RUN succeeds
    ARCADIA_PACING_AI_THINK_TICKS: Ticks before an enemy acts
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arcadia_tactics.core.exceptions import ConfigurationError


class WorldSettings(BaseSettings):
    """Configuration for overworld generation and exploration.

    Attributes:
        map_width: Number of hex columns.
        map_height: Number of hex rows.
        spawn_q: Spawn column, forced to a passable cell.
        spawn_r: Spawn row, forced to a passable cell.
        seed: Optional seed; ``None`` draws from OS entropy.
        noise_scale: Sampling frequency of the value noise.
        moisture_offset: Noise-space offset of the moisture field.
        temperature_offset: Noise-space offset of the temperature field.
        reveal_radius: Hex radius revealed around the party in the normal world.
        shadow_reveal_radius: Hex radius revealed in the shadow world.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCADIA_WORLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    map_width: int = Field(default=20, ge=1, le=256, description="Hex columns")
    map_height: int = Field(default=15, ge=1, le=256, description="Hex rows")
    spawn_q: int = Field(default=5, ge=0, description="Spawn column")
    spawn_r: int = Field(default=5, ge=0, description="Spawn row")
    seed: int | None = Field(default=None, description="Seed for reproducible worlds")
    noise_scale: float = Field(default=0.12, gt=0, description="Noise sampling scale")
    moisture_offset: float = Field(default=150.0, description="Moisture field offset")
    temperature_offset: float = Field(default=300.0, description="Temperature field offset")
    reveal_radius: float = Field(default=2.0, ge=0, description="Normal world view radius")
    shadow_reveal_radius: float = Field(default=1.5, ge=0, description="Shadow world view radius")

    @model_validator(mode="after")
    def validate_spawn_in_bounds(self) -> "WorldSettings":
        """Ensure the spawn cell lies inside the map.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the spawn is outside the map.
        """
        if self.spawn_q >= self.map_width or self.spawn_r >= self.map_height:
            raise ConfigurationError(
                f"spawn ({self.spawn_q}, {self.spawn_r}) lies outside the "
                f"{self.map_width}x{self.map_height} map",
                config_key="spawn_q",
            )
        return self


class CombatSettings(BaseSettings):
    """Configuration for battle odds.

    Attributes:
        flee_chance: Probability that a RUN attempt succeeds.
        loot_chance: Per-enemy probability of an item drop.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCADIA_COMBAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    flee_chance: float = Field(default=0.8, ge=0, le=1, description="RUN success chance")
    loot_chance: float = Field(default=0.2, ge=0, le=1, description="Per-enemy drop chance")


class PacingSettings(BaseSettings):
    """Tick delays standing in for presentation pauses.

    One tick is one call to ``Scheduler.tick``; the host decides how much
    wall-clock time a tick represents.

    Attributes:
        overworld_step_ticks: Ticks between two steps of a multi-step move.
        ai_think_ticks: Ticks between an enemy turn starting and its action.
        ai_end_turn_ticks: Ticks between an enemy action and the next turn.
        settle_ticks: Ticks between the last kill and the outcome screen.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCADIA_PACING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    overworld_step_ticks: int = Field(default=1, ge=1, description="Ticks per overworld step")
    ai_think_ticks: int = Field(default=2, ge=1, description="Ticks before an enemy acts")
    ai_end_turn_ticks: int = Field(default=1, ge=1, description="Ticks after an enemy acts")
    settle_ticks: int = Field(default=2, ge=1, description="Ticks before victory or defeat")


class GameSettings(BaseSettings):
    """Configuration for session defaults.

    Attributes:
        default_difficulty: Difficulty used when character creation omits one.
        max_level: Level cap for progression.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCADIA_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_difficulty: Literal["easy", "normal", "hard"] = Field(
        default="normal",
        description="Default difficulty",
    )
    max_level: int = Field(default=20, ge=1, le=20, description="Level cap")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit JSON logs instead of console output.
        log_file: Optional path to a log file.
        world: World generation settings.
        combat: Battle settings.
        pacing: Tick delay settings.
        game: Session defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCADIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Arcadia Tactics", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(default=False, description="JSON log output")
    log_file: str | None = Field(default=None, description="Optional log file path")

    world: WorldSettings = Field(default_factory=WorldSettings)
    combat: CombatSettings = Field(default_factory=CombatSettings)
    pacing: PacingSettings = Field(default_factory=PacingSettings)
    game: GameSettings = Field(default_factory=GameSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "WorldSettings",
    "CombatSettings",
    "PacingSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
