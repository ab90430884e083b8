"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        ArcadiaError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Game data validation errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        ensure_logging: Configure logging once from settings.
"""

from __future__ import annotations

from arcadia_tactics.core.config import (
    CombatSettings,
    GameSettings,
    PacingSettings,
    Settings,
    WorldSettings,
    clear_settings_cache,
    get_settings,
)
from arcadia_tactics.core.exceptions import (
    ArcadiaError,
    CombatError,
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    InvalidGameStateError,
    TurnManagementError,
    ValidationError,
    WorldGenerationError,
)
from arcadia_tactics.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    ensure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "ArcadiaError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # World exceptions
    "WorldGenerationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "DiceRollError",
    "TurnManagementError",
    # Configuration
    "Settings",
    "WorldSettings",
    "CombatSettings",
    "PacingSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "ensure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
