"""Custom exception hierarchy for Arcadia Tactics.

Illegal player actions are never exceptions: the engine declines them and
logs at debug level. The classes below cover programmer and configuration
errors (bad dice notation, unknown catalog ids, a spawn point outside the
map) so that callers can handle every failure of the simulation core at a
single boundary via ``ArcadiaError``.

Example:
    >>> from arcadia_tactics.core.exceptions import DiceRollError
    >>> raise DiceRollError("Invalid dice expression", expression="2x6")
"""

from __future__ import annotations

from typing import Any


class ArcadiaError(Exception):
    """Base exception for all Arcadia Tactics errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# World Generation Exceptions
# =============================================================================


class WorldGenerationError(ArcadiaError):
    """Raised when a map cannot be built from the given parameters.

    Generation itself always falls through to a default terrain, so this
    only signals impossible inputs such as a zero-sized map.
    """

    def __init__(
        self,
        message: str,
        *,
        width: int | None = None,
        height: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize world generation error with map size context.

        Args:
            message: Human-readable error description.
            width: Requested map width.
            height: Requested map height.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if width is not None:
            combined_details["width"] = width
        if height is not None:
            combined_details["height"] = height
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Exceptions
# =============================================================================


class GameEngineError(ArcadiaError):
    """Base exception for all game engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when the session is driven into an inconsistent state.

    Unlike a declined action, this means the caller broke an invariant,
    e.g. rolling initiative for a battle that is already running.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current phase identifier.
            expected_states: List of phases that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when combat resolution meets an inconsistent battle state."""

    def __init__(
        self,
        message: str,
        *,
        combatant_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combatant context.

        Args:
            message: Human-readable error description.
            combatant_id: Identifier of the combatant involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if combatant_id:
            combined_details["combatant_id"] = combatant_id
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when a dice expression cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class TurnManagementError(GameEngineError):
    """Raised when a turn order cannot be built, e.g. for an empty battle."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(ArcadiaError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(ArcadiaError):
    """Raised when game data fails validation, e.g. an unknown catalog id."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "ArcadiaError",
    # World exceptions
    "WorldGenerationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "DiceRollError",
    "TurnManagementError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
