"""Player-facing events: the combat log and floating damage numbers.

Every engine operation appends to a shared ``EventLog`` and returns the
events it emitted, so a host can both render the running log and react
to exactly what a single input caused.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from arcadia_tactics.models.entities import GridPosition
from arcadia_tactics.models.enums import LogCategory, PopupKind


class LogEntry(BaseModel):
    """A line of the player-facing log."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=0)
    message: str
    category: LogCategory = LogCategory.INFO


class DamagePopup(BaseModel):
    """A transient number or label shown above a battle tile.

    ``label`` replaces the number for misses ("MISS", "FUMBLE").
    """

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=0)
    position: GridPosition
    amount: int = 0
    label: str | None = None
    kind: PopupKind = PopupKind.DAMAGE
    is_crit: bool = False


GameEvent = LogEntry | DamagePopup


class EventLog:
    """Append-only log of entries and popups with a shared sequence.

    Example:
        >>> events = EventLog()
        >>> mark = events.mark()
        >>> events.log("The party sets out.", LogCategory.NARRATIVE)
        >>> [e.message for e in events.since(mark)]
        ['The party sets out.']
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []
        self._popups: list[DamagePopup] = []
        self._sequence = 0

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    @property
    def popups(self) -> list[DamagePopup]:
        return list(self._popups)

    def _next(self) -> int:
        value = self._sequence
        self._sequence += 1
        return value

    def log(self, message: str, category: LogCategory = LogCategory.INFO) -> LogEntry:
        entry = LogEntry(sequence=self._next(), message=message, category=category)
        self._entries.append(entry)
        return entry

    def popup(
        self,
        position: GridPosition,
        *,
        amount: int = 0,
        label: str | None = None,
        kind: PopupKind = PopupKind.DAMAGE,
        is_crit: bool = False,
    ) -> DamagePopup:
        popup = DamagePopup(
            sequence=self._next(),
            position=position,
            amount=amount,
            label=label,
            kind=kind,
            is_crit=is_crit,
        )
        self._popups.append(popup)
        return popup

    def mark(self) -> int:
        """Sequence number the next event will receive."""
        return self._sequence

    def since(self, mark: int) -> list[GameEvent]:
        """All events emitted at or after ``mark``, in emission order."""
        events: list[GameEvent] = [e for e in self._entries if e.sequence >= mark]
        events.extend(p for p in self._popups if p.sequence >= mark)
        return sorted(events, key=lambda event: event.sequence)

    def drain_popups(self) -> list[DamagePopup]:
        """Hand pending popups to the renderer and forget them."""
        popups, self._popups = self._popups, []
        return popups

    def clear(self) -> None:
        self._entries.clear()
        self._popups.clear()


__all__ = [
    "LogEntry",
    "DamagePopup",
    "GameEvent",
    "EventLog",
]
