"""Tick-based scheduling of delayed engine work.

Enemy "thinking" pauses, the gap between overworld steps and the pause
before a victory or defeat screen are all modelled as callbacks due at a
future tick. The host drives time by calling ``tick`` (one per frame, or
one per timer fire); tests call ``advance`` or ``run_pending`` and never
wait on a wall clock.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from arcadia_tactics.core.exceptions import TurnManagementError
from arcadia_tactics.core.logging import get_logger


logger = get_logger(__name__)

DEFAULT_MAX_TICKS = 10_000


@dataclass(frozen=True)
class ScheduledEvent:
    """A callback waiting for its tick.

    Attributes:
        tick: Tick at which the callback runs.
        event_id: Unique id, usable with ``Scheduler.cancel_event``.
        callback: Zero-argument callable to run.
        tag: Optional group name, usable with ``Scheduler.cancel``.
    """

    tick: int
    event_id: str
    callback: Callable[[], object]
    tag: str | None = None


class Scheduler:
    """Queue of callbacks keyed by the tick they are due.

    Events due on the same tick run in the order they were scheduled. A
    callback may schedule further events; those due on the current tick
    still run within the same ``tick`` call.

    Example:
        >>> scheduler = Scheduler()
        >>> fired = []
        >>> _ = scheduler.schedule(2, lambda: fired.append("ai"), tag="ai")
        >>> scheduler.tick(); fired
        []
        >>> scheduler.tick(); fired
        ['ai']
    """

    def __init__(self) -> None:
        self._current_tick = 0
        self._next_event_counter = 0
        self._pending_by_tick: dict[int, list[ScheduledEvent]] = {}
        self._tick_by_id: dict[str, int] = {}

    @property
    def current_tick(self) -> int:
        return self._current_tick

    @property
    def pending(self) -> list[ScheduledEvent]:
        """Queued events in execution order."""
        return [
            event
            for tick in sorted(self._pending_by_tick)
            for event in self._pending_by_tick[tick]
        ]

    def has_pending(self, tag: str | None = None) -> bool:
        if tag is None:
            return bool(self._tick_by_id)
        return any(event.tag == tag for event in self.pending)

    def schedule(
        self,
        delay_ticks: int,
        callback: Callable[[], object],
        *,
        tag: str | None = None,
    ) -> str:
        """Run ``callback`` ``delay_ticks`` ticks from now.

        Args:
            delay_ticks: Ticks to wait; 0 runs on the next ``tick`` call.
            callback: Zero-argument callable.
            tag: Optional group name for bulk cancellation.

        Returns:
            The event id.

        Raises:
            TurnManagementError: If ``delay_ticks`` is negative.
        """
        if delay_ticks < 0:
            raise TurnManagementError(
                "Cannot schedule an event in the past",
                details={"delay_ticks": delay_ticks},
            )
        event_id = f"evt-{self._next_event_counter:08d}"
        self._next_event_counter += 1
        due = self._current_tick + delay_ticks
        event = ScheduledEvent(tick=due, event_id=event_id, callback=callback, tag=tag)
        self._pending_by_tick.setdefault(due, []).append(event)
        self._tick_by_id[event_id] = due
        return event_id

    def cancel_event(self, event_id: str) -> bool:
        """Drop one queued event. Returns False if it already ran or never existed."""
        if event_id not in self._tick_by_id:
            return False
        tick = self._tick_by_id.pop(event_id)
        events = self._pending_by_tick[tick]
        self._pending_by_tick[tick] = [event for event in events if event.event_id != event_id]
        if not self._pending_by_tick[tick]:
            del self._pending_by_tick[tick]
        return True

    def cancel(self, tag: str) -> int:
        """Drop every queued event carrying ``tag``.

        Returns:
            Number of events cancelled.
        """
        doomed = [event.event_id for event in self.pending if event.tag == tag]
        for event_id in doomed:
            self.cancel_event(event_id)
        if doomed:
            logger.debug("Scheduled events cancelled", tag=tag, count=len(doomed))
        return len(doomed)

    def clear(self) -> None:
        self._pending_by_tick.clear()
        self._tick_by_id.clear()

    def tick(self) -> int:
        """Advance time by one tick and run everything now due.

        Returns:
            Number of callbacks executed.
        """
        self._current_tick += 1
        executed = 0
        while True:
            due = [tick for tick in self._pending_by_tick if tick <= self._current_tick]
            if not due:
                break
            tick = min(due)
            event = self._pending_by_tick[tick].pop(0)
            if not self._pending_by_tick[tick]:
                del self._pending_by_tick[tick]
            self._tick_by_id.pop(event.event_id, None)
            event.callback()
            executed += 1
        return executed

    def advance(self, ticks: int) -> int:
        """Run ``ticks`` ticks. Returns the number of callbacks executed."""
        return sum(self.tick() for _ in range(ticks))

    def run_pending(self, max_ticks: int = DEFAULT_MAX_TICKS) -> int:
        """Tick until the queue is empty.

        Args:
            max_ticks: Safety limit for callbacks that keep rescheduling.

        Returns:
            Number of ticks advanced.

        Raises:
            TurnManagementError: If the queue is still busy after ``max_ticks``.
        """
        ticks = 0
        while self._tick_by_id:
            if ticks >= max_ticks:
                raise TurnManagementError(
                    "Scheduler did not settle",
                    details={"max_ticks": max_ticks, "pending": len(self._tick_by_id)},
                )
            self.tick()
            ticks += 1
        return ticks


__all__ = [
    "ScheduledEvent",
    "Scheduler",
]
