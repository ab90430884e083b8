"""Tests for tick-based scheduling."""

from __future__ import annotations

import pytest

from arcadia_tactics.core.exceptions import TurnManagementError
from arcadia_tactics.engine.scheduler import Scheduler


class TestScheduler:
    """Tests for the Scheduler class."""

    def test_fires_after_delay(self) -> None:
        """Test a callback runs on the tick it is due."""
        scheduler = Scheduler()
        fired: list[str] = []
        scheduler.schedule(2, lambda: fired.append("ai"))

        scheduler.tick()
        assert fired == []

        scheduler.tick()
        assert fired == ["ai"]
        assert not scheduler.has_pending()

    def test_same_tick_keeps_insertion_order(self) -> None:
        """Test events due together run in the order scheduled."""
        scheduler = Scheduler()
        fired: list[int] = []
        for value in range(3):
            scheduler.schedule(1, lambda value=value: fired.append(value))

        scheduler.tick()

        assert fired == [0, 1, 2]

    def test_earlier_tick_first(self) -> None:
        """Test a short delay overtakes a longer one scheduled before it."""
        scheduler = Scheduler()
        fired: list[str] = []
        scheduler.schedule(3, lambda: fired.append("slow"))
        scheduler.schedule(1, lambda: fired.append("fast"))

        scheduler.advance(3)

        assert fired == ["fast", "slow"]

    def test_zero_delay_chain_runs_same_tick(self) -> None:
        """Test callbacks scheduling zero-delay work finish within one tick."""
        scheduler = Scheduler()
        fired: list[str] = []

        def first() -> None:
            fired.append("first")
            scheduler.schedule(0, lambda: fired.append("second"))

        scheduler.schedule(1, first)

        assert scheduler.tick() == 2
        assert fired == ["first", "second"]

    def test_cancel_by_tag(self) -> None:
        """Test cancelling a tag leaves other events queued."""
        scheduler = Scheduler()
        fired: list[str] = []
        scheduler.schedule(1, lambda: fired.append("battle"), tag="battle")
        scheduler.schedule(1, lambda: fired.append("move"), tag="move")

        assert scheduler.cancel("battle") == 1
        assert not scheduler.has_pending("battle")
        scheduler.tick()

        assert fired == ["move"]

    def test_cancel_event(self) -> None:
        """Test cancelling a single event by id."""
        scheduler = Scheduler()
        event_id = scheduler.schedule(1, lambda: None)

        assert scheduler.cancel_event(event_id)
        assert not scheduler.cancel_event(event_id)
        assert scheduler.pending == []

    def test_negative_delay_rejected(self) -> None:
        """Test scheduling into the past raises TurnManagementError."""
        with pytest.raises(TurnManagementError):
            Scheduler().schedule(-1, lambda: None)

    def test_run_pending(self) -> None:
        """Test run_pending ticks until the queue is empty."""
        scheduler = Scheduler()
        scheduler.schedule(4, lambda: None)

        assert scheduler.run_pending() == 4
        assert scheduler.current_tick == 4

    def test_run_pending_limit(self) -> None:
        """Test a self-rescheduling callback trips the safety limit."""
        scheduler = Scheduler()

        def again() -> None:
            scheduler.schedule(1, again)

        scheduler.schedule(1, again)

        with pytest.raises(TurnManagementError):
            scheduler.run_pending(max_ticks=20)

    def test_clear(self) -> None:
        """Test clear() drops everything."""
        scheduler = Scheduler()
        scheduler.schedule(1, lambda: None, tag="a")
        scheduler.schedule(2, lambda: None)

        scheduler.clear()

        assert not scheduler.has_pending()
        assert scheduler.run_pending() == 0
