"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from arcadia_tactics.core.config import Settings
from arcadia_tactics.core.logging import (
    add_engine_context,
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    ensure_logging,
    get_logger,
    tag_phase,
)
from arcadia_tactics.engine.session import GameSession
from arcadia_tactics.models.enums import CharacterClass, CharacterRace


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Start and finish each test with default structlog and no context."""
    clear_context()
    structlog.reset_defaults()
    yield
    clear_context()
    structlog.reset_defaults()
    for handler in list(logging.getLogger().handlers):
        if isinstance(handler, logging.FileHandler):
            handler.close()
            logging.getLogger().removeHandler(handler)


class TestProcessors:
    """Tests for the engine-specific processors."""

    def test_engine_context_scope(self) -> None:
        """Test the scope joins the bound session and phase."""
        event = add_engine_context(None, "info", {"event": "x", "session_id": "s1", "phase": "overworld"})

        assert event["engine"] == "arcadia_tactics"
        assert event["scope"] == "s1/overworld"

    def test_engine_context_without_session(self) -> None:
        """Test entries outside a session carry no scope."""
        event = add_engine_context(None, "info", {"event": "x"})

        assert event == {"event": "x", "engine": "arcadia_tactics"}

    def test_tag_phase(self) -> None:
        """Test the phase becomes a message prefix on the console."""
        event = tag_phase(None, "info", {"event": "Battle started", "phase": "battle_tactical", "scope": "s1/x"})

        assert event == {"event": "[battle_tactical] Battle started"}


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test console logs carry the event, its key-values and the phase tag."""
        configure_logging(level="DEBUG")
        bind_context(phase="overworld")

        get_logger("test").info("Battle started", enemies=2)

        out = capsys.readouterr().out
        assert "[overworld] Battle started" in out
        assert "enemies" in out

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON logs include the engine context and bound variables."""
        configure_logging(level="INFO", json_format=True)
        bind_context(session_id="abc123", phase="overworld")

        get_logger("test").info("Session started")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["engine"] == "arcadia_tactics"
        assert record["session_id"] == "abc123"
        assert record["scope"] == "abc123/overworld"
        assert record["event"] == "Session started"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test messages below the level are dropped."""
        configure_logging(level="WARNING")

        get_logger("test").debug("Battle input declined")

        assert "Battle input declined" not in capsys.readouterr().out

    def test_log_file(self, tmp_path: Path) -> None:
        """Test the log file receives JSON lines."""
        log_file = tmp_path / "arcadia.log"
        configure_logging(log_file=str(log_file))

        get_logger("test").warning("Portal collapsed", q=3)

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "Portal collapsed"
        assert record["q"] == 3

    def test_from_settings(
        self,
        mock_env_vars: dict[str, str],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test debug settings enable debug output."""
        configure_from_settings()

        get_logger("test").debug("Phase changed")

        assert "Phase changed" in capsys.readouterr().out

    def test_ensure_logging_configures_once(self) -> None:
        """Test only the first call configures."""
        assert ensure_logging(Settings())
        assert not ensure_logging(Settings())
        assert structlog.is_configured()


class TestSessionContext:
    """Tests for the context a game session binds."""

    def test_session_configures_and_binds(self) -> None:
        """Test a new session sets up logging and binds its identity."""
        session = GameSession(settings=Settings(), seed=3)

        assert structlog.is_configured()
        assert structlog.contextvars.get_contextvars() == {
            "session_id": session.session_id,
            "phase": "character_creation",
        }

    def test_phase_changes_rebind(self) -> None:
        """Test the bound phase follows the session."""
        session = GameSession(settings=Settings(), seed=3)

        session.create_character("Brom", CharacterRace.HUMAN, CharacterClass.FIGHTER)

        assert structlog.contextvars.get_contextvars()["phase"] == "overworld"

    def test_session_leaves_explicit_configuration(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a session does not override logging the host configured."""
        configure_logging(level="INFO", json_format=True)

        session = GameSession(settings=Settings(log_json=False), seed=3)
        get_logger("test").info("Session ready")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["session_id"] == session.session_id


class TestContext:
    """Tests for context binding."""

    def test_bind_and_clear(self) -> None:
        """Test bound variables are visible until cleared."""
        bind_context(session_id="abc123")

        assert structlog.contextvars.get_contextvars() == {"session_id": "abc123"}

        clear_context()

        assert structlog.contextvars.get_contextvars() == {}
