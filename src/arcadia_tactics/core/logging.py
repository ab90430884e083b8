"""Developer logging for the simulation core.

Engine code logs through structlog with its context as key-value pairs.
A ``GameSession`` binds its ``session_id`` and current ``phase`` into the
structlog context, so every line emitted while it runs (dice, battle,
world generation) can be traced back to the playthrough and the screen it
happened on. This is not the player-facing combat log; that is the
``EventLog`` in ``arcadia_tactics.models.events``.

structlog hands its event dicts to the standard library, so the console
and the optional log file share one set of handlers. The console renders
for humans (or JSON when asked); the file is always JSON lines.

Example:
    >>> from arcadia_tactics.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Battle started", enemies=2, terrain="forest")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from arcadia_tactics.core.config import Settings

ENGINE_NAME = "arcadia_tactics"


def add_engine_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp each entry with the engine name and the session scope.

    ``scope`` reads ``<session_id>/<phase>`` once a session has bound
    both; entries logged outside a session only carry ``engine``.
    """
    event_dict.setdefault("engine", ENGINE_NAME)
    session_id = event_dict.get("session_id")
    phase = event_dict.get("phase")
    if session_id and phase:
        event_dict["scope"] = f"{session_id}/{phase}"
    return event_dict


def tag_phase(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Fold the bound phase into the console message as ``[phase] event``."""
    phase = event_dict.pop("phase", None)
    event_dict.pop("scope", None)
    if phase:
        event_dict["event"] = f"[{phase}] {event_dict.get('event', '')}"
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_engine_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Route structlog through the standard library and install handlers.

    Replaces any handlers on the root logger, so calling this again
    reconfigures rather than duplicates output.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render console output as JSON lines.
        log_file: Also append JSON lines to this file.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    numeric_level = _level_number(level)
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    stream = sys.stdout
    console_renderer: Processor
    if json_format:
        console_renderer = structlog.processors.JSONRenderer()
        console_chain: list[Processor] = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            console_renderer,
        ]
    else:
        console_renderer = structlog.dev.ConsoleRenderer(
            colors=stream.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
        console_chain = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            tag_phase,
            console_renderer,
        ]

    console = logging.StreamHandler(stream)
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=console_chain)
    )
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``settings``, or the cached application settings."""
    from arcadia_tactics.core.config import get_settings

    settings = settings if settings is not None else get_settings()
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
    )


def ensure_logging(settings: Settings | None = None) -> bool:
    """Configure from settings unless logging was already configured.

    Returns:
        True if this call did the configuring.
    """
    if structlog.is_configured():
        return False
    configure_from_settings(settings)
    return True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-values onto every later entry in this context.

    Example:
        >>> bind_context(session_id="abc123", phase="overworld")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "ENGINE_NAME",
    "add_engine_context",
    "tag_phase",
    "configure_logging",
    "configure_from_settings",
    "ensure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
