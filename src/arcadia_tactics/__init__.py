"""Arcadia Tactics - simulation core of a dual-world tactical RPG.

The party explores a procedurally generated hex overworld that exists
twice, once in the normal world and once in its shadow, hops between the
two through portals, visits towns and fights turn-based battles on a
small square grid with height, resolved with D&D 5E-style combat math.

Rendering, input widgets, audio and save files are the host's business:
the core takes player inputs as method calls and reports everything that
happened as a list of log entries and damage popups.

Example:
    >>> from arcadia_tactics import GameSession, CharacterClass, CharacterRace
    >>>
    >>> session = GameSession(seed=1)
    >>> session.create_character("Vale", CharacterRace.HUMAN, CharacterClass.ROGUE)
    >>> session.move_overworld(7, 5)
    >>> session.run_pending()

Modules:
    core: Configuration, logging, exceptions and rule tables.
    models: Pydantic V2 records for entities, items, map cells and events.
    world: Noise, terrain, overworld/town/arena generation and pathfinding.
    engine: Dice, combat rules, battle and session state machines.
"""

from __future__ import annotations

# Core
from arcadia_tactics.core.config import Settings, get_settings
from arcadia_tactics.core.exceptions import ArcadiaError
from arcadia_tactics.core.logging import configure_logging, get_logger

# Engine
from arcadia_tactics.engine.battle import BattleEngine
from arcadia_tactics.engine.dice import DiceRoller, make_rng
from arcadia_tactics.engine.session import GameSession

# Models
from arcadia_tactics.models.entities import BattleEntity, Entity, Inventory
from arcadia_tactics.models.enums import (
    BattleAction,
    CharacterClass,
    CharacterRace,
    Difficulty,
    Dimension,
    GamePhase,
    TerrainType,
)
from arcadia_tactics.models.events import EventLog

# World
from arcadia_tactics.world.generator import DualWorldGenerator
from arcadia_tactics.world.pathfinding import find_battle_path, find_hex_path


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "ArcadiaError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "BattleEngine",
    "DiceRoller",
    "make_rng",
    "GameSession",
    # Models
    "BattleEntity",
    "Entity",
    "Inventory",
    "BattleAction",
    "CharacterClass",
    "CharacterRace",
    "Difficulty",
    "Dimension",
    "GamePhase",
    "TerrainType",
    "EventLog",
    # World
    "DualWorldGenerator",
    "find_battle_path",
    "find_hex_path",
]
