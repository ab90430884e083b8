"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Arcadia Tactics test suite.
"""

from __future__ import annotations

import random
from collections import deque
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import pytest

from arcadia_tactics.engine.dice import DiceRoller


if TYPE_CHECKING:
    from collections.abc import Generator

    from arcadia_tactics.engine.battle import BattleEngine
    from arcadia_tactics.models.entities import BattleEntity, Entity
    from arcadia_tactics.models.world import BattleCell, HexCell


class ScriptedRoller(DiceRoller):
    """Dice roller that returns queued d20 faces and chance results first.

    Once a queue runs dry the seeded random source takes over, so tests
    only script the rolls they assert on.
    """

    def __init__(
        self,
        d20s: Iterable[int] = (),
        chances: Iterable[bool] = (),
        seed: int = 0,
    ) -> None:
        super().__init__(random.Random(seed))
        self.d20s: deque[int] = deque(d20s)
        self.chances: deque[bool] = deque(chances)

    def queue_d20(self, *faces: int) -> None:
        self.d20s.extend(faces)

    def queue_chance(self, *results: bool) -> None:
        self.chances.extend(results)

    def d20(self) -> int:
        if self.d20s:
            return self.d20s.popleft()
        return super().d20()

    def chance(self, probability: float) -> bool:
        if self.chances:
            return self.chances.popleft()
        return super().chance(probability)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from arcadia_tactics.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "ARCADIA_DEBUG": "true",
        "ARCADIA_LOG_LEVEL": "DEBUG",
        "ARCADIA_WORLD_SEED": "99",
        "ARCADIA_COMBAT_FLEE_CHANCE": "0.5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Dice Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded DiceRoller instance."""
    return DiceRoller.seeded(1234)


@pytest.fixture
def scripted_roller() -> Callable[..., ScriptedRoller]:
    """Provide a factory for rollers with scripted d20 faces and chances."""

    def factory(
        d20s: Iterable[int] = (),
        chances: Iterable[bool] = (),
        seed: int = 0,
    ) -> ScriptedRoller:
        return ScriptedRoller(d20s, chances, seed)

    return factory


# =============================================================================
# Map Fixtures
# =============================================================================

HEX_SYMBOLS = {
    ".": "grass",
    "~": "water",
    "^": "mountain",
    "f": "forest",
    "s": "swamp",
    "V": "village",
    "C": "castle",
    "=": "dirt_road",
}


@pytest.fixture
def hex_map() -> Callable[[list[str]], list[HexCell]]:
    """Provide a factory building hex cells from rows of terrain symbols.

    Each string is one row ``r``; character ``q`` of the row is the
    terrain of cell ``(q, r)``. See ``HEX_SYMBOLS`` for the legend.
    """
    from arcadia_tactics.models.enums import TerrainType
    from arcadia_tactics.models.world import HexCell

    def factory(rows: list[str]) -> list[HexCell]:
        return [
            HexCell(q=q, r=r, terrain=TerrainType(HEX_SYMBOLS[symbol]))
            for r, row in enumerate(rows)
            for q, symbol in enumerate(row)
        ]

    return factory


@pytest.fixture
def open_arena() -> list[BattleCell]:
    """Provide a flat 8x8 battle grid with no obstacles."""
    from arcadia_tactics.models.world import BattleCell

    return [BattleCell(x=x, z=z) for x in range(8) for z in range(8)]


# =============================================================================
# Entity Fixtures
# =============================================================================


@pytest.fixture
def sample_party() -> list[Entity]:
    """Provide a party led by a human fighter."""
    from arcadia_tactics.engine.progression import create_party
    from arcadia_tactics.models.enums import CharacterClass, CharacterRace

    return create_party("Brom", CharacterRace.HUMAN, CharacterClass.FIGHTER)


@pytest.fixture
def make_player() -> Callable[..., BattleEntity]:
    """Provide a factory placing a freshly built party member on the grid."""
    from arcadia_tactics.engine.progression import create_member
    from arcadia_tactics.models.entities import BattleEntity, GridPosition
    from arcadia_tactics.models.enums import CharacterClass, CharacterRace

    def factory(
        member_id: str = "player_leader",
        position: tuple[int, int] = (3, 7),
        *,
        character_class: CharacterClass = CharacterClass.FIGHTER,
        name: str = "Brom",
    ) -> BattleEntity:
        member = create_member(member_id, name, CharacterRace.HUMAN, character_class)
        return BattleEntity.from_entity(member, GridPosition(x=position[0], y=position[1]))

    return factory


@pytest.fixture
def make_goblin() -> Callable[..., BattleEntity]:
    """Provide a factory for level 1 goblin raiders at a given tile."""
    from arcadia_tactics.core.constants import DIFFICULTY_SETTINGS
    from arcadia_tactics.engine.battle import spawn_enemies
    from arcadia_tactics.models.catalog import GOBLIN_RAIDER
    from arcadia_tactics.models.entities import GridPosition
    from arcadia_tactics.models.enums import Difficulty

    def factory(
        position: tuple[int, int] = (4, 2),
        *,
        enemy_id: str = "enemy_1",
        hp: int | None = None,
    ) -> BattleEntity:
        goblin = spawn_enemies(GOBLIN_RAIDER, 1, 1, DIFFICULTY_SETTINGS[Difficulty.NORMAL])[0]
        goblin.id = enemy_id
        goblin.position = GridPosition(x=position[0], y=position[1])
        if hp is not None:
            goblin.stats.hp = hp
        return goblin

    return factory


@pytest.fixture
def make_battle(open_arena: list[BattleCell]) -> Callable[..., BattleEngine]:
    """Provide a factory for a battle on the open arena.

    Combatants are passed in turn order; initiative is not rolled, so the
    first entity acts first.
    """
    from arcadia_tactics.engine.battle import BattleEngine
    from arcadia_tactics.engine.scheduler import Scheduler
    from arcadia_tactics.models.events import EventLog

    def factory(
        entities: list[BattleEntity],
        roller: DiceRoller,
        *,
        battle_map: list[BattleCell] | None = None,
        **kwargs: object,
    ) -> BattleEngine:
        battle = BattleEngine(
            entities,
            battle_map=battle_map if battle_map is not None else open_arena,
            roller=roller,
            events=EventLog(),
            scheduler=Scheduler(),
            **kwargs,
        )
        battle.turn_order = [entity.id for entity in entities]
        battle.current_index = len(entities) - 1
        battle.advance_turn()
        return battle

    return factory
