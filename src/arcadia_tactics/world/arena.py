"""Battle arena layout.

Every battle is fought on the same 8x8 template: blocked corners, open
flanks and one of two random cover layouts in the middle. Spawn tiles
are always flat, open floor.
"""

from __future__ import annotations

import random

from arcadia_tactics.core.constants import BATTLE_GRID_SIZE, ENEMY_SPAWNS, PARTY_SPAWNS
from arcadia_tactics.models.world import BattleCell, GridCoord


FLOOR = 0
WALL = 1
PLATFORM = 2

FLOOR_HEIGHT = 1.0
WALL_HEIGHT = 2.0
PLATFORM_HEIGHT = 2.0

_BASE_LAYOUT: tuple[tuple[int, ...], ...] = (
    (1, 1, 0, 0, 0, 0, 1, 1),
    (1, 0, 0, 0, 0, 0, 0, 1),
    (0, 0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0, 0),
    (1, 0, 0, 0, 0, 0, 0, 1),
    (1, 1, 0, 0, 0, 0, 1, 1),
)
"""Rows are z, columns are x."""

PILLARS: tuple[GridCoord, ...] = ((2, 2), (5, 2), (2, 5), (5, 5))
CENTER_BLOCK: tuple[GridCoord, ...] = ((3, 3), (4, 3), (3, 4), (4, 4))

PARTY_ZONE = frozenset((x, z) for x in (2, 3, 4) for z in (6, 7))
ENEMY_ZONE = frozenset((x, z) for x in (3, 4) for z in (2, 3))
CLEAR_TILES = PARTY_ZONE | ENEMY_ZONE | frozenset(PARTY_SPAWNS) | frozenset(ENEMY_SPAWNS)


def arena_layout(rng: random.Random) -> list[list[int]]:
    """The tile-type template with one random cover layout applied.

    Pillars are walls; the centre block is a raised platform that can be
    climbed from the surrounding floor.
    """
    layout = [list(row) for row in _BASE_LAYOUT]
    if rng.random() > 0.5:
        for x, z in PILLARS:
            layout[z][x] = WALL
    else:
        for x, z in CENTER_BLOCK:
            layout[z][x] = PLATFORM
    return layout


def generate_arena(rng: random.Random) -> list[BattleCell]:
    """Build the battle grid, column by column."""
    layout = arena_layout(rng)
    cells: list[BattleCell] = []
    for x in range(BATTLE_GRID_SIZE):
        for z in range(BATTLE_GRID_SIZE):
            tile = FLOOR if (x, z) in CLEAR_TILES else layout[z][x]
            if tile == WALL:
                cells.append(BattleCell(x=x, z=z, height=WALL_HEIGHT, is_obstacle=True))
            elif tile == PLATFORM:
                cells.append(BattleCell(x=x, z=z, height=PLATFORM_HEIGHT))
            else:
                cells.append(BattleCell(x=x, z=z, height=FLOOR_HEIGHT))
    return cells


__all__ = [
    "PILLARS",
    "CENTER_BLOCK",
    "CLEAR_TILES",
    "arena_layout",
    "generate_arena",
]
