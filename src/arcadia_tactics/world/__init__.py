"""Map generation and pathfinding for the overworld, towns and battle arenas."""

from __future__ import annotations

from arcadia_tactics.world.arena import generate_arena
from arcadia_tactics.world.generator import DualWorld, DualWorldGenerator
from arcadia_tactics.world.hexgrid import hex_distance, reveal
from arcadia_tactics.world.noise import Climate, ClimateSampler, ValueNoise
from arcadia_tactics.world.pathfinding import (
    BattleGraph,
    HexGraph,
    find_battle_path,
    find_hex_path,
    find_path,
)
from arcadia_tactics.world.terrain import TerrainPair, classify_terrain
from arcadia_tactics.world.town import generate_town


__all__ = [
    "generate_arena",
    "DualWorld",
    "DualWorldGenerator",
    "hex_distance",
    "reveal",
    "Climate",
    "ClimateSampler",
    "ValueNoise",
    "BattleGraph",
    "HexGraph",
    "find_battle_path",
    "find_hex_path",
    "find_path",
    "TerrainPair",
    "classify_terrain",
    "generate_town",
]
