"""Rule tables and fixed constants for Arcadia Tactics.

This module holds the data-only parts of the rules: movement costs,
difficulty modifiers, the experience table, class and race ability
scores, and the fixed spawn points of the battle arena.
"""

from __future__ import annotations

from dataclasses import dataclass

from arcadia_tactics.models.enums import (
    Ability,
    CharacterClass,
    CharacterRace,
    Difficulty,
    TerrainType,
)


# =============================================================================
# Movement
# =============================================================================

IMPASSABLE_COST = 99.0
"""Movement cost at or above which a hex cannot be entered."""

MOVEMENT_COST: dict[TerrainType, float] = {
    TerrainType.GRASS: 1.0,
    TerrainType.PLAINS: 1.0,
    TerrainType.DESERT: 1.2,
    TerrainType.VILLAGE: 0.8,
    TerrainType.CASTLE: 0.8,
    TerrainType.FOREST: 1.5,
    TerrainType.TAIGA: 1.5,
    TerrainType.TUNDRA: 1.5,
    TerrainType.FUNGUS: 1.5,
    TerrainType.JUNGLE: 2.0,
    TerrainType.SWAMP: 2.5,
    TerrainType.MOUNTAIN: 3.0,
    TerrainType.RUINS: 1.5,
    TerrainType.CAVE_FLOOR: 1.0,
    TerrainType.COBBLESTONE: 0.8,
    TerrainType.DIRT_ROAD: 0.8,
    TerrainType.WOOD_FLOOR: 1.0,
    TerrainType.STONE_FLOOR: 1.0,
    TerrainType.WATER: IMPASSABLE_COST,
    TerrainType.LAVA: IMPASSABLE_COST,
    TerrainType.CHASM: IMPASSABLE_COST,
    TerrainType.WALL_HOUSE: IMPASSABLE_COST,
}
"""Cost of entering a hex of the given terrain. Unlisted terrain costs 1.0."""

MIN_STEP_COST = min(cost for cost in MOVEMENT_COST.values() if cost < IMPASSABLE_COST)
"""Cheapest passable step, used to keep the hex heuristic admissible."""

MAX_CLIMB = 1.0
"""Largest elevation difference a battle step may cross."""


# =============================================================================
# Difficulty
# =============================================================================


@dataclass(frozen=True)
class DifficultyProfile:
    """Multipliers applied by a difficulty level.

    Attributes:
        enemy_stat_mod: Scales enemy hit points.
        encounter_rate_mod: Scales the chance of a hex holding an encounter.
        xp_mod: Scales experience rewards.
        gold_mod: Scales gold rewards.
    """

    enemy_stat_mod: float
    encounter_rate_mod: float
    xp_mod: float
    gold_mod: float


DIFFICULTY_SETTINGS: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(0.7, 0.7, 1.3, 1.5),
    Difficulty.NORMAL: DifficultyProfile(1.0, 1.0, 1.0, 1.0),
    Difficulty.HARD: DifficultyProfile(1.5, 1.3, 1.5, 0.7),
}


# =============================================================================
# Progression
# =============================================================================

MAX_LEVEL = 20

XP_TABLE: tuple[int, ...] = (
    0, 300, 900, 2700, 6500, 14000, 23000, 34000, 48000, 64000,
    85000, 100000, 120000, 140000, 165000, 195000, 225000, 265000, 305000, 355000,
)
"""Cumulative experience needed to leave each level; index = current level."""

XP_CAP = 999999
"""xp_to_next_level once the table runs out."""

DEFAULT_SPEED = 30
"""Walking speed in feet; a battle tile is five feet."""

FEET_PER_TILE = 5


def xp_for_next_level(level: int) -> int:
    """Experience total at which a character of ``level`` levels up."""
    if 0 <= level < len(XP_TABLE):
        return XP_TABLE[level]
    return XP_CAP


# =============================================================================
# Classes and Races
# =============================================================================


def _scores(s: int, d: int, c: int, i: int, w: int, ch: int) -> dict[Ability, int]:
    return {
        Ability.STR: s,
        Ability.DEX: d,
        Ability.CON: c,
        Ability.INT: i,
        Ability.WIS: w,
        Ability.CHA: ch,
    }


BASE_STATS: dict[CharacterClass, dict[Ability, int]] = {
    CharacterClass.FIGHTER: _scores(15, 12, 14, 10, 10, 10),
    CharacterClass.WIZARD: _scores(8, 12, 12, 15, 13, 10),
    CharacterClass.ROGUE: _scores(10, 15, 12, 12, 10, 12),
    CharacterClass.CLERIC: _scores(12, 10, 13, 10, 15, 12),
    CharacterClass.BARBARIAN: _scores(15, 12, 15, 8, 10, 10),
    CharacterClass.BARD: _scores(10, 14, 12, 10, 8, 15),
    CharacterClass.DRUID: _scores(10, 12, 13, 10, 15, 10),
    CharacterClass.PALADIN: _scores(15, 8, 14, 8, 10, 14),
    CharacterClass.RANGER: _scores(10, 15, 12, 10, 14, 8),
    CharacterClass.SORCERER: _scores(8, 13, 14, 10, 10, 15),
    CharacterClass.WARLOCK: _scores(8, 13, 12, 10, 12, 15),
}
"""Standard array per class, before racial bonuses."""

RACE_BONUS: dict[CharacterRace, dict[Ability, int]] = {
    CharacterRace.HUMAN: _scores(1, 1, 1, 1, 1, 1),
    CharacterRace.ELF: {Ability.DEX: 2, Ability.INT: 1},
    CharacterRace.DWARF: {Ability.CON: 2, Ability.STR: 2},
    CharacterRace.HALFLING: {Ability.DEX: 2, Ability.CHA: 1},
    CharacterRace.DRAGONBORN: {Ability.STR: 2, Ability.CHA: 1},
    CharacterRace.GNOME: {Ability.INT: 2, Ability.CON: 1},
    CharacterRace.TIEFLING: {Ability.CHA: 2, Ability.INT: 1},
    CharacterRace.HALF_ORC: {Ability.STR: 2, Ability.CON: 1},
}

HIT_DIE: dict[CharacterClass, int] = {
    CharacterClass.BARBARIAN: 12,
    CharacterClass.FIGHTER: 10,
    CharacterClass.PALADIN: 10,
    CharacterClass.RANGER: 10,
    CharacterClass.WIZARD: 6,
    CharacterClass.SORCERER: 6,
}
"""Hit die per class; classes not listed use a d8."""

DEFAULT_HIT_DIE = 8

CASTER_SLOTS: dict[CharacterClass, int] = {
    CharacterClass.WIZARD: 2,
    CharacterClass.CLERIC: 2,
    CharacterClass.DRUID: 2,
    CharacterClass.SORCERER: 2,
    CharacterClass.BARD: 2,
    CharacterClass.WARLOCK: 1,
}
"""Maximum spell slots per class; classes not listed have none."""

SPELLCASTING_ABILITY: dict[CharacterClass, Ability] = {
    CharacterClass.WIZARD: Ability.INT,
    CharacterClass.SORCERER: Ability.INT,
    CharacterClass.CLERIC: Ability.WIS,
    CharacterClass.DRUID: Ability.WIS,
    CharacterClass.RANGER: Ability.WIS,
    CharacterClass.BARD: Ability.CHA,
    CharacterClass.PALADIN: Ability.CHA,
    CharacterClass.WARLOCK: Ability.CHA,
}


# =============================================================================
# Armor
# =============================================================================

UNARMORED_AC = 10
MEDIUM_ARMOR_AC = 13
"""Body armor base from which the DEX bonus is capped."""
MEDIUM_ARMOR_DEX_CAP = 2
HEAVY_ARMOR_AC = 16
"""Body armor base from which DEX no longer applies."""


# =============================================================================
# Maps
# =============================================================================

BATTLE_GRID_SIZE = 8
TOWN_SIZE = 12
TOWN_ENTRANCE: tuple[int, int] = (0, 6)

PARTY_SPAWNS: tuple[tuple[int, int], ...] = ((3, 7), (2, 6), (4, 6))
ENEMY_SPAWNS: tuple[tuple[int, int], ...] = ((4, 2), (3, 3), (5, 2))


__all__ = [
    "IMPASSABLE_COST",
    "MOVEMENT_COST",
    "MIN_STEP_COST",
    "MAX_CLIMB",
    "DifficultyProfile",
    "DIFFICULTY_SETTINGS",
    "MAX_LEVEL",
    "XP_TABLE",
    "XP_CAP",
    "DEFAULT_SPEED",
    "FEET_PER_TILE",
    "xp_for_next_level",
    "BASE_STATS",
    "RACE_BONUS",
    "HIT_DIE",
    "DEFAULT_HIT_DIE",
    "CASTER_SLOTS",
    "SPELLCASTING_ABILITY",
    "UNARMORED_AC",
    "MEDIUM_ARMOR_AC",
    "MEDIUM_ARMOR_DEX_CAP",
    "HEAVY_ARMOR_AC",
    "BATTLE_GRID_SIZE",
    "TOWN_SIZE",
    "TOWN_ENTRANCE",
    "PARTY_SPAWNS",
    "ENEMY_SPAWNS",
]
