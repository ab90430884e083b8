"""Terrain classification for the two synchronized worlds.

Both worlds are classified from one ``Climate`` sample, so every shadow
cell sits over the normal cell it mirrors: oceans become chasms, coasts
and swamps become lava, and settlements become ruins.
"""

from __future__ import annotations

from dataclasses import dataclass

from arcadia_tactics.models.enums import TerrainType, WeatherType
from arcadia_tactics.world.noise import Climate


# Thresholds on the noise fields
DEEP_WATER_ELEVATION = 0.25
COAST_ELEVATION = 0.32
PEAK_ELEVATION = 0.82
COLD_TEMPERATURE = 0.35
TEMPERATE_TEMPERATURE = 0.70
HOT_COAST_TEMPERATURE = 0.6
SWAMP_MAX_ELEVATION = 0.45
SWAMP_MIN_MOISTURE = 0.6

# Point-of-interest rolls
RUINS_ROLL = 0.97
VILLAGE_ROLL = 0.96
CASTLE_ROLL = 0.975
SHADOW_RUINS_ROLL = 0.94

# Weather rolls
SNOW_MAX_TEMPERATURE = 0.4
SNOW_ROLL = 0.7
RAIN_MIN_MOISTURE = 0.6
RAIN_ROLL = 0.8

PORTAL_ROLL = 0.985

RUINS_BIOMES = frozenset(
    {TerrainType.JUNGLE, TerrainType.DESERT, TerrainType.SWAMP, TerrainType.TUNDRA}
)
VILLAGE_BIOMES = frozenset({TerrainType.GRASS, TerrainType.PLAINS})
CASTLE_BIOMES = frozenset({TerrainType.MOUNTAIN, TerrainType.FOREST, TerrainType.TAIGA})
SNOW_BIOMES = frozenset({TerrainType.TUNDRA, TerrainType.TAIGA, TerrainType.MOUNTAIN})
RAIN_BIOMES = frozenset({TerrainType.JUNGLE, TerrainType.SWAMP, TerrainType.FOREST})

SHADOW_HAZARDS = frozenset({TerrainType.CHASM, TerrainType.LAVA})
NO_ENCOUNTER_NORMAL = frozenset(
    {TerrainType.VILLAGE, TerrainType.CASTLE, TerrainType.WATER, TerrainType.RUINS}
)


@dataclass(frozen=True)
class TerrainPair:
    """Terrain of one hex in both worlds."""

    normal: TerrainType
    shadow: TerrainType


def base_terrain(climate: Climate) -> TerrainPair:
    """Biome of both worlds before points of interest are placed."""
    e, m, t = climate.elevation, climate.moisture, climate.temperature

    if e < DEEP_WATER_ELEVATION:
        return TerrainPair(TerrainType.WATER, TerrainType.CHASM)
    if e < COAST_ELEVATION:
        coast = TerrainType.DESERT if t > HOT_COAST_TEMPERATURE else TerrainType.PLAINS
        return TerrainPair(coast, TerrainType.LAVA)
    if e > PEAK_ELEVATION:
        return TerrainPair(TerrainType.MOUNTAIN, TerrainType.MOUNTAIN)

    if t < COLD_TEMPERATURE:
        if m < 0.5:
            return TerrainPair(TerrainType.TUNDRA, TerrainType.CAVE_FLOOR)
        return TerrainPair(TerrainType.TAIGA, TerrainType.FUNGUS)

    if t < TEMPERATE_TEMPERATURE:
        if e < SWAMP_MAX_ELEVATION and m > SWAMP_MIN_MOISTURE:
            return TerrainPair(TerrainType.SWAMP, TerrainType.LAVA)
        if m < 0.3:
            return TerrainPair(TerrainType.PLAINS, TerrainType.CAVE_FLOOR)
        if m < 0.65:
            return TerrainPair(TerrainType.GRASS, TerrainType.FUNGUS)
        return TerrainPair(TerrainType.FOREST, TerrainType.FUNGUS)

    if m < 0.4:
        return TerrainPair(TerrainType.DESERT, TerrainType.CAVE_FLOOR)
    return TerrainPair(TerrainType.JUNGLE, TerrainType.FUNGUS)


def place_points_of_interest(pair: TerrainPair, poi_roll: float) -> TerrainPair:
    """Turn rare cells into ruins, villages or castles.

    Settlements always lie in ruins in the shadow world, and the shadow
    world has extra ruins anywhere that is not a chasm or lava.
    """
    normal, shadow = pair.normal, pair.shadow

    if poi_roll > RUINS_ROLL and normal in RUINS_BIOMES:
        normal = TerrainType.RUINS
    elif poi_roll > VILLAGE_ROLL and normal in VILLAGE_BIOMES:
        normal = TerrainType.VILLAGE
    elif poi_roll > CASTLE_ROLL and normal in CASTLE_BIOMES:
        normal = TerrainType.CASTLE

    if normal.is_settlement:
        shadow = TerrainType.RUINS
    if poi_roll > SHADOW_RUINS_ROLL and shadow not in SHADOW_HAZARDS:
        shadow = TerrainType.RUINS

    return TerrainPair(normal, shadow)


def classify_terrain(climate: Climate, poi_roll: float) -> TerrainPair:
    """Map one climate sample and a random draw to terrain in both worlds.

    Pure: identical inputs always give identical terrain, and every input
    yields some terrain.
    """
    return place_points_of_interest(base_terrain(climate), poi_roll)


def normal_weather(terrain: TerrainType, climate: Climate, roll: float) -> WeatherType:
    if terrain in SNOW_BIOMES and climate.temperature < SNOW_MAX_TEMPERATURE:
        return WeatherType.SNOW if roll > SNOW_ROLL else WeatherType.NONE
    if terrain in RAIN_BIOMES and climate.moisture > RAIN_MIN_MOISTURE:
        return WeatherType.RAIN if roll > RAIN_ROLL else WeatherType.NONE
    return WeatherType.NONE


def shadow_weather(terrain: TerrainType) -> WeatherType:
    """Ash falls everywhere in the shadow world; fog hangs over its hazards."""
    return WeatherType.FOG if terrain in SHADOW_HAZARDS else WeatherType.ASH


def is_portal_site(pair: TerrainPair) -> bool:
    """A portal needs walkable land on both sides."""
    normal_land = pair.normal not in (TerrainType.WATER, TerrainType.MOUNTAIN)
    shadow_land = pair.shadow not in (TerrainType.CHASM, TerrainType.LAVA, TerrainType.MOUNTAIN)
    return normal_land and shadow_land


def can_hold_encounter(terrain: TerrainType, *, shadow: bool) -> bool:
    if shadow:
        return terrain not in SHADOW_HAZARDS
    return terrain not in NO_ENCOUNTER_NORMAL


__all__ = [
    "PORTAL_ROLL",
    "TerrainPair",
    "base_terrain",
    "place_points_of_interest",
    "classify_terrain",
    "normal_weather",
    "shadow_weather",
    "is_portal_site",
    "can_hold_encounter",
]
