"""Town map layout.

Towns are small hex maps entered from a village or castle: a cobbled
plaza in the middle, two crossing roads, built-up blocks holding shops
and inns, and a ring of exit road around the edge. The whole town is
explored and visible on arrival.
"""

from __future__ import annotations

import random

from arcadia_tactics.core.constants import TOWN_ENTRANCE, TOWN_SIZE
from arcadia_tactics.models.enums import PoiType, TerrainType
from arcadia_tactics.models.world import HexCell, HexCoord


PLAZA_RANGE = range(4, 8)
PLAZA_CENTER: HexCoord = (5, 5)
ROAD_LINES = frozenset({5, 6})
BUILT_UP_ROLL = 0.4
SHOP_ROLL = 0.8
INN_ROLL = 0.9


def generate_town(rng: random.Random, *, size: int = TOWN_SIZE) -> list[HexCell]:
    """Build a ``size`` x ``size`` town map."""
    cells: list[HexCell] = []
    last = size - 1

    for r in range(size):
        for q in range(size):
            terrain = TerrainType.GRASS
            poi: PoiType | None = None

            if q in PLAZA_RANGE and r in PLAZA_RANGE:
                terrain = TerrainType.COBBLESTONE
                if (q, r) == PLAZA_CENTER:
                    poi = PoiType.PLAZA
            elif q in ROAD_LINES or r in ROAD_LINES:
                terrain = TerrainType.DIRT_ROAD
            elif rng.random() > BUILT_UP_ROLL:
                terrain = TerrainType.COBBLESTONE
                if rng.random() > SHOP_ROLL:
                    poi = PoiType.SHOP
                elif rng.random() > INN_ROLL:
                    poi = PoiType.INN

            if q in (0, last) or r in (0, last):
                terrain = TerrainType.DIRT_ROAD
                poi = PoiType.EXIT

            cells.append(
                HexCell(
                    q=q,
                    r=r,
                    terrain=terrain,
                    poi_type=poi,
                    is_explored=True,
                    is_visible=True,
                )
            )
    return cells


def town_entrance() -> HexCoord:
    """Where the party appears when entering a town."""
    return TOWN_ENTRANCE


__all__ = [
    "PLAZA_CENTER",
    "generate_town",
    "town_entrance",
]
