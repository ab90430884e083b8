"""Dual-world overworld generation.

Each hex is classified once from a shared climate sample and emitted as
two cells, one per dimension. Terrain shape depends only on the noise
seed; points of interest, weather, portals and encounters are drawn from
the injected random source.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from arcadia_tactics.core.config import WorldSettings
from arcadia_tactics.core.exceptions import WorldGenerationError
from arcadia_tactics.core.logging import get_logger
from arcadia_tactics.models.enums import Dimension, TerrainType
from arcadia_tactics.models.world import HexCell, HexCoord
from arcadia_tactics.world.noise import ClimateSampler, ValueNoise
from arcadia_tactics.world.terrain import (
    PORTAL_ROLL,
    TerrainPair,
    can_hold_encounter,
    classify_terrain,
    is_portal_site,
    normal_weather,
    shadow_weather,
)


logger = get_logger(__name__)

NORMAL_ENCOUNTER_CHANCE = 0.15
SHADOW_ENCOUNTER_CHANCE = 0.40
SPAWN_TERRAIN = TerrainPair(TerrainType.GRASS, TerrainType.CAVE_FLOOR)


@dataclass
class DualWorld:
    """The two overworld layers, cell-for-cell aligned.

    ``normal[i]`` and ``shadow[i]`` always share ``(q, r)`` and the portal flag.
    """

    width: int
    height: int
    normal: list[HexCell] = field(default_factory=list)
    shadow: list[HexCell] = field(default_factory=list)

    def layer(self, dimension: Dimension) -> list[HexCell]:
        return self.normal if dimension is Dimension.NORMAL else self.shadow


class DualWorldGenerator:
    """Builds synchronized normal and shadow overworld maps.

    Example:
        >>> generator = DualWorldGenerator(width=20, height=15, seed=3, rng=random.Random(3))
        >>> world = generator.generate()
        >>> len(world.normal) == len(world.shadow) == 300
        True
    """

    def __init__(
        self,
        *,
        width: int = 20,
        height: int = 15,
        seed: int = 0,
        rng: random.Random | None = None,
        spawn: HexCoord = (5, 5),
        encounter_rate: float = 1.0,
        scale: float = 0.12,
        moisture_offset: float = 150.0,
        temperature_offset: float = 300.0,
    ) -> None:
        if width < 1 or height < 1:
            raise WorldGenerationError("Map must have at least one cell", width=width, height=height)
        self.width = width
        self.height = height
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.spawn = spawn
        self.encounter_rate = encounter_rate
        self.sampler = ClimateSampler(
            ValueNoise(seed),
            scale=scale,
            moisture_offset=moisture_offset,
            temperature_offset=temperature_offset,
        )

    @classmethod
    def from_settings(
        cls,
        settings: WorldSettings,
        *,
        seed: int,
        rng: random.Random,
        encounter_rate: float = 1.0,
    ) -> DualWorldGenerator:
        return cls(
            width=settings.map_width,
            height=settings.map_height,
            seed=seed,
            rng=rng,
            spawn=(settings.spawn_q, settings.spawn_r),
            encounter_rate=encounter_rate,
            scale=settings.noise_scale,
            moisture_offset=settings.moisture_offset,
            temperature_offset=settings.temperature_offset,
        )

    def generate(self) -> DualWorld:
        """Generate both layers, row by row."""
        world = DualWorld(width=self.width, height=self.height)
        for r in range(self.height):
            for q in range(self.width):
                normal, shadow = self._generate_pair(q, r)
                world.normal.append(normal)
                world.shadow.append(shadow)

        logger.info(
            "Dual world generated",
            width=self.width,
            height=self.height,
            seed=self.seed,
            portals=sum(cell.has_portal for cell in world.normal),
            normal_encounters=sum(cell.has_encounter for cell in world.normal),
            shadow_encounters=sum(cell.has_encounter for cell in world.shadow),
        )
        return world

    def _generate_pair(self, q: int, r: int) -> tuple[HexCell, HexCell]:
        climate = self.sampler.sample(q, r)
        pair = classify_terrain(climate, self.rng.random())
        if (q, r) == self.spawn:
            pair = SPAWN_TERRAIN

        weather = normal_weather(pair.normal, climate, self.rng.random())
        has_portal = is_portal_site(pair) and self.rng.random() > PORTAL_ROLL

        normal_encounter = (
            self.rng.random() > 1 - NORMAL_ENCOUNTER_CHANCE * self.encounter_rate
            and can_hold_encounter(pair.normal, shadow=False)
        )
        shadow_encounter = (
            self.rng.random() > 1 - SHADOW_ENCOUNTER_CHANCE * self.encounter_rate
            and can_hold_encounter(pair.shadow, shadow=True)
        )

        normal = HexCell(
            q=q,
            r=r,
            terrain=pair.normal,
            weather=weather,
            has_portal=has_portal,
            has_encounter=normal_encounter,
        )
        shadow = HexCell(
            q=q,
            r=r,
            terrain=pair.shadow,
            weather=shadow_weather(pair.shadow),
            has_portal=has_portal,
            has_encounter=shadow_encounter,
        )
        return normal, shadow


__all__ = [
    "NORMAL_ENCOUNTER_CHANCE",
    "SHADOW_ENCOUNTER_CHANCE",
    "DualWorld",
    "DualWorldGenerator",
]
