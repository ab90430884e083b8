"""Map cell models for the hex overworld and the square battle grid."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from arcadia_tactics.models.enums import PoiType, TerrainType, WeatherType


HexCoord = tuple[int, int]
"""Axial ``(q, r)`` coordinate."""

GridCoord = tuple[int, int]
"""Battle grid ``(x, z)`` coordinate."""


class HexCell(BaseModel):
    """One hex of an overworld or town map.

    Exploration flags are mutated in place as the party moves; everything
    else is fixed at generation time except ``has_encounter``, which is
    cleared once the encounter has been fought.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    q: int
    r: int
    terrain: TerrainType
    is_explored: bool = False
    is_visible: bool = False
    weather: WeatherType = WeatherType.NONE
    has_encounter: bool = False
    has_portal: bool = False
    poi_type: PoiType | None = None

    @property
    def coord(self) -> HexCoord:
        return (self.q, self.r)


class BattleCell(BaseModel):
    """One tile of the tactical grid."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    x: int
    z: int
    height: float = Field(default=1.0, ge=0)
    offset_y: float = 0.0
    is_obstacle: bool = False

    @computed_field(description="Walkable surface height")
    @property
    def elevation(self) -> float:
        return self.offset_y + self.height

    @property
    def coord(self) -> GridCoord:
        return (self.x, self.z)


__all__ = [
    "HexCoord",
    "GridCoord",
    "HexCell",
    "BattleCell",
]
