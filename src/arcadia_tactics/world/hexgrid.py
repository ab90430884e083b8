"""Axial hex coordinate helpers and fog-of-war reveal."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from arcadia_tactics.models.world import HexCell, HexCoord


HEX_DIRECTIONS: tuple[HexCoord, ...] = ((1, 0), (0, 1), (-1, 1), (-1, 0), (0, -1), (1, -1))
"""The six axial neighbour offsets."""


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Number of hex steps between two axial coordinates."""
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


def hex_neighbors(coord: HexCoord) -> Iterator[HexCoord]:
    q, r = coord
    for dq, dr in HEX_DIRECTIONS:
        yield (q + dq, r + dr)


def index_cells(cells: Iterable[HexCell]) -> dict[HexCoord, HexCell]:
    return {cell.coord: cell for cell in cells}


def reveal(cells: Iterable[HexCell], center: HexCoord, radius: float) -> int:
    """Mark cells within ``radius`` of ``center`` explored and visible.

    Cells outside the radius lose visibility but stay explored.

    Returns:
        Number of cells newly explored.
    """
    newly_explored = 0
    for cell in cells:
        in_sight = hex_distance(cell.coord, center) <= radius
        if in_sight and not cell.is_explored:
            cell.is_explored = True
            newly_explored += 1
        if cell.is_visible != in_sight:
            cell.is_visible = in_sight
    return newly_explored


__all__ = [
    "HEX_DIRECTIONS",
    "hex_distance",
    "hex_neighbors",
    "index_cells",
    "reveal",
]
