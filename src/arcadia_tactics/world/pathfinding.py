"""A* pathfinding over the hex overworld and the square battle grid.

``find_path`` is a single A* implementation over any ``SearchGraph``;
``HexGraph`` and ``BattleGraph`` adapt the two map types to it. Paths
exclude the start cell, an unreachable or impassable goal yields
``None`` and ``start == goal`` yields an empty path.
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from arcadia_tactics.core.constants import (
    IMPASSABLE_COST,
    MAX_CLIMB,
    MIN_STEP_COST,
    MOVEMENT_COST,
)
from arcadia_tactics.core.logging import get_logger
from arcadia_tactics.models.enums import TerrainType
from arcadia_tactics.models.world import BattleCell, GridCoord, HexCell, HexCoord
from arcadia_tactics.world.hexgrid import hex_distance, hex_neighbors


logger = get_logger(__name__)

N = TypeVar("N", bound=Hashable)

GRID_DIRECTIONS: tuple[GridCoord, ...] = (
    (0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1),
)


class SearchGraph(Protocol[N]):
    """What A* needs to know about a map."""

    def contains(self, node: N) -> bool: ...

    def is_passable(self, node: N) -> bool: ...

    def neighbors(self, node: N) -> Iterable[tuple[N, float]]: ...

    def heuristic(self, node: N, goal: N) -> float: ...


@dataclass
class PathNode(Generic[N]):
    """Search record of one map node."""

    key: N
    g_cost: float = 0.0
    h_cost: float = 0.0
    parent: PathNode[N] | None = None

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost


def _reconstruct(node: PathNode[N]) -> list[N]:
    path: list[N] = []
    current: PathNode[N] | None = node
    while current is not None and current.parent is not None:
        path.append(current.key)
        current = current.parent
    path.reverse()
    return path


def find_path(start: N, goal: N, graph: SearchGraph[N]) -> list[N] | None:
    """Cheapest path from ``start`` to ``goal``.

    Args:
        start: Node the mover stands on.
        goal: Node to reach.
        graph: Map adapter.

    Returns:
        Nodes after ``start`` up to and including ``goal``, ``[]`` when
        already there, or ``None`` when no path exists.
    """
    if not graph.contains(goal) or not graph.is_passable(goal):
        return None
    if not graph.contains(start):
        return None
    if start == goal:
        return []

    counter = itertools.count()
    start_node = PathNode(key=start, h_cost=graph.heuristic(start, goal))
    node_map: dict[N, PathNode[N]] = {start: start_node}
    open_heap: list[tuple[float, int, N]] = [(start_node.f_cost, next(counter), start)]
    closed: set[N] = set()

    while open_heap:
        _, _, key = heapq.heappop(open_heap)
        if key in closed:
            continue
        current = node_map[key]
        if key == goal:
            return _reconstruct(current)
        closed.add(key)

        for neighbor, step_cost in graph.neighbors(key):
            if neighbor in closed:
                continue
            tentative = current.g_cost + step_cost
            node = node_map.get(neighbor)
            if node is not None and tentative >= node.g_cost:
                continue
            if node is None:
                node = PathNode(key=neighbor, h_cost=graph.heuristic(neighbor, goal))
                node_map[neighbor] = node
            node.g_cost = tentative
            node.parent = current
            heapq.heappush(open_heap, (node.f_cost, next(counter), neighbor))

    logger.debug("No path found", start=start, goal=goal, expanded=len(closed))
    return None


# =============================================================================
# Hex Overworld
# =============================================================================


class HexGraph:
    """Axial hex map with terrain movement costs.

    Terrain costing ``IMPASSABLE_COST`` or more is never entered. The
    heuristic is hex distance times the cheapest step, so it never
    overestimates even across roads and settlements.
    """

    def __init__(
        self,
        cells: Iterable[HexCell],
        costs: Mapping[TerrainType, float] = MOVEMENT_COST,
    ) -> None:
        self.cells: dict[HexCoord, HexCell] = {cell.coord: cell for cell in cells}
        self.costs = costs
        passable = [cost for cost in costs.values() if cost < IMPASSABLE_COST]
        self.min_step = min(passable) if passable else MIN_STEP_COST

    def cost(self, coord: HexCoord) -> float:
        return self.costs.get(self.cells[coord].terrain, 1.0)

    def contains(self, node: HexCoord) -> bool:
        return node in self.cells

    def is_passable(self, node: HexCoord) -> bool:
        return self.cost(node) < IMPASSABLE_COST

    def neighbors(self, node: HexCoord) -> Iterable[tuple[HexCoord, float]]:
        for coord in hex_neighbors(node):
            if coord not in self.cells:
                continue
            cost = self.cost(coord)
            if cost >= IMPASSABLE_COST:
                continue
            yield coord, cost

    def heuristic(self, node: HexCoord, goal: HexCoord) -> float:
        return hex_distance(node, goal) * self.min_step


# =============================================================================
# Battle Grid
# =============================================================================


class BattleGraph:
    """Square grid with eight-way moves, obstacles and a climbing limit.

    Tiles in ``occupied`` are treated as blocked.
    """

    def __init__(
        self,
        cells: Iterable[BattleCell],
        occupied: Iterable[GridCoord] = (),
        *,
        max_climb: float = MAX_CLIMB,
    ) -> None:
        self.cells: dict[GridCoord, BattleCell] = {cell.coord: cell for cell in cells}
        self.occupied = frozenset(occupied)
        self.max_climb = max_climb

    def contains(self, node: GridCoord) -> bool:
        return node in self.cells

    def is_passable(self, node: GridCoord) -> bool:
        return not self.cells[node].is_obstacle

    def neighbors(self, node: GridCoord) -> Iterable[tuple[GridCoord, float]]:
        here = self.cells[node]
        x, z = node
        for dx, dz in GRID_DIRECTIONS:
            coord = (x + dx, z + dz)
            cell = self.cells.get(coord)
            if cell is None or cell.is_obstacle:
                continue
            if abs(cell.elevation - here.elevation) > self.max_climb:
                continue
            if coord in self.occupied:
                continue
            yield coord, 1.0

    def heuristic(self, node: GridCoord, goal: GridCoord) -> float:
        return float(max(abs(node[0] - goal[0]), abs(node[1] - goal[1])))


def find_hex_path(start: HexCoord, goal: HexCoord, cells: Iterable[HexCell]) -> list[HexCell] | None:
    """Overworld path as cells, excluding the start."""
    graph = HexGraph(cells)
    path = find_path(start, goal, graph)
    if path is None:
        return None
    return [graph.cells[coord] for coord in path]


def find_battle_path(
    start: GridCoord,
    goal: GridCoord,
    cells: Iterable[BattleCell],
    occupied: Iterable[GridCoord] = (),
) -> list[BattleCell] | None:
    """Battle grid path as cells, excluding the start."""
    graph = BattleGraph(cells, set(occupied) - {goal})
    path = find_path(start, goal, graph)
    if path is None:
        return None
    return [graph.cells[coord] for coord in path]


__all__ = [
    "GRID_DIRECTIONS",
    "SearchGraph",
    "PathNode",
    "find_path",
    "HexGraph",
    "BattleGraph",
    "find_hex_path",
    "find_battle_path",
]
