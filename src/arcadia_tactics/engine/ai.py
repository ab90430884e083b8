"""Enemy decision making.

Enemies pick the nearest living player by Manhattan distance (the first
one found wins ties), attack if it is adjacent and otherwise take one
step along an A* path toward it.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from arcadia_tactics.core.logging import get_logger
from arcadia_tactics.models.entities import BattleEntity
from arcadia_tactics.models.enums import EntityType
from arcadia_tactics.models.world import GridCoord
from arcadia_tactics.world.pathfinding import find_battle_path


if TYPE_CHECKING:
    from arcadia_tactics.engine.battle import BattleEngine

logger = get_logger(__name__)


def choose_target(actor: BattleEntity, candidates: Iterable[BattleEntity]) -> BattleEntity | None:
    """Nearest living player by Manhattan distance."""
    best: BattleEntity | None = None
    best_distance = 0
    for candidate in candidates:
        if candidate.entity_type != EntityType.PLAYER or not candidate.is_alive:
            continue
        distance = actor.position.manhattan(candidate.position)
        if best is None or distance < best_distance:
            best = candidate
            best_distance = distance
    return best


def next_step(battle: BattleEngine, actor: BattleEntity, target: BattleEntity) -> GridCoord | None:
    """First tile of a path toward ``target``, routing around other combatants."""
    path = find_battle_path(
        actor.position.as_tuple(),
        target.position.as_tuple(),
        battle.battle_map,
        occupied=battle.occupied(exclude=actor.id),
    )
    if not path:
        return None
    step = path[0].coord
    if step == target.position.as_tuple():
        return None
    return step


def take_turn(battle: BattleEngine, actor: BattleEntity) -> None:
    """Act for ``actor``: attack an adjacent target or close the distance."""
    target = choose_target(actor, battle.entities)
    if target is None:
        logger.debug("Enemy has no target", enemy=actor.id)
        return

    if actor.position.chebyshev(target.position) <= 1:
        battle.enemy_attack(actor, target)
        return

    step = next_step(battle, actor, target)
    if step is None or not battle.move_entity(actor, step):
        logger.debug("Enemy cannot advance", enemy=actor.id, target=target.id)
        return
    logger.debug("Enemy advanced", enemy=actor.id, position=step)


__all__ = [
    "choose_target",
    "next_step",
    "take_turn",
]
