"""Tests for enemy decision making."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from arcadia_tactics.engine import ai
from arcadia_tactics.engine.battle import BattleEngine
from arcadia_tactics.models.entities import BattleEntity
from arcadia_tactics.models.world import BattleCell


EntityFactory = Callable[..., BattleEntity]
BattleFactory = Callable[..., BattleEngine]
RollerFactory = Callable[..., Any]


class TestChooseTarget:
    """Tests for target selection."""

    def test_nearest_by_manhattan(self, make_player: EntityFactory, make_goblin: EntityFactory) -> None:
        """Test the closest player wins."""
        goblin = make_goblin((4, 2))
        far = make_player("player_leader", (0, 7))
        near = make_player("comp_zan", (5, 5), name="Zan")

        assert ai.choose_target(goblin, [far, near, goblin]) is near

    def test_first_wins_ties(self, make_player: EntityFactory, make_goblin: EntityFactory) -> None:
        """Test equal distances keep the first candidate."""
        goblin = make_goblin((4, 4))
        left = make_player("player_leader", (2, 4))
        right = make_player("comp_zan", (6, 4), name="Zan")

        assert ai.choose_target(goblin, [left, right]) is left

    def test_ignores_fallen(self, make_player: EntityFactory, make_goblin: EntityFactory) -> None:
        """Test dead players are not targeted."""
        goblin = make_goblin((4, 2))
        fallen = make_player("player_leader", (4, 3))
        fallen.stats.hp = 0
        standing = make_player("comp_zan", (0, 7), name="Zan")

        assert ai.choose_target(goblin, [fallen, standing]) is standing

    def test_no_players(self, make_goblin: EntityFactory) -> None:
        """Test there is no target without players."""
        goblin = make_goblin((4, 2))

        assert ai.choose_target(goblin, [goblin, make_goblin((0, 0), enemy_id="enemy_2")]) is None


class TestNextStep:
    """Tests for movement toward a target."""

    def test_step_toward_target(
        self,
        make_battle: BattleFactory,
        make_player: EntityFactory,
        make_goblin: EntityFactory,
        scripted_roller: RollerFactory,
    ) -> None:
        """Test the step closes the distance by one tile."""
        fighter = make_player(position=(3, 7))
        goblin = make_goblin((3, 2))
        battle = make_battle([fighter, goblin], scripted_roller())

        step = ai.next_step(battle, goblin, fighter)

        assert step is not None
        assert max(abs(step[0] - 3), abs(step[1] - 7)) == 4

    def test_adjacent_has_no_step(
        self,
        make_battle: BattleFactory,
        make_player: EntityFactory,
        make_goblin: EntityFactory,
        scripted_roller: RollerFactory,
    ) -> None:
        """Test the target's own tile is never a step."""
        fighter = make_player(position=(3, 7))
        goblin = make_goblin((3, 6))
        battle = make_battle([fighter, goblin], scripted_roller())

        assert ai.next_step(battle, goblin, fighter) is None


class TestTakeTurn:
    """Tests for a whole enemy turn."""

    def test_attacks_when_adjacent(
        self,
        make_battle: BattleFactory,
        make_player: EntityFactory,
        make_goblin: EntityFactory,
        scripted_roller: RollerFactory,
    ) -> None:
        """Test an adjacent enemy attacks instead of moving."""
        fighter = make_player(position=(3, 7))
        goblin = make_goblin((4, 6))
        battle = make_battle([fighter, goblin], scripted_roller([20]))

        ai.take_turn(battle, goblin)

        assert fighter.stats.hp < fighter.stats.max_hp
        assert goblin.position.as_tuple() == (4, 6)
        assert any(
            entry.message.startswith("Goblin Raider 1 hits Brom for")
            for entry in battle.events.entries
        )

    def test_miss_shows_dodge(
        self,
        make_battle: BattleFactory,
        make_player: EntityFactory,
        make_goblin: EntityFactory,
        scripted_roller: RollerFactory,
    ) -> None:
        """Test a natural 1 misses even against low AC."""
        fighter = make_player(position=(3, 7))
        goblin = make_goblin((3, 6))
        battle = make_battle([fighter, goblin], scripted_roller([1]))

        ai.take_turn(battle, goblin)

        assert fighter.stats.hp == fighter.stats.max_hp
        assert battle.events.popups[-1].label == "DODGE"
        assert battle.events.entries[-1].message == "Goblin Raider 1 misses Brom."

    def test_moves_when_far(
        self,
        make_battle: BattleFactory,
        make_player: EntityFactory,
        make_goblin: EntityFactory,
        scripted_roller: RollerFactory,
    ) -> None:
        """Test a distant enemy takes one step."""
        fighter = make_player(position=(3, 7))
        goblin = make_goblin((3, 2))
        battle = make_battle([fighter, goblin], scripted_roller())

        ai.take_turn(battle, goblin)

        assert goblin.position.chebyshev(fighter.position) == 4
        assert fighter.stats.hp == fighter.stats.max_hp

    def test_boxed_in_stays_put(
        self,
        make_battle: BattleFactory,
        make_player: EntityFactory,
        make_goblin: EntityFactory,
        scripted_roller: RollerFactory,
        open_arena: list[BattleCell],
    ) -> None:
        """Test an enemy with no path does nothing."""
        for cell in open_arena:
            if max(abs(cell.x - 1), abs(cell.z - 1)) == 1:
                cell.is_obstacle = True
        fighter = make_player(position=(6, 6))
        goblin = make_goblin((1, 1))
        battle = make_battle([fighter, goblin], scripted_roller(), battle_map=open_arena)

        ai.take_turn(battle, goblin)

        assert goblin.position.as_tuple() == (1, 1)
