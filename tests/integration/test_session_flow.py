"""Integration tests for overworld exploration through a GameSession."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from arcadia_tactics.core.config import Settings
from arcadia_tactics.core.exceptions import InvalidGameStateError, WorldGenerationError
from arcadia_tactics.engine.session import GameSession
from arcadia_tactics.models.catalog import get_item
from arcadia_tactics.models.enums import (
    CharacterClass,
    CharacterRace,
    Dimension,
    GamePhase,
    TerrainType,
)
from arcadia_tactics.models.events import GameEvent, LogEntry
from arcadia_tactics.models.world import HexCell


HexMapFactory = Callable[[list[str]], list[HexCell]]

OPEN_ROWS = ["." * 8] * 8


def _messages(events: list[GameEvent]) -> list[str]:
    return [event.message for event in events if isinstance(event, LogEntry)]


def _cell(cells: list[HexCell], coord: tuple[int, int]) -> HexCell:
    return next(cell for cell in cells if cell.coord == coord)


@pytest.fixture
def start_session(hex_map: HexMapFactory) -> Callable[..., GameSession]:
    """Provide a factory for a session on handcrafted maps with a Fighter party."""

    def factory(
        normal_rows: list[str] = OPEN_ROWS,
        shadow_rows: list[str] = OPEN_ROWS,
        *,
        settings: Settings | None = None,
    ) -> GameSession:
        session = GameSession(settings=settings or Settings(), seed=11)
        session.initialize_world(hex_map(normal_rows), hex_map(shadow_rows))
        session.create_character("Brom", CharacterRace.HUMAN, CharacterClass.FIGHTER)
        return session

    return factory


class TestCharacterCreation:
    """Tests for assembling the party."""

    def test_party_assembles(self, hex_map: HexMapFactory) -> None:
        """Test the party, supplies and spawn after creation."""
        session = GameSession(settings=Settings(), seed=1)
        session.initialize_world(hex_map(OPEN_ROWS), hex_map(OPEN_ROWS))

        events = session.create_character("Brom", CharacterRace.HUMAN, CharacterClass.FIGHTER)

        assert _messages(events) == ["The party assembles! Brom leads Elara and Zan."]
        assert session.phase == GamePhase.OVERWORLD
        assert session.position == (5, 5)
        assert [member.id for member in session.party] == [
            "player_leader",
            "comp_elara",
            "comp_zan",
        ]
        assert session.inventory.quantity_of("potion_healing") == 3
        assert _cell(session.maps[Dimension.NORMAL], (5, 5)).is_visible

    def test_second_creation_declined(self, start_session: Callable[..., GameSession]) -> None:
        """Test a running session ignores character creation."""
        session = start_session()

        events = session.create_character("Other", CharacterRace.ELF, CharacterClass.WIZARD)

        assert events == []
        assert session.leader is not None and session.leader.name == "Brom"

    def test_misaligned_layers_rejected(self, hex_map: HexMapFactory) -> None:
        """Test both layers must have the same cells."""
        session = GameSession(settings=Settings(), seed=1)

        with pytest.raises(WorldGenerationError):
            session.initialize_world(hex_map(OPEN_ROWS), hex_map(["..."]))

    def test_world_locked_after_creation(
        self,
        start_session: Callable[..., GameSession],
        hex_map: HexMapFactory,
    ) -> None:
        """Test layers cannot be swapped under a party that has set out."""
        session = start_session()
        before = session.maps[Dimension.NORMAL]

        with pytest.raises(InvalidGameStateError):
            session.initialize_world(hex_map(OPEN_ROWS), hex_map(OPEN_ROWS))
        assert session.maps[Dimension.NORMAL] is before

    def test_generated_world(self) -> None:
        """Test a session generates a world when none was installed."""
        session = GameSession(settings=Settings(), seed=21)

        session.create_character("Aria", CharacterRace.ELF, CharacterClass.WIZARD)

        assert len(session.maps[Dimension.NORMAL]) == 20 * 15
        assert len(session.maps[Dimension.SHADOW]) == 20 * 15
        assert session.current_cell is not None


class TestOverworldMovement:
    """Tests for walking the hex map."""

    def test_steps_follow_pacing(self, start_session: Callable[..., GameSession]) -> None:
        """Test the first step is immediate and the rest wait for ticks."""
        session = start_session()

        session.move_overworld(7, 5)

        assert session.position == (6, 5)
        assert session.is_moving

        session.advance(1)

        assert session.position == (7, 5)
        assert not session.is_moving
        assert _cell(session.maps[Dimension.NORMAL], (7, 5)).is_explored

    def test_water_goal_changes_nothing(self, start_session: Callable[..., GameSession]) -> None:
        """Test an unreachable goal leaves the party where it was."""
        rows = list(OPEN_ROWS)
        rows[5] = "......~."
        session = start_session(rows)

        events = session.move_overworld(6, 5)

        assert events == []
        assert session.position == (5, 5)
        assert not session.is_moving

    def test_move_declined_while_moving(self, start_session: Callable[..., GameSession]) -> None:
        """Test a new move waits for the current walk to finish."""
        session = start_session()
        session.move_overworld(7, 5)

        session.move_overworld(5, 6)
        session.run_pending()

        assert session.position == (7, 5)


class TestPortals:
    """Tests for dimension hopping."""

    def test_portal_hop_keeps_coordinates(self, start_session: Callable[..., GameSession]) -> None:
        """Test hopping swaps layers at the same (q, r)."""
        session = start_session()
        for dimension in Dimension:
            _cell(session.maps[dimension], (6, 5)).has_portal = True

        events = session.move_overworld(6, 5)
        assert "A portal shimmers underfoot." in _messages(events)

        events = session.use_portal()

        assert _messages(events) == ["Dimension Hop!"]
        assert session.dimension == Dimension.SHADOW
        assert session.position == (6, 5)
        assert _cell(session.maps[Dimension.SHADOW], (6, 5)).is_visible

        session.use_portal()
        assert session.dimension == Dimension.NORMAL

    def test_portal_stops_walk(self, start_session: Callable[..., GameSession]) -> None:
        """Test walking onto a portal halts the rest of the path."""
        session = start_session()
        _cell(session.maps[Dimension.NORMAL], (6, 5)).has_portal = True

        session.move_overworld(7, 5)
        session.run_pending()

        assert session.position == (6, 5)

    def test_no_portal(self, start_session: Callable[..., GameSession]) -> None:
        """Test hopping needs a portal underfoot."""
        session = start_session()

        assert session.use_portal() == []
        assert session.dimension == Dimension.NORMAL


class TestSettlements:
    """Tests for entering and leaving towns."""

    def test_enter_and_exit(self, start_session: Callable[..., GameSession]) -> None:
        """Test a town replaces the overworld and exiting restores the position."""
        rows = list(OPEN_ROWS)
        rows[5] = "......V."
        session = start_session(rows)
        session.move_overworld(6, 5)

        events = session.enter_settlement()

        assert _messages(events) == ["Entered settlement."]
        assert session.phase == GamePhase.TOWN_EXPLORATION
        assert session.position == (0, 6)
        assert len(session.active_map) == 12 * 12

        events = session.exit_settlement()

        assert _messages(events) == ["Returned to the wild."]
        assert session.phase == GamePhase.OVERWORLD
        assert session.position == (6, 5)
        assert session.town_map == []

    def test_walking_onto_exit_leaves_town(self, start_session: Callable[..., GameSession]) -> None:
        """Test stepping on a town's edge road returns to the overworld."""
        rows = list(OPEN_ROWS)
        rows[5] = ".....C.."
        session = start_session(rows)
        session.enter_settlement()

        session.move_overworld(1, 6)
        events = session.move_overworld(0, 6)

        assert "Returned to the wild." in _messages(events)
        assert session.phase == GamePhase.OVERWORLD
        assert session.position == (5, 5)

    def test_enter_needs_settlement(self, start_session: Callable[..., GameSession]) -> None:
        """Test grassland has no town to enter."""
        session = start_session()

        assert session.enter_settlement() == []
        assert session.phase == GamePhase.OVERWORLD


class TestEncounters:
    """Tests for random encounters while walking."""

    def test_encounter_starts_battle(self, start_session: Callable[..., GameSession]) -> None:
        """Test stepping on an encounter hex launches a battle and clears the hex."""
        session = start_session()
        cell = _cell(session.maps[Dimension.NORMAL], (6, 5))
        cell.has_encounter = True

        events = session.move_overworld(7, 5)

        assert session.phase == GamePhase.BATTLE_TACTICAL
        assert session.position == (6, 5)
        assert session.battle is not None
        assert not cell.has_encounter
        assert any(message.startswith("Encounter!") for message in _messages(events))

    def test_encounter_kept_when_nobody_can_fight(self, start_session: Callable[..., GameSession]) -> None:
        """Test a fallen party leaves the encounter hex armed."""
        session = start_session()
        for member in session.party:
            member.stats.hp = 0
        cell = _cell(session.maps[Dimension.NORMAL], (6, 5))
        cell.has_encounter = True

        session.move_overworld(7, 5)
        session.run_pending()

        assert session.phase == GamePhase.OVERWORLD
        assert session.battle is None
        assert session.position == (6, 5)
        assert cell.has_encounter

    def test_settlements_are_safe(self, start_session: Callable[..., GameSession]) -> None:
        """Test encounters never trigger on village hexes."""
        rows = list(OPEN_ROWS)
        rows[5] = "......V."
        session = start_session(rows)
        _cell(session.maps[Dimension.NORMAL], (6, 5)).has_encounter = True

        session.move_overworld(6, 5)

        assert session.phase == GamePhase.OVERWORLD


class TestInventory:
    """Tests for items outside battle."""

    def test_consume_heals_leader(self, start_session: Callable[..., GameSession]) -> None:
        """Test a ration heals the leader and leaves the inventory."""
        session = start_session()
        leader = session.party[0]
        leader.stats.hp = 5

        events = session.consume_item("ration")

        assert leader.stats.hp == 10
        assert session.inventory.quantity_of("ration") == 4
        assert _messages(events) == ["Brom used Travel Ration. (+5)"]

    def test_consume_targets_member(self, start_session: Callable[..., GameSession]) -> None:
        """Test a consumable can target a companion."""
        session = start_session()
        zan = session.member("comp_zan")
        assert zan is not None
        zan.stats.hp = 1

        session.consume_item("ration", "comp_zan")

        assert zan.stats.hp == min(zan.stats.max_hp, 6)

    def test_consume_missing_item(self, start_session: Callable[..., GameSession]) -> None:
        """Test items not held are declined."""
        session = start_session()

        assert session.consume_item("potion_greater_healing") == []

    def test_equip_while_exploring(self, start_session: Callable[..., GameSession]) -> None:
        """Test gear swaps on the overworld."""
        session = start_session()
        session.inventory.add(get_item("greatsword"))

        events = session.equip_item("greatsword")

        assert _messages(events) == ["Brom equips Greatsword."]
        assert session.inventory.quantity_of("longsword") == 1

        events = session.unequip_item(get_item("greatsword").equipment.slot)

        assert _messages(events) == ["Brom stows Greatsword."]

    def test_equip_blocked_in_battle(self, start_session: Callable[..., GameSession]) -> None:
        """Test gear cannot change during a battle."""
        session = start_session()
        session.inventory.add(get_item("greatsword"))
        session.start_battle(TerrainType.GRASS)

        assert session.equip_item("greatsword") == []
        assert session.party[0].main_hand is not None
        assert session.party[0].main_hand.id == "longsword"
