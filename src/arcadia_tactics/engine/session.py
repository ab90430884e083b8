"""Game session state machine.

``GameSession`` is the one mutable object a host talks to. It owns the
two overworld layers, the temporary town map, the party and its shared
inventory, and hands a ``BattleEngine`` the combat copies of the party for
the length of an encounter. Every public operation returns the events it
emitted; illegal inputs are declined and return an empty list.

Phases::

    CHARACTER_CREATION -> OVERWORLD <-> TOWN_EXPLORATION
    OVERWORLD -> BATTLE_TACTICAL -> BATTLE_VICTORY -> OVERWORLD
                                 -> BATTLE_DEFEAT  -> BATTLE_TACTICAL (restart)
                                                   -> CHARACTER_CREATION (quit)
                                 -> OVERWORLD (fled)
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from functools import partial, wraps
from typing import Any
from uuid import uuid4

from arcadia_tactics.core.config import Settings, get_settings
from arcadia_tactics.core.constants import DIFFICULTY_SETTINGS
from arcadia_tactics.core.exceptions import InvalidGameStateError, WorldGenerationError
from arcadia_tactics.core.logging import bind_context, clear_context, ensure_logging, get_logger
from arcadia_tactics.engine.battle import BattleEngine
from arcadia_tactics.engine.dice import DiceRoller, make_rng
from arcadia_tactics.engine.progression import (
    apply_consumable,
    award_experience,
    create_party,
    equip,
    fold_back,
    starting_inventory,
    unequip,
)
from arcadia_tactics.engine.scheduler import Scheduler
from arcadia_tactics.models.entities import Attributes, Entity, Inventory
from arcadia_tactics.models.enums import (
    BattleAction,
    BattleOutcome,
    CharacterClass,
    CharacterRace,
    Difficulty,
    Dimension,
    EquipmentSlot,
    GamePhase,
    LogCategory,
    PoiType,
    TerrainType,
    WeatherType,
)
from arcadia_tactics.models.events import EventLog, GameEvent
from arcadia_tactics.models.world import HexCell, HexCoord
from arcadia_tactics.world.generator import DualWorld, DualWorldGenerator
from arcadia_tactics.world.hexgrid import reveal
from arcadia_tactics.world.pathfinding import find_hex_path
from arcadia_tactics.world.town import generate_town, town_entrance


logger = get_logger(__name__)

MOVE_TAG = "overworld_move"
URBAN_TERRAIN = frozenset({TerrainType.VILLAGE, TerrainType.CASTLE, TerrainType.COBBLESTONE})
EXPLORATION_PHASES = frozenset({GamePhase.OVERWORLD, GamePhase.TOWN_EXPLORATION})


def returns_events(method: Callable[..., Any]) -> Callable[..., list[GameEvent]]:
    """Make a session operation return the events it emitted."""

    @wraps(method)
    def wrapper(self: GameSession, *args: Any, **kwargs: Any) -> list[GameEvent]:
        mark = self.events.mark()
        method(self, *args, **kwargs)
        return self.events.since(mark)

    return wrapper


class GameSession:
    """One playthrough: world, party, inventory and the active battle.

    Example:
        >>> session = GameSession(seed=7)
        >>> events = session.create_character("Aria", CharacterRace.ELF, CharacterClass.WIZARD)
        >>> session.phase
        <GamePhase.OVERWORLD: 'overworld'>
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize an empty session at character creation.

        Args:
            settings: Configuration; defaults to ``get_settings()``.
            seed: Seed for every random draw; falls back to the configured
                world seed, then to OS entropy.
            rng: Random source to use instead of building one from ``seed``.
        """
        self.settings = settings if settings is not None else get_settings()
        ensure_logging(self.settings)
        if seed is None:
            seed = self.settings.world.seed
        self.rng = rng if rng is not None else make_rng(seed)
        self.noise_seed = seed if seed is not None else self.rng.randrange(10_000)
        self.roller = DiceRoller(self.rng)
        self.events = EventLog()
        self.scheduler = Scheduler()
        self.session_id = uuid4().hex[:12]

        self.phase = GamePhase.CHARACTER_CREATION
        bind_context(session_id=self.session_id, phase=self.phase.value)
        self.difficulty = Difficulty(self.settings.game.default_difficulty)
        self.dimension = Dimension.NORMAL
        self.maps: dict[Dimension, list[HexCell]] = {Dimension.NORMAL: [], Dimension.SHADOW: []}
        self.town_map: list[HexCell] = []
        self.position: HexCoord = self.spawn
        self.last_overworld_position: HexCoord | None = None
        self.is_moving = False

        self.party: list[Entity] = []
        self.inventory = Inventory()
        self.battle: BattleEngine | None = None
        self.battle_terrain = TerrainType.GRASS
        self.battle_weather = WeatherType.NONE

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def spawn(self) -> HexCoord:
        return (self.settings.world.spawn_q, self.settings.world.spawn_r)

    @property
    def active_map(self) -> list[HexCell]:
        """Cells the party is currently walking on."""
        if self.phase == GamePhase.TOWN_EXPLORATION:
            return self.town_map
        return self.maps[self.dimension]

    @property
    def current_cell(self) -> HexCell | None:
        return self.cell_at(self.position)

    @property
    def standing_on_portal(self) -> bool:
        cell = self.current_cell
        return self.phase == GamePhase.OVERWORLD and cell is not None and cell.has_portal

    @property
    def standing_on_settlement(self) -> bool:
        cell = self.current_cell
        return (
            self.phase == GamePhase.OVERWORLD
            and cell is not None
            and cell.terrain.is_settlement
        )

    @property
    def leader(self) -> Entity | None:
        return self.party[0] if self.party else None

    def cell_at(self, coord: HexCoord) -> HexCell | None:
        for cell in self.active_map:
            if cell.coord == coord:
                return cell
        return None

    def member(self, member_id: str | None) -> Entity | None:
        """Party member by id; ``None`` picks the leader."""
        if member_id is None:
            return self.leader
        for entity in self.party:
            if entity.id == member_id:
                return entity
        return None

    def reveal_radius(self, dimension: Dimension | None = None) -> float:
        dimension = dimension or self.dimension
        if dimension is Dimension.SHADOW:
            return self.settings.world.shadow_reveal_radius
        return self.settings.world.reveal_radius

    def _decline(self, reason: str, **context: object) -> None:
        logger.debug("Session input declined", reason=reason, **context)

    def _set_phase(self, phase: GamePhase) -> None:
        if self.is_moving:
            self.scheduler.cancel(MOVE_TAG)
            self.is_moving = False
        logger.debug("Phase changed", old=self.phase.value, new=phase.value)
        self.phase = phase
        bind_context(phase=phase.value)

    # -------------------------------------------------------------------------
    # World and Character Creation
    # -------------------------------------------------------------------------

    @returns_events
    def initialize_world(self, normal: Sequence[HexCell], shadow: Sequence[HexCell]) -> None:
        """Install prebuilt overworld layers.

        Raises:
            InvalidGameStateError: If a party already exists.
            WorldGenerationError: If the layers are not cell-for-cell aligned.
        """
        if self.phase != GamePhase.CHARACTER_CREATION:
            raise InvalidGameStateError(
                "Worlds are installed before the party sets out",
                current_state=self.phase.value,
                expected_states=[GamePhase.CHARACTER_CREATION.value],
            )
        if len(normal) != len(shadow):
            raise WorldGenerationError(
                "Normal and shadow layers differ in size",
                details={"normal": len(normal), "shadow": len(shadow)},
            )
        self.maps = {Dimension.NORMAL: list(normal), Dimension.SHADOW: list(shadow)}
        self.dimension = Dimension.NORMAL

    def generate_world(self) -> DualWorld:
        """Generate and install both overworld layers for the current difficulty."""
        generator = DualWorldGenerator.from_settings(
            self.settings.world,
            seed=self.noise_seed,
            rng=self.rng,
            encounter_rate=DIFFICULTY_SETTINGS[self.difficulty].encounter_rate_mod,
        )
        world = generator.generate()
        self.initialize_world(world.normal, world.shadow)
        return world

    @returns_events
    def create_character(
        self,
        name: str,
        race: CharacterRace,
        character_class: CharacterClass,
        attributes: Attributes | None = None,
        difficulty: Difficulty | None = None,
    ) -> None:
        """Assemble the party and step onto the overworld.

        A world is generated first unless ``initialize_world`` installed one.
        """
        if self.phase != GamePhase.CHARACTER_CREATION:
            self._decline("party already exists")
            return
        if difficulty is not None:
            self.difficulty = difficulty
        if not self.maps[Dimension.NORMAL]:
            self.generate_world()

        self.party = create_party(name, race, character_class, attributes)
        self.inventory = starting_inventory(character_class)
        self.dimension = Dimension.NORMAL
        self.position = self.spawn
        self._set_phase(GamePhase.OVERWORLD)
        reveal(self.maps[Dimension.NORMAL], self.position, self.reveal_radius())

        companions = self.party[1:]
        self.events.log(
            f"The party assembles! {name} leads {companions[0].name} and {companions[1].name}.",
            LogCategory.NARRATIVE,
        )
        logger.info(
            "Session started",
            leader=name,
            character_class=character_class.value,
            difficulty=self.difficulty.value,
        )

    # -------------------------------------------------------------------------
    # Exploration
    # -------------------------------------------------------------------------

    @returns_events
    def move_overworld(self, q: int, r: int) -> None:
        """Walk the cheapest path to ``(q, r)``.

        The first step is taken at once and each further step after the
        configured pause. An unreachable goal changes nothing.
        """
        if self.phase not in EXPLORATION_PHASES or self.is_moving:
            self._decline("cannot move now", goal=(q, r))
            return
        if (q, r) == self.position:
            return
        path = find_hex_path(self.position, (q, r), self.active_map)
        if not path:
            self._decline("no path", start=self.position, goal=(q, r))
            return

        self.is_moving = True
        self._step_along(path, 0)

    def _step_along(self, path: list[HexCell], index: int) -> None:
        if self.phase not in EXPLORATION_PHASES:
            self.is_moving = False
            return
        cell = path[index]

        if self.phase == GamePhase.TOWN_EXPLORATION and cell.poi_type == PoiType.EXIT:
            self.is_moving = False
            self.exit_settlement()
            return

        self.position = cell.coord
        reveal(self.active_map, cell.coord, self.reveal_radius())

        if cell.has_portal:
            self.is_moving = False
            self.events.log("A portal shimmers underfoot.", LogCategory.NARRATIVE)
            return
        if (
            self.phase == GamePhase.OVERWORLD
            and cell.has_encounter
            and cell.terrain not in URBAN_TERRAIN
        ):
            self.is_moving = False
            if self._launch_battle(cell.terrain, cell.weather):
                cell.has_encounter = False
            return

        if index + 1 < len(path):
            self.scheduler.schedule(
                self.settings.pacing.overworld_step_ticks,
                partial(self._step_along, path, index + 1),
                tag=MOVE_TAG,
            )
        else:
            self.is_moving = False

    @returns_events
    def use_portal(self) -> None:
        """Hop to the other dimension at the same ``(q, r)``."""
        if not self.standing_on_portal:
            self._decline("no portal here")
            return
        self.scheduler.cancel(MOVE_TAG)
        self.is_moving = False
        self.dimension = self.dimension.other
        reveal(self.maps[self.dimension], self.position, self.reveal_radius())
        self.events.log("Dimension Hop!", LogCategory.NARRATIVE)
        logger.info("Dimension changed", dimension=self.dimension.value, position=self.position)

    @returns_events
    def enter_settlement(self) -> None:
        """Swap the overworld for a freshly generated town."""
        if not self.standing_on_settlement:
            self._decline("no settlement here")
            return
        self.last_overworld_position = self.position
        self.town_map = generate_town(self.rng)
        self._set_phase(GamePhase.TOWN_EXPLORATION)
        self.position = town_entrance()
        self.events.log("Entered settlement.", LogCategory.NARRATIVE)

    @returns_events
    def exit_settlement(self) -> None:
        """Return to the overworld cell the town was entered from."""
        if self.phase != GamePhase.TOWN_EXPLORATION or self.last_overworld_position is None:
            self._decline("not in a town")
            return
        self._set_phase(GamePhase.OVERWORLD)
        self.position = self.last_overworld_position
        self.last_overworld_position = None
        self.town_map = []
        self.events.log("Returned to the wild.", LogCategory.NARRATIVE)

    # -------------------------------------------------------------------------
    # Battle
    # -------------------------------------------------------------------------

    @returns_events
    def start_battle(self, terrain: TerrainType, weather: WeatherType = WeatherType.NONE) -> None:
        """Start an encounter on ``terrain`` from the overworld."""
        if self.phase != GamePhase.OVERWORLD:
            self._decline("battles start from the overworld")
            return
        self._launch_battle(terrain, weather)

    def _launch_battle(self, terrain: TerrainType, weather: WeatherType) -> bool:
        if not any(member.is_alive for member in self.party):
            self._decline("nobody can fight")
            return False
        self.battle_terrain = terrain
        self.battle_weather = weather
        self._set_phase(GamePhase.BATTLE_TACTICAL)
        self.battle = BattleEngine.from_party(
            self.party,
            dimension=self.dimension,
            difficulty=self.difficulty,
            roller=self.roller,
            events=self.events,
            scheduler=self.scheduler,
            settings=self.settings,
            terrain=terrain,
            weather=weather,
            on_outcome=self._on_battle_outcome,
        )
        self.battle.start()
        return True

    def _on_battle_outcome(self, outcome: BattleOutcome) -> None:
        battle = self.battle
        if battle is None:
            return
        if outcome == BattleOutcome.DEFEAT:
            self._set_phase(GamePhase.BATTLE_DEFEAT)
            self.events.log("The party has fallen...", LogCategory.NARRATIVE)
            return

        for member in self.party:
            combatant = battle.entity(member.id)
            if combatant is not None:
                fold_back(member, combatant)

        if outcome == BattleOutcome.VICTORY:
            self._set_phase(GamePhase.BATTLE_VICTORY)
        else:
            self.battle = None
            self._set_phase(GamePhase.OVERWORLD)

    @returns_events
    def select_action(self, action: BattleAction) -> None:
        if self.phase != GamePhase.BATTLE_TACTICAL or self.battle is None:
            self._decline("no battle", action=action.value)
            return
        self.battle.select_action(action)

    @returns_events
    def select_spell(self, spell_id: str) -> None:
        if self.phase != GamePhase.BATTLE_TACTICAL or self.battle is None:
            self._decline("no battle", spell=spell_id)
            return
        self.battle.select_spell(spell_id)

    @returns_events
    def interact_tile(self, x: int, z: int) -> None:
        if self.phase != GamePhase.BATTLE_TACTICAL or self.battle is None:
            self._decline("no battle", tile=(x, z))
            return
        self.battle.interact_tile(x, z)

    @returns_events
    def attempt_run(self) -> None:
        if self.phase != GamePhase.BATTLE_TACTICAL or self.battle is None:
            self._decline("no battle")
            return
        self.battle.attempt_run()

    @returns_events
    def continue_after_victory(self) -> None:
        """Pay out the rewards and return to the overworld.

        Fallen members gain no experience.
        """
        battle = self.battle
        if self.phase != GamePhase.BATTLE_VICTORY or battle is None:
            self._decline("no victory to collect")
            return
        rewards = battle.rewards
        for member in self.party:
            if not member.is_alive:
                continue
            levels = award_experience(member, rewards.xp, max_level=self.settings.game.max_level)
            if levels:
                self.events.log(
                    f"{member.name} reached level {member.stats.level}!",
                    LogCategory.LEVELUP,
                )
        for item in rewards.items:
            self.inventory.add(item)
        self.inventory.gold += rewards.gold

        self.events.log(
            f"Victory! Gained {rewards.xp} XP and {rewards.gold} gold.",
            LogCategory.NARRATIVE,
        )
        if rewards.items:
            found = ", ".join(item.name for item in rewards.items)
            self.events.log(f"Found: {found}.", LogCategory.NARRATIVE)
        self.battle = None
        self._set_phase(GamePhase.OVERWORLD)

    @returns_events
    def restart_battle(self) -> None:
        """Fight the lost encounter again on the same terrain and weather."""
        if self.phase != GamePhase.BATTLE_DEFEAT:
            self._decline("no lost battle to restart")
            return
        self.scheduler.cancel(MOVE_TAG)
        self._launch_battle(self.battle_terrain, self.battle_weather)

    @returns_events
    def quit_to_menu(self) -> None:
        """Abandon the run and go back to character creation."""
        self.scheduler.clear()
        self._set_phase(GamePhase.CHARACTER_CREATION)
        self.is_moving = False
        self.battle = None
        self.party = []
        self.inventory = Inventory()
        self.maps = {Dimension.NORMAL: [], Dimension.SHADOW: []}
        self.town_map = []
        self.dimension = Dimension.NORMAL
        self.position = self.spawn
        self.last_overworld_position = None
        self.events.clear()
        clear_context()
        bind_context(session_id=self.session_id, phase=self.phase.value)
        logger.info("Session reset")

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    @returns_events
    def consume_item(self, item_id: str, character_id: str | None = None) -> None:
        """Use a consumable.

        In battle it always targets the active player and counts as the
        turn's act; outside battle it targets ``character_id`` or the leader.
        """
        slot = self.inventory.find(item_id)
        if slot is None or not slot.item.is_consumable:
            self._decline("no such consumable", item=item_id)
            return
        item = slot.item

        if self.phase == GamePhase.BATTLE_TACTICAL and self.battle is not None:
            if self.battle.use_item(item) is not None:
                self.inventory.remove(item_id)
            return
        if self.phase == GamePhase.CHARACTER_CREATION or self.battle is not None:
            self._decline("items unavailable", item=item_id)
            return

        target = self.member(character_id)
        if target is None:
            self._decline("unknown party member", member=character_id)
            return
        amount = apply_consumable(target, item, self.roller)
        self.inventory.remove(item_id)
        self.events.log(f"{target.name} used {item.name}. (+{amount})", LogCategory.ROLL)

    @returns_events
    def equip_item(self, item_id: str, character_id: str | None = None) -> None:
        target = self._gear_target(character_id)
        if target is None:
            return
        item = self.inventory.find(item_id)
        if equip(target, self.inventory, item_id) and item is not None:
            self.events.log(f"{target.name} equips {item.item.name}.", LogCategory.INFO)

    @returns_events
    def unequip_item(self, slot: EquipmentSlot, character_id: str | None = None) -> None:
        target = self._gear_target(character_id)
        if target is None:
            return
        item = target.equipment.get(slot)
        if unequip(target, self.inventory, slot) and item is not None:
            self.events.log(f"{target.name} stows {item.name}.", LogCategory.INFO)

    def _gear_target(self, character_id: str | None) -> Entity | None:
        if self.phase not in EXPLORATION_PHASES:
            self._decline("gear can only change while exploring", member=character_id)
            return None
        target = self.member(character_id)
        if target is None:
            self._decline("unknown party member", member=character_id)
        return target

    # -------------------------------------------------------------------------
    # Time
    # -------------------------------------------------------------------------

    @returns_events
    def advance(self, ticks: int = 1) -> None:
        """Let ``ticks`` ticks of pacing time pass."""
        self.scheduler.advance(ticks)

    @returns_events
    def run_pending(self) -> None:
        """Let time pass until nothing is scheduled."""
        self.scheduler.run_pending()


__all__ = [
    "MOVE_TAG",
    "URBAN_TERRAIN",
    "GameSession",
]
