"""Turn-based tactical battle engine.

A ``BattleEngine`` owns the combatants of one encounter from setup until
an outcome is reached. Players drive it through ``select_action``,
``select_spell``, ``interact_tile`` (first click selects, second click
confirms), ``use_item`` and ``attempt_run``; enemy turns run themselves
through the scheduler after a short thinking pause. The persistent party
is never touched here: the session folds the battle copies back once the
outcome is known.

Turn flow::

    AWAITING_ACTION --select MOVE/ATTACK/MAGIC--> AWAITING_TARGET
    AWAITING_TARGET --confirm tile--> resolution --> AWAITING_ACTION
    WAIT / failed RUN --> next living combatant
    enemy turn: ENEMY_TURN --think--> act --end turn--> next combatant
    last enemy or last player down --settle--> ENDED
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from functools import partial

from arcadia_tactics.core.config import Settings, get_settings
from arcadia_tactics.core.constants import (
    BASE_STATS,
    DIFFICULTY_SETTINGS,
    ENEMY_SPAWNS,
    MAX_LEVEL,
    PARTY_SPAWNS,
    DifficultyProfile,
)
from arcadia_tactics.core.exceptions import CombatError, InvalidGameStateError
from arcadia_tactics.core.logging import get_logger
from arcadia_tactics.engine import ai
from arcadia_tactics.engine.dice import DiceRoller
from arcadia_tactics.engine.progression import apply_consumable
from arcadia_tactics.engine.rules import (
    apply_equipment,
    movement_tiles,
    natural_attack,
    roll_initiative,
    spell_amount,
    weapon_attack,
)
from arcadia_tactics.engine.scheduler import Scheduler
from arcadia_tactics.models.catalog import (
    CLASS_SPELLS,
    GOBLIN_RAIDER,
    NORMAL_LOOT,
    SHADOW_LOOT,
    SHADOWLING,
    SPELLS,
    EnemyTemplate,
    get_item,
)
from arcadia_tactics.models.entities import (
    Attributes,
    BattleEntity,
    CombatStats,
    Entity,
    GridPosition,
    Item,
    Spell,
    SpellSlots,
)
from arcadia_tactics.models.enums import (
    BattleAction,
    BattleOutcome,
    CharacterClass,
    Difficulty,
    Dimension,
    EntityType,
    LogCategory,
    PopupKind,
    SpellType,
    TerrainType,
    TurnPhase,
    WeatherType,
)
from arcadia_tactics.models.events import EventLog
from arcadia_tactics.models.world import BattleCell, GridCoord
from arcadia_tactics.world.arena import generate_arena


logger = get_logger(__name__)

BATTLE_TAG = "battle"
DEFAULT_PARTY_SPAWN: GridCoord = (3, 7)
DEFAULT_ENEMY_SPAWN: GridCoord = (4, 2)

BASE_XP = 100
XP_PER_LEVEL = 50
BASE_GOLD_MIN = 15
BASE_GOLD_MAX = 30
GOLD_MIN_PER_LEVEL = 5
GOLD_MAX_PER_LEVEL = 10


@dataclass
class BattleRewards:
    """Spoils of a won encounter, rolled when the encounter is set up.

    Attributes:
        xp: Experience granted to every surviving party member.
        gold: Gold added to the purse.
        items: Loot added to the inventory.
    """

    xp: int = 0
    gold: int = 0
    items: list[Item] = field(default_factory=list)


# =============================================================================
# Encounter Setup
# =============================================================================


def average_party_level(party: Sequence[Entity]) -> int:
    if not party:
        return 1
    return sum(member.stats.level for member in party) // len(party)


def roll_enemy_level(average_level: int, roller: DiceRoller) -> int:
    """Party average level give or take one."""
    return min(MAX_LEVEL, max(1, average_level + roller.randint(-1, 1)))


def roll_enemy_count(average_level: int, *, shadow: bool, roller: DiceRoller) -> int:
    """Seasoned parties (average level 3+) always face a full group."""
    if average_level >= 3:
        return 3 if shadow else 2
    if shadow:
        return 2
    return roller.randint(1, 2)


def enemy_template(dimension: Dimension) -> EnemyTemplate:
    return SHADOWLING if dimension is Dimension.SHADOW else GOBLIN_RAIDER


def spawn_enemies(
    template: EnemyTemplate,
    level: int,
    count: int,
    profile: DifficultyProfile,
) -> list[BattleEntity]:
    """Scale ``template`` to ``level`` and place ``count`` copies on the enemy spawns.

    HP grows per level and is multiplied by the difficulty's enemy stat
    modifier; AC rises by one every two levels.
    """
    hp = max(1, int((template.base_hp + (level - 1) * template.hp_per_level) * profile.enemy_stat_mod))
    ac = template.base_ac + (level - 1) // 2
    attributes = Attributes.from_scores(BASE_STATS[CharacterClass.FIGHTER])

    enemies: list[BattleEntity] = []
    for index in range(count):
        x, y = ENEMY_SPAWNS[index] if index < len(ENEMY_SPAWNS) else DEFAULT_ENEMY_SPAWN
        enemies.append(
            BattleEntity(
                id=f"enemy_{index + 1}",
                name=f"{template.name} {index + 1}",
                entity_type=EntityType.ENEMY,
                stats=CombatStats(
                    level=level,
                    xp_to_next_level=0,
                    hp=hp,
                    max_hp=hp,
                    ac=ac,
                    initiative_bonus=template.initiative_bonus,
                    attributes=attributes.model_copy(),
                    base_attributes=attributes.model_copy(),
                    spell_slots=SpellSlots(),
                ),
                position=GridPosition(x=x, y=y),
                natural_attack=template.attack,
            )
        )
    return enemies


def roll_rewards(
    level: int,
    count: int,
    profile: DifficultyProfile,
    roller: DiceRoller,
    *,
    dimension: Dimension,
    loot_chance: float,
) -> BattleRewards:
    """Experience, gold and loot for defeating ``count`` enemies of ``level``."""
    xp = int((BASE_XP + (level - 1) * XP_PER_LEVEL) * count * profile.xp_mod)
    gold_min = BASE_GOLD_MIN + (level - 1) * GOLD_MIN_PER_LEVEL
    gold_max = BASE_GOLD_MAX + (level - 1) * GOLD_MAX_PER_LEVEL
    gold = int(roller.uniform(gold_min, gold_max) * profile.gold_mod)

    table = SHADOW_LOOT if dimension is Dimension.SHADOW else NORMAL_LOOT
    items = [get_item(roller.choice(table)) for _ in range(count) if roller.chance(loot_chance)]
    return BattleRewards(xp=xp, gold=gold, items=items)


def deploy_party(party: Sequence[Entity]) -> list[BattleEntity]:
    """Battle copies of the living party members on the party spawns.

    Spawn points follow party order, so a fallen member leaves its spawn empty.
    """
    deployed: list[BattleEntity] = []
    for index, member in enumerate(party):
        if not member.is_alive:
            continue
        x, y = PARTY_SPAWNS[index] if index < len(PARTY_SPAWNS) else DEFAULT_PARTY_SPAWN
        combatant = BattleEntity.from_entity(member, GridPosition(x=x, y=y))
        apply_equipment(combatant)
        deployed.append(combatant)
    return deployed


# =============================================================================
# Battle Engine
# =============================================================================


class BattleEngine:
    """State machine for one tactical encounter.

    Illegal inputs (wrong turn, tile out of range, action already spent)
    are declined: the method returns ``False`` and nothing changes.

    Attributes:
        entities: Every combatant, party copies first.
        battle_map: The 8x8 arena.
        turn_order: Entity ids in initiative order.
        current_index: Index into ``turn_order`` of the acting combatant.
        phase: Where the current turn stands.
        outcome: Final result once the battle has ended.
        pending_outcome: Result waiting out the settle delay.
        rewards: What a victory pays out.
        run_available: Whether fleeing is on offer this encounter.
    """

    def __init__(
        self,
        entities: Iterable[BattleEntity],
        *,
        battle_map: Sequence[BattleCell],
        roller: DiceRoller,
        events: EventLog | None = None,
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
        terrain: TerrainType = TerrainType.GRASS,
        weather: WeatherType = WeatherType.NONE,
        rewards: BattleRewards | None = None,
        enemy_level: int = 1,
        run_available: bool = True,
        on_outcome: Callable[[BattleOutcome], None] | None = None,
    ) -> None:
        self.entities: list[BattleEntity] = list(entities)
        self.battle_map: list[BattleCell] = list(battle_map)
        self.roller = roller
        self.events = events if events is not None else EventLog()
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.settings = settings if settings is not None else get_settings()
        self.terrain = terrain
        self.weather = weather
        self.rewards = rewards if rewards is not None else BattleRewards()
        self.enemy_level = enemy_level
        self.run_available = run_available
        self.on_outcome = on_outcome

        self._cells: dict[GridCoord, BattleCell] = {cell.coord: cell for cell in self.battle_map}
        self.turn_order: list[str] = []
        self.current_index = 0
        self.phase = TurnPhase.AWAITING_ACTION
        self.selected_action: BattleAction | None = None
        self.selected_spell: Spell | None = None
        self.selected_tile: GridCoord | None = None
        self.has_moved = False
        self.has_acted = False
        self.pending_outcome: BattleOutcome | None = None
        self.outcome: BattleOutcome | None = None

    @classmethod
    def from_party(
        cls,
        party: Sequence[Entity],
        *,
        dimension: Dimension,
        difficulty: Difficulty,
        roller: DiceRoller,
        events: EventLog | None = None,
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
        terrain: TerrainType = TerrainType.GRASS,
        weather: WeatherType = WeatherType.NONE,
        on_outcome: Callable[[BattleOutcome], None] | None = None,
    ) -> BattleEngine:
        """Set up an encounter for ``party`` in ``dimension``.

        Rolls the enemy level, builds the arena, spawns the enemies and
        rolls the rewards. Call ``start`` to roll initiative. Fleeing is
        only offered when the enemies outlevel the party average.

        Raises:
            CombatError: If no party member is able to fight.
        """
        settings = settings if settings is not None else get_settings()
        combatants = deploy_party(party)
        if not combatants:
            raise CombatError("No party member is able to fight")

        profile = DIFFICULTY_SETTINGS[difficulty]
        shadow = dimension is Dimension.SHADOW
        average = average_party_level(party)
        level = roll_enemy_level(average, roller)
        battle_map = generate_arena(roller.rng)
        count = roll_enemy_count(average, shadow=shadow, roller=roller)
        rewards = roll_rewards(
            level,
            count,
            profile,
            roller,
            dimension=dimension,
            loot_chance=settings.combat.loot_chance,
        )
        combatants.extend(spawn_enemies(enemy_template(dimension), level, count, profile))

        return cls(
            combatants,
            battle_map=battle_map,
            roller=roller,
            events=events,
            scheduler=scheduler,
            settings=settings,
            terrain=terrain,
            weather=weather,
            rewards=rewards,
            enemy_level=level,
            run_available=average < level,
            on_outcome=on_outcome,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def is_over(self) -> bool:
        """True once an outcome is reached or waiting to settle."""
        return self.outcome is not None or self.pending_outcome is not None

    @property
    def current_actor(self) -> BattleEntity | None:
        if not self.turn_order:
            return None
        return self.entity(self.turn_order[self.current_index])

    @property
    def players(self) -> list[BattleEntity]:
        return [e for e in self.entities if e.entity_type == EntityType.PLAYER]

    @property
    def enemies(self) -> list[BattleEntity]:
        return [e for e in self.entities if e.entity_type == EntityType.ENEMY]

    def entity(self, entity_id: str) -> BattleEntity | None:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def entity_at(self, coord: GridCoord) -> BattleEntity | None:
        """The living combatant standing on ``coord``."""
        for entity in self.entities:
            if entity.is_alive and entity.position.as_tuple() == coord:
                return entity
        return None

    def cell(self, coord: GridCoord) -> BattleCell | None:
        return self._cells.get(coord)

    def occupied(self, *, exclude: str | None = None) -> set[GridCoord]:
        """Tiles held by living combatants."""
        return {
            entity.position.as_tuple()
            for entity in self.entities
            if entity.is_alive and entity.id != exclude
        }

    def known_spells(self, entity: Entity) -> tuple[str, ...]:
        if entity.stats.character_class is None:
            return ()
        return CLASS_SPELLS.get(entity.stats.character_class, ())

    # -------------------------------------------------------------------------
    # Turn Flow
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Roll initiative and hand the first turn out.

        Raises:
            InvalidGameStateError: If initiative has already been rolled.
        """
        if self.turn_order:
            raise InvalidGameStateError(
                "Battle already started",
                current_state=self.phase.value,
            )
        scores = roll_initiative(self.entities, self.roller)
        self.turn_order = [entity_id for entity_id, _ in scores]
        self.current_index = 0
        enemy_count = len(self.enemies)
        self.events.log(
            f"Encounter! {enemy_count} enemies (Lv {self.enemy_level}).",
            LogCategory.COMBAT,
        )
        logger.info(
            "Battle started",
            terrain=self.terrain.value,
            enemies=enemy_count,
            enemy_level=self.enemy_level,
            turn_order=self.turn_order,
        )
        actor = self.current_actor
        if actor is not None and not actor.is_alive:
            self.advance_turn()
        else:
            self._begin_turn()

    def advance_turn(self) -> None:
        """Pass the turn to the next living combatant, wrapping around.

        Does nothing once an outcome is reached or pending.
        """
        if self.is_over or not self.turn_order:
            return
        size = len(self.turn_order)
        for step in range(1, size + 1):
            index = (self.current_index + step) % size
            candidate = self.entity(self.turn_order[index])
            if candidate is not None and candidate.is_alive:
                break
        else:
            return

        self.current_index = index
        self._begin_turn()

    def _begin_turn(self) -> None:
        self.has_moved = False
        self.has_acted = False
        self.selected_action = None
        self.selected_spell = None
        self.selected_tile = None

        actor = self.current_actor
        if actor is None:
            return
        if actor.entity_type == EntityType.PLAYER:
            self.phase = TurnPhase.AWAITING_ACTION
            self.events.log(f"{actor.name}'s turn.", LogCategory.INFO)
            return

        self.phase = TurnPhase.ENEMY_TURN
        self.scheduler.schedule(
            self.settings.pacing.ai_think_ticks,
            partial(self._run_enemy_turn, actor.id),
            tag=BATTLE_TAG,
        )

    def _run_enemy_turn(self, enemy_id: str) -> None:
        actor = self.current_actor
        if self.is_over or actor is None or actor.id != enemy_id:
            return
        ai.take_turn(self, actor)
        if not self.is_over:
            self.scheduler.schedule(
                self.settings.pacing.ai_end_turn_ticks,
                self.advance_turn,
                tag=BATTLE_TAG,
            )

    def _active_player(self) -> BattleEntity | None:
        if self.is_over or self.phase == TurnPhase.ENEMY_TURN:
            return None
        actor = self.current_actor
        if actor is None or actor.entity_type != EntityType.PLAYER or not actor.is_alive:
            return None
        return actor

    def _decline(self, reason: str, **context: object) -> bool:
        logger.debug("Battle input declined", reason=reason, **context)
        return False

    def _finish_action(self) -> None:
        self.selected_action = None
        self.selected_spell = None
        self.selected_tile = None
        if not self.is_over:
            self.phase = TurnPhase.AWAITING_ACTION

    # -------------------------------------------------------------------------
    # Player Input
    # -------------------------------------------------------------------------

    def select_action(self, action: BattleAction) -> bool:
        """Choose what the active player does next.

        WAIT ends the turn and RUN attempts to flee straight away. MOVE,
        ATTACK and MAGIC wait for a target tile; ITEM waits for
        ``use_item``.
        """
        actor = self._active_player()
        if actor is None:
            return self._decline("not a player turn", action=action.value)

        if action == BattleAction.WAIT:
            self.events.log(f"{actor.name} waits.", LogCategory.INFO)
            self.advance_turn()
            return True
        if action == BattleAction.RUN:
            return self.attempt_run()
        if action == BattleAction.MOVE and self.has_moved:
            return self._decline("already moved", actor=actor.id)
        if action in (BattleAction.ATTACK, BattleAction.MAGIC, BattleAction.ITEM) and self.has_acted:
            return self._decline("already acted", actor=actor.id)
        if action == BattleAction.MAGIC and not self.known_spells(actor):
            return self._decline("no spells known", actor=actor.id)

        self.selected_action = action
        self.selected_spell = None
        self.selected_tile = None
        self.phase = TurnPhase.AWAITING_ACTION if action == BattleAction.ITEM else TurnPhase.AWAITING_TARGET
        return True

    def select_spell(self, spell_id: str) -> bool:
        """Ready one of the active player's spells; implies MAGIC."""
        actor = self._active_player()
        if actor is None:
            return self._decline("not a player turn", spell=spell_id)
        if self.has_acted:
            return self._decline("already acted", actor=actor.id)
        if spell_id not in self.known_spells(actor):
            return self._decline("spell not known", actor=actor.id, spell=spell_id)

        spell = SPELLS[spell_id]
        self.selected_action = BattleAction.MAGIC
        self.selected_spell = spell
        self.selected_tile = None
        self.phase = TurnPhase.AWAITING_TARGET
        self.events.log(f"{actor.name} readies {spell.name}.", LogCategory.INFO)
        return True

    def interact_tile(self, x: int, z: int) -> bool:
        """Click a tile: the first click selects it, a second click confirms.

        Returns:
            True if the click selected the tile or resolved an action.
        """
        actor = self._active_player()
        if actor is None:
            return self._decline("not a player turn", tile=(x, z))
        coord = (x, z)
        if coord not in self._cells:
            return self._decline("tile outside the arena", tile=coord)
        if self.selected_tile != coord:
            self.selected_tile = coord
            return True

        if self.selected_action == BattleAction.MOVE:
            resolved = self._move(actor, coord)
        elif self.selected_action == BattleAction.ATTACK:
            resolved = self._attack(actor, coord)
        elif self.selected_action == BattleAction.MAGIC:
            resolved = self._cast(actor, coord)
        else:
            resolved = self._decline("no targeted action selected", tile=coord)
        if not resolved:
            self.selected_tile = None
        return resolved

    def use_item(self, item: Item) -> int | None:
        """Apply a consumable to the active player; this is the turn's act.

        Returns:
            The effect amount, or ``None`` if declined. Removing the item
            from the inventory is left to the caller.
        """
        actor = self._active_player()
        if actor is None:
            self._decline("not a player turn", item=item.id)
            return None
        if self.has_acted:
            self._decline("already acted", actor=actor.id)
            return None
        if not item.is_consumable:
            self._decline("item is not consumable", item=item.id)
            return None

        amount = apply_consumable(actor, item, self.roller)
        self.events.popup(actor.position, amount=amount, kind=PopupKind.HEAL)
        self.events.log(f"{actor.name} used {item.name}. (+{amount})", LogCategory.ROLL)
        self.has_acted = True
        self._finish_action()
        return amount

    def attempt_run(self) -> bool:
        """Try to flee. Success ends the battle at once; failure ends the turn."""
        actor = self._active_player()
        if actor is None:
            return self._decline("not a player turn", action=BattleAction.RUN.value)
        if not self.run_available:
            return self._decline("no escape from this fight", actor=actor.id)
        if self.roller.chance(self.settings.combat.flee_chance):
            self.events.log("Escaped!", LogCategory.NARRATIVE)
            self._finalize(BattleOutcome.FLED)
        else:
            self.events.log("Failed escape!", LogCategory.COMBAT)
            self.advance_turn()
        return True

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _move(self, actor: BattleEntity, coord: GridCoord) -> bool:
        if self.has_moved:
            return self._decline("already moved", actor=actor.id)
        cell = self._cells[coord]
        target = GridPosition(x=coord[0], y=coord[1])
        if cell.is_obstacle:
            return self._decline("tile is blocked", tile=coord)
        if actor.position.chebyshev(target) > movement_tiles(actor.stats.speed):
            return self._decline("tile out of reach", tile=coord)
        if self.entity_at(coord) is not None:
            return self._decline("tile occupied", tile=coord)

        actor.position = target
        self.has_moved = True
        self.events.log(f"{actor.name} moves to ({coord[0]}, {coord[1]}).", LogCategory.INFO)
        self._finish_action()
        return True

    def _attack(self, actor: BattleEntity, coord: GridCoord) -> bool:
        if self.has_acted:
            return self._decline("already acted", actor=actor.id)
        target = self.entity_at(coord)
        if target is None or target.entity_type != EntityType.ENEMY:
            return self._decline("no enemy on tile", tile=coord)
        if actor.position.chebyshev(target.position) > 1:
            return self._decline("target out of reach", tile=coord)

        result = weapon_attack(actor, target.stats.ac, self.roller)
        roll_text = f"({result.natural}+{result.attack_bonus} vs AC {result.target_ac})"
        self.has_acted = True
        if result.hit:
            if result.critical:
                self.events.log(f"{actor.name} scores a CRITICAL HIT!", LogCategory.COMBAT)
            self.events.log(
                f"{actor.name} hits for {result.damage} damage! {roll_text}",
                LogCategory.COMBAT,
            )
            self._finish_action()
            self.apply_damage(target, result.damage, is_crit=result.critical)
        else:
            self.events.log(f"{actor.name} misses! {roll_text}", LogCategory.COMBAT)
            self.events.popup(
                target.position,
                label="FUMBLE" if result.fumble else "MISS",
                kind=PopupKind.MISS,
            )
            self._finish_action()
        return True

    def _cast(self, actor: BattleEntity, coord: GridCoord) -> bool:
        spell = self.selected_spell
        if spell is None:
            return self._decline("no spell selected", actor=actor.id)
        if self.has_acted:
            return self._decline("already acted", actor=actor.id)
        target = self.entity_at(coord)
        wanted = EntityType.PLAYER if spell.spell_type == SpellType.HEAL else EntityType.ENEMY
        if target is None or target.entity_type != wanted:
            return self._decline("no valid spell target", tile=coord, spell=spell.id)
        if actor.position.chebyshev(target.position) > spell.range:
            return self._decline("target out of range", tile=coord, spell=spell.id)
        if not spell.is_cantrip and actor.stats.spell_slots.current <= 0:
            self.events.log(f"{actor.name} has no spell slots!", LogCategory.COMBAT)
            return False

        self.events.log(f"{actor.name} casts {spell.name}!", LogCategory.COMBAT)
        amount = spell_amount(actor, spell, self.roller)
        if not spell.is_cantrip:
            actor.stats.spell_slots.current -= 1
        self.has_acted = True
        self._finish_action()

        if spell.spell_type == SpellType.HEAL:
            target.stats.hp = min(target.stats.max_hp, target.stats.hp + amount)
            self.events.log(f"Healed {amount} HP.", LogCategory.ROLL)
            self.events.popup(target.position, amount=amount, kind=PopupKind.HEAL)
        else:
            self.events.log(f"Dealt {amount} damage.", LogCategory.COMBAT)
            self.apply_damage(target, amount)
        return True

    def enemy_attack(self, attacker: BattleEntity, target: BattleEntity) -> None:
        """Resolve a monster's attack against ``target``."""
        result = natural_attack(attacker, target.stats.ac, self.roller)
        if result.hit:
            self.events.log(
                f"{attacker.name} hits {target.name} for {result.damage} damage!",
                LogCategory.COMBAT,
            )
            self.apply_damage(target, result.damage, is_crit=result.critical)
        else:
            self.events.log(f"{attacker.name} misses {target.name}.", LogCategory.COMBAT)
            self.events.popup(target.position, label="DODGE", kind=PopupKind.MISS)

    def move_entity(self, entity: BattleEntity, coord: GridCoord) -> bool:
        """Step a combatant onto a free, open tile (used by the enemy AI)."""
        cell = self._cells.get(coord)
        if cell is None or cell.is_obstacle or self.entity_at(coord) is not None:
            return False
        entity.position = GridPosition(x=coord[0], y=coord[1])
        return True

    def apply_damage(self, target: BattleEntity, amount: int, *, is_crit: bool = False) -> None:
        """Reduce ``target``'s HP (never below 0) and check for an outcome.

        A kill that leaves one side empty sets ``pending_outcome`` at once,
        so no further turn is processed; the outcome itself is final after
        the settle delay.
        """
        target.stats.hp = max(0, target.stats.hp - amount)
        self.events.popup(target.position, amount=amount, kind=PopupKind.DAMAGE, is_crit=is_crit)
        if target.stats.hp > 0:
            return
        self.events.log(f"{target.name} defeated!", LogCategory.NARRATIVE)
        self._check_outcome()

    def _check_outcome(self) -> None:
        if self.is_over:
            return
        if not any(enemy.is_alive for enemy in self.enemies):
            outcome = BattleOutcome.VICTORY
        elif not any(player.is_alive for player in self.players):
            outcome = BattleOutcome.DEFEAT
        else:
            return

        self.pending_outcome = outcome
        self.selected_action = None
        self.selected_tile = None
        self.scheduler.cancel(BATTLE_TAG)
        self.scheduler.schedule(
            self.settings.pacing.settle_ticks,
            partial(self._finalize, outcome),
            tag=BATTLE_TAG,
        )

    def _finalize(self, outcome: BattleOutcome) -> None:
        if self.outcome is not None:
            return
        self.outcome = outcome
        self.pending_outcome = None
        self.phase = TurnPhase.ENDED
        self.selected_action = None
        self.selected_spell = None
        self.selected_tile = None
        self.scheduler.cancel(BATTLE_TAG)
        logger.info("Battle ended", outcome=outcome.value, enemy_level=self.enemy_level)
        if self.on_outcome is not None:
            self.on_outcome(outcome)


__all__ = [
    "BATTLE_TAG",
    "BattleRewards",
    "average_party_level",
    "roll_enemy_level",
    "roll_enemy_count",
    "enemy_template",
    "spawn_enemies",
    "roll_rewards",
    "deploy_party",
    "BattleEngine",
]
