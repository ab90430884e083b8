"""Party creation, equipment, consumables and levelling.

Everything that changes a party member outside of a single attack lives
here. Functions mutate the ``Entity`` or ``Inventory`` they are given and
always finish with ``apply_equipment`` when a derived stat could change.
"""

from __future__ import annotations

from arcadia_tactics.core.constants import (
    BASE_STATS,
    CASTER_SLOTS,
    MAX_LEVEL,
    RACE_BONUS,
    xp_for_next_level,
)
from arcadia_tactics.core.logging import get_logger
from arcadia_tactics.engine.dice import DiceRoller
from arcadia_tactics.engine.rules import (
    apply_equipment,
    calculate_hp,
    hit_die_for,
    hp_gain_per_level,
    spell_slots_for,
)
from arcadia_tactics.models.catalog import get_item
from arcadia_tactics.models.entities import Attributes, CombatStats, Entity, Inventory, Item
from arcadia_tactics.models.enums import (
    Ability,
    CharacterClass,
    CharacterRace,
    EntityType,
    EquipmentSlot,
    ItemEffectType,
    PartyRole,
)


logger = get_logger(__name__)

LEADER_ID = "player_leader"

TANK_CLASSES = frozenset({CharacterClass.FIGHTER, CharacterClass.BARBARIAN, CharacterClass.PALADIN})
HEALER_CLASSES = frozenset({CharacterClass.CLERIC, CharacterClass.DRUID})

COMPANIONS: dict[PartyRole, tuple[tuple[str, CharacterRace, CharacterClass], ...]] = {
    PartyRole.TANK: (
        ("Elara", CharacterRace.HUMAN, CharacterClass.CLERIC),
        ("Zan", CharacterRace.ELF, CharacterClass.WIZARD),
    ),
    PartyRole.HEALER: (
        ("Thrumgar", CharacterRace.DWARF, CharacterClass.FIGHTER),
        ("Vex", CharacterRace.HUMAN, CharacterClass.ROGUE),
    ),
    PartyRole.DAMAGE: (
        ("Kael", CharacterRace.HUMAN, CharacterClass.PALADIN),
        ("Lira", CharacterRace.ELF, CharacterClass.DRUID),
    ),
}
"""Companions who join a leader, keyed by the leader's role."""

STARTING_GEAR: dict[CharacterClass, dict[EquipmentSlot, str]] = {
    CharacterClass.FIGHTER: {
        EquipmentSlot.MAIN_HAND: "longsword",
        EquipmentSlot.BODY: "chain_mail",
        EquipmentSlot.OFF_HAND: "shield",
    },
    CharacterClass.PALADIN: {
        EquipmentSlot.MAIN_HAND: "longsword",
        EquipmentSlot.BODY: "chain_mail",
        EquipmentSlot.OFF_HAND: "shield",
    },
    CharacterClass.BARBARIAN: {EquipmentSlot.MAIN_HAND: "greataxe"},
    CharacterClass.RANGER: {
        EquipmentSlot.MAIN_HAND: "shortsword",
        EquipmentSlot.OFF_HAND: "dagger",
        EquipmentSlot.BODY: "leather_armor",
    },
    CharacterClass.ROGUE: {
        EquipmentSlot.MAIN_HAND: "dagger",
        EquipmentSlot.BODY: "leather_armor",
    },
    CharacterClass.CLERIC: {
        EquipmentSlot.MAIN_HAND: "mace",
        EquipmentSlot.BODY: "chain_shirt",
        EquipmentSlot.OFF_HAND: "shield",
    },
}
"""Starting equipment by class; everyone else starts with a quarterstaff."""

DEFAULT_GEAR: dict[EquipmentSlot, str] = {EquipmentSlot.MAIN_HAND: "quarterstaff"}


# =============================================================================
# Party Creation
# =============================================================================


def party_role(character_class: CharacterClass) -> PartyRole:
    if character_class in TANK_CLASSES:
        return PartyRole.TANK
    if character_class in HEALER_CLASSES:
        return PartyRole.HEALER
    return PartyRole.DAMAGE


def default_attributes(character_class: CharacterClass, race: CharacterRace) -> Attributes:
    """Class standard array plus racial bonuses."""
    base = Attributes.from_scores(BASE_STATS[character_class])
    return base.with_bonuses(RACE_BONUS.get(race, {}))


def starting_equipment(character_class: CharacterClass) -> dict[EquipmentSlot, Item]:
    gear = STARTING_GEAR.get(character_class, DEFAULT_GEAR)
    return {slot: get_item(item_id) for slot, item_id in gear.items()}


def starting_inventory(character_class: CharacterClass) -> Inventory:
    """Shared supplies for a new party led by ``character_class``.

    Everyone carries healing potions and rations; a cleric leader adds one
    mana potion and any other caster two.
    """
    inventory = Inventory()
    inventory.add(get_item("potion_healing"), 3)
    inventory.add(get_item("ration"), 5)
    if character_class == CharacterClass.CLERIC:
        inventory.add(get_item("potion_mana"), 1)
    elif character_class in CASTER_SLOTS:
        inventory.add(get_item("potion_mana"), 2)
    return inventory


def create_member(
    member_id: str,
    name: str,
    race: CharacterRace,
    character_class: CharacterClass,
    *,
    level: int = 1,
    attributes: Attributes | None = None,
) -> Entity:
    """Build a fully equipped party member.

    Args:
        member_id: Stable entity id.
        name: Display name.
        race: Character race.
        character_class: Character class.
        level: Starting level.
        attributes: Base ability scores; defaults to ``default_attributes``.

    Returns:
        The new entity, with derived stats already computed.
    """
    base = attributes if attributes is not None else default_attributes(character_class, race)
    max_hp = calculate_hp(level, base.constitution, hit_die_for(character_class))
    entity = Entity(
        id=member_id,
        name=name,
        entity_type=EntityType.PLAYER,
        equipment=starting_equipment(character_class),
        stats=CombatStats(
            level=level,
            character_class=character_class,
            race=race,
            xp=0,
            xp_to_next_level=xp_for_next_level(level),
            hp=max_hp,
            max_hp=max_hp,
            attributes=base.model_copy(),
            base_attributes=base.model_copy(),
            spell_slots=spell_slots_for(character_class),
        ),
    )
    apply_equipment(entity)
    return entity


def create_party(
    name: str,
    race: CharacterRace,
    character_class: CharacterClass,
    attributes: Attributes | None = None,
) -> list[Entity]:
    """The leader followed by two companions chosen by the leader's role."""
    leader = create_member(LEADER_ID, name, race, character_class, attributes=attributes)
    companions = [
        create_member(f"comp_{companion_name.lower()}", companion_name, companion_race, companion_class)
        for companion_name, companion_race, companion_class in COMPANIONS[party_role(character_class)]
    ]
    logger.info(
        "Party created",
        leader=name,
        character_class=character_class.value,
        companions=[member.name for member in companions],
    )
    return [leader, *companions]


# =============================================================================
# Levelling
# =============================================================================


def level_up(entity: Entity) -> None:
    """Raise an entity one level.

    Max HP grows by the fixed per-level gain, HP is fully restored, spell
    slots are refilled and every fourth level adds 1 base STR.
    """
    stats = entity.stats
    next_level = stats.level + 1
    base = stats.base_attributes
    if next_level % 4 == 0:
        base = base.with_bonuses({Ability.STR: 1})
    max_hp = stats.max_hp + hp_gain_per_level(
        hit_die_for(stats.character_class), stats.base_attributes.constitution
    )
    entity.stats = stats.model_copy(
        update={
            "level": next_level,
            "max_hp": max_hp,
            "hp": max_hp,
            "base_attributes": base,
            "spell_slots": spell_slots_for(stats.character_class),
            "xp_to_next_level": xp_for_next_level(next_level),
        },
        deep=True,
    )
    apply_equipment(entity)


def award_experience(entity: Entity, amount: int, *, max_level: int = MAX_LEVEL) -> int:
    """Add experience and level up as many times as it allows.

    Returns:
        Number of levels gained.
    """
    entity.stats.xp += amount
    gained = 0
    while entity.stats.xp >= entity.stats.xp_to_next_level and entity.stats.level < max_level:
        level_up(entity)
        gained += 1
    return gained


# =============================================================================
# Consumables and Equipment
# =============================================================================


def apply_consumable(entity: Entity, item: Item, roller: DiceRoller) -> int:
    """Apply a consumable's effect to ``entity``.

    Healing is capped at max HP and mana at max slots. A dice expression on
    the effect is rolled, otherwise the fixed amount applies.

    Returns:
        The nominal amount of the effect.
    """
    effect = item.effect
    if effect is None:
        return 0
    amount = roller.roll(effect.dice).total if effect.dice else effect.amount
    stats = entity.stats

    if effect.type == ItemEffectType.HEAL_HP:
        stats.hp = min(stats.max_hp, stats.hp + amount)
    elif effect.type == ItemEffectType.RESTORE_MANA:
        stats.spell_slots.current = min(stats.spell_slots.max, stats.spell_slots.current + amount)
    elif effect.type == ItemEffectType.BUFF_STR:
        stats.base_attributes = stats.base_attributes.with_bonuses({Ability.STR: amount})
        apply_equipment(entity)

    logger.debug("Consumable applied", entity=entity.id, item=item.id, amount=amount)
    return amount


def equip(entity: Entity, inventory: Inventory, item_id: str) -> bool:
    """Move an item from the inventory into its slot.

    Whatever occupied the slot goes back into the inventory.

    Returns:
        False if the item is not held or cannot be equipped.
    """
    slot = inventory.find(item_id)
    if slot is None or not slot.item.is_equippable or slot.item.equipment is None:
        logger.debug("Equip declined", entity=entity.id, item=item_id)
        return False
    item = slot.item
    target_slot = item.equipment.slot
    inventory.remove(item_id)

    current = entity.equipment.get(target_slot)
    if current is not None:
        inventory.add(current)
    entity.equipment = {**entity.equipment, target_slot: item}
    apply_equipment(entity)
    return True


def unequip(entity: Entity, inventory: Inventory, slot: EquipmentSlot) -> bool:
    """Move the item in ``slot`` back into the inventory."""
    item = entity.equipment.get(slot)
    if item is None:
        return False
    inventory.add(item)
    entity.equipment = {key: value for key, value in entity.equipment.items() if key != slot}
    apply_equipment(entity)
    return True


def fold_back(member: Entity, combatant: Entity) -> None:
    """Copy a combatant's end-of-battle state onto its party record.

    HP and any base attribute gains (elixirs drunk mid-battle) carry over;
    spell slots are refilled.
    """
    member.stats.hp = min(member.stats.max_hp, combatant.stats.hp)
    member.stats.base_attributes = combatant.stats.base_attributes.model_copy()
    member.stats.spell_slots.current = member.stats.spell_slots.max
    apply_equipment(member)


__all__ = [
    "LEADER_ID",
    "COMPANIONS",
    "STARTING_GEAR",
    "party_role",
    "default_attributes",
    "starting_equipment",
    "starting_inventory",
    "create_member",
    "create_party",
    "level_up",
    "award_experience",
    "apply_consumable",
    "equip",
    "unequip",
    "fold_back",
]
