"""Static game data: items, spells, class spell lists and enemy templates."""

from __future__ import annotations

from dataclasses import dataclass

from arcadia_tactics.core.exceptions import ValidationError
from arcadia_tactics.models.entities import (
    EquipmentStats,
    Item,
    ItemEffect,
    NaturalAttack,
    Spell,
)
from arcadia_tactics.models.enums import (
    Ability,
    CharacterClass,
    EquipmentSlot,
    ItemEffectType,
    ItemKind,
    SpellType,
)


def _weapon(
    item_id: str,
    name: str,
    description: str,
    dice_count: int,
    dice_sides: int,
    *,
    finesse: bool = False,
    modifiers: dict[Ability, int] | None = None,
) -> Item:
    return Item(
        id=item_id,
        name=name,
        kind=ItemKind.EQUIPMENT,
        description=description,
        equipment=EquipmentStats(
            slot=EquipmentSlot.MAIN_HAND,
            dice_count=dice_count,
            dice_sides=dice_sides,
            finesse=finesse,
            modifiers=modifiers or {},
        ),
    )


def _armor(item_id: str, name: str, description: str, slot: EquipmentSlot, ac: int) -> Item:
    return Item(
        id=item_id,
        name=name,
        kind=ItemKind.EQUIPMENT,
        description=description,
        equipment=EquipmentStats(slot=slot, ac=ac),
    )


def _consumable(
    item_id: str,
    name: str,
    description: str,
    effect_type: ItemEffectType,
    amount: int = 0,
    dice: str | None = None,
) -> Item:
    return Item(
        id=item_id,
        name=name,
        kind=ItemKind.CONSUMABLE,
        description=description,
        effect=ItemEffect(type=effect_type, amount=amount, dice=dice),
    )


# =============================================================================
# Items
# =============================================================================

_ITEM_LIST: list[Item] = [
    # Consumables
    _consumable(
        "potion_healing", "Potion of Healing",
        "A magical red fluid. Regains 2d4 + 2 HP.",
        ItemEffectType.HEAL_HP, dice="2d4+2",
    ),
    _consumable(
        "potion_greater_healing", "Potion of Greater Healing",
        "Potent healing magic. Regains 14 HP.",
        ItemEffectType.HEAL_HP, amount=14,
    ),
    _consumable(
        "potion_mana", "Potion of Mana",
        "Restores magical energy. Regains 1 spell slot.",
        ItemEffectType.RESTORE_MANA, amount=1,
    ),
    _consumable(
        "ration", "Travel Ration",
        "Dry food for the road. Restores 5 HP.",
        ItemEffectType.HEAL_HP, amount=5,
    ),
    _consumable(
        "elixir_strength", "Elixir of Might",
        "Permanently increases Strength by 1.",
        ItemEffectType.BUFF_STR, amount=1,
    ),
    # Weapons
    _weapon("dagger", "Dagger", "Finesse, Light, Thrown. (1d4 Piercing)", 1, 4, finesse=True),
    _weapon("shortsword", "Shortsword", "Finesse, Light. (1d6 Piercing)", 1, 6, finesse=True),
    _weapon("rapier", "Rapier", "Finesse. (1d8 Piercing)", 1, 8, finesse=True),
    _weapon("longsword", "Longsword", "Versatile. (1d8 Slashing)", 1, 8),
    _weapon("greatsword", "Greatsword", "Heavy, Two-Handed. (2d6 Slashing)", 2, 6),
    _weapon("greataxe", "Greataxe", "Heavy, Two-Handed. (1d12 Slashing)", 1, 12),
    _weapon("handaxe", "Handaxe", "Light, Thrown. (1d6 Slashing)", 1, 6),
    _weapon("mace", "Mace", "Simple weapon. (1d6 Bludgeoning)", 1, 6),
    _weapon("warhammer", "Warhammer", "Versatile. (1d8 Bludgeoning)", 1, 8),
    _weapon("quarterstaff", "Quarterstaff", "Versatile. Focus. (1d6 Bludgeoning)", 1, 6),
    _weapon("longbow", "Longbow", "Heavy, Two-Handed. (1d8 Piercing)", 1, 8),
    # Armor and shields
    _armor("shield", "Shield", "Standard shield. (+2 AC)", EquipmentSlot.OFF_HAND, 2),
    _armor("leather_armor", "Leather Armor", "Light armor. AC 11 + DEX.", EquipmentSlot.BODY, 11),
    _armor("studded_leather", "Studded Leather", "Light armor. AC 12 + DEX.", EquipmentSlot.BODY, 12),
    _armor("chain_shirt", "Chain Shirt", "Medium armor. AC 13 + DEX (max 2).", EquipmentSlot.BODY, 13),
    _armor("chain_mail", "Chain Mail", "Heavy armor. AC 16.", EquipmentSlot.BODY, 16),
    _armor("plate_armor", "Plate Armor", "Heavy armor. AC 18.", EquipmentSlot.BODY, 18),
    # Shadow world drops
    _weapon(
        "shadow_dagger", "Shadow Dagger", "A cursed blade dripping with venom. (1d4, +1 DEX)",
        1, 4, modifiers={Ability.DEX: 1},
    ),
    _weapon(
        "necro_staff", "Staff of the Dead", "Focus. Radiates cold energy. (1d8, +1 INT)",
        1, 8, modifiers={Ability.INT: 1},
    ),
    _armor(
        "obsidian_plate", "Obsidian Plate", "Heavy armor forged from volcanic glass. AC 19.",
        EquipmentSlot.BODY, 19,
    ),
    _armor("bone_shield", "Bone Shield", "Crafted from dragon bone. (+2 AC)", EquipmentSlot.OFF_HAND, 2),
]

ITEMS: dict[str, Item] = {item.id: item for item in _ITEM_LIST}


# =============================================================================
# Spells
# =============================================================================

_SPELL_LIST: list[Spell] = [
    Spell(id="firebolt", name="Fire Bolt", level=0, range=12, spell_type=SpellType.DAMAGE,
          dice_count=1, dice_sides=10, description="Hurls a mote of fire."),
    Spell(id="sacred_flame", name="Sacred Flame", level=0, range=6, spell_type=SpellType.DAMAGE,
          dice_count=1, dice_sides=8, description="Flame-like radiance descends on a creature."),
    Spell(id="magic_missile", name="Magic Missile", level=1, range=12, spell_type=SpellType.DAMAGE,
          dice_count=3, dice_sides=4, description="Creates 3 glowing darts of magical force."),
    Spell(id="cure_wounds", name="Cure Wounds", level=1, range=1, spell_type=SpellType.HEAL,
          dice_count=1, dice_sides=8, description="A creature you touch regains hit points."),
    Spell(id="healing_word", name="Healing Word", level=1, range=6, spell_type=SpellType.HEAL,
          dice_count=1, dice_sides=4, description="A creature of your choice regains hit points."),
    Spell(id="thunderwave", name="Thunderwave", level=1, range=2, spell_type=SpellType.DAMAGE,
          dice_count=2, dice_sides=8, description="A wave of thunderous force sweeps out."),
    Spell(id="eldritch_blast", name="Eldritch Blast", level=0, range=12, spell_type=SpellType.DAMAGE,
          dice_count=1, dice_sides=10, description="A beam of crackling energy."),
    Spell(id="ice_storm", name="Ice Storm", level=1, range=8, spell_type=SpellType.DAMAGE,
          dice_count=3, dice_sides=6, description="Freezing hail pounds the area."),
    Spell(id="entangle", name="Entangle", level=1, range=8, spell_type=SpellType.DAMAGE,
          dice_count=1, dice_sides=6, description="Grasping weeds sprout from the ground."),
]

SPELLS: dict[str, Spell] = {spell.id: spell for spell in _SPELL_LIST}

CLASS_SPELLS: dict[CharacterClass, tuple[str, ...]] = {
    CharacterClass.WIZARD: ("firebolt", "magic_missile", "thunderwave", "ice_storm"),
    CharacterClass.CLERIC: ("sacred_flame", "cure_wounds", "healing_word"),
    CharacterClass.FIGHTER: (),
    CharacterClass.ROGUE: (),
    CharacterClass.BARBARIAN: (),
    CharacterClass.BARD: ("healing_word", "thunderwave"),
    CharacterClass.DRUID: ("entangle", "cure_wounds", "thunderwave"),
    CharacterClass.PALADIN: ("sacred_flame", "cure_wounds"),
    CharacterClass.RANGER: ("entangle", "cure_wounds"),
    CharacterClass.SORCERER: ("firebolt", "magic_missile", "ice_storm"),
    CharacterClass.WARLOCK: ("eldritch_blast", "firebolt"),
}


# =============================================================================
# Enemies and Loot
# =============================================================================


@dataclass(frozen=True)
class EnemyTemplate:
    """Stat block used to scale an enemy to an encounter level.

    Attributes:
        name: Display name; a running number is appended per spawn.
        base_hp: Hit points at level 1 before the difficulty multiplier.
        hp_per_level: Hit points added per level above 1.
        base_ac: Armor class at level 1; +1 per two levels.
        initiative_bonus: Flat initiative and attack bonus.
        attack: Damage profile of the enemy's attack.
    """

    name: str
    base_hp: int
    hp_per_level: int
    base_ac: int
    initiative_bonus: int
    attack: NaturalAttack


GOBLIN_RAIDER = EnemyTemplate(
    name="Goblin Raider",
    base_hp=9,
    hp_per_level=5,
    base_ac=13,
    initiative_bonus=2,
    attack=NaturalAttack(dice_count=1, dice_sides=4, bonus=2),
)

SHADOWLING = EnemyTemplate(
    name="Shadowling",
    base_hp=22,
    hp_per_level=8,
    base_ac=14,
    initiative_bonus=3,
    attack=NaturalAttack(dice_count=1, dice_sides=6, bonus=3),
)

NORMAL_LOOT: tuple[str, ...] = ("potion_healing", "ration", "potion_mana")
SHADOW_LOOT: tuple[str, ...] = (
    "shadow_dagger",
    "necro_staff",
    "obsidian_plate",
    "bone_shield",
    "elixir_strength",
    "potion_greater_healing",
)


def get_item(item_id: str) -> Item:
    """Look up a catalog item.

    Raises:
        ValidationError: If no item has this id.
    """
    try:
        return ITEMS[item_id]
    except KeyError as exc:
        raise ValidationError(
            "Unknown item", field_name="item_id", invalid_value=item_id
        ) from exc


def get_spell(spell_id: str) -> Spell:
    """Look up a catalog spell.

    Raises:
        ValidationError: If no spell has this id.
    """
    try:
        return SPELLS[spell_id]
    except KeyError as exc:
        raise ValidationError(
            "Unknown spell", field_name="spell_id", invalid_value=spell_id
        ) from exc


def spells_for_class(character_class: CharacterClass | None) -> list[Spell]:
    """Spells a class may cast, in catalog order of its spell list."""
    if character_class is None:
        return []
    return [SPELLS[spell_id] for spell_id in CLASS_SPELLS.get(character_class, ())]


__all__ = [
    "ITEMS",
    "SPELLS",
    "CLASS_SPELLS",
    "EnemyTemplate",
    "GOBLIN_RAIDER",
    "SHADOWLING",
    "NORMAL_LOOT",
    "SHADOW_LOOT",
    "get_item",
    "get_spell",
    "spells_for_class",
]
