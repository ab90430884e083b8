"""Combat math and character derivation rules.

Pure functions over the models: ability modifiers, proficiency, hit
points, spell slots, armor class, attack and damage resolution, spell
amounts and initiative. Nothing here mutates an entity except
``apply_equipment``, which writes the result of ``recompute_stats`` back.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from arcadia_tactics.core.constants import (
    CASTER_SLOTS,
    DEFAULT_HIT_DIE,
    FEET_PER_TILE,
    HEAVY_ARMOR_AC,
    HIT_DIE,
    MEDIUM_ARMOR_AC,
    MEDIUM_ARMOR_DEX_CAP,
    SPELLCASTING_ABILITY,
    UNARMORED_AC,
)
from arcadia_tactics.core.logging import get_logger
from arcadia_tactics.engine.dice import DiceRoller
from arcadia_tactics.models.entities import (
    Attributes,
    BattleEntity,
    CombatStats,
    Entity,
    Item,
    Spell,
    SpellSlots,
)
from arcadia_tactics.models.enums import Ability, CharacterClass, EquipmentSlot


logger = get_logger(__name__)

UNARMED_DICE = (1, 4)


# =============================================================================
# Character Derivation
# =============================================================================


def ability_modifier(score: int) -> int:
    """D&D ability modifier, ``floor((score - 10) / 2)``."""
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """+2 at levels 1-4, +3 at 5-8 and so on."""
    return 2 + (max(1, level) - 1) // 4


def hit_die_for(character_class: CharacterClass | None) -> int:
    if character_class is None:
        return DEFAULT_HIT_DIE
    return HIT_DIE.get(character_class, DEFAULT_HIT_DIE)


def hp_gain_per_level(hit_die: int, constitution: int) -> int:
    """Fixed hit point gain for one level above the first."""
    return max(1, hit_die // 2 + 1 + ability_modifier(constitution))


def calculate_hp(level: int, constitution: int, hit_die: int) -> int:
    """Maximum hit points at ``level``.

    Level 1 grants the full hit die plus the CON modifier; every further
    level adds the fixed average gain. The result is at least 1.
    """
    first = max(1, hit_die + ability_modifier(constitution))
    return first + (max(1, level) - 1) * hp_gain_per_level(hit_die, constitution)


def spell_slots_for(character_class: CharacterClass | None) -> SpellSlots:
    """Full spell slots for a class; non-casters get none."""
    maximum = CASTER_SLOTS.get(character_class, 0) if character_class else 0
    return SpellSlots(current=maximum, max=maximum)


def spellcasting_modifier(stats: CombatStats) -> int:
    """Modifier of the class's casting ability, 0 for non-casters."""
    if stats.character_class is None:
        return 0
    ability = SPELLCASTING_ABILITY.get(stats.character_class)
    if ability is None:
        return 0
    return stats.attributes.modifier(ability)


def movement_tiles(speed: int) -> int:
    """Battle tiles a combatant may cover in one MOVE."""
    return speed // FEET_PER_TILE


# =============================================================================
# Equipment
# =============================================================================


def equipment_modifiers(equipment: Mapping[EquipmentSlot, Item]) -> dict[Ability, int]:
    """Sum of ability bonuses granted by everything equipped."""
    totals: dict[Ability, int] = {}
    for item in equipment.values():
        if item.equipment is None:
            continue
        for ability, bonus in item.equipment.modifiers.items():
            totals[ability] = totals.get(ability, 0) + bonus
    return totals


def armor_class(equipment: Mapping[EquipmentSlot, Item], dexterity: int) -> int:
    """Armor class from body armor, DEX and shield.

    Body armor of base 13 or more caps the DEX bonus at +2; base 16 or
    more ignores DEX entirely. Unarmored characters use base 10.
    """
    body = equipment.get(EquipmentSlot.BODY)
    base = UNARMORED_AC
    if body is not None and body.equipment is not None and body.equipment.ac is not None:
        base = body.equipment.ac

    dex_bonus = ability_modifier(dexterity)
    if base >= HEAVY_ARMOR_AC:
        dex_bonus = 0
    elif base >= MEDIUM_ARMOR_AC:
        dex_bonus = min(dex_bonus, MEDIUM_ARMOR_DEX_CAP)

    shield_bonus = 0
    off_hand = equipment.get(EquipmentSlot.OFF_HAND)
    if off_hand is not None and off_hand.equipment is not None and off_hand.equipment.ac:
        shield_bonus = off_hand.equipment.ac

    return base + dex_bonus + shield_bonus


def recompute_stats(stats: CombatStats, equipment: Mapping[EquipmentSlot, Item]) -> CombatStats:
    """Derive effective attributes, AC and initiative from base attributes and gear.

    Returns a new ``CombatStats``; the input is not modified.
    """
    attributes: Attributes = stats.base_attributes.with_bonuses(equipment_modifiers(equipment))
    return stats.model_copy(
        update={
            "attributes": attributes,
            "ac": armor_class(equipment, attributes.dexterity),
            "initiative_bonus": attributes.dex_mod,
        },
        deep=True,
    )


def apply_equipment(entity: Entity) -> None:
    """Recompute an entity's derived stats after its equipment changed."""
    entity.stats = recompute_stats(entity.stats, entity.equipment)


# =============================================================================
# Attacks
# =============================================================================


@dataclass(frozen=True)
class AttackResult:
    """Outcome of one attack roll.

    Attributes:
        natural: The face of the d20.
        attack_bonus: Bonus added to the d20.
        total: ``natural + attack_bonus``.
        target_ac: Armor class the roll was compared to.
        hit: Whether the attack landed.
        critical: Natural 20.
        fumble: Natural 1.
        damage: Damage dealt, 0 on a miss.
    """

    natural: int
    attack_bonus: int
    total: int
    target_ac: int
    hit: bool
    critical: bool
    fumble: bool
    damage: int = 0


def attack_hits(natural: int, attack_bonus: int, target_ac: int) -> bool:
    """A natural 1 always misses, a natural 20 always hits."""
    if natural == 1:
        return False
    if natural == 20:
        return True
    return natural + attack_bonus >= target_ac


def weapon_attack_profile(attacker: Entity) -> tuple[int, int, int]:
    """Dice count, die size and ability modifier of the attacker's main hand.

    Finesse weapons use DEX, everything else (and an empty hand) uses STR.
    """
    weapon = attacker.main_hand
    attributes = attacker.stats.attributes
    if weapon is None or weapon.equipment is None or not weapon.equipment.is_weapon:
        dice_count, dice_sides = UNARMED_DICE
        return dice_count, dice_sides, attributes.str_mod
    stats = weapon.equipment
    modifier = attributes.dex_mod if stats.finesse else attributes.str_mod
    return stats.dice_count or 1, stats.dice_sides or 4, modifier


def weapon_attack(attacker: Entity, target_ac: int, roller: DiceRoller) -> AttackResult:
    """Resolve a weapon attack.

    The attack bonus is proficiency plus the weapon's ability modifier.
    Damage is the weapon dice (doubled on a critical) plus the same
    modifier, and never less than 1 on a hit.
    """
    dice_count, dice_sides, modifier = weapon_attack_profile(attacker)
    bonus = proficiency_bonus(attacker.stats.level) + modifier
    natural = roller.d20()
    hit = attack_hits(natural, bonus, target_ac)
    critical = natural == 20

    damage = 0
    if hit:
        count = dice_count * 2 if critical else dice_count
        damage = max(1, roller.roll_dice(count, dice_sides) + modifier)

    result = AttackResult(
        natural=natural,
        attack_bonus=bonus,
        total=natural + bonus,
        target_ac=target_ac,
        hit=hit,
        critical=critical,
        fumble=natural == 1,
        damage=damage,
    )
    logger.debug("Weapon attack resolved", attacker=attacker.id, natural=natural, hit=hit, damage=damage)
    return result


def natural_attack(attacker: BattleEntity, target_ac: int, roller: DiceRoller) -> AttackResult:
    """Resolve a monster attack with its fixed bonus and damage profile.

    Monsters add their initiative bonus to the d20 and deal their natural
    attack's damage, doubled dice on a critical, minimum 1.
    """
    profile = attacker.natural_attack
    bonus = attacker.stats.initiative_bonus
    natural = roller.d20()
    hit = attack_hits(natural, bonus, target_ac)
    critical = natural == 20

    damage = 0
    if hit:
        if profile is None:
            dice_count, dice_sides = UNARMED_DICE
            flat = attacker.stats.attributes.str_mod
        else:
            dice_count, dice_sides, flat = profile.dice_count, profile.dice_sides, profile.bonus
        count = dice_count * 2 if critical else dice_count
        damage = max(1, roller.roll_dice(count, dice_sides) + flat)

    return AttackResult(
        natural=natural,
        attack_bonus=bonus,
        total=natural + bonus,
        target_ac=target_ac,
        hit=hit,
        critical=critical,
        fumble=natural == 1,
        damage=damage,
    )


# =============================================================================
# Spells and Initiative
# =============================================================================


def spell_amount(caster: Entity, spell: Spell, roller: DiceRoller) -> int:
    """Damage or healing of a spell: its dice plus the casting modifier, minimum 1."""
    rolled = roller.roll_dice(spell.dice_count, spell.dice_sides)
    return max(1, rolled + spellcasting_modifier(caster.stats))


def roll_initiative(entities: Iterable[Entity], roller: DiceRoller) -> list[tuple[str, int]]:
    """Roll d20 + initiative bonus for everyone.

    Returns:
        ``(entity_id, score)`` pairs, highest first. Ties keep input order.
    """
    scores = [(entity.id, roller.d20() + entity.stats.initiative_bonus) for entity in entities]
    return sorted(scores, key=lambda pair: pair[1], reverse=True)


__all__ = [
    "ability_modifier",
    "proficiency_bonus",
    "hit_die_for",
    "hp_gain_per_level",
    "calculate_hp",
    "spell_slots_for",
    "spellcasting_modifier",
    "movement_tiles",
    "equipment_modifiers",
    "armor_class",
    "recompute_stats",
    "apply_equipment",
    "AttackResult",
    "attack_hits",
    "weapon_attack_profile",
    "weapon_attack",
    "natural_attack",
    "spell_amount",
    "roll_initiative",
]
