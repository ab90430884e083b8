"""Character, item and inventory models.

These are pydantic v2 models with every field always present. Party
members are ``Entity`` records; inside a battle each combatant is a
``BattleEntity`` copy that also carries a grid position. Effective
attributes, AC and initiative are derived from base attributes and
equipment by ``arcadia_tactics.engine.rules.recompute_stats`` and are
never edited directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

from arcadia_tactics.models.enums import (
    Ability,
    CharacterClass,
    CharacterRace,
    EntityType,
    EquipmentSlot,
    ItemEffectType,
    ItemKind,
    SpellType,
)


AbilityScore = Annotated[int, Field(ge=1, le=30)]


class Component(BaseModel):
    """Base class for mutable game-state records."""

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="ignore",
    )


class Definition(BaseModel):
    """Base class for immutable catalog records (items, spells)."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Ability Scores
# =============================================================================


class Attributes(Component):
    """The six ability scores."""

    strength: AbilityScore = Field(default=10, description="Physical power")
    dexterity: AbilityScore = Field(default=10, description="Agility and reflexes")
    constitution: AbilityScore = Field(default=10, description="Health and stamina")
    intelligence: AbilityScore = Field(default=10, description="Reasoning and memory")
    wisdom: AbilityScore = Field(default=10, description="Perception and insight")
    charisma: AbilityScore = Field(default=10, description="Force of personality")

    @classmethod
    def from_scores(cls, scores: Mapping[Ability, int]) -> Attributes:
        """Build attributes from an ability-keyed mapping; missing scores are 10."""
        return cls(**{ability.value: scores.get(ability, 10) for ability in Ability})

    @staticmethod
    def calc_modifier(score: int) -> int:
        """Calculate ability modifier from score."""
        return (score - 10) // 2

    def score(self, ability: Ability) -> int:
        return getattr(self, ability.value)

    def modifier(self, ability: Ability) -> int:
        return self.calc_modifier(self.score(ability))

    def with_bonuses(self, bonuses: Mapping[Ability, int]) -> Attributes:
        """Return a copy with the given per-ability bonuses added.

        Scores are clamped to the 1-30 range allowed for any creature.
        """
        return Attributes(
            **{
                ability.value: max(1, min(30, self.score(ability) + bonuses.get(ability, 0)))
                for ability in Ability
            }
        )

    @computed_field(description="Strength modifier")
    @property
    def str_mod(self) -> int:
        return self.calc_modifier(self.strength)

    @computed_field(description="Dexterity modifier")
    @property
    def dex_mod(self) -> int:
        return self.calc_modifier(self.dexterity)

    @computed_field(description="Constitution modifier")
    @property
    def con_mod(self) -> int:
        return self.calc_modifier(self.constitution)


# =============================================================================
# Items and Spells
# =============================================================================


class EquipmentStats(Definition):
    """What an item does while equipped.

    Attributes:
        slot: The slot the item occupies.
        ac: Body armor base AC, or the bonus of an off-hand shield.
        dice_count: Weapon damage dice count.
        dice_sides: Weapon damage die size.
        modifiers: Ability score bonuses granted while equipped.
        finesse: Weapon attacks with DEX instead of STR.
    """

    slot: EquipmentSlot
    ac: int | None = None
    dice_count: int | None = Field(default=None, ge=1)
    dice_sides: int | None = Field(default=None, ge=2)
    modifiers: dict[Ability, int] = Field(default_factory=dict)
    finesse: bool = False

    @property
    def is_weapon(self) -> bool:
        return self.dice_count is not None and self.dice_sides is not None


class ItemEffect(Definition):
    """Effect of using a consumable.

    ``dice`` takes precedence over ``amount`` when both are set.
    """

    type: ItemEffectType
    amount: int = Field(default=0, ge=0)
    dice: str | None = None


class Item(Definition):
    """A catalog item."""

    id: str
    name: str
    kind: ItemKind
    description: str = ""
    effect: ItemEffect | None = None
    equipment: EquipmentStats | None = None

    @property
    def is_consumable(self) -> bool:
        return self.kind == ItemKind.CONSUMABLE and self.effect is not None

    @property
    def is_equippable(self) -> bool:
        return self.kind == ItemKind.EQUIPMENT and self.equipment is not None


class Spell(Definition):
    """A castable spell. Level 0 spells are cantrips and cost no slot."""

    id: str
    name: str
    level: int = Field(ge=0, le=9)
    range: int = Field(ge=1, description="Reach in battle tiles (Chebyshev)")
    spell_type: SpellType
    dice_count: int = Field(ge=1)
    dice_sides: int = Field(ge=2)
    description: str = ""

    @property
    def is_cantrip(self) -> bool:
        return self.level == 0


# =============================================================================
# Combat Stats
# =============================================================================


class SpellSlots(Component):
    """Leveled spell slots, replenished between encounters."""

    current: int = Field(default=0, ge=0)
    max: int = Field(default=0, ge=0)


class CombatStats(Component):
    """Everything combat math reads from a combatant.

    ``attributes``, ``ac`` and ``initiative_bonus`` are derived values; see
    ``arcadia_tactics.engine.rules.recompute_stats``.
    """

    level: int = Field(default=1, ge=1, le=20)
    character_class: CharacterClass | None = None
    race: CharacterRace | None = None
    xp: int = Field(default=0, ge=0)
    xp_to_next_level: int = Field(default=300, ge=0)
    hp: int = Field(default=1, ge=0)
    max_hp: int = Field(default=1, ge=1)
    ac: int = Field(default=10, ge=0)
    initiative_bonus: int = 0
    speed: int = Field(default=30, ge=0)
    attributes: Attributes = Field(default_factory=Attributes)
    base_attributes: Attributes = Field(default_factory=Attributes)
    spell_slots: SpellSlots = Field(default_factory=SpellSlots)

    @computed_field(description="Whether the combatant can still act")
    @property
    def is_alive(self) -> bool:
        return self.hp > 0


class Entity(Component):
    """A party member or any other character record."""

    id: str
    name: str
    entity_type: EntityType = EntityType.PLAYER
    equipment: dict[EquipmentSlot, Item] = Field(default_factory=dict)
    stats: CombatStats = Field(default_factory=CombatStats)

    @property
    def is_alive(self) -> bool:
        return self.stats.hp > 0

    @property
    def main_hand(self) -> Item | None:
        return self.equipment.get(EquipmentSlot.MAIN_HAND)


class GridPosition(BaseModel):
    """A battle grid coordinate; ``y`` indexes the grid's z axis."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    def chebyshev(self, other: GridPosition) -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def manhattan(self, other: GridPosition) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class NaturalAttack(Definition):
    """Fixed attack profile of a monster: ``NdS + bonus`` damage."""

    dice_count: int = Field(default=1, ge=1)
    dice_sides: int = Field(default=4, ge=2)
    bonus: int = 0


class BattleEntity(Entity):
    """A combatant placed on the battle grid."""

    position: GridPosition
    natural_attack: NaturalAttack | None = None

    @classmethod
    def from_entity(cls, entity: Entity, position: GridPosition) -> BattleEntity:
        """Copy a party member onto the grid; the original record is untouched."""
        return cls(
            id=entity.id,
            name=entity.name,
            entity_type=entity.entity_type,
            equipment=dict(entity.equipment),
            stats=entity.stats.model_copy(deep=True),
            position=position,
        )


# =============================================================================
# Inventory
# =============================================================================


class InventorySlot(Component):
    """A stack of identical items."""

    item: Item
    quantity: int = Field(default=1, ge=1)


class Inventory(Component):
    """The party's shared inventory and purse."""

    slots: list[InventorySlot] = Field(default_factory=list)
    gold: int = Field(default=0, ge=0)

    def find(self, item_id: str) -> InventorySlot | None:
        for slot in self.slots:
            if slot.item.id == item_id:
                return slot
        return None

    def quantity_of(self, item_id: str) -> int:
        slot = self.find(item_id)
        return slot.quantity if slot else 0

    def add(self, item: Item, quantity: int = 1) -> None:
        """Add items, merging into an existing stack of the same id."""
        if quantity <= 0:
            return
        existing = self.find(item.id)
        if existing is not None:
            existing.quantity += quantity
            return
        self.slots.append(InventorySlot(item=item, quantity=quantity))

    def remove(self, item_id: str, quantity: int = 1) -> bool:
        """Remove items from a stack. Returns False if not enough are held."""
        for index, slot in enumerate(self.slots):
            if slot.item.id != item_id:
                continue
            if slot.quantity < quantity:
                return False
            if slot.quantity == quantity:
                self.slots.pop(index)
            else:
                slot.quantity -= quantity
            return True
        return False


__all__ = [
    "Component",
    "Definition",
    "Attributes",
    "EquipmentStats",
    "ItemEffect",
    "Item",
    "Spell",
    "SpellSlots",
    "CombatStats",
    "Entity",
    "GridPosition",
    "NaturalAttack",
    "BattleEntity",
    "InventorySlot",
    "Inventory",
]
