"""Pydantic v2 models for world cells, characters, items and events."""

from __future__ import annotations

from arcadia_tactics.models.catalog import (
    CLASS_SPELLS,
    ITEMS,
    SPELLS,
    get_item,
    get_spell,
    spells_for_class,
)
from arcadia_tactics.models.entities import (
    Attributes,
    BattleEntity,
    CombatStats,
    Entity,
    EquipmentStats,
    GridPosition,
    Inventory,
    InventorySlot,
    Item,
    ItemEffect,
    NaturalAttack,
    Spell,
    SpellSlots,
)
from arcadia_tactics.models.enums import (
    Ability,
    BattleAction,
    BattleOutcome,
    CharacterClass,
    CharacterRace,
    Difficulty,
    Dimension,
    EntityType,
    EquipmentSlot,
    GamePhase,
    ItemEffectType,
    ItemKind,
    LogCategory,
    PartyRole,
    PoiType,
    PopupKind,
    SpellType,
    TerrainType,
    TurnPhase,
    WeatherType,
)
from arcadia_tactics.models.events import DamagePopup, EventLog, GameEvent, LogEntry
from arcadia_tactics.models.world import BattleCell, GridCoord, HexCell, HexCoord


__all__ = [
    # Enums
    "Ability",
    "BattleAction",
    "BattleOutcome",
    "CharacterClass",
    "CharacterRace",
    "Difficulty",
    "Dimension",
    "EntityType",
    "EquipmentSlot",
    "GamePhase",
    "ItemEffectType",
    "ItemKind",
    "LogCategory",
    "PartyRole",
    "PoiType",
    "PopupKind",
    "SpellType",
    "TerrainType",
    "TurnPhase",
    "WeatherType",
    # Entities
    "Attributes",
    "BattleEntity",
    "CombatStats",
    "Entity",
    "EquipmentStats",
    "GridPosition",
    "Inventory",
    "InventorySlot",
    "Item",
    "ItemEffect",
    "NaturalAttack",
    "Spell",
    "SpellSlots",
    # World
    "BattleCell",
    "GridCoord",
    "HexCell",
    "HexCoord",
    # Events
    "DamagePopup",
    "EventLog",
    "GameEvent",
    "LogEntry",
    # Catalog
    "CLASS_SPELLS",
    "ITEMS",
    "SPELLS",
    "get_item",
    "get_spell",
    "spells_for_class",
]
