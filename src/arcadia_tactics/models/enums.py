"""Enumeration types for Arcadia Tactics.

Terrain, weather, character options, battle actions and session phases.
All enums are ``StrEnum`` so that they serialize as plain strings in
logs and saved state.
"""

from __future__ import annotations

from enum import StrEnum


class Dimension(StrEnum):
    """The two synchronized overworld layers."""

    NORMAL = "normal"
    SHADOW = "shadow"

    @property
    def other(self) -> Dimension:
        """The dimension a portal leads to."""
        return Dimension.SHADOW if self is Dimension.NORMAL else Dimension.NORMAL


class TerrainType(StrEnum):
    """Terrain of a hex or battle cell.

    Overworld biomes come first, followed by shadow-world terrain and the
    urban tiles used by town maps.
    """

    # Normal world biomes
    WATER = "water"
    PLAINS = "plains"
    GRASS = "grass"
    FOREST = "forest"
    JUNGLE = "jungle"
    DESERT = "desert"
    SWAMP = "swamp"
    TUNDRA = "tundra"
    TAIGA = "taiga"
    MOUNTAIN = "mountain"

    # Points of interest
    VILLAGE = "village"
    CASTLE = "castle"
    RUINS = "ruins"

    # Shadow world
    CHASM = "chasm"
    LAVA = "lava"
    CAVE_FLOOR = "cave_floor"
    FUNGUS = "fungus"

    # Urban
    COBBLESTONE = "cobblestone"
    DIRT_ROAD = "dirt_road"
    WOOD_FLOOR = "wood_floor"
    STONE_FLOOR = "stone_floor"
    WALL_HOUSE = "wall_house"

    @property
    def is_settlement(self) -> bool:
        """Whether the party can enter a town from this cell."""
        return self in (TerrainType.VILLAGE, TerrainType.CASTLE)


class WeatherType(StrEnum):
    """Weather attached to a hex cell, carried into battle."""

    NONE = "none"
    RAIN = "rain"
    SNOW = "snow"
    ASH = "ash"
    FOG = "fog"


class PoiType(StrEnum):
    """Points of interest inside a town map."""

    SHOP = "shop"
    INN = "inn"
    PLAZA = "plaza"
    EXIT = "exit"


class Difficulty(StrEnum):
    """Campaign difficulty, scaling enemies, encounters and rewards."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class Ability(StrEnum):
    """The six ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"


class CharacterClass(StrEnum):
    """Playable character classes."""

    FIGHTER = "Fighter"
    WIZARD = "Wizard"
    ROGUE = "Rogue"
    CLERIC = "Cleric"
    BARBARIAN = "Barbarian"
    BARD = "Bard"
    DRUID = "Druid"
    PALADIN = "Paladin"
    RANGER = "Ranger"
    SORCERER = "Sorcerer"
    WARLOCK = "Warlock"


class CharacterRace(StrEnum):
    """Playable character races."""

    HUMAN = "Human"
    ELF = "Elf"
    DWARF = "Dwarf"
    HALFLING = "Halfling"
    DRAGONBORN = "Dragonborn"
    GNOME = "Gnome"
    TIEFLING = "Tiefling"
    HALF_ORC = "Half-Orc"


class PartyRole(StrEnum):
    """Role of the party leader; decides which companions join."""

    TANK = "tank"
    HEALER = "healer"
    DAMAGE = "damage"


class EntityType(StrEnum):
    """Side an entity fights on."""

    PLAYER = "player"
    ENEMY = "enemy"
    NPC = "npc"


class EquipmentSlot(StrEnum):
    """Equipment slots of a character."""

    HEAD = "head"
    BODY = "body"
    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"
    ACCESSORY = "accessory"


class ItemKind(StrEnum):
    """Broad item category."""

    CONSUMABLE = "consumable"
    EQUIPMENT = "equipment"
    KEY = "key"


class ItemEffectType(StrEnum):
    """Effect applied when a consumable is used."""

    HEAL_HP = "heal_hp"
    RESTORE_MANA = "restore_mana"
    BUFF_STR = "buff_str"


class SpellType(StrEnum):
    """What a spell does to its target."""

    DAMAGE = "damage"
    HEAL = "heal"


class BattleAction(StrEnum):
    """Actions the active player entity can select."""

    MOVE = "move"
    ATTACK = "attack"
    MAGIC = "magic"
    ITEM = "item"
    WAIT = "wait"
    RUN = "run"


class TurnPhase(StrEnum):
    """Sub-state of the active turn inside a battle."""

    AWAITING_ACTION = "awaiting_action"
    AWAITING_TARGET = "awaiting_target"
    ENEMY_TURN = "enemy_turn"
    ENDED = "ended"


class BattleOutcome(StrEnum):
    """How a battle ended."""

    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


class GamePhase(StrEnum):
    """Top-level session state."""

    CHARACTER_CREATION = "character_creation"
    OVERWORLD = "overworld"
    TOWN_EXPLORATION = "town_exploration"
    BATTLE_TACTICAL = "battle_tactical"
    BATTLE_VICTORY = "battle_victory"
    BATTLE_DEFEAT = "battle_defeat"


class LogCategory(StrEnum):
    """Category of a player-facing log entry."""

    INFO = "info"
    COMBAT = "combat"
    NARRATIVE = "narrative"
    ROLL = "roll"
    LEVELUP = "levelup"


class PopupKind(StrEnum):
    """Kind of floating number shown over a battle cell."""

    DAMAGE = "damage"
    HEAL = "heal"
    MISS = "miss"


__all__ = [
    "Dimension",
    "TerrainType",
    "WeatherType",
    "PoiType",
    "Difficulty",
    "Ability",
    "CharacterClass",
    "CharacterRace",
    "PartyRole",
    "EntityType",
    "EquipmentSlot",
    "ItemKind",
    "ItemEffectType",
    "SpellType",
    "BattleAction",
    "TurnPhase",
    "BattleOutcome",
    "GamePhase",
    "LogCategory",
    "PopupKind",
]
