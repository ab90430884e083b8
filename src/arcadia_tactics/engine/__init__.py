"""Game engine module for Arcadia Tactics.

This module provides combat math, the tactical battle state machine, the
enemy AI, party progression and the session state machine that ties the
overworld and battles together.

Submodules:
    dice: Dice rolling over an injectable random source
    rules: Attack, damage, spell, HP and AC rules
    scheduler: Tick-based delayed callbacks for presentation pacing
    battle: Encounter setup and the turn state machine
    ai: Enemy target selection and movement
    progression: Party creation, equipment, consumables, levelling
    session: World/session state machine

Example:
    >>> from arcadia_tactics.engine import GameSession
    >>> from arcadia_tactics.models import CharacterClass, CharacterRace
    >>>
    >>> session = GameSession(seed=42)
    >>> session.create_character("Brom", CharacterRace.DWARF, CharacterClass.FIGHTER)
    >>> events = session.move_overworld(6, 5)
    >>> session.run_pending()
"""

from __future__ import annotations

# =============================================================================
# Dice and Rules
# =============================================================================
from arcadia_tactics.engine.dice import (
    DiceExpression,
    DiceRoller,
    make_rng,
)
from arcadia_tactics.engine.rules import (
    AttackResult,
    armor_class,
    attack_hits,
    calculate_hp,
    proficiency_bonus,
    recompute_stats,
    weapon_attack,
)

# =============================================================================
# Pacing
# =============================================================================
from arcadia_tactics.engine.scheduler import ScheduledEvent, Scheduler

# =============================================================================
# Battle
# =============================================================================
from arcadia_tactics.engine.battle import BattleEngine, BattleRewards

# =============================================================================
# Party and Session
# =============================================================================
from arcadia_tactics.engine.progression import create_party, level_up
from arcadia_tactics.engine.session import GameSession


__all__ = [
    # Dice and rules
    "DiceExpression",
    "DiceRoller",
    "make_rng",
    "AttackResult",
    "armor_class",
    "attack_hits",
    "calculate_hp",
    "proficiency_bonus",
    "recompute_stats",
    "weapon_attack",
    # Pacing
    "ScheduledEvent",
    "Scheduler",
    # Battle
    "BattleEngine",
    "BattleRewards",
    # Party and session
    "create_party",
    "level_up",
    "GameSession",
]
