"""
Combat module: combatants, damage formulas, battle state and the combat engine.
"""

from .actions import ActionOutcome, PlayerAction
from .battle import BattleState, TurnResult
from .combat_engine import CombatEngine
from .combatant import Combatant, PlayerProfile
from .damage import (
    calculate_damage,
    calculate_flee_chance,
    calculate_heal,
    check_critical,
    check_hit,
    hit_chance,
)

__all__ = [
    "ActionOutcome",
    "PlayerAction",
    "BattleState",
    "TurnResult",
    "CombatEngine",
    "Combatant",
    "PlayerProfile",
    "calculate_damage",
    "calculate_flee_chance",
    "calculate_heal",
    "check_critical",
    "check_hit",
    "hit_chance",
]
