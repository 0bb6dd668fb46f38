"""
Core system module for the dungeon simulation.

This module contains the fundamental pieces shared by every subsystem: game
constants and enumerations, the seeded random source, the error taxonomy,
logging helpers and the pydantic base models.
"""

from .constants import (
    AIBehavior,
    ActionType,
    BattleOutcome,
    Biome,
    CombatantSide,
    Direction,
    FailureConsequence,
    ItemCategory,
    ItemEffectType,
    MobCategory,
    Rarity,
    RoomType,
    SkillType,
    StatusEffectType,
)
from .errors import (
    BoundsError,
    CatalogLoadError,
    GameException,
    NotFoundError,
    ValidationError,
    report_data_integrity,
)
from .logging import (
    get_logger,
    setup_logging,
)
from .models import (
    CatalogModel,
    StateModel,
)
from .rng import (
    SeededRandom,
    hash_seed,
    to_base36,
)

__all__ = [
    # Import from constants.py
    "AIBehavior",
    "ActionType",
    "BattleOutcome",
    "Biome",
    "CombatantSide",
    "Direction",
    "FailureConsequence",
    "ItemCategory",
    "ItemEffectType",
    "MobCategory",
    "Rarity",
    "RoomType",
    "SkillType",
    "StatusEffectType",
    # Import from errors.py
    "BoundsError",
    "CatalogLoadError",
    "GameException",
    "NotFoundError",
    "ValidationError",
    "report_data_integrity",
    # Import from logging.py
    "get_logger",
    "setup_logging",
    # Import from models.py
    "CatalogModel",
    "StateModel",
    # Import from rng.py
    "SeededRandom",
    "hash_seed",
    "to_base36",
]
