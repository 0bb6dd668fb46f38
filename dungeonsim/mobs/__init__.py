"""
Mobs module: skills, AI patterns, monster templates and instances, and the
mob catalog.
"""

from .ai_pattern import AIPattern, BossPhase, select_skill_by_ai, validate_patterns
from .mob import BaseStats, MobInstance, MobLoot, MobTemplate
from .mob_catalog import MobCatalog
from .skill import BASIC_ATTACK, Skill

__all__ = [
    "AIPattern",
    "BossPhase",
    "select_skill_by_ai",
    "validate_patterns",
    "BaseStats",
    "MobInstance",
    "MobLoot",
    "MobTemplate",
    "MobCatalog",
    "BASIC_ATTACK",
    "Skill",
]
