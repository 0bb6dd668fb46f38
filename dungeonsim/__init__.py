"""
Dungeonsim package for the dungeon-crawler simulation core.

This package contains the deterministic core of the game: seeded dungeon
generation, item and monster catalogs, turn-based combat and crafting.
"""

from .core.content import DEFAULT_DATA_DIR, ContentRepository

__all__ = [
    "DEFAULT_DATA_DIR",
    "ContentRepository",
]
