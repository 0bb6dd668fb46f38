"""
Crafting module: recipes, stations, difficulty tiers and the crafting manager.
"""

# Import from recipe.py
from .recipe import (
    AvailableRecipe,
    CraftingDifficulty,
    CraftingStation,
    CraftResult,
    Ingredient,
    MissingMaterial,
    ProducedItem,
    Recipe,
)

# Import from crafting_manager.py
from .crafting_manager import CraftingManager

__all__ = [
    # Recipe models
    "AvailableRecipe",
    "CraftingDifficulty",
    "CraftingStation",
    "CraftResult",
    "Ingredient",
    "MissingMaterial",
    "ProducedItem",
    "Recipe",
    # Manager
    "CraftingManager",
]
