"""
Items module: item definitions, rarity tiers, loot tables and the item catalog.
"""

from .item import (
    BiomeItemModifier,
    ItemDefinition,
    ItemDrop,
    ItemEffect,
    ItemStack,
    LootTableEntry,
    RarityTier,
    RoomLoot,
)
from .item_catalog import ItemCatalog

__all__ = [
    "BiomeItemModifier",
    "ItemDefinition",
    "ItemDrop",
    "ItemEffect",
    "ItemStack",
    "LootTableEntry",
    "RarityTier",
    "RoomLoot",
    "ItemCatalog",
]
