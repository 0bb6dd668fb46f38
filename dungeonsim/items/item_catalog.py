"""
Item catalog module.

Holds item definitions, rarity tiers, named loot tables and biome item
affinities, and rolls room loot from them.
"""

import math
from collections.abc import Iterable
from typing import Any

from dungeonsim.core.constants import (
    BONUS_ITEM_CHANCE,
    BONUS_ITEM_MAX_BRACKET,
    BONUS_ITEM_MIN_FLOOR,
    BONUS_ITEM_RARITY_CHANCES,
    BOSS_LOOT_TABLE,
    COMMON_LOOT_TABLE,
    RARE_LOOT_FLOOR,
    RARE_LOOT_TABLE,
    UNCOMMON_LOOT_FLOOR,
    UNCOMMON_LOOT_TABLE,
    Biome,
    ItemCategory,
    Rarity,
    RoomType,
)
from dungeonsim.core.content import parse_records
from dungeonsim.core.errors import CatalogLoadError, report_data_integrity
from dungeonsim.core.logging import log_debug, log_info
from dungeonsim.core.rng import SeededRandom
from dungeonsim.items.item import (
    BiomeItemModifier,
    ItemDefinition,
    ItemDrop,
    ItemStack,
    LootTableEntry,
    RarityTier,
    RoomLoot,
)


class ItemCatalog:
    """
    Read-only registry of every item known to the game.

    Attributes:
        items (dict[str, ItemDefinition]):
            Item definitions keyed by id, in catalog order.
        rarity_tiers (dict[Rarity, RarityTier]):
            Multipliers for each rarity.
        loot_tables (dict[str, list[LootTableEntry]]):
            Named loot tables.
        biome_modifiers (dict[Biome, BiomeItemModifier]):
            Preferred items and bonus chance for each biome.
        categories (dict[str, str]):
            Human readable description of each item category.

    """

    def __init__(
        self,
        items: dict[str, ItemDefinition],
        rarity_tiers: dict[Rarity, RarityTier] | None = None,
        loot_tables: dict[str, list[LootTableEntry]] | None = None,
        biome_modifiers: dict[Biome, BiomeItemModifier] | None = None,
        categories: dict[str, str] | None = None,
    ) -> None:
        self.items = items
        self.rarity_tiers = rarity_tiers or {}
        self.loot_tables = loot_tables or {}
        self.biome_modifiers = biome_modifiers or {}
        self.categories = categories or {}
        self._check_loot_tables()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemCatalog":
        """
        Builds the catalog from the content of an items file.

        Args:
            data (dict[str, Any]):
                Mapping with the ``items``, ``rarityTypes``, ``lootTables``,
                ``biomeItemModifiers`` and ``itemCategories`` sections.

        Returns:
            ItemCatalog: The loaded catalog.

        Raises:
            CatalogLoadError: If a section has the wrong shape.

        """
        items = parse_records(data.get("items"), ItemDefinition, "items", with_id=True)
        rarity_tiers = {
            Rarity(key): tier
            for key, tier in parse_records(
                _known_keys(data.get("rarityTypes"), Rarity, "rarityTypes"),
                RarityTier,
                "rarityTypes",
            ).items()
        }
        biome_modifiers = {
            Biome(key): modifier
            for key, modifier in parse_records(
                _known_keys(data.get("biomeItemModifiers"), Biome, "biomeItemModifiers"),
                BiomeItemModifier,
                "biomeItemModifiers",
            ).items()
        }
        loot_tables = _parse_loot_tables(data.get("lootTables"))
        categories = {str(k): str(v) for k, v in (data.get("itemCategories") or {}).items()}
        catalog = cls(items, rarity_tiers, loot_tables, biome_modifiers, categories)
        log_info(
            f"Item catalog loaded with {len(items)} items",
            {"loot_tables": len(loot_tables), "rarities": len(rarity_tiers)},
        )
        return catalog

    def _check_loot_tables(self) -> None:
        for table_id, entries in self.loot_tables.items():
            for entry in entries:
                if entry.item not in self.items:
                    report_data_integrity(
                        f"Loot table '{table_id}' references unknown item '{entry.item}'.",
                        {"table": table_id, "item": entry.item},
                    )

    # ============================================================================
    # QUERIES
    # ============================================================================

    def get_item(self, item_id: str) -> ItemDefinition | None:
        """Get an item by id, or None if not found."""
        return self.items.get(item_id)

    def get_items_by_category(self, category: ItemCategory) -> list[ItemDefinition]:
        return [item for item in self.items.values() if item.category == category]

    def get_items_by_rarity(self, rarity: Rarity) -> list[ItemDefinition]:
        return [item for item in self.items.values() if item.rarity == rarity]

    def get_rarity_tier(self, rarity: Rarity) -> RarityTier:
        """Get the tier of a rarity; unknown rarities use neutral multipliers."""
        return self.rarity_tiers.get(rarity) or RarityTier(name=rarity.display_name)

    def get_stats(self) -> dict[str, int]:
        return {
            "total_items": len(self.items),
            "loot_tables": len(self.loot_tables),
            "rarity_types": len(self.rarity_tiers),
            "categories": len(self.categories),
            "biomes": len(self.biome_modifiers),
        }

    # ============================================================================
    # LOOT
    # ============================================================================

    @staticmethod
    def select_loot_table(floor_level: int, room_type: RoomType) -> str:
        """
        Returns the name of the loot table used for a room.

        Boss rooms always use the boss table; otherwise the floor decides.
        """
        if room_type == RoomType.BOSS:
            return BOSS_LOOT_TABLE
        if floor_level >= RARE_LOOT_FLOOR:
            return RARE_LOOT_TABLE
        if floor_level >= UNCOMMON_LOOT_FLOOR:
            return UNCOMMON_LOOT_TABLE
        return COMMON_LOOT_TABLE

    def generate_room_loot(
        self,
        rng: SeededRandom,
        biome: Biome = Biome.CRYPT,
        floor_level: int = 1,
        room_type: RoomType = RoomType.LOOT,
    ) -> RoomLoot:
        """
        Rolls the loot found in a room.

        Args:
            rng (SeededRandom):
                The random source.
            biome (Biome):
                The biome of the floor; its preferred items get a bonus chance.
            floor_level (int):
                The floor number.
            room_type (RoomType):
                The type of the room being looted.

        Returns:
            RoomLoot:
                The dropped items and the coins from auto-sold drops.

        """
        table_id = self.select_loot_table(floor_level, room_type)
        table = self.loot_tables.get(table_id)
        if table is None:
            report_data_integrity(
                f"Loot table '{table_id}' not found.",
                {"table": table_id, "floor": floor_level},
            )
            return RoomLoot(floor_level=floor_level, biome=biome.value)

        modifier = self.biome_modifiers.get(biome)
        items: list[ItemDrop] = []
        coins = 0
        for entry in table:
            chance = entry.chance
            if modifier and entry.item in modifier.preferred_items:
                chance += modifier.bonus_chance
            if not rng.chance(chance):
                continue
            item = self.get_item(entry.item)
            if item is None:
                report_data_integrity(
                    f"Item '{entry.item}' not found, skipping drop.",
                    {"table": table_id, "item": entry.item},
                )
                continue
            quantity = entry.roll_quantity(rng)
            if item.auto_sell:
                coins += math.floor(item.base_value * quantity)
            else:
                items.append(ItemDrop.from_definition(item, quantity))

        if floor_level >= BONUS_ITEM_MIN_FLOOR and rng.chance(BONUS_ITEM_CHANCE):
            bonus = self.generate_bonus_item(rng, floor_level)
            if bonus is not None:
                items.append(bonus)

        log_debug(
            "Room loot rolled",
            {"table": table_id, "items": len(items), "coins": coins},
        )
        return RoomLoot(items=items, coins=coins, floor_level=floor_level, biome=biome.value)

    def generate_bonus_item(self, rng: SeededRandom, floor_level: int) -> ItemDrop | None:
        """
        Picks one extra item whose rarity depends on the floor.

        Returns None when no eligible item has the rolled rarity.
        """
        bracket = min((floor_level - 1) // 2 * 2 + 1, BONUS_ITEM_MAX_BRACKET)
        rarity = rng.weighted_choice(BONUS_ITEM_RARITY_CHANCES[bracket])
        candidates = [
            item
            for item in self.get_items_by_rarity(rarity)
            if not item.auto_sell and item.category != ItemCategory.QUEST
        ]
        if not candidates:
            return None
        return ItemDrop.from_definition(rng.choice(candidates), 1)

    def calculate_items_value(self, stacks: Iterable[ItemStack]) -> float:
        """
        Sums the sell value of a list of stacks.

        Each stack is worth ``base_value * quantity * sell_multiplier``; unknown
        item ids are reported and count as zero.

        Args:
            stacks (Iterable[ItemStack]): The stacks to value.

        Returns:
            float: The total value, not rounded.

        """
        total = 0.0
        for stack in stacks:
            item = self.get_item(stack.item_id)
            if item is None:
                report_data_integrity(
                    f"Cannot value unknown item '{stack.item_id}'.",
                    {"item": stack.item_id},
                )
                continue
            tier = self.get_rarity_tier(item.rarity)
            total += item.base_value * stack.quantity * tier.sell_multiplier
        return total


def _known_keys(section: Any, enum_type: type, description: str) -> Any:
    """Drops (with a warning) the keys of a section that are not enum values."""
    if not isinstance(section, dict):
        return section
    valid = {member.value for member in enum_type}
    known = {}
    for key, value in section.items():
        if key in valid:
            known[key] = value
        else:
            report_data_integrity(
                f"Skipping unknown key '{key}' in {description}.",
                {"section": description, "key": key},
            )
    return known


def _parse_loot_tables(section: Any) -> dict[str, list[LootTableEntry]]:
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise CatalogLoadError(
            f"Section 'lootTables' must be an object, got {type(section).__name__}"
        )
    tables: dict[str, list[LootTableEntry]] = {}
    for table_id, raw_entries in section.items():
        if not isinstance(raw_entries, list):
            report_data_integrity(
                f"Skipping loot table '{table_id}': not a list.",
                {"table": table_id},
            )
            continue
        tables[table_id] = parse_loot_entries(raw_entries, f"lootTables.{table_id}")
    return tables


def parse_loot_entries(raw_entries: list[Any], description: str) -> list[LootTableEntry]:
    """Validates a list of loot entries, skipping the malformed ones."""
    records = parse_records(
        {str(index): raw for index, raw in enumerate(raw_entries)},
        LootTableEntry,
        description,
    )
    return list(records.values())
