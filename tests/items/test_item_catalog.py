"""
Tests for the item catalog: lookups, room loot and item valuation.
"""

import pytest

from dungeonsim.core.constants import Biome, ItemCategory, Rarity, RoomType
from dungeonsim.core.rng import SeededRandom
from dungeonsim.items.item import (
    BiomeItemModifier,
    ItemDefinition,
    ItemStack,
    LootTableEntry,
    RarityTier,
)
from dungeonsim.items.item_catalog import ItemCatalog


@pytest.fixture
def rng():
    return SeededRandom(2024)


def test_lookups(item_catalog):
    """Items can be fetched by id, category and rarity."""
    assert item_catalog.get_item("iron").name == "Iron Ore"
    assert item_catalog.get_item("missing") is None
    consumables = item_catalog.get_items_by_category(ItemCategory.CONSUMABLE)
    assert {item.id for item in consumables} == {"health_potion", "antidote", "strength_elixir"}
    assert {item.id for item in item_catalog.get_items_by_rarity(Rarity.RARE)} == {
        "rare_gem",
        "quest_key",
    }


def test_unknown_rarity_tier_is_neutral(item_catalog):
    """A rarity without a tier sells at face value."""
    assert item_catalog.get_rarity_tier(Rarity.EPIC).sell_multiplier == 1.0


@pytest.mark.parametrize(
    "floor, room_type, table",
    [
        (1, RoomType.LOOT, "common_loot"),
        (3, RoomType.LOOT, "uncommon_loot"),
        (5, RoomType.LOOT, "rare_loot"),
        (1, RoomType.BOSS, "boss_loot"),
        (9, RoomType.BOSS, "boss_loot"),
    ],
)
def test_select_loot_table(floor, room_type, table):
    """Boss rooms use the boss table; otherwise the floor picks the table."""
    assert ItemCatalog.select_loot_table(floor, room_type) == table


def test_auto_sell_items_become_coins(item_catalog, rng):
    """Auto-sell drops are converted to coins; other drops are kept."""
    loot = item_catalog.generate_room_loot(rng, Biome.CRYPT, floor_level=1)
    assert loot.coins == 5
    assert [(drop.item_id, drop.quantity) for drop in loot.items] == [("iron", 2)]
    assert loot.items[0].category == ItemCategory.MATERIAL
    assert loot.floor_level == 1
    assert loot.biome == "CRYPT"


def test_zero_chance_yields_nothing(rng):
    """A table of zero-chance entries never drops anything on early floors."""
    catalog = ItemCatalog(
        {"iron": ItemDefinition(id="iron", category=ItemCategory.MATERIAL, rarity=Rarity.COMMON)},
        loot_tables={"common_loot": [LootTableEntry(item="iron", chance=0.0)]},
    )
    for _ in range(50):
        loot = catalog.generate_room_loot(rng, floor_level=1)
        assert loot.items == []
        assert loot.coins == 0


def test_biome_bonus_applies(rng):
    """A biome's preferred items get the biome's bonus chance."""
    catalog = ItemCatalog(
        {"wood": ItemDefinition(id="wood", category=ItemCategory.MATERIAL, rarity=Rarity.COMMON)},
        loot_tables={"common_loot": [LootTableEntry(item="wood", chance=0.0)]},
        biome_modifiers={Biome.FOREST: BiomeItemModifier(preferred_items=["wood"], bonus_chance=1.0)},
    )
    forest = catalog.generate_room_loot(rng, Biome.FOREST, floor_level=1)
    assert [drop.item_id for drop in forest.items] == ["wood"]
    crypt = catalog.generate_room_loot(rng, Biome.CRYPT, floor_level=1)
    assert crypt.items == []


def test_boss_room_uses_boss_table(item_catalog, rng):
    """Boss rooms roll the boss table."""
    loot = item_catalog.generate_room_loot(rng, floor_level=1, room_type=RoomType.BOSS)
    assert [drop.item_id for drop in loot.items] == ["rare_gem"]


def test_missing_table_yields_empty_loot(rng):
    """Rolling a table that does not exist returns empty loot."""
    catalog = ItemCatalog({})
    loot = catalog.generate_room_loot(rng, floor_level=1)
    assert loot.items == []
    assert loot.coins == 0


def test_bonus_item_skips_quest_and_auto_sell(item_catalog):
    """Bonus items are never quest items or auto-sell items."""
    rng = SeededRandom(7)
    for _ in range(100):
        bonus = item_catalog.generate_bonus_item(rng, floor_level=9)
        assert bonus is None or bonus.item_id == "rare_gem"


def test_calculate_items_value(item_catalog):
    """Value is base value times quantity times the rarity's sell multiplier."""
    stacks = [
        ItemStack(item_id="iron", quantity=2),
        ItemStack(item_id="rare_gem", quantity=1),
        ItemStack(item_id="unknown", quantity=5),
    ]
    assert item_catalog.calculate_items_value(stacks) == 10 * 2 + 100 * 2


def test_items_value_keeps_fractions():
    """Fractional sell multipliers are summed without rounding."""
    catalog = ItemCatalog(
        {
            "herb": ItemDefinition(
                id="herb", category=ItemCategory.MATERIAL, rarity=Rarity.UNCOMMON, base_value=3
            )
        },
        rarity_tiers={Rarity.UNCOMMON: RarityTier(sell_multiplier=1.5)},
    )
    assert catalog.calculate_items_value([ItemStack(item_id="herb", quantity=1)]) == 4.5
    assert catalog.calculate_items_value(
        [ItemStack(item_id="herb", quantity=1), ItemStack(item_id="herb", quantity=2)]
    ) == 13.5


def test_from_dict_skips_bad_entries():
    """Invalid items and unknown rarity keys are dropped, not fatal."""
    catalog = ItemCatalog.from_dict(
        {
            "items": {
                "iron": {"category": "MATERIAL", "rarity": "COMMON"},
                "bad": {"category": "MATERIAL", "rarity": "SHINY"},
            },
            "rarityTypes": {"SHINY": {"sellMultiplier": 9}},
            "lootTables": {"common_loot": [{"item": "iron", "chance": 2.0}]},
        }
    )
    assert list(catalog.items) == ["iron"]
    assert catalog.rarity_tiers == {}
    assert catalog.loot_tables["common_loot"] == []


def test_loot_entry_quantity_range():
    """A quantity range is rolled inclusively; malformed ranges are rejected."""
    entry = LootTableEntry(item="iron", chance=1.0, quantity=(2, 4))
    rng = SeededRandom(1)
    assert all(2 <= entry.roll_quantity(rng) <= 4 for _ in range(30))
    with pytest.raises((ValueError, AssertionError)):
        LootTableEntry(item="iron", chance=1.0, quantity=(5, 2))
