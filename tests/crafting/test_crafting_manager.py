"""
Tests for the crafting manager: lookups, availability and craft attempts.

Rolls are in [0, 100): seed 1 rolls 25.12, seed 20 rolls 0.87 and seed 42
rolls 88.59.
"""

import pytest

from dungeonsim.core.constants import RoomType
from dungeonsim.core.errors import NotFoundError, ValidationError
from dungeonsim.core.rng import SeededRandom
from dungeonsim.crafting.crafting_manager import CraftingManager
from dungeonsim.crafting.recipe import Ingredient, Recipe
from dungeonsim.dungeon.room import Room
from dungeonsim.items.item import ItemStack


def stacks(**quantities):
    return [ItemStack(item_id=item_id, quantity=qty) for item_id, qty in quantities.items()]


def as_dict(inventory):
    return {stack.item_id: stack.quantity for stack in inventory}


# ============================================================================
# QUERIES
# ============================================================================


def test_lookups(crafting_manager):
    assert crafting_manager.get_recipe("iron_sword").station == "forge"
    assert crafting_manager.get_recipe("nope") is None
    assert crafting_manager.get_station("forge").dungeon_room_type == RoomType.WORKSHOP
    assert len(crafting_manager.get_all_recipes()) == 3
    assert [r.id for r in crafting_manager.get_recipes_by_category("ARMOR")] == ["heavy_plate"]
    assert [r.id for r in crafting_manager.get_recipes_by_station("campfire")] == [
        "cursed_trinket"
    ]


def test_stats(crafting_manager):
    stats = crafting_manager.get_stats()
    assert stats["total_recipes"] == 3
    assert stats["stations"] == 2
    assert stats["difficulties"] == 3
    assert stats["recipes_by_station"] == {"forge": 2, "campfire": 1}


def test_search_recipes(crafting_manager):
    """Search matches names, descriptions and ingredient names."""
    assert [r.id for r in crafting_manager.search_recipes("PLATE")] == ["heavy_plate"]
    assert [r.id for r in crafting_manager.search_recipes("simple blade")] == ["iron_sword"]
    assert {r.id for r in crafting_manager.search_recipes("oak")} == {
        "iron_sword",
        "cursed_trinket",
    }
    assert crafting_manager.search_recipes("dragon") == []


def test_station_availability(crafting_manager):
    assert crafting_manager.is_station_available("campfire")
    assert not crafting_manager.is_station_available("forge")
    assert crafting_manager.is_station_available("forge", Room(type=RoomType.WORKSHOP))
    assert not crafting_manager.is_station_available("forge", Room(type=RoomType.EMPTY))
    assert not crafting_manager.is_station_available("anvil_of_doom")


def test_crafting_time(crafting_manager):
    """Each crafting point cuts the time by 2%, at most by half."""
    assert crafting_manager.get_crafting_time("iron_sword") == 60
    assert crafting_manager.get_crafting_time("iron_sword", {"crafting": 10}) == 48
    assert crafting_manager.get_crafting_time("iron_sword", {"crafting": 100}) == 30
    assert crafting_manager.get_crafting_time("iron_sword", {"crafting": 3}) == 57
    with pytest.raises(NotFoundError):
        crafting_manager.get_crafting_time("nope")


def test_missing_materials(crafting_manager):
    recipe = crafting_manager.get_recipe("iron_sword")
    missing = crafting_manager.get_missing_materials(recipe, stacks(iron=1))
    assert [(m.item_name, m.needed, m.have, m.missing) for m in missing] == [
        ("Iron Ore", 2, 1, 1),
        ("Oak Wood", 1, 0, 1),
    ]
    assert crafting_manager.get_missing_materials(recipe, stacks(iron=2, wood=1)) == []


def test_available_recipes(crafting_manager):
    """Only recipes within the player's level are listed."""
    available = crafting_manager.get_available_recipes(1, stacks(iron=2, wood=1))
    by_id = {a.recipe.id: a for a in available}
    assert set(by_id) == {"iron_sword", "cursed_trinket"}
    assert by_id["iron_sword"].can_craft
    assert not by_id["cursed_trinket"].can_craft
    assert len(by_id["cursed_trinket"].materials_missing) == 2

    at_forge = crafting_manager.get_available_recipes(5, [], current_station="forge")
    assert [a.recipe.id for a in at_forge] == ["iron_sword", "heavy_plate"]
    assert not any(a.can_craft for a in at_forge)


def test_first_matching_stack_is_used(crafting_manager):
    """Stacks are not summed; the first one holding the item counts."""
    recipe = crafting_manager.get_recipe("iron_sword")
    inventory = [
        ItemStack(item_id="iron", quantity=1),
        ItemStack(item_id="iron", quantity=5),
        ItemStack(item_id="wood", quantity=1),
    ]
    assert not crafting_manager.can_craft_recipe(recipe, inventory)


# ============================================================================
# CRAFTING
# ============================================================================


def test_insufficient_materials(crafting_manager):
    """A refused craft leaves the inventory alone."""
    inventory = stacks(iron=1)
    with pytest.raises(ValidationError, match="Insufficient materials"):
        crafting_manager.craft_item("iron_sword", inventory, 5, SeededRandom(1))
    assert as_dict(inventory) == {"iron": 1}


def test_level_too_low(crafting_manager):
    inventory = stacks(iron=3)
    with pytest.raises(ValidationError):
        crafting_manager.craft_item("heavy_plate", inventory, 1, SeededRandom(1))
    assert as_dict(inventory) == {"iron": 3}


def test_unknown_recipe(crafting_manager):
    with pytest.raises(ValidationError):
        crafting_manager.craft_item("nope", stacks(iron=3), 5, SeededRandom(1))


def test_successful_craft(crafting_manager):
    """Success consumes every ingredient and returns the result."""
    inventory = stacks(iron=3, wood=1)
    result = crafting_manager.craft_item("iron_sword", inventory, 1, SeededRandom(1))
    assert result.success
    assert not result.perfect
    assert as_dict(inventory) == {"iron": 1}
    assert [(s.item_id, s.quantity) for s in result.materials_consumed] == [
        ("iron", 2),
        ("wood", 1),
    ]
    assert len(result.items_produced) == 1
    produced = result.items_produced[0]
    assert (produced.item_id, produced.quantity, produced.enhanced) == ("iron_sword", 1, False)
    assert result.experience == 20


def test_perfect_craft(crafting_manager):
    """A very low roll gives an extra enhanced item and bonus experience."""
    result = crafting_manager.craft_item(
        "iron_sword", stacks(iron=2, wood=1), 1, SeededRandom(20)
    )
    assert result.success
    assert result.perfect
    assert result.items_produced[0].quantity == 2
    assert result.items_produced[0].enhanced
    assert result.experience == 70


def test_failed_craft_loses_half(crafting_manager):
    """A failed normal craft loses half of each ingredient, rounded up."""
    inventory = stacks(iron=4, wood=1)
    result = crafting_manager.craft_item("iron_sword", inventory, 1, SeededRandom(42))
    assert not result.success
    assert not result.perfect
    assert result.items_produced == []
    assert as_dict(inventory) == {"iron": 3}
    assert result.experience == 5


def test_failed_hard_craft(crafting_manager):
    inventory = stacks(iron=5)
    result = crafting_manager.craft_item("heavy_plate", inventory, 5, SeededRandom(42))
    assert not result.success
    assert result.materials_consumed[0].quantity == 3
    assert as_dict(inventory) == {"iron": 2}
    assert result.experience == 10


def test_failed_craft_loses_everything(crafting_manager):
    inventory = stacks(iron=3, wood=2)
    result = crafting_manager.craft_item("cursed_trinket", inventory, 1, SeededRandom(1))
    assert not result.success
    assert inventory == []
    assert result.experience == 2


def test_crafting_skill_raises_success(crafting_manager):
    """Crafting adds 2 points per level of success chance, at most 30."""
    result = crafting_manager.craft_item(
        "iron_sword", stacks(iron=2, wood=1), 1, SeededRandom(42), {"crafting": 10}
    )
    assert result.success

    result = crafting_manager.craft_item(
        "heavy_plate", stacks(iron=3), 5, SeededRandom(42), {"crafting": 100}
    )
    assert not result.success


def test_unknown_difficulty_defaults(item_catalog):
    """An unknown difficulty tier behaves like a 50% tier losing half."""
    recipe = Recipe(
        id="odd",
        ingredients=[Ingredient(item_id="iron", quantity=2)],
        result=Ingredient(item_id="iron_sword"),
        station="campfire",
        difficulty="WEIRD",
    )
    manager = CraftingManager({"odd": recipe}, item_catalog=item_catalog)
    success = manager.craft_item("odd", stacks(iron=2), 1, SeededRandom(1))
    assert success.success
    inventory = stacks(iron=2)
    failure = manager.craft_item("odd", inventory, 1, SeededRandom(42))
    assert not failure.success
    assert as_dict(inventory) == {"iron": 1}


def test_recipe_needs_ingredients():
    with pytest.raises((ValueError, AssertionError)):
        Recipe(
            id="empty",
            ingredients=[],
            result=Ingredient(item_id="iron"),
            station="campfire",
            difficulty="NORMAL",
        )
