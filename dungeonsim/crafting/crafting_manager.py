"""
Crafting manager module.

Loads recipes, stations and difficulty tiers, validates craft requests against
a caller-owned inventory and resolves craft attempts.
"""

import math
from collections import Counter
from collections.abc import Mapping
from typing import Any

from dungeonsim.core.constants import (
    CRAFTING_SKILL_BONUS_CAP,
    CRAFTING_SKILL_BONUS_PER_POINT,
    CRAFTING_TIME_REDUCTION_CAP,
    FAILED_CRAFT_EXPERIENCE_RATIO,
    PERFECT_CRAFT_EXPERIENCE_BONUS,
    PERFECT_CRAFT_THRESHOLD,
)
from dungeonsim.core.content import parse_records
from dungeonsim.core.errors import NotFoundError, ValidationError, report_data_integrity
from dungeonsim.core.logging import log_debug, log_info
from dungeonsim.core.rng import SeededRandom
from dungeonsim.crafting.recipe import (
    AvailableRecipe,
    CraftingDifficulty,
    CraftingStation,
    CraftResult,
    MissingMaterial,
    ProducedItem,
    Recipe,
)
from dungeonsim.dungeon.room import Room
from dungeonsim.items.item import ItemStack
from dungeonsim.items.item_catalog import ItemCatalog

Inventory = list[ItemStack]


class CraftingManager:
    """
    Read-only registry of recipes that also resolves craft attempts.

    Attributes:
        recipes (dict[str, Recipe]):
            Recipes keyed by id, in catalog order.
        stations (dict[str, CraftingStation]):
            Crafting stations keyed by id.
        difficulties (dict[str, CraftingDifficulty]):
            Difficulty tiers keyed by id.
        item_catalog (ItemCatalog | None):
            Used for item names in messages and searches.

    """

    def __init__(
        self,
        recipes: dict[str, Recipe],
        stations: dict[str, CraftingStation] | None = None,
        difficulties: dict[str, CraftingDifficulty] | None = None,
        item_catalog: ItemCatalog | None = None,
    ) -> None:
        self.recipes = recipes
        self.stations = stations or {}
        self.difficulties = difficulties or {}
        self.item_catalog = item_catalog
        self._check_references()

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        item_catalog: ItemCatalog | None = None,
    ) -> "CraftingManager":
        """
        Builds the manager from the content of a recipes file.

        Args:
            data (dict[str, Any]):
                Mapping with the ``recipes``, ``craftingStations`` and
                ``craftingDifficulties`` sections.
            item_catalog (ItemCatalog | None):
                The item catalog, to check ingredient ids and name items.

        Returns:
            CraftingManager: The loaded manager.

        """
        manager = cls(
            parse_records(data.get("recipes"), Recipe, "recipes", with_id=True),
            parse_records(
                data.get("craftingStations"), CraftingStation, "craftingStations", with_id=True
            ),
            parse_records(
                data.get("craftingDifficulties"),
                CraftingDifficulty,
                "craftingDifficulties",
                with_id=True,
            ),
            item_catalog,
        )
        log_info(
            f"Crafting loaded with {len(manager.recipes)} recipes",
            {"stations": len(manager.stations), "difficulties": len(manager.difficulties)},
        )
        return manager

    def _check_references(self) -> None:
        for recipe in self.recipes.values():
            if recipe.station not in self.stations:
                report_data_integrity(
                    f"Recipe '{recipe.id}' uses unknown station '{recipe.station}'.",
                    {"recipe": recipe.id, "station": recipe.station},
                )
            if recipe.difficulty not in self.difficulties:
                report_data_integrity(
                    f"Recipe '{recipe.id}' uses unknown difficulty '{recipe.difficulty}'.",
                    {"recipe": recipe.id, "difficulty": recipe.difficulty},
                )
            if self.item_catalog is None:
                continue
            for item_id in [i.item_id for i in recipe.ingredients] + [recipe.result.item_id]:
                if self.item_catalog.get_item(item_id) is None:
                    report_data_integrity(
                        f"Recipe '{recipe.id}' references unknown item '{item_id}'.",
                        {"recipe": recipe.id, "item": item_id},
                    )

    # ============================================================================
    # QUERIES
    # ============================================================================

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Get a recipe by id, or None if not found."""
        return self.recipes.get(recipe_id)

    def get_station(self, station_id: str) -> CraftingStation | None:
        return self.stations.get(station_id)

    def get_all_recipes(self) -> list[Recipe]:
        return list(self.recipes.values())

    def get_recipes_by_category(self, category: str) -> list[Recipe]:
        return [r for r in self.recipes.values() if r.category == category]

    def get_recipes_by_station(self, station_id: str) -> list[Recipe]:
        return [r for r in self.recipes.values() if r.station == station_id]

    def search_recipes(self, query: str) -> list[Recipe]:
        """Finds recipes whose name, description or ingredient names match."""
        term = query.lower()
        found = []
        for recipe in self.recipes.values():
            names = [recipe.name, recipe.description]
            names.extend(self._item_name(i.item_id) for i in recipe.ingredients)
            if any(term in name.lower() for name in names):
                found.append(recipe)
        return found

    def get_available_recipes(
        self,
        player_level: int,
        inventory: Inventory,
        current_station: str | None = None,
    ) -> list[AvailableRecipe]:
        """
        Lists the recipes the player has the level for.

        Args:
            player_level (int):
                The player's level.
            inventory (Inventory):
                The player's inventory.
            current_station (str | None):
                When given, only recipes for this station are listed.

        Returns:
            list[AvailableRecipe]:
                The recipes, each with whether it can be crafted right now.

        """
        available = []
        for recipe in self.recipes.values():
            if recipe.level_required > player_level:
                continue
            if current_station and recipe.station != current_station:
                continue
            available.append(
                AvailableRecipe(
                    recipe=recipe,
                    can_craft=self.can_craft_recipe(recipe, inventory),
                    materials_missing=self.get_missing_materials(recipe, inventory),
                )
            )
        return available

    def is_station_available(self, station_id: str, room: Room | None = None) -> bool:
        """
        Whether a station can be used from where the player stands.

        Stations not bound to the dungeon are always available; the others
        need the player to be in a room of the station's room type.
        """
        station = self.get_station(station_id)
        if station is None:
            return False
        if not station.required_in_dungeon:
            return True
        return room is not None and room.type == station.dungeon_room_type

    def get_crafting_time(
        self,
        recipe_id: str,
        player_stats: Mapping[str, int] | None = None,
    ) -> int:
        """
        Seconds a craft takes; every crafting point cuts 2%, at most 50%.

        Raises:
            NotFoundError: If the recipe does not exist.

        """
        recipe = self.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe not found: {recipe_id}")
        crafting = (player_stats or {}).get("crafting", 0)
        if not crafting:
            return recipe.crafting_time
        reduction = min(crafting * CRAFTING_SKILL_BONUS_PER_POINT, CRAFTING_TIME_REDUCTION_CAP)
        return math.ceil(recipe.crafting_time * (100 - reduction) / 100)

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_recipes": len(self.recipes),
            "stations": len(self.stations),
            "difficulties": len(self.difficulties),
            "recipes_by_station": dict(Counter(r.station for r in self.recipes.values())),
        }

    # ============================================================================
    # CRAFTING
    # ============================================================================

    @staticmethod
    def _find_stack(inventory: Inventory, item_id: str) -> ItemStack | None:
        for stack in inventory:
            if stack.item_id == item_id:
                return stack
        return None

    def _item_name(self, item_id: str) -> str:
        if self.item_catalog is not None:
            item = self.item_catalog.get_item(item_id)
            if item is not None and item.name:
                return item.name
        return item_id

    def can_craft_recipe(self, recipe: Recipe, inventory: Inventory) -> bool:
        """Whether the inventory holds every ingredient in the needed quantity."""
        for ingredient in recipe.ingredients:
            stack = self._find_stack(inventory, ingredient.item_id)
            if stack is None or stack.quantity < ingredient.quantity:
                return False
        return True

    def get_missing_materials(self, recipe: Recipe, inventory: Inventory) -> list[MissingMaterial]:
        missing = []
        for ingredient in recipe.ingredients:
            stack = self._find_stack(inventory, ingredient.item_id)
            have = stack.quantity if stack else 0
            if have < ingredient.quantity:
                missing.append(
                    MissingMaterial(
                        item_id=ingredient.item_id,
                        item_name=self._item_name(ingredient.item_id),
                        needed=ingredient.quantity,
                        have=have,
                        missing=ingredient.quantity - have,
                    )
                )
        return missing

    def craft_item(
        self,
        recipe_id: str,
        inventory: Inventory,
        player_level: int,
        rng: SeededRandom,
        player_stats: Mapping[str, int] | None = None,
    ) -> CraftResult:
        """
        Attempts a craft.

        A single roll in [0, 100) decides the craft: it succeeds when the roll
        is at or below the success chance, and is perfect when it also lands
        at or below 5. Success consumes every ingredient; failure consumes a
        share of each, rounded up and never more than held. Produced items
        are returned, not added to the inventory.

        Args:
            recipe_id (str):
                Id of the recipe.
            inventory (Inventory):
                The player's inventory, updated in place.
            player_level (int):
                The player's level.
            rng (SeededRandom):
                The random source.
            player_stats (Mapping[str, int] | None):
                Optional stats; ``crafting`` raises the success chance.

        Returns:
            CraftResult:
                Materials consumed, items produced and experience earned.

        Raises:
            ValidationError: If the recipe is unknown, the level is too low or
                materials are missing. The inventory is left untouched.

        """
        recipe = self.get_recipe(recipe_id)
        if recipe is None:
            raise ValidationError(f"Recipe not found: {recipe_id}")
        if recipe.level_required > player_level:
            raise ValidationError(
                f"Level {recipe.level_required} is required for this recipe."
            )
        if not self.can_craft_recipe(recipe, inventory):
            missing = ", ".join(
                f"{m.missing}x {m.item_name}"
                for m in self.get_missing_materials(recipe, inventory)
            )
            raise ValidationError(f"Insufficient materials: {missing}")

        difficulty = self.difficulties.get(recipe.difficulty) or CraftingDifficulty(
            id=recipe.difficulty
        )
        crafting = (player_stats or {}).get("crafting", 0)
        success_chance = difficulty.success_chance + min(
            crafting * CRAFTING_SKILL_BONUS_PER_POINT, CRAFTING_SKILL_BONUS_CAP
        )
        roll = rng.random() * 100
        success = roll <= success_chance
        perfect = success and roll <= PERFECT_CRAFT_THRESHOLD

        result = CraftResult(
            recipe_id=recipe.id,
            success=success,
            perfect=perfect,
            materials_consumed=self._consume_materials(
                recipe, inventory, success, difficulty.failure_consequence.loss_fraction
            ),
        )
        if success:
            result.items_produced.append(
                ProducedItem(
                    item_id=recipe.result.item_id,
                    quantity=recipe.result.quantity + (1 if perfect else 0),
                    enhanced=perfect,
                )
            )
            result.experience = recipe.experience + (
                PERFECT_CRAFT_EXPERIENCE_BONUS if perfect else 0
            )
        else:
            result.experience = math.floor(recipe.experience * FAILED_CRAFT_EXPERIENCE_RATIO)

        log_debug(
            "Craft attempted",
            {"recipe": recipe.id, "roll": round(roll, 2), "chance": success_chance,
             "success": success, "perfect": perfect},
        )
        return result

    def _consume_materials(
        self,
        recipe: Recipe,
        inventory: Inventory,
        success: bool,
        loss_fraction: float,
    ) -> list[ItemStack]:
        consumed = []
        for ingredient in recipe.ingredients:
            stack = self._find_stack(inventory, ingredient.item_id)
            if stack is None:
                continue
            wanted = ingredient.quantity
            if not success:
                wanted = math.ceil(ingredient.quantity * loss_fraction)
            taken = min(wanted, stack.quantity)
            stack.quantity -= taken
            consumed.append(ItemStack(item_id=ingredient.item_id, quantity=taken))
            if stack.quantity <= 0:
                inventory.remove(stack)
        return consumed
