"""
Recipe module for the crafting system.

Defines recipes, crafting stations and difficulty tiers as read from the
catalog, and the results handed back to the caller.
"""

from typing import Any

from pydantic import Field

from dungeonsim.core.constants import DEFAULT_SUCCESS_CHANCE, FailureConsequence, RoomType
from dungeonsim.core.models import CatalogModel, StateModel
from dungeonsim.items.item import ItemStack


class Ingredient(CatalogModel):
    """An item and the quantity a recipe needs or makes."""

    item_id: str = Field(description="Id of the item.")
    quantity: int = Field(default=1, ge=1)


class Recipe(CatalogModel):
    """
    Represents a crafting recipe.
    """

    id: str = Field(description="Unique identifier of the recipe.")
    name: str = Field(default="")
    description: str = Field(default="")
    category: str = Field(default="", description="Recipe group, e.g. WEAPON.")
    ingredients: list[Ingredient] = Field(description="Items consumed.")
    result: Ingredient = Field(description="Item produced.")
    station: str = Field(description="Id of the station the recipe needs.")
    difficulty: str = Field(description="Id of the difficulty tier.")
    level_required: int = Field(default=1, ge=1)
    crafting_time: int = Field(default=0, ge=0, description="Seconds.")
    experience: int = Field(default=0, ge=0)

    def model_post_init(self, _: Any) -> None:
        assert self.ingredients, f"Recipe '{self.id}' has no ingredients."


class CraftingStation(CatalogModel):
    """A place where recipes are crafted."""

    id: str
    name: str = Field(default="")
    description: str = Field(default="")
    required_in_dungeon: bool = Field(
        default=False,
        description="Whether the station only exists inside a dungeon room.",
    )
    dungeon_room_type: RoomType | None = Field(
        default=None,
        description="Room type hosting the station in a dungeon.",
    )


class CraftingDifficulty(CatalogModel):
    """Odds and failure cost of a difficulty tier."""

    id: str
    name: str = Field(default="")
    success_chance: float = Field(
        default=DEFAULT_SUCCESS_CHANCE,
        ge=0,
        le=100,
        description="Base success chance, in percent.",
    )
    failure_consequence: FailureConsequence = Field(
        default=FailureConsequence.MATERIALS_LOST_50,
    )


class MissingMaterial(StateModel):
    """An ingredient the inventory does not hold enough of."""

    item_id: str
    item_name: str
    needed: int
    have: int
    missing: int


class ProducedItem(ItemStack):
    enhanced: bool = Field(default=False, description="Made by a perfect craft.")


class CraftResult(StateModel):
    """
    The outcome of a craft attempt.
    """

    recipe_id: str
    success: bool
    perfect: bool = False
    materials_consumed: list[ItemStack] = Field(default_factory=list)
    items_produced: list[ProducedItem] = Field(default_factory=list)
    experience: int = 0


class AvailableRecipe(StateModel):
    """A recipe the player has the level for, with its material status."""

    recipe: Recipe
    can_craft: bool
    materials_missing: list[MissingMaterial] = Field(default_factory=list)
