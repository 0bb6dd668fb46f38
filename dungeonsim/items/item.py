"""
Item module for the dungeon simulation.

Defines item definitions, rarity tiers, loot-table entries and the stacks and
drops that flow between the catalogs, the crafting manager and the caller.
"""

from typing import Any

from pydantic import Field

from dungeonsim.core.constants import (
    ItemCategory,
    ItemEffectType,
    Rarity,
    StatusEffectType,
)
from dungeonsim.core.models import CatalogModel, StateModel
from dungeonsim.core.rng import SeededRandom


class ItemEffect(CatalogModel):
    """
    What a consumable does when used during a battle.
    """

    type: ItemEffectType = Field(description="How the effect is resolved.")
    value: float = Field(
        default=0,
        description="HP restored for HEAL, stat multiplier for BUFF.",
    )
    stat: str | None = Field(
        default=None,
        description="Stat affected by a BUFF (atk, def, spd, lck).",
    )
    status: StatusEffectType | None = Field(
        default=None,
        description="Status removed by CURE (all when omitted) or applied by APPLY_STATUS.",
    )
    duration: int | None = Field(
        default=None,
        description="Duration of an applied status effect, in rounds.",
    )
    chance: float = Field(
        default=1.0,
        ge=0,
        le=1,
        description="Probability that an applied status sticks.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.type == ItemEffectType.BUFF:
            assert self.stat, "BUFF item effects must name a stat."
        if self.type == ItemEffectType.APPLY_STATUS:
            assert self.status, "APPLY_STATUS item effects must name a status."


class ItemDefinition(CatalogModel):
    """
    Represents an item as described in the item catalog.
    """

    id: str = Field(description="Unique identifier of the item.")
    name: str = Field(default="", description="Display name of the item.")
    description: str = Field(default="")
    category: ItemCategory = Field(description="The category of the item.")
    rarity: Rarity = Field(description="The rarity of the item.")
    stackable: bool = Field(default=True)
    max_stack: int = Field(default=99, ge=1)
    base_value: float = Field(default=0, ge=0, description="Value in coins.")
    auto_sell: bool = Field(
        default=False,
        description="Converted to coins as soon as it drops.",
    )
    effects: list[ItemEffect] = Field(default_factory=list)
    requirements: dict[str, int] | None = Field(
        default=None,
        description="Minimum level or stats needed to use the item.",
    )

    @property
    def colored_name(self) -> str:
        return self.rarity.colorize(self.name or self.id)

    def model_post_init(self, _: Any) -> None:
        assert self.id, "Item id must not be empty."

    @property
    def stack_limit(self) -> int:
        return self.max_stack if self.stackable else 1


class RarityTier(CatalogModel):
    """
    Multipliers attached to a rarity bracket.

    The item catalog reads ``sell_multiplier``; the mob catalog reads the
    stat, loot and experience multipliers.
    """

    icon: str = Field(default="⚫")
    name: str = Field(default="")
    sell_multiplier: float = Field(default=1.0, ge=0)
    loot_multiplier: float = Field(default=1.0, ge=0)
    xp_multiplier: float = Field(default=1.0, ge=0)
    stat_multiplier: float = Field(default=1.0, gt=0)


class LootTableEntry(CatalogModel):
    """A possible drop: an item id, its drop chance and its quantity."""

    item: str = Field(description="Id of the dropped item.")
    chance: float = Field(ge=0, le=1, description="Drop probability.")
    quantity: int | tuple[int, int] = Field(
        default=1,
        description="Fixed quantity or an inclusive [min, max] range.",
    )

    def model_post_init(self, _: Any) -> None:
        if isinstance(self.quantity, tuple):
            low, high = self.quantity
            assert 0 < low <= high, "Loot quantity range must satisfy 0 < min <= max."
        else:
            assert self.quantity > 0, "Loot quantity must be positive."

    def roll_quantity(self, rng: SeededRandom) -> int:
        """Returns the fixed quantity, or draws one from the range."""
        if isinstance(self.quantity, tuple):
            return rng.randint(*self.quantity)
        return self.quantity


class BiomeItemModifier(CatalogModel):
    """Items a biome favours and the extra drop chance they get."""

    preferred_items: list[str] = Field(default_factory=list)
    bonus_chance: float = Field(default=0.0, ge=0)


class ItemStack(StateModel):
    """A quantity of one item, as held in an inventory."""

    item_id: str = Field(description="Id of the item.")
    quantity: int = Field(ge=0, description="How many are held.")


class ItemDrop(ItemStack):
    """An item produced by loot generation, carrying its catalog data."""

    name: str = Field(default="")
    category: ItemCategory = Field(description="The category of the item.")
    rarity: Rarity = Field(description="The rarity of the item.")
    base_value: float = Field(default=0)

    @classmethod
    def from_definition(cls, item: ItemDefinition, quantity: int) -> "ItemDrop":
        return cls(
            item_id=item.id,
            quantity=quantity,
            name=item.name,
            category=item.category,
            rarity=item.rarity,
            base_value=item.base_value,
        )


class RoomLoot(StateModel):
    """Result of a room loot roll."""

    items: list[ItemDrop] = Field(default_factory=list)
    coins: int = Field(default=0, ge=0)
    floor_level: int | None = Field(default=None)
    biome: str | None = Field(default=None)
