"""
Mob module.

Defines monster templates as read from the catalog, the battle-ready instances
created from them, and the loot a defeated monster leaves behind.
"""

import math
from typing import Any

from pydantic import Field

from dungeonsim.core.constants import LEVEL_STAT_GROWTH, Biome, MobCategory, Rarity
from dungeonsim.core.models import CatalogModel, StateModel
from dungeonsim.items.item import ItemStack, LootTableEntry, RarityTier
from dungeonsim.mobs.ai_pattern import AIPattern
from dungeonsim.mobs.skill import Skill


class BaseStats(CatalogModel):
    """The five stats shared by monsters and players."""

    hp: int = Field(ge=1, description="Maximum hit points.")
    atk: int = Field(default=0, ge=0, description="Attack.")
    defense: int = Field(default=0, ge=0, alias="def", description="Defense.")
    spd: int = Field(default=0, ge=0, description="Speed.")
    lck: int = Field(default=0, ge=0, description="Luck.")

    def scaled(self, level: int, stat_multiplier: float) -> "BaseStats":
        """
        Returns the stats of a monster of the given level.

        Every stat grows by 10% per level above 1 and is multiplied by the
        rarity's stat multiplier, rounding down.
        """
        level_multiplier = 1 + (level - 1) * LEVEL_STAT_GROWTH

        def scale(value: int) -> int:
            return math.floor(value * level_multiplier * stat_multiplier)

        return BaseStats(
            hp=max(1, scale(self.hp)),
            atk=scale(self.atk),
            defense=scale(self.defense),
            spd=scale(self.spd),
            lck=scale(self.lck),
        )


class MobTemplate(CatalogModel):
    """
    Represents a monster as described in the mob catalog.
    """

    id: str = Field(description="Unique identifier of the monster.")
    name: str = Field(default="", description="Display name.")
    description: str = Field(default="")
    level_range: tuple[int, int] = Field(description="Inclusive [min, max] level.")
    base_stats: BaseStats = Field(description="Stats at level 1.")
    biomes: list[Biome] = Field(default_factory=list)
    category: MobCategory = Field(default=MobCategory.BASIC)
    rarity: Rarity = Field(default=Rarity.COMMON)
    skills: list[str] = Field(default_factory=list, description="Skill ids.")
    loot_table: list[LootTableEntry] = Field(default_factory=list)
    ai_pattern: str = Field(default="PASSIVE", description="AI pattern id.")
    xp_reward: tuple[int, int] = Field(description="Inclusive [min, max] XP.")

    def model_post_init(self, _: Any) -> None:
        low, high = self.level_range
        assert 1 <= low <= high, f"Invalid level range {self.level_range} for '{self.id}'."
        low, high = self.xp_reward
        assert 0 <= low <= high, f"Invalid xp reward {self.xp_reward} for '{self.id}'."

    def overlaps_level(self, target_level: int, tolerance: int) -> bool:
        low, high = self.level_range
        return low - tolerance <= target_level <= high + tolerance


class MobInstance(StateModel):
    """
    A monster created for one encounter, never reused.
    """

    template_id: str
    name: str
    level: int = Field(ge=1)
    category: MobCategory
    rarity: Rarity
    biomes: list[Biome] = Field(default_factory=list)
    stats: BaseStats = Field(description="Stats scaled to level and rarity.")
    current_hp: int = Field(ge=0)
    skills: list[Skill] = Field(default_factory=list)
    ai_pattern: AIPattern
    loot_table: list[LootTableEntry] = Field(default_factory=list)
    xp_reward: tuple[int, int]
    rarity_tier: RarityTier = Field(default_factory=RarityTier)

    @property
    def max_hp(self) -> int:
        return self.stats.hp

    @property
    def colored_name(self) -> str:
        return self.rarity.colorize(self.name)


class MobLoot(StateModel):
    """What a defeated monster drops."""

    items: list[ItemStack] = Field(default_factory=list)
    xp: int = Field(ge=0)
    mob_name: str
    mob_level: int
    rarity: Rarity
