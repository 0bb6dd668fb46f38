"""
Mob catalog module.

Indexes monster templates by id, biome and category, builds scaled monster
instances, drives monster skill selection and rolls post-battle loot.
"""

import math
from collections import Counter
from typing import Any

from dungeonsim.core.constants import (
    BASIC_ATTACK_ID,
    DEFAULT_AI_PATTERN,
    MOB_LEVEL_TOLERANCE,
    Biome,
    MobCategory,
    Rarity,
    StatusEffectType,
)
from dungeonsim.core.content import parse_records
from dungeonsim.core.errors import NotFoundError, report_data_integrity
from dungeonsim.core.logging import log_debug, log_info
from dungeonsim.core.rng import SeededRandom
from dungeonsim.items.item import ItemStack, RarityTier
from dungeonsim.mobs.ai_pattern import (
    AIPattern,
    passive_pattern,
    select_skill_by_ai,
    validate_patterns,
)
from dungeonsim.mobs.mob import MobInstance, MobLoot, MobTemplate
from dungeonsim.mobs.skill import BASIC_ATTACK, Skill


class MobCatalog:
    """
    Read-only registry of monster templates, skills and AI patterns.

    Attributes:
        mobs (dict[str, MobTemplate]):
            Templates keyed by id, in catalog order.
        skills (dict[str, Skill]):
            The global skill table, shared with players.
        ai_patterns (dict[str, AIPattern]):
            Behavior profiles keyed by id.
        rarity_modifiers (dict[Rarity, RarityTier]):
            Stat, loot and XP multipliers per rarity.

    """

    def __init__(
        self,
        mobs: dict[str, MobTemplate],
        skills: dict[str, Skill] | None = None,
        ai_patterns: dict[str, AIPattern] | None = None,
        rarity_modifiers: dict[Rarity, RarityTier] | None = None,
    ) -> None:
        self.mobs = mobs
        self.skills = dict(skills or {})
        self.skills.setdefault(BASIC_ATTACK_ID, BASIC_ATTACK)
        patterns = dict(ai_patterns or {})
        patterns.setdefault(DEFAULT_AI_PATTERN, passive_pattern())
        self.ai_patterns = validate_patterns(patterns)
        self.rarity_modifiers = rarity_modifiers or {}

        self.mobs_by_biome: dict[Biome, list[str]] = {}
        self.mobs_by_category: dict[MobCategory, list[str]] = {}
        for mob_id, template in self.mobs.items():
            for biome in template.biomes:
                self.mobs_by_biome.setdefault(biome, []).append(mob_id)
            self.mobs_by_category.setdefault(template.category, []).append(mob_id)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        known_items: set[str] | None = None,
    ) -> "MobCatalog":
        """
        Builds the catalog from the content of a mobs file.

        Args:
            data (dict[str, Any]):
                Mapping with the ``mobs``, ``skills``, ``aiPatterns`` and
                ``rarityModifiers`` sections.
            known_items (set[str] | None):
                Ids of the items in the item catalog. When given, loot entries
                for other items are reported and dropped.

        Returns:
            MobCatalog: The loaded catalog.

        """
        skills = parse_records(data.get("skills"), Skill, "skills", with_id=True)
        patterns = parse_records(data.get("aiPatterns"), AIPattern, "aiPatterns", with_id=True)
        patterns.setdefault(DEFAULT_AI_PATTERN, passive_pattern())

        rarity_modifiers: dict[Rarity, RarityTier] = {}
        for key, tier in parse_records(
            data.get("rarityModifiers"), RarityTier, "rarityModifiers"
        ).items():
            if key in Rarity.__members__:
                rarity_modifiers[Rarity(key)] = tier
            else:
                report_data_integrity(
                    f"Skipping modifier for unknown rarity '{key}'.", {"rarity": key}
                )

        raw_mobs = {
            mob_id: _normalize_mob_record(mob_id, raw, patterns)
            for mob_id, raw in (data.get("mobs") or {}).items()
        }
        mobs = parse_records(raw_mobs, MobTemplate, "mobs", with_id=True)
        if known_items is not None:
            mobs = {
                mob_id: _drop_unknown_loot(template, known_items)
                for mob_id, template in mobs.items()
            }

        catalog = cls(mobs, skills, patterns, rarity_modifiers)
        log_info(
            f"Mob catalog loaded with {len(mobs)} mobs",
            {"skills": len(catalog.skills), "patterns": len(catalog.ai_patterns)},
        )
        return catalog

    # ============================================================================
    # QUERIES
    # ============================================================================

    def get_mob(self, mob_id: str) -> MobTemplate | None:
        """Get a mob template by id, or None if not found."""
        return self.mobs.get(mob_id)

    def get_mobs_for_biome(self, biome: Biome) -> list[MobTemplate]:
        return [self.mobs[mob_id] for mob_id in self.mobs_by_biome.get(biome, [])]

    def get_mobs_by_category(self, category: MobCategory) -> list[MobTemplate]:
        return [self.mobs[mob_id] for mob_id in self.mobs_by_category.get(category, [])]

    def get_skill(self, skill_id: str) -> Skill | None:
        return self.skills.get(skill_id)

    def get_rarity_modifier(self, rarity: Rarity) -> RarityTier:
        """The modifier of a rarity, falling back to COMMON, then to neutral."""
        return (
            self.rarity_modifiers.get(rarity)
            or self.rarity_modifiers.get(Rarity.COMMON)
            or RarityTier()
        )

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_mobs": len(self.mobs),
            "mobs_by_biome": {str(b): len(ids) for b, ids in self.mobs_by_biome.items()},
            "mobs_by_category": {
                str(c): len(ids) for c, ids in self.mobs_by_category.items()
            },
            "mobs_by_rarity": {
                str(r): n for r, n in Counter(m.rarity for m in self.mobs.values()).items()
            },
        }

    # ============================================================================
    # INSTANCES
    # ============================================================================

    def get_random_mob_for_biome(
        self,
        biome: Biome,
        target_level: int,
        rng: SeededRandom,
        category: MobCategory | None = None,
    ) -> MobInstance:
        """
        Picks a monster for an encounter and creates it at the target level.

        The pool is the biome's monsters (restricted to the category when
        given) whose level range is within two levels of the target. When that
        is empty the whole biome pool is used, then every BASIC monster.

        Args:
            biome (Biome):
                The biome of the encounter.
            target_level (int):
                Level the monster is created at.
            rng (SeededRandom):
                The random source.
            category (MobCategory | None):
                Optional category filter.

        Returns:
            MobInstance:
                The new monster.

        Raises:
            NotFoundError: If every fallback pool is empty.

        """
        biome_pool = self.mobs_by_biome.get(biome, [])
        candidates = list(biome_pool)
        if category is not None:
            in_category = set(self.mobs_by_category.get(category, []))
            candidates = [mob_id for mob_id in candidates if mob_id in in_category]
        candidates = [
            mob_id
            for mob_id in candidates
            if self.mobs[mob_id].overlaps_level(target_level, MOB_LEVEL_TOLERANCE)
        ]
        if not candidates:
            candidates = list(biome_pool)
        if not candidates:
            candidates = list(self.mobs_by_category.get(MobCategory.BASIC, []))
        if not candidates:
            raise NotFoundError(f"No mob found for biome {biome}.")
        return self.create_mob_instance(rng.choice(candidates), rng, target_level)

    def create_mob_instance(
        self,
        mob_id: str,
        rng: SeededRandom,
        level: int | None = None,
    ) -> MobInstance:
        """
        Creates a battle-ready monster from its template.

        Args:
            mob_id (str):
                Id of the template.
            rng (SeededRandom):
                The random source, used when no level is given.
            level (int | None):
                Level of the monster; drawn from the template's range if None.

        Returns:
            MobInstance:
                The monster at full HP, with no statuses and no cooldowns.

        Raises:
            NotFoundError: If the template does not exist.

        """
        template = self.get_mob(mob_id)
        if template is None:
            raise NotFoundError(f"Mob not found: {mob_id}")
        if level is None:
            level = rng.randint(*template.level_range)

        tier = self.get_rarity_modifier(template.rarity)
        stats = template.base_stats.scaled(level, tier.stat_multiplier)
        pattern = self.ai_patterns.get(template.ai_pattern) or self.ai_patterns[
            DEFAULT_AI_PATTERN
        ]
        return MobInstance(
            template_id=template.id,
            name=template.name or template.id,
            level=level,
            category=template.category,
            rarity=template.rarity,
            biomes=template.biomes,
            stats=stats,
            current_hp=stats.hp,
            skills=self.resolve_skills(template.skills, template.id),
            ai_pattern=pattern,
            loot_table=template.loot_table,
            xp_reward=template.xp_reward,
            rarity_tier=tier,
        )

    def resolve_skills(self, skill_ids: list[str], owner: str = "") -> list[Skill]:
        """Looks skills up by id; unknown ids become the basic attack."""
        skills = []
        for skill_id in skill_ids:
            skill = self.skills.get(skill_id)
            if skill is None:
                report_data_integrity(
                    f"Skill '{skill_id}' not found, using basic attack.",
                    {"owner": owner, "skill": skill_id},
                )
                skill = self.skills[BASIC_ATTACK_ID]
            skills.append(skill)
        return skills or [self.skills[BASIC_ATTACK_ID]]

    # ============================================================================
    # AI
    # ============================================================================

    def select_mob_skill(
        self,
        skills: list[Skill],
        skill_cooldowns: dict[str, int],
        status_effects: list[StatusEffectType],
        current_hp: int,
        max_hp: int,
        pattern: AIPattern,
        rng: SeededRandom,
    ) -> Skill | None:
        """
        Chooses the skill a monster uses this turn.

        Args:
            skills (list[Skill]):
                The monster's skills.
            skill_cooldowns (dict[str, int]):
                Rounds left before each skill id can be used again.
            status_effects (list[StatusEffectType]):
                The monster's active statuses.
            current_hp (int):
                The monster's HP.
            max_hp (int):
                The monster's maximum HP.
            pattern (AIPattern):
                The monster's AI pattern.
            rng (SeededRandom):
                The random source.

        Returns:
            Skill | None:
                The skill to use, or None if the monster loses its turn.

        """
        if any(status.prevents_actions for status in status_effects):
            return None
        available = [skill for skill in skills if skill_cooldowns.get(skill.id, 0) <= 0]
        if not available:
            for skill in skills:
                if skill.id == BASIC_ATTACK_ID:
                    return skill
            return self.skills[BASIC_ATTACK_ID]
        hp_percent = current_hp / max_hp if max_hp else 0.0
        return select_skill_by_ai(available, pattern, self.ai_patterns, hp_percent, rng)

    # ============================================================================
    # LOOT
    # ============================================================================

    def generate_loot(self, mob: MobInstance, rng: SeededRandom, player_level: int = 1) -> MobLoot:
        """
        Rolls the drops and experience of a defeated monster.

        Every drop chance is multiplied by the rarity's loot multiplier; the
        experience is drawn from the template's range and multiplied by the
        rarity's XP multiplier, rounding down.

        Args:
            mob (MobInstance):
                The defeated monster.
            rng (SeededRandom):
                The random source.
            player_level (int):
                Level of the player, recorded for the caller.

        Returns:
            MobLoot:
                Dropped stacks and experience.

        """
        tier = mob.rarity_tier
        items: list[ItemStack] = []
        for entry in mob.loot_table:
            if rng.random() < entry.chance * tier.loot_multiplier:
                items.append(ItemStack(item_id=entry.item, quantity=entry.roll_quantity(rng)))
        xp = math.floor(rng.randint(*mob.xp_reward) * tier.xp_multiplier)
        log_debug(
            "Mob loot rolled",
            {"mob": mob.template_id, "items": len(items), "xp": xp, "player_level": player_level},
        )
        return MobLoot(
            items=items,
            xp=xp,
            mob_name=mob.name,
            mob_level=mob.level,
            rarity=mob.rarity,
        )


def _normalize_mob_record(
    mob_id: str,
    raw: Any,
    patterns: dict[str, AIPattern],
) -> Any:
    """Replaces unknown rarity and AI pattern ids by their defaults."""
    if not isinstance(raw, dict):
        return raw
    record = dict(raw)
    rarity = record.get("rarity")
    if rarity is not None and rarity not in Rarity.__members__:
        report_data_integrity(
            f"Mob '{mob_id}' has unknown rarity '{rarity}', using COMMON.",
            {"mob": mob_id, "rarity": rarity},
        )
        record["rarity"] = Rarity.COMMON.value
    pattern = record.get("aiPattern", DEFAULT_AI_PATTERN)
    if pattern not in patterns:
        report_data_integrity(
            f"Mob '{mob_id}' has unknown AI pattern '{pattern}', using "
            f"{DEFAULT_AI_PATTERN}.",
            {"mob": mob_id, "pattern": pattern},
        )
        record["aiPattern"] = DEFAULT_AI_PATTERN
    return record


def _drop_unknown_loot(template: MobTemplate, known_items: set[str]) -> MobTemplate:
    kept = []
    for entry in template.loot_table:
        if entry.item in known_items:
            kept.append(entry)
        else:
            report_data_integrity(
                f"Mob '{template.id}' drops unknown item '{entry.item}', skipping it.",
                {"mob": template.id, "item": entry.item},
            )
    if len(kept) == len(template.loot_table):
        return template
    return template.model_copy(update={"loot_table": kept})
