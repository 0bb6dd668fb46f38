"""
AI pattern module.

An AI pattern decides which skill a monster uses on its turn. Boss patterns
are small state machines: each phase names another pattern, looked up by id,
that takes over once the boss drops below the phase's HP threshold.
"""

from pydantic import Field

from dungeonsim.core.constants import (
    BASIC_ATTACK_ID,
    BERSERKER_HP_THRESHOLD,
    SUPPORT_HP_THRESHOLD,
    AIBehavior,
    SkillType,
)
from dungeonsim.core.errors import report_data_integrity
from dungeonsim.core.logging import log_debug
from dungeonsim.core.models import CatalogModel
from dungeonsim.core.rng import SeededRandom
from dungeonsim.mobs.skill import Skill


class BossPhase(CatalogModel):
    """A boss phase: below ``hp_threshold`` the named pattern takes over."""

    hp_threshold: float = Field(
        ge=0,
        le=1,
        description="Fraction of max HP at or below which the phase is active.",
    )
    behavior: str = Field(description="Id of the pattern used during the phase.")


class AIPattern(CatalogModel):
    """
    A named behavior profile for skill selection.
    """

    id: str = Field(description="Unique identifier of the pattern.")
    behavior: AIBehavior = Field(
        default=AIBehavior.PASSIVE,
        description="Heuristic used to pick among the preferred skills.",
    )
    skill_usage_chance: float = Field(
        default=0.3,
        ge=0,
        le=1,
        description="Probability of using a skill instead of a basic attack.",
    )
    preferred_skills: list[str] = Field(
        default_factory=list,
        description="Skill types or skill ids the pattern favours.",
    )
    phases: list[BossPhase] = Field(
        default_factory=list,
        description="Ordered boss phases, only read by BOSS patterns.",
    )

    def prefers(self, skill: Skill) -> bool:
        return skill.type.value in self.preferred_skills or skill.id in self.preferred_skills

    def resolve_phase(self, hp_percent: float) -> BossPhase | None:
        """
        Returns the active phase: the first one whose threshold is at or above
        the current HP fraction, else the first phase.
        """
        for phase in self.phases:
            if hp_percent <= phase.hp_threshold:
                return phase
        return self.phases[0] if self.phases else None


def validate_patterns(patterns: dict[str, AIPattern]) -> dict[str, AIPattern]:
    """
    Drops boss phases that point at unknown patterns or close a cycle.

    Args:
        patterns (dict[str, AIPattern]):
            The patterns as loaded from the catalog.

    Returns:
        dict[str, AIPattern]:
            The same patterns, with offending phases removed.

    """
    checked = dict(patterns)
    for pattern_id in list(checked):
        kept: list[BossPhase] = []
        for phase in checked[pattern_id].phases:
            if phase.behavior not in checked:
                report_data_integrity(
                    f"Pattern '{pattern_id}' has a phase for unknown pattern "
                    f"'{phase.behavior}', dropping it.",
                    {"pattern": pattern_id, "phase": phase.behavior},
                )
                continue
            if _reaches(checked, phase.behavior, pattern_id):
                report_data_integrity(
                    f"Pattern '{pattern_id}' phase '{phase.behavior}' forms a "
                    "cycle, dropping it.",
                    {"pattern": pattern_id, "phase": phase.behavior},
                )
                continue
            kept.append(phase)
        if len(kept) != len(checked[pattern_id].phases):
            checked[pattern_id] = checked[pattern_id].model_copy(update={"phases": kept})
    return checked


def _reaches(patterns: dict[str, AIPattern], start: str, target: str) -> bool:
    """Whether following boss phases from ``start`` leads to ``target``."""
    stack = [start]
    seen: set[str] = set()
    while stack:
        current = stack.pop()
        if current == target:
            return True
        if current in seen or current not in patterns:
            continue
        seen.add(current)
        pattern = patterns[current]
        if pattern.behavior == AIBehavior.BOSS:
            stack.extend(phase.behavior for phase in pattern.phases)
    return False


def select_skill_by_ai(
    available: list[Skill],
    pattern: AIPattern,
    patterns: dict[str, AIPattern],
    hp_percent: float,
    rng: SeededRandom,
) -> Skill:
    """
    Picks a skill among those off cooldown.

    Args:
        available (list[Skill]):
            Non-empty list of skills the monster can use right now.
        pattern (AIPattern):
            The monster's pattern.
        patterns (dict[str, AIPattern]):
            Every known pattern, to resolve boss phases.
        hp_percent (float):
            The monster's current HP as a fraction of its max HP.
        rng (SeededRandom):
            The random source.

    Returns:
        Skill:
            The chosen skill.

    """
    pool = available
    visited: set[str] = set()
    while True:
        visited.add(pattern.id)
        if not rng.chance(pattern.skill_usage_chance):
            return _basic_or_first(pool)

        preferred = [skill for skill in pool if pattern.prefers(skill)]
        pool = preferred or pool

        if pattern.behavior == AIBehavior.BERSERKER and hp_percent < BERSERKER_HP_THRESHOLD:
            attacks = [skill for skill in pool if skill.type == SkillType.ATTACK]
            return rng.choice(attacks or pool)

        if pattern.behavior == AIBehavior.SUPPORT and hp_percent < SUPPORT_HP_THRESHOLD:
            heals = [skill for skill in pool if skill.type == SkillType.HEAL]
            if heals:
                return rng.choice(heals)
            return rng.choice(pool)

        if pattern.behavior == AIBehavior.BOSS:
            phase = pattern.resolve_phase(hp_percent)
            next_pattern = patterns.get(phase.behavior) if phase else None
            if next_pattern is not None and next_pattern.id not in visited:
                log_debug(
                    "Boss phase active",
                    {"pattern": pattern.id, "phase": next_pattern.id, "hp": hp_percent},
                )
                pattern = next_pattern
                continue

        return rng.choice(pool)


def _basic_or_first(skills: list[Skill]) -> Skill:
    for skill in skills:
        if skill.id == BASIC_ATTACK_ID:
            return skill
    return skills[0]


def passive_pattern() -> AIPattern:
    """The pattern used when a monster names an unknown one."""
    return AIPattern(id="PASSIVE", behavior=AIBehavior.PASSIVE, skill_usage_chance=0.3)
