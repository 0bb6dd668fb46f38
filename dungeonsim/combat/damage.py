"""
Damage module for the combat engine.

Pure formulas for hit, damage, critical, heal and flee rolls. Each function
draws from the given ``SeededRandom`` in a fixed order so battles replay
exactly.
"""

import math

from dungeonsim.combat.combatant import Combatant
from dungeonsim.core.constants import (
    CRITICAL_MULTIPLIER,
    DAMAGE_VARIANCE,
    EVASION_DIVISOR,
    FLEE_BASE_CAP,
    FLEE_BIOME_MULTIPLIERS,
    FLEE_CATEGORY_MULTIPLIERS,
    FLEE_HP_BONUSES,
    FLEE_MAX_CHANCE,
    FLEE_MIN_CHANCE,
    FLEE_SPEED_OFFSET,
    MIN_HIT_CHANCE,
    Biome,
)
from dungeonsim.core.rng import SeededRandom
from dungeonsim.mobs.skill import Skill


def hit_chance(skill: Skill, defender: Combatant) -> float:
    """The skill's accuracy minus the defender's evasion, at least 10%."""
    return max(MIN_HIT_CHANCE, skill.hit_accuracy - defender.spd / EVASION_DIVISOR)


def check_hit(skill: Skill, defender: Combatant, rng: SeededRandom) -> bool:
    return rng.random() < hit_chance(skill, defender)


def calculate_damage(
    attacker: Combatant,
    defender: Combatant,
    skill: Skill,
    rng: SeededRandom,
) -> float:
    """
    Computes the raw damage of an attack.

    ``atk * power / 10 - def / 2``, with up to 10% random variance either way,
    never below 1.

    Args:
        attacker (Combatant): The attacking side.
        defender (Combatant): The defending side.
        skill (Skill): The skill used.
        rng (SeededRandom): The random source.

    Returns:
        float: The damage before critical hits, at least 1.

    """
    base = attacker.atk * (skill.power / 10) - defender.defense / 2
    variance = base * (rng.random() * (2 * DAMAGE_VARIANCE) - DAMAGE_VARIANCE)
    return max(1.0, base + variance)


def check_critical(attacker: Combatant, rng: SeededRandom) -> bool:
    return rng.random() < attacker.lck / 100


def apply_critical(damage: float, critical: bool) -> int:
    """Rounds damage down after the critical multiplier; the result is >= 1."""
    return math.floor(damage * (CRITICAL_MULTIPLIER if critical else 1))


def calculate_heal(target: Combatant, amount: int) -> int:
    """A skill heal plus a tenth of the healer's luck, capped at missing HP."""
    total = amount + math.floor(target.lck / 10)
    return min(total, target.max_hp - target.current_hp)


def calculate_flee_chance(
    player: Combatant,
    mob: Combatant,
    biome: Biome | None = None,
) -> float:
    """
    Computes the probability that a flee attempt succeeds.

    The base chance ``spd / (opponent_spd + 50)`` is capped at 80%. A wounded
    player gets a bonus (+20% under 30% HP, +10% under 50%), then the chance is
    scaled by the monster's category and the biome, and clamped to
    [5%, 95%].

    Args:
        player (Combatant): The fleeing player.
        mob (Combatant): The monster being fled from.
        biome (Biome | None): The biome of the battle, if known.

    Returns:
        float: The flee probability.

    """
    chance = min(FLEE_BASE_CAP, player.spd / (mob.spd + FLEE_SPEED_OFFSET))
    for threshold, bonus in FLEE_HP_BONUSES:
        if player.hp_percent < threshold:
            chance += bonus
            break
    if mob.category is not None:
        chance *= FLEE_CATEGORY_MULTIPLIERS.get(mob.category, 1.0)
    if biome is not None:
        chance *= FLEE_BIOME_MULTIPLIERS.get(biome, 1.0)
    return min(FLEE_MAX_CHANCE, max(FLEE_MIN_CHANCE, chance))
