"""
Status effect module for the combat engine.

Defines the timed modifiers attached to combatants, the catalog description of
an effect a skill or item may inflict, and the per-round tick that applies
damage over time, regeneration and expiry.
"""

import math
from typing import TYPE_CHECKING

from pydantic import Field

from dungeonsim.core.constants import (
    DEFAULT_STATUS_DURATION,
    STATUS_TICK_RATIOS,
    StatusEffectType,
)
from dungeonsim.core.logging import log_debug
from dungeonsim.core.models import CatalogModel, StateModel
from dungeonsim.core.rng import SeededRandom

if TYPE_CHECKING:
    from dungeonsim.combat.combatant import Combatant


class StatusEffectSpec(CatalogModel):
    """A status effect that a skill or item inflicts, with its odds."""

    type: StatusEffectType = Field(description="The status to apply.")
    duration: int = Field(
        default=DEFAULT_STATUS_DURATION,
        ge=1,
        description="Rounds the status lasts.",
    )
    chance: float = Field(
        default=1.0,
        ge=0,
        le=1,
        description="Probability that the status is applied.",
    )


class StatusEffect(StateModel):
    """
    A status currently affecting a combatant.
    """

    type: StatusEffectType = Field(description="The kind of status.")
    duration: int = Field(ge=0, description="Rounds left before it expires.")
    source: str = Field(default="", description="Who inflicted the status.")

    @property
    def colored_name(self) -> str:
        return self.type.colorize(f"{self.type.emoji} {self.type.display_name}")


class StatusTick(StateModel):
    """What a status did to its owner during one round."""

    type: StatusEffectType
    hp_change: int = Field(
        default=0,
        description="Negative for damage, positive for healing.",
    )
    expired: bool = False


def apply_status_effect(
    target: "Combatant",
    spec: StatusEffectSpec,
    source: str,
    rng: SeededRandom,
) -> bool:
    """
    Rolls a status effect against a target.

    A status already present is refreshed to the longer of the two durations
    instead of stacking.

    Args:
        target (Combatant):
            The combatant receiving the status.
        spec (StatusEffectSpec):
            The status, its duration and its chance.
        source (str):
            Name of whoever inflicted the status.
        rng (SeededRandom):
            The random source.

    Returns:
        bool:
            True if the status was applied or refreshed.

    """
    if not rng.chance(spec.chance):
        return False
    for effect in target.status_effects:
        if effect.type == spec.type:
            effect.duration = max(effect.duration, spec.duration)
            effect.source = source
            log_debug(
                "Status refreshed",
                {"target": target.name, "status": spec.type, "duration": effect.duration},
            )
            return True
    target.status_effects.append(
        StatusEffect(type=spec.type, duration=spec.duration, source=source)
    )
    log_debug(
        "Status applied",
        {"target": target.name, "status": spec.type, "duration": spec.duration},
    )
    return True


def process_status_effects(target: "Combatant") -> list[StatusTick]:
    """
    Ticks every status of a combatant once.

    Damage and healing are a fixed share of max HP, rounded down. Each status
    then loses one round and is removed when it reaches zero. HP stays within
    [0, max_hp].

    Args:
        target (Combatant): The combatant whose statuses tick.

    Returns:
        list[StatusTick]: One entry per status, in application order.

    """
    ticks: list[StatusTick] = []
    remaining: list[StatusEffect] = []
    for effect in target.status_effects:
        hp_change = 0
        ratio = STATUS_TICK_RATIOS.get(effect.type)
        if ratio is not None:
            amount = math.floor(target.max_hp * abs(ratio))
            before = target.current_hp
            if ratio > 0:
                target.current_hp = max(0, target.current_hp - amount)
            else:
                target.current_hp = min(target.max_hp, target.current_hp + amount)
            hp_change = target.current_hp - before
        effect.duration -= 1
        expired = effect.duration <= 0
        if not expired:
            remaining.append(effect)
        ticks.append(StatusTick(type=effect.type, hp_change=hp_change, expired=expired))
    target.status_effects = remaining
    return ticks


def remove_status_effects(
    target: "Combatant",
    status: StatusEffectType | None = None,
) -> list[StatusEffect]:
    """Removes one status type, or every status when none is given."""
    removed = [e for e in target.status_effects if status is None or e.type == status]
    target.status_effects = [e for e in target.status_effects if e not in removed]
    return removed
