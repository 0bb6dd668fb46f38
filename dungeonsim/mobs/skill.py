"""
Skill module.

Skills are shared by monsters and players; the combat engine resolves them by
their ``type``.
"""

from typing import Any

from pydantic import Field

from dungeonsim.core.constants import (
    BASIC_ATTACK_ID,
    DEFAULT_ATTACK_ACCURACY,
    DEFAULT_DEBUFF_ACCURACY,
    SkillType,
)
from dungeonsim.core.models import CatalogModel
from dungeonsim.effects.status_effect import StatusEffectSpec


class Skill(CatalogModel):
    """
    Represents an action a combatant can take on its turn.
    """

    id: str = Field(description="Unique identifier of the skill.")
    name: str = Field(default="", description="Display name of the skill.")
    description: str = Field(default="")
    type: SkillType = Field(
        default=SkillType.ATTACK,
        description="How the combat engine resolves the skill.",
    )
    power: float = Field(
        default=10,
        ge=0,
        description="Attack multiplier, in tenths of the attacker's ATK.",
    )
    accuracy: float | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Base hit chance before the defender's evasion.",
    )
    heal: int = Field(default=0, ge=0, description="HP restored by a HEAL skill.")
    cooldown: int = Field(default=0, ge=0, description="Rounds before reuse.")
    effects: list[StatusEffectSpec] = Field(
        default_factory=list,
        description="Statuses the skill may inflict (or grant, for BUFF).",
    )
    buffs: dict[str, float] = Field(
        default_factory=dict,
        description="Stat multipliers applied by a BUFF skill.",
    )

    @property
    def hit_accuracy(self) -> float:
        """The accuracy used for hit rolls, with the per-type default."""
        if self.accuracy is not None:
            return self.accuracy
        if self.type == SkillType.DEBUFF:
            return DEFAULT_DEBUFF_ACCURACY
        return DEFAULT_ATTACK_ACCURACY

    @property
    def colored_name(self) -> str:
        return f"{self.type.emoji} [bold]{self.name or self.id}[/]"

    def model_post_init(self, _: Any) -> None:
        assert self.id, "Skill id must not be empty."
        if self.type == SkillType.HEAL:
            assert self.heal > 0, f"HEAL skill '{self.id}' must restore some HP."


BASIC_ATTACK = Skill(
    id=BASIC_ATTACK_ID,
    name="Basic Attack",
    type=SkillType.ATTACK,
    power=10,
    accuracy=DEFAULT_ATTACK_ACCURACY,
    cooldown=0,
)
