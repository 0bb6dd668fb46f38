"""
Battle actions module.

Defines the action a player requests for a turn and the record of what each
side actually did.
"""

from typing import Any

from pydantic import Field

from dungeonsim.core.constants import ActionType, CombatantSide, StatusEffectType
from dungeonsim.core.models import StateModel


class PlayerAction(StateModel):
    """
    The action a player requests for the current round.
    """

    type: ActionType = Field(description="What the player wants to do.")
    skill_id: str | None = Field(
        default=None,
        description="Skill used by an attack (basic attack when omitted) or skill action.",
    )
    item_id: str | None = Field(
        default=None,
        description="Consumable used by an item action.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.type == ActionType.SKILL:
            assert self.skill_id, "A skill action must name a skill."
        if self.type == ActionType.ITEM:
            assert self.item_id, "An item action must name an item."


class ActionOutcome(StateModel):
    """
    What one combatant did during a round.
    """

    side: CombatantSide = Field(description="Who acted.")
    action: ActionType = Field(description="The kind of action taken.")
    skill_id: str | None = None
    item_id: str | None = None
    skipped: bool = Field(
        default=False,
        description="True when a status prevented the action.",
    )
    hit: bool | None = Field(default=None, description="None when no roll was made.")
    damage: int = 0
    critical: bool = False
    heal: int = 0
    fled: bool | None = None
    statuses_applied: list[StatusEffectType] = Field(default_factory=list)
    logs: list[str] = Field(default_factory=list)
