"""
Battle state module.

A ``BattleState`` holds everything about one encounter, including the state
of its random source, so a snapshot taken between two turns is enough to
continue the battle identically.
"""

from pydantic import Field

from dungeonsim.combat.actions import ActionOutcome
from dungeonsim.combat.combatant import Combatant
from dungeonsim.core.constants import BattleOutcome, Biome, CombatantSide
from dungeonsim.core.models import StateModel
from dungeonsim.mobs.mob import MobInstance, MobLoot


class BattleState(StateModel):
    """
    The full mutable state of one ongoing encounter.
    """

    id: str = Field(description="Identifier of the battle.")
    player: Combatant
    mob: Combatant
    mob_instance: MobInstance = Field(
        description="The monster as created for the encounter, used for loot.",
    )
    turn: int = Field(default=1, ge=1, description="Number of the next action.")
    turn_order: list[CombatantSide] = Field(
        description="Both sides, the next one to act first.",
    )
    logs: list[str] = Field(default_factory=list)
    start_time: float = Field(description="Unix time the battle started.")
    biome: Biome | None = None
    rng_state: int = Field(ge=0, description="State of the battle's random source.")

    def combatant(self, side: CombatantSide) -> Combatant:
        return self.player if side == CombatantSide.PLAYER else self.mob

    def opponent(self, side: CombatantSide) -> Combatant:
        return self.mob if side == CombatantSide.PLAYER else self.player

    def advance_turn(self) -> None:
        """Passes the turn to the other side."""
        self.turn += 1
        self.turn_order.append(self.turn_order.pop(0))

    def check_battle_end(self) -> BattleOutcome | None:
        """The player's defeat is checked first."""
        if self.player.current_hp <= 0:
            return BattleOutcome.LOSS
        if self.mob.current_hp <= 0:
            return BattleOutcome.WIN
        return None


class TurnResult(StateModel):
    """
    Everything that happened during one ``execute_turn`` call.
    """

    battle_id: str
    actions: list[ActionOutcome] = Field(default_factory=list)
    logs: list[str] = Field(default_factory=list)
    battle_ended: bool = False
    outcome: BattleOutcome | None = Field(
        default=None,
        description="WIN or LOSS once resolved; None while ongoing or after a flee.",
    )
    fled: bool = False
    loot: MobLoot | None = None
    battle: BattleState = Field(description="The battle after the round.")
