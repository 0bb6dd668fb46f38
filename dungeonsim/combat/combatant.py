"""
Combatant module.

Both sides of a battle are normalized into a ``Combatant`` so the combat
engine resolves player and monster actions through the same code.
"""

import math

from pydantic import Field

from dungeonsim.core.constants import (
    BASIC_ATTACK_ID,
    CombatantSide,
    MobCategory,
    StatusEffectType,
)
from dungeonsim.core.models import StateModel
from dungeonsim.effects.status_effect import StatusEffect
from dungeonsim.mobs.ai_pattern import AIPattern
from dungeonsim.mobs.mob import BaseStats, MobInstance
from dungeonsim.mobs.skill import BASIC_ATTACK, Skill


class PlayerProfile(StateModel):
    """
    The player as handed over by the caller when a battle starts.
    """

    id: str = Field(description="Player identity; one battle per id.")
    name: str = Field(default="Adventurer")
    level: int = Field(default=1, ge=1)
    stats: BaseStats = Field(description="The player's stats; hp is max HP.")
    current_hp: int | None = Field(
        default=None,
        ge=0,
        description="HP at the start of the battle, max HP when omitted.",
    )
    skills: list[str] = Field(
        default_factory=lambda: [BASIC_ATTACK_ID],
        description="Ids of the skills the player knows.",
    )


class Combatant(StateModel):
    """
    One participant of a battle, with its mutable battle state.
    """

    side: CombatantSide
    id: str
    name: str
    level: int = 1
    stats: BaseStats = Field(description="Stats before buffs.")
    current_hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    skills: list[Skill] = Field(default_factory=list)
    status_effects: list[StatusEffect] = Field(default_factory=list)
    skill_cooldowns: dict[str, int] = Field(default_factory=dict)
    buffs: dict[str, float] = Field(
        default_factory=dict,
        description="Stat multipliers, kept until the battle ends.",
    )
    defense_bonus: int = Field(
        default=0,
        description="Flat DEF granted by defending, cleared on the next action.",
    )
    category: MobCategory | None = None
    ai_pattern: AIPattern | None = None

    @classmethod
    def from_player(cls, player: PlayerProfile, skills: list[Skill]) -> "Combatant":
        max_hp = player.stats.hp
        current = max_hp if player.current_hp is None else player.current_hp
        return cls(
            side=CombatantSide.PLAYER,
            id=player.id,
            name=player.name,
            level=player.level,
            stats=player.stats,
            current_hp=min(current, max_hp),
            max_hp=max_hp,
            skills=skills,
        )

    @classmethod
    def from_mob(cls, mob: MobInstance) -> "Combatant":
        return cls(
            side=CombatantSide.MOB,
            id=mob.template_id,
            name=mob.name,
            level=mob.level,
            stats=mob.stats,
            current_hp=mob.current_hp,
            max_hp=mob.max_hp,
            skills=mob.skills,
            category=mob.category,
            ai_pattern=mob.ai_pattern,
        )

    def _buffed(self, stat: str, value: int) -> int:
        return math.floor(value * self.buffs.get(stat, 1.0))

    @property
    def atk(self) -> int:
        return self._buffed("atk", self.stats.atk)

    @property
    def defense(self) -> int:
        return self._buffed("def", self.stats.defense) + self.defense_bonus

    @property
    def spd(self) -> int:
        return self._buffed("spd", self.stats.spd)

    @property
    def lck(self) -> int:
        return self._buffed("lck", self.stats.lck)

    @property
    def hp_percent(self) -> float:
        return self.current_hp / self.max_hp

    @property
    def colored_name(self) -> str:
        color = "bold green" if self.side == CombatantSide.PLAYER else "bold red"
        return f"[{color}]{self.name}[/]"

    def is_alive(self) -> bool:
        return self.current_hp > 0

    def has_status(self, status: StatusEffectType) -> bool:
        return any(effect.type == status for effect in self.status_effects)

    def is_incapacitated(self) -> bool:
        return any(effect.type.prevents_actions for effect in self.status_effects)

    def get_skill(self, skill_id: str) -> Skill | None:
        """Returns a known skill; the basic attack is always known."""
        for skill in self.skills:
            if skill.id == skill_id:
                return skill
        if skill_id == BASIC_ATTACK_ID:
            return BASIC_ATTACK
        return None

    def cooldown_of(self, skill_id: str) -> int:
        return self.skill_cooldowns.get(skill_id, 0)

    def take_damage(self, amount: int) -> int:
        """Removes HP, never below zero. Returns the HP actually lost."""
        before = self.current_hp
        self.current_hp = max(0, self.current_hp - amount)
        return before - self.current_hp

    def heal(self, amount: int) -> int:
        """Restores HP, never above max. Returns the HP actually restored."""
        restored = max(0, min(amount, self.max_hp - self.current_hp))
        self.current_hp += restored
        return restored

    def apply_buff(self, stat: str, multiplier: float) -> None:
        self.buffs[stat] = self.buffs.get(stat, 1.0) * multiplier

    def tick_cooldowns(self) -> None:
        for skill_id, remaining in self.skill_cooldowns.items():
            if remaining > 0:
                self.skill_cooldowns[skill_id] = remaining - 1

    def status_line(self) -> str:
        statuses = " ".join(effect.type.emoji for effect in self.status_effects)
        return f"{self.name}: {self.current_hp}/{self.max_hp} HP {statuses}".rstrip()
