"""
Combat engine module.

The engine owns the active battles, one per player identity, and resolves one
round per ``execute_turn`` call: each side acts once in turn order, then
statuses and cooldowns tick.
"""

import time

from dungeonsim.combat.actions import ActionOutcome, PlayerAction
from dungeonsim.combat.battle import BattleState, TurnResult
from dungeonsim.combat.combatant import Combatant, PlayerProfile
from dungeonsim.combat.damage import (
    apply_critical,
    calculate_damage,
    calculate_flee_chance,
    calculate_heal,
    check_critical,
    check_hit,
)
from dungeonsim.core.constants import (
    BASIC_ATTACK_ID,
    DEFEND_BONUS_RATIO,
    DEFAULT_STATUS_DURATION,
    ActionType,
    BattleOutcome,
    Biome,
    CombatantSide,
    ItemEffectType,
    SkillType,
)
from dungeonsim.core.errors import ValidationError
from dungeonsim.core.logging import log_debug
from dungeonsim.core.rng import LCG_MODULUS, SeededRandom, to_base36
from dungeonsim.effects.status_effect import (
    StatusEffectSpec,
    apply_status_effect,
    process_status_effects,
    remove_status_effects,
)
from dungeonsim.items.item import ItemDefinition
from dungeonsim.items.item_catalog import ItemCatalog
from dungeonsim.mobs.mob import MobInstance
from dungeonsim.mobs.mob_catalog import MobCatalog
from dungeonsim.mobs.skill import BASIC_ATTACK, Skill


class CombatEngine:
    """
    Manages the active battles and resolves their turns.

    Attributes:
        mob_catalog (MobCatalog):
            Source of the skill table, AI selection and monster loot.
        item_catalog (ItemCatalog | None):
            Source of consumable effects for item actions.
        rng (SeededRandom):
            Draws the seed of every battle started without one.
        battles (dict[str, BattleState]):
            Active battles keyed by player id.

    """

    def __init__(
        self,
        mob_catalog: MobCatalog,
        item_catalog: ItemCatalog | None = None,
        rng: SeededRandom | None = None,
    ) -> None:
        self.mob_catalog = mob_catalog
        self.item_catalog = item_catalog
        self.rng = rng or SeededRandom(time.time_ns() % LCG_MODULUS)
        self.battles: dict[str, BattleState] = {}

    # ============================================================================
    # SESSIONS
    # ============================================================================

    def start_battle(
        self,
        player: PlayerProfile,
        mob: MobInstance,
        biome: Biome | None = None,
        seed: int | None = None,
    ) -> BattleState:
        """
        Starts a battle between a player and a freshly created monster.

        Args:
            player (PlayerProfile):
                The player entering the battle.
            mob (MobInstance):
                The monster, created for this encounter.
            biome (Biome | None):
                The biome of the encounter, used by the flee odds.
            seed (int | None):
                Seed of the battle's random source. Drawn from the engine's
                own random source when omitted.

        Returns:
            BattleState:
                The new battle.

        Raises:
            ValidationError: If the player is already in a battle, or either
                side starts at 0 HP.

        """
        if player.id in self.battles:
            raise ValidationError(f"Player '{player.id}' is already in a battle.")
        if player.current_hp is not None and player.current_hp <= 0:
            raise ValidationError(f"Player '{player.id}' cannot fight at 0 HP.")
        if mob.current_hp <= 0:
            raise ValidationError(f"{mob.name} is already defeated.")
        if seed is None:
            seed = self.rng.randint(0, LCG_MODULUS - 1)

        player_side = Combatant.from_player(
            player,
            self.mob_catalog.resolve_skills(player.skills, player.id),
        )
        mob_side = Combatant.from_mob(mob)
        # Faster side first; ties keep the player first.
        order = sorted([player_side, mob_side], key=lambda c: c.spd, reverse=True)

        battle = BattleState(
            id=f"battle-{to_base36(seed)}",
            player=player_side,
            mob=mob_side,
            mob_instance=mob,
            turn_order=[c.side for c in order],
            start_time=time.time(),
            biome=biome,
            rng_state=seed,
        )
        battle.logs.append(f"💀 {mob.name} appears for battle!")
        battle.logs.append("⚡ Turn order: " + " → ".join(c.name for c in order))
        self.battles[player.id] = battle
        log_debug(
            "Battle started",
            {"battle": battle.id, "player": player.id, "mob": mob.template_id},
        )
        return battle

    def get_battle(self, player_id: str) -> BattleState | None:
        return self.battles.get(player_id)

    def has_battle(self, player_id: str) -> bool:
        return player_id in self.battles

    def end_battle(self, player_id: str) -> BattleState | None:
        """Drops a battle without resolving it. Returns the dropped battle."""
        return self.battles.pop(player_id, None)

    # ============================================================================
    # TURNS
    # ============================================================================

    def execute_turn(self, player_id: str, action: PlayerAction) -> TurnResult:
        """
        Resolves one round of a battle.

        Each side acts once in turn order. The battle ends as soon as a side
        drops to 0 HP, or when the player flees. Statuses and cooldowns of
        both sides tick at the end of the round.

        Args:
            player_id (str):
                The player whose battle advances.
            action (PlayerAction):
                The player's action for this round.

        Returns:
            TurnResult:
                The actions taken, the logs and the outcome if the battle ended.

        Raises:
            ValidationError: If there is no battle for the player or the
                action is not allowed. The battle is left untouched.

        """
        battle = self.battles.get(player_id)
        if battle is None:
            raise ValidationError(f"No active battle for player '{player_id}'.")
        self._validate_player_action(battle, action)

        rng = SeededRandom(battle.rng_state)
        result = TurnResult(battle_id=battle.id, battle=battle)

        for _ in range(len(battle.turn_order)):
            side = battle.turn_order[0]
            if side == CombatantSide.PLAYER:
                outcome = self._execute_player_action(battle, action, rng)
            else:
                outcome = self._execute_mob_action(battle, rng)
            self._record(battle, result, outcome)
            battle.advance_turn()

            if outcome.fled:
                result.fled = True
                return self._finish(player_id, battle, result, None, rng)
            battle_end = battle.check_battle_end()
            if battle_end is not None:
                return self._finish(player_id, battle, result, battle_end, rng)

        self._process_round_end(battle, result)
        battle_end = battle.check_battle_end()
        if battle_end is not None:
            return self._finish(player_id, battle, result, battle_end, rng)

        battle.rng_state = rng.seed
        return result

    def _validate_player_action(self, battle: BattleState, action: PlayerAction) -> None:
        player = battle.player
        if action.type in (ActionType.ATTACK, ActionType.SKILL):
            skill_id = action.skill_id or BASIC_ATTACK_ID
            if player.get_skill(skill_id) is None:
                raise ValidationError(f"Unknown skill '{skill_id}'.")
            remaining = player.cooldown_of(skill_id)
            if remaining > 0:
                raise ValidationError(
                    f"Skill '{skill_id}' is on cooldown for {remaining} more round(s)."
                )
        elif action.type == ActionType.ITEM:
            if self._get_consumable(action.item_id) is None:
                raise ValidationError(f"Item '{action.item_id}' cannot be used in battle.")

    def _get_consumable(self, item_id: str | None) -> ItemDefinition | None:
        if self.item_catalog is None or item_id is None:
            return None
        item = self.item_catalog.get_item(item_id)
        if item is None or not item.effects:
            return None
        return item

    def _record(self, battle: BattleState, result: TurnResult, outcome: ActionOutcome) -> None:
        result.actions.append(outcome)
        result.logs.extend(outcome.logs)
        battle.logs.extend(outcome.logs)

    def _finish(
        self,
        player_id: str,
        battle: BattleState,
        result: TurnResult,
        outcome: BattleOutcome | None,
        rng: SeededRandom,
    ) -> TurnResult:
        result.battle_ended = True
        result.outcome = outcome
        if outcome == BattleOutcome.WIN:
            result.loot = self.mob_catalog.generate_loot(
                battle.mob_instance, rng, battle.player.level
            )
            message = f"🏆 {battle.player.name} won the battle!"
        elif outcome == BattleOutcome.LOSS:
            message = f"💀 {battle.player.name} was defeated!"
        else:
            message = f"🏃 {battle.player.name} escaped from {battle.mob.name}."
        result.logs.append(message)
        battle.logs.append(message)
        battle.rng_state = rng.seed
        del self.battles[player_id]
        log_debug(
            "Battle ended",
            {"battle": battle.id, "outcome": outcome, "fled": result.fled, "turn": battle.turn},
        )
        return result

    def _process_round_end(self, battle: BattleState, result: TurnResult) -> None:
        for combatant in (battle.player, battle.mob):
            for tick in process_status_effects(combatant):
                if tick.hp_change < 0:
                    message = (
                        f"{tick.type.emoji} {combatant.name} takes {-tick.hp_change} "
                        f"damage from {tick.type.display_name.lower()}."
                    )
                elif tick.hp_change > 0:
                    message = f"{tick.type.emoji} {combatant.name} regenerates {tick.hp_change} HP."
                else:
                    message = ""
                if message:
                    result.logs.append(message)
                    battle.logs.append(message)
                if tick.expired:
                    log_debug("Status expired", {"target": combatant.name, "status": tick.type})
            combatant.tick_cooldowns()

    # ============================================================================
    # ACTIONS
    # ============================================================================

    def _execute_player_action(
        self,
        battle: BattleState,
        action: PlayerAction,
        rng: SeededRandom,
    ) -> ActionOutcome:
        player, mob = battle.player, battle.mob
        player.defense_bonus = 0
        outcome = ActionOutcome(
            side=CombatantSide.PLAYER,
            action=action.type,
            skill_id=action.skill_id,
            item_id=action.item_id,
        )
        if player.is_incapacitated():
            outcome.skipped = True
            outcome.logs.append(f"💫 {player.name} is stunned and loses the turn!")
            return outcome

        if action.type in (ActionType.ATTACK, ActionType.SKILL):
            skill = player.get_skill(action.skill_id or BASIC_ATTACK_ID) or BASIC_ATTACK
            outcome.skill_id = skill.id
            self._execute_skill(player, mob, skill, rng, outcome)
        elif action.type == ActionType.DEFEND:
            self._execute_defend(player, outcome)
        elif action.type == ActionType.ITEM:
            item = self._get_consumable(action.item_id)
            assert item is not None, "Item actions are validated before the round."
            self._use_item(player, mob, item, rng, outcome)
        elif action.type == ActionType.FLEE:
            self._attempt_flee(battle, rng, outcome)
        return outcome

    def _execute_mob_action(self, battle: BattleState, rng: SeededRandom) -> ActionOutcome:
        mob, player = battle.mob, battle.player
        mob.defense_bonus = 0
        skill = self.mob_catalog.select_mob_skill(
            mob.skills,
            mob.skill_cooldowns,
            [effect.type for effect in mob.status_effects],
            mob.current_hp,
            mob.max_hp,
            mob.ai_pattern or battle.mob_instance.ai_pattern,
            rng,
        )
        if skill is None:
            outcome = ActionOutcome(side=CombatantSide.MOB, action=ActionType.SKILL, skipped=True)
            outcome.logs.append(f"💫 {mob.name} is stunned and loses the turn!")
            return outcome
        action = ActionType.ATTACK if skill.id == BASIC_ATTACK_ID else ActionType.SKILL
        outcome = ActionOutcome(side=CombatantSide.MOB, action=action, skill_id=skill.id)
        self._execute_skill(mob, player, skill, rng, outcome)
        return outcome

    def _execute_skill(
        self,
        actor: Combatant,
        target: Combatant,
        skill: Skill,
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        if skill.type == SkillType.HEAL:
            self._execute_heal(actor, skill, outcome)
        elif skill.type == SkillType.BUFF:
            self._execute_buff(actor, skill, rng, outcome)
        elif skill.type == SkillType.DEBUFF:
            self._execute_debuff(actor, target, skill, rng, outcome)
        else:
            self._execute_attack(actor, target, skill, rng, outcome)
        if skill.cooldown > 0:
            actor.skill_cooldowns[skill.id] = skill.cooldown

    def _execute_attack(
        self,
        attacker: Combatant,
        defender: Combatant,
        skill: Skill,
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        name = skill.name or skill.id
        if not check_hit(skill, defender, rng):
            outcome.hit = False
            outcome.logs.append(f"💨 {attacker.name} uses {name} and misses!")
            return
        damage = calculate_damage(attacker, defender, skill, rng)
        critical = check_critical(attacker, rng)
        final_damage = apply_critical(damage, critical)
        defender.take_damage(final_damage)

        outcome.hit = True
        outcome.damage = final_damage
        outcome.critical = critical
        outcome.logs.append(f"⚔️ {attacker.name} uses {name} on {defender.name}!")
        outcome.logs.append(
            f"💥 Deals {final_damage} damage{' (CRITICAL!)' if critical else ''}!"
        )
        outcome.logs.append(f"❤️ {defender.status_line()}")
        self._apply_effects(attacker, defender, skill.effects, rng, outcome)

    def _execute_heal(self, actor: Combatant, skill: Skill, outcome: ActionOutcome) -> None:
        restored = actor.heal(calculate_heal(actor, skill.heal))
        outcome.heal = restored
        outcome.logs.append(f"✨ {actor.name} uses {skill.name or skill.id}!")
        outcome.logs.append(f"💚 Restores {restored} HP!")

    def _execute_buff(
        self,
        actor: Combatant,
        skill: Skill,
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        for stat, multiplier in skill.buffs.items():
            actor.apply_buff(stat, multiplier)
        outcome.logs.append(f"💪 {actor.name} uses {skill.name or skill.id}!")
        self._apply_effects(actor, actor, skill.effects, rng, outcome)

    def _execute_debuff(
        self,
        actor: Combatant,
        target: Combatant,
        skill: Skill,
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        name = skill.name or skill.id
        if not check_hit(skill, target, rng):
            outcome.hit = False
            outcome.logs.append(f"💨 {actor.name} uses {name} but {target.name} resists!")
            return
        outcome.hit = True
        for stat, multiplier in skill.buffs.items():
            target.apply_buff(stat, multiplier)
        outcome.logs.append(f"😈 {actor.name} uses {name} on {target.name}!")
        self._apply_effects(actor, target, skill.effects, rng, outcome)

    def _execute_defend(self, actor: Combatant, outcome: ActionOutcome) -> None:
        actor.defense_bonus = int(actor.stats.defense * DEFEND_BONUS_RATIO)
        outcome.logs.append(
            f"🛡️ {actor.name} takes a defensive stance! (+{actor.defense_bonus} DEF)"
        )

    def _use_item(
        self,
        actor: Combatant,
        target: Combatant,
        item: ItemDefinition,
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        outcome.logs.append(f"🎒 {actor.name} uses {item.name or item.id}!")
        for effect in item.effects:
            if effect.type == ItemEffectType.HEAL:
                restored = actor.heal(int(effect.value))
                outcome.heal += restored
                outcome.logs.append(f"💚 Restores {restored} HP!")
            elif effect.type == ItemEffectType.CURE:
                for removed in remove_status_effects(actor, effect.status):
                    outcome.logs.append(
                        f"✨ {actor.name} is no longer {removed.type.display_name.lower()}."
                    )
            elif effect.type == ItemEffectType.BUFF:
                assert effect.stat is not None
                actor.apply_buff(effect.stat, effect.value)
                outcome.logs.append(f"💪 {actor.name}'s {effect.stat.upper()} rises!")
            elif effect.type == ItemEffectType.APPLY_STATUS:
                assert effect.status is not None
                spec = StatusEffectSpec(
                    type=effect.status,
                    duration=effect.duration or DEFAULT_STATUS_DURATION,
                    chance=effect.chance,
                )
                self._apply_effects(actor, target, [spec], rng, outcome)

    def _attempt_flee(
        self,
        battle: BattleState,
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        player = battle.player
        chance = calculate_flee_chance(player, battle.mob, battle.biome)
        outcome.fled = rng.random() < chance
        if outcome.fled:
            outcome.logs.append(f"🏃 {player.name} managed to flee!")
        else:
            outcome.logs.append(f"❌ {player.name} tried to flee but failed!")

    def _apply_effects(
        self,
        source: Combatant,
        target: Combatant,
        effects: list[StatusEffectSpec],
        rng: SeededRandom,
        outcome: ActionOutcome,
    ) -> None:
        for spec in effects:
            if apply_status_effect(target, spec, source.name, rng):
                outcome.statuses_applied.append(spec.type)
                outcome.logs.append(
                    f"{spec.type.emoji} {target.name} is {spec.type.display_name.lower()}!"
                )
