"""
Tests for the rich markup helpers used when records are shown to players.
"""

from rich.text import Text

from dungeonsim.core.constants import CombatantSide, Rarity, SkillType, StatusEffectType
from dungeonsim.core.rng import SeededRandom
from dungeonsim.effects.status_effect import StatusEffect


def plain(markup: str) -> str:
    return Text.from_markup(markup).plain


def test_rarity_colors():
    assert Rarity.LEGENDARY.colored_name == "[bold yellow]Legendary[/]"
    assert plain(Rarity.COMMON.colorize("Iron Ore")) == "Iron Ore"


def test_status_effect_names():
    effect = StatusEffect(type=StatusEffectType.POISONED, duration=2)
    assert effect.colored_name.startswith("[bold green]")
    assert plain(effect.colored_name) == f"{StatusEffectType.POISONED.emoji} Poisoned"
    assert plain(StatusEffectType.STUNNED.colored_name) == "Stunned"


def test_catalog_record_names(item_catalog, mob_catalog):
    assert item_catalog.get_item("rare_gem").colored_name == "[bold blue]Rare Gem[/]"
    assert plain(mob_catalog.get_skill("slash").colored_name) == f"{SkillType.ATTACK.emoji} Slash"
    ghoul = mob_catalog.create_mob_instance("ghoul", SeededRandom(1), level=8)
    assert ghoul.colored_name == "[bold blue]Ghoul[/]"


def test_battle_sides(engine, strong_player, mob_catalog):
    rat = mob_catalog.create_mob_instance("rat", SeededRandom(1), level=1)
    battle = engine.start_battle(strong_player, rat)
    player = battle.combatant(CombatantSide.PLAYER)
    assert battle.opponent(CombatantSide.PLAYER) is battle.mob
    assert player is battle.player
    assert plain(player.colored_name) == "Hero"
    assert battle.mob.colored_name == "[bold red]Rat[/]"
    assert player.status_line() == "Hero: 500/500 HP"
