"""
End-to-end run over the bundled catalogs: generate a floor, fight its boss and
craft with the loot.
"""

import pytest

from dungeonsim import ContentRepository
from dungeonsim.combat.actions import PlayerAction
from dungeonsim.combat.combat_engine import CombatEngine
from dungeonsim.combat.combatant import PlayerProfile
from dungeonsim.core.constants import ActionType, BattleOutcome
from dungeonsim.core.rng import SeededRandom
from dungeonsim.dungeon.generator import generate_dungeon
from dungeonsim.dungeon.room import BossContent, MonsterContent
from dungeonsim.items.item import ItemStack
from dungeonsim.mobs.mob import BaseStats


@pytest.fixture(scope="module")
def repository():
    return ContentRepository()


def test_floor_contents_resolve(repository):
    """Monsters and bosses placed on a floor exist in the mob catalog."""
    for floor in (1, 7, 13, 19, 25, 31):
        dungeon = generate_dungeon(f"floor-{floor}", floor=floor, size=6)
        for _, room in dungeon.rooms():
            if isinstance(room.content, (MonsterContent, BossContent)):
                assert repository.mobs.get_mob(room.content.mob_id) is not None


def test_fight_the_boss(repository):
    dungeon = generate_dungeon("abc", floor=1)
    content = dungeon.room_at(dungeon.boss.x, dungeon.boss.y).content
    assert isinstance(content, BossContent)

    boss = repository.mobs.create_mob_instance(content.mob_id, SeededRandom(1), content.level)
    hero = PlayerProfile(
        id="hero",
        level=10,
        stats=BaseStats(hp=1000, atk=300, defense=40, spd=30, lck=10),
    )
    engine = CombatEngine(repository.mobs, repository.items)
    engine.start_battle(hero, boss, biome=dungeon.biome)

    result = None
    for _ in range(100):
        result = engine.execute_turn("hero", PlayerAction(type=ActionType.ATTACK))
        if result.battle_ended:
            break
    assert result is not None and result.battle_ended
    assert result.outcome == BattleOutcome.WIN
    assert result.loot.xp > 0
    for stack in result.loot.items:
        assert repository.items.get_item(stack.item_id) is not None


def test_craft_from_bundled_recipes(repository):
    inventory = [ItemStack(item_id="iron", quantity=2), ItemStack(item_id="wood", quantity=1)]
    result = repository.crafting.craft_item("iron_sword", inventory, 1, SeededRandom(1))
    assert result.success
    assert result.items_produced[0].item_id == "iron_sword"
    assert inventory == []
