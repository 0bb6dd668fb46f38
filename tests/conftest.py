"""
Shared fixtures: small in-memory catalogs built through the same loaders used
for the bundled JSON files.
"""

import pytest

from dungeonsim.combat.combat_engine import CombatEngine
from dungeonsim.combat.combatant import PlayerProfile
from dungeonsim.crafting.crafting_manager import CraftingManager
from dungeonsim.items.item_catalog import ItemCatalog
from dungeonsim.mobs.mob import BaseStats
from dungeonsim.mobs.mob_catalog import MobCatalog

ITEMS_DATA = {
    "rarityTypes": {
        "COMMON": {"name": "Common", "sellMultiplier": 1.0},
        "RARE": {"name": "Rare", "sellMultiplier": 2.0},
    },
    "items": {
        "gold_coin": {
            "name": "Gold Coin",
            "category": "CURRENCY",
            "rarity": "COMMON",
            "baseValue": 1,
            "autoSell": True,
        },
        "iron": {"name": "Iron Ore", "category": "MATERIAL", "rarity": "COMMON", "baseValue": 10},
        "wood": {"name": "Oak Wood", "category": "MATERIAL", "rarity": "COMMON", "baseValue": 3},
        "rare_gem": {"name": "Rare Gem", "category": "MATERIAL", "rarity": "RARE", "baseValue": 100},
        "quest_key": {"name": "Old Key", "category": "QUEST", "rarity": "RARE", "baseValue": 0},
        "health_potion": {
            "name": "Health Potion",
            "category": "CONSUMABLE",
            "rarity": "COMMON",
            "baseValue": 25,
            "effects": [{"type": "HEAL", "value": 30}],
        },
        "antidote": {
            "name": "Antidote",
            "category": "CONSUMABLE",
            "rarity": "COMMON",
            "baseValue": 15,
            "effects": [{"type": "CURE", "status": "POISONED"}],
        },
        "strength_elixir": {
            "name": "Strength Elixir",
            "category": "CONSUMABLE",
            "rarity": "COMMON",
            "baseValue": 50,
            "effects": [{"type": "BUFF", "stat": "atk", "value": 2.0}],
        },
        "iron_sword": {
            "name": "Iron Sword",
            "category": "WEAPON",
            "rarity": "COMMON",
            "stackable": False,
            "baseValue": 60,
        },
    },
    "lootTables": {
        "common_loot": [
            {"item": "gold_coin", "chance": 1.0, "quantity": [5, 5]},
            {"item": "iron", "chance": 1.0, "quantity": 2},
        ],
        "uncommon_loot": [{"item": "wood", "chance": 0.0}],
        "rare_loot": [{"item": "wood", "chance": 0.0}],
        "boss_loot": [{"item": "rare_gem", "chance": 1.0}],
    },
    "biomeItemModifiers": {
        "FOREST": {"preferredItems": ["wood"], "bonusChance": 1.0},
    },
}

MOBS_DATA = {
    "rarityModifiers": {
        "COMMON": {"statMultiplier": 1.0, "lootMultiplier": 1.0, "xpMultiplier": 1.0},
        "RARE": {"statMultiplier": 1.25, "lootMultiplier": 2.0, "xpMultiplier": 2.0},
    },
    "skills": {
        "slash": {"name": "Slash", "type": "ATTACK", "power": 12, "accuracy": 0.9},
        "mend": {"name": "Mend", "type": "HEAL", "heal": 20, "cooldown": 3},
        "war_cry": {"name": "War Cry", "type": "BUFF", "cooldown": 3, "buffs": {"atk": 1.5}},
        "stun_blow": {
            "name": "Stun Blow",
            "type": "ATTACK",
            "power": 5,
            "accuracy": 1.0,
            "cooldown": 2,
            "effects": [{"type": "STUNNED", "duration": 1, "chance": 1.0}],
        },
        "bless": {
            "name": "Bless",
            "type": "BUFF",
            "cooldown": 2,
            "buffs": {"def": 1.2},
            "effects": [{"type": "BLESSED", "duration": 2, "chance": 1.0}],
        },
        "venom_curse": {
            "name": "Venom Curse",
            "type": "DEBUFF",
            "accuracy": 1.0,
            "buffs": {"atk": 0.5},
            "effects": [{"type": "POISONED", "duration": 3, "chance": 1.0}],
        },
    },
    "aiPatterns": {
        "PASSIVE": {"behavior": "PASSIVE", "skillUsageChance": 0.3},
        "AGGRESSIVE": {
            "behavior": "AGGRESSIVE",
            "skillUsageChance": 1.0,
            "preferredSkills": ["ATTACK"],
        },
        "SUPPORT": {"behavior": "SUPPORT", "skillUsageChance": 1.0, "preferredSkills": ["HEAL"]},
        "BERSERKER": {"behavior": "BERSERKER", "skillUsageChance": 1.0},
        "BOSS": {
            "behavior": "BOSS",
            "skillUsageChance": 1.0,
            "phases": [
                {"hpThreshold": 0.5, "behavior": "SUPPORT"},
                {"hpThreshold": 1.0, "behavior": "AGGRESSIVE"},
            ],
        },
    },
    "mobs": {
        "rat": {
            "name": "Rat",
            "levelRange": [1, 3],
            "baseStats": {"hp": 20, "atk": 4, "def": 2, "spd": 5, "lck": 0},
            "biomes": ["CRYPT"],
            "category": "BASIC",
            "rarity": "COMMON",
            "skills": ["basic_attack"],
            "aiPattern": "PASSIVE",
            "lootTable": [{"item": "iron", "chance": 1.0, "quantity": 1}],
            "xpReward": [5, 10],
        },
        "ghoul": {
            "name": "Ghoul",
            "levelRange": [8, 10],
            "baseStats": {"hp": 40, "atk": 10, "def": 4, "spd": 6, "lck": 2},
            "biomes": ["CRYPT"],
            "category": "ELITE",
            "rarity": "RARE",
            "skills": ["slash", "mend"],
            "aiPattern": "SUPPORT",
            "xpReward": [20, 30],
        },
        "wolf": {
            "name": "Wolf",
            "levelRange": [1, 2],
            "baseStats": {"hp": 30, "atk": 6, "def": 2, "spd": 9, "lck": 1},
            "biomes": ["FOREST"],
            "category": "BASIC",
            "skills": ["slash"],
            "aiPattern": "AGGRESSIVE",
            "xpReward": [8, 12],
        },
        "lich": {
            "name": "Lich",
            "levelRange": [4, 6],
            "baseStats": {"hp": 100, "atk": 12, "def": 6, "spd": 7, "lck": 3},
            "category": "BOSS",
            "rarity": "RARE",
            "skills": ["slash", "mend", "war_cry"],
            "aiPattern": "BOSS",
            "xpReward": [100, 150],
        },
    },
}

RECIPES_DATA = {
    "craftingStations": {
        "campfire": {"name": "Campfire", "requiredInDungeon": False},
        "forge": {"name": "Forge", "requiredInDungeon": True, "dungeonRoomType": "WORKSHOP"},
    },
    "craftingDifficulties": {
        "NORMAL": {"successChance": 75, "failureConsequence": "MATERIALS_LOST_50"},
        "HARD": {"successChance": 55, "failureConsequence": "MATERIALS_LOST_75"},
        "DOOMED": {"successChance": 0, "failureConsequence": "MATERIALS_LOST_ALL"},
    },
    "recipes": {
        "iron_sword": {
            "name": "Iron Sword",
            "description": "Forge a simple blade.",
            "category": "WEAPON",
            "ingredients": [{"itemId": "iron", "quantity": 2}, {"itemId": "wood", "quantity": 1}],
            "result": {"itemId": "iron_sword", "quantity": 1},
            "station": "forge",
            "difficulty": "NORMAL",
            "levelRequired": 1,
            "craftingTime": 60,
            "experience": 20,
        },
        "heavy_plate": {
            "name": "Heavy Plate",
            "category": "ARMOR",
            "ingredients": [{"itemId": "iron", "quantity": 3}],
            "result": {"itemId": "rare_gem", "quantity": 1},
            "station": "forge",
            "difficulty": "HARD",
            "levelRequired": 5,
            "craftingTime": 100,
            "experience": 40,
        },
        "cursed_trinket": {
            "name": "Cursed Trinket",
            "category": "ACCESSORY",
            "ingredients": [{"itemId": "iron", "quantity": 3}, {"itemId": "wood", "quantity": 2}],
            "result": {"itemId": "rare_gem", "quantity": 1},
            "station": "campfire",
            "difficulty": "DOOMED",
            "levelRequired": 1,
            "craftingTime": 10,
            "experience": 10,
        },
    },
}


@pytest.fixture
def item_catalog():
    return ItemCatalog.from_dict(ITEMS_DATA)


@pytest.fixture
def mob_catalog(item_catalog):
    return MobCatalog.from_dict(MOBS_DATA, known_items=set(item_catalog.items))


@pytest.fixture
def crafting_manager(item_catalog):
    return CraftingManager.from_dict(RECIPES_DATA, item_catalog=item_catalog)


@pytest.fixture
def engine(mob_catalog, item_catalog):
    return CombatEngine(mob_catalog, item_catalog)


@pytest.fixture
def strong_player():
    return PlayerProfile(
        id="player-1",
        name="Hero",
        level=5,
        stats=BaseStats(hp=500, atk=200, defense=50, spd=20, lck=0),
    )


@pytest.fixture
def weak_player():
    return PlayerProfile(
        id="player-2",
        name="Squire",
        level=1,
        stats=BaseStats(hp=500, atk=1, defense=50, spd=20, lck=0),
        skills=["basic_attack", "stun_blow"],
    )
