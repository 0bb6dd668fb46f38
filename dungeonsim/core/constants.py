"""
Constants and enumerations for the dungeon simulation core.

Defines the enumerations shared by the generator, the catalogs, the combat
engine and the crafting manager, together with the tunable numbers that drive
generation weights, loot brackets, status effects and flee odds.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


class Biome(NiceEnum):
    """Thematic dungeon categories, one every five floors."""

    CRYPT = "CRYPT"
    VOLCANO = "VOLCANO"
    FOREST = "FOREST"
    GLACIER = "GLACIER"
    RUINS = "RUINS"
    ABYSS = "ABYSS"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this biome."""
        return {
            Biome.CRYPT: "⚰️",
            Biome.VOLCANO: "🌋",
            Biome.FOREST: "🌲",
            Biome.GLACIER: "🧊",
            Biome.RUINS: "🏛️",
            Biome.ABYSS: "🕳️",
        }.get(self, "❔")


class RoomType(NiceEnum):
    """Defines the type of a dungeon room."""

    ENTRANCE = "ENTRANCE"
    BOSS = "BOSS"
    MONSTER = "MONSTER"
    EMPTY = "EMPTY"
    LOOT = "LOOT"
    EVENT = "EVENT"
    TRAP = "TRAP"
    SHOP = "SHOP"
    OBSTACLE = "OBSTACLE"
    WORKSHOP = "WORKSHOP"
    ALCHEMY = "ALCHEMY"
    ENCHANTING = "ENCHANTING"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this room type."""
        return {
            RoomType.ENTRANCE: "🚪",
            RoomType.BOSS: "💀",
            RoomType.MONSTER: "👹",
            RoomType.EMPTY: "⬛",
            RoomType.LOOT: "💰",
            RoomType.EVENT: "❓",
            RoomType.TRAP: "🪤",
            RoomType.SHOP: "🛒",
            RoomType.OBSTACLE: "🪨",
            RoomType.WORKSHOP: "🔨",
            RoomType.ALCHEMY: "⚗️",
            RoomType.ENCHANTING: "🔮",
        }.get(self, "❔")

    @property
    def is_special(self) -> bool:
        """Rooms that count towards the exploration bonus."""
        return self in (RoomType.BOSS, RoomType.SHOP, RoomType.LOOT, RoomType.EVENT)


class Direction(NiceEnum):
    """
    Cardinal directions on the dungeon grid.

    The grid is indexed as ``grid[x][y]`` with ``x`` the row, so north and
    south move along ``x`` while east and west move along ``y``.
    """

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def offset(self) -> tuple[int, int]:
        """Returns the (dx, dy) step for this direction."""
        return {
            Direction.NORTH: (-1, 0),
            Direction.SOUTH: (1, 0),
            Direction.EAST: (0, 1),
            Direction.WEST: (0, -1),
        }[self]

    @property
    def opposite(self) -> "Direction":
        return {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }[self]


class Rarity(NiceEnum):
    """Rarity brackets shared by items and monsters."""

    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    MYTHIC = "MYTHIC"

    @property
    def color(self) -> str:
        """Returns the color string associated with this rarity."""
        return {
            Rarity.COMMON: "white",
            Rarity.UNCOMMON: "bold green",
            Rarity.RARE: "bold blue",
            Rarity.EPIC: "bold magenta",
            Rarity.LEGENDARY: "bold yellow",
            Rarity.MYTHIC: "bold red",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies rarity color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class ItemCategory(NiceEnum):
    """Defines the category of an item."""

    CURRENCY = "CURRENCY"
    MATERIAL = "MATERIAL"
    CONSUMABLE = "CONSUMABLE"
    WEAPON = "WEAPON"
    ARMOR = "ARMOR"
    ACCESSORY = "ACCESSORY"
    TOOL = "TOOL"
    QUEST = "QUEST"


class ItemEffectType(NiceEnum):
    """Defines what a consumable item does when used in battle."""

    HEAL = "HEAL"
    CURE = "CURE"
    BUFF = "BUFF"
    APPLY_STATUS = "APPLY_STATUS"


class SkillType(NiceEnum):
    """Defines how a skill is resolved by the combat engine."""

    ATTACK = "ATTACK"
    HEAL = "HEAL"
    BUFF = "BUFF"
    DEBUFF = "DEBUFF"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this skill type."""
        return {
            SkillType.ATTACK: "⚔️",
            SkillType.HEAL: "💚",
            SkillType.BUFF: "💪",
            SkillType.DEBUFF: "😈",
        }.get(self, "❔")


class StatusEffectType(NiceEnum):
    """Timed modifiers that can be attached to a combatant."""

    POISONED = "POISONED"
    BURNED = "BURNED"
    BLEEDING = "BLEEDING"
    FROZEN = "FROZEN"
    STUNNED = "STUNNED"
    REGENERATING = "REGENERATING"
    BLESSED = "BLESSED"
    CURSED = "CURSED"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this status effect."""
        return {
            StatusEffectType.POISONED: "☠️",
            StatusEffectType.BURNED: "🔥",
            StatusEffectType.BLEEDING: "🩸",
            StatusEffectType.FROZEN: "❄️",
            StatusEffectType.STUNNED: "💫",
            StatusEffectType.REGENERATING: "💚",
            StatusEffectType.BLESSED: "✨",
            StatusEffectType.CURSED: "🖤",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this status effect."""
        return {
            StatusEffectType.POISONED: "bold green",
            StatusEffectType.BURNED: "bold red",
            StatusEffectType.BLEEDING: "red",
            StatusEffectType.FROZEN: "bold cyan",
            StatusEffectType.STUNNED: "bold yellow",
            StatusEffectType.REGENERATING: "green",
            StatusEffectType.BLESSED: "bold white",
            StatusEffectType.CURSED: "dim white",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies status effect color formatting to a message."""
        return f"[{self.color}]{message}[/]"

    @property
    def prevents_actions(self) -> bool:
        return self == StatusEffectType.STUNNED


class MobCategory(NiceEnum):
    """Defines the category of a monster template."""

    BASIC = "BASIC"
    ELITE = "ELITE"
    BOSS = "BOSS"


class AIBehavior(NiceEnum):
    """Skill selection heuristic used by an AI pattern."""

    PASSIVE = "PASSIVE"
    AGGRESSIVE = "AGGRESSIVE"
    DEFENSIVE = "DEFENSIVE"
    BERSERKER = "BERSERKER"
    SUPPORT = "SUPPORT"
    BOSS = "BOSS"


class FailureConsequence(NiceEnum):
    """Share of every ingredient lost on a failed craft."""

    MATERIALS_LOST_25 = "MATERIALS_LOST_25"
    MATERIALS_LOST_50 = "MATERIALS_LOST_50"
    MATERIALS_LOST_75 = "MATERIALS_LOST_75"
    MATERIALS_LOST_ALL = "MATERIALS_LOST_ALL"

    @property
    def loss_fraction(self) -> float:
        return {
            FailureConsequence.MATERIALS_LOST_25: 0.25,
            FailureConsequence.MATERIALS_LOST_50: 0.50,
            FailureConsequence.MATERIALS_LOST_75: 0.75,
            FailureConsequence.MATERIALS_LOST_ALL: 1.0,
        }[self]


class ActionType(NiceEnum):
    """Actions a player can request during a battle turn."""

    ATTACK = "attack"
    SKILL = "skill"
    DEFEND = "defend"
    ITEM = "item"
    FLEE = "flee"


class CombatantSide(NiceEnum):
    """Which side of a battle a combatant is on."""

    PLAYER = "PLAYER"
    MOB = "MOB"

    @property
    def emoji(self) -> str:
        return {CombatantSide.PLAYER: "👤", CombatantSide.MOB: "👹"}[self]


class BattleOutcome(NiceEnum):
    """Terminal result of a battle, from the player's point of view."""

    WIN = "WIN"
    LOSS = "LOSS"


# ============================================================================
# DUNGEON GENERATION
# ============================================================================

BIOMES: list[Biome] = [
    Biome.CRYPT,
    Biome.VOLCANO,
    Biome.FOREST,
    Biome.GLACIER,
    Biome.RUINS,
    Biome.ABYSS,
]
FLOORS_PER_BIOME = 5

MIN_DUNGEON_SIZE = 5
MAX_DUNGEON_SIZE = 8

# A main-path step advances along x when the draw is above this value.
MAIN_PATH_SIDESTEP_THRESHOLD = 0.3
# Probability that an off-path cell holds a room instead of a wall.
OFF_PATH_ROOM_CHANCE = 0.7

MAIN_PATH_ROOM_WEIGHTS: list[tuple[RoomType, float]] = [
    (RoomType.MONSTER, 0.4),
    (RoomType.EMPTY, 0.3),
    (RoomType.LOOT, 0.2),
    (RoomType.EVENT, 0.1),
]

OFF_PATH_ROOM_WEIGHTS: list[tuple[RoomType, float]] = [
    (RoomType.MONSTER, 0.26),
    (RoomType.TRAP, 0.10),
    (RoomType.LOOT, 0.15),
    (RoomType.SHOP, 0.07),
    (RoomType.EVENT, 0.07),
    (RoomType.EMPTY, 0.10),
    (RoomType.OBSTACLE, 0.10),
    (RoomType.WORKSHOP, 0.05),
    (RoomType.ALCHEMY, 0.05),
    (RoomType.ENCHANTING, 0.05),
]

# Share of the open neighbours kept as exits.
MIN_EXIT_FRACTION = 0.6

ROOM_RARITY_THRESHOLDS: list[tuple[float, Rarity]] = [
    (0.50, Rarity.COMMON),
    (0.75, Rarity.UNCOMMON),
    (0.90, Rarity.RARE),
    (0.98, Rarity.EPIC),
]

# Room type hosting each crafting station in the dungeon.
STATION_ROOM_TYPES: dict[RoomType, str] = {
    RoomType.WORKSHOP: "forge",
    RoomType.ALCHEMY: "alchemy_table",
    RoomType.ENCHANTING: "enchanting_altar",
}

# ============================================================================
# LOOT
# ============================================================================

COMMON_LOOT_TABLE = "common_loot"
UNCOMMON_LOOT_TABLE = "uncommon_loot"
RARE_LOOT_TABLE = "rare_loot"
BOSS_LOOT_TABLE = "boss_loot"

UNCOMMON_LOOT_FLOOR = 3
RARE_LOOT_FLOOR = 5

BONUS_ITEM_MIN_FLOOR = 3
BONUS_ITEM_CHANCE = 0.2
BONUS_ITEM_MAX_BRACKET = 7

BONUS_ITEM_RARITY_CHANCES: dict[int, list[tuple[Rarity, float]]] = {
    1: [(Rarity.COMMON, 0.7), (Rarity.UNCOMMON, 0.25), (Rarity.RARE, 0.05)],
    3: [
        (Rarity.COMMON, 0.4),
        (Rarity.UNCOMMON, 0.4),
        (Rarity.RARE, 0.15),
        (Rarity.EPIC, 0.05),
    ],
    5: [
        (Rarity.UNCOMMON, 0.3),
        (Rarity.RARE, 0.4),
        (Rarity.EPIC, 0.25),
        (Rarity.LEGENDARY, 0.05),
    ],
    7: [
        (Rarity.RARE, 0.3),
        (Rarity.EPIC, 0.4),
        (Rarity.LEGENDARY, 0.25),
        (Rarity.MYTHIC, 0.05),
    ],
}

# ============================================================================
# MONSTERS
# ============================================================================

MOB_LEVEL_TOLERANCE = 2
LEVEL_STAT_GROWTH = 0.1
BASIC_ATTACK_ID = "basic_attack"
DEFAULT_AI_PATTERN = "PASSIVE"
BERSERKER_HP_THRESHOLD = 0.3
SUPPORT_HP_THRESHOLD = 0.5

# ============================================================================
# COMBAT
# ============================================================================

DEFAULT_ATTACK_ACCURACY = 0.9
DEFAULT_DEBUFF_ACCURACY = 0.85
MIN_HIT_CHANCE = 0.1
EVASION_DIVISOR = 200
DAMAGE_VARIANCE = 0.1
CRITICAL_MULTIPLIER = 1.5
DEFEND_BONUS_RATIO = 0.5
DEFAULT_STATUS_DURATION = 3

# Fraction of max HP dealt (positive) or healed (negative) every round.
STATUS_TICK_RATIOS: dict[StatusEffectType, float] = {
    StatusEffectType.POISONED: 0.05,
    StatusEffectType.BURNED: 0.08,
    StatusEffectType.BLEEDING: 0.05,
    StatusEffectType.REGENERATING: -0.10,
}

FLEE_SPEED_OFFSET = 50
FLEE_BASE_CAP = 0.8
FLEE_MIN_CHANCE = 0.05
FLEE_MAX_CHANCE = 0.95
FLEE_HP_BONUSES: list[tuple[float, float]] = [(0.3, 0.2), (0.5, 0.1)]
FLEE_CATEGORY_MULTIPLIERS: dict[MobCategory, float] = {
    MobCategory.BOSS: 0.3,
    MobCategory.ELITE: 0.6,
    MobCategory.BASIC: 1.2,
}
FLEE_BIOME_MULTIPLIERS: dict[Biome, float] = {
    Biome.ABYSS: 0.7,
    Biome.CRYPT: 0.8,
    Biome.FOREST: 1.3,
}

# ============================================================================
# CRAFTING
# ============================================================================

DEFAULT_SUCCESS_CHANCE = 50
CRAFTING_SKILL_BONUS_PER_POINT = 2
CRAFTING_SKILL_BONUS_CAP = 30
CRAFTING_TIME_REDUCTION_CAP = 50
PERFECT_CRAFT_THRESHOLD = 5
PERFECT_CRAFT_EXPERIENCE_BONUS = 50
FAILED_CRAFT_EXPERIENCE_RATIO = 0.25
