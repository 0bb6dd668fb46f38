"""
Dungeon module: room model, floor map, procedural generator and exploration
tracking.
"""

from .dungeon_map import DungeonMap
from .generator import DungeonGenerator, generate_dungeon, get_biome_for_floor
from .progress import ExplorationReport, ExplorationTracker
from .room import (
    BossContent,
    EventContent,
    LootContent,
    MonsterContent,
    ObstacleContent,
    Position,
    RolledLoot,
    Room,
    ShopContent,
    ShopItem,
    StationContent,
    TrapContent,
)

__all__ = [
    "DungeonMap",
    "DungeonGenerator",
    "generate_dungeon",
    "get_biome_for_floor",
    "ExplorationReport",
    "ExplorationTracker",
    "BossContent",
    "EventContent",
    "LootContent",
    "MonsterContent",
    "ObstacleContent",
    "Position",
    "RolledLoot",
    "Room",
    "ShopContent",
    "ShopItem",
    "StationContent",
    "TrapContent",
]
