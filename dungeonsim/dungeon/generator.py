"""
Procedural dungeon generator.

A floor is fully determined by its seed string and floor number: the pair is
hashed into the PRNG seed, and every later decision (size, path, room types,
exits, room content, descriptions) is drawn from that single generator in a
fixed order.
"""

import math

from dungeonsim.core.constants import (
    BIOMES,
    FLOORS_PER_BIOME,
    MAIN_PATH_ROOM_WEIGHTS,
    MAIN_PATH_SIDESTEP_THRESHOLD,
    MAX_DUNGEON_SIZE,
    MIN_DUNGEON_SIZE,
    MIN_EXIT_FRACTION,
    OFF_PATH_ROOM_CHANCE,
    OFF_PATH_ROOM_WEIGHTS,
    ROOM_RARITY_THRESHOLDS,
    STATION_ROOM_TYPES,
    Biome,
    Direction,
    Rarity,
    RoomType,
)
from dungeonsim.core.errors import ValidationError
from dungeonsim.core.logging import log_debug
from dungeonsim.core.rng import SeededRandom, hash_seed
from dungeonsim.dungeon.dungeon_map import DungeonMap
from dungeonsim.dungeon.room import (
    BossContent,
    EventContent,
    LootContent,
    MonsterContent,
    ObstacleContent,
    Position,
    RolledLoot,
    Room,
    RoomContent,
    ShopContent,
    ShopItem,
    StationContent,
    TrapContent,
)

MOBS_BY_BIOME: dict[Biome, list[str]] = {
    Biome.CRYPT: ["skeleton", "zombie", "ghost", "wraith"],
    Biome.VOLCANO: ["fire_elemental", "salamander", "lava_golem"],
    Biome.FOREST: ["goblin", "wolf", "treant", "spider"],
    Biome.GLACIER: ["ice_elemental", "frost_giant", "yeti"],
    Biome.RUINS: ["construct", "guardian", "ancient_spirit"],
    Biome.ABYSS: ["demon", "shadow", "void_spawn"],
}

BOSSES_BY_BIOME: dict[Biome, list[str]] = {
    Biome.CRYPT: ["lich_king", "bone_dragon"],
    Biome.VOLCANO: ["volcano_lord", "phoenix"],
    Biome.FOREST: ["forest_guardian", "ancient_treant"],
    Biome.GLACIER: ["frost_king", "ice_dragon"],
    Biome.RUINS: ["ancient_guardian", "titan_construct"],
    Biome.ABYSS: ["demon_lord", "void_master"],
}

LOOT_ITEM_TYPES = ["potion", "weapon", "armor", "accessory"]
TRAP_TYPES = ["poison", "spikes", "fire", "ice"]
EVENT_IDS = ["treasure_chest", "mysterious_altar", "ancient_statue"]

OBSTACLES: list[tuple[str, str]] = [
    ("rubble", "A collapsed ceiling blocks the way."),
    ("chasm", "A bottomless chasm splits the room in two."),
    ("sealed_door", "A door sealed by old magic refuses to move."),
]

ROOM_DESCRIPTIONS: dict[RoomType, list[str]] = {
    RoomType.ENTRANCE: [
        "The dungeon entrance. Cold, damp air seeps between the ancient stones.",
        "A dark portal marks the start of your journey.",
        "Ancient runes glow faintly on the entrance walls.",
    ],
    RoomType.EMPTY: [
        "An empty room echoing with distant footsteps.",
        "Nothing but dust and shadows in this chamber.",
        "A room abandoned long ago.",
    ],
    RoomType.MONSTER: [
        "You feel a hostile presence in this room.",
        "Threatening sounds echo off the walls.",
        "Something moves in the shadows...",
    ],
    RoomType.LOOT: [
        "A golden glint catches your eye.",
        "An old chest sits in the middle of the room.",
        "Abandoned treasures lie here.",
    ],
    RoomType.TRAP: [
        "This room looks dangerous...",
        "You notice suspicious marks on the floor.",
        "Something is not right about this place.",
    ],
    RoomType.SHOP: [
        "A mysterious merchant offers their wares.",
        "A makeshift shop emerges from the shadows.",
        "Someone has set up a small trading post here.",
    ],
    RoomType.EVENT: [
        "Something interesting happens in this room.",
        "A strange situation presents itself.",
        "You come across something unusual.",
    ],
    RoomType.BOSS: [
        "A terrifying presence dominates this chamber.",
        "The air grows heavy as you approach.",
        "This is clearly the lair of something powerful.",
    ],
    RoomType.OBSTACLE: [
        "The passage is blocked.",
        "There is no way through here.",
    ],
    RoomType.WORKSHOP: [
        "An abandoned forge still holds some warmth.",
        "Anvils and hammers line the walls of this workshop.",
    ],
    RoomType.ALCHEMY: [
        "Bubbling flasks crowd an old alchemy table.",
        "The smell of strange reagents fills the air.",
    ],
    RoomType.ENCHANTING: [
        "An altar hums with arcane energy.",
        "Glowing sigils surround an enchanting altar.",
    ],
}


def get_biome_for_floor(floor: int) -> Biome:
    """
    Returns the biome of a floor; the biome changes every five floors.

    Args:
        floor (int): The floor number, starting at 1.

    Returns:
        Biome: The biome of the floor.

    """
    if floor < 1:
        raise ValidationError(f"Floor must be at least 1, got {floor}.")
    return BIOMES[((floor - 1) // FLOORS_PER_BIOME) % len(BIOMES)]


class DungeonGenerator:
    """
    Builds a single dungeon floor from a seed string.

    Attributes:
        seed (str):
            The seed string shared by every floor of a run.
        floor (int):
            The floor number.
        biome (Biome):
            The biome of the floor.
        rng (SeededRandom):
            The generator all decisions are drawn from.

    """

    def __init__(self, seed: str, floor: int = 1) -> None:
        self.seed = seed
        self.floor = floor
        self.biome = get_biome_for_floor(floor)
        self.rng = SeededRandom(hash_seed(f"{seed}{floor}"))

    def generate_dungeon(self, size: int | None = None) -> DungeonMap:
        """
        Generates the floor.

        Args:
            size (int | None):
                Side length of the grid. Drawn from [5, 8] when omitted.

        Returns:
            DungeonMap:
                The generated floor.

        Raises:
            ValidationError: If the requested size is smaller than 3.

        """
        if size is None:
            size = self.rng.randint(MIN_DUNGEON_SIZE, MAX_DUNGEON_SIZE)
        elif size < 3:
            raise ValidationError(f"Dungeon size must be at least 3, got {size}.")

        entrance = Position(x=0, y=size // 2)
        boss = Position(x=size - 1, y=size // 2)

        main_path = self._generate_main_path(entrance, boss)
        grid = self._fill_grid(size, main_path, entrance, boss)
        self._connect_rooms_with_smart_exits(grid, main_path)

        dungeon = DungeonMap(
            size=size,
            grid=grid,
            entrance=entrance,
            boss=boss,
            biome=self.biome,
            floor=self.floor,
            seed=self.seed,
            numeric_seed=self.rng.seed,
            main_path=main_path,
        )
        log_debug(
            "Dungeon generated",
            {
                "seed": self.seed,
                "floor": self.floor,
                "biome": self.biome,
                "size": size,
                "rooms": dungeon.room_count,
            },
        )
        return dungeon

    def _generate_main_path(self, start: Position, end: Position) -> list[Position]:
        path = [start]
        x, y = start.x, start.y
        while x < end.x or y != end.y:
            if x < end.x and self.rng.random() > MAIN_PATH_SIDESTEP_THRESHOLD:
                x += 1
            elif y < end.y:
                y += 1
            elif y > end.y:
                y -= 1
            else:
                x += 1
            path.append(Position(x=x, y=y))
        return path

    def _fill_grid(
        self,
        size: int,
        main_path: list[Position],
        entrance: Position,
        boss: Position,
    ) -> list[list[Room | None]]:
        on_path = {p.as_tuple() for p in main_path}
        grid: list[list[Room | None]] = [[None] * size for _ in range(size)]
        for x in range(size):
            for y in range(size):
                if (x, y) == entrance.as_tuple():
                    room_type = RoomType.ENTRANCE
                elif (x, y) == boss.as_tuple():
                    room_type = RoomType.BOSS
                elif (x, y) in on_path:
                    room_type = self.rng.weighted_choice(MAIN_PATH_ROOM_WEIGHTS)
                elif self.rng.random() < OFF_PATH_ROOM_CHANCE:
                    room_type = self.rng.weighted_choice(OFF_PATH_ROOM_WEIGHTS)
                else:
                    # Wall.
                    continue
                # The main path must stay walkable.
                if (x, y) in on_path and room_type == RoomType.OBSTACLE:
                    room_type = RoomType.EMPTY
                description = self._get_room_description(room_type)
                grid[x][y] = Room(
                    type=room_type,
                    description=description,
                    content=self._generate_room_content(room_type),
                )
        return grid

    def _connect_rooms_with_smart_exits(
        self,
        grid: list[list[Room | None]],
        main_path: list[Position],
    ) -> None:
        size = len(grid)
        for x in range(size):
            for y in range(size):
                room = grid[x][y]
                if room is None or room.is_obstacle:
                    continue
                candidates = []
                for direction in Direction:
                    dx, dy = direction.offset
                    nx, ny = x + dx, y + dy
                    if not (0 <= nx < size and 0 <= ny < size):
                        continue
                    neighbor = grid[nx][ny]
                    if neighbor is not None and not neighbor.is_obstacle:
                        candidates.append(direction)
                if not candidates:
                    continue
                minimum = max(1, math.floor(len(candidates) * MIN_EXIT_FRACTION))
                count = self.rng.randint(minimum, len(candidates))
                chosen = set(self.rng.shuffle(candidates)[:count])
                room.exits = [d for d in Direction if d in chosen]

        # Both ends of every main-path step are always linked.
        for current, following in zip(main_path, main_path[1:]):
            for direction in Direction:
                if current.step(direction) == following:
                    _add_exit(grid[current.x][current.y], direction)
                    _add_exit(grid[following.x][following.y], direction.opposite)

    def _generate_room_content(self, room_type: RoomType) -> RoomContent | None:
        if room_type == RoomType.MONSTER:
            return MonsterContent(
                mob_id=self.rng.choice(MOBS_BY_BIOME[self.biome]),
                level=self.rng.randint(self.floor, self.floor + 2),
            )
        if room_type == RoomType.LOOT:
            return LootContent(
                coins=self.rng.randint(10, 50) * self.floor,
                items=self._generate_loot_items(),
            )
        if room_type == RoomType.TRAP:
            return TrapContent(
                damage=self.rng.randint(5, 15) * self.floor,
                trap_type=self.rng.choice(TRAP_TYPES),
            )
        if room_type == RoomType.SHOP:
            return ShopContent(items=self._generate_shop_items())
        if room_type == RoomType.EVENT:
            return EventContent(event_id=self.rng.choice(EVENT_IDS))
        if room_type == RoomType.BOSS:
            return BossContent(
                mob_id=self.rng.choice(BOSSES_BY_BIOME[self.biome]),
                level=self.floor + 3,
            )
        if room_type == RoomType.OBSTACLE:
            obstacle_type, description = self.rng.choice(OBSTACLES)
            return ObstacleContent(
                obstacle_type=obstacle_type,
                description=description,
            )
        if room_type in STATION_ROOM_TYPES:
            return StationContent(station_id=STATION_ROOM_TYPES[room_type])
        return None

    def _generate_loot_items(self) -> list[RolledLoot]:
        return [
            RolledLoot(
                item_type=self.rng.choice(LOOT_ITEM_TYPES),
                rarity=self._roll_rarity(),
                level=self.floor,
            )
            for _ in range(self.rng.randint(1, 3))
        ]

    def _generate_shop_items(self) -> list[ShopItem]:
        return [
            ShopItem(item_type="health_potion", price=50),
            ShopItem(item_type="mana_potion", price=30),
            ShopItem(item_type="weapon_upgrade", price=100 * self.floor),
            ShopItem(item_type="armor_upgrade", price=80 * self.floor),
        ]

    def _roll_rarity(self) -> Rarity:
        roll = self.rng.random()
        for threshold, rarity in ROOM_RARITY_THRESHOLDS:
            if roll < threshold:
                return rarity
        return Rarity.LEGENDARY

    def _get_room_description(self, room_type: RoomType) -> str:
        options = ROOM_DESCRIPTIONS.get(room_type, ROOM_DESCRIPTIONS[RoomType.EMPTY])
        return self.rng.choice(options)


def _add_exit(room: Room | None, direction: Direction) -> None:
    if room is not None and direction not in room.exits:
        room.exits = [d for d in Direction if d in room.exits or d == direction]


def generate_dungeon(seed: str, floor: int = 1, size: int | None = None) -> DungeonMap:
    """Shortcut for ``DungeonGenerator(seed, floor).generate_dungeon(size)``."""
    return DungeonGenerator(seed, floor).generate_dungeon(size)
