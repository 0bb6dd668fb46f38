"""
Tests for the procedural dungeon generator.
"""

from collections import deque

import pytest

from dungeonsim.core.constants import Biome, RoomType, STATION_ROOM_TYPES
from dungeonsim.core.errors import ValidationError
from dungeonsim.dungeon.dungeon_map import DungeonMap
from dungeonsim.dungeon.generator import (
    BOSSES_BY_BIOME,
    MOBS_BY_BIOME,
    DungeonGenerator,
    generate_dungeon,
    get_biome_for_floor,
)
from dungeonsim.dungeon.room import BossContent, MonsterContent, StationContent

SEEDS = ["abc", "seed-1", "dragon", "42", "🐉 unicode"]


def reachable_from_entrance(dungeon: DungeonMap) -> set[tuple[int, int]]:
    start = dungeon.entrance
    seen = {start.as_tuple()}
    queue = deque([start])
    while queue:
        position = queue.popleft()
        room = dungeon.room_at(position.x, position.y)
        for direction in room.exits:
            target = position.step(direction)
            if target.as_tuple() not in seen and dungeon.room_at(target.x, target.y):
                seen.add(target.as_tuple())
                queue.append(target)
    return seen


def test_same_seed_same_dungeon():
    """The same seed and floor generate an identical floor."""
    first = generate_dungeon("determinism", floor=3)
    second = generate_dungeon("determinism", floor=3)
    assert first.model_dump() == second.model_dump()


def test_floor_changes_the_dungeon():
    """The floor number is part of the seed."""
    first = generate_dungeon("same-seed", floor=1, size=8)
    second = generate_dungeon("same-seed", floor=2, size=8)
    assert first.model_dump() != second.model_dump()


def test_entrance_and_boss_scenario():
    """Seed "abc" on floor 1 places the entrance and the boss at fixed spots."""
    dungeon = generate_dungeon("abc", floor=1)
    size = dungeon.size
    assert 5 <= size <= 8
    assert dungeon.biome == Biome.CRYPT
    assert dungeon.entrance.as_tuple() == (0, size // 2)
    assert dungeon.boss.as_tuple() == (size - 1, size // 2)
    assert dungeon.room_at(0, size // 2).type == RoomType.ENTRANCE
    boss_room = dungeon.room_at(size - 1, size // 2)
    assert boss_room.type == RoomType.BOSS
    assert isinstance(boss_room.content, BossContent)
    assert boss_room.content.mob_id in BOSSES_BY_BIOME[Biome.CRYPT]
    assert boss_room.content.level == 4


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("floor", [1, 6, 14])
def test_boss_reachable_from_entrance(seed, floor):
    """Following exits from the entrance always reaches the boss."""
    dungeon = generate_dungeon(seed, floor=floor)
    assert dungeon.boss.as_tuple() in reachable_from_entrance(dungeon)


@pytest.mark.parametrize("seed", SEEDS)
def test_main_path_is_walkable(seed):
    """The main path is made of rooms, never obstacles, linked both ways."""
    dungeon = generate_dungeon(seed, floor=2)
    path = dungeon.main_path
    assert path[0] == dungeon.entrance
    assert path[-1] == dungeon.boss
    for position in path:
        room = dungeon.room_at(position.x, position.y)
        assert room is not None
        assert room.type != RoomType.OBSTACLE
    for current, following in zip(path, path[1:]):
        forward = [d for d in dungeon.room_at(current.x, current.y).exits if current.step(d) == following]
        backward = [
            d for d in dungeon.room_at(following.x, following.y).exits if following.step(d) == current
        ]
        assert forward and backward


@pytest.mark.parametrize("seed", SEEDS)
def test_exits_lead_to_rooms(seed):
    """Every exit points at an in-bounds room; obstacles have no exits."""
    dungeon = generate_dungeon(seed, floor=4)
    for position, room in dungeon.rooms():
        if room.type == RoomType.OBSTACLE:
            assert room.exits == []
            continue
        for direction in room.exits:
            target = position.step(direction)
            assert dungeon.in_bounds(target.x, target.y)
            neighbor = dungeon.room_at(target.x, target.y)
            assert neighbor is not None
            assert neighbor.type != RoomType.OBSTACLE


@pytest.mark.parametrize("seed", SEEDS)
def test_room_content_matches_floor(seed):
    """Monsters belong to the biome and are levelled around the floor."""
    floor = 7
    dungeon = generate_dungeon(seed, floor=floor, size=8)
    for _, room in dungeon.rooms():
        if room.type == RoomType.MONSTER:
            assert isinstance(room.content, MonsterContent)
            assert room.content.mob_id in MOBS_BY_BIOME[Biome.VOLCANO]
            assert floor <= room.content.level <= floor + 2
        if room.type in STATION_ROOM_TYPES:
            assert isinstance(room.content, StationContent)
            assert room.content.station_id == STATION_ROOM_TYPES[room.type]
        assert room.description


def test_explicit_size():
    """An explicit size is used as the grid side."""
    dungeon = DungeonGenerator("sized", floor=1).generate_dungeon(size=3)
    assert dungeon.size == 3
    assert len(dungeon.grid) == 3
    assert all(len(row) == 3 for row in dungeon.grid)


def test_too_small_size_rejected():
    """Grids smaller than 3x3 are refused."""
    with pytest.raises(ValidationError):
        generate_dungeon("tiny", size=2)


@pytest.mark.parametrize(
    "floor, biome",
    [(1, Biome.CRYPT), (5, Biome.CRYPT), (6, Biome.VOLCANO), (26, Biome.ABYSS), (31, Biome.CRYPT)],
)
def test_biome_for_floor(floor, biome):
    """The biome changes every five floors and wraps around."""
    assert get_biome_for_floor(floor) == biome


def test_floor_below_one_rejected():
    """Floor numbers start at 1."""
    with pytest.raises(ValidationError):
        get_biome_for_floor(0)
