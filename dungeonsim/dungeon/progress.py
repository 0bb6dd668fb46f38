"""
Exploration tracking for a dungeon floor.

Visited coordinates are stored as a compact comma-separated base-36 string so
the caller can persist them cheaply between commands.
"""

from pydantic import Field

from dungeonsim.core.errors import ValidationError
from dungeonsim.core.models import StateModel
from dungeonsim.core.rng import to_base36
from dungeonsim.dungeon.dungeon_map import DungeonMap

# Coordinates are shifted by this offset so negative values survive encoding.
COORDINATE_OFFSET = 100
COORDINATE_STRIDE = 1000
FLOOR_COMPLETE_PERCENTAGE = 95
VISIT_SCORE = 10
SPECIAL_ROOM_SCORE = 50


class ExplorationReport(StateModel):
    """Summary of how much of a floor has been explored."""

    rooms_visited: int = Field(description="Visited cells that hold a room.")
    total_rooms: int = Field(description="Rooms on the floor, walls excluded.")
    exploration_percentage: float = Field(
        description="Share of rooms visited, in percent, rounded to 2 decimals."
    )
    special_rooms_found: int = Field(
        description="Visited boss, shop, loot and event rooms."
    )
    exploration_score: int = Field(description="Score earned by exploring.")
    is_floor_complete: bool = Field(
        description="Whether at least 95% of the rooms were visited."
    )
    compressed_progress: str = Field(default="")


def compress_visited_rooms(coordinates: list[tuple[int, int]]) -> str:
    """
    Compresses a list of coordinates into a compact string.

    Args:
        coordinates (list[tuple[int, int]]): The visited (x, y) pairs.

    Returns:
        str: Comma-separated base-36 values, sorted by (x, y).

    """
    parts = []
    for x, y in sorted(coordinates):
        combined = (x + COORDINATE_OFFSET) * COORDINATE_STRIDE + (y + COORDINATE_OFFSET)
        parts.append(to_base36(combined))
    return ",".join(parts)


def decompress_visited_rooms(data: str) -> list[tuple[int, int]]:
    """
    Reverses ``compress_visited_rooms``; empty parts are ignored.

    Raises:
        ValidationError: If a part is not a base-36 number.

    """
    coordinates = []
    for part in data.split(","):
        if not part:
            continue
        try:
            combined = int(part, 36)
        except ValueError as e:
            raise ValidationError(f"Corrupt exploration progress: '{part}'") from e
        normalized_x, normalized_y = divmod(combined, COORDINATE_STRIDE)
        coordinates.append(
            (normalized_x - COORDINATE_OFFSET, normalized_y - COORDINATE_OFFSET)
        )
    return coordinates


class ExplorationTracker:
    """
    Keeps the set of rooms a player visited on the current floor.
    """

    def __init__(self, compressed_progress: str = "") -> None:
        self.visited: set[tuple[int, int]] = set()
        if compressed_progress:
            self.load_progress(compressed_progress)

    def mark_room_visited(self, x: int, y: int) -> None:
        self.visited.add((x, y))

    def is_room_visited(self, x: int, y: int) -> bool:
        return (x, y) in self.visited

    def get_visited_rooms(self) -> list[tuple[int, int]]:
        return sorted(self.visited)

    def load_progress(self, compressed_progress: str) -> None:
        """Replaces the visited set with the content of a saved string."""
        self.visited = set(decompress_visited_rooms(compressed_progress))

    def save_progress(self) -> str:
        return compress_visited_rooms(self.get_visited_rooms())

    def generate_exploration_report(self, dungeon: DungeonMap) -> ExplorationReport:
        """
        Measures the visited rooms against the generated floor.

        Coordinates outside the grid or pointing at walls are not counted.

        Args:
            dungeon (DungeonMap): The floor being explored.

        Returns:
            ExplorationReport: The exploration summary.

        """
        visited_rooms = [
            dungeon.grid[x][y]
            for x, y in self.get_visited_rooms()
            if dungeon.in_bounds(x, y) and dungeon.grid[x][y] is not None
        ]
        total = dungeon.room_count
        rooms_visited = len(visited_rooms)
        special = sum(1 for room in visited_rooms if room.type.is_special)
        percentage = min(rooms_visited / total * 100, 100.0) if total else 0.0
        return ExplorationReport(
            rooms_visited=rooms_visited,
            total_rooms=total,
            exploration_percentage=round(percentage, 2),
            special_rooms_found=special,
            exploration_score=rooms_visited * VISIT_SCORE + special * SPECIAL_ROOM_SCORE,
            is_floor_complete=percentage >= FLOOR_COMPLETE_PERCENTAGE,
            compressed_progress=self.save_progress(),
        )
