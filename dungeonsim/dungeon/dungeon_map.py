"""
Dungeon map module.

A ``DungeonMap`` is the product of one floor generation. Its layout never
changes after generation; only the per-room ``discovered`` flag, the loot
``looted`` flag and the shop stock are updated while the floor is played.
"""

from collections.abc import Iterator

from pydantic import Field

from dungeonsim.core.constants import Biome, Direction
from dungeonsim.core.errors import BoundsError, ValidationError
from dungeonsim.core.logging import log_debug
from dungeonsim.core.models import StateModel
from dungeonsim.dungeon.room import LootContent, Position, Room


class DungeonMap(StateModel):
    """
    The grid of rooms of a single dungeon floor.

    ``grid[x][y]`` is ``None`` for walls. Every coordinate access goes through
    ``room_at``, which raises ``BoundsError`` outside the grid.
    """

    size: int = Field(description="Side length of the square grid.")
    grid: list[list[Room | None]] = Field(
        description="Rooms indexed as grid[x][y]; None marks a wall."
    )
    entrance: Position = Field(description="Where the player enters the floor.")
    boss: Position = Field(description="Where the floor boss waits.")
    biome: Biome = Field(description="Biome of the floor.")
    floor: int = Field(description="Floor number, starting at 1.")
    seed: str = Field(description="Seed string the floor was generated from.")
    numeric_seed: int = Field(
        description="PRNG state right after generation finished."
    )
    main_path: list[Position] = Field(
        default_factory=list,
        description="Cells of the guaranteed entrance-to-boss path, in order.",
    )

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise BoundsError(x, y, self.size)

    def room_at(self, x: int, y: int) -> Room | None:
        """
        Returns the room at the given coordinate.

        Args:
            x (int): The row.
            y (int): The column.

        Returns:
            Room | None: The room, or None if the cell is a wall.

        Raises:
            BoundsError: If the coordinate lies outside the grid.

        """
        self._check_bounds(x, y)
        return self.grid[x][y]

    def neighbor(self, x: int, y: int, direction: Direction) -> Room | None:
        """Returns the room next to (x, y), or None for walls and grid edges."""
        self._check_bounds(x, y)
        dx, dy = direction.offset
        nx, ny = x + dx, y + dy
        if not self.in_bounds(nx, ny):
            return None
        return self.grid[nx][ny]

    def move(self, position: Position, direction: Direction) -> Position:
        """
        Moves from a room through one of its exits.

        Args:
            position (Position): The room the player stands in.
            direction (Direction): The exit to take.

        Returns:
            Position: The coordinate of the destination room, now discovered.

        Raises:
            BoundsError: If the starting position is outside the grid.
            ValidationError: If the room has no exit in that direction.

        """
        room = self.room_at(position.x, position.y)
        if room is None or not room.has_exit(direction):
            raise ValidationError(
                f"No exit {direction.value} from ({position.x}, {position.y})."
            )
        target = position.step(direction)
        self.visit(target.x, target.y)
        return target

    def visit(self, x: int, y: int) -> Room:
        """Marks a room as discovered and returns it."""
        room = self.room_at(x, y)
        if room is None:
            raise ValidationError(f"Cell ({x}, {y}) is a wall.")
        if not room.discovered:
            log_debug("Room discovered", {"x": x, "y": y, "type": room.type})
        room.discovered = True
        return room

    def loot_room(self, x: int, y: int) -> LootContent | None:
        """
        Collects the loot of a room.

        Returns the loot payload the first time it is called on a loot room,
        None afterwards or for rooms without loot.
        """
        room = self.room_at(x, y)
        if room is None or not isinstance(room.content, LootContent):
            return None
        if room.content.looted:
            return None
        room.content.looted = True
        return room.content

    def rooms(self) -> Iterator[tuple[Position, Room]]:
        """Iterates over every non-wall cell, row by row."""
        for x, row in enumerate(self.grid):
            for y, room in enumerate(row):
                if room is not None:
                    yield Position(x=x, y=y), room

    def is_on_main_path(self, x: int, y: int) -> bool:
        return any(p.x == x and p.y == y for p in self.main_path)

    @property
    def room_count(self) -> int:
        return sum(1 for _ in self.rooms())
