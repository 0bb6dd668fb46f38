"""
Room module for the dungeon generator.

Defines grid positions, the type-specific payloads a room can carry, and the
room itself.
"""

from typing import Annotated, Literal

from pydantic import Field

from dungeonsim.core.constants import Direction, Rarity, RoomType
from dungeonsim.core.models import StateModel


class Position(StateModel):
    """A cell on the dungeon grid."""

    x: int = Field(description="Row index.")
    y: int = Field(description="Column index.")

    def step(self, direction: Direction) -> "Position":
        dx, dy = direction.offset
        return Position(x=self.x + dx, y=self.y + dy)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class RolledLoot(StateModel):
    """A loot placeholder rolled at generation time and resolved on pickup."""

    item_type: str = Field(description="Kind of item (potion, weapon, ...).")
    rarity: Rarity = Field(description="Rolled rarity.")
    level: int = Field(description="Floor the item was generated for.")


class ShopItem(StateModel):
    """An item offered by a dungeon merchant."""

    item_type: str = Field(description="Kind of goods on sale.")
    price: int = Field(description="Price in coins.")


class MonsterContent(StateModel):
    kind: Literal["monster"] = "monster"
    mob_id: str = Field(description="Template id of the monster.")
    level: int = Field(description="Level the monster spawns at.")


class BossContent(StateModel):
    kind: Literal["boss"] = "boss"
    mob_id: str = Field(description="Template id of the floor boss.")
    level: int = Field(description="Level the boss spawns at.")
    is_boss: bool = True


class LootContent(StateModel):
    kind: Literal["loot"] = "loot"
    coins: int = Field(description="Coins lying in the room.")
    items: list[RolledLoot] = Field(default_factory=list)
    looted: bool = Field(
        default=False,
        description="Whether the loot was already collected.",
    )


class TrapContent(StateModel):
    kind: Literal["trap"] = "trap"
    damage: int = Field(description="Damage dealt when the trap fires.")
    trap_type: str = Field(description="poison, spikes, fire or ice.")


class ShopContent(StateModel):
    kind: Literal["shop"] = "shop"
    items: list[ShopItem] = Field(default_factory=list)


class EventContent(StateModel):
    kind: Literal["event"] = "event"
    event_id: str = Field(description="Identifier of the room event.")


class ObstacleContent(StateModel):
    kind: Literal["obstacle"] = "obstacle"
    obstacle_type: str = Field(description="What blocks the room.")
    description: str = Field(default="")


class StationContent(StateModel):
    kind: Literal["station"] = "station"
    station_id: str = Field(description="Crafting station available here.")


RoomContent = Annotated[
    MonsterContent
    | BossContent
    | LootContent
    | TrapContent
    | ShopContent
    | EventContent
    | ObstacleContent
    | StationContent,
    Field(discriminator="kind"),
]


class Room(StateModel):
    """
    A single grid cell that holds a room.

    Only ``discovered``, the loot ``looted`` flag and the shop ``items`` are
    meant to change after generation.
    """

    type: RoomType = Field(description="The type of the room.")
    discovered: bool = Field(default=False)
    exits: list[Direction] = Field(
        default_factory=list,
        description="Directions that lead to a connected room.",
    )
    content: RoomContent | None = Field(default=None)
    description: str = Field(default="")

    @property
    def is_obstacle(self) -> bool:
        return self.type == RoomType.OBSTACLE

    @property
    def looted(self) -> bool:
        return isinstance(self.content, LootContent) and self.content.looted

    @property
    def shop_items(self) -> list[ShopItem]:
        if isinstance(self.content, ShopContent):
            return self.content.items
        return []

    def has_exit(self, direction: Direction) -> bool:
        return direction in self.exits
