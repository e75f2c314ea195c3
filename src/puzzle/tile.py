"""
Tile Module - A single numbered tile on the puzzle board.
"""

import uuid
from dataclasses import dataclass


def new_tile_id(prefix: str = "tile") -> str:
    """
    Generate a fresh tile id.

    Ids are never reused, so two tiles holding the same value are
    still distinct for selection and removal.

    Args:
        prefix: Readable prefix (e.g. "level_3_0", "result")

    Returns:
        Unique id string
    """
    return f"{prefix}_{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Tile:
    """
    Immutable numbered tile.

    Attributes:
        value: Integer shown on the tile
        id: Unique identity used for selection and removal
        position: Display slot assigned at creation, never re-compacted
    """
    value: int
    id: str
    position: int

    @classmethod
    def create(cls, value: int, position: int, prefix: str = "tile") -> 'Tile':
        """
        Create a tile with a fresh unique id.

        Args:
            value: Tile value
            position: Display slot index
            prefix: Id prefix

        Returns:
            Tile instance
        """
        return cls(value=value, id=new_tile_id(prefix), position=position)

    def __str__(self) -> str:
        return str(self.value)
