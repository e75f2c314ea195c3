"""
Puzzle Module - Immutable puzzle definition (target plus starting tiles).
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .tile import Tile


@dataclass(frozen=True)
class Puzzle:
    """
    Immutable puzzle: a target and the tiles the player starts with.

    Uses a tuple of frozen tiles, so the session can keep the very same
    instance as the original for restart.

    Attributes:
        target: Number the player must produce
        tiles: Starting tiles in authored order
        level: Level number this puzzle was resolved for (if any)
        is_fallback: True if generated because no authored data existed
    """
    target: int
    tiles: Tuple[Tile, ...]
    level: Optional[int] = None
    is_fallback: bool = False

    @classmethod
    def from_values(cls, target: int, values: Sequence[int],
                    level: Optional[int] = None, prefix: str = "tile",
                    is_fallback: bool = False) -> 'Puzzle':
        """
        Build a puzzle from plain values.

        Tiles are created in list order with position = index and a
        fresh id each.

        Args:
            target: Target value
            values: Starting values
            level: Optional level number
            prefix: Tile id prefix
            is_fallback: Mark as generated fallback

        Returns:
            Puzzle instance
        """
        tiles = tuple(
            Tile.create(value, index, prefix=f"{prefix}_{index}")
            for index, value in enumerate(values)
        )
        return cls(target=target, tiles=tiles, level=level, is_fallback=is_fallback)

    @property
    def size(self) -> int:
        """Number of starting tiles."""
        return len(self.tiles)

    @property
    def values(self) -> List[int]:
        """Starting values in authored order."""
        return [tile.value for tile in self.tiles]
