"""
Layout Module - Maps tiles onto display grid slots.

The grid shape is a fixed lookup on the starting tile count (puzzles never
exceed MAX_GRID_SIZE tiles). Tiles keep their creation slot, so consumed
tiles leave gaps instead of shifting their neighbours.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .tile import Tile


class GridDimensions(NamedTuple):
    """Column and row count of the display grid."""
    cols: int
    rows: int


def dimensions_for(tile_count: int) -> GridDimensions:
    """
    Grid shape for a tile count.

    Args:
        tile_count: Number of tiles

    Returns:
        2x2 up to 4 tiles, 3x2 up to 6, otherwise 3x3
    """
    if tile_count <= 4:
        return GridDimensions(cols=2, rows=2)
    if tile_count <= 6:
        return GridDimensions(cols=3, rows=2)
    return GridDimensions(cols=3, rows=3)


@dataclass(frozen=True)
class GridLayout:
    """
    Rendered grid.

    Attributes:
        grid: Flat slot list, a Tile or None (empty slot) per slot
        cols: Column count
    """
    grid: Tuple[Optional[Tile], ...]
    cols: int

    @property
    def slot_count(self) -> int:
        """Total number of slots."""
        return len(self.grid)

    @property
    def rows(self) -> List[List[Optional[Tile]]]:
        """Grid split into display rows."""
        return [list(self.grid[i:i + self.cols]) for i in range(0, len(self.grid), self.cols)]


def layout(tiles: Iterable[Tile], initial_tile_count: int) -> GridLayout:
    """
    Place tiles into display slots.

    Each tile goes to index tile.position. Tiles positioned outside the
    grid are left out of the rendered grid only.

    Args:
        tiles: Active tiles
        initial_tile_count: Tile count the puzzle started with

    Returns:
        GridLayout with empty slots as None
    """
    cols = dimensions_for(initial_tile_count).cols
    rows = 2 if cols == 2 else math.ceil(initial_tile_count / cols)
    total_slots = cols * rows

    grid: List[Optional[Tile]] = [None] * total_slots
    for tile in tiles:
        if 0 <= tile.position < total_slots:
            grid[tile.position] = tile

    return GridLayout(grid=tuple(grid), cols=cols)
