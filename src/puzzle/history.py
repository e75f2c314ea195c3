"""
History Module - Pre-move snapshots used for undo.
"""

from dataclasses import dataclass
from typing import Tuple

from .operations import Operation
from .tile import Tile


@dataclass(frozen=True)
class Snapshot:
    """
    Board state saved right before a reduction.

    Attributes:
        tiles: Active tiles before the move
        grid_size: Starting tile count in effect before the move
        operand1: First tile picked
        operand2: Second tile picked
        operation: Operation applied
        result: Value produced (0 means no result tile was created)
    """
    tiles: Tuple[Tile, ...]
    grid_size: int
    operand1: Tile
    operand2: Tile
    operation: Operation
    result: int

    def describe(self) -> str:
        """Human-readable move, e.g. "6 ÷ 2 = 3"."""
        return f"{self.operand1.value} {self.operation.symbol} {self.operand2.value} = {self.result}"
