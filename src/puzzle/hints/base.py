"""
Base Hint Module - Abstract base class for hint strategies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from ..operations import Evaluator, Operation
from ..tile import Tile


@dataclass(frozen=True)
class Hint:
    """
    A single suggested move.

    Attributes:
        first: First tile to pick
        operation: Operation to apply
        second: Second tile to pick
        result: Value the move produces
        distance: |result - target|
    """
    first: Tile
    operation: Operation
    second: Tile
    result: int
    distance: int

    @property
    def text(self) -> str:
        """Hint text, e.g. "Try 6 ÷ 2 = 3"."""
        return f"Try {self.first.value} {self.operation.symbol} {self.second.value} = {self.result}"

    def __str__(self) -> str:
        return self.text


class HintStrategy(ABC):
    """
    Abstract base class for hint strategies.

    Strategies only look one move ahead; they never search for a full
    solution and never touch session state.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None):
        self.evaluator = evaluator or Evaluator()

    @abstractmethod
    def suggest(self, tiles: Sequence[Tile], target: int) -> Optional[Hint]:
        """
        Suggest one move.

        Args:
            tiles: Active tiles in board order
            target: Puzzle target

        Returns:
            Hint, or None if fewer than two tiles remain
        """
        pass

    def candidate_moves(self, tiles: Sequence[Tile]) -> Iterator[Tuple[Tile, Operation, Tile, int]]:
        """
        Yield every valid (first, op, second, result) one move away.

        Pairs are unordered and come in tile index order; operations come
        in add, subtract, multiply, divide order. Invalid divisions are
        skipped.
        """
        for i in range(len(tiles)):
            for j in range(i + 1, len(tiles)):
                first, second = tiles[i], tiles[j]
                for op in Operation:
                    result = self.evaluator.apply(first.value, op, second.value)
                    if result is not None:
                        yield first, op, second, result
