"""
Closest Result Hint - Suggests the single move landing nearest the target.
"""

import logging
from typing import Optional, Sequence

from ..tile import Tile
from .base import Hint, HintStrategy

logger = logging.getLogger(__name__)


class ClosestResultHint(HintStrategy):
    """
    Greedy one-step hint.

    Tries every pair of tiles with every operation and keeps the move
    whose result is closest to the target. Ties keep the first candidate
    in iteration order (pair index order, then add/subtract/multiply/divide).
    """

    def suggest(self, tiles: Sequence[Tile], target: int) -> Optional[Hint]:
        if len(tiles) < 2:
            return None

        best: Optional[Hint] = None
        for first, op, second, result in self.candidate_moves(tiles):
            distance = abs(result - target)
            if best is None or distance < best.distance:
                best = Hint(first=first, operation=op, second=second,
                            result=result, distance=distance)

        if best is not None:
            logger.debug(f"Hint for target {target}: {best.text} (distance {best.distance})")
        return best
