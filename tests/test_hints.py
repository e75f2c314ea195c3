"""
Tests for hint strategies.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.puzzle import ClosestResultHint, Hint, HintStrategy, Operation, Puzzle, PuzzleSession


def _suggest(target, values):
    puzzle = Puzzle.from_values(target, values)
    return ClosestResultHint().suggest(puzzle.tiles, target)


def test_exact_hit():
    hint = _suggest(3, [6, 2, 4])
    assert hint.text == "Try 6 ÷ 2 = 3"
    assert hint.distance == 0


def test_ties_keep_first_operation():
    # 2 + 4 = 6 and 2 × 4 = 8 are both 1 away from 7
    hint = _suggest(7, [2, 4])
    assert hint.operation is Operation.ADD
    assert hint.result == 6


def test_ties_keep_first_pair():
    # 1 × 4 and 1 + 3 both hit 4 exactly; the earlier pair wins
    hint = _suggest(4, [1, 4, 6, 3])
    assert (hint.first.value, hint.second.value) == (1, 4)


def test_invalid_division_never_suggested():
    hint = _suggest(1, [4, 6])
    # 4 ÷ 6 is invalid; 6 − 4 = 2 is closest
    assert hint.operation is Operation.SUBTRACT
    assert hint.result == 2


def test_no_hint_with_one_tile():
    assert _suggest(5, [3]) is None
    assert _suggest(5, []) is None


class FirstPairHint(HintStrategy):
    """Always suggests adding the first two tiles."""

    def suggest(self, tiles, target):
        first, op, second, result = next(self.candidate_moves(tiles))
        return Hint(first=first, operation=op, second=second,
                    result=result, distance=abs(result - target))


def test_session_uses_given_strategy():
    puzzle = Puzzle.from_values(3, [6, 2, 4])

    assert PuzzleSession(puzzle).hint().text == "Try 6 ÷ 2 = 3"
    assert PuzzleSession(puzzle, hint_strategy=FirstPairHint()).hint().text == "Try 6 + 2 = 8"
