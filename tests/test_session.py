"""
Tests for the puzzle session state machine.

Covers:
1. Selection transitions (pick, re-pick, operation reselection, clear)
2. Reductions, zero results and tile positions
3. Invalid division signal and its cancellable auto-clear
4. Undo, restart and derived win state
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.puzzle import (
    ManualScheduler,
    Operation,
    PickResult,
    Puzzle,
    PuzzleSession,
    SelectionPhase,
    TileState,
)


def make_session(target, values, **kwargs):
    """Session on a fresh puzzle with a manual clock."""
    scheduler = ManualScheduler()
    session = PuzzleSession(Puzzle.from_values(target, values), scheduler=scheduler, **kwargs)
    return session, scheduler


def tile_at(session, position):
    """Active tile occupying a display slot."""
    return next(tile for tile in session.tiles if tile.position == position)


def play(session, first_position, op, second_position):
    session.pick_tile(tile_at(session, first_position))
    session.pick_operation(op)
    return session.pick_tile(tile_at(session, second_position))


# ---- selection ----

def test_pick_then_repick_replaces_first():
    session, _ = make_session(10, [4, 6, 8])
    t4, t6, _ = session.tiles

    assert session.pick_tile(t4) is PickResult.SELECTED
    assert session.phase is SelectionPhase.FIRST_PICKED
    assert session.pick_tile(t6) is PickResult.SELECTED
    assert session.selection.first == t6


def test_operation_requires_first_tile():
    session, _ = make_session(10, [4, 6])
    assert session.pick_operation(Operation.ADD) is False
    assert session.phase is SelectionPhase.EMPTY


def test_operation_can_be_replaced():
    session, _ = make_session(10, [4, 6])
    session.pick_tile(session.tiles[0])
    session.pick_operation(Operation.ADD)
    session.pick_operation("×")

    assert session.phase is SelectionPhase.FIRST_AND_OPERATION
    assert session.selection.operation is Operation.MULTIPLY


def test_picking_first_tile_again_is_ignored():
    session, _ = make_session(10, [4, 6])
    t4 = session.tiles[0]
    session.pick_tile(t4)
    session.pick_operation(Operation.ADD)

    assert session.pick_tile(t4) is PickResult.IGNORED
    assert session.selection.first == t4
    assert session.values == [4, 6]


def test_unknown_tile_is_rejected():
    session, _ = make_session(10, [4, 6])
    with pytest.raises(ValueError):
        session.pick_tile("no-such-tile")


def test_clear_keeps_history():
    session, _ = make_session(100, [1, 2, 3])
    play(session, 0, Operation.ADD, 1)
    session.pick_tile(session.tiles[0])
    session.pick_operation(Operation.ADD)

    session.clear()
    assert session.phase is SelectionPhase.EMPTY
    assert len(session.history) == 1
    assert not session.can_clear


def test_tile_state_highlighting():
    session, _ = make_session(10, [4, 6])
    t4, t6 = session.tiles
    session.pick_tile(t4)

    assert session.tile_state(t4) is TileState.SELECTED_FIRST
    assert session.tile_state(t6) is TileState.AVAILABLE


# ---- reductions ----

def test_divide_reaches_target():
    """{3, [6,2,4]}: 6 ÷ 2 leaves 3 in the 6's slot and 4 untouched."""
    session, _ = make_session(3, [6, 2, 4])

    assert play(session, 0, Operation.DIVIDE, 1) is PickResult.REDUCED
    assert sorted(session.values) == [3, 4]
    assert tile_at(session, 0).value == 3
    assert tile_at(session, 2).value == 4
    assert session.won
    assert [t.value for t in session.winning_tiles()] == [3]
    assert session.phase is SelectionPhase.EMPTY


def test_zero_result_leaves_no_tile():
    """{10, [5,5]}: 5 − 5 = 0 empties the board and the puzzle is lost."""
    session, _ = make_session(10, [5, 5])

    assert play(session, 0, Operation.SUBTRACT, 1) is PickResult.REDUCED
    assert session.tiles == ()
    assert not session.won
    assert session.history[-1].result == 0
    assert session.hint() is None


def test_equal_values_are_distinct_tiles():
    session, _ = make_session(10, [5, 5])
    play(session, 0, Operation.ADD, 1)
    assert session.values == [10]
    assert session.won


def test_tile_count_drops_by_one_per_move():
    session, _ = make_session(1000, [2, 3, 4, 5, 6])
    count = len(session.tiles)
    for _ in range(4):
        first, second = session.tiles[0], session.tiles[1]
        session.pick_tile(first)
        session.pick_operation(Operation.ADD)
        session.pick_tile(second)
        assert len(session.tiles) == count - 1
        count -= 1


def test_result_keeps_first_operand_slot():
    session, _ = make_session(100, [1, 2, 3, 4])
    play(session, 3, Operation.MULTIPLY, 0)

    assert tile_at(session, 3).value == 4
    grid = session.layout()
    assert grid.grid[0] is None
    assert grid.grid[3].value == 4


def test_positions_are_unique():
    session, _ = make_session(100, [1, 2, 3, 4, 5])
    play(session, 0, Operation.ADD, 1)
    play(session, 4, Operation.ADD, 0)
    positions = [tile.position for tile in session.tiles]
    assert len(positions) == len(set(positions))


# ---- invalid division ----

def test_invalid_division_signals_then_clears():
    """{7, [4,6]}: 4 ÷ 6 is rejected and cleared after the delay."""
    session, scheduler = make_session(7, [4, 6])
    t4, t6 = session.tiles

    assert play(session, 0, Operation.DIVIDE, 1) is PickResult.INVALID
    assert session.invalid_move
    assert session.selection.first == t4
    assert session.selection.operation is Operation.DIVIDE
    assert session.tile_state(t6) is TileState.SELECTED_SECOND
    assert session.values == [4, 6]
    assert session.history == ()

    assert scheduler.advance(0.5) == 0
    assert session.invalid_move

    assert scheduler.advance(0.2) == 1
    assert not session.invalid_move
    assert session.phase is SelectionPhase.EMPTY
    assert session.values == [4, 6]


def test_new_action_cancels_pending_clear():
    session, scheduler = make_session(10, [4, 6])
    t4, t6 = session.tiles
    play(session, 0, Operation.DIVIDE, 1)

    assert session.pick_operation(Operation.ADD)
    assert scheduler.pending == 0
    assert not session.invalid_move

    # The old timer must not wipe the newer selection
    scheduler.advance(5.0)
    assert session.selection.first == t4
    assert session.selection.operation is Operation.ADD

    assert session.pick_tile(t6) is PickResult.REDUCED
    assert session.won


def test_pick_after_invalid_uses_kept_selection():
    session, scheduler = make_session(2, [4, 6, 8])
    play(session, 0, Operation.DIVIDE, 1)

    assert session.pick_tile(tile_at(session, 2)) is PickResult.REDUCED
    assert tile_at(session, 0).value == 2
    assert scheduler.pending == 0


def test_clear_cancels_pending_clear():
    session, scheduler = make_session(7, [4, 6])
    play(session, 0, Operation.DIVIDE, 1)
    session.clear()

    assert scheduler.pending == 0
    assert session.phase is SelectionPhase.EMPTY


def test_custom_invalid_delay():
    session, scheduler = make_session(7, [4, 6], invalid_move_delay=2.0)
    play(session, 0, Operation.DIVIDE, 1)
    scheduler.advance(1.0)
    assert session.invalid_move
    scheduler.advance(1.0)
    assert not session.invalid_move


# ---- undo / restart / win ----

def test_undo_is_left_inverse_of_move():
    session, _ = make_session(100, [1, 2, 3])
    before = session.tiles
    play(session, 0, Operation.ADD, 2)

    assert session.undo()
    assert session.tiles == before
    assert session.grid_size == 3
    assert session.history == ()
    assert session.phase is SelectionPhase.EMPTY


def test_undo_with_empty_history():
    session, _ = make_session(10, [4, 6])
    assert session.undo() is False
    assert not session.can_undo


def test_three_moves_three_undos_restore_original():
    session, _ = make_session(100, [1, 2, 3, 4])
    play(session, 0, Operation.ADD, 1)        # 3 at slot 0
    play(session, 0, Operation.MULTIPLY, 3)   # 12 at slot 0
    play(session, 0, Operation.SUBTRACT, 2)   # 9 at slot 0
    assert session.values == [9]
    assert len(session.history) == 3

    for _ in range(3):
        assert session.undo()

    assert session.tiles == session.puzzle.tiles
    assert session.grid_size == 4
    assert session.history == ()


def test_undoing_win_unwins():
    session, _ = make_session(3, [6, 2, 4])
    play(session, 0, Operation.DIVIDE, 1)
    assert session.won
    session.undo()
    assert not session.won


def test_restart_is_idempotent():
    session, _ = make_session(100, [1, 2, 3, 4])
    play(session, 0, Operation.ADD, 1)
    play(session, 0, Operation.ADD, 2)
    session.undo()
    session.pick_tile(session.tiles[0])

    session.restart()
    assert session.tiles == session.puzzle.tiles
    assert session.history == ()
    assert session.phase is SelectionPhase.EMPTY
    assert not session.won

    session.restart()
    assert session.tiles == session.puzzle.tiles
    assert session.history == ()


def test_restart_cancels_pending_clear():
    session, scheduler = make_session(7, [4, 6])
    play(session, 0, Operation.DIVIDE, 1)
    session.restart()
    assert scheduler.pending == 0
    assert not session.invalid_move


def test_hint_does_not_mutate():
    session, _ = make_session(3, [6, 2, 4])
    session.pick_tile(session.tiles[2])
    before = (session.tiles, session.history, session.selection)

    hint = session.hint()
    assert hint.text == "Try 6 ÷ 2 = 3"
    assert (session.tiles, session.history, session.selection) == before


def test_on_change_called_for_every_change():
    changes = []
    session, scheduler = make_session(7, [4, 6], on_change=changes.append)

    session.pick_tile(session.tiles[0])
    session.pick_operation(Operation.DIVIDE)
    session.pick_tile(session.tiles[1])
    scheduler.advance(0.6)

    assert len(changes) == 4
    assert all(changed is session for changed in changes)
