"""
Session Module - Move state machine for a single puzzle.

Player gestures arrive one at a time and drive the selection protocol:

    EMPTY --pick tile--> FIRST_PICKED --pick op--> FIRST_AND_OPERATION
      ^                    |  ^                        |       |
      |                    +--+ pick another tile      |       | pick op
      |                                                |       +--> (replace op)
      +----------- pick second tile: reduce -----------+

A second pick that would divide inexactly raises a transient invalid-move
signal instead of reducing. The selection stays visible until a scheduled
call clears it, or until the next player action cancels that call.

Win state is never stored: it is recomputed from the active tiles on
every read, so undoing a winning move un-wins the puzzle.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple, Union
import logging

from .board import Puzzle
from .history import Snapshot
from .hints import ClosestResultHint, Hint, HintStrategy
from .layout import GridLayout, layout
from .operations import Evaluator, Operation
from .tile import Tile, new_tile_id
from .timers import ManualScheduler, ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


__all__ = [
    "SelectionPhase",
    "Selection",
    "TileState",
    "PickResult",
    "PuzzleSession",
]

# Delay before a rejected move's selection is cleared
DEFAULT_INVALID_MOVE_DELAY_SEC = 0.6


class SelectionPhase(Enum):
    """
    Logical position in the move protocol.

    States:
        EMPTY: Nothing selected
        FIRST_PICKED: First tile chosen, no operation yet
        FIRST_AND_OPERATION: First tile and operation chosen
    """
    EMPTY = auto()
    FIRST_PICKED = auto()
    FIRST_AND_OPERATION = auto()


class TileState(Enum):
    """Highlight state of a tile for rendering."""
    AVAILABLE = auto()
    SELECTED_FIRST = auto()
    SELECTED_SECOND = auto()


class PickResult(Enum):
    """Outcome of picking a tile."""
    SELECTED = auto()
    REDUCED = auto()
    INVALID = auto()
    IGNORED = auto()


@dataclass(frozen=True)
class Selection:
    """
    Current selection.

    Attributes:
        first: First tile picked
        operation: Operation picked
        rejected: Second tile of a rejected move, shown while the
                  invalid-move signal is up
    """
    first: Optional[Tile] = None
    operation: Optional[Operation] = None
    rejected: Optional[Tile] = None

    @property
    def phase(self) -> SelectionPhase:
        if self.first is None:
            return SelectionPhase.EMPTY
        if self.operation is None:
            return SelectionPhase.FIRST_PICKED
        return SelectionPhase.FIRST_AND_OPERATION


EMPTY_SELECTION = Selection()


class PuzzleSession:
    """
    Owns the active tiles, selection, undo history and win state of one
    puzzle instance.

    Collaborators are passed in rather than shared globally, so several
    sessions can coexist (e.g. in tests).

    Example:
        session = PuzzleSession(resolver.resolve(5))
        session.pick_tile(session.tiles[0])
        session.pick_operation(Operation.DIVIDE)
        session.pick_tile(session.tiles[1])
        if session.won:
            ...
    """

    def __init__(self, puzzle: Puzzle, evaluator: Optional[Evaluator] = None,
                 scheduler: Optional[Scheduler] = None,
                 hint_strategy: Optional[HintStrategy] = None,
                 invalid_move_delay: float = DEFAULT_INVALID_MOVE_DELAY_SEC,
                 on_change: Optional[Callable[['PuzzleSession'], None]] = None):
        """
        Initialize session.

        Args:
            puzzle: Puzzle to play (kept as the restart snapshot)
            evaluator: Arithmetic evaluator (a new one if omitted)
            scheduler: Scheduler for the invalid-move clear (ManualScheduler if omitted)
            hint_strategy: Hint strategy (ClosestResultHint if omitted)
            invalid_move_delay: Seconds before a rejected move is cleared
            on_change: Called after every state change
        """
        self.puzzle = puzzle
        self.evaluator = evaluator or Evaluator()
        self.scheduler = scheduler or ManualScheduler()
        self.invalid_move_delay = invalid_move_delay
        self.on_change = on_change

        self._hint_strategy = hint_strategy or ClosestResultHint(self.evaluator)

        self._tiles: Tuple[Tile, ...] = puzzle.tiles
        self._grid_size = puzzle.size
        self._selection = EMPTY_SELECTION
        self._history: Tuple[Snapshot, ...] = ()
        self._pending_clear: Optional[ScheduledCall] = None

    # ---- read-only state ----

    @property
    def target(self) -> int:
        """Target value."""
        return self.puzzle.target

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        """Active tiles in board order."""
        return self._tiles

    @property
    def values(self) -> List[int]:
        """Active tile values in board order."""
        return [tile.value for tile in self._tiles]

    @property
    def grid_size(self) -> int:
        """Starting tile count the layout is based on."""
        return self._grid_size

    @property
    def selection(self) -> Selection:
        """Current selection."""
        return self._selection

    @property
    def phase(self) -> SelectionPhase:
        """Current selection phase."""
        return self._selection.phase

    @property
    def history(self) -> Tuple[Snapshot, ...]:
        """Snapshots of successful moves, oldest first."""
        return self._history

    @property
    def invalid_move(self) -> bool:
        """True while a rejected move is being signalled."""
        return self._selection.rejected is not None

    @property
    def won(self) -> bool:
        """True if any active tile equals the target."""
        return any(tile.value == self.target for tile in self._tiles)

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def can_clear(self) -> bool:
        return self._selection.first is not None

    def winning_tiles(self) -> List[Tile]:
        """Tiles whose value equals the target."""
        return [tile for tile in self._tiles if tile.value == self.target]

    def tile_state(self, tile: Tile) -> TileState:
        """Highlight state of a tile, compared by id."""
        first = self._selection.first
        rejected = self._selection.rejected
        if first is not None and tile.id == first.id:
            return TileState.SELECTED_FIRST
        if rejected is not None and tile.id == rejected.id:
            return TileState.SELECTED_SECOND
        return TileState.AVAILABLE

    def layout(self) -> GridLayout:
        """Display grid for the active tiles."""
        return layout(self._tiles, self._grid_size)

    def find_tile(self, tile_id: str) -> Optional[Tile]:
        """Look up an active tile by id."""
        for tile in self._tiles:
            if tile.id == tile_id:
                return tile
        return None

    # ---- player actions ----

    def pick_tile(self, tile: Union[Tile, str]) -> PickResult:
        """
        Pick a tile.

        Args:
            tile: Active tile or its id

        Returns:
            What the pick did

        Raises:
            ValueError: If the tile is not on the board
        """
        tile_id = tile if isinstance(tile, str) else tile.id
        picked = self.find_tile(tile_id)
        if picked is None:
            raise ValueError(f"Tile {tile_id} is not on the board")

        was_invalid = self._cancel_pending_clear()
        selection = self._selection

        if selection.phase in (SelectionPhase.EMPTY, SelectionPhase.FIRST_PICKED):
            self._selection = Selection(first=picked)
            self._changed()
            return PickResult.SELECTED

        if picked.id == selection.first.id:
            if was_invalid:
                self._changed()
            return PickResult.IGNORED

        return self._attempt_move(selection.first, selection.operation, picked)

    def pick_operation(self, op: Union[Operation, str]) -> bool:
        """
        Pick or replace the operation.

        Args:
            op: Operation or its text form

        Returns:
            True if accepted (a first tile must be picked)
        """
        if not isinstance(op, Operation):
            op = Operation.parse(op)

        self._cancel_pending_clear()
        if self._selection.first is None:
            return False

        self._selection = Selection(first=self._selection.first, operation=op)
        self._changed()
        return True

    def clear(self) -> None:
        """Drop the in-progress selection. History is untouched."""
        self._cancel_pending_clear()
        self._selection = EMPTY_SELECTION
        self._changed()

    def undo(self) -> bool:
        """
        Revert the last successful move.

        Returns:
            False if there was nothing to undo
        """
        self._cancel_pending_clear()
        if not self._history:
            return False

        last = self._history[-1]
        self._tiles = last.tiles
        self._grid_size = last.grid_size
        self._history = self._history[:-1]
        self._selection = EMPTY_SELECTION
        logger.info(f"Undo {last.describe()}, {len(self._history)} moves left in history")
        self._changed()
        return True

    def restart(self) -> None:
        """Return to the original puzzle, clearing history and selection."""
        self._cancel_pending_clear()
        self._tiles = self.puzzle.tiles
        self._grid_size = self.puzzle.size
        self._history = ()
        self._selection = EMPTY_SELECTION
        logger.info(f"Restarted puzzle (target {self.target})")
        self._changed()

    def hint(self) -> Optional[Hint]:
        """Suggest one move. Never changes session state."""
        return self._hint_strategy.suggest(self._tiles, self.target)

    # ---- internals ----

    def _attempt_move(self, first: Tile, op: Operation, second: Tile) -> PickResult:
        if op is Operation.DIVIDE and not self.evaluator.can_divide(first.value, second.value):
            logger.info(f"Invalid move: {first.value} {op.symbol} {second.value} does not divide exactly")
            self._selection = Selection(first=first, operation=op, rejected=second)
            self._pending_clear = self.scheduler.call_later(
                self.invalid_move_delay, self._expire_invalid_move
            )
            self._changed()
            return PickResult.INVALID

        result = self.evaluator.apply(first.value, op, second.value)
        if result is None:
            logger.error(f"Evaluator rejected {first.value} {op.symbol} {second.value}")
            return PickResult.IGNORED

        snapshot = Snapshot(
            tiles=self._tiles,
            grid_size=self._grid_size,
            operand1=first,
            operand2=second,
            operation=op,
            result=result,
        )

        remaining = [t for t in self._tiles if t.id not in (first.id, second.id)]
        if result > 0:
            remaining.append(Tile(value=result, id=new_tile_id("result"), position=first.position))

        # Tiles and history change together
        self._tiles, self._history = tuple(remaining), self._history + (snapshot,)
        self._selection = EMPTY_SELECTION

        logger.info(f"Move {snapshot.describe()}, tiles now {self.values}")
        if self.won:
            logger.info(f"Target {self.target} reached")
        self._changed()
        return PickResult.REDUCED

    def _expire_invalid_move(self) -> None:
        self._pending_clear = None
        self._selection = EMPTY_SELECTION
        self._changed()

    def _cancel_pending_clear(self) -> bool:
        """
        Cancel a pending invalid-move clear, keeping the logical selection.

        Returns:
            True if an invalid-move signal was dropped
        """
        if self._pending_clear is not None:
            self._pending_clear.cancel()
            self._pending_clear = None
        if self._selection.rejected is None:
            return False
        self._selection = Selection(first=self._selection.first,
                                    operation=self._selection.operation)
        return True

    def _changed(self) -> None:
        if self.on_change:
            self.on_change(self)
