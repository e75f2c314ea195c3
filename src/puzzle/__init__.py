"""
Puzzle Package - Engine for the Total arithmetic puzzle.

The player combines two tiles at a time with +, −, × or ÷ until one tile
equals the target. This package resolves levels into puzzles, applies
moves, keeps undo history and lays tiles out on the display grid.

Public API:
    - Tile: Immutable numbered tile
    - Puzzle: Target plus starting tiles
    - Operation, Evaluator: Arithmetic with game rules
    - LevelResolver, load_levels(): Level data and fallback puzzles
    - layout(), dimensions_for(), GridLayout: Display grid mapping
    - PuzzleSession: Selection/move state machine with undo and restart
    - Snapshot: Pre-move state kept for undo
    - Scheduler, ManualScheduler: Cancellable delayed calls
    - Hint, ClosestResultHint: One-step hints

Usage:
    from src.puzzle import LevelResolver, PuzzleSession, Operation

    resolver = LevelResolver()
    session = PuzzleSession(resolver.resolve(5))

    first, second = session.tiles[0], session.tiles[1]
    session.pick_tile(first)
    session.pick_operation(Operation.DIVIDE)
    session.pick_tile(second)

    print(session.values, session.won)
"""

# Core data structures
from .tile import Tile
from .board import Puzzle
from .history import Snapshot
from .operations import (
    Evaluator,
    Operation,
    OPERATION_SYMBOLS,
    MAX_GRID_SIZE,
    MAX_NUMBER_VALUE,
)

# Levels and layout
from .levels import LevelResolver, load_levels, DEFAULT_LEVELS_FILE
from .layout import GridDimensions, GridLayout, dimensions_for, layout

# Session
from .timers import ManualScheduler, ScheduledCall, Scheduler
from .session import (
    PickResult,
    PuzzleSession,
    Selection,
    SelectionPhase,
    TileState,
)

# Hint framework
from .hints import (
    Hint,
    HintStrategy,
    ClosestResultHint,
)

__all__ = [
    # Data structures
    "Tile",
    "Puzzle",
    "Snapshot",
    "Evaluator",
    "Operation",
    "OPERATION_SYMBOLS",
    "MAX_GRID_SIZE",
    "MAX_NUMBER_VALUE",
    # Levels and layout
    "LevelResolver",
    "load_levels",
    "DEFAULT_LEVELS_FILE",
    "GridDimensions",
    "GridLayout",
    "dimensions_for",
    "layout",
    # Session
    "ManualScheduler",
    "ScheduledCall",
    "Scheduler",
    "PickResult",
    "PuzzleSession",
    "Selection",
    "SelectionPhase",
    "TileState",
    # Hints
    "Hint",
    "HintStrategy",
    "ClosestResultHint",
]
