"""
Progression Module for Total

Tracks which level the player is on, moves to the next level after a
win and persists progress through ProgressStorage.

The in-memory level is the source of truth for the running game. It is
updated synchronously and listeners are notified before any storage call
is awaited; storage is best-effort durability, so a storage outage never
blocks advancing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from src.puzzle import LevelResolver, Puzzle
from src.storage import ProgressStorage, StorageError

logger = logging.getLogger(__name__)

# Level select shows at least this many levels
MIN_LEVELS_SHOWN = 20
# ...and this many beyond the current level
LEVELS_AHEAD_SHOWN = 5


class LevelStatus(Enum):
    """Level select state of a level."""
    LOCKED = "locked"
    CURRENT = "current"
    COMPLETED = "completed"
    AVAILABLE = "available"


@dataclass
class ProgressStats:
    """
    Completion over unlocked levels.

    Attributes:
        completed: Completed levels at or below the current level
        total: Unlocked level count (= current level)
        percentage: completed / total, rounded, 0-100
    """
    completed: int
    total: int
    percentage: int


class LevelProgression:
    """
    Level bookkeeping for one player.

    Example:
        progression = LevelProgression(storage, resolver)
        await progression.load()
        session = PuzzleSession(progression.current_puzzle())
        ...
        if session.won:
            new_level = await progression.complete_level()
    """

    def __init__(self, storage: ProgressStorage, resolver: LevelResolver,
                 on_level_changed: Optional[Callable[[int], None]] = None):
        """
        Initialize progression at level 1 (call load() to restore).

        Args:
            storage: Progress storage
            resolver: Level resolver used for current_puzzle()
            on_level_changed: Called with the new level after every change
        """
        self.storage = storage
        self.resolver = resolver
        self.on_level_changed = on_level_changed
        self._current_level = 1
        self._completed: List[int] = []

    @property
    def current_level(self) -> int:
        return self._current_level

    @property
    def completed_levels(self) -> List[int]:
        return list(self._completed)

    async def load(self) -> int:
        """
        Restore progress from storage.

        Returns:
            Current level (1 if nothing was saved)
        """
        self._current_level = await self.storage.get_current_level()
        self._completed = await self.storage.get_completed_levels()
        logger.info(f"Progress loaded: level {self._current_level}, {len(self._completed)} completed")
        return self._current_level

    def current_puzzle(self) -> Puzzle:
        """Resolve the puzzle for the current level."""
        return self.resolver.resolve(self._current_level)

    def advance(self) -> int:
        """
        Mark the current level completed and move to the next one, in
        memory only. Listeners are notified.

        Returns:
            New current level
        """
        completed = self._current_level
        if completed not in self._completed:
            self._completed.append(completed)
            self._completed.sort()

        self._current_level = completed + 1
        logger.info(f"Level {completed} complete, advancing to level {self._current_level}")
        self._notify()
        return self._current_level

    async def save_progress(self, completed_level: int, new_level: int) -> bool:
        """
        Persist a completion.

        Args:
            completed_level: Level just completed
            new_level: New current level

        Returns:
            True if both writes succeeded, False on a storage failure

        Raises:
            ValueError: If either level is below 1
        """
        try:
            await self.storage.add_completed_level(completed_level)
            await self.storage.set_current_level(new_level)
        except StorageError as e:
            logger.warning(f"Progress not saved, continuing with in-memory state: {e}")
            return False
        logger.debug(f"Progress saved: completed {completed_level}, current {new_level}")
        return True

    async def complete_level(self) -> int:
        """
        Finish the current level: advance, notify, then persist.

        Returns:
            New current level
        """
        completed = self._current_level
        new_level = self.advance()
        await self.save_progress(completed, new_level)
        return new_level

    async def select_level(self, level: int) -> int:
        """
        Jump to a level (e.g. from level select) and persist it.

        Args:
            level: Level to play

        Returns:
            The selected level

        Raises:
            ValueError: If level is below 1
        """
        if level < 1:
            raise ValueError(f"Level must be at least 1, got {level}")

        self._current_level = level
        self._notify()
        try:
            await self.storage.set_current_level(level)
        except StorageError as e:
            logger.warning(f"Selected level not saved: {e}")
        return level

    async def reset_progress(self) -> None:
        """Clear saved progress and return to level 1."""
        self._current_level = 1
        self._completed = []
        self._notify()
        try:
            await self.storage.clear_all_progress()
        except StorageError as e:
            logger.warning(f"Saved progress not cleared: {e}")

    def is_unlocked(self, level: int) -> bool:
        return 1 <= level <= self._current_level

    def level_status(self, level: int) -> LevelStatus:
        """
        Level select status.

        The current level wins over completed, which wins over available.
        """
        if not self.is_unlocked(level):
            return LevelStatus.LOCKED
        if level == self._current_level:
            return LevelStatus.CURRENT
        if level in self._completed:
            return LevelStatus.COMPLETED
        return LevelStatus.AVAILABLE

    def level_statuses(self) -> List[LevelStatus]:
        """Statuses for levels 1..max(20, current + 5), in order."""
        count = max(MIN_LEVELS_SHOWN, self._current_level + LEVELS_AHEAD_SHOWN)
        return [self.level_status(level) for level in range(1, count + 1)]

    def progress_stats(self) -> ProgressStats:
        """Completion over unlocked levels."""
        total = self._current_level
        completed = len([level for level in self._completed if level <= total])
        percentage = round(completed / total * 100) if total > 0 else 0
        return ProgressStats(completed=completed, total=total, percentage=percentage)

    def _notify(self) -> None:
        if self.on_level_changed:
            self.on_level_changed(self._current_level)
