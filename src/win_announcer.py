"""
Win Announcer Module for Total

Shows the level-complete announcement a short pause after the winning
move, at most once per session. The pause is a cancellable ScheduledCall:
undoing the win or starting a new session cancels it.
"""

import logging
from typing import Callable, Optional

from src.puzzle import PuzzleSession, ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

# Pause between reaching the target and the announcement
DEFAULT_WIN_DELAY_SEC = 0.8


class WinAnnouncer:
    """
    Watches session changes and announces a win once.

    Example:
        announcer = WinAnnouncer(scheduler, show_dialog)
        session = PuzzleSession(puzzle, on_change=announcer.update)
        ...
        announcer.reset()  # before starting the next session
    """

    def __init__(self, scheduler: Scheduler, announce: Callable[[], None],
                 delay: float = DEFAULT_WIN_DELAY_SEC):
        """
        Initialize announcer.

        Args:
            scheduler: Scheduler for the pause
            announce: Called once when a win is still standing after the pause
            delay: Pause in seconds
        """
        self.scheduler = scheduler
        self.announce = announce
        self.delay = delay
        self._session: Optional[PuzzleSession] = None
        self._pending: Optional[ScheduledCall] = None
        self._announced = False

    @property
    def pending(self) -> bool:
        """True while an announcement is scheduled."""
        return self._pending is not None

    @property
    def announced(self) -> bool:
        return self._announced

    def update(self, session: PuzzleSession) -> None:
        """Schedule or cancel the announcement after a session change."""
        self._session = session
        if not session.won:
            self._cancel()
        elif self._pending is None and not self._announced:
            logger.debug(f"Win reached, announcing in {self.delay}s")
            self._pending = self.scheduler.call_later(self.delay, self._fire)

    def reset(self) -> None:
        """Forget the current session; call before starting a new one."""
        self._cancel()
        self._session = None
        self._announced = False

    def _cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.debug("Win announcement cancelled")

    def _fire(self) -> None:
        self._pending = None
        if self._announced or self._session is None or not self._session.won:
            return
        self._announced = True
        self.announce()
