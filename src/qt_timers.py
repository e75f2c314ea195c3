"""
Qt Timers Module for Total

Scheduler backed by single-shot QTimers, so delayed session callbacks run
on the GUI thread like every other player action.
"""

from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer

from src.puzzle import ScheduledCall, Scheduler


class _QtCall(ScheduledCall):

    def __init__(self, timer: QTimer):
        self._timer = timer
        self._done = False

    def cancel(self) -> None:
        if not self._done:
            self._done = True
            self._timer.stop()
            self._timer.deleteLater()

    @property
    def active(self) -> bool:
        return not self._done

    def _fired(self) -> None:
        self._done = True
        self._timer.deleteLater()


class QtScheduler(Scheduler):
    """
    Scheduler running callbacks from the Qt event loop.

    Args:
        parent: QObject owning the timers (usually the main window)
    """

    def __init__(self, parent: Optional[QObject] = None):
        self._parent = parent

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        call = _QtCall(timer)

        def on_timeout():
            call._fired()
            callback()

        timer.timeout.connect(on_timeout)
        timer.start(int(delay_sec * 1000))
        return call
