"""
Timers Module - Cancellable scheduled calls.

The session never sleeps or spawns threads. It asks a Scheduler to run a
callback later and keeps the returned ScheduledCall so a newer player
action can cancel it. Hosts plug in the scheduler matching their event
loop; ManualScheduler is driven explicitly and is what tests use.
"""

import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple


class ScheduledCall(ABC):
    """Handle to a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        """True while the callback is still pending."""
        pass


class Scheduler(ABC):
    """Runs callbacks after a delay on the host's event loop."""

    @abstractmethod
    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> ScheduledCall:
        """
        Schedule a callback.

        Args:
            delay_sec: Delay in seconds
            callback: Zero-argument callable

        Returns:
            Handle that can cancel the call
        """
        pass


class _ManualCall(ScheduledCall):

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False
        self._fired = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    def fire(self) -> None:
        self._fired = True
        self.callback()


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler with its own clock.

    Time only moves when advance() is called, at which point every due
    callback runs in due order on the caller's thread.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(0.6, on_timeout)
        scheduler.advance(0.6)  # runs on_timeout
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, _ManualCall]] = []
        self._counter = itertools.count()

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self.now + max(0.0, delay_sec), callback)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run due callbacks.

        Args:
            seconds: Time to advance

        Returns:
            Number of callbacks that ran
        """
        self.now += seconds
        fired = 0
        while self._queue and self._queue[0][0] <= self.now:
            _, _, call = heapq.heappop(self._queue)
            if call.active:
                call.fire()
                fired += 1
        return fired

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting."""
        return sum(1 for _, _, call in self._queue if call.active)
