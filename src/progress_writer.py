"""
Progress Writer Module for Total

Runs progress-saving coroutines on one background QThread so the GUI
thread never waits for storage. Saves are queued and run in submission
order; results come back through Qt signals.
"""

import logging

from PyQt5.QtCore import QThread, pyqtSignal

from src.storage import SaveJob, SaveQueue

# Configure module logger
logger = logging.getLogger(__name__)


class ProgressWriter(QThread):
    """
    Long-lived worker thread draining a SaveQueue.

    Signals:
        saved(bool): Emitted with each job's result
        error_occurred(str): Emitted when a job raises a precondition error

    Example:
        writer = ProgressWriter()
        writer.saved.connect(on_saved)
        writer.start()
        writer.submit(lambda: progression.save_progress(3, 4))
        ...
        writer.stop()
    """

    saved = pyqtSignal(bool)
    error_occurred = pyqtSignal(str)

    def __init__(self):
        super().__init__()
        self._saves = SaveQueue()

    def submit(self, job: SaveJob):
        """Queue a save; it runs after every save submitted before it."""
        self._saves.submit(job)

    def run(self):
        self._saves.run(on_result=self.saved.emit, on_error=self.error_occurred.emit)

    def stop(self, timeout_ms: int = 2000) -> bool:
        """
        Finish queued saves and end the thread.

        Returns:
            True if the thread ended within the timeout
        """
        self._saves.close()
        finished = self.wait(timeout_ms)
        if not finished:
            logger.warning("Progress writer still busy at shutdown")
        return finished
