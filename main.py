"""
Total - Entry Point

Launches the game window on the player's saved level.

Example:
    python main.py
    python main.py --level 12 --debug
"""

import sys
import asyncio
import logging
import argparse
from typing import Optional

from PyQt5.QtWidgets import QApplication

from src.game_window import GameWindow
from src.progress_writer import ProgressWriter
from src.progression import LevelProgression
from src.puzzle import Evaluator, LevelResolver, PuzzleSession, load_levels
from src.qt_timers import QtScheduler
from src.settings import load_settings
from src.storage import JsonFileStore, ProgressStorage
from src.win_announcer import WinAnnouncer


logger = logging.getLogger(__name__)


def configure_logging(debug: bool):
    """Log to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("total.log", mode='w', encoding='utf-8')  # File output
        ]
    )


class Application:
    """
    Main application controller.

    Owns the engine objects (resolver, evaluator, progression, session)
    and wires the window's signals to them.
    """

    def __init__(self, start_level: Optional[int] = None, debug_mode: bool = False):
        """
        Initialize the application.

        Args:
            start_level: Level to open instead of the saved one
            debug_mode: Enable debug logging via CLI (overrides saved setting)
        """
        self.start_level = start_level
        self.settings = load_settings()
        self.debug_mode = debug_mode or self.settings.get("debug_enabled", False)

        self.window: Optional[GameWindow] = None
        self.scheduler: Optional[QtScheduler] = None
        self.announcer: Optional[WinAnnouncer] = None
        self.session: Optional[PuzzleSession] = None
        self.evaluator = Evaluator()
        self.resolver = LevelResolver(load_levels(self.settings["levels_file"]))
        storage = ProgressStorage(JsonFileStore(self.settings["progress_file"]))
        self.progression = LevelProgression(
            storage, self.resolver, on_level_changed=self._on_level_changed
        )

        # One writer for the whole run so saves never overlap
        self.writer = ProgressWriter()
        self.writer.saved.connect(self._on_progress_saved)
        self.writer.error_occurred.connect(self._on_error)

    def setup(self):
        """Restore progress, create the window and connect signals."""
        asyncio.run(self.progression.load())

        if self.start_level is not None:
            try:
                asyncio.run(self.progression.select_level(self.start_level))
            except ValueError as e:
                logger.error(f"Ignoring --level: {e}")

        self.window = GameWindow()
        self.scheduler = QtScheduler(self.window)
        self.announcer = WinAnnouncer(
            self.scheduler, self._announce_win,
            delay=self.settings["win_dialog_delay_ms"] / 1000.0,
        )

        self.window.tile_clicked.connect(self._on_tile_clicked)
        self.window.operation_clicked.connect(self._on_operation_clicked)
        self.window.undo_requested.connect(self._on_undo)
        self.window.clear_requested.connect(self._on_clear)
        self.window.restart_requested.connect(self._on_restart)
        self.window.hint_requested.connect(self._on_hint)
        self.window.next_level_requested.connect(self._on_next_level)
        self.window.shutdown_requested.connect(self._on_shutdown)

        self.writer.start()
        self._start_session()
        logger.info(f"Application initialized on level {self.progression.current_level}")

    def _start_session(self):
        """Create a session for the current level."""
        self.announcer.reset()
        puzzle = self.progression.current_puzzle()
        self.session = PuzzleSession(
            puzzle,
            evaluator=self.evaluator,
            scheduler=self.scheduler,
            invalid_move_delay=self.settings["invalid_move_delay_ms"] / 1000.0,
            on_change=self._on_session_changed,
        )
        self.window.set_status("")
        self._on_session_changed(self.session)

    def _on_session_changed(self, session: PuzzleSession):
        """Redraw and let the announcer schedule or cancel the win dialog."""
        self.window.render(session, self.progression.current_level)
        self.announcer.update(session)

    def _announce_win(self):
        self.window.show_level_complete(self.progression.current_level, self.session.target)

    def _on_tile_clicked(self, tile_id: str):
        try:
            self.session.pick_tile(tile_id)
        except ValueError as e:
            logger.error(f"Tile click ignored: {e}")

    def _on_operation_clicked(self, key: str):
        self.session.pick_operation(key)

    def _on_undo(self):
        self.session.undo()

    def _on_clear(self):
        self.session.clear()

    def _on_restart(self):
        self.session.restart()

    def _on_hint(self):
        hint = self.session.hint()
        self.window.set_status(hint.text if hint else "No moves left")

    def _on_next_level(self):
        """Advance in memory now, queue the save on the writer thread."""
        completed = self.progression.current_level
        new_level = self.progression.advance()
        self.writer.submit(lambda: self.progression.save_progress(completed, new_level))

    def _on_level_changed(self, level: int):
        """Handle level change from progression."""
        logger.info(f"Now playing level {level}")
        if self.window is not None:
            self._start_session()

    def _on_progress_saved(self, ok: bool):
        if not ok:
            self.window.set_status("Progress could not be saved")

    def _on_error(self, error_msg: str):
        logger.error(f"Progress error: {error_msg}")
        self.window.set_status(f"Error: {error_msg}")

    def _on_shutdown(self):
        """Handle window close: let queued saves finish."""
        logger.info("Shutdown requested")
        self.writer.stop()

    def run(self) -> int:
        """
        Run the application.

        Returns:
            Exit code
        """
        self.window.show()
        return 0


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Total - combine numbers to reach the target"
    )
    parser.add_argument(
        "--level", "-l",
        type=int,
        default=None,
        help="Level to open (default: saved level)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args()


def main():
    """Initialize and run Total."""
    args = parse_args()

    settings = load_settings()
    configure_logging(args.debug or settings.get("debug_enabled", False))

    app = QApplication(sys.argv)

    application = Application(start_level=args.level, debug_mode=args.debug)
    application.setup()
    application.run()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
