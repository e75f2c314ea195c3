"""
Game Window Module for Total

Provides the PyQt5 game window: target, tile grid, operation buttons and
undo/clear/restart/hint actions. The window holds no game rules; it
forwards clicks as signals and redraws from a PuzzleSession.
"""

from typing import Dict

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QGridLayout, QHBoxLayout, QLabel,
    QPushButton, QMessageBox
)
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QFont

from src.puzzle import Operation, PuzzleSession, TileState

# Tile colors by highlight state
TILE_COLORS: Dict[TileState, str] = {
    TileState.AVAILABLE: "#ffffff",
    TileState.SELECTED_FIRST: "#90caf9",
    TileState.SELECTED_SECOND: "#ffcc80",
}
INVALID_COLOR = "#ef9a9a"
WINNING_COLOR = "#a5d6a7"

TILE_SIZE = 70


class GameWindow(QMainWindow):
    """
    Main game window.

    Emits player gestures as signals; the application feeds them to the
    session and calls render() whenever the session changes.
    """

    # Signals for player gestures
    tile_clicked = pyqtSignal(str)        # Emits tile id
    operation_clicked = pyqtSignal(str)   # Emits operation key ("+", "-", "*", "/")
    undo_requested = pyqtSignal()
    clear_requested = pyqtSignal()
    restart_requested = pyqtSignal()
    hint_requested = pyqtSignal()
    next_level_requested = pyqtSignal()
    shutdown_requested = pyqtSignal()

    def __init__(self):
        super().__init__()
        self._operation_buttons: Dict[Operation, QPushButton] = {}
        self._init_ui()

    def _init_ui(self):
        """Initialize the user interface components."""
        # Window configuration
        self.setWindowTitle("Total")
        self.setMinimumSize(360, 520)

        # Central widget and layout
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(20, 20, 20, 20)
        central_widget.setLayout(layout)

        # Level label
        self.level_label = QLabel("Level 1")
        self.level_label.setAlignment(Qt.AlignCenter)
        level_font = QFont()
        level_font.setPointSize(10)
        level_font.setBold(True)
        self.level_label.setFont(level_font)
        layout.addWidget(self.level_label)

        # Target number
        self.target_label = QLabel("--")
        self.target_label.setAlignment(Qt.AlignCenter)
        target_font = QFont()
        target_font.setPointSize(36)
        self.target_label.setFont(target_font)
        layout.addWidget(self.target_label)

        # Tile grid (rebuilt on every render)
        self.grid_widget = QWidget()
        self.grid_layout = QGridLayout()
        self.grid_layout.setSpacing(12)
        self.grid_widget.setLayout(self.grid_layout)
        layout.addWidget(self.grid_widget, 1, Qt.AlignCenter)

        # Operation buttons
        operations_layout = QHBoxLayout()
        op_font = QFont()
        op_font.setPointSize(16)
        for op in Operation:
            button = QPushButton(op.symbol)
            button.setFixedSize(56, 56)
            button.setFont(op_font)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, key=op.value: self.operation_clicked.emit(key))
            operations_layout.addWidget(button)
            self._operation_buttons[op] = button
        layout.addLayout(operations_layout)

        # Action buttons
        actions_layout = QHBoxLayout()
        self.undo_button = QPushButton("Undo")
        self.clear_button = QPushButton("Clear")
        self.restart_button = QPushButton("Restart")
        self.hint_button = QPushButton("Hint")
        self.undo_button.clicked.connect(self.undo_requested.emit)
        self.clear_button.clicked.connect(self.clear_requested.emit)
        self.restart_button.clicked.connect(self.restart_requested.emit)
        self.hint_button.clicked.connect(self.hint_requested.emit)
        for button in [self.undo_button, self.clear_button,
                       self.restart_button, self.hint_button]:
            button.setMinimumHeight(35)
            actions_layout.addWidget(button)
        layout.addLayout(actions_layout)

        # Status line (hints, errors)
        self.status_label = QLabel("")
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        self._apply_styles()

    def _apply_styles(self):
        """Apply clean, minimal styling to the window."""
        style = """
            QMainWindow {
                background-color: #ffffff;
            }
            QPushButton {
                background-color: #f5f5f5;
                color: #000000;
                border: 1px solid #cccccc;
                border-radius: 5px;
                padding: 6px;
            }
            QPushButton:checked {
                background-color: #000000;
                color: #ffffff;
            }
            QPushButton:disabled {
                background-color: #eeeeee;
                color: #aaaaaa;
            }
            QLabel {
                color: #333333;
            }
        """
        self.setStyleSheet(style)

    def render(self, session: PuzzleSession, level: int):
        """
        Redraw everything from session state.

        Args:
            session: Session to draw
            level: Current level number
        """
        self.level_label.setText(f"Level {level}")
        self.target_label.setText(str(session.target))
        self._render_grid(session)

        selection = session.selection
        for op, button in self._operation_buttons.items():
            button.setChecked(selection.operation is op)
            button.setEnabled(selection.first is not None)

        self.undo_button.setEnabled(session.can_undo)
        self.clear_button.setEnabled(session.can_clear)

    def _render_grid(self, session: PuzzleSession):
        """Rebuild the tile grid, leaving empty slots blank."""
        while self.grid_layout.count():
            item = self.grid_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        grid = session.layout()
        tile_font = QFont()
        tile_font.setPointSize(18)

        for index, tile in enumerate(grid.grid):
            row, col = divmod(index, grid.cols)
            if tile is None:
                spacer = QWidget()
                spacer.setFixedSize(TILE_SIZE, TILE_SIZE)
                self.grid_layout.addWidget(spacer, row, col)
                continue

            state = session.tile_state(tile)
            if session.invalid_move and state is not TileState.AVAILABLE:
                color = INVALID_COLOR
            elif session.won and tile.value == session.target:
                color = WINNING_COLOR
            else:
                color = TILE_COLORS[state]

            button = QPushButton(str(tile.value))
            button.setFixedSize(TILE_SIZE, TILE_SIZE)
            button.setFont(tile_font)
            button.setStyleSheet(f"QPushButton {{ background-color: {color}; }}")
            button.clicked.connect(lambda _checked, tile_id=tile.id: self.tile_clicked.emit(tile_id))
            self.grid_layout.addWidget(button, row, col)

    def set_status(self, text: str):
        """
        Update the status line.

        Args:
            text: Text to display (hints start with "Try", errors with "Error")
        """
        self.status_label.setText(text)
        if text.lower().startswith("error"):
            self.status_label.setStyleSheet("color: #d32f2f;")
        else:
            self.status_label.setStyleSheet("color: #333333;")

    def show_level_complete(self, level: int, target: int):
        """Show the completion dialog and request the next level when dismissed."""
        QMessageBox.information(
            self,
            "Level Complete",
            f"Level {level} complete! You made {target}.",
        )
        self.next_level_requested.emit()

    def closeEvent(self, event):
        """
        Handle window close event.

        Emits shutdown_requested signal before closing to allow
        pending progress writes to finish.

        Args:
            event: QCloseEvent object
        """
        self.shutdown_requested.emit()
        event.accept()
