"""PyQt6 GUI frontend — fully self-contained.

Includes main menu with mode and size selection, gameplay, notification
dialogs, and the best-records page. No terminal interaction required.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from PyQt6.QtCore import QObject, Qt, QTimer
from PyQt6.QtGui import QFont, QKeyEvent
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from backend.config import RECORDS_FILE
from backend.engine.gameplay import (
    GameEvent,
    GameSession,
    LevelCleared,
    MoveLimitReached,
    TimeExpired,
)
from backend.models.mode import GRID_SIZES, GameMode
from backend.models.records import BestRecordStore
from backend.presentation import (
    MODE_LABELS,
    format_time,
    mode_description,
    moves_text,
    record_rows,
    size_label,
)
from backend.storage import JsonFileStorage

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_SUBTEXT = "#a6adc8"
_BLUE = "#89b4fa"
_GREEN = "#a6e3a1"
_GREEN_H = "#b8ecb4"
_PINK = "#f5c2e7"
_YELLOW = "#f9e2af"
_YELLOW_H = "#fbecc8"
_RED = "#f38ba8"
_RED_H = "#f5a0b8"
_LAVENDER = "#b4befe"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 14,
    bold: bool = True,
    min_w: int = 0,
    min_h: int = 44,
    radius: int = 8,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold if bold else QFont.Weight.Normal))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    _paint_btn(btn, bg=bg, hover=hover, fg=fg, radius=radius)
    return btn


def _paint_btn(
    btn: QPushButton, *, bg: str, hover: str, fg: str = _TEXT, radius: int = 8
) -> None:
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:{radius}px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )


# ---------------------------------------------------------------------------
# Scheduler backed by QTimer
# ---------------------------------------------------------------------------


class _QtTask:
    def __init__(self, parent: QObject, ms: int, callback: Callable[[], None], repeat: bool) -> None:
        self._cancelled = False
        self._timer = QTimer(parent)
        self._timer.setSingleShot(not repeat)
        self._timer.timeout.connect(callback)
        self._timer.start(ms)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._timer.stop()
        self._timer.deleteLater()

    @property
    def active(self) -> bool:
        return not self._cancelled and self._timer.isActive()


class _QtScheduler:
    """Runs session tasks on the Qt event loop, so on the GUI thread."""

    def __init__(self, parent: QObject) -> None:
        self._parent = parent

    def call_later(self, delay: float, callback: Callable[[], None]) -> _QtTask:
        return _QtTask(self._parent, int(delay * 1000), callback, repeat=False)

    def call_every(self, interval: float, callback: Callable[[], None]) -> _QtTask:
        return _QtTask(self._parent, int(interval * 1000), callback, repeat=True)


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _MenuPage(QWidget):
    """Main menu with mode and size selection, play, records, quit."""

    def __init__(self, default_size: int, default_mode: GameMode) -> None:
        super().__init__()
        self.setObjectName("page")
        self.selected_size = default_size if default_size in GRID_SIZES else GRID_SIZES[0]
        self.selected_mode = default_mode

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(12)
        root.setContentsMargins(30, 30, 30, 30)

        title = QLabel("LIGHTS  OUT")
        title.setFont(QFont("Helvetica", 34, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)

        root.addSpacerItem(QSpacerItem(0, 24))

        # mode buttons
        self._mode_btns: dict[GameMode, QPushButton] = {}
        hbox = QHBoxLayout()
        hbox.setAlignment(Qt.AlignmentFlag.AlignCenter)
        hbox.setSpacing(10)
        for mode in GameMode:
            btn = _styled_btn(MODE_LABELS[mode], min_w=110, min_h=42, font_size=12)
            btn.clicked.connect(lambda _, m=mode: self._pick_mode(m))
            hbox.addWidget(btn)
            self._mode_btns[mode] = btn
        root.addLayout(hbox)

        self._desc = QLabel()
        self._desc.setFont(QFont("Helvetica", 12))
        self._desc.setStyleSheet(f"color:{_SUBTEXT};")
        self._desc.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._desc.setWordWrap(True)
        root.addWidget(self._desc)

        root.addSpacerItem(QSpacerItem(0, 8))

        # size buttons
        self._size_btns: dict[int, QPushButton] = {}
        hbox = QHBoxLayout()
        hbox.setAlignment(Qt.AlignmentFlag.AlignCenter)
        hbox.setSpacing(10)
        for s in GRID_SIZES:
            btn = _styled_btn(size_label(s), min_w=72, min_h=46, font_size=13)
            btn.clicked.connect(lambda _, sz=s: self._pick_size(sz))
            hbox.addWidget(btn)
            self._size_btns[s] = btn
        root.addLayout(hbox)

        root.addSpacerItem(QSpacerItem(0, 18))

        self.play_btn = _styled_btn(
            "P L A Y", bg=_BLUE, hover=_LAVENDER, fg=_BASE,
            font_size=16, min_w=240, min_h=52,
        )
        root.addWidget(self.play_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addSpacerItem(QSpacerItem(0, 6))

        self.records_btn = _styled_btn("BEST RECORDS", min_w=240, font_size=13)
        root.addWidget(self.records_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addSpacerItem(QSpacerItem(0, 4))

        self.quit_btn = _styled_btn(
            "Q U I T", bg=_RED, hover=_RED_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.quit_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self._refresh_highlight()

    def _pick_mode(self, mode: GameMode) -> None:
        self.selected_mode = mode
        self._refresh_highlight()

    def _pick_size(self, s: int) -> None:
        self.selected_size = s
        self._refresh_highlight()

    def _refresh_highlight(self) -> None:
        for mode, btn in self._mode_btns.items():
            if mode is self.selected_mode:
                _paint_btn(btn, bg=_GREEN, hover=_GREEN_H, fg=_BASE)
            else:
                _paint_btn(btn, bg=_SURFACE0, hover=_SURFACE1)
        for s, btn in self._size_btns.items():
            if s == self.selected_size:
                _paint_btn(btn, bg=_GREEN, hover=_GREEN_H, fg=_BASE)
            else:
                _paint_btn(btn, bg=_SURFACE0, hover=_SURFACE1)
        self._desc.setText(mode_description(self.selected_mode, self.selected_size))


class _GamePage(QWidget):
    """The light grid with cell buttons and live stats."""

    def __init__(self, size: int, mode: GameMode, store: BestRecordStore) -> None:
        super().__init__()
        self.setObjectName("page")
        self._size = size
        self.session = GameSession(store, _QtScheduler(self), mode=mode, size=size)
        self.session.subscribe(self._on_event)

        cell_px = max(40, min(84, 400 // size))

        root = QVBoxLayout(self)
        root.setSpacing(6)
        root.setContentsMargins(16, 10, 16, 10)

        t = QLabel(f"{MODE_LABELS[mode]}  {size_label(size)}")
        t.setFont(QFont("Helvetica", 17, QFont.Weight.Bold))
        t.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(t)

        desc = QLabel(mode_description(mode, size))
        desc.setFont(QFont("Helvetica", 11))
        desc.setStyleSheet(f"color:{_SUBTEXT};")
        desc.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(desc)

        self._stats = QLabel()
        self._stats.setFont(QFont("Helvetica", 13))
        self._stats.setStyleSheet(f"color:{_PINK};")
        self._stats.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._stats)

        # board
        frame = QFrame()
        frame.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")
        self._grid = QGridLayout(frame)
        self._grid.setSpacing(6)
        self._grid.setContentsMargins(8, 8, 8, 8)
        root.addWidget(frame, alignment=Qt.AlignmentFlag.AlignCenter)

        self._btns: list[list[QPushButton]] = []
        for r in range(size):
            row: list[QPushButton] = []
            for c in range(size):
                b = QPushButton()
                b.setFixedSize(cell_px, cell_px)
                b.setFocusPolicy(Qt.FocusPolicy.NoFocus)
                b.clicked.connect(lambda _, rr=r, cc=c: self._click(rr, cc))
                self._grid.addWidget(b, r, c)
                row.append(b)
            self._btns.append(row)

        # actions
        hbox = QHBoxLayout()
        hbox.setAlignment(Qt.AlignmentFlag.AlignCenter)
        hbox.setSpacing(10)
        self.new_btn = _styled_btn(
            "NEW GAME", bg=_BLUE, hover=_LAVENDER, fg=_BASE, min_w=130, font_size=12
        )
        self.new_btn.clicked.connect(self.new_game)
        hbox.addWidget(self.new_btn)
        self.reset_btn = _styled_btn(
            "RESET", bg=_YELLOW, hover=_YELLOW_H, fg=_BASE, min_w=130, font_size=12
        )
        self.reset_btn.clicked.connect(self.reset)
        hbox.addWidget(self.reset_btn)
        root.addLayout(hbox)

        hint = QLabel("Click  toggle     N  new     R  reset     M  menu")
        hint.setFont(QFont("Helvetica", 11))
        hint.setStyleSheet(f"color:{_OVERLAY0};")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(hint)

        # repaint the clock between session ticks
        self._refresh = QTimer(self)
        self._refresh.timeout.connect(self._sync_stats)
        self._refresh.start(200)

        self._sync()

    # -- helpers --

    def _sync(self) -> None:
        board = self.session.board
        for r in range(self._size):
            for c in range(self._size):
                b = self._btns[r][c]
                if board.is_lit(r, c):
                    bg, hv = _YELLOW, _YELLOW_H
                else:
                    bg, hv = _SURFACE0, _SURFACE1
                b.setStyleSheet(
                    f"QPushButton{{background:{bg};border:none;border-radius:8px;}}"
                    f"QPushButton:hover{{background:{hv};}}"
                )
        self._sync_stats()

    def _sync_stats(self) -> None:
        s = self.session
        self._stats.setText(
            f"Level: {s.level}    Moves: {moves_text(s.moves, s.mode, s.size)}"
            f"    Time: {s.formatted_time}"
        )

    def _on_event(self, event: GameEvent) -> None:
        self._sync()
        if isinstance(event, LevelCleared):
            msg = (
                f"Level {event.level} cleared!\nMoves: {event.moves}\n"
                f"Time: {event.formatted_time}\nScore: {event.score}"
            )
            if event.new_best:
                msg += "\nNew best!"
            self._notify("Cleared!", msg)
        elif isinstance(event, TimeExpired):
            self._notify("Time's up!", f"Time's up!\nClears: {event.total_clears}")
        elif isinstance(event, MoveLimitReached):
            self._notify(
                "Move limit",
                f"This mode must be cleared within {event.limit} moves!",
            )

    def _notify(self, title: str, message: str) -> None:
        # Non-blocking so the session clock and auto-restart keep running.
        box = QMessageBox(QMessageBox.Icon.Information, title, message, parent=self)
        box.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        box.open()

    def _click(self, r: int, c: int) -> None:
        self.session.attempt_move(r, c)
        self._sync()

    def new_game(self) -> None:
        self.session.new_game()
        self._sync()

    def reset(self) -> None:
        self.session.reset_to_initial()
        self._sync()

    def close_session(self) -> None:
        self._refresh.stop()
        self.session.close()


class _RecordsPage(QWidget):
    """Best-record display with a back button."""

    def __init__(self, store: BestRecordStore) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setSpacing(8)
        root.setContentsMargins(24, 20, 24, 16)

        title = QLabel("BEST  RECORDS")
        title.setFont(QFont("Helvetica", 26, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)

        scroll_content = QWidget()
        scroll_content.setObjectName("page")
        vbox = QVBoxLayout(scroll_content)
        vbox.setSpacing(2)
        vbox.setContentsMargins(10, 10, 10, 10)

        rows = record_rows(store)
        if not rows:
            lbl = QLabel("No records yet.")
            lbl.setFont(QFont("Helvetica", 14))
            lbl.setStyleSheet(f"color:{_OVERLAY0};")
            lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
            vbox.addWidget(lbl)
        else:
            current = ""
            for mode_label, size, record in rows:
                if mode_label != current:
                    current = mode_label
                    h = QLabel(f"—  {mode_label}  —")
                    h.setFont(QFont("Helvetica", 14, QFont.Weight.Bold))
                    h.setStyleSheet(f"color:{_BLUE};")
                    h.setAlignment(Qt.AlignmentFlag.AlignCenter)
                    vbox.addWidget(h)
                row = QLabel(
                    f"  {size}   {record.moves} moves   "
                    f"{format_time(record.time)}   score {record.score}"
                )
                row.setFont(QFont("Helvetica", 12))
                row.setStyleSheet(f"color:{_SUBTEXT};")
                vbox.addWidget(row)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(scroll_content)
        scroll.setStyleSheet(
            f"QScrollArea {{ border:none; background:{_BASE}; }}"
        )
        root.addWidget(scroll)

        self.back_btn = _styled_btn("B A C K", min_w=200, font_size=13)
        root.addWidget(self.back_btn, alignment=Qt.AlignmentFlag.AlignCenter)


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_MENU = 0
_IDX_GAME = 1
_IDX_RECORDS = 2


class _MainWindow(QMainWindow):
    def __init__(self, default_size: int, default_mode: GameMode, data_dir: Path) -> None:
        super().__init__()
        self._store = BestRecordStore(JsonFileStorage(data_dir / RECORDS_FILE))

        self.setWindowTitle("Lights Out")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(480, 620)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._menu = _MenuPage(default_size, default_mode)
        self._menu.play_btn.clicked.connect(self._on_play)
        self._menu.records_btn.clicked.connect(self._show_records)
        self._menu.quit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._menu)  # 0

        # placeholders (replaced dynamically)
        self._game_page: _GamePage | None = None
        self._stack.addWidget(QWidget())  # 1
        self._stack.addWidget(QWidget())  # 2

        self._stack.setCurrentIndex(_IDX_MENU)

    # -- navigation ---

    def _replace(self, idx: int, page: QWidget) -> None:
        old = self._stack.widget(idx)
        self._stack.removeWidget(old)
        old.deleteLater()
        self._stack.insertWidget(idx, page)
        self._stack.setCurrentIndex(idx)

    def _show_menu(self) -> None:
        if self._game_page is not None:
            self._game_page.close_session()
            self._game_page = None
        self._stack.setCurrentIndex(_IDX_MENU)

    def _on_play(self) -> None:
        if self._game_page is not None:
            self._game_page.close_session()
        page = _GamePage(self._menu.selected_size, self._menu.selected_mode, self._store)
        self._game_page = page
        self._replace(_IDX_GAME, page)

    def _show_records(self) -> None:
        page = _RecordsPage(self._store)
        page.back_btn.clicked.connect(self._show_menu)
        self._replace(_IDX_RECORDS, page)

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_MENU:
            if key == Qt.Key.Key_Return:
                self._on_play()
            elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()

        elif idx == _IDX_GAME and self._game_page is not None:
            gp = self._game_page
            if key == Qt.Key.Key_N:
                gp.new_game()
            elif key == Qt.Key.Key_R:
                gp.reset()
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._show_menu()

        elif idx == _IDX_RECORDS:
            if key in (
                Qt.Key.Key_Escape,
                Qt.Key.Key_Backspace,
                Qt.Key.Key_M,
            ):
                self._show_menu()

        else:
            super().keyPressEvent(event)

    def closeEvent(self, ev) -> None:  # noqa: N802
        if self._game_page is not None:
            self._game_page.close_session()
        super().closeEvent(ev)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(size: int, mode: GameMode, data_dir: Path) -> None:
    """Launch the PyQt6 GUI (opens directly to the menu)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(size, mode, data_dir)
    window.show()
    qapp.exec()
