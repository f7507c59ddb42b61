"""Pygame GUI frontend — fully self-contained.

Includes main menu with mode and size selection, gameplay, notification
dialog, and the best-records screen. No terminal interaction required.
"""

from __future__ import annotations

import enum
from pathlib import Path

import pygame

from backend.config import RECORDS_FILE
from backend.engine.gameplay import (
    GameEvent,
    GameSession,
    LevelCleared,
    MoveLimitReached,
    TimeExpired,
)
from backend.engine.scheduler import MonotonicScheduler
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
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 500, 680
CELL_GAP = 6
MARGIN = 40
BOARD_MAX = WIN_W - 2 * MARGIN  # max board width/height in px
BOARD_Y = 120


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    RECORDS = "records"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


def _notice_for(event: GameEvent) -> tuple[str, str] | None:
    """(title, message) for events that open the dialog."""
    if isinstance(event, LevelCleared):
        msg = f"Level {event.level} cleared!  Moves: {event.moves}  Time: {event.formatted_time}"
        if event.new_best:
            msg += "  New best!"
        return "Cleared!", msg
    if isinstance(event, TimeExpired):
        return "Time's up!", f"Clears: {event.total_clears}"
    if isinstance(event, MoveLimitReached):
        return "Move limit", f"This mode must be cleared within {event.limit} moves!"
    return None


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, default_size: int, default_mode: GameMode, data_dir: Path) -> None:
        self._store = BestRecordStore(JsonFileStorage(data_dir / RECORDS_FILE))
        self._sel_size = default_size if default_size in GRID_SIZES else GRID_SIZES[0]
        self._sel_mode = default_mode

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Lights Out")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._screen = _Screen.MENU
        self._scheduler = MonotonicScheduler()
        self._session: GameSession | None = None
        self._notice: tuple[str, str] | None = None

        # Pre-build buttons that don't move
        self._build_menu_btns()
        self._build_records_btns()
        self._build_game_btns()

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        bw, bh, gap = 130, 42, 10

        total_w = len(GameMode) * bw + (len(GameMode) - 1) * gap
        sx = _cx(total_w)
        self._mode_btns: dict[GameMode, _Btn] = {}
        for i, mode in enumerate(GameMode):
            self._mode_btns[mode] = _Btn(
                (sx + i * (bw + gap), 200, bw, bh), MODE_LABELS[mode], self._f_btn_sm
            )

        total_w = len(GRID_SIZES) * bw + (len(GRID_SIZES) - 1) * gap
        sx = _cx(total_w)
        self._size_btns: dict[int, _Btn] = {}
        for i, s in enumerate(GRID_SIZES):
            self._size_btns[s] = _Btn(
                (sx + i * (bw + gap), 300, bw, bh), size_label(s), self._f_btn_sm
            )

        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 420, bw_lg, 50),
            "P L A Y",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._records_btn = _Btn(
            (_cx(bw_lg), 484, bw_lg, 42), "BEST RECORDS", self._f_btn_sm
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), 540, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )

        self._menu_all: list[_Btn] = [
            *self._mode_btns.values(),
            *self._size_btns.values(),
            self._play_btn,
            self._records_btn,
            self._quit_btn,
        ]

    def _build_records_btns(self) -> None:
        self._records_back = _Btn(
            (_cx(180), WIN_H - 64, 180, 46), "B A C K", self._f_btn_sm
        )

    def _build_game_btns(self) -> None:
        """In-game action buttons (placed below the board) and dialog button."""
        bw, gap = 130, 12
        sx = _cx(2 * bw + gap)
        self._new_btn = _Btn(
            (sx, 0, bw, 38), "NEW GAME (N)", self._f_btn_sm,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_BASE,
        )
        self._reset_btn = _Btn(
            (sx + bw + gap, 0, bw, 38), "RESET (R)", self._f_btn_sm,
            bg=COL_YELLOW, hover=(255, 240, 200), fg=COL_BASE,
        )
        self._game_action_btns = [self._new_btn, self._reset_btn]
        self._dialog_ok = _Btn(
            (_cx(120), 0, 120, 38), "OK", self._f_btn_sm,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE,
        )

    # ── helpers ─────────────────────────────────────────────────────────────

    def _cell_layout(self) -> tuple[int, int, int, int]:
        """Return (cell_px, origin_x, origin_y, total_px) for current game."""
        sz = self._session.size  # type: ignore[union-attr]
        cell_px = (BOARD_MAX - (sz + 1) * CELL_GAP) // sz
        total = sz * cell_px + (sz + 1) * CELL_GAP
        ox = _cx(total) + CELL_GAP
        oy = BOARD_Y + CELL_GAP
        return cell_px, ox, oy, total

    def _cell_rect(self, r: int, c: int, cpx: int, ox: int, oy: int) -> pygame.Rect:
        return pygame.Rect(
            ox + c * (cpx + CELL_GAP),
            oy + r * (cpx + CELL_GAP),
            cpx,
            cpx,
        )

    def _on_event(self, event: GameEvent) -> None:
        notice = _notice_for(event)
        if notice is not None:
            self._notice = notice

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)

        _blit_center(
            self._surf,
            self._f_big.render("LIGHTS  OUT", True, COL_TEXT),
            80,
        )
        _blit_center(
            self._surf, self._f_body.render("Mode", True, COL_SUBTEXT), 170
        )
        _blit_center(
            self._surf, self._f_body.render("Grid size", True, COL_SUBTEXT), 270
        )

        for mode, btn in self._mode_btns.items():
            btn.bg = COL_GREEN if mode is self._sel_mode else COL_SURFACE0
            btn.fg = COL_BASE if mode is self._sel_mode else COL_TEXT
            btn.draw(self._surf)
        for s, btn in self._size_btns.items():
            btn.bg = COL_GREEN if s == self._sel_size else COL_SURFACE0
            btn.fg = COL_BASE if s == self._sel_size else COL_TEXT
            btn.draw(self._surf)

        _blit_center(
            self._surf,
            self._f_small.render(
                mode_description(self._sel_mode, self._sel_size), True, COL_OVERLAY0
            ),
            370,
        )

        self._play_btn.draw(self._surf)
        self._records_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session
        assert session is not None
        board = session.board
        sz = session.size
        cpx, ox, oy, total = self._cell_layout()

        _blit_center(
            self._surf,
            self._f_title.render(
                f"{MODE_LABELS[session.mode]}  {size_label(sz)}", True, COL_TEXT
            ),
            14,
        )
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Level: {session.level}    "
                f"Moves: {moves_text(session.moves, session.mode, sz)}    "
                f"Time: {session.formatted_time}",
                True,
                COL_PINK,
            ),
            48,
        )
        _blit_center(
            self._surf,
            self._f_small.render(mode_description(session.mode, sz), True, COL_OVERLAY0),
            80,
        )

        # board bg
        pygame.draw.rect(
            self._surf,
            COL_MANTLE,
            pygame.Rect(_cx(total), BOARD_Y, total, total),
            border_radius=10,
        )

        # cells
        for r in range(sz):
            for c in range(sz):
                rect = self._cell_rect(r, c, cpx, ox, oy)
                col = COL_YELLOW if board.is_lit(r, c) else COL_SURFACE0
                pygame.draw.rect(self._surf, col, rect, border_radius=6)

        # action buttons row
        btn_y = BOARD_Y + total + 14
        for btn in self._game_action_btns:
            btn.rect.y = btn_y
            btn.draw(self._surf)

        _blit_center(
            self._surf,
            self._f_small.render(
                "Click  toggle     N  new     R  reset     M  menu     Esc  quit",
                True,
                COL_OVERLAY0,
            ),
            btn_y + 52,
        )

        if self._notice is not None:
            self._draw_dialog(*self._notice)

    def _draw_dialog(self, title: str, message: str) -> None:
        shade = pygame.Surface((WIN_W, WIN_H), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 150))
        self._surf.blit(shade, (0, 0))

        box = pygame.Rect(MARGIN, 230, WIN_W - 2 * MARGIN, 180)
        pygame.draw.rect(self._surf, COL_SURFACE0, box, border_radius=12)
        _blit_center(self._surf, self._f_title.render(title, True, COL_GREEN), box.y + 20)
        _blit_center(self._surf, self._f_small.render(message, True, COL_TEXT), box.y + 70)
        self._dialog_ok.rect.y = box.bottom - 54
        self._dialog_ok.draw(self._surf)

    def _draw_records(self) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(
            self._surf,
            self._f_big.render("BEST  RECORDS", True, COL_TEXT),
            24,
        )

        rows = record_rows(self._store)
        y = 100
        if not rows:
            _blit_center(
                self._surf,
                self._f_body.render("No records yet.", True, COL_OVERLAY0),
                y + 30,
            )
        else:
            current = ""
            for mode_label, size, record in rows:
                if mode_label != current:
                    current = mode_label
                    _blit_center(
                        self._surf,
                        self._f_btn_sm.render(f"—  {mode_label}  —", True, COL_BLUE),
                        y,
                    )
                    y += 28
                line = (
                    f"{size}   {record.moves} moves   {format_time(record.time)}"
                    f"   score {record.score}"
                )
                self._surf.blit(self._f_body.render(line, True, COL_SUBTEXT), (80, y))
                y += 24
                if y > WIN_H - 90:
                    break

        self._records_back.draw(self._surf)

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for mode, b in self._mode_btns.items():
                if b.hit(ev.pos):
                    self._sel_mode = mode
                    return True
            for s, b in self._size_btns.items():
                if b.hit(ev.pos):
                    self._sel_size = s
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._records_btn.hit(ev.pos):
                self._screen = _Screen.RECORDS
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        session = self._session
        assert session is not None
        if self._notice is not None:
            # The dialog is modal; anything but dismissing it is ignored.
            if ev.type == pygame.MOUSEMOTION:
                self._dialog_ok.motion(ev.pos)
            elif (
                ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1
                and self._dialog_ok.hit(ev.pos)
            ) or (
                ev.type == pygame.KEYDOWN
                and ev.key in (pygame.K_RETURN, pygame.K_SPACE, pygame.K_ESCAPE)
            ):
                self._notice = None
            return True

        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_action_btns:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._new_btn.hit(ev.pos):
                session.new_game()
                return True
            if self._reset_btn.hit(ev.pos):
                session.reset_to_initial()
                return True
            cpx, ox, oy, _ = self._cell_layout()
            for r in range(session.size):
                for c in range(session.size):
                    if self._cell_rect(r, c, cpx, ox, oy).collidepoint(ev.pos):
                        session.attempt_move(r, c)
                        return True
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_n:
                session.new_game()
            elif ev.key == pygame.K_r:
                session.reset_to_initial()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._leave_game()
        return True

    def _ev_records(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._records_back.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._records_back.hit(ev.pos):
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (
                pygame.K_ESCAPE,
                pygame.K_BACKSPACE,
                pygame.K_m,
            ):
                self._screen = _Screen.MENU
        return True

    # ── game state ──────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        if self._session is not None:
            self._session.close()
        self._notice = None
        self._session = GameSession(
            self._store, self._scheduler, mode=self._sel_mode, size=self._sel_size
        )
        self._session.subscribe(self._on_event)
        self._screen = _Screen.PLAYING

    def _leave_game(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        self._notice = None
        self._screen = _Screen.MENU

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
            _Screen.RECORDS: self._ev_records,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
            _Screen.RECORDS: self._draw_records,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            self._scheduler.pump()

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(30)

        if self._session is not None:
            self._session.close()
        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(size: int, mode: GameMode, data_dir: Path) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    app = PygameApp(size, mode, data_dir)
    app.run_loop()
