"""Rich terminal frontend — styled tables, colours, and panels.

Uses the ``rich`` library for output and the shared single-key input
handler. Includes a menu for mode and size selection, the game screen,
and the best-records panel.
"""

from __future__ import annotations

from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.config import RECORDS_FILE
from backend.engine.gameplay import (
    GameEvent,
    GameSession,
    GameStarted,
    LevelCleared,
    MoveLimitReached,
    TimeExpired,
)
from backend.engine.scheduler import MonotonicScheduler
from backend.models.board import Board
from backend.models.mode import GRID_SIZES, GameMode
from backend.models.records import BestRecordStore
from backend.presentation import (
    MODE_LABELS,
    cycle_size,
    format_time,
    mode_description,
    moves_text,
    record_rows,
    size_label,
)
from backend.storage import JsonFileStorage
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

_MODES = list(GameMode)
_POLL_SECONDS = 0.2


# -- board rendering ----------------------------------------------------------


def _render_board(board: Board, cursor: tuple[int, int]) -> Table:
    """Return a Rich Table representing the light grid."""
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(board.size):
        table.add_column(width=3, justify="center")

    for r, row in enumerate(board.lights):
        cells: list[str] = []
        for c, lit in enumerate(row):
            glyph = "●" if lit else "○"
            style = "bold yellow" if lit else "dim"
            if (r, c) == cursor:
                style += " reverse"
            cells.append(f"[{style}] {glyph} [/]")
        table.add_row(*cells)

    return table


def _status_for(pending: list[GameEvent]) -> str:
    """Status line for the events since the last redraw.

    A new board is announced only when nothing more important happened, so
    a time-out or a clear is not hidden by the board that follows it.
    """
    notable = [e for e in pending if not isinstance(e, GameStarted)]
    chosen = notable[-1] if notable else pending[-1]
    return _describe(chosen)


def _describe(event: GameEvent) -> str:
    """Status-line markup for a session event."""
    if isinstance(event, LevelCleared):
        best = "  [bold magenta]New best![/bold magenta]" if event.new_best else ""
        return (
            f"[bold green]Level {event.level} cleared![/bold green]  "
            f"Moves: {event.moves}  Time: {event.formatted_time}  "
            f"Score: {event.score}{best}"
        )
    if isinstance(event, TimeExpired):
        return f"[bold red]Time's up![/bold red]  Clears: {event.total_clears}"
    if isinstance(event, MoveLimitReached):
        return f"[yellow]Move limit reached: clear the board within {event.limit} moves![/yellow]"
    if isinstance(event, GameStarted):
        return f"[cyan]Level {event.level}[/cyan]: new board"
    return ""


# -- menu screen --------------------------------------------------------------


def _draw_menu(sel_mode: GameMode, sel_size: int) -> None:
    """Draw the main menu."""
    console.clear()

    modes = Text()
    for i, mode in enumerate(_MODES):
        if i:
            modes.append("  ")
        if mode is sel_mode:
            modes.append(f" {MODE_LABELS[mode]} ", style="bold green on #313244")
        else:
            modes.append(f" {MODE_LABELS[mode]} ", style="dim")

    sizes = Text()
    for i, s in enumerate(GRID_SIZES):
        if i:
            sizes.append("  ")
        if s == sel_size:
            sizes.append(f" {size_label(s)} ", style="bold green on #313244")
        else:
            sizes.append(f" {size_label(s)} ", style="dim")

    desc = Text(mode_description(sel_mode, sel_size), style="italic")
    nav = Text("  ↑ ↓  mode    ← →  size", style="dim")

    opts = Text()
    opts.append("  Enter", style="bold cyan")
    opts.append("  Play    ")
    opts.append("B", style="dim bold")
    opts.append("  Records    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(modes),
        Align.center(sizes),
        Align.center(desc),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]L I G H T S   O U T[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


# -- game screen --------------------------------------------------------------


def _draw_game(session: GameSession, cursor: tuple[int, int], status: str = "") -> None:
    console.clear()

    size = session.size
    board_table = _render_board(session.board, cursor)

    stats = Text()
    stats.append("  Level: ", style="dim")
    stats.append(str(session.level), style="bold yellow")
    stats.append("    Moves: ", style="dim")
    stats.append(moves_text(session.moves, session.mode, size), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(session.formatted_time, style="bold yellow")

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  cursor   ", style="dim")
    controls.append("Space", style="bold cyan")
    controls.append("  toggle   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  reset   ", style="dim")
    controls.append("N", style="bold cyan")
    controls.append("  new   ", style="dim")
    controls.append("M", style="bold cyan")
    controls.append("  mode   ", style="dim")
    controls.append("+/-", style="bold cyan")
    controls.append("  size   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(board_table),
        title=(
            f"[bold cyan]{MODE_LABELS[session.mode]}  "
            f"{size_label(size)}[/bold cyan]"
        ),
        subtitle=f"[dim]{mode_description(session.mode, size)}[/dim]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _records_panel(store: BestRecordStore) -> Panel:
    rows = record_rows(store)
    if not rows:
        body: Table | Text = Text("  No records yet.", style="dim")
    else:
        body = Table(box=rich.box.ROUNDED, border_style="dim", show_lines=False)
        body.add_column("Mode", style="cyan")
        body.add_column("Size", justify="center")
        body.add_column("Moves", justify="right", style="yellow")
        body.add_column("Time", justify="right", style="yellow")
        body.add_column("Score", justify="right", style="bold green")
        for mode_label, size, record in rows:
            body.add_row(
                mode_label,
                size,
                str(record.moves),
                format_time(record.time),
                str(record.score),
            )
    return Panel(
        Align.center(body),
        title="[bold]BEST  RECORDS[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )


def _draw_records(store: BestRecordStore) -> None:
    """Full-screen best-records view."""
    console.clear()
    console.print()
    console.print(Align.center(_records_panel(store)))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


# -- game loop ----------------------------------------------------------------


def _play_game(session: GameSession, scheduler: MonotonicScheduler) -> None:
    """Play until the player backs out; levels chain automatically."""
    cursor = (0, 0)
    status = ""
    pending: list[GameEvent] = []
    session.subscribe(pending.append)

    moves = {
        "up": (-1, 0),
        "down": (1, 0),
        "left": (0, -1),
        "right": (0, 1),
    }

    dirty = True
    try:
        while True:
            if pending:
                status = _status_for(pending)
                pending.clear()
                dirty = True
            if dirty:
                _draw_game(session, cursor, status)
                dirty = False

            key = get_key_timeout(_POLL_SECONDS)
            if scheduler.pump():
                dirty = True
            if key is None:
                continue

            dirty = True
            status = ""
            size = session.size
            if key in moves:
                dr, dc = moves[key]
                cursor = (
                    max(0, min(size - 1, cursor[0] + dr)),
                    max(0, min(size - 1, cursor[1] + dc)),
                )
            elif key == "toggle":
                session.attempt_move(*cursor)
            elif key == "reset":
                session.reset_to_initial()
            elif key == "new":
                session.new_game()
            elif key == "mode":
                next_mode = _MODES[(_MODES.index(session.mode) + 1) % len(_MODES)]
                session.new_game(mode=next_mode)
            elif key in ("bigger", "smaller"):
                session.new_game(size=cycle_size(session.size, 1 if key == "bigger" else -1))
                cursor = (min(cursor[0], session.size - 1), min(cursor[1], session.size - 1))
            elif key == "quit":
                return
    finally:
        session.close()


# -- menu loop ----------------------------------------------------------------


def _menu_loop(size: int, mode: GameMode, data_dir: Path) -> None:
    store = BestRecordStore(JsonFileStorage(data_dir / RECORDS_FILE))
    sel_mode = mode
    sel_size = size if size in GRID_SIZES else GRID_SIZES[0]

    while True:
        _draw_menu(sel_mode, sel_size)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_size = cycle_size(sel_size, -1)
        elif key == "right":
            sel_size = cycle_size(sel_size, 1)
        elif key == "up":
            sel_mode = _MODES[(_MODES.index(sel_mode) - 1) % len(_MODES)]
        elif key == "down":
            sel_mode = _MODES[(_MODES.index(sel_mode) + 1) % len(_MODES)]
        elif key in ("toggle", "1"):
            scheduler = MonotonicScheduler()
            session = GameSession(store, scheduler, mode=sel_mode, size=sel_size)
            _play_game(session, scheduler)
            sel_mode, sel_size = session.mode, session.size
        elif key == "records":
            _draw_records(store)


# -- public entry point -------------------------------------------------------


def run(size: int, mode: GameMode, data_dir: Path) -> None:
    """Launch the Rich CLI with interactive menu."""
    _menu_loop(size, mode, data_dir)
