#!/usr/bin/env python3
"""Lights Out.

Usage::

    python main.py                      # interactive menu
    python main.py -f rich -s 3         # Rich terminal, 3×3
    python main.py -f pygame -m perfect # Pygame GUI, Perfect mode
    python main.py --records            # view best records
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import GameSettings, load_settings, save_settings  # noqa: E402
from backend.models.mode import GRID_SIZES, GameMode  # noqa: E402

logger = logging.getLogger("lights_out")


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}


# -- helpers ------------------------------------------------------------------


def _print_records(settings: GameSettings) -> None:
    from backend.models.records import BestRecordStore
    from backend.presentation import format_time, record_rows
    from backend.storage import JsonFileStorage

    store = BestRecordStore(JsonFileStorage(settings.records_path))
    rows = record_rows(store)

    print("\n  === BEST RECORDS ===")
    if not rows:
        print("  No records yet.\n")
        return
    current = ""
    for mode_label, size, record in rows:
        if mode_label != current:
            current = mode_label
            print(f"\n  --- {mode_label} ---")
        print(
            f"  {size:>5}  {record.moves:>4} moves  {format_time(record.time)}"
            f"  score {record.score:>5}  ({record.date})"
        )
    print()


def _ask_size(default: int) -> int:
    choices = "/".join(str(s) for s in GRID_SIZES)
    raw = input(f"  Grid size ({choices}, default {default}): ").strip() or str(default)
    try:
        size = int(raw)
        if size not in GRID_SIZES:
            raise ValueError
    except ValueError:
        print(f"  Invalid size, using {default}.")
        size = default
    return size


def _ask_mode(default: GameMode) -> GameMode:
    modes = list(GameMode)
    for i, mode in enumerate(modes, 1):
        print(f"    {i}.  {mode.value}")
    raw = input(f"  Mode (1-{len(modes)}, default {default.value}): ").strip()
    if not raw:
        return default
    try:
        return modes[int(raw) - 1]
    except (ValueError, IndexError):
        print(f"  Invalid mode, using {default.value}.")
        return default


def _menu_loop(settings: GameSettings) -> None:
    while True:
        print()
        print("  ====================================")
        print("           L I G H T S   O U T       ")
        print("  ====================================")
        print()
        print("  1.  Play  (Rich Terminal)")
        print("  2.  Play  (Pygame GUI)")
        print("  3.  Play  (PyQt GUI)")
        print("  4.  View Best Records")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        if choice in ("1", "2", "3"):
            frontend = {"1": Frontend.rich, "2": Frontend.pygame, "3": Frontend.pyqt}[choice]
            settings.mode = _ask_mode(settings.mode)
            settings.size = _ask_size(settings.size)
            try:
                save_settings(settings)
            except OSError as exc:
                logger.warning("Could not save settings: %s", exc)
            mod = importlib.import_module(_RUNNERS[frontend])
            mod.run(size=settings.size, mode=settings.mode, data_dir=settings.data_dir)

        elif choice == "4":
            _print_records(settings)

        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    size: Optional[int] = typer.Option(
        None, "-s", "--size",
        help="Grid size (3, 5 or 7).",
    ),
    mode: Optional[GameMode] = typer.Option(
        None, "-m", "--mode",
        help="Game mode.",
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir",
        help="Directory holding records and settings.",
    ),
    records: bool = typer.Option(
        False, "--records",
        help="Show best records and exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log debug output.",
    ),
) -> None:
    """Lights Out."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings(data_dir)
    if size is not None:
        if size not in GRID_SIZES:
            raise typer.BadParameter(
                f"must be one of {', '.join(map(str, GRID_SIZES))}", param_hint="--size"
            )
        settings.size = size
    if mode is not None:
        settings.mode = mode
    logger.debug("Data directory: %s", settings.data_dir)

    if records:
        _print_records(settings)
        return

    if frontend is None:
        _menu_loop(settings)
        return

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(size=settings.size, mode=settings.mode, data_dir=settings.data_dir)


if __name__ == "__main__":
    app()
