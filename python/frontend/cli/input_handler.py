"""Single-keypress input for the terminal frontend.

Keys are turned into action strings ("up", "toggle", "new", ...) so the
game loop never sees raw bytes. Both readers take an optional timeout,
which lets the game loop keep its clock running between keypresses.
Works on macOS / Linux (tty+termios) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable

# Seconds to wait for the rest of an escape sequence after ESC.
_ESCAPE_WAIT = 0.1

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "W": "up",
    "s": "down",
    "S": "down",
    "a": "left",
    "A": "left",
    "d": "right",
    "D": "right",
    " ": "toggle",
    "\r": "toggle",
    "\n": "toggle",
    "q": "quit",
    "Q": "quit",
    "\x03": "quit",  # Ctrl-C
    "r": "reset",
    "R": "reset",
    "n": "new",
    "N": "new",
    "m": "mode",
    "M": "mode",
    "+": "bigger",
    "=": "bigger",
    "-": "smaller",
    "_": "smaller",
    "b": "records",
    "B": "records",
}

# Final byte of ANSI cursor sequences (ESC [ X).
_ANSI_ARROWS: dict[str, str] = {"A": "up", "B": "down", "C": "right", "D": "left"}

# Second byte after a Windows extended-key prefix.
_WINDOWS_ARROWS: dict[str, str] = {"H": "up", "P": "down", "M": "right", "K": "left"}


def _decode(first: str, read_next: Callable[[], str]) -> str:
    """Turn one keypress into an action string.

    *read_next* returns the next pending character of the same keypress, or
    "" when nothing follows.
    """
    if first == "\x1b":
        if read_next() != "[":
            return "quit"  # bare Escape
        return _ANSI_ARROWS.get(read_next(), "")
    if first in ("\x00", "\xe0"):
        return _WINDOWS_ARROWS.get(read_next(), "")
    return _KEY_MAP.get(first, first if first.isprintable() else "")


# -- platform readers ---------------------------------------------------------


def _read_unix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()

    def pending(wait: float | None) -> str:
        ready, _, _ = select.select([fd], [], [], wait)
        # os.read is unbuffered, so select() still sees the rest of an
        # escape sequence.
        return os.read(fd, 1).decode("utf-8", errors="ignore") if ready else ""

    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        first = pending(timeout)
        if not first:
            return None
        return _decode(first, lambda: pending(_ESCAPE_WAIT))
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    def getch() -> str:
        # Extended keys arrive as a prefix byte that is not valid UTF-8.
        return msvcrt.getch().decode("latin-1")

    if timeout is not None:
        end = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= end:
                return None
            time.sleep(0.02)
    first = getch()
    return _decode(first, lambda: getch() if msvcrt.kbhit() else "")


_read = _read_windows if os.name == "nt" else _read_unix


# -- public API ---------------------------------------------------------------


def get_key() -> str:
    """Block for one keypress and return its action string.

    Possible return values:
        "up", "down", "left", "right"  arrows or WASD
        "toggle"                       Space / Enter
        "quit"                         q / Ctrl-C / Escape
        "reset"                        r, back to the starting board
        "new"                          n, a fresh board
        "mode"                         m, next game mode
        "bigger", "smaller"            + / -, grid size
        "records"                      b, best records
        "<char>"                       any other printable character
        ""                             unrecognised key
    """
    key = _read(None)
    return key if key is not None else ""


def get_key_timeout(timeout: float) -> str | None:
    """Like :func:`get_key`, but return None if nothing is pressed in *timeout* seconds."""
    return _read(timeout)
