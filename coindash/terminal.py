"""Terminal session and keyboard input.

The dashboard owns the terminal while it runs: stdin in cbreak mode (keys
arrive unbuffered, no echo) and rich's alternate screen. Both are restored on
every exit path.
"""

import os
import select
import sys
import termios
import tty
from collections import deque
from contextlib import contextmanager
from typing import Deque, List, Optional

from rich.console import Console
from rich.live import Live

# Logical key names handed to the event loop
UP = "up"
DOWN = "down"
PAGE_UP = "page_up"
PAGE_DOWN = "page_down"
HOME = "home"
END = "end"
ESC = "esc"
CTRL_C = "ctrl_c"

_ESCAPES = {
    "[A": UP, "OA": UP,
    "[B": DOWN, "OB": DOWN,
    "[5~": PAGE_UP,
    "[6~": PAGE_DOWN,
    "[H": HOME, "OH": HOME, "[1~": HOME, "[7~": HOME,
    "[F": END, "OF": END, "[4~": END, "[8~": END,
}


class TerminalError(Exception):
    """Entering or leaving interactive terminal mode failed."""


def split_keys(data: str) -> List[str]:
    """Split a chunk read from stdin into logical keys.

    Printable characters pass through as themselves; recognised escape
    sequences become key names; unknown sequences are dropped.
    """
    keys: List[str] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x03":
            keys.append(CTRL_C)
            i += 1
        elif ch == "\x1b":
            seq = _match_escape(data, i + 1)
            if seq is None:
                if i + 1 < len(data) and data[i + 1] in "[O":
                    i = _skip_csi(data, i + 2)
                else:
                    keys.append(ESC)
                    i += 1
            else:
                keys.append(_ESCAPES[seq])
                i += 1 + len(seq)
        else:
            keys.append(ch)
            i += 1
    return keys


def _match_escape(data: str, start: int) -> Optional[str]:
    for seq in sorted(_ESCAPES, key=len, reverse=True):
        if data.startswith(seq, start):
            return seq
    return None


def _skip_csi(data: str, i: int) -> int:
    """Index just past an unrecognised CSI/SS3 sequence starting at ``i``."""
    while i < len(data) and not ("@" <= data[i] <= "~"):
        i += 1
    return i + 1


class KeyReader:
    """Non-blocking key reader over a cbreak-mode file descriptor."""

    def __init__(self, fd: int):
        self._fd = fd
        self._pending: Deque[str] = deque()

    def poll(self, timeout: float) -> Optional[str]:
        """Return the next key, waiting at most ``timeout`` seconds, or None."""
        if self._pending:
            return self._pending.popleft()
        ready, _, _ = select.select([self._fd], [], [], max(0.0, timeout))
        if not ready:
            return None
        data = os.read(self._fd, 64)
        if not data:
            # select keeps reporting a closed stdin as readable
            raise TerminalError("stdin closed")
        if data[-1:] == b"\x1b":
            # an escape sequence may arrive split across reads
            more, _, _ = select.select([self._fd], [], [], 0.02)
            if more:
                data += os.read(self._fd, 64)
        self._pending.extend(split_keys(data.decode("utf-8", "ignore")))
        return self._pending.popleft() if self._pending else None


@contextmanager
def terminal_session(console: Console, initial):
    """Enter cbreak mode and the alternate screen; yield (live, key_reader)."""
    try:
        fd = sys.stdin.fileno()
        saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
    except (termios.error, OSError, ValueError) as e:
        raise TerminalError(f"cannot set up terminal: {e}") from e

    try:
        with Live(initial, console=console, screen=True, auto_refresh=False) as live:
            yield live, KeyReader(fd)
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError) as e:
            raise TerminalError(f"cannot restore terminal: {e}") from e
