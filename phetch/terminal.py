"""
The terminal: raw mode, the alternate screen, and the escape sequences
the UI draws with.

The UI owns exactly one Terminal. Anything that hands the screen to
another program (telnet, ctrl-z) goes through `suspended()`, which puts
the screen back no matter how the other program exits.
"""

from __future__ import annotations

import codecs
import contextlib
import logging
import os
import select
import sys
from typing import Iterator, List, Optional, Tuple

from . import keys
from .errors import FatalError

log = logging.getLogger(__name__)

CLEAR_LINE = "\x1b[K"
CLEAR_CURRENT_LINE = "\x1b[2K"
CLEAR_SCREEN = "\x1b[2J"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
TO_ALTERNATE_SCREEN = "\x1b[?1049h"
TO_MAIN_SCREEN = "\x1b[?1049l"

ERR_RAW_MODE = "Fatal Error using Raw Mode."
ERR_SIZE = "Fatal Error getting terminal size."
ERR_STDOUT = "Fatal Error writing to STDOUT."


def goto(col: int, row: int) -> str:
    """Move the cursor. Both are 1-based, like the terminal."""
    return f"\x1b[{row};{col}H"


class Terminal:
    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._saved_attrs: Optional[List] = None
        self.interactive = False
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def size(self) -> Tuple[int, int]:
        try:
            cols, rows = os.get_terminal_size(self.stdout.fileno())
        except (OSError, ValueError) as e:
            raise FatalError(f"{ERR_SIZE} ({e})")
        return cols, rows

    def write(self, s: str) -> None:
        try:
            self.stdout.write(s)
            self.stdout.flush()
        except OSError as e:
            raise FatalError(f"{ERR_STDOUT} ({e})")

    def activate_raw_mode(self) -> None:
        try:
            import termios
            import tty
        except ImportError:
            raise FatalError(ERR_RAW_MODE + " (termios is unavailable)")

        fd = self.stdin.fileno()
        try:
            if self._saved_attrs is None:
                self._saved_attrs = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error as e:
            raise FatalError(f"{ERR_RAW_MODE} ({e})")

    def suspend_raw_mode(self) -> None:
        if self._saved_attrs is None:
            return
        import termios

        try:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
        except termios.error as e:
            raise FatalError(f"{ERR_RAW_MODE} ({e})")

    @contextlib.contextmanager
    def session(self) -> Iterator["Terminal"]:
        """Raw mode on the alternate screen for the life of the block."""
        self.activate_raw_mode()
        self.write(TO_ALTERNATE_SCREEN + HIDE_CURSOR)
        self.interactive = True
        try:
            yield self
        finally:
            self.interactive = False
            try:
                self.write(TO_MAIN_SCREEN + SHOW_CURSOR)
            finally:
                self.suspend_raw_mode()

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        """Hand the screen back to the shell for the life of the block."""
        self.write(TO_MAIN_SCREEN + SHOW_CURSOR)
        self.suspend_raw_mode()
        try:
            yield
        finally:
            self.activate_raw_mode()
            self.write(TO_ALTERNATE_SCREEN + HIDE_CURSOR)

    # stdin is read byte by byte from the fd so select() sees exactly
    # what hasn't been consumed yet.
    def _pending(self) -> bool:
        ready, _, _ = select.select([self.stdin.fileno()], [], [], 0.05)
        return bool(ready)

    def _read_char(self) -> str:
        fd = self.stdin.fileno()
        while True:
            data = os.read(fd, 1)
            if not data:
                return ""
            ch = self._decoder.decode(data)
            if ch:
                return ch

    def keys(self) -> Iterator[str]:
        while True:
            try:
                yield keys.read_key(self._read_char, self._pending)
            except EOFError:
                log.debug("stdin closed")
                return


__all__ = [
    "Terminal",
    "goto",
    "CLEAR_LINE",
    "CLEAR_CURRENT_LINE",
    "CLEAR_SCREEN",
    "HIDE_CURSOR",
    "SHOW_CURSOR",
    "TO_ALTERNATE_SCREEN",
    "TO_MAIN_SCREEN",
]
