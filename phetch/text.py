"""
Text view: a plain text document (or HTML, shown as-is) that scrolls.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from gopherlib import Security

from . import keys
from .action import Action, Keypress, NoOp, Redraw
from .constants import MAX_COLS, SCROLL_LINES
from .terminal import CLEAR_LINE
from .view import View
from .wrap import wrap_lines


def clean_lines(raw: str) -> List[str]:
    body = raw.replace("\r\n", "\n").replace("\r", "\n")
    body = body.replace("\t", "    ")
    body = "".join(
        c if ord(c) >= 32 or c == "\n" else f"\\x{ord(c):02x}"
        for c in body
    )
    lines = body.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    # gopher text ends with a lone "."
    if lines and lines[-1] == ".":
        lines.pop()
    return lines


class Text(View):
    def __init__(self, url: str, raw: str, security: Security = Security.PLAIN, wide: bool = False):
        super().__init__(url, raw, security, wide)
        self.lines = clean_lines(raw)
        self.scroll = 0
        self._wrapped: Optional[List[str]] = None
        self._wrapped_for: Optional[Tuple[int, bool]] = None

    # ---------- View ----------

    def resize(self, cols: int, rows: int) -> None:
        if cols != self.size[0]:
            self._wrapped = None
        super().resize(cols, rows)
        self._clamp()

    def set_wide(self, wide: bool) -> None:
        if wide != self.wide():
            self._wrapped = None
        super().set_wide(wide)
        self._clamp()

    def wrap_width(self) -> int:
        return min(MAX_COLS, self.cols())

    def wrapped(self) -> List[str]:
        """Lines as shown on screen, rebuilt only when the width changes."""
        key = (self.cols(), self.wide())
        if self._wrapped is None or self._wrapped_for != key:
            if self.wide():
                self._wrapped = list(self.lines)
            else:
                self._wrapped = wrap_lines(self.lines, self.wrap_width())
            self._wrapped_for = key
        return self._wrapped

    def render(self) -> str:
        rows = self.rows()
        indent = self.indent()
        visible = self.wrapped()[self.scroll:self.scroll + rows]
        out = [indent + line + CLEAR_LINE for line in visible]
        out.extend([CLEAR_LINE] * (rows - len(out)))
        return "\r\n".join(out) + "\r\n"

    def respond(self, key: str) -> Action:
        if key in (keys.UP, keys.ctrl("p")):
            return self.scroll_by(-1)
        if key in (keys.DOWN, keys.ctrl("n"), keys.ENTER):
            return self.scroll_by(1)
        if key in (keys.PGUP, "-"):
            return self.scroll_by(-SCROLL_LINES)
        if key in (keys.PGDN, " "):
            return self.scroll_by(SCROLL_LINES)
        if key == keys.HOME:
            return self.scroll_by(-self.scroll)
        if key == keys.END:
            return self.scroll_by(self.max_scroll() - self.scroll)
        if key == keys.TAB:
            return NoOp()
        return Keypress(key)

    # ---------- scrolling ----------

    def max_scroll(self) -> int:
        return max(0, len(self.wrapped()) - self.rows())

    def _clamp(self) -> None:
        self.scroll = max(0, min(self.scroll, self.max_scroll()))

    def scroll_by(self, delta: int) -> Action:
        old = self.scroll
        self.scroll += delta
        self._clamp()
        return NoOp() if self.scroll == old else Redraw()


__all__ = ["Text", "clean_lines"]
