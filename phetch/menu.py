"""
Menu view: a Gopher menu with a selectable cursor over its links.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from gopherlib import ItemType, MenuLine, Security, parse_menu

from . import color, keys
from .action import Action, ActionList, Draw, Keypress, NoOp, Open, Prompt, Redraw
from .constants import SCROLL_LINES
from .terminal import CLEAR_LINE, goto
from .view import View

# With more links than this a digit can't address every one, so it only
# moves the cursor.
MAX_DIRECT_OPEN = 9


class Menu(View):
    def __init__(self, url: str, raw: str, security: Security = Security.PLAIN, wide: bool = False):
        super().__init__(url, raw, security, wide)
        self.lines: List[MenuLine] = parse_menu(raw)
        # indices into self.lines of every line that isn't info
        self.links: List[int] = [i for i, line in enumerate(self.lines) if not line.type.is_info()]
        self._link_pos: Dict[int, int] = {line_idx: pos for pos, line_idx in enumerate(self.links)}
        self.link = 0
        self.scroll = 0
        self.input = ""

    # ---------- View ----------

    def resize(self, cols: int, rows: int) -> None:
        if (cols, rows) != self.size:
            super().resize(cols, rows)
            self._clamp_scroll()
            self._scroll_to_link()

    def render(self) -> str:
        rows = self.rows()
        out = [
            self._render_line(idx) + CLEAR_LINE
            for idx in range(self.scroll, min(len(self.lines), self.scroll + rows))
        ]
        out.extend([CLEAR_LINE] * (rows - len(out)))
        return "\r\n".join(out) + "\r\n"

    def respond(self, key: str) -> Action:
        if self.input and keys.is_printable(key):
            return self.action_search(key)

        if key == keys.BACKSPACE and self.input:
            self.input = self.input[:-1]
            return NoOp()
        if key == keys.ESC and self.input:
            self.input = ""
            return NoOp()

        self.input = ""
        if key == keys.ENTER:
            return self.action_open()
        if key in (keys.UP, keys.ctrl("p")):
            return self.action_up()
        if key in (keys.DOWN, keys.ctrl("n")):
            return self.action_down()
        if key in (keys.PGUP, "-"):
            return self.action_page(-SCROLL_LINES)
        if key in (keys.PGDN, " "):
            return self.action_page(SCROLL_LINES)
        if key == keys.HOME:
            return self.action_select(0)
        if key == keys.END:
            return self.action_select(len(self.links) - 1)
        if key.isdigit() and len(key) == 1:
            return self.action_number(int(key))
        if key == "?":
            return Keypress(key)
        if keys.is_printable(key):
            return self.action_search(key)
        if key == keys.TAB:
            return NoOp()
        return Keypress(key)

    # ---------- selection ----------

    def selected(self) -> Optional[MenuLine]:
        if not self.links:
            return None
        return self.lines[self.links[self.link]]

    def max_scroll(self) -> int:
        return max(0, len(self.lines) - self.rows())

    def _clamp_scroll(self) -> None:
        self.scroll = max(0, min(self.scroll, self.max_scroll()))

    def _scroll_to_link(self) -> None:
        """Smallest scroll change that puts the selected link on screen."""
        if not self.links:
            return
        line_idx = self.links[self.link]
        rows = self.rows()
        if line_idx < self.scroll:
            self.scroll = line_idx
        elif line_idx >= self.scroll + rows:
            self.scroll = line_idx - rows + 1

    def action_select(self, pos: int) -> Action:
        if not self.links:
            return NoOp()
        pos = max(0, min(pos, len(self.links) - 1))
        if pos == self.link:
            return NoOp()
        old, old_scroll = self.link, self.scroll
        self.link = pos
        self._scroll_to_link()
        if self.scroll == old_scroll:
            return self._draw_cursor_move(old, pos)
        return Redraw()

    def action_up(self) -> Action:
        if not self.links:
            return self._scroll_by(-1)
        if self.link == 0:
            # reveal info lines above the first link
            if self.scroll > 0 and self.links[0] < self.rows():
                self.scroll = 0
                return Redraw()
            return NoOp()
        return self.action_select(self.link - 1)

    def action_down(self) -> Action:
        if not self.links:
            return self._scroll_by(1)
        if self.link == len(self.links) - 1:
            if self.scroll < self.max_scroll() and self.links[-1] >= self.max_scroll():
                self.scroll = self.max_scroll()
                return Redraw()
            return NoOp()
        return self.action_select(self.link + 1)

    def action_page(self, delta: int) -> Action:
        if not self.links:
            return self._scroll_by(delta)
        return self.action_select(self.link + delta)

    def _scroll_by(self, delta: int) -> Action:
        old = self.scroll
        self.scroll += delta
        self._clamp_scroll()
        return NoOp() if self.scroll == old else Redraw()

    def action_number(self, n: int) -> Action:
        if n < 1 or n > len(self.links):
            return NoOp()
        if len(self.links) <= MAX_DIRECT_OPEN:
            self.link = n - 1
            self._scroll_to_link()
            # cursor moved, so repaint even if the open fails
            return ActionList([Redraw(), self.action_open()])
        return self.action_select(n - 1)

    def action_search(self, ch: str) -> Action:
        """
        Incremental search: find the next link after the cursor whose text
        contains everything typed so far, wrapping around to the top. A
        character that matches nothing is dropped.
        """
        if not self.links:
            return NoOp()
        query = (self.input + ch).lower()
        count = len(self.links)
        for step in range(1, count + 1):
            pos = (self.link + step) % count
            if query in self.lines[self.links[pos]].text.lower():
                self.input += ch
                self.link = pos
                self._scroll_to_link()
                return Redraw()
        return NoOp()

    def action_open(self) -> Action:
        line = self.selected()
        if line is None:
            return NoOp()
        url = line.url()
        if line.type is ItemType.SEARCH:
            title = line.text
            return Prompt(f"{title}> ", lambda query: Open(f"{title}: {query}", f"{url}?{query}"))
        return Open(line.text, url)

    # ---------- rendering ----------

    def _number_width(self) -> int:
        return len(str(len(self.links))) if self.links else 1

    def _render_line(self, idx: int) -> str:
        line = self.lines[idx]
        width = self._number_width()
        indent = self.indent()

        if line.type.is_info():
            prefix = indent + " " * (width + 3)
            return prefix + self._fit(line.text, len(prefix))

        pos = self._link_pos[idx]
        cursor = "*" if pos == self.link else " "
        prefix = f"{indent}{cursor}{pos + 1:>{width}}. "
        return prefix + color.paint(self._fit(line.text, len(prefix)), color.for_type(line.type))

    def _fit(self, text: str, used: int) -> str:
        if self.wide():
            return text
        return text[:max(0, self.cols() - used)]

    def _draw_cursor_move(self, old: int, new: int) -> Action:
        out = []
        for pos in (old, new):
            row = self.links[pos] - self.scroll + 1
            out.append(goto(1, row) + self._render_line(self.links[pos]) + CLEAR_LINE)
        return Draw("".join(out))


__all__ = ["Menu", "MAX_DIRECT_OPEN"]
