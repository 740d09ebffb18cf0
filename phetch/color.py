"""
ANSI colors used when rendering views and the status line.
"""

from __future__ import annotations

from gopherlib import ItemType

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
UNDERLINE = "\x1b[4m"

BLACK = "\x1b[30m"
RED = "\x1b[91m"
GREEN = "\x1b[92m"
YELLOW = "\x1b[93m"
BLUE = "\x1b[94m"
MAGENTA = "\x1b[95m"
CYAN = "\x1b[96m"
WHITE = "\x1b[97m"
GREY = "\x1b[90m"

GREEN_BG = "\x1b[42m"
MAGENTA_BG = "\x1b[45m"

_TYPE_COLORS = {
    ItemType.TEXT: CYAN,
    ItemType.MENU: BLUE,
    ItemType.ERROR: RED,
    ItemType.SEARCH: WHITE,
    ItemType.TELNET: GREY + UNDERLINE,
    ItemType.HTML: GREEN,
}


def for_type(typ: ItemType) -> str:
    if typ in _TYPE_COLORS:
        return _TYPE_COLORS[typ]
    if typ.is_download():
        return WHITE + UNDERLINE
    if not typ.is_supported():
        return RED + UNDERLINE
    return ""


def paint(text: str, *codes: str) -> str:
    return "".join(codes) + text + RESET
