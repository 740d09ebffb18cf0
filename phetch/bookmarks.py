"""
Bookmarks, kept in bookmarks.gph in the phetch dir.
"""

from __future__ import annotations

import logging
from typing import List

from gopherlib import menu_line_for

from . import phetchdir
from .errors import PhetchError

log = logging.getLogger(__name__)

FILENAME = "bookmarks.gph"


def save(title: str, url: str) -> None:
    try:
        phetchdir.append(FILENAME, menu_line_for(title, url))
    except OSError as e:
        log.warning("bookmark save failed: %s", e)
        raise PhetchError(f"Couldn't save bookmark: {e.strerror or e}")


def as_raw_menu() -> str:
    out: List[str] = ["i** bookmarks **", "i"]
    lines = phetchdir.load(FILENAME)
    if lines:
        out.extend(lines)
    else:
        out.append("iNo bookmarks yet. Use ctrl-s to bookmark a page.")
    return "\r\n".join(out) + "\r\n"
