"""
Visited-page history, kept in history.gph only if the user created it.
"""

from __future__ import annotations

import logging
import threading
from typing import List

from pubsub import pub

from gopherlib import menu_line_for

from . import phetchdir
from .constants import HISTORY_TOPIC

log = logging.getLogger(__name__)

FILENAME = "history.gph"
MAX_ENTRIES = 500


def save(title: str, url: str) -> None:
    if not phetchdir.exists(FILENAME):
        return
    phetchdir.append(FILENAME, menu_line_for(title, url))


def _save_quietly(title: str, url: str) -> None:
    try:
        save(title, url)
    except Exception as e:
        log.warning("history save failed for %s: %s", url, e)


def on_visit(title: str, url: str) -> None:
    """Listener for HISTORY_TOPIC. Writes on a background thread and forgets."""
    threading.Thread(target=_save_quietly, args=(title, url), name="phetch-history", daemon=True).start()


def listen() -> None:
    pub.subscribe(on_visit, HISTORY_TOPIC)


def publish(title: str, url: str) -> None:
    pub.sendMessage(HISTORY_TOPIC, title=title, url=url)


def as_raw_menu() -> str:
    out: List[str] = ["i** history **", "i"]
    lines = phetchdir.load(FILENAME)
    if not phetchdir.exists(FILENAME):
        out.append(f"iCreate {phetchdir.file_path(FILENAME)} to save history.")
        return "\r\n".join(out) + "\r\n"
    if not lines:
        out.append("iNo history yet.")
    seen = set()
    for line in reversed(lines):
        if line in seen:
            continue
        seen.add(line)
        out.append(line)
        if len(seen) >= MAX_ENTRIES:
            break
    return "\r\n".join(out) + "\r\n"
