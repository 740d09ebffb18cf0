"""
The phetch directory (~/.config/phetch by default) and the .gph files in it.
"""

from __future__ import annotations

import os
from typing import List, Optional

from .errors import PhetchError


def path() -> str:
    explicit = os.getenv("PHETCH_DIR")
    if explicit:
        return os.path.expanduser(explicit)
    base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "phetch")


def file_path(name: str) -> str:
    return os.path.join(path(), name)


def exists(name: Optional[str] = None) -> bool:
    if name is None:
        return os.path.isdir(path())
    return os.path.isfile(file_path(name))


def append(name: str, line: str) -> None:
    """Append a line to a file in the phetch dir. The dir must exist."""
    if not exists():
        raise PhetchError(f"{path()} doesn't exist. Create it to save {name}.")
    with open(file_path(name), "a", encoding="utf-8") as fh:
        fh.write(line.rstrip("\r\n") + "\n")


def load(name: str) -> List[str]:
    if not exists(name):
        return []
    try:
        with open(file_path(name), "r", encoding="utf-8", errors="replace") as fh:
            return [line.rstrip("\r\n") for line in fh if line.strip()]
    except OSError as e:
        raise PhetchError(f"Couldn't read {file_path(name)}: {e.strerror or e}")
