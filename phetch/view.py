"""
The View interface shared by every kind of page the UI can show.
"""

from __future__ import annotations

import abc
from typing import Tuple

from gopherlib import Security

from .action import Action
from .constants import MAX_COLS


class View(abc.ABC):
    """
    A loaded page. Menu and Text are the only kinds.

    Views render themselves to a string and turn keys into Actions, but
    never do I/O or reach back into the UI.
    """

    def __init__(self, url: str, raw: str, security: Security = Security.PLAIN, wide: bool = False):
        self._url = url
        self._raw = raw
        self._security = security
        self._wide = wide
        self.size: Tuple[int, int] = (MAX_COLS + 3, 24)

    @abc.abstractmethod
    def respond(self, key: str) -> Action:
        ...

    @abc.abstractmethod
    def render(self) -> str:
        ...

    def url(self) -> str:
        return self._url

    def raw(self) -> str:
        return self._raw

    def is_tls(self) -> bool:
        return self._security is Security.TLS

    def is_tor(self) -> bool:
        return self._security is Security.TOR

    def security(self) -> Security:
        return self._security

    def wide(self) -> bool:
        return self._wide

    def set_wide(self, wide: bool) -> None:
        self._wide = wide

    def resize(self, cols: int, rows: int) -> None:
        self.size = (cols, rows)

    def cols(self) -> int:
        return self.size[0]

    def rows(self) -> int:
        """Rows available for content; the last one belongs to the status line."""
        return max(1, self.size[1] - 1)

    def indent(self) -> str:
        cols = self.cols()
        if self._wide or cols <= MAX_COLS:
            return ""
        return " " * ((cols - MAX_COLS) // 2)


__all__ = ["View"]
