import contextlib
from typing import Iterable, List, Optional

from phetch.config import Config
from phetch.ui import UI


class FakeTerminal:
    def __init__(self, cols: int = 80, rows: int = 24) -> None:
        self.cols = cols
        self.rows = rows
        self.output: List[str] = []
        self.interactive = False
        self.sessions = 0
        self.suspends = 0
        self.resumes = 0

    def size(self):
        return self.cols, self.rows

    def write(self, s: str) -> None:
        self.output.append(s)

    def text(self) -> str:
        return "".join(self.output)

    @contextlib.contextmanager
    def session(self):
        self.sessions += 1
        self.interactive = True
        try:
            yield self
        finally:
            self.interactive = False

    @contextlib.contextmanager
    def suspended(self):
        self.suspends += 1
        try:
            yield
        finally:
            self.resumes += 1

    def keys(self):
        return iter(())


def make_ui(keys: Optional[Iterable[str]] = None, downloads: str = ".") -> UI:
    ui = UI(Config(downloads=downloads), terminal=FakeTerminal(), key_source=iter(list(keys or [])))
    ui.size = (80, 24)
    return ui


def menu_source(*titles: str, host: str = "example.org") -> str:
    return "".join(f"1{title}\t/{title.lower()}\t{host}\t70\r\n" for title in titles) + ".\r\n"
