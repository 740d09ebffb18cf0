"""
Actions are what a View hands back to the UI after handling a key.

A View never touches the network, the terminal, or the navigation stack
itself. It describes what should happen and the UI does it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List


class Action:
    def is_noop(self) -> bool:
        return False


@dataclass
class NoOp(Action):
    def is_noop(self) -> bool:
        return True


@dataclass
class Open(Action):
    title: str
    url: str


@dataclass
class Prompt(Action):
    """Ask for a line of input, then dispatch whatever `then` makes of it."""

    query: str
    then: Callable[[str], Action]
    value: str = ""


@dataclass
class Status(Action):
    text: str


@dataclass
class Draw(Action):
    raw: str


@dataclass
class Error(Action):
    message: str


@dataclass
class Keypress(Action):
    key: str


@dataclass
class Redraw(Action):
    pass


@dataclass
class ActionList(Action):
    actions: List[Action] = field(default_factory=list)


__all__ = [
    "Action",
    "NoOp",
    "Open",
    "Prompt",
    "Status",
    "Draw",
    "Error",
    "Keypress",
    "Redraw",
    "ActionList",
]
