"""
phetch: an interactive terminal Gopher client.
"""

import logging

from .action import Action, ActionList, Draw, Error, Keypress, NoOp, Open, Prompt, Redraw, Status
from .config import Config
from .constants import VERSION
from .menu import Menu
from .navigation import ViewStack
from .text import Text
from .ui import UI
from .view import View

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "VERSION",
    "Action",
    "ActionList",
    "Draw",
    "Error",
    "Keypress",
    "NoOp",
    "Open",
    "Prompt",
    "Redraw",
    "Status",
    "Config",
    "Menu",
    "Text",
    "View",
    "ViewStack",
    "UI",
]
