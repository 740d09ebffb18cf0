"""
The stack of opened views and which one has focus.
"""

from __future__ import annotations

from typing import List, Optional

from .view import View


class ViewStack:
    def __init__(self):
        self.views: List[View] = []
        self.focused = 0

    def __len__(self) -> int:
        return len(self.views)

    def is_empty(self) -> bool:
        return not self.views

    def current(self) -> Optional[View]:
        if 0 <= self.focused < len(self.views):
            return self.views[self.focused]
        return None

    def push(self, view: View) -> None:
        """Open a view after the focused one, dropping any forward history."""
        if self.views and self.focused < len(self.views) - 1:
            del self.views[self.focused + 1:]
        self.views.append(view)
        self.focused = len(self.views) - 1

    def back(self) -> bool:
        if self.focused > 0:
            self.focused -= 1
            return True
        return False

    def forward(self) -> bool:
        if self.focused < len(self.views) - 1:
            self.focused += 1
            return True
        return False


__all__ = ["ViewStack"]
