"""
Errors raised while processing actions.

Everything except FatalError ends up on the status line.
"""

from __future__ import annotations


class PhetchError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ActionError(PhetchError):
    pass


class UnsupportedResponse(PhetchError):
    pass


class SubprocessError(PhetchError):
    pass


class ConfigError(PhetchError):
    pass


class FatalError(Exception):
    """The terminal can't be used anymore; the process has to exit."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


__all__ = [
    "PhetchError",
    "ActionError",
    "UnsupportedResponse",
    "SubprocessError",
    "ConfigError",
    "FatalError",
]
