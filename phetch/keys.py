"""
Helpers for decoding raw terminal input into keys and classifying them.

A key is a plain string: a single printable character ("a", "5", " "),
or a name for everything else ("up", "pgdn", "enter", "ctrl-a", ...).
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional

ENTER = "enter"
ESC = "esc"
BACKSPACE = "backspace"
DELETE = "delete"
TAB = "tab"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"
PGUP = "pgup"
PGDN = "pgdn"
UNKNOWN = "unknown"

_CSI_FINAL = {
    "A": UP,
    "B": DOWN,
    "C": RIGHT,
    "D": LEFT,
    "H": HOME,
    "F": END,
}

_CSI_TILDE = {
    "1": HOME,
    "3": DELETE,
    "4": END,
    "5": PGUP,
    "6": PGDN,
    "7": HOME,
    "8": END,
}


def ctrl(letter: str) -> str:
    return "ctrl-" + letter


def _from_control_char(ch: str) -> str:
    if ch in ("\r", "\n"):
        return ENTER
    if ch in ("\x7f", "\x08"):
        return BACKSPACE
    if ch == "\t":
        return TAB
    code = ord(ch)
    if 1 <= code <= 26:
        return ctrl(chr(ord("a") + code - 1))
    return UNKNOWN


def read_key(read_char: Callable[[], str], pending: Callable[[], bool]) -> str:
    """
    Read one key. read_char returns one character ("" at EOF) and pending
    reports whether more input is immediately available, which is how a
    lone escape is told apart from the start of a sequence.
    """
    ch = read_char()
    if ch == "":
        raise EOFError
    if ch != "\x1b":
        if ch < " " or ch == "\x7f":
            return _from_control_char(ch)
        return ch

    if not pending():
        return ESC
    intro = read_char()
    if intro not in ("[", "O"):
        return ESC

    params = ""
    while True:
        c = read_char()
        if c == "":
            return ESC
        if c.isdigit() or c == ";":
            params += c
            continue
        if c == "~":
            return _CSI_TILDE.get(params.split(";", 1)[0], UNKNOWN)
        return _CSI_FINAL.get(c, UNKNOWN)


def iter_keys(text: str) -> Iterator[str]:
    """Decode a captured input string into keys."""
    pos = 0

    def read_char() -> str:
        nonlocal pos
        if pos >= len(text):
            return ""
        pos += 1
        return text[pos - 1]

    def pending() -> bool:
        return pos < len(text)

    while pending():
        yield read_key(read_char, pending)


def is_char(key: str) -> bool:
    return len(key) == 1


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def ctrl_letter(key: str) -> Optional[str]:
    if key.startswith("ctrl-") and len(key) == 6:
        return key[5]
    return None


def command_letter(key: str) -> Optional[str]:
    """The letter for a single-letter command, typed plain or with ctrl."""
    letter = ctrl_letter(key)
    if letter is not None:
        return letter
    if is_char(key):
        return key
    return None


__all__ = [
    "read_key",
    "iter_keys",
    "ctrl",
    "is_char",
    "is_printable",
    "ctrl_letter",
    "command_letter",
]
