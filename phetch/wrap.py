"""
Utilities for splitting long lines of text into screen-width rows.
"""

from __future__ import annotations

from typing import List, Optional


def wrap_line(line: str, width: int) -> List[str]:
    """
    Split a line into rows of at most `width` characters, preferring to
    break after whitespace. An empty line stays a single empty row.
    """
    width = max(1, width)
    if len(line) <= width:
        return [line]

    rows: List[str] = []
    idx = 0
    length = len(line)

    while idx < length:
        window = line[idx:idx + width]
        if idx + len(window) >= length:
            rows.append(window)
            break
        split_idx = _find_space_split(window)
        if split_idx is None or split_idx < width // 3:
            split_idx = len(window)
        rows.append(window[:split_idx].rstrip(" "))
        idx += split_idx
        # don't start a row with the space we broke on
        while idx < length - 1 and line[idx] == " ":
            idx += 1

    return rows


def wrap_lines(lines: List[str], width: int) -> List[str]:
    out: List[str] = []
    for line in lines:
        out.extend(wrap_line(line, width))
    return out


def _find_space_split(window: str) -> Optional[int]:
    for pos in range(len(window) - 1, 0, -1):
        if window[pos] == " ":
            return pos + 1
    return None


__all__ = ["wrap_line", "wrap_lines"]
