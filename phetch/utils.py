"""
Odds and ends that talk to the rest of the system.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import webbrowser
from typing import List

from .errors import SubprocessError

log = logging.getLogger(__name__)


def human_bytes(n: int) -> str:
    size = float(n)
    for unit in ("bytes", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            break
        size /= 1024
    if unit == "bytes":
        return f"{n} bytes"
    return f"{size:.1f}{unit}"


def open_external(url: str) -> None:
    log.info("opening external url %s", url)
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise SubprocessError(f"Error opening {url}: {e}")
    if not opened:
        raise SubprocessError(f"No program found to open {url}")


def _clipboard_command() -> List[str]:
    if sys.platform == "darwin":
        return ["pbcopy"]
    if shutil.which("wl-copy"):
        return ["wl-copy"]
    return ["xclip", "-sel", "clip"]


def copy_to_clipboard(text: str) -> None:
    cmd = _clipboard_command()
    log.debug("copying to clipboard with %s", cmd[0])
    try:
        subprocess.run(
            cmd,
            input=text.encode("utf-8"),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except FileNotFoundError:
        raise SubprocessError(f"Clipboard error: {cmd[0]} not found")
    except subprocess.CalledProcessError as e:
        raise SubprocessError(f"Clipboard error: {cmd[0]} exited with code {e.returncode}")
