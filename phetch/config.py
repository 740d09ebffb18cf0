"""
User configuration: phetch.conf in the phetch dir, then command line flags.

phetch.conf is one `key value` pair per line:

    # phetch.conf
    start gopher://phetch/1/home
    tls no
    tor no
    wide no
    emoji no
    downloads ~/Downloads
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from . import phetchdir
from .errors import ConfigError

FILENAME = "phetch.conf"
DEFAULT_START = "gopher://phetch/1/home"

_TRUE = ("yes", "true", "1", "on")
_FALSE = ("no", "false", "0", "off")


def default_downloads() -> str:
    candidate = os.path.join(os.path.expanduser("~"), "Downloads")
    if os.path.isdir(candidate):
        return candidate
    return os.getcwd()


@dataclass
class Config:
    start: str = DEFAULT_START
    tls: bool = False
    tor: bool = False
    wide: bool = False
    emoji: bool = False
    downloads: str = field(default_factory=default_downloads)


def _parse_bool(value: str, lineno: int, key: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"line {lineno}: {key} must be yes or no, got {value!r}")


def parse(text: str) -> Config:
    config = Config()
    seen: Dict[str, int] = {}

    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition(" ")
        key, value = key.lower(), value.strip()

        if key in seen:
            raise ConfigError(f"line {lineno}: {key} already set on line {seen[key]}")
        seen[key] = lineno

        if key == "start":
            config.start = value or DEFAULT_START
        elif key in ("tls", "tor", "wide", "emoji"):
            setattr(config, key, _parse_bool(value, lineno, key))
        elif key == "downloads":
            config.downloads = os.path.expanduser(value) if value else default_downloads()
        else:
            raise ConfigError(f"line {lineno}: unknown key {key!r}")

    if config.tls and config.tor:
        raise ConfigError("tls and tor can't both be enabled")
    return config


def load(path: Optional[str] = None) -> Config:
    """Read phetch.conf (or `path`). A missing default file means defaults."""
    if path is None:
        path = phetchdir.file_path(FILENAME)
        if not os.path.isfile(path):
            return Config()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as e:
        raise ConfigError(f"can't read {path}: {e.strerror or e}")
    return parse(text)


__all__ = ["Config", "parse", "load", "DEFAULT_START"]
