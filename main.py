#!/usr/bin/env python3
# main.py
"""
phetch: a quick terminal client for Gopher.

  phetch                          start page
  phetch gopher://host/1/path     open a url
  phetch -r gopher://host/0/file  print the raw response and exit
  phetch -s ./site                serve ./site on localhost and browse it

ENV (optional):
  PHETCH_DIR  -> where phetch.conf, history.gph and bookmarks.gph live
  TOR_PROXY   -> SOCKS proxy for --tor (default: 127.0.0.1:9050)
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import gopherlib
from gopherlib import GopherError
from localgopher import start_local_gopher
from phetch import config as phetch_config
from phetch.constants import BUG_URL, VERSION
from phetch.errors import FatalError, PhetchError
from phetch.ui import UI

log = logging.getLogger("phetch.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phetch", description="quick lil gopher client")
    parser.add_argument("url", nargs="?", help="gopher url to open")
    parser.add_argument("-t", "--tls", dest="tls", action="store_true", default=None, help="connect with TLS")
    parser.add_argument("-T", "--no-tls", dest="tls", action="store_false", help="don't use TLS")
    parser.add_argument("-o", "--tor", dest="tor", action="store_true", default=None, help="connect through Tor")
    parser.add_argument("-O", "--no-tor", dest="tor", action="store_false", help="don't use Tor")
    parser.add_argument("-w", "--wide", action="store_true", default=None, help="start in wide mode")
    parser.add_argument("-e", "--emoji", action="store_true", default=None, help="use emoji status indicators")
    parser.add_argument("-c", "--config", metavar="FILE", help="use FILE instead of phetch.conf")
    parser.add_argument("-C", "--no-config", action="store_true", help="ignore phetch.conf")
    parser.add_argument("-r", "--raw", action="store_true", help="print the raw response for URL and exit")
    parser.add_argument("-s", "--serve", metavar="DIR", help="serve DIR over gopher on localhost and browse it")
    parser.add_argument("--port", type=int, default=7070, help="port for --serve (default: 7070)")
    parser.add_argument("--log", metavar="FILE", help="write a debug log to FILE")
    parser.add_argument("-v", "--version", action="version", version=f"phetch v{VERSION}")
    return parser


def load_config(args: argparse.Namespace) -> phetch_config.Config:
    if args.no_config:
        config = phetch_config.Config()
    else:
        config = phetch_config.load(args.config)

    for flag in ("tls", "tor", "wide", "emoji"):
        value = getattr(args, flag)
        if value is not None:
            setattr(config, flag, value)

    if config.tls and config.tor:
        raise PhetchError("can't use --tls and --tor at the same time")
    return config


def setup_logging(path: Optional[str]) -> None:
    if not path:
        return
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s %(message)s"))
    for name in ("phetch", "gopherlib", "localgopher"):
        logger = logging.getLogger(name)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)


def print_raw(url: str, config: phetch_config.Config) -> int:
    _, body = gopherlib.fetch_url(url, config.tls, config.tor)
    sys.stdout.write(body)
    sys.stdout.flush()
    return 0


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log)

    try:
        config = load_config(args)
    except PhetchError as e:
        sys.stderr.write(f"[ERROR] {e.message}\n")
        return 2

    url = args.url or config.start
    server = None
    if args.serve:
        if not os.path.isdir(args.serve):
            sys.stderr.write(f"[ERROR] Not a directory: {args.serve}\n")
            return 2
        try:
            server = start_local_gopher(args.serve, port=args.port)
        except OSError as e:
            sys.stderr.write(f"[ERROR] Failed to start local server: {e}\n")
            return 1
        url = args.url or server.url()

    try:
        if args.raw:
            return print_raw(url, config)

        if not sys.stdin.isatty() or not sys.stdout.isatty():
            sys.stderr.write("[ERROR] phetch needs a terminal. Use -r to print a url.\n")
            return 2

        ui = UI(config)
        ui.open(url, url)
        ui.run()
        return 0
    except (GopherError, PhetchError) as e:
        sys.stderr.write(f"[ERROR] {e.message}\n")
        return 1
    except FatalError as e:
        sys.stderr.write(f"{e.message}\nPlease file a bug: {BUG_URL}\n")
        return 1
    finally:
        if server:
            server.shutdown()
            server.server_close()


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
