"""
Minimal file-backed Gopher server for browsing a local directory.

Directories are served as menus (their gophermap if present, otherwise a
generated listing), text files as type 0, everything else as raw bytes.
A query after a TAB on a directory selector filters its listing by name,
so every directory doubles as a type 7 search.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import socketserver
import threading
from typing import List, Optional

CRLF = "\r\n"
DEFAULT_MAP_NAMES = ("gophermap", ".gophermap")
TEXT_EXTENSIONS = (".txt", ".md", ".gph", ".conf", ".py", ".rs", ".c", ".h")

log = logging.getLogger(__name__)


class LocalGopherServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, host: str, port: int, root_dir: str):
        self.root_dir = os.path.abspath(root_dir)
        super().__init__((host, port), GopherRequestHandler)

    @property
    def host(self) -> str:
        return self.server_address[0]

    @property
    def port(self) -> int:
        return self.server_address[1]

    def url(self) -> str:
        host = "localhost" if self.host in ("0.0.0.0", "127.0.0.1") else self.host
        return f"gopher://{host}:{self.port}/1/"


def item_type_for(path: str) -> str:
    if os.path.isdir(path):
        return "1"
    if path.endswith(TEXT_EXTENSIONS):
        return "0"
    if path.endswith((".html", ".htm")):
        return "h"
    mime, _ = mimetypes.guess_type(path)
    if mime is None:
        return "9"
    if mime == "image/gif":
        return "g"
    if mime == "image/png":
        return "p"
    if mime.startswith("image/"):
        return "I"
    if mime.startswith("audio/"):
        return "s"
    if mime.startswith("text/"):
        return "0"
    if mime in ("application/pdf", "application/msword"):
        return "d"
    return "9"


class GopherRequestHandler(socketserver.BaseRequestHandler):
    def handle(self):
        selector = self._read_selector()
        log.debug("request %r", selector)
        response = self._dispatch(selector)
        try:
            self.request.sendall(response)
        except BrokenPipeError:
            pass

    def _read_selector(self) -> str:
        chunks = []
        self.request.settimeout(10)
        while True:
            data = self.request.recv(1024)
            if not data:
                break
            chunks.append(data)
            if b"\n" in data:
                break
        raw = b"".join(chunks).decode("utf-8", errors="replace")
        selector_line = raw.split("\n", 1)[0]
        return selector_line.rstrip("\r")

    def _dispatch(self, selector: str) -> bytes:
        server: LocalGopherServer = self.server  # type: ignore[assignment]
        path_part, _, query = selector.partition("\t")
        rel_path = path_part.strip("/")
        fs_path = os.path.normpath(os.path.join(server.root_dir, rel_path))

        if os.path.commonpath([fs_path, server.root_dir]) != server.root_dir:
            return self._serve_error(f"Selector not found: {path_part}")

        if os.path.isdir(fs_path):
            if query:
                return self._serve_listing(fs_path, rel_path, query)
            return self._serve_menu(fs_path, rel_path)

        if os.path.isfile(fs_path):
            if item_type_for(fs_path) == "0":
                return self._serve_text_file(fs_path)
            return self._serve_binary_file(fs_path)

        return self._serve_error(f"Selector not found: {path_part or '/'}")

    def _serve_menu(self, directory: str, rel_path: str) -> bytes:
        map_path = _find_gophermap(directory)
        if not map_path:
            return self._serve_listing(directory, rel_path)

        try:
            with open(map_path, "r", encoding="utf-8") as fh:
                lines = [line.rstrip("\r\n") for line in fh]
        except OSError as exc:
            return self._serve_error(f"Failed to read menu: {exc}")

        return _finish_menu(lines)

    def _serve_listing(self, directory: str, rel_path: str, query: str = "") -> bytes:
        server: LocalGopherServer = self.server  # type: ignore[assignment]
        lines: List[str] = []
        if query:
            lines.append(f"iResults for {query!r}\t\tfake\t0")
        for name in sorted(os.listdir(directory)):
            if name in DEFAULT_MAP_NAMES or name.startswith("."):
                continue
            if query and query.lower() not in name.lower():
                continue
            typ = item_type_for(os.path.join(directory, name))
            selector = "/" + "/".join(filter(None, [rel_path, name]))
            lines.append(f"{typ}{name}\t{selector}\t{server.host}\t{server.port}")
        return _finish_menu(lines)

    def _serve_text_file(self, file_path: str) -> bytes:
        try:
            with open(file_path, "r", encoding="utf-8", errors="replace") as fh:
                content = fh.read()
        except OSError as exc:
            return self._serve_error(f"Failed to read file: {exc}")

        body = content.replace("\r\n", "\n").replace("\r", "\n")
        body = body.rstrip("\n")
        payload = body.replace("\n", CRLF) + CRLF + "." + CRLF
        return payload.encode("utf-8")

    def _serve_binary_file(self, file_path: str) -> bytes:
        try:
            with open(file_path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            return self._serve_error(f"Failed to read file: {exc}")

    def _serve_error(self, message: str) -> bytes:
        return _finish_menu([f"3{message}\tfake\tlocalhost\t0"])


def _finish_menu(lines: List[str]) -> bytes:
    if not lines or lines[-1] != ".":
        lines = lines + ["."]
    return (CRLF.join(lines) + CRLF).encode("utf-8")


def _find_gophermap(directory: str) -> Optional[str]:
    for name in DEFAULT_MAP_NAMES:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate
    return None


def start_local_gopher(
    root_dir: str,
    host: str = "127.0.0.1",
    port: int = 7070,
) -> LocalGopherServer:
    server = LocalGopherServer(host, port, root_dir)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    log.info("serving %s on %s", server.root_dir, server.url())
    return server


__all__ = ["LocalGopherServer", "start_local_gopher", "item_type_for"]
