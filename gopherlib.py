#!/usr/bin/env python3
# gopherlib.py
import enum
import logging
import os
import re
import socket
import ssl
import struct
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_PORT = 70
SOCKET_TIMEOUT = 15
RECV_SIZE = 4096
DEFAULT_TOR_PROXY = ("127.0.0.1", 9050)

RE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class GopherError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(GopherError):
    pass


class ItemType(enum.Enum):
    TEXT = "0"
    MENU = "1"
    CSO_ENTITY = "2"
    ERROR = "3"
    BINHEX = "4"
    DOS_FILE = "5"
    UUENCODED = "6"
    SEARCH = "7"
    TELNET = "8"
    BINARY = "9"
    MIRROR = "+"
    GIF = "g"
    TELNET3270 = "T"
    HTML = "h"
    IMAGE = "I"
    PNG = "p"
    INFO = "i"
    SOUND = "s"
    DOCUMENT = "d"

    @classmethod
    def from_char(cls, c: str) -> Optional["ItemType"]:
        try:
            return cls(c)
        except ValueError:
            return None

    def to_char(self) -> str:
        return self.value

    def is_info(self) -> bool:
        return self is ItemType.INFO

    def is_html(self) -> bool:
        return self is ItemType.HTML

    def is_telnet(self) -> bool:
        return self is ItemType.TELNET

    def is_download(self) -> bool:
        return self in _DOWNLOADS

    def is_link(self) -> bool:
        return self in _LINKS or self.is_download()

    def is_supported(self) -> bool:
        return self not in _UNSUPPORTED

    def __str__(self) -> str:
        return self.value


_DOWNLOADS = frozenset({
    ItemType.BINHEX, ItemType.DOS_FILE, ItemType.UUENCODED, ItemType.BINARY,
    ItemType.GIF, ItemType.IMAGE, ItemType.PNG, ItemType.SOUND, ItemType.DOCUMENT,
})
_LINKS = frozenset({ItemType.MENU, ItemType.SEARCH, ItemType.TELNET, ItemType.HTML})
_UNSUPPORTED = frozenset({ItemType.CSO_ENTITY, ItemType.MIRROR, ItemType.TELNET3270})


class Security(enum.Enum):
    PLAIN = "plain"
    TLS = "tls"
    TOR = "tor"


@dataclass
class Url:
    host: str
    port: int = DEFAULT_PORT
    type: ItemType = ItemType.MENU
    selector: str = ""

    def __str__(self) -> str:
        return format_url(self)


def _parse_port(port_str: str) -> int:
    try:
        port = int(port_str)
    except ValueError:
        return DEFAULT_PORT
    if 0 < port < 65536:
        return port
    return DEFAULT_PORT


def _split_host_port(host_port: str) -> Tuple[str, int]:
    if host_port.startswith("["):
        # [ipv6]:port
        end = host_port.find("]")
        if end != -1:
            host = host_port[1:end]
            rest = host_port[end + 1:]
            if rest.startswith(":"):
                return host, _parse_port(rest[1:])
            return host, DEFAULT_PORT
    if host_port.count(":") == 1:
        host, port_str = host_port.split(":", 1)
        return host, _parse_port(port_str)
    return host_port, DEFAULT_PORT


def parse_url(url: str) -> Url:
    """Best-effort parse of a Gopher, telnet, or foreign URL. Never fails."""
    url = url.strip()
    lowered = url.lower()

    if lowered.startswith("telnet://"):
        host_port = url[len("telnet://"):].split("/", 1)[0]
        host, port = _split_host_port(host_port)
        if ":" not in host_port:
            port = 23
        return Url(host=host, port=port, type=ItemType.TELNET, selector="")

    if lowered.startswith("gopher://"):
        body = url[len("gopher://"):]
    elif "://" in url:
        # foreign scheme, treated like an h/URL: line
        return Url(host="", port=DEFAULT_PORT, type=ItemType.HTML, selector="URL:" + url)
    else:
        body = url

    host_port, *rest = body.split("/", 1)
    host, port = _split_host_port(host_port)
    path = rest[0] if rest else ""

    if not path:
        return Url(host=host, port=port, type=ItemType.MENU, selector="")

    typ = ItemType.from_char(path[0])
    if typ is None:
        return Url(host=host, port=port, type=ItemType.MENU, selector="/" + path)
    return Url(host=host, port=port, type=typ, selector=path[1:])


def format_url(url: Url) -> str:
    if url.type is ItemType.TELNET:
        return f"telnet://{url.host}:{url.port}"
    if url.type is ItemType.HTML and url.selector.startswith("URL:"):
        return url.selector[4:]
    host = f"[{url.host}]" if ":" in url.host else url.host
    port = "" if url.port == DEFAULT_PORT else f":{url.port}"
    return f"gopher://{host}{port}/{url.type.to_char()}{url.selector}"


def type_for_url(url: str) -> ItemType:
    return parse_url(url).type


@dataclass
class MenuLine:
    type: ItemType
    text: str
    selector: str = ""
    host: str = ""
    port: int = DEFAULT_PORT

    def url(self) -> str:
        if self.type is ItemType.HTML and self.selector.startswith("URL:"):
            return self.selector[4:]
        if self.type is ItemType.TELNET:
            return f"telnet://{self.host}:{self.port}"
        return format_url(Url(host=self.host, port=self.port, type=self.type, selector=self.selector))


def _info(text: str) -> MenuLine:
    return MenuLine(type=ItemType.INFO, text=text)


def parse_menu_line(line: str) -> MenuLine:
    if not line:
        return _info("")
    if "\t" not in line:
        # raw text, not a menu item
        return _info(line)

    typ = ItemType.from_char(line[0])
    fields = line[1:].split("\t")
    if typ is None:
        return _info(line.split("\t", 1)[0])

    display = fields[0]
    if typ is ItemType.INFO or len(fields) < 3:
        return _info(display)

    port = _parse_port(fields[3].strip()) if len(fields) > 3 and fields[3].strip() else DEFAULT_PORT
    return MenuLine(
        type=typ,
        text=display,
        selector=fields[1],
        host=fields[2].strip(),
        port=port,
    )


def parse_menu(raw: str) -> List[MenuLine]:
    out: List[MenuLine] = []
    lines = RE_LINE_BREAK.split(raw)
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line == ".":
            break
        out.append(parse_menu_line(line))
    return out


def menu_line_for(title: str, url: str) -> str:
    """Raw menu line linking to url, used by the history and bookmark files."""
    parsed = parse_url(url)
    title = title.replace("\t", " ")
    if parsed.type is ItemType.TELNET:
        return f"8{title}\t\t{parsed.host}\t{parsed.port}"
    return f"{parsed.type.to_char()}{title}\t{parsed.selector}\t{parsed.host or 'phetch'}\t{parsed.port}"


def request_selector(url: Url) -> str:
    if url.type is ItemType.SEARCH and "?" in url.selector:
        return url.selector.replace("?", "\t", 1)
    return url.selector


def _tor_proxy() -> Tuple[str, int]:
    explicit = os.getenv("TOR_PROXY")
    if explicit:
        host, port = _split_host_port(explicit)
        return host, port if ":" in explicit else DEFAULT_TOR_PROXY[1]
    return DEFAULT_TOR_PROXY


def _socks5_connect(sock: socket.socket, host: str, port: int) -> None:
    sock.sendall(b"\x05\x01\x00")
    reply = _recv_exact(sock, 2)
    if reply != b"\x05\x00":
        raise NetworkError("Tor proxy refused the SOCKS handshake")

    host_bytes = host.encode("idna")
    sock.sendall(b"\x05\x01\x00\x03" + bytes([len(host_bytes)]) + host_bytes + struct.pack(">H", port))
    head = _recv_exact(sock, 4)
    if head[1] != 0:
        raise NetworkError(f"Tor proxy could not reach {host}:{port} (code {head[1]})")
    addr_type = head[3]
    if addr_type == 1:
        _recv_exact(sock, 4 + 2)
    elif addr_type == 4:
        _recv_exact(sock, 16 + 2)
    else:
        _recv_exact(sock, _recv_exact(sock, 1)[0] + 2)


def _recv_exact(sock: socket.socket, n: int) -> bytes:
    chunks = []
    while n > 0:
        data = sock.recv(n)
        if not data:
            raise NetworkError("Connection closed during proxy negotiation")
        chunks.append(data)
        n -= len(data)
    return b"".join(chunks)


def _open_socket(host: str, port: int, tls: bool, tor: bool) -> Tuple[socket.socket, Security]:
    if tor:
        proxy = _tor_proxy()
        log.debug("connecting to %s:%s via tor proxy %s:%s", host, port, *proxy)
        sock = socket.create_connection(proxy, timeout=SOCKET_TIMEOUT)
        try:
            _socks5_connect(sock, host, port)
        except (GopherError, OSError, ValueError):
            sock.close()
            raise
        return sock, Security.TOR

    log.debug("connecting to %s:%s (tls=%s)", host, port, tls)
    sock = socket.create_connection((host, port), timeout=SOCKET_TIMEOUT)
    if not tls:
        return sock, Security.PLAIN

    context = ssl.create_default_context()
    try:
        return context.wrap_socket(sock, server_hostname=host), Security.TLS
    except (ssl.SSLError, OSError, ValueError):
        sock.close()
        raise


def request(host: str, port: int, selector: str, tls: bool = False, tor: bool = False) -> Tuple[socket.socket, Security]:
    """Connect and send the selector line. The caller reads and closes the socket."""
    if not host:
        raise NetworkError("No host in URL")
    try:
        sock, security = _open_socket(host, port, tls, tor)
        sock.sendall(f"{selector}\r\n".encode("utf-8", errors="replace"))
    except ssl.SSLError as e:
        raise NetworkError(f"TLS error connecting to {host}:{port}: {e.reason or e}")
    except socket.timeout:
        raise NetworkError(f"Timeout connecting to {host}:{port}")
    except socket.gaierror:
        raise NetworkError(f"Error getting address for {host}")
    except ConnectionRefusedError:
        raise NetworkError(f"Connection refused by {host}:{port}")
    except ValueError:
        # bad IDNA labels or a name too long for SOCKS
        raise NetworkError(f"Error getting address for {host}")
    except OSError as e:
        raise NetworkError(f"Error connecting to {host}:{port}: {e.strerror or e}")
    return sock, security


def _iter_chunks(sock: socket.socket):
    try:
        while True:
            data = sock.recv(RECV_SIZE)
            if not data:
                break
            yield data
    except socket.timeout:
        raise NetworkError("Timeout while reading response")
    except OSError as e:
        raise NetworkError(f"Error reading response: {e.strerror or e}")
    finally:
        sock.close()


def fetch(url: Url, tls: bool = False, tor: bool = False) -> Tuple[Security, bytes]:
    started = time.monotonic()
    sock, security = request(url.host, url.port, request_selector(url), tls, tor)
    body = b"".join(_iter_chunks(sock))
    log.debug("fetched %d bytes from %s in %.2fs", len(body), format_url(url), time.monotonic() - started)
    return security, body


def fetch_url(url: str, tls: bool = False, tor: bool = False) -> Tuple[Security, str]:
    security, body = fetch(parse_url(url), tls, tor)
    return security, body.decode("utf-8", errors="replace")


def download_filename(url: Url) -> str:
    name = url.selector.rstrip("/").rsplit("/", 1)[-1]
    name = re.sub(r"[^A-Za-z0-9._-]", "_", name).lstrip(".")
    return name or "download"


def _unique_path(directory: str, name: str) -> str:
    path = os.path.join(directory, name)
    n = 1
    while os.path.exists(path):
        path = os.path.join(directory, f"{name}.{n}")
        n += 1
    return path


def download_url(url: str, directory: str, tls: bool = False, tor: bool = False) -> Tuple[str, int]:
    """Stream url into a new file under directory. Returns (path, bytes written)."""
    parsed = parse_url(url)
    sock, _ = request(parsed.host, parsed.port, request_selector(parsed), tls, tor)
    path = _unique_path(directory, download_filename(parsed))
    written = 0
    created = False
    try:
        with open(path, "xb") as fh:
            created = True
            for chunk in _iter_chunks(sock):
                fh.write(chunk)
                written += len(chunk)
    except OSError as e:
        sock.close()
        if created:
            os.remove(path)
        raise GopherError(f"Error saving {path}: {e.strerror or e}")
    except GopherError:
        if created:
            os.remove(path)
        raise
    log.info("downloaded %s (%d bytes) to %s", url, written, path)
    return path, written


__all__ = [
    "DEFAULT_PORT",
    "GopherError",
    "NetworkError",
    "ItemType",
    "Security",
    "Url",
    "MenuLine",
    "parse_url",
    "format_url",
    "type_for_url",
    "parse_menu",
    "parse_menu_line",
    "menu_line_for",
    "request",
    "fetch",
    "fetch_url",
    "download_url",
]
