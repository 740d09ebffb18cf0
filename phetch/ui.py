"""
The UI drives the interactive client.

It owns the terminal and the stack of opened views. Each turn it draws
the focused view, reads one key, asks the view what the key means, and
carries out the Action it gets back: fetching a page on a worker thread,
moving through history, prompting, launching telnet, and so on. This is
the only place side effects happen; views just render strings.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from typing import Callable, Dict, Iterator, Optional

import gopherlib
from gopherlib import GopherError, ItemType, Security, parse_url, type_for_url

from . import bookmarks, color, fetch, help, history, keys, utils
from .action import (
    Action,
    ActionList,
    Draw,
    Error,
    Keypress,
    NoOp,
    Open,
    Prompt,
    Redraw,
    Status,
)
from .config import Config
from .errors import ActionError, FatalError, PhetchError, SubprocessError, UnsupportedResponse
from .menu import Menu
from .navigation import ViewStack
from .terminal import (
    CLEAR_CURRENT_LINE,
    HIDE_CURSOR,
    SHOW_CURSOR,
    Terminal,
    goto,
)
from .text import Text
from .view import View

log = logging.getLogger(__name__)


class UI:
    def __init__(self, config: Config, terminal: Optional[Terminal] = None, key_source: Optional[Iterator[str]] = None):
        self.views = ViewStack()
        self.dirty = True
        self.running = True
        # (cols, rows), refreshed on every full render
        self.size = (0, 0)
        self.status = ""
        self.config = config
        self.term = terminal or Terminal()
        self._keys = key_source

        self.commands: Dict[str, Callable[[], None]] = {
            "a": lambda: self.open("History", help.INTERNAL_PREFIX + "1/history"),
            "b": lambda: self.open("Bookmarks", help.INTERNAL_PREFIX + "1/bookmarks"),
            "g": self.cmd_go,
            "h": self.cmd_help,
            "q": self.cmd_quit,
            "r": self.cmd_raw,
            "s": self.cmd_bookmark,
            "u": self.cmd_edit_url,
            "w": self.cmd_wide,
            "y": self.cmd_copy_url,
        }

        history.listen()

    # ---------- main loop ----------

    def run(self) -> None:
        with self.term.session():
            while self.running:
                self.draw()
                self.update()

    def draw(self) -> None:
        if self.dirty:
            screen = self.render()
            self.term.write(goto(1, 1) + HIDE_CURSOR + screen + self.render_status())
            self.dirty = False
        else:
            self.term.write(self.render_status())

    def update(self) -> None:
        action = self.process_view_input()
        if not action.is_noop():
            self.status = ""
        try:
            self.process_action(action)
        except (GopherError, PhetchError) as e:
            log.debug("action failed: %s", e.message)
            self.set_status(color.RED + e.message + HIDE_CURSOR)

    def next_key(self) -> Optional[str]:
        if self._keys is None:
            self._keys = self.term.keys()
        try:
            return next(self._keys)
        except StopIteration:
            self.running = False
            return None

    def process_view_input(self) -> Action:
        key = self.next_key()
        if key is None:
            return NoOp()
        view = self.views.current()
        if view is None:
            return Keypress(key)
        return view.respond(key)

    # ---------- rendering ----------

    def cols(self) -> int:
        return self.size[0]

    def rows(self) -> int:
        return self.size[1]

    def render(self) -> str:
        cols, rows = self.term.size()
        self.size = (cols, rows)
        view = self.views.current()
        if view is None:
            raise FatalError("fatal: No focused View.")
        view.resize(cols, rows)
        return view.render()

    def set_status(self, status: str) -> None:
        self.status = status.replace("\n", "\\n").replace("\r", "\\r")

    def render_conn_status(self) -> str:
        view = self.views.current()
        if view is None:
            return ""
        if view.is_tls():
            badge = "🔐" if self.config.emoji else color.paint("TLS", color.BLACK, color.GREEN_BG)
        elif view.is_tor():
            badge = "🧅" if self.config.emoji else color.paint("TOR", color.BOLD, color.WHITE, color.MAGENTA_BG)
        else:
            return ""
        return goto(max(1, self.cols() - 3), self.rows()) + badge

    def render_status(self) -> str:
        return (
            HIDE_CURSOR
            + goto(1, self.rows())
            + CLEAR_CURRENT_LINE
            + self.status
            + self.render_conn_status()
            + color.RESET
        )

    # ---------- views ----------

    def add_view(self, view: View) -> None:
        self.dirty = True
        self.views.push(view)

    def open(self, title: str, url: str) -> None:
        """Open a URL: gopher, internal, telnet, or something else."""
        current = self.views.current()
        if current is not None and current.url() == url:
            return

        if url.startswith("telnet://"):
            return self.telnet(url)

        if "://" in url and not url.startswith("gopher://"):
            self.dirty = True
            if self.confirm(f"Open external URL? {url}"):
                utils.open_external(url)
            return

        if type_for_url(url).is_download():
            self.dirty = True
            if self.confirm(f"Download {url}?"):
                self.download(url)
            return

        self.add_view(self.load(title, url))

    def load(self, title: str, url: str) -> View:
        if help.is_internal(url):
            return self.load_internal(url)

        history.publish(title, url)

        tls, tor = self.config.tls, self.config.tor
        log.info("loading %s", url)

        def work():
            return gopherlib.fetch_url(url, tls, tor)

        # the screen isn't interactive yet for the very first page
        if self.views.is_empty():
            security, body = fetch.run(work)
        else:
            security, body = fetch.run_with_spinner(work, "", self.rows(), self.term.write)
        return self.view_for(url, body, security)

    def view_for(self, url: str, body: str, security: Security) -> View:
        typ = type_for_url(url)
        if typ in (ItemType.MENU, ItemType.SEARCH):
            return Menu(url, body, security, self.config.wide)
        if typ in (ItemType.TEXT, ItemType.HTML):
            return Text(url, body, security, self.config.wide)
        raise UnsupportedResponse(f"Unsupported Gopher Response: {typ.name}")

    def load_internal(self, url: str) -> View:
        source = help.lookup_url(url)
        if source is None:
            raise PhetchError(f"phetch URL not found: {url}")
        return Menu(url, source, Security.PLAIN, self.config.wide)

    def download(self, url: str) -> None:
        tls, tor = self.config.tls, self.config.tor
        directory = self.config.downloads

        def work():
            return gopherlib.download_url(url, directory, tls, tor)

        path, size = fetch.run_with_spinner(work, f"Downloading {url}", self.rows(), self.term.write)
        self.dirty = True
        self.set_status(f"Download complete! {utils.human_bytes(size)} saved to {path}")

    # ---------- modal input ----------

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question on the status line. Enter or y means yes."""
        self.term.write(f"{color.RESET}{goto(1, self.rows())}{CLEAR_CURRENT_LINE}{question} [Y/n]: {SHOW_CURSOR}")
        key = self.next_key()
        self.term.write(HIDE_CURSOR)
        return key in (keys.ENTER, "y", "Y")

    def prompt(self, prompt: str, value: str = "") -> Optional[str]:
        """Read a line of input on the status line. None if cancelled."""
        rows = self.rows()
        text = value
        self.term.write(f"{color.RESET}{goto(1, rows)}{CLEAR_CURRENT_LINE}{prompt}{text}{SHOW_CURSOR}")

        while True:
            key = self.next_key()
            if key is None:
                break
            if key == keys.ENTER:
                self.term.write(CLEAR_CURRENT_LINE + HIDE_CURSOR)
                return text
            if key in (keys.ESC, keys.ctrl("c")):
                self.term.write(CLEAR_CURRENT_LINE + HIDE_CURSOR)
                return None
            if key in (keys.BACKSPACE, keys.DELETE):
                text = text[:-1]
            elif keys.is_printable(key):
                text += key
            self.term.write(f"{goto(1, rows)}{CLEAR_CURRENT_LINE}{prompt}{text}")

        return text or None

    # ---------- subprocesses ----------

    def telnet(self, url: str) -> None:
        parsed = parse_url(url)
        log.info("telnet to %s:%s", parsed.host, parsed.port)
        self.dirty = True
        try:
            with self.term.suspended():
                subprocess.run(["telnet", parsed.host, str(parsed.port)])
        except OSError as e:
            raise SubprocessError(f"Error launching telnet: {e.strerror or e}")

    def suspend(self) -> None:
        """ctrl-z: stop the process and give the shell its screen back."""
        self.dirty = True
        with self.term.suspended():
            os.kill(os.getpid(), signal.SIGTSTP)

    # ---------- actions ----------

    def process_action(self, action: Action) -> None:
        """Carry out one Action. Errors propagate to update()."""
        if isinstance(action, ActionList):
            for member in action.actions:
                self.process_action(member)
        elif isinstance(action, NoOp):
            pass
        elif isinstance(action, Error):
            raise ActionError(action.message)
        elif isinstance(action, Redraw):
            self.dirty = True
        elif isinstance(action, Draw):
            self.term.write(action.raw)
        elif isinstance(action, Status):
            self.set_status(action.text)
        elif isinstance(action, Open):
            self.open(action.title, action.url)
        elif isinstance(action, Prompt):
            response = self.prompt(action.query, action.value)
            if response is not None:
                self.process_action(action.then(response))
        elif isinstance(action, Keypress):
            self.process_keypress(action.key)
        else:
            raise ActionError(f"Unknown action: {action!r}")

    def process_keypress(self, key: str) -> None:
        if key == keys.ctrl("c"):
            self.status = color.paint("(Use q to quit)", color.GREY)
        elif key == keys.ctrl("z"):
            self.suspend()
        elif key == keys.ESC:
            pass
        elif key in (keys.LEFT, keys.BACKSPACE):
            if self.views.back():
                self.dirty = True
        elif key == keys.RIGHT:
            if self.views.forward():
                self.dirty = True
        elif key == "?":
            self.cmd_help()
        else:
            letter = keys.command_letter(key)
            command = self.commands.get(letter) if letter else None
            if command is None:
                raise ActionError(f"Unknown keypress: {key}")
            command()

    # ---------- commands ----------

    def cmd_go(self) -> None:
        url = self.prompt("Go to URL: ")
        if url:
            if "://" not in url:
                url = "gopher://" + url
            self.open(url, url)

    def cmd_help(self) -> None:
        self.open("Help", help.INTERNAL_PREFIX + "1/help")

    def cmd_quit(self) -> None:
        self.running = False

    def cmd_raw(self) -> None:
        view = self.views.current()
        if view is not None:
            self.add_view(Text(view.url(), view.raw(), view.security(), wide=True))

    def cmd_bookmark(self) -> None:
        view = self.views.current()
        if view is not None:
            url = view.url()
            bookmarks.save(url, url)
            self.set_status(f"Saved bookmark: {url}")

    def cmd_edit_url(self) -> None:
        view = self.views.current()
        if view is not None:
            current = view.url()
            url = self.prompt("Current URL: ", current)
            if url and url != current:
                self.open(url, url)

    def cmd_wide(self) -> None:
        self.config.wide = not self.config.wide
        view = self.views.current()
        if view is not None:
            view.set_wide(not view.wide())
            self.dirty = True

    def cmd_copy_url(self) -> None:
        view = self.views.current()
        if view is not None:
            url = view.url()
            utils.copy_to_clipboard(url)
            self.set_status(f"Copied {url} to clipboard.")


__all__ = ["UI"]
