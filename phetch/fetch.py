"""
Run a blocking request on a worker thread while a spinner animates the
status line.

The caller waits on the worker, never on the spinner: the worker hands
back its result (or exception) through a one-slot queue, and only then is
the spinner told to stop.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Tuple, TypeVar

from . import color
from .constants import SPINNER_INTERVAL
from .errors import FatalError
from .terminal import CLEAR_LINE, HIDE_CURSOR, goto

log = logging.getLogger(__name__)

T = TypeVar("T")


def spinner_frame(label: str, frame: int, row: int) -> str:
    return f"{goto(1, row)}{HIDE_CURSOR}{label}{'.' * frame}{CLEAR_LINE}{color.RESET}"


def _spin(stop: threading.Event, label: str, row: int, draw: Callable[[str], None], interval: float) -> None:
    frame = 0
    while not stop.is_set():
        try:
            draw(spinner_frame(label, frame, row))
        except FatalError as e:
            log.warning("spinner stopped: %s", e.message)
            return
        frame = (frame + 1) % 4
        stop.wait(interval)


def run_in_worker(work: Callable[[], T]) -> Tuple[threading.Thread, "queue.Queue[Tuple[bool, object]]"]:
    results: "queue.Queue[Tuple[bool, object]]" = queue.Queue(maxsize=1)

    def worker():
        try:
            results.put((True, work()))
        except Exception as e:
            results.put((False, e))

    thread = threading.Thread(target=worker, name="phetch-request", daemon=True)
    thread.start()
    return thread, results


def _unwrap(result: Tuple[bool, object]):
    ok, value = result
    if not ok:
        raise value  # type: ignore[misc]
    return value


def run(work: Callable[[], T]) -> T:
    """Run work on a worker thread without a spinner and wait for it."""
    _, results = run_in_worker(work)
    return _unwrap(results.get())


def run_with_spinner(
    work: Callable[[], T],
    label: str,
    row: int,
    draw: Callable[[str], None],
    interval: float = SPINNER_INTERVAL,
) -> T:
    _, results = run_in_worker(work)

    stop = threading.Event()
    spinner = threading.Thread(
        target=_spin,
        args=(stop, label, row, draw, interval),
        name="phetch-spinner",
        daemon=True,
    )
    spinner.start()
    try:
        result = results.get()
    finally:
        stop.set()
        spinner.join()
    return _unwrap(result)


__all__ = ["run", "run_with_spinner", "run_in_worker", "spinner_frame"]
