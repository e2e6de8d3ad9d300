"""
Terminal Progress Spinner.

Animates a rotating quadrant glyph while the pipeline waits on the network.

Threading model:
  Foreground (pipeline): start() → blocking I/O → stop()
  Background (daemon):   holds the stream lock for its whole run, paints one
                         glyph every 150 ms while the active flag is set

The active flag is the only state shared between the two threads. It is
written by the foreground only (True → False) and read by the background
once per tick, so a stop request is honoured within one interval. stop()
joins the background thread, which erases the line and shows the cursor
before releasing the stream lock.
"""

import enum
import itertools
import logging
import sys
import threading
import time
import weakref
from typing import Optional, TextIO

from airq.terminal.ansi import ERASE_LINE, HIDE_CURSOR, MAGENTA, SHOW_CURSOR, SPINNER_GLYPHS, colorize

logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.150  # seconds
DEFAULT_LABEL = "Loading data"

_LOCKS: "weakref.WeakKeyDictionary[TextIO, threading.Lock]" = weakref.WeakKeyDictionary()
_LOCKS_GUARD = threading.Lock()


def stream_lock(stream: TextIO) -> threading.Lock:
    """Advisory lock serialising writes to one output stream."""
    with _LOCKS_GUARD:
        lock = _LOCKS.get(stream)
        if lock is None:
            lock = _LOCKS[stream] = threading.Lock()
        return lock


class SpinnerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class Spinner:
    """
    Progress indicator bound to one output stream.

    Usage:
        with Spinner(stream=sys.stdout):
            ...blocking work...
    """

    def __init__(
        self,
        label: str = DEFAULT_LABEL,
        stream: Optional[TextIO] = None,
        interval: float = TICK_INTERVAL,
    ):
        self.label = label
        self.stream = stream if stream is not None else sys.stdout
        self.interval = interval
        self.lock = stream_lock(self.stream)
        self.state = SpinnerState.IDLE
        self.ticks = 0
        self._active = False
        self._lock_held = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    @property
    def active(self) -> bool:
        return self._active

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _run(self) -> None:
        with self.lock:
            self._lock_held.set()
            try:
                self._write(f"{HIDE_CURSOR}\n\r{self.label} ")
                for glyph in itertools.cycle(SPINNER_GLYPHS):
                    if not self._active:
                        break
                    self._write(f"\r{self.label} {colorize(glyph, MAGENTA)}")
                    self.ticks += 1
                    time.sleep(self.interval)
            finally:
                self._write(f"{ERASE_LINE}{SHOW_CURSOR}")

    def start(self) -> None:
        """Launch the background thread; returns once it owns the stream lock."""
        if self.state is not SpinnerState.IDLE:
            raise RuntimeError(f"Spinner cannot start from state {self.state.value}")

        self._active = True
        self.state = SpinnerState.RUNNING
        self._thread = threading.Thread(target=self._run, name="airq-spinner", daemon=True)
        self._thread.start()
        self._lock_held.wait()
        logger.debug("Spinner started")

    def stop(self) -> None:
        """Request a stop and wait for the line to be erased. Safe to call repeatedly."""
        if self.state is SpinnerState.IDLE:
            self.state = SpinnerState.STOPPED
            return
        if self.state is not SpinnerState.RUNNING:
            return

        self.state = SpinnerState.STOPPING
        self._active = False
        if self._thread is not None:
            self._thread.join()
        self.state = SpinnerState.STOPPED
        logger.debug("Spinner stopped after %d ticks", self.ticks)
