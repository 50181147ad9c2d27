"""Terminal spinner shown while the model is generating a reply."""

import itertools
import shutil
import sys
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

SPINNER_FRAMES = ("|", "/", "-", "\\")
SPINNER_INTERVAL_SECONDS = 0.1


class WaitIndicator:
    """Render a lightweight TTY spinner while a model reply is pending.

    Shows the elapsed time of the current request and, once a malformed reply
    has been re-requested, which attempt is in flight.
    """

    def __init__(
        self,
        message: str = "Generating response...",
        stream: TextIO | None = None,
        interval: float = SPINNER_INTERVAL_SECONDS,
    ) -> None:
        self._message = message
        self._stream = stream if stream is not None else sys.stderr
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._enabled = hasattr(self._stream, "isatty") and self._stream.isatty()
        self._started_at = 0.0
        self._attempt_label = ""

    def __enter__(self) -> "WaitIndicator":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def set_attempt(self, attempt: int, max_attempts: int) -> None:
        self._attempt_label = f" [attempt {attempt}/{max_attempts}]" if attempt > 1 else ""

    def render(self, frame: str) -> str:
        elapsed = time.monotonic() - self._started_at
        return f"{frame} {self._message}{self._attempt_label} ({elapsed:.0f}s)"

    def start(self) -> None:
        if not self._enabled:
            return
        self._stop_event.clear()
        self._started_at = time.monotonic()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self._enabled:
            return
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
        self._clear_line()

    @contextmanager
    def suspended(self) -> Iterator[None]:
        """Clear the spinner while other output is written, then resume it."""
        was_running = self.running
        if was_running:
            self.stop()
        try:
            yield
        finally:
            if was_running:
                self.start()

    def _run(self) -> None:
        spinner = itertools.cycle(SPINNER_FRAMES)
        while not self._stop_event.is_set():
            self._write_line(self.render(next(spinner)))
            time.sleep(self._interval)

    def _write_line(self, text: str) -> None:
        cols = shutil.get_terminal_size(fallback=(80, 24)).columns
        max_width = max(cols - 1, 10)
        clipped = text[:max_width]
        try:
            self._stream.write("\r" + clipped.ljust(max_width))
            self._stream.flush()
        except OSError:
            self._enabled = False

    def _clear_line(self) -> None:
        cols = shutil.get_terminal_size(fallback=(80, 24)).columns
        max_width = max(cols - 1, 10)
        try:
            self._stream.write("\r" + (" " * max_width) + "\r")
            self._stream.flush()
        except OSError:
            pass
