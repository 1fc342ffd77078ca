"""
Polling helpers
===============

Periodic refetch of a device's readings while a short time window is being
watched.

``poll_interval_for`` maps the selected window to a cadence. ``PollingTask``
is an explicit, cancellable handle around a daemon thread. ``RequestGeneration``
tags each fetch with a ticket so that a response arriving after the selection
changed (or after ``stop()``) is discarded instead of overwriting newer data.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Generic, TypeVar

from app.constants import Polling

logger = logging.getLogger(__name__)

T = TypeVar("T")


def poll_interval_for(window_minutes: int, date_range_active: bool = False) -> int | None:
    """Seconds between refetches, or None when the view should not poll."""
    if date_range_active:
        return None
    for max_minutes, interval in Polling.CADENCE:
        if window_minutes <= max_minutes:
            return interval
    return None


class RequestGeneration:
    """Monotonic ticket counter; only the newest ticket may apply its result."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current = 0

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def next(self) -> int:
        with self._lock:
            self._current += 1
            return self._current

    def invalidate(self) -> None:
        """Make every outstanding ticket stale."""
        self.next()

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._current


class PollingTask(Generic[T]):
    """Runs ``fetch`` every ``interval_s`` seconds and hands fresh results to ``on_result``.

    The first fetch happens immediately on ``start()``. ``stop()`` is
    idempotent and discards any fetch still in flight.
    """

    def __init__(
        self,
        fetch: Callable[[], T],
        on_result: Callable[[T], None],
        interval_s: float,
        *,
        on_error: Callable[[Exception], None] | None = None,
        generation: RequestGeneration | None = None,
        name: str = "SipekaPoller",
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._fetch = fetch
        self._on_result = on_result
        self._on_error = on_error
        self.interval_s = interval_s
        self.generation = generation or RequestGeneration()
        self._name = name
        self._stop_event = threading.Event()
        self._worker_thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._worker_thread is not None and self._worker_thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._worker_thread = threading.Thread(target=self._polling_loop, name=self._name, daemon=True)
            self._worker_thread.start()
        logger.debug("Polling started every %ss", self.interval_s)

    def stop(self) -> None:
        """Stop the loop and drop any result that has not been applied yet."""
        with self._lock:
            self.generation.invalidate()
            self._stop_event.set()
            thread, self._worker_thread = self._worker_thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=Polling.STOP_JOIN_TIMEOUT)
            logger.debug("Polling stopped")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until ``stop()`` is called; True if stopped."""
        return self._stop_event.wait(timeout)

    def run_once(self) -> bool:
        """Fetch once and apply the result if still current. Returns True when applied."""
        ticket = self.generation.next()
        result = self._fetch()
        if not self.generation.is_current(ticket) or self._stop_event.is_set():
            logger.debug("Discarding stale poll result (ticket %s)", ticket)
            return False
        self._on_result(result)
        return True

    def _polling_loop(self) -> None:
        while not self._stop_event.is_set():
            t_start = time.perf_counter()
            try:
                self.run_once()
            except Exception as exc:
                if self._on_error is not None:
                    self._on_error(exc)
                else:
                    logger.exception("Polling fetch failed: %s", exc)

            elapsed = time.perf_counter() - t_start
            self._stop_event.wait(max(0.1, self.interval_s - elapsed))
