"""
Frame Clocks

A frame clock calls back with a timestamp in milliseconds, once per
request. Whoever wants a steady stream of frames re-requests from inside
each callback and cancels the pending handle to stop.

ManualFrameClock only fires when told to (tests, headless snapshots).
ThreadedFrameClock fires from a background thread at a fixed rate.
"""

import itertools
import threading
import time
from abc import ABC, abstractmethod


class FrameClock(ABC):

    @abstractmethod
    def request_callback(self, fn):
        """Schedule fn(timestamp_ms) for the next frame. Returns a handle."""

    @abstractmethod
    def cancel(self, handle):
        """Drop a pending request. Unknown or spent handles are ignored."""


class ManualFrameClock(FrameClock):
    """Clock driven by explicit tick(timestamp) calls."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._pending = {}
        self.now = 0.0

    @property
    def pending(self):
        return len(self._pending)

    def request_callback(self, fn):
        handle = next(self._ids)
        self._pending[handle] = fn
        return handle

    def cancel(self, handle):
        self._pending.pop(handle, None)

    def tick(self, timestamp=None):
        """Fire every callback pending before this tick.

        Callbacks requested during the tick wait for the next one.
        Returns the number of callbacks fired.
        """
        if timestamp is not None:
            self.now = timestamp
        due = self._pending
        self._pending = {}
        for fn in due.values():
            fn(self.now)
        return len(due)

    def advance(self, ms):
        """Move time forward by ms and tick."""
        return self.tick(self.now + ms)


class ThreadedFrameClock(FrameClock):
    """Background thread that fires pending callbacks at `rate` Hz.

    Timestamps are time.perf_counter() in milliseconds. A callback that
    raises stops the clock.
    """

    def __init__(self, rate=60):
        if rate <= 0:
            raise ValueError(f"Clock rate must be positive, got {rate!r}")
        self.rate = rate
        self._ids = itertools.count(1)
        self._pending = {}
        self._lock = threading.Lock()
        self._running = False
        self._thread = None

    def request_callback(self, fn):
        with self._lock:
            handle = next(self._ids)
            self._pending[handle] = fn
        if not self._running:
            self._start()
        return handle

    def cancel(self, handle):
        with self._lock:
            self._pending.pop(handle, None)

    def _start(self):
        self._running = True
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        period = 1.0 / self.rate
        while self._running:
            start = time.perf_counter()
            with self._lock:
                due = self._pending
                self._pending = {}
            try:
                for fn in due.values():
                    fn(start * 1000.0)
            except Exception as e:
                print(f"[Fire] Frame callback error: {e}")
                self._running = False
                return

            sleep_time = period - (time.perf_counter() - start)
            if sleep_time > 0:
                time.sleep(sleep_time)

    def close(self, timeout=1.0):
        """Stop the thread and drop pending callbacks."""
        self._running = False
        with self._lock:
            self._pending.clear()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None
