"""
Loop Delay Monitor — Measure how late a sleeping thread wakes up.

A background thread sleeps for a fixed resolution over and over. Each time
it wakes, the overshoot past the requested sleep is recorded. Overshoot
grows when the GIL is held by busy threads or the host scheduler is
saturated, which makes it the Python stand-in for event-loop lag.
"""

from __future__ import annotations

import logging
import time
from threading import Event, Lock, Thread
from typing import Optional

logger = logging.getLogger(__name__)


class LoopDelayMonitor:
    """
    Background thread recording wake-up delay.

    ``sample()`` returns the mean delay in milliseconds since the previous
    call and resets the window.
    """

    def __init__(self, resolution: float = 0.01):
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        self.resolution = resolution
        self._total_ms = 0.0
        self._count = 0
        self._lock = Lock()
        self._stop = Event()
        self._thread: Optional[Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitor thread; no-op if already running."""
        if self.running:
            return
        self._stop.clear()
        self._thread = Thread(
            target=self._run,
            name="procmetrics-loop-monitor",
            daemon=True,
        )
        self._thread.start()
        logger.debug(f"Loop delay monitor started (resolution={self.resolution}s)")

    def stop(self) -> None:
        """Stop the monitor thread and wait for it to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=max(1.0, self.resolution * 10))
            self._thread = None

    def record(self, delay_ms: float) -> None:
        """Record one wake-up delay."""
        with self._lock:
            self._total_ms += delay_ms
            self._count += 1

    def sample(self, reset: bool = True) -> float:
        """Return mean delay (ms) of the current window; start a new one if ``reset``."""
        with self._lock:
            mean = self._total_ms / self._count if self._count else 0.0
            if reset:
                self._total_ms = 0.0
                self._count = 0
        return mean

    def _run(self) -> None:
        while True:
            started = time.perf_counter()
            if self._stop.wait(self.resolution):
                break
            elapsed = time.perf_counter() - started
            self.record(max(elapsed - self.resolution, 0.0) * 1000)
