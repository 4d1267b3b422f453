"""
Process Metrics — Default snapshot source built on psutil.

Samples the current process and host on demand, and optionally publishes a
fresh snapshot to "metrics" listeners on a timer.

## Usage

    from procmetrics.sampling import ProcessMetrics

    source = ProcessMetrics(period=5)
    source.on("metrics", lambda snapshot: print(snapshot.process.memory_usage.rss))
    ...
    source.stop()
"""

from __future__ import annotations

import logging
import math
import os
import platform
import socket
import sys
import time
import tracemalloc
from threading import Event, Thread, current_thread
from typing import Optional

import psutil

from ..events import EventEmitter
from .loop_monitor import LoopDelayMonitor
from .runtime import runtime_versions
from .snapshot import MemoryUsage, ProcessInfo, Snapshot, SystemInfo

logger = logging.getLogger(__name__)


def _main_module() -> str:
    main = sys.modules.get("__main__")
    return getattr(main, "__file__", None) or ""


class ProcessMetrics(EventEmitter):
    """
    Snapshot source for the current process.

    Args:
        period: Seconds between pushed snapshots; None disables the timer
        loop: Whether to run the loop delay monitor
        resolution: Sleep resolution of the loop delay monitor in seconds
    """

    def __init__(
        self,
        period: Optional[float] = None,
        loop: bool = True,
        resolution: float = 0.01,
    ):
        super().__init__()
        if period is not None and period <= 0:
            raise ValueError(f"period must be positive, got {period}")

        self.period = period
        self._process = psutil.Process(os.getpid())
        self._stop = Event()
        self._timer: Optional[Thread] = None

        self._loop_monitor: Optional[LoopDelayMonitor] = None
        if loop:
            self._loop_monitor = LoopDelayMonitor(resolution)
            self._loop_monitor.start()

        if period is not None:
            self._timer = Thread(
                target=self._run_timer,
                name="procmetrics-sampler",
                daemon=True,
            )
            self._timer.start()
            logger.debug(f"Snapshot timer started (period={period}s)", extra={"period": period})

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.is_alive()

    def metrics(self, reset_loop: bool = True) -> Snapshot:
        """
        Take a fresh snapshot of the process and host.

        With ``reset_loop=False`` the loop delay window is read but kept, so
        the next collection still sees every delay recorded since the last.
        """
        now = time.time()
        process = self._process

        with process.oneshot():
            memory_usage = self._memory_usage()
            process_info = ProcessInfo(
                memory_usage=memory_usage,
                uptime=max(now - process.create_time(), 0.0),
                exec_path=sys.executable or "",
                main_module=_main_module(),
                title=process.name(),
                pid=process.pid,
                versions=runtime_versions(),
            )
            handles = self._handles()

        vm = psutil.virtual_memory()
        system_info = SystemInfo(
            arch=platform.machine(),
            hostname=socket.gethostname(),
            platform=sys.platform,
            totalmem=vm.total,
            freemem=vm.available,
            loadavg=tuple(psutil.getloadavg()),
            uptime=max(now - psutil.boot_time(), 0.0),
        )

        loop = self._loop_monitor.sample(reset=reset_loop) if self._loop_monitor else math.nan

        return Snapshot(
            process=process_info,
            system=system_info,
            loop=loop,
            handles=handles,
            requests=self._requests(),
        )

    def stop(self) -> None:
        """Stop the timer and loop monitor threads. Safe to call twice."""
        self._stop.set()
        if self._timer is not None:
            # A listener may stop the source from the timer thread itself
            if self._timer is not current_thread():
                self._timer.join(timeout=max(1.0, self.period or 0))
            self._timer = None
        if self._loop_monitor is not None:
            self._loop_monitor.stop()

    def _memory_usage(self) -> MemoryUsage:
        info = self._process.memory_info()
        rss = info.rss
        heap_total = getattr(info, "data", info.vms)

        if tracemalloc.is_tracing():
            heap_used = tracemalloc.get_traced_memory()[0]
        else:
            # Private memory when the platform reports shared pages
            heap_used = max(rss - getattr(info, "shared", 0), 0)

        return MemoryUsage(
            rss=rss,
            heap_total=heap_total,
            heap_used=heap_used,
            external=max(rss - heap_used, 0),
        )

    def _handles(self) -> int:
        try:
            if hasattr(self._process, "num_fds"):
                return self._process.num_fds()
            return self._process.num_handles()
        except psutil.AccessDenied:
            logger.debug("Access denied reading open handles")
            return 0

    def _requests(self) -> int:
        connections = getattr(self._process, "net_connections", None) or self._process.connections
        try:
            return len(connections(kind="inet"))
        except psutil.AccessDenied:
            logger.debug("Access denied reading network connections")
            return 0

    def _run_timer(self) -> None:
        while not self._stop.wait(self.period):
            try:
                self.emit("metrics", self.metrics())
            except Exception:
                logger.exception("Snapshot listener failed")
