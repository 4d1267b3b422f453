"""
Process Metrics Emitter — Publish process snapshots as Prometheus gauges.

Maps every field of a Snapshot onto a fixed catalog of gauges, sets the
one-time identity, version, and start-time gauges on the first collection
only, and renders each configured registry.

## Usage

    from procmetrics import ProcessMetricsEmitter

    emitter = ProcessMetricsEmitter()
    report = emitter.metrics()      # str for one registry

    # Push mode: re-publish each timed snapshot as a rendered report
    source = ProcessMetrics(period=10)
    emitter = ProcessMetricsEmitter(metrics=source, registries=[registry])
    emitter.on("metrics", lambda report: print(report))

    emitter.destroy()
"""

from __future__ import annotations

import logging
import math
import time
from threading import Lock
from typing import Any, List, Optional, Sequence, Union

from prometheus_client import CollectorRegistry

from ..events import EventEmitter
from ..sampling import ProcessMetrics, Snapshot, runtime_versions
from ..validation import InvalidStateError, validate_registries, validate_source
from .catalog import LOADAVG_SPANS, GaugeCatalog, build_catalog
from .registry import default_registry, render

logger = logging.getLogger(__name__)

Report = Union[None, str, List[str]]


class ProcessMetricsEmitter(EventEmitter):
    """
    Gauge publisher for one snapshot source.

    Args:
        metrics: Snapshot source; a default ProcessMetrics is created and
                 owned by the emitter when omitted
        registries: Target registries, in report order. Defaults to
                    ``[default_registry]``.

    Raises:
        InvalidArgumentError: If ``metrics`` has no ``metrics()`` method or
                              ``registries`` is not a list or tuple
        ValueError: If a gauge name collides with a series in a registry
    """

    def __init__(
        self,
        metrics: Optional[Any] = None,
        registries: Optional[Sequence[CollectorRegistry]] = None,
    ):
        super().__init__()

        if registries is None:
            registries = [default_registry]
        self._registries: Optional[List[CollectorRegistry]] = validate_registries(registries)

        self._owns_source = metrics is None
        if metrics is None:
            self._metrics = ProcessMetrics()
        else:
            self._metrics = validate_source(metrics)

        self._lock = Lock()
        self._initialized = False

        try:
            self._collectors: Optional[GaugeCatalog] = build_catalog(
                self._registries, runtime_versions().keys()
            )
        except Exception:
            if self._owns_source:
                self._metrics.stop()
            raise

        if callable(getattr(self._metrics, "on", None)):
            self._metrics.on("metrics", self._on_snapshot)

        logger.debug(
            f"Emitter ready with {len(self._registries)} registries",
            extra={"registry_count": len(self._registries)},
        )

    @property
    def initialized(self) -> bool:
        """Whether the one-time gauges have been set."""
        return self._initialized

    @property
    def destroyed(self) -> bool:
        return self._collectors is None

    @property
    def registries(self) -> List[CollectorRegistry]:
        self._check_alive()
        return list(self._registries)

    @property
    def source(self) -> Any:
        self._check_alive()
        return self._metrics

    def metrics(self) -> Report:
        """
        Collect a fresh snapshot and render every registry.

        Returns:
            None with no registries, the report string with one registry,
            or a list of report strings with several

        Raises:
            InvalidStateError: If the emitter was destroyed
        """
        with self._lock:
            self._check_alive()
            snapshot = self._metrics.metrics()
            self._update(snapshot)

            if len(self._registries) == 0:
                return None
            if len(self._registries) == 1:
                return render(self._registries[0])
            return [render(registry) for registry in self._registries]

    def destroy(self) -> None:
        """Unregister every gauge and release the source and registries."""
        with self._lock:
            if self._collectors is None:
                logger.debug("Emitter already destroyed")
                return

            source = self._metrics
            off = getattr(source, "off", None)
            if callable(off):
                off("metrics", self._on_snapshot)

            for registry in self._registries:
                self._collectors.unregister(registry)

            self._metrics = None
            self._registries = None
            self._collectors = None

        # Outside the lock: stopping joins the timer thread, which may be
        # waiting on the lock in metrics()
        if self._owns_source:
            source.stop()
        logger.debug("Emitter destroyed")

    def _check_alive(self) -> None:
        if self._collectors is None:
            raise InvalidStateError("ProcessMetricsEmitter has been destroyed")

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        # The pushed snapshot only signals a new period; collect afresh
        try:
            report = self.metrics()
        except InvalidStateError:
            logger.debug("Snapshot arrived after destroy; ignored")
            return
        self.emit("metrics", report)

    def _update(self, snapshot: Snapshot) -> None:
        collectors = self._collectors

        if not self._initialized:
            self._init_metrics(snapshot)
            self._initialized = True

        memory = snapshot.process.memory_usage
        collectors.heap_total.set(memory.heap_total)
        collectors.heap.set(memory.heap_used)
        collectors.external.set(memory.external)
        collectors.rss.set(memory.rss)
        collectors.freemem.set(snapshot.system.freemem)
        collectors.loop.set(0 if math.isnan(snapshot.loop) else snapshot.loop)
        collectors.handles.set(snapshot.handles)
        collectors.requests.set(snapshot.requests)
        for span, value in zip(LOADAVG_SPANS, snapshot.system.loadavg):
            collectors.loadavg.set(value, {"span": span})

    def _init_metrics(self, snapshot: Snapshot) -> None:
        collectors = self._collectors
        process = snapshot.process
        system = snapshot.system
        now = time.time()

        collectors.process_start_time.set(round(now - process.uptime))
        collectors.system_start_time.set(round(now - system.uptime))
        collectors.totalmem.set(system.totalmem)

        collectors.process.set(1, {"exec_path": process.exec_path})
        collectors.process.set(1, {"main_module": process.main_module})
        collectors.process.set(1, {"title": process.title})
        collectors.process.set(1, {"pid": str(process.pid)})
        collectors.system.set(1, {"arch": system.arch})
        collectors.system.set(1, {"hostname": system.hostname})
        collectors.system.set(1, {"platform": system.platform})

        for component in collectors.versions.labels:
            version = process.versions.get(component)
            if version is not None:
                collectors.versions.set(1, {component: version})
