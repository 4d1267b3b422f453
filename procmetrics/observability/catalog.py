"""
Gauge Catalog — The fixed set of gauges published for a process.

| field              | metric                            | labels                                  |
|--------------------|-----------------------------------|-----------------------------------------|
| process            | python_process_configuration      | exec_path, main_module, title, pid      |
| system             | python_system_configuration       | arch, hostname, platform                |
| versions           | python_versions                   | one per runtime version component       |
| heap_total         | python_process_heap_total_bytes   |                                         |
| heap               | process_heap_bytes                |                                         |
| external           | python_process_external_bytes     |                                         |
| rss                | process_resident_memory_bytes     |                                         |
| totalmem           | python_system_totalmem_bytes      |                                         |
| freemem            | python_system_freemem_bytes       |                                         |
| process_start_time | process_start_time_seconds        |                                         |
| system_start_time  | python_system_start_time_seconds  |                                         |
| loop               | python_event_loop_delay           |                                         |
| handles            | python_active_handles             |                                         |
| requests           | python_active_requests            |                                         |
| loadavg            | python_system_loadavg             | span                                    |
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from prometheus_client import CollectorRegistry

from .registry import GaugeHandle, create_gauge

logger = logging.getLogger(__name__)

PROCESS_LABELS = ("exec_path", "main_module", "title", "pid")
SYSTEM_LABELS = ("arch", "hostname", "platform")
LOADAVG_SPANS = ("1min", "5min", "15min")

# (field, metric name, help text, labels); versions labels are supplied at build time
CATALOG_SCHEMA: Tuple[Tuple[str, str, str, Tuple[str, ...]], ...] = (
    ("process", "python_process_configuration", "Python process configuration data.", PROCESS_LABELS),
    ("system", "python_system_configuration", "Python system configuration data.", SYSTEM_LABELS),
    ("versions", "python_versions", "Python runtime version data.", ()),
    ("heap_total", "python_process_heap_total_bytes", "Process total heap size in bytes.", ()),
    ("heap", "process_heap_bytes", "Process heap size in bytes.", ()),
    ("external", "python_process_external_bytes", "Process memory outside the heap in bytes.", ()),
    ("rss", "process_resident_memory_bytes", "Resident memory size in bytes.", ()),
    ("totalmem", "python_system_totalmem_bytes", "System total memory size in bytes.", ()),
    ("freemem", "python_system_freemem_bytes", "System free memory size in bytes.", ()),
    ("process_start_time", "process_start_time_seconds", "Start time of the process since unix epoch in seconds.", ()),
    ("system_start_time", "python_system_start_time_seconds", "Start time of the system since unix epoch in seconds.", ()),
    ("loop", "python_event_loop_delay", "Delay of the Python scheduler loop in milliseconds.", ()),
    ("handles", "python_active_handles", "Number of active handles.", ()),
    ("requests", "python_active_requests", "Number of active requests.", ()),
    ("loadavg", "python_system_loadavg", "Operating system 1, 5, and 15 minute load averages.", ("span",)),
)


@dataclass
class GaugeCatalog:
    """One named gauge per catalog entry, plus the ordered list of all of them."""

    process: GaugeHandle
    system: GaugeHandle
    versions: GaugeHandle
    heap_total: GaugeHandle
    heap: GaugeHandle
    external: GaugeHandle
    rss: GaugeHandle
    totalmem: GaugeHandle
    freemem: GaugeHandle
    process_start_time: GaugeHandle
    system_start_time: GaugeHandle
    loop: GaugeHandle
    handles: GaugeHandle
    requests: GaugeHandle
    loadavg: GaugeHandle
    gauges: List[GaugeHandle] = field(default_factory=list)

    def unregister(self, registry: CollectorRegistry) -> None:
        """Remove every gauge from one registry."""
        for gauge in self.gauges:
            gauge.unregister(registry)


def build_catalog(
    registries: Sequence[CollectorRegistry],
    version_labels: Iterable[str],
) -> GaugeCatalog:
    """
    Create every catalog gauge in every registry.

    If any gauge fails to register, most often by colliding with an existing
    series, the gauges created so far are unregistered and the error is
    re-raised.
    """
    version_labels = tuple(version_labels)
    created: List[GaugeHandle] = []

    try:
        for name, metric, help_text, labels in CATALOG_SCHEMA:
            if name == "versions":
                labels = version_labels
            created.append(create_gauge(metric, help_text, labels, registries))
    except Exception:
        logger.error(f"Gauge registration failed after {len(created)} gauges; rolling back")
        for gauge in created:
            gauge.unregister_all()
        raise

    handles = {entry[0]: gauge for entry, gauge in zip(CATALOG_SCHEMA, created)}
    return GaugeCatalog(gauges=created, **handles)
