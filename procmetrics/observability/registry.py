"""
Registry — Gauges spanning several Prometheus collector registries.

A GaugeHandle is a custom collector registered in every target registry, so
one ``set()`` updates all of them. Unlike ``prometheus_client.Gauge``, an
unlabeled handle exposes no sample until its first ``set()``.

## Usage

    from procmetrics.observability.registry import create_gauge, render

    gauge = create_gauge("queue_size", "Items in queue", registries=[registry])
    gauge.set(5)

    # Prometheus text exposition
    output = render(registry)
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily

logger = logging.getLogger(__name__)

# Package-wide registry used when no registries are configured. Kept apart
# from prometheus_client.REGISTRY, whose ProcessCollector already owns
# process_resident_memory_bytes and process_start_time_seconds.
default_registry = CollectorRegistry()


class GaugeHandle:
    """
    A named, optionally labeled gauge registered in zero or more registries.

    The handle is itself the collector: the same object is registered in
    every target registry and renders one sample per label set that has been
    written. A gauge that was never set renders only its HELP and TYPE lines.
    """

    def __init__(
        self,
        name: str,
        help_text: str,
        labels: Sequence[str] = (),
        registries: Iterable[CollectorRegistry] = (),
    ):
        self.name = name
        self.help_text = help_text
        self.labels: Tuple[str, ...] = tuple(labels)
        self._values: Dict[Tuple[str, ...], float] = {}
        self._lock = Lock()
        self._registries: List[CollectorRegistry] = []

        try:
            for registry in registries:
                registry.register(self)
                self._registries.append(registry)
        except Exception:
            logger.debug(f"Registering {name} failed after {len(self._registries)} registries; rolling back")
            self.unregister_all()
            raise

    @property
    def registries(self) -> List[CollectorRegistry]:
        return list(self._registries)

    def set(self, value: float, labels: Optional[Dict[str, str]] = None) -> None:
        """
        Set the gauge in every registry.

        For a labeled gauge, label names missing from ``labels`` are set to
        the empty string.
        """
        if not self.labels and labels:
            raise ValueError(f"{self.name} has no labels, got {sorted(labels)}")

        key = tuple(self._label_values(labels or {}).values())
        with self._lock:
            self._values[key] = float(value)

    def unregister(self, registry: CollectorRegistry) -> None:
        """Remove this gauge from one registry."""
        remaining = []
        for owner in self._registries:
            if owner is registry:
                registry.unregister(self)
            else:
                remaining.append(owner)
        self._registries = remaining

    def unregister_all(self) -> None:
        """Remove this gauge from every registry it was created in."""
        for registry in self._registries:
            registry.unregister(self)
        self._registries = []

    def describe(self) -> List[GaugeMetricFamily]:
        return [GaugeMetricFamily(self.name, self.help_text, labels=list(self.labels))]

    def collect(self) -> List[GaugeMetricFamily]:
        family = GaugeMetricFamily(self.name, self.help_text, labels=list(self.labels))
        with self._lock:
            for key, value in self._values.items():
                family.add_metric(list(key), value)
        return [family]

    def _label_values(self, labels: Dict[str, str]) -> Dict[str, str]:
        unknown = set(labels) - set(self.labels)
        if unknown:
            raise ValueError(f"Unknown labels for {self.name}: {sorted(unknown)}")
        return {name: str(labels.get(name, "")) for name in self.labels}

    def __repr__(self) -> str:
        return f"GaugeHandle({self.name!r}, labels={list(self.labels)}, registries={len(self._registries)})"


def create_gauge(
    name: str,
    help_text: str,
    labels: Sequence[str] = (),
    registries: Iterable[CollectorRegistry] = (),
) -> GaugeHandle:
    """
    Create a gauge in every given registry.

    Raises:
        ValueError: If the name collides with a series already in a registry
    """
    return GaugeHandle(name, help_text, labels, registries)


def unregister(registry: CollectorRegistry, handle: GaugeHandle) -> None:
    """Remove a gauge from a registry."""
    handle.unregister(registry)


def render(registry: CollectorRegistry) -> str:
    """Render a registry in the Prometheus text exposition format."""
    return generate_latest(registry).decode("utf-8")


def registered_names(registry: CollectorRegistry) -> Set[str]:
    """Names of the metric families a registry currently collects."""
    return {family.name for family in registry.collect()}
