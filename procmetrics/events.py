"""
Events — Minimal listener registry for push notifications.

Both the snapshot source and the emitter publish a "metrics" event; this
mixin gives them the same on/off/emit surface.

## Usage

    source.on("metrics", handle_snapshot)
    ...
    source.off("metrics", handle_snapshot)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from threading import Lock
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Thread-safe event listener registry."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._listeners_lock = Lock()

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for an event."""
        with self._listeners_lock:
            self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        with self._listeners_lock:
            listeners = self._listeners.get(event, [])
            if listener in listeners:
                listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        with self._listeners_lock:
            return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> int:
        """
        Call every listener of an event in registration order.

        Exceptions propagate to the caller.

        Returns:
            Number of listeners called
        """
        with self._listeners_lock:
            listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(*args)
        return len(listeners)
