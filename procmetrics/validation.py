"""
Validation — Error types and constructor argument checks.

## Usage

    from procmetrics.validation import InvalidArgumentError, validate_registries

    try:
        registries = validate_registries(value)
    except InvalidArgumentError as e:
        print(f"Bad configuration: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from prometheus_client import CollectorRegistry


class InvalidArgumentError(TypeError):
    """Raised when a constructor argument has the wrong type or shape."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(message)


class InvalidStateError(RuntimeError):
    """Raised when an object is used after it has been destroyed."""
    pass


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


def is_snapshot_source(candidate: Any) -> bool:
    """Check that an object exposes a callable ``metrics()``."""
    return callable(getattr(candidate, "metrics", None))


def validate_source(candidate: Any) -> Any:
    """
    Validate a Snapshot Source override.

    Raises:
        InvalidArgumentError: If the object has no callable ``metrics()``
    """
    if not is_snapshot_source(candidate):
        raise InvalidArgumentError(
            "metrics must be an instance of ProcessMetrics",
            field="metrics",
            details={"type": type(candidate).__name__},
        )
    return candidate


def validate_registries(registries: Any) -> List[CollectorRegistry]:
    """
    Validate the registries option.

    Only ordered sequences (list or tuple) are accepted; a dict, set, or
    single registry is rejected rather than guessed at.

    Returns:
        The registries as a new list, preserving order

    Raises:
        InvalidArgumentError: If the value is not a list or tuple, or holds
                              anything other than a CollectorRegistry
    """
    if not isinstance(registries, (list, tuple)):
        raise InvalidArgumentError(
            "registries must be a CollectorRegistry list",
            field="registries",
            details={"type": type(registries).__name__},
        )

    for index, registry in enumerate(registries):
        if not isinstance(registry, CollectorRegistry):
            raise InvalidArgumentError(
                "registries must be a CollectorRegistry list",
                field="registries",
                details={"index": index, "type": type(registry).__name__},
            )
    return list(registries)
