"""Runtime version components reported by the python_versions gauge."""

from __future__ import annotations

import platform
import sys
from typing import Dict


def _implementation() -> str:
    version = ".".join(str(part) for part in sys.implementation.version[:3])
    return f"{sys.implementation.name}-{version}"


def runtime_versions() -> Dict[str, str]:
    """
    Return the version of each runtime component this interpreter exposes.

    Keys are stable across calls within a process, so they double as the
    label names of the versions gauge. Optional components (openssl, sqlite,
    zlib, expat) are omitted when the interpreter was built without them.
    """
    versions = {
        "python": platform.python_version(),
        "implementation": _implementation(),
    }

    try:
        import ssl
        versions["openssl"] = ssl.OPENSSL_VERSION.split()[1]
    except (ImportError, IndexError):
        pass

    try:
        import sqlite3
        versions["sqlite"] = sqlite3.sqlite_version
    except ImportError:
        pass

    try:
        import zlib
        versions["zlib"] = zlib.ZLIB_RUNTIME_VERSION
    except ImportError:
        pass

    try:
        import pyexpat
        versions["expat"] = pyexpat.EXPAT_VERSION.replace("expat_", "")
    except ImportError:
        pass

    return versions
