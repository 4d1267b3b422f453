"""
Config Loader — Load settings from a YAML file, a master key, or individual env vars.

Supports three sources, applied in order (later wins):
1. YAML file: PROCMETRICS_CONFIG_FILE or an explicit path
2. Master JSON key: a single PROCMETRICS_CONFIG env var
3. Individual keys: PROCMETRICS_PERIOD, PROCMETRICS_PORT, LOG_LEVEL, ...

## Usage

    # Option 1: Config file
    export PROCMETRICS_CONFIG_FILE=/etc/procmetrics.yaml

    # Option 2: Master config
    export PROCMETRICS_CONFIG='{"period": 5, "port": 9100}'

    # Option 3: Individual keys
    export PROCMETRICS_PERIOD=5
    export PROCMETRICS_LOOP=false
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..validation import ConfigurationError

logger = logging.getLogger(__name__)

ENV_MAPPING = {
    "PROCMETRICS_PERIOD": "period",
    "PROCMETRICS_LOOP": "loop",
    "PROCMETRICS_LOOP_RESOLUTION": "loop_resolution",
    "PROCMETRICS_HOST": "host",
    "PROCMETRICS_PORT": "port",
    "LOG_LEVEL": "log_level",
    "LOG_FORMAT": "log_format",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Settings:
    """Runtime settings for sampling and exposition."""

    # Seconds between pushed snapshots
    period: float = 10.0

    # Loop delay monitoring
    loop: bool = True
    loop_resolution: float = 0.01

    # HTTP exposition
    host: str = "127.0.0.1"
    port: int = 9464

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    def validate(self) -> None:
        """Check value ranges."""
        if self.period <= 0:
            raise ConfigurationError(f"period must be positive, got {self.period}")
        if self.loop_resolution <= 0:
            raise ConfigurationError(
                f"loop_resolution must be positive, got {self.loop_resolution}"
            )
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"port out of range: {self.port}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw value to the type of the Settings field."""
    if name in ("period", "loop_resolution"):
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if name == "port":
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"port must be an integer, got {value!r}")
    if name == "loop":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigurationError(f"loop must be a boolean, got {value!r}")
    return str(value)


def _apply(values: Dict[str, Any], data: Dict[str, Any], source: str) -> None:
    known = {f.name for f in fields(Settings)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}' from {source}")
            continue
        values[key] = _coerce(key, value)


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping from disk."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Load settings from file, master key, and env vars.

    Args:
        config_path: Optional YAML file; falls back to PROCMETRICS_CONFIG_FILE

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If any source holds an invalid value
    """
    values: Dict[str, Any] = {}

    path = config_path or os.environ.get("PROCMETRICS_CONFIG_FILE")
    if path:
        _apply(values, load_yaml(Path(path)), str(path))
        logger.debug(f"Loaded settings from {path}")

    master = os.environ.get("PROCMETRICS_CONFIG")
    if master:
        try:
            data = json.loads(master)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"PROCMETRICS_CONFIG is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError("PROCMETRICS_CONFIG must be a JSON object")
        _apply(values, data, "PROCMETRICS_CONFIG")

    env_values = {
        field_name: os.environ[env_key]
        for env_key, field_name in ENV_MAPPING.items()
        if os.environ.get(env_key)
    }
    _apply(values, env_values, "environment")

    settings = Settings(**values)
    settings.validate()
    return settings
