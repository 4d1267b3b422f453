"""
Configuration — Settings for the sampler, exporter, and logging.
"""

from .loader import Settings, load_settings

__all__ = ["Settings", "load_settings"]
