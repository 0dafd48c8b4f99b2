"""Configuration for gpothos."""

from gpothos.config.loader import load_config
from gpothos.config.models import GpothosConfig, ReleaseConfig

__all__ = [
    "GpothosConfig",
    "ReleaseConfig",
    "load_config",
]
