"""Configuration data models for gpothos.

Defines the typed configuration that controls where the generator binary is
downloaded from and where it is installed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_RELEASE_HOST = "github.com"
DEFAULT_REPOSITORY = "gpaulo00/gpothos-generator"


@dataclass
class ReleaseConfig:
    """Release download coordinates."""

    host: str = DEFAULT_RELEASE_HOST
    repository: str = DEFAULT_REPOSITORY
    version: str = ""
    timeout: Optional[float] = None  # Socket timeout in seconds, none by default


@dataclass
class GpothosConfig:
    """Complete gpothos configuration."""

    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    install_dir: Optional[Path] = None  # None = packaged bin directory

    # Tracks where config was loaded from (for debugging)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)
