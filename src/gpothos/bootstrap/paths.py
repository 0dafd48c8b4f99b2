"""Path management for the gpothos home and installed binary.

The install location depends only on the platform, never on the release
version, so reinstalling overwrites the previous binary in place.

Directory structure:
    ~/.gpothos/
        config.yml          - Optional global configuration
    <package>/bin/
        gpothos-generator   - Installed binary (gpothos-generator.exe on Windows)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".gpothos"

# Environment variable to override home directory
GPOTHOS_HOME_ENV = "GPOTHOS_HOME"

BINARY_NAME = "gpothos-generator"


def get_gpothos_home() -> Path:
    """Get the gpothos home directory path.

    Resolution order:
    1. GPOTHOS_HOME environment variable (if set)
    2. ~/.gpothos (default)

    Returns:
        Path to the gpothos home directory.
    """
    env_home = os.environ.get(GPOTHOS_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def default_bin_dir() -> Path:
    """Directory bundled with the package that holds the installed binary."""
    return Path(__file__).resolve().parent.parent / "bin"


def binary_file_name(is_windows: bool) -> str:
    """File name of the installed binary for a platform."""
    return f"{BINARY_NAME}.exe" if is_windows else BINARY_NAME


@dataclass
class GpothosPaths:
    """Resolves the install location of the delegate binary."""

    bin_dir: Path

    _CONFIG_FILE: ClassVar[str] = "config.yml"

    @classmethod
    def default(cls, install_dir: Optional[Path] = None) -> "GpothosPaths":
        """Create paths from an explicit install dir or the packaged bin dir."""
        return cls(Path(install_dir) if install_dir else default_bin_dir())

    @staticmethod
    def global_config_file() -> Path:
        """Location of the global configuration file."""
        return get_gpothos_home() / GpothosPaths._CONFIG_FILE

    def binary_path(self, is_windows: bool) -> Path:
        """Get the installed binary path.

        Args:
            is_windows: Whether the target uses the ``.exe`` suffix.

        Returns:
            Path to the installed binary.
        """
        return self.bin_dir / binary_file_name(is_windows)
