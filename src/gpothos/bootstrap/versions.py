"""Release coordinates from packaging metadata.

The release version is the version of this distribution: each shim release
installs the generator binary published under the same tag. The release host
and repository come from ``[tool.gpothos.release]`` in pyproject.toml when
running from a source checkout, with hard-coded fallbacks for installed
packages.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Optional

DISTRIBUTION_NAME = "gpothos-generator"

# Kept in sync with pyproject.toml [tool.gpothos.release]
_FALLBACK_RELEASE: Dict[str, str] = {
    "host": "github.com",
    "repository": "gpaulo00/gpothos-generator",
}


def get_tomllib() -> Optional[Any]:
    """Return the TOML parser module, or None if unavailable."""
    if sys.version_info >= (3, 11):
        import tomllib

        return tomllib
    try:
        import tomli
    except ImportError:
        return None
    return tomli


def get_package_version() -> str:
    """Get the installed distribution version."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        # Source checkout without built metadata
        from gpothos import __version__

        return __version__


@lru_cache(maxsize=1)
def _load_pyproject_release() -> Dict[str, str]:
    """Load release coordinates from pyproject.toml.

    Returns:
        Dictionary with ``host`` and ``repository`` keys.
    """
    release = _FALLBACK_RELEASE.copy()

    tomllib = get_tomllib()
    if tomllib is None:
        return release

    # Structure: src/gpothos/bootstrap/versions.py -> ../../../pyproject.toml
    pyproject_path = Path(__file__).parent.parent.parent.parent / "pyproject.toml"
    if not pyproject_path.exists():
        return release

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, ValueError):
        return release

    section = data.get("tool", {}).get("gpothos", {}).get("release", {})
    for key, value in section.items():
        if key in release and isinstance(value, str) and value:
            release[key] = value
    return release


def get_release_defaults() -> Dict[str, str]:
    """Get the packaged release coordinates.

    Returns:
        Dictionary with ``host``, ``repository`` and ``version`` keys.
    """
    defaults = _load_pyproject_release().copy()
    defaults["version"] = get_package_version()
    return defaults
