"""
Bootstrap module for gpothos binary management.

This module handles:
- Platform detection (OS + architecture + libc flavor)
- Artifact download and installation
- Install path resolution and binary validation
"""

from gpothos.bootstrap.download import ArtifactFetcher, build_download_url
from gpothos.bootstrap.libc import LibcDetector, LibcFlavor, ProbeLibcDetector
from gpothos.bootstrap.paths import GpothosPaths, get_gpothos_home
from gpothos.bootstrap.platform import (
    ArtifactDescriptor,
    PlatformInfo,
    get_platform_info,
    resolve_artifact,
)
from gpothos.bootstrap.validation import ToolStatus, validate_binary

__all__ = [
    "ArtifactDescriptor",
    "ArtifactFetcher",
    "build_download_url",
    "GpothosPaths",
    "get_gpothos_home",
    "get_platform_info",
    "LibcDetector",
    "LibcFlavor",
    "PlatformInfo",
    "ProbeLibcDetector",
    "resolve_artifact",
    "ToolStatus",
    "validate_binary",
]
