"""Platform detection and artifact resolution.

Maps the running host to one of the prebuilt gpothos-generator release
assets. Keys follow the ``{os}-{arch}`` convention used by the release
pipeline (``linux-x64``, ``darwin-arm64``, ``win32-x64``...).
"""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from gpothos.bootstrap.libc import LibcDetector, LibcFlavor, ProbeLibcDetector
from gpothos.core.errors import UnsupportedPlatformError
from gpothos.core.logging import get_logger

LOGGER = get_logger(__name__)

_OS_ALIASES: Mapping[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "win32",
    "win32": "win32",
}

_ARCH_ALIASES: Mapping[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

SUPPORTED_ARTIFACTS: Mapping[str, str] = MappingProxyType({
    "linux-x64": "gpothos-linux-amd64",
    "linux-arm64": "gpothos-linux-arm64",
    "darwin-x64": "gpothos-darwin-amd64",
    "darwin-arm64": "gpothos-darwin-arm64",
    "win32-x64": "gpothos-windows-amd64.exe",
})

# Only linux-x64 ships a separate musl build
LIBC_PROBED_KEY = "linux-x64"
MUSL_ARTIFACT = "gpothos-linux-musl-amd64"


@dataclass(frozen=True)
class PlatformInfo:
    """Normalized host operating system and CPU architecture."""

    os: str
    arch: str

    @property
    def key(self) -> str:
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "win32"


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A resolved release asset for one platform."""

    name: str
    platform: PlatformInfo
    libc: Optional[LibcFlavor] = None


def normalize_os(system: str) -> str:
    """Normalize an OS name; unknown names are lower-cased and kept."""
    value = system.strip().lower()
    return _OS_ALIASES.get(value, value)


def normalize_arch(machine: str) -> str:
    """Normalize a CPU architecture name; unknown names are lower-cased and kept."""
    value = machine.strip().lower()
    return _ARCH_ALIASES.get(value, value)


def get_platform_info() -> PlatformInfo:
    """Detect the current platform.

    Returns:
        PlatformInfo for the running interpreter's host.
    """
    return PlatformInfo(
        os=normalize_os(_platform.system()),
        arch=normalize_arch(_platform.machine()),
    )


def resolve_artifact(
    platform_info: PlatformInfo,
    detector: Optional[LibcDetector] = None,
) -> ArtifactDescriptor:
    """Resolve the release asset for a platform.

    Args:
        platform_info: Platform to resolve.
        detector: libc detector used for linux-x64 only. Defaults to
            :class:`ProbeLibcDetector`.

    Returns:
        The artifact descriptor.

    Raises:
        UnsupportedPlatformError: If no asset is published for the platform.
    """
    key = platform_info.key
    name = SUPPORTED_ARTIFACTS.get(key)
    if name is None:
        raise UnsupportedPlatformError(key)

    if key != LIBC_PROBED_KEY:
        return ArtifactDescriptor(name=name, platform=platform_info)

    flavor = (detector or ProbeLibcDetector()).detect()
    if flavor is LibcFlavor.ALTERNATIVE:
        LOGGER.info("Detected Alpine/Musl environment. Switching to musl binary.")
        name = MUSL_ARTIFACT
    return ArtifactDescriptor(name=name, platform=platform_info, libc=flavor)
