"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

from gpothos.bootstrap.download import build_download_url
from gpothos.bootstrap.libc import LibcDetector
from gpothos.bootstrap.paths import GpothosPaths
from gpothos.bootstrap.platform import PlatformInfo, get_platform_info, resolve_artifact
from gpothos.bootstrap.validation import ToolStatus, validate_binary
from gpothos.cli.commands import Command
from gpothos.cli.exit_codes import EXIT_BOOTSTRAP_FAILURE, EXIT_SUCCESS
from gpothos.core.errors import UnsupportedPlatformError

if TYPE_CHECKING:
    from gpothos.config.models import GpothosConfig

_STATUS_LABELS = {
    ToolStatus.PRESENT: "installed",
    ToolStatus.MISSING: "not installed",
    ToolStatus.NOT_EXECUTABLE: "present but not executable",
}


class StatusCommand(Command):
    """Shows the resolved artifact and install state without downloading."""

    def __init__(
        self,
        platform_info: Optional[PlatformInfo] = None,
        detector: Optional[LibcDetector] = None,
    ) -> None:
        self._platform_info = platform_info
        self._detector = detector

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "GpothosConfig") -> int:
        platform_info = self._platform_info or get_platform_info()
        paths = GpothosPaths.default(config.install_dir)
        binary_path = paths.binary_path(platform_info.is_windows)

        print(f"Platform: {platform_info.key}")

        try:
            artifact = resolve_artifact(platform_info, self._detector)
        except UnsupportedPlatformError as e:
            print(f"Artifact: none ({e})")
            return EXIT_BOOTSTRAP_FAILURE

        if artifact.libc is not None:
            print(f"C library: {artifact.libc.value}")
        print(f"Artifact: {artifact.name}")
        url = build_download_url(
            config.release.host,
            config.release.repository,
            config.release.version,
            artifact.name,
        )
        print(f"Download URL: {url}")
        print(f"Binary: {binary_path} ({_STATUS_LABELS[validate_binary(binary_path)]})")
        return EXIT_SUCCESS
