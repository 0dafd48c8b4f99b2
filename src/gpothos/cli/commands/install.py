"""Install command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

from gpothos.bootstrap.download import ArtifactFetcher
from gpothos.bootstrap.libc import LibcDetector
from gpothos.bootstrap.paths import GpothosPaths
from gpothos.bootstrap.platform import PlatformInfo, get_platform_info, resolve_artifact
from gpothos.cli.commands import Command
from gpothos.cli.exit_codes import EXIT_BOOTSTRAP_FAILURE, EXIT_SUCCESS
from gpothos.core.errors import DownloadFailedError, UnsupportedPlatformError, WriteFailedError
from gpothos.core.logging import get_logger

if TYPE_CHECKING:
    from gpothos.config.models import GpothosConfig

LOGGER = get_logger(__name__)


class InstallCommand(Command):
    """Downloads and installs the binary for the current platform."""

    def __init__(
        self,
        platform_info: Optional[PlatformInfo] = None,
        detector: Optional[LibcDetector] = None,
        fetcher: Optional[ArtifactFetcher] = None,
    ) -> None:
        """Initialize InstallCommand.

        Args:
            platform_info: Platform override, detected when omitted.
            detector: libc detector override.
            fetcher: Fetcher override, built from config when omitted.
        """
        self._platform_info = platform_info
        self._detector = detector
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: "GpothosConfig") -> int:
        """Resolve, download and install the binary.

        Args:
            args: Parsed command-line arguments.
            config: Loaded gpothos configuration.

        Returns:
            EXIT_SUCCESS, or EXIT_BOOTSTRAP_FAILURE on any install error.
        """
        platform_info = self._platform_info or get_platform_info()

        try:
            artifact = resolve_artifact(platform_info, self._detector)
        except UnsupportedPlatformError as e:
            LOGGER.error(str(e))
            return EXIT_BOOTSTRAP_FAILURE

        fetcher = self._fetcher or ArtifactFetcher(
            GpothosPaths.default(config.install_dir),
            host=config.release.host,
            repository=config.release.repository,
            timeout=config.release.timeout,
        )

        try:
            fetcher.fetch(artifact, config.release.version)
        except (DownloadFailedError, WriteFailedError) as e:
            LOGGER.error(str(e))
            return EXIT_BOOTSTRAP_FAILURE

        return EXIT_SUCCESS
