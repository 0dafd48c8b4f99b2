"""C-library flavor detection for Linux hosts.

glibc and musl builds of the generator are not interchangeable, so the
installer needs to know which one the host links against before it picks an
artifact. Detection sits behind the :class:`LibcDetector` interface; the
default :class:`ProbeLibcDetector` inspects the filesystem and ``ldd``.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from gpothos.core.logging import get_logger

LOGGER = get_logger(__name__)

# Present on Alpine, the most common musl distribution
DEFAULT_MARKER_FILE = Path("/etc/alpine-release")
DEFAULT_PROBE_COMMAND = ("ldd", "--version")
DEFAULT_MARKER_SUBSTRING = "musl"


class LibcFlavor(str, Enum):
    """C-library flavor of a Linux host."""

    STANDARD = "glibc"
    ALTERNATIVE = "musl"


class LibcDetector(ABC):
    """Capability that reports the host's C-library flavor."""

    @abstractmethod
    def detect(self) -> LibcFlavor:
        """Detect the C-library flavor.

        Returns:
            The detected flavor. Implementations should return
            ``LibcFlavor.STANDARD`` when detection is inconclusive.
        """


class ProbeLibcDetector(LibcDetector):
    """Detects musl via a distribution marker file and ``ldd --version``.

    The marker file short-circuits to musl. Otherwise the combined output of
    the probe command is searched for the marker substring. A missing probe
    command, an OS error or a timeout all fall back to glibc.
    """

    def __init__(
        self,
        marker_file: Path = DEFAULT_MARKER_FILE,
        command: Sequence[str] = DEFAULT_PROBE_COMMAND,
        marker: str = DEFAULT_MARKER_SUBSTRING,
        timeout: float = 5,
    ) -> None:
        self._marker_file = marker_file
        self._command = list(command)
        self._marker = marker
        self._timeout = timeout

    def detect(self) -> LibcFlavor:
        if self._marker_file.exists():
            LOGGER.debug(f"Found {self._marker_file}, assuming musl")
            return LibcFlavor.ALTERNATIVE

        output = self._probe_output()
        if output is not None and self._marker in output:
            LOGGER.debug(f"'{' '.join(self._command)}' reports {self._marker}")
            return LibcFlavor.ALTERNATIVE

        return LibcFlavor.STANDARD

    def _probe_output(self) -> Optional[str]:
        """Run the probe command and return stdout and stderr combined.

        musl's ldd exits non-zero while printing its banner, so the exit
        status is ignored.
        """
        try:
            result = subprocess.run(
                self._command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except (subprocess.SubprocessError, FileNotFoundError, OSError) as e:
            LOGGER.debug(f"libc probe unavailable ({e}), assuming glibc")
            return None
        return result.stdout or ""
