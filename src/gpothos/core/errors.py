"""Error types raised while installing or launching the gpothos binary."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class GpothosError(Exception):
    """Base class for all gpothos errors."""


class ConfigError(GpothosError):
    """Configuration loading or parsing error."""


class UnsupportedPlatformError(GpothosError):
    """No prebuilt artifact exists for the host platform."""

    def __init__(self, platform_key: str) -> None:
        self.platform_key = platform_key
        super().__init__(f"Unsupported platform: {platform_key}")


class DownloadFailedError(GpothosError):
    """The artifact could not be retrieved.

    Raised for a non-2xx final HTTP status or a transport error.
    """

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.url = url
        self.status = status
        self.cause = cause
        if status is not None:
            message = f"Failed to download binary. Status Code: {status}. URL attempted: {url}"
        else:
            message = f"Error downloading binary from {url}: {cause}"
        super().__init__(message)


class WriteFailedError(GpothosError):
    """A local filesystem operation failed during installation."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class SpawnFailedError(GpothosError):
    """The installed binary could not be started."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to start subprocess: {cause}")
