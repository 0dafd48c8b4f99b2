"""Tests for gpothos.core.errors."""

from __future__ import annotations

from pathlib import Path

from gpothos.core.errors import (
    DownloadFailedError,
    GpothosError,
    SpawnFailedError,
    UnsupportedPlatformError,
    WriteFailedError,
)


class TestErrorMessages:
    """Error messages carry the details an operator needs."""

    def test_unsupported_platform(self) -> None:
        error = UnsupportedPlatformError("freebsd-x64")
        assert isinstance(error, GpothosError)
        assert str(error) == "Unsupported platform: freebsd-x64"

    def test_download_failed_with_status(self) -> None:
        error = DownloadFailedError("https://github.com/a/b", status=404)
        assert "404" in str(error)
        assert "https://github.com/a/b" in str(error)

    def test_download_failed_with_cause(self) -> None:
        cause = ConnectionRefusedError("refused")
        error = DownloadFailedError("https://github.com/a/b", cause=cause)
        assert error.status is None
        assert error.cause is cause
        assert "refused" in str(error)

    def test_write_failed(self) -> None:
        error = WriteFailedError(Path("/opt/bin"), PermissionError("denied"))
        assert "/opt/bin" in str(error)

    def test_spawn_failed(self) -> None:
        error = SpawnFailedError(Path("/opt/bin/gpothos-generator"), FileNotFoundError("missing"))
        assert str(error).startswith("Failed to start subprocess")
        assert error.path == Path("/opt/bin/gpothos-generator")
