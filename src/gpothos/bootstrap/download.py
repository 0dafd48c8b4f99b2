"""Artifact download and installation.

Downloads a release asset over HTTPS and installs it as the gpothos binary.
Redirects are handled by hand: GitHub answers release downloads with a single
302 to its object storage, so exactly one hop is followed and any further
redirect is treated as the final (failed) response.
"""

from __future__ import annotations

import ssl
import urllib.request
from contextlib import closing, contextmanager
from http.client import HTTPException
from pathlib import Path
from typing import IO, Any, Callable, Iterator, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin

from gpothos.bootstrap.paths import GpothosPaths
from gpothos.bootstrap.platform import ArtifactDescriptor
from gpothos.core.errors import DownloadFailedError, WriteFailedError
from gpothos.core.logging import get_logger

LOGGER = get_logger(__name__)

DOWNLOAD_URL_TEMPLATE = "https://{host}/{repository}/releases/download/v{version}/{artifact}"

REDIRECT_STATUSES = frozenset({301, 302})
MAX_REDIRECT_DEPTH = 1

CHUNK_SIZE = 64 * 1024
EXECUTABLE_MODE = 0o755

Opener = Callable[..., Any]

# http.client errors such as IncompleteRead are not OSErrors
TRANSPORT_ERRORS = (URLError, OSError, HTTPException)


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Surfaces 3xx responses to the caller instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[override]
        return None


def secure_urlopen(url: str, timeout: Optional[float] = None) -> Any:
    """Open a URL with certificate verification and no automatic redirects.

    Non-2xx responses are returned rather than raised so the caller can
    inspect the status and ``Location`` header.

    Args:
        url: URL to open.
        timeout: Optional socket timeout in seconds.

    Returns:
        A response object supporting ``getcode()``, ``headers``, ``read()``
        and ``close()``.
    """
    opener = urllib.request.build_opener(
        _NoRedirectHandler(),
        urllib.request.HTTPSHandler(context=ssl.create_default_context()),
    )
    try:
        if timeout is None:
            return opener.open(url)
        return opener.open(url, timeout=timeout)
    except HTTPError as e:
        # HTTPError doubles as the response for 3xx/4xx/5xx statuses
        return e


def build_download_url(host: str, repository: str, version: str, artifact: str) -> str:
    """Build the release download URL for an artifact."""
    return DOWNLOAD_URL_TEMPLATE.format(
        host=host,
        repository=repository,
        version=version.lstrip("v"),
        artifact=artifact,
    )


@contextmanager
def scoped_destination(path: Path) -> Iterator[IO[bytes]]:
    """Open ``path`` for writing and remove it if the block fails.

    Any exception escaping the block (including interruption) closes the
    handle and deletes the partial file before propagating.

    Raises:
        WriteFailedError: If the file cannot be opened.
    """
    try:
        handle = open(path, "wb")
    except OSError as e:
        raise WriteFailedError(path, e) from e

    try:
        yield handle
    except BaseException:
        handle.close()
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            LOGGER.warning(f"Could not remove partial download {path}: {e}")
        raise
    finally:
        handle.close()


class ArtifactFetcher:
    """Downloads a release asset and installs it as the gpothos binary."""

    def __init__(
        self,
        paths: GpothosPaths,
        host: str,
        repository: str,
        timeout: Optional[float] = None,
        urlopen: Opener = secure_urlopen,
    ) -> None:
        """Initialize ArtifactFetcher.

        Args:
            paths: Install location.
            host: Release host, e.g. ``github.com``.
            repository: ``owner/name`` of the release repository.
            timeout: Optional socket timeout in seconds (none by default).
            urlopen: Callable returning a response for a URL. Must not follow
                redirects on its own.
        """
        self._paths = paths
        self._host = host
        self._repository = repository
        self._timeout = timeout
        self._urlopen = urlopen

    def build_url(self, artifact: ArtifactDescriptor, version: str) -> str:
        return build_download_url(self._host, self._repository, version, artifact.name)

    def destination(self, artifact: ArtifactDescriptor) -> Path:
        return self._paths.binary_path(artifact.platform.is_windows)

    def fetch(self, artifact: ArtifactDescriptor, version: str) -> Path:
        """Download ``artifact`` at ``version`` and install it.

        Args:
            artifact: Resolved release asset.
            version: Release version, with or without a leading ``v``.

        Returns:
            Path of the installed binary.

        Raises:
            DownloadFailedError: Non-2xx final status or transport error.
            WriteFailedError: Local filesystem error.
        """
        url = self.build_url(artifact, version)
        destination = self.destination(artifact)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteFailedError(destination.parent, e) from e

        LOGGER.info(f"Downloading {artifact.name} from {url}...")

        with scoped_destination(destination) as handle:
            response = self._request(url)
            with closing(response):
                status = response.getcode()
                if status is None or not 200 <= status < 300:
                    raise DownloadFailedError(url, status=status)
                self._stream(response, handle, url, destination)
            handle.close()

            if not artifact.platform.is_windows:
                try:
                    destination.chmod(EXECUTABLE_MODE)
                except OSError as e:
                    raise WriteFailedError(destination, e) from e

        LOGGER.info("Download complete.")
        LOGGER.debug(f"Installed {artifact.name} to {destination}")
        return destination

    def _open(self, url: str) -> Any:
        try:
            if self._timeout is None:
                return self._urlopen(url)
            return self._urlopen(url, timeout=self._timeout)
        except (URLError, OSError, HTTPException, ValueError) as e:
            raise DownloadFailedError(url, cause=e) from e

    def _request(self, url: str) -> Any:
        """GET ``url``, following at most MAX_REDIRECT_DEPTH redirects.

        Returns:
            The final response, which may itself be an unfollowed redirect.
        """
        depth = 0
        response = self._open(url)
        while response.getcode() in REDIRECT_STATUSES and depth < MAX_REDIRECT_DEPTH:
            location = response.headers.get("Location")
            status = response.getcode()
            response.close()
            if not location:
                raise DownloadFailedError(url, status=status)

            url = urljoin(url, location)
            depth += 1
            LOGGER.debug(f"Following redirect ({status}) to {url}")
            response = self._open(url)
        return response

    def _stream(self, response: Any, handle: IO[bytes], url: str, destination: Path) -> None:
        """Copy the response body into ``handle``.

        http.client returns a short read without raising when the server
        closes early, so the byte count is checked against Content-Length.
        """
        expected = _content_length(response)
        written = 0
        while True:
            try:
                chunk = response.read(CHUNK_SIZE)
            except TRANSPORT_ERRORS as e:
                raise DownloadFailedError(url, cause=e) from e
            if not chunk:
                break
            try:
                handle.write(chunk)
            except OSError as e:
                raise WriteFailedError(destination, e) from e
            written += len(chunk)

        if expected is not None and written != expected:
            raise DownloadFailedError(
                url,
                cause=ConnectionError(f"incomplete body: received {written} of {expected} bytes"),
            )


def _content_length(response: Any) -> Optional[int]:
    """Declared body size, or None when absent or unparseable."""
    value = response.headers.get("Content-Length")
    if value is None:
        return None
    try:
        length = int(value)
    except (TypeError, ValueError):
        return None
    return length if length >= 0 else None
