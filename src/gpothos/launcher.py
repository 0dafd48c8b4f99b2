"""Launcher for the installed gpothos-generator binary.

Runs the binary installed by ``gpothos-install`` as a child process with the
caller's arguments and standard streams, and exits with its exit code. The
launcher defines no options of its own.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from gpothos.bootstrap.paths import GpothosPaths
from gpothos.bootstrap.platform import get_platform_info
from gpothos.cli.exit_codes import EXIT_SPAWN_FAILED
from gpothos.config import load_config
from gpothos.core.errors import SpawnFailedError
from gpothos.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)

DEBUG_ENV = "GPOTHOS_DEBUG"


def installed_binary_path(install_dir: Optional[Path] = None) -> Path:
    """Path of the installed binary for the current platform.

    Uses the same naming convention as the installer so both sides agree
    without any persisted state.
    """
    paths = GpothosPaths.default(install_dir)
    return paths.binary_path(get_platform_info().is_windows)


def exit_status(returncode: int) -> int:
    """Translate a child return code into a process exit status.

    A child killed by signal N (negative return code) maps to 128 + N, as
    POSIX shells report it.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_binary(binary: Path, args: Sequence[str]) -> int:
    """Run ``binary`` with ``args`` and wait for it.

    Standard input, output and error are inherited untouched.

    Args:
        binary: Executable to run.
        args: Arguments passed through unchanged.

    Returns:
        The child's exit status.

    Raises:
        SpawnFailedError: If the child cannot be started.
    """
    cmd: List[str] = [str(binary), *args]
    LOGGER.debug(f"Running: {cmd}")

    try:
        process = subprocess.Popen(cmd)
    except (OSError, ValueError) as e:
        raise SpawnFailedError(binary, e) from e

    while True:
        try:
            return exit_status(process.wait())
        except KeyboardInterrupt:
            # The child got the same signal; let it decide how to exit
            continue


def launch(argv: Optional[Sequence[str]] = None) -> int:
    """Delegate to the installed binary.

    Args:
        argv: Arguments for the binary, defaults to ``sys.argv[1:]``.

    Returns:
        The child's exit status, or EXIT_SPAWN_FAILED if it could not start.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    # The global config never raises; problems there are logged as warnings
    binary = installed_binary_path(load_config().install_dir)

    try:
        return run_binary(binary, args)
    except SpawnFailedError as e:
        LOGGER.error(str(e))
        LOGGER.error(f"Binary path: {e.path}")
        if not e.path.exists():
            LOGGER.error("Run 'gpothos-install' to download the binary for this platform.")
        return EXIT_SPAWN_FAILED


def main() -> NoReturn:
    """Console script entry point."""
    configure_logging(debug=bool(os.environ.get(DEBUG_ENV)))
    sys.exit(launch())
