"""Command-line interface for installing the gpothos-generator binary.

``gpothos-install`` resolves the release asset for this machine, downloads it
and installs it where ``gpothos-generator`` expects to find it.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, Iterable, Optional

from gpothos.bootstrap.versions import get_package_version
from gpothos.cli.commands import Command, InstallCommand, StatusCommand
from gpothos.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from gpothos.config import load_config
from gpothos.core.errors import ConfigError
from gpothos.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpothos-install",
        description="Download and install the gpothos-generator binary for this platform.",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show gpothos version and exit.",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show the resolved artifact and install state without downloading.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: ~/.gpothos/config.yml).",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging. This is the default.",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )

    return parser


class CLIRunner:
    """Parses arguments, loads configuration and dispatches to a command."""

    def __init__(self, commands: Optional[Dict[str, Command]] = None) -> None:
        if commands is None:
            commands = {
                "install": InstallCommand(),
                "status": StatusCommand(),
            }
        self._commands = commands
        self._parser = build_parser()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Arguments, defaults to ``sys.argv[1:]``.

        Returns:
            Exit code.
        """
        args = self._parser.parse_args(None if argv is None else list(argv))

        # Progress is shown unless --quiet is given
        configure_logging(debug=args.debug, verbose=not args.quiet, quiet=args.quiet)

        if args.version:
            print(get_package_version())
            return EXIT_SUCCESS

        try:
            config = load_config(config_path=args.config)
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        command = self._commands["status" if args.status else "install"]
        LOGGER.debug(f"Running {command.name} command")
        return command.execute(args, config)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """
    return CLIRunner().run(argv)
