"""Logging helpers for gpothos.

All loggers live under the ``gpothos`` namespace and write to stderr so the
delegated binary keeps exclusive use of stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "gpothos"

_LOG_FORMAT = "%(levelname)s: %(message)s"
_DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the gpothos namespace.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure the gpothos root logger.

    Level resolution: debug > quiet > verbose > default (WARNING).
    Calling this more than once replaces the previously installed handler.

    Args:
        debug: Enable debug output.
        verbose: Enable info-level output.
        quiet: Only show errors.
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, "_gpothos_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_DEBUG_LOG_FORMAT if debug else _LOG_FORMAT))
    handler._gpothos_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
