"""Shared fixtures for gpothos tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from gpothos.core.logging import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests away from the user's ~/.gpothos and GPOTHOS_* settings."""
    for var in (
        "GPOTHOS_RELEASE_HOST",
        "GPOTHOS_REPOSITORY",
        "GPOTHOS_VERSION",
        "GPOTHOS_BIN_DIR",
        "GPOTHOS_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("GPOTHOS_HOME", str(tmp_path / "gpothos-home"))

    yield

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True
