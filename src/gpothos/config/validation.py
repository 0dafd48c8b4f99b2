"""Configuration validation for gpothos.

Validates known keys and types, and warns on unknown keys with
suggestions for likely typos.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from gpothos.core.errors import ConfigError
from gpothos.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_TOP_LEVEL_KEYS: Set[str] = {
    "release",
    "install_dir",
}

VALID_RELEASE_KEYS: Set[str] = {
    "host",
    "repository",
    "version",
    "timeout",
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.source}: {self.message}"
        if self.suggestion:
            text += f" (did you mean '{self.suggestion}'?)"
        return text


def _suggest(key: str, valid: Set[str]) -> Optional[str]:
    matches = get_close_matches(key, sorted(valid), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _check_unknown(
    data: Dict[str, Any],
    valid: Set[str],
    source: str,
    prefix: str = "",
) -> List[ConfigValidationWarning]:
    warnings: List[ConfigValidationWarning] = []
    for key in data:
        if key not in valid:
            warnings.append(
                ConfigValidationWarning(
                    message=f"Unknown key '{prefix}{key}'",
                    source=source,
                    key=f"{prefix}{key}",
                    suggestion=_suggest(str(key), valid),
                )
            )
    return warnings


def parse_timeout(value: Any) -> Optional[float]:
    """Parse a timeout in seconds, or None if it is not a positive number.

    Strings are accepted since ``${VAR:-30}`` expansion always yields one.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not value > 0:
        return None
    return float(value)


def validate_config(data: Dict[str, Any], source: str = "config") -> List[ConfigValidationWarning]:
    """Validate a configuration dictionary.

    Unknown keys produce warnings (also logged); wrong value types raise.

    Args:
        data: Parsed configuration.
        source: Where the data came from, used in messages.

    Returns:
        List of warnings.

    Raises:
        ConfigError: If a known key has a value of the wrong type.
    """
    warnings = _check_unknown(data, VALID_TOP_LEVEL_KEYS, source)

    release = data.get("release")
    if release is not None:
        if not isinstance(release, dict):
            raise ConfigError(f"{source}: 'release' must be a mapping")
        warnings.extend(_check_unknown(release, VALID_RELEASE_KEYS, source, prefix="release."))

        for key in ("host", "repository"):
            value = release.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{source}: 'release.{key}' must be a string")

        version = release.get("version")
        if isinstance(version, float):
            # an unquoted 1.10 would silently become "1.1"
            raise ConfigError(
                f"{source}: 'release.version' must be a quoted string, e.g. version: \"1.10\" (got {version!r})"
            )
        if version is not None and (isinstance(version, bool) or not isinstance(version, (str, int))):
            raise ConfigError(f"{source}: 'release.version' must be a string")

        timeout = release.get("timeout")
        if timeout is not None and parse_timeout(timeout) is None:
            raise ConfigError(f"{source}: 'release.timeout' must be a positive number")

    install_dir = data.get("install_dir")
    if install_dir is not None and not isinstance(install_dir, str):
        raise ConfigError(f"{source}: 'install_dir' must be a string")

    for warning in warnings:
        LOGGER.warning(str(warning))
    return warnings
