"""Configuration loading and merging.

Handles loading configuration with:
- Packaged release coordinates (pyproject.toml / distribution metadata)
- Global config (~/.gpothos/config.yml)
- Custom config file (--config)
- Environment variable overrides (GPOTHOS_*)
- Environment variable expansion (${VAR}) inside YAML values
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from gpothos.bootstrap.paths import GpothosPaths
from gpothos.bootstrap.versions import get_release_defaults
from gpothos.config.models import GpothosConfig, ReleaseConfig
from gpothos.config.validation import parse_timeout, validate_config
from gpothos.core.errors import ConfigError
from gpothos.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

# Environment overrides, highest precedence
ENV_OVERRIDES: Dict[str, tuple] = {
    "GPOTHOS_RELEASE_HOST": ("release", "host"),
    "GPOTHOS_REPOSITORY": ("release", "repository"),
    "GPOTHOS_VERSION": ("release", "version"),
    "GPOTHOS_BIN_DIR": ("install_dir",),
}


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GpothosConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. GPOTHOS_* environment variables
    2. Custom config file (config_path)
    3. Global config (~/.gpothos/config.yml)
    4. Packaging metadata and built-in defaults

    Args:
        config_path: Optional path to a custom config file (--config flag).
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        Merged GpothosConfig instance.

    Raises:
        ConfigError: If the custom config file doesn't exist or can't be parsed.
    """
    env = os.environ if environ is None else environ
    sources: List[str] = ["defaults"]
    merged: Dict[str, Any] = {"release": get_release_defaults()}

    # Layer 1: Global config
    global_path = GpothosPaths.global_config_file()
    if global_path.exists():
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (ConfigError, yaml.YAMLError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Custom config
    if config_path:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            custom_dict = load_yaml_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e
        validate_config(custom_dict, source=str(config_path))
        if "install_dir" in custom_dict:
            # gpothos-generator never sees --config, so it would look elsewhere
            raise ConfigError(
                f"{config_path}: 'install_dir' cannot be set in a --config file; "
                f"set it in {GpothosPaths.global_config_file()} or via GPOTHOS_BIN_DIR "
                "so gpothos-generator finds the installed binary"
            )
        merged = merge_configs(merged, custom_dict)
        sources.append(f"custom:{config_path}")
        LOGGER.debug(f"Loaded custom config from {config_path}")

    # Layer 3: Environment overrides
    env_overrides = env_to_overrides(env)
    if env_overrides:
        merged = merge_configs(merged, env_overrides)
        sources.append("env")
        LOGGER.debug(f"Applied environment overrides: {sorted(env_overrides)}")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def env_to_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Convert GPOTHOS_* environment variables into a config overlay.

    Empty values are ignored.
    """
    overrides: Dict[str, Any] = {}
    for var, key_path in ENV_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        target = overrides
        for key in key_path[:-1]:
            target = target.setdefault(key, {})
        target[key_path[-1]] = value
    return overrides


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Args:
        base: Base configuration dictionary.
        overlay: Overlay configuration to merge on top.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> GpothosConfig:
    """Convert a merged dict to a typed GpothosConfig."""
    release_data = data.get("release") or {}
    defaults = ReleaseConfig()

    timeout = release_data.get("timeout")
    release = ReleaseConfig(
        host=release_data.get("host") or defaults.host,
        repository=release_data.get("repository") or defaults.repository,
        version=str(release_data.get("version") or ""),
        timeout=parse_timeout(timeout) if timeout is not None else None,
    )

    install_dir = data.get("install_dir")
    return GpothosConfig(
        release=release,
        install_dir=Path(install_dir).expanduser() if install_dir else None,
    )
