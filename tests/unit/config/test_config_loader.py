"""Tests for gpothos.config.loader."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from gpothos.config.loader import (
    dict_to_config,
    env_to_overrides,
    expand_env_vars,
    load_config,
    load_yaml_file,
    merge_configs,
)
from gpothos.core.errors import ConfigError


@pytest.fixture(autouse=True)
def pinned_version():
    with patch("gpothos.bootstrap.versions.version", return_value="1.0.0"):
        yield


def _write_global_config(content: str) -> Path:
    home = Path(os.environ["GPOTHOS_HOME"])
    home.mkdir(parents=True, exist_ok=True)
    path = home / "config.yml"
    path.write_text(content)
    return path


class TestExpandEnvVars:
    """Tests for expand_env_vars function."""

    def test_expands_simple_env_var(self) -> None:
        with patch.dict(os.environ, {"MIRROR": "mirror.example.com"}):
            assert expand_env_vars("${MIRROR}") == "mirror.example.com"

    def test_expands_env_var_with_default(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert expand_env_vars("${UNSET_VAR:-github.com}") == "github.com"

    def test_returns_empty_for_unset_without_default(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert expand_env_vars("${UNSET_VAR}") == ""

    def test_expands_nested(self) -> None:
        with patch.dict(os.environ, {"OWNER": "acme"}):
            data = {"release": {"repository": "${OWNER}/gpothos"}, "list": ["${OWNER}"]}
            assert expand_env_vars(data) == {
                "release": {"repository": "acme/gpothos"},
                "list": ["acme"],
            }

    def test_preserves_non_string_values(self) -> None:
        data = {"timeout": 30, "flag": True, "none": None}
        assert expand_env_vars(data) == data


class TestMergeConfigs:
    """Tests for merge_configs."""

    def test_deep_merge(self) -> None:
        base = {"release": {"host": "github.com", "repository": "a/b"}}
        overlay = {"release": {"host": "mirror"}, "install_dir": "/opt"}
        assert merge_configs(base, overlay) == {
            "release": {"host": "mirror", "repository": "a/b"},
            "install_dir": "/opt",
        }

    def test_does_not_mutate_base(self) -> None:
        base = {"release": {"host": "github.com"}}
        merge_configs(base, {"install_dir": "/opt"})
        assert base == {"release": {"host": "github.com"}}


class TestEnvToOverrides:
    """Tests for env_to_overrides."""

    def test_maps_variables(self) -> None:
        overrides = env_to_overrides({
            "GPOTHOS_RELEASE_HOST": "mirror.example.com",
            "GPOTHOS_VERSION": "2.0.0",
            "GPOTHOS_BIN_DIR": "/opt/gpothos",
            "UNRELATED": "x",
        })
        assert overrides == {
            "release": {"host": "mirror.example.com", "version": "2.0.0"},
            "install_dir": "/opt/gpothos",
        }

    def test_ignores_empty_values(self) -> None:
        assert env_to_overrides({"GPOTHOS_REPOSITORY": ""}) == {}


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("")
        assert load_yaml_file(path) == {}

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_yaml_file(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self) -> None:
        config = load_config(environ={})
        assert config.release.host == "github.com"
        assert config.release.repository == "gpaulo00/gpothos-generator"
        assert config.release.version == "1.0.0"
        assert config.release.timeout is None
        assert config.install_dir is None
        assert config.sources == ["defaults"]

    def test_global_config(self) -> None:
        path = _write_global_config("release:\n  host: mirror.example.com\n  timeout: 60\n")
        config = load_config(environ={})
        assert config.release.host == "mirror.example.com"
        assert config.release.timeout == 60.0
        assert f"global:{path}" in config.sources

    def test_broken_global_config_is_ignored(self) -> None:
        _write_global_config("release: [unclosed\n")
        config = load_config(environ={})
        assert config.release.host == "github.com"

    def test_custom_config_overrides_global(self, tmp_path: Path) -> None:
        _write_global_config("release:\n  host: global.example.com\n")
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  host: custom.example.com\n  version: \"1.10\"\n")

        config = load_config(config_path=custom, environ={})

        assert config.release.host == "custom.example.com"
        assert config.release.version == "1.10"

    def test_missing_custom_config(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_path=tmp_path / "missing.yml", environ={})

    def test_invalid_custom_yaml(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_path=custom, environ={})

    def test_wrong_type_in_custom_config(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  timeout: soon\n")
        with pytest.raises(ConfigError, match="timeout"):
            load_config(config_path=custom, environ={})

    def test_unquoted_decimal_version_in_custom_config(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  version: 1.10\n")
        with pytest.raises(ConfigError, match="quoted string"):
            load_config(config_path=custom, environ={})

    def test_timeout_from_env_expansion(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GPOTHOS_TEST_TIMEOUT", raising=False)
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  timeout: ${GPOTHOS_TEST_TIMEOUT:-30}\n")
        config = load_config(config_path=custom, environ={})
        assert config.release.timeout == 30.0

    def test_install_dir_rejected_in_custom_config(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text(f"install_dir: {tmp_path / 'tools'}\n")
        with pytest.raises(ConfigError, match="GPOTHOS_BIN_DIR") as exc_info:
            load_config(config_path=custom, environ={})
        assert "install_dir" in str(exc_info.value)

    def test_install_dir_from_global_config(self, tmp_path: Path) -> None:
        _write_global_config(f"install_dir: {tmp_path / 'tools'}\n")
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  host: custom.example.com\n")
        config = load_config(config_path=custom, environ={})
        assert config.install_dir == tmp_path / "tools"

    def test_environment_has_highest_precedence(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  version: 1.1.0\n")
        config = load_config(
            config_path=custom,
            environ={"GPOTHOS_VERSION": "3.0.0", "GPOTHOS_BIN_DIR": str(tmp_path / "bin")},
        )
        assert config.release.version == "3.0.0"
        assert config.install_dir == tmp_path / "bin"
        assert config.sources[-1] == "env"

    def test_reads_process_environment_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GPOTHOS_REPOSITORY", "fork/gpothos-generator")
        assert load_config().release.repository == "fork/gpothos-generator"


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_blank_values_fall_back_to_defaults(self) -> None:
        config = dict_to_config({"release": {"host": "", "repository": None}})
        assert config.release.host == "github.com"
        assert config.release.repository == "gpaulo00/gpothos-generator"
