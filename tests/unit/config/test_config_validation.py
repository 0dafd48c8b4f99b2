"""Tests for gpothos.config.validation."""

from __future__ import annotations

import pytest

from gpothos.config.validation import validate_config
from gpothos.core.errors import ConfigError


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid_config_has_no_warnings(self) -> None:
        data = {
            "release": {"host": "github.com", "repository": "a/b", "version": "1.0.0", "timeout": 10},
            "install_dir": "/opt/gpothos",
        }
        assert validate_config(data) == []

    def test_unknown_top_level_key_suggests(self) -> None:
        warnings = validate_config({"instal_dir": "/opt"}, source="config.yml")
        assert len(warnings) == 1
        assert warnings[0].key == "instal_dir"
        assert warnings[0].suggestion == "install_dir"
        assert "config.yml" in str(warnings[0])
        assert "did you mean 'install_dir'" in str(warnings[0])

    def test_unknown_release_key(self) -> None:
        warnings = validate_config({"release": {"repo": "a/b"}})
        assert [w.key for w in warnings] == ["release.repo"]
        assert warnings[0].suggestion is None

    def test_integer_version_accepted(self) -> None:
        assert validate_config({"release": {"version": 2}}) == []

    def test_unquoted_decimal_version_rejected(self) -> None:
        # YAML reads version: 1.10 as the float 1.1
        with pytest.raises(ConfigError, match="quoted string"):
            validate_config({"release": {"version": 1.1}}, source="custom.yml")

    @pytest.mark.parametrize("timeout", ["30", " 2.5 ", 30, 2.5])
    def test_numeric_timeout_accepted(self, timeout: object) -> None:
        assert validate_config({"release": {"timeout": timeout}}) == []

    @pytest.mark.parametrize(
        "data",
        [
            {"release": "github.com"},
            {"release": {"host": 42}},
            {"release": {"version": ["1"]}},
            {"release": {"timeout": -1}},
            {"release": {"timeout": True}},
            {"release": {"timeout": "soon"}},
            {"release": {"timeout": "0"}},
            {"release": {"version": True}},
            {"install_dir": 5},
        ],
    )
    def test_wrong_types_raise(self, data: dict) -> None:
        with pytest.raises(ConfigError):
            validate_config(data)
