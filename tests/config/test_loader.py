"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from hcenav.config.loader import (
    WORKSPACE_CONFIG_NAME,
    _deep_merge,
    _load_yaml,
    load_config,
)
from hcenav.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path) -> Iterator[None]:
    """Point the global config at a file that does not exist."""
    with patch("hcenav.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml"):
        yield


@pytest.fixture(autouse=True)
def clean_env() -> Iterator[None]:
    """Drop HCENAV__ variables inherited from the developer's shell."""
    keep = {k: v for k, v in os.environ.items() if not k.upper().startswith("HCENAV__")}
    with patch.dict(os.environ, keep, clear=True):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("server:\n  host: http://hce:8080\n")

        assert _load_yaml(yaml_file) == {"server": {"host": "http://hce:8080"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("server:\n  host:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_dicts_merged(self) -> None:
        base = {"server": {"host": "http://a", "accept_gzip": False}}
        override = {"server": {"host": "http://b"}}

        assert _deep_merge(base, override) == {
            "server": {"host": "http://b", "accept_gzip": False}
        }

    def test_base_not_mutated(self) -> None:
        base = {"server": {"host": "http://a"}}
        _deep_merge(base, {"server": {"host": "http://b"}})

        assert base == {"server": {"host": "http://a"}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.server.host == "http://localhost:8080"

    def test_workspace_yaml_applied(self, tmp_path: Path) -> None:
        (tmp_path / WORKSPACE_CONFIG_NAME).write_text("server:\n  host: http://ws:1234\n")

        config = load_config(tmp_path)

        assert config.server.host == "http://ws:1234"

    def test_workspace_yaml_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text(
            "server:\n  host: http://global:1\n  references_per_page: 50\n"
        )
        (tmp_path / WORKSPACE_CONFIG_NAME).write_text("server:\n  host: http://ws:2\n")

        with patch("hcenav.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.server.host == "http://ws:2"
        assert config.server.references_per_page == 50

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        (tmp_path / WORKSPACE_CONFIG_NAME).write_text("server:\n  host: http://ws:2\n")

        with patch.dict(os.environ, {"HCENAV__SERVER__HOST": "http://env:3"}):
            config = load_config(tmp_path)

        assert config.server.host == "http://env:3"

    def test_kwargs_override_env(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"HCENAV__SERVER__HOST": "http://env:3"}):
            config = load_config(tmp_path, server={"host": "http://kw:4"})

        assert config.server.host == "http://kw:4"

    def test_explicit_config_path_used(self, tmp_path: Path) -> None:
        explicit = tmp_path / "custom.yaml"
        explicit.write_text("index:\n  index_directory: .hce\n")

        config = load_config(tmp_path, config_path=explicit)

        assert config.index.index_directory == ".hce"

    def test_missing_explicit_config_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, config_path=tmp_path / "missing.yaml")

        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / WORKSPACE_CONFIG_NAME).write_text("server:\n  host: not-a-url\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "server" in exc_info.value.details["field"]

    def test_unset_level_not_marked_explicit(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.logging.level == "INFO"
        assert "level" not in config.logging.model_fields_set

    def test_yaml_level_marked_explicit(self, tmp_path: Path) -> None:
        (tmp_path / WORKSPACE_CONFIG_NAME).write_text("logging:\n  level: INFO\n")

        config = load_config(tmp_path)

        assert "level" in config.logging.model_fields_set
