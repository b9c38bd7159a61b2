"""Tests for membersort.config — .membersort.yml parsing and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from membersort.config import (
    CONFIG_FILENAME,
    DEFAULT_EXCLUDE,
    Config,
    ConfigError,
    RuleConfig,
    load_config,
    parse_config,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestParseConfig:
    def test_empty_document_gives_defaults(self) -> None:
        config = parse_config(None)
        assert config == Config()
        assert config.rule == RuleConfig()
        assert config.rule.type_kinds == frozenset({"class"})
        assert config.exclude == DEFAULT_EXCLUDE

    def test_full_document(self) -> None:
        config = parse_config(
            {
                "version": 1,
                "rule": {
                    "enabled": True,
                    "severity": "warn",
                    "type_kinds": ["class", "struct"],
                },
                "paths": ["src", "lib"],
                "exclude": ["**/Generated/**"],
            }
        )
        assert config.rule.severity == "warn"
        assert config.rule.type_kinds == frozenset({"class", "struct"})
        assert config.paths == ("src", "lib")
        assert config.exclude == ("**/Generated/**",)

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            parse_config(["rule"])

    def test_unsupported_version(self) -> None:
        with pytest.raises(ConfigError, match="unsupported version"):
            parse_config({"version": 9})

    def test_invalid_severity(self) -> None:
        with pytest.raises(ConfigError, match="severity"):
            parse_config({"rule": {"severity": "fatal"}})

    def test_unknown_type_kind(self) -> None:
        with pytest.raises(ConfigError, match="enum"):
            parse_config({"rule": {"type_kinds": ["enum"]}})

    def test_record_is_not_a_type_kind(self) -> None:
        with pytest.raises(ConfigError, match="record"):
            parse_config({"rule": {"type_kinds": ["record"]}})

    def test_enabled_must_be_bool(self) -> None:
        with pytest.raises(ConfigError, match="enabled"):
            parse_config({"rule": {"enabled": "yes"}})

    def test_paths_must_be_strings(self) -> None:
        with pytest.raises(ConfigError, match="paths"):
            parse_config({"paths": "src"})

    def test_config_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_config({"rule": "strict"})


class TestIsExcluded:
    def test_default_excludes_build_output(self) -> None:
        config = Config()
        assert config.is_excluded("bin/Debug/App.cs")
        assert config.is_excluded("src/App/obj/Release/Gen.cs")
        assert not config.is_excluded("src/App/Binary.cs")


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == Config()

    def test_reads_project_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            "version: 1\nrule:\n  severity: warn\npaths: [src]\n"
        )
        config = load_config(tmp_path)
        assert config.rule.severity == "warn"
        assert config.paths == ("src",)

    def test_explicit_missing_file_fails(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path, tmp_path / "other.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("rule: [unclosed\n")
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path)
