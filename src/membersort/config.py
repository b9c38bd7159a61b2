"""Project configuration: parse and validate ``.membersort.yml``."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from membersort.core.errors import MembersortError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONFIG_FILENAME = ".membersort.yml"
SUPPORTED_SCHEMA_VERSIONS: frozenset[int] = frozenset({1})
VALID_SEVERITIES: frozenset[str] = frozenset({"error", "warn"})
VALID_TYPE_KINDS: frozenset[str] = frozenset({"class", "struct", "interface"})
DEFAULT_EXCLUDE: tuple[str, ...] = ("**/bin/**", "**/obj/**")
SOURCE_EXTENSIONS: frozenset[str] = frozenset({".cs"})


class ConfigError(MembersortError, ValueError):
    """Raised when the configuration file is invalid."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleConfig:
    """Per-project overrides of the rule's defaults."""

    enabled: bool = True
    severity: str = "error"  # "error" | "warn"
    type_kinds: frozenset[str] = frozenset({"class"})


@dataclass(frozen=True)
class Config:
    """Resolved project configuration."""

    rule: RuleConfig = field(default_factory=RuleConfig)
    paths: tuple[str, ...] = (".",)
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE

    def is_excluded(self, rel_path: str) -> bool:
        """Return True if *rel_path* (POSIX, project-relative) matches an exclude glob."""
        candidate = rel_path if rel_path.startswith("/") else f"/{rel_path}"
        return any(
            fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(candidate, pattern)
            for pattern in self.exclude
        )


# ---------------------------------------------------------------------------
# YAML parsing
# ---------------------------------------------------------------------------


def _string_list(value: Any, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = f"{CONFIG_FILENAME}: '{key}' must be a list of strings"
        raise ConfigError(msg)
    return tuple(value)


def _parse_rule(data: Any) -> RuleConfig:
    if data is None:
        return RuleConfig()
    if not isinstance(data, dict):
        msg = f"{CONFIG_FILENAME}: 'rule' must be a mapping"
        raise ConfigError(msg)

    enabled = data.get("enabled", True)
    if not isinstance(enabled, bool):
        msg = f"{CONFIG_FILENAME}: 'rule.enabled' must be true or false"
        raise ConfigError(msg)

    severity = str(data.get("severity", "error"))
    if severity not in VALID_SEVERITIES:
        msg = (
            f"{CONFIG_FILENAME}: invalid severity '{severity}', "
            f"must be one of {sorted(VALID_SEVERITIES)}"
        )
        raise ConfigError(msg)

    kinds = _string_list(data.get("type_kinds", ["class"]), "rule.type_kinds")
    unknown = sorted(set(kinds) - VALID_TYPE_KINDS)
    if unknown:
        msg = (
            f"{CONFIG_FILENAME}: unknown type kinds {unknown}, "
            f"expected a subset of {sorted(VALID_TYPE_KINDS)}"
        )
        raise ConfigError(msg)

    return RuleConfig(enabled=enabled, severity=severity, type_kinds=frozenset(kinds))


def parse_config(data: Any) -> Config:
    """Validate an already-loaded YAML document and build a Config.

    An empty document yields the defaults.
    """
    if data is None:
        return Config()
    if not isinstance(data, dict):
        msg = f"{CONFIG_FILENAME} must be a YAML mapping"
        raise ConfigError(msg)

    version = data.get("version", 1)
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        expected = sorted(SUPPORTED_SCHEMA_VERSIONS)
        msg = f"{CONFIG_FILENAME}: unsupported version {version}, expected one of {expected}"
        raise ConfigError(msg)

    rule = _parse_rule(data.get("rule"))
    paths = _string_list(data["paths"], "paths") if "paths" in data else (".",)
    exclude = _string_list(data["exclude"], "exclude") if "exclude" in data else DEFAULT_EXCLUDE
    return Config(rule=rule, paths=paths or (".",), exclude=exclude)


def load_config(project_root: Path, config_path: Path | None = None) -> Config:
    """Load the project configuration, falling back to defaults when absent.

    Raises ``ConfigError`` when the file exists but is unreadable or invalid.
    """
    path = config_path or project_root / CONFIG_FILENAME
    if not path.is_file():
        if config_path is not None:
            msg = f"config file not found: {config_path}"
            raise ConfigError(msg)
        logger.debug("No %s in %s, using defaults", CONFIG_FILENAME, project_root)
        return Config()

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        msg = f"cannot read {path}: {exc}"
        raise ConfigError(msg) from exc

    return parse_config(data)
