"""Load and validate repository lockguard configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from lockguard.types import (
    DEFAULT_DEPENDENCY_SECTIONS,
    DEFAULT_INSTALL_COMMAND,
    DEFAULT_LOCKFILE,
    DEFAULT_MANIFEST_GLOB,
    DEFAULT_MAX_WORKERS,
    PluginOptions,
    ViolationLevel,
)

CONFIG_FILENAME = ".lockguard.yaml"

CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"

# Keep this literal deterministic and sorted in write path.
CONFIG_TEMPLATE: dict[str, Any] = {
    "violation_level": ViolationLevel.ERROR.value,
    "lockfile": DEFAULT_LOCKFILE,
    "manifest_glob": DEFAULT_MANIFEST_GLOB,
    "dependency_sections": list(DEFAULT_DEPENDENCY_SECTIONS),
    "install_command": DEFAULT_INSTALL_COMMAND,
    "max_workers": DEFAULT_MAX_WORKERS,
}

VIOLATION_LEVELS: tuple[str, ...] = tuple(level.value for level in ViolationLevel)


class ConfigError(ValueError):
    """Configuration validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


def config_path_for_repo(repo_root: Path) -> Path:
    """Return canonical config file path for a repository."""
    return repo_root.resolve() / CONFIG_FILENAME


def write_default_config(repo_root: Path, *, force: bool = False) -> Path:
    """Create default config YAML deterministically."""
    output_path = config_path_for_repo(repo_root)
    if output_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {output_path}")

    rendered = yaml.safe_dump(CONFIG_TEMPLATE, sort_keys=True)
    output_path.write_text(rendered, encoding="utf-8")
    return output_path


def _require_string(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"`{key}` must be a non-empty string")
    return value.strip()


def _normalize_sections(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigError("`dependency_sections` must be a non-empty list of strings")
    sections: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError("`dependency_sections` entries must be non-empty strings")
        if item.strip() not in sections:
            sections.append(item.strip())
    return tuple(sections)


def options_from_dict(raw: dict[str, Any]) -> PluginOptions:
    """Normalize a config mapping into plugin options."""
    unknown = sorted(set(raw) - set(CONFIG_TEMPLATE))
    if unknown:
        raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")

    level = str(raw.get("violation_level", ViolationLevel.ERROR.value)).strip().lower()
    if level not in VIOLATION_LEVELS:
        raise ConfigError(f"`violation_level` must be one of {VIOLATION_LEVELS}, got `{level}`")

    max_workers = raw.get("max_workers", DEFAULT_MAX_WORKERS)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ConfigError("`max_workers` must be a positive integer")

    return PluginOptions(
        violation_level=level,
        lockfile=_require_string(raw, "lockfile", DEFAULT_LOCKFILE),
        manifest_glob=_require_string(raw, "manifest_glob", DEFAULT_MANIFEST_GLOB),
        dependency_sections=_normalize_sections(raw.get("dependency_sections", list(DEFAULT_DEPENDENCY_SECTIONS))),
        install_command=_require_string(raw, "install_command", DEFAULT_INSTALL_COMMAND),
        max_workers=max_workers,
    )


def load_options(repo_root: Path, config_path: Path | None = None) -> PluginOptions:
    """Load plugin options from the repository config, or defaults when absent.

    Raises:
        ConfigError: If an explicit config is missing, or any config is malformed
    """
    path = config_path or config_path_for_repo(repo_root)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return PluginOptions()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path.name} parse error: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
    if raw is None:
        return PluginOptions()
    if not isinstance(raw, dict):
        raise ConfigError(
            f"{path.name} parse error: expected mapping at top level",
            CONFIG_REASON_PARSE_ERROR,
        )
    return options_from_dict(raw)
