"""Domain types for lockfile change classification and reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_LOCKFILE = "bun.lock"
DEFAULT_MANIFEST_GLOB = "**/package.json"
DEFAULT_DEPENDENCY_SECTIONS: tuple[str, ...] = ("dependencies", "devDependencies")
DEFAULT_INSTALL_COMMAND = "bun install"
DEFAULT_MAX_WORKERS = 4


class Operation(str, Enum):
    """Kind of change a host reports for a path."""

    CREATED = "created"
    MODIFIED = "modified"
    EDITED = "edited"
    DELETED = "deleted"


class ChangeType(str, Enum):
    """Policy classification of a single change."""

    VALID = "Valid"
    VIOLATION = "Violation"


class ViolationLevel(str, Enum):
    """Severity used when violations are found."""

    WARN = "warn"
    ERROR = "error"
    DISABLED = "disabled"


class InvalidOperation(ValueError):
    """Raised when an operation label outside the recognized set is classified."""

    def __init__(self, label: object) -> None:
        allowed = ", ".join(op.value for op in Operation)
        super().__init__(f"unknown operation {label!r}; expected one of: {allowed}")
        self.label = label


@dataclass(frozen=True)
class ChangeRecord:
    """One observed operation on one lockfile path."""

    path: str
    operation: Operation
    type: ChangeType


ChangeBucket = dict[str, list[ChangeRecord]]


@dataclass
class ClassificationReport:
    """Lockfile changes partitioned by path into valid changes and violations."""

    valid_changes: ChangeBucket = field(default_factory=dict)
    violations: ChangeBucket = field(default_factory=dict)

    def total_changes(self) -> int:
        return sum(len(records) for records in self.valid_changes.values()) + sum(
            len(records) for records in self.violations.values()
        )

    def has_changes(self) -> bool:
        return self.total_changes() > 0

    def has_violations(self) -> bool:
        return len(self.violations) > 0

    def has_valid_changes(self) -> bool:
        return len(self.valid_changes) > 0


@dataclass(frozen=True)
class FileMatch:
    """Changed paths under one glob, partitioned by operation."""

    created: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    edited: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()

    def as_buckets(self) -> dict[Operation, tuple[str, ...]]:
        return {
            Operation.CREATED: self.created,
            Operation.MODIFIED: self.modified,
            Operation.EDITED: self.edited,
            Operation.DELETED: self.deleted,
        }

    def all_paths(self) -> list[str]:
        """Every path across all operations, first-seen order, no duplicates."""
        seen: dict[str, None] = {}
        for paths in self.as_buckets().values():
            for path in paths:
                seen.setdefault(path, None)
        return list(seen)


@dataclass(frozen=True)
class DependencySectionDiff:
    """Structured before/after diff of one manifest dependency section."""

    added: tuple[Any, ...] = ()
    removed: tuple[Any, ...] = ()
    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> DependencySectionDiff:
        """Build a diff from a host payload, degrading malformed shapes to empty."""
        if not isinstance(raw, dict):
            return cls()
        added = raw.get("added")
        removed = raw.get("removed")
        before = raw.get("before")
        after = raw.get("after")
        return cls(
            added=tuple(added) if isinstance(added, (list, tuple)) else (),
            removed=tuple(removed) if isinstance(removed, (list, tuple)) else (),
            before=dict(before) if isinstance(before, dict) else {},
            after=dict(after) if isinstance(after, dict) else {},
        )


@dataclass(frozen=True)
class DependencyChangeRow:
    """One rendered row of a dependency change table."""

    name: str
    before: str | None
    after: str | None
    kind: str  # added, removed, changed


@dataclass(frozen=True)
class PluginOptions:
    """Options controlling one lockfile check run."""

    violation_level: str = ViolationLevel.ERROR.value
    lockfile: str = DEFAULT_LOCKFILE
    manifest_glob: str = DEFAULT_MANIFEST_GLOB
    dependency_sections: tuple[str, ...] = DEFAULT_DEPENDENCY_SECTIONS
    install_command: str = DEFAULT_INSTALL_COMMAND
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def lockfile_glob(self) -> str:
        return f"**/{self.lockfile}"
