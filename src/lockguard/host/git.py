"""Local git-backed change source for running the check outside a review host."""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from lockguard.host.exec import ExecError, run_git
from lockguard.types import FileMatch

logger = logging.getLogger(__name__)


class JsonDiffError(RuntimeError):
    """Raised when a revision of a JSON file cannot be parsed."""


@lru_cache(maxsize=64)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts) + r"\Z")


def glob_matches(path: str, pattern: str) -> bool:
    """Match a POSIX path against a glob where ``**/`` spans zero or more directories."""
    return _glob_regex(pattern).match(path) is not None


def resolve_repo_root(repo: Path | None = None) -> Path:
    """Resolve git repo root from cwd or explicit path."""
    probe = (repo or Path.cwd()).resolve()
    try:
        out = run_git(["rev-parse", "--show-toplevel"], repo_root=probe)
    except ExecError as exc:
        raise RuntimeError(f"unable to resolve git repo root from {probe}: {exc}") from exc
    root = out.stdout.strip()
    if not root:
        raise RuntimeError(f"unable to resolve git repo root from {probe}: empty output")
    return Path(root).resolve()


def _key_changes(before: Any, after: Any) -> tuple[list[Any], list[Any]]:
    # A side that is absent compares as an empty container of the other side's type.
    if before is None and isinstance(after, (dict, list)):
        before = type(after)()
    if after is None and isinstance(before, (dict, list)):
        after = type(before)()
    if isinstance(before, dict) and isinstance(after, dict):
        return [k for k in after if k not in before], [k for k in before if k not in after]
    if isinstance(before, list) and isinstance(after, list):
        return [v for v in after if v not in before], [v for v in before if v not in after]
    return [], []


def json_diff(before: dict[str, Any], after: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Diff two JSON objects one top-level key at a time.

    Only keys whose value changed are present. Each entry carries the whole
    ``before``/``after`` value plus the ``added``/``removed`` keys (objects) or
    elements (lists) between them.
    """
    diff: dict[str, dict[str, Any]] = {}
    keys = list(before) + [k for k in after if k not in before]
    for key in keys:
        old = before.get(key)
        new = after.get(key)
        if old == new:
            continue
        added, removed = _key_changes(old, new)
        diff[key] = {"before": old, "after": new, "added": added, "removed": removed}
    return diff


class GitChangeSource:
    """Changed files and JSON diffs between two git revisions.

    Paths follow review-host conventions: ``edited`` is ``created`` plus
    ``modified``, and a rename counts as deleting the old path and creating
    the new one.
    """

    def __init__(self, repo_root: Path, base: str = "main", head: str = "HEAD"):
        self.repo_root = repo_root.resolve()
        self.base = base
        self.head = head
        self._changes: list[tuple[str, str]] | None = None
        self._merge_base: str | None = None

    def _name_status(self) -> list[tuple[str, str]]:
        if self._changes is not None:
            return self._changes

        out = run_git(
            ["diff", "--name-status", "-z", "--no-renames", f"{self.base}...{self.head}"],
            repo_root=self.repo_root,
        )
        # With --no-renames every entry is a "<status>\0<path>\0" pair.
        tokens = [t for t in out.stdout.split("\0") if t]
        changes = [(tokens[i][:1], tokens[i + 1]) for i in range(0, len(tokens) - 1, 2)]
        logger.debug("git reported %d changed path(s) between %s and %s", len(changes), self.base, self.head)
        self._changes = changes
        return changes

    def file_match(self, glob: str) -> FileMatch:
        created: list[str] = []
        modified: list[str] = []
        deleted: list[str] = []
        for status, path in self._name_status():
            if not glob_matches(path, glob):
                continue
            if status == "A":
                created.append(path)
            elif status == "D":
                deleted.append(path)
            elif status in ("M", "T"):
                modified.append(path)
        return FileMatch(
            created=tuple(created),
            modified=tuple(modified),
            edited=tuple(created + modified),
            deleted=tuple(deleted),
        )

    def _base_revision(self) -> str:
        if self._merge_base is None:
            out = run_git(["merge-base", self.base, self.head], repo_root=self.repo_root)
            self._merge_base = out.stdout.strip()
        return self._merge_base

    def _load_json(self, revision: str, path: str) -> dict[str, Any]:
        out = run_git(["show", f"{revision}:{path}"], repo_root=self.repo_root, check=False)
        if not out.ok:
            # Absent on this side of the diff (created or deleted file).
            return {}
        try:
            data = json.loads(out.stdout)
        except json.JSONDecodeError as exc:
            raise JsonDiffError(f"invalid JSON in {path} at {revision}: {exc}") from exc
        if not isinstance(data, dict):
            raise JsonDiffError(f"expected a JSON object in {path} at {revision}")
        return data

    def json_diff_for_file(self, path: str) -> dict[str, Any]:
        before = self._load_json(self._base_revision(), path)
        after = self._load_json(self.head, path)
        return json_diff(before, after)
