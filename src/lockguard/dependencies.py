"""Render manifest dependency diffs as markdown tables."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from lockguard.types import DEFAULT_DEPENDENCY_SECTIONS, DependencyChangeRow, DependencySectionDiff

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "(n/a)"

TABLE_HEADER = "\n".join(
    [
        "| Package | Before | After | Change |",
        "|---------|--------|-------|--------|",
    ]
)


def _resolvable(name: Any, values: dict[str, Any]) -> bool:
    return isinstance(name, str) and bool(name) and name in values


def _version(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def dependency_rows(diff: DependencySectionDiff) -> list[DependencyChangeRow]:
    """Compute added, removed and changed rows in that order."""
    rows: list[DependencyChangeRow] = []
    emitted: set[str] = set()

    for name in diff.added:
        if _resolvable(name, diff.after) and name not in emitted:
            rows.append(DependencyChangeRow(name, None, _version(diff.after[name]), "added"))
            emitted.add(name)

    for name in diff.removed:
        if _resolvable(name, diff.before) and name not in emitted:
            rows.append(DependencyChangeRow(name, _version(diff.before[name]), None, "removed"))
            emitted.add(name)

    for name, after in diff.after.items():
        if name in emitted:
            continue
        before = diff.before.get(name)
        if before is None or after is None or before == after:
            continue
        rows.append(DependencyChangeRow(name, _version(before), _version(after), "changed"))

    return rows


def _render_row(row: DependencyChangeRow) -> str:
    before = row.before if row.before is not None else NOT_APPLICABLE
    after = row.after if row.after is not None else NOT_APPLICABLE
    return f"| {row.name} | {before} | {after} | {row.kind} |"


def render_dependency_section(
    manifest_path: str,
    diff: DependencySectionDiff,
    section: str,
) -> str | None:
    """Render one dependency section of a manifest, or None if nothing changed."""
    if not diff.added and not diff.removed and diff.before == diff.after:
        return None

    rows = dependency_rows(diff)
    if not rows:
        return None

    lines = [f"### {manifest_path} › {section}", "", TABLE_HEADER]
    lines.extend(_render_row(row) for row in rows)
    return "\n".join(lines)


def render_dependency_tables(
    manifest_path: str,
    json_diff: Any,
    sections: Iterable[str] = DEFAULT_DEPENDENCY_SECTIONS,
) -> list[str]:
    """Render every recognized dependency section of one manifest's JSON diff."""
    payload = json_diff if isinstance(json_diff, dict) else {}
    tables: list[str] = []
    for section in sections:
        table = render_dependency_section(manifest_path, DependencySectionDiff.from_raw(payload.get(section)), section)
        if table:
            tables.append(table)
    logger.debug("rendered %d dependency table(s) for %s", len(tables), manifest_path)
    return tables
