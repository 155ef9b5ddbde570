"""Compose the lockfile status report and the merged review message."""

from __future__ import annotations

from collections.abc import Sequence

from lockguard.types import DEFAULT_LOCKFILE, ChangeRecord, ClassificationReport, Operation

STATUS_VALID = "✅"
STATUS_VIOLATION = "🚫"
STATUS_WARNING = "⚠️"

REASON_ROOT_DELETED = "Violation: The root lockfile cannot be deleted."
REASON_INNER_FORBIDDEN = (
    "Violation: Inner lockfiles are forbidden; use the root workspace lockfile. "
    "Ensure you are using the workspace configuration correctly."
)
REASON_FIRST_CREATION = "First-time creation acknowledged. Welcome to the workspace lockfile."
REASON_ROOT_UPDATED = "Root lockfile updated."
REASON_INNER_REMOVED = "Only the root lockfile may exist."

DEPENDENCY_HEADER = "## 📦 Dependency changes detected\n"

TABLE_HEADER = "\n".join(
    [
        "| Status | Path | Operations | Reason |",
        "|--------|------|------------|--------|",
    ]
)


def lockfile_header(lockfile: str = DEFAULT_LOCKFILE) -> str:
    return f"\n## 🔒 {lockfile} possible violations\n"


def missing_lockfile_reminder(lockfile: str, install_command: str) -> str:
    return (
        f"\n\n❗️ You updated dependencies but did not update `{lockfile}`. "
        f"Maybe you need to run `{install_command}`?"
    )


def operations_seen(records: Sequence[ChangeRecord]) -> list[Operation]:
    """Distinct operations in first-seen order."""
    seen: dict[Operation, None] = {}
    for record in records:
        seen.setdefault(record.operation, None)
    return list(seen)


def operations_cell(records: Sequence[ChangeRecord]) -> str:
    return ", ".join(op.value for op in operations_seen(records))


def select_reason(path: str, operations: Sequence[Operation], is_violation: bool, lockfile: str) -> str:
    """Pick the reason text for one report row."""
    is_root = path == lockfile
    if is_violation:
        if is_root and Operation.DELETED in operations:
            return REASON_ROOT_DELETED
        return REASON_INNER_FORBIDDEN
    if is_root:
        if list(operations) == [Operation.CREATED]:
            return REASON_FIRST_CREATION
        return REASON_ROOT_UPDATED
    return REASON_INNER_REMOVED


def _build_row(path: str, records: Sequence[ChangeRecord], is_violation: bool, lockfile: str) -> str:
    operations = operations_seen(records)
    status = STATUS_VIOLATION if is_violation else STATUS_VALID
    reason = select_reason(path, operations, is_violation, lockfile)
    return f"| {status} | {path} | {operations_cell(records)} | {reason} |"


def compose_lockfile_report(
    report: ClassificationReport,
    manifest_paths: Sequence[str],
    manifest_changed: bool,
    lockfile: str = DEFAULT_LOCKFILE,
) -> str:
    """Render the lockfile status table.

    Special cases are checked in order, first match wins:

    1. No lockfile change while a manifest changed: a single warning row.
    2. Manifests changed, no violations, at least one valid change: empty.

    Otherwise every valid path is listed before every violating path.
    """
    if report.total_changes() == 0 and manifest_changed:
        manifests = ", ".join(manifest_paths)
        return (
            f"| {STATUS_WARNING} | {lockfile} | unchanged | Potential Violation: {manifests} "
            f"changed but lockfile hasn't changed at all. |"
        )

    if manifest_changed and not report.has_violations() and report.has_valid_changes():
        return ""

    rows = [TABLE_HEADER]
    rows.extend(_build_row(path, records, False, lockfile) for path, records in report.valid_changes.items())
    rows.extend(_build_row(path, records, True, lockfile) for path, records in report.violations.items())
    return "\n".join(rows)


def compose_message(
    dependency_tables: Sequence[str],
    lockfile_markdown: str,
    manifest_changed: bool,
    lockfile: str = DEFAULT_LOCKFILE,
) -> str:
    """Merge dependency tables and the lockfile report into one message.

    Section headers only appear alongside dependency tables; a lone lockfile
    report is emitted without a header.
    """
    tables = [table for table in dependency_tables if table]
    dependency_header = DEPENDENCY_HEADER if manifest_changed and tables else ""
    lock_header = lockfile_header(lockfile) if lockfile_markdown and tables else ""

    parts = [dependency_header, "\n\n".join(tables), lock_header, lockfile_markdown.strip()]
    return "\n".join(part for part in parts if part)
