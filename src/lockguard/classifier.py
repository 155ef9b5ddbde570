"""Classify lockfile changes as valid updates or policy violations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from lockguard.types import (
    DEFAULT_LOCKFILE,
    ChangeRecord,
    ChangeType,
    ClassificationReport,
    InvalidOperation,
    Operation,
)

logger = logging.getLogger(__name__)


def parse_operation(label: Operation | str) -> Operation:
    """Resolve an operation label, rejecting anything outside the known set."""
    if isinstance(label, Operation):
        return label
    try:
        return Operation(label)
    except ValueError as exc:
        raise InvalidOperation(label) from exc


def classify_change(path: str, operation: Operation | str, lockfile: str = DEFAULT_LOCKFILE) -> ChangeType:
    """Classify one (path, operation) pair.

    Only the lockfile at the workspace root may exist: deleting it is a
    violation, while deleting a nested copy is the correct fix. Creating or
    changing the root lockfile is valid; doing so anywhere else is not.
    """
    op = parse_operation(operation)
    is_root = path == lockfile
    if op is Operation.DELETED:
        return ChangeType.VIOLATION if is_root else ChangeType.VALID
    return ChangeType.VALID if is_root else ChangeType.VIOLATION


def classify_lockfile_changes(
    buckets: Mapping[Operation | str, Iterable[str]],
    lockfile: str = DEFAULT_LOCKFILE,
) -> ClassificationReport:
    """Classify every reported lockfile path into valid changes or violations.

    Args:
        buckets: Changed paths keyed by operation (created/modified/edited/deleted)
        lockfile: Root lockfile name

    Returns:
        ClassificationReport where each path lands in exactly one bucket. A path
        with any violating operation goes to ``violations`` together with all of
        its records; repeated reports of the same path are kept as separate
        records.

    Raises:
        InvalidOperation: If a bucket key is not a recognized operation
    """
    resolved = {parse_operation(label): list(paths) for label, paths in buckets.items()}

    records_by_path: dict[str, list[ChangeRecord]] = {}
    for op in Operation:
        for path in resolved.get(op, []):
            record = ChangeRecord(path=path, operation=op, type=classify_change(path, op, lockfile))
            records_by_path.setdefault(path, []).append(record)

    report = ClassificationReport()
    for path, records in records_by_path.items():
        if any(record.type is ChangeType.VIOLATION for record in records):
            report.violations[path] = records
        else:
            report.valid_changes[path] = records

    logger.debug(
        "classified %d lockfile change(s): %d valid path(s), %d violating path(s)",
        report.total_changes(),
        len(report.valid_changes),
        len(report.violations),
    )
    return report
