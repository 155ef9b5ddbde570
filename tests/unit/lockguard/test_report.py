"""Unit tests for lockfile report composition."""

from __future__ import annotations

import pytest

from lockguard.classifier import classify_lockfile_changes
from lockguard.report import (
    DEPENDENCY_HEADER,
    REASON_FIRST_CREATION,
    REASON_INNER_FORBIDDEN,
    REASON_INNER_REMOVED,
    REASON_ROOT_DELETED,
    REASON_ROOT_UPDATED,
    compose_lockfile_report,
    compose_message,
    lockfile_header,
    operations_cell,
)


def _rows(markdown: str) -> list[str]:
    return [line for line in markdown.splitlines()[2:] if line]


def test_no_lockfile_change_with_manifest_change_warns() -> None:
    report = classify_lockfile_changes({})
    text = compose_lockfile_report(report, ["pkg-a/package.json"], True)
    assert text.count("\n") == 0
    assert text.startswith("| ⚠️ | bun.lock | unchanged | Potential Violation:")
    assert "pkg-a/package.json changed but lockfile hasn't changed at all" in text


def test_warning_row_lists_every_changed_manifest() -> None:
    report = classify_lockfile_changes({})
    text = compose_lockfile_report(report, ["a/package.json", "b/package.json"], True)
    assert "a/package.json, b/package.json changed" in text


def test_clean_update_alongside_manifest_change_is_silent() -> None:
    report = classify_lockfile_changes({"modified": ["bun.lock"]})
    assert compose_lockfile_report(report, ["package.json"], True) == ""


def test_violation_alongside_manifest_change_renders_table() -> None:
    report = classify_lockfile_changes({"modified": ["bun.lock"], "created": ["pkg/bun.lock"]})
    text = compose_lockfile_report(report, ["pkg/package.json"], True)
    rows = _rows(text)
    assert rows[0].startswith("| ✅ | bun.lock | modified |")
    assert rows[1].startswith("| 🚫 | pkg/bun.lock | created |")


def test_first_time_root_creation_row() -> None:
    report = classify_lockfile_changes({"created": ["bun.lock"]})
    text = compose_lockfile_report(report, [], False)
    lines = text.splitlines()
    assert lines[0] == "| Status | Path | Operations | Reason |"
    assert lines[2] == f"| ✅ | bun.lock | created | {REASON_FIRST_CREATION} |"
    assert len(lines) == 3


@pytest.mark.parametrize(
    ("buckets", "path", "reason"),
    [
        ({"deleted": ["bun.lock"]}, "bun.lock", REASON_ROOT_DELETED),
        ({"modified": ["nested/bun.lock"]}, "nested/bun.lock", REASON_INNER_FORBIDDEN),
        ({"created": ["nested/bun.lock"], "deleted": ["nested/bun.lock"]}, "nested/bun.lock", REASON_INNER_FORBIDDEN),
        ({"created": ["bun.lock"]}, "bun.lock", REASON_FIRST_CREATION),
        ({"created": ["bun.lock"], "edited": ["bun.lock"]}, "bun.lock", REASON_ROOT_UPDATED),
        ({"modified": ["bun.lock"]}, "bun.lock", REASON_ROOT_UPDATED),
        ({"deleted": ["stray/bun.lock"]}, "stray/bun.lock", REASON_INNER_REMOVED),
    ],
)
def test_reason_decision_table(buckets: dict[str, list[str]], path: str, reason: str) -> None:
    report = classify_lockfile_changes(buckets)
    rows = _rows(compose_lockfile_report(report, [], False))
    assert len(rows) == 1
    assert rows[0].endswith(f"| {reason} |")
    assert f"| {path} |" in rows[0]


def test_root_modified_then_deleted_reports_deletion_violation() -> None:
    report = classify_lockfile_changes({"modified": ["bun.lock"], "deleted": ["bun.lock"]})
    rows = _rows(compose_lockfile_report(report, [], False))
    assert rows == [f"| 🚫 | bun.lock | modified, deleted | {REASON_ROOT_DELETED} |"]


def test_operations_cell_is_deduplicated_in_first_seen_order() -> None:
    report = classify_lockfile_changes({"modified": ["nested/bun.lock"], "edited": ["nested/bun.lock"]})
    assert operations_cell(report.violations["nested/bun.lock"]) == "modified, edited"
    rows = _rows(compose_lockfile_report(report, [], False))
    assert len(rows) == 1
    assert "| modified, edited |" in rows[0]


def test_valid_rows_come_before_violation_rows() -> None:
    report = classify_lockfile_changes(
        {"created": ["a/bun.lock"], "modified": ["bun.lock"], "deleted": ["b/bun.lock"]}
    )
    rows = _rows(compose_lockfile_report(report, [], False))
    assert [row.split(" | ")[1] for row in rows] == ["bun.lock", "b/bun.lock", "a/bun.lock"]
    assert [row.split(" | ")[0] for row in rows] == ["| ✅", "| ✅", "| 🚫"]


def test_composition_is_idempotent() -> None:
    report = classify_lockfile_changes({"created": ["x/bun.lock"], "modified": ["bun.lock"]})
    first = compose_lockfile_report(report, ["package.json"], True)
    second = compose_lockfile_report(report, ["package.json"], True)
    assert first == second


def test_custom_lockfile_name_in_warning_row() -> None:
    report = classify_lockfile_changes({}, lockfile="pnpm-lock.yaml")
    text = compose_lockfile_report(report, ["package.json"], True, lockfile="pnpm-lock.yaml")
    assert "| pnpm-lock.yaml | unchanged |" in text


def test_message_with_tables_and_lockfile_report_has_both_headers() -> None:
    message = compose_message(["### a", "### b"], "| row |", True)
    assert message == "\n".join([DEPENDENCY_HEADER, "### a\n\n### b", lockfile_header(), "| row |"])


def test_message_without_tables_drops_headers() -> None:
    assert compose_message([], "| row |\n", True) == "| row |"
    assert compose_message([], "", True) == ""


def test_message_with_tables_but_empty_lockfile_report() -> None:
    message = compose_message(["### a"], "", True)
    assert message == f"{DEPENDENCY_HEADER}\n### a"
    assert "possible violations" not in message
