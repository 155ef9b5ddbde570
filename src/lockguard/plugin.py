"""Lockfile check entrypoint wiring classification, rendering and reporting."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Literal

from lockguard.classifier import classify_lockfile_changes
from lockguard.dependencies import render_dependency_tables
from lockguard.host.context import ReviewContext
from lockguard.report import compose_lockfile_report, compose_message, missing_lockfile_reminder
from lockguard.types import ClassificationReport, PluginOptions, ViolationLevel

logger = logging.getLogger(__name__)

ReportAction = Literal["warn", "fail", "markdown"]


@dataclass(frozen=True)
class CheckOutcome:
    """What a check run reported, if anything."""

    action: ReportAction | None
    message: str
    report: ClassificationReport
    manifest_paths: tuple[str, ...]


def _classify(ctx: ReviewContext, options: PluginOptions) -> ClassificationReport:
    match = ctx.file_match(options.lockfile_glob)
    return classify_lockfile_changes(match.as_buckets(), options.lockfile)


def _manifest_tables(ctx: ReviewContext, manifest_path: str, options: PluginOptions) -> list[str]:
    return render_dependency_tables(
        manifest_path,
        ctx.json_diff_for_file(manifest_path),
        options.dependency_sections,
    )


def run_lockfile_check(ctx: ReviewContext, options: PluginOptions | None = None) -> CheckOutcome:
    """Run the lockfile policy check and invoke at most one reporting primitive.

    Lockfile classification and every manifest diff run as independent
    futures; results are merged in manifest order, then section order, once
    all of them have finished. Collaborator failures propagate and nothing is
    reported.
    """
    options = options or PluginOptions()

    with ThreadPoolExecutor(max_workers=max(1, options.max_workers)) as executor:
        report_future = executor.submit(_classify, ctx, options)
        manifest_paths = tuple(ctx.file_match(options.manifest_glob).all_paths())
        table_futures = [executor.submit(_manifest_tables, ctx, path, options) for path in manifest_paths]

        report = report_future.result()
        dependency_tables = [table for future in table_futures for table in future.result()]

    manifest_changed = len(manifest_paths) > 0
    lockfile_markdown = compose_lockfile_report(report, manifest_paths, manifest_changed, options.lockfile)
    message = compose_message(dependency_tables, lockfile_markdown, manifest_changed, options.lockfile)

    action: ReportAction | None = None
    if not report.has_changes() and manifest_changed:
        action = "warn"
        message = message + missing_lockfile_reminder(options.lockfile, options.install_command)
        ctx.warn(message)
    elif report.has_violations():
        if options.violation_level == ViolationLevel.DISABLED:
            logger.info("lockfile violations found; reporting disabled by violation level")
        elif options.violation_level == ViolationLevel.WARN:
            action = "warn"
            ctx.warn(message)
        else:
            action = "fail"
            ctx.fail(message)
    elif report.has_changes():
        action = "markdown"
        ctx.markdown(message)

    logger.info(
        "lockfile check: %d change(s), %d violation path(s), %d manifest(s), action=%s",
        report.total_changes(),
        len(report.violations),
        len(manifest_paths),
        action or "none",
    )
    return CheckOutcome(action=action, message=message, report=report, manifest_paths=manifest_paths)


def workspace_checks(
    ctx: ReviewContext,
    options: PluginOptions | None = None,
    *,
    echo_title: bool = False,
) -> CheckOutcome:
    """Host entrypoint: optionally echo the PR title, then run the lockfile check."""
    if echo_title and ctx.pr_title:
        ctx.message(f"PR Title: {ctx.pr_title}")
    return run_lockfile_check(ctx, options)
