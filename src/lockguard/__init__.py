"""Lockguard - workspace lockfile policy check for code review."""

from lockguard.classifier import classify_change, classify_lockfile_changes
from lockguard.dependencies import render_dependency_section, render_dependency_tables
from lockguard.plugin import CheckOutcome, run_lockfile_check, workspace_checks
from lockguard.report import compose_lockfile_report, compose_message
from lockguard.types import ClassificationReport, InvalidOperation, PluginOptions

__version__ = "0.1.0"

__all__ = [
    "CheckOutcome",
    "ClassificationReport",
    "InvalidOperation",
    "PluginOptions",
    "__version__",
    "classify_change",
    "classify_lockfile_changes",
    "compose_lockfile_report",
    "compose_message",
    "render_dependency_section",
    "render_dependency_tables",
    "run_lockfile_check",
    "workspace_checks",
]
