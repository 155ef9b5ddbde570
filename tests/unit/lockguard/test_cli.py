"""CLI contract tests for lockguard check and init."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lockguard import __version__
from lockguard.cli import cli
from tests.unit.lockguard.review_test_utils import commit_all, init_git_repo

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not available")


def test_version_option() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_writes_config_once(tmp_path: Path) -> None:
    runner = CliRunner()

    first = runner.invoke(cli, ["init", "--repo-root", str(tmp_path)])
    assert first.exit_code == 0
    assert (tmp_path / ".lockguard.yaml").exists()

    second = runner.invoke(cli, ["init", "--repo-root", str(tmp_path)])
    assert second.exit_code == 1
    assert "--force" in second.output

    forced = runner.invoke(cli, ["init", "--repo-root", str(tmp_path), "--force"])
    assert forced.exit_code == 0


@requires_git
def test_check_fails_on_inner_lockfile(tmp_path: Path) -> None:
    repo = init_git_repo(tmp_path / "repo")
    (repo / "packages" / "ui").mkdir(parents=True)
    (repo / "packages" / "ui" / "bun.lock").write_text("{}\n", encoding="utf-8")
    commit_all(repo)
    out_dir = tmp_path / "out"

    result = CliRunner().invoke(cli, ["check", "--repo-root", str(repo), "--out", str(out_dir)])

    assert result.exit_code == 2
    assert "packages/ui/bun.lock" in result.output
    payload = json.loads((out_dir / "LOCKGUARD_REPORT.json").read_text(encoding="utf-8"))
    assert payload["status"] == "failed"
    assert payload["base"] == "main"
    assert len(payload["fails"]) == 1
    assert "Inner lockfiles are forbidden" in payload["fails"][0]["message"]
    assert (out_dir / "LOCKGUARD_REPORT.md").read_text(encoding="utf-8").startswith("# Lockfile Review")


@requires_git
def test_check_violation_level_warn_exits_zero(tmp_path: Path) -> None:
    repo = init_git_repo(tmp_path / "repo")
    (repo / "nested").mkdir()
    (repo / "nested" / "bun.lock").write_text("{}\n", encoding="utf-8")
    commit_all(repo)

    result = CliRunner().invoke(cli, ["check", "--repo-root", str(repo), "--violation-level", "warn"])

    assert result.exit_code == 0
    assert "WARN" in result.output


@requires_git
def test_check_config_sets_violation_level(tmp_path: Path) -> None:
    repo = init_git_repo(tmp_path / "repo")
    (repo / "nested").mkdir()
    (repo / "nested" / "bun.lock").write_text("{}\n", encoding="utf-8")
    (repo / ".lockguard.yaml").write_text("violation_level: disabled\n", encoding="utf-8")
    commit_all(repo)

    result = CliRunner().invoke(cli, ["check", "--repo-root", str(repo)])

    assert result.exit_code == 0
    assert "No comments reported" in result.output


@requires_git
def test_check_warns_when_manifest_changes_without_lockfile(tmp_path: Path) -> None:
    repo = init_git_repo(tmp_path / "repo")
    (repo / "package.json").write_text(
        json.dumps({"name": "root", "dependencies": {"react": "^18.3.1"}}),
        encoding="utf-8",
    )
    commit_all(repo)

    result = CliRunner().invoke(cli, ["check", "--repo-root", str(repo), "--pr-title", "Bump react"])

    assert result.exit_code == 0
    assert "PR Title: Bump react" in result.output
    assert "| react | ^18.2.0 | ^18.3.1 | changed |" in result.output
    assert "Maybe you need to run `bun install`?" in result.output


@requires_git
def test_check_reports_tooling_error_for_unknown_base(tmp_path: Path) -> None:
    repo = init_git_repo(tmp_path / "repo")

    result = CliRunner().invoke(cli, ["check", "--repo-root", str(repo), "--base", "does-not-exist"])

    assert result.exit_code == 1
    assert "Error:" in result.output
