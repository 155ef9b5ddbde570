"""Lockguard CLI - run the workspace lockfile check against local git history."""

import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console

from lockguard import __version__
from lockguard.artifacts import write_review_artifacts
from lockguard.config import ConfigError, load_options, write_default_config
from lockguard.host.context import ReviewContext, ReviewResults
from lockguard.host.git import GitChangeSource, resolve_repo_root
from lockguard.plugin import workspace_checks
from lockguard.types import ViolationLevel

cli = typer.Typer(
    name="lockguard",
    help="Lockguard - workspace lockfile policy check",
    no_args_is_help=True,
)
console = Console()

_KIND_STYLES = {
    "fail": ("❌ FAIL", "bold red"),
    "warn": ("⚠️  WARN", "bold yellow"),
    "markdown": ("📝 MARKDOWN", "bold cyan"),
    "message": ("💬 MESSAGE", "bold blue"),
}


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show lockguard version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit debug logging to stderr.",
    ),
) -> None:
    """Workspace lockfile policy check."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _print_results(results: ReviewResults) -> None:
    if not results.comments:
        console.print("[green]✅ No comments reported.[/green]")
        return
    for comment in results.comments:
        label, style = _KIND_STYLES[comment.kind]
        console.print(f"[{style}]{label}[/{style}]")
        console.print(comment.message, markup=False, highlight=False, soft_wrap=True)
        console.print()


@cli.command(name="check")
def check_cmd(
    repo_root: Path | None = typer.Option(
        None,
        "--repo-root",
        help="Repository to inspect (default: git root of the current directory)",
    ),
    base: str = typer.Option(
        "main",
        "--base",
        help="Base revision of the change under review",
    ),
    head: str = typer.Option(
        "HEAD",
        "--head",
        help="Head revision of the change under review",
    ),
    violation_level: ViolationLevel | None = typer.Option(
        None,
        "--violation-level",
        help="Severity for lockfile violations (overrides config)",
        case_sensitive=False,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: <repo-root>/.lockguard.yaml when present)",
    ),
    out: Path | None = typer.Option(
        None,
        "--out",
        "-o",
        help="Directory to write LOCKGUARD_REPORT.json and LOCKGUARD_REPORT.md",
    ),
    pr_title: str | None = typer.Option(
        None,
        "--pr-title",
        help="Echo this pull request title as a review message",
    ),
) -> None:
    """Check lockfile and manifest changes between two revisions.

    Exit codes:
      0 - Nothing failed (comments may still have been reported)
      2 - Lockfile policy violation reported as a failure
      1 - Tooling error (git, JSON or config)
    """
    results = ReviewResults()
    try:
        root = resolve_repo_root(repo_root)
        options = load_options(root, config)
        if violation_level is not None:
            options = replace(options, violation_level=violation_level.value)
        source = GitChangeSource(root, base=base, head=head)
        ctx = ReviewContext.from_host(source, results, pr_title=pr_title)
        workspace_checks(ctx, options, echo_title=pr_title is not None)
    except (ConfigError, RuntimeError) as e:
        console.print(f"Error: {e}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(code=1) from e

    _print_results(results)

    if out is not None:
        json_path, md_path = write_review_artifacts(out, results, base=base, head=head)
        console.print("Reports written to:")
        console.print(f"  {json_path}", markup=False, highlight=False, soft_wrap=True)
        console.print(f"  {md_path}", markup=False, highlight=False, soft_wrap=True)

    if results.failed:
        console.print("[red]❌ Lockfile check failed.[/red]")
        raise typer.Exit(code=2)


@cli.command(name="init")
def init_cmd(
    repo_root: Path = typer.Option(
        Path("."),
        "--repo-root",
        help="Repository root to write .lockguard.yaml into",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write the default .lockguard.yaml config."""
    try:
        path = write_default_config(repo_root, force=force)
    except FileExistsError as e:
        console.print(f"{e}. Use --force to overwrite.", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(code=1) from e
    console.print(f"✅ Wrote {path}", style="green", markup=False, soft_wrap=True)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
