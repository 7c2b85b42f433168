# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/cli.py
from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .engine.models import Outcome, RunSummary


def _force_utf8_stdio():
    """Forces stdout and stderr to use UTF-8 encoding."""
    for stream_name in ("stdout", "stderr"):
        stream = getattr(sys, stream_name, None)
        if stream and hasattr(stream, "reconfigure"):
            try:
                stream.reconfigure(encoding="utf-8")
            except (TypeError, ValueError):
                # Some wrapped streams (IDE terminals, test runners) refuse
                # reconfiguration; they are already text streams we can use.
                pass


app = typer.Typer(
    add_completion=False,
    help="Add or update copyright notices according to git history.",
)

console = Console()

_OUTCOME_STYLE = {
    Outcome.UPDATED: "green",
    Outcome.UNCHANGED: "dim",
    Outcome.WOULD_UPDATE: "yellow",
    Outcome.SKIPPED_IGNORED: "dim",
    Outcome.SKIPPED_UNSUPPORTED: "dim",
    Outcome.SKIPPED_UNCOMMITTED: "yellow",
    Outcome.FAILED: "red",
}

# ---------------------------
# Internal helpers
# ---------------------------


def _fail(msg: str, code: int = 2) -> None:
    console.print(Panel.fit(f"[red]ERROR[/red] {msg}"))
    raise typer.Exit(code)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _version_callback(value: bool | None) -> None:
    if value:
        console.print(f"git-copyright {__version__}")
        raise typer.Exit(0)


def _print_results(summary: RunSummary, verbose: bool) -> None:
    """Per-file table: every outcome except unchanged (listed with --verbose)."""
    rows = [
        r
        for r in summary.results
        if r.outcome is not Outcome.UNCHANGED or verbose
    ]
    if not rows:
        return
    table = Table(title="Files")
    table.add_column("File", justify="left", style="cyan", overflow="fold")
    table.add_column("Outcome", justify="left")
    table.add_column("Years", justify="right")
    table.add_column("Reason", justify="left", overflow="fold")
    for r in rows:
        style = _OUTCOME_STYLE[r.outcome]
        table.add_row(
            r.path,
            f"[{style}]{r.outcome.value}[/{style}]",
            r.years.render() if r.years else "---",
            r.reason,
        )
    console.print(table)


def _print_summary(summary: RunSummary) -> None:
    counts = summary.counts()
    summary_table = Table(title="Copyright Summary")
    summary_table.add_column("Outcome", justify="left", style="cyan")
    summary_table.add_column("Count", justify="right", style="magenta")
    for outcome in Outcome:
        style = _OUTCOME_STYLE[outcome]
        summary_table.add_row(f"[{style}]{outcome.value}[/{style}]", str(counts[outcome]))
    console.print(summary_table)


# ---------------------------
# Command
# ---------------------------


@app.command()
def main(
    repo: Path = typer.Option(Path("."), "--repo", "-r", help="Path to repository to check"),
    name: str | None = typer.Option(
        None, "--name", "-n", help="Copyright holder (or GIT_COPYRIGHT_HOLDER / config 'holder')"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML file with config to use"),
    ignore_uncommitted: bool = typer.Option(
        False,
        "--ignore-uncommitted",
        help="Rewrite files even if they have uncommitted changes",
    ),
    jobs: int | None = typer.Option(
        None, "--jobs", "-j", min=1, help="Maximum concurrent workers (default: 8)"
    ),
    check: bool = typer.Option(
        False, "--check", help="Report files whose notice is out of date; write nothing"
    ),
    ref: str = typer.Option("HEAD", "--ref", help="Ref whose tree lists the files to check"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Append JSON run records to this file"
    ),
    no_user_config: bool = typer.Option(
        False, "--no-user-config", help="Do not read the per-user config file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging, list unchanged files"),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        is_eager=True,
        callback=_version_callback,
    ),
):
    """
    Add or update the copyright notice of every tracked file.

    Years come from git history (first and last commit touching the file,
    following renames). An existing notice is only ever widened. Exits non-zero
    if any file failed, or was blocked by uncommitted changes, or (with --check)
    is out of date.
    """
    _force_utf8_stdio()
    _configure_logging(verbose)

    from git_copyright.config.loader import load_config
    from git_copyright.errors import CopyrightError
    from git_copyright.orchestrator.coordinator import run_copyright_sync
    from git_copyright.vcs.git import GitRepo

    try:
        git_repo = GitRepo.open(repo)
        cfg = load_config(
            git_repo.root,
            holder=name,
            config_path=config,
            ignore_uncommitted=ignore_uncommitted,
            max_parallel=jobs,
            check=check,
            ref=ref,
            use_user_config=not no_user_config,
        )
    except CopyrightError as e:
        _fail(str(e))

    panel_text = (
        f"[bold]Copyright sync[/bold]\n"
        f"Repository: {cfg.repo_root}\n"
        f"Holder: {cfg.holder}\n"
        f"Ref: {cfg.ref}\n"
        f"Workers: {cfg.max_parallel}\n"
        f"Ignore uncommitted: {cfg.ignore_uncommitted}\n"
        f"Check only: {cfg.check}\n"
        f"Log file: {log_file or '---'}"
    )
    console.print(Panel.fit(panel_text))

    try:
        summary = run_copyright_sync(cfg, repo=git_repo, log_path=log_file)
    except CopyrightError as e:
        _fail(f"Could not list tracked files: {e}")

    _print_results(summary, verbose)
    _print_summary(summary)

    verb = "checked" if cfg.check else "checked and updated"
    if summary.ok:
        console.print(f"\n[green]Copyrights {verb} in {summary.duration_s:0.3f}s[/green]")
    elif cfg.check and summary.by_outcome(Outcome.WOULD_UPDATE):
        console.print("\n[yellow]Some copyright notices are out of date[/yellow]")
    else:
        console.print("\n[red]Some copyrights could not be fixed, please check the output[/red]")

    raise typer.Exit(summary.exit_code())
