"""``aursync sync`` — sync configured packages with their latest releases.

Loads ``config.json``, processes every package (in parallel), prints a
summary table, and exits nonzero if any package failed.  In dry-run mode
the patched PKGBUILD of each updated package is printed instead of
written.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from aursync.bridge.github import GitHubClient
from aursync.bridge.storage import LocalDescriptorStore
from aursync.bridge.tools import SubprocessToolRunner
from aursync.config import settings
from aursync.core.engine import UpdateDecisionEngine
from aursync.core.errors import ConfigError
from aursync.core.runner import SyncRunner
from aursync.models.config import SyncConfig
from aursync.models.results import RunSummary, SyncOutcome

console = Console()

_OUTCOME_STYLE = {
    SyncOutcome.UP_TO_DATE: "[dim]up to date[/dim]",
    SyncOutcome.UPDATED: "[green]updated[/green]",
    SyncOutcome.DRY_RUN: "[cyan]dry run[/cyan]",
    SyncOutcome.FAILED: "[red]failed[/red]",
}


def sync_cmd(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.json (defaults to AURSYNC_CONFIG_PATH or ./config.json).",
    ),
    force_update: bool = typer.Option(
        False,
        "--force-update",
        help="Re-sync checksums even if the PKGBUILD already has the latest version.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print patched PKGBUILDs instead of writing, committing and pushing.",
    ),
    package: list[str] = typer.Option(
        None,
        "--package",
        "-p",
        help="Only process the named package (repeatable).",
    ),
    jobs: int = typer.Option(
        None,
        "--jobs",
        "-j",
        help="Packages processed at once (defaults to AURSYNC_MAX_WORKERS).",
    ),
) -> None:
    """Sync every configured package with its upstream GitHub release.

    For each package: compare pkgver with the latest release tag, pull,
    download the per-architecture checksums, patch the PKGBUILD, regenerate
    .SRCINFO, commit and push.
    """
    path = config_path or settings.config_path
    try:
        sync_config = SyncConfig.load(path)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    packages = sync_config.package_configs(force_update=force_update, dry_run=dry_run)
    if package:
        wanted = set(package)
        packages = [
            p for p in packages
            if (p.package if isinstance(p, ConfigError) else p.name) in wanted
        ]
        if not packages:
            console.print(f"[bold yellow]No configured package matches {sorted(wanted)}.[/bold yellow]")
            raise typer.Exit(code=1)

    context = settings.request_context(sync_config.token)
    with GitHubClient(context) as client:
        engine = UpdateDecisionEngine(
            client,
            LocalDescriptorStore(),
            SubprocessToolRunner(),
            force_update=force_update,
            download_workers=settings.download_workers,
        )
        runner = SyncRunner(engine, max_workers=jobs or settings.max_workers)
        summary = runner.run(packages)

    _print_dry_runs(summary)
    _print_summary(summary)
    if summary.exit_code:
        raise typer.Exit(code=summary.exit_code)


def _print_dry_runs(summary: RunSummary) -> None:
    for result in summary.results:
        if result.outcome == SyncOutcome.DRY_RUN and result.final_text is not None:
            console.print()
            console.print(
                Panel(
                    Syntax(result.final_text, "bash", word_wrap=True),
                    title=f"[bold]{result.name}[/bold] {result.current_version} -> {result.new_version}",
                    border_style="cyan",
                )
            )


def _print_summary(summary: RunSummary) -> None:
    table = Table(title="Package Sync", show_header=True, header_style="bold cyan")
    table.add_column("Package", style="cyan")
    table.add_column("Outcome", justify="center")
    table.add_column("Version")
    table.add_column("Details")

    for result in summary.results:
        if result.current_version and result.new_version and result.current_version != result.new_version:
            version = f"{result.current_version} -> {result.new_version}"
        else:
            version = result.new_version or result.current_version or ""
        details = result.error or "; ".join(result.warnings)
        table.add_row(result.name, _OUTCOME_STYLE[result.outcome], version, details)

    console.print()
    console.print(table)
    if summary.exit_code:
        console.print(f"[bold red]{len(summary.failed)} package(s) failed.[/bold red]")
