"""``aursync inspect PKGBUILD`` — show what a sync would touch.

Prints the declared pkgver/pkgrel and every located checksum field with
its architecture and current value, followed by the declarations that
would be skipped.  Reads only; nothing is fetched or written.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from aursync.bridge.storage import LocalDescriptorStore
from aursync.core.locator import locate_checksum_fields
from aursync.core.version import find_release, find_version

console = Console()


def inspect_cmd(
    pkgbuild: Path = typer.Argument(
        Path("PKGBUILD"),
        help="Path to the PKGBUILD to inspect.",
    ),
) -> None:
    """Show the version and per-architecture checksum fields of a PKGBUILD."""
    try:
        text = LocalDescriptorStore().read_text(pkgbuild)
    except OSError as exc:
        console.print(f"[bold red]Cannot read {pkgbuild}:[/bold red] {exc}")
        raise typer.Exit(code=1)

    version = find_version(text)
    release = find_release(text)
    report = locate_checksum_fields(text)

    console.print()
    console.print(f"[bold]pkgver:[/bold] {version if version is not None else '[red]missing[/red]'}")
    console.print(f"[bold]pkgrel:[/bold] {release if release is not None else '[yellow]missing[/yellow]'}")

    table = Table(title="Checksum Fields", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Field", style="cyan")
    table.add_column("Arch", style="green")
    table.add_column("Span")
    table.add_column("Value")
    for index, field in enumerate(report.fields):
        table.add_row(
            str(index),
            field.label,
            field.arch.value,
            f"{field.value_start}-{field.value_end}",
            text[field.value_start:field.value_end],
        )
    console.print(table)

    for issue in report.issues:
        console.print(f"[yellow]skipped[/yellow] {issue.label}: {issue.message}")

    if version is None:
        raise typer.Exit(code=1)
