"""Main Typer application — imports and registers all CLI commands.

Entry point: ``aursync`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer

from aursync.cli.commands.inspect_cmd import inspect_cmd
from aursync.cli.commands.sync import sync_cmd
from aursync.config import settings

app = typer.Typer(
    name="aursync",
    help="aursync: keep PKGBUILD versions and checksums in step with GitHub releases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to AURSYNC_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Configure logging before any command runs."""
    level = (log_level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# Register subcommands
app.command(name="sync", help="Sync every configured package with its latest release.")(sync_cmd)
app.command(name="inspect", help="Show the version and checksum fields of a PKGBUILD.")(inspect_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
