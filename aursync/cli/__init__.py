"""aursync CLI — Typer-based command-line interface.

Provides the ``aursync`` command with subcommands for syncing packages
against their upstream releases and inspecting a PKGBUILD's checksum
declarations.

All output uses Rich for formatted terminal display.
"""
