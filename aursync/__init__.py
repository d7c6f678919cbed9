"""aursync: keep PKGBUILDs in step with upstream GitHub releases.

Reads ``pkgver`` from each configured PKGBUILD, compares it with the latest
GitHub release tag, and on a new release:
  - downloads the per-architecture checksum assets of the release
  - splices the new sums into ``sha<N>sums_<arch>`` declarations, leaving
    every other byte untouched
  - bumps ``pkgver`` and resets ``pkgrel``
  - regenerates ``.SRCINFO`` with ``makepkg --printsrcinfo``
  - commits and pushes the AUR checkout
"""

__version__ = "0.1.0"
__description__ = "Architecture-aware PKGBUILD checksum sync for GitHub releases"

from aursync.core.engine import UpdateDecisionEngine
from aursync.core.runner import SyncRunner
from aursync.cli.app import app as cli

__all__ = ["UpdateDecisionEngine", "SyncRunner", "cli", "__version__"]
