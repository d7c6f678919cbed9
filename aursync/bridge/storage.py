"""Filesystem-backed descriptor store."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalDescriptorStore:
    """Reads and writes descriptors as UTF-8 text on the local disk.

    Newlines are written exactly as given so an unchanged byte stays
    unchanged on disk.
    """

    def read_text(self, path: Path) -> str:
        with Path(path).open("r", encoding="utf-8", newline="") as fh:
            return fh.read()

    def write_text(self, path: Path, text: str) -> None:
        with Path(path).open("w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        logger.debug("LocalDescriptorStore: wrote %d chars to %s", len(text), path)
