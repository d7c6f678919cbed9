"""Canonical processor architecture tags."""

from __future__ import annotations

from enum import Enum


class Arch(str, Enum):
    """Architecture identifiers as they appear in ``arch=()`` of a PKGBUILD."""

    X86_64 = "x86_64"
    I686 = "i686"
    AARCH64 = "aarch64"
    ARMV7H = "armv7h"
