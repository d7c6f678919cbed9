"""Architecture classification by ordered substring precedence.

Asset filenames and checksum-field suffixes are free text.  The first
association whose token occurs anywhere in the label decides the
architecture, so the order below matters: ``x86`` is a substring of
``x86_64`` and must be tested after every 64-bit token.
"""

from __future__ import annotations

from aursync.models.arch import Arch

ARCH_ASSOCIATIONS: tuple[tuple[Arch, str], ...] = (
    (Arch.X86_64, "x64"),
    (Arch.X86_64, "x86_64"),
    (Arch.X86_64, "x86-64"),
    (Arch.I686, "i386"),
    (Arch.I686, "i486"),
    (Arch.I686, "i586"),
    (Arch.I686, "i686"),
    (Arch.I686, "x86-32"),
    (Arch.I686, "x86_32"),
    (Arch.I686, "ia32"),
    (Arch.AARCH64, "aarch64"),
    (Arch.AARCH64, "arm64"),
    (Arch.ARMV7H, "armv7h"),
    (Arch.ARMV7H, "armhf"),
    (Arch.I686, "x86"),
)


def classify(label: str) -> Arch | None:
    """Return the architecture named in *label*, or ``None``."""
    for arch, token in ARCH_ASSOCIATIONS:
        if token in label:
            return arch
    return None
