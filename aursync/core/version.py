"""``pkgver=`` / ``pkgrel=`` extraction.

The descriptor is assumed to declare each exactly once; only the first
match is considered.
"""

from __future__ import annotations

import re

from aursync.models.descriptor import ValueSpan

_VERSION_RE = re.compile(r"^pkgver=([^\r\n]*)", re.MULTILINE)
_RELEASE_RE = re.compile(r"^pkgrel=([^\r\n]*)", re.MULTILINE)


def find_version(text: str) -> str | None:
    """Return the value assigned to ``pkgver``, or ``None`` if undeclared."""
    match = _VERSION_RE.search(text)
    return match.group(1) if match else None


def find_release(text: str) -> str | None:
    """Return the value assigned to ``pkgrel``, or ``None`` if undeclared."""
    match = _RELEASE_RE.search(text)
    return match.group(1) if match else None


def find_version_span(text: str) -> ValueSpan | None:
    match = _VERSION_RE.search(text)
    return ValueSpan(start=match.start(1), end=match.end(1)) if match else None


def find_release_span(text: str) -> ValueSpan | None:
    match = _RELEASE_RE.search(text)
    return ValueSpan(start=match.start(1), end=match.end(1)) if match else None
