"""Descriptor patching with offset bookkeeping.

A ``DescriptorPatcher`` owns a private copy of the descriptor text and a
list of working spans, one per replacement.  Spans are plain indices kept
in a list the patcher alone writes to.  After each splice every other span
that starts after the edited region is shifted by the length delta; spans
before the edit are untouched because spans never overlap.

Because of that rule the final text does not depend on the order in which
replacements are applied.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from aursync.core.errors import PatchConflict
from aursync.core.version import find_release_span, find_version, find_version_span
from aursync.models.descriptor import ChecksumField, PatchPlan, Replacement, ResolvedChecksum

logger = logging.getLogger(__name__)


class DescriptorPatcher:
    """Single-writer splice session over one descriptor.

    Parameters
    ----------
    text:
        The descriptor text the replacement offsets refer to.
    replacements:
        Non-overlapping splices.  Overlapping or touching spans raise
        ``ValueError``.
    package_name:
        Used only to prefix log lines.
    """

    def __init__(
        self,
        text: str,
        replacements: Sequence[Replacement],
        *,
        package_name: str = "",
    ) -> None:
        self._text = text
        self._replacements = list(replacements)
        self._spans: list[list[int]] = [[r.start, r.end] for r in self._replacements]
        self._applied: set[int] = set()
        self._prefix = f"{package_name}: " if package_name else ""
        self._check_spans()

    def _check_spans(self) -> None:
        length = len(self._text)
        for start, end in self._spans:
            if not 0 <= start <= end <= length:
                raise ValueError(f"Span [{start}, {end}) is outside the descriptor")
        ordered = sorted(self._spans)
        for (_, prev_end), (next_start, _) in zip(ordered, ordered[1:]):
            if next_start <= prev_end:
                raise ValueError(
                    f"Replacement spans overlap or touch at offset {next_start}"
                )

    @property
    def text(self) -> str:
        """The descriptor text with every replacement applied so far."""
        return self._text

    def span(self, index: int) -> tuple[int, int]:
        """Current ``(start, end)`` of replacement *index* in ``text``."""
        start, end = self._spans[index]
        return start, end

    def apply(self, index: int) -> None:
        """Splice replacement *index* into the text and shift later spans."""
        if index in self._applied:
            raise ValueError(f"Replacement {index} has already been applied")
        replacement = self._replacements[index]
        start, end = self._spans[index]

        logger.info(
            "%sReplacing %s %s",
            self._prefix,
            replacement.label or "value",
            self._text[start:end],
        )
        self._text = self._text[:start] + replacement.value + self._text[end:]

        delta = len(replacement.value) - (end - start)
        for other, span in enumerate(self._spans):
            if other != index and span[0] > end:
                span[0] += delta
                span[1] += delta
        self._spans[index] = [start, start + len(replacement.value)]
        self._applied.add(index)

    def apply_all(self, order: Sequence[int] | None = None) -> str:
        """Apply every replacement, in *order* if given, and return the text.

        *order* must be a permutation of the replacement indices.
        """
        indices = list(range(len(self._replacements))) if order is None else list(order)
        if sorted(indices) != list(range(len(self._replacements))):
            raise ValueError("order must be a permutation of the replacement indices")
        for index in indices:
            self.apply(index)
        return self._text


def build_plan(
    text: str,
    fields: Sequence[ChecksumField],
    resolved: Sequence[ResolvedChecksum],
    *,
    new_version: str | None = None,
    package_name: str = "",
) -> PatchPlan:
    """Assemble the patch plan for *text*.

    When *new_version* is given it replaces the ``pkgver`` value.  The
    ``pkgrel`` counter is reset to 1 only if that changes the version; a
    forced re-sync of the current version leaves it alone.
    """
    prefix = f"{package_name}: " if package_name else ""
    current_version = find_version(text)
    reset_release = False
    if new_version is not None:
        reset_release = current_version != new_version
        if not reset_release:
            logger.info(
                "%sDid not reset pkgrel, we are force-updating the same version.",
                prefix,
            )
        elif find_release_span(text) is None:
            logger.warning("%sNo pkgrel declaration to reset.", prefix)

    return PatchPlan(
        fields=list(fields),
        resolved=list(resolved),
        new_version=new_version,
        version_span=find_version_span(text) if new_version is not None else None,
        release_span=find_release_span(text) if reset_release else None,
        reset_release=reset_release,
    )


def patch_descriptor(text: str, plan: PatchPlan, *, package_name: str = "") -> str:
    """Validate *plan* and return *text* with all of its edits applied.

    Raises ``CoverageMismatch`` before touching anything if the plan does
    not cover every located field, and ``PatchConflict`` if two of its
    edits overlap.  An empty plan returns *text* as is.
    """
    plan.check_coverage()
    try:
        patcher = DescriptorPatcher(text, plan.replacements(), package_name=package_name)
    except ValueError as exc:
        raise PatchConflict(str(exc)) from exc
    return patcher.apply_all()
