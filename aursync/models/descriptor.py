"""Descriptor field and patch plan models.

Offsets are Python string indices into the descriptor text the record was
located in.  Records are frozen; the patcher keeps its own working copy of
the spans while it edits.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from aursync.core.errors import CoverageMismatch
from aursync.models.arch import Arch


class ValueSpan(BaseModel):
    """Half-open ``[start, end)`` span of a value inside the descriptor."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class ChecksumField(BaseModel):
    """A located ``sha<N>sums_<arch>=(...)`` declaration.

    Only the first quoted value of the array is tracked.
    """

    model_config = ConfigDict(frozen=True)

    arch: Arch
    algorithm: str  # digit group of the token, "256" for sha256sums
    value_start: int
    value_end: int

    @property
    def label(self) -> str:
        return f"sha{self.algorithm}sums_{self.arch.value}"


class FieldIssueKind(str, Enum):
    """Why a checksum declaration was skipped."""

    UNSUPPORTED_FIELD = "unsupported_field"
    UNCLASSIFIED_ARCHITECTURE = "unclassified_architecture"


class FieldIssue(BaseModel):
    """A non-fatal problem found while locating checksum declarations."""

    model_config = ConfigDict(frozen=True)

    kind: FieldIssueKind
    label: str
    message: str


class Replacement(BaseModel):
    """Splice ``value`` into ``[start, end)`` of the descriptor."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    value: str
    label: str = ""


class ResolvedChecksum(BaseModel):
    """A checksum value downloaded for the field at ``field_index``."""

    model_config = ConfigDict(frozen=True)

    field_index: int
    value: str
    asset_name: str = ""


class PatchPlan(BaseModel):
    """Everything needed to rewrite one descriptor.

    A plan is applicable only when every located field was resolved exactly
    once; ``check_coverage()`` enforces that before any edit happens.
    """

    model_config = ConfigDict(frozen=True)

    fields: list[ChecksumField] = []
    resolved: list[ResolvedChecksum] = []
    new_version: str | None = None
    version_span: ValueSpan | None = None
    release_span: ValueSpan | None = None
    reset_release: bool = False

    def check_coverage(self) -> None:
        """Raise ``CoverageMismatch`` unless every field has exactly one value."""
        counts = [0] * len(self.fields)
        for item in self.resolved:
            if 0 <= item.field_index < len(counts):
                counts[item.field_index] += 1
        unresolved = [index for index, count in enumerate(counts) if count != 1]
        if len(self.resolved) != len(self.fields) or unresolved:
            raise CoverageMismatch(len(self.fields), len(self.resolved), unresolved)

    def replacements(self) -> list[Replacement]:
        """Return the splices of this plan in application order."""
        edits: list[Replacement] = []
        if self.new_version is not None and self.version_span is not None:
            edits.append(
                Replacement(
                    start=self.version_span.start,
                    end=self.version_span.end,
                    value=self.new_version,
                    label="pkgver",
                )
            )
        if self.reset_release and self.release_span is not None:
            edits.append(
                Replacement(
                    start=self.release_span.start,
                    end=self.release_span.end,
                    value="1",
                    label="pkgrel",
                )
            )
        for item in self.resolved:
            field = self.fields[item.field_index]
            edits.append(
                Replacement(
                    start=field.value_start,
                    end=field.value_end,
                    value=item.value,
                    label=field.label,
                )
            )
        return edits
