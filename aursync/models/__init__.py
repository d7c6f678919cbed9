"""aursync data models — all Pydantic v2, all frozen (immutable)."""

from aursync.models.arch import Arch
from aursync.models.config import PackageConfig, SyncConfig
from aursync.models.descriptor import (
    ChecksumField,
    FieldIssue,
    FieldIssueKind,
    PatchPlan,
    Replacement,
    ResolvedChecksum,
    ValueSpan,
)
from aursync.models.release import Release, ReleaseAsset
from aursync.models.results import PackageResult, RunSummary, SyncOutcome

__all__ = [
    # arch
    "Arch",
    # descriptor
    "ChecksumField",
    "FieldIssue",
    "FieldIssueKind",
    "PatchPlan",
    "Replacement",
    "ResolvedChecksum",
    "ValueSpan",
    # release
    "Release",
    "ReleaseAsset",
    # config
    "PackageConfig",
    "SyncConfig",
    # results
    "PackageResult",
    "RunSummary",
    "SyncOutcome",
]
