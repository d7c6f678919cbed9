"""Per-package and per-run outcome models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SyncOutcome(str, Enum):
    """How processing a single package ended."""

    UP_TO_DATE = "up_to_date"
    UPDATED = "updated"
    DRY_RUN = "dry_run"
    FAILED = "failed"


class PackageResult(BaseModel):
    """Result of one package session.

    ``status`` follows process exit-code conventions: 0 for success or a
    legitimate no-op, 1 for failure.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    outcome: SyncOutcome
    error: str | None = None
    error_type: str | None = None
    warnings: list[str] = []
    current_version: str | None = None
    new_version: str | None = None
    final_text: str | None = None

    @property
    def status(self) -> int:
        return 1 if self.outcome == SyncOutcome.FAILED else 0


class RunSummary(BaseModel):
    """Aggregated results of a multi-package run, in configuration order."""

    model_config = ConfigDict(frozen=True)

    results: list[PackageResult] = []

    @property
    def failed(self) -> list[PackageResult]:
        return [r for r in self.results if r.status != 0]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
