"""Multi-package runs.

Packages share no state, so they are processed in parallel.  Each one is
isolated: a configuration error, a failed sync, or an unexpected exception
in one package becomes that package's failed result and never stops the
others.  Results are reported in configuration order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from aursync.core.engine import UpdateDecisionEngine
from aursync.core.errors import ConfigError
from aursync.models.config import PackageConfig
from aursync.models.results import PackageResult, RunSummary, SyncOutcome

logger = logging.getLogger(__name__)


def _failed(name: str, exc: Exception) -> PackageResult:
    return PackageResult(
        name=name,
        outcome=SyncOutcome.FAILED,
        error=str(exc),
        error_type=type(exc).__name__,
    )


class SyncRunner:
    """Runs the engine over many packages and aggregates their status.

    Parameters
    ----------
    engine:
        The engine shared by every package session.
    max_workers:
        Packages processed at once.  1 runs them serially.
    """

    def __init__(self, engine: UpdateDecisionEngine, *, max_workers: int = 4) -> None:
        self._engine = engine
        self._max_workers = max(1, max_workers)

    def run(self, packages: Sequence[PackageConfig | ConfigError]) -> RunSummary:
        """Process every package; config errors are reported as failures."""
        results: list[PackageResult | None] = [None] * len(packages)
        runnable: list[tuple[int, PackageConfig]] = []

        for order, entry in enumerate(packages):
            if isinstance(entry, ConfigError):
                logger.error("%s", entry)
                results[order] = _failed(entry.package or f"<package #{order + 1}>", entry)
            else:
                runnable.append((order, entry))

        if self._max_workers == 1 or len(runnable) <= 1:
            for order, config in runnable:
                results[order] = self._run_one(config)
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                future_map = {
                    executor.submit(self._run_one, config): order
                    for order, config in runnable
                }
                for future in as_completed(future_map):
                    results[future_map[future]] = future.result()

        summary = RunSummary(results=[r for r in results if r is not None])
        if summary.exit_code:
            logger.error(
                "%d of %d packages failed: %s",
                len(summary.failed),
                len(summary.results),
                ", ".join(r.name for r in summary.failed),
            )
        return summary

    def _run_one(self, config: PackageConfig) -> PackageResult:
        try:
            return self._engine.process(config)
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s: unexpected error", config.name)
            return _failed(config.name, exc)
