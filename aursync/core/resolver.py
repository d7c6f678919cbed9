"""Checksum resolution from release assets.

Each release asset whose name matches the package's filter pattern is
classified by architecture.  Every located field of that architecture gets
the first whitespace-delimited token of the asset body as its new value.

Downloads are independent and run on a thread pool.  Workers only return
values; the calling thread collects them into ``ResolvedChecksum`` records
in submission order, so no span is ever touched concurrently.  The first
failed download cancels what has not started yet and propagates.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from aursync.bridge import Fetcher
from aursync.core.arch import classify
from aursync.core.errors import ConfigError, NetworkError
from aursync.models.descriptor import ChecksumField, ResolvedChecksum
from aursync.models.release import ReleaseAsset

logger = logging.getLogger(__name__)


def parse_checksum(body: str) -> str:
    """Return the first whitespace-delimited token of a checksum file."""
    tokens = body.split()
    return tokens[0] if tokens else ""


class ChecksumResolver:
    """Matches release assets to checksum fields and downloads their values.

    Parameters
    ----------
    fetcher:
        HTTP collaborator used for the asset downloads.
    filter_pattern:
        Regular expression an asset name must contain a match for.  The
        empty pattern matches every asset.
    max_workers:
        Upper bound on concurrent downloads.
    package_name:
        Used only to prefix log lines.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        filter_pattern: str = "",
        *,
        max_workers: int = 4,
        package_name: str = "",
    ) -> None:
        try:
            self._filter = re.compile(filter_pattern)
        except re.error as exc:
            raise ConfigError(f"Invalid sum_filter_regex {filter_pattern!r}: {exc}") from exc
        self._fetcher = fetcher
        self._max_workers = max(1, max_workers)
        self._prefix = f"{package_name}: " if package_name else ""

    def match_assets(
        self, fields: Sequence[ChecksumField], assets: Sequence[ReleaseAsset]
    ) -> list[tuple[int, ReleaseAsset]]:
        """Pair each applicable asset with every field of its architecture."""
        pairs: list[tuple[int, ReleaseAsset]] = []
        for asset in assets:
            if not self._filter.search(asset.name):
                continue
            logger.info("%sApplicable asset: %s", self._prefix, asset.name)
            arch = classify(asset.name)
            if arch is None:
                logger.warning("%sNo architecture in asset name %s", self._prefix, asset.name)
                continue
            for index, field in enumerate(fields):
                if field.arch == arch:
                    pairs.append((index, asset))
        return pairs

    def resolve(
        self, fields: Sequence[ChecksumField], assets: Sequence[ReleaseAsset]
    ) -> list[ResolvedChecksum]:
        """Download a value for every (field, asset) pair.

        Raises ``NetworkError`` on the first failed or empty download.
        """
        if not fields:
            return []
        pairs = self.match_assets(fields, assets)
        if not pairs:
            return []

        resolved: list[ResolvedChecksum] = []
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(pairs))) as executor:
            futures: list[tuple[int, ReleaseAsset, Future[str]]] = [
                (index, asset, executor.submit(self._download, asset))
                for index, asset in pairs
            ]
            try:
                for index, asset, future in futures:
                    resolved.append(
                        ResolvedChecksum(
                            field_index=index,
                            value=future.result(),
                            asset_name=asset.name,
                        )
                    )
            except NetworkError:
                for _, _, pending in futures:
                    pending.cancel()
                raise
        return resolved

    def _download(self, asset: ReleaseAsset) -> str:
        response = self._fetcher.fetch("GET", asset.url, binary=True)
        if response.status != 200:
            raise NetworkError(
                f"Received error from GitHub downloading {asset.name}: "
                f"{response.status} {response.body[:200]}",
                status=response.status,
            )
        value = parse_checksum(response.body)
        if not value:
            raise NetworkError(f"Checksum asset {asset.name} is empty", status=response.status)
        logger.info("%sGot sum %s", self._prefix, value)
        return value
