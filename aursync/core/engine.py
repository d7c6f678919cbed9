"""Update decision engine — syncs one package against its latest release.

Ordering for a package:

    read pkgver -> latest release -> git pull -> re-read pkgver
        -> locate fields -> resolve checksums -> check coverage -> patch
        -> (dry run: stop) -> write PKGBUILD -> makepkg --printsrcinfo
        -> write .SRCINFO -> git diff/add/commit/push -> post-update hook

Any ``SyncError`` ends the session with a ``failed`` result.  Nothing is
written unless the patch plan covers every located checksum field.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from aursync.bridge import DescriptorStore, Fetcher, ToolResult, ToolRunner
from aursync.core.errors import (
    BuildVerifierFailure,
    ConfigError,
    HookFailure,
    NetworkError,
    SyncError,
    VCSError,
    VCSPermissionError,
)
from aursync.core.locator import locate_checksum_fields
from aursync.core.patcher import build_plan, patch_descriptor
from aursync.core.resolver import ChecksumResolver
from aursync.core.version import find_version
from aursync.models.config import PackageConfig
from aursync.models.release import Release
from aursync.models.results import PackageResult, SyncOutcome

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "Updated to {tag}\nThis was an auto-update by aursync"


class UpdateDecisionEngine:
    """Decides whether a package needs a sync and carries it out.

    Parameters
    ----------
    fetcher:
        GitHub HTTP collaborator.
    store:
        Descriptor persistence.
    tools:
        Build verifier, git and hook runner.
    force_update:
        Re-sync even when the descriptor already declares the latest tag.
        A package's own ``force_update`` option also enables this.
    download_workers:
        Concurrent checksum downloads per package.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        store: DescriptorStore,
        tools: ToolRunner,
        *,
        force_update: bool = False,
        download_workers: int = 4,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._tools = tools
        self._force_update = force_update
        self._download_workers = download_workers

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def process(self, config: PackageConfig) -> PackageResult:
        """Sync one package.  Never raises ``SyncError``; failures are results."""
        warnings: list[str] = []
        try:
            return self._process(config, warnings)
        except SyncError as exc:
            logger.error("%s: %s", config.name, exc)
            logger.error("Failed to process package %s. See output above.", config.name)
            return PackageResult(
                name=config.name,
                outcome=SyncOutcome.FAILED,
                error=str(exc),
                error_type=type(exc).__name__,
                warnings=warnings,
            )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _process(self, config: PackageConfig, warnings: list[str]) -> PackageResult:
        force = self._force_update or config.force_update
        logger.info("Processing package %s", config.name)

        current = self._read_version(config)
        release = self.latest_release(config.owner, config.repo)
        tag = release.tag_name

        if tag == current and not force:
            logger.info("%s: up to date at %s", config.name, current)
            return PackageResult(
                name=config.name,
                outcome=SyncOutcome.UP_TO_DATE,
                current_version=current,
                new_version=tag,
            )

        if not config.dry_run:
            self._vcs(config, ["pull"], "git pull")

        text = self._read(config)
        after_pull = find_version(text)
        if after_pull is None:
            raise ConfigError(f"No pkgver declaration in {config.pkgbuild_path} after pull")
        if after_pull == tag and not force:
            logger.info("%s: already at %s after pull", config.name, tag)
            return PackageResult(
                name=config.name,
                outcome=SyncOutcome.UP_TO_DATE,
                current_version=after_pull,
                new_version=tag,
            )

        logger.info("Updating package. Current: %s Newest: %s", after_pull, tag)
        final_text = self._patch(config, text, release, warnings)

        if config.dry_run:
            outcome = SyncOutcome.DRY_RUN
        else:
            self._persist(config, final_text, tag)
            outcome = SyncOutcome.UPDATED

        if config.post_update:
            self._run_hook(config, final_text, tag)

        return PackageResult(
            name=config.name,
            outcome=outcome,
            warnings=warnings,
            current_version=after_pull,
            new_version=tag,
            final_text=final_text,
        )

    def _read(self, config: PackageConfig) -> str:
        try:
            return self._store.read_text(config.pkgbuild_path)
        except OSError as exc:
            raise ConfigError(f"Cannot read descriptor {config.pkgbuild_path}: {exc}") from exc

    def _read_version(self, config: PackageConfig) -> str:
        text = self._read(config)
        version = find_version(text)
        if version is None:
            raise ConfigError(f"No pkgver declaration in {config.pkgbuild_path}")
        return version

    def latest_release(self, owner: str, repo: str) -> Release:
        """Fetch the latest release of ``owner/repo``."""
        response = self._fetcher.fetch("GET", f"/repos/{owner}/{repo}/releases/latest")
        if response.status != 200:
            raise NetworkError(
                f"Received error from GitHub: {response.status} {response.body[:500]}",
                status=response.status,
            )
        try:
            return Release.model_validate_json(response.body)
        except ValidationError as exc:
            raise NetworkError(f"Unexpected release payload for {owner}/{repo}: {exc}") from exc

    def _patch(
        self,
        config: PackageConfig,
        text: str,
        release: Release,
        warnings: list[str],
    ) -> str:
        report = locate_checksum_fields(text, config.name)
        warnings.extend(issue.message for issue in report.issues)

        resolver = ChecksumResolver(
            self._fetcher,
            config.sum_filter_regex,
            max_workers=self._download_workers,
            package_name=config.name,
        )
        resolved = resolver.resolve(report.fields, release.assets)

        plan = build_plan(
            text,
            report.fields,
            resolved,
            new_version=release.tag_name,
            package_name=config.name,
        )
        return patch_descriptor(text, plan, package_name=config.name)

    def _persist(self, config: PackageConfig, final_text: str, tag: str) -> None:
        cwd = config.checkout
        self._store.write_text(config.pkgbuild_path, final_text)

        verifier = self._tools.run_build_verifier(cwd)
        if not verifier.ok:
            raise BuildVerifierFailure(
                f"makepkg failed with exit code {verifier.exit_code}: {verifier.stderr.strip()}",
                stderr=verifier.stderr,
            )
        self._store.write_text(config.srcinfo_path, verifier.stdout)

        diff = self._vcs(config, ["diff"], "git diff")
        if not diff.stdout:
            logger.error("%s: Nothing changed according to Git, yet we have updated!", config.name)
            return

        self._vcs(config, ["add", "."], "git add")
        self._vcs(config, ["commit", "-m", COMMIT_MESSAGE.format(tag=tag)], "git commit")

        push = self._tools.run_vcs(["push"], cwd)
        if not push.ok:
            raise VCSPermissionError(
                "You don't have the permissions to push changes: " + push.stderr.strip(),
                stderr=push.stderr,
            )
        logger.info("%s: Pushed changes", config.name)

    def _vcs(self, config: PackageConfig, args: list[str], what: str) -> ToolResult:
        result = self._tools.run_vcs(args, config.checkout)
        if not result.ok:
            raise VCSError(
                f"`{what}` failed with exit code {result.exit_code}: {result.stderr.strip()}",
                stderr=result.stderr,
            )
        return result

    def _run_hook(self, config: PackageConfig, final_text: str, tag: str) -> None:
        env = {
            "AUR_PKGBUILD": final_text,
            "AUR_VERSION_NEW": tag,
            "AUR_NAME": config.name,
        }
        result = self._tools.run_hook(config.post_update or "", env)
        if not result.ok:
            raise HookFailure(
                f"post_update hook exited with {result.exit_code}: {result.stderr.strip()}"
            )
