"""Shared test fixtures for aursync."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from aursync.bridge import FetchResponse, ToolResult
from aursync.core.engine import UpdateDecisionEngine
from aursync.models.config import PackageConfig

SAMPLE_PKGBUILD = """\
# Maintainer: Jane Doe <jane@example.com>
pkgname=foo-bin
pkgver=1.2.0
pkgrel=3
pkgdesc="Foo, prebuilt"
arch=('x86_64' 'aarch64')
url="https://github.com/foo/foo"
license=('MIT')
source_x86_64=("foo-$pkgver-x86_64.tar.gz::https://github.com/foo/foo/releases/download/$pkgver/foo-x86_64.tar.gz")
source_aarch64=("foo-$pkgver-aarch64.tar.gz::https://github.com/foo/foo/releases/download/$pkgver/foo-aarch64.tar.gz")
sha256sums_x86_64=('OLD1')
sha256sums_aarch64=("OLD2")

package() {
    install -Dm755 foo "$pkgdir/usr/bin/foo"
}
"""

API = "https://api.github.com"
LATEST_URL = f"{API}/repos/foo/foo/releases/latest"
DIFF_OUTPUT = "diff --git a/PKGBUILD b/PKGBUILD\n"


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeFetcher:
    """Serves canned responses keyed by absolute URL and records requests.

    API-relative paths are resolved against ``API`` like ``GitHubClient``.
    Unknown URLs answer 404.
    """

    def __init__(self, routes: Mapping[str, FetchResponse] | None = None) -> None:
        self.routes: dict[str, FetchResponse] = dict(routes or {})
        self.calls: list[tuple[str, str, bool]] = []
        self._lock = threading.Lock()

    def fetch(self, method: str, url: str, binary: bool = False) -> FetchResponse:
        if not url.startswith("http"):
            url = API + url
        with self._lock:
            self.calls.append((method, url, binary))
        return self.routes.get(url, FetchResponse(status=404, body='{"message": "Not Found"}'))

    def urls(self) -> list[str]:
        return [url for _, url, _ in self.calls]


class InMemoryStore:
    """Descriptor store backed by a dict; records writes in order."""

    def __init__(self, files: Mapping[Path, str] | None = None) -> None:
        self.files: dict[Path, str] = dict(files or {})
        self.writes: list[Path] = []

    def read_text(self, path: Path) -> str:
        try:
            return self.files[Path(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path: Path, text: str) -> None:
        self.files[Path(path)] = text
        self.writes.append(Path(path))


class FakeTools:
    """Tool runner returning scripted results and recording invocations.

    ``vcs`` maps a git subcommand (``"pull"``, ``"push"`` ...) to its
    result; unlisted subcommands succeed, and ``diff`` reports a change.
    """

    def __init__(
        self,
        *,
        verifier: ToolResult | None = None,
        vcs: Mapping[str, ToolResult] | None = None,
        hook: ToolResult | None = None,
        on_pull: Callable[[], None] | None = None,
    ) -> None:
        self.verifier = verifier or ToolResult(exit_code=0, stdout="pkgbase = foo-bin\n")
        self.vcs = dict(vcs or {})
        self.hook = hook or ToolResult(exit_code=0)
        self.on_pull = on_pull
        self.calls: list[tuple[str, ...]] = []
        self.hook_env: dict[str, str] | None = None

    def run_build_verifier(self, cwd: Path) -> ToolResult:
        self.calls.append(("makepkg",))
        return self.verifier

    def run_vcs(self, args: Sequence[str], cwd: Path) -> ToolResult:
        self.calls.append(("git", *args))
        if args[0] == "pull" and self.on_pull is not None:
            self.on_pull()
        if args[0] in self.vcs:
            return self.vcs[args[0]]
        return ToolResult(exit_code=0, stdout=DIFF_OUTPUT if args[0] == "diff" else "")

    def run_hook(self, command: str, env: Mapping[str, str]) -> ToolResult:
        self.calls.append(("hook", command))
        self.hook_env = dict(env)
        return self.hook

    def git_commands(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "git"]


def release_json(tag: str, assets: list[tuple[str, str]]) -> str:
    """Build a minimal ``releases/latest`` payload."""
    return json.dumps(
        {
            "tag_name": tag,
            "assets": [{"name": name, "url": url, "size": 64} for name, url in assets],
        }
    )


def default_routes(tag: str = "1.3.0") -> dict[str, FetchResponse]:
    """Latest release *tag* with one checksum asset per architecture."""
    return {
        LATEST_URL: FetchResponse(
            status=200,
            body=release_json(
                tag,
                [
                    ("foo-x86_64.tar.gz", f"{API}/assets/1"),
                    ("foo-x86_64.tar.gz.sha256", f"{API}/assets/2"),
                    ("foo-aarch64.tar.gz", f"{API}/assets/3"),
                    ("foo-aarch64.tar.gz.sha256", f"{API}/assets/4"),
                ],
            ),
        ),
        f"{API}/assets/2": FetchResponse(status=200, body="NEW1  foo-x86_64.tar.gz\n"),
        f"{API}/assets/4": FetchResponse(status=200, body="NEW2  foo-aarch64.tar.gz\n"),
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pkgbuild() -> str:
    """A PKGBUILD at 1.2.0-3 with x86_64 and aarch64 checksum fields."""
    return SAMPLE_PKGBUILD


@pytest.fixture
def package_config() -> PackageConfig:
    """Package config for foo-bin, selecting ``*.sha256`` assets."""
    return PackageConfig(name="foo-bin", owner="foo", repo="foo", sum_filter_regex=r"\.sha256$")


@pytest.fixture
def make_fetcher() -> Callable[..., FakeFetcher]:
    """Factory fixture: a FakeFetcher, by default serving release 1.3.0."""

    def _factory(
        routes: Mapping[str, FetchResponse] | None = None,
        *,
        extra: Mapping[str, FetchResponse] | None = None,
    ) -> FakeFetcher:
        merged = default_routes() if routes is None else dict(routes)
        merged.update(extra or {})
        return FakeFetcher(merged)

    return _factory


@pytest.fixture
def make_tools() -> Callable[..., FakeTools]:
    """Factory fixture: a FakeTools with scripted results."""
    return FakeTools


@pytest.fixture
def make_release() -> Callable[..., str]:
    """Factory fixture: a ``releases/latest`` JSON body."""
    return release_json


@pytest.fixture
def fetcher(make_fetcher: Callable[..., FakeFetcher]) -> FakeFetcher:
    return make_fetcher()


@pytest.fixture
def store(sample_pkgbuild: str, package_config: PackageConfig) -> InMemoryStore:
    return InMemoryStore({package_config.pkgbuild_path: sample_pkgbuild})


@pytest.fixture
def tools() -> FakeTools:
    return FakeTools()


@pytest.fixture
def make_engine(
    fetcher: FakeFetcher, store: InMemoryStore, tools: FakeTools
) -> Callable[..., UpdateDecisionEngine]:
    """Factory fixture: an engine wired to the shared fakes."""

    def _factory(**overrides: Any) -> UpdateDecisionEngine:
        kwargs: dict[str, Any] = {
            "fetcher": fetcher,
            "store": store,
            "tools": tools,
            "download_workers": 2,
        }
        kwargs.update(overrides)
        return UpdateDecisionEngine(**kwargs)

    return _factory
