"""Collaborator protocols for the sync engine and their default backends.

The engine talks to the outside world only through these protocols:

1. ``Fetcher`` — HTTP requests against GitHub (``GitHubClient``).
2. ``DescriptorStore`` — descriptor persistence (``LocalDescriptorStore``).
3. ``ToolRunner`` — ``makepkg``, ``git`` and the post-update hook
   (``SubprocessToolRunner``).

Tests substitute lightweight fakes; any object with the right methods
satisfies the protocol.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class FetchResponse(BaseModel):
    """Status code and decoded body of an HTTP response."""

    model_config = ConfigDict(frozen=True)

    status: int
    body: str = ""


class ToolResult(BaseModel):
    """Exit code and captured output of an external command."""

    model_config = ConfigDict(frozen=True)

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class Fetcher(Protocol):
    """Issues HTTP requests.  Relative URLs are resolved against the API base."""

    def fetch(self, method: str, url: str, binary: bool = False) -> FetchResponse:
        """Perform the request and return status and body.

        Parameters
        ----------
        binary:
            Request the raw asset body (``application/octet-stream``)
            instead of API JSON.
        """
        ...


@runtime_checkable
class DescriptorStore(Protocol):
    """Reads and writes descriptor files."""

    def read_text(self, path: Path) -> str:
        ...

    def write_text(self, path: Path, text: str) -> None:
        ...


@runtime_checkable
class ToolRunner(Protocol):
    """Runs the build verifier, git and the post-update hook."""

    def run_build_verifier(self, cwd: Path) -> ToolResult:
        """Regenerate the ``.SRCINFO`` contents from the PKGBUILD in *cwd*."""
        ...

    def run_vcs(self, args: Sequence[str], cwd: Path) -> ToolResult:
        ...

    def run_hook(self, command: str, env: Mapping[str, str]) -> ToolResult:
        ...


__all__ = [
    "DescriptorStore",
    "FetchResponse",
    "Fetcher",
    "ToolResult",
    "ToolRunner",
]
