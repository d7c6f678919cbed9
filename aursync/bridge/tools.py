"""Subprocess-backed tool runner for makepkg, git and shell hooks."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from aursync.bridge import ToolResult

logger = logging.getLogger(__name__)

BUILD_VERIFIER_COMMAND: tuple[str, ...] = ("makepkg", "--printsrcinfo")


class SubprocessToolRunner:
    """Runs external commands and captures their output as text.

    A missing executable is reported as exit code 127, the way a shell
    reports it, rather than raised.
    """

    def __init__(
        self,
        *,
        git: str = "git",
        verifier: Sequence[str] = BUILD_VERIFIER_COMMAND,
        shell: str = "sh",
    ) -> None:
        self._git = git
        self._verifier = tuple(verifier)
        self._shell = shell

    def run_build_verifier(self, cwd: Path) -> ToolResult:
        return self._run(list(self._verifier), cwd=cwd)

    def run_vcs(self, args: Sequence[str], cwd: Path) -> ToolResult:
        return self._run([self._git, *args], cwd=cwd)

    def run_hook(self, command: str, env: Mapping[str, str]) -> ToolResult:
        return self._run([self._shell, "-c", command], env={**os.environ, **env})

    @staticmethod
    def _run(
        cmd: list[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ToolResult:
        logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            return ToolResult(exit_code=127, stderr=str(exc))
        except OSError as exc:
            return ToolResult(exit_code=126, stderr=str(exc))
        return ToolResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
