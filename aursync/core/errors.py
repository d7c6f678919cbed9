"""Error taxonomy for package synchronization.

Every fatal condition raised while syncing one package derives from
``SyncError``.  The engine converts these into a ``failed`` result for that
package only; sibling packages in the same run are unaffected.

Non-fatal conditions (a checksum declaration without an architecture
suffix, or a suffix no architecture matches) are not exceptions.  They are
recorded as ``FieldIssue`` entries by the locator and surfaced as warnings.
"""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for every fatal per-package synchronization error."""


class ConfigError(SyncError):
    """Raised when required configuration is missing or malformed.

    Raised before any network or file activity for the package.
    """

    def __init__(self, message: str, *, package: str | None = None) -> None:
        super().__init__(message)
        self.package = package


class NetworkError(SyncError):
    """Raised on a non-200 response from GitHub or a checksum download."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class CoverageMismatch(SyncError):
    """Raised when located checksum fields and resolved values disagree.

    The descriptor is never mutated or written when this is raised.
    """

    def __init__(self, located: int, resolved: int, unresolved: list[int] | None = None) -> None:
        self.located = located
        self.resolved = resolved
        self.unresolved = list(unresolved or [])
        detail = f"located {located} checksum fields but resolved {resolved} values"
        if self.unresolved:
            detail += f" (unresolved field indices: {self.unresolved})"
        super().__init__(
            "Number of architecture sums and number of matches are not equal: " + detail
        )


class BuildVerifierFailure(SyncError):
    """Raised when ``makepkg --printsrcinfo`` exits nonzero.

    The primary descriptor has already been written at this point; the
    secondary descriptor is left alone and nothing is committed.
    """

    def __init__(self, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class VCSError(SyncError):
    """Raised when a git command (pull, add, commit) fails."""

    def __init__(self, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class VCSPermissionError(VCSError):
    """Raised when ``git push`` is rejected.  The local commit is kept."""


class HookFailure(SyncError):
    """Raised when the post-update shell hook exits nonzero."""


class PatchConflict(SyncError):
    """Raised when the edits of a patch plan overlap or fall outside the text.

    Raised before any edit is applied; the descriptor is left untouched.
    """
