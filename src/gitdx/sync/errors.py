"""Sync engine error taxonomy.

Every error carries a severity:
- soft: the commit is not managed; callers skip it.
- hard: the stack is in a shape the engine refuses to push; nothing was pushed.
- recoverable: retry after re-resolving, or after a human resolves a conflict.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Literal

if TYPE_CHECKING:
    from gitdx.sync.models import ConflictReport

Severity = Literal["soft", "hard", "recoverable"]


class SyncError(Exception):
    """Base error for the sync engine."""

    severity: ClassVar[Severity] = "hard"


class NoDirectiveError(SyncError):
    """Commit carries no branch directive, so it is not managed."""

    severity: ClassVar[Severity] = "soft"

    def __init__(self, sha: str, key: str) -> None:
        super().__init__(f"Commit {sha[:12]} has no {key!r} trailer")
        self.sha = sha
        self.key = key


class MalformedTrailerError(NoDirectiveError):
    """Directive is written with a delimiter the configured separators exclude."""

    def __init__(self, sha: str, key: str, separators: str) -> None:
        SyncError.__init__(
            self,
            f"Commit {sha[:12]} names {key!r} with a delimiter outside the configured "
            f"trailer separators {separators!r}; treating it as unmanaged",
        )
        self.sha = sha
        self.key = key
        self.separators = separators


class DuplicateDirectiveError(SyncError):
    """Commit carries more than one branch directive."""

    def __init__(self, sha: str, key: str, values: list[str]) -> None:
        super().__init__(
            f"Commit {sha[:12]} has {len(values)} {key!r} trailers: {', '.join(values)}"
        )
        self.sha = sha
        self.key = key
        self.values = values


class InvalidBranchNameError(SyncError):
    """Directive maps to a branch name git does not accept."""

    def __init__(self, sha: str, key: str, branch: str) -> None:
        super().__init__(
            f"Commit {sha[:12]} names branch {branch!r}, which is not a valid ref name"
        )
        self.sha = sha
        self.key = key
        self.branch = branch


class NotLinearError(SyncError):
    """Source commit does not have exactly one parent."""

    def __init__(self, sha: str, parent_count: int) -> None:
        super().__init__(
            f"Commit {sha[:12]} has {parent_count} parents; "
            "only single-parent commits can be synced"
        )
        self.sha = sha
        self.parent_count = parent_count


class UnknownTargetBranchError(SyncError):
    """The upstream commit's branch has never been pushed."""

    def __init__(self, branch: str, upstream_sha: str) -> None:
        super().__init__(
            f"Branch {branch!r} for upstream commit {upstream_sha[:12]} does not exist yet; "
            "sync the upstream commit first"
        )
        self.branch = branch
        self.upstream_sha = upstream_sha


class DiffbaseDivergenceError(SyncError):
    """Upstream branch head is not treequal to the local diffbase."""

    def __init__(self, branch: str, local_sha: str, remote_sha: str) -> None:
        super().__init__(
            f"Upstream branch {branch!r} at {remote_sha[:12]} does not match local diffbase "
            f"{local_sha[:12]}; sync the upstream commit first"
        )
        self.branch = branch
        self.local_sha = local_sha
        self.remote_sha = remote_sha


class MergeConflictError(SyncError):
    """Applying the upstream change to the target branch conflicted."""

    severity: ClassVar[Severity] = "recoverable"

    def __init__(self, report: ConflictReport) -> None:
        super().__init__(
            f"Updating {report.target_branch!r} conflicted in: {', '.join(report.paths)}"
        )
        self.report = report


class DivergedError(SyncError):
    """Remote branch moved since it was observed; nothing was overwritten."""

    severity: ClassVar[Severity] = "recoverable"

    def __init__(self, branch: str, expected: str | None, actual: str | None) -> None:
        super().__init__(
            f"Branch {branch!r} moved: expected {expected or '<absent>'}, "
            f"found {actual or '<unknown>'}; re-sync to retry"
        )
        self.branch = branch
        self.expected = expected
        self.actual = actual


class UnrelatedHistoryError(SyncError):
    """Target branch shares no history with the new remote diffbase."""

    def __init__(self, branch: str, head_sha: str, diffbase_sha: str) -> None:
        super().__init__(
            f"Branch {branch!r} at {head_sha[:12]} shares no history with diffbase "
            f"{diffbase_sha[:12]}; refusing to merge"
        )
        self.branch = branch
        self.head_sha = head_sha
        self.diffbase_sha = diffbase_sha
