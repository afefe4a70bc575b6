"""Data models for the sync engine. All are recomputed on every run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from gitdx.git.models import CommitInfo


@dataclass(frozen=True, slots=True)
class BranchDirective:
    """Branch key read from a commit's trailers, and the branch it maps to."""

    key: str
    target_branch: str


@dataclass(frozen=True, slots=True)
class SourceCommit:
    """A local commit together with its directive (None when unmanaged)."""

    commit: CommitInfo
    directive: BranchDirective | None

    @property
    def sha(self) -> str:
        return self.commit.sha

    @property
    def tree_sha(self) -> str:
        return self.commit.tree_sha

    @property
    def is_managed(self) -> bool:
        return self.directive is not None


@dataclass(frozen=True, slots=True)
class Diffbase:
    """Local and remote diffbase of a source commit.

    ``upstream_branch`` is set when the remote diffbase is the head of the
    local diffbase's own target branch (the source is stacked).
    """

    local: CommitInfo
    remote_sha: str
    upstream_branch: str | None = None

    @property
    def stacked(self) -> bool:
        return self.upstream_branch is not None


@dataclass(frozen=True, slots=True)
class TargetBranchState:
    """Remote branch as last observed through its remote-tracking ref."""

    branch: str
    head_sha: str | None

    @property
    def exists(self) -> bool:
        return self.head_sha is not None


class MessageKind(Enum):
    """Which message a pushed commit carries."""

    FULL = auto()
    UPDATE_PATCH = auto()
    UPDATE_DIFFBASE = auto()
    NO_OP = auto()
    BUMP = auto()


@dataclass(frozen=True, slots=True)
class PatchUpdate:
    """Outcome of one sync: the commit to put on ``target_branch``.

    ``created`` lists every commit object written, oldest first. ``noop`` means
    the branch already matched the source and ``new_sha`` is its current head.
    """

    target_branch: str
    source_sha: str
    new_sha: str
    parents: tuple[str, ...]
    message_kind: MessageKind | None
    expected_old: str | None
    created: tuple[str, ...] = ()
    noop: bool = False
    pushed: bool = False


@dataclass(frozen=True, slots=True)
class ConflictReport:
    """Context handed to a human when the diffbase update conflicts.

    ``conflict_tree_sha`` is the merged tree with markers in conflicted files;
    once resolved, pass the resolved tree back as ``resolution``.
    """

    target_branch: str
    source_sha: str
    paths: tuple[str, ...]
    base_sha: str
    ours_sha: str
    theirs_sha: str
    conflict_tree_sha: str | None
