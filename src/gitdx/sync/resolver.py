"""Diffbase resolution: where on the remote a source commit's change starts."""

from __future__ import annotations

import structlog

from gitdx.config.models import SyncConfig
from gitdx.git._internal import make_branch_ref, make_remote_ref
from gitdx.git.models import CommitInfo
from gitdx.git.store import ObjectStore
from gitdx.sync.directives import DirectiveReader
from gitdx.sync.errors import DiffbaseDivergenceError, NotLinearError, UnknownTargetBranchError
from gitdx.sync.models import Diffbase

log = structlog.get_logger(__name__)


class DiffbaseResolver:
    """Computes the local and remote diffbase of a source commit.

    The local diffbase is the sole parent. If that parent is itself managed
    and not yet merged into mainline, the remote diffbase is the current head
    of the parent's branch, which must be treequal to the parent; otherwise the
    parent itself is the remote diffbase.
    """

    def __init__(self, store: ObjectStore, reader: DirectiveReader, config: SyncConfig) -> None:
        self._store = store
        self._reader = reader
        self._remote = config.remote
        self._mainline = config.mainline

    def mainline_head(self) -> str | None:
        """Mainline head, preferring the remote-tracking ref over the local branch."""
        return self._store.resolve_ref(
            make_remote_ref(self._remote, self._mainline)
        ) or self._store.resolve_ref(make_branch_ref(self._mainline))

    def local_diffbase(self, source: CommitInfo) -> CommitInfo:
        if len(source.parent_shas) != 1:
            raise NotLinearError(source.sha, len(source.parent_shas))
        return self._store.read_commit(source.parent_shas[0])

    def resolve(self, source: CommitInfo) -> Diffbase:
        local = self.local_diffbase(source)
        upstream = self._reader.read_optional(local)

        if upstream is None or self._merged_into_mainline(local.sha):
            diffbase = Diffbase(local=local, remote_sha=local.sha)
        else:
            head = self._store.remote_branch_head(self._remote, upstream.target_branch)
            if head is None:
                raise UnknownTargetBranchError(upstream.target_branch, local.sha)
            diffbase = Diffbase(
                local=local, remote_sha=head, upstream_branch=upstream.target_branch
            )

        if not self._store.tree_equal(diffbase.local.sha, diffbase.remote_sha):
            raise DiffbaseDivergenceError(
                diffbase.upstream_branch or diffbase.local.sha, local.sha, diffbase.remote_sha
            )

        log.info(
            "diffbase.resolved",
            source=source.sha,
            local=local.sha,
            remote=diffbase.remote_sha,
            upstream=diffbase.upstream_branch,
        )
        return diffbase

    def _merged_into_mainline(self, sha: str) -> bool:
        head = self.mainline_head()
        return head is not None and self._store.is_ancestor(sha, head)
