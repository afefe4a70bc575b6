"""Patch commit builder: the commit(s) that bring a target branch to the source tree.

Three cases, decided from the target branch head and the remote diffbase:

1. The branch does not exist: one commit with the source tree on top of the
   remote diffbase.
2. The head already contains the remote diffbase: one fast-forward child of
   the head with the source tree (or nothing, if the head already has it).
3. The head does not contain the remote diffbase (upstream moved): a merge
   commit with parents ``[head, remote diffbase]`` whose tree is the three-way
   merge of base = old diffbase, ours = head, theirs = new remote diffbase.
   The merge carries only the upstream change. When the result differs from
   the source tree, a fast-forward "update patch" commit follows.

Every result is treequal to the source commit.
"""

from __future__ import annotations

import structlog

from gitdx.core.errors import InternalError
from gitdx.git.store import ObjectStore
from gitdx.sync.errors import MergeConflictError, UnrelatedHistoryError
from gitdx.sync.messages import MessagePolicy
from gitdx.sync.models import (
    ConflictReport,
    Diffbase,
    MessageKind,
    PatchUpdate,
    SourceCommit,
    TargetBranchState,
)

log = structlog.get_logger(__name__)


class PatchBuilder:
    """Creates (but never pushes) the commits for one source commit."""

    def __init__(self, store: ObjectStore, policy: MessagePolicy) -> None:
        self._store = store
        self._policy = policy

    def build(
        self,
        source: SourceCommit,
        diffbase: Diffbase,
        target: TargetBranchState,
        *,
        message: str | None = None,
        allow_empty: bool = False,
        bump: bool = False,
        resolution: str | None = None,
    ) -> PatchUpdate:
        """Build the update for ``target``.

        Args:
            message: Custom headline for an "update patch" commit.
            allow_empty: Create a commit even when the branch already has the source tree.
            bump: Like allow_empty, but the empty commit asks CI to run.
            resolution: Tree sha to use for the diffbase merge commit, after a human
                resolved a previously reported conflict. Ignored, with a warning,
                when no diffbase merge is needed.

        Raises:
            MergeConflictError: The diffbase update conflicts (recoverable).
        """
        needs_merge = target.head_sha is not None and not self._store.is_ancestor(
            diffbase.remote_sha, target.head_sha
        )
        if resolution is not None and not needs_merge:
            log.warning("resolution.ignored", branch=target.branch, resolution=resolution)

        if target.head_sha is None:
            update = self._create_branch(source, diffbase, target)
        elif not needs_merge:
            update = self._fast_forward(
                source,
                target,
                parent=target.head_sha,
                created=(),
                message=message,
                allow_empty=allow_empty or bump,
                bump=bump,
            )
        else:
            update = self._merge_diffbase(
                source,
                diffbase,
                target,
                message=message,
                resolution=resolution,
            )

        if not self._store.tree_equal(update.new_sha, source.sha):
            raise InternalError.invariant(
                "built commit is not treequal to its source",
                source=source.sha,
                built=update.new_sha,
            )
        log.info(
            "patch.built",
            branch=target.branch,
            source=source.sha,
            new=update.new_sha,
            kind=update.message_kind.name if update.message_kind else None,
            noop=update.noop,
        )
        return update

    def _create_branch(
        self, source: SourceCommit, diffbase: Diffbase, target: TargetBranchState
    ) -> PatchUpdate:
        parents = (diffbase.remote_sha,)
        sha = self._store.create_commit(
            source.tree_sha,
            list(parents),
            self._policy.render(MessageKind.FULL, source),
        )
        return PatchUpdate(
            target_branch=target.branch,
            source_sha=source.sha,
            new_sha=sha,
            parents=parents,
            message_kind=MessageKind.FULL,
            expected_old=None,
            created=(sha,),
        )

    def _fast_forward(
        self,
        source: SourceCommit,
        target: TargetBranchState,
        *,
        parent: str,
        created: tuple[str, ...],
        message: str | None,
        allow_empty: bool,
        bump: bool,
    ) -> PatchUpdate:
        same_tree = self._store.tree_equal(parent, source.sha)
        if same_tree and not allow_empty:
            return PatchUpdate(
                target_branch=target.branch,
                source_sha=source.sha,
                new_sha=parent,
                parents=self._store.read_commit(parent).parent_shas,
                message_kind=None,
                expected_old=target.head_sha,
                created=created,
                noop=not created,
            )
        kind = self._policy.choose(first_push=False, same_tree=same_tree, bump=bump)
        sha = self._store.create_commit(
            source.tree_sha, [parent], self._policy.render(kind, source, message)
        )
        return PatchUpdate(
            target_branch=target.branch,
            source_sha=source.sha,
            new_sha=sha,
            parents=(parent,),
            message_kind=kind,
            expected_old=target.head_sha,
            created=(*created, sha),
        )

    def _merge_diffbase(
        self,
        source: SourceCommit,
        diffbase: Diffbase,
        target: TargetBranchState,
        *,
        message: str | None,
        resolution: str | None,
    ) -> PatchUpdate:
        head = target.head_sha
        assert head is not None
        old_diffbase = self._store.merge_base(head, diffbase.remote_sha)
        if old_diffbase is None:
            raise UnrelatedHistoryError(target.branch, head, diffbase.remote_sha)

        if resolution is not None:
            merged_tree = self._store.read_tree(resolution).sha
        else:
            outcome = self._store.three_way_merge(old_diffbase, head, diffbase.remote_sha)
            if outcome.tree_sha is None:
                raise MergeConflictError(
                    ConflictReport(
                        target_branch=target.branch,
                        source_sha=source.sha,
                        paths=tuple(outcome.conflict_paths),
                        base_sha=old_diffbase,
                        ours_sha=head,
                        theirs_sha=diffbase.remote_sha,
                        conflict_tree_sha=outcome.conflict_tree_sha,
                    )
                )
            merged_tree = outcome.tree_sha

        parents = (head, diffbase.remote_sha)
        merge_sha = self._store.create_commit(
            merged_tree,
            list(parents),
            self._policy.render(MessageKind.UPDATE_DIFFBASE, source),
        )
        if self._store.tree_equal(merge_sha, source.sha):
            return PatchUpdate(
                target_branch=target.branch,
                source_sha=source.sha,
                new_sha=merge_sha,
                parents=parents,
                message_kind=MessageKind.UPDATE_DIFFBASE,
                expected_old=head,
                created=(merge_sha,),
            )
        # The patch itself changed, or the branch carries out-of-band commits
        return self._fast_forward(
            source,
            target,
            parent=merge_sha,
            created=(merge_sha,),
            message=message,
            allow_empty=False,
            bump=False,
        )
