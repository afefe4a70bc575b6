"""Object-store adapter over pygit2 - the only place the sync engine touches git."""

from __future__ import annotations

from functools import partial
from pathlib import Path

import pygit2

from gitdx.git._internal import (
    RepoAccess,
    git_operation,
    make_branch_ref,
    make_push_refspec,
    make_remote_ref,
    make_staging_ref,
)
from gitdx.git.credentials import PushCallbacks, get_default_callbacks
from gitdx.git.errors import GitError, PushRejectedError
from gitdx.git.models import CommitInfo, ConflictEntry, MergeOutcome, TreeInfo
from gitdx.git.trailers import DEFAULT_SEPARATORS
from gitdx.git.trailers import parse_trailers as _parse_trailers


def _sha(entry: pygit2.IndexEntry | None) -> str | None:
    return str(entry.id) if entry is not None else None


class ObjectStore:
    """Read commits and trees, create commits, merge trees, and move refs.

    All ids crossing this boundary are full hex strings. Commit creation never
    moves a ref; the only ref writes are ``update_ref`` (compare-and-swap) and
    ``push`` (non-forced).
    """

    def __init__(self, repo_path: Path | str) -> None:
        self._access = RepoAccess(repo_path)

    @property
    def repo(self) -> pygit2.Repository:
        """
        Direct access to underlying pygit2 Repository.

        Escape hatch for tests and advanced consumers. Bypasses error mapping.
        """
        return self._access.repo

    @property
    def path(self) -> Path:
        """Repository root path."""
        return self._access.path

    # =========================================================================
    # Reads
    # =========================================================================

    def read_commit(self, rev: str) -> CommitInfo:
        """Read any commit-ish (sha, ref, ``HEAD~1``)."""
        return CommitInfo.from_pygit2(self._access.resolve_commit(rev))

    def read_tree(self, sha: str) -> TreeInfo:
        """Read a tree by tree sha or by commit sha."""
        return TreeInfo.from_pygit2(self._access.must_tree(sha))

    def tree_equal(self, a: str, b: str) -> bool:
        """True when two commits are treequal."""
        return self._access.resolve_commit(a).tree_id == self._access.resolve_commit(b).tree_id

    def resolve_ref(self, name: str) -> str | None:
        """Commit sha a full ref name points at, or None when the ref is absent."""
        with git_operation(f"resolve {name}"):
            target = self._access.reference_target(name)
        return str(target) if target is not None else None

    def remote_branch_head(self, remote: str, branch: str) -> str | None:
        """Last observed head of ``branch`` on ``remote`` (its remote-tracking ref)."""
        return self.resolve_ref(make_remote_ref(remote, branch))

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """True when ``ancestor`` is ``descendant`` or reachable from it."""
        if ancestor == descendant:
            return True
        with git_operation("ancestry check"):
            return self._access.descendant_of(pygit2.Oid(hex=descendant), pygit2.Oid(hex=ancestor))

    def merge_base(self, a: str, b: str) -> str | None:
        base = self._access.merge_base(pygit2.Oid(hex=a), pygit2.Oid(hex=b))
        return str(base) if base is not None else None

    def parse_trailers(
        self, message: str, separators: str = DEFAULT_SEPARATORS
    ) -> list[tuple[str, str]]:
        return _parse_trailers(message, separators)

    # =========================================================================
    # Writes
    # =========================================================================

    def create_commit(self, tree: str, parents: list[str], message: str) -> str:
        """Write a commit object. Content-addressed; moves no ref."""
        with git_operation("create commit"):
            oid = self._access.create_commit(
                message,
                pygit2.Oid(hex=tree),
                [pygit2.Oid(hex=p) for p in parents],
            )
        return str(oid)

    def three_way_merge(self, base: str, ours: str, theirs: str) -> MergeOutcome:
        """Merge the trees of three commits (or trees) without touching the worktree.

        Conflicted files are written with merge markers into ``conflict_tree_sha``
        so a human can resolve them; modify/delete conflicts keep the modified side.
        """
        with git_operation("three-way merge"):
            index = self._access.merge_trees(
                self._access.must_tree(base),
                self._access.must_tree(ours),
                self._access.must_tree(theirs),
            )
            if index.conflicts is None:
                return MergeOutcome(tree_sha=str(self._access.write_index_tree(index)))

            conflicts: list[ConflictEntry] = []
            for ancestor, our, their in list(index.conflicts):
                path = (our or their or ancestor).path  # type: ignore[union-attr]
                conflicts.append(ConflictEntry(path, _sha(ancestor), _sha(our), _sha(their)))
                if our is not None and their is not None:
                    merged = self._access.merge_file_from_index(ancestor, our, their)
                    blob_id, mode = self._access.create_blob(merged.encode("utf-8")), our.mode
                else:
                    survivor = our or their
                    blob_id, mode = (survivor.id, survivor.mode) if survivor else (None, None)
                del index.conflicts[path]
                if blob_id is not None:
                    index.add(pygit2.IndexEntry(path, blob_id, mode))
            conflict_tree = self._access.write_index_tree(index)

        return MergeOutcome(
            tree_sha=None,
            conflicts=tuple(sorted(conflicts, key=lambda c: c.path)),
            conflict_tree_sha=str(conflict_tree),
        )

    def update_ref(self, name: str, expected_old: str | None, new: str) -> bool:
        """Compare-and-swap ``name`` from ``expected_old`` to ``new``.

        ``expected_old=None`` means the ref must not exist yet. Returns False
        when the ref holds anything else. Raises GitError for a move that is
        not a fast-forward.
        """
        current = self.resolve_ref(name)
        if current != expected_old:
            return False
        if expected_old is not None and not self.is_ancestor(expected_old, new):
            raise GitError(f"Refusing non-fast-forward update of {name}: {expected_old} -> {new}")
        with git_operation(f"update {name}"):
            self._access.set_reference(name, pygit2.Oid(hex=new))
        return True

    def push(
        self,
        remote: str,
        sha: str,
        branch: str,
        callbacks: PushCallbacks | None = None,
    ) -> None:
        """Push ``sha`` to ``refs/heads/<branch>`` on ``remote`` without forcing.

        Raises PushRejectedError when the remote or libgit2 refuses the update.
        """
        cbs = callbacks or get_default_callbacks()
        ref = make_branch_ref(branch)
        staging = make_staging_ref(branch)
        with git_operation(f"stage {branch} for push"):
            self._access.set_reference(staging, pygit2.Oid(hex=sha))
        try:
            self._access.run_remote_operation(
                remote,
                "push",
                partial(
                    pygit2.Remote.push, specs=[make_push_refspec(staging, branch)], callbacks=cbs
                ),
                ref=ref,
            )
        finally:
            self._access.delete_reference(staging)
        if ref in cbs.rejections:
            raise PushRejectedError(remote, ref, cbs.rejections[ref])
