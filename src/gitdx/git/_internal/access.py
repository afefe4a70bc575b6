"""Repository access layer - owns pygit2.Repository and exposes computed facts."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pygit2

from gitdx.git._internal.errors import ErrorMapper
from gitdx.git.errors import GitError, NotARepositoryError, RefNotFoundError, RemoteError


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        try:
            self._repo = pygit2.Repository(str(self._path))
        except pygit2.GitError as e:
            raise NotARepositoryError(str(self._path)) from e

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir) if self._repo.workdir else self._path

    @property
    def default_signature(self) -> pygit2.Signature:
        try:
            return self._repo.default_signature
        except (KeyError, pygit2.GitError) as e:
            raise GitError("No committer identity: set user.name and user.email") from e

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_ref_oid(self, ref: str) -> pygit2.Oid:
        try:
            obj, _ = self._repo.resolve_refish(ref)
            return obj.id
        except (pygit2.GitError, KeyError, ValueError) as e:
            raise RefNotFoundError(ref) from e

    def resolve_commit(self, ref: str) -> pygit2.Commit:
        obj: pygit2.Object | None = self._repo.get(self.resolve_ref_oid(ref))
        if isinstance(obj, pygit2.Tag):
            obj = obj.peel(pygit2.Commit)
        if not isinstance(obj, pygit2.Commit):
            raise RefNotFoundError(f"{ref} is not a commit")
        return obj

    def must_tree(self, sha: str | pygit2.Oid) -> pygit2.Tree:
        obj = self._repo.get(sha)
        if isinstance(obj, pygit2.Commit):
            return obj.tree
        if not isinstance(obj, pygit2.Tree):
            raise RefNotFoundError(f"{sha} is not a tree")
        return obj

    # =========================================================================
    # Reference Access
    # =========================================================================

    def reference_target(self, name: str) -> pygit2.Oid | None:
        """Target of a ref, following symbolic refs; None if absent."""
        ref = self._repo.references.get(name)
        if ref is None:
            return None
        target = ref.target
        if isinstance(target, str):
            return self.reference_target(target)
        return target

    def set_reference(self, name: str, target: pygit2.Oid) -> None:
        self._repo.references.create(name, target, force=True)

    def delete_reference(self, name: str) -> None:
        if name in self._repo.references:
            self._repo.references.delete(name)

    # =========================================================================
    # Low-level pygit2 Operations (all pygit2 quirks live here)
    # =========================================================================

    def create_commit(
        self,
        message: str,
        tree_id: pygit2.Oid,
        parents: list[pygit2.Oid],
    ) -> pygit2.Oid:
        sig = self.default_signature
        return self._repo.create_commit(None, sig, sig, message, tree_id, parents)

    def create_blob(self, data: bytes) -> pygit2.Oid:
        return self._repo.create_blob(data)

    def descendant_of(self, commit: pygit2.Oid, ancestor: pygit2.Oid) -> bool:
        return self._repo.descendant_of(commit, ancestor)

    def merge_base(self, oid1: pygit2.Oid, oid2: pygit2.Oid) -> pygit2.Oid | None:
        """Find merge base of two commits. Returns None if unrelated."""
        try:
            return self._repo.merge_base(oid1, oid2)
        except pygit2.GitError:
            return None

    def merge_trees(
        self, ancestor: pygit2.Tree, ours: pygit2.Tree, theirs: pygit2.Tree
    ) -> pygit2.Index:
        return self._repo.merge_trees(ancestor, ours, theirs)

    def merge_file_from_index(
        self,
        ancestor: pygit2.IndexEntry | None,
        ours: pygit2.IndexEntry | None,
        theirs: pygit2.IndexEntry | None,
    ) -> str:
        """File content with conflict markers. Newer pygit2 may wrap it in a result object."""
        merged = self._repo.merge_file_from_index(ancestor, ours, theirs)
        if isinstance(merged, str):
            return merged
        return str(merged.contents)

    def write_index_tree(self, index: pygit2.Index) -> pygit2.Oid:
        return index.write_tree(self._repo)

    # =========================================================================
    # Remote Operations (centralized error handling)
    # =========================================================================

    def get_remote(self, name: str) -> pygit2.Remote:
        if name not in [r.name for r in self._repo.remotes]:
            raise RemoteError(name, "Remote not found")
        return self._repo.remotes[name]

    def run_remote_operation(
        self,
        remote_name: str,
        op_name: str,
        operation: Callable[[pygit2.Remote], Any],
        *,
        ref: str | None = None,
    ) -> Any:
        """
        Run a remote operation with centralized error mapping.

        Errors are translated by ``ErrorMapper``; pass ``ref`` for a push so a
        non-fast-forward refusal surfaces as PushRejectedError.
        """
        remote = self.get_remote(remote_name)
        with ErrorMapper.guard(op_name, remote=remote_name, ref=ref):
            return operation(remote)
