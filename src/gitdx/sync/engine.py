"""SyncEngine - single entry point for syncing one source commit."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from gitdx.config.models import SyncConfig
from gitdx.core.logging import clear_run_id, set_run_id
from gitdx.git.credentials import PushCallbacks, get_default_callbacks
from gitdx.git.store import ObjectStore
from gitdx.sync.builder import PatchBuilder
from gitdx.sync.directives import DirectiveReader
from gitdx.sync.messages import MessagePolicy
from gitdx.sync.models import PatchUpdate, SourceCommit, TargetBranchState
from gitdx.sync.push import PushOrchestrator
from gitdx.sync.resolver import DiffbaseResolver


class SyncEngine:
    """
    Syncs a local commit to its remote review branch.

    Composes the directive reader, diffbase resolver, patch builder and push
    orchestrator. Holds no state between calls: everything is re-read from
    the repository, so a failed or interrupted sync is retried by calling
    ``sync`` again.

    Usage::

        engine = SyncEngine(repo_path)
        update = engine.sync("HEAD", push=True)
        print(update.new_sha)
    """

    def __init__(
        self,
        repo_path: Path | str,
        config: SyncConfig | None = None,
        *,
        callbacks_factory: Callable[[], PushCallbacks] = get_default_callbacks,
    ) -> None:
        self._config = config or SyncConfig()
        self._store = ObjectStore(repo_path)
        self._reader = DirectiveReader(self._config)
        self._resolver = DiffbaseResolver(self._store, self._reader, self._config)
        self._builder = PatchBuilder(self._store, MessagePolicy(self._config))
        self._pusher = PushOrchestrator(self._store, self._config, callbacks_factory)

    @property
    def store(self) -> ObjectStore:
        return self._store

    @property
    def config(self) -> SyncConfig:
        return self._config

    def source(self, rev: str = "HEAD") -> SourceCommit:
        """Read ``rev`` and its directive. Raises NoDirectiveError for unmanaged commits."""
        commit = self._store.read_commit(rev)
        return SourceCommit(commit=commit, directive=self._reader.read(commit))

    def target_state(self, branch: str) -> TargetBranchState:
        return TargetBranchState(
            branch=branch,
            head_sha=self._store.remote_branch_head(self._config.remote, branch),
        )

    def sync(
        self,
        rev: str = "HEAD",
        *,
        push: bool = False,
        dry_run: bool = False,
        message: str | None = None,
        allow_empty: bool = False,
        bump: bool = False,
        resolution: str | None = None,
    ) -> PatchUpdate:
        """Build (and optionally push) the commit that brings ``rev``'s branch to its tree.

        Without ``push`` the built commit is returned for the caller to push
        anywhere; it stays in the object store either way.

        Raises:
            SyncError: See ``gitdx.sync.errors`` for severities.
            GitError: The repository or remote failed.
        """
        set_run_id()
        try:
            source = self.source(rev)
            assert source.directive is not None
            diffbase = self._resolver.resolve(source.commit)
            target = self.target_state(source.directive.target_branch)
            update = self._builder.build(
                source,
                diffbase,
                target,
                message=message,
                allow_empty=allow_empty,
                bump=bump,
                resolution=resolution,
            )
            if push:
                update = self._pusher.push(update, dry_run=dry_run)
            return update
        finally:
            clear_run_id()

    def push_to(self, ref: str, new: str, expected_old: str | None = None) -> str:
        """Compare-and-swap ``ref`` to a previously built commit."""
        return self._pusher.push_to(ref, new, expected_old)
