"""Push orchestration: compare-and-swap publication of a built commit."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

import structlog

from gitdx.config.models import SyncConfig
from gitdx.git._internal import make_remote_ref
from gitdx.git.credentials import PushCallbacks, get_default_callbacks
from gitdx.git.errors import PushRejectedError
from gitdx.git.store import ObjectStore
from gitdx.sync.errors import DivergedError
from gitdx.sync.models import PatchUpdate

log = structlog.get_logger(__name__)


class PushOrchestrator:
    """Publishes a PatchUpdate without ever overwriting remote history.

    The remote-tracking ref must still hold the head observed while building
    (or be absent, for a new branch). The push itself is never forced, so a
    remote that moved in the meantime rejects it; either way the result is a
    ``DivergedError`` and the caller re-syncs.
    """

    def __init__(
        self,
        store: ObjectStore,
        config: SyncConfig,
        callbacks_factory: Callable[[], PushCallbacks] = get_default_callbacks,
    ) -> None:
        self._store = store
        self._remote = config.remote
        self._callbacks_factory = callbacks_factory

    def push(self, update: PatchUpdate, *, dry_run: bool = False) -> PatchUpdate:
        """Push ``update.new_sha`` to its target branch.

        With ``dry_run`` every check runs but neither the remote nor the
        tracking ref is touched.
        """
        if update.noop:
            log.info("push.skipped", branch=update.target_branch, reason="up to date")
            return update

        tracking = make_remote_ref(self._remote, update.target_branch)
        observed = self._store.resolve_ref(tracking)
        if observed != update.expected_old:
            raise DivergedError(update.target_branch, update.expected_old, observed)
        if dry_run:
            log.info("push.dry_run", branch=update.target_branch, new=update.new_sha)
            return update

        try:
            self._store.push(
                self._remote,
                update.new_sha,
                update.target_branch,
                callbacks=self._callbacks_factory(),
            )
        except PushRejectedError as e:
            log.warning(
                "push.rejected",
                remote=self._remote,
                branch=update.target_branch,
                reason=e.reason,
            )
            raise DivergedError(update.target_branch, update.expected_old, None) from e

        # libgit2 advances the tracking ref itself when the fetch refspec covers it
        if self._store.resolve_ref(tracking) != update.new_sha and not self._store.update_ref(
            tracking, update.expected_old, update.new_sha
        ):
            log.warning("tracking_ref.stale", ref=tracking)

        log.info(
            "branch.pushed",
            remote=self._remote,
            branch=update.target_branch,
            old=update.expected_old,
            new=update.new_sha,
        )
        return replace(update, pushed=True)

    def push_to(self, ref: str, new: str, expected_old: str | None) -> str:
        """Compare-and-swap an arbitrary local ref to ``new``.

        For callers that route a built commit somewhere other than its target
        branch. Returns ``new``.
        """
        if not self._store.update_ref(ref, expected_old, new):
            raise DivergedError(ref, expected_old, self._store.resolve_ref(ref))
        log.info("ref.updated", ref=ref, new=new)
        return new
