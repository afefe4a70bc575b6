"""Centralized error mapping for pygit2 exceptions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import pygit2

from gitdx.git.errors import AuthenticationError, GitError, PushRejectedError, RemoteError

# libgit2 refuses non-fast-forward pushes client-side with one of these messages
_PUSH_REJECTION_MARKERS = ("non-fastforward", "not present locally", "rejected")


class ErrorMapper:
    """Maps pygit2 exceptions to domain errors.

    - Authentication/credential failures -> AuthenticationError
    - Non-fast-forward refusals of a push to ``ref`` -> PushRejectedError
    - Malformed ref names (``pygit2.InvalidSpecError``) -> GitError
    - Anything else -> RemoteError when a remote is involved, GitError otherwise
    """

    @staticmethod
    @contextmanager
    def guard(
        operation: str, *, remote: str | None = None, ref: str | None = None
    ) -> Iterator[None]:
        """Context manager for consistent exception translation."""
        try:
            yield
        except pygit2.InvalidSpecError as e:
            raise GitError(f"{operation} failed: {e}") from e
        except pygit2.GitError as e:
            msg = str(e).lower()
            if remote is None:
                raise GitError(f"{operation} failed: {e}") from e
            if "authentication" in msg or "credential" in msg:
                raise AuthenticationError(remote, operation) from e
            if ref is not None and any(marker in msg for marker in _PUSH_REJECTION_MARKERS):
                raise PushRejectedError(remote, ref, str(e)) from e
            raise RemoteError(remote, f"{operation} failed: {e}") from e


def git_operation(
    operation: str, *, remote: str | None = None, ref: str | None = None
) -> AbstractContextManager[None]:
    """Shorthand for ``ErrorMapper.guard``."""
    return ErrorMapper.guard(operation, remote=remote, ref=ref)
