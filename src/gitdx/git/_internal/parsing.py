"""String helpers for git ref names."""

from __future__ import annotations

import pygit2

_REFS_HEADS_PREFIX = "refs/heads/"
_REFS_REMOTES_PREFIX = "refs/remotes/"
_PUSH_STAGING_PREFIX = "refs/gitdx/push/"


def make_branch_ref(name: str) -> str:
    """Create full branch ref from name."""
    return f"{_REFS_HEADS_PREFIX}{name}"


def is_valid_branch_name(name: str) -> bool:
    """True when ``refs/heads/<name>`` is a well-formed ref name."""
    return bool(pygit2.reference_is_valid_name(make_branch_ref(name)))


def make_remote_ref(remote: str, branch: str) -> str:
    """Create remote-tracking ref (e.g., ('origin', 'dx-foo') -> 'refs/remotes/origin/dx-foo')."""
    return f"{_REFS_REMOTES_PREFIX}{remote}/{branch}"


def make_staging_ref(branch: str) -> str:
    """Scratch local ref a commit is pushed from (libgit2 pushes refs, not bare ids)."""
    return f"{_PUSH_STAGING_PREFIX}{branch}"


def make_push_refspec(src_ref: str, branch: str) -> str:
    """Non-forcing refspec pushing ``src_ref`` to the remote branch."""
    return f"{src_ref}:{make_branch_ref(branch)}"
