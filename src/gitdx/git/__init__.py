"""Git object-store module."""

from gitdx.git.credentials import PushCallbacks, get_default_callbacks
from gitdx.git.errors import (
    AuthenticationError,
    GitError,
    NotARepositoryError,
    PushRejectedError,
    RefNotFoundError,
    RemoteError,
)
from gitdx.git.models import (
    CommitInfo,
    ConflictEntry,
    MergeOutcome,
    TreeEntry,
    TreeInfo,
)
from gitdx.git.store import ObjectStore
from gitdx.git.trailers import parse_trailers, set_trailer, strip_trailer

__all__ = [
    # Main class
    "ObjectStore",
    # Models
    "CommitInfo",
    "ConflictEntry",
    "MergeOutcome",
    "TreeEntry",
    "TreeInfo",
    # Trailers
    "parse_trailers",
    "set_trailer",
    "strip_trailer",
    # Credentials
    "PushCallbacks",
    "get_default_callbacks",
    # Errors
    "GitError",
    "NotARepositoryError",
    "RefNotFoundError",
    "RemoteError",
    "PushRejectedError",
    "AuthenticationError",
]
