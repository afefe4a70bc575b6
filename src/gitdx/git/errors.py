"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class RefNotFoundError(GitError):
    """Reference or revision does not resolve to a commit."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


class RemoteError(GitError):
    """Error communicating with remote."""

    def __init__(self, remote: str, message: str) -> None:
        super().__init__(f"Remote error ({remote}): {message}")
        self.remote = remote


class PushRejectedError(RemoteError):
    """Remote refused a ref update (non-fast-forward or moved under us)."""

    def __init__(self, remote: str, ref: str, reason: str) -> None:
        super().__init__(remote, f"push to {ref} rejected: {reason}")
        self.ref = ref
        self.reason = reason


class AuthenticationError(GitError):
    """Authentication failed for remote operation."""

    def __init__(self, remote: str, operation: str | None = None) -> None:
        op_part = f" during {operation}" if operation else ""
        super().__init__(f"Authentication failed for remote {remote!r}{op_part}")
        self.remote = remote
        self.operation = operation
