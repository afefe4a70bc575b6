"""Tests for git error types and pygit2 error mapping."""

from __future__ import annotations

import pygit2
import pytest

from gitdx.git._internal.errors import ErrorMapper, git_operation
from gitdx.git.errors import (
    AuthenticationError,
    GitError,
    NotARepositoryError,
    PushRejectedError,
    RefNotFoundError,
    RemoteError,
)


class TestGitErrorMessages:
    """Tests for git error message formatting."""

    def test_not_a_repository_error(self) -> None:
        err = NotARepositoryError("/tmp/nowhere")
        assert "/tmp/nowhere" in str(err)
        assert err.path == "/tmp/nowhere"

    def test_ref_not_found_error(self) -> None:
        err = RefNotFoundError("refs/heads/missing")
        assert "refs/heads/missing" in str(err)
        assert err.ref == "refs/heads/missing"

    def test_remote_error(self) -> None:
        err = RemoteError("origin", "connection refused")
        assert "origin" in str(err)
        assert "connection refused" in str(err)
        assert err.remote == "origin"

    def test_push_rejected_error(self) -> None:
        """PushRejectedError is a RemoteError carrying ref and reason."""
        err = PushRejectedError("origin", "refs/heads/dx-foo", "non-fast-forward")
        assert isinstance(err, RemoteError)
        assert "refs/heads/dx-foo" in str(err)
        assert err.ref == "refs/heads/dx-foo"
        assert err.reason == "non-fast-forward"

    def test_authentication_error_with_operation(self) -> None:
        err = AuthenticationError("origin", "push")
        assert "origin" in str(err)
        assert "during push" in str(err)
        assert err.operation == "push"

    def test_authentication_error_without_operation(self) -> None:
        err = AuthenticationError("origin")
        assert "during" not in str(err)
        assert err.operation is None

    def test_all_derive_from_git_error(self) -> None:
        for err in (
            NotARepositoryError("p"),
            RefNotFoundError("r"),
            RemoteError("o", "m"),
            PushRejectedError("o", "r", "x"),
            AuthenticationError("o"),
        ):
            assert isinstance(err, GitError)


class TestErrorMapper:
    """Tests for pygit2 exception translation."""

    def test_passes_through_success(self) -> None:
        with ErrorMapper.guard("noop"):
            value = 1
        assert value == 1

    def test_maps_plain_error(self) -> None:
        with pytest.raises(GitError, match="create commit failed"), git_operation("create commit"):
            raise pygit2.GitError("object not found")

    def test_maps_remote_error(self) -> None:
        with pytest.raises(RemoteError) as exc_info, git_operation("push", remote="origin"):
            raise pygit2.GitError("connection reset")
        assert exc_info.value.remote == "origin"

    def test_maps_authentication_error(self) -> None:
        with (
            pytest.raises(AuthenticationError) as exc_info,
            git_operation("push", remote="origin"),
        ):
            raise pygit2.GitError("authentication required but no callback set")
        assert exc_info.value.operation == "push"

    def test_does_not_catch_other_exceptions(self) -> None:
        with pytest.raises(ValueError), git_operation("anything"):
            raise ValueError("not a git error")

    def test_maps_invalid_spec_to_git_error(self) -> None:
        with pytest.raises(GitError, match="resolve"), git_operation("resolve refs/heads/a..b"):
            raise pygit2.InvalidSpecError("the given reference name is not valid")

    def test_maps_non_fast_forward_push(self) -> None:
        with (
            pytest.raises(PushRejectedError) as exc_info,
            git_operation("push", remote="origin", ref="refs/heads/dx-foo"),
        ):
            raise pygit2.GitError("cannot push non-fastforwardable reference")
        assert exc_info.value.ref == "refs/heads/dx-foo"

    def test_rejection_markers_need_a_ref(self) -> None:
        with pytest.raises(RemoteError) as exc_info, git_operation("fetch", remote="origin"):
            raise pygit2.GitError("object not present locally")
        assert not isinstance(exc_info.value, PushRejectedError)
