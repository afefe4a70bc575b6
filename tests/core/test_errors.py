"""Tests for error types and codes."""

import pytest

from gitdx.core.errors import ConfigError, ErrorCode, GitDxError, InternalError


class TestErrorCode:
    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.INTERNAL_INVARIANT, 9000),
        ],
    )
    def test_codes_fall_in_their_range(self, code: ErrorCode, expected_range: int) -> None:
        assert expected_range <= code.value < expected_range + 1000


class TestGitDxError:
    def test_carries_structured_context(self) -> None:
        error = GitDxError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        assert error.error_name == "CONFIG_PARSE_ERROR"
        assert error.details == {"key": "value"}

    def test_str_includes_code_and_name(self) -> None:
        error = GitDxError(code=ErrorCode.INTERNAL_INVARIANT, message="boom")
        assert str(error) == "[9001] INTERNAL_INVARIANT: boom"

    def test_is_raisable(self) -> None:
        with pytest.raises(GitDxError):
            raise ConfigError.parse_error("/x.yaml", "bad")


class TestFactories:
    def test_parse_error(self) -> None:
        error = ConfigError.parse_error("/repo/.gitdx/config.yaml", "bad indent")
        assert error.code is ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/repo/.gitdx/config.yaml", "reason": "bad indent"}
        assert "bad indent" in error.message

    def test_invalid_value(self) -> None:
        error = ConfigError.invalid_value("sync.remote", "a/b", "Invalid remote name")
        assert error.code is ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["field"] == "sync.remote"
        assert error.details["value"] == "a/b"

    def test_invariant(self) -> None:
        error = InternalError.invariant("tree mismatch", expected="a", actual="b")
        assert error.code is ErrorCode.INTERNAL_INVARIANT
        assert error.details == {"expected": "a", "actual": "b"}
