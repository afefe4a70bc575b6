"""git-dx error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 9xxx: Internal

Git and sync failures have their own hierarchies in ``gitdx.git.errors`` and
``gitdx.sync.errors``; the types here cover the ambient layers around them.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Internal (9xxx)
    INTERNAL_INVARIANT = 9001


@dataclass(frozen=True, slots=True)
class GitDxError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(GitDxError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class InternalError(GitDxError):
    """Internal/unexpected errors."""

    @classmethod
    def invariant(cls, reason: str, **details: Any) -> "InternalError":
        """An engine postcondition did not hold."""
        return cls(
            code=ErrorCode.INTERNAL_INVARIANT,
            message=f"Invariant violated: {reason}",
            details=details,
        )
