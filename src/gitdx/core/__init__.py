"""Core module exports."""

from gitdx.core.errors import (
    ConfigError,
    ErrorCode,
    GitDxError,
    InternalError,
)
from gitdx.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "GitDxError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
