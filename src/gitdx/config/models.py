"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (GITDX__SECTION__KEY)
3. Repo YAML (.gitdx/config.yaml)
4. Global YAML (~/.config/gitdx/config.yaml)
5. Built-in defaults (this file)

Examples:
    GITDX__LOGGING__LEVEL=DEBUG
    GITDX__SYNC__REMOTE=upstream
    GITDX__SYNC__BRANCH_PREFIX=alice-
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_TRAILER_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*$")


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        GITDX__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports each resolved diffbase and push.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SyncConfig(BaseModel):
    """Branch synchronization settings.

    Env vars:
        GITDX__SYNC__REMOTE: Remote that hosts the review branches
        GITDX__SYNC__BRANCH_PREFIX: Prefix prepended to every directive key
        GITDX__SYNC__DIRECTIVE_KEY: Trailer key naming a commit's branch
        GITDX__SYNC__SOURCE_KEY: Trailer key for the back-reference to the source commit
        GITDX__SYNC__TRAILER_SEPARATORS: Characters accepted between trailer key and value
        GITDX__SYNC__MAINLINE: Mainline integration branch
    """

    remote: str = Field(
        default="origin",
        description="Remote whose tracking refs are read and which receives pushes.",
    )
    branch_prefix: str = Field(
        default="dx-",
        description="Prefix for remote branch names. Pick something unique to you "
        "on shared remotes.",
    )
    directive_key: str = Field(
        default="Dx-branch",
        description="Trailer key carrying the branch directive.",
    )
    source_key: str = Field(
        default="Dx-source",
        description="Trailer key for the back-reference appended to pushed commits.",
    )
    trailer_separators: str = Field(
        default=":",
        description="Separator characters between trailer key and value. "
        "RISK: a set without ':' makes ordinary directives unreadable.",
    )
    mainline: str = Field(
        default="main",
        description="Mainline branch. Commits already merged into it are never "
        "treated as stacked upstreams.",
    )

    @field_validator("directive_key", "source_key")
    @classmethod
    def validate_trailer_key(cls, v: str) -> str:
        if not _TRAILER_KEY_RE.match(v):
            raise ValueError(f"Trailer key must be letters, digits and '-': {v!r}")
        return v

    @field_validator("trailer_separators")
    @classmethod
    def validate_separators(cls, v: str) -> str:
        if not v or any(c.isspace() or c.isalnum() for c in v):
            raise ValueError(f"Trailer separators must be non-empty punctuation: {v!r}")
        return v

    @field_validator("remote")
    @classmethod
    def validate_remote(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError(f"Invalid remote name: {v!r}")
        return v


class DxConfig(BaseModel):
    """Root configuration for git-dx."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
