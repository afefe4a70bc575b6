"""Config module exports."""

from gitdx.config.loader import load_config
from gitdx.config.models import (
    DxConfig,
    LoggingConfig,
    LogOutputConfig,
    SyncConfig,
)

__all__ = [
    "load_config",
    "DxConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SyncConfig",
]
