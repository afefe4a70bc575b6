"""CLI test fixtures."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from gitdx.config import loader

if TYPE_CHECKING:
    from tests.conftest import Stack


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def in_stack(
    stack: Stack, tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Stack:
    """Run from inside the local repository with no user config in play."""
    monkeypatch.setattr(
        loader, "GLOBAL_CONFIG_PATH", tmp_path_factory.mktemp("home") / "config.yaml"
    )
    for name in list(os.environ):
        if name.upper().startswith("GITDX__"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(stack.local.path)
    return stack
