"""Test fixtures for the sync engine, built on the shared ``stack`` fixture."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gitdx.config.models import SyncConfig
from gitdx.git.store import ObjectStore
from gitdx.sync import SyncEngine

if TYPE_CHECKING:
    from tests.conftest import RepoBuilder


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig()


@pytest.fixture
def store(local: RepoBuilder) -> ObjectStore:
    return ObjectStore(local.path)


@pytest.fixture
def engine(local: RepoBuilder, config: SyncConfig) -> SyncEngine:
    return SyncEngine(local.path, config)
