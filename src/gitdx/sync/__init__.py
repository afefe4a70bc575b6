"""Stacked-branch sync engine."""

from gitdx.sync.builder import PatchBuilder
from gitdx.sync.directives import DirectiveReader
from gitdx.sync.engine import SyncEngine
from gitdx.sync.errors import (
    DiffbaseDivergenceError,
    DivergedError,
    DuplicateDirectiveError,
    InvalidBranchNameError,
    MalformedTrailerError,
    MergeConflictError,
    NoDirectiveError,
    NotLinearError,
    SyncError,
    UnknownTargetBranchError,
    UnrelatedHistoryError,
)
from gitdx.sync.messages import MessagePolicy
from gitdx.sync.models import (
    BranchDirective,
    ConflictReport,
    Diffbase,
    MessageKind,
    PatchUpdate,
    SourceCommit,
    TargetBranchState,
)
from gitdx.sync.push import PushOrchestrator
from gitdx.sync.resolver import DiffbaseResolver

__all__ = [
    # Facade
    "SyncEngine",
    # Components
    "DirectiveReader",
    "DiffbaseResolver",
    "PatchBuilder",
    "MessagePolicy",
    "PushOrchestrator",
    # Models
    "BranchDirective",
    "ConflictReport",
    "Diffbase",
    "MessageKind",
    "PatchUpdate",
    "SourceCommit",
    "TargetBranchState",
    # Errors
    "SyncError",
    "NoDirectiveError",
    "MalformedTrailerError",
    "DuplicateDirectiveError",
    "InvalidBranchNameError",
    "NotLinearError",
    "UnknownTargetBranchError",
    "DiffbaseDivergenceError",
    "UnrelatedHistoryError",
    "MergeConflictError",
    "DivergedError",
]
