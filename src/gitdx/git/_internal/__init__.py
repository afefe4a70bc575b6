"""Internal components for git operations - not part of public API."""

from gitdx.git._internal.access import RepoAccess
from gitdx.git._internal.errors import ErrorMapper, git_operation
from gitdx.git._internal.parsing import (
    is_valid_branch_name,
    make_branch_ref,
    make_push_refspec,
    make_remote_ref,
    make_staging_ref,
)

__all__ = [
    "ErrorMapper",
    "RepoAccess",
    "git_operation",
    "is_valid_branch_name",
    "make_branch_ref",
    "make_push_refspec",
    "make_remote_ref",
    "make_staging_ref",
]
