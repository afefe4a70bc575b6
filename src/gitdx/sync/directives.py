"""Trailer directive reader: which remote branch a commit belongs to."""

from __future__ import annotations

import structlog

from gitdx.config.models import SyncConfig
from gitdx.git._internal import is_valid_branch_name
from gitdx.git.models import CommitInfo
from gitdx.git.trailers import parse_trailers, trailer_block_lines
from gitdx.sync.errors import (
    DuplicateDirectiveError,
    InvalidBranchNameError,
    MalformedTrailerError,
    NoDirectiveError,
)
from gitdx.sync.models import BranchDirective

log = structlog.get_logger(__name__)

# Delimiters a human might put between key and value
RECOGNIZED_DELIMITERS = ":=#"


class DirectiveReader:
    """Extracts the branch directive from a commit message.

    Directives are recomputed from the message on every call; nothing is cached.
    """

    def __init__(self, config: SyncConfig) -> None:
        self._key = config.directive_key
        self._prefix = config.branch_prefix
        self._separators = config.trailer_separators

    @property
    def key(self) -> str:
        return self._key

    def branch_for(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def read(self, commit: CommitInfo) -> BranchDirective:
        """Return the directive, or raise NoDirectiveError / MalformedTrailerError (soft)
        or DuplicateDirectiveError / InvalidBranchNameError (hard)."""
        values = [
            value
            for key, value in parse_trailers(commit.message, self._separators)
            if key.lower() == self._key.lower()
        ]
        if len(values) > 1:
            raise DuplicateDirectiveError(commit.sha, self._key, values)
        if values and values[0]:
            branch = self.branch_for(values[0])
            if not is_valid_branch_name(branch):
                raise InvalidBranchNameError(commit.sha, values[0], branch)
            directive = BranchDirective(key=values[0], target_branch=branch)
            log.debug("directive.read", sha=commit.sha, branch=directive.target_branch)
            return directive
        if self._has_foreign_delimiter(commit.message):
            raise MalformedTrailerError(commit.sha, self._key, self._separators)
        raise NoDirectiveError(commit.sha, self._key)

    def read_optional(self, commit: CommitInfo) -> BranchDirective | None:
        """Like ``read`` but None for unmanaged commits. Duplicates still raise."""
        try:
            return self.read(commit)
        except MalformedTrailerError as e:
            log.warning("directive.malformed", sha=commit.sha, reason=str(e))
            return None
        except NoDirectiveError:
            return None

    def _has_foreign_delimiter(self, message: str) -> bool:
        key = self._key.lower()
        for line in trailer_block_lines(message):
            if not line.lower().startswith(key):
                continue
            rest = line[len(key) :].lstrip()
            if rest and rest[0] in RECOGNIZED_DELIMITERS and rest[0] not in self._separators:
                return True
        return False
