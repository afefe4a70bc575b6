"""Commit message policy for pushed commits.

The first commit on a branch carries the author's full message, so the review
host picks up its title and description. Every later commit carries a short
fixed headline in place of the body. All pushed commits end with a
back-reference trailer naming the source commit.
"""

from __future__ import annotations

from gitdx.config.models import SyncConfig
from gitdx.git.trailers import set_trailer, strip_trailer
from gitdx.sync.models import MessageKind, SourceCommit

_HEADLINES = {
    MessageKind.UPDATE_PATCH: "update patch",
    MessageKind.UPDATE_DIFFBASE: "update diffbase",
    MessageKind.NO_OP: "no-op",
    MessageKind.BUMP: "bump ci",
}


class MessagePolicy:
    """Decides and renders the message of each commit git-dx creates."""

    def __init__(self, config: SyncConfig) -> None:
        self._directive_key = config.directive_key
        self._source_key = config.source_key
        self._separators = config.trailer_separators

    @staticmethod
    def choose(*, first_push: bool, same_tree: bool, bump: bool = False) -> MessageKind:
        if first_push:
            return MessageKind.FULL
        if same_tree:
            return MessageKind.BUMP if bump else MessageKind.NO_OP
        return MessageKind.UPDATE_PATCH

    def render(self, kind: MessageKind, source: SourceCommit, custom: str | None = None) -> str:
        if source.directive is None:
            raise ValueError(f"Commit {source.sha} is not managed")
        if kind is MessageKind.FULL:
            body = strip_trailer(source.commit.message, self._directive_key, self._separators)
        else:
            headline = _HEADLINES[kind]
            if kind is MessageKind.UPDATE_PATCH and custom:
                headline = custom.strip()
            body = f"[{source.directive.key}: {headline}]"
            if kind is MessageKind.NO_OP:
                body += " [ci skip]"
            body += "\n"
        return set_trailer(body, self._source_key, source.sha, self._separators)
