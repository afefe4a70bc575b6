"""Serializable data models for object-store reads."""

from __future__ import annotations

from dataclasses import dataclass

import pygit2


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """A commit as the sync engine sees it: ids, parents and raw message."""

    sha: str
    tree_sha: str
    parent_shas: tuple[str, ...]
    message: str

    @classmethod
    def from_pygit2(cls, commit: pygit2.Commit) -> CommitInfo:
        return cls(
            sha=str(commit.id),
            tree_sha=str(commit.tree_id),
            parent_shas=tuple(str(p) for p in commit.parent_ids),
            message=commit.message,
        )


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """Single top-level entry of a tree."""

    name: str
    sha: str
    filemode: int


@dataclass(frozen=True, slots=True)
class TreeInfo:
    """Tree object summary."""

    sha: str
    entries: tuple[TreeEntry, ...]

    @classmethod
    def from_pygit2(cls, tree: pygit2.Tree) -> TreeInfo:
        return cls(
            sha=str(tree.id),
            entries=tuple(
                TreeEntry(name=entry.name or "", sha=str(entry.id), filemode=int(entry.filemode))
                for entry in tree
            ),
        )


@dataclass(frozen=True, slots=True)
class ConflictEntry:
    """One conflicted path of a three-way merge. Blob shas are None for a missing side."""

    path: str
    ancestor_sha: str | None
    ours_sha: str | None
    theirs_sha: str | None


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """Result of a tree-level three-way merge.

    ``tree_sha`` is the merged tree when clean. When conflicted it is None and
    ``conflict_tree_sha`` holds a tree whose conflicted files carry merge markers.
    """

    tree_sha: str | None
    conflicts: tuple[ConflictEntry, ...] = ()
    conflict_tree_sha: str | None = None

    @property
    def conflicted(self) -> bool:
        return bool(self.conflicts)

    @property
    def conflict_paths(self) -> list[str]:
        return [c.path for c in self.conflicts]
