"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides repositories whose commits are written straight into the object
database (no worktree involved, as in git-dx itself).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

# Insert local src directory at the beginning of sys.path
# This ensures that the local gitdx package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of gitdx modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("gitdx"):
        del sys.modules[module_name]

import pygit2  # noqa: E402
import pytest  # noqa: E402

SIG = pygit2.Signature("Test User", "test@example.com")


class RepoBuilder:
    """Writes commits into a repository without touching its worktree."""

    def __init__(self, repo: pygit2.Repository) -> None:
        self.repo = repo

    @property
    def path(self) -> Path:
        return Path(self.repo.workdir or self.repo.path)

    def commit(
        self,
        message: str,
        files: dict[str, str | None],
        parent: str | None = None,
        *,
        parents: list[str] | None = None,
        ref: str | None = None,
    ) -> str:
        """Commit ``files`` on top of the first parent's tree. A None value deletes the file."""
        parent_ids = parents if parents is not None else ([parent] if parent else [])
        index = pygit2.Index()
        if parent_ids:
            index.read_tree(self.repo.revparse_single(parent_ids[0]).peel(pygit2.Tree))
        for path, content in files.items():
            if content is None:
                index.remove(path)
            else:
                blob = self.repo.create_blob(content.encode())
                index.add(pygit2.IndexEntry(path, blob, pygit2.enums.FileMode.BLOB))
        tree = index.write_tree(self.repo)
        oid = self.repo.create_commit(
            ref, SIG, SIG, message, tree, [pygit2.Oid(hex=p) for p in parent_ids]
        )
        return str(oid)

    def tree(self, rev: str) -> str:
        return str(self.repo.revparse_single(rev).peel(pygit2.Tree).id)

    def files(self, rev: str) -> dict[str, str]:
        tree = self.repo.revparse_single(rev).peel(pygit2.Tree)
        return {entry.name: self.repo[entry.id].data.decode() for entry in tree}

    def message(self, rev: str) -> str:
        return self.repo.revparse_single(rev).peel(pygit2.Commit).message

    def parents(self, rev: str) -> list[str]:
        return [str(p) for p in self.repo.revparse_single(rev).peel(pygit2.Commit).parent_ids]

    def ref(self, name: str) -> str | None:
        ref = self.repo.references.get(name)
        return str(ref.resolve().target) if ref is not None else None

    def set_ref(self, name: str, sha: str) -> None:
        self.repo.references.create(name, pygit2.Oid(hex=sha), force=True)

    def fetch(self, remote: str = "origin") -> None:
        self.repo.remotes[remote].fetch()


@pytest.fixture
def origin(tmp_path: Path) -> RepoBuilder:
    """Bare repository acting as the review remote."""
    return RepoBuilder(pygit2.init_repository(str(tmp_path / "origin.git"), bare=True))


@pytest.fixture
def local(tmp_path: Path, origin: RepoBuilder) -> RepoBuilder:
    """Local repository with one mainline commit, pushed to and fetched from ``origin``."""
    repo_path = tmp_path / "local"
    repo_path.mkdir()
    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    builder = RepoBuilder(repo)
    builder.commit("Initial commit", {"README.md": "# Test\n"}, ref="refs/heads/main")

    repo.remotes.create("origin", str(Path(origin.repo.path).resolve()))
    repo.remotes["origin"].push(["refs/heads/main:refs/heads/main"])
    builder.fetch()
    return builder


MESSAGE_B = "Add b\n\nExplains b in detail.\n\nDx-branch: foo\n"
MESSAGE_C = "Add c\n\nDx-branch: bar\n"


@dataclass
class Stack:
    """Mainline M, then A (unmanaged) -> B (foo) -> C (bar)."""

    local: RepoBuilder
    origin: RepoBuilder
    main: str
    a: str
    b: str
    c: str

    def amend_b(self, content: str = "b2\n") -> tuple[str, str]:
        """Amend B and rebase C onto it, as ``git rebase -i`` would. Returns (B', C')."""
        b = self.local.commit(MESSAGE_B, {"b.txt": content}, self.a)
        c = self.local.commit(MESSAGE_C, {"c.txt": self.local.files(self.c)["c.txt"]}, b)
        self.b, self.c = b, c
        return b, c

    def amend_c(self, files: dict[str, str | None]) -> str:
        """Amend C on the current B, keeping its other files. Returns C'."""
        content: dict[str, str | None] = {"c.txt": self.local.files(self.c)["c.txt"], **files}
        self.c = self.local.commit(MESSAGE_C, content, self.b)
        return self.c

    def tracking(self, branch: str) -> str | None:
        return self.local.ref(f"refs/remotes/origin/{branch}")

    def remote(self, branch: str) -> str | None:
        return self.origin.ref(f"refs/heads/{branch}")


@pytest.fixture
def stack(local: RepoBuilder, origin: RepoBuilder) -> Stack:
    main = local.ref("refs/heads/main")
    assert main is not None
    a = local.commit("Add a\n", {"a.txt": "a\n"}, main)
    b = local.commit(MESSAGE_B, {"b.txt": "b1\n"}, a)
    c = local.commit(MESSAGE_C, {"c.txt": "c1\n"}, b)
    return Stack(local=local, origin=origin, main=main, a=a, b=b, c=c)
