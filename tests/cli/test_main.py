"""Tests for the git-dx command."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygit2
from click.testing import CliRunner

from gitdx.cli.main import EXIT_HARD, EXIT_OK, EXIT_RECOVERABLE, main

if TYPE_CHECKING:
    from tests.conftest import Stack


class TestSync:
    def test_prints_new_commit_on_stdout(self, runner: CliRunner, in_stack: Stack) -> None:
        result = runner.invoke(main, [in_stack.b, "--push"])

        assert result.exit_code == EXIT_OK, result.output
        sha = result.stdout.strip()
        assert in_stack.remote("dx-foo") == sha
        assert "Pushed" in result.stderr

    def test_defaults_to_head(self, runner: CliRunner, in_stack: Stack) -> None:
        in_stack.local.repo.set_head(pygit2.Oid(hex=in_stack.b))

        result = runner.invoke(main, [])

        assert result.exit_code == EXIT_OK
        assert in_stack.local.tree(result.stdout.strip()) == in_stack.local.tree(in_stack.b)
        assert in_stack.remote("dx-foo") is None

    def test_dry_run(self, runner: CliRunner, in_stack: Stack) -> None:
        result = runner.invoke(main, [in_stack.b, "--push", "--dry-run"])

        assert result.exit_code == EXIT_OK
        assert "Would push" in result.stderr
        assert in_stack.remote("dx-foo") is None

    def test_up_to_date(self, runner: CliRunner, in_stack: Stack) -> None:
        first = runner.invoke(main, [in_stack.b, "--push"])

        again = runner.invoke(main, [in_stack.b, "--push"])

        assert again.exit_code == EXIT_OK
        assert again.stdout == first.stdout
        assert "already up to date" in again.stderr

    def test_message_option(self, runner: CliRunner, in_stack: Stack) -> None:
        runner.invoke(main, [in_stack.b, "--push"])
        b2, _ = in_stack.amend_b()

        result = runner.invoke(main, [b2, "--push", "-m", "address review"])

        assert result.exit_code == EXIT_OK
        assert in_stack.local.message(result.stdout.strip()).startswith(
            "[foo: address review]\n"
        )

    def test_repo_config_prefix(self, runner: CliRunner, in_stack: Stack) -> None:
        config_dir = in_stack.local.path / ".gitdx"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("sync:\n  branch_prefix: alice-\n")

        result = runner.invoke(main, [in_stack.b, "--push"])

        assert result.exit_code == EXIT_OK
        assert in_stack.remote("alice-foo") == result.stdout.strip()


class TestExitCodes:
    def test_unmanaged_commit_is_skipped(self, runner: CliRunner, in_stack: Stack) -> None:
        result = runner.invoke(main, [in_stack.a])

        assert result.exit_code == EXIT_OK
        assert result.stdout == ""
        assert "Skipped" in result.stderr

    def test_missing_upstream_is_hard(self, runner: CliRunner, in_stack: Stack) -> None:
        result = runner.invoke(main, [in_stack.c, "--push"])

        assert result.exit_code == EXIT_HARD
        assert result.stdout == ""
        assert in_stack.remote("dx-bar") is None

    def test_invalid_branch_name_is_hard(self, runner: CliRunner, in_stack: Stack) -> None:
        bad = in_stack.local.commit(
            "Bad\n\nDx-branch: foo bar..baz\n", {"x.txt": "x\n"}, in_stack.a
        )

        result = runner.invoke(main, [bad, "--push"])

        assert result.exit_code == EXIT_HARD
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "dx-foo bar..baz" in result.stderr

    def test_unknown_revision_is_hard(self, runner: CliRunner, in_stack: Stack) -> None:
        result = runner.invoke(main, ["no-such-rev"])
        assert result.exit_code == EXIT_HARD

    def test_unknown_remote_is_hard(self, runner: CliRunner, in_stack: Stack) -> None:
        result = runner.invoke(main, [in_stack.b, "--push", "-r", "nowhere"])
        assert result.exit_code == EXIT_HARD

    def test_conflict_is_recoverable(self, runner: CliRunner, in_stack: Stack) -> None:
        runner.invoke(main, [in_stack.b, "--push"])
        bar = runner.invoke(main, [in_stack.c, "--push"]).stdout.strip()
        b2, c2 = in_stack.amend_b()
        runner.invoke(main, [b2, "--push"])
        in_stack.origin.commit(
            "Reviewer fixup\n", {"b.txt": "reviewer wording\n"}, bar, ref="refs/heads/dx-bar"
        )
        in_stack.local.fetch()

        result = runner.invoke(main, [c2, "--push"])

        assert result.exit_code == EXIT_RECOVERABLE
        assert "b.txt" in result.stderr
        assert "--resolution" in result.stderr

        resolved = runner.invoke(
            main, [c2, "--push", "--resolution", in_stack.local.tree(c2)]
        )
        assert resolved.exit_code == EXIT_OK
        assert in_stack.remote("dx-bar") == resolved.stdout.strip()

    def test_invalid_config_is_reported(self, runner: CliRunner, in_stack: Stack) -> None:
        config_dir = in_stack.local.path / ".gitdx"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("sync: [unclosed\n")

        result = runner.invoke(main, [in_stack.b])

        assert result.exit_code == 1
        assert "CONFIG_PARSE_ERROR" in result.stderr


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
