"""git-dx CLI - sync a commit to its review branch."""

import click
from rich.console import Console

from gitdx.cli.utils import find_repo_root
from gitdx.config import load_config
from gitdx.core.errors import GitDxError
from gitdx.core.logging import configure_logging, get_logger
from gitdx.git.errors import GitError
from gitdx.sync import MergeConflictError, NoDirectiveError, SyncEngine, SyncError
from gitdx.sync.models import PatchUpdate

EXIT_OK = 0
EXIT_HARD = 1
EXIT_RECOVERABLE = 2

log = get_logger(__name__)


def _describe(update: PatchUpdate, *, push: bool, dry_run: bool) -> str:
    if update.noop:
        return f"[dim]{update.target_branch} already up to date[/dim]"
    kind = update.message_kind.name.lower().replace("_", " ") if update.message_kind else "commit"
    if update.pushed:
        return f"[green]Pushed[/green] {update.target_branch} ({kind})"
    if push and dry_run:
        return f"[cyan]Would push[/cyan] {update.target_branch} ({kind})"
    return f"[cyan]Built[/cyan] {kind} for {update.target_branch}"


@click.command()
@click.version_option(version="0.1.0", prog_name="git-dx")
@click.argument("commit", default="HEAD")
@click.option("--push", "push", is_flag=True, help="Push the result to the target branch")
@click.option("-n", "--dry-run", is_flag=True, help="With --push, check but do not push")
@click.option("-m", "--message", default=None, help="Headline for an update commit")
@click.option("--allow-empty", is_flag=True, help="Create a commit even if nothing changed")
@click.option("--bump", is_flag=True, help="Create an empty commit that re-runs CI")
@click.option("-r", "--remote", default=None, help="Remote to sync with (default: from config)")
@click.option(
    "--resolution",
    default=None,
    metavar="TREE",
    help="Resolved tree to use after a reported merge conflict",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(
    ctx: click.Context,
    commit: str,
    push: bool,
    dry_run: bool,
    message: str | None,
    allow_empty: bool,
    bump: bool,
    remote: str | None,
    resolution: str | None,
    verbose: bool,
) -> None:
    """Sync COMMIT (default: HEAD) to the remote branch named by its trailer.

    Prints the id of the resulting commit on stdout.
    """
    console = Console(stderr=True)
    repo_root = find_repo_root()

    try:
        config = load_config(repo_root)
    except GitDxError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)

    sync_config = config.sync
    if remote:
        sync_config = sync_config.model_copy(update={"remote": remote})

    engine = SyncEngine(repo_root, sync_config)
    try:
        update = engine.sync(
            commit,
            push=push,
            dry_run=dry_run,
            message=message,
            allow_empty=allow_empty,
            bump=bump,
            resolution=resolution,
        )
    except NoDirectiveError as e:
        log.info("sync.skipped", commit=commit, reason=str(e))
        console.print(f"[yellow]Skipped[/yellow] {e}")
        ctx.exit(EXIT_OK)
    except MergeConflictError as e:
        report = e.report
        console.print(f"[red]Conflict[/red] updating {report.target_branch}:")
        for path in report.paths:
            console.print(f"  [cyan]•[/cyan] {path}")
        if report.conflict_tree_sha:
            console.print(
                f"Conflicted tree: {report.conflict_tree_sha}\n"
                "Resolve it and re-run with --resolution <tree>"
            )
        ctx.exit(EXIT_RECOVERABLE)
    except SyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(EXIT_RECOVERABLE if e.severity == "recoverable" else EXIT_HARD)
    except (GitError, GitDxError) as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(EXIT_HARD)

    console.print(_describe(update, push=push, dry_run=dry_run))
    click.echo(update.new_sha)


if __name__ == "__main__":
    main()
