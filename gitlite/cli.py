"""Command line interface for gitlite."""

import logging
import os
import sys
from datetime import datetime
from typing import Any, Sequence

import click

from .config import (
    DATE_FORMAT,
    DEFAULT_STORAGE,
    LOG_LEVEL_ENV,
    SHORT_HASH_LENGTH,
    STORAGE_ENV,
)
from .errors import GitliteError, UsageError
from .objects import Commit
from .repository import Repository, Status
from .store import repository

logger = logging.getLogger(__name__)


class Operands(click.Command):
    """A subcommand whose operands are passed through verbatim.

    ``--`` is a real operand for ``checkout``, so click's option parser
    never sees the operands. When ``arity`` is set the operand count is
    checked here; otherwise the command checks its own operands.
    """

    def __init__(
        self, *args: Any, arity: int | None = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.arity = arity

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if self.arity is not None and len(args) != self.arity:
            raise UsageError("Incorrect operands.")
        ctx.params["operands"] = tuple(args)
        return []


class GitliteGroup(click.Group):
    """Command group that reports every ``GitliteError`` as its message.

    The message goes to stdout and the process exits with status 1.
    """

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if self.get_command(ctx, args[0]) is None:
            raise UsageError("No command with that name exists.")
        return super().resolve_command(ctx, args)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except GitliteError as e:
            click.echo(e.message)
            ctx.exit(1)


def format_date(timestamp: int) -> str:
    """Format a commit time in the local zone, e.g. ``Thu Jan 1 00:00:00 1970 +0000``."""
    moment = datetime.fromtimestamp(timestamp).astimezone()
    return moment.strftime(DATE_FORMAT.format(day=moment.day))


def format_commit(commit_hash: str, commit: Commit) -> str:
    lines = ["===", f"commit {commit_hash}"]
    if commit.second_parent is not None and commit.parent is not None:
        lines.append(
            f"Merge: {commit.parent[:SHORT_HASH_LENGTH]} "
            f"{commit.second_parent[:SHORT_HASH_LENGTH]}"
        )
    lines.append(f"Date: {format_date(commit.timestamp)}")
    lines.append(commit.message)
    lines.append("")
    return "\n".join(lines)


def format_status(status: Status) -> str:
    def section(title: str, entries: Sequence[str]) -> list[str]:
        return [f"=== {title} ===", *entries, ""]

    branches = [
        f"*{b}" if b == status.current_branch else b for b in status.branches
    ]
    lines = [
        *section("Branches", branches),
        *section("Staged Files", status.staged),
        *section("Removed Files", status.removed),
        *section("Modifications Not Staged For Commit", status.modified),
        *section("Untracked Files", status.untracked),
    ]
    return "\n".join(lines)


def _configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group(
    cls=GitliteGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": []},
)
@click.pass_context
def main(ctx: click.Context) -> None:
    """gitlite: a local version-control system."""
    _configure_logging()
    if ctx.invoked_subcommand is None:
        raise UsageError("Please enter a command.")
    repo = repository(".", os.environ.get(STORAGE_ENV, DEFAULT_STORAGE))
    ctx.call_on_close(repo.close)
    ctx.obj = repo
    logger.debug("Running %s", ctx.invoked_subcommand)


@main.command("init", cls=Operands, arity=0)
@click.pass_obj
def init_command(repo: Repository, operands: tuple[str, ...]) -> None:
    repo.init()


@main.command("add", cls=Operands, arity=1)
@click.pass_obj
def add_command(repo: Repository, operands: tuple[str, ...]) -> None:
    repo.add(operands[0])


@main.command("commit", cls=Operands)
@click.pass_obj
def commit_command(repo: Repository, operands: tuple[str, ...]) -> None:
    # A missing message is reported before a wrong operand count
    if not operands or not operands[0]:
        raise UsageError("Please enter a commit message.")
    if len(operands) != 1:
        raise UsageError("Incorrect operands.")
    repo.commit(operands[0])


@main.command("rm", cls=Operands, arity=1)
@click.pass_obj
def rm_command(repo: Repository, operands: tuple[str, ...]) -> None:
    repo.rm(operands[0])


@main.command("log", cls=Operands, arity=0)
@click.pass_obj
def log_command(repo: Repository, operands: tuple[str, ...]) -> None:
    for commit_hash, commit in repo.log():
        click.echo(format_commit(commit_hash, commit))


@main.command("global-log", cls=Operands, arity=0)
@click.pass_obj
def global_log_command(repo: Repository, operands: tuple[str, ...]) -> None:
    for commit_hash, commit in repo.global_log():
        click.echo(format_commit(commit_hash, commit))


@main.command("find", cls=Operands, arity=1)
@click.pass_obj
def find_command(repo: Repository, operands: tuple[str, ...]) -> None:
    for commit_hash in repo.find(operands[0]):
        click.echo(commit_hash)


@main.command("status", cls=Operands, arity=0)
@click.pass_obj
def status_command(repo: Repository, operands: tuple[str, ...]) -> None:
    click.echo(format_status(repo.status()))


@main.command("checkout", cls=Operands)
@click.pass_obj
def checkout_command(repo: Repository, operands: tuple[str, ...]) -> None:
    """checkout -- FILE | checkout COMMIT -- FILE | checkout BRANCH"""
    if len(operands) == 2 and operands[0] == "--":
        repo.checkout_file(operands[1])
    elif len(operands) == 3 and operands[1] == "--":
        repo.checkout_file(operands[2], operands[0])
    elif len(operands) == 1:
        repo.checkout_branch(operands[0])
    else:
        raise UsageError("Incorrect operands.")


@main.command("branch", cls=Operands, arity=1)
@click.pass_obj
def branch_command(repo: Repository, operands: tuple[str, ...]) -> None:
    repo.branch(operands[0])


@main.command("rm-branch", cls=Operands, arity=1)
@click.pass_obj
def rm_branch_command(repo: Repository, operands: tuple[str, ...]) -> None:
    repo.rm_branch(operands[0])


@main.command("reset", cls=Operands, arity=1)
@click.pass_obj
def reset_command(repo: Repository, operands: tuple[str, ...]) -> None:
    repo.reset(operands[0])


@main.command("merge", cls=Operands, arity=1)
@click.pass_obj
def merge_command(repo: Repository, operands: tuple[str, ...]) -> None:
    result = repo.merge(operands[0])
    if result.strategy == "no_op":
        click.echo("Given branch is an ancestor of the current branch.")
    elif result.strategy == "fast_forward":
        click.echo("Current branch fast-forwarded.")
    elif result.has_conflicts:
        click.echo("Encountered a merge conflict.")


if __name__ == "__main__":
    main()
