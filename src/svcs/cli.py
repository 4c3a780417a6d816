"""CLI for svcs."""

import logging
import os
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import api
from .errors import EmptyMessageError, PathNotFoundError, SvcsError
from .utils import join_message_words, short_id


app = typer.Typer(
    help="""\
A small version control system. Track files, commit snapshots of them,
and check out any earlier commit.""",
)

# Commit ids are 64 characters and must never be wrapped
console = Console(soft_wrap=True)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context):
    """These are SVCS commands."""
    if os.environ.get("DEBUG"):
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    # Bare `svcs` shows the command overview and succeeds
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _fail(error: SvcsError) -> NoReturn:
    """Report a user-facing error and exit non-zero."""
    console.print(f"[red]✗[/red] {escape(str(error))}")
    raise typer.Exit(1)


@app.command()
def config(
    name: Optional[str] = typer.Argument(None, help="Username to record as commit author"),
):
    """Get and set a username.

    Examples:
        svcs config            # Show the current username
        svcs config "Ada L."   # Set the username
    """
    ctx = api.open_repository()
    try:
        if name is None:
            author = api.get_author(ctx)
            if not author:
                console.print("Please, tell me who you are.")
                return
            console.print(f"The username is {escape(author)}.")
            return
        api.set_author(ctx, name)
    except SvcsError as e:
        _fail(e)
    console.print(f"The username is {escape(name)}.")


@app.command()
def add(
    files: Optional[List[Path]] = typer.Argument(None, help="Files or directories to track"),
    force: bool = typer.Option(False, "--force", help="Add ignored files anyway"),
):
    """Add a file to the index.

    Without arguments, lists the tracked files. Directories are added
    recursively. Respects .svcsignore.

    Examples:
        svcs add                 # List tracked files
        svcs add notes.txt       # Track a file
        svcs add src/            # Track every file in a directory
        svcs add --force x.pyc   # Track an ignored file
    """
    ctx = api.open_repository()

    if not files:
        tracked = api.tracked_files(ctx)
        if not tracked:
            console.print("Add a file to the index.")
            return
        console.print("Tracked files:")
        for path in tracked:
            console.print(escape(path))
        return

    failed = False
    skipped_ignored = []
    for file in files:
        try:
            result = api.add_path(ctx, file, force=force)
        except PathNotFoundError as e:
            console.print(f"[red]✗[/red] {escape(str(e))}")
            failed = True
            continue
        except SvcsError as e:
            _fail(e)

        for path in result.added:
            console.print(f"The file '{escape(path)}' is tracked.")
        skipped_ignored.extend(result.ignored)

    if skipped_ignored:
        console.print("[yellow]⚠[/yellow] The following paths are ignored:")
        for path in skipped_ignored:
            console.print(f"  {escape(path)}")
        console.print("[dim]Hint: Use --force to add ignored files anyway.[/dim]")

    if failed:
        raise typer.Exit(1)


@app.command()
def log():
    """Show commit logs."""
    ctx = api.open_repository()
    try:
        entries = api.log_entries(ctx)
    except SvcsError as e:
        _fail(e)

    if not entries:
        console.print("No commits yet.")
        return

    for i, entry in enumerate(entries):
        if i:
            console.print()
        console.print(f"[yellow]commit {entry.commit_id}[/yellow]")
        console.print(f"Author: {escape(entry.author)}")
        console.print(escape(entry.message))


@app.command()
def commit(
    message: Optional[List[str]] = typer.Argument(None, help="Commit message"),
):
    """Save changes.

    Examples:
        svcs commit "Fix typo in notes"
        svcs commit Fix typo in notes
    """
    ctx = api.open_repository()
    try:
        if not message:
            raise EmptyMessageError()
        entry = api.commit(ctx, join_message_words(message))
    except SvcsError as e:
        _fail(e)

    console.print("[green]✓[/green] Changes are committed.")
    console.print(f"[dim]commit {short_id(entry.commit_id)}[/dim]")


@app.command()
def checkout(
    commit_id: Optional[str] = typer.Argument(None, help="Commit id to restore"),
):
    """Restore a file.

    Replaces the tracked files with the snapshot of COMMIT_ID and resets
    the index to that snapshot's files.
    """
    ctx = api.open_repository()
    try:
        result = api.checkout(ctx, commit_id)
    except SvcsError as e:
        _fail(e)

    console.print(f"Switched to commit {result.commit_id}.")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
