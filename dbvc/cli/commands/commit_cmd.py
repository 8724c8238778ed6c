"""``dbvc commit FILE`` — record a snapshot of a database file."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import typer

from dbvc.cli._common import STORAGE_OPTION, console, open_repository, reported_errors
from dbvc.config import settings
from dbvc.core.errors import StorageError


def commit_cmd(
    file: Path = typer.Argument(..., help="Database file to commit."),
    message: str = typer.Option("", "--message", "-m", help="(Required) Commit message."),
    branch: str = typer.Option(None, "--branch", "-b", help="Branch to commit to."),
    database: str = typer.Option(
        None, "--database", "-d", help="Name to store the database as (defaults to the file name)."
    ),
    author: str = typer.Option(None, "--author", help="Author name."),
    email: str = typer.Option(None, "--email", help="Email address of the author."),
    storage: Path = STORAGE_OPTION,
) -> None:
    """Commit the current contents of a database file, dated by its mtime.

    Author name and email come from DBVC_AUTHOR_NAME / DBVC_AUTHOR_EMAIL
    unless given on the command line.
    """
    if not file.is_file():
        console.print(f"[bold red]No such database file:[/bold red] {file}")
        raise typer.Exit(code=1)

    author_name = author or settings.author_name
    author_email = email or settings.author_email
    if not author_name or not author_email:
        console.print("[bold red]Both author name and email are required![/bold red]")
        raise typer.Exit(code=1)
    if not message:
        console.print("[bold red]Commit message is required![/bold red]")
        raise typer.Exit(code=1)

    repo = open_repository(storage)
    with reported_errors():
        try:
            data = file.read_bytes()
            modified = datetime.fromtimestamp(file.stat().st_mtime, timezone.utc)
        except OSError as exc:
            raise StorageError(f"Cannot read {file}: {exc}") from exc
        commit = repo.commit(
            database or file.name,
            data,
            author_name=author_name,
            author_email=author_email,
            message=message,
            branch=branch,
            timestamp=modified,
        )

    console.print(
        f"[green]Committed[/green] {database or file.name} "
        f"([bold]{branch or repo.default_branch}[/bold]): {commit.id}"
    )
