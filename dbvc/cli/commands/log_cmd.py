"""``dbvc log DATABASE`` — show commit history for a database."""

from __future__ import annotations

from pathlib import Path

import typer

from dbvc.cli._common import STORAGE_OPTION, console, open_repository, reported_errors
from dbvc.cli._formatting import format_commit_text


def log_cmd(
    database: str = typer.Argument(..., help="Database to show the history of."),
    branch: str = typer.Option(
        None,
        "--branch",
        "-b",
        help="Walk this branch's parent chain instead of listing the index.",
    ),
    storage: Path = STORAGE_OPTION,
) -> None:
    """Show commit history.

    Without ``--branch`` the database's index is listed oldest first. With
    ``--branch`` history is rebuilt from the branch head, newest first.
    """
    repo = open_repository(storage)
    with reported_errors():
        if branch:
            commits = repo.history(database, branch)
            title = f'Branch "{branch}" history for {database}:'
        else:
            commits = repo.log(database)
            title = f"History for {database}:"

    console.print(title, markup=False)
    console.print()
    for commit in commits:
        console.print(format_commit_text(commit, indent="  "), markup=False, highlight=False)
