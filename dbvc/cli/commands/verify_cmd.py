"""``dbvc verify`` / ``dbvc reindex`` — store integrity and index repair."""

from __future__ import annotations

from pathlib import Path

import typer

from dbvc.cli._common import STORAGE_OPTION, console, open_repository, reported_errors


def verify_cmd(
    database: str = typer.Argument(..., help="Database to verify."),
    branch: str = typer.Option(None, "--branch", "-b", help="Branch to verify."),
    storage: Path = STORAGE_OPTION,
) -> None:
    """Re-hash every commit, tree and blob reachable from a branch."""
    repo = open_repository(storage)
    with reported_errors():
        checked = repo.verify(database, branch)
    console.print(f"[green]OK[/green] {checked} commits verified")


def reindex_cmd(
    database: str = typer.Argument(..., help="Database whose index to rebuild."),
    storage: Path = STORAGE_OPTION,
) -> None:
    """Rebuild a database's index by walking every branch head."""
    repo = open_repository(storage)
    with reported_errors():
        commits = repo.reindex(database)
    console.print(f"[green]Index rebuilt[/green] with {len(commits)} commits")
