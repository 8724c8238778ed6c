"""``dbvc branches DATABASE`` — list branch heads."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from dbvc.cli._common import STORAGE_OPTION, console, open_repository, reported_errors


def branches_cmd(
    database: str = typer.Argument(..., help="Database to list branches of."),
    storage: Path = STORAGE_OPTION,
) -> None:
    """List the branches of a database and their head commits."""
    repo = open_repository(storage)
    with reported_errors():
        branches = repo.branches(database)

    table = Table(title=f"Branches of {database}")
    table.add_column("Branch", style="cyan")
    table.add_column("Head", style="green")
    for b in branches:
        marker = " [dim](default)[/dim]" if b.name == repo.default_branch else ""
        table.add_row(f"{b.name}{marker}", b.commit)
    console.print(table)
