"""Helpers shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console

from dbvc.config import settings
from dbvc.core.errors import DbvcError
from dbvc.core.repository import Repository

console = Console()

STORAGE_OPTION = typer.Option(
    None,
    "--storage",
    "-s",
    help="Storage root (defaults to DBVC_STORAGE_ROOT or .dbvc).",
)


def open_repository(storage: Path | None) -> Repository:
    return Repository(
        storage or settings.storage_root, default_branch=settings.default_branch
    )


@contextmanager
def reported_errors() -> Iterator[None]:
    """Print dbvc errors in red and exit with status 1."""
    try:
        yield
    except DbvcError as e:
        console.print(f"[bold red]{type(e).__name__}:[/bold red] {e}")
        raise typer.Exit(code=1) from e
