"""Main Typer application — imports and registers all CLI commands.

Entry point: ``dbvc`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer

from dbvc.cli.commands.branches_cmd import branches_cmd
from dbvc.cli.commands.commit_cmd import commit_cmd
from dbvc.cli.commands.log_cmd import log_cmd
from dbvc.cli.commands.verify_cmd import reindex_cmd, verify_cmd
from dbvc.config import settings

app = typer.Typer(
    name="dbvc",
    help="dbvc: content-addressed version history for database files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="commit", help="Commit a snapshot of a database file.")(commit_cmd)
app.command(name="log", help="Show the commit history of a database.")(log_cmd)
app.command(name="branches", help="List the branches of a database.")(branches_cmd)
app.command(name="verify", help="Verify the stored history of a branch.")(verify_cmd)
app.command(name="reindex", help="Rebuild a database's history index.")(reindex_cmd)


@app.callback()
def configure(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (defaults to DBVC_LOG_LEVEL)."
    ),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
