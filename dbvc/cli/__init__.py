"""dbvc CLI — Typer-based command-line interface.

Provides the ``dbvc`` command with subcommands for committing database
snapshots and inspecting history, branches and store integrity.

All output uses Rich for formatted terminal display.
"""
