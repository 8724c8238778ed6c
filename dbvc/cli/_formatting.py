"""Shared text helpers for history output."""

from __future__ import annotations

from dbvc.core.hasher import format_timestamp
from dbvc.models.objects import Commit


def format_commit_text(commit: Commit, indent: str = "") -> str:
    """Render a commit the way ``git log`` does, one block per commit.

    A ``Commit:`` line follows the author only when someone else committed.
    """
    lines = [
        f"{indent}commit {commit.id}",
        f"{indent}Author: {commit.author_name} <{commit.author_email}>",
    ]
    committer = (commit.effective_committer_name, commit.effective_committer_email)
    if committer != (commit.author_name, commit.author_email):
        lines.append(f"{indent}Commit: {committer[0]} <{committer[1]}>")
    lines += [f"{indent}Date: {format_timestamp(commit.timestamp)}", ""]
    if commit.message:
        lines.append(f"{indent}    {commit.message}")
    return "\n".join(lines) + "\n"
