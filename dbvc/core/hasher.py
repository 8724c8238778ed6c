"""Canonical hashing for commits and trees.

The byte layouts produced here are shared with remote counterparts: a commit
or tree ID computed locally must equal the ID computed on the other side from
the same fields. Any change to field order, separators or the timestamp
layout breaks deduplication and synchronisation.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dbvc.models.objects import Commit, TreeEntry

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def to_utc(dt: datetime) -> datetime:
    """Normalise to an aware UTC datetime with whole-second precision.

    Naive datetimes are taken to already be in UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0)


def format_timestamp(dt: datetime) -> str:
    """Format a timestamp in the Unix ``date`` layout, e.g.
    ``Mon Jan  2 15:04:05 UTC 2006``.

    Names are fixed English abbreviations, so the output never depends on the
    process locale (``strftime("%a")`` would).
    """
    t = to_utc(dt)
    return (
        f"{_WEEKDAYS[t.weekday()]} {_MONTHS[t.month - 1]} {t.day:>2} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d} UTC {t.year:04d}"
    )


def commit_payload(commit: Commit) -> bytes:
    """Serialise a commit to the exact byte sequence its ID is taken over."""
    ts = format_timestamp(commit.timestamp)
    lines = [f"tree {commit.tree}\n"]
    if commit.parent:
        lines.append(f"parent {commit.parent}\n")
    lines.append(f"author {commit.author_name} <{commit.author_email}> {ts}\n")
    if commit.committer_email:
        lines.append(
            f"committer {commit.committer_name or ''} <{commit.committer_email}> {ts}\n"
        )
    lines.append("\n")
    lines.append(commit.message)
    return "".join(lines).encode("utf-8") + b"\x00"


def hash_commit(commit: Commit) -> str:
    """Return the commit ID: SHA-256 of :func:`commit_payload`, lowercase hex."""
    return sha256_hex(commit_payload(commit))


def tree_payload(entries: Sequence[TreeEntry]) -> bytes:
    """Serialise tree entries, in the given order, for hashing.

    Each entry contributes ``type NUL sha NUL name LF``. Order is part of the
    tree's identity.
    """
    buf = bytearray()
    for entry in entries:
        buf += entry.entry_type.value.encode("utf-8")
        buf += b"\x00"
        buf += entry.sha_sum.encode("utf-8")
        buf += b"\x00"
        buf += f"{entry.name}\n".encode("utf-8")
    return bytes(buf)


def hash_tree(entries: Sequence[TreeEntry]) -> str:
    """Return the tree ID: SHA-256 of :func:`tree_payload`, lowercase hex."""
    return sha256_hex(tree_payload(entries))
