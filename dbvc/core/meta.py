"""Per-database metadata paths: ``{root}/meta/{database}/...``."""

from __future__ import annotations

from pathlib import Path

from dbvc.core.errors import ValidationError

METADATA_FILES = frozenset({"index", "branches"})


def normalize_database(database: str) -> str:
    """Validate a database path and return its canonical ``a/b/c`` form.

    Leading and repeated ``/`` are dropped. Components starting with ``.``
    (including ``.`` and ``..``) and backslashes are rejected, so the path
    can never leave ``meta/`` or collide with lock and temp files. ``index``
    and ``branches`` are files inside every database directory, so they may
    only appear as the first component.
    """
    if not isinstance(database, str) or "\\" in database or "\x00" in database:
        raise ValidationError(f"Invalid database path: {database!r}")
    parts = [p for p in database.split("/") if p]
    if not parts or any(p.startswith(".") for p in parts):
        raise ValidationError(f"Invalid database path: {database!r}")
    if any(p in METADATA_FILES for p in parts[1:]):
        raise ValidationError(
            f"Invalid database path: {database!r} ('index' and 'branches' are reserved)"
        )
    return "/".join(parts)


class MetaPaths:
    """Resolves the metadata files of one storage root."""

    def __init__(self, root: Path) -> None:
        self.meta_dir = Path(root) / "meta"

    def database_dir(self, database: str) -> Path:
        return self.meta_dir.joinpath(*normalize_database(database).split("/"))

    def index_path(self, database: str) -> Path:
        return self.database_dir(database) / "index"

    def branches_path(self, database: str) -> Path:
        return self.database_dir(database) / "branches"

    def lock_path(self, database: str) -> Path:
        return self.database_dir(database) / ".lock"
