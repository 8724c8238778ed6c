"""Per-database branch table — branch name to head commit.

The table is read and written whole (last writer wins). Single-branch
updates go through :meth:`BranchTable.set_head`, which holds the database's
metadata lock across the read-modify-write.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from dbvc.core.errors import IntegrityError, NotFoundError, ValidationError
from dbvc.core.fs import atomic_write_bytes, file_lock, read_bytes
from dbvc.core.meta import MetaPaths
from dbvc.core.object_store import ObjectStore
from dbvc.models.branches import Branch, make_branch
from dbvc.models.records import BranchDocument

logger = logging.getLogger(__name__)


class BranchTable:
    """Branch heads per database, stored at ``meta/<database>/branches``.

    Parameters
    ----------
    root:
        Storage root shared with the object store.
    store:
        Object store every branch head must resolve in.
    """

    def __init__(self, root: Path, store: ObjectStore) -> None:
        self._paths = MetaPaths(root)
        self._store = store

    def exists(self, database: str) -> bool:
        return self._paths.branches_path(database).exists()

    def load(self, database: str) -> list[Branch]:
        """Return all branches of a database, sorted by name."""
        branches = self._read(database)
        if branches is None:
            raise NotFoundError(f"No branches for database {database!r}")
        return branches

    def store(self, database: str, branches: Iterable[Branch]) -> None:
        """Overwrite the database's branch table."""
        branches = list(branches)
        self._check(branches)
        with file_lock(self._paths.lock_path(database)):
            self._write(database, branches)

    def get(self, database: str, name: str) -> Branch:
        for branch in self.load(database):
            if branch.name == name:
                return branch
        raise NotFoundError(f"Branch {name!r} not found for database {database!r}")

    def head(self, database: str, name: str) -> str | None:
        """Head commit of ``name``, or None if the branch does not exist yet."""
        for branch in self._read(database) or []:
            if branch.name == name:
                return branch.commit
        return None

    def set_head(self, database: str, name: str, commit_id: str) -> Branch:
        """Point ``name`` at ``commit_id``, creating the branch if needed."""
        updated = make_branch(name, commit_id)
        self._check([updated])

        with file_lock(self._paths.lock_path(database)):
            branches = [b for b in self._read(database) or [] if b.name != name]
            branches.append(updated)
            self._write(database, branches)
        logger.info("Branch %s of %s now at %s", name, database, commit_id)
        return updated

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check(self, branches: list[Branch]) -> None:
        names = [b.name for b in branches]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValidationError(f"Duplicate branch names: {', '.join(dupes)}")
        for branch in branches:
            # raises NotFoundError / IntegrityError
            self._store.get_commit(branch.commit)

    def _read(self, database: str) -> list[Branch] | None:
        path = self._paths.branches_path(database)
        try:
            raw = read_bytes(path)
        except FileNotFoundError:
            return None
        try:
            doc = BranchDocument.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise IntegrityError(f"Branch table for {database!r} is unreadable: {exc}") from exc
        return sorted(doc.branches, key=lambda b: b.name)

    def _write(self, database: str, branches: list[Branch]) -> None:
        doc = BranchDocument(branches=sorted(branches, key=lambda b: b.name))
        atomic_write_bytes(
            self._paths.branches_path(database),
            doc.model_dump_json(indent=1).encode("utf-8"),
        )
