"""Per-database commit index — an append-only projection of commit history.

The index exists for fast history listing. It is a cache, not the source of
truth: the object store's parent links are. A crash between writing a commit
and appending it here leaves the two out of step, which :meth:`rebuild`
repairs by walking every branch head.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from dbvc.core.commit_graph import CommitGraph
from dbvc.core.errors import IntegrityError, NotFoundError
from dbvc.core.fs import atomic_write_bytes, file_lock, read_bytes
from dbvc.core.meta import MetaPaths
from dbvc.models.branches import Branch
from dbvc.models.objects import Commit
from dbvc.models.records import IndexDocument

logger = logging.getLogger(__name__)


class CommitIndex:
    """Ordered commit list per database, stored at ``meta/<database>/index``.

    Parameters
    ----------
    root:
        Storage root shared with the object store.
    """

    def __init__(self, root: Path) -> None:
        self._paths = MetaPaths(root)

    def exists(self, database: str) -> bool:
        return self._paths.index_path(database).exists()

    def read(self, database: str) -> list[Commit]:
        """Return the database's commits in insertion order."""
        commits = self._read(database)
        if commits is None:
            raise NotFoundError(f"No index for database {database!r}")
        return commits

    def append(self, database: str, commit: Commit) -> list[Commit]:
        """Append one commit and persist the full list. Returns the new list."""
        with file_lock(self._paths.lock_path(database)):
            commits = self._read(database) or []
            commits.append(commit)
            self._write(database, commits)
        logger.debug("Indexed commit %s for %s (%d entries)", commit.id, database, len(commits))
        return commits

    def rebuild(
        self, database: str, branches: Iterable[Branch], graph: CommitGraph
    ) -> list[Commit]:
        """Regenerate the index from branch heads and overwrite it.

        Branches are visited in name order; each line is walked root first
        and a commit shared by several branches is listed once.
        """
        with file_lock(self._paths.lock_path(database)):
            seen: set[str] = set()
            commits: list[Commit] = []
            for branch in sorted(branches, key=lambda b: b.name):
                for commit in reversed(graph.history(branch.commit)):
                    if commit.id not in seen:
                        seen.add(commit.id)
                        commits.append(commit)
            self._write(database, commits)
        logger.info("Rebuilt index for %s: %d commits", database, len(commits))
        return commits

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self, database: str) -> list[Commit] | None:
        path = self._paths.index_path(database)
        try:
            raw = read_bytes(path)
        except FileNotFoundError:
            return None
        try:
            data = json.loads(raw)
            doc = IndexDocument.model_validate(data)
        except (ValueError, PydanticValidationError) as exc:
            raise IntegrityError(f"Index for {database!r} is unreadable: {exc}") from exc

        for record, commit in zip(data.get("commits", []), doc.commits):
            if record.get("id") != commit.id:
                raise IntegrityError(
                    f"Index for {database!r} lists commit {record.get('id')} "
                    f"whose fields hash to {commit.id}"
                )
        return list(doc.commits)

    def _write(self, database: str, commits: list[Commit]) -> None:
        doc = IndexDocument(commits=commits)
        atomic_write_bytes(
            self._paths.index_path(database),
            doc.model_dump_json(indent=1).encode("utf-8"),
        )
