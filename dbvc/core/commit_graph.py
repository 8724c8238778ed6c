"""Read-time traversal of the commit DAG.

Nothing here is persisted: history is reconstructed on demand by following
``parent`` links through the object store.
"""

from __future__ import annotations

from collections.abc import Iterator

from dbvc.core.errors import BrokenHistoryError, NotFoundError
from dbvc.core.object_store import ObjectStore
from dbvc.models.objects import Commit


class CommitGraph:
    """Walks parent chains in an :class:`ObjectStore`."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def walk(self, start: str) -> Iterator[Commit]:
        """Yield commits newest first, from ``start`` back to the root.

        Raises NotFoundError if ``start`` itself is unknown, and
        BrokenHistoryError as soon as a parent cannot be resolved.
        """
        commit = self._store.get_commit(start)
        yield commit
        while commit.parent:
            try:
                parent = self._store.get_commit(commit.parent)
            except NotFoundError as exc:
                raise BrokenHistoryError(commit.parent, commit.id) from exc
            yield parent
            commit = parent

    def history(self, start: str) -> list[Commit]:
        return list(self.walk(start))

    def root(self, start: str) -> Commit:
        """Return the first commit of the line ending at ``start``."""
        commit = None
        for commit in self.walk(start):
            pass
        return commit
