"""Repository — the commit workflow over one storage root.

The Repository wires together the ObjectStore, CommitIndex, BranchTable and
CommitGraph. A commit stores the database bytes as a blob, wraps them in a
single-entry tree, records the commit, appends it to the index and moves the
branch head, all under the database's metadata lock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from dbvc.core.branch_table import BranchTable
from dbvc.core.commit_graph import CommitGraph
from dbvc.core.errors import IntegrityError, ValidationError
from dbvc.core.fs import file_lock
from dbvc.core.hasher import sha256_hex
from dbvc.core.index import CommitIndex
from dbvc.core.meta import MetaPaths, normalize_database
from dbvc.core.object_store import ObjectStore
from dbvc.models.branches import Branch, make_branch
from dbvc.models.objects import Commit, EntryType, make_commit, make_entry, make_tree

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "master"


class Repository:
    """Version history for the databases under one storage root.

    Parameters
    ----------
    root:
        Storage root. ``files/`` and ``meta/`` are created beneath it on
        first write.
    default_branch:
        Branch used when a caller does not name one.
    """

    def __init__(self, root: Path, *, default_branch: str = DEFAULT_BRANCH) -> None:
        self.root = Path(root)
        self.default_branch = default_branch
        self.store = ObjectStore(self.root)
        self.index = CommitIndex(self.root)
        self.branch_table = BranchTable(self.root, self.store)
        self.graph = CommitGraph(self.store)
        self._paths = MetaPaths(self.root)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def commit(
        self,
        database: str,
        data: bytes,
        *,
        author_name: str,
        author_email: str,
        message: str,
        branch: str | None = None,
        parent: str | None = None,
        timestamp: datetime | None = None,
        committer_name: str | None = None,
        committer_email: str | None = None,
        name: str | None = None,
    ) -> Commit:
        """Record a new snapshot of ``database`` and move ``branch`` to it.

        ``parent=None`` continues the branch from its current head (or starts
        a root commit for a new branch); ``parent=""`` forces a root commit.
        All fields are validated before anything is written.
        """
        database = normalize_database(database)
        branch = branch or self.default_branch
        if not message:
            raise ValidationError("Commit message is required")
        if not author_name or not author_email:
            raise ValidationError("Both author name and email are required")

        entry = make_entry(
            sha256_hex(data), name or database.rsplit("/", 1)[-1], EntryType.DATABASE
        )
        tree = make_tree([entry])
        commit = make_commit(
            tree=tree.id,
            parent=parent or "",
            author_name=author_name,
            author_email=author_email,
            committer_name=committer_name,
            committer_email=committer_email,
            timestamp=timestamp or datetime.now(timezone.utc),
            message=message,
        )
        make_branch(branch, commit.id)

        with file_lock(self._paths.lock_path(database)):
            if parent is None:
                # the head is only stable while the lock is held
                head = self.branch_table.head(database, branch)
                if head:
                    commit = commit.model_copy(update={"parent": head})
            elif commit.parent:
                self.store.get_commit(commit.parent)

            self.store.put_blob(data)
            self.store.put_tree(tree)
            self.store.put_commit(commit)
            self.index.append(database, commit)
            self.branch_table.set_head(database, branch, commit.id)

        logger.info(
            "Committed %s to %s:%s (%d bytes)", commit.id, database, branch, len(data)
        )
        return commit

    def reindex(self, database: str) -> list[Commit]:
        """Rebuild the database's index from its branch heads."""
        return self.index.rebuild(
            database, self.branch_table.load(database), self.graph
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def log(self, database: str) -> list[Commit]:
        """All indexed commits of ``database``, oldest first."""
        return self.index.read(database)

    def branches(self, database: str) -> list[Branch]:
        return self.branch_table.load(database)

    def history(self, database: str, branch: str | None = None) -> list[Commit]:
        """Commits reachable from the branch head, newest first."""
        head = self.branch_table.get(database, branch or self.default_branch)
        return self.graph.history(head.commit)

    def checkout_bytes(self, database: str, branch: str | None = None) -> bytes:
        """Return the database bytes recorded at the head of ``branch``."""
        head = self.branch_table.get(database, branch or self.default_branch)
        tree = self.store.get_tree(self.store.get_commit(head.commit).tree)
        entry = next(
            (e for e in tree.entries if e.entry_type == EntryType.DATABASE), None
        )
        if entry is None:
            raise IntegrityError(f"Tree {tree.id} has no database entry")
        return self.store.get_blob(entry.sha_sum)

    def verify(self, database: str, branch: str | None = None) -> int:
        """Re-hash every commit, tree and blob reachable from ``branch``.

        Returns the number of commits checked. Raises IntegrityError on the
        first mismatch and BrokenHistoryError on a missing parent.
        """
        checked = 0
        for commit in self.history(database, branch):
            tree = self.store.get_tree(commit.tree)
            for entry in tree.entries:
                self.store.get_blob(entry.sha_sum)
            checked += 1
        logger.info("Verified %d commits of %s", checked, database)
        return checked
