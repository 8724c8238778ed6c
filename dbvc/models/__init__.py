"""dbvc data models — all Pydantic v2, all frozen (immutable)."""

from dbvc.models.branches import Branch
from dbvc.models.objects import (
    Commit,
    EntryType,
    Tree,
    TreeEntry,
    make_commit,
    make_entry,
    make_tree,
)
from dbvc.models.records import (
    SCHEMA_VERSION,
    BranchDocument,
    IndexDocument,
    StoredCommit,
    StoredTree,
)

__all__ = [
    # objects
    "EntryType",
    "TreeEntry",
    "Tree",
    "Commit",
    "make_commit",
    "make_tree",
    "make_entry",
    # branches
    "Branch",
    # records
    "SCHEMA_VERSION",
    "StoredTree",
    "StoredCommit",
    "IndexDocument",
    "BranchDocument",
]
