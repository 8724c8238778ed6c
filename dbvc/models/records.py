"""Versioned on-disk record formats.

Everything written under the storage root (apart from raw blobs) is one of
these documents, serialised as indented JSON. ``schema_version`` lets the
formats evolve without breaking objects that are already stored.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from dbvc.models.branches import Branch
from dbvc.models.objects import Commit, Tree

SCHEMA_VERSION = 1


class StoredTree(Tree):
    """A tree as persisted in ``files/<id>``."""

    schema_version: int = SCHEMA_VERSION
    kind: Literal["tree"] = "tree"

    def to_tree(self) -> Tree:
        return Tree(entries=self.entries)


class StoredCommit(Commit):
    """A commit as persisted in ``files/<id>``."""

    schema_version: int = SCHEMA_VERSION
    kind: Literal["commit"] = "commit"

    def to_commit(self) -> Commit:
        return Commit.model_validate(
            self.model_dump(exclude={"schema_version", "kind", "id"})
        )


class IndexDocument(BaseModel):
    """``meta/<database>/index`` — ordered commit list."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = SCHEMA_VERSION
    commits: list[Commit] = []


class BranchDocument(BaseModel):
    """``meta/<database>/branches`` — the full branch table."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = SCHEMA_VERSION
    branches: list[Branch] = []
