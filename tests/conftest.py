"""Shared test fixtures for dbvc."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from dbvc.core.branch_table import BranchTable
from dbvc.core.commit_graph import CommitGraph
from dbvc.core.index import CommitIndex
from dbvc.core.object_store import ObjectStore
from dbvc.core.repository import Repository
from dbvc.models.objects import Commit, Tree, make_commit, make_entry, make_tree


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary storage root."""
    return tmp_path / "storage"


@pytest.fixture
def object_store(tmp_dir: Path) -> ObjectStore:
    """Provide a fresh ObjectStore in a temp directory."""
    return ObjectStore(tmp_dir)


@pytest.fixture
def commit_index(tmp_dir: Path) -> CommitIndex:
    return CommitIndex(tmp_dir)


@pytest.fixture
def branch_table(tmp_dir: Path, object_store: ObjectStore) -> BranchTable:
    return BranchTable(tmp_dir, object_store)


@pytest.fixture
def graph(object_store: ObjectStore) -> CommitGraph:
    return CommitGraph(object_store)


@pytest.fixture
def repo(tmp_dir: Path) -> Repository:
    """Provide a Repository over a fresh storage root."""
    return Repository(tmp_dir)


@pytest.fixture
def fixed_time() -> datetime:
    """The Unix ``date`` reference time: Mon Jan  2 15:04:05 UTC 2006."""
    return datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Object factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_stored_tree(object_store: ObjectStore) -> Callable[..., Tree]:
    """Factory fixture: store a blob and a single-entry tree pointing at it."""

    def _factory(data: bytes = b"SQLite format 3\x00", name: str = "test.sqlite") -> Tree:
        digest = object_store.put_blob(data)
        tree = make_tree([make_entry(digest, name)])
        object_store.put_tree(tree)
        return tree

    return _factory


@pytest.fixture
def make_test_commit(fixed_time: datetime) -> Callable[..., Commit]:
    """Factory fixture: build (but not store) a Commit with test defaults."""

    def _factory(tree: str, **overrides: Any) -> Commit:
        defaults: dict[str, Any] = {
            "tree": tree,
            "author_name": "Alice",
            "author_email": "alice@example.com",
            "timestamp": fixed_time,
            "message": "init",
        }
        defaults.update(overrides)
        return make_commit(**defaults)

    return _factory


@pytest.fixture
def commit_chain(
    object_store: ObjectStore,
    make_stored_tree: Callable[..., Tree],
    make_test_commit: Callable[..., Commit],
) -> list[Commit]:
    """Three stored commits, oldest first, each the parent of the next."""
    commits: list[Commit] = []
    parent = ""
    for i in range(3):
        tree = make_stored_tree(f"db version {i}".encode())
        commit = make_test_commit(tree.id, parent=parent, message=f"change {i}")
        object_store.put_commit(commit)
        commits.append(commit)
        parent = commit.id
    return commits
