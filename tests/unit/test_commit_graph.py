"""Tests for CommitGraph — newest-first traversal and broken history."""

from __future__ import annotations

import pytest

from dbvc.core.commit_graph import CommitGraph
from dbvc.core.errors import BrokenHistoryError, NotFoundError


class TestCommitGraph:
    def test_history_newest_first(self, graph: CommitGraph, commit_chain):
        history = graph.history(commit_chain[-1].id)
        assert [c.id for c in history] == [c.id for c in reversed(commit_chain)]

    def test_root_has_single_entry_history(self, graph: CommitGraph, commit_chain):
        assert [c.id for c in graph.history(commit_chain[0].id)] == [commit_chain[0].id]

    def test_root(self, graph: CommitGraph, commit_chain):
        assert graph.root(commit_chain[-1].id).id == commit_chain[0].id

    def test_unknown_start_not_found(self, graph: CommitGraph):
        with pytest.raises(NotFoundError):
            graph.history("0" * 64)

    def test_missing_parent_is_broken_history(self, graph: CommitGraph, object_store, commit_chain):
        # drop the middle commit from disk
        (object_store.files_dir / commit_chain[1].id).unlink()
        with pytest.raises(BrokenHistoryError) as excinfo:
            graph.history(commit_chain[2].id)
        assert excinfo.value.missing == commit_chain[1].id
        assert excinfo.value.child == commit_chain[2].id

    def test_walk_yields_before_failing(self, graph: CommitGraph, object_store, commit_chain):
        (object_store.files_dir / commit_chain[0].id).unlink()
        seen = []
        with pytest.raises(BrokenHistoryError):
            for commit in graph.walk(commit_chain[2].id):
                seen.append(commit.id)
        assert seen == [commit_chain[2].id, commit_chain[1].id]
