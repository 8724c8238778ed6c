"""Tests for ObjectStore — content addressing, dedup, integrity, NotFound."""

from __future__ import annotations

import hashlib

import pytest

from dbvc.core.errors import IntegrityError, NotFoundError
from dbvc.core.hasher import sha256_hex
from dbvc.core.object_store import ObjectStore
from dbvc.models.objects import make_entry, make_tree

UNKNOWN = "0" * 64


def _stored_files(store: ObjectStore) -> list[str]:
    return sorted(p.name for p in store.files_dir.iterdir())


class TestPutBlob:
    def test_returns_sha256(self, object_store: ObjectStore):
        assert object_store.put_blob(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_identical_bytes_stored_once(self, object_store: ObjectStore):
        h1 = object_store.put_blob(b"abc")
        h2 = object_store.put_blob(b"abc")
        assert h1 == h2
        assert _stored_files(object_store) == [h1]

    def test_distinct_bytes_stored_separately(self, object_store: ObjectStore):
        h1 = object_store.put_blob(b"abc")
        h2 = object_store.put_blob(b"abcd")
        assert h1 != h2
        assert _stored_files(object_store) == sorted([h1, h2])

    def test_directory_created_lazily(self, object_store: ObjectStore):
        assert not object_store.files_dir.exists()
        object_store.put_blob(b"x")
        assert object_store.files_dir.is_dir()

    def test_ensure_initialized_idempotent(self, object_store: ObjectStore):
        object_store.ensure_initialized()
        object_store.ensure_initialized()
        assert object_store.files_dir.is_dir()

    def test_empty_blob(self, object_store: ObjectStore):
        digest = object_store.put_blob(b"")
        assert object_store.get_blob(digest) == b""

    def test_no_temp_files_left(self, object_store: ObjectStore):
        object_store.put_blob(b"payload")
        assert not [p for p in object_store.files_dir.iterdir() if p.name.startswith(".")]

    def test_same_length_different_content_detected(self, object_store: ObjectStore):
        digest = object_store.put_blob(b"abc")
        # simulate a different object of the same size filed under this hash
        (object_store.files_dir / digest).write_bytes(b"xyz")
        with pytest.raises(IntegrityError):
            object_store.put_blob(b"abc")


class TestGet:
    def test_round_trip_blob(self, object_store: ObjectStore):
        digest = object_store.put_blob(b"\x00\x01binary")
        assert object_store.get_blob(digest) == b"\x00\x01binary"

    @pytest.mark.parametrize("getter", ["get_blob", "get_tree", "get_commit"])
    def test_unknown_hash_not_found(self, object_store: ObjectStore, getter: str):
        with pytest.raises(NotFoundError):
            getattr(object_store, getter)(UNKNOWN)

    @pytest.mark.parametrize("bad", ["", "../etc/passwd", "ABC", "g" * 64])
    def test_malformed_hash_not_found(self, object_store: ObjectStore, bad: str):
        with pytest.raises(NotFoundError):
            object_store.get_blob(bad)

    def test_blob_is_not_a_commit(self, object_store: ObjectStore):
        digest = object_store.put_blob(b"raw bytes")
        with pytest.raises(NotFoundError, match="not a commit"):
            object_store.get_commit(digest)

    def test_tree_is_not_a_commit(self, make_stored_tree, object_store: ObjectStore):
        tree = make_stored_tree()
        with pytest.raises(NotFoundError):
            object_store.get_commit(tree.id)


class TestPutTree:
    def test_round_trip(self, make_stored_tree, object_store: ObjectStore):
        tree = make_stored_tree(b"db bytes", "sales.sqlite")
        loaded = object_store.get_tree(tree.id)
        assert loaded.id == tree.id
        assert loaded.entries == tree.entries

    def test_idempotent(self, make_stored_tree, object_store: ObjectStore):
        tree = make_stored_tree()
        assert object_store.put_tree(tree) == tree.id

    def test_unknown_blob_rejected(self, object_store: ObjectStore):
        tree = make_tree([make_entry(UNKNOWN, "missing.sqlite")])
        with pytest.raises(NotFoundError):
            object_store.put_tree(tree)
        assert not object_store.exists(tree.id)

    def test_record_is_versioned_json(self, make_stored_tree, object_store: ObjectStore):
        tree = make_stored_tree()
        text = (object_store.files_dir / tree.id).read_text()
        assert '"schema_version": 1' in text
        assert '"kind": "tree"' in text


class TestPutCommit:
    def test_round_trip(self, make_stored_tree, make_test_commit, object_store: ObjectStore):
        tree = make_stored_tree()
        commit = make_test_commit(tree.id)
        assert object_store.put_commit(commit) == commit.id
        loaded = object_store.get_commit(commit.id)
        assert loaded.id == commit.id
        assert loaded.timestamp == commit.timestamp

    def test_idempotent(self, make_stored_tree, make_test_commit, object_store: ObjectStore):
        commit = make_test_commit(make_stored_tree().id)
        object_store.put_commit(commit)
        object_store.put_commit(commit)
        assert object_store.verify(commit.id)

    def test_missing_tree_rejected(self, make_test_commit, object_store: ObjectStore):
        commit = make_test_commit(UNKNOWN)
        with pytest.raises(NotFoundError):
            object_store.put_commit(commit)
        assert not object_store.exists(commit.id)

    def test_missing_parent_rejected(
        self, make_stored_tree, make_test_commit, object_store: ObjectStore
    ):
        commit = make_test_commit(make_stored_tree().id, parent=UNKNOWN)
        with pytest.raises(NotFoundError):
            object_store.put_commit(commit)

    def test_tree_reference_must_be_a_tree(self, make_test_commit, object_store: ObjectStore):
        blob = object_store.put_blob(b"not a tree")
        with pytest.raises(NotFoundError):
            object_store.put_commit(make_test_commit(blob))


class TestVerify:
    def test_verify_each_kind(self, commit_chain, object_store: ObjectStore):
        commit = commit_chain[0]
        tree = object_store.get_tree(commit.tree)
        assert object_store.verify(commit.id)
        assert object_store.verify(tree.id)
        assert object_store.verify(tree.entries[0].sha_sum)

    def test_verify_unknown(self, object_store: ObjectStore):
        assert object_store.verify(UNKNOWN) is False

    def test_exists(self, object_store: ObjectStore):
        digest = object_store.put_blob(b"here")
        assert object_store.exists(digest)
        assert not object_store.exists(sha256_hex(b"not here"))
        assert not object_store.exists("nonsense")
