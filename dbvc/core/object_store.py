"""Content-addressed, immutable object store for blobs, trees and commits.

Storage layout: {root}/files/{sha256}
No delete method — objects are immutable once stored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError as PydanticValidationError

from dbvc.core.errors import IntegrityError, NotFoundError
from dbvc.core.fs import atomic_write_bytes, ensure_dir, read_bytes
from dbvc.core.hasher import sha256_hex
from dbvc.models.objects import HEX_SHA256, Commit, Tree
from dbvc.models.records import StoredCommit, StoredTree

logger = logging.getLogger(__name__)


class ObjectStore:
    """SHA-256 keyed, write-once object store.

    Blobs are stored as raw bytes under the hash of those bytes. Trees and
    commits are stored as versioned JSON records under their computed ID.
    Storing identical content twice is a no-op; storing different content
    under an existing hash is an integrity violation.

    Parameters
    ----------
    root:
        Storage root. Objects live in ``root/files``; the directory is
        created on first write.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.files_dir = self.root / "files"

    def ensure_initialized(self) -> None:
        """Create the backing directory. Idempotent."""
        ensure_dir(self.files_dir)

    def object_path(self, digest: str) -> Path:
        if not HEX_SHA256.match(digest):
            # keeps arbitrary strings from escaping files/
            raise NotFoundError(f"Object not found: {digest!r}")
        return self.files_dir / digest

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put_blob(self, data: bytes) -> str:
        """Store raw bytes and return their SHA-256 hex digest."""
        digest = sha256_hex(data)
        path = self.object_path(digest)
        if path.exists():
            if read_bytes(path) != data:
                logger.warning("Blob %s on disk differs from new content", digest)
                raise IntegrityError(
                    f"Existing object at {digest} does not match the content being stored"
                )
            logger.debug("Blob %s already stored", digest)
            return digest

        self.ensure_initialized()
        atomic_write_bytes(path, data)
        logger.debug("Stored blob %s (%d bytes)", digest, len(data))
        return digest

    def put_tree(self, tree: Tree) -> str:
        """Persist a tree. Every entry must reference a stored object."""
        for entry in tree.entries:
            if not self.exists(entry.sha_sum):
                raise NotFoundError(
                    f"Tree entry {entry.name!r} references unknown object {entry.sha_sum}"
                )
        record = StoredTree(entries=tree.entries)
        self._put_record(tree.id, record)
        return tree.id

    def put_commit(self, commit: Commit) -> str:
        """Persist a commit. Its tree and parent (if any) must already exist."""
        self.get_tree(commit.tree)
        if commit.parent:
            self.get_commit(commit.parent)
        record = StoredCommit.model_validate(commit.model_dump(exclude={"id"}))
        self._put_record(commit.id, record)
        return commit.id

    def _put_record(self, digest: str, record: BaseModel) -> None:
        path = self.object_path(digest)
        if path.exists():
            try:
                existing = self._load_record(digest, type(record))
            except NotFoundError:
                existing = None
            if existing is None or existing.model_dump() != record.model_dump():
                logger.warning("Record %s on disk differs from new content", digest)
                raise IntegrityError(
                    f"Existing object at {digest} does not match the record being stored"
                )
            logger.debug("%s %s already stored", record.kind, digest)
            return

        self.ensure_initialized()
        atomic_write_bytes(path, record.model_dump_json(indent=1).encode("utf-8"))
        logger.debug("Stored %s %s", record.kind, digest)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_blob(self, digest: str) -> bytes:
        """Return blob bytes, verifying they still hash to ``digest``."""
        data = self._read(digest)
        if sha256_hex(data) != digest:
            logger.warning("Blob %s failed integrity check", digest)
            raise IntegrityError(f"Stored blob {digest} failed integrity check")
        return data

    def get_tree(self, digest: str) -> Tree:
        return self._load_record(digest, StoredTree).to_tree()

    def get_commit(self, digest: str) -> Commit:
        return self._load_record(digest, StoredCommit).to_commit()

    def _read(self, digest: str) -> bytes:
        path = self.object_path(digest)
        try:
            return read_bytes(path)
        except FileNotFoundError:
            raise NotFoundError(f"Object not found: {digest}") from None

    def _load_record(self, digest: str, model: type[StoredTree] | type[StoredCommit]):
        data = self._read(digest)
        kind = model.model_fields["kind"].default
        try:
            record = model.model_validate_json(data)
        except (PydanticValidationError, UnicodeDecodeError):
            raise NotFoundError(f"Object {digest} is not a {kind}") from None
        if record.id != digest:
            logger.warning("%s %s failed integrity check", kind, digest)
            raise IntegrityError(
                f"Stored {kind} {digest} hashes to {record.id}"
            )
        return record

    # ------------------------------------------------------------------
    # Check and verify
    # ------------------------------------------------------------------

    def exists(self, digest: str) -> bool:
        """Check if an object exists in the store."""
        if not HEX_SHA256.match(digest):
            return False
        return self.object_path(digest).exists()

    def verify(self, digest: str) -> bool:
        """Re-hash a stored object of any kind against its address.

        Returns False for unknown hashes and for content that hashes to
        something else.
        """
        if not self.exists(digest):
            return False
        for model in (StoredCommit, StoredTree):
            try:
                self._load_record(digest, model)
                return True
            except NotFoundError:
                continue
            except IntegrityError:
                return False
        return sha256_hex(self._read(digest)) == digest
