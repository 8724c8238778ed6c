"""Error taxonomy for the object store and its bookkeeping.

Every failure raised by ``dbvc.core`` derives from :class:`DbvcError` so
callers (the CLI, a transport layer) can catch the whole family at once.
"""

from __future__ import annotations


class DbvcError(RuntimeError):
    """Base class for all dbvc errors."""


class ValidationError(DbvcError, ValueError):
    """A required field on a Commit, Tree, Branch or path is missing or invalid.

    Always raised before any I/O, so no partial state reaches disk.
    """


class NotFoundError(DbvcError, KeyError):
    """Unknown object hash, branch, or database path."""

    def __str__(self) -> str:
        # KeyError.__str__ quotes its argument
        return str(self.args[0]) if self.args else ""


class StorageError(DbvcError, OSError):
    """Filesystem failure: permissions, disk full, directory creation."""


class IntegrityError(DbvcError):
    """Stored content does not match the hash it is filed under."""


class BrokenHistoryError(DbvcError):
    """Parent-chain traversal reached a commit that cannot be resolved."""

    def __init__(self, missing: str, child: str) -> None:
        super().__init__(
            f"History is broken: commit {child} references missing parent {missing}"
        )
        self.missing = missing
        self.child = child
