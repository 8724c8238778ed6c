"""Filesystem primitives: idempotent directories, atomic writes, advisory locks.

All ``OSError``s are surfaced as :class:`StorageError` with the original
exception chained. Nothing here retries.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dbvc.core.errors import StorageError

logger = logging.getLogger(__name__)

_held = threading.local()


def ensure_dir(path: Path) -> Path:
    """Create ``path`` and its parents if missing. Safe to call concurrently."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Cannot create storage directory {path}: {exc}") from exc
    return path


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` so readers see either nothing or all of it.

    The bytes go to a temporary file in the destination directory, are
    flushed to disk, then renamed over ``path``.
    """
    ensure_dir(path.parent)
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as exc:
        raise StorageError(f"Cannot create temporary file for {path}: {exc}") from exc

    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise StorageError(f"Cannot write {path}: {exc}") from exc


def read_bytes(path: Path) -> bytes:
    """Read a file, mapping I/O failures (other than absence) to StorageError.

    ``FileNotFoundError`` is re-raised untouched so callers can translate it
    into their own NotFound condition.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise StorageError(f"Cannot read {path}: {exc}") from exc


def _held_locks() -> set[Path]:
    if not hasattr(_held, "paths"):
        _held.paths = set()
    return _held.paths


@contextmanager
def file_lock(lock_path: Path) -> Iterator[None]:
    """Cross-process exclusive advisory lock on ``lock_path``.

    POSIX: ``fcntl.flock``. Windows: ``msvcrt.locking`` on the first byte.

    Re-entrant within a thread: a nested ``file_lock`` on a path this thread
    already holds is a no-op. Lock lifetime is tied to the open file, so a
    crashed process releases it.
    """
    lock_path = Path(lock_path).resolve()
    held = _held_locks()
    if lock_path in held:
        yield
        return

    ensure_dir(lock_path.parent)
    try:
        f = lock_path.open("a+b")
    except OSError as exc:
        raise StorageError(f"Cannot open lock file {lock_path}: {exc}") from exc

    try:
        if os.name == "posix":
            import fcntl

            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        else:
            import msvcrt

            # range locks need at least one byte to exist
            f.seek(0, os.SEEK_END)
            if f.tell() == 0:
                f.write(b"\0")
                f.flush()
            f.seek(0)
            msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)
        logger.debug("Acquired lock %s", lock_path)

        held.add(lock_path)
        try:
            yield
        finally:
            held.discard(lock_path)
            if os.name == "posix":
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            else:
                f.seek(0)
                msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
            logger.debug("Released lock %s", lock_path)
    finally:
        f.close()
