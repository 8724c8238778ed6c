"""dbvc: content-addressed version history for binary database files.

Each snapshot of a database is stored once as a blob, described by a tree,
and recorded in a commit whose ID is a SHA-256 over a fixed serialisation of
its fields, so independently computed IDs agree across systems.
"""

__version__ = "0.1.0"

from dbvc.core.repository import Repository
from dbvc.core.object_store import ObjectStore

__all__ = ["Repository", "ObjectStore", "__version__"]
