"""Content-addressed object models: trees, tree entries and commits.

IDs are never assigned. They are computed fields derived from the other
fields through :mod:`dbvc.core.hasher`, so two models with identical fields
always carry the identical ID.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from dbvc.core.errors import ValidationError
from dbvc.core.hasher import hash_commit, hash_tree, to_utc

HEX_SHA256 = re.compile(r"^[0-9a-f]{64}$")


def _require_sha(value: str, what: str) -> str:
    if not HEX_SHA256.match(value):
        raise ValueError(f"{what} must be a 64 character lowercase hex SHA-256")
    return value


class EntryType(str, Enum):
    """Kind of object a tree entry points at. The value is what gets hashed."""

    DATABASE = "db"
    TREE = "tree"
    LICENCE = "licence"


class TreeEntry(BaseModel):
    """A named reference to a blob inside a tree."""

    model_config = ConfigDict(frozen=True)

    entry_type: EntryType = EntryType.DATABASE
    sha_sum: str
    name: str = Field(min_length=1)

    @field_validator("sha_sum")
    @classmethod
    def _check_sha(cls, v: str) -> str:
        return _require_sha(v, "sha_sum")

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        # NUL and LF are the separators of the tree serialisation
        if "\x00" in v or "\n" in v:
            raise ValueError("name must not contain NUL or newline characters")
        return v


class Tree(BaseModel):
    """An ordered list of entries describing a database at one point in time.

    Entry order feeds the hash: the same entries in another order form a
    different tree.
    """

    model_config = ConfigDict(frozen=True)

    entries: list[TreeEntry] = Field(min_length=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return hash_tree(self.entries)


class Commit(BaseModel):
    """A snapshot record linking a tree, an optional parent and authorship."""

    model_config = ConfigDict(frozen=True)

    tree: str
    parent: str = ""  # empty = root commit
    author_name: str = Field(min_length=1)
    author_email: str = Field(min_length=1)
    committer_name: str | None = None
    committer_email: str | None = None
    timestamp: datetime
    message: str

    @field_validator("tree")
    @classmethod
    def _check_tree(cls, v: str) -> str:
        return _require_sha(v, "tree")

    @field_validator("parent")
    @classmethod
    def _check_parent(cls, v: str) -> str:
        return _require_sha(v, "parent") if v else v

    @field_validator("author_name", "author_email", "committer_name", "committer_email")
    @classmethod
    def _check_identity(cls, v: str | None) -> str | None:
        if v is not None and ("\n" in v or "<" in v or ">" in v):
            raise ValueError("names and emails must not contain '<', '>' or newlines")
        return v

    @field_validator("timestamp")
    @classmethod
    def _normalise_timestamp(cls, v: datetime) -> datetime:
        return to_utc(v)

    @model_validator(mode="after")
    def _check_committer(self) -> Commit:
        if self.committer_name and not self.committer_email:
            raise ValueError("committer_name given without committer_email")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return hash_commit(self)

    @property
    def is_root(self) -> bool:
        return not self.parent

    @property
    def effective_committer_name(self) -> str:
        return self.committer_name or self.author_name

    @property
    def effective_committer_email(self) -> str:
        return self.committer_email or self.author_email


def build_model(model: type[BaseModel], data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid {model.__name__}: {exc.errors(include_url=False)}"
        ) from exc


def make_commit(**fields: Any) -> Commit:
    """Build a :class:`Commit`, raising :class:`ValidationError` on bad input."""
    return build_model(Commit, fields)


def make_tree(entries: list[TreeEntry] | list[dict[str, Any]]) -> Tree:
    """Build a :class:`Tree`, raising :class:`ValidationError` on bad input."""
    return build_model(Tree, {"entries": entries})


def make_entry(sha_sum: str, name: str, entry_type: EntryType = EntryType.DATABASE) -> TreeEntry:
    """Build a :class:`TreeEntry`, raising :class:`ValidationError` on bad input."""
    return build_model(TreeEntry, {"sha_sum": sha_sum, "name": name, "entry_type": entry_type})
