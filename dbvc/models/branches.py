"""Branch model — a mutable named pointer to a head commit."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dbvc.models.objects import HEX_SHA256, build_model


class Branch(BaseModel):
    """One row of a database's branch table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    commit: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        if any(c.isspace() for c in v) or "\x00" in v:
            raise ValueError("branch names must not contain whitespace")
        return v

    @field_validator("commit")
    @classmethod
    def _check_commit(cls, v: str) -> str:
        if not HEX_SHA256.match(v):
            raise ValueError("commit must be a 64 character lowercase hex SHA-256")
        return v


def make_branch(name: str, commit: str) -> Branch:
    """Build a :class:`Branch`, raising :class:`ValidationError` on bad input."""
    return build_model(Branch, {"name": name, "commit": commit})
