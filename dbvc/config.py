"""Store configuration — env-driven.

Reads from a .env file and DBVC_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export DBVC_STORAGE_ROOT=/data/dbvc
        export DBVC_LOG_LEVEL=DEBUG
        export DBVC_AUTHOR_NAME="Alice"
        export DBVC_AUTHOR_EMAIL=alice@example.com
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DBVC_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage_root: Path = Path(".dbvc")
    log_level: str = "INFO"
    default_branch: str = "master"

    # Commit authorship defaults; command line flags override them
    author_name: str = ""
    author_email: str = ""


# Module-level singleton — import as `from dbvc.config import settings`
settings = StoreSettings()
