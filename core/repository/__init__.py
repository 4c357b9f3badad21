"""SQLite-backed relational store for prompts and prompt responses.

Updates:
  v0.2.0 - 2026-10-09 - Serialise writers with a store-wide lock.
  v0.1.0 - 2026-10-05 - Compose schema, prompt, and response mixins.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

from .base import (
    StoreError,
    StoreNotFoundError,
    connect as _connect,
    ensure_directory as _ensure_directory,
)
from .prompts import PromptTableMixin
from .responses import ResponseTableMixin
from .schema import SchemaMixin


class RelationalStore(
    SchemaMixin,
    PromptTableMixin,
    ResponseTableMixin,
):
    """Compose table mixins for SQLite-backed storage."""

    def __init__(self, db_path: str | Path) -> None:
        """Initialise storage and ensure the schema exists."""
        self._db_path = Path(db_path)
        self._lock = threading.RLock()
        try:
            _ensure_directory(self._db_path)
            with _connect(self._db_path) as conn:
                self._ensure_schema(conn)
        except (OSError, sqlite3.Error) as exc:
            raise StoreError("Failed to initialise SQLite schema") from exc

    @property
    def db_path(self) -> Path:
        """Return the path of the backing SQLite database."""
        return self._db_path


__all__ = [
    "RelationalStore",
    "StoreError",
    "StoreNotFoundError",
    "_connect",
]
