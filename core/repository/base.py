"""Shared relational store helpers and error hierarchy.

Updates:
  v0.1.1 - 2026-10-09 - Add immediate-transaction helper for check-then-write upserts.
  v0.1.0 - 2026-10-05 - Connection and directory helpers for the SQLite store.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger("prompt_journal.repository")


class StoreError(Exception):
    """Base exception for relational store failures."""


class StoreNotFoundError(StoreError):
    """Raised when a targeted row does not exist."""


def ensure_directory(path: Path) -> None:
    """Ensure the directory for the SQLite database exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def connect(db_path: Path) -> sqlite3.Connection:
    """Return a configured SQLite connection."""
    conn = sqlite3.connect(str(db_path), timeout=30.0)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    return conn


@contextmanager
def immediate_transaction(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a connection holding the write lock until commit or rollback.

    ``BEGIN IMMEDIATE`` makes a read followed by a write atomic against other
    writers, which plain implicit transactions do not guarantee.
    """
    conn = connect(db_path)
    conn.isolation_level = None
    try:
        conn.execute("BEGIN IMMEDIATE;")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK;")
            raise
        conn.execute("COMMIT;")
    finally:
        conn.close()


__all__ = [
    "StoreError",
    "StoreNotFoundError",
    "connect",
    "ensure_directory",
    "immediate_transaction",
    "logger",
]
