"""Prompt response persistence helpers.

Updates:
  v0.1.2 - 2026-10-18 - Wrap integer overflow on bound parameters as StoreError.
  v0.1.1 - 2026-10-14 - Add duplicate lookup for migration replay.
  v0.1.0 - 2026-10-05 - Append-only response inserts and per-prompt listing.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import ClassVar

from models.prompt_model import PromptResponse

from .base import StoreError, connect as _connect


class ResponseTableMixin:
    """Append-only helpers for the ``prompt_responses`` table."""

    _db_path: Path
    _lock: threading.RLock

    _RESPONSE_COLUMNS: ClassVar[tuple[str, ...]] = (
        "promptUuid",
        "value",
        "triggerTimestamp",
        "responseTimestamp",
    )

    def insert_response(self, response: PromptResponse) -> None:
        """Insert a new response row."""
        column_list = ", ".join(self._RESPONSE_COLUMNS)
        placeholders = ", ".join(f":{column}" for column in self._RESPONSE_COLUMNS)
        query = f"INSERT INTO prompt_responses ({column_list}) VALUES ({placeholders});"
        try:
            with self._lock, _connect(self._db_path) as conn:
                conn.execute(query, response.to_record())
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(
                f"Failed to insert response for prompt {response.prompt_uuid}"
            ) from exc

    def list_responses(self, prompt_uuid: str) -> list[PromptResponse]:
        """Return responses for *prompt_uuid* in insertion order."""
        try:
            with _connect(self._db_path) as conn:
                rows = conn.execute(
                    "SELECT * FROM prompt_responses WHERE promptUuid = ? ORDER BY rowid;",
                    (prompt_uuid,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load responses for prompt {prompt_uuid}") from exc
        return [PromptResponse.from_record(dict(row)) for row in rows]

    def response_exists(self, prompt_uuid: str, trigger_timestamp: int, value: str) -> bool:
        """Return True when an identical response has already been stored."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute(
                    "SELECT 1 FROM prompt_responses "
                    "WHERE promptUuid = ? AND triggerTimestamp = ? AND value = ? LIMIT 1;",
                    (prompt_uuid, trigger_timestamp, value),
                ).fetchone()
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(f"Failed to check responses for prompt {prompt_uuid}") from exc
        return row is not None

    def count_responses(self) -> int:
        """Return the total number of stored responses."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute("SELECT COUNT(*) AS total FROM prompt_responses;").fetchone()
        except sqlite3.Error as exc:
            raise StoreError("Failed to count responses") from exc
        return int(row["total"]) if row is not None else 0


__all__ = ["ResponseTableMixin"]
