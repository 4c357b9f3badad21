"""Prompt table persistence helpers.

Updates:
  v0.1.3 - 2026-10-18 - Wrap integer overflow on bound parameters as StoreError.
  v0.1.2 - 2026-10-12 - Add row restore helper for scheduler rollbacks.
  v0.1.1 - 2026-10-09 - Run upsert existence check and write inside one immediate transaction.
  v0.1.0 - 2026-10-05 - Prompt CRUD and text lookup helpers.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from models.prompt_model import Prompt

from .base import (
    StoreError,
    StoreNotFoundError,
    connect as _connect,
    immediate_transaction as _immediate_transaction,
    logger,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


class PromptTableMixin:
    """CRUD helpers for the ``prompts`` table."""

    _db_path: Path
    _lock: threading.RLock

    _COLUMNS: ClassVar[Sequence[str]] = (
        "uuid",
        "promptText",
        "responseType",
        "notificationConfig_days",
        "notificationConfig_startTime",
        "notificationConfig_endTime",
        "notificationConfig_countPerDay",
    )

    def list_prompts(self) -> list[Prompt]:
        """Return every stored prompt in insertion order."""
        try:
            with _connect(self._db_path) as conn:
                rows = conn.execute("SELECT * FROM prompts ORDER BY rowid;").fetchall()
        except sqlite3.Error as exc:
            raise StoreError("Failed to fetch prompt list") from exc
        return [self._row_to_prompt(row) for row in rows]

    def get_prompt_row(self, prompt_uuid: str) -> Prompt | None:
        """Return the prompt stored under *prompt_uuid*, or ``None``."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute(
                    "SELECT * FROM prompts WHERE uuid = ?;",
                    (prompt_uuid,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load prompt {prompt_uuid}") from exc
        if row is None:
            return None
        return self._row_to_prompt(row)

    def find_prompt_uuids_by_text(self, prompt_text: str) -> list[str]:
        """Return uuids of prompts whose text matches exactly, oldest first."""
        try:
            with _connect(self._db_path) as conn:
                rows = conn.execute(
                    "SELECT uuid FROM prompts WHERE promptText = ? ORDER BY rowid;",
                    (prompt_text,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError("Failed to look up prompts by text") from exc
        return [str(row["uuid"]) for row in rows]

    def get_prompt_record(self, prompt_uuid: str) -> dict[str, Any] | None:
        """Return the raw column mapping for *prompt_uuid* without hydrating it."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute(
                    "SELECT * FROM prompts WHERE uuid = ?;",
                    (prompt_uuid,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load prompt {prompt_uuid}") from exc
        if row is None:
            return None
        return {column: row[column] for column in self._COLUMNS}

    def prompt_exists(self, prompt_uuid: str) -> bool:
        """Return True when a prompt row exists for *prompt_uuid*."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute(
                    "SELECT 1 FROM prompts WHERE uuid = ?;",
                    (prompt_uuid,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to check prompt {prompt_uuid}") from exc
        return row is not None

    def upsert_prompt(self, prompt: Prompt) -> bool:
        """Insert or overwrite *prompt*; return True when a new row was created."""
        if not prompt.uuid:
            raise StoreError("Prompt uuid must be assigned before persistence")
        payload = prompt.to_record()
        assignments = ", ".join(
            f"{column} = :{column}" for column in self._COLUMNS if column != "uuid"
        )
        placeholders = ", ".join(f":{column}" for column in self._COLUMNS)
        insert = f"INSERT INTO prompts ({', '.join(self._COLUMNS)}) VALUES ({placeholders});"
        update = f"UPDATE prompts SET {assignments} WHERE uuid = :uuid;"
        try:
            with self._lock, _immediate_transaction(self._db_path) as conn:
                existing = conn.execute(
                    "SELECT 1 FROM prompts WHERE uuid = ?;",
                    (prompt.uuid,),
                ).fetchone()
                if existing is None:
                    conn.execute(insert, payload)
                    created = True
                else:
                    conn.execute(update, payload)
                    created = False
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(f"Failed to save prompt {prompt.uuid}") from exc
        logger.debug(
            "Prompt row written",
            extra={"prompt_uuid": prompt.uuid, "row_created": created},
        )
        return created

    def delete_prompt_row(self, prompt_uuid: str) -> None:
        """Delete a prompt row by uuid."""
        try:
            with self._lock, _connect(self._db_path) as conn:
                deleted = conn.execute(
                    "DELETE FROM prompts WHERE uuid = ?;",
                    (prompt_uuid,),
                ).rowcount
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to delete prompt {prompt_uuid}") from exc
        if deleted == 0:
            raise StoreNotFoundError(f"Prompt {prompt_uuid} not found")

    def restore_prompt_row(
        self,
        prompt_uuid: str,
        previous: Mapping[str, Any] | None,
    ) -> None:
        """Put the prompt row back to *previous*, deleting it when there was none."""
        try:
            with self._lock, _immediate_transaction(self._db_path) as conn:
                conn.execute("DELETE FROM prompts WHERE uuid = ?;", (prompt_uuid,))
                if previous is not None:
                    placeholders = ", ".join(f":{column}" for column in self._COLUMNS)
                    conn.execute(
                        f"INSERT INTO prompts ({', '.join(self._COLUMNS)}) "
                        f"VALUES ({placeholders});",
                        dict(previous),
                    )
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(f"Failed to restore prompt {prompt_uuid}") from exc

    def _row_to_prompt(self, row: sqlite3.Row) -> Prompt:
        """Hydrate Prompt from SQLite row; ``ValueError`` marks corrupt rows."""
        payload: dict[str, Any] = {column: row[column] for column in self._COLUMNS}
        return Prompt.from_record(payload)


__all__ = ["PromptTableMixin"]
