"""Schema bootstrap helpers for the relational store.

Updates:
  v0.1.0 - 2026-10-05 - Create prompts and prompt_responses tables.
"""

from __future__ import annotations

import sqlite3


class SchemaMixin:
    """Tasks that create relational storage."""

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create required tables if they do not exist."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompts (
                uuid TEXT PRIMARY KEY,
                promptText TEXT,
                responseType TEXT,
                notificationConfig_days TEXT,
                notificationConfig_startTime TEXT,
                notificationConfig_endTime TEXT,
                notificationConfig_countPerDay INTEGER
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_prompts_text ON prompts(promptText);")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompt_responses (
                promptUuid TEXT,
                value TEXT,
                triggerTimestamp INTEGER,
                responseTimestamp INTEGER
            );
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_prompt_responses_prompt "
            "ON prompt_responses(promptUuid);"
        )


__all__ = ["SchemaMixin"]
