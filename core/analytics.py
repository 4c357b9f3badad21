"""Fire-and-forget usage analytics for prompt and migration events.

Events are appended as JSON lines; prompt identifiers are masked before they
leave the repository so the log never carries raw uuids.

Updates:
  v0.1.1 - 2026-10-14 - Add read helper for CLI summaries and tests.
  v0.1.0 - 2026-10-07 - Introduce JSONL usage tracker and prompt id masking.
"""
from __future__ import annotations

import hashlib
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("prompt_journal.analytics")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def mask_prompt_id(prompt_uuid: str) -> str:
    """Return a short, stable, non-reversible digest of a prompt uuid."""
    return hashlib.blake2s(prompt_uuid.encode("utf-8"), digest_size=8).hexdigest()


class UsageTracker:
    """Append analytics events to a JSONL file."""
    def __init__(self, path: Path | str | None = None, *, enabled: bool = True) -> None:
        self._enabled = enabled
        default_path = Path("data") / "logs" / "usage.jsonl"
        self._path = Path(path) if path is not None else default_path

    @property
    def log_path(self) -> Path:
        """Return the resolved path for the usage log."""
        return self._path

    @property
    def enabled(self) -> bool:
        return self._enabled

    def track_event(self, name: str, properties: Mapping[str, Any] | None = None) -> None:
        """Record *name* with *properties*; write failures are logged and dropped."""
        record: dict[str, Any] = {"timestamp": _now_iso(), "event": name}
        record.update(properties or {})
        self._append(record)

    def read_events(self) -> list[dict[str, Any]]:
        """Return recorded events, skipping lines that are not valid JSON."""
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []
        events: list[dict[str, Any]] = []
        for line in lines:
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("Skipping malformed usage log line", extra={"path": str(self._path)})
                continue
            if isinstance(payload, dict):
                events.append(payload)
        return events

    def _append(self, record: dict[str, Any]) -> None:
        if not self._enabled:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record, ensure_ascii=False))
                handle.write("\n")
        except (OSError, TypeError, ValueError):
            logger.debug(
                "Unable to write usage analytics",
                extra={"event": record.get("event")},
                exc_info=True,
            )


__all__ = ["UsageTracker", "mask_prompt_id"]
