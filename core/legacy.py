"""Read-only adapter over the legacy flat key-value store.

The legacy store is consumed once, through ``get_serialized_value(key)``, and
its JSON blobs are parsed strictly into :class:`models.legacy_model.LegacySnapshot`.
A prompts blob that is not valid JSON, or not a list, raises
:class:`core.exceptions.PromptCorruptionError`. An unreadable events blob is
recorded on the snapshot instead, and individual events that fail validation
are skipped and counted, so one bad entry cannot sink the other prompts.

Updates:
  v0.1.2 - 2026-10-18 - Report undecodable legacy files as corruption.
  v0.1.1 - 2026-10-10 - Count skipped legacy events instead of failing the snapshot.
  v0.1.0 - 2026-10-08 - Introduce legacy store protocol, file/mapping stores, and strict parser.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, cast

from pydantic import ValidationError

from models.legacy_model import LegacyEvent, LegacySnapshot

from .exceptions import PromptCorruptionError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("prompt_journal.legacy")

LEGACY_PROMPTS_KEY = "prompts"
LEGACY_EVENTS_KEY = "events"


class LegacyStore(Protocol):
    """Key-value accessor over the prior storage format."""

    def get_serialized_value(self, key: str) -> str | None:
        """Return the serialised blob stored under *key*, or ``None``."""
        ...


class MappingLegacyStore:
    """Legacy store backed by an in-memory mapping."""

    def __init__(self, values: Mapping[str, str | None] | None = None) -> None:
        self._values = dict(values or {})

    def get_serialized_value(self, key: str) -> str | None:
        return self._values.get(key)


class JsonFileLegacyStore:
    """Legacy store exported as a JSON object of key → serialised string.

    A missing file behaves as an empty store.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_serialized_value(self, key: str) -> str | None:
        try:
            contents = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PromptCorruptionError(f"Unable to read legacy store {self._path}") from exc
        except UnicodeDecodeError as exc:
            raise PromptCorruptionError(f"Legacy store {self._path} is not valid UTF-8") from exc
        try:
            data: object = json.loads(contents)
        except json.JSONDecodeError as exc:
            raise PromptCorruptionError(f"Legacy store {self._path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise PromptCorruptionError(f"Legacy store {self._path} must contain a JSON object")
        value = cast("dict[str, Any]", data).get(key)
        if value is None:
            return None
        if isinstance(value, str):
            return value
        # Exports sometimes inline the blob instead of storing it as a string.
        return json.dumps(value, ensure_ascii=False)


def _load_list(store: LegacyStore, key: str) -> list[Any]:
    """Return the JSON list stored under *key*; absent or blank means empty."""
    raw = store.get_serialized_value(key)
    if raw is None or not raw.strip():
        return []
    try:
        parsed: object = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PromptCorruptionError(f"Legacy value {key!r} is not valid JSON") from exc
    if parsed is None:
        return []
    if not isinstance(parsed, list):
        raise PromptCorruptionError(f"Legacy value {key!r} must be a JSON list")
    return cast("list[Any]", parsed)


def load_legacy_prompts(store: LegacyStore) -> list[Any]:
    """Return raw legacy prompt entries; each entry is validated per migration unit."""
    return _load_list(store, LEGACY_PROMPTS_KEY)


def parse_legacy_events(raw_events: list[Any]) -> tuple[list[LegacyEvent], int]:
    """Validate legacy events, returning the valid ones and the skipped count."""
    events: list[LegacyEvent] = []
    skipped = 0
    for index, entry in enumerate(raw_events):
        try:
            events.append(LegacyEvent.model_validate(entry))
        except ValidationError as exc:
            skipped += 1
            logger.warning(
                "Skipping malformed legacy event",
                extra={"index": index, "errors": exc.error_count()},
            )
    return events, skipped


def load_legacy_snapshot(store: LegacyStore) -> LegacySnapshot:
    """Read both legacy blobs and return a validated snapshot."""
    prompts = load_legacy_prompts(store)
    if not prompts:
        return LegacySnapshot()
    try:
        raw_events = _load_list(store, LEGACY_EVENTS_KEY)
    except PromptCorruptionError as exc:
        # Prompts can still be migrated; each replay reports the broken blob.
        logger.error("Legacy events blob is unreadable", extra={"reason": str(exc)})
        return LegacySnapshot(prompts=prompts, events_error=str(exc))
    events, skipped = parse_legacy_events(raw_events)
    return LegacySnapshot(prompts=prompts, events=events, skipped_events=skipped)


__all__ = [
    "LEGACY_EVENTS_KEY",
    "LEGACY_PROMPTS_KEY",
    "JsonFileLegacyStore",
    "LegacyStore",
    "MappingLegacyStore",
    "load_legacy_prompts",
    "load_legacy_snapshot",
    "parse_legacy_events",
]
