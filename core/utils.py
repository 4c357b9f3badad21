"""Timestamp and identifier helpers shared by the repository and migration.

Updates:
  v0.1.1 - 2026-10-18 - Reject timestamps beyond the SQLite INTEGER range.
  v0.1.0 - 2026-10-05 - Add millisecond normalisation and uuid generation helpers.
"""

from __future__ import annotations

import math
import uuid

from .exceptions import PromptValidationError

# Anything below this is a seconds-resolution epoch value (year 33658 in seconds).
_MILLISECOND_THRESHOLD = 10**12
_SQLITE_INTEGER_MAX = 2**63 - 1


def normalize_timestamp_ms(value: int | float | str) -> int:
    """Return *value* as integer milliseconds since the epoch.

    Seconds-resolution inputs (``1700000000``) are scaled to milliseconds
    (``1700000000000``); millisecond inputs pass through unchanged.
    """
    if isinstance(value, bool):
        raise PromptValidationError(f"Invalid timestamp: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            number = float(text)
        except ValueError as exc:
            raise PromptValidationError(f"Invalid timestamp: {value!r}") from exc
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        raise PromptValidationError(f"Invalid timestamp: {value!r}")
    if not math.isfinite(number) or number < 0:
        raise PromptValidationError(f"Invalid timestamp: {value!r}")
    if number < _MILLISECOND_THRESHOLD:
        number *= 1000
    millis = int(round(number))
    if millis > _SQLITE_INTEGER_MAX:
        raise PromptValidationError(f"Timestamp out of range: {value!r}")
    return millis


def new_prompt_uuid() -> str:
    """Return a fresh canonical uuid string for a prompt."""
    return str(uuid.uuid4())


__all__ = ["new_prompt_uuid", "normalize_timestamp_ms"]
