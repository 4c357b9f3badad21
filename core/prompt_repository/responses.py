"""Response recording helpers for the prompt repository.

Updates:
  v0.1.1 - 2026-10-14 - Add duplicate check used by migration replay.
  v0.1.0 - 2026-10-06 - Normalise response timestamps to milliseconds before insert.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from ..exceptions import PromptStorageError, PromptValidationError
from ..repository import StoreError
from ..utils import normalize_timestamp_ms

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from models.prompt_model import PromptResponse

    from ..repository import RelationalStore

logger = logging.getLogger("prompt_journal.prompts")

__all__ = ["PromptResponseMixin"]


class PromptResponseMixin:
    """Append-only response APIs."""

    _store: RelationalStore
    _write_lock: threading.RLock

    def save_prompt_response(self, response: PromptResponse) -> bool:
        """Insert *response* with both timestamps normalised to milliseconds."""
        normalized = self._normalize_response(response)
        with self._write_lock:
            try:
                self._store.insert_response(normalized)
            except StoreError as exc:
                raise PromptStorageError(
                    f"Failed to save response for prompt {normalized.prompt_uuid}"
                ) from exc
        logger.debug(
            "Prompt response saved",
            extra={
                "prompt_uuid": normalized.prompt_uuid,
                "trigger_timestamp": normalized.trigger_timestamp,
            },
        )
        return True

    def get_prompt_responses(self, prompt_uuid: str) -> list[PromptResponse]:
        """Return responses recorded for *prompt_uuid* in insertion order."""
        try:
            return self._store.list_responses(prompt_uuid)
        except StoreError as exc:
            raise PromptStorageError(
                f"Failed to fetch responses for prompt {prompt_uuid}"
            ) from exc

    def has_prompt_response(self, response: PromptResponse) -> bool:
        """Return True when a response with the same prompt, trigger time and value exists."""
        normalized = self._normalize_response(response)
        try:
            return self._store.response_exists(
                normalized.prompt_uuid,
                normalized.trigger_timestamp,
                normalized.value,
            )
        except StoreError as exc:
            raise PromptStorageError(
                f"Failed to check responses for prompt {normalized.prompt_uuid}"
            ) from exc

    @staticmethod
    def _normalize_response(response: PromptResponse) -> PromptResponse:
        if not response.prompt_uuid:
            raise PromptValidationError("Response must reference a prompt uuid")
        return replace(
            response,
            value="" if response.value is None else str(response.value),
            trigger_timestamp=normalize_timestamp_ms(response.trigger_timestamp),
            response_timestamp=normalize_timestamp_ms(response.response_timestamp),
        )
