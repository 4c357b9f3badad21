"""Prompt lifecycle orchestration: validation, persistence, and campaign sync.

Updates:
  v0.1.2 - 2026-10-13 - Roll back prompt rows when the scheduler rejects a campaign.
  v0.1.1 - 2026-10-11 - Emit prompt_saved analytics with the actual create/update outcome.
  v0.1.0 - 2026-10-06 - Extract prompt CRUD APIs into mixin.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from models.prompt_model import Prompt

from ..analytics import mask_prompt_id
from ..exceptions import (
    PromptCorruptionError,
    PromptNotFoundError,
    PromptStorageError,
    PromptValidationError,
    SchedulerError,
)
from ..repository import StoreError, StoreNotFoundError
from ..utils import new_prompt_uuid

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from ..analytics import UsageTracker
    from ..repository import RelationalStore
    from ..scheduler import NotificationScheduler

logger = logging.getLogger("prompt_journal.prompts")

__all__ = ["PromptLifecycleMixin"]


class PromptLifecycleMixin:
    """Prompt CRUD with scheduler sync and analytics."""

    _store: RelationalStore
    _scheduler: NotificationScheduler
    _tracker: UsageTracker | None
    _write_lock: threading.RLock

    def read_all_prompts(self) -> list[Prompt]:
        """Return every stored prompt; an empty store yields an empty list."""
        try:
            return self._store.list_prompts()
        except StoreError as exc:
            raise PromptStorageError("Failed to read prompts") from exc
        except ValueError as exc:
            raise PromptCorruptionError(f"Stored prompt row is unreadable: {exc}") from exc

    def get_prompt(self, prompt_uuid: str) -> Prompt | None:
        """Return the prompt stored under *prompt_uuid*, or ``None`` when absent."""
        try:
            return self._store.get_prompt_row(prompt_uuid)
        except StoreError as exc:
            raise PromptStorageError(f"Failed to fetch prompt {prompt_uuid}") from exc
        except ValueError as exc:
            raise PromptCorruptionError(f"Prompt {prompt_uuid} is unreadable: {exc}") from exc

    def find_prompts_by_text(self, prompt_text: str) -> list[dict[str, str]]:
        """Return ``[{"uuid": ...}]`` for prompts whose text matches exactly."""
        try:
            uuids = self._store.find_prompt_uuids_by_text(prompt_text)
        except StoreError as exc:
            raise PromptStorageError("Failed to look up prompts by text") from exc
        return [{"uuid": value} for value in uuids]

    def save_prompt(self, entry: Prompt) -> bool:
        """Create or update *entry* and (re)schedule its reminder campaign.

        A missing uuid is generated and written back to *entry* once the save
        succeeds. When the scheduler fails the row is restored to its previous
        state and :class:`SchedulerError` is raised.
        """
        prompt_uuid = entry.uuid or new_prompt_uuid()
        prompt = replace(entry, uuid=prompt_uuid)
        try:
            prompt.validate()
        except ValueError as exc:
            raise PromptValidationError(str(exc)) from exc

        with self._write_lock:
            try:
                previous = self._store.get_prompt_record(prompt_uuid)
                created = self._store.upsert_prompt(prompt)
            except StoreError as exc:
                raise PromptStorageError(f"Failed to save prompt {prompt_uuid}") from exc
            try:
                self._scheduler.schedule_campaign(prompt)
            except Exception as exc:
                self._rollback_prompt(prompt_uuid, previous)
                raise SchedulerError(
                    f"Unable to schedule reminders for prompt {prompt_uuid}"
                ) from exc

        entry.uuid = prompt_uuid
        logger.info(
            "Prompt saved",
            extra={"prompt_uuid": prompt_uuid, "action_type": _action_type(created)},
        )
        self._track(
            "prompt_saved",
            {
                "identifier": mask_prompt_id(prompt_uuid),
                "action_type": _action_type(created),
                "response_type": prompt.response_type.value,
                "notification_config": json.dumps(
                    prompt.notification_snapshot(), sort_keys=True
                ),
            },
        )
        return True

    def delete_prompt(self, prompt_uuid: str) -> list[Prompt]:
        """Cancel reminders, delete *prompt_uuid*, and return the remaining prompts."""
        with self._write_lock:
            try:
                self._scheduler.cancel_campaign(prompt_uuid)
            except Exception as exc:
                raise SchedulerError(
                    f"Unable to cancel reminders for prompt {prompt_uuid}"
                ) from exc
            try:
                self._store.delete_prompt_row(prompt_uuid)
            except StoreNotFoundError as exc:
                raise PromptNotFoundError(f"Prompt {prompt_uuid} not found") from exc
            except StoreError as exc:
                raise PromptStorageError(f"Failed to delete prompt {prompt_uuid}") from exc
        logger.info("Prompt deleted", extra={"prompt_uuid": prompt_uuid})
        self._track("prompt_deleted", {"identifier": mask_prompt_id(prompt_uuid)})
        return self.read_all_prompts()

    def _rollback_prompt(self, prompt_uuid: str, previous: dict[str, Any] | None) -> None:
        try:
            self._store.restore_prompt_row(prompt_uuid, previous)
        except StoreError as exc:
            logger.error(
                "Unable to roll back prompt row after scheduler failure",
                extra={"prompt_uuid": prompt_uuid},
            )
            raise SchedulerError(
                f"Prompt {prompt_uuid} persisted but unscheduled; rollback failed"
            ) from exc
        logger.warning(
            "Prompt row rolled back after scheduler failure",
            extra={"prompt_uuid": prompt_uuid, "restored": previous is not None},
        )

    def _track(self, name: str, properties: dict[str, Any]) -> None:
        if self._tracker is not None:
            self._tracker.track_event(name, properties)


def _action_type(created: bool) -> str:
    return "create" if created else "update"
