"""One-shot migration of the legacy key-value store into SQLite.

Each legacy prompt is an independent unit: it is matched against existing
prompts by exact text, created with the default reminder configuration when no
match exists, and its tagged legacy events are replayed as responses. A unit
that fails is logged and reported; the remaining units still run. The routine
is forward-only and safe to re-run because prompts are deduplicated by text.

Updates:
  v0.1.2 - 2026-10-15 - Optionally skip replayed responses that are already stored.
  v0.1.1 - 2026-10-12 - Report per-unit failures and announce with warning level.
  v0.1.0 - 2026-10-09 - Introduce migration coordinator and app host restart hook.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import ValidationError

from models.legacy_model import LegacyPrompt
from models.prompt_model import Prompt, PromptResponse, ResponseType, default_notification_config

from .exceptions import PromptCorruptionError, PromptJournalError
from .legacy import load_legacy_snapshot
from .notifications import NotificationLevel
from .utils import new_prompt_uuid, normalize_timestamp_ms

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from models.legacy_model import LegacySnapshot

    from .analytics import UsageTracker
    from .legacy import LegacyStore
    from .notifications import NotificationCenter
    from .prompt_repository import PromptRepository

logger = logging.getLogger("prompt_journal.migration")

SYNC_TITLE = "Prompts & Responses Synced"
SYNC_MESSAGE = "Force close & restart the app if it doesn't happen automatically."
MIGRATION_TASK_ID = "migration:legacy"


class AppHost(Protocol):
    """Host application hooks the migration needs."""

    def request_restart(self) -> None:
        """Ask the host to reload so migrated state is picked up."""
        ...


class LoggingAppHost:
    """App host that records restart requests instead of acting on them."""

    def __init__(self) -> None:
        self.restart_requests = 0

    def request_restart(self) -> None:
        self.restart_requests += 1
        logger.info("Application restart requested", extra={"requests": self.restart_requests})


@dataclass(slots=True)
class MigrationReport:
    """Outcome counters for a migration run."""

    prompts_processed: int = 0
    prompts_created: int = 0
    prompts_deduplicated: int = 0
    responses_replayed: int = 0
    responses_skipped: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
    completed: bool = False

    @property
    def succeeded(self) -> bool:
        """Return True when the run completed without unit failures."""
        return self.completed and not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompts_processed": self.prompts_processed,
            "prompts_created": self.prompts_created,
            "prompts_deduplicated": self.prompts_deduplicated,
            "responses_replayed": self.responses_replayed,
            "responses_skipped": self.responses_skipped,
            "failures": [
                {"prompt_text": text, "message": message} for text, message in self.failures
            ],
            "completed": self.completed,
        }


class MigrationCoordinator:
    """Replay legacy prompts and responses through :class:`PromptRepository`."""

    def __init__(
        self,
        repository: PromptRepository,
        legacy_store: LegacyStore,
        notifications: NotificationCenter,
        host: AppHost,
        tracker: UsageTracker | None = None,
        *,
        dedupe_responses: bool = False,
    ) -> None:
        self._repository = repository
        self._legacy_store = legacy_store
        self._notifications = notifications
        self._host = host
        self._tracker = tracker
        self._dedupe_responses = dedupe_responses

    def run_migration(self) -> MigrationReport:
        """Run every legacy unit, then announce, track, and request a restart.

        Returns an empty, not-completed report without side effects when the
        legacy store holds no prompts. A prompts blob that cannot be parsed
        raises :class:`PromptCorruptionError` before anything is written.
        """
        report = MigrationReport()
        snapshot = load_legacy_snapshot(self._legacy_store)
        if not snapshot.prompts:
            logger.info("No legacy prompts to migrate")
            return report

        logger.info(
            "Starting legacy migration",
            extra={
                "legacy_prompts": len(snapshot.prompts),
                "legacy_events": len(snapshot.events),
                "skipped_events": snapshot.skipped_events,
            },
        )
        with self._notifications.track_task(
            title="Legacy migration",
            start_message=f"Importing {len(snapshot.prompts)} legacy prompt(s)",
            success_message="Legacy prompts processed",
            task_id=MIGRATION_TASK_ID,
        ):
            for index, raw_prompt in enumerate(snapshot.prompts):
                report.prompts_processed += 1
                try:
                    self._migrate_unit(raw_prompt, snapshot, report)
                except (PromptJournalError, ValidationError) as exc:
                    label = _prompt_label(raw_prompt, index)
                    report.failures.append((label, str(exc)))
                    logger.error(
                        "Legacy prompt migration failed",
                        extra={"index": index, "prompt_text": label},
                        exc_info=True,
                    )
        report.completed = True

        level = NotificationLevel.WARNING if report.failures else NotificationLevel.SUCCESS
        self._notifications.announce(
            title=SYNC_TITLE,
            message=SYNC_MESSAGE,
            level=level,
            metadata=report.to_dict(),
        )
        if self._tracker is not None:
            self._tracker.track_event(
                "resyncOldPrompts",
                {"promptCount": len(snapshot.prompts)},
            )
        logger.info("Legacy migration finished", extra=report.to_dict())
        self._host.request_restart()
        return report

    def _migrate_unit(
        self,
        raw_prompt: Any,
        snapshot: LegacySnapshot,
        report: MigrationReport,
    ) -> None:
        legacy = LegacyPrompt.model_validate(raw_prompt)
        prompt_uuid = self._resolve_prompt(legacy, report)
        if snapshot.events_error is not None:
            raise PromptCorruptionError(
                f"Legacy responses unavailable: {snapshot.events_error}"
            )
        for event in snapshot.events_for(legacy):
            timestamp = normalize_timestamp_ms(event.start_timestamp)
            response = PromptResponse(
                prompt_uuid=prompt_uuid,
                value=event.event.value,
                trigger_timestamp=timestamp,
                response_timestamp=timestamp,
            )
            if self._dedupe_responses and self._repository.has_prompt_response(response):
                report.responses_skipped += 1
                continue
            self._repository.save_prompt_response(response)
            report.responses_replayed += 1

    def _resolve_prompt(self, legacy: LegacyPrompt, report: MigrationReport) -> str:
        """Return the uuid of the matching stored prompt, creating one if needed."""
        matches = self._repository.find_prompts_by_text(legacy.prompt_text)
        if matches:
            report.prompts_deduplicated += 1
            logger.debug(
                "Adopting existing prompt for legacy entry",
                extra={"prompt_uuid": matches[0]["uuid"]},
            )
            return matches[0]["uuid"]

        try:
            response_type = ResponseType.parse(legacy.response_type)
        except ValueError:
            logger.warning(
                "Unknown legacy response type; defaulting to text",
                extra={"response_type": legacy.response_type},
            )
            response_type = ResponseType.TEXT
        prompt = Prompt(
            prompt_text=legacy.prompt_text,
            response_type=response_type,
            uuid=legacy.uuid or new_prompt_uuid(),
            **default_notification_config(),
        )
        self._repository.save_prompt(prompt)
        report.prompts_created += 1
        return str(prompt.uuid)


def _prompt_label(raw_prompt: Any, index: int) -> str:
    if isinstance(raw_prompt, dict):
        text = raw_prompt.get("promptText")
        if isinstance(text, str) and text:
            return text
    return f"<legacy prompt #{index}>"


__all__ = [
    "MIGRATION_TASK_ID",
    "SYNC_MESSAGE",
    "SYNC_TITLE",
    "AppHost",
    "LoggingAppHost",
    "MigrationCoordinator",
    "MigrationReport",
]
